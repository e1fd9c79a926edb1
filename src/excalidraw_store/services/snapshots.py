"""Snapshot operations for the command surface."""

from __future__ import annotations

from typing import Optional

from ..errors import StoreError
from .store import Store, error_response


def save_snapshot(
    store: Store,
    room_id: str,
    data: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    thumbnail: Optional[str] = None,
    created_by: Optional[str] = None,
) -> dict:
    try:
        snapshot_id = store.snapshots.save(
            room_id,
            data,
            name=name,
            description=description,
            thumbnail=thumbnail,
            created_by=created_by,
        )
    except StoreError as e:
        return error_response(e)
    return {"success": True, "id": snapshot_id}


def list_snapshots(store: Store, room_id: str) -> dict:
    try:
        snapshots = store.snapshots.list(room_id)
    except StoreError as e:
        return error_response(e)
    return {"success": True, "snapshots": [s.to_dict() for s in snapshots]}


def load_snapshot(store: Store, id: str) -> dict:
    try:
        snapshot = store.snapshots.load(id)
    except StoreError as e:
        return error_response(e)
    return {"success": True, "snapshot": snapshot.to_dict()}


def delete_snapshot(store: Store, id: str) -> dict:
    try:
        store.snapshots.delete(id)
    except StoreError as e:
        return error_response(e)
    return {"success": True}


def update_snapshot_metadata(
    store: Store,
    id: str,
    name: Optional[str],
    description: Optional[str],
) -> dict:
    try:
        store.snapshots.update_metadata(id, name, description)
    except StoreError as e:
        return error_response(e)
    return {"success": True}


def save_autosave_snapshot(
    store: Store,
    room_id: str,
    data: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    thumbnail: Optional[str] = None,
) -> dict:
    try:
        snapshot_id = store.snapshots.save_autosave(
            room_id,
            data,
            name=name,
            description=description,
            thumbnail=thumbnail,
        )
    except StoreError as e:
        return error_response(e)
    return {"success": True, "id": snapshot_id}


def load_latest_snapshot(store: Store, room_id: str) -> dict:
    try:
        snapshot = store.snapshots.load_latest(room_id)
    except StoreError as e:
        return error_response(e)
    return {"success": True, "snapshot": snapshot.to_dict()}


def count_snapshots(store: Store, room_id: str) -> dict:
    try:
        total = store.snapshots.count(room_id, include_autosave=True)
        history = store.snapshots.count(room_id)
        settings = store.settings.get(room_id)
    except StoreError as e:
        return error_response(e)
    return {
        "success": True,
        "room_id": room_id,
        "count": total,
        "history_count": history,
        "max_snapshots": settings.max_snapshots,
    }
