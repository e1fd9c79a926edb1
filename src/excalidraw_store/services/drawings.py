"""Drawing operations for the command surface."""

from __future__ import annotations

from ..errors import StoreError
from .store import Store, error_response


def save_drawing(store: Store, name: str, data: str) -> dict:
    try:
        drawing_id = store.drawings.save(name, data)
    except StoreError as e:
        return error_response(e)
    return {"success": True, "id": drawing_id}


def update_drawing(store: Store, id: str, name: str, data: str) -> dict:
    try:
        store.drawings.update(id, name, data)
    except StoreError as e:
        return error_response(e)
    return {"success": True}


def load_drawing(store: Store, id: str) -> dict:
    try:
        drawing = store.drawings.load(id)
    except StoreError as e:
        return error_response(e)
    return {"success": True, "drawing": drawing.to_dict()}


def list_drawings(store: Store) -> dict:
    try:
        drawings = store.drawings.list()
    except StoreError as e:
        return error_response(e)
    return {"success": True, "drawings": [d.to_dict() for d in drawings]}


def delete_drawing(store: Store, id: str) -> dict:
    try:
        store.drawings.delete(id)
    except StoreError as e:
        return error_response(e)
    return {"success": True}
