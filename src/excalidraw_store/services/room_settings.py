"""Room settings operations for the command surface."""

from __future__ import annotations

from ..errors import InvalidInputError, StoreError
from .store import Store, error_response

SQLITE_MAX_INTEGER = 2**63 - 1


def _require_positive(field: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 < value <= SQLITE_MAX_INTEGER:
        raise InvalidInputError(f"{field} must be a positive integer up to {SQLITE_MAX_INTEGER}, got {value!r}")


def get_room_settings(store: Store, room_id: str) -> dict:
    try:
        settings = store.settings.get(room_id)
    except StoreError as e:
        return error_response(e)
    return {"success": True, "settings": settings.to_dict()}


def update_room_settings(
    store: Store,
    room_id: str,
    max_snapshots: int,
    auto_save_interval: int,
) -> dict:
    try:
        _require_positive("max_snapshots", max_snapshots)
        _require_positive("auto_save_interval", auto_save_interval)
        store.settings.upsert(room_id, max_snapshots, auto_save_interval)
    except StoreError as e:
        return error_response(e)
    return {"success": True}
