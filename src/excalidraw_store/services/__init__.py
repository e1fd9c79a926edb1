"""Shared command surface for the CLI and front-end bridges."""

from .store import Store, open_store, error_response, store_info
from .drawings import (
    save_drawing,
    update_drawing,
    load_drawing,
    list_drawings,
    delete_drawing,
)
from .snapshots import (
    save_snapshot,
    list_snapshots,
    load_snapshot,
    delete_snapshot,
    update_snapshot_metadata,
    save_autosave_snapshot,
    load_latest_snapshot,
    count_snapshots,
)
from .room_settings import get_room_settings, update_room_settings

__all__ = [
    "Store",
    "open_store",
    "error_response",
    "store_info",
    "save_drawing",
    "update_drawing",
    "load_drawing",
    "list_drawings",
    "delete_drawing",
    "save_snapshot",
    "list_snapshots",
    "load_snapshot",
    "delete_snapshot",
    "update_snapshot_metadata",
    "save_autosave_snapshot",
    "load_latest_snapshot",
    "count_snapshots",
    "get_room_settings",
    "update_room_settings",
]
