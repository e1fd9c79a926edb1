"""Database module for excalidraw-store local storage.

This module provides SQLite-based persistence for drawings, room snapshots
and per-room settings.

Usage:
    from excalidraw_store.db import Database

    db = Database(Path("~/.excalidraw/drawings.db").expanduser())

    with db.transaction() as conn:
        conn.execute("INSERT INTO drawings ...")
"""

from .connection import Database
from .schema import TABLES

__all__ = ["Database", "TABLES"]
