"""Composition root: one database handle shared by all managers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..clock import Clock
from ..config import StoreConfig
from ..db import Database
from ..drawings import DrawingManager
from ..errors import StoreError
from ..room_settings import RoomSettingsManager
from ..snapshots import SnapshotManager


@dataclass
class Store:
    """Managers bound to a single Database."""

    db: Database
    drawings: DrawingManager
    snapshots: SnapshotManager
    settings: RoomSettingsManager

    def close(self) -> None:
        self.db.close()


def open_store(
    target: Union[StoreConfig, Path, str],
    clock: Optional[Clock] = None,
) -> Store:
    """Open the database at a config's path (or a raw path) and wire the managers."""
    db_path = target.db_path if isinstance(target, StoreConfig) else target
    db = Database(db_path)
    return Store(
        db=db,
        drawings=DrawingManager(db, clock=clock),
        snapshots=SnapshotManager(db, clock=clock),
        settings=RoomSettingsManager(db),
    )


def error_response(error: StoreError) -> dict:
    """Flatten a store error for the caller."""
    return {"error": error.code, "message": str(error)}


def store_info(store: Store) -> dict:
    """Database location, tables present and number of drawings."""
    try:
        tables = store.db.table_names()
        drawing_count = store.drawings.count()
    except StoreError as e:
        return error_response(e)
    return {
        "success": True,
        "db_path": str(store.db.db_path),
        "tables": tables,
        "drawing_count": drawing_count,
    }
