"""Per-room configuration: snapshot retention limit and autosave interval."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Optional

from .db import Database

logger = logging.getLogger(__name__)

DEFAULT_MAX_SNAPSHOTS = 10
DEFAULT_AUTO_SAVE_INTERVAL = 60  # seconds


@dataclass
class RoomSettings:
    """Settings for one room."""
    room_id: str
    max_snapshots: int = DEFAULT_MAX_SNAPSHOTS
    auto_save_interval: int = DEFAULT_AUTO_SAVE_INTERVAL

    @classmethod
    def default(cls, room_id: str) -> "RoomSettings":
        return cls(room_id=room_id)

    def to_dict(self) -> dict:
        return {
            "room_id": self.room_id,
            "max_snapshots": self.max_snapshots,
            "auto_save_interval": self.auto_save_interval,
        }


def fetch_room_settings(conn: sqlite3.Connection, room_id: str) -> Optional[RoomSettings]:
    """Read a room's settings row on an already-held connection."""
    row = conn.execute(
        """
        SELECT room_id, max_snapshots, auto_save_interval
        FROM room_settings WHERE room_id = ?
        """,
        (room_id,),
    ).fetchone()
    if not row:
        return None
    return RoomSettings(
        room_id=row["room_id"],
        max_snapshots=row["max_snapshots"],
        auto_save_interval=row["auto_save_interval"],
    )


class RoomSettingsManager:
    """Manages room settings rows."""

    def __init__(self, db: Database):
        self.db = db

    def find(self, room_id: str) -> Optional[RoomSettings]:
        """Get the persisted settings for a room.

        Returns:
            RoomSettings, or None if the room was never configured
        """
        with self.db.connection() as conn:
            return fetch_room_settings(conn, room_id)

    def get(self, room_id: str) -> RoomSettings:
        """Get settings for a room, falling back to the defaults.

        The default is returned as-is and never written back.
        """
        return self.find(room_id) or RoomSettings.default(room_id)

    def upsert(self, room_id: str, max_snapshots: int, auto_save_interval: int) -> None:
        """Insert or overwrite settings for a room.

        Values are stored as given; callers reject non-positive numbers.
        """
        with self.db.connection() as conn:
            conn.execute(
                """
                INSERT INTO room_settings (room_id, max_snapshots, auto_save_interval)
                VALUES (?, ?, ?)
                ON CONFLICT(room_id) DO UPDATE SET
                    max_snapshots = excluded.max_snapshots,
                    auto_save_interval = excluded.auto_save_interval
                """,
                (room_id, max_snapshots, auto_save_interval),
            )
        logger.debug(
            "Room %s settings: max_snapshots=%d auto_save_interval=%d",
            room_id, max_snapshots, auto_save_interval,
        )
