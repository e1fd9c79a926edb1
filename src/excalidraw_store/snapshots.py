"""Room snapshot history with bounded retention.

Snapshots are timestamped captures of a collaborative room. Each room keeps
at most ``max_snapshots`` ordinary snapshots (see room_settings); saving past
the limit evicts the oldest ones first.

One row per room may carry ``created_by = AUTOSAVE_CREATED_BY``. That row is
the autosave slot: it is overwritten in place, never evicted, and does not
count toward the retention limit.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from dataclasses import dataclass
from typing import Optional

from .clock import Clock, now
from .db import Database
from .errors import NotFoundError
from .room_settings import RoomSettings, fetch_room_settings

logger = logging.getLogger(__name__)

AUTOSAVE_CREATED_BY = "__autosave__"
AUTOSAVE_NAME = "Latest autosave snapshot"
AUTOSAVE_DESCRIPTION = "Automatically saved"

# Rows that take part in retention accounting
_HISTORY_FILTER = "room_id = ? AND (created_by IS NULL OR created_by != ?)"


@dataclass
class SnapshotSummary:
    """Snapshot metadata for listings (no payload)."""
    id: str
    room_id: str
    name: Optional[str] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    created_by: Optional[str] = None
    created_at: int = 0

    @property
    def is_autosave(self) -> bool:
        return self.created_by == AUTOSAVE_CREATED_BY

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "room_id": self.room_id,
            "name": self.name,
            "description": self.description,
            "thumbnail": self.thumbnail,
            "created_by": self.created_by,
            "created_at": self.created_at,
            "is_autosave": self.is_autosave,
        }


@dataclass
class Snapshot(SnapshotSummary):
    """A full snapshot including its serialized room state."""
    data: str = ""

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["data"] = self.data
        return d


class SnapshotManager:
    """Manages room snapshots and the per-room autosave slot."""

    def __init__(self, db: Database, clock: Optional[Clock] = None):
        """Initialize the manager.

        Args:
            db: Database handle
            clock: Optional epoch-seconds source, defaults to wall time
        """
        self.db = db
        self.clock = clock or now

    def save(
        self,
        room_id: str,
        data: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> str:
        """Append a snapshot to a room's history.

        The limit check, eviction of the oldest snapshots and the insert run
        in a single transaction; if the insert fails nothing is evicted.

        Args:
            room_id: Room key
            data: Serialized room state
            name: Optional display name
            description: Optional description
            thumbnail: Optional encoded thumbnail image
            created_by: Optional author tag

        Returns:
            Created snapshot ID
        """
        if created_by == AUTOSAVE_CREATED_BY:
            return self.save_autosave(
                room_id, data, name=name, description=description, thumbnail=thumbnail
            )

        snapshot_id = str(uuid.uuid4())

        with self.db.transaction() as conn:
            settings = fetch_room_settings(conn, room_id) or RoomSettings.default(room_id)
            self._enforce_limit(conn, room_id, settings.max_snapshots)
            conn.execute(
                """
                INSERT INTO snapshots (
                    id, room_id, name, description, thumbnail,
                    created_by, created_at, data
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    snapshot_id,
                    room_id,
                    name,
                    description,
                    thumbnail,
                    created_by,
                    self.clock(),
                    data,
                ),
            )

        logger.debug("Saved snapshot %s for room %s", snapshot_id, room_id)
        return snapshot_id

    def _enforce_limit(self, conn: sqlite3.Connection, room_id: str, max_snapshots: int) -> None:
        """Evict oldest history rows until one more fits under the limit."""
        count = conn.execute(
            f"SELECT COUNT(*) FROM snapshots WHERE {_HISTORY_FILTER}",
            (room_id, AUTOSAVE_CREATED_BY),
        ).fetchone()[0]

        while count >= max(max_snapshots, 1):
            oldest = conn.execute(
                f"""
                SELECT id FROM snapshots
                WHERE {_HISTORY_FILTER}
                ORDER BY created_at ASC, rowid ASC
                LIMIT 1
                """,
                (room_id, AUTOSAVE_CREATED_BY),
            ).fetchone()
            conn.execute("DELETE FROM snapshots WHERE id = ?", (oldest["id"],))
            logger.info("Evicted snapshot %s from room %s", oldest["id"], room_id)
            count -= 1

    def save_autosave(
        self,
        room_id: str,
        data: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail: Optional[str] = None,
    ) -> str:
        """Write the room's autosave slot, creating it on first use.

        Missing name, description and thumbnail fall back to the autosave
        defaults. Retention is not applied.

        Returns:
            ID of the autosave snapshot (stable across calls for a room)
        """
        name = name or AUTOSAVE_NAME
        description = description or AUTOSAVE_DESCRIPTION
        thumbnail = thumbnail or ""
        timestamp = self.clock()

        with self.db.transaction() as conn:
            existing = conn.execute(
                """
                SELECT id FROM snapshots
                WHERE room_id = ? AND created_by = ?
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (room_id, AUTOSAVE_CREATED_BY),
            ).fetchone()

            if existing:
                snapshot_id = existing["id"]
                conn.execute(
                    """
                    UPDATE snapshots
                    SET name = ?, description = ?, thumbnail = ?,
                        data = ?, created_at = ?
                    WHERE id = ?
                    """,
                    (name, description, thumbnail, data, timestamp, snapshot_id),
                )
            else:
                snapshot_id = str(uuid.uuid4())
                conn.execute(
                    """
                    INSERT INTO snapshots (
                        id, room_id, name, description, thumbnail,
                        created_by, created_at, data
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        snapshot_id,
                        room_id,
                        name,
                        description,
                        thumbnail,
                        AUTOSAVE_CREATED_BY,
                        timestamp,
                        data,
                    ),
                )

        logger.debug("Autosaved room %s into %s", room_id, snapshot_id)
        return snapshot_id

    def list(self, room_id: str) -> list[SnapshotSummary]:
        """Snapshots of a room, newest first, without payloads."""
        with self.db.connection() as conn:
            rows = conn.execute(
                """
                SELECT id, room_id, name, description, thumbnail, created_by, created_at
                FROM snapshots
                WHERE room_id = ?
                ORDER BY created_at DESC, rowid DESC
                """,
                (room_id,),
            ).fetchall()

        return [
            SnapshotSummary(
                id=row["id"],
                room_id=row["room_id"],
                name=row["name"],
                description=row["description"],
                thumbnail=row["thumbnail"],
                created_by=row["created_by"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def load(self, snapshot_id: str) -> Snapshot:
        """Get a full snapshot by ID.

        Raises:
            NotFoundError: If no snapshot has this ID
        """
        with self.db.connection() as conn:
            row = conn.execute(
                "SELECT * FROM snapshots WHERE id = ?",
                (snapshot_id,),
            ).fetchone()

        if not row:
            raise NotFoundError(f"Snapshot not found: {snapshot_id}")
        return _row_to_snapshot(row)

    def load_latest(self, room_id: str) -> Snapshot:
        """Get the state a room should reopen with.

        The autosave slot wins when present; otherwise the newest snapshot.

        Raises:
            NotFoundError: If the room has no snapshots
        """
        with self.db.connection() as conn:
            row = conn.execute(
                """
                SELECT * FROM snapshots
                WHERE room_id = ?
                ORDER BY (created_by IS NOT NULL AND created_by = ?) DESC,
                         created_at DESC, rowid DESC
                LIMIT 1
                """,
                (room_id, AUTOSAVE_CREATED_BY),
            ).fetchone()

        if not row:
            raise NotFoundError(f"No snapshots for room: {room_id}")
        return _row_to_snapshot(row)

    def delete(self, snapshot_id: str) -> None:
        """Delete a snapshot if present."""
        with self.db.connection() as conn:
            conn.execute("DELETE FROM snapshots WHERE id = ?", (snapshot_id,))

    def update_metadata(
        self,
        snapshot_id: str,
        name: Optional[str],
        description: Optional[str],
    ) -> None:
        """Overwrite name and description only. No-op for unknown IDs."""
        with self.db.connection() as conn:
            conn.execute(
                "UPDATE snapshots SET name = ?, description = ? WHERE id = ?",
                (name, description, snapshot_id),
            )

    def count(self, room_id: str, include_autosave: bool = False) -> int:
        """Number of snapshots stored for a room."""
        with self.db.connection() as conn:
            if include_autosave:
                row = conn.execute(
                    "SELECT COUNT(*) FROM snapshots WHERE room_id = ?", (room_id,)
                ).fetchone()
            else:
                row = conn.execute(
                    f"SELECT COUNT(*) FROM snapshots WHERE {_HISTORY_FILTER}",
                    (room_id, AUTOSAVE_CREATED_BY),
                ).fetchone()
            return row[0]


def _row_to_snapshot(row) -> Snapshot:
    return Snapshot(
        id=row["id"],
        room_id=row["room_id"],
        name=row["name"],
        description=row["description"],
        thumbnail=row["thumbnail"],
        created_by=row["created_by"],
        created_at=row["created_at"],
        data=row["data"],
    )
