"""Standalone drawing storage.

Drawings are named documents that live outside any room. Each one holds an
opaque serialized scene payload that is stored and returned untouched.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from .clock import Clock, now
from .db import Database
from .errors import NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class Drawing:
    """A saved drawing."""
    id: str
    name: str
    data: str
    created_at: int  # epoch seconds
    updated_at: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "data": self.data,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class DrawingManager:
    """Manages standalone drawings."""

    def __init__(self, db: Database, clock: Optional[Clock] = None):
        """Initialize the manager.

        Args:
            db: Database handle
            clock: Optional epoch-seconds source, defaults to wall time
        """
        self.db = db
        self.clock = clock or now

    def save(self, name: str, data: str) -> str:
        """Insert a new drawing.

        Args:
            name: Display name
            data: Serialized scene payload

        Returns:
            Created drawing ID
        """
        drawing_id = str(uuid.uuid4())
        timestamp = self.clock()

        with self.db.connection() as conn:
            conn.execute(
                """
                INSERT INTO drawings (id, name, data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (drawing_id, name, data, timestamp, timestamp),
            )

        logger.debug("Saved drawing %s", drawing_id)
        return drawing_id

    def update(self, drawing_id: str, name: str, data: str) -> None:
        """Overwrite name and data of a drawing.

        Does nothing when the ID is unknown.
        """
        with self.db.connection() as conn:
            conn.execute(
                """
                UPDATE drawings
                SET name = ?, data = ?, updated_at = ?
                WHERE id = ?
                """,
                (name, data, self.clock(), drawing_id),
            )

    def load(self, drawing_id: str) -> Drawing:
        """Get a drawing by ID.

        Raises:
            NotFoundError: If no drawing has this ID
        """
        with self.db.connection() as conn:
            row = conn.execute(
                """
                SELECT id, name, data, created_at, updated_at
                FROM drawings WHERE id = ?
                """,
                (drawing_id,),
            ).fetchone()

        if not row:
            raise NotFoundError(f"Drawing not found: {drawing_id}")
        return _row_to_drawing(row)

    def list(self) -> list[Drawing]:
        """All drawings, most recently updated first."""
        with self.db.connection() as conn:
            rows = conn.execute(
                """
                SELECT id, name, data, created_at, updated_at
                FROM drawings
                ORDER BY updated_at DESC, rowid DESC
                """
            ).fetchall()
        return [_row_to_drawing(row) for row in rows]

    def delete(self, drawing_id: str) -> None:
        """Delete a drawing if present."""
        with self.db.connection() as conn:
            conn.execute("DELETE FROM drawings WHERE id = ?", (drawing_id,))

    def count(self) -> int:
        """Number of stored drawings."""
        with self.db.connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM drawings").fetchone()[0]


def _row_to_drawing(row) -> Drawing:
    return Drawing(
        id=row["id"],
        name=row["name"],
        data=row["data"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
