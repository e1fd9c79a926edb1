"""excalidraw-store exception hierarchy."""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for all excalidraw-store errors."""

    code = "store_error"


class NotFoundError(StoreError):
    """Raised when a requested id has no matching row."""

    code = "not_found"


class StorageError(StoreError):
    """Raised when the underlying SQLite store fails."""

    code = "storage_error"


class InvalidInputError(StoreError):
    """Raised when caller-supplied values are rejected before reaching the store."""

    code = "invalid_input"
