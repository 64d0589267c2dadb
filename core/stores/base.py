# =============================================================================
# core/stores/base.py - Storage Collaborator Interfaces
# =============================================================================
# Abstract interfaces for the two external stores the business logic talks to:
# - RecordStore: relational rows (one table), including array-column mutation
# - BlobStore: object storage for raw image bytes
#
# Adapters translate SDK failures into the StoreError family below, so the
# services never inspect SDK error messages.
# =============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


# =============================================================================
# Store Errors
# =============================================================================

class StoreError(Exception):
    """
    Base error raised by store adapters.

    `code` is a machine-readable tag set by the adapter; `details` carries
    debugging context that is logged but never returned to API callers.
    """

    def __init__(
        self,
        message: str,
        code: str = "STORE_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class RecordStoreError(StoreError):
    """A record store operation failed."""


class RecordNotFoundError(RecordStoreError):
    """The row targeted by a write does not exist."""

    def __init__(self, record_id: str):
        super().__init__(
            message=f"Record not found: {record_id}",
            code="RECORD_NOT_FOUND",
            details={"record_id": record_id},
        )


class BlobStoreError(StoreError):
    """A blob store operation failed."""


# =============================================================================
# Interfaces
# =============================================================================

class RecordStore(ABC):
    """
    Rows of a single table, addressed by their `id` column.

    Rows are plain dicts as returned by the database.
    """

    @abstractmethod
    def insert(self, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it with generated columns filled in."""
        pass

    @abstractmethod
    def get_by_id(self, record_id: str) -> dict[str, Any] | None:
        """Fetch a row, or None if it doesn't exist."""
        pass

    @abstractmethod
    def list_all(self) -> list[dict[str, Any]]:
        """Fetch all rows, newest first."""
        pass

    @abstractmethod
    def update(self, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Update the given columns of a row.

        Raises:
            RecordNotFoundError: If the row doesn't exist
        """
        pass

    @abstractmethod
    def delete(self, record_id: str) -> None:
        """Delete a row. Deleting a missing row is not an error."""
        pass

    @abstractmethod
    def append_to_array_field(self, record_id: str, field: str, value: str) -> dict[str, Any]:
        """
        Append `value` to an array column unless it is already present.

        Implementations use an atomic database-side primitive when one is
        available, otherwise a read-modify-write on the current row.

        Raises:
            RecordNotFoundError: If the row doesn't exist
        """
        pass

    @abstractmethod
    def remove_from_array_field(self, record_id: str, field: str, value: str) -> dict[str, Any]:
        """
        Remove every occurrence of `value` from an array column.

        Raises:
            RecordNotFoundError: If the row doesn't exist
        """
        pass


class BlobStore(ABC):
    """Object storage keyed by path."""

    @abstractmethod
    def put(self, path: str, content: bytes, content_type: str) -> dict[str, str]:
        """Write bytes at `path`. Returns {"path": path}."""
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete the object at `path`."""
        pass

    @abstractmethod
    def get_public_url(self, path: str) -> str:
        """Public URL for the object at `path`."""
        pass
