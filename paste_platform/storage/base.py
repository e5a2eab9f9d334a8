"""
Base storage interface for Paste Platform.

Purpose:
    Define a small, stable contract that every storage backend
    (filesystem, PostgreSQL, in-memory) implements, so the entry service
    and the HTTP layer never know where entries live.

Contract:
    - initialize(): idempotent; raises StorageError if the medium cannot be
      prepared. This is the only call allowed to raise.
    - load_entry(id): Entry or None. I/O failures are logged and reported
      as None, so "missing" and "backend error" look the same to callers.
    - save_entry(entry): upsert by id; True/False instead of raising.
    - delete_entry(id): True when the id is gone afterwards (absent is fine).
    - close(): release shared resources on shutdown.

Testing & Coverage:
    Abstract methods are not executed directly in tests and are marked
    `# pragma: no cover`.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import Entry


class StorageError(RuntimeError):
    """Opaque backend failure. Raised only when a backend cannot be initialized."""


class BaseStorage(ABC):
    """Abstract base class for storage backends."""

    name = "base"

    @abstractmethod  # pragma: no cover
    def initialize(self) -> None:
        """
        Prepare the backend for use (directories, tables, pools).

        Raises:
            StorageError: If the medium cannot be prepared.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def load_entry(self, entry_id: str) -> Optional[Entry]:
        """
        Retrieve an entry by id.

        Returns:
            Optional[Entry]: The entry, or None if absent or unreadable.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def save_entry(self, entry: Entry) -> bool:
        """
        Insert or replace the entry stored under `entry.id`.

        Returns:
            bool: True on success, False on failure.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def delete_entry(self, entry_id: str) -> bool:
        """
        Remove the entry if present.

        Returns:
            bool: False only if the backend failed to remove it.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release resources held by the backend. No-op by default."""
