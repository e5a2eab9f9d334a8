"""
Storage module for Paste Platform (in-memory implementation).

Responsibilities:
    - Keep entries in a process-local dict keyed by id
    - Satisfy the BaseStorage contract exactly like the persistent backends
      (canonical ids only, upsert on save, absent delete is fine)

Design:
    - Reference implementation used by unit/integration tests and the
      "memory" backend mode. Records are stored in the persisted layout and
      rebuilt on load, so callers never share mutable state with the store.
    - Nothing survives a restart.
"""

from typing import Any, Dict, Optional

from ..models import Entry
from .base import BaseStorage
from .sanitize import is_canonical_id


class Storage(BaseStorage):
    name = "memory"

    def __init__(self):
        """
        Initialize empty storage dictionary.

        Internal schema:
            self.entries = {
                entry_id: {"id", "content", "editCode", "createdAt", "updatedAt"}
            }
        """
        self.entries: Dict[str, Dict[str, Any]] = {}

    def initialize(self) -> None:
        return None

    def load_entry(self, entry_id: str) -> Optional[Entry]:
        if not is_canonical_id(entry_id):
            return None
        record = self.entries.get(entry_id)
        return Entry.from_record(record) if record else None

    def save_entry(self, entry: Entry) -> bool:
        """Reject non-canonical ids, otherwise upsert a copy of the record."""
        if not is_canonical_id(entry.id):
            return False
        self.entries[entry.id] = entry.to_record()
        return True

    def delete_entry(self, entry_id: str) -> bool:
        if not is_canonical_id(entry_id):
            return True
        self.entries.pop(entry_id, None)
        return True
