"""
FileSystemStorage – JSON-file storage for Paste Platform
========================================================

One pretty-printed JSON file per entry, named ``<id>.json``, inside a single
data directory. Implements `BaseStorage`, so it can be swapped for the
PostgreSQL backend without touching the entry service or routes.

Key Design Points
-----------------
- **Path safety**: only canonical ids (see `sanitize.py`) map to a path.
  Anything else is rejected before a path is built, so traversal sequences,
  separators and device names never reach `open()`.
- **Overwrite on save**: the file is rewritten in place. There is no
  write-then-rename step, so a crash mid-write can leave a truncated file;
  loading such a file logs the decode error and reports the entry as absent.
- **Errors stay here**: I/O and decode failures are logged and converted to
  None/False. Only `initialize()` raises (`StorageError`).

Example
-------
>>> storage = FileSystemStorage("data")
>>> storage.initialize()
>>> storage.save_entry(entry)
True
>>> storage.load_entry(entry.id).content
'hello'
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from ..models import Entry
from .base import BaseStorage, StorageError
from .sanitize import is_canonical_id

logger = logging.getLogger(__name__)


class FileSystemStorage(BaseStorage):
    """Filesystem implementation of the entry storage contract.

    Parameters
    ----------
    data_dir : str or Path
        Directory holding one ``<id>.json`` file per entry. Created by
        `initialize()` if missing.
    """

    name = "fs"

    def __init__(self, data_dir: Union[str, Path] = "data") -> None:
        self.data_dir = Path(data_dir)

    # ---- Internal helpers -------------------------------------------------

    def _entry_path(self, entry_id: str) -> Optional[Path]:
        """Return the file path for a canonical id, or None for anything else."""
        if not is_canonical_id(entry_id):
            return None
        return self.data_dir / f"{entry_id}.json"

    # ---- Contract methods -------------------------------------------------

    def initialize(self) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot prepare data directory {self.data_dir}") from exc
        logger.info("File system backend initialized at %s", self.data_dir)

    def load_entry(self, entry_id: str) -> Optional[Entry]:
        path = self._entry_path(entry_id)
        if path is None:
            return None
        try:
            with path.open("r", encoding="utf-8") as fh:
                record = json.load(fh)
            return Entry.from_record(record)
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError):
            logger.exception("Error loading entry %r from file system", entry_id)
            return None

    def save_entry(self, entry: Entry) -> bool:
        path = self._entry_path(entry.id)
        if path is None:
            logger.warning("Refusing to save entry with non-canonical id %r", entry.id)
            return False
        try:
            with path.open("w", encoding="utf-8") as fh:
                json.dump(entry.to_record(), fh, indent=2, ensure_ascii=False)
                fh.write("\n")
            return True
        except OSError:
            logger.exception("Error saving entry %r to file system", entry.id)
            return False

    def delete_entry(self, entry_id: str) -> bool:
        path = self._entry_path(entry_id)
        if path is None:
            return True
        try:
            path.unlink(missing_ok=True)
            return True
        except OSError:
            logger.exception("Error deleting entry %r from file system", entry_id)
            return False
