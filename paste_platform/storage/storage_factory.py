"""
Storage factory – switch storage backend from config (lazy env version)
======================================================================

Centralizes selection of the storage backend (filesystem, PostgreSQL,
in-memory) so the rest of the app stays ignorant of where entries live.
The backend is chosen once at startup and injected into the entry service
and the HTTP layer.

- Reads environment **at call time** to avoid stale values in tests.
- Imports the DB backend **only if** the selected backend is PostgreSQL.
- Fails fast when PostgreSQL is selected without a DSN.

Environment variables
---------------------
- PASTE_STORAGE_BACKEND: "fs" (default), "pg"/"postgres" or "memory"
- PASTE_DATA_DIR:        data directory if backend=="fs" (default "data")
- PASTE_DB_DSN:          DSN string if backend=="pg" (falls back to DATABASE_URL)
- PASTE_DB_POOL_MIN/MAX: pool bounds if backend=="pg"
"""

import logging
import os
from typing import Optional

from paste_platform.storage.base import BaseStorage
from paste_platform.storage.fs_storage import FileSystemStorage
from paste_platform.storage.storage import Storage

logger = logging.getLogger(__name__)

_PG_NAMES = {"pg", "postgres", "postgresql"}
_FS_NAMES = {"fs", "file", "filesystem"}


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseStorage:
    """
    Return a storage backend based on configuration.

    Parameters
    ----------
    backend : str, optional
        "fs", "pg"/"postgres" or "memory". If omitted, reads PASTE_STORAGE_BACKEND.
    kwargs : dict
        Extra args for the backend. fs: data_dir="..."; pg: dsn="...", pool=...

    Returns
    -------
    BaseStorage
        An uninitialized backend; call `initialize()` before use.

    Raises
    ------
    ValueError
        Unknown backend name, or PostgreSQL selected without a DSN.
    """
    be = (backend or os.getenv("PASTE_STORAGE_BACKEND", "fs")).strip().lower()
    logger.info("Selected storage backend: %r", be)

    if be in _FS_NAMES:
        data_dir = kwargs.get("data_dir") or os.getenv("PASTE_DATA_DIR", "data")
        return FileSystemStorage(data_dir=data_dir)

    if be == "memory":
        return Storage()

    if be in _PG_NAMES:
        dsn = kwargs.get("dsn") or os.getenv("PASTE_DB_DSN", "") or os.getenv("DATABASE_URL", "")
        if not dsn:
            raise ValueError("DB_DSN is required for postgres backend (env PASTE_DB_DSN or DATABASE_URL)")
        # Local import to avoid hard dependency when not using postgres
        from paste_platform.storage.db_storage import DBStorage

        min_size = max(1, _env_int("PASTE_DB_POOL_MIN", 1))
        max_size = max(min_size, _env_int("PASTE_DB_POOL_MAX", 10))
        return DBStorage(dsn=dsn, pool=kwargs.get("pool"), min_size=min_size, max_size=max_size)

    raise ValueError(f"Unknown storage backend: {be!r}")
