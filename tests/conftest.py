"""
Global pytest fixtures for the Paste Platform test suite.

Responsibilities:
    - Provide a fresh FastAPI TestClient via the app factory, backed by a
      filesystem store under tmp_path (lifespan runs, so initialize() is called)
    - Provide isolated in-memory and filesystem storage fixtures
    - Provide an EntryManager wired to the memory storage with a seeded random
      source and a stepping clock, so ids and timestamps are reproducible
"""

import random
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from main import create_app
from paste_platform.manager.entry_manager import EntryManager
from paste_platform.manager.identifiers import IdentifierGenerator
from paste_platform.storage.fs_storage import FileSystemStorage
from paste_platform.storage.storage import Storage


class StepClock:
    """Aware UTC clock that advances one second per call."""

    def __init__(self, start=None):
        self.now = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def identifiers() -> IdentifierGenerator:
    """Deterministic id/edit code source."""
    return IdentifierGenerator(rng=random.Random(1234))


@pytest.fixture
def storage() -> Storage:
    """Fresh in-memory Storage backend."""
    return Storage()


@pytest.fixture
def fs_storage(tmp_path) -> FileSystemStorage:
    """Initialized filesystem backend rooted in a temp directory."""
    backend = FileSystemStorage(tmp_path / "data")
    backend.initialize()
    return backend


@pytest.fixture
def manager(storage, identifiers, clock) -> EntryManager:
    """EntryManager wired to the in-memory storage fixture."""
    return EntryManager(storage=storage, identifiers=identifiers, clock=clock)


@pytest.fixture
def client(tmp_path):
    """
    Fresh TestClient with a new app instance on a temp filesystem store.

    Used as a context manager so the lifespan (initialize/close) runs.
    """
    app = create_app(
        storage=FileSystemStorage(tmp_path / "data"),
        public_dir=str(tmp_path / "public"),
    )
    with TestClient(app) as test_client:
        yield test_client
