import os
from collections import deque

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from prekey import MasterSecret, MemoryRecordStore, JsonRecordStore
from prekey.errors import UnavailableSecureRandomError
from storage import SqlRecordStore, init_db


class ScriptedRandom:
    """Hands out queued byte strings first, then falls back to os.urandom."""

    def __init__(self, *chunks: bytes):
        self.queue = deque(chunks)
        self.requests = []

    def next_bytes(self, n: int) -> bytes:
        self.requests.append(n)
        if self.queue:
            chunk = self.queue.popleft()
            assert len(chunk) == n, f"scripted chunk of {len(chunk)} bytes, {n} requested"
            return chunk
        return os.urandom(n)


class NoRandom:
    def next_bytes(self, n: int) -> bytes:
        raise UnavailableSecureRandomError("entropy source missing")


class RecordingDiagnostics:
    def __init__(self):
        self.events = []

    def event(self, name, **fields):
        self.events.append((name, fields))

    def names(self):
        return [name for name, _ in self.events]


class BrokenDiagnostics:
    def event(self, name, **fields):
        raise RuntimeError("log sink is down")


@pytest.fixture
def store():
    return MemoryRecordStore()


@pytest.fixture
def master_secret():
    return MasterSecret(bytes(range(32)))


@pytest.fixture
def diagnostics():
    return RecordingDiagnostics()


@pytest.fixture
def sql_engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture(params=["memory", "json", "sql"])
def any_store(request, tmp_path, sql_engine):
    """Each reference record store in turn."""
    if request.param == "memory":
        return MemoryRecordStore()
    if request.param == "json":
        return JsonRecordStore(str(tmp_path / "keystore.json"))
    return SqlRecordStore(sql_engine)
