"""SQL-backed record store for prekey records."""

from .db import engine, SessionLocal, init_db
from .store import SqlRecordStore

__all__ = [
    "engine",
    "SessionLocal",
    "init_db",
    "SqlRecordStore",
]
