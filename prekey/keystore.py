import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .config import get_settings
from .errors import RecordNotFoundError, StoreError
from .records import RECORD_TYPES, Record, RecordKind, check_record


class MemoryRecordStore:
    """Process-local record store. Records are kept as validated copies."""

    def __init__(self):
        self._records: Dict[RecordKind, Dict[str, Record]] = {kind: {} for kind in RecordKind}
        self._lock = threading.Lock()

    def exists(self, kind: RecordKind, peer: str) -> bool:
        with self._lock:
            return peer in self._records[kind]

    def load(self, kind: RecordKind, peer: str) -> Record:
        with self._lock:
            record = self._records[kind].get(peer)
        if record is None:
            raise RecordNotFoundError(kind.value, peer)
        return record.model_copy(deep=True)

    def save(self, kind: RecordKind, peer: str, record: Record) -> None:
        check_record(kind, record)
        with self._lock:
            self._records[kind][peer] = record.model_copy(deep=True)

    def delete(self, kind: RecordKind, peer: str) -> None:
        with self._lock:
            self._records[kind].pop(peer, None)


class JsonRecordStore:
    """
    All records in one JSON file:

        {"local_key": {peer: {...}}, "remote_key": {...}, "session": {...}}

    Every call re-reads the file; writes replace it whole.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or get_settings().keystore_path)
        self._lock = threading.Lock()
        if not self.path.exists():
            self._write({kind.value: {} for kind in RecordKind})

    def _read(self) -> Dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StoreError(f"Keystore {self.path} is corrupt") from e
        for kind in RecordKind:
            data.setdefault(kind.value, {})
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        # temp file in the same directory, then atomic rename over the keystore
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise

    def exists(self, kind: RecordKind, peer: str) -> bool:
        with self._lock:
            return peer in self._read()[kind.value]

    def load(self, kind: RecordKind, peer: str) -> Record:
        with self._lock:
            blob = self._read()[kind.value].get(peer)
        if blob is None:
            raise RecordNotFoundError(kind.value, peer)
        try:
            return RECORD_TYPES[kind].model_validate(blob)
        except ValidationError as e:
            raise StoreError(f"Stored {kind.value} record for {peer!r} is invalid") from e

    def save(self, kind: RecordKind, peer: str, record: Record) -> None:
        check_record(kind, record)
        with self._lock:
            data = self._read()
            data[kind.value][peer] = record.model_dump(mode="json")
            self._write(data)

    def delete(self, kind: RecordKind, peer: str) -> None:
        with self._lock:
            data = self._read()
            if data[kind.value].pop(peer, None) is not None:
                self._write(data)
