from __future__ import annotations
from enum import Enum
from typing import Dict, Optional, Protocol, Type, Union

from pydantic import BaseModel, Field

from .codec import CurvePoint, public_key_from_b64
from .keys import MAX_KEY_ID, StoredKeyPair


class RecordKind(str, Enum):
    LOCAL_KEY = "local_key"
    REMOTE_KEY = "remote_key"
    SESSION = "session"


# local current/next key pairs for one peer
class LocalKeyRecord(BaseModel):
    peer: str
    current: StoredKeyPair
    next: StoredKeyPair

    def rotated(self, new_next: StoredKeyPair) -> LocalKeyRecord:
        """Promote next to current and stage ``new_next``."""
        return self.model_copy(update={"current": self.next, "next": new_next})


class RemoteKey(BaseModel):
    key_id: int = Field(ge=0, le=MAX_KEY_ID)
    public_key: str  # base64 compressed point

    def point(self) -> CurvePoint:
        return public_key_from_b64(self.public_key)


# latest public key received from the peer, plus the one it replaced
class RemoteKeyRecord(BaseModel):
    peer: str
    current: RemoteKey
    last: Optional[RemoteKey] = None

    def current_point(self) -> CurvePoint:
        return self.current.point()

    def updated(self, key: RemoteKey) -> RemoteKeyRecord:
        return self.model_copy(update={"current": key, "last": self.current})


class SessionRecord(BaseModel):
    peer: str
    prekey_bundle_required: bool = True
    identity_key: Optional[str] = None  # base64 compressed point

    def requires_prekey_bundle(self) -> bool:
        return self.prekey_bundle_required

    def bound_identity(self) -> Optional[str]:
        return self.identity_key or None

    def identity_point(self) -> Optional[CurvePoint]:
        identity = self.bound_identity()
        return public_key_from_b64(identity) if identity else None


Record = Union[LocalKeyRecord, RemoteKeyRecord, SessionRecord]

RECORD_TYPES: Dict[RecordKind, Type[BaseModel]] = {
    RecordKind.LOCAL_KEY: LocalKeyRecord,
    RecordKind.REMOTE_KEY: RemoteKeyRecord,
    RecordKind.SESSION: SessionRecord,
}


class RecordStore(Protocol):
    """
    Persistence for the three per-peer records.

    load() raises RecordNotFoundError for an absent record; delete() of an
    absent record is a no-op.
    """

    def exists(self, kind: RecordKind, peer: str) -> bool: ...

    def load(self, kind: RecordKind, peer: str) -> Record: ...

    def save(self, kind: RecordKind, peer: str, record: Record) -> None: ...

    def delete(self, kind: RecordKind, peer: str) -> None: ...


def check_record(kind: RecordKind, record: Record) -> None:
    expected = RECORD_TYPES[kind]
    if not isinstance(record, expected):
        raise TypeError(f"{kind.value} record must be {expected.__name__}, got {type(record).__name__}")
