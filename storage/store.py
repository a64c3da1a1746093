from pydantic import ValidationError
from sqlalchemy import Engine, delete
from sqlalchemy.orm import sessionmaker

from prekey.errors import RecordNotFoundError, StoreError
from prekey.records import RECORD_TYPES, Record, RecordKind, check_record

from .db import engine
from .models import ROW_TYPES


class SqlRecordStore:
    """
    Record store over SQLAlchemy, one table per record kind.

    Records are stored as their JSON form; key ids are copied into
    columns so rows can be queried without decoding. SQLAlchemy errors
    propagate unchanged.
    """

    def __init__(self, bind: Engine | None = None):
        self._sessions = sessionmaker(bind or engine, expire_on_commit=False)

    def exists(self, kind: RecordKind, peer: str) -> bool:
        with self._sessions() as session:
            return session.get(ROW_TYPES[kind], peer) is not None

    def load(self, kind: RecordKind, peer: str) -> Record:
        with self._sessions() as session:
            row = session.get(ROW_TYPES[kind], peer)
            if row is None:
                raise RecordNotFoundError(kind.value, peer)
            payload = row.payload
        try:
            return RECORD_TYPES[kind].model_validate_json(payload)
        except ValidationError as e:
            raise StoreError(f"Stored {kind.value} record for {peer!r} is invalid") from e

    def save(self, kind: RecordKind, peer: str, record: Record) -> None:
        check_record(kind, record)
        columns = {"peer": peer, "payload": record.model_dump_json()}
        if kind is RecordKind.LOCAL_KEY:
            columns["current_key_id"] = record.current.key_id
            columns["next_key_id"] = record.next.key_id
        elif kind is RecordKind.REMOTE_KEY:
            columns["current_key_id"] = record.current.key_id

        with self._sessions.begin() as session:
            session.merge(ROW_TYPES[kind](**columns))

    def delete(self, kind: RecordKind, peer: str) -> None:
        model = ROW_TYPES[kind]
        with self._sessions.begin() as session:
            session.execute(delete(model).where(model.peer == peer))
