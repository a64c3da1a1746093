from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from prekey.records import RecordKind


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Base(DeclarativeBase):
    pass

# local current/next key pairs (private scalars sealed inside payload)
class LocalKeyRow(Base):
    __tablename__ = "local_key_records"
    peer: Mapped[str] = mapped_column(String(255), primary_key=True)
    current_key_id: Mapped[int] = mapped_column(Integer)
    next_key_id: Mapped[int] = mapped_column(Integer)
    payload: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

# peer's public keys
class RemoteKeyRow(Base):
    __tablename__ = "remote_key_records"
    peer: Mapped[str] = mapped_column(String(255), primary_key=True)
    current_key_id: Mapped[int] = mapped_column(Integer)
    payload: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

# session state
class SessionRow(Base):
    __tablename__ = "session_records"
    peer: Mapped[str] = mapped_column(String(255), primary_key=True)
    payload: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


ROW_TYPES = {
    RecordKind.LOCAL_KEY: LocalKeyRow,
    RecordKind.REMOTE_KEY: RemoteKeyRow,
    RecordKind.SESSION: SessionRow,
}
