from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker

from prekey.config import get_settings

from .models import Base

# database URL comes from PREKEY_DATABASE_URL, defaulting to a local SQLite file
engine = create_engine(get_settings().database_url, echo=False)
SessionLocal = sessionmaker(engine, expire_on_commit=False)


def init_db(bind: Engine | None = None) -> None:
    Base.metadata.create_all(bind or engine)
