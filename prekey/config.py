import logging
import os
import pathlib
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

# default database sits next to the package, like the keystore file
DB_PATH = pathlib.Path(__file__).parent.parent / "prekey.db"


@dataclass(frozen=True)
class Settings:
    database_url: str
    keystore_path: str
    log_level: str
    pbkdf2_iterations: int


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        database_url=os.getenv("PREKEY_DATABASE_URL", f"sqlite:///{DB_PATH}"),
        keystore_path=os.getenv("PREKEY_KEYSTORE_PATH", "keystore.json"),
        log_level=os.getenv("PREKEY_LOG_LEVEL", "WARNING").upper(),
        pbkdf2_iterations=int(os.getenv("PREKEY_PBKDF2_ITERATIONS", "100000")),
    )


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
