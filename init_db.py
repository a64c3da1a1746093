from prekey.config import configure_logging
from storage.db import engine, init_db

if __name__ == "__main__":
    configure_logging()
    init_db()
    print(f"✅ Record tables created at {engine.url}")
