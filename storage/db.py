# timekeeper/storage/db.py
from __future__ import annotations

from sqlmodel import SQLModel, Session, create_engine

from core.settings import BACKUP, DB_PATH

# Ensure SQLModel metadata is populated
import models.store_entry  # noqa: F401


_engine = None


def get_engine():
    """Return (and lazily create) the SQLAlchemy engine for the local store."""

    global _engine
    if _engine is None:
        DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(f"sqlite:///{DB_PATH.as_posix()}", echo=False)
    return _engine


def init_db(engine=None) -> None:
    SQLModel.metadata.create_all(engine or get_engine())
    if BACKUP.enabled:
        # Imported here: backup depends on the store, which depends on this module.
        from storage.backup import ensure_daily_backup
        from storage.store import KeyValueStore

        ensure_daily_backup(KeyValueStore(), BACKUP.directory, keep_days=BACKUP.keep_days)


def get_session() -> Session:
    return Session(get_engine())


__all__ = ["get_engine", "get_session", "init_db"]
