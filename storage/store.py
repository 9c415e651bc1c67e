"""Opaque key-value store persisted in SQLite.

Values are JSON documents; every ``set`` replaces the whole document for the
key, so callers follow a read-modify-write discipline on full collections.
"""
from __future__ import annotations

import json
from typing import Any, Callable, List, Optional

from sqlmodel import Session, select

from models.store_entry import StoreEntry
from storage.db import get_session
from utils.datetime_utils import utc_now


def _serialise(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True)


def _deserialise(payload: Optional[str]) -> Any:
    if payload is None:
        return None
    try:
        return json.loads(payload)
    except json.JSONDecodeError:
        return None


class KeyValueStore:
    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory

    def get(self, key: str, default: Any = None) -> Any:
        with self._session_factory() as session:
            row = session.get(StoreEntry, key)
            if row is None:
                return default
            value = _deserialise(row.value)
            return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        payload = _serialise(value)
        with self._session_factory() as session:
            row = session.get(StoreEntry, key)
            if row is None:
                row = StoreEntry(key=key, value=payload)
            else:
                row.value = payload
                row.updated_at = utc_now()
            session.add(row)
            session.commit()

    def delete(self, key: str) -> None:
        with self._session_factory() as session:
            row = session.get(StoreEntry, key)
            if row is not None:
                session.delete(row)
                session.commit()

    def keys(self) -> List[str]:
        with self._session_factory() as session:
            return [row.key for row in session.exec(select(StoreEntry))]


__all__ = ["KeyValueStore"]
