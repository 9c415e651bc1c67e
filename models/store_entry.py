"""SQLModel table backing the key-value store."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from utils.datetime_utils import utc_now


class StoreEntry(SQLModel, table=True):
    """One JSON document per key (``tasks``, ``settings``...)."""

    __tablename__ = "store"

    key: str = Field(primary_key=True)
    value: Optional[str] = None
    updated_at: datetime = Field(default_factory=utc_now)


__all__ = ["StoreEntry"]
