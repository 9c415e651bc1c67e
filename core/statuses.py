"""Task status constants and display helpers."""
from __future__ import annotations

from typing import Dict, Optional

TODO = "TODO"
IN_PROGRESS = "IN_PROGRESS"
PAUSED = "PAUSED"
DONE = "DONE"

# Keys are the persisted values; labels and colors are display only.
STATUS_META: Dict[str, Dict[str, str]] = {
    TODO: {
        "label": "To do",
        "color": "#64748B",    # slate-500
        "bgcolor": "#E2E8F0",  # slate-200
    },
    IN_PROGRESS: {
        "label": "In progress",
        "color": "#16A34A",    # green-600
        "bgcolor": "#DCFCE7",  # green-100
    },
    PAUSED: {
        "label": "Paused",
        "color": "#F59E0B",    # amber-500
        "bgcolor": "#FEF3C7",  # amber-100
    },
    DONE: {
        "label": "Done",
        "color": "#0EA5E9",    # sky-500
        "bgcolor": "#E0F2FE",  # sky-100
    },
}

DEFAULT_STATUS = TODO


def normalize_status(value: Optional[str]) -> Optional[str]:
    """Map user/storage input onto a known status, ``None`` if unrecognized."""
    if not value:
        return None
    key = str(value).strip().upper().replace(" ", "_").replace("-", "_")
    return key if key in STATUS_META else None


def status_label(value: str) -> str:
    meta = STATUS_META.get(value, STATUS_META[DEFAULT_STATUS])
    return meta["label"]


def status_color(value: str) -> str:
    meta = STATUS_META.get(value, STATUS_META[DEFAULT_STATUS])
    return meta["color"]


def status_bgcolor(value: str) -> str:
    meta = STATUS_META.get(value, STATUS_META[DEFAULT_STATUS])
    return meta["bgcolor"]


__all__ = [
    "TODO",
    "IN_PROGRESS",
    "PAUSED",
    "DONE",
    "DEFAULT_STATUS",
    "STATUS_META",
    "normalize_status",
    "status_label",
    "status_color",
    "status_bgcolor",
]
