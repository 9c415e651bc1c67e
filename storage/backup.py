"""Daily JSON snapshots of the task collection."""
from __future__ import annotations

import json
from datetime import datetime, timedelta
from pathlib import Path

_PREFIX = "tasks_"
_SUFFIX = ".json"


def _parse_backup_date(path: Path) -> datetime | None:
    stem = path.stem
    if not stem.startswith(_PREFIX):
        return None
    try:
        return datetime.strptime(stem[len(_PREFIX) :], "%Y-%m-%d")
    except ValueError:
        return None


def ensure_daily_backup(
    store,
    backup_dir: str | Path,
    *,
    key: str = "tasks",
    keep_days: int = 7,
) -> Path | None:
    """Write today's snapshot of ``store[key]`` once and rotate old copies."""

    payload = store.get(key)
    if payload is None:
        return None

    backups = Path(backup_dir)
    backups.mkdir(parents=True, exist_ok=True)

    today = datetime.now().date()
    destination = backups / f"{_PREFIX}{today.isoformat()}{_SUFFIX}"

    created_path: Path | None = None
    if not destination.exists():
        destination.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        created_path = destination

    if keep_days > 0:
        cutoff = today - timedelta(days=keep_days - 1)
        for file in backups.glob(f"{_PREFIX}*{_SUFFIX}"):
            backup_date = _parse_backup_date(file)
            if backup_date and backup_date.date() < cutoff:
                try:
                    file.unlink()
                except OSError:
                    pass

    return created_path


__all__ = ["ensure_daily_backup"]
