"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import logging
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``."""

    platform_id = (platform or sys.platform).lower()
    environ = dict(env or os.environ)
    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = Path(environ.get("APPDATA") or home_dir / "Library" / "Application Support")
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return (base.expanduser() / sanitized)


APP_NAME = "Timekeeper"


DATA_DIR = get_default_data_dir(APP_NAME)
BACKUP_DIR = DATA_DIR / "backups"
LOG_DIR = DATA_DIR / "logs"

for _dir in (DATA_DIR, BACKUP_DIR, LOG_DIR):
    _dir.mkdir(parents=True, exist_ok=True)


DB_PATH = DATA_DIR / "store.db"
TASKS_LOG_PATH = LOG_DIR / "tasks.log"
SYNC_LOG_PATH = LOG_DIR / "sync.log"
UI_LOG_PATH = LOG_DIR / "ui.log"


@dataclass(frozen=True)
class TrackerCalendarSettings:
    """Working calendar used when rendering durations for Jira."""

    hours_per_day: int = 8
    days_per_week: int = 5


TRACKER = TrackerCalendarSettings()


@dataclass(frozen=True)
class JiraSettings:
    api_prefix: str = "/rest/api/3"
    request_timeout_sec: float = 30.0
    worklog_page_size: int = 1000
    push_workers: int = 4
    started_offset: str = "+0000"
    sync_on_stop: bool = False


JIRA = JiraSettings()


@dataclass(frozen=True)
class ThemeColors:
    safe_surface_bg: str = "#F1F5F9"
    text_subtle: str = "#6B7280"
    running: str = "#16A34A"
    danger: str = "#DC2626"
    chip: str = "#E0E7FF"
    chip_text: str = "#1F2937"


@dataclass(frozen=True)
class UISettings:
    app_title: str = APP_NAME
    theme_mode: str = "system"
    color_scheme_seed: str = "#4F46E5"
    window_min_width: int = 900
    window_min_height: int = 600
    timer_refresh_sec: float = 1.0
    recent_done_limit: int = 10
    recent_sessions_limit: int = 5
    theme: ThemeColors = ThemeColors()


UI = UISettings()


@dataclass(frozen=True)
class BackupSettings:
    enabled: bool = True
    directory: Path = BACKUP_DIR
    keep_days: int = 7


BACKUP = BackupSettings()


@dataclass(frozen=True)
class LoggingSettings:
    level: int = logging.INFO
    max_bytes: int = 1_000_000
    backup_count: int = 3
    fmt: str = "%(asctime)s [%(levelname)s] %(message)s"


LOGGING = LoggingSettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "BACKUP_DIR",
    "LOG_DIR",
    "DB_PATH",
    "TASKS_LOG_PATH",
    "SYNC_LOG_PATH",
    "UI_LOG_PATH",
    "TRACKER",
    "JIRA",
    "UI",
    "BACKUP",
    "LOGGING",
    "get_default_data_dir",
]
