"""Rotating file loggers shared by services and the UI."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from core.settings import LOGGING


def ensure_logger(name: str, path: Path | str) -> logging.Logger:
    """Return ``name`` logger, attaching a rotating file handler only once."""

    logger = logging.getLogger(name)
    if not logger.handlers:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            path,
            maxBytes=LOGGING.max_bytes,
            backupCount=LOGGING.backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOGGING.fmt))
        logger.addHandler(handler)
    logger.setLevel(LOGGING.level)
    return logger


def read_log_tail(path: Path | str, lines: int = 200) -> str:
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError:
        return ""
    return "\n".join(content.splitlines()[-lines:])


__all__ = ["ensure_logger", "read_log_tail"]
