from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logging.handlers import RotatingFileHandler

from utils.log import ensure_logger, read_log_tail


def test_ensure_logger_attaches_one_rotating_handler(tmp_path):
    path = tmp_path / "logs" / "test.log"
    logger = ensure_logger("timekeeper.test-log", path)
    again = ensure_logger("timekeeper.test-log", path)

    assert again is logger
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RotatingFileHandler)

    logger.info("hello")
    logger.handlers[0].flush()
    assert "hello" in read_log_tail(path)


def test_read_log_tail_limits_lines(tmp_path):
    path = tmp_path / "sync.log"
    path.write_text("\n".join(f"line {i}" for i in range(10)), encoding="utf-8")

    assert read_log_tail(path, lines=2) == "line 8\nline 9"
    assert read_log_tail(tmp_path / "missing.log") == ""
