"""
JSONL logging bootstrap.
Installs a single JSONL file sink for resourcefs log records.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

LOG_PATH_ENV = "RESOURCEFS_LOG_PATH"
LOG_LEVEL_ENV = "RESOURCEFS_LOG_LEVEL"

# Standard LogRecord attributes; anything else on a record is an extra field
_RECORD_FIELDS = frozenset(
    {
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "name",
        "taskName",
        "message",
    }
)


class JsonlHandler(logging.Handler):
    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def format_record(self, record: logging.LogRecord) -> dict:
        payload = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "lvl": record.levelname,
            "schema": {"name": "resourcefs.log", "ver": "1.0.0"},
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = logging.Formatter().formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key in _RECORD_FIELDS:
                continue
            payload.setdefault(key, value)
        return payload

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = json.dumps(self.format_record(record), ensure_ascii=False, default=str)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)


def init_json_logging(path: str | Path | None = None, level: str | None = None) -> bool:
    """Attach a JsonlHandler to the resourcefs logger.

    Returns:
        False when no path is given and RESOURCEFS_LOG_PATH is unset
    """
    path = path or os.environ.get(LOG_PATH_ENV)
    if not path:
        return False

    level = (level or os.environ.get(LOG_LEVEL_ENV, "INFO")).upper()
    logger = logging.getLogger("resourcefs")
    logger.setLevel(getattr(logging, level, logging.INFO))
    # Remove existing handlers of the same kind to avoid duplicates
    for h in list(logger.handlers):
        if isinstance(h, JsonlHandler):
            logger.removeHandler(h)
    logger.addHandler(JsonlHandler(path))
    return True
