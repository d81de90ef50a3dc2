"""Structured JSON Logging with Correlation ID Support

Every record is one JSON object per line, on stdout and in rotating
files under `settings.logs_path`. The request's correlation ID is added
automatically; domain identifiers passed through `extra=` are kept as
top-level keys.
"""
import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from ..config.settings import settings


_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Library loggers and the level they are held to
QUIET_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "pymongo": logging.WARNING,
    "apscheduler": logging.WARNING,
}


class JsonFormatter(logging.Formatter):
    """One JSON document per record"""

    EXTRA_FIELDS = (
        "event_type", "rule_id", "notification_id", "employee_id", "breakup_id",
        "org_unit_id", "seller_id", "strategy", "recipient_count", "error_code",
    )

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = _correlation_id.get()
        if correlation_id:
            entry["correlation_id"] = correlation_id

        entry.update({
            field: getattr(record, field)
            for field in self.EXTRA_FIELDS
            if hasattr(record, field)
        })

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _file_handler(filename: str, formatter: logging.Formatter, level: int = logging.NOTSET) -> logging.Handler:
    handler = RotatingFileHandler(
        os.path.join(settings.logs_path, filename),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> None:
    """
    Configure the root logger

    Writes to stdout, hrms.log and (errors only) hrms-error.log.
    Calling it again replaces the handlers instead of stacking them.
    """
    os.makedirs(settings.logs_path, exist_ok=True)
    formatter = JsonFormatter()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(settings.log_level.upper())
    root.handlers.clear()
    root.addHandler(console)
    root.addHandler(_file_handler("hrms.log", formatter))
    root.addHandler(_file_handler("hrms-error.log", formatter, logging.ERROR))

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_correlation_id(correlation_id: Optional[str]) -> None:
    """Bind the correlation ID to the current request context"""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()
