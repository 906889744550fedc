"""Logging setup for scripts and embedding applications.

The library only creates module loggers; nothing here runs on import.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone

LOG_LEVEL_ENV = "SONAR_LOG_LEVEL"

_STANDARD_RECORD_FIELDS = frozenset(
    {
        "name",
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
        "taskName",
        "message",
    }
)


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra=`` fields land under ``fields``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        extras = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_RECORD_FIELDS}
        if extras:
            payload["fields"] = extras
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def _resolve_formatter(kind: str) -> logging.Formatter:
    if kind.strip().lower() == "json":
        return JsonFormatter()
    return logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")


def configure_logging(level_name: str = "INFO", fmt: str = "text") -> None:
    """Replace the root handlers with a single stream handler."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(_resolve_formatter(fmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)


def setup_logging(default_level: str = "INFO") -> None:
    """Configure logging from SONAR_LOG_LEVEL unless handlers already exist.

    `default_level` applies when the environment variable is unset.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    configure_logging(os.environ.get(LOG_LEVEL_ENV, default_level))
