"""
JSON-lines logging for file system events of the ``typedpaths`` logger tree.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from .config import get_settings

LOGGER_NAME = "typedpaths"

# Attributes passed through ``extra=`` by the path, sandbox and handle modules.
EVENT_FIELDS = ("path", "current_directory", "operation", "target")


class JsonFormatter(logging.Formatter):
    """One JSON object per record: level, event message, logger name and any event fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        payload.update(
            (field, getattr(record, field)) for field in EVENT_FIELDS if getattr(record, field, None) is not None
        )

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(payload, ensure_ascii=False)


class _JsonHandler(logging.StreamHandler):
    """Marks the handler installed by ``configure_logging``."""


def configure_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Send the library's log records to ``stream`` as JSON lines.

    Only the ``typedpaths`` logger is touched. Calling this again replaces the
    handler it installed before and leaves any other handlers alone.

    Args:
        level: Overrides ``Settings.log_level``.
        stream: Defaults to standard output.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel((level or get_settings().log_level).upper())

    for existing in [h for h in logger.handlers if isinstance(h, _JsonHandler)]:
        logger.removeHandler(existing)
        existing.close()

    handler = _JsonHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger
