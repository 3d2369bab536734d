"""
Root logger setup for harness runs.

The CLI and the seeding script call `configure_logging` once at start-up;
library modules only ask for `get_logger(__name__)`. Level and format come
from ``LOG_LEVEL`` / ``LOG_JSON`` unless given explicitly. With JSON output,
every ``extra=`` field (e.g. ``table``, ``update_id``) becomes a top-level key
so CI logs of a fixture reset or bootstrap can be filtered.

psycopg and its pool log each connection at INFO; they stay at WARNING unless
the harness itself runs at DEBUG.
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Optional

from botharness.config import get_settings

CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DRIVER_LOGGERS = ("psycopg", "psycopg.pool")

_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys() | {"message", "asctime"}
)


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    fields = {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and key != "extra"
    }
    # Older call sites pass extra={"extra": {...}}.
    nested = getattr(record, "extra", None)
    if isinstance(nested, dict):
        fields.update(nested)
    return fields


class JsonFormatter(logging.Formatter):
    """One JSON object per record; extras are merged in at the top level."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_extra_fields(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _dict_config(level: str, json_logs: bool) -> Dict[str, Any]:
    driver_level = "DEBUG" if level == "DEBUG" else "WARNING"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": CONSOLE_FORMAT},
            "json": {"()": JsonFormatter},
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "json" if json_logs else "console",
            }
        },
        "loggers": {name: {"level": driver_level} for name in DRIVER_LOGGERS},
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Install the harness handler on the root logger.

    Parameters
    ----------
    level : str, optional
        Level name; defaults to the ``LOG_LEVEL`` setting.
    json_logs : bool, optional
        Emit JSON lines instead of console text; defaults to ``LOG_JSON``.
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.log_json
    logging.config.dictConfig(_dict_config(level, json_logs))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "configure_logging", "get_logger"]
