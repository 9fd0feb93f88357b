"""Logging configuration for applications embedding rasterbridge.

The library itself only creates module loggers under ``rasterbridge``.
`configure_logging` gives that tree its own level and handlers so its
DEBUG output (copy strategy, driver list, open attempts) can be turned on
without turning on every third-party logger through the root.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.config import dictConfig
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "rasterbridge"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


class JSONFormatter(logging.Formatter):
    """One JSON object per line, UTC timestamps."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "line": record.lineno,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=True)


def configure_logging(
    *,
    level: str = "INFO",
    json_logs: bool = False,
    log_file: Optional[str] = None,
    root_level: str = "WARNING",
) -> None:
    """Send ``rasterbridge`` records at `level` and everything else at `root_level`
    to stderr (and `log_file` when given)."""
    formatter: Dict[str, Any] = (
        {"()": JSONFormatter} if json_logs else {"format": TEXT_FORMAT, "datefmt": DATE_FORMAT}
    )
    handlers: Dict[str, Dict[str, Any]] = {
        "stderr": {"class": "logging.StreamHandler", "formatter": "main", "stream": "ext://sys.stderr"},
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "main",
            "filename": log_file,
            "encoding": "utf-8",
        }

    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"main": formatter},
        "handlers": handlers,
        "loggers": {
            # own handlers, no propagation: records are not emitted twice
            PACKAGE_LOGGER: {"level": level.upper(), "handlers": list(handlers), "propagate": False},
        },
        "root": {"level": root_level.upper(), "handlers": list(handlers)},
    })


__all__ = ["PACKAGE_LOGGER", "JSONFormatter", "configure_logging"]
