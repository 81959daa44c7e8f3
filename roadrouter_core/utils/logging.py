"""Logging setup.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

ROOT_LOGGER = "roadrouter_core"
TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JSONFormatter(logging.Formatter):
    """Structured (JSON) log formatter, one object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .strftime("%Y-%m-%dT%H:%M:%SZ"),
            "logger": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record)


def configure_logging(level: str = "INFO", fmt: str = "text") -> logging.Logger:
    """Install a stream handler on the package logger.

    Calling it again replaces the previous handler.

    Args:
        level: Log level name
        fmt: "text" or "json"
    """
    if fmt == "json":
        formatter: logging.Formatter = JSONFormatter()
    elif fmt == "text":
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)
    else:
        raise ValueError(f"Unknown log format: {fmt!r}")

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_roadrouter", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler._roadrouter = True
    logger.addHandler(handler)
    logger.setLevel(level.upper())

    return logger


__all__ = [
    "JSONFormatter",
    "configure_logging",
]
