"""Structured logging utilities."""

import json
import logging
from typing import Any, Dict, Optional


_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Extra fields passed via ``extra=``
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


PACKAGE_LOGGER = "field_insights"


def get_logger(name: str) -> logging.Logger:
    """Get a logger whose records go through the package's JSON handler.

    The handler sits on the ``field_insights`` logger; module loggers are
    its children and propagate to it.
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
        root.setLevel(logging.WARNING)
    return logging.getLogger(name)


def set_level(level: Optional[str]) -> None:
    """Set the level of every ``field_insights`` logger at once."""
    if level:
        get_logger(PACKAGE_LOGGER).setLevel(level.upper())


def log_fetch(
    logger: logging.Logger,
    path: str,
    record_count: int,
    duration_ms: int,
) -> None:
    """Log one export batch fetch."""
    logger.info(
        "Export batch fetched",
        extra={
            "stage": "fetch",
            "path": path,
            "record_count": record_count,
            "duration_ms": duration_ms,
        },
    )


def log_aggregate(
    logger: logging.Logger,
    record_count: int,
    field_count: int,
    skipped_values: int,
    duration_ms: int,
) -> None:
    """Log the aggregation stage."""
    logger.info(
        "Records aggregated",
        extra={
            "stage": "aggregate",
            "record_count": record_count,
            "field_count": field_count,
            "skipped_values": skipped_values,
            "duration_ms": duration_ms,
        },
    )
