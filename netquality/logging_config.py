"""Logging setup for netquality.

Records are rendered as logfmt-style ``key=value`` lines on stdout. Values
containing whitespace, quotes or ``=`` are double-quoted so a line can be
split back into fields. Classifier records may carry the context fields in
CONTEXT_FIELDS through ``extra=``.
"""

import logging
import sys
from typing import IO, Any, Optional

from netquality.config import NetQualityConfig, get_config

# Optional per-record fields, emitted in this order when present
CONTEXT_FIELDS = ("quality", "bandwidth_kbps", "sample_count")

# Third-party loggers pinned regardless of the application level
LIBRARY_LOG_LEVELS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "fastapi": logging.INFO,
}

ISO_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _render(value: Any) -> str:
    text = str(value)
    if not text or any(ch.isspace() or ch in '"=' for ch in text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
        return f'"{escaped}"'
    return text


class StructuredFormatter(logging.Formatter):
    """logfmt formatter: fixed record fields, then any context fields."""

    def format(self, record: logging.LogRecord) -> str:
        fields: list[tuple[str, Any]] = [
            ("timestamp", self.formatTime(record, self.datefmt)),
            ("level", record.levelname),
            ("logger", record.name),
            ("line", record.lineno),
            ("message", record.getMessage()),
        ]
        fields.extend(
            (name, getattr(record, name))
            for name in CONTEXT_FIELDS
            if hasattr(record, name)
        )
        if record.exc_info:
            fields.append(("exception", self.formatException(record.exc_info)))

        return " ".join(f"{key}={_render(value)}" for key, value in fields)


def setup_logging(
    config: Optional[NetQualityConfig] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """Route all logging through a single structured handler.

    Replaces any handlers already on the root logger, so calling this
    again (e.g. on app restart in tests) does not duplicate output.

    Args:
        config: Source of log_level (defaults to get_config())
        stream: Destination stream (defaults to stdout)

    Returns:
        The installed handler
    """
    level = logging.getLevelName((config or get_config()).log_level)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter(datefmt=ISO_DATE_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)

    for name, library_level in LIBRARY_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(library_level)
    logging.getLogger("netquality").setLevel(level)

    return handler


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (pass __name__)."""
    return logging.getLogger(name)
