"""Logging setup for latprobe.

Diagnostics go to stderr through the ``latprobe`` logger namespace. Report
lines are not log records: the reporter writes them to stdout directly so
they stay parseable.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

# Attributes passed via ``extra=`` that the JSON formatter copies through.
_EXTRA_FIELDS = ("packets", "entries", "peer")


class _JsonFormatter(logging.Formatter):
    """One-line JSON log formatter.

    Emits objects with keys timestamp, level, logger and message, plus any
    of the known ``extra`` fields present on the record.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON string.

        Args:
            record: The log record to format.

        Returns:
            A single-line JSON string.
        """
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(
    level: int = logging.WARNING,
    *,
    json_format: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return the root latprobe logger.

    Repeated calls only adjust the level of the existing handler, so the
    CLI and tests can both call this without duplicating output.

    Args:
        level: Logging level. Defaults to WARNING so a quiet probe prints
            nothing but report lines.
        json_format: Emit one JSON object per line instead of plain text.
        stream: Destination stream. Defaults to ``sys.stderr``.

    Returns:
        The configured ``latprobe`` logger.
    """
    logger = logging.getLogger("latprobe")
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)

    if json_format:
        formatter: logging.Formatter = _JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the ``latprobe`` namespace.

    Args:
        name: Dotted suffix, e.g. ``"probe.receiver"``.

    Returns:
        ``logging.getLogger("latprobe.<name>")``.
    """
    return logging.getLogger(f"latprobe.{name}")
