"""Structured JSON logger for markfluence.

Every log record is emitted as a single-line JSON object so it can be
consumed by log aggregation pipelines without additional parsing.

Typical structured output::

    {"ts": "2025-07-01T12:00:00.123456+00:00", "level": "DEBUG",
     "logger": "markfluence.converter", "message": "render complete",
     "format": "adf", "duration_ms": 0.412, "warnings": 0, "diagrams": 1}

Conversion warnings are logged with the warning itself as a field; the
formatter turns dataclasses into nested objects::

    {"ts": "...", "level": "INFO", "logger": "markfluence.converter",
     "message": "Unknown token type 'footnote' skipped", "format": "storage",
     "warning": {"code": "UNKNOWN_TOKEN", "message": "...",
                 "context": {"token_type": "footnote"}}}

Usage::

    from markfluence.observability import get_logger

    log = get_logger("markfluence.converter")
    log.debug("render complete", extra={"extra_fields": {"format": "adf"}})
"""

from __future__ import annotations

import dataclasses
import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts`` (ISO-8601 UTC), ``level``, ``logger`` and
    ``message``.  Fields passed via ``extra={"extra_fields": {...}}`` are
    merged into the top-level object; dataclass values become nested
    objects and enums their values.  ``exc_info`` and ``stack_info`` are
    serialised when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=_json_default)


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    return str(value)


# One handler per logger name so that ``get_logger`` is idempotent.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "markfluence",
    *,
    level: int | str = logging.WARNING,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name.  Defaults to ``"markfluence"``.
    level:
        Minimum log level, as an ``int`` or a case-insensitive name.  Only
        applied the first time a given *name* is configured.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        A logger with a :class:`StructuredFormatter` handler attached.
        Repeated calls with the same *name* do **not** add duplicate
        handlers.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False

        _configured_loggers.add(name)

    return logger
