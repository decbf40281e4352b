"""Logging configuration shared by the provider and the catalogue.

JSON lines on stdout, one object per record. Idempotent: calling
setup_logging() multiple times won't duplicate handlers.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from logging import Handler, LogRecord
from typing import Any

_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
}


class JsonFormatter(logging.Formatter):
    """A minimal JSON formatter.

    - Produces one JSON object per line.
    - Includes common fields (ts, level, logger, message), the configured
      service name, and any structured extras provided via
      `logger.info("msg", extra={...})`.
    """

    def __init__(self, service: str | None = None) -> None:
        super().__init__()
        self.service = service

    def format(self, record: LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
        }
        if self.service:
            payload["service"] = self.service

        msg = record.msg
        if isinstance(msg, dict):
            payload.update(msg)
        else:
            payload["message"] = record.getMessage()

        for key, value in record.__dict__.items():
            if key in _RESERVED:
                continue
            # Do not overwrite core keys if present
            if key not in payload:
                payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def _make_stream_handler(level: int, service: str | None) -> Handler:
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter(service))
    return handler


def setup_logging(level: str | int = _DEFAULT_LEVEL, *, service: str | None = None) -> None:
    """Configure root and uvicorn loggers for JSON output.

    Idempotent: only attaches handlers if none are present. The label is
    process-wide, so the first caller's `service` wins; when provider and
    catalogue share a process, every line carries the first one.
    """
    root = logging.getLogger()

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if root.handlers:  # Prevent double configuration under reload / tests
        return

    root.setLevel(level)
    root.addHandler(_make_stream_handler(level, service))

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.setLevel(level)
        lg.propagate = True
        for h in list(lg.handlers):
            lg.removeHandler(h)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger.

    Usage: logger = get_logger(__name__)
    """
    return logging.getLogger(name if name else __name__)
