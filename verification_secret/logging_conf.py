"""JSON-line logging for the client secret package.

setup_logging() is idempotent: calling it multiple times won't duplicate
handlers. Structured extras that could carry a client secret are redacted
before they reach the output stream.
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

REDACTED = "[REDACTED]"
_SENSITIVE_KEYS = frozenset({"client_secret", "url_token", "raw"})

# Attributes every LogRecord carries; anything else came in through `extra`.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _scrub(key: str, value: Any) -> Any:
    return REDACTED if key in _SENSITIVE_KEYS else value


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Carries ts, level, logger and message, plus any structured extras given
    via `logger.info("msg", extra={...})`. Extras never overwrite core keys.
    """

    def format(self, record: LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
        }

        msg = record.msg
        if isinstance(msg, dict):
            payload.update({k: _scrub(k, v) for k, v in msg.items()})
        else:
            payload["message"] = record.getMessage()

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key in payload:
                continue
            payload[key] = _scrub(key, value)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def _make_stream_handler(level: int) -> Handler:
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter())
    return handler


def setup_logging(level: str | int = _DEFAULT_LEVEL) -> None:
    """Attach a JSON stdout handler to the root logger.

    Idempotent: does nothing if the root logger already has handlers.
    """
    root = logging.getLogger()

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if root.handlers:
        return

    root.setLevel(level)
    root.addHandler(_make_stream_handler(level))


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger.

    Usage: logger = get_logger("domain.client_secret")
    """
    return logging.getLogger(name if name else __name__)
