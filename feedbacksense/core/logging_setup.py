"""Logging configuration helpers.

Two output styles are supported: structured JSON lines for machine
consumption, and ``rich`` console output for interactive use.

Updates:
    v0.1.0 - 2026-10-18 - JSON and rich logging setup with runtime level control.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from rich.logging import RichHandler

_configured = False
_handler: logging.Handler | None = None

# Attributes present on every LogRecord; anything else arrived through ``extra=``.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


class JsonFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(extra_fields(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return the ``extra=`` attributes attached to a log record."""

    return {
        key: value
        for key, value in record.__dict__.items()
        if not key.startswith("_") and key not in _RESERVED_ATTRS
    }


def _build_handler(style: str) -> logging.Handler:
    if style == "rich":
        return RichHandler(rich_tracebacks=True, show_path=False)
    if style != "json":
        raise ValueError(f"Unsupported log format: {style}")
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    return handler


def configure_logging(config: dict[str, Any] | None = None) -> None:
    """Configure root logging once per process.

    Args:
        config (dict[str, Any] | None): Optional logging section. Supports
            ``level`` (default ``INFO``) and ``format`` (``json`` or ``rich``).
    """

    global _configured, _handler
    if _configured:
        return

    config = config or {}
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    handler = _build_handler(str(config.get("format", "json")).lower())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    _handler = handler
    _configured = True


def set_runtime_level(level_name: str) -> None:
    """Adjust logging level at runtime.

    Raises:
        ValueError: If the level name is not recognized by the logging module.
    """

    if not level_name:
        return
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {level_name}")

    logging.getLogger().setLevel(level)
    if _handler:
        _handler.setLevel(level)
