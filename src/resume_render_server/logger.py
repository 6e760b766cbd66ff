"""Structured JSON logger matching Go slog format.

Outputs logs in the format:
{"time":"2026-02-03T14:06:20.829529-05:00","level":"INFO","source":{"function":"export_pdf","file":"pipeline.py","line":43},"msg":"pdf exported"}
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

# Context variable for storing additional log fields
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

DEFAULT_LOG_LEVEL = "DEBUG"


class StructuredFormatter(logging.Formatter):
    """JSON formatter that outputs logs in Go slog-compatible format."""

    def format(self, record: logging.LogRecord) -> str:
        now = datetime.now(timezone.utc).astimezone()

        log_entry: dict[str, Any] = {
            "time": now.isoformat(),
            "level": record.levelname,
            "source": {
                "function": record.funcName,
                "file": record.pathname,
                "line": record.lineno,
            },
            "msg": record.getMessage(),
        }

        ctx_fields = _log_context.get()
        if ctx_fields:
            log_entry.update(ctx_fields)

        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        return json.dumps(log_entry, default=str)


def _resolve_level(level: str | None) -> int:
    """Map a level name (e.g. from LOG_LEVEL) to a logging level, defaulting to DEBUG."""
    name = (level or DEFAULT_LOG_LEVEL).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.DEBUG


class StructuredLogger:
    """Logger that outputs structured JSON logs with context support."""

    def __init__(self, name: str = "app", level: str | None = None):
        self._logger = logging.getLogger(name)
        self._logger.setLevel(_resolve_level(level or os.getenv("LOG_LEVEL")))

        self._logger.handlers.clear()

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        self._logger.addHandler(handler)

        self._logger.propagate = False

    def set_level(self, level: str) -> None:
        """Change the minimum level at runtime."""
        self._logger.setLevel(_resolve_level(level))

    def _log(
        self,
        level: int,
        msg: str,
        stacklevel: int = 3,
        **fields: Any,
    ) -> None:
        extra = {"extra_fields": fields} if fields else {}
        self._logger.log(level, msg, stacklevel=stacklevel, extra=extra)

    def debug(self, msg: str, **fields: Any) -> None:
        """Log a debug message with optional fields."""
        self._log(logging.DEBUG, msg, **fields)

    def info(self, msg: str, **fields: Any) -> None:
        """Log an info message with optional fields."""
        self._log(logging.INFO, msg, **fields)

    def warn(self, msg: str, **fields: Any) -> None:
        """Log a warning message with optional fields."""
        self._log(logging.WARNING, msg, **fields)

    def error(self, msg: str, **fields: Any) -> None:
        """Log an error message with optional fields."""
        self._log(logging.ERROR, msg, **fields)


def set_context(**fields: Any) -> None:
    """Set context fields that will be included in all subsequent log messages.

    Example:
        set_context(request_id="abc-123", document_kind="resume")
        logger.info("rendering preview")  # includes request_id and document_kind
    """
    current = _log_context.get()
    _log_context.set({**current, **fields})


def clear_context() -> None:
    """Clear all context fields."""
    _log_context.set({})


def get_context() -> dict[str, Any]:
    """Get current context fields."""
    return _log_context.get().copy()


# Default logger instance
logger = StructuredLogger("resume_render_server")
