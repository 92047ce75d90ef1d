"""
Structured logging utilities with JSON formatting and context injection.

This module provides structured logging capabilities with:
- JSON formatted log output for machine-readable logs
- Context injection (file_path, language, session_id) via LoggerAdapter
- Standardized log fields across the engine and services
- Integration with Python's standard logging module
"""

import logging
import json
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional, MutableMapping
from logging import LogRecord


# Context fields promoted to the top level of JSON log entries
CONTEXT_FIELDS = ("file_path", "language", "session_id", "edit_kind")

_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON with standard fields:
    - timestamp: ISO 8601 formatted timestamp
    - level: Log level (INFO, WARNING, ERROR, etc.)
    - logger: Logger name
    - message: Log message
    - context: Additional context fields
    - error: Error details (when exception info is attached)
    """

    def format(self, record: LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and key not in CONTEXT_FIELDS
        }
        if extra_fields:
            log_data["context"] = extra_fields

        if record.exc_info:
            log_data["error"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "stack_trace": "".join(traceback.format_exception(*record.exc_info))
            }

        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName
        }

        return json.dumps(log_data, default=str)


class LogContext:
    """
    Context manager for adding temporary context to logs.

    Usage:
        with LogContext(logger, file_path="src/main/java/MainView.java"):
            logger.info("Transforming")  # Will include file_path
    """

    def __init__(self, logger: logging.LoggerAdapter, **context: Any):
        self.logger = logger
        self.context = context
        self.old_extra = None

    def __enter__(self) -> logging.LoggerAdapter:
        self.old_extra = self.logger.extra.copy() if self.logger.extra else {}
        self.logger.extra.update(self.context)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.old_extra is not None:
            self.logger.extra = self.old_extra


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that injects context fields into all log records.

    This adapter allows setting context fields (file_path, session_id)
    that will be automatically included in all log entries.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        """
        Process log message and inject context.

        Args:
            msg: Log message
            kwargs: Log kwargs

        Returns:
            Tuple of (message, kwargs) with context injected
        """
        extra = kwargs.get("extra", {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextLoggerAdapter":
        """
        Create a new logger adapter with additional context.

        Args:
            **context: Additional context fields

        Returns:
            New logger adapter with merged context
        """
        new_extra = self.extra.copy()
        new_extra.update(context)
        return ContextLoggerAdapter(self.logger, new_extra)


def setup_logging(log_level: Optional[str] = None, json_format: Optional[bool] = None) -> None:
    """
    Configure logging for the application.

    Arguments left as None are taken from the settings
    (SOURCE_EDITOR_LOG_LEVEL, SOURCE_EDITOR_LOG_JSON).

    Sets up:
    - JSON formatter (or a plain text one) for the console handler
    - Console handler with appropriate log level
    - Root logger configuration

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit JSON lines when True, plain text otherwise
    """
    if log_level is None or json_format is None:
        from source_editor.config import get_settings

        settings = get_settings()
        log_level = log_level or settings.log_level
        json_format = settings.log_json if json_format is None else json_format

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """
    Get a context-aware logger for a module.

    Args:
        name: Logger name (typically __name__)
        **context: Initial context fields (file_path, language, etc.)

    Returns:
        Context logger adapter

    Example:
        logger = get_logger(__name__, file_path="MainView.java")
        logger.info("Applying edits")  # Will include file_path
    """
    base_logger = logging.getLogger(name)
    return ContextLoggerAdapter(base_logger, context)


def log_edit_applied(logger: logging.LoggerAdapter, edit: Any, offset: int) -> None:
    """
    Log one applied edit at DEBUG level.

    Args:
        logger: Logger to use
        edit: The applied Edit
        offset: Offset in the buffer where the payload went
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(
        f"Applied {edit.describe()}",
        extra={
            "edit_kind": edit.kind.value,
            "offset": offset,
        }
    )


def log_session_outcome(
    logger: logging.LoggerAdapter,
    file_path: Optional[str],
    changed: bool,
    edit_count: int,
    duration_ms: Optional[float] = None,
) -> None:
    """
    Log the outcome of one transformation session.

    An unchanged result is logged as a warning since the caller asked for
    edits that produced nothing.

    Args:
        logger: Logger to use
        file_path: Source file, if the session ran on a file
        changed: Whether the text changed
        edit_count: Number of edits in the batch
        duration_ms: Session duration in milliseconds (if measured)
    """
    extra: Dict[str, Any] = {
        "file_path": file_path,
        "changed": changed,
        "edit_count": edit_count,
    }
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    if changed:
        logger.info(f"Applied {edit_count} edit(s) to {file_path}", extra=extra)
    else:
        logger.warning(f"Unable to edit file {file_path}: no change produced", extra=extra)


def log_error_with_context(
    logger: logging.LoggerAdapter,
    message: str,
    error: Exception,
    **context: Any
) -> None:
    """
    Log error with full stack trace and context.

    Args:
        logger: Logger to use
        message: Error message
        error: Exception object
        **context: Additional context fields
    """
    context.setdefault("error_type", type(error).__name__)
    logger.error(
        message,
        extra=context,
        exc_info=error,
    )
