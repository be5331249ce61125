"""
Structured logging configuration for the relay.

This module provides:
- Human-readable console output tagged with the request correlation ID
- JSON output for the error log file, the console in json mode and Loki
- A per-request log context (method, path, client_id) merged into JSON logs
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any

from sse_relay.settings import app_settings

# Loki rejects single entries above this size
LOKI_MAX_LOG_SIZE_BYTES = 256 * 1024

log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

# LogRecord attributes that are not user-supplied extras
_RESERVED_RECORD_FIELDS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
        "correlation_id",
    }
)


def get_correlation_id() -> str:
    """
    Get correlation ID from context, safe wrapper for logging.

    Returns:
        Correlation ID or empty string if not available.
    """
    from sse_relay.middlewares.correlation_id import (
        get_correlation_id as _get_cid,
    )

    return _get_cid()


def set_log_context(**kwargs: Any) -> None:
    """
    Set contextual fields for structured logging.

    Example:
        >>> set_log_context(client_id="3f1c...", path="/events")
        >>> logger.info("Stream joined")  # JSON output includes both fields
    """
    current = dict(log_context.get())
    current.update(kwargs)
    log_context.set(current)


def get_log_context() -> dict[str, Any]:
    return log_context.get()


def clear_log_context() -> None:
    log_context.set({})


class StructuredJSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs timestamp, level, logger, message and source location, plus the
    correlation ID, the current log context and any `extra=` fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        correlation_id = get_correlation_id()
        if correlation_id:
            log_data["request_id"] = correlation_id

        log_data.update(get_log_context())
        log_data["environment"] = app_settings.ENVIRONMENT

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_FIELDS:
                log_data[key] = value

        json_str = json.dumps(log_data, default=str)
        if len(json_str) > LOKI_MAX_LOG_SIZE_BYTES:
            log_data["message"] = (
                log_data["message"][: LOKI_MAX_LOG_SIZE_BYTES - 1000]
                + "... [TRUNCATED]"
            )
            json_str = json.dumps(log_data, default=str)

        return json_str


class HumanReadableFormatter(logging.Formatter):
    """
    Human-readable formatter for console output.

    INFO lines stay short; warnings, errors and debug lines include the
    source location.
    """

    INFO_FMT = "%(asctime)s - [%(correlation_id)s] %(levelname)s: %(message)s"
    ERROR_FMT = "%(asctime)s - [%(correlation_id)s] %(levelname)s: %(module)s.%(funcName)s:%(lineno)d - %(message)s"

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        info = logging.Formatter(self.INFO_FMT, datefmt="%Y-%m-%d %H:%M:%S")
        detailed = logging.Formatter(
            self.ERROR_FMT, datefmt="%Y-%m-%d %H:%M:%S"
        )
        self._formatters = {
            logging.INFO: info,
            logging.WARNING: detailed,
            logging.ERROR: detailed,
            logging.CRITICAL: detailed,
            logging.DEBUG: detailed,
        }

    def format(self, record: logging.LogRecord) -> str:
        record.correlation_id = get_correlation_id() or "-"

        formatter = self._formatters.get(
            record.levelno, self._formatters[logging.INFO]
        )
        return formatter.format(record)


def setup_logging() -> logging.Logger:
    """
    Configure the root logger.

    Sets up:
    - Console handler, human-readable or JSON per LOG_CONSOLE_FORMAT
    - File handler for errors (JSON format)
    - Loki handler for centralized logging (if LOKI_ENABLED)

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, app_settings.LOG_LEVEL.upper()))

    # Clear existing handlers to avoid duplicates on reload
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    if app_settings.LOG_CONSOLE_FORMAT == "json":
        console_handler.setFormatter(StructuredJSONFormatter())
    else:
        console_handler.setFormatter(HumanReadableFormatter())
    logger.addHandler(console_handler)

    try:
        file_handler = logging.FileHandler(app_settings.LOG_FILE_PATH)
        file_handler.setLevel(logging.ERROR)
        file_handler.setFormatter(StructuredJSONFormatter())
        logger.addHandler(file_handler)
    except OSError as e:
        logger.warning(f"Could not create file handler: {e}")

    if app_settings.LOKI_ENABLED:
        from logging_loki import LokiHandler

        loki_handler = LokiHandler(
            url=f"{app_settings.LOKI_URL}/loki/api/v{app_settings.LOKI_VERSION}/push",
            tags={
                "application": "sse-relay",
                "environment": app_settings.ENVIRONMENT,
            },
            version=app_settings.LOKI_VERSION,
        )
        loki_handler.setLevel(logging.INFO)
        loki_handler.setFormatter(StructuredJSONFormatter())
        logger.addHandler(loki_handler)
        logger.info("Loki handler configured successfully")

    # Keep pytest output quiet
    if sys.argv[0].split("/")[-1] in ["pytest"]:
        logging.disable(logging.ERROR)

    return logger


logger = setup_logging()
