"""
Structured JSON logging with correlation IDs.

Every analysis request gets a request id that is stamped on all log
lines emitted while it is being handled, so an upload can be traced
from the HTTP layer through schema inference and classification.
"""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

request_id_ctx: ContextVar[Optional[str]] = ContextVar(
    "request_id", default=None)

# Attributes every LogRecord carries; anything else was passed via extra=
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord(
    "", logging.INFO, "", 0, "", (), None)).keys()) | {"message", "asctime", "extra_fields"}


class StructuredFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = request_id_ctx.get()
        if request_id:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Plain extra={"key": value} attributes
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        # Structured extra={"extra_fields": {...}}
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_data.update(extra_fields)

        return json.dumps(log_data, default=str)


class RequestLogger:
    """
    Logger wrapper that takes structured fields as keyword arguments.

    Usage:
        log = get_structured_logger(__name__)
        log.info("Schema inferred", kind="object", properties=4)
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _log(self, level: int, msg: str, **kwargs):
        if not self.logger.isEnabledFor(level):
            return
        extra_fields = dict(kwargs)
        request_id = request_id_ctx.get()
        if request_id:
            extra_fields["request_id"] = request_id
        self.logger.log(level, msg, extra={"extra_fields": extra_fields})

    def debug(self, msg: str, **kwargs):
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs):
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs):
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs):
        self._log(logging.ERROR, msg, **kwargs)


class PerformanceTracker:
    """
    Context manager that logs how long an operation took.

    Usage:
        with PerformanceTracker("analyze_json", logger, size_bytes=len(text)):
            result = analyze(text)

    Failures are logged at ERROR with the exception type and are
    re-raised unchanged.
    """

    def __init__(
        self,
        operation: str,
        logger: logging.Logger,
        log_level: int = logging.INFO,
        **extra_fields,
    ):
        self.operation = operation
        self.logger = logger
        self.log_level = log_level
        self.extra_fields = extra_fields
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def _fields(self, **more) -> Dict[str, Any]:
        fields = {"operation": self.operation, **self.extra_fields, **more}
        request_id = request_id_ctx.get()
        if request_id:
            fields["request_id"] = request_id
        return fields

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(
            f"Starting operation: {self.operation}",
            extra={"extra_fields": self._fields()},
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = round(
            (time.perf_counter() - self.start_time) * 1000, 2)

        if exc_type:
            self.logger.error(
                f"Operation failed: {self.operation}",
                extra={"extra_fields": self._fields(
                    duration_ms=self.duration_ms,
                    error=str(exc_val),
                    error_type=exc_type.__name__,
                )},
            )
        else:
            self.logger.log(
                self.log_level,
                f"Operation completed: {self.operation}",
                extra={"extra_fields": self._fields(
                    duration_ms=self.duration_ms)},
            )
        return False


def setup_logging(log_level: str = "INFO", json_format: bool = True):
    """
    Configure root logging.

    Args:
        log_level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit JSON lines if True, plain text otherwise
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set the request id for the current context, generating one if needed."""
    if request_id is None:
        request_id = str(uuid.uuid4())
    request_id_ctx.set(request_id)
    return request_id


def get_request_id() -> Optional[str]:
    return request_id_ctx.get()


def clear_request_id():
    request_id_ctx.set(None)


def get_structured_logger(name: str) -> RequestLogger:
    return RequestLogger(logging.getLogger(name))
