"""
Structured logger implementation for dataset namespace operations.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from ...core.interfaces.logger_interface import ILogger

_RESERVED_ATTRIBUTES = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'stack_info', 'taskName',
    'exc_info', 'exc_text', 'message', 'timestamp'
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StructuredLogger(ILogger):
    """Structured logger with JSON formatting and persistent context."""

    def __init__(self, name: str = "zfs_namespace", level: str = "INFO",
                 context: Optional[Dict[str, Any]] = None):
        self.name = name
        self.context: Dict[str, Any] = dict(context or {})
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)

        # Prevent duplicate logs
        self.logger.propagate = False

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.ERROR, message, extra)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.ERROR, message, extra, exc_info=True)

    def add_context(self, key: str, value: Any) -> None:
        """Add persistent context to all future log messages."""
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        self.context.pop(key, None)

    def _log(self, level: int, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False) -> None:
        if not self.logger.isEnabledFor(level):
            return

        merged = dict(self.context)
        if extra:
            merged.update(extra)

        record = self.logger.makeRecord(
            name=self.name,
            level=level,
            fn="",
            lno=0,
            msg=message,
            args=(),
            exc_info=sys.exc_info() if exc_info else None
        )
        for key, value in merged.items():
            setattr(record, key, value)
        record.timestamp = _utcnow().isoformat()

        self.logger.handle(record)


class StructuredFormatter(logging.Formatter):
    """Formats each record as one JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": getattr(record, 'timestamp', _utcnow().isoformat()),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRIBUTES:
                continue
            try:
                json.dumps(value)
                log_entry[key] = value
            except (TypeError, ValueError):
                log_entry[key] = str(value)

        return json.dumps(log_entry, ensure_ascii=False, separators=(',', ':'))


class OperationLogger(StructuredLogger):
    """Logger that tracks one dataset operation at a time with its duration."""

    def __init__(self, name: str = "zfs_namespace", level: str = "INFO"):
        super().__init__(name, level)
        self.operation_type: Optional[str] = None
        self.operation_start_time: Optional[datetime] = None

    def start_operation(self, operation_type: str, **kwargs) -> None:
        self.operation_type = operation_type
        self.operation_start_time = _utcnow()
        self.add_context("operation_type", operation_type)
        self.info(f"Starting operation: {operation_type}", kwargs)

    def complete_operation(self, **kwargs) -> None:
        if self.operation_type and self.operation_start_time:
            self.info(f"Operation completed: {self.operation_type}", {
                "success": True,
                "duration_seconds": self._elapsed(),
                **kwargs
            })
        self._reset()

    def fail_operation(self, error: str, **kwargs) -> None:
        if self.operation_type and self.operation_start_time:
            self.warning(f"Operation failed: {self.operation_type}", {
                "success": False,
                "error": error,
                "duration_seconds": self._elapsed(),
                **kwargs
            })
        self._reset()

    def _elapsed(self) -> float:
        return (_utcnow() - self.operation_start_time).total_seconds()

    def _reset(self) -> None:
        self.remove_context("operation_type")
        self.operation_type = None
        self.operation_start_time = None
