"""
Structured logging for the Review Marketplace service.

Every entry carries the service name, environment and the correlation ID of
the request being served. Console output is coloured for development; set
LOG_FORMAT=json for machine-readable lines.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from app.core.config import config
from app.utils.correlation_id import get_correlation_id

LOG_LEVEL = config.log_level.upper()
LOG_FORMAT = config.log_format.lower()

_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname', 'process',
    'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'taskName',
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": config.service_name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for development"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m'
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        line = f"{color}[{timestamp}] {record.levelname}{reset} - {record.getMessage()}"

        correlation_id = getattr(record, "correlationId", None)
        if correlation_id:
            line += f" [{correlation_id}]"
        metadata = getattr(record, "metadata", None)
        if metadata:
            line += f" {json.dumps(metadata, default=str)}"
        return line


class StructuredLogger:
    """Logger facade adding service context and metadata to every entry"""

    def __init__(self, name: str = None):
        self.service_name = config.service_name
        self.environment = config.environment
        self._logger = logging.getLogger(name or self.service_name)
        self._setup_logging()

    def _setup_logging(self):
        self._logger.handlers.clear()
        self._logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
        self._logger.propagate = False

        handler = logging.StreamHandler(sys.stdout)
        if LOG_FORMAT == "json":
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(ConsoleFormatter())
        self._logger.addHandler(handler)

    def _log(
        self,
        level: int,
        message: str,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        extra = {
            "environment": self.environment,
            "correlationId": get_correlation_id(),
        }
        if user_id:
            extra["userId"] = user_id
        if metadata:
            extra["metadata"] = metadata
        self._logger.log(level, message, extra=extra, **kwargs)

    def debug(self, message: str, user_id: Optional[str] = None,
              metadata: Optional[Dict[str, Any]] = None, **kwargs):
        self._log(logging.DEBUG, message, user_id, metadata, **kwargs)

    def info(self, message: str, user_id: Optional[str] = None,
             metadata: Optional[Dict[str, Any]] = None, **kwargs):
        self._log(logging.INFO, message, user_id, metadata, **kwargs)

    def warning(self, message: str, user_id: Optional[str] = None,
                metadata: Optional[Dict[str, Any]] = None, **kwargs):
        self._log(logging.WARNING, message, user_id, metadata, **kwargs)

    def error(
        self,
        message: str,
        user_id: Optional[str] = None,
        error: Optional[Union[str, Exception]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        """Error level logging; `error` is folded into the metadata"""
        if metadata is None:
            metadata = {}

        if error:
            if isinstance(error, Exception):
                metadata["error"] = {
                    "type": type(error).__name__,
                    "message": str(error),
                }
            else:
                metadata["error"] = {"message": str(error)}

        self._log(logging.ERROR, message, user_id, metadata, **kwargs)

    def performance(
        self,
        operation: str,
        duration_ms: int,
        threshold_ms: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Log operation timing, escalating to WARNING above the threshold"""
        metadata = dict(metadata or {})
        metadata.update({
            "operation": operation,
            "durationMs": duration_ms,
            "thresholdMs": threshold_ms,
        })

        level = logging.WARNING if threshold_ms and duration_ms > threshold_ms else logging.INFO
        self._log(level, f"Operation completed: {operation}", metadata=metadata)


logger = StructuredLogger()
