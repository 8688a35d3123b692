"""
Structured logging configuration for Opinion Insights.

This module provides JSON structured logging with run context, operation
timings and error details. Components receive a StructuredLogger as their
observability collaborator, so tests can substitute a mock and assert on the
emitted events.
"""

import json
import logging
import logging.config
import time
from typing import Dict, Any, Optional, Union
from datetime import datetime, timezone
from contextlib import contextmanager
from dataclasses import dataclass, asdict


@dataclass
class LogContext:
    """Context information for structured logging."""

    run_id: Optional[str] = None
    url: Optional[str] = None
    article_index: Optional[int] = None
    processing_step: Optional[str] = None
    component: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {k: v for k, v in asdict(self).items() if v is not None}


class StructuredLogger:
    """
    Structured logger with run context.

    Every record is one JSON object: the message, a UTC timestamp, the
    current context (run id, component, URL) and any keyword fields.
    """

    def __init__(self, name: str, context: Optional[LogContext] = None):
        """
        Initialize structured logger.

        Args:
            name: Logger name (typically module name)
            context: Optional context information
        """
        self.logger = logging.getLogger(name)
        self.context = context or LogContext()

    def set_context(self, **kwargs) -> None:
        """Update logging context; unknown keys are ignored."""
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)

    def _emit(self, level: int, message: str, fields: Dict[str, Any]) -> None:
        if not self.logger.isEnabledFor(level):
            return
        record = {
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "context": self.context.to_dict(),
        }
        record.update(fields)
        self.logger.log(level, json.dumps(record, default=str, ensure_ascii=False))

    def debug(self, message: str, **kwargs) -> None:
        self._emit(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._emit(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._emit(logging.WARNING, message, kwargs)

    def error(self, message: str, error: Optional[Exception] = None, **kwargs) -> None:
        """Log an error, attaching the exception type, message and details."""
        if error is not None:
            kwargs["error"] = {
                "type": type(error).__name__,
                "message": str(error),
                "details": getattr(error, 'details', {})
            }
        self._emit(logging.ERROR, message, kwargs)

    @contextmanager
    def timed_operation(self, operation: str, **kwargs):
        """Log the duration of the wrapped block and whether it completed."""
        started = time.perf_counter()
        error = None
        try:
            yield
        except BaseException as e:
            error = e
            raise
        finally:
            duration_ms = int((time.perf_counter() - started) * 1000)
            if error is None:
                self.info(f"Operation {operation} completed", operation=operation,
                          duration_ms=duration_ms, success=True, **kwargs)
            else:
                self.warning(f"Operation {operation} failed", operation=operation,
                             duration_ms=duration_ms, success=False,
                             error=type(error).__name__, **kwargs)

    def log_metrics(self, metrics: Dict[str, Union[int, float, str]], operation: Optional[str] = None) -> None:
        """Log run counters."""
        self.info(
            f"Metrics for {operation or 'operation'}",
            metrics=metrics,
            metric_type="performance"
        )

    def log_http_request(
        self,
        method: str,
        url: str,
        status_code: int,
        duration_ms: int,
        success: bool,
        error: Optional[str] = None,
        **kwargs
    ) -> None:
        """Log one HTTP exchange with its status and timing."""
        self.info(
            f"HTTP {method} {url} -> {status_code}",
            http_method=method,
            http_url=url,
            http_status=status_code,
            duration_ms=duration_ms,
            success=success,
            error=error,
            **kwargs
        )


def configure_logging(log_level: str = "INFO", enable_structured: bool = True) -> None:
    """
    Configure application logging.

    Logs go to stderr; stdout is reserved for the run report.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_structured: Whether to enable structured JSON logging
    """
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "format": "%(message)s"
            },
            "simple": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "structured" if enable_structured else "simple",
                "stream": "ext://sys.stderr"
            }
        },
        "root": {
            "level": log_level,
            "handlers": ["console"]
        },
        "loggers": {
            "selenium": {
                "level": "WARNING"
            },
            "urllib3": {
                "level": "WARNING"
            },
            "requests": {
                "level": "WARNING"
            }
        }
    }

    logging.config.dictConfig(config)


def get_logger(name: str, context: Optional[LogContext] = None) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)
        context: Optional context information

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name, context)
