"""
Structured JSON Logger
======================

Bounded Context: Observability Infrastructure

Structured logger that emits one JSON object per log line.

Design:
- Wraps Python's logging module (records still propagate to root handlers)
- Typed events (LogEvent enum)
- Contextual metadata (plot_id, world, actor, ...)

Example:
    >>> logger = StructuredLogger(component="resolver")
    >>> logger.warning(
    ...     event=LogEvent.PLOT_PARENT_MISSING,
    ...     message="Parent plot missing in candidate set",
    ...     metadata={'plot_id': 12, 'depth': 3}
    ... )

Output:
    {
        "timestamp": "2026-10-19T15:30:45.123456+00:00",
        "level": "WARNING",
        "component": "resolver",
        "event": "plot.parent_missing",
        "message": "Parent plot missing in candidate set",
        "metadata": {"plot_id": 12, "depth": 3}
    }
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from .events import LogEvent


class StructuredLogger:
    """
    JSON structured logger.

    Attributes:
        component: Component name (e.g., "resolver", "claims")
        logger: Underlying Python logger instance
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None
    ):
        """
        Args:
            component: Component identifier (e.g., "resolver")
            level: Logging level (default: INFO)
            logger_name: Custom logger name (default: freehold.<component>)
        """
        self.component = component
        self.logger_name = logger_name or f"freehold.{component}"
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(level)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def _log(
        self,
        level: str,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[Exception] = None
    ) -> None:
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level,
            'component': self.component,
            'event': event.value,
            'message': message,
        }

        if metadata:
            log_entry['metadata'] = metadata

        if exc_info:
            log_entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info)
            }

        self.logger.log(
            getattr(logging, level),
            json.dumps(log_entry, default=str),
            exc_info=exc_info if level == 'ERROR' else None
        )

    def debug(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        self._log('DEBUG', event, message, metadata)

    def info(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log INFO level message.

        Example:
            >>> logger.info(
            ...     event=LogEvent.CLAIM_SAVED,
            ...     message="Plot saved",
            ...     metadata={'plot_id': 7}
            ... )
        """
        self._log('INFO', event, message, metadata)

    def warning(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        self._log('WARNING', event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[Exception] = None
    ) -> None:
        """
        Log ERROR level message.

        Example:
            >>> try:
            ...     parse_vertices(row['vertices'])
            ... except ValueError as e:
            ...     logger.error(
            ...         event=LogEvent.RECORD_DECODE_ERROR,
            ...         message="Could not decode plot row",
            ...         exc_info=e,
            ...         metadata={'plot_id': 7}
            ...     )
        """
        self._log('ERROR', event, message, metadata, exc_info)

    def set_level(self, level: Union[int, str]) -> None:
        """Change logging level dynamically."""
        self.logger.setLevel(level)


class JSONFormatter(logging.Formatter):
    """Passes through the JSON built by StructuredLogger."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(
    component: str,
    level: Union[int, str] = logging.INFO
) -> StructuredLogger:
    """
    Factory function to create configured StructuredLogger.

    Args:
        component: Component identifier
        level: Logging level, as int or name (e.g. "DEBUG")

    Example:
        >>> logger = create_logger("claims", level="DEBUG")
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    return StructuredLogger(component=component, level=level)
