"""
Structured Logging for Freehold
===============================

Bounded Context: Observability

JSON-structured logging with a typed event taxonomy.

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from freehold_plots.logging import create_logger, LogEvent
    >>> logger = create_logger("resolver")
    >>> logger.info(
    ...     event=LogEvent.PLOT_RESOLVED,
    ...     message="Resolved plot 12",
    ...     metadata={'plot_id': 12, 'depth': 2}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
