"""
Structured Logging for the Delivery Zone Engine
===============================================

Bounded Context: Observability

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from delivery_zone.logging import create_logger, LogEvent
    >>> logger = create_logger("resolver")
    >>> logger.info(
    ...     event=LogEvent.ELIGIBILITY_RESOLVED,
    ...     message="Point covered by 1 zone(s)",
    ...     metadata={'zone_ids': ['4']}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
