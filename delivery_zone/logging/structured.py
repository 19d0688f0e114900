"""
Structured JSON Logger
======================

Bounded Context: Observability Infrastructure

Design:
- One JSON object per record (parseable by ELK, CloudWatch, Loki)
- Typed events (LogEvent enum)
- Wraps Python's logging module, so handlers/levels stay configurable

Output:
    {
        "timestamp": "2026-10-17T15:30:45.123456+00:00",
        "level": "DEBUG",
        "component": "resolver",
        "event": "eligibility.resolved",
        "message": "Point covered by 2 zone(s)",
        "metadata": {"zone_ids": ["3", "7"], "day": "monday"}
    }
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from .events import LogEvent

LOGGER_PREFIX = "delivery_zone"


class StructuredLogger:
    """
    JSON structured logger for the zone engine.

    Attributes:
        component: Component name (e.g., "resolver", "normalizer")
        logger: Underlying Python logger instance

    Example:
        >>> logger = StructuredLogger("detector")
        >>> logger.info(
        ...     event=LogEvent.OVERLAP_DETECTED,
        ...     message="Candidate overlaps 1 zone(s)",
        ...     metadata={'indices': [2]}
        ... )
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
            logger_name: Custom logger name (default: delivery_zone.<component>)
        """
        self.component = component
        self.logger_name = logger_name or f"{LOGGER_PREFIX}.{component}"
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(level)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def _log(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        # Skip building the payload for records that would be dropped
        if not self.logger.isEnabledFor(level):
            return

        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': logging.getLevelName(level),
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

        self.logger.log(level, json.dumps(log_entry, default=str))

    def debug(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log DEBUG level message (per-call results)."""
        self._log(logging.DEBUG, event, message, metadata)

    def info(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log INFO level message."""
        self._log(logging.INFO, event, message, metadata)

    def warning(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Log WARNING level message.

        Example:
            >>> logger.warning(
            ...     event=LogEvent.ZONE_SKIPPED,
            ...     message="Zone geometry could not be evaluated",
            ...     metadata={'zone_id': '12'}
            ... )
        """
        self._log(logging.WARNING, event, message, metadata, exc_info)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """Log ERROR level message."""
        self._log(logging.ERROR, event, message, metadata, exc_info)

    def set_level(self, level: int) -> None:
        """Change logging level dynamically."""
        self.logger.setLevel(level)


class JSONFormatter(logging.Formatter):
    """Pass-through formatter: StructuredLogger already emits JSON."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(
    component: str,
    level: int = logging.INFO
) -> StructuredLogger:
    """
    Factory function to create configured StructuredLogger.

    Example:
        >>> logger = create_logger("resolver", level=logging.DEBUG)
    """
    return StructuredLogger(component=component, level=level)
