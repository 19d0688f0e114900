"""
Schedule Layer
==============

Bounded Context: Recurring weekly delivery windows.

Responsibilities:
- Weekday keys and date -> weekday mapping
- Time interval validation ("HH:MM", start < end)
- Window merging across zones
"""

from delivery_zone.schedule.windows import (
    Weekday,
    WEEKDAYS,
    TimeInterval,
    parse_time,
    format_time,
)
from delivery_zone.schedule.merger import WindowMerger

__all__ = [
    "Weekday",
    "WEEKDAYS",
    "TimeInterval",
    "parse_time",
    "format_time",
    "WindowMerger",
]
