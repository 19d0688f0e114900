"""
Delivery Window Types
=====================

Recurring weekly schedule primitives.

Design:
- Weekday: str enum, Sunday-first, lowercase values (the keys zones store)
- TimeInterval: immutable "HH:MM" pair in facility-local 24h time
- Validation at construction, so malformed windows fail on save, not at
  checkout
- No midnight crossing: end must fall on the same calendar day as start
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Tuple
from zoneinfo import ZoneInfo

from delivery_zone.errors import MalformedInterval

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


class Weekday(str, Enum):
    """Weekday keys used in zone window mappings."""
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @classmethod
    def parse(cls, value: Any) -> "Weekday":
        """
        Case-insensitive lookup ("Monday", "monday", Weekday.MONDAY).

        Raises:
            ValueError: Unknown day name
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown weekday: {value!r}. Must be one of {[d.value for d in cls]}"
            ) from None

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        """Weekday of a calendar date."""
        # isoweekday() % 7 puts Sunday at 0, matching enum order
        return _BY_ISO_WEEKDAY[day.isoweekday() % 7]

    @classmethod
    def for_instant(cls, instant: datetime, timezone_name: str) -> "Weekday":
        """
        Weekday of an instant in the facility's timezone.

        Naive datetimes are taken as already facility-local.
        """
        if instant.tzinfo is not None:
            instant = instant.astimezone(ZoneInfo(timezone_name))
        return cls.from_date(instant.date())


_BY_ISO_WEEKDAY = tuple(Weekday)

WEEKDAYS: Tuple[str, ...] = tuple(day.value for day in Weekday)


def parse_time(value: Any) -> int:
    """
    "HH:MM" -> minutes since midnight.

    Raises:
        MalformedInterval: Not a string, wrong shape, or out of range
    """
    if not isinstance(value, str):
        raise MalformedInterval(value, "time must be an 'HH:MM' string")

    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise MalformedInterval(value, "time must look like 'HH:MM'")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise MalformedInterval(value, "time out of range 00:00-23:59")
    return hours * 60 + minutes


def format_time(minutes: int) -> str:
    """Minutes since midnight -> zero-padded "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class TimeInterval:
    """
    Immutable delivery window on one weekday.

    Attributes:
        start: "HH:MM" start time (inclusive)
        end: "HH:MM" end time

    Invariants:
        - both parse as times of day
        - start < end (same calendar day)

    Example:
        >>> TimeInterval(start="09:00", end="11:30").label()
        '9:00 AM - 11:30 AM'
    """

    start: str
    end: str

    def __post_init__(self):
        """Validate and cache minute offsets."""
        start_minutes = parse_time(self.start)
        end_minutes = parse_time(self.end)
        if start_minutes >= end_minutes:
            raise MalformedInterval(
                {"start": self.start, "end": self.end},
                "start must be earlier than end (midnight-crossing windows are not supported)"
            )
        object.__setattr__(self, '_start_minutes', start_minutes)
        object.__setattr__(self, '_end_minutes', end_minutes)

    @property
    def start_minutes(self) -> int:
        return self._start_minutes

    @property
    def end_minutes(self) -> int:
        return self._end_minutes

    @property
    def duration_minutes(self) -> int:
        return self._end_minutes - self._start_minutes

    @classmethod
    def from_minutes(cls, start: int, end: int) -> "TimeInterval":
        """Build from minute offsets; output strings are canonical."""
        return cls(start=format_time(start), end=format_time(end))

    @classmethod
    def from_value(cls, value: Any) -> "TimeInterval":
        """
        Coerce a TimeInterval or a {"start", "end"} mapping.

        Raises:
            MalformedInterval: Missing keys or invalid times
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, dict):
            raise MalformedInterval(value, "window must be an object with 'start' and 'end'")
        try:
            return cls(start=value["start"], end=value["end"])
        except KeyError as e:
            raise MalformedInterval(value, f"missing field {e}") from e

    def to_dict(self) -> Dict[str, str]:
        """Serialize with canonical zero-padded times."""
        return {"start": format_time(self._start_minutes), "end": format_time(self._end_minutes)}

    def label(self) -> str:
        """12-hour display text, e.g. '12:00 PM - 1:30 PM'."""
        return f"{_twelve_hour(self._start_minutes)} - {_twelve_hour(self._end_minutes)}"


def _twelve_hour(minutes: int) -> str:
    hour, minute = divmod(minutes, 60)
    suffix = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"
