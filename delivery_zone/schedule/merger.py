"""
Window Merger Module
====================

Fuses delivery windows contributed by several zones for one weekday.

Algorithm (single sweep):
    1. flatten every zone's intervals for the day
    2. sort ascending by start
    3. keep one open interval; the next one extends it when
       next.start <= open.end (touching counts), otherwise the open
       interval is emitted and the next one becomes open
    4. emit the last open interval

The result is sorted, gap-preserving and has no two intervals that overlap
or touch, whatever order the inputs came in. Running it on its own output
returns the same list.
"""

from typing import Any, Iterable, List, Optional, Sequence

from delivery_zone.logging import LogEvent, StructuredLogger, create_logger
from delivery_zone.schedule.windows import TimeInterval

_logger = create_logger("windows")


def _flatten(per_zone_windows: Iterable[Optional[Sequence[Any]]]) -> List[TimeInterval]:
    intervals = []
    for zone_windows in per_zone_windows:
        if not zone_windows:
            continue
        intervals.extend(TimeInterval.from_value(window) for window in zone_windows)
    return intervals


class WindowMerger:
    """
    Stateless interval merger.

    Usage:
        merged = WindowMerger().merge_windows([zone_a_monday, zone_b_monday])
    """

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self._logger = logger or _logger

    def merge_windows(
        self,
        per_zone_windows_for_day: Iterable[Optional[Sequence[Any]]]
    ) -> List[TimeInterval]:
        """
        Merge intervals from all contributing zones into a minimal list.

        Args:
            per_zone_windows_for_day: One interval list per zone (TimeInterval
                or {"start", "end"} mappings); None/empty lists allowed

        Returns:
            Sorted non-overlapping, non-touching intervals; empty when no zone
            has a window that day

        Raises:
            MalformedInterval: An input pair is unparsable or start >= end
        """
        intervals = sorted(_flatten(per_zone_windows_for_day), key=lambda w: w.start_minutes)
        if not intervals:
            return []

        merged = []
        open_start, open_end = intervals[0].start_minutes, intervals[0].end_minutes

        for interval in intervals[1:]:
            if interval.start_minutes <= open_end:
                open_end = max(open_end, interval.end_minutes)
            else:
                merged.append(TimeInterval.from_minutes(open_start, open_end))
                open_start, open_end = interval.start_minutes, interval.end_minutes

        merged.append(TimeInterval.from_minutes(open_start, open_end))

        self._logger.debug(
            event=LogEvent.WINDOWS_MERGED,
            message=f"Fused {len(intervals)} window(s) into {len(merged)}",
            metadata={'windows': [w.to_dict() for w in merged]},
        )
        return merged

    @staticmethod
    def distinct_windows(
        per_zone_windows_for_day: Iterable[Optional[Sequence[Any]]]
    ) -> List[TimeInterval]:
        """
        Every distinct window, sorted by start, NOT fused.

        Duplicates (same start and end, however they were spelled) collapse
        into one entry; overlapping but different windows are all kept.
        """
        unique = {}
        for interval in _flatten(per_zone_windows_for_day):
            key = (interval.start_minutes, interval.end_minutes)
            unique.setdefault(key, TimeInterval.from_minutes(*key))

        return [unique[key] for key in sorted(unique)]
