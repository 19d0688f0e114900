"""
Eligibility Resolver Module
===========================

Bounded Context: Order-time delivery eligibility.

Given a geocoded point and the current zone snapshot, decide whether delivery
is possible and which windows apply.

Algorithm:
    1. keep active zones only
    2. ray-cast the point against each zone (outer ring minus holes,
       any member of a MultiPolygon)
    3. matching zones, in snapshot order
    4. none -> not eligible, no windows, no primary zone
    5. otherwise primary zone = first match; windows fused per weekday
       across all matches, for all seven days
    6. eligible whenever something matched, even if the requested day has
       no windows (callers check windows_for_day for that)

Design:
- Pure: same (point, zones, day) -> same result, no state kept between calls
- Never raises: runs live during checkout and must always give an answer.
  Unusable points or zone records are logged and skipped.
- Points exactly on an edge get the ray-casting rule's natural answer
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from delivery_zone.geometry import GeometryNormalizer, GeoPoint
from delivery_zone.logging import LogEvent, StructuredLogger, create_logger
from delivery_zone.schedule import WEEKDAYS, TimeInterval, Weekday, WindowMerger
from delivery_zone.zone import Zone

_logger = create_logger("resolver")


@dataclass(frozen=True)
class EligibilityResult:
    """
    Immutable eligibility verdict.

    Attributes:
        is_eligible: Point lies inside at least one active zone
        matching_zones: Active zones containing the point, snapshot order
        merged_windows: {weekday: fused intervals}; all seven days when
            eligible, empty mapping otherwise
        primary_zone: First matching zone (None when not eligible)
        day: Requested weekday (None if it could not be parsed)
    """

    is_eligible: bool
    matching_zones: Tuple[Zone, ...] = ()
    merged_windows: Dict[str, List[TimeInterval]] = field(default_factory=dict)
    primary_zone: Optional[Zone] = None
    day: Optional[str] = None

    @classmethod
    def not_eligible(cls, day: Optional[str] = None) -> "EligibilityResult":
        return cls(is_eligible=False, day=day)

    @property
    def windows_for_day(self) -> List[TimeInterval]:
        """Merged windows for the requested day."""
        if self.day is None:
            return []
        return list(self.merged_windows.get(self.day, []))

    @property
    def is_deliverable(self) -> bool:
        """Covered AND at least one window on the requested day."""
        return self.is_eligible and bool(self.windows_for_day)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the ordering UI."""
        return {
            "is_eligible": self.is_eligible,
            "matching_zone_ids": [zone.id for zone in self.matching_zones],
            "primary_zone_id": self.primary_zone.id if self.primary_zone else None,
            "day": self.day,
            "merged_windows": {
                day: [interval.to_dict() for interval in intervals]
                for day, intervals in self.merged_windows.items()
            },
        }


class EligibilityResolver:
    """
    Point + zone snapshot -> EligibilityResult.

    Usage:
        resolver = EligibilityResolver()
        result = resolver.resolve((-122.41, 37.77), zones, "monday")
        if result.is_eligible and not result.windows_for_day:
            ...  # covered, but no delivery that day
    """

    def __init__(
        self,
        window_merger: Optional[WindowMerger] = None,
        normalizer: Optional[GeometryNormalizer] = None,
        logger: Optional[StructuredLogger] = None
    ):
        self._logger = logger or _logger
        self._window_merger = window_merger or WindowMerger(logger=self._logger)
        self._normalizer = normalizer or GeometryNormalizer(logger=self._logger)

    def resolve(
        self,
        point: Any,
        zones: Optional[Iterable[Any]],
        day: Union[str, Weekday, None] = None
    ) -> EligibilityResult:
        """
        Resolve delivery eligibility for a point.

        Args:
            point: GeoPoint, (lon, lat) pair, or GeoJSON Point
            zones: Zone records (Zone or persistence mappings); None = empty
            day: Target weekday for windows_for_day

        Returns:
            EligibilityResult (never raises)
        """
        day_key = self._day_key(day)
        geo_point = self._point(point)
        if geo_point is None:
            return EligibilityResult.not_eligible(day_key)

        matching = tuple(self._matching_zones(geo_point, zones))
        if not matching:
            self._logger.debug(
                event=LogEvent.ELIGIBILITY_RESOLVED,
                message="Point outside every active zone",
                metadata={'point': geo_point.as_tuple(), 'day': day_key},
            )
            return EligibilityResult.not_eligible(day_key)

        merged_windows = {
            weekday: self._window_merger.merge_windows(
                zone.windows_for(weekday) for zone in matching
            )
            for weekday in WEEKDAYS
        }

        result = EligibilityResult(
            is_eligible=True,
            matching_zones=matching,
            merged_windows=merged_windows,
            primary_zone=matching[0],
            day=day_key,
        )
        self._logger.debug(
            event=LogEvent.ELIGIBILITY_RESOLVED,
            message=f"Point covered by {len(matching)} zone(s)",
            metadata={
                'point': geo_point.as_tuple(),
                'zone_ids': [zone.id for zone in matching],
                'day': day_key,
                'windows': len(result.windows_for_day),
            },
        )
        return result

    def first_match(self, point: Any, zones: Optional[Iterable[Any]]) -> Optional[Zone]:
        """First active zone containing the point, or None."""
        geo_point = self._point(point)
        if geo_point is None:
            return None
        return next(iter(self._matching_zones(geo_point, zones)), None)

    def service_windows(
        self,
        zones: Optional[Iterable[Any]],
        day: Union[str, Weekday]
    ) -> List[TimeInterval]:
        """
        Every distinct window any active zone offers on a day.

        Sorted by start, duplicates removed, overlapping windows NOT fused:
        this is the list shown before an address is known.
        """
        day_key = self._day_key(day)
        if day_key is None:
            return []
        active = [zone for zone in self._snapshot(zones) if zone.active]
        return self._window_merger.distinct_windows(zone.windows_for(day_key) for zone in active)

    def _matching_zones(self, point: GeoPoint, zones: Optional[Iterable[Any]]):
        for zone in self._snapshot(zones):
            if zone.active and zone.geometry.contains_point(point):
                yield zone

    def _snapshot(self, zones: Optional[Iterable[Any]]) -> List[Zone]:
        """Coerce the snapshot to Zone records, skipping unusable entries."""
        try:
            records = list(zones or ())
        except TypeError as e:
            self._logger.warning(
                event=LogEvent.ZONE_SKIPPED,
                message="Zone snapshot is not a collection",
                metadata={'zones': type(zones).__name__},
                exc_info=e,
            )
            return []

        snapshot = []
        for idx, zone in enumerate(records):
            if isinstance(zone, Zone):
                snapshot.append(zone)
                continue
            try:
                snapshot.append(Zone.from_dict(zone, normalizer=self._normalizer))
            except (ValueError, TypeError, AttributeError) as e:
                self._logger.warning(
                    event=LogEvent.ZONE_SKIPPED,
                    message="Zone record could not be used for eligibility",
                    metadata={'index': idx},
                    exc_info=e,
                )
        return snapshot

    def _point(self, point: Any) -> Optional[GeoPoint]:
        try:
            return GeoPoint.from_value(point)
        except ValueError as e:
            self._logger.warning(
                event=LogEvent.ELIGIBILITY_RESOLVED,
                message="Unusable point, treating as not eligible",
                metadata={'point': repr(point)},
                exc_info=e,
            )
            return None

    def _day_key(self, day: Union[str, Weekday, None]) -> Optional[str]:
        if day is None:
            return None
        try:
            return Weekday.parse(day).value
        except ValueError as e:
            self._logger.warning(
                event=LogEvent.ELIGIBILITY_RESOLVED,
                message="Unknown weekday requested",
                metadata={'day': repr(day)},
                exc_info=e,
            )
            return None
