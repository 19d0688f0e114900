"""
Overlap Detector Module
=======================

Stateless conflict detection between a candidate shape and existing zones.

Overlap = interiors share two-dimensional area AND neither shape contains the
other. Boundary-only contact is not overlap; full containment (including
identical shapes) is not overlap either. This is the DE-9IM "overlaps"
predicate, which shapely evaluates directly and which is symmetric.

Inactive zones are checked too: a disabled zone still occupies its area.
"""

from typing import Any, List, Optional, Sequence

from shapely.errors import GEOSException

from delivery_zone.geometry.shapes import ZoneGeometry
from delivery_zone.logging import LogEvent, StructuredLogger, create_logger

_logger = create_logger("detector")


def _geometry_of(zone: Any) -> Optional[ZoneGeometry]:
    """Zone record or bare shape -> shape."""
    return getattr(zone, "geometry", zone)


class OverlapDetector:
    """
    Pairwise overlap test against a zone collection.

    Usage:
        detector = OverlapDetector()
        conflicts = detector.overlaps(candidate, existing_zones)  # [indices]
    """

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self._logger = logger or _logger

    @staticmethod
    def shapes_overlap(a: ZoneGeometry, b: ZoneGeometry) -> bool:
        """
        Symmetric overlap predicate.

        Raises:
            ValueError / GEOSException: If either shape cannot be built
        """
        return bool(a.to_shapely().overlaps(b.to_shapely()))

    def overlaps(self, candidate: ZoneGeometry, existing_zones: Sequence[Any]) -> List[int]:
        """
        Indices into existing_zones (order preserved) overlapping candidate.

        Args:
            candidate: Normalized shape being uploaded
            existing_zones: Zone records or bare shapes, active or not

        Returns:
            Empty list when there are no conflicts, or when the candidate
            itself cannot be built as a shape
        """
        try:
            candidate_shape = candidate.to_shapely()
        except (ValueError, GEOSException) as e:
            self._logger.warning(
                event=LogEvent.GEOMETRY_REJECTED,
                message="Candidate geometry could not be compared",
                metadata={'kind': getattr(candidate, "kind", None)},
                exc_info=e,
            )
            return []

        indices = []

        for idx, zone in enumerate(existing_zones):
            geometry = _geometry_of(zone)
            if geometry is None:
                continue

            try:
                hit = candidate_shape.overlaps(geometry.to_shapely())
            except (ValueError, GEOSException) as e:
                self._logger.warning(
                    event=LogEvent.ZONE_SKIPPED,
                    message="Existing zone geometry could not be compared",
                    metadata={'index': idx, 'zone_id': getattr(zone, "id", None)},
                    exc_info=e,
                )
                continue

            if hit:
                indices.append(idx)

        if indices:
            self._logger.info(
                event=LogEvent.OVERLAP_DETECTED,
                message=f"Candidate overlaps {len(indices)} zone(s)",
                metadata={'indices': indices},
            )
        return indices
