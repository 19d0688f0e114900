"""
Zone Merger Module
==================

Operator-invoked consolidation of two zone shapes into one.

The union covers everything either input covers. A simply connected result
comes back as a Polygon, disjoint pieces as a MultiPolygon. Nothing runs
automatically: the admin layer calls merge() after the overlap detector has
flagged a conflict and the operator chose to consolidate.
"""

from typing import Optional

from shapely.errors import GEOSException
from shapely.geometry import MultiPolygon, Polygon, mapping
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from delivery_zone.errors import ZoneMergeError
from delivery_zone.geometry.normalizer import GeometryNormalizer
from delivery_zone.geometry.shapes import ZoneGeometry
from delivery_zone.logging import LogEvent, StructuredLogger, create_logger

_logger = create_logger("merger")


def _polygonal(geom: BaseGeometry) -> BaseGeometry:
    """
    Drop lower-dimensional leftovers from a union result.

    Unions of shapes that only touch can come back as a GeometryCollection
    holding lines or points beside the polygons.
    """
    if isinstance(geom, (Polygon, MultiPolygon)):
        return geom

    parts = [part for part in getattr(geom, "geoms", []) if isinstance(part, (Polygon, MultiPolygon))]
    polygons = []
    for part in parts:
        polygons.extend(part.geoms if isinstance(part, MultiPolygon) else [part])

    if len(polygons) == 1:
        return polygons[0]
    return MultiPolygon(polygons)


class ZoneMerger:
    """
    Geometric union of two zone shapes.

    Usage:
        merged = ZoneMerger().merge(zone_a.geometry, zone_b.geometry)
    """

    def __init__(
        self,
        normalizer: Optional[GeometryNormalizer] = None,
        logger: Optional[StructuredLogger] = None
    ):
        self._logger = logger or _logger
        self._normalizer = normalizer or GeometryNormalizer(logger=self._logger)

    def merge(self, geometry_a: ZoneGeometry, geometry_b: ZoneGeometry) -> ZoneGeometry:
        """
        Union of two shapes as a single normalized shape.

        Raises:
            ZoneMergeError: GEOS failure, or a union with no polygonal area
        """
        try:
            union = _polygonal(unary_union([geometry_a.to_shapely(), geometry_b.to_shapely()]))
        except (ValueError, GEOSException) as e:
            self._logger.error(
                event=LogEvent.ZONES_MERGE_FAILED,
                message="Could not merge zones",
                exc_info=e,
            )
            raise ZoneMergeError(f"Could not merge zones: {e}") from e

        if union.is_empty:
            self._logger.error(
                event=LogEvent.ZONES_MERGE_FAILED,
                message="Union has no polygonal area",
            )
            raise ZoneMergeError("Could not merge zones: union is empty")

        merged = self._normalizer.normalize(mapping(union))
        self._logger.info(
            event=LogEvent.ZONES_MERGED,
            message=f"Merged {geometry_a.kind.value} + {geometry_b.kind.value} into {merged.kind.value}",
            metadata={'kind': merged.kind.value, 'area': union.area},
        )
        return merged
