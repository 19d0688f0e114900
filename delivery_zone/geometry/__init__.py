"""
Geometry Layer
==============

Bounded Context: Zone shapes and spatial queries.

Responsibilities:
- Shape representation (immutable, tagged Polygon | MultiPolygon)
- Upload normalization
- Point-in-polygon tests (ray casting)
- Overlap detection and union (shapely)
- NO schedules, NO eligibility policy
"""

from delivery_zone.geometry.shapes import (
    GeometryKind,
    GeoPoint,
    PolygonGeometry,
    MultiPolygonGeometry,
    ZoneGeometry,
)
from delivery_zone.geometry.normalizer import GeometryNormalizer
from delivery_zone.geometry.detector import OverlapDetector
from delivery_zone.geometry.merger import ZoneMerger

__all__ = [
    "GeometryKind",
    "GeoPoint",
    "PolygonGeometry",
    "MultiPolygonGeometry",
    "ZoneGeometry",
    "GeometryNormalizer",
    "OverlapDetector",
    "ZoneMerger",
]
