"""
Geometric Shapes Module
========================

Pure geometric representations - NO state, NO side effects.

Design:
- Immutable shapes (frozen dataclass pattern)
- Tagged variant: every shape carries a GeometryKind, nothing else exists
  downstream of the normalizer
- Source coordinates kept verbatim, ring arrays precomputed for containment
- Even-odd ray casting per ring (numpy, vectorized over edges)
- shapely conversion for area predicates (overlap, union)

Coordinates are (longitude, latitude) pairs, WGS-84, longitude first.
"""

import math
import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Sequence, Tuple, Union

from shapely.geometry import shape as shapely_shape
from shapely.geometry.base import BaseGeometry


class GeometryKind(str, Enum):
    """Supported zone geometry kinds (GeoJSON type names)."""
    POLYGON = "Polygon"
    MULTI_POLYGON = "MultiPolygon"


@dataclass(frozen=True)
class GeoPoint:
    """
    Immutable geocoded point.

    Attributes:
        lon: Longitude in degrees, [-180, 180]
        lat: Latitude in degrees, [-90, 90]
    """

    lon: float
    lat: float

    def __post_init__(self):
        """Validate coordinate ranges."""
        if not (math.isfinite(self.lon) and math.isfinite(self.lat)):
            raise ValueError(f"GeoPoint coordinates must be finite, got ({self.lon}, {self.lat})")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"Longitude must be in [-180, 180], got {self.lon}")
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude must be in [-90, 90], got {self.lat}")

    @classmethod
    def from_value(cls, value: Any) -> "GeoPoint":
        """
        Coerce a point-like value.

        Accepts a GeoPoint, a (lon, lat) pair, or a GeoJSON Point mapping
        ({"type": "Point", "coordinates": [lon, lat]}).

        Raises:
            ValueError: If the value is not a point
        """
        if isinstance(value, GeoPoint):
            return value

        coords = value
        if isinstance(value, dict):
            if value.get("type") != "Point":
                raise ValueError(f"Expected GeoJSON Point, got type {value.get('type')!r}")
            coords = value.get("coordinates")

        try:
            lon, lat = coords[0], coords[1]
            return cls(lon=float(lon), lat=float(lat))
        except (TypeError, IndexError, KeyError) as e:
            raise ValueError(f"Invalid point {value!r}: {e}") from e

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lon, self.lat)


def _ring_array(ring: Any) -> np.ndarray:
    """Convert one ring to an Nx2 float array (extra ordinates dropped)."""
    arr = np.asarray(ring, dtype=float)
    if arr.ndim != 2 or arr.shape[0] == 0 or arr.shape[1] < 2:
        raise ValueError(f"Ring must be a non-empty sequence of coordinate pairs, got shape {arr.shape}")
    arr = arr[:, :2].copy()
    arr.flags.writeable = False
    return arr


def ring_contains(ring: np.ndarray, x: float, y: float) -> bool:
    """
    Even-odd ray casting test of (x, y) against a single ring.

    A horizontal ray is cast towards +x; the point is inside when it crosses
    an odd number of edges. Points exactly on an edge get whatever answer the
    crossing count gives.
    """
    xi, yi = ring[:, 0], ring[:, 1]
    xj, yj = np.roll(xi, 1), np.roll(yi, 1)

    straddles = (yi > y) != (yj > y)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_at_y = (xj - xi) * (y - yi) / (yj - yi) + xi

    crossings = np.count_nonzero(straddles & (x < x_at_y))
    return bool(crossings % 2)


@dataclass(frozen=True)
class PolygonGeometry:
    """
    Immutable Polygon: one outer ring, optional hole rings.

    Attributes:
        coordinates: GeoJSON polygon coordinates, kept exactly as supplied

    Raises:
        ValueError: If the structure is not a list of rings of coordinate pairs
    """

    coordinates: Sequence

    kind = GeometryKind.POLYGON

    def __post_init__(self):
        """Precompute ring arrays."""
        if isinstance(self.coordinates, (str, bytes)) or not isinstance(self.coordinates, Sequence):
            raise ValueError("Polygon coordinates must be a sequence of rings")
        if len(self.coordinates) == 0:
            raise ValueError("Polygon must have an outer ring")

        rings = tuple(_ring_array(ring) for ring in self.coordinates)
        object.__setattr__(self, '_rings', rings)

    @property
    def exterior(self) -> np.ndarray:
        return self._rings[0]

    @property
    def holes(self) -> Tuple[np.ndarray, ...]:
        return self._rings[1:]

    def contains_point(self, point: GeoPoint) -> bool:
        """Inside the outer ring and not inside any hole."""
        x, y = point.lon, point.lat
        if not ring_contains(self.exterior, x, y):
            return False
        return not any(ring_contains(hole, x, y) for hole in self.holes)

    def to_geojson(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "coordinates": self.coordinates}

    def to_shapely(self) -> BaseGeometry:
        return shapely_shape(self.to_geojson())

    @property
    def area(self) -> float:
        """Planar area in squared coordinate units."""
        return float(self.to_shapely().area)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_lon, min_lat, max_lon, max_lat) of the outer ring."""
        lons, lats = self.exterior[:, 0], self.exterior[:, 1]
        return (float(lons.min()), float(lats.min()), float(lons.max()), float(lats.max()))


@dataclass(frozen=True)
class MultiPolygonGeometry:
    """
    Immutable MultiPolygon: ordered list of polygons.

    Attributes:
        coordinates: GeoJSON multipolygon coordinates, kept exactly as supplied
    """

    coordinates: Sequence

    kind = GeometryKind.MULTI_POLYGON

    def __post_init__(self):
        """Build member polygons."""
        if isinstance(self.coordinates, (str, bytes)) or not isinstance(self.coordinates, Sequence):
            raise ValueError("MultiPolygon coordinates must be a sequence of polygons")
        if len(self.coordinates) == 0:
            raise ValueError("MultiPolygon must have at least one polygon")

        polygons = tuple(PolygonGeometry(coordinates=poly) for poly in self.coordinates)
        object.__setattr__(self, '_polygons', polygons)

    @property
    def polygons(self) -> Tuple[PolygonGeometry, ...]:
        return self._polygons

    def contains_point(self, point: GeoPoint) -> bool:
        """Contained in any member polygon."""
        return any(polygon.contains_point(point) for polygon in self._polygons)

    def to_geojson(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "coordinates": self.coordinates}

    def to_shapely(self) -> BaseGeometry:
        return shapely_shape(self.to_geojson())

    @property
    def area(self) -> float:
        return float(self.to_shapely().area)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        boxes = np.array([polygon.bounds for polygon in self._polygons])
        return (
            float(boxes[:, 0].min()),
            float(boxes[:, 1].min()),
            float(boxes[:, 2].max()),
            float(boxes[:, 3].max()),
        )


ZoneGeometry = Union[PolygonGeometry, MultiPolygonGeometry]
