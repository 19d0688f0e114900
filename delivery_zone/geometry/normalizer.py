"""
Geometry Normalizer Module
==========================

Gate between uploaded GeoJSON and the rest of the engine.

Accepted envelopes:
- FeatureCollection -> first feature
- GeometryCollection -> first geometry
- Feature -> its geometry
- bare geometry

Only Polygon and MultiPolygon survive. Later collection members are ignored,
callers are told a single shape is supported. Rings are NOT repaired: an
unclosed or self-intersecting ring passes through as supplied.
"""

import json
from typing import Any, Optional

from delivery_zone.errors import InvalidGeometryKind
from delivery_zone.geometry.shapes import (
    GeometryKind,
    MultiPolygonGeometry,
    PolygonGeometry,
    ZoneGeometry,
)
from delivery_zone.logging import LogEvent, StructuredLogger, create_logger

_COLLECTION_MEMBERS = {
    "FeatureCollection": "features",
    "GeometryCollection": "geometries",
}

_logger = create_logger("normalizer")


class GeometryNormalizer:
    """
    Stateless validator for uploaded zone shapes.

    Usage:
        normalizer = GeometryNormalizer()
        geometry = normalizer.normalize(payload)   # PolygonGeometry | MultiPolygonGeometry
        geometry = normalizer.load(uploaded_text)  # same, from JSON text
    """

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self._logger = logger or _logger

    @staticmethod
    def extract(payload: Any) -> Any:
        """
        Unwrap collection/feature envelopes down to the candidate shape.

        Raises:
            InvalidGeometryKind: Empty collection or non-mapping payload
        """
        candidate = payload
        if not isinstance(candidate, dict):
            raise InvalidGeometryKind(None, f"payload must be a JSON object, got {type(payload).__name__}")

        members_key = _COLLECTION_MEMBERS.get(candidate.get("type"))
        if members_key is not None:
            members = candidate.get(members_key)
            if not isinstance(members, list) or len(members) == 0:
                raise InvalidGeometryKind(candidate.get("type"), "collection has no members")
            candidate = members[0]

        if isinstance(candidate, dict) and candidate.get("type") == "Feature":
            candidate = candidate.get("geometry")

        if not isinstance(candidate, dict):
            raise InvalidGeometryKind(None, "no geometry object found")
        return candidate

    def normalize(self, payload: Any) -> ZoneGeometry:
        """
        Extract the first shape and accept it if it is Polygon/MultiPolygon.

        Returns:
            Shape whose to_geojson() equals the extracted geometry

        Raises:
            InvalidGeometryKind: Any other kind, or malformed structure
        """
        try:
            candidate = self.extract(payload)
            geometry = self._build(candidate)
        except InvalidGeometryKind as e:
            self._logger.warning(
                event=LogEvent.GEOMETRY_REJECTED,
                message="Uploaded geometry rejected",
                metadata={'kind': e.kind},
                exc_info=e,
            )
            raise

        self._logger.debug(
            event=LogEvent.GEOMETRY_NORMALIZED,
            message=f"Accepted {geometry.kind.value}",
            metadata={'kind': geometry.kind.value},
        )
        return geometry

    def load(self, text: str) -> ZoneGeometry:
        """
        Parse an uploaded GeoJSON document and normalize it.

        Raises:
            InvalidGeometryKind: Text is not JSON, or normalize() rejects it
        """
        try:
            payload = json.loads(text)
        except (TypeError, ValueError) as e:
            error = InvalidGeometryKind(None, f"invalid GeoJSON text: {e}")
            self._logger.warning(
                event=LogEvent.GEOMETRY_REJECTED,
                message="Uploaded document is not valid JSON",
                exc_info=error,
            )
            raise error from e
        return self.normalize(payload)

    @staticmethod
    def _build(candidate: dict) -> ZoneGeometry:
        kind = candidate.get("type")
        coordinates = candidate.get("coordinates")

        try:
            if kind == GeometryKind.POLYGON.value:
                return PolygonGeometry(coordinates=coordinates)
            if kind == GeometryKind.MULTI_POLYGON.value:
                return MultiPolygonGeometry(coordinates=coordinates)
        except (TypeError, ValueError) as e:
            raise InvalidGeometryKind(kind, f"malformed coordinates: {e}") from e

        raise InvalidGeometryKind(kind)
