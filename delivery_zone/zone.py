"""
Zone Record Module
==================

Bounded Context: Operator-defined delivery areas.

A Zone is handed to the engine as part of an in-memory snapshot on every
call. The engine never caches or mutates one.

Design:
- Frozen dataclass, validated at construction (fail fast on save)
- Geometry is always a normalized Polygon/MultiPolygon
- Windows keyed by lowercase weekday, each day a tuple of TimeInterval
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from delivery_zone.errors import InvalidGeometryKind, MalformedInterval
from delivery_zone.geometry import (
    GeometryNormalizer,
    MultiPolygonGeometry,
    PolygonGeometry,
    ZoneGeometry,
)
from delivery_zone.schedule import TimeInterval, Weekday

WindowMap = Dict[str, Tuple[TimeInterval, ...]]


def _coerce_windows(windows: Optional[Mapping[Any, Any]]) -> WindowMap:
    """Normalize weekday keys and coerce every entry to TimeInterval."""
    if windows is None:
        return {}
    if not isinstance(windows, Mapping):
        raise MalformedInterval(windows, "windows must map weekday names to interval lists")

    coerced: WindowMap = {}
    for day, entries in windows.items():
        key = Weekday.parse(day).value
        if entries is None:
            entries = []
        if isinstance(entries, (str, bytes, Mapping)):
            raise MalformedInterval(entries, f"windows for {key} must be a list")
        coerced[key] = coerced.get(key, ()) + tuple(TimeInterval.from_value(entry) for entry in entries)
    return coerced


@dataclass(frozen=True)
class Zone:
    """
    Immutable delivery zone.

    Attributes:
        id: Opaque identifier, stable across edits
        name: Display label (non-empty)
        geometry: Normalized Polygon or MultiPolygon
        windows: {weekday: (TimeInterval, ...)}; days without windows may be absent
        active: Inactive zones are skipped by eligibility, not by overlap checks

    Raises:
        ValueError: Empty id/name, unknown weekday key, or non-bool active
        InvalidGeometryKind: geometry is not a normalized shape
        MalformedInterval: A window is unparsable or has start >= end
    """

    id: str
    name: str
    geometry: ZoneGeometry
    windows: WindowMap = field(default_factory=dict)
    active: bool = True

    def __post_init__(self):
        """Validate invariants and canonicalize windows."""
        if not str(self.id).strip():
            raise ValueError("Zone id cannot be empty")
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError(f"Zone '{self.id}' name cannot be empty")
        if not isinstance(self.geometry, (PolygonGeometry, MultiPolygonGeometry)):
            raise InvalidGeometryKind(
                getattr(self.geometry, "kind", None),
                f"zone '{self.id}' geometry must be normalized first"
            )

        if not isinstance(self.active, bool):
            raise ValueError(f"Zone '{self.id}' active must be a boolean, got {self.active!r}")

        object.__setattr__(self, 'id', str(self.id))
        object.__setattr__(self, 'windows', _coerce_windows(self.windows))

    def windows_for(self, day: Union[str, Weekday]) -> Tuple[TimeInterval, ...]:
        """Windows configured for a weekday (empty tuple if none)."""
        return self.windows.get(Weekday.parse(day).value, ())

    @classmethod
    def from_dict(
        cls,
        record: Mapping[str, Any],
        normalizer: Optional[GeometryNormalizer] = None
    ) -> "Zone":
        """
        Build a Zone from a persistence record.

        Example record:
            {
                "id": 12,
                "name": "Downtown",
                "geojson": {"type": "Feature", "geometry": {...}},
                "windows": {"monday": [{"start": "11:00", "end": "13:00"}]},
                "active": true
            }

        Notes:
            - id is coerced to string
            - geometry is read from "geometry" or "geojson" and normalized
            - null windows become {}
            - active defaults to True
        """
        try:
            raw_id = record["id"]
            name = record["name"]
        except KeyError as e:
            raise ValueError(f"Missing required zone field: {e}") from e

        geometry = record.get("geometry")
        if geometry is None:
            geometry = record.get("geojson")
        if not isinstance(geometry, (PolygonGeometry, MultiPolygonGeometry)):
            geometry = (normalizer or GeometryNormalizer()).normalize(geometry)

        return cls(
            id=str(raw_id),
            name=name,
            geometry=geometry,
            windows=record.get("windows") or {},
            active=record.get("active", True),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible record."""
        return {
            "id": self.id,
            "name": self.name,
            "geometry": self.geometry.to_geojson(),
            "windows": {
                day: [interval.to_dict() for interval in intervals]
                for day, intervals in self.windows.items()
            },
            "active": self.active,
        }
