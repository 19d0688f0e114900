"""
Delivery Zone Engine v1.0
=========================

Bounded Context: Delivery-zone geometry and eligibility.

Design Philosophy:
- Separation of Concerns: Geometry, Schedule, Eligibility separated
- Pure computation: every call takes the zone snapshot it works on
- Pragmatismo > Purismo: shapely for area predicates and unions, numpy ray
  casting for point containment

Architecture:

    delivery_zone/
    ├── geometry/          # Shapes + spatial operations (immutable, stateless)
    │   ├── shapes.py      # PolygonGeometry, MultiPolygonGeometry, GeoPoint
    │   ├── normalizer.py  # GeometryNormalizer (upload gate)
    │   ├── detector.py    # OverlapDetector
    │   └── merger.py      # ZoneMerger (union)
    │
    ├── schedule/          # Weekly windows
    │   ├── windows.py     # Weekday, TimeInterval
    │   └── merger.py      # WindowMerger
    │
    ├── zone.py            # Zone record
    ├── resolver.py        # EligibilityResolver, EligibilityResult
    ├── engine.py          # ZoneEngine facade + EngineBuilder
    ├── config.py          # EngineConfig (YAML)
    └── logging/           # Structured JSON logging

Usage:

    # 1. Admin upload: normalize + conflicts
    from delivery_zone import GeometryNormalizer, OverlapDetector, ZoneMerger

    geometry = GeometryNormalizer().normalize(uploaded_geojson)
    conflicts = OverlapDetector().overlaps(geometry, zones)
    if conflicts:
        geometry = ZoneMerger().merge(geometry, zones[conflicts[0]].geometry)

    # 2. Checkout: eligibility + windows
    from delivery_zone import EligibilityResolver

    result = EligibilityResolver().resolve((-122.41, 37.77), zones, "monday")
    result.is_eligible, result.primary_zone, result.windows_for_day

    # 3. Or use the facade
    from delivery_zone import EngineBuilder

    engine = EngineBuilder().with_config_file("engine.yaml").build()
    result = engine.resolve(point, zones, engine.day_for(now))
"""

# Errors
from delivery_zone.errors import (
    ZoneEngineError,
    InvalidGeometryKind,
    MalformedInterval,
    ZoneMergeError,
)

# Geometry Layer
from delivery_zone.geometry import (
    GeometryKind,
    GeoPoint,
    PolygonGeometry,
    MultiPolygonGeometry,
    GeometryNormalizer,
    OverlapDetector,
    ZoneMerger,
)

# Schedule Layer
from delivery_zone.schedule import Weekday, WEEKDAYS, TimeInterval, WindowMerger

# Records + Eligibility
from delivery_zone.zone import Zone
from delivery_zone.resolver import EligibilityResolver, EligibilityResult

# Orchestration
from delivery_zone.config import EngineConfig
from delivery_zone.engine import ZoneEngine, EngineBuilder, UploadCheck

__all__ = [
    # Errors
    "ZoneEngineError",
    "InvalidGeometryKind",
    "MalformedInterval",
    "ZoneMergeError",
    # Geometry
    "GeometryKind",
    "GeoPoint",
    "PolygonGeometry",
    "MultiPolygonGeometry",
    "GeometryNormalizer",
    "OverlapDetector",
    "ZoneMerger",
    # Schedule
    "Weekday",
    "WEEKDAYS",
    "TimeInterval",
    "WindowMerger",
    # Eligibility
    "Zone",
    "EligibilityResolver",
    "EligibilityResult",
    # Orchestration
    "EngineConfig",
    "ZoneEngine",
    "EngineBuilder",
    "UploadCheck",
]

__version__ = "1.0.0"
