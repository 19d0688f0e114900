"""
Zone Engine Module
==================

Bounded Context: Orchestration for the admin and ordering layers.

Design:
- Facade: one object wiring config + logging into every component
- Builder pattern: fluent configuration, validated at build time
- Holds no zone state: every call takes the current snapshot

Flows:
    admin upload   -> check_upload()  (normalize + overlap)
    admin merge    -> merge_with()    (operator-invoked union)
    checkout       -> resolve()       (eligibility + windows)
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from delivery_zone.config import EngineConfig
from delivery_zone.geometry import GeometryNormalizer, OverlapDetector, ZoneGeometry, ZoneMerger
from delivery_zone.logging import LogEvent, StructuredLogger
from delivery_zone.resolver import EligibilityResolver, EligibilityResult
from delivery_zone.schedule import TimeInterval, Weekday, WindowMerger


@dataclass(frozen=True)
class UploadCheck:
    """
    Result of validating an uploaded shape against existing zones.

    Attributes:
        geometry: Normalized candidate shape
        overlapping_indices: Indices of conflicting zones (snapshot order)
        overlapping_zones: The conflicting zones themselves
    """

    geometry: ZoneGeometry
    overlapping_indices: Tuple[int, ...] = ()
    overlapping_zones: Tuple[Any, ...] = ()

    @property
    def has_conflicts(self) -> bool:
        return bool(self.overlapping_indices)


class ZoneEngine:
    """
    Facade over normalizer, detector, merger, and resolver.

    Usage:
        engine = EngineBuilder().with_config_file("engine.yaml").build()
        check = engine.check_upload(uploaded_geojson, zones)
        if check.has_conflicts:
            merged = engine.merge_with(check.geometry, zones, check.overlapping_indices[0])
        result = engine.resolve(point, zones, engine.day_for(datetime.now(timezone.utc)))
    """

    def __init__(self, config: EngineConfig, logger: StructuredLogger):
        self.config = config
        self.logger = logger

        self.normalizer = GeometryNormalizer(logger=logger)
        self.detector = OverlapDetector(logger=logger)
        self.merger = ZoneMerger(normalizer=self.normalizer, logger=logger)
        self.window_merger = WindowMerger(logger=logger)
        self.resolver = EligibilityResolver(
            window_merger=self.window_merger,
            normalizer=self.normalizer,
            logger=logger,
        )

    # ---- admin side -------------------------------------------------------

    def normalize(self, payload: Any) -> ZoneGeometry:
        return self.normalizer.normalize(payload)

    def overlaps(self, candidate: ZoneGeometry, existing_zones: Sequence[Any]) -> List[int]:
        return self.detector.overlaps(candidate, existing_zones)

    def merge(self, geometry_a: ZoneGeometry, geometry_b: ZoneGeometry) -> ZoneGeometry:
        return self.merger.merge(geometry_a, geometry_b)

    def check_upload(self, payload: Any, existing_zones: Sequence[Any]) -> UploadCheck:
        """
        Normalize an uploaded payload and flag conflicts.

        Args:
            payload: Parsed GeoJSON, or raw JSON text as uploaded

        Raises:
            InvalidGeometryKind: Payload rejected by the normalizer
        """
        if isinstance(payload, (str, bytes)):
            geometry = self.normalizer.load(payload)
        else:
            geometry = self.normalizer.normalize(payload)

        indices = self.detector.overlaps(geometry, existing_zones)
        return UploadCheck(
            geometry=geometry,
            overlapping_indices=tuple(indices),
            overlapping_zones=tuple(existing_zones[idx] for idx in indices),
        )

    def merge_with(self, geometry: ZoneGeometry, existing_zones: Sequence[Any], index: int) -> ZoneGeometry:
        """
        Union the candidate with the existing zone at index.

        Raises:
            IndexError: index outside existing_zones
            ZoneMergeError: Union failed
        """
        other = existing_zones[index]
        return self.merger.merge(geometry, getattr(other, "geometry", other))

    # ---- ordering side ----------------------------------------------------

    def resolve(
        self,
        point: Any,
        zones: Optional[Iterable[Any]],
        day: Union[str, Weekday, None] = None
    ) -> EligibilityResult:
        return self.resolver.resolve(point, zones, day)

    def merge_windows(self, per_zone_windows_for_day: Iterable[Any]) -> List[TimeInterval]:
        return self.window_merger.merge_windows(per_zone_windows_for_day)

    def service_windows(self, zones: Optional[Iterable[Any]], day: Union[str, Weekday]) -> List[TimeInterval]:
        return self.resolver.service_windows(zones, day)

    def day_for(self, instant: datetime) -> Weekday:
        """Weekday of an instant in the facility timezone."""
        return Weekday.for_instant(instant, self.config.facility_timezone)


class EngineBuilder:
    """
    Fluent builder for ZoneEngine.

    Example:
        engine = (
            EngineBuilder()
            .with_config(EngineConfig(log_level="DEBUG"))
            .build()
        )
    """

    def __init__(self):
        self._config: Optional[EngineConfig] = None
        self._logger: Optional[StructuredLogger] = None

    def with_config(self, config: EngineConfig) -> "EngineBuilder":
        """Set configuration object."""
        self._config = config
        return self

    def with_config_file(self, yaml_path: Union[str, Path]) -> "EngineBuilder":
        """Load configuration from YAML."""
        self._config = EngineConfig.from_yaml(yaml_path)
        return self

    def with_logger(self, logger: StructuredLogger) -> "EngineBuilder":
        """Inject a logger (its level is set from the config)."""
        self._logger = logger
        return self

    def build(self) -> ZoneEngine:
        """
        Build the engine.

        Defaults: EngineConfig() and a StructuredLogger for component "engine".
        """
        config = self._config or EngineConfig()
        logger = self._logger or StructuredLogger(component="engine", level=config.logging_level)
        logger.set_level(config.logging_level)

        logger.info(
            event=LogEvent.CONFIG_LOADED,
            message="Zone engine configured",
            metadata=config.to_dict(),
        )
        return ZoneEngine(config=config, logger=logger)
