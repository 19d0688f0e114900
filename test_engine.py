"""
Engine Facade + Configuration Tests
===================================

YAML config loading, builder wiring, and the admin upload/merge flow.
"""

import json
import logging
from datetime import datetime, timezone

import pytest

from delivery_zone import (
    EngineBuilder,
    EngineConfig,
    GeometryKind,
    GeometryNormalizer,
    InvalidGeometryKind,
    Weekday,
    Zone,
    ZoneMergeError,
)
from delivery_zone.logging import LogEvent, StructuredLogger, create_logger


def square(x0, y0, x1, y1):
    return {
        "type": "Polygon",
        "coordinates": [[[x0, y0], [x1, y0], [x1, y1], [x0, y1], [x0, y0]]],
    }


def existing_zones():
    normalizer = GeometryNormalizer()
    return [
        Zone(id="1", name="North", geometry=normalizer.normalize(square(0, 0, 2, 2)),
             windows={"monday": [{"start": "09:00", "end": "11:00"}]}),
        Zone(id="2", name="Harbor", geometry=normalizer.normalize(square(10, 10, 12, 12)), active=False),
    ]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def test_config_defaults():
    config = EngineConfig()
    assert config.log_level == "INFO"
    assert config.logging_level == logging.INFO
    assert config.facility_timezone == "America/Los_Angeles"


def test_config_from_yaml(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text('log_level: "debug"\nfacility_timezone: "Europe/Madrid"\n')

    config = EngineConfig.from_yaml(path)
    assert config.log_level == "DEBUG"
    assert config.facility_timezone == "Europe/Madrid"


def test_empty_yaml_uses_defaults(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("")
    assert EngineConfig.from_yaml(path) == EngineConfig()


@pytest.mark.parametrize("data", [
    {"log_level": "LOUD"},
    {"facility_timezone": "Mars/Olympus_Mons"},
    {"facility_timezone": ""},
    {"frame_rate": 25},
])
def test_invalid_config_rejected(data):
    with pytest.raises(ValueError):
        EngineConfig.from_dict(data)


def test_config_file_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        EngineConfig.from_yaml(tmp_path / "missing.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("log_level: [unclosed\n")
    with pytest.raises(ValueError):
        EngineConfig.from_yaml(bad)

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        EngineConfig.from_yaml(listing)


# ---------------------------------------------------------------------------
# Builder + facade
# ---------------------------------------------------------------------------

def test_builder_applies_config_level(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("log_level: WARNING\n")
    logger = StructuredLogger(component="test-engine")

    engine = EngineBuilder().with_config_file(path).with_logger(logger).build()

    assert engine.config.log_level == "WARNING"
    assert logger.logger.level == logging.WARNING
    assert engine.resolver is not None


def test_day_for_uses_facility_timezone():
    engine = EngineBuilder().with_config(EngineConfig(facility_timezone="America/Los_Angeles")).build()
    instant = datetime(2026, 10, 19, 3, 0, tzinfo=timezone.utc)

    assert engine.day_for(instant) is Weekday.SUNDAY


def test_check_upload_flags_overlaps():
    engine = EngineBuilder().build()
    zones = existing_zones()

    check = engine.check_upload({"type": "Feature", "geometry": square(1, 1, 3, 3)}, zones)
    assert check.has_conflicts
    assert check.overlapping_indices == (0,)
    assert check.overlapping_zones[0].name == "North"

    clear = engine.check_upload(json.dumps(square(5, 5, 6, 6)), zones)
    assert not clear.has_conflicts


def test_check_upload_sees_inactive_zones():
    engine = EngineBuilder().build()
    check = engine.check_upload(square(11, 11, 13, 13), existing_zones())

    assert check.overlapping_indices == (1,)


def test_check_upload_rejects_unsupported_kind():
    engine = EngineBuilder().build()
    with pytest.raises(InvalidGeometryKind):
        engine.check_upload({"type": "Point", "coordinates": [0, 0]}, existing_zones())
    with pytest.raises(InvalidGeometryKind):
        engine.check_upload("not geojson", existing_zones())


def test_merge_with_flagged_zone():
    engine = EngineBuilder().build()
    zones = existing_zones()

    check = engine.check_upload(square(1, 1, 3, 3), zones)
    merged = engine.merge_with(check.geometry, zones, check.overlapping_indices[0])

    assert merged.kind is GeometryKind.POLYGON
    assert merged.area == pytest.approx(7.0)
    assert engine.overlaps(merged, zones) == []


def test_check_upload_of_degenerate_ring_reports_no_conflicts():
    engine = EngineBuilder().build()
    payload = json.dumps({"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]})

    check = engine.check_upload(payload, existing_zones())
    assert check.geometry.kind is GeometryKind.POLYGON
    assert not check.has_conflicts


def test_merge_failure_surfaces_as_merge_error():
    engine = EngineBuilder().build()
    normalizer = GeometryNormalizer()
    tiny = normalizer.normalize({"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]})

    with pytest.raises(ZoneMergeError):
        engine.merge(tiny, normalizer.normalize(square(0, 0, 1, 1)))


def test_engine_resolve_end_to_end():
    engine = EngineBuilder().build()
    result = engine.resolve((0.5, 0.5), existing_zones(), "monday")

    assert result.is_deliverable
    assert [w.label() for w in result.windows_for_day] == ["9:00 AM - 11:00 AM"]
    assert [w.to_dict() for w in engine.service_windows(existing_zones(), "monday")] == [
        {"start": "09:00", "end": "11:00"},
    ]


# ---------------------------------------------------------------------------
# Structured logging
# ---------------------------------------------------------------------------

def test_structured_logger_emits_json(caplog):
    logger = create_logger("test-json")
    logger.logger.propagate = True

    with caplog.at_level(logging.INFO, logger="delivery_zone.test-json"):
        logger.info(
            event=LogEvent.OVERLAP_DETECTED,
            message="Candidate overlaps 1 zone(s)",
            metadata={'indices': [0]},
        )
        logger.debug(event=LogEvent.WINDOWS_MERGED, message="dropped at INFO")

    records = [json.loads(r.getMessage()) for r in caplog.records if r.name == "delivery_zone.test-json"]
    assert len(records) == 1
    assert records[0]["event"] == "overlap.detected"
    assert records[0]["component"] == "test-json"
    assert records[0]["metadata"] == {"indices": [0]}
