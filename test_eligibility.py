"""
Eligibility Resolver Tests
==========================

Containment scenarios, multi-zone window merging, primary zone tie-break,
inactive zones, and the never-fail policy.
"""

import pytest

from delivery_zone import (
    EligibilityResolver,
    GeometryNormalizer,
    InvalidGeometryKind,
    MalformedInterval,
    Zone,
    WEEKDAYS,
)

normalizer = GeometryNormalizer()
resolver = EligibilityResolver()


def square(x0, y0, x1, y1):
    return {
        "type": "Polygon",
        "coordinates": [[[x0, y0], [x1, y0], [x1, y1], [x0, y1], [x0, y0]]],
    }


def make_zone(zone_id, shape, windows=None, active=True, name=None):
    return Zone(
        id=zone_id,
        name=name or f"Zone {zone_id}",
        geometry=normalizer.normalize(shape),
        windows=windows or {},
        active=active,
    )


def pairs(intervals):
    return [(i.start, i.end) for i in intervals]


# ---------------------------------------------------------------------------
# Containment
# ---------------------------------------------------------------------------

def test_unit_square_containment():
    zone = make_zone("1", square(0, 0, 1, 1), {"monday": [{"start": "11:00", "end": "13:00"}]})

    inside = resolver.resolve((0.5, 0.5), [zone], "monday")
    assert inside.is_eligible
    assert len(inside.matching_zones) == 1
    assert inside.primary_zone == zone

    outside = resolver.resolve((2, 2), [zone], "monday")
    assert not outside.is_eligible
    assert outside.matching_zones == ()
    assert outside.merged_windows == {}
    assert outside.primary_zone is None


def test_multi_zone_windows_merge_and_primary_is_first():
    zone_a = make_zone("a", square(0, 0, 1, 1), {"monday": [{"start": "09:00", "end": "11:00"}]})
    zone_b = make_zone("b", square(-1, -1, 2, 2), {"monday": [{"start": "10:00", "end": "12:00"}]})

    result = resolver.resolve((0.5, 0.5), [zone_a, zone_b], "monday")
    assert pairs(result.merged_windows["monday"]) == [("09:00", "12:00")]
    assert result.primary_zone is zone_a
    assert [z.id for z in result.matching_zones] == ["a", "b"]

    reversed_result = resolver.resolve((0.5, 0.5), [zone_b, zone_a], "monday")
    assert reversed_result.primary_zone is zone_b
    assert pairs(reversed_result.merged_windows["monday"]) == [("09:00", "12:00")]


def test_merged_windows_cover_every_weekday():
    zone = make_zone("1", square(0, 0, 1, 1), {
        "monday": [{"start": "11:00", "end": "13:00"}],
        "friday": [{"start": "17:00", "end": "19:00"}],
    })
    result = resolver.resolve((0.5, 0.5), [zone], "monday")

    assert set(result.merged_windows) == set(WEEKDAYS)
    assert pairs(result.merged_windows["friday"]) == [("17:00", "19:00")]
    assert result.merged_windows["sunday"] == []


def test_covered_but_no_windows_on_day():
    zone = make_zone("1", square(0, 0, 1, 1), {"monday": [{"start": "11:00", "end": "13:00"}]})
    result = resolver.resolve((0.5, 0.5), [zone], "tuesday")

    assert result.is_eligible
    assert result.windows_for_day == []
    assert not result.is_deliverable


def test_inactive_zones_are_ignored():
    disabled = make_zone("1", square(0, 0, 1, 1), active=False)
    enabled = make_zone("2", square(5, 5, 6, 6))

    assert not resolver.resolve((0.5, 0.5), [disabled, enabled], "monday").is_eligible
    assert resolver.resolve((5.5, 5.5), [disabled, enabled], "monday").primary_zone is enabled


def test_multipolygon_zone_and_holes():
    doughnut = {
        "type": "MultiPolygon",
        "coordinates": [
            [
                [[0, 0], [4, 0], [4, 4], [0, 4], [0, 0]],
                [[1, 1], [3, 1], [3, 3], [1, 3], [1, 1]],
            ],
            square(10, 10, 11, 11)["coordinates"],
        ],
    }
    zone = make_zone("1", doughnut)

    assert resolver.resolve((0.5, 0.5), [zone]).is_eligible
    assert not resolver.resolve((2, 2), [zone]).is_eligible
    assert resolver.resolve((10.5, 10.5), [zone]).is_eligible


def test_resolve_is_deterministic():
    zones = [
        make_zone("a", square(0, 0, 2, 2), {"monday": [{"start": "09:00", "end": "10:00"}]}),
        make_zone("b", square(1, 1, 3, 3), {"monday": [{"start": "12:00", "end": "13:00"}]}),
    ]
    first = resolver.resolve((1.5, 1.5), zones, "monday")
    second = resolver.resolve((1.5, 1.5), zones, "monday")

    assert first == second
    assert first.to_dict() == second.to_dict()
    assert first.to_dict()["merged_windows"]["monday"] == [
        {"start": "09:00", "end": "10:00"},
        {"start": "12:00", "end": "13:00"},
    ]


# ---------------------------------------------------------------------------
# Never-fail policy
# ---------------------------------------------------------------------------

def test_empty_or_missing_collection():
    assert not resolver.resolve((0.5, 0.5), [], "monday").is_eligible
    assert not resolver.resolve((0.5, 0.5), None, "monday").is_eligible
    assert not resolver.resolve((0.5, 0.5), 5, "monday").is_eligible


def test_malformed_records_are_skipped():
    good = {
        "id": 7,
        "name": "Downtown",
        "geojson": {"type": "Feature", "geometry": square(0, 0, 1, 1)},
        "windows": None,
        "active": True,
    }
    zones = [
        {"id": 1, "name": "Pin", "geojson": {"type": "Point", "coordinates": [0.5, 0.5]}},
        {"id": 2, "name": "Bad hours", "geojson": square(0, 0, 1, 1),
         "windows": {"monday": [{"start": "13:00", "end": "12:00"}]}},
        None,
        good,
    ]
    result = resolver.resolve((0.5, 0.5), zones, "monday")

    assert result.is_eligible
    assert result.primary_zone.id == "7"
    assert result.windows_for_day == []


@pytest.mark.parametrize("point", [None, "here", (1,), {"type": "LineString"}, (500, 0)])
def test_unusable_point_is_not_eligible(point):
    zone = make_zone("1", square(0, 0, 1, 1))
    result = resolver.resolve(point, [zone], "monday")

    assert not result.is_eligible
    assert result.day == "monday"


def test_unknown_day_still_resolves():
    zone = make_zone("1", square(0, 0, 1, 1), {"monday": [{"start": "11:00", "end": "13:00"}]})
    result = resolver.resolve((0.5, 0.5), [zone], "someday")

    assert result.is_eligible
    assert result.day is None
    assert result.windows_for_day == []


def test_geojson_point_accepted():
    zone = make_zone("1", square(-123, 37, -122, 38))
    point = {"type": "Point", "coordinates": [-122.4, 37.7]}

    assert resolver.resolve(point, [zone], "Monday").day == "monday"
    assert resolver.first_match(point, [zone]) is zone


# ---------------------------------------------------------------------------
# Supplementary lookups
# ---------------------------------------------------------------------------

def test_first_match_skips_inactive():
    inactive = make_zone("1", square(0, 0, 1, 1), active=False)
    active = make_zone("2", square(0, 0, 2, 2))

    assert resolver.first_match((0.5, 0.5), [inactive, active]) is active
    assert resolver.first_match((5, 5), [inactive, active]) is None


def test_service_windows_list_distinct_windows_of_active_zones():
    zones = [
        make_zone("1", square(0, 0, 1, 1), {"monday": [{"start": "11:00", "end": "13:00"}]}),
        make_zone("2", square(5, 5, 6, 6), {"monday": [
            {"start": "11:00", "end": "13:00"},
            {"start": "12:00", "end": "14:00"},
        ]}),
        make_zone("3", square(8, 8, 9, 9), {"monday": [{"start": "07:00", "end": "08:00"}]}, active=False),
    ]
    windows = resolver.service_windows(zones, "monday")

    assert pairs(windows) == [("11:00", "13:00"), ("12:00", "14:00")]


# ---------------------------------------------------------------------------
# Zone records
# ---------------------------------------------------------------------------

def test_zone_from_dict_round_trip_fields():
    zone = Zone.from_dict({
        "id": 42,
        "name": "Mission",
        "geojson": {"type": "FeatureCollection", "features": [{"type": "Feature", "geometry": square(0, 0, 1, 1)}]},
        "windows": {"Monday": [{"start": "9:00", "end": "10:00"}]},
    })

    assert zone.id == "42"
    assert zone.active is True
    assert pairs(zone.windows_for("monday")) == [("9:00", "10:00")]
    assert zone.windows_for("tuesday") == ()
    assert zone.to_dict()["windows"] == {"monday": [{"start": "09:00", "end": "10:00"}]}
    assert zone.to_dict()["geometry"] == square(0, 0, 1, 1)


def test_zone_validation():
    geometry = normalizer.normalize(square(0, 0, 1, 1))

    with pytest.raises(ValueError):
        Zone(id="1", name="  ", geometry=geometry)
    with pytest.raises(ValueError):
        Zone(id="1", name="A", geometry=geometry, windows={"caturday": []})
    with pytest.raises(MalformedInterval):
        Zone(id="1", name="A", geometry=geometry, windows={"monday": [{"start": "12:00", "end": "11:00"}]})
    with pytest.raises(InvalidGeometryKind):
        Zone(id="1", name="A", geometry=square(0, 0, 1, 1))
    with pytest.raises(InvalidGeometryKind):
        Zone.from_dict({"id": 1, "name": "A", "geojson": None})


@pytest.mark.parametrize("flag", ["false", "true", 0, 1, None])
def test_zone_active_flag_must_be_boolean(flag):
    with pytest.raises(ValueError):
        Zone.from_dict({"id": 1, "name": "A", "geojson": square(0, 0, 1, 1), "active": flag})


def test_record_with_string_active_flag_is_skipped():
    record = {"id": 1, "name": "Off", "geojson": square(0, 0, 1, 1), "active": "false"}
    assert not resolver.resolve((0.5, 0.5), [record], "monday").is_eligible
