from __future__ import annotations

import logging

import pytest

from radarcard.core.hass_state import EntityState, HassSnapshot
from radarcard.core.point_builder import ActivityMatch, PointKind, build_points
from radarcard.shared.geodesy import GeoCoordinate
from radarcard.shared.models.card_config import EntityConfig
from radarcard.shared.models.marker import Marker

CENTER = GeoCoordinate(52.520008, 13.404954)


def _state(entity_id: str, lat: object = 52.6, lon: object = 13.5, **attrs: object) -> EntityState:
    attributes = {"latitude": lat, "longitude": lon, **attrs}
    return EntityState(entity_id=entity_id, state="not_home", attributes=attributes)


def _snapshot(*states: EntityState) -> HassSnapshot:
    return HassSnapshot(states={s.entity_id: s for s in states})


def test_entity_point_has_distance_and_azimuth() -> None:
    points = build_points([EntityConfig(entity="device_tracker.a")], _snapshot(_state("device_tracker.a")), CENTER, unit="km")
    assert len(points) == 1
    point = points[0]
    assert point.id == "device_tracker.a"
    assert point.kind is PointKind.ENTITY
    assert point.distance == pytest.approx(10.97, abs=0.2)
    assert 0.0 <= point.azimuth < 360.0


def test_label_prefers_override_then_friendly_name_then_id() -> None:
    states = _snapshot(
        _state("device_tracker.a", friendly_name="Phone A"),
        _state("device_tracker.b", friendly_name="Phone B"),
        _state("device_tracker.c"),
    )
    entities = [
        EntityConfig(entity="device_tracker.a", name="Alice"),
        EntityConfig(entity="device_tracker.b"),
        EntityConfig(entity="device_tracker.c"),
    ]
    labels = [p.label for p in build_points(entities, states, CENTER, unit="km")]
    assert labels == ["Alice", "Phone B", "device_tracker.c"]


@pytest.mark.parametrize(
    "lat,lon",
    [(None, 13.5), (52.6, None), ("52.6", 13.5), (True, 13.5), (float("nan"), 13.5)],
)
def test_unlocated_entities_are_skipped(lat: object, lon: object) -> None:
    states = _snapshot(_state("device_tracker.a", lat=lat, lon=lon))
    assert build_points([EntityConfig(entity="device_tracker.a")], states, CENTER, unit="km") == []


def test_missing_state_is_skipped() -> None:
    assert build_points([EntityConfig(entity="device_tracker.gone")], _snapshot(), CENTER, unit="km") == []


@pytest.mark.parametrize("value,moving", [("Walking", True), ("driving", True), ("Stationary", False), (None, False)])
def test_moving_flag_is_case_insensitive(value: object, moving: bool) -> None:
    states = _snapshot(_state("person.a", activity=value))
    points = build_points([EntityConfig(entity="person.a")], states, CENTER, unit="km")
    assert points[0].is_moving is moving


def test_custom_activity_attribute() -> None:
    states = _snapshot(_state("person.a", motion="Running"))
    activity = ActivityMatch(attribute="motion", moving_values=frozenset({"running"}))
    points = build_points([EntityConfig(entity="person.a")], states, CENTER, unit="km", activity=activity)
    assert points[0].is_moving is True


def test_markers_follow_entities_and_never_move() -> None:
    marker = Marker(id="marker_1", name="Car", latitude=52.52, longitude=13.41, color="#ff0")
    states = _snapshot(_state("person.a", activity="Walking"))
    points = build_points([EntityConfig(entity="person.a")], states, CENTER, unit="km", markers=[marker])
    assert [p.kind for p in points] == [PointKind.ENTITY, PointKind.MARKER]
    assert points[1].label == "Car"
    assert points[1].color == "#ff0"
    assert points[1].is_moving is False


def test_duplicate_ids_keep_the_first(caplog: pytest.LogCaptureFixture) -> None:
    states = _snapshot(_state("person.a"))
    entities = [EntityConfig(entity="person.a", name="first"), EntityConfig(entity="person.a", name="second")]
    with caplog.at_level(logging.WARNING):
        points = build_points(entities, states, CENTER, unit="km")
    assert [p.label for p in points] == ["first"]
    assert "duplicate radar point id person.a" in caplog.text
