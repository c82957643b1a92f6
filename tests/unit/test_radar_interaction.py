from __future__ import annotations

import pytest

from radarcard.core.events import INSPECT_ENTITY, CardEvent
from radarcard.core.interaction import (
    RadarInteractionController,
    RadarPointerEvent,
    pick_point,
    position_tooltip,
    tooltip_content,
)
from radarcard.core.point_builder import PointKind, RadarPoint
from radarcard.core.radar_scene import SceneOptions, build_scene
from radarcard.core.radar_view_state import RadarViewState
from radarcard.core.radial_scale import RadialScale
from radarcard.shared.geodesy import GeoCoordinate
from radarcard.shared.models.card_config import parse_card_config
from radarcard.shared.models.marker import Marker

SCALE = RadialScale(max_distance=10.0, chart_radius=90.0)
POINTS = [
    RadarPoint(id="person.a", distance=10.0, azimuth=90.0, label="Alice"),
    RadarPoint(id="marker_1", distance=5.0, azimuth=270.0, label="Car", kind=PointKind.MARKER),
]
SCENE = build_scene(POINTS, SCALE, SceneOptions())


def _config(**extra: object):
    return parse_card_config({"entities": ["person.a"], **extra})


def _run(controller: RadarInteractionController, state: RadarViewState, event: RadarPointerEvent, **kw):
    config = kw.pop("config", _config())
    action = controller.handle_pointer(event, scene=SCENE, config=config)
    return controller.apply_action(state, action, scene=SCENE, config=config, **kw)


@pytest.mark.parametrize(
    "x,y,expected",
    [
        (50.0, 100.0, (62.0, 40.0)),
        (200.0, 100.0, (48.0, 40.0)),
        (50.0, 10.0, (62.0, 22.0)),
        (150.0, 30.0, (0.0, 42.0)),
    ],
)
def test_tooltip_flips_left_in_right_half_and_below_near_top(
    x: float, y: float, expected: tuple[float, float]
) -> None:
    assert position_tooltip(x, y, chart_width=220.0) == expected


def test_tooltip_content_rounds_azimuth() -> None:
    content = tooltip_content(RadarPoint(id="a", distance=0.25, azimuth=359.6, label="A"), "km")
    assert content.label == "A"
    assert content.distance == "250 m"
    assert content.azimuth == "0°"


def test_hover_shows_and_leave_hides_tooltip() -> None:
    controller = RadarInteractionController()
    shown = _run(controller, RadarViewState(), RadarPointerEvent(kind="enter", point_id="person.a", x=200.0, y=110.0))
    assert shown.tooltip.visible is True
    assert shown.tooltip.label == "Alice"
    assert shown.tooltip.distance_text == "10 km"
    assert shown.tooltip.azimuth_text == "90°"
    assert shown.tooltip.left == pytest.approx(48.0)
    hidden = _run(controller, shown, RadarPointerEvent(kind="leave"))
    assert hidden.tooltip.visible is False


def test_focus_anchors_on_the_point() -> None:
    controller = RadarInteractionController()
    state = _run(controller, RadarViewState(), RadarPointerEvent(kind="focus", point_id="person.a"))
    # person.a sits at (200, 110) in chart pixels: right half, so the tooltip goes left.
    assert state.tooltip.left == pytest.approx(200.0 - 12.0 - 140.0)
    assert state.tooltip.top == pytest.approx(110.0 - 12.0 - 48.0)


def test_click_on_entity_emits_inspect_event() -> None:
    events: list[CardEvent] = []
    controller = RadarInteractionController(emit=events.append)
    state = RadarViewState()
    after = _run(controller, state, RadarPointerEvent(kind="click", point_id="person.a"))
    assert after == state
    assert [(e.type, e.detail) for e in events] == [(INSPECT_ENTITY, {"entityId": "person.a"})]


def test_click_respects_points_clickable() -> None:
    events: list[CardEvent] = []
    controller = RadarInteractionController(emit=events.append)
    config = _config(points_clickable=False)
    _run(controller, RadarViewState(), RadarPointerEvent(kind="click", point_id="person.a"), config=config)
    assert events == []
    shown = _run(controller, RadarViewState(), RadarPointerEvent(kind="enter", point_id="person.a", x=1, y=100), config=config)
    assert shown.tooltip.visible is True


def test_click_on_marker_opens_edit_dialog_even_when_not_clickable() -> None:
    events: list[CardEvent] = []
    controller = RadarInteractionController(emit=events.append)
    marker = Marker(id="marker_1", name="Car", latitude=1.0, longitude=2.0, color="#f00")
    state = _run(
        controller,
        RadarViewState(),
        RadarPointerEvent(kind="click", point_id="marker_1"),
        config=_config(points_clickable=False),
        markers={"marker_1": marker},
    )
    assert events == []
    assert state.dialog is not None
    assert state.dialog.mode == "edit"
    assert (state.dialog.marker_id, state.dialog.name, state.dialog.color) == ("marker_1", "Car", "#f00")
    closed = _run(controller, state, RadarPointerEvent(kind="outside_click"))
    assert closed.dialog is None


def test_legend_click_toggles_single_pulse() -> None:
    controller = RadarInteractionController()
    state = _run(controller, RadarViewState(), RadarPointerEvent(kind="legend_click", point_id="person.a"))
    assert state.pulsing_id == "person.a"
    state = _run(controller, state, RadarPointerEvent(kind="legend_click", point_id="marker_1"))
    assert state.pulsing_id == "marker_1"
    state = _run(controller, state, RadarPointerEvent(kind="legend_click", point_id="marker_1"))
    assert state.pulsing_id is None


def test_add_marker_only_with_moving_center() -> None:
    controller = RadarInteractionController()
    fixed = _run(
        controller,
        RadarViewState(),
        RadarPointerEvent(kind="add_marker"),
        config=_config(enable_markers=True),
    )
    assert fixed.dialog is None
    moving = _run(
        controller,
        RadarViewState(),
        RadarPointerEvent(kind="add_marker"),
        config=_config(enable_markers=True, center_mode="moving", center_entity="person.a"),
        center=GeoCoordinate(52.5, 13.4),
    )
    assert moving.dialog is not None
    assert moving.dialog.mode == "add"
    assert (moving.dialog.latitude, moving.dialog.longitude) == (52.5, 13.4)


def test_pick_point_uses_hit_radius() -> None:
    assert pick_point(SCENE, 198.0, 111.0, width=220, height=220) == "person.a"
    assert pick_point(SCENE, 110.0, 110.0, width=220, height=220) is None


def test_click_by_coordinates_resolves_nearest_point() -> None:
    events: list[CardEvent] = []
    controller = RadarInteractionController(emit=events.append)
    _run(controller, RadarViewState(), RadarPointerEvent(kind="click", x=201.0, y=109.0))
    assert [e.detail for e in events] == [{"entityId": "person.a"}]
