from __future__ import annotations

import pytest

from radarcard.core.point_builder import PointKind, RadarPoint
from radarcard.core.radar_reconcile import reconcile
from radarcard.core.radar_scene import DEFAULT_ENTITY_COLOR, PrimitiveKind, SceneOptions, ScenePrimitive, build_scene
from radarcard.core.radial_scale import RadialScale

SCALE = RadialScale(max_distance=10.0, chart_radius=90.0)


def _point(point_id: str, distance: float = 5.0, azimuth: float = 90.0, **kw: object) -> RadarPoint:
    return RadarPoint(id=point_id, distance=distance, azimuth=azimuth, label=point_id, **kw)


def test_scene_keys_and_paint_order() -> None:
    scene = build_scene([_point("a", is_moving=True)], SCALE, SceneOptions())
    kinds = [p.kind for p in scene.primitives]
    assert kinds.index(PrimitiveKind.RING) < kinds.index(PrimitiveKind.AXIS)
    assert kinds.index(PrimitiveKind.AXIS) < kinds.index(PrimitiveKind.RING_LABEL)
    assert kinds.index(PrimitiveKind.AXIS_LABEL) < kinds.index(PrimitiveKind.PING)
    assert kinds.index(PrimitiveKind.PING) < kinds.index(PrimitiveKind.ENTITY)
    keys = set(scene.by_key)
    assert {"ring:2", "ring:10", "axis:N", "axis-label:W", "ping:a", "point:a"} <= keys


def test_point_geometry_and_default_color() -> None:
    scene = build_scene([_point("a", distance=10.0, azimuth=90.0)], SCALE, SceneOptions())
    dot = scene.by_key["point:a"]
    assert dot.x == pytest.approx(90.0)
    assert dot.y == pytest.approx(0.0, abs=1e-9)
    assert dot.color == DEFAULT_ENTITY_COLOR
    assert "entity-dot" in dot.classes
    assert "clickable" in dot.classes


def test_markers_are_always_clickable_and_never_ping() -> None:
    options = SceneOptions(points_clickable=False)
    scene = build_scene(
        [_point("a"), _point("m", kind=PointKind.MARKER, is_moving=True)],
        SCALE,
        options,
    )
    assert "clickable" not in scene.by_key["point:a"].classes
    marker = scene.by_key["point:m"]
    assert marker.kind is PrimitiveKind.MARKER
    assert {"marker", "clickable"} <= marker.classes
    assert "ping:m" not in scene.by_key


def test_ping_needs_moving_animation_enabled() -> None:
    moving = _point("a", is_moving=True)
    assert "ping:a" in build_scene([moving], SCALE, SceneOptions()).by_key
    assert "ping:a" not in build_scene([moving], SCALE, SceneOptions(moving_animation_enabled=False)).by_key


def test_pulsing_class_follows_pulsing_id() -> None:
    scene = build_scene([_point("a"), _point("b")], SCALE, SceneOptions(), pulsing_id="b")
    assert "pulsing" not in scene.by_key["point:a"].classes
    assert "pulsing" in scene.by_key["point:b"].classes


def test_grid_labels_can_be_hidden() -> None:
    scene = build_scene([_point("a")], SCALE, SceneOptions(show_grid_labels=False))
    assert not any(p.kind is PrimitiveKind.RING_LABEL for p in scene.primitives)


def test_reconcile_splits_enter_update_exit() -> None:
    previous = {"point:a": object(), "point:b": object()}
    nxt = [ScenePrimitive(key="point:b", kind=PrimitiveKind.ENTITY), ScenePrimitive(key="point:c", kind=PrimitiveKind.ENTITY)]
    diff = reconcile(previous, nxt)
    assert diff.enter == ("point:c",)
    assert diff.update == ("point:b",)
    assert diff.exit == ("point:a",)
    assert not diff.is_empty


def test_reconcile_rejects_duplicate_keys() -> None:
    nxt = [ScenePrimitive(key="point:a", kind=PrimitiveKind.ENTITY)] * 2
    with pytest.raises(ValueError, match="duplicate primitive key"):
        reconcile({}, nxt)
