"""Pointer and legend input for the radar card."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace

from radarcard.core.events import INSPECT_ENTITY, EventSink, fire_event
from radarcard.core.point_builder import PointKind, RadarPoint
from radarcard.core.radar_scene import SceneDescription
from radarcard.core.radar_view_state import MarkerDialogState, RadarViewState, TooltipState
from radarcard.core.radial_scale import format_distance
from radarcard.shared.geodesy import GeoCoordinate
from radarcard.shared.models.card_config import RadarCardConfig
from radarcard.shared.models.marker import Marker

logger = logging.getLogger(__name__)

TOOLTIP_OFFSET = 12.0
TOOLTIP_WIDTH = 140.0
TOOLTIP_HEIGHT = 48.0
HIT_RADIUS = 12.0


@dataclass(frozen=True)
class TooltipContent:
    point_id: str
    label: str
    distance: str
    azimuth: str


def tooltip_content(point: RadarPoint, unit: str) -> TooltipContent:
    return TooltipContent(
        point_id=point.id,
        label=point.label,
        distance=format_distance(point.distance, unit),
        azimuth=f"{int(round(point.azimuth)) % 360}°",
    )


def position_tooltip(
    x: float,
    y: float,
    *,
    chart_width: float,
    tooltip_width: float = TOOLTIP_WIDTH,
    tooltip_height: float = TOOLTIP_HEIGHT,
    offset: float = TOOLTIP_OFFSET,
) -> tuple[float, float]:
    """Return (left, top) for a tooltip anchored at pointer (x, y).

    Right half of the chart flips the tooltip to the left of the cursor; the
    tooltip sits above the cursor unless that would clip the top edge.
    """

    if x > chart_width / 2.0:
        left = x - offset - tooltip_width
    else:
        left = x + offset
    top = y - offset - tooltip_height
    if top < 0:
        top = y + offset
    return (max(0.0, left), top)


def pick_point(scene: SceneDescription | None, x: float, y: float, *, width: float, height: float) -> str | None:
    """Nearest point within the hit radius of chart pixel (x, y)."""

    if scene is None or not scene.points:
        return None
    cx = width / 2.0
    cy = height / 2.0
    best_id: str | None = None
    best_distance: float | None = None
    for point in scene.points:
        px, py = scene.scale.project(point.distance, point.azimuth)
        d2 = (cx + px - x) ** 2 + (cy + py - y) ** 2
        if best_distance is None or d2 < best_distance:
            best_distance = d2
            best_id = point.id
    if best_distance is None or best_distance > HIT_RADIUS**2:
        return None
    return best_id


@dataclass(frozen=True)
class RadarAction:
    kind: str
    point_id: str | None = None
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class RadarPointerEvent:
    """Gesture on the chart or legend; x/y are chart pixels from the top-left.

    kind: enter | move | focus | leave | blur | click | legend_click |
    outside_click | add_marker
    """

    kind: str
    point_id: str | None = None
    x: float | None = None
    y: float | None = None


class RadarInteractionController:
    def __init__(
        self,
        *,
        emit: EventSink | None = None,
        tooltip_width: float = TOOLTIP_WIDTH,
        tooltip_height: float = TOOLTIP_HEIGHT,
    ):
        self.emit = emit
        self.tooltip_width = float(tooltip_width)
        self.tooltip_height = float(tooltip_height)

    def handle_pointer(
        self,
        event: RadarPointerEvent,
        *,
        scene: SceneDescription | None,
        config: RadarCardConfig,
    ) -> RadarAction:
        kind = event.kind
        if kind in {"leave", "blur"}:
            return RadarAction(kind="HIDE_TOOLTIP")
        if kind == "outside_click":
            return RadarAction(kind="CLOSE_DIALOG")
        if kind == "add_marker":
            if config.markers_addable:
                return RadarAction(kind="OPEN_ADD_DIALOG")
            return RadarAction(kind="NOOP")
        if kind == "legend_click":
            if event.point_id:
                return RadarAction(kind="TOGGLE_PULSE", point_id=event.point_id)
            return RadarAction(kind="NOOP")

        point_id = event.point_id
        if point_id is None and event.x is not None and event.y is not None:
            point_id = pick_point(scene, event.x, event.y, width=config.width, height=config.height)
        point = scene.point(point_id) if (scene is not None and point_id) else None
        if point is None:
            return RadarAction(kind="HIDE_TOOLTIP") if kind in {"enter", "move", "focus"} else RadarAction(kind="NOOP")

        x, y = self._anchor(event, point, scene, config)
        if kind in {"enter", "move", "focus"}:
            return RadarAction(kind="SHOW_TOOLTIP", point_id=point.id, x=x, y=y)
        if kind == "click":
            if point.kind is PointKind.MARKER:
                return RadarAction(kind="OPEN_EDIT_DIALOG", point_id=point.id)
            if config.points_clickable:
                return RadarAction(kind="INSPECT_ENTITY", point_id=point.id)
        return RadarAction(kind="NOOP")

    def apply_action(
        self,
        state: RadarViewState,
        action: RadarAction,
        *,
        scene: SceneDescription | None = None,
        config: RadarCardConfig | None = None,
        markers: Mapping[str, Marker] | None = None,
        center: GeoCoordinate | None = None,
    ) -> RadarViewState:
        kind = action.kind
        if kind == "SHOW_TOOLTIP":
            point = scene.point(action.point_id) if (scene is not None and action.point_id) else None
            if point is None:
                return replace(state, tooltip=TooltipState())
            content = tooltip_content(point, scene.unit)
            chart_width = config.width if config is not None else 2.0 * (scene.scale.chart_radius + 20.0)
            left, top = position_tooltip(
                action.x,
                action.y,
                chart_width=chart_width,
                tooltip_width=self.tooltip_width,
                tooltip_height=self.tooltip_height,
            )
            return replace(
                state,
                tooltip=TooltipState(
                    visible=True,
                    point_id=point.id,
                    left=left,
                    top=top,
                    label=content.label,
                    distance_text=content.distance,
                    azimuth_text=content.azimuth,
                ),
            )
        if kind == "HIDE_TOOLTIP":
            if not state.tooltip.visible:
                return state
            return replace(state, tooltip=TooltipState())
        if kind == "TOGGLE_PULSE":
            pulsing = None if state.pulsing_id == action.point_id else action.point_id
            return replace(state, pulsing_id=pulsing)
        if kind == "INSPECT_ENTITY":
            fire_event(self.emit, INSPECT_ENTITY, {"entityId": action.point_id})
            return state
        if kind == "OPEN_EDIT_DIALOG":
            marker = (markers or {}).get(action.point_id or "")
            if marker is None:
                logger.debug("marker %s vanished before the edit dialog opened", action.point_id)
                return state
            return replace(
                state,
                dialog=MarkerDialogState(
                    mode="edit",
                    marker_id=marker.id,
                    name=marker.name,
                    latitude=marker.latitude,
                    longitude=marker.longitude,
                    color=marker.color,
                ),
            )
        if kind == "OPEN_ADD_DIALOG":
            return replace(
                state,
                dialog=MarkerDialogState(
                    mode="add",
                    latitude=center.latitude if center is not None else None,
                    longitude=center.longitude if center is not None else None,
                ),
            )
        if kind == "CLOSE_DIALOG":
            if state.dialog is None:
                return state
            return replace(state, dialog=None)
        return state

    @staticmethod
    def _anchor(
        event: RadarPointerEvent,
        point: RadarPoint,
        scene: SceneDescription,
        config: RadarCardConfig,
    ) -> tuple[float, float]:
        if event.x is not None and event.y is not None:
            return (float(event.x), float(event.y))
        # Keyboard focus has no cursor; anchor on the point itself.
        px, py = scene.scale.project(point.distance, point.azimuth)
        return (config.width / 2.0 + px, config.height / 2.0 + py)
