"""Declarative description of one radar frame, keyed by stable identity."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from radarcard.core.point_builder import PointKind, RadarPoint
from radarcard.core.radial_scale import RadialScale, ring_labels
from radarcard.shared.models.card_config import RadarCardConfig

DEFAULT_GRID_COLOR = "#7f8c8d"
DEFAULT_FONT_COLOR = "#bdc3c7"
DEFAULT_ENTITY_COLOR = "#03a9f4"

DOT_SIZE = 5.0
MARKER_SIZE = 7.0
PING_SIZE = 10.0

CARDINALS = (("N", 0.0), ("E", 90.0), ("S", 180.0), ("W", 270.0))


class PrimitiveKind(str, Enum):
    RING = "ring"
    RING_LABEL = "ring_label"
    AXIS = "axis"
    AXIS_LABEL = "axis_label"
    PING = "ping"
    ENTITY = "entity"
    MARKER = "marker"


@dataclass(frozen=True)
class ScenePrimitive:
    """One drawable item; x/y are offsets from the chart center.

    `x`, `y`, `size` and `opacity` are geometry and may be animated. For a ring
    `size` is the radius; for an axis (x, y) is the outer end of the line.
    """

    key: str
    kind: PrimitiveKind
    x: float = 0.0
    y: float = 0.0
    size: float = 0.0
    opacity: float = 1.0
    color: str | None = None
    text: str = ""
    classes: frozenset[str] = frozenset()
    point_id: str | None = None

    def geometry(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "size": self.size, "opacity": self.opacity}


@dataclass(frozen=True)
class SceneOptions:
    grid_color: str = DEFAULT_GRID_COLOR
    font_color: str = DEFAULT_FONT_COLOR
    entity_color: str = DEFAULT_ENTITY_COLOR
    show_grid_labels: bool = True
    moving_animation_enabled: bool = True
    points_clickable: bool = True
    unit: str = "km"
    label_offset: float = 10.0

    @classmethod
    def from_config(cls, config: RadarCardConfig, *, unit: str) -> "SceneOptions":
        return cls(
            grid_color=config.grid_color or DEFAULT_GRID_COLOR,
            font_color=config.font_color or DEFAULT_FONT_COLOR,
            entity_color=config.entity_color or DEFAULT_ENTITY_COLOR,
            show_grid_labels=config.show_grid_labels,
            moving_animation_enabled=config.moving_animation_enabled,
            points_clickable=config.points_clickable,
            unit=unit,
            label_offset=max(6.0, config.margin / 2.0),
        )


@dataclass(frozen=True)
class SceneDescription:
    scale: RadialScale
    primitives: tuple[ScenePrimitive, ...] = ()
    points: tuple[RadarPoint, ...] = ()
    unit: str = "km"
    pulsing_id: str | None = None

    @property
    def by_key(self) -> dict[str, ScenePrimitive]:
        return {p.key: p for p in self.primitives}

    def point(self, point_id: str) -> RadarPoint | None:
        for point in self.points:
            if point.id == point_id:
                return point
        return None


def build_scene(
    points: Sequence[RadarPoint],
    scale: RadialScale,
    options: SceneOptions,
    *,
    pulsing_id: str | None = None,
) -> SceneDescription:
    grid: list[ScenePrimitive] = []
    axes: list[ScenePrimitive] = []
    labels: list[ScenePrimitive] = []
    pings: list[ScenePrimitive] = []
    dots: list[ScenePrimitive] = []

    values = scale.ring_values()
    for value in values:
        grid.append(
            ScenePrimitive(
                key=f"ring:{value:g}",
                kind=PrimitiveKind.RING,
                size=scale.radius(value),
                color=options.grid_color,
            )
        )
    if options.show_grid_labels:
        for value, text in zip(values, ring_labels(values, options.unit)):
            labels.append(
                ScenePrimitive(
                    key=f"ring-label:{value:g}",
                    kind=PrimitiveKind.RING_LABEL,
                    x=4.0,
                    y=-scale.radius(value) - 2.0,
                    color=options.font_color,
                    text=text,
                )
            )

    outer = scale.chart_radius
    for name, bearing in CARDINALS:
        x, y = scale.project(scale.max_distance, bearing)
        axes.append(ScenePrimitive(key=f"axis:{name}", kind=PrimitiveKind.AXIS, x=x, y=y, color=options.grid_color))
        lx, ly = RadialScale(max_distance=1.0, chart_radius=outer + options.label_offset).project(1.0, bearing)
        labels.append(
            ScenePrimitive(
                key=f"axis-label:{name}",
                kind=PrimitiveKind.AXIS_LABEL,
                x=lx,
                y=ly,
                color=options.font_color,
                text=name,
            )
        )

    for point in points:
        x, y = scale.project(point.distance, point.azimuth)
        color = point.color or options.entity_color
        is_marker = point.kind is PointKind.MARKER
        classes = {"marker" if is_marker else "entity-dot"}
        if point.id == pulsing_id:
            classes.add("pulsing")
        if is_marker or options.points_clickable:
            classes.add("clickable")
        if point.is_moving:
            classes.add("moving")
        if point.is_moving and options.moving_animation_enabled and not is_marker:
            pings.append(
                ScenePrimitive(
                    key=f"ping:{point.id}",
                    kind=PrimitiveKind.PING,
                    x=x,
                    y=y,
                    size=PING_SIZE,
                    opacity=0.6,
                    color=color,
                    point_id=point.id,
                )
            )
        dots.append(
            ScenePrimitive(
                key=f"point:{point.id}",
                kind=PrimitiveKind.MARKER if is_marker else PrimitiveKind.ENTITY,
                x=x,
                y=y,
                size=MARKER_SIZE if is_marker else DOT_SIZE,
                color=color,
                text=point.label,
                classes=frozenset(classes),
                point_id=point.id,
            )
        )

    return SceneDescription(
        scale=scale,
        primitives=tuple(grid + axes + labels + pings + dots),
        points=tuple(points),
        unit=options.unit,
        pulsing_id=pulsing_id,
    )
