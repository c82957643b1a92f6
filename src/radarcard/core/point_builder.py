"""Canonical radar points from entity states and stored markers."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from radarcard.core.hass_state import StateProvider
from radarcard.shared.geodesy import GeoCoordinate, azimuth, distance
from radarcard.shared.models.card_config import DEFAULT_MOVING_ACTIVITIES, EntityConfig
from radarcard.shared.models.marker import Marker

logger = logging.getLogger(__name__)


class PointKind(str, Enum):
    ENTITY = "entity"
    MARKER = "marker"


@dataclass(frozen=True)
class RadarPoint:
    id: str
    distance: float
    azimuth: float
    label: str
    color: str | None = None
    kind: PointKind = PointKind.ENTITY
    is_moving: bool = False


@dataclass(frozen=True)
class ActivityMatch:
    attribute: str = "activity"
    moving_values: frozenset[str] = frozenset(v.lower() for v in DEFAULT_MOVING_ACTIVITIES)

    def is_moving(self, attributes: dict | None) -> bool:
        if not attributes:
            return False
        raw = attributes.get(self.attribute)
        if raw is None:
            return False
        return str(raw).strip().lower() in self.moving_values


def build_entity_points(
    entities: Iterable[EntityConfig],
    states: StateProvider,
    center: GeoCoordinate,
    *,
    unit: str,
    activity: ActivityMatch | None = None,
) -> list[RadarPoint]:
    activity = activity or ActivityMatch()
    points: list[RadarPoint] = []
    for entity in entities:
        state = states.get(entity.entity)
        if state is None:
            continue
        coordinate = state.coordinate()
        if coordinate is None:
            # Not located yet; routinely happens for trackers.
            continue
        points.append(
            RadarPoint(
                id=entity.entity,
                distance=distance(center, coordinate, unit),
                azimuth=azimuth(center, coordinate),
                label=entity.name or state.friendly_name or entity.entity,
                color=entity.color,
                kind=PointKind.ENTITY,
                is_moving=activity.is_moving(dict(state.attributes)),
            )
        )
    return points


def build_marker_points(markers: Iterable[Marker], center: GeoCoordinate, *, unit: str) -> list[RadarPoint]:
    points: list[RadarPoint] = []
    for marker in markers:
        coordinate = GeoCoordinate(marker.latitude, marker.longitude)
        points.append(
            RadarPoint(
                id=marker.id,
                distance=distance(center, coordinate, unit),
                azimuth=azimuth(center, coordinate),
                label=marker.name or marker.id,
                color=marker.color,
                kind=PointKind.MARKER,
                is_moving=False,
            )
        )
    return points


def build_points(
    entities: Sequence[EntityConfig],
    states: StateProvider,
    center: GeoCoordinate,
    *,
    unit: str,
    markers: Sequence[Marker] = (),
    activity: ActivityMatch | None = None,
) -> list[RadarPoint]:
    """Entity points first, then marker points; ids are unique in the result."""

    candidates = build_entity_points(entities, states, center, unit=unit, activity=activity)
    candidates.extend(build_marker_points(markers, center, unit=unit))
    seen: set[str] = set()
    points: list[RadarPoint] = []
    for point in candidates:
        if point.id in seen:
            logger.warning("duplicate radar point id %s dropped", point.id)
            continue
        seen.add(point.id)
        points.append(point)
    return points
