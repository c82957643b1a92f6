"""Resolution of the radar center coordinate."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from radarcard.core.hass_state import HassSnapshot
from radarcard.shared.geodesy import GeoCoordinate
from radarcard.shared.models.card_config import RadarCardConfig, RadarCardConfigError

logger = logging.getLogger(__name__)


class CenterSource(str, Enum):
    STATIC = "static"
    ZONE = "zone"
    MOVING_ENTITY = "moving_entity"
    HOME = "home"


class CenterErrorCode(str, Enum):
    COORDINATES_INCOMPLETE = "center_coordinates_incomplete"
    SOURCES_CONFLICT = "center_sources_conflict"
    MOVING_CONFLICT = "moving_center_conflict"
    MOVING_ENTITY_MISSING = "moving_center_entity_missing"
    UNRESOLVED = "center_unresolved"


class CenterConfigError(RadarCardConfigError):
    def __init__(self, code: CenterErrorCode, detail: str = "") -> None:
        self.code = code
        self.detail = detail
        super().__init__(f"{code.value}: {detail}" if detail else code.value)


@dataclass(frozen=True)
class ResolvedCenter:
    coordinate: GeoCoordinate
    source: CenterSource
    entity_id: str | None = None


def validate_center_config(config: RadarCardConfig) -> None:
    has_lat = config.center_latitude is not None
    has_lon = config.center_longitude is not None
    if has_lat != has_lon:
        raise CenterConfigError(
            CenterErrorCode.COORDINATES_INCOMPLETE,
            "center_latitude and center_longitude must be set together",
        )
    has_static = has_lat and has_lon
    has_zone = config.location_zone_entity is not None
    if has_static and has_zone:
        raise CenterConfigError(CenterErrorCode.SOURCES_CONFLICT, "static coordinates and zone entity both set")
    if config.center_mode == "moving":
        if has_static or has_zone:
            raise CenterConfigError(
                CenterErrorCode.MOVING_CONFLICT,
                "moving center cannot be combined with a static or zone center",
            )
        if not config.center_entity:
            raise CenterConfigError(CenterErrorCode.MOVING_ENTITY_MISSING, "center_mode 'moving' needs center_entity")
    elif config.center_entity:
        logger.debug("center_entity %s ignored: center_mode is 'fixed'", config.center_entity)


def resolve_center(config: RadarCardConfig, hass: HassSnapshot) -> ResolvedCenter:
    """Return the one active center source, or raise `CenterConfigError`.

    A configured source that cannot be located is never replaced by another.
    """

    validate_center_config(config)

    if config.center_latitude is not None and config.center_longitude is not None:
        return ResolvedCenter(
            GeoCoordinate(float(config.center_latitude), float(config.center_longitude)),
            CenterSource.STATIC,
        )

    if config.location_zone_entity:
        return _entity_center(hass, config.location_zone_entity, CenterSource.ZONE)

    if config.center_mode == "moving" and config.center_entity:
        return _entity_center(hass, config.center_entity, CenterSource.MOVING_ENTITY)

    home = hass.home
    if home is None:
        raise CenterConfigError(CenterErrorCode.UNRESOLVED, "home coordinates are not configured")
    return ResolvedCenter(home, CenterSource.HOME)


def _entity_center(hass: HassSnapshot, entity_id: str, source: CenterSource) -> ResolvedCenter:
    state = hass.get(entity_id)
    coordinate = state.coordinate() if state is not None else None
    if coordinate is None:
        raise CenterConfigError(CenterErrorCode.UNRESOLVED, f"{entity_id} has no coordinates")
    return ResolvedCenter(coordinate, source, entity_id=entity_id)
