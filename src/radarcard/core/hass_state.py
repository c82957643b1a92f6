"""Read-only view of the host platform's entity states and home settings."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from radarcard.shared.geodesy import EARTH_RADIUS, GeoCoordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityState:
    entity_id: str
    state: str = ""
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def friendly_name(self) -> str | None:
        name = self.attributes.get("friendly_name")
        return str(name) if name else None

    def coordinate(self) -> GeoCoordinate | None:
        lat = _as_coordinate_value(self.attributes.get("latitude"))
        lon = _as_coordinate_value(self.attributes.get("longitude"))
        if lat is None or lon is None:
            return None
        return GeoCoordinate(lat, lon)


class StateProvider(Protocol):
    def get(self, entity_id: str) -> Optional[EntityState]: ...


def _as_coordinate_value(raw: Any) -> float | None:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    value = float(raw)
    return value if math.isfinite(value) else None


@dataclass(frozen=True)
class HassSnapshot:
    """States plus ambient configuration as delivered by the host on each update."""

    states: Mapping[str, EntityState] = field(default_factory=dict)
    latitude: float | None = None
    longitude: float | None = None
    length_unit: str = "km"
    language: str = "en"

    def get(self, entity_id: str) -> Optional[EntityState]:
        return self.states.get(entity_id)

    @property
    def home(self) -> GeoCoordinate | None:
        lat = _as_coordinate_value(self.latitude)
        lon = _as_coordinate_value(self.longitude)
        if lat is None or lon is None:
            return None
        return GeoCoordinate(lat, lon)

    @property
    def unit(self) -> str:
        unit = (self.length_unit or "").strip().lower()
        if unit in EARTH_RADIUS:
            return unit
        logger.warning("unsupported length unit %r, using km", self.length_unit)
        return "km"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HassSnapshot":
        """Build from a Home Assistant style payload.

        Accepted shape::

            {"states": {"<entity_id>": {"state": "...", "attributes": {...}}},
             "config": {"latitude": .., "longitude": .., "unit_system": {"length": "km"}},
             "language": "en"}
        """

        states: dict[str, EntityState] = {}
        raw_states = data.get("states") or {}
        if isinstance(raw_states, Mapping):
            items = raw_states.items()
        else:
            items = ((s.get("entity_id", ""), s) for s in raw_states if isinstance(s, Mapping))
        for entity_id, payload in items:
            if not entity_id or not isinstance(payload, Mapping):
                continue
            attributes = payload.get("attributes") or {}
            states[str(entity_id)] = EntityState(
                entity_id=str(entity_id),
                state=str(payload.get("state", "")),
                attributes=dict(attributes) if isinstance(attributes, Mapping) else {},
            )
        config = data.get("config") or {}
        unit_system = config.get("unit_system") or {}
        return cls(
            states=states,
            latitude=config.get("latitude"),
            longitude=config.get("longitude"),
            length_unit=str(unit_system.get("length", "km") or "km"),
            language=str(data.get("language") or "en"),
        )
