from .card_config import (
    DEFAULT_MOVING_ACTIVITIES,
    EntityConfig,
    RadarCardConfig,
    RadarCardConfigError,
    load_card_config,
    parse_card_config,
)
from .marker import Marker, MarkerList, new_marker_id

__all__ = [
    "DEFAULT_MOVING_ACTIVITIES",
    "EntityConfig",
    "Marker",
    "MarkerList",
    "RadarCardConfig",
    "RadarCardConfigError",
    "load_card_config",
    "new_marker_id",
    "parse_card_config",
]
