from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_MOVING_ACTIVITIES = ("Automotive", "Cycling", "Walking", "Driving")

LegendPosition = Literal["bottom", "right", "left"]
CenterMode = Literal["fixed", "moving"]


class RadarCardConfigError(ValueError):
    """Card configuration that cannot be rendered."""


class EntityConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    entity: str
    name: Optional[str] = None
    color: Optional[str] = None

    @field_validator("entity")
    @classmethod
    def _entity_id(cls, v: str) -> str:
        token = (v or "").strip()
        if not token:
            raise ValueError("entity id must not be empty")
        return token


class RadarCardConfig(BaseModel):
    """Options of one radar card instance."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    type: str = "custom:radar-card"
    title: Optional[str] = None
    entities: list[EntityConfig] = Field(min_length=1)

    auto_radar_max_distance: bool = True
    radar_max_distance: Optional[float] = Field(default=None, gt=0)

    grid_color: Optional[str] = None
    font_color: Optional[str] = None
    entity_color: Optional[str] = None

    points_clickable: bool = True
    show_legend: bool = True
    legend_position: LegendPosition = "bottom"
    legend_show_distance: bool = True
    show_grid_labels: bool = True

    center_latitude: Optional[float] = None
    center_longitude: Optional[float] = None
    location_zone_entity: Optional[str] = None
    center_mode: CenterMode = "fixed"
    center_entity: Optional[str] = None

    enable_markers: bool = False

    animation_enabled: bool = True
    animation_duration: float = Field(default=750.0, ge=0)
    moving_animation_enabled: bool = True

    activity_attribute: str = "activity"
    moving_activities: list[str] = Field(default_factory=lambda: list(DEFAULT_MOVING_ACTIVITIES))

    width: float = Field(default=220.0, gt=0)
    height: float = Field(default=220.0, gt=0)
    margin: float = Field(default=20.0, ge=0)

    @field_validator("entities", mode="before")
    @classmethod
    def _normalize_entities(cls, v: object) -> object:
        if not isinstance(v, list):
            return v
        return [{"entity": item} if isinstance(item, str) else item for item in v]

    @field_validator("location_zone_entity", "center_entity", "title", mode="before")
    @classmethod
    def _blank_to_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _manual_max_distance(self) -> "RadarCardConfig":
        if not self.auto_radar_max_distance and self.radar_max_distance is None:
            raise ValueError("radar_max_distance is required when auto_radar_max_distance is disabled")
        return self

    @property
    def moving_activity_set(self) -> frozenset[str]:
        values = self.moving_activities or list(DEFAULT_MOVING_ACTIVITIES)
        return frozenset(str(v).strip().lower() for v in values if str(v).strip())

    @property
    def markers_addable(self) -> bool:
        return self.enable_markers and self.center_mode == "moving"


def parse_card_config(raw: Union[dict, RadarCardConfig]) -> RadarCardConfig:
    if isinstance(raw, RadarCardConfig):
        return raw
    if not isinstance(raw, dict) or not raw.get("entities"):
        raise RadarCardConfigError("You need to define at least one entity")
    try:
        return RadarCardConfig.model_validate(raw)
    except ValueError as exc:
        raise RadarCardConfigError(str(exc)) from exc


def load_card_config(path: str | Path) -> RadarCardConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(str(p))
    with p.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise RadarCardConfigError(f"{p}: card config must be a mapping")
    return parse_card_config(data)
