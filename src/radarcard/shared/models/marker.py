from __future__ import annotations

import math
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


def new_marker_id() -> str:
    return f"marker_{uuid4().hex[:12]}"


class Marker(BaseModel):
    """User-placed point persisted in local storage."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(default_factory=new_marker_id, min_length=1)
    name: str
    latitude: float
    longitude: float
    color: Optional[str] = None

    @field_validator("latitude")
    @classmethod
    def _latitude_range(cls, v: float) -> float:
        if not math.isfinite(v) or not (-90.0 <= v <= 90.0):
            raise ValueError("latitude must be in [-90, 90]")
        return v

    @field_validator("longitude")
    @classmethod
    def _longitude_range(cls, v: float) -> float:
        if not math.isfinite(v) or not (-180.0 <= v <= 180.0):
            raise ValueError("longitude must be in [-180, 180]")
        return v

    @field_validator("color", mode="before")
    @classmethod
    def _blank_color(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_storage(self) -> dict:
        return self.model_dump(exclude_none=True)


MarkerList = TypeAdapter(list[Marker])
