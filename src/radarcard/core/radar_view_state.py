"""State model for radar card interactions."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TooltipState:
    visible: bool = False
    point_id: str | None = None
    left: float = 0.0
    top: float = 0.0
    label: str = ""
    distance_text: str = ""
    azimuth_text: str = ""


@dataclass(frozen=True)
class MarkerDialogState:
    mode: str = "add"  # add | edit
    marker_id: str | None = None
    name: str = ""
    latitude: float | None = None
    longitude: float | None = None
    color: str | None = None


@dataclass(frozen=True)
class RadarViewState:
    pulsing_id: str | None = None
    tooltip: TooltipState = field(default_factory=TooltipState)
    dialog: MarkerDialogState | None = None
    test_animation_running: bool = False
