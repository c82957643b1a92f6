"""Radar backend interface and shared output type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from radarcard.core.card import CardView


@dataclass(frozen=True)
class RenderOutput:
    backend: str
    media_type: str
    content: str | bytes
    lines: list[str] = field(default_factory=list)
    renderable: Any = None


class RadarBackend(ABC):
    name: str

    @abstractmethod
    def render(
        self,
        view: CardView,
        *,
        width: float,
        height: float,
        tooltip_lines: Sequence[str] = (),
    ) -> RenderOutput:
        """Draw one card view; a view with an error or no points draws only its message."""


def view_message(view: CardView) -> str | None:
    if view.error:
        return view.error
    if view.empty_message:
        return view.empty_message
    if view.frame is None:
        return ""
    return None


def fmt_num(value: float) -> str:
    text = f"{float(value):.2f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text
