"""Timed, eased interpolation of primitive geometry."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

Easing = Callable[[float], float]


def ease_cubic_out(t: float) -> float:
    return 1.0 - (1.0 - t) ** 3


@dataclass(frozen=True)
class Transition:
    start_ts: float
    duration_s: float
    start: Mapping[str, float]
    end: Mapping[str, float]
    generation: int
    easing: Easing = ease_cubic_out

    @property
    def end_ts(self) -> float:
        return self.start_ts + self.duration_s

    def progress(self, now: float) -> float:
        if self.duration_s <= 0:
            return 1.0
        t = (float(now) - self.start_ts) / self.duration_s
        return min(1.0, max(0.0, t))

    def done(self, now: float) -> bool:
        return self.progress(now) >= 1.0

    def sample(self, now: float) -> dict[str, float]:
        k = self.easing(self.progress(now))
        values: dict[str, float] = {}
        for key, target in self.end.items():
            origin = self.start.get(key, target)
            values[key] = origin + (target - origin) * k
        return values
