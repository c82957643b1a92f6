"""Time sources for the scene renderer.

Transitions are sampled against `Clock.now()` rather than wall time, so the
same card can run live (`SystemClock`) or be stepped frame by frame when
exporting or testing (`ManualClock`).
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float: ...


@dataclass(frozen=True)
class SystemClock:
    def now(self) -> float:
        return float(time.monotonic())


@dataclass
class ManualClock:
    """Stepped clock; the CLI moves it to the end of a pass to get the settled frame."""

    current_ts: float = 0.0

    def now(self) -> float:
        return self.current_ts

    def set(self, ts: float) -> None:
        self.current_ts = float(ts)

    def advance(self, seconds: float) -> float:
        self.current_ts += float(seconds)
        return self.current_ts


def ensure_clock(clock: Clock | None) -> Clock:
    return SystemClock() if clock is None else clock
