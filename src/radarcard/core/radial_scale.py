"""Linear distance → pixel radius scale and polar projection."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

FALLBACK_MAX_DISTANCE = 100.0
RING_TICK_COUNT = 4

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)

# Sub-unit display: below 1 km show metres, below 1 mi show feet.
_SMALL_UNITS = {"km": ("m", 1000.0), "mi": ("ft", 5280.0)}


def _js_round(x: float) -> int:
    return int(math.floor(x + 0.5))


def _tick_spec(start: float, stop: float, count: float) -> tuple[int, int, float]:
    step = (stop - start) / max(0.0, count)
    power = math.floor(math.log10(step))
    error = step / math.pow(10, power)
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power < 0:
        inc = math.pow(10, -power) / factor
        i1 = _js_round(start * inc)
        i2 = _js_round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = math.pow(10, power) * factor
        i1 = _js_round(start / inc)
        i2 = _js_round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def nice_ticks(start: float, stop: float, count: int) -> list[float]:
    """Round-number ticks (1, 2 or 5 × 10ⁿ steps) inside [start, stop]."""

    if count <= 0 or not (math.isfinite(start) and math.isfinite(stop)):
        return []
    if start == stop:
        return [float(start)]
    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    i1, i2, inc = _tick_spec(lo, hi, count)
    if i2 < i1:
        return []
    if inc < 0:
        values = [(i1 + i) / -inc for i in range(i2 - i1 + 1)]
    else:
        values = [(i1 + i) * inc for i in range(i2 - i1 + 1)]
    return values[::-1] if reverse else values


def chart_radius(width: float, height: float, margin: float) -> float:
    return max(0.0, min(float(width), float(height)) / 2.0 - float(margin))


def resolve_max_distance(distances: Iterable[float], *, auto: bool, configured: float | None) -> float:
    if not auto and configured is not None and configured > 0:
        return float(configured)
    finite = [d for d in distances if math.isfinite(d)]
    peak = max(finite, default=0.0)
    return peak if peak > 0 else FALLBACK_MAX_DISTANCE


@dataclass(frozen=True)
class RadialScale:
    max_distance: float
    chart_radius: float

    def radius(self, distance: float) -> float:
        return float(distance) / self.max_distance * self.chart_radius

    def project(self, distance: float, azimuth_deg: float) -> tuple[float, float]:
        """Offset from chart center; 0° points up, angles grow clockwise."""

        r = self.radius(distance)
        angle = math.radians(float(azimuth_deg) - 90.0)
        return (r * math.cos(angle), r * math.sin(angle))

    def ring_values(self, count: int = RING_TICK_COUNT) -> list[float]:
        return [v for v in nice_ticks(0.0, self.max_distance, count) if v > 0]


def _trim_number(value: float, precision: int) -> str:
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


def split_distance(value: float, unit: str, *, precision: int = 1) -> tuple[str, str]:
    """Return (number, suffix) for a distance in the active unit."""

    small = _SMALL_UNITS.get(unit)
    if small is not None and 0 <= value < 1:
        suffix, factor = small
        return (str(_js_round(value * factor)), suffix)
    return (_trim_number(value, precision), unit)


def format_distance(value: float, unit: str, *, precision: int = 2) -> str:
    number, suffix = split_distance(value, unit, precision=precision)
    return f"{number} {suffix}"


def ring_labels(values: list[float], unit: str) -> list[str]:
    """Labels for rings ordered inner → outer.

    Only the outermost ring of a run sharing one suffix carries it.
    """

    parts = [split_distance(v, unit, precision=1) for v in values]
    labels: list[str] = []
    for idx, (number, suffix) in enumerate(parts):
        is_last_of_run = idx == len(parts) - 1 or parts[idx + 1][1] != suffix
        labels.append(f"{number} {suffix}" if is_last_of_run else number)
    return labels
