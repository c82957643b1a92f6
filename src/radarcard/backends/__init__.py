"""Radar backends package."""

from .base import RadarBackend, RenderOutput
from .bitmap_backend import BitmapRadarBackend
from .svg_backend import SvgRadarBackend
from .unicode_backend import UnicodeRadarBackend

BACKENDS = {
    SvgRadarBackend.name: SvgRadarBackend,
    BitmapRadarBackend.name: BitmapRadarBackend,
    UnicodeRadarBackend.name: UnicodeRadarBackend,
}


def get_backend(name: str) -> RadarBackend:
    try:
        return BACKENDS[name]()
    except KeyError:
        raise ValueError(f"unknown backend {name!r}; choose from {sorted(BACKENDS)}") from None


__all__ = [
    "BACKENDS",
    "RadarBackend",
    "RenderOutput",
    "SvgRadarBackend",
    "BitmapRadarBackend",
    "UnicodeRadarBackend",
    "get_backend",
]
