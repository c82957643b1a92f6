"""PNG radar backend drawn with Pillow."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from io import BytesIO

from PIL import Image, ImageColor, ImageDraw

from radarcard.backends.base import RadarBackend, RenderOutput, view_message
from radarcard.core.card import CardView
from radarcard.core.radar_scene import DEFAULT_ENTITY_COLOR, PrimitiveKind, ScenePrimitive

logger = logging.getLogger(__name__)

BACKGROUND = (10, 12, 16, 255)
MESSAGE = (235, 120, 120, 255)
LEGEND_ROW = 14


def rgba(color: str | None, opacity: float = 1.0, *, fallback: str = DEFAULT_ENTITY_COLOR) -> tuple[int, int, int, int]:
    try:
        rgb = ImageColor.getrgb(color or fallback)
    except ValueError:
        logger.debug("unsupported color %r, using %s", color, fallback)
        rgb = ImageColor.getrgb(fallback)
    alpha = int(round(255 * max(0.0, min(1.0, float(opacity)))))
    return (rgb[0], rgb[1], rgb[2], alpha)


def scene_to_image(view: CardView, *, width: int, height: int, tooltip_lines: Sequence[str] = ()) -> Image.Image:
    legend = view.legend if view.show_legend and view_message(view) is None else ()
    total_h = height + (LEGEND_ROW * len(legend) + 4 if legend else 0)
    image = Image.new("RGBA", (width, total_h), color=BACKGROUND)
    draw = ImageDraw.Draw(image, "RGBA")

    message = view_message(view)
    if message is not None:
        draw.text((12, height // 2 - 6), message, fill=MESSAGE)
        return image

    cx, cy = width / 2.0, height / 2.0
    for primitive in view.frame.primitives:
        _draw(draw, primitive, cx, cy)

    for idx, item in enumerate(legend):
        y = height + idx * LEGEND_ROW + 2
        draw.ellipse((6, y + 3, 14, y + 11), fill=rgba(item.color))
        text = item.label if item.distance_text is None else f"{item.label} ({item.distance_text})"
        draw.text((20, y), text, fill=(190, 210, 230, 255))

    tooltip = view.state.tooltip
    if tooltip.visible and tooltip_lines:
        for idx, line in enumerate(tooltip_lines):
            draw.text((tooltip.left + 6, tooltip.top + 4 + idx * 12), line, fill=(255, 255, 255, 255))
    return image


def _draw(draw: ImageDraw.ImageDraw, p: ScenePrimitive, cx: float, cy: float) -> None:
    x = cx + p.x
    y = cy + p.y
    if p.kind is PrimitiveKind.RING:
        r = p.size
        draw.ellipse((cx - r, cy - r, cx + r, cy + r), outline=rgba(p.color, p.opacity), width=1)
    elif p.kind is PrimitiveKind.AXIS:
        draw.line((cx, cy, x, y), fill=rgba(p.color, p.opacity), width=1)
    elif p.kind in (PrimitiveKind.RING_LABEL, PrimitiveKind.AXIS_LABEL):
        draw.text((x, y - 6), p.text, fill=rgba(p.color, p.opacity))
    elif p.kind is PrimitiveKind.PING:
        r = p.size
        draw.ellipse((x - r, y - r, x + r, y + r), outline=rgba(p.color, p.opacity), width=1)
    elif p.kind is PrimitiveKind.ENTITY:
        r = p.size + (1 if "pulsing" in p.classes else 0)
        draw.ellipse((x - r, y - r, x + r, y + r), fill=rgba(p.color, p.opacity))
    elif p.kind is PrimitiveKind.MARKER:
        pts = [
            (x + p.size * math.cos(math.radians(deg)), y + p.size * math.sin(math.radians(deg)))
            for deg in (-90.0, 30.0, 150.0)
        ]
        draw.polygon(pts, fill=rgba(p.color, p.opacity))


def image_to_png_bytes(image: Image.Image) -> bytes:
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


class BitmapRadarBackend(RadarBackend):
    name = "png"

    def render(
        self,
        view: CardView,
        *,
        width: float,
        height: float,
        tooltip_lines: Sequence[str] = (),
    ) -> RenderOutput:
        image = scene_to_image(view, width=int(round(width)), height=int(round(height)), tooltip_lines=tooltip_lines)
        return RenderOutput(backend=self.name, media_type="image/png", content=image_to_png_bytes(image))
