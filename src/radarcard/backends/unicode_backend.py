"""Unicode terminal preview rendered as rich Text."""

from __future__ import annotations

import math
from collections.abc import Sequence

from rich.color import Color, ColorParseError
from rich.style import Style
from rich.text import Text

from radarcard.backends.base import RadarBackend, RenderOutput, view_message
from radarcard.core.card import CardView
from radarcard.core.radar_scene import PrimitiveKind

GRID_WIDTH = 41
GRID_HEIGHT = 21
# Terminal cells are about twice as tall as wide.
_CELL_ASPECT = 0.5

_GLYPHS = {
    PrimitiveKind.ENTITY: "●",
    PrimitiveKind.MARKER: "▲",
    PrimitiveKind.PING: "○",
}


def _style(color: str | None, *, bold: bool = False) -> Style:
    if not color:
        return Style(bold=bold)
    try:
        return Style(color=Color.parse(color), bold=bold)
    except ColorParseError:
        return Style(bold=bold)


class UnicodeRadarBackend(RadarBackend):
    name = "text"

    def __init__(self, *, grid_width: int = GRID_WIDTH, grid_height: int = GRID_HEIGHT):
        self.grid_width = max(21, int(grid_width))
        self.grid_height = max(9, int(grid_height))

    def render(
        self,
        view: CardView,
        *,
        width: float,
        height: float,
        tooltip_lines: Sequence[str] = (),
    ) -> RenderOutput:
        text = Text()
        if view.title:
            text.append(view.title + "\n", style=Style(bold=True))
        message = view_message(view)
        if message is not None:
            text.append(message, style=Style(color="red") if view.error else Style(dim=True))
            return self._output(text)

        cols, rows = self.grid_width, self.grid_height
        cells: list[list[tuple[str, Style]]] = [[(" ", Style()) for _ in range(cols)] for _ in range(rows)]
        cx, cy = cols // 2, rows // 2
        chart_r = max(1.0, min(width, height) / 2.0)
        sx = (cols / 2.0 - 1) / chart_r
        sy = sx * _CELL_ASPECT

        def put(x: float, y: float, glyph: str, style: Style) -> None:
            col = int(round(cx + x * sx))
            row = int(round(cy + y * sy))
            if 0 <= row < rows and 0 <= col < cols:
                cells[row][col] = (glyph, style)

        for p in view.frame.primitives:
            if p.opacity <= 0:
                continue
            if p.kind is PrimitiveKind.RING:
                steps = max(24, int(p.size * sx * 8))
                for i in range(steps):
                    a = 2 * math.pi * i / steps
                    put(p.size * math.cos(a), p.size * math.sin(a), "·", _style(p.color))
            elif p.kind is PrimitiveKind.AXIS:
                glyph = "│" if abs(p.x) < abs(p.y) else "─"
                length = max(abs(p.x) * sx, abs(p.y) * sy)
                for i in range(1, int(length) + 1):
                    t = i / max(1.0, length)
                    put(p.x * t, p.y * t, glyph, _style(p.color))
            elif p.kind is PrimitiveKind.AXIS_LABEL:
                put(p.x, p.y, p.text[:1], _style(p.color, bold=True))
            elif p.kind in _GLYPHS:
                glyph = "◉" if "pulsing" in p.classes else _GLYPHS[p.kind]
                put(p.x, p.y, glyph, _style(p.color, bold=p.kind is not PrimitiveKind.PING))
        cells[cy][cx] = ("⊕", Style())

        for row_idx, row in enumerate(cells):
            for glyph, style in row:
                text.append(glyph, style=style)
            if row_idx < rows - 1:
                text.append("\n")

        if view.show_legend and view.legend:
            for item in view.legend:
                glyph = "▲" if item.kind.value == "marker" else "●"
                text.append("\n")
                text.append(glyph, style=_style(item.color))
                label = item.label if item.distance_text is None else f"{item.label}  {item.distance_text}"
                text.append(f" {label}", style=Style(bold=item.pulsing))
        if view.state.tooltip.visible:
            for line in tooltip_lines:
                text.append("\n" + line, style=Style(italic=True))
        return self._output(text)

    def _output(self, text: Text) -> RenderOutput:
        plain = text.plain
        return RenderOutput(
            backend=self.name,
            media_type="text/plain",
            content=plain,
            lines=plain.split("\n"),
            renderable=text,
        )
