"""SVG radar backend."""

from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from collections.abc import Sequence

from radarcard.backends.base import RadarBackend, RenderOutput, fmt_num, view_message
from radarcard.core.card import CardView, LegendItem
from radarcard.core.radar_scene import PrimitiveKind, ScenePrimitive

SVG_NS = "http://www.w3.org/2000/svg"
LEGEND_ROW = 16.0
LEGEND_SIDE_WIDTH = 140.0
TOOLTIP_LINE = 14.0


def triangle_points(x: float, y: float, size: float) -> str:
    """Upward triangle centered on (x, y) with circumradius `size`."""

    pts = []
    for deg in (-90.0, 30.0, 150.0):
        rad = math.radians(deg)
        pts.append(f"{fmt_num(x + size * math.cos(rad))},{fmt_num(y + size * math.sin(rad))}")
    return " ".join(pts)


class SvgRadarBackend(RadarBackend):
    name = "svg"

    def render(
        self,
        view: CardView,
        *,
        width: float,
        height: float,
        tooltip_lines: Sequence[str] = (),
    ) -> RenderOutput:
        legend = view.legend if view.show_legend and view_message(view) is None else ()
        total_w, total_h, chart_dx, legend_origin = self._layout(view, legend, width, height)

        root = ET.Element(
            "svg",
            {
                "xmlns": SVG_NS,
                "class": "radar-card",
                "width": fmt_num(total_w),
                "height": fmt_num(total_h),
                "viewBox": f"0 0 {fmt_num(total_w)} {fmt_num(total_h)}",
            },
        )
        if view.title:
            ET.SubElement(root, "title").text = view.title

        message = view_message(view)
        if message is not None:
            css = "error" if view.error else "no-entities"
            attrs = {"class": css, "x": fmt_num(width / 2), "y": fmt_num(height / 2), "text-anchor": "middle"}
            if view.error_code:
                attrs["data-code"] = view.error_code
            ET.SubElement(root, "text", attrs).text = message
            return self._output(root)

        chart = ET.SubElement(
            root,
            "g",
            {"class": "radar-chart", "transform": f"translate({fmt_num(chart_dx + width / 2)},{fmt_num(height / 2)})"},
        )
        for primitive in view.frame.primitives:
            self._draw(chart, primitive)

        if legend:
            self._legend(root, legend, legend_origin, view.legend_position)
        if view.state.tooltip.visible and tooltip_lines:
            self._tooltip(root, tooltip_lines, chart_dx + view.state.tooltip.left, view.state.tooltip.top)
        return self._output(root)

    @staticmethod
    def _layout(
        view: CardView,
        legend: Sequence[LegendItem],
        width: float,
        height: float,
    ) -> tuple[float, float, float, tuple[float, float]]:
        if not legend:
            return width, height, 0.0, (0.0, 0.0)
        if view.legend_position == "bottom":
            return width, height + LEGEND_ROW * len(legend) + 4.0, 0.0, (8.0, height + LEGEND_ROW)
        side_h = max(height, LEGEND_ROW * (len(legend) + 1))
        if view.legend_position == "left":
            return width + LEGEND_SIDE_WIDTH, side_h, LEGEND_SIDE_WIDTH, (8.0, LEGEND_ROW)
        return width + LEGEND_SIDE_WIDTH, side_h, 0.0, (width + 8.0, LEGEND_ROW)

    @staticmethod
    def _draw(parent: ET.Element, p: ScenePrimitive) -> None:
        key = {"data-key": p.key}
        opacity = fmt_num(p.opacity)
        if p.kind is PrimitiveKind.RING:
            ET.SubElement(
                parent,
                "circle",
                {**key, "class": "ring", "cx": "0", "cy": "0", "r": fmt_num(p.size), "fill": "none",
                 "stroke": p.color or "", "opacity": opacity},
            )
        elif p.kind is PrimitiveKind.AXIS:
            ET.SubElement(
                parent,
                "line",
                {**key, "class": "axis", "x1": "0", "y1": "0", "x2": fmt_num(p.x), "y2": fmt_num(p.y),
                 "stroke": p.color or "", "opacity": opacity},
            )
        elif p.kind in (PrimitiveKind.RING_LABEL, PrimitiveKind.AXIS_LABEL):
            css = "ring-label" if p.kind is PrimitiveKind.RING_LABEL else "axis-label"
            attrs = {**key, "class": css, "x": fmt_num(p.x), "y": fmt_num(p.y), "fill": p.color or "",
                     "opacity": opacity}
            if p.kind is PrimitiveKind.AXIS_LABEL:
                attrs["text-anchor"] = "middle"
                attrs["dominant-baseline"] = "middle"
            ET.SubElement(parent, "text", attrs).text = p.text
        elif p.kind is PrimitiveKind.PING:
            ET.SubElement(
                parent,
                "circle",
                {**key, "class": "ping", "cx": fmt_num(p.x), "cy": fmt_num(p.y), "r": fmt_num(p.size),
                 "fill": "none", "stroke": p.color or "", "opacity": opacity},
            )
        elif p.kind is PrimitiveKind.ENTITY:
            attrs = {**key, "class": " ".join(sorted(p.classes)), "cx": fmt_num(p.x), "cy": fmt_num(p.y),
                     "r": fmt_num(p.size), "style": f"fill: {p.color}", "opacity": opacity,
                     "data-entity-id": p.point_id or ""}
            if "clickable" in p.classes:
                attrs["tabindex"] = "0"
            ET.SubElement(parent, "circle", attrs)
        elif p.kind is PrimitiveKind.MARKER:
            ET.SubElement(
                parent,
                "polygon",
                {**key, "class": " ".join(sorted(p.classes)), "points": triangle_points(p.x, p.y, p.size),
                 "style": f"fill: {p.color}", "opacity": opacity, "data-marker-id": p.point_id or "",
                 "tabindex": "0"},
            )

    @staticmethod
    def _legend(root: ET.Element, legend: Sequence[LegendItem], origin: tuple[float, float], position: str) -> None:
        group = ET.SubElement(root, "g", {"class": f"legend legend-{position}"})
        x0, y0 = origin
        for idx, item in enumerate(legend):
            y = y0 + idx * LEGEND_ROW
            css = "legend-item pulsing" if item.pulsing else "legend-item"
            row = ET.SubElement(group, "g", {"class": css, "data-point-id": item.point_id})
            ET.SubElement(row, "circle", {"cx": fmt_num(x0 + 4), "cy": fmt_num(y - 4), "r": "4",
                                          "style": f"fill: {item.color}"})
            text = item.label if item.distance_text is None else f"{item.label} ({item.distance_text})"
            ET.SubElement(row, "text", {"x": fmt_num(x0 + 12), "y": fmt_num(y)}).text = text

    @staticmethod
    def _tooltip(root: ET.Element, lines: Sequence[str], left: float, top: float) -> None:
        group = ET.SubElement(root, "g", {"class": "tooltip", "transform": f"translate({fmt_num(left)},{fmt_num(top)})"})
        for idx, line in enumerate(lines):
            ET.SubElement(group, "text", {"x": "6", "y": fmt_num(TOOLTIP_LINE * (idx + 1))}).text = line

    def _output(self, root: ET.Element) -> RenderOutput:
        content = ET.tostring(root, encoding="unicode")
        return RenderOutput(backend=self.name, media_type="image/svg+xml", content=content, lines=[content])
