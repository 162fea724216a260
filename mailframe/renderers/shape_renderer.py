"""Rendering of vector primitives as single-cell tables."""

from __future__ import annotations

import logging
from typing import Optional

from ..engine.style import CellStyle
from ..models.fragment import PositionedFragment
from ..models.node import ShapeNode, ShapeType, SolidPaint
from ..utils.color_utils import rgba_css
from ..utils.units import js_round, px
from .render_utils import absolute_table_style, paint_css, presentation_table

logger = logging.getLogger(__name__)


class ShapeRenderer:
    """Render a filled, stroked, rounded shape as a positioned table cell."""

    def render(self, node: ShapeNode, x: float, y: float) -> Optional[PositionedFragment]:
        bbox = node.bbox
        if bbox is None:
            return None

        fill = node.first_fill
        cell = CellStyle(
            width=px(bbox.width),
            height=px(bbox.height),
            box_sizing="border-box",
            background_color=paint_css(fill) if isinstance(fill, SolidPaint) else None,
            border=self._border(node),
            border_radius=self._border_radius(node),
        )
        rows = f'<tr><td style="{cell.to_css()}">&nbsp;</td></tr>'
        markup = presentation_table(absolute_table_style(x, y, bbox.width, bbox.height), rows)
        return PositionedFragment(
            markup=markup,
            left=js_round(x),
            top=js_round(y),
            width=js_round(bbox.width),
            height=js_round(bbox.height),
        )

    @staticmethod
    def _border(node: ShapeNode) -> Optional[str]:
        stroke = node.stroke
        if stroke is None or stroke.weight <= 0 or not isinstance(stroke.paint, SolidPaint):
            return None
        return f"{px(stroke.weight)} solid {rgba_css(stroke.paint.color, stroke.paint.opacity)}"

    @staticmethod
    def _border_radius(node: ShapeNode) -> Optional[str]:
        if node.shape_type is ShapeType.ELLIPSE:
            return "50%"
        radius = node.corner_radius
        if radius is None:
            return None
        if radius.mixed:
            return " ".join(px(r) for r in (
                radius.top_left, radius.top_right, radius.bottom_right, radius.bottom_left))
        return px(radius.top_left)
