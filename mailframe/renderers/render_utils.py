"""Markup helpers shared by the fragment renderers."""

from __future__ import annotations

from typing import Optional

from ..engine.style import TableStyle
from ..models.node import Paint, SolidPaint
from ..utils.color_utils import rgb_to_hex, rgba_css
from ..utils.units import px

PRESENTATION_TABLE = '<table role="presentation" border="0" cellpadding="0" cellspacing="0"'


def absolute_table_style(x: float, y: float, width: float, height: Optional[float] = None) -> TableStyle:
    """Positioning style of a top-level fragment table."""
    return TableStyle(
        position="absolute",
        left=px(x),
        top=px(y),
        width=px(width),
        height=px(height) if height is not None else None,
    )


def presentation_table(style: TableStyle, rows: str) -> str:
    return f'{PRESENTATION_TABLE} style="{style.to_css()}">{rows}</table>'


def solid_hex(paint: Optional[Paint]) -> Optional[str]:
    """Hex color of a solid paint, ``None`` for anything else."""
    if isinstance(paint, SolidPaint):
        return rgb_to_hex(paint.color)
    return None


def paint_css(paint: SolidPaint) -> str:
    """Opaque paints as hex, translucent ones as ``rgba()``."""
    if paint.opacity >= 1:
        return rgb_to_hex(paint.color)
    return rgba_css(paint.color, paint.opacity)
