"""Rendering of bitmap references."""

from __future__ import annotations

from html import escape
from pathlib import PurePosixPath

from ..models.fragment import PositionedFragment
from ..utils.units import js_round
from .render_utils import absolute_table_style, presentation_table


class ImageRenderer:
    """Wrap an image reference in a positioned single-cell table."""

    def render(self, src: str, x: float, y: float, width: float, height: float) -> PositionedFragment:
        w, h = js_round(width), js_round(height)
        alt = PurePosixPath(src).name.split(".")[0] or "export image"

        img = (
            f'<img src="{escape(src)}" alt="{escape(alt)}" width="{w}" height="{h}" '
            f'style="display: block; border: 0; width: 100%; height: auto;">'
        )
        markup = presentation_table(absolute_table_style(x, y, width, height), f"<tr><td>{img}</td></tr>")
        return PositionedFragment(markup=markup, left=js_round(x), top=js_round(y), width=w, height=h)
