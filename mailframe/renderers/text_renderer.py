"""
Text rendering.

``TextSegmentStyler`` turns a text node's styled runs into inline-styled
``<span>`` elements; the spans are used bare inside synthesized table cells
or, through ``TextRenderer``, wrapped in their own positioned table.
"""

from __future__ import annotations

import asyncio
import logging
from html import escape
from typing import List, Optional, Tuple

from ..config import ExportConfig
from ..engine.style import BlockStyle, CellStyle, SpanStyle
from ..host import DesignHost
from ..models.fragment import PositionedFragment
from ..models.node import FontName, LineHeight, LineHeightUnit, TextDecoration, TextNode, TextRun
from ..utils.units import format_number, js_round, px, px_to_pt
from .render_utils import absolute_table_style, presentation_table, solid_hex

logger = logging.getLogger(__name__)

ALIGNMENTS = {
    "LEFT": "left",
    "CENTER": "center",
    "RIGHT": "right",
    "JUSTIFIED": "justify",
}

DECORATIONS = {
    TextDecoration.UNDERLINE: "underline",
    TextDecoration.STRIKETHROUGH: "line-through",
}

FALLBACK_FONTS = "Arial, Verdana, sans-serif"


def line_height_css(line_height: Optional[LineHeight]) -> Optional[str]:
    if line_height is None:
        return None
    if line_height.unit is LineHeightUnit.PIXELS:
        return px(line_height.value)
    if line_height.unit is LineHeightUnit.PERCENT:
        return f"{format_number(line_height.value)}%"
    return None


class TextSegmentStyler:
    """Convert styled text runs into inline-styled spans."""

    def __init__(self, host: DesignHost, config: Optional[ExportConfig] = None):
        self.host = host
        self.config = config or ExportConfig()

    async def load_fonts(self, node: TextNode) -> bool:
        """
        Request every distinct font used by the node's runs.

        Returns:
            True if all fonts loaded; failures are logged and rendering
            continues with the fallback font stack.
        """
        fonts: List[FontName] = list(dict.fromkeys(run.font for run in node.runs))
        if not fonts:
            return True

        results = await asyncio.gather(*(self.host.load_font(font) for font in fonts), return_exceptions=True)
        failed = [font for font, result in zip(fonts, results) if isinstance(result, Exception)]
        if failed:
            names = ", ".join(f"{font.family} {font.style}" for font in failed)
            logger.warning(f"Could not load some fonts ({names}). Using fallbacks.")
            return False
        return True

    async def spans(self, node: TextNode) -> str:
        """Inline ``<span>`` markup for every non-empty run of ``node``."""
        await self.load_fonts(node)
        return "".join(self._span(node, run) for run in node.runs)

    async def cell_markup(self, node: TextNode) -> str:
        """Spans wrapped in an inline block for use inside a table cell."""
        spans = await self.spans(node)
        line_height, mso_rule = self.paragraph_line_height(node)
        block = BlockStyle(
            padding="0",
            margin="0",
            text_align=self.alignment(node),
            white_space="normal",
            word_wrap="break-word",
            display="inline-block",
            line_height=line_height,
            mso_line_height_rule=mso_rule,
        )
        return f'<div style="{block.to_css()}">{spans}</div>'

    @staticmethod
    def alignment(node: TextNode) -> str:
        return ALIGNMENTS.get(node.text_align.upper(), "left")

    @staticmethod
    def paragraph_line_height(node: TextNode) -> Tuple[Optional[str], Optional[str]]:
        """Paragraph line-height plus the Outlook ``mso-line-height-rule`` for pixel values."""
        css = line_height_css(node.line_height)
        if css is not None and node.line_height.unit is LineHeightUnit.PIXELS:
            return css, "exactly"
        return css, None

    def _span(self, node: TextNode, run: TextRun) -> str:
        text = node.characters[run.start:run.end]
        if not text:
            return ""

        style = SpanStyle(
            font_family=f"'{run.font.family}', {FALLBACK_FONTS}",
            font_size=px_to_pt(run.font_size, self.config.px_to_pt),
            font_weight=str(run.font_weight),
            color=solid_hex(run.fills[0] if run.fills else None),
            line_height=line_height_css(run.line_height),
            text_decoration=DECORATIONS.get(run.decoration),
        )
        content = escape(text, quote=False).replace("\n", "<br>")
        return f'<span style="{style.to_css()}">{content}</span>'


class TextRenderer:
    """Render a text node as a positioned single-cell table."""

    def __init__(self, styler: TextSegmentStyler):
        self.styler = styler

    async def render(self, node: TextNode, x: float, y: float) -> Optional[PositionedFragment]:
        bbox = node.bbox
        if bbox is None:
            return None

        spans = await self.styler.spans(node)
        line_height, mso_rule = self.styler.paragraph_line_height(node)
        cell = CellStyle(
            padding="0",
            margin="0",
            text_align=self.styler.alignment(node),
            white_space="nowrap",
            line_height=line_height,
            mso_line_height_rule=mso_rule,
        )
        rows = f'<tr><td style="{cell.to_css()}">{spans}</td></tr>'
        markup = presentation_table(absolute_table_style(x, y, bbox.width, bbox.height), rows)
        return PositionedFragment(
            markup=markup,
            left=js_round(x),
            top=js_round(y),
            width=js_round(bbox.width),
            height=js_round(bbox.height),
        )
