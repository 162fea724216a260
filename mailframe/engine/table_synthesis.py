"""
Table synthesis.

A ``[table]`` frame holds loosely placed text nodes on top of colored
rectangles. The synthesizer rebuilds it as a real bordered data table:

1. collect visible text leaves and fill-bearing shapes (background donors)
2. bucket the text into rows on a fixed vertical grid, order cells by x
3. infer each cell's background from the donor under the text's center
4. override dark-on-dark combinations with white
5. round the four outer corners and size cells proportionally

The rendered table is taller or shorter than the source frame; the returned
``expected_height`` is a fixed per-row estimate the walker uses to shift
the following siblings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..config import ExportConfig
from ..models.node import ContainerNode, DesignNode, ShapeNode, SolidPaint, TextNode
from ..renderers.render_utils import absolute_table_style, presentation_table
from ..renderers.text_renderer import TextSegmentStyler
from ..utils.color_utils import brightness, hex_brightness, rgb_to_hex
from ..utils.units import px
from .clustering import bucket_rows
from .style import CellStyle, TableStyle

logger = logging.getLogger(__name__)

WHITE = "#ffffff"
BLACK = "#000000"
CELL_FONT_STACK = "'Roboto', Arial, Helvetica, sans-serif"


@dataclass(frozen=True, slots=True)
class TableSynthesisResult:
    """Markup of a synthesized table and its estimated rendered height."""

    markup: str = ""
    expected_height: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.markup


@dataclass(frozen=True, slots=True)
class CellSpec:
    """Resolved presentation of one table cell."""

    row: int
    column: int
    width_percent: str
    background: str
    corners: tuple
    header: bool


def collect_text_leaves(node: DesignNode) -> List[TextNode]:
    """Visible text nodes with bounds; invisible subtrees are skipped entirely."""
    if isinstance(node, TextNode):
        return [node] if node.visible and node.bbox is not None else []
    leaves: List[TextNode] = []
    if isinstance(node, ContainerNode) and node.visible:
        for child in node.children:
            leaves.extend(collect_text_leaves(child))
    return leaves


def collect_donors(node: ContainerNode) -> List[DesignNode]:
    """Visible fill-bearing shapes and containers under ``node``, in paint (pre-)order."""
    donors: List[DesignNode] = []
    for child in node.children:
        if not child.visible:
            continue
        if isinstance(child, (ShapeNode, ContainerNode)) and child.fills and child.bbox is not None:
            donors.append(child)
        if isinstance(child, ContainerNode):
            donors.extend(collect_donors(child))
    return donors


def row_width_percentages(widths: Sequence[float]) -> List[str]:
    """
    Percent widths proportional to ``widths`` that add up to exactly 100.

    The last cell absorbs the rounding remainder of the others.
    """
    count = len(widths)
    if count == 0:
        return []
    total = sum(max(w, 0.0) for w in widths)
    if total <= 0:
        shares = [100.0 / count] * count
    else:
        shares = [max(w, 0.0) / total * 100 for w in widths]

    rounded = [round(share, 2) for share in shares[:-1]]
    rounded.append(round(100.0 - sum(rounded), 2))
    return [f"{value:.2f}" for value in rounded]


class TableSynthesizer:
    """Convert a ``[table]`` container into a bordered table fragment."""

    def __init__(self, styler: TextSegmentStyler, config: Optional[ExportConfig] = None):
        self.styler = styler
        self.config = config or ExportConfig()

    async def synthesize(self, node: DesignNode, x: float, y: float) -> TableSynthesisResult:
        """
        Build the table markup for ``node`` positioned at (``x``, ``y``).

        Args:
            node: The marked container
            x: Left offset relative to the export root
            y: Top offset relative to the export root (drift already applied)

        Returns:
            The synthesized markup and expected height, or an empty result
            when the node is not a container or holds no visible text
        """
        if not isinstance(node, ContainerNode) or node.bbox is None:
            return TableSynthesisResult()

        leaves = collect_text_leaves(node)
        if not leaves:
            logger.debug(f"Table {node.name!r} has no visible text, skipping")
            return TableSynthesisResult()

        donors = collect_donors(node)
        rows = bucket_rows(
            leaves,
            y_of=lambda leaf: leaf.bbox.y,
            x_of=lambda leaf: leaf.bbox.x,
            granularity=self.config.row_bucket,
        )

        header_html: List[str] = []
        body_html: List[str] = []
        for row_index, row in enumerate(rows):
            specs = self.cell_specs(row, row_index, len(rows), donors)
            cells = []
            for leaf, spec in zip(row, specs):
                content = await self.styler.cell_markup(leaf)
                cells.append(self._cell_html(spec, content))
            row_html = f"<tr>{''.join(cells)}</tr>"
            (header_html if row_index == 0 else body_html).append(row_html)

        expected_height = len(rows) * self.config.table_row_height + self.config.table_border_overhead
        markup = self._table_html(x, y, node.bbox.width, "".join(header_html), "".join(body_html))
        logger.debug(f"Synthesized table {node.name!r}: {len(rows)} rows, expected height {expected_height}")
        return TableSynthesisResult(markup=markup, expected_height=expected_height)

    # ------------------------------------------------------------------
    # Cell inference
    # ------------------------------------------------------------------
    def cell_specs(self, row: Sequence[TextNode], row_index: int, row_count: int,
                   donors: Sequence[DesignNode]) -> List[CellSpec]:
        widths = row_width_percentages([leaf.bbox.width for leaf in row])
        header = row_index == 0
        specs = []
        for column, leaf in enumerate(row):
            background = self.contrast_safe_background(self.detect_background(leaf, donors), leaf)
            if background is None:
                background = self.config.accent_color if header else WHITE
            specs.append(CellSpec(
                row=row_index,
                column=column,
                width_percent=widths[column],
                background=background,
                corners=self.corner_radii(row_index, column, row_count, len(row)),
                header=header,
            ))
        return specs

    def detect_background(self, leaf: TextNode, donors: Sequence[DesignNode]) -> Optional[str]:
        """Hex color of the first non-near-white solid donor under the leaf's center."""
        center = leaf.bbox.center
        for donor in donors:
            if not donor.bbox.expanded(self.config.donor_margin).contains_point(center):
                continue
            fill = donor.first_fill
            if isinstance(fill, SolidPaint) and brightness(fill.color) < self.config.near_white_brightness:
                return rgb_to_hex(fill.color)
        return None

    def contrast_safe_background(self, background: Optional[str], leaf: TextNode) -> Optional[str]:
        """Force white behind dark text sitting on a dark inferred background."""
        if background is None:
            return None
        text_fill = leaf.first_fill
        text_brightness = brightness(text_fill.color) if isinstance(text_fill, SolidPaint) else 0.0
        background_brightness = hex_brightness(background)
        dark = self.config.dark_brightness
        if background_brightness is not None and background_brightness < dark and text_brightness < dark:
            return WHITE
        return background

    def corner_radii(self, row: int, column: int, row_count: int, column_count: int) -> tuple:
        """(top-left, top-right, bottom-right, bottom-left) radii of one cell."""
        radius = self.config.corner_radius
        first_row, last_row = row == 0, row == row_count - 1
        first_col, last_col = column == 0, column == column_count - 1
        return (
            radius if first_row and first_col else 0,
            radius if first_row and last_col else 0,
            radius if last_row and last_col else 0,
            radius if last_row and first_col else 0,
        )

    # ------------------------------------------------------------------
    # Markup
    # ------------------------------------------------------------------
    def _cell_html(self, spec: CellSpec, content: str) -> str:
        accent = self.config.accent_color
        style = CellStyle(
            border_radius=" ".join(px(r) if r else "0" for r in spec.corners) if any(spec.corners) else None,
            background=spec.background,
            color=WHITE if spec.header else BLACK,
            font_weight="bold" if spec.header else "normal",
            border=f"2px solid {accent}",
            padding="8px 10px",
            font_family=CELL_FONT_STACK,
            font_size="13px",
            line_height="18px",
            box_sizing="border-box",
        )
        return (
            f'<td align="left" valign="middle" width="{spec.width_percent}%" '
            f'style="{style.to_css()}">{content}</td>'
        )

    def _table_html(self, x: float, y: float, width: float, header: str, body: str) -> str:
        inner_style = TableStyle(
            width="100%",
            border_collapse="separate",
            border_spacing="0",
            border_radius=px(self.config.corner_radius),
            overflow="hidden",
        )
        inner = (
            f'<table role="presentation" width="100%" border="0" cellpadding="5" cellspacing="0" '
            f'style="{inner_style.to_css()}"><thead>{header}</thead><tbody>{body}</tbody></table>'
        )
        return presentation_table(absolute_table_style(x, y, width), f"<tr><td>{inner}</td></tr>")
