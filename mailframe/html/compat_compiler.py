"""
Absolute-to-table compatibility pass.

Legacy mail clients ignore CSS positioning. This pass re-parses the
absolute canvas, lifts every positioned table out as a typed
``PositionedFragment`` and re-emits the fragments in top-to-bottom order,
each in its own fixed table whose spacer cells reproduce the left offset.
Vertical offsets survive only inside Outlook conditional comments; other
clients rely on document order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from ..config import ExportConfig
from ..models.fragment import BackgroundSpec, PositionedFragment
from ..renderers.render_utils import PRESENTATION_TABLE
from ..utils.units import js_round, parse_px
from .assembler import (
    VML_BACKGROUND_CLOSE,
    DocumentAssembler,
    background_cell_style,
    vml_background_open,
)
from .markup_tree import Element, parse_fragment

logger = logging.getLogger(__name__)

_ABSOLUTE = re.compile(r"position\s*:\s*absolute", re.IGNORECASE)

POSITIONING_PROPERTIES = ("position", "top", "left")


def parse_style(style: Optional[str]) -> List[Tuple[str, str]]:
    """Split an inline style into ``(property, value)`` pairs, keeping order."""
    declarations = []
    for rule in (style or "").split(";"):
        prop, sep, value = rule.partition(":")
        if not sep or not prop.strip():
            continue
        declarations.append((prop.strip(), value.strip()))
    return declarations


def style_value(style: Optional[str], prop: str) -> Optional[str]:
    for name, value in parse_style(style):
        if name.lower() == prop:
            return value
    return None


def clean_style(style: Optional[str], remove: Sequence[str]) -> str:
    kept = [f"{name}:{value}" for name, value in parse_style(style) if name.lower() not in remove]
    return "; ".join(kept) + (";" if kept else "")


def is_positioned_table(element: Element) -> bool:
    return element.tag == "table" and bool(_ABSOLUTE.search(element.get("style") or ""))


def link_wrapper(element: Element) -> Optional[Element]:
    """The hyperlink or link-placeholder element directly around ``element``."""
    parent = element.parent
    if parent is None:
        return None
    if parent.tag == "a" and parent.get("href"):
        return parent
    if parent.tag == "div" and parent.has("data-link-placeholder-id"):
        return parent
    return None


class CompatibilityCompiler:
    """
    Rewrite an absolutely positioned canvas as nested fixed tables.

    Example:
        >>> compiler = CompatibilityCompiler()
        >>> html = compiler.compile(canvas_markup, 600, 800, BackgroundSpec.color("#ffffff"))
    """

    def __init__(self, config: Optional[ExportConfig] = None, assembler: Optional[DocumentAssembler] = None):
        self.config = config or ExportConfig()
        self.assembler = assembler or DocumentAssembler(self.config)

    def compile(self, markup: str, width: float, height: float, background: BackgroundSpec) -> str:
        """
        Convert ``markup`` to a table-layout document.

        Args:
            markup: Absolute canvas (or any fragment) to convert
            width: Export width in pixels
            height: Source export height in pixels (the output height is recomputed)
            background: Background of the export root

        Returns:
            The complete document, or ``markup`` unchanged when it holds no
            positioned tables
        """
        fragments = self.extract(markup, width)
        if not fragments:
            logger.debug("No positioned tables found, leaving markup unchanged")
            return markup
        return self._document(fragments, width, height, background)

    def compile_fragments(self, fragments: Sequence[PositionedFragment], width: float, height: float,
                          background: BackgroundSpec) -> str:
        """
        Convert the walker's fragments to a table-layout document.

        Geometry comes from the fragments themselves, so synthesized tables
        keep their expected height instead of the markup fallback.
        """
        return self._document(self.lift(fragments, width), width, height, background)

    def _document(self, fragments: Sequence[PositionedFragment], width: float, height: float,
                  background: BackgroundSpec) -> str:
        container = self.render_container(fragments, width, background)
        logger.info(f"Compatibility layout: {len(fragments)} fragments, "
                    f"height {self.container_height(fragments)}px (source {js_round(height)}px)")
        return self.assembler.email_document(container, width)

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------
    def extract(self, markup: str, canvas_width: float) -> List[PositionedFragment]:
        """Positioned tables of ``markup`` as fragments, in document order."""
        root = parse_fragment(markup)
        canvas = js_round(canvas_width)
        fragments = []
        for table in root.find_outermost(is_positioned_table):
            fragments.append(self._extract_table(table, canvas))
        return fragments

    def lift(self, fragments: Sequence[PositionedFragment], canvas_width: float) -> List[PositionedFragment]:
        """Strip positioning from each fragment's markup, keeping its typed geometry."""
        canvas = js_round(canvas_width)
        lifted = []
        for fragment in fragments:
            extracted = self.extract(fragment.markup, canvas)
            if not extracted:
                logger.debug(f"Fragment at {fragment.left},{fragment.top} has no positioned table, skipped")
                continue
            lifted.append(replace(
                extracted[0],
                left=fragment.left,
                top=fragment.top,
                width=min(fragment.width, canvas),
                height=fragment.height,
                link_wrapped=extracted[0].link_wrapped or fragment.link_wrapped,
            ))
        return lifted

    def _extract_table(self, table: Element, canvas_width: int) -> PositionedFragment:
        style = table.get("style") or ""
        top = parse_px(style_value(style, "top"))
        left = parse_px(style_value(style, "left"))
        width = parse_px(style_value(style, "width"), default=canvas_width)
        text_align = style_value(style, "text-align") or table.get("align") or "left"
        vertical_align = style_value(style, "vertical-align") or table.get("valign") or "top"
        height = self.element_height(table)

        table.set("style", clean_style(style, POSITIONING_PROPERTIES))

        unit = link_wrapper(table)
        return PositionedFragment(
            markup=(unit or table).serialize(),
            left=left,
            top=top,
            width=min(width, canvas_width),
            height=height,
            link_wrapped=unit is not None,
            text_align=text_align,
            vertical_align=vertical_align,
        )

    def element_height(self, element: Element) -> int:
        """Declared height (style, then attribute, then fallback) plus vertical padding."""
        style = element.get("style") or ""
        height = parse_px(style_value(style, "height")) or parse_px(element.get("height"))
        padding = parse_px(style_value(style, "padding-top")) + parse_px(style_value(style, "padding-bottom"))
        return (height or self.config.fallback_fragment_height) + padding

    # ------------------------------------------------------------------
    # Re-emission
    # ------------------------------------------------------------------
    def container_height(self, fragments: Sequence[PositionedFragment]) -> int:
        """Lowest fragment bottom plus container borders and padding."""
        needed = max((fragment.bottom for fragment in fragments), default=0)
        return needed + 2 * self.config.container_border + self.config.container_padding

    def render_container(self, fragments: Sequence[PositionedFragment], width: float,
                         background: BackgroundSpec) -> str:
        """Bordered container cell holding every fragment, sorted by (top, left)."""
        border = self.config.container_border
        container_width = js_round(width)
        container_height = self.container_height(fragments)
        inner_width = container_width - 2 * border
        inner_height = container_height - 2 * border

        ordered = sorted(fragments, key=lambda fragment: (fragment.top, fragment.left))
        rows = [self.render_fragment(fragment, inner_width) for fragment in ordered]

        cell_style = background_cell_style(background, [
            f"border:{border}px solid #dddddd;",
            "box-sizing:border-box;",
            f"width:{inner_width}px;",
            f"height:{inner_height}px;",
        ])
        return "\n".join([
            f'{PRESENTATION_TABLE} width="{container_width}" '
            f'style="width:{container_width}px; height:{container_height}px;">',
            f'<tr><td bgcolor="{background.bgcolor()}" background="{background.image_url}" '
            f'width="{container_width}" height="{container_height}" valign="top" class="email-container" '
            f'style="{cell_style}">',
            vml_background_open(container_width, container_height, background),
            *rows,
            VML_BACKGROUND_CLOSE,
            "</td></tr>",
            "</table>",
        ])

    def render_fragment(self, fragment: PositionedFragment, inner_width: int) -> str:
        """One fragment as its own fixed table; link units get a single cell."""
        align = f"text-align:{fragment.text_align}; vertical-align:{fragment.vertical_align};"

        if fragment.link_wrapped:
            mso_left = fragment.left
            table = (
                f'{PRESENTATION_TABLE} width="{fragment.width}" style="width:{fragment.width}px;">'
                f'<tr><td style="padding:0; {align}">{fragment.markup}</td></tr></table>'
            )
        else:
            mso_left = 0
            left = max(0, fragment.left)
            right = max(0, inner_width - left - fragment.width)
            table = (
                f'{PRESENTATION_TABLE} width="{inner_width}" style="width:{inner_width}px;"><tr>'
                f'<td width="{left}" style="width:{left}px;"></td>'
                f'<td width="{fragment.width}" style="width:{fragment.width}px; {align}">{fragment.markup}</td>'
                f'<td width="{right}" style="width:{right}px;"></td>'
                f"</tr></table>"
            )

        return (
            f'<!--[if mso]><div style="position:absolute; top:{fragment.top}px; left:{mso_left}px;"><![endif]-->'
            f"{table}"
            "<!--[if mso]></div><![endif]-->"
        )
