"""
Inline style records.

Each fragment part (positioned table, cell, text block, span) has a fixed
record of the CSS properties it may carry. Serialization follows field order
and skips unset fields, so identical inputs always give identical markup.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional


def _declarations(record) -> str:
    parts = []
    for f in fields(record):
        value = getattr(record, f.name)
        if value is None:
            continue
        parts.append(f"{f.name.replace('_', '-')}:{value};")
    return " ".join(parts)


@dataclass(frozen=True, slots=True)
class TableStyle:
    """Style of a fragment's outer table."""

    position: Optional[str] = None
    left: Optional[str] = None
    top: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
    border_collapse: Optional[str] = None
    border_spacing: Optional[str] = None
    border_radius: Optional[str] = None
    overflow: Optional[str] = None

    def to_css(self) -> str:
        return _declarations(self)


@dataclass(frozen=True, slots=True)
class CellStyle:
    """Style of a ``<td>``."""

    width: Optional[str] = None
    height: Optional[str] = None
    box_sizing: Optional[str] = None
    border_radius: Optional[str] = None
    background: Optional[str] = None
    background_color: Optional[str] = None
    color: Optional[str] = None
    font_weight: Optional[str] = None
    border: Optional[str] = None
    padding: Optional[str] = None
    margin: Optional[str] = None
    font_family: Optional[str] = None
    font_size: Optional[str] = None
    text_align: Optional[str] = None
    white_space: Optional[str] = None
    line_height: Optional[str] = None
    mso_line_height_rule: Optional[str] = None

    def to_css(self) -> str:
        return _declarations(self)


@dataclass(frozen=True, slots=True)
class BlockStyle:
    """Style of the ``<div>`` wrapping a text node inside a table cell."""

    padding: Optional[str] = None
    margin: Optional[str] = None
    text_align: Optional[str] = None
    white_space: Optional[str] = None
    word_wrap: Optional[str] = None
    display: Optional[str] = None
    line_height: Optional[str] = None
    mso_line_height_rule: Optional[str] = None

    def to_css(self) -> str:
        return _declarations(self)


@dataclass(frozen=True, slots=True)
class SpanStyle:
    """Style of one styled text run."""

    font_family: Optional[str] = None
    font_size: Optional[str] = None
    font_weight: Optional[str] = None
    color: Optional[str] = None
    line_height: Optional[str] = None
    text_decoration: Optional[str] = None

    def to_css(self) -> str:
        return _declarations(self)
