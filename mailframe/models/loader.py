"""
Design-tree loader.

Builds the node model from a JSON document shaped like the host tool's REST
export::

    {
      "document": {"id": "1:2", "type": "FRAME", "name": "Newsletter",
                   "absoluteBoundingBox": {"x": 0, "y": 0, "width": 600, "height": 900},
                   "fills": [{"type": "SOLID", "color": {"r": 1, "g": 1, "b": 1}}],
                   "children": [...]},
      "images": {"<imageRef>": "assets/hero.png"}
    }

Partial styling data is tolerated: unknown paint types are dropped and
missing geometry loads as ``bbox=None``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..engine.geometry import Rect
from ..exceptions import LayoutError
from .node import (
    ContainerNode,
    ContainerType,
    CornerRadius,
    DesignNode,
    FontName,
    ImageNode,
    ImagePaint,
    LineHeight,
    LineHeightUnit,
    Paint,
    ShapeNode,
    ShapeType,
    SolidPaint,
    Stroke,
    TextDecoration,
    TextNode,
    TextRun,
)

logger = logging.getLogger(__name__)

_CONTAINER_TYPES = {t.value for t in ContainerType}
_SHAPE_TYPES = {t.value for t in ShapeType}


def load_design(path: Union[str, Path]) -> Tuple[DesignNode, Dict[str, Path]]:
    """
    Load a design document from disk.

    Args:
        path: JSON file path

    Returns:
        Root node and the image reference map (paths resolved against the file)
    """
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise LayoutError(f"Cannot read design file {path}", str(e)) from e

    root_data = payload.get("document", payload)
    images = {
        str(ref): (path.parent / image_path)
        for ref, image_path in (payload.get("images") or {}).items()
    }
    return node_from_dict(root_data), images


def node_from_dict(data: Dict[str, Any]) -> DesignNode:
    """Build a node (and its subtree) from its dictionary form."""
    if not isinstance(data, dict):
        raise LayoutError("Design node must be an object", repr(data)[:80])

    node_type = str(data.get("type", "")).upper()
    common = dict(
        id=str(data.get("id", "")),
        name=str(data.get("name", "")),
        visible=bool(data.get("visible", True)),
        bbox=_rect(data.get("absoluteBoundingBox")),
        fills=_paints(data.get("fills")),
    )

    if node_type in _CONTAINER_TYPES:
        return ContainerNode(
            container_type=ContainerType(node_type),
            children=[node_from_dict(child) for child in _list(data.get("children"))],
            **common,
        )

    if node_type == "TEXT":
        characters = str(data.get("characters", ""))
        line_height = data.get("lineHeight") or _style_line_height(data.get("style") or {})
        return TextNode(
            characters=characters,
            runs=_runs(data, characters),
            text_align=str(data.get("textAlignHorizontal", "LEFT")).upper(),
            line_height=_line_height(line_height),
            **common,
        )

    if node_type in _SHAPE_TYPES:
        return ShapeNode(
            shape_type=ShapeType(node_type),
            stroke=_stroke(data),
            corner_radius=_corner_radius(data),
            **common,
        )

    return ImageNode(node_type=node_type or "IMAGE", **common)


def _list(value: Any) -> List[Any]:
    if isinstance(value, list):
        return value
    if value is not None:
        logger.debug(f"Ignoring non-list value {value!r}")
    return []


def _number(value: Any, default: float, cast=float):
    """``cast(value)``, or ``default`` when the value is missing or malformed."""
    if value is None:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring malformed number {value!r}, using {default!r}")
        return default


def _rect(data: Optional[Dict[str, Any]]) -> Optional[Rect]:
    if not isinstance(data, dict):
        return None
    try:
        return Rect(float(data["x"]), float(data["y"]), float(data["width"]), float(data["height"]))
    except (KeyError, TypeError, ValueError):
        logger.debug(f"Ignoring malformed bounding box: {data!r}")
        return None


def _paint(data: Dict[str, Any]) -> Optional[Paint]:
    if not isinstance(data, dict) or data.get("visible") is False:
        return None

    paint_type = str(data.get("type", "")).upper()
    opacity = _number(data.get("opacity"), 1.0)
    if paint_type == "SOLID":
        color = data.get("color") or {}
        try:
            rgb = (float(color["r"]), float(color["g"]), float(color["b"]))
        except (KeyError, TypeError, ValueError):
            logger.debug(f"Ignoring solid paint without color: {data!r}")
            return None
        return SolidPaint(color=rgb, opacity=opacity)
    if paint_type == "IMAGE":
        ref = data.get("imageRef") or data.get("imageHash")
        if ref:
            return ImagePaint(image_ref=str(ref), opacity=opacity)
    logger.debug(f"Dropping unsupported paint type {paint_type!r}")
    return None


def _paints(data: Optional[List[Dict[str, Any]]]) -> List[Paint]:
    paints = []
    for item in _list(data):
        paint = _paint(item)
        if paint is not None:
            paints.append(paint)
    return paints


def _stroke(data: Dict[str, Any]) -> Optional[Stroke]:
    strokes = _paints(data.get("strokes"))
    if not strokes:
        return None
    weight = _number(data.get("strokeWeight"), 1.0)
    return Stroke(paint=strokes[0], weight=weight)


def _corner_radius(data: Dict[str, Any]) -> Optional[CornerRadius]:
    radii = data.get("rectangleCornerRadii")
    if isinstance(radii, (list, tuple)) and len(radii) == 4:
        top_left, top_right, bottom_right, bottom_left = (_number(r, 0.0) for r in radii)
        return CornerRadius(top_left, top_right, bottom_right, bottom_left, mixed=True)

    radius = data.get("cornerRadius")
    if isinstance(radius, (int, float)):
        return CornerRadius.uniform(float(radius))
    return None


def _line_height(data: Optional[Dict[str, Any]]) -> Optional[LineHeight]:
    if not isinstance(data, dict):
        return None
    try:
        unit = LineHeightUnit(str(data.get("unit", "AUTO")).upper())
    except ValueError:
        return None
    return LineHeight(unit=unit, value=_number(data.get("value"), 0.0))


def _decoration(value: Any) -> TextDecoration:
    try:
        return TextDecoration(str(value or "NONE").upper())
    except ValueError:
        return TextDecoration.NONE


def _runs(data: Dict[str, Any], characters: str) -> List[TextRun]:
    """Read ``styledTextSegments``; a node without them becomes one run styled by ``style``."""
    segments = _list(data.get("styledTextSegments"))
    if not segments:
        style = data.get("style") or {}
        segments = [{
            "start": 0,
            "end": len(characters),
            "fontName": {"family": style.get("fontFamily", "Inter"), "style": style.get("fontStyle", "Regular")},
            "fontWeight": style.get("fontWeight", 400),
            "fontSize": style.get("fontSize", 16),
            "fills": data.get("fills"),
            "lineHeight": _style_line_height(style),
            "textDecoration": style.get("textDecoration"),
        }]

    runs = []
    for segment in segments:
        if not isinstance(segment, dict):
            continue
        font = segment.get("fontName") or {}
        runs.append(TextRun(
            start=_number(segment.get("start"), 0, int),
            end=_number(segment.get("end"), len(characters), int),
            font=FontName(family=str(font.get("family", "Inter")), style=str(font.get("style", "Regular"))),
            font_weight=_number(segment.get("fontWeight"), 400, int),
            font_size=_number(segment.get("fontSize"), 16.0),
            fills=tuple(_paints(segment.get("fills"))),
            line_height=_line_height(segment.get("lineHeight")) or LineHeight(),
            decoration=_decoration(segment.get("textDecoration")),
        ))
    return runs


def _style_line_height(style: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    unit = str(style.get("lineHeightUnit", "PIXELS")).upper()
    if unit == "PIXELS" and "lineHeightPx" in style:
        return {"unit": "PIXELS", "value": style["lineHeightPx"]}
    if unit == "FONT_SIZE_%" and "lineHeightPercentFontSize" in style:
        return {"unit": "PERCENT", "value": style["lineHeightPercentFontSize"]}
    return None
