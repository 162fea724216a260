"""Design-tree and export data models."""

from .node import (
    BaseNode,
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
    iter_tree,
    suppressed_fills,
)
from .fragment import (
    Asset,
    BackgroundKind,
    BackgroundSpec,
    ExportResult,
    GifPlaceholder,
    LinkPlaceholder,
    PositionedFragment,
)

__all__ = [
    "Asset",
    "BackgroundKind",
    "BackgroundSpec",
    "BaseNode",
    "ContainerNode",
    "ContainerType",
    "CornerRadius",
    "DesignNode",
    "ExportResult",
    "FontName",
    "GifPlaceholder",
    "ImageNode",
    "ImagePaint",
    "LineHeight",
    "LineHeightUnit",
    "LinkPlaceholder",
    "Paint",
    "PositionedFragment",
    "ShapeNode",
    "ShapeType",
    "SolidPaint",
    "Stroke",
    "TextDecoration",
    "TextNode",
    "TextRun",
    "iter_tree",
    "suppressed_fills",
]
