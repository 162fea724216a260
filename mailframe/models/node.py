"""
Design-tree node model.

The host design tool owns the real tree; these dataclasses are the read-only
view the compiler works on. Node kinds form a closed set:

- ``ContainerNode``: frames, groups, components and instances (own children)
- ``TextNode``: character data plus styled runs
- ``ShapeNode``: vector primitives painted with fills, strokes and radii
- ``ImageNode``: anything else the host can only hand over as a bitmap
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from ..engine.geometry import Rect


class ContainerType(str, Enum):
    FRAME = "FRAME"
    GROUP = "GROUP"
    COMPONENT = "COMPONENT"
    INSTANCE = "INSTANCE"


class ShapeType(str, Enum):
    RECTANGLE = "RECTANGLE"
    ELLIPSE = "ELLIPSE"
    LINE = "LINE"
    POLYGON = "POLYGON"
    STAR = "STAR"
    VECTOR = "VECTOR"


class TextDecoration(str, Enum):
    NONE = "NONE"
    UNDERLINE = "UNDERLINE"
    STRIKETHROUGH = "STRIKETHROUGH"


class LineHeightUnit(str, Enum):
    AUTO = "AUTO"
    PIXELS = "PIXELS"
    PERCENT = "PERCENT"


RGB = Tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class SolidPaint:
    """Solid color paint, channels in the 0-1 range."""

    color: RGB
    opacity: float = 1.0


@dataclass(frozen=True, slots=True)
class ImagePaint:
    """Image paint referencing host image data by hash/reference."""

    image_ref: str
    opacity: float = 1.0


Paint = Union[SolidPaint, ImagePaint]


@dataclass(frozen=True, slots=True)
class Stroke:
    paint: Paint
    weight: float = 1.0


@dataclass(frozen=True, slots=True)
class CornerRadius:
    """Corner radii; ``mixed`` marks independently set corners."""

    top_left: float = 0.0
    top_right: float = 0.0
    bottom_right: float = 0.0
    bottom_left: float = 0.0
    mixed: bool = False

    @classmethod
    def uniform(cls, radius: float) -> "CornerRadius":
        return cls(radius, radius, radius, radius, mixed=False)


@dataclass(frozen=True, slots=True)
class FontName:
    family: str
    style: str = "Regular"


@dataclass(frozen=True, slots=True)
class LineHeight:
    unit: LineHeightUnit = LineHeightUnit.AUTO
    value: float = 0.0


@dataclass(frozen=True, slots=True)
class TextRun:
    """A styled slice ``characters[start:end]`` of a text node."""

    start: int
    end: int
    font: FontName
    font_weight: int = 400
    font_size: float = 16.0
    fills: Tuple[Paint, ...] = ()
    line_height: LineHeight = LineHeight()
    decoration: TextDecoration = TextDecoration.NONE


@dataclass(eq=False)
class BaseNode:
    id: str
    name: str = ""
    visible: bool = True
    bbox: Optional[Rect] = None
    fills: List[Paint] = field(default_factory=list)

    @property
    def first_fill(self) -> Optional[Paint]:
        return self.fills[0] if self.fills else None

    @property
    def has_image_fill(self) -> bool:
        return any(isinstance(paint, ImagePaint) for paint in self.fills)


@dataclass(eq=False)
class ContainerNode(BaseNode):
    container_type: ContainerType = ContainerType.FRAME
    children: List["DesignNode"] = field(default_factory=list)

    @property
    def kind(self) -> str:
        return self.container_type.value


@dataclass(eq=False)
class TextNode(BaseNode):
    characters: str = ""
    runs: List[TextRun] = field(default_factory=list)
    text_align: str = "LEFT"
    line_height: Optional[LineHeight] = None

    @property
    def kind(self) -> str:
        return "TEXT"


@dataclass(eq=False)
class ShapeNode(BaseNode):
    shape_type: ShapeType = ShapeType.RECTANGLE
    stroke: Optional[Stroke] = None
    corner_radius: Optional[CornerRadius] = None

    @property
    def kind(self) -> str:
        return self.shape_type.value


@dataclass(eq=False)
class ImageNode(BaseNode):
    node_type: str = "IMAGE"

    @property
    def kind(self) -> str:
        return self.node_type


DesignNode = Union[ContainerNode, TextNode, ShapeNode, ImageNode]


def iter_tree(node: DesignNode) -> Iterator[DesignNode]:
    """Pre-order traversal of ``node`` and all of its descendants."""
    yield node
    if isinstance(node, ContainerNode):
        for child in node.children:
            yield from iter_tree(child)


@contextmanager
def suppressed_fills(node: DesignNode) -> Iterator[DesignNode]:
    """
    Temporarily remove a node's fills.

    The original fill list is put back when the block exits, whether or not
    the block raised.
    """
    original = list(node.fills)
    node.fills = []
    try:
        yield node
    finally:
        node.fills = original
