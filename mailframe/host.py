"""
Host design-tool capabilities.

The compiler never talks to the design tool directly; it awaits the three
capabilities below at well-defined points of the walk. ``StaticDesignHost``
is the offline implementation used by the command line and the tests.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from PIL import Image, ImageDraw

from .exceptions import FontError, RasterizationError
from .models.node import (
    ContainerNode,
    DesignNode,
    FontName,
    ImagePaint,
    ShapeNode,
    ShapeType,
    SolidPaint,
    TextNode,
)
from .utils.color_utils import channel_to_byte
from .utils.units import js_round

logger = logging.getLogger(__name__)


class DesignHost(ABC):
    """Asynchronous capabilities provided by the host design tool."""

    @abstractmethod
    async def load_font(self, font: FontName) -> None:
        """Make ``font`` available for reading text metrics; raise on failure."""

    @abstractmethod
    async def rasterize(self, node: DesignNode, scale: float) -> bytes:
        """Render ``node`` (with its current fills) to PNG bytes at ``scale``."""

    @abstractmethod
    async def image_bytes(self, image_ref: str) -> Optional[bytes]:
        """Return the raw bytes of an image paint, or ``None`` if unknown."""


class StaticDesignHost(DesignHost):
    """
    Offline host backed by local files and Pillow.

    Rasterization paints the node's bounding box, its solid and image fills
    and the fills of its visible descendants; text is drawn with Pillow's
    default bitmap font. Good enough for previews and for exporting designs
    that were saved as JSON.
    """

    def __init__(
        self,
        images: Optional[Dict[str, Union[str, Path]]] = None,
        available_fonts: Optional[Iterable[str]] = None,
    ):
        """
        Initialize static host.

        Args:
            images: Mapping of image reference to image file path
            available_fonts: Font families that load successfully; ``None`` accepts all
        """
        self.images = {ref: Path(path) for ref, path in (images or {}).items()}
        self.available_fonts = set(available_fonts) if available_fonts is not None else None
        self._image_cache: Dict[str, Image.Image] = {}

    async def load_font(self, font: FontName) -> None:
        if self.available_fonts is not None and font.family not in self.available_fonts:
            raise FontError(f"Font not available: {font.family} {font.style}")

    async def image_bytes(self, image_ref: str) -> Optional[bytes]:
        path = self.images.get(image_ref)
        if path is None:
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            logger.warning(f"Cannot read image {path}: {e}")
            return None

    async def rasterize(self, node: DesignNode, scale: float) -> bytes:
        if node.bbox is None:
            raise RasterizationError(f"Node {node.name!r} has no bounds")

        width = max(1, js_round(node.bbox.width * scale))
        height = max(1, js_round(node.bbox.height * scale))
        canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(canvas)
        try:
            self._paint(canvas, draw, node, node, scale)
        except (OSError, ValueError) as e:
            raise RasterizationError(f"Cannot rasterize {node.name!r}", str(e)) from e

        buffer = BytesIO()
        canvas.save(buffer, format="PNG")
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------
    def _paint(self, canvas: Image.Image, draw: ImageDraw.ImageDraw, node: DesignNode,
               origin: DesignNode, scale: float) -> None:
        if not node.visible or node.bbox is None:
            return

        x0 = (node.bbox.x - origin.bbox.x) * scale
        y0 = (node.bbox.y - origin.bbox.y) * scale
        box = (
            js_round(x0),
            js_round(y0),
            js_round(x0 + node.bbox.width * scale) - 1,
            js_round(y0 + node.bbox.height * scale) - 1,
        )
        if box[2] < box[0] or box[3] < box[1]:
            return

        if isinstance(node, TextNode):
            color = self._text_color(node)
            draw.text((box[0], box[1]), node.characters, fill=color)
            return

        for paint in node.fills:
            if isinstance(paint, SolidPaint):
                rgba = tuple(channel_to_byte(c) for c in paint.color) + (channel_to_byte(paint.opacity),)
                if isinstance(node, ShapeNode) and node.shape_type is ShapeType.ELLIPSE:
                    draw.ellipse(box, fill=rgba)
                else:
                    draw.rectangle(box, fill=rgba)
            elif isinstance(paint, ImagePaint):
                image = self._load_image(paint.image_ref)
                if image is not None:
                    size = (box[2] - box[0] + 1, box[3] - box[1] + 1)
                    canvas.alpha_composite(image.resize(size), dest=(box[0], box[1]))

        if isinstance(node, ContainerNode):
            for child in node.children:
                self._paint(canvas, draw, child, origin, scale)

    def _load_image(self, image_ref: str) -> Optional[Image.Image]:
        if image_ref not in self._image_cache:
            path = self.images.get(image_ref)
            if path is None:
                logger.debug(f"No image registered for {image_ref}")
                return None
            with Image.open(path) as image:
                self._image_cache[image_ref] = image.convert("RGBA")
        return self._image_cache[image_ref]

    @staticmethod
    def _text_color(node: TextNode):
        fill = node.first_fill
        if isinstance(fill, SolidPaint):
            return tuple(channel_to_byte(c) for c in fill.color) + (255,)
        return (0, 0, 0, 255)
