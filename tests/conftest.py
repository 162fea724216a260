"""
Pytest configuration for mailframe
"""

import pytest
import logging
import sys
from pathlib import Path

from mailframe.engine.geometry import Rect
from mailframe.host import DesignHost
from mailframe.exceptions import FontError, RasterizationError
from mailframe.models.node import (
    ContainerNode,
    ContainerType,
    FontName,
    ImageNode,
    LineHeight,
    LineHeightUnit,
    ShapeNode,
    ShapeType,
    SolidPaint,
    TextNode,
    TextRun,
)


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory for tests that write files."""
    return Path(tmp_path)


# ----------------------------------------------------------------------
# Node factories
# ----------------------------------------------------------------------
WHITE = (1.0, 1.0, 1.0)
BLACK = (0.0, 0.0, 0.0)
DARK_BLUE = (0.1, 0.1, 0.3)
LIGHT_GRAY = (0.85, 0.85, 0.85)

_ids = iter(range(1, 1_000_000))


def _next_id() -> str:
    return f"1:{next(_ids)}"


def make_text(name="Text", x=0, y=0, width=100, height=20, characters="Hello", color=BLACK,
              family="Inter", font_size=16, font_weight=400, visible=True, runs=None,
              text_align="LEFT", line_height=None):
    fills = [SolidPaint(color)] if color is not None else []
    if runs is None:
        runs = [TextRun(
            start=0,
            end=len(characters),
            font=FontName(family, "Regular"),
            font_weight=font_weight,
            font_size=font_size,
            fills=tuple(fills),
        )]
    return TextNode(
        id=_next_id(),
        name=name,
        visible=visible,
        bbox=Rect(x, y, width, height),
        fills=fills,
        characters=characters,
        runs=runs,
        text_align=text_align,
        line_height=line_height,
    )


def make_shape(name="Rectangle", x=0, y=0, width=100, height=50, color=LIGHT_GRAY, opacity=1.0,
               shape_type=ShapeType.RECTANGLE, visible=True, fills=None, **kwargs):
    if fills is None:
        fills = [SolidPaint(color, opacity)] if color is not None else []
    return ShapeNode(
        id=_next_id(),
        name=name,
        visible=visible,
        bbox=Rect(x, y, width, height),
        fills=fills,
        shape_type=shape_type,
        **kwargs,
    )


def make_frame(name="Frame", x=0, y=0, width=600, height=400, children=(), fills=None,
               container_type=ContainerType.FRAME, visible=True, bbox=True):
    return ContainerNode(
        id=_next_id(),
        name=name,
        visible=visible,
        bbox=Rect(x, y, width, height) if bbox else None,
        fills=list(fills or []),
        container_type=container_type,
        children=list(children),
    )


def make_image(name="Vector group", x=0, y=0, width=80, height=80, fills=None, node_type="BOOLEAN_OPERATION"):
    return ImageNode(
        id=_next_id(),
        name=name,
        bbox=Rect(x, y, width, height),
        fills=list(fills or [SolidPaint(DARK_BLUE)]),
        node_type=node_type,
    )


def px_line_height(value):
    return LineHeight(LineHeightUnit.PIXELS, value)


class FakeHost(DesignHost):
    """
    In-memory host recording every capability call.

    Rasterization returns the node name as bytes and records the fills the
    node had at call time.
    """

    def __init__(self, missing_fonts=(), failing_rasters=(), failing_previews=(), images=None):
        self.missing_fonts = set(missing_fonts)
        self.failing_rasters = set(failing_rasters)
        self.failing_previews = set(failing_previews)
        self.images = dict(images or {})
        self.font_requests = []
        self.raster_calls = []

    async def load_font(self, font):
        self.font_requests.append(font)
        if font.family in self.missing_fonts:
            raise FontError(f"missing {font.family}")

    async def rasterize(self, node, scale):
        self.raster_calls.append((node.name, scale, list(node.fills)))
        failing = self.failing_previews if scale < 2 else self.failing_rasters
        if node.name in failing:
            raise RasterizationError(f"cannot rasterize {node.name}")
        return f"{node.name}@{scale}".encode()

    async def image_bytes(self, image_ref):
        return self.images.get(image_ref)


@pytest.fixture
def host():
    return FakeHost()
