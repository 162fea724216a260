"""Per-kind fragment renderers."""

from .image_renderer import ImageRenderer
from .shape_renderer import ShapeRenderer
from .text_renderer import TextRenderer, TextSegmentStyler

__all__ = ["ImageRenderer", "ShapeRenderer", "TextRenderer", "TextSegmentStyler"]
