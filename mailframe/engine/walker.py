"""
Node walker.

Turns the visible top-level children of an export root into positioned
fragments, one per child, in top-to-bottom order. Synthesized tables may be
taller than the frame they replace; the walker folds that drift into an
offset that is added to every later sibling.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from ..config import ExportConfig
from ..credits import is_table_region
from ..exceptions import LayoutError
from ..host import DesignHost
from ..models.fragment import (
    Asset,
    BackgroundSpec,
    GifPlaceholder,
    LinkPlaceholder,
    PositionedFragment,
)
from ..models.node import (
    ContainerNode,
    DesignNode,
    ImagePaint,
    ShapeNode,
    ShapeType,
    SolidPaint,
    TextNode,
    suppressed_fills,
)
from ..renderers import ImageRenderer, ShapeRenderer, TextRenderer, TextSegmentStyler
from ..utils.color_utils import rgb_to_hex
from ..utils.units import js_round
from . import directives
from .table_synthesis import TableSynthesizer

logger = logging.getLogger(__name__)


@dataclass
class WalkResult:
    """Everything the walk of one export root produced."""

    fragments: List[PositionedFragment] = field(default_factory=list)
    background: BackgroundSpec = field(default_factory=BackgroundSpec.none)
    assets: List[Asset] = field(default_factory=list)
    preview_assets: List[Asset] = field(default_factory=list)
    link_placeholders: List[LinkPlaceholder] = field(default_factory=list)
    gif_placeholders: List[GifPlaceholder] = field(default_factory=list)
    offset: int = 0


@dataclass(frozen=True)
class PlacedNode:
    """A top-level child with its coordinates relative to the export root."""

    node: DesignNode
    x: float
    y: float


class _AssetCounter:
    """Counter shared by background, raster and preview asset names."""

    def __init__(self) -> None:
        self.value = 0

    def next_name(self, prefix: str) -> str:
        self.value += 1
        return f"{prefix}-{self.value}.png"


class NodeWalker:
    """
    Walk an export root and render its children.

    Example:
        >>> walker = NodeWalker(StaticDesignHost())
        >>> result = asyncio.run(walker.walk(frame))
        >>> len(result.fragments)
        3
    """

    def __init__(self, host: DesignHost, config: Optional[ExportConfig] = None):
        self.host = host
        self.config = config or ExportConfig()
        self.styler = TextSegmentStyler(host, self.config)
        self.text_renderer = TextRenderer(self.styler)
        self.shape_renderer = ShapeRenderer()
        self.image_renderer = ImageRenderer()
        self.table_synthesizer = TableSynthesizer(self.styler, self.config)

    async def walk(self, root: ContainerNode) -> WalkResult:
        """
        Render every visible top-level child of ``root``.

        Raises:
            LayoutError: If the root has no bounding box
        """
        if root.bbox is None:
            raise LayoutError(f"Root {root.name!r} has no bounding box")

        result = WalkResult()
        counter = _AssetCounter()
        result.background = await self.resolve_background(root, counter, result.assets)

        offset = 0
        for placed in self.placed_children(root):
            if self.is_full_bleed_background(placed, root):
                logger.debug(f"Skipping full-bleed background rectangle {placed.node.name!r}")
                continue
            fragment, offset = await self.visit(placed, offset, counter, result)
            if fragment is not None:
                result.fragments.append(fragment)

        result.offset = offset
        logger.info(f"Walked {root.name!r}: {len(result.fragments)} fragments, "
                    f"{len(result.assets)} assets, offset {offset}px")
        return result

    @staticmethod
    def placed_children(root: ContainerNode) -> List[PlacedNode]:
        """Visible children with bounds, stably sorted by relative top."""
        placed = []
        for child in root.children:
            if not child.visible or child.bbox is None:
                continue
            dx, dy = child.bbox.relative_to(root.bbox)
            placed.append(PlacedNode(child, dx, dy))
        placed.sort(key=lambda item: item.y)
        return placed

    def is_full_bleed_background(self, placed: PlacedNode, root: ContainerNode) -> bool:
        node = placed.node
        if not isinstance(node, ShapeNode) or node.shape_type is not ShapeType.RECTANGLE:
            return False
        if (
            js_round(node.bbox.width) != js_round(root.bbox.width)
            or js_round(node.bbox.height) != js_round(root.bbox.height)
            or js_round(placed.x) != 0
            or js_round(placed.y) != 0
        ):
            return False
        fill = node.first_fill
        threshold = self.config.near_white_channel
        return isinstance(fill, SolidPaint) and all(channel > threshold for channel in fill.color)

    async def resolve_background(self, root: ContainerNode, counter: _AssetCounter,
                                 assets: List[Asset]) -> BackgroundSpec:
        fill = root.first_fill
        if isinstance(fill, SolidPaint):
            return BackgroundSpec.color(rgb_to_hex(fill.color))
        if not isinstance(fill, ImagePaint):
            return BackgroundSpec.none()

        name = counter.next_name("bg-image")
        try:
            data = await self.host.image_bytes(fill.image_ref)
        except Exception as e:
            logger.warning(f"Could not export frame background image: {e}")
            return BackgroundSpec.none()
        if data is None:
            logger.warning(f"Background image {fill.image_ref} is not available")
            return BackgroundSpec.none()

        assets.append(Asset(name, data))
        return BackgroundSpec.image(self.config.asset_path(name))

    # ------------------------------------------------------------------
    # Per-node dispatch
    # ------------------------------------------------------------------
    async def visit(self, placed: PlacedNode, offset: int, counter: _AssetCounter,
                    result: WalkResult) -> Tuple[Optional[PositionedFragment], int]:
        """
        Render one child at its drift-corrected position.

        Returns:
            The fragment (``None`` when the node produced nothing) and the
            offset to apply to the following siblings
        """
        node = placed.node
        x, y = placed.x, placed.y + offset

        if is_table_region(node):
            synthesized = await self.table_synthesizer.synthesize(node, x, y)
            drift = synthesized.expected_height - node.bbox.height
            if drift > 0:
                offset += math.ceil(drift)
            fragment = None
            if not synthesized.is_empty:
                fragment = PositionedFragment(
                    markup=synthesized.markup,
                    left=js_round(x),
                    top=js_round(y),
                    width=js_round(node.bbox.width),
                    height=synthesized.expected_height,
                )
        else:
            fragment = await self.render_node(node, x, y, counter, result)

        if fragment is not None and directives.has_directive(node.name, directives.LINK):
            fragment = await self.wrap_link(node, fragment, counter, result)
        return fragment, offset

    async def render_node(self, node: DesignNode, x: float, y: float, counter: _AssetCounter,
                          result: WalkResult) -> Optional[PositionedFragment]:
        bbox = node.bbox

        gif = directives.gif_id(node.name)
        if gif is not None:
            result.gif_placeholders.append(GifPlaceholder(gif))
            return self.image_renderer.render(self.config.asset_path(f"{gif}.gif"), x, y, bbox.width, bbox.height)

        if isinstance(node, TextNode):
            return await self.text_renderer.render(node, x, y)

        if isinstance(node, ShapeNode) and not node.has_image_fill:
            return self.shape_renderer.render(node, x, y)

        return await self.rasterize(node, x, y, counter, result)

    async def rasterize(self, node: DesignNode, x: float, y: float, counter: _AssetCounter,
                        result: WalkResult) -> Optional[PositionedFragment]:
        """Rasterize through the host; a failure omits the node."""
        name = counter.next_name("image")
        try:
            if directives.has_directive(node.name, directives.TRANSPARENT):
                with suppressed_fills(node):
                    data = await self.host.rasterize(node, self.config.raster_scale)
            else:
                data = await self.host.rasterize(node, self.config.raster_scale)
        except Exception as e:
            logger.warning(f'Could not export node "{node.name}": {e}')
            return None

        result.assets.append(Asset(name, data))
        return self.image_renderer.render(self.config.asset_path(name), x, y, node.bbox.width, node.bbox.height)

    async def wrap_link(self, node: DesignNode, fragment: PositionedFragment, counter: _AssetCounter,
                        result: WalkResult) -> PositionedFragment:
        """Wrap ``fragment`` in a link placeholder; a preview failure leaves it unwrapped."""
        url = directives.link_url(node.name)
        name = counter.next_name("link-preview")
        try:
            data = await self.host.rasterize(node, self.config.preview_scale)
        except Exception as e:
            logger.warning(f'Could not create link preview for "{node.name}": {e}')
            return fragment

        result.preview_assets.append(Asset(name, data))
        result.link_placeholders.append(LinkPlaceholder(node.id, url, name))
        markup = f'<div data-link-placeholder-id="{node.id}">{fragment.markup}</div>'
        return replace(fragment, markup=markup, link_wrapped=True)
