"""
Layout analysis of an export root.

Groups the root's visible children into horizontal rows and reports
anything that will not survive the export unchanged:

- children outside the root's bounds
- table regions that will grow and push later siblings down
- nodes without bounds, which the walker skips
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..config import ExportConfig
from ..credits import count_table_regions, is_table_region
from ..engine.clustering import Row, cluster_rows
from ..engine.walker import NodeWalker, PlacedNode
from ..models.node import ContainerNode
from ..utils.units import js_round


class LayoutAnalyzer:
    """Frame-level row analysis used by the ``inspect`` command."""

    def __init__(self, root: ContainerNode, config: Optional[ExportConfig] = None):
        """
        Args:
            root: Export root (a frame, component or instance)
            config: Export configuration (row tolerance)
        """
        self.root = root
        self.config = config or ExportConfig()
        self.warnings: List[str] = []

    def placed_children(self) -> List[PlacedNode]:
        if self.root.bbox is None:
            return []
        return NodeWalker.placed_children(self.root)

    def rows(self) -> List[Row[PlacedNode]]:
        """Visible children clustered into rows, top to bottom, left to right."""
        return cluster_rows(
            self.placed_children(),
            y_of=lambda placed: placed.y,
            height_of=lambda placed: placed.node.bbox.height,
            x_of=lambda placed: placed.x,
            tolerance=self.config.row_tolerance,
        )

    def summary(self) -> Dict[str, Any]:
        """
        Row structure plus warnings.

        Returns:
            Dict with ``name``, ``width``, ``height``, ``table_regions``,
            ``rows`` (each with ``y``, ``height`` and member ``nodes``) and
            ``warnings``
        """
        self.warnings.clear()
        self._check_bounds()
        self._check_tables()

        bbox = self.root.bbox
        return {
            "name": self.root.name,
            "width": js_round(bbox.width) if bbox else None,
            "height": js_round(bbox.height) if bbox else None,
            "table_regions": count_table_regions(self.root),
            "rows": [
                {
                    "y": js_round(row.y),
                    "height": js_round(row.height),
                    "nodes": [
                        {"name": placed.node.name, "kind": placed.node.kind, "x": js_round(placed.x)}
                        for placed in row.items
                    ],
                }
                for row in self.rows()
            ],
            "warnings": list(self.warnings),
        }

    def _check_bounds(self) -> None:
        if self.root.bbox is None:
            self.warnings.append(f"Root {self.root.name!r} has no bounding box")
            return
        for child in self.root.children:
            if child.visible and child.bbox is None:
                self.warnings.append(f"{child.name!r} has no bounds and will be skipped")
        for placed in self.placed_children():
            bbox = placed.node.bbox
            if (
                placed.x < 0
                or placed.y < 0
                or placed.x + bbox.width > self.root.bbox.width
                or placed.y + bbox.height > self.root.bbox.height
            ):
                self.warnings.append(f"{placed.node.name!r} extends outside the frame")

    def _check_tables(self) -> None:
        for placed in self.placed_children():
            if is_table_region(placed.node):
                self.warnings.append(
                    f"{placed.node.name!r} is re-synthesized as a table; later siblings may shift down"
                )
