"""
Export orchestration.

``Exporter.export`` runs one export end to end:

1. validate the selection (exactly one frame, component or instance)
2. reserve one credit per ``[table]`` region before any rendering
3. walk the root into positioned fragments
4. assemble the absolute document, or compile it to table layout

``Exporter.run`` is the outermost boundary used by the UI shell: it always
returns a message dict and never raises.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional, Sequence

from .config import ExportConfig
from .credits import CreditLedger, count_table_regions, reserve_table_credits
from .engine.walker import NodeWalker
from .exceptions import MailframeError, SelectionError
from .host import DesignHost
from .html import CompatibilityCompiler, DocumentAssembler
from .models.fragment import ExportResult
from .models.node import ContainerNode, ContainerType, DesignNode

logger = logging.getLogger(__name__)

EXPORTABLE_ROOTS = (ContainerType.FRAME, ContainerType.COMPONENT, ContainerType.INSTANCE)

SELECTION_MESSAGE = "Please select a single Frame to export."
BOUNDS_MESSAGE = "Could not determine bounds of the selected frame."


def slugify(text: str) -> str:
    """
    File-name friendly form of ``text``.

    Example:
        >>> slugify("  My Export!! ")
        'my-export'
    """
    slug = str(text).lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^\w\-]+", "", slug, flags=re.ASCII)
    return re.sub(r"--+", "-", slug)


def validate_selection(selection: Sequence[DesignNode]) -> ContainerNode:
    if len(selection) != 1:
        raise SelectionError(SELECTION_MESSAGE)
    root = selection[0]
    if not isinstance(root, ContainerNode) or root.container_type not in EXPORTABLE_ROOTS:
        raise SelectionError(SELECTION_MESSAGE)
    return root


class Exporter:
    """
    Compile a selected frame into an e-mail document.

    Example:
        >>> exporter = Exporter(StaticDesignHost(), MemoryCreditLedger())
        >>> result = asyncio.run(exporter.export([frame]))
        >>> result.filename
        'newsletter'
    """

    def __init__(self, host: DesignHost, ledger: Optional[CreditLedger] = None,
                 config: Optional[ExportConfig] = None):
        self.host = host
        self.ledger = ledger
        self.config = config or ExportConfig()
        self.walker = NodeWalker(host, self.config)
        self.assembler = DocumentAssembler(self.config)
        self.compiler = CompatibilityCompiler(self.config, self.assembler)

    async def export(self, selection: Sequence[DesignNode], use_table_layout: bool = True) -> ExportResult:
        """
        Run one export.

        Args:
            selection: Currently selected nodes; exactly one exportable frame
            use_table_layout: Compile to nested tables instead of absolute positioning

        Returns:
            The document, its assets and placeholder records

        Raises:
            SelectionError: If the selection is not a single frame or has no bounds
            QuotaError: If the credits do not cover the table regions
        """
        root = validate_selection(selection)

        table_count = count_table_regions(root)
        if table_count > 0 and self.ledger is not None:
            await reserve_table_credits(self.ledger, table_count)

        if root.bbox is None:
            raise SelectionError(BOUNDS_MESSAGE)

        logger.info(f"Exporting {root.name!r} ({'table' if use_table_layout else 'absolute'} layout)")
        walk = await self.walker.walk(root)

        width, height = root.bbox.width, root.bbox.height
        if use_table_layout and walk.fragments:
            html = self.compiler.compile_fragments(walk.fragments, width, height, walk.background)
        else:
            html = self.assembler.absolute_document(walk.fragments, width, height, walk.background)

        return ExportResult(
            html=html,
            filename=slugify(root.name),
            assets=walk.assets,
            preview_assets=walk.preview_assets,
            link_placeholders=walk.link_placeholders,
            gif_placeholders=walk.gif_placeholders,
        )

    async def run(self, selection: Sequence[DesignNode], use_table_layout: bool = True) -> Dict[str, Any]:
        """Export and translate the outcome into a UI message."""
        try:
            result = await self.export(selection, use_table_layout)
        except MailframeError as e:
            logger.error(f"Export failed: {e}")
            return {"type": "error", "message": str(e)}
        except Exception as e:
            logger.exception("Unexpected export failure")
            return {"type": "error", "message": f"Backend error: {e}"}
        return result.to_message()
