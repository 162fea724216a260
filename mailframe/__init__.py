"""
mailframe - compile design frames into e-mail compatible HTML.

The export runs in two passes:

- the node walker renders every top-level child of a frame as an
  absolutely positioned table (text, shapes, bitmaps and synthesized
  data tables)
- the compatibility compiler rewrites the positioned canvas as nested
  fixed tables for clients without CSS positioning

Main Components:
- Exporter: selection checks, credits, walk and assembly
- NodeWalker: per-node dispatch and offset drift
- TableSynthesizer: ``[table]`` frames to bordered data tables
- CompatibilityCompiler: absolute canvas to table layout
- DesignHost: fonts, rasterization and image data from the design tool
"""

from .config import ExportConfig
from .credits import CreditLedger, JsonCreditLedger, MemoryCreditLedger
from .engine.table_synthesis import TableSynthesizer
from .engine.walker import NodeWalker, WalkResult
from .exceptions import (
    FontError,
    LayoutError,
    MailframeError,
    QuotaError,
    RasterizationError,
    RenderingError,
    SelectionError,
)
from .exporter import Exporter, slugify
from .host import DesignHost, StaticDesignHost
from .html import CompatibilityCompiler, DocumentAssembler
from .models.fragment import ExportResult, PositionedFragment
from .version import __version__, __version_info__

__all__ = [
    "__version__",
    "__version_info__",
    "CompatibilityCompiler",
    "CreditLedger",
    "DesignHost",
    "DocumentAssembler",
    "ExportConfig",
    "ExportResult",
    "Exporter",
    "FontError",
    "JsonCreditLedger",
    "LayoutError",
    "MailframeError",
    "MemoryCreditLedger",
    "NodeWalker",
    "PositionedFragment",
    "QuotaError",
    "RasterizationError",
    "RenderingError",
    "SelectionError",
    "StaticDesignHost",
    "TableSynthesizer",
    "WalkResult",
    "slugify",
]
