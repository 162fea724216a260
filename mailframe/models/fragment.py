"""Intermediate and output records of an export."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PositionedFragment:
    """
    One absolutely positioned markup unit.

    Coordinates are whole pixels relative to the export root's top-left
    corner. The markup is opaque to every later pass: it may be moved and
    re-wrapped but is never restyled.
    """

    markup: str
    left: int
    top: int
    width: int
    height: int
    link_wrapped: bool = False
    text_align: str = "left"
    vertical_align: str = "top"

    @property
    def bottom(self) -> int:
        return self.top + self.height


class BackgroundKind(str, Enum):
    COLOR = "color"
    IMAGE = "image"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class BackgroundSpec:
    """Background of the export root: a hex color, a relative image path, or nothing."""

    kind: BackgroundKind = BackgroundKind.NONE
    value: str = ""

    @classmethod
    def color(cls, hex_color: str) -> "BackgroundSpec":
        return cls(BackgroundKind.COLOR, hex_color)

    @classmethod
    def image(cls, path: str) -> "BackgroundSpec":
        return cls(BackgroundKind.IMAGE, path)

    @classmethod
    def none(cls) -> "BackgroundSpec":
        return cls()

    def bgcolor(self, default: str = "#ffffff") -> str:
        """Color for ``bgcolor`` attributes; images and none fall back to ``default``."""
        return self.value if self.kind is BackgroundKind.COLOR else default

    @property
    def image_url(self) -> str:
        return self.value if self.kind is BackgroundKind.IMAGE else ""


@dataclass(frozen=True, slots=True)
class Asset:
    name: str
    data: bytes


@dataclass(frozen=True, slots=True)
class LinkPlaceholder:
    id: str
    original_url: str
    preview_asset_name: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "originalUrl": self.original_url,
            "previewAssetName": self.preview_asset_name,
        }


@dataclass(frozen=True, slots=True)
class GifPlaceholder:
    id: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id}


@dataclass
class ExportResult:
    """Final payload of one export."""

    html: str
    filename: str
    assets: List[Asset] = field(default_factory=list)
    preview_assets: List[Asset] = field(default_factory=list)
    link_placeholders: List[LinkPlaceholder] = field(default_factory=list)
    gif_placeholders: List[GifPlaceholder] = field(default_factory=list)

    def to_message(self) -> Dict[str, Any]:
        """Message shape consumed by the UI shell."""
        return {
            "type": "export-result",
            "html": self.html,
            "assets": [{"name": a.name, "data": a.data} for a in self.assets],
            "previewAssets": [{"name": a.name, "data": a.data} for a in self.preview_assets],
            "gifPlaceholders": [p.to_dict() for p in self.gif_placeholders],
            "linkPlaceholders": [p.to_dict() for p in self.link_placeholders],
            "filename": self.filename,
        }

    def write_to(self, directory: Union[str, Path], basename: Optional[str] = None) -> Path:
        """
        Write the document, its assets and the placeholder records to disk.

        Args:
            directory: Output directory (created when missing)
            basename: File stem of the HTML document (defaults to ``filename``)

        Returns:
            Path of the written HTML document
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        html_path = directory / f"{basename or self.filename or 'export'}.html"
        html_path.write_text(self.html, encoding="utf-8")

        for subdir, assets in (("images", self.assets), ("previews", self.preview_assets)):
            if not assets:
                continue
            target = directory / subdir
            target.mkdir(exist_ok=True)
            for asset in assets:
                (target / asset.name).write_bytes(asset.data)

        placeholders = {
            "linkPlaceholders": [p.to_dict() for p in self.link_placeholders],
            "gifPlaceholders": [p.to_dict() for p in self.gif_placeholders],
        }
        (directory / "placeholders.json").write_text(json.dumps(placeholders, indent=2), encoding="utf-8")

        logger.info(f"Export written to {html_path} ({len(self.assets)} assets, "
                    f"{len(self.preview_assets)} previews)")
        return html_path
