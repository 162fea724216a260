"""Export configuration."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class ExportConfig:
    """
    Configuration shared by the walker, the renderers and both HTML passes.

    Attributes:
        title: Document title embedded in ``<head>``.
        html_lang: Value of the ``lang`` attribute on ``<html>``.
        asset_dir: Relative directory referenced by ``<img src>`` and backgrounds.
        raster_scale: Scale used when rasterizing unsupported nodes.
        preview_scale: Scale used for hyperlink preview rasters.
        near_white_channel: Channel threshold (0-1) of an elided full-bleed rectangle.
        row_tolerance: Vertical tolerance of frame-level row clustering.
        row_bucket: Quantization step of table-synthesis row bucketing.
        donor_margin: Expansion of donor shapes when testing cell backgrounds.
        near_white_brightness: Donor fills at or above this brightness are ignored.
        dark_brightness: Brightness below which a color counts as dark.
        accent_color: Header default background and table border color.
        corner_radius: Outer corner radius of synthesized tables.
        table_row_height: Estimated rendered height of one synthesized row.
        table_border_overhead: Estimated extra height of borders and radius.
        px_to_pt: Pixel to point factor applied to run font sizes.
        container_border: Border width of the table-layout container.
        container_padding: Extra bottom padding of the table-layout container.
        fallback_fragment_height: Height assumed for fragments without one.
        mobile_breakpoint: Max viewport width of the responsive block.
    """

    title: str = "Mailer"
    html_lang: str = "en"
    asset_dir: str = "./images"
    raster_scale: float = 2.0
    preview_scale: float = 1.0
    near_white_channel: float = 0.95
    row_tolerance: float = 10.0
    row_bucket: float = 5.0
    donor_margin: float = 5.0
    near_white_brightness: float = 240.0
    dark_brightness: float = 128.0
    accent_color: str = "#f06522"
    corner_radius: int = 7
    table_row_height: int = 34
    table_border_overhead: int = 14
    px_to_pt: float = 0.75
    container_border: int = 1
    container_padding: int = 10
    fallback_fragment_height: int = 100
    mobile_breakpoint: int = 480

    def with_overrides(self, **overrides: Any) -> "ExportConfig":
        """Return a copy with the given fields replaced (``None`` values are ignored)."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)

    def asset_path(self, name: str) -> str:
        return f"{self.asset_dir.rstrip('/')}/{name}"
