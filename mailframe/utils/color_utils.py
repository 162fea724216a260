"""Color conversion helpers for host paints and CSS output."""

from typing import Optional, Tuple

from .units import format_number, js_round

RGB = Tuple[float, float, float]

# ITU-R BT.601 luma weights
_LUMA = (0.299, 0.587, 0.114)


def channel_to_byte(value: float) -> int:
    """Convert a 0-1 channel into 0-255, clamped."""
    return max(0, min(255, js_round(value * 255)))


def rgb_to_hex(color: RGB) -> str:
    """Convert a 0-1 RGB triple to ``#rrggbb``."""
    r, g, b = (channel_to_byte(c) for c in color)
    return f"#{r:02x}{g:02x}{b:02x}"


def rgba_css(color: RGB, alpha: float) -> str:
    r, g, b = (channel_to_byte(c) for c in color)
    return f"rgba({r}, {g}, {b}, {format_number(alpha)})"


def hex_to_rgb(hex_color: str) -> Optional[RGB]:
    """Convert ``#rgb`` / ``#rrggbb`` to a 0-1 RGB triple."""
    if not hex_color or not isinstance(hex_color, str):
        return None

    hex_color = hex_color.lstrip('#')
    if len(hex_color) == 3:
        hex_color = ''.join([c * 2 for c in hex_color])
    if len(hex_color) != 6:
        return None

    try:
        return tuple(int(hex_color[i:i + 2], 16) / 255 for i in (0, 2, 4))
    except ValueError:
        return None


def brightness(color: RGB) -> float:
    """Perceptual brightness of a 0-1 RGB triple on the 0-255 scale."""
    r, g, b = color
    return (r * _LUMA[0] + g * _LUMA[1] + b * _LUMA[2]) * 255


def hex_brightness(hex_color: str) -> Optional[float]:
    rgb = hex_to_rgb(hex_color)
    if rgb is None:
        return None
    return brightness(rgb)
