"""Numeric helpers for CSS output and for reading CSS back."""

import math
import re
from typing import Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def js_round(value: float) -> int:
    """Round half up, as layout tools do (``round()`` rounds half to even)."""
    return int(math.floor(value + 0.5))


def format_number(value: float) -> str:
    """Format a number without a trailing ``.0`` (``12.0`` -> ``12``, ``9.75`` -> ``9.75``)."""
    if isinstance(value, bool):
        value = int(value)
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def px(value: float) -> str:
    """Whole-pixel CSS length."""
    return f"{js_round(value)}px"


def px_to_pt(value: float, factor: float = 0.75) -> str:
    return f"{format_number(value * factor)}pt"


def parse_px(value: Optional[str], default: int = 0) -> int:
    """
    Read the leading integer of a CSS length.

    Args:
        value: CSS value such as ``"12px"`` or ``"12.5px"``
        default: Returned when no integer can be read

    Returns:
        Integer part of the value
    """
    if not value:
        return default
    match = _LEADING_INT.match(value)
    if not match:
        return default
    return int(match.group(1))
