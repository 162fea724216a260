"""Layout inspection helpers."""

from .layout_analyzer import LayoutAnalyzer

__all__ = ["LayoutAnalyzer"]
