"""Geometry primitives for design-tree coordinates (y grows downwards)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def expanded(self, margin: float) -> "Rect":
        """Grow the rectangle by ``margin`` on every side."""
        return Rect(self.x - margin, self.y - margin, self.width + 2 * margin, self.height + 2 * margin)

    def contains_point(self, point: Point) -> bool:
        """Inclusive point containment test."""
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom

    def relative_to(self, origin: "Rect") -> Tuple[float, float]:
        """Offset of this rectangle's top-left corner from ``origin``'s."""
        return self.x - origin.x, self.y - origin.y

