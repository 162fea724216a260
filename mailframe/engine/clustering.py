"""
Row clustering.

Two deliberately distinct strategies group positioned items into horizontal
rows:

- :func:`cluster_rows` grows each row's vertical envelope to its lowest member
  and admits the next item while it starts within ``tolerance`` of that
  envelope. Used for whole-frame layout inspection.
- :func:`bucket_rows` quantizes each item's y to a fixed grid and groups equal
  keys. Used by table synthesis; two items straddling a grid boundary land in
  different rows even when :func:`cluster_rows` would merge them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, List, Sequence, TypeVar

from ..utils.units import js_round

T = TypeVar("T")


@dataclass
class Row(Generic[T]):
    """Items sharing a vertical band, ordered by x once clustering finishes."""

    y: float
    height: float
    items: List[T] = field(default_factory=list)

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def __len__(self) -> int:
        return len(self.items)


def cluster_rows(
    items: Sequence[T],
    y_of: Callable[[T], float],
    height_of: Callable[[T], float],
    x_of: Callable[[T], float],
    tolerance: float = 10.0,
) -> List[Row[T]]:
    """
    Group items into rows by vertical proximity.

    Args:
        items: Items to group
        y_of: Top coordinate of an item
        height_of: Height of an item
        x_of: Left coordinate of an item (orders members within a row)
        tolerance: Gap allowed below the current row's envelope

    Returns:
        Rows ordered top to bottom, members ordered left to right
    """
    ordered = sorted(items, key=y_of)
    rows: List[Row[T]] = []
    current = None

    for item in ordered:
        y, height = y_of(item), height_of(item)
        if current is not None and y < current.bottom + tolerance:
            current.items.append(item)
            current.height = max(current.height, (y - current.y) + height)
        else:
            current = Row(y=y, height=height, items=[item])
            rows.append(current)

    for row in rows:
        row.items.sort(key=x_of)
    return rows


def bucket_rows(
    items: Sequence[T],
    y_of: Callable[[T], float],
    x_of: Callable[[T], float],
    granularity: float = 5.0,
) -> List[List[T]]:
    """
    Group items whose y rounds to the same multiple of ``granularity``.

    Buckets are ordered by the actual y of their first member and members
    by x.
    """
    buckets: Dict[int, List[T]] = {}
    for item in items:
        key = js_round(y_of(item) / granularity)
        buckets.setdefault(key, []).append(item)

    rows = sorted(buckets.values(), key=lambda bucket: y_of(bucket[0]))
    return [sorted(row, key=x_of) for row in rows]
