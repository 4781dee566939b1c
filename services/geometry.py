"""
Geometry helpers shared by the grouping and merging stages.
"""
from typing import Iterable, Optional

from models.data_models import Rectangle


def overlap_length(a1: float, a2: float, b1: float, b2: float) -> float:
    """Length of the intersection of [a1, a2] and [b1, b2] (0 when disjoint)."""
    return max(0, min(a2, b2) - max(a1, b1))


def overlap_ratio(a1: float, a2: float, b1: float, b2: float) -> float:
    """Intersection over union of two 1-D intervals; the union is floored at 1."""
    inter = overlap_length(a1, a2, b1, b2)
    union = max(max(a2, b2) - min(a1, b1), 1)
    return inter / union


def union_boxes(boxes: Iterable[Rectangle]) -> Optional[Rectangle]:
    """Smallest rectangle containing every box, or None for an empty input."""
    boxes = list(boxes)
    if not boxes:
        return None
    return Rectangle.from_edges(
        min(b.left for b in boxes),
        min(b.top for b in boxes),
        max(b.right for b in boxes),
        max(b.bottom for b in boxes),
    )


def is_close(a: Rectangle, b: Rectangle, vertical_slack: int = 20) -> bool:
    """Whether two boxes sit close enough to belong to the same bubble.

    Vertically they must overlap or be at most ``vertical_slack`` apart;
    horizontally their centers must be closer than ``a``'s width or the
    boxes must overlap.
    """
    vertical_near = not (a.bottom < b.top - vertical_slack or b.bottom < a.top - vertical_slack)
    horizontal_near = (
        abs(a.center_x - b.center_x) < a.width
        or overlap_length(a.left, a.right, b.left, b.right) > 0
    )
    return vertical_near and horizontal_near
