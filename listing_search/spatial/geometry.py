"""
Geometry Primitives for the Listing Quadtree
--------------------------------

Axis-aligned boxes and tagged points in longitude/latitude space.

x is longitude and y is latitude. Boxes are described by their center and
half-extents rather than by corners, so the same type can serve both as a
quadtree node boundary and as an ad-hoc search region.

Classes:
  SpatialPoint(x, y, payload):
    Immutable coordinate carrying an opaque payload (the listing record).

  Rectangle(cx, cy, half_w, half_h):
    Center/half-extent box with inclusive containment and overlap tests.
"""

from dataclasses import dataclass
from typing import Any, Tuple


@dataclass(frozen=True)
class SpatialPoint:
    x: float
    y: float
    payload: Any = None


@dataclass(frozen=True)
class Rectangle:
    cx: float
    cy: float
    half_w: float
    half_h: float

    def __post_init__(self):
        if self.half_w < 0 or self.half_h < 0:
            raise ValueError(
                f"Rectangle half-extents must be non-negative, got ({self.half_w}, {self.half_h})"
            )

    @property
    def left(self) -> float:
        return self.cx - self.half_w

    @property
    def right(self) -> float:
        return self.cx + self.half_w

    @property
    def top(self) -> float:
        return self.cy - self.half_h

    @property
    def bottom(self) -> float:
        return self.cy + self.half_h

    def contains(self, point: SpatialPoint) -> bool:
        """Check whether the point lies inside this box, edges included."""
        return (
            self.left <= point.x <= self.right
            and self.top <= point.y <= self.bottom
        )

    def intersects(self, other: "Rectangle") -> bool:
        """Check whether two boxes overlap. Touching edges count as overlap."""
        return not (
            other.left > self.right
            or other.right < self.left
            or other.top > self.bottom
            or other.bottom < self.top
        )

    def quadrants(self) -> Tuple["Rectangle", "Rectangle", "Rectangle", "Rectangle"]:
        """Split into four quarter boxes, in NE, NW, SE, SW order.

        y grows downward (latitude-as-row), so "north" is the -y half.
        """
        w = self.half_w / 2
        h = self.half_h / 2
        return (
            Rectangle(self.cx + w, self.cy - h, w, h),  # NE
            Rectangle(self.cx - w, self.cy - h, w, h),  # NW
            Rectangle(self.cx + w, self.cy + h, w, h),  # SE
            Rectangle(self.cx - w, self.cy + h, w, h),  # SW
        )
