"""
Region Quadtree for Listing Search
--------------------------------

A point quadtree over longitude/latitude used to prune the candidate listings
of a single search request down to those inside a bounding box around the user.

A node starts as a leaf and stores up to `capacity` points. When a point
arrives at a full leaf, the node splits into four quadrant children (NE, NW,
SE, SW) and becomes internal for good. Points stored before the split stay in
the parent and remain queryable; every later point is routed to a child.

Two deliberate departures from a textbook quadtree:

  - Depth cap. A leaf at `max_depth` never splits again and keeps appending
    beyond `capacity`. Without it, more than `capacity` points sharing one
    coordinate would subdivide forever.
  - Split-line routing. Children are chosen by comparing against the parent
    center (x >= cx is east, y >= cy is south), so a point lying exactly on a
    split line goes to exactly one child. The child trusts the parent's choice
    instead of re-testing against its own recomputed floating-point edges,
    and queries descend on those same split lines.

Trees are cheap and single-use: each request builds one, queries it, and drops it.
"""

from typing import Any, Iterable, List, Optional

from .geometry import Rectangle, SpatialPoint
from ..config import QUADTREE_CAPACITY, QUADTREE_MAX_DEPTH


class QuadTree:
    """Quadtree node. The root node is the tree."""

    def __init__(
            self,
            boundary: Rectangle,
            capacity: int = QUADTREE_CAPACITY,
            max_depth: int = QUADTREE_MAX_DEPTH,
            depth: int = 0,
            ) -> None:
        if capacity < 1:
            raise ValueError(f"QuadTree capacity must be at least 1, got {capacity}")
        if max_depth < 0:
            raise ValueError(f"QuadTree max_depth must be non-negative, got {max_depth}")

        self.boundary:   Rectangle            = boundary
        self.capacity:   int                  = capacity
        self.max_depth:  int                  = max_depth
        self.depth:      int                  = depth
        self.points:     List[SpatialPoint]   = []
        self.northeast:  Optional["QuadTree"] = None
        self.northwest:  Optional["QuadTree"] = None
        self.southeast:  Optional["QuadTree"] = None
        self.southwest:  Optional["QuadTree"] = None

    @property
    def divided(self) -> bool:
        return self.northeast is not None

    def __len__(self) -> int:
        total = len(self.points)
        if self.divided:
            total += sum(len(child) for child in self._children())
        return total

    def _children(self) -> List["QuadTree"]:
        return [self.northeast, self.northwest, self.southeast, self.southwest]

    def subdivide(self) -> None:
        """Divide this node into four quadrant children."""
        ne, nw, se, sw = self.boundary.quadrants()
        child_depth = self.depth + 1
        self.northeast = QuadTree(ne, self.capacity, self.max_depth, child_depth)
        self.northwest = QuadTree(nw, self.capacity, self.max_depth, child_depth)
        self.southeast = QuadTree(se, self.capacity, self.max_depth, child_depth)
        self.southwest = QuadTree(sw, self.capacity, self.max_depth, child_depth)

    def insert(self, point: SpatialPoint) -> bool:
        """Insert a point. Returns False, leaving the tree untouched, if it lies outside the boundary."""
        if not self.boundary.contains(point):
            return False
        self._place(point)
        return True

    def bulk_insert(self, points: Iterable[SpatialPoint]) -> int:
        """Insert many points and return how many were accepted."""
        return sum(1 for point in points if self.insert(point))

    def _place(self, point: SpatialPoint) -> None:
        if not self.divided:
            if len(self.points) < self.capacity or self.depth >= self.max_depth:
                self.points.append(point)
                return
            self.subdivide()
        self._route(point)._place(point)

    def _route(self, point: SpatialPoint) -> "QuadTree":
        # Half-open at the center lines, so NE, NW, SE, SW tile the parent exactly
        east = point.x >= self.boundary.cx
        south = point.y >= self.boundary.cy
        if not south:
            return self.northeast if east else self.northwest
        return self.southeast if east else self.southwest

    def query(self, range_rect: Rectangle, found: Optional[List[Any]] = None) -> List[Any]:
        """Collect the payloads of all stored points that fall inside range_rect."""
        if found is None:
            found = []

        if not self.boundary.intersects(range_rect):
            return found

        self._collect(range_rect, found)
        return found

    def _collect(self, range_rect: Rectangle, found: List[Any]) -> None:
        for p in self.points:
            if range_rect.contains(p):
                found.append(p.payload)

        if not self.divided:
            return

        # Prune children on the same split lines _route uses, not their recomputed edges
        cx, cy = self.boundary.cx, self.boundary.cy
        west = range_rect.left < cx
        east = range_rect.right >= cx
        north = range_rect.top < cy
        south = range_rect.bottom >= cy

        if north and west:
            self.northwest._collect(range_rect, found)
        if north and east:
            self.northeast._collect(range_rect, found)
        if south and west:
            self.southwest._collect(range_rect, found)
        if south and east:
            self.southeast._collect(range_rect, found)
