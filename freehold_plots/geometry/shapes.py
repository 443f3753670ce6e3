"""
Geometric Primitives
====================

Pure grid geometry - NO state, NO side effects.

Design:
- Immutable value types (frozen dataclass pattern)
- Cross product for orientation / side tests
- Exact floating comparisons (coordinates are block positions, so
  intermediate values are small rationals)
- Equality is exact, hashing snaps to the grid so a point's hash is stable
  after rounding
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return int(math.floor(value + 0.5))


def sign(value: float) -> int:
    """-1, 0 or 1 by the sign of value."""
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


@dataclass(frozen=True, order=True)
class GridPoint:
    """
    Immutable 2D block coordinate.

    Real-valued while computing (intersections may land on half blocks),
    snapped to integers for identity and storage.

    Attributes:
        x: East-west coordinate
        z: North-south coordinate
    """

    x: float
    z: float

    def __hash__(self) -> int:
        return hash((round_half_up(self.x), round_half_up(self.z)))

    def __add__(self, other: "GridPoint") -> "GridPoint":
        return GridPoint(self.x + other.x, self.z + other.z)

    def __sub__(self, other: "GridPoint") -> "GridPoint":
        return GridPoint(self.x - other.x, self.z - other.z)

    def __str__(self) -> str:
        return f"({int(self.x)}, {int(self.z)})"

    def rounded(self) -> "GridPoint":
        """Snap to the nearest block."""
        return GridPoint(round_half_up(self.x), round_half_up(self.z))

    def cross(self, a: "GridPoint", b: "GridPoint") -> float:
        """
        Cross product of (a - self) and (b - self).

        Returns:
            > 0 if a -> b turns counter-clockwise around self,
            < 0 if clockwise, 0 if self, a and b are colinear
        """
        return (a.x - self.x) * (b.z - self.z) - (a.z - self.z) * (b.x - self.x)

    def step_towards(self, other: "GridPoint") -> "GridPoint":
        """Unit step (each axis in -1, 0, 1) pointing from self to other."""
        return GridPoint(sign(other.x - self.x), sign(other.z - self.z))

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.z)


def is_aligned(a: GridPoint, b: GridPoint) -> bool:
    """
    Check that the edge a-b runs horizontally, vertically or at exactly 45 degrees.

    The smaller absolute delta divided by the larger one must be 0 or 1.
    Identical points are never aligned. Symmetric in a and b.
    """
    delta_x = a.x - b.x
    delta_z = a.z - b.z
    if delta_x != 0:
        ratio = abs(delta_z / delta_x)
    elif delta_z != 0:
        ratio = abs(delta_x / delta_z)
    else:
        return False
    if ratio > 1:
        ratio = 1 / ratio
    return ratio == 0 or ratio == 1


@dataclass(frozen=True)
class Segment:
    """
    Directed line segment between two grid points.

    Equality is order-sensitive: Segment(a, b) != Segment(b, a).
    The direction matters for border rasterisation.

    Attributes:
        p1: Start point
        p2: End point
    """

    p1: GridPoint
    p2: GridPoint

    def __hash__(self) -> int:
        return hash((hash(self.p1), hash(self.p2)))

    def __str__(self) -> str:
        return f"[{self.p1}|{self.p2}]"

    @classmethod
    def from_coords(cls, x1: float, z1: float, x2: float, z2: float) -> "Segment":
        return cls(GridPoint(x1, z1), GridPoint(x2, z2))

    @property
    def midpoint(self) -> GridPoint:
        return GridPoint((self.p1.x + self.p2.x) / 2, (self.p1.z + self.p2.z) / 2)

    @property
    def is_aligned(self) -> bool:
        return is_aligned(self.p1, self.p2)

    def reversed(self) -> "Segment":
        return Segment(self.p2, self.p1)

    def intersection(self, other: "Segment") -> Optional[GridPoint]:
        """
        Intersection point of two segments.

        Solves the two-line system with Cramer's rule. Bounds are inclusive, so
        segments meeting at an endpoint do intersect there.

        Args:
            other: Segment to intersect with

        Returns:
            Intersection point, or None if the lines are parallel (including
            colinear overlap) or the crossing lies outside either segment
        """
        p1, p2 = self.p1, self.p2
        p3, p4 = other.p1, other.p2

        d = (p1.x - p2.x) * (p3.z - p4.z) - (p1.z - p2.z) * (p3.x - p4.x)
        if d == 0:
            return None

        det_a = p1.x * p2.z - p1.z * p2.x
        det_b = p3.x * p4.z - p3.z * p4.x
        xi = ((p3.x - p4.x) * det_a - (p1.x - p2.x) * det_b) / d
        zi = ((p3.z - p4.z) * det_a - (p1.z - p2.z) * det_b) / d

        if not _within(xi, zi, p1, p2) or not _within(xi, zi, p3, p4):
            return None
        return GridPoint(xi, zi)

    def contains(self, point: GridPoint, edge_allowed: bool) -> bool:
        """
        Check whether a point lies on this segment.

        Args:
            point: Point to test
            edge_allowed: Result to report when the point is one of the endpoints

        Returns:
            edge_allowed for an endpoint, True if the point is colinear and
            strictly between the endpoints, False otherwise
        """
        if point == self.p1 or point == self.p2:
            return edge_allowed

        dist_x = self.p2.x - self.p1.x
        dist_z = self.p2.z - self.p1.z
        dist2_x = self.p2.x - point.x
        dist2_z = self.p2.z - point.z

        # Compare along the dominant axis; slope ratios must match exactly.
        if dist_x != 0:
            if dist2_x != 0 and sign(dist2_x) == sign(dist_x):
                return abs(dist2_x) < abs(dist_x) and dist_z / dist_x == dist2_z / dist2_x
        elif dist_z != 0:
            if dist2_z != 0 and sign(dist2_z) == sign(dist_z):
                return abs(dist2_z) < abs(dist_z) and dist_x / dist_z == dist2_x / dist2_z
        return False


def _within(xi: float, zi: float, a: GridPoint, b: GridPoint) -> bool:
    return (
        min(a.x, b.x) <= xi <= max(a.x, b.x)
        and min(a.z, b.z) <= zi <= max(a.z, b.z)
    )
