"""
Plot Polygon
============

Owner-claimed, alignment-constrained polygon on the block grid.

Design:
- Mutable vertex list, grown one vertex at a time through add_point()
- Every rejected vertex leaves the polygon untouched
- Derived geometry (centroid, bounding box, border raster) cached and
  invalidated on every successful mutation
- Parent is a weak link: an id resolved through the PlotArena the polygon
  was registered with, never an owned object
- Outcomes are Result values, never exceptions
"""

import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

import numpy as np

from freehold_plots.geometry.codec import serialize_vertices
from freehold_plots.geometry.raster import border_raster
from freehold_plots.geometry.shapes import GridPoint, Segment, is_aligned, round_half_up, sign
from freehold_plots.results import Result

if TYPE_CHECKING:
    from freehold_plots.hierarchy.arena import PlotArena
    from freehold_plots.ownership.owner import Owner

WILDERNESS_ID = -1


@dataclass(frozen=True)
class BoundingBox:
    """Inclusive integer bounding box of a polygon."""

    min_x: int
    min_z: int
    max_x: int
    max_z: int

    def contains(self, point: GridPoint) -> bool:
        return self.min_x <= point.x <= self.max_x and self.min_z <= point.z <= self.max_z

    @classmethod
    def around(cls, points: Iterable[GridPoint]) -> Optional["BoundingBox"]:
        snapped = [point.rounded() for point in points]
        if not snapped:
            return None
        return cls(
            min_x=int(min(p.x for p in snapped)),
            min_z=int(min(p.z for p in snapped)),
            max_x=int(max(p.x for p in snapped)),
            max_z=int(max(p.z for p in snapped)),
        )


class Polygon:
    """
    A plot: ordered vertex sequence closed implicitly from last to first vertex.

    A negative id marks the implicit wilderness polygon, which has no vertices
    and contains every point and segment of its world.

    Attributes:
        id: Plot identifier (negative for wilderness)
        world: Identifier of the world the plot belongs to
        owner: Owner, or None for a vacant plot
        depth: Nesting level, 0 for wilderness
        parent_id: Id of the enclosing plot, resolved through the arena

    Usage:
        arena = PlotArena()
        parent = arena.add(Polygon(1, "overworld", depth=1, vertices=square))
        child = arena.create_child(parent, plot_id=2)
        child.add_point(GridPoint(2, 2))      # Result.SUCCESS
        child.add_point(GridPoint(3, 7))      # Result.FAILURE_BAD_ALIGNMENT
    """

    def __init__(
        self,
        id: int,
        world: str,
        owner: Optional["Owner"] = None,
        depth: int = 0,
        parent_id: Optional[int] = None,
        vertices: Iterable[GridPoint] = (),
    ):
        if depth < 0:
            raise ValueError(f"depth must be >= 0, got {depth}")
        self.id = id
        self.world = world
        self.owner = owner
        self.depth = depth
        self.parent_id = parent_id
        self._vertices: List[GridPoint] = list(vertices)
        self._arena_ref: Optional["weakref.ReferenceType[PlotArena]"] = None
        self._cache: Dict[str, Any] = {}

    @classmethod
    def wilderness(
        cls,
        world: str,
        owner: Optional["Owner"] = None,
        wilderness_id: int = WILDERNESS_ID,
    ) -> "Polygon":
        """Implicit root polygon of a world (depth 0, no vertices)."""
        return cls(wilderness_id, world, owner=owner, depth=0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polygon):
            return NotImplemented
        return self.id == other.id and self.world == other.world

    def __hash__(self) -> int:
        return hash((self.id, self.world))

    def __repr__(self) -> str:
        return (
            f"Polygon(id={self.id}, world={self.world!r}, depth={self.depth}, "
            f"vertices={len(self._vertices)})"
        )

    # ========== Identity / hierarchy ==========

    @property
    def is_wilderness(self) -> bool:
        return self.id < 0

    @property
    def display_name(self) -> str:
        return self.owner.name if self.owner is not None else "[Vacant]"

    def attach(self, arena: "PlotArena") -> None:
        """Register the arena used to resolve parent links (held weakly)."""
        self._arena_ref = weakref.ref(arena)

    @property
    def arena(self) -> Optional["PlotArena"]:
        return self._arena_ref() if self._arena_ref is not None else None

    @property
    def parent(self) -> Optional["Polygon"]:
        """Enclosing polygon, or None if unset or its arena is gone."""
        if self.parent_id is None:
            return None
        arena = self.arena
        if arena is None:
            return None
        return arena.get(self.parent_id)

    def set_parent(self, parent: "Polygon") -> None:
        self.parent_id = parent.id

    def ancestors(self, limit: int = 100) -> List["Polygon"]:
        """Parent chain, nearest first. Stops after ``limit`` links."""
        chain: List[Polygon] = []
        current = self.parent
        while current is not None and len(chain) < limit:
            chain.append(current)
            current = current.parent
        return chain

    # ========== Vertices ==========

    @property
    def vertices(self) -> Tuple[GridPoint, ...]:
        return tuple(self._vertices)

    @property
    def vertices_string(self) -> str:
        return serialize_vertices(self._vertices)

    def to_numpy(self) -> np.ndarray:
        """Vertices as an Nx2 float array of (x, z)."""
        if not self._vertices:
            return np.zeros((0, 2), dtype=float)
        return np.array([point.to_tuple() for point in self._vertices], dtype=float)

    def border_lines(self) -> List[Segment]:
        """Edges in vertex order including the closing edge. Empty below 2 vertices."""
        if len(self._vertices) <= 1:
            return []
        count = len(self._vertices)
        return [
            Segment(self._vertices[i], self._vertices[(i + 1) % count])
            for i in range(count)
        ]

    # ========== Construction ==========

    def add_point(self, vertex: GridPoint) -> Result:
        """
        Append a vertex after validating the new edge.

        The first vertex is accepted unconditionally. Later vertices must form
        an aligned edge with the previous vertex, stay inside the parent, and
        not cross any own or parent border edge.

        Args:
            vertex: Vertex to append

        Returns:
            SUCCESS, FAILURE_BAD_ALIGNMENT or FAILURE_INTERSECTS_BORDER
        """
        if self._vertices:
            last = self._vertices[-1]
            if not self._aligns(vertex, last):
                return Result.FAILURE_BAD_ALIGNMENT
            if self._intersects_border(Segment(vertex, last)):
                return Result.FAILURE_INTERSECTS_BORDER
        self._vertices.append(vertex)
        self._invalidate()
        return Result.SUCCESS

    def is_complete(self) -> bool:
        """True once the implicit closing edge is itself a valid aligned edge."""
        if not self._vertices:
            return False
        return self._aligns(self._vertices[0], self._vertices[-1])

    def is_valid_shape(self) -> bool:
        """Full pairwise scan: no own or parent border edge is properly crossed."""
        for line in self._guarded_border_lines():
            if self._intersects_border(line):
                return False
        return True

    def _aligns(self, a: GridPoint, b: GridPoint) -> bool:
        if not is_aligned(a, b):
            return False
        parent = self.parent
        if parent is not None and not parent.contains(Segment(a, b)):
            return False
        return True

    def _guarded_border_lines(self) -> List[Segment]:
        lines = self.border_lines()
        parent = self.parent
        if parent is not None:
            lines.extend(parent.border_lines())
        return lines

    def _intersects_border(self, line: Segment) -> bool:
        for border_line in self._guarded_border_lines():
            if border_line == line:
                continue
            crossing = border_line.intersection(line)
            if crossing is None:
                continue
            if crossing in (border_line.p1, border_line.p2, line.p1, line.p2):
                continue
            return True
        return False

    # ========== Containment ==========

    def contains(self, target: Union[GridPoint, Segment]) -> bool:
        """
        Spatial predicate for a point or a segment.

        Anything on the border counts as inside. Wilderness contains everything.
        """
        if isinstance(target, Segment):
            return self._contains_segment(target)
        return self._contains_point(target)

    def _contains_point(self, point: GridPoint) -> bool:
        if self.is_wilderness:
            return True
        box = self.bounding_box
        if box is None or not box.contains(point):
            return False

        for line in self.border_lines():
            if line.contains(point, True):
                return True

        # Fan of triangles from vertex 0; the two edges touching vertex 0 are
        # border edges and would only form degenerate triangles.
        v = self._vertices
        counter = 0.0
        for i in range(1, len(v) - 1):
            a, b, c = v[0], v[i], v[i + 1]
            s1 = sign(point.cross(a, b))
            s2 = sign(point.cross(b, c))
            s3 = sign(point.cross(c, a))
            if s1 == 0 and s2 == 0 and s3 == 0:
                continue
            if s1 == s2 == s3:
                counter += 1
            elif s1 <= 0 and s2 <= 0 and s3 <= 0:
                counter += 0.5
            elif s1 >= 0 and s2 >= 0 and s3 >= 0:
                counter -= 0.5
        # Odd integer -> inside; halves on shared fan edges cancel or pair up.
        return counter % 2 == 1

    def _contains_segment(self, segment: Segment) -> bool:
        if self.is_wilderness:
            return True
        for line in self.border_lines():
            crossing = segment.intersection(line)
            if crossing is None:
                continue
            if crossing == segment.p1 or crossing == segment.p2:
                continue
            if crossing == line.p1 or crossing == line.p2:
                # Passing through a border vertex; endpoint/midpoint tests below decide.
                continue
            return False
        return (
            self._contains_point(segment.p1)
            and self._contains_point(segment.p2)
            and self._contains_point(segment.midpoint)
        )

    # ========== Derived geometry ==========

    def _invalidate(self) -> None:
        self._cache.clear()

    @property
    def centroid(self) -> Optional[GridPoint]:
        """
        Area-weighted centroid snapped to the grid.

        0 vertices: None, 1 vertex: that vertex, 2 vertices: midpoint.
        """
        if "centroid" not in self._cache:
            self._cache["centroid"] = self._calc_centroid()
        return self._cache["centroid"]

    @property
    def bounding_box(self) -> Optional[BoundingBox]:
        if "bbox" not in self._cache:
            self._cache["bbox"] = BoundingBox.around(self._vertices)
        return self._cache["bbox"]

    @property
    def border_raster_lines(self) -> FrozenSet[Segment]:
        """Unit block edges tracing the border, for external rendering."""
        if "raster" not in self._cache:
            self._cache["raster"] = border_raster(self.border_lines(), self.is_clockwise())
        return self._cache["raster"]

    def signed_area_sum(self) -> float:
        """Sum of (x2 - x1) * (z2 + z1) over border edges (twice the signed area)."""
        return sum(
            (line.p2.x - line.p1.x) * (line.p2.z + line.p1.z) for line in self.border_lines()
        )

    def is_clockwise(self) -> bool:
        return self.signed_area_sum() > 0

    def _calc_centroid(self) -> Optional[GridPoint]:
        v = self._vertices
        if not v:
            return None
        if len(v) == 1:
            return v[0]
        if len(v) == 2:
            return Segment(v[0], v[1]).midpoint

        n = len(v)
        area = 0.0
        px = 0.0
        pz = 0.0
        for i in range(n):
            a, b = v[i], v[(i + 1) % n]
            cross = a.x * b.z - b.x * a.z
            area += 0.5 * cross
            px += (a.x + b.x) * cross
            pz += (a.z + b.z) * cross
        if area == 0:
            # Colinear outline while drawing: no area to weight by.
            return GridPoint(
                round_half_up(sum(p.x for p in v) / n),
                round_half_up(sum(p.z for p in v) / n),
            )
        return GridPoint(px / (6 * area), pz / (6 * area)).rounded()
