"""
Border Rasterisation
====================

Turns a polygon outline into the set of unit block edges that trace it.

Borders are restricted to 0/45/90 degree edges, so every edge can be walked in
unit steps. At each step one unit block edge is emitted per moving axis
(diagonal steps emit two). Which side of the block the edge sits on depends on
the step direction and the polygon's winding, so the raster always hugs the
blocks inside the plot.
"""

from typing import Dict, FrozenSet, Iterable, Set, Tuple

from freehold_plots.geometry.shapes import GridPoint, Segment, round_half_up

# (axis, step sign, clockwise) -> (x1, z1, x2, z2) offsets from the current block
_BLOCK_EDGE_OFFSETS: Dict[Tuple[str, int, bool], Tuple[int, int, int, int]] = {
    ("x", -1, True): (1, 0, 0, 0),
    ("z", -1, True): (1, 1, 1, 0),
    ("x", 1, True): (0, 1, 1, 1),
    ("z", 1, True): (0, 0, 0, 1),
    ("x", -1, False): (0, 1, 1, 1),
    ("z", -1, False): (0, 0, 0, 1),
    ("x", 1, False): (1, 0, 0, 0),
    ("z", 1, False): (1, 1, 1, 0),
}


def block_edges(block: GridPoint, step: GridPoint, clockwise: bool) -> Iterable[Segment]:
    """Unit block edges emitted for one step of the border walk."""
    for axis, sign in (("x", int(step.x)), ("z", int(step.z))):
        if sign == 0:
            continue
        x1, z1, x2, z2 = _BLOCK_EDGE_OFFSETS[(axis, sign, clockwise)]
        yield Segment.from_coords(block.x + x1, block.z + z1, block.x + x2, block.z + z2)


def border_raster(border_lines: Iterable[Segment], clockwise: bool) -> FrozenSet[Segment]:
    """
    Rasterise polygon border lines into unit block edges.

    Each border line is walked from p1 to p2 inclusive. The walk length is the
    larger absolute delta, which is exact for aligned edges.

    Args:
        border_lines: Closed outline, in vertex order
        clockwise: Winding of the outline

    Returns:
        Set of unit-length segments
    """
    raster: Set[Segment] = set()
    for line in border_lines:
        step = line.p1.step_towards(line.p2)
        steps = max(
            abs(round_half_up(line.p2.x - line.p1.x)),
            abs(round_half_up(line.p2.z - line.p1.z)),
        )
        current = line.p1
        for index in range(steps + 1):
            if index > 0:
                current = current + step
            raster.update(block_edges(current, step, clockwise))
    return frozenset(raster)
