"""
Geometry Layer
==============

Bounded Context: Grid geometry of plots.

Responsibilities:
- Grid points and segments (immutable)
- Alignment and segment intersection predicates
- Polygon construction, containment and derived geometry
- Border rasterisation and the stored vertex format
- NO ownership rules, NO logging, NO storage

Design Philosophy:
- Pure functions where possible
- Outcomes as Result values, malformed input as ValueError
- Zero side effects outside the polygon being built
"""

from freehold_plots.geometry.shapes import GridPoint, Segment, is_aligned, round_half_up
from freehold_plots.geometry.polygon import WILDERNESS_ID, BoundingBox, Polygon
from freehold_plots.geometry.raster import border_raster
from freehold_plots.geometry.codec import parse_vertices, serialize_vertices

__all__ = [
    "GridPoint",
    "Segment",
    "is_aligned",
    "round_half_up",
    "WILDERNESS_ID",
    "BoundingBox",
    "Polygon",
    "border_raster",
    "parse_vertices",
    "serialize_vertices",
]
