"""
Freehold Plots v1.0
===================

Bounded Context: Land claims on a block grid.

Design Philosophy:
- Separation of Concerns: Geometry, Ownership, Hierarchy, Rendering separated
- Outcomes are values: every mutation answers with a Result
- Parents are weak links: plots refer to their parent by id through a PlotArena
- Storage stays outside: the engine receives candidate records, it never queries

Architecture:

    freehold_plots/
    ├── geometry/          # Pure geometry (grid points, segments, polygons)
    │   ├── shapes.py      # GridPoint, Segment, is_aligned
    │   ├── polygon.py     # Polygon (construction, containment, centroid)
    │   ├── raster.py      # Border rasterisation
    │   └── codec.py       # "[x,z][x,z]" vertex format
    │
    ├── ownership/         # Owners, groups, rank checks
    │   ├── owner.py       # Owner, Group
    │   └── policy.py      # OwnershipPolicy
    │
    ├── hierarchy/         # Nested plots
    │   ├── arena.py       # PlotArena
    │   ├── records.py     # PlotRecord
    │   └── resolver.py    # PlotHierarchyResolver
    │
    ├── rendering/         # Visualization (stateless drawing)
    │   └── visualizer.py  # PlotVisualizer
    │
    ├── logging/           # Structured JSON logging
    ├── config.py          # PlotConfig (YAML)
    ├── ranks.py           # Rank
    └── results.py         # Result

Usage:

    # 1. Draw a plot inside a parent
    from freehold_plots import GridPoint, PlotArena, Polygon

    arena = PlotArena()
    town = arena.add(Polygon(1, "overworld", depth=1, vertices=outline))
    shop = arena.create_child(town, plot_id=2)
    shop.add_point(GridPoint(2, 2))           # Result.SUCCESS
    shop.add_point(GridPoint(3, 7))           # Result.FAILURE_BAD_ALIGNMENT

    # 2. Resolve a point against stored records
    from freehold_plots import PlotHierarchyResolver

    resolution = PlotHierarchyResolver().resolve(GridPoint(5, 5), "overworld", records)
    resolution.polygon, resolution.ancestors

    # 3. Check rights
    from freehold_plots import OwnershipPolicy, Rank

    policy = OwnershipPolicy()
    policy.contains_user(policy.effective_owner(resolution.polygon), user_id, Rank.ASSISTANT)
"""

from freehold_plots.results import Result
from freehold_plots.ranks import Rank
from freehold_plots.config import GroupRankConfig, PlotConfig, PlotRankConfig

# Geometry Layer (pure)
from freehold_plots.geometry import (
    BoundingBox,
    GridPoint,
    Polygon,
    Segment,
    is_aligned,
    parse_vertices,
    serialize_vertices,
)

# Ownership Layer
from freehold_plots.ownership import Group, Owner, OwnerKind, OwnershipPolicy, StaticCapabilities

# Hierarchy Layer
from freehold_plots.hierarchy import PlotArena, PlotHierarchyResolver, PlotRecord, Resolution

# Rendering Layer (stateless)
from freehold_plots.rendering import PlotVisualizer

__all__ = [
    "Result",
    "Rank",
    "PlotConfig",
    "PlotRankConfig",
    "GroupRankConfig",
    # Geometry
    "BoundingBox",
    "GridPoint",
    "Polygon",
    "Segment",
    "is_aligned",
    "parse_vertices",
    "serialize_vertices",
    # Ownership
    "Group",
    "Owner",
    "OwnerKind",
    "OwnershipPolicy",
    "StaticCapabilities",
    # Hierarchy
    "PlotArena",
    "PlotHierarchyResolver",
    "PlotRecord",
    "Resolution",
    # Rendering
    "PlotVisualizer",
]

__version__ = "1.0.0"
