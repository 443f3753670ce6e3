"""
Hierarchy Layer
===============

Bounded Context: Nested plots.

Responsibilities:
- PlotArena: id-keyed owner of a plot graph (parents are weak links)
- PlotRecord: stored plot row handed over by storage
- PlotHierarchyResolver: innermost plot and ancestor chain at a point
"""

from freehold_plots.hierarchy.arena import PlotArena
from freehold_plots.hierarchy.records import PlotRecord
from freehold_plots.hierarchy.resolver import PlotHierarchyResolver, Resolution

__all__ = [
    "PlotArena",
    "PlotRecord",
    "PlotHierarchyResolver",
    "Resolution",
]
