"""
Plot arena: id-keyed index that resolves parent links.

Polygons keep only their parent's id plus a weak reference to the arena they
were registered with. Whoever builds a graph of plots (the resolver for one
query, a claim session for one edit) owns the arena and therefore the graph.
"""

from typing import Dict, Iterator, Optional

from freehold_plots.geometry.polygon import Polygon
from freehold_plots.ownership.owner import Owner


class PlotArena:
    """
    Registry of polygons keyed by id.

    Usage:
        arena = PlotArena()
        wilderness = arena.add(Polygon.wilderness("overworld"))
        town = arena.create_child(wilderness, plot_id=1)
    """

    def __init__(self):
        self._plots: Dict[int, Polygon] = {}

    def add(self, polygon: Polygon) -> Polygon:
        """Register a polygon, replacing any polygon with the same id."""
        self._plots[polygon.id] = polygon
        polygon.attach(self)
        return polygon

    def get(self, plot_id: int) -> Optional[Polygon]:
        return self._plots.get(plot_id)

    def create_child(
        self,
        parent: Polygon,
        plot_id: int,
        owner: Optional[Owner] = None,
    ) -> Polygon:
        """
        New, empty polygon nested in ``parent`` (depth = parent.depth + 1).

        The parent is registered too if it is not yet part of this arena.
        """
        if self._plots.get(parent.id) is not parent:
            self.add(parent)
        child = Polygon(
            plot_id,
            parent.world,
            owner=owner,
            depth=parent.depth + 1,
            parent_id=parent.id,
        )
        return self.add(child)

    def __contains__(self, plot_id: object) -> bool:
        return plot_id in self._plots

    def __len__(self) -> int:
        return len(self._plots)

    def __iter__(self) -> Iterator[Polygon]:
        return iter(self._plots.values())
