"""
Plot Hierarchy Resolver
=======================

Answers "which plot, and which ancestor chain, contains this point".

The storage collaborator pre-filters candidates by bounding box only. The
resolver materializes each candidate, keeps those that really contain the
point, links them by depth and returns the deepest one.

Design:
- One PlotArena per query; the returned Resolution keeps it alive
- Missing ancestors are logged and tolerated (best available match wins)
- Never raises for inconsistent data
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from freehold_plots.config import PlotConfig
from freehold_plots.geometry.polygon import Polygon
from freehold_plots.geometry.shapes import GridPoint
from freehold_plots.hierarchy.arena import PlotArena
from freehold_plots.hierarchy.records import PlotRecord
from freehold_plots.logging import LogEvent, StructuredLogger, create_logger
from freehold_plots.ownership.owner import Group, Owner


@dataclass(frozen=True)
class Resolution:
    """
    Result of a point query.

    Attributes:
        polygon: Innermost containing plot (wilderness if none)
        ancestors: Parent chain, nearest first, ending at wilderness when linked
        arena: Arena owning the linked plots of this query
    """

    polygon: Polygon
    ancestors: List[Polygon]
    arena: PlotArena = field(repr=False, compare=False)

    @property
    def chain(self) -> List[Polygon]:
        """Polygon followed by its ancestors."""
        return [self.polygon] + list(self.ancestors)


class PlotHierarchyResolver:
    """
    Depth-ordered resolution of nested plots at a point.

    Usage:
        resolver = PlotHierarchyResolver()
        resolution = resolver.resolve(GridPoint(5, 5), "overworld", store.candidates(...))
        resolution.polygon        # deepest plot
        resolution.ancestors      # [parent, ..., wilderness]
    """

    def __init__(
        self,
        config: Optional[PlotConfig] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self.config = config or PlotConfig()
        self.logger = logger or create_logger("resolver", level=self.config.log_level)

    def wilderness(self, world: str) -> Polygon:
        """Implicit root plot of a world, owned by the everyone group."""
        everyone = Owner.of_group(Group.everyone(self.config.wilderness_group_name))
        return Polygon.wilderness(world, owner=everyone, wilderness_id=self.config.wilderness_id)

    def resolve(
        self,
        point: GridPoint,
        world: str,
        candidates: Iterable[PlotRecord],
    ) -> Resolution:
        """
        Find the innermost plot containing ``point``.

        Args:
            point: Query point
            world: World the point belongs to
            candidates: Records whose bounding boxes cover the point

        Returns:
            Resolution with the deepest containing plot and its linked ancestors
        """
        arena = PlotArena()
        wilderness = arena.add(self.wilderness(world))

        by_depth: Dict[int, List[Polygon]] = defaultdict(list)
        for record in sorted(candidates, key=lambda r: r.id):
            if record.world != world:
                self.logger.debug(
                    event=LogEvent.PLOT_RECORD_SKIPPED,
                    message="Candidate belongs to another world",
                    metadata={'plot_id': record.id, 'world': record.world},
                )
                continue
            polygon = record.to_polygon()
            if polygon.contains(point):
                by_depth[record.depth].append(polygon)

        chosen: Dict[int, Polygon] = {}
        for depth in sorted(by_depth):
            survivors = by_depth[depth]
            if len(survivors) > 1:
                self.logger.warning(
                    event=LogEvent.PLOT_DEPTH_CONFLICT,
                    message="Several plots at the same depth contain the point",
                    metadata={
                        'depth': depth,
                        'plot_ids': [p.id for p in survivors],
                        'point': point.to_tuple(),
                    },
                )
            # Candidates are id-sorted, so the newest plot wins.
            chosen[depth] = arena.add(survivors[-1])

        for depth, polygon in chosen.items():
            if depth == 1:
                polygon.set_parent(wilderness)
            elif depth - 1 in chosen:
                polygon.set_parent(chosen[depth - 1])
            else:
                polygon.parent_id = None
                self.logger.warning(
                    event=LogEvent.PLOT_PARENT_MISSING,
                    message="Parent plot missing in candidate set",
                    metadata={'plot_id': polygon.id, 'depth': depth, 'world': world},
                )

        result = chosen[max(chosen)] if chosen else wilderness
        self.logger.debug(
            event=LogEvent.PLOT_RESOLVED,
            message=f"Resolved plot {result.id}",
            metadata={'plot_id': result.id, 'depth': result.depth, 'point': point.to_tuple()},
        )
        return Resolution(
            polygon=result,
            ancestors=result.ancestors(self.config.max_parent_chain),
            arena=arena,
        )
