"""
Claim Service
=============

Bounded Context: Claim workflow (editing sessions, transfers, groups).

Orchestrates the plot engine for an interactive host: an actor starts a
claim where they stand, adds vertices as they walk, then saves or aborts.
Every operation answers with a Result; nothing here raises for a refused
action.

Design:
- Storage behind the PlotStore interface
- One ClaimSession per actor (ClaimSessionRegistry)
- Rank checks delegated to OwnershipPolicy with configured action ranks
- Structured logging of every state change
"""

import dataclasses
from typing import Dict, List, Optional, Tuple

from freehold_plots.config import PlotConfig
from freehold_plots.geometry.polygon import Polygon
from freehold_plots.geometry.shapes import GridPoint
from freehold_plots.hierarchy.records import PlotRecord
from freehold_plots.hierarchy.resolver import PlotHierarchyResolver, Resolution
from freehold_plots.logging import LogEvent, StructuredLogger, create_logger
from freehold_plots.ownership.owner import Group, Owner, OwnerKind
from freehold_plots.ownership.policy import OwnershipPolicy
from freehold_plots.ranks import Rank
from freehold_plots.results import Result

from .registry import ClaimSession, ClaimSessionRegistry
from .store import PlotStore


class ClaimService:
    """
    Claim workflow on top of a PlotStore.

    Usage:
        service = ClaimService(InMemoryPlotStore(), OwnershipPolicy(config, capabilities))
        service.begin_claim("alice", "overworld", GridPoint(0, 0))
        service.add_vertex("alice", GridPoint(10, 0))
        service.add_vertex("alice", GridPoint(10, 10))
        service.add_vertex("alice", GridPoint(0, 10))
        service.save_claim("alice")          # Result.SUCCESS
    """

    def __init__(
        self,
        store: PlotStore,
        policy: Optional[OwnershipPolicy] = None,
        config: Optional[PlotConfig] = None,
        logger: Optional[StructuredLogger] = None,
        resolver: Optional[PlotHierarchyResolver] = None,
    ):
        self.store = store
        self.config = config or (policy.config if policy is not None else PlotConfig())
        self.policy = policy or OwnershipPolicy(self.config)
        self.logger = logger or create_logger("claims", level=self.config.log_level)
        self.resolver = resolver or PlotHierarchyResolver(self.config)
        self.sessions = ClaimSessionRegistry()

    # ========== Lookup ==========

    def locate(self, world: str, point: GridPoint) -> Resolution:
        """Innermost plot at ``point`` with its ancestor chain."""
        return self.resolver.resolve(point, world, self.store.candidates(world, point))

    def check_permission(self, actor: str, world: str, point: GridPoint, action: str) -> bool:
        """
        May ``actor`` perform a plot action (build, break_blocks, entity, use, ...) here?

        Raises:
            ValueError: If ``action`` is not a configured plot action
        """
        resolution = self.locate(world, point)
        allowed = self.policy.may(resolution.polygon, actor, action)
        if not allowed:
            self.logger.debug(
                event=LogEvent.PERMISSION_DENIED,
                message=f"{action} denied",
                metadata={
                    'actor': actor,
                    'action': action,
                    'plot_id': resolution.polygon.id,
                    'world': world,
                },
            )
        return allowed

    def entered_plots(
        self,
        world: str,
        origin: GridPoint,
        destination: GridPoint,
    ) -> List[Polygon]:
        """
        Plots newly entered when moving from ``origin`` to ``destination``.

        Returns:
            Destination chain members absent from the origin chain, outermost
            first; empty when both points resolve to the same plot
        """
        before = self.locate(world, origin)
        after = self.locate(world, destination)
        if before.polygon == after.polygon:
            return []
        left = {polygon.id for polygon in before.chain}
        entered = [polygon for polygon in after.chain if polygon.id not in left]
        entered.reverse()
        return entered

    # ========== Claim sessions ==========

    def begin_claim(self, actor: str, world: str, point: GridPoint) -> Result:
        """
        Start drawing a new plot inside the plot at ``point``.

        A previous unfinished claim of the same actor is discarded.

        Returns:
            WRONG_USAGE inside a vacant plot, NO_PERMISSION without the claim
            rank, otherwise the outcome of adding the first vertex
        """
        previous = self.sessions.close(actor)
        if previous is not None:
            self._discard(actor, previous, reason="replaced")

        resolution = self.locate(world, point)
        parent = resolution.polygon
        if parent.owner is None:
            return self._reject(actor, parent, Result.FAILURE_WRONG_USAGE, "Parent plot is vacant")

        required = self.config.plot_ranks.rank_for("claim")
        if not self.policy.contains_user(parent.owner, actor, required):
            return self._deny(actor, parent, "claim")

        polygon = resolution.arena.create_child(parent, plot_id=self.store.next_plot_id())
        result = polygon.add_point(point)
        self.sessions.open(actor, ClaimSession(polygon=polygon, resolution=resolution))
        self.store.save_plot(PlotRecord.from_polygon(polygon))

        self.logger.info(
            event=LogEvent.CLAIM_STARTED,
            message=f"Claim started inside plot {parent.id}",
            metadata={
                'actor': actor,
                'plot_id': polygon.id,
                'parent_id': parent.id,
                'depth': polygon.depth,
                'world': world,
            },
        )
        return result

    def add_vertex(self, actor: str, point: GridPoint) -> Result:
        """Append a vertex to the actor's open claim."""
        session = self.sessions.get(actor)
        if session is None:
            return Result.FAILURE_NOT_FOUND

        required = self.config.plot_ranks.rank_for("claim")
        owner = self.policy.effective_owner(session.parent)
        if not self.policy.contains_user(owner, actor, required):
            return self._deny(actor, session.parent, "claim")

        polygon = session.polygon
        result = polygon.add_point(point)
        if not result.ok:
            self.logger.debug(
                event=LogEvent.CLAIM_VERTEX_REJECTED,
                message=f"Vertex {point} rejected",
                metadata={'actor': actor, 'plot_id': polygon.id, 'result': result.value},
            )
            return result

        self.store.save_plot(PlotRecord.from_polygon(polygon))
        self.logger.debug(
            event=LogEvent.CLAIM_VERTEX_ADDED,
            message=f"Vertex {point} added",
            metadata={'actor': actor, 'plot_id': polygon.id, 'vertices': len(polygon.vertices)},
        )
        return result

    def save_claim(self, actor: str) -> Result:
        """
        Close the actor's claim and persist it as a vacant plot.

        Returns:
            NOT_FOUND without a session, BAD_ALIGNMENT if the outline does not
            close (or has fewer than 3 vertices), INTERSECTS_BORDER if any
            border edge is crossed, SUCCESS otherwise
        """
        session = self.sessions.get(actor)
        if session is None:
            return Result.FAILURE_NOT_FOUND

        polygon = session.polygon
        if len(polygon.vertices) < 3 or not polygon.is_complete():
            return Result.FAILURE_BAD_ALIGNMENT
        if not polygon.is_valid_shape():
            return Result.FAILURE_INTERSECTS_BORDER

        self.store.save_plot(PlotRecord.from_polygon(polygon))
        self.sessions.close(actor)
        self.logger.info(
            event=LogEvent.CLAIM_SAVED,
            message=f"Plot {polygon.id} saved",
            metadata={
                'actor': actor,
                'plot_id': polygon.id,
                'parent_id': polygon.parent_id,
                'vertices': polygon.vertices_string,
            },
        )
        return Result.SUCCESS

    def abort_claim(self, actor: str) -> Result:
        session = self.sessions.close(actor)
        if session is None:
            return Result.FAILURE_NOT_FOUND
        self._discard(actor, session, reason="aborted")
        return Result.SUCCESS

    def transfer(self, actor: str, world: str, point: GridPoint, new_owner: Owner) -> Result:
        """
        Give the plot at ``point`` to another user or group.

        Geometry and hierarchy are untouched; only the owner changes.
        """
        resolution = self.locate(world, point)
        polygon = resolution.polygon
        if polygon.is_wilderness:
            return self._reject(actor, polygon, Result.FAILURE_WRONG_USAGE, "Wilderness cannot be given")

        required = self.config.plot_ranks.rank_for("give")
        if not self.policy.contains_user(self.policy.effective_owner(polygon), actor, required):
            return self._deny(actor, polygon, "give")

        if new_owner.kind is OwnerKind.GROUP and self.store.get_group(new_owner.name) is None:
            return Result.FAILURE_UNKNOWN_GROUP

        record = self.store.get_plot(polygon.id)
        if record is None:
            return Result.FAILURE_NOT_FOUND
        self.store.save_plot(dataclasses.replace(record, owner=new_owner))

        self.logger.info(
            event=LogEvent.PLOT_TRANSFERRED,
            message=f"Plot {polygon.id} given to {new_owner.serialize()}",
            metadata={
                'actor': actor,
                'plot_id': polygon.id,
                'previous_owner': polygon.owner.serialize() if polygon.owner else None,
                'owner': new_owner.serialize(),
            },
        )
        return Result.SUCCESS

    # ========== Groups ==========

    def create_group(self, actor: str, name: str) -> Result:
        if self.store.get_group(name) is not None or name == self.config.wilderness_group_name:
            return Result.FAILURE_ALREADY_PRESENT
        self.store.save_group(Group.founded(name, actor))
        self.logger.info(
            event=LogEvent.GROUP_CREATED,
            message=f"Group {name} created",
            metadata={'actor': actor, 'group': name},
        )
        return Result.SUCCESS

    def list_members(self, actor: str, group_name: str) -> Tuple[Result, Dict[str, Rank]]:
        group = self.store.get_group(group_name)
        if group is None:
            return Result.FAILURE_UNKNOWN_GROUP, {}
        if not self._may_manage(group, actor, "list"):
            return Result.FAILURE_NO_PERMISSION, {}
        return Result.SUCCESS, dict(group.users)

    def add_member(self, actor: str, group_name: str, user_id: str) -> Result:
        """Add ``user_id`` to a group as MEMBER."""
        group = self.store.get_group(group_name)
        if group is None:
            return Result.FAILURE_UNKNOWN_GROUP
        if not self._may_manage(group, actor, "add"):
            return Result.FAILURE_NO_PERMISSION
        result = group.add_user(user_id, Rank.MEMBER)
        if result.ok:
            self.store.save_group(group)
            self._log_group(LogEvent.GROUP_MEMBER_ADDED, actor, group, user_id)
        return result

    def remove_member(self, actor: str, group_name: str, user_id: str) -> Result:
        group = self.store.get_group(group_name)
        if group is None:
            return Result.FAILURE_UNKNOWN_GROUP
        if not self._may_manage(group, actor, "remove"):
            return Result.FAILURE_NO_PERMISSION
        result = group.remove_user(user_id)
        if result.ok:
            self.store.save_group(group)
            self._log_group(LogEvent.GROUP_MEMBER_REMOVED, actor, group, user_id)
        return result

    def rank_member(self, actor: str, group_name: str, user_id: str, rank: Rank) -> Result:
        """
        Change a member's rank.

        Returns:
            WRONG_USAGE for OUTSIDER (use remove_member instead)
        """
        if rank is Rank.OUTSIDER:
            return Result.FAILURE_WRONG_USAGE
        group = self.store.get_group(group_name)
        if group is None:
            return Result.FAILURE_UNKNOWN_GROUP
        if not self._may_manage(group, actor, "rank"):
            return Result.FAILURE_NO_PERMISSION
        result = group.rank_user(user_id, rank)
        if result.ok:
            self.store.save_group(group)
            self._log_group(LogEvent.GROUP_MEMBER_RANKED, actor, group, user_id, rank=rank.name)
        return result

    # ========== Internals ==========

    def _may_manage(self, group: Group, actor: str, action: str) -> bool:
        required = self.config.group_ranks.rank_for(action)
        allowed = self.policy.contains_user(Owner.of_group(group), actor, required)
        if not allowed:
            self.logger.debug(
                event=LogEvent.PERMISSION_DENIED,
                message=f"group {action} denied",
                metadata={'actor': actor, 'action': action, 'group': group.name},
            )
        return allowed

    def _discard(self, actor: str, session: ClaimSession, reason: str) -> None:
        self.store.delete_plot(session.polygon.id)
        self.logger.info(
            event=LogEvent.CLAIM_ABORTED,
            message=f"Claim {session.polygon.id} {reason}",
            metadata={'actor': actor, 'plot_id': session.polygon.id, 'reason': reason},
        )

    def _deny(self, actor: str, polygon: Polygon, action: str) -> Result:
        self.logger.debug(
            event=LogEvent.PERMISSION_DENIED,
            message=f"{action} denied",
            metadata={'actor': actor, 'action': action, 'plot_id': polygon.id},
        )
        return Result.FAILURE_NO_PERMISSION

    def _reject(self, actor: str, polygon: Polygon, result: Result, message: str) -> Result:
        self.logger.debug(
            event=LogEvent.CLAIM_VERTEX_REJECTED,
            message=message,
            metadata={'actor': actor, 'plot_id': polygon.id, 'result': result.value},
        )
        return result

    def _log_group(self, event: LogEvent, actor: str, group: Group, user_id: str, **extra) -> None:
        self.logger.info(
            event=event,
            message=f"{event.value} {user_id} in {group.name}",
            metadata={'actor': actor, 'group': group.name, 'user': user_id, **extra},
        )
