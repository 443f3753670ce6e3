"""
Ownership Policy
================

Decides whether a principal may act on a plot.

Design:
- Effective owner: own owner, else nearest owned ancestor, else the
  implicit "everyone" group
- Branches on Owner.kind; no runtime type inspection
- The everyone-group bypass asks an external capability checker, identified
  by a configured capability name, instead of comparing group names
"""

from typing import Iterable, Optional, Protocol, Set, Tuple

from freehold_plots.config import PlotConfig
from freehold_plots.geometry.polygon import Polygon
from freehold_plots.ownership.owner import Group, Owner, OwnerKind
from freehold_plots.ranks import Rank


class CapabilityChecker(Protocol):
    """Host permission system (interface)."""

    def has_capability(self, user_id: str, capability: str) -> bool:
        ...


class StaticCapabilities:
    """Capability checker backed by a fixed set of (user_id, capability) grants."""

    def __init__(self, grants: Iterable[Tuple[str, str]] = ()):
        self._grants: Set[Tuple[str, str]] = set(grants)

    def grant(self, user_id: str, capability: str) -> None:
        self._grants.add((user_id, capability))

    def has_capability(self, user_id: str, capability: str) -> bool:
        return (user_id, capability) in self._grants


class OwnershipPolicy:
    """
    Rank checks against a plot's effective owner.

    Usage:
        policy = OwnershipPolicy(PlotConfig(), StaticCapabilities())
        owner = policy.effective_owner(plot)
        if policy.contains_user(owner, user_id, Rank.ASSISTANT):
            ...
    """

    def __init__(
        self,
        config: Optional[PlotConfig] = None,
        capabilities: Optional[CapabilityChecker] = None,
    ):
        self.config = config or PlotConfig()
        self.capabilities = capabilities or StaticCapabilities()
        self._everyone = Owner.of_group(Group.everyone(self.config.wilderness_group_name))

    @property
    def everyone(self) -> Owner:
        return self._everyone

    def effective_owner(self, polygon: Polygon) -> Owner:
        if polygon.owner is not None:
            return polygon.owner
        for ancestor in polygon.ancestors(self.config.max_parent_chain):
            if ancestor.owner is not None:
                return ancestor.owner
        return self._everyone

    def contains_user(self, owner: Owner, user_id: str, required_rank: Rank) -> bool:
        """
        Check a user against an owner for a required rank.

        - User owner: only that user, rank irrelevant
        - Everyone group: up to MEMBER always granted, above needs the
          wilderness claim capability
        - Other groups: OPERATOR needs OPERATOR, ASSISTANT needs ASSISTANT or
          OPERATOR, MEMBER needs any membership, OUTSIDER is always granted
        """
        if owner.kind is OwnerKind.USER:
            return owner.user_id == user_id
        if owner.kind is OwnerKind.GROUP:
            return self._group_contains(owner.group, user_id, required_rank)
        raise ValueError(f"Unhandled owner kind: {owner.kind!r}")

    def _group_contains(self, group: Group, user_id: str, required_rank: Rank) -> bool:
        if group.is_everyone:
            if required_rank <= Rank.MEMBER:
                return True
            return self.capabilities.has_capability(
                user_id, self.config.wilderness_claim_capability
            )

        if required_rank is Rank.OUTSIDER:
            return True
        rank = group.rank_of(user_id)
        if rank is None or rank is Rank.OUTSIDER:
            return False
        if required_rank is Rank.OPERATOR:
            return rank is Rank.OPERATOR
        if required_rank is Rank.ASSISTANT:
            return rank is not Rank.MEMBER
        return True

    def may(self, polygon: Polygon, user_id: str, action: str) -> bool:
        """Check a plot action (build, break_blocks, claim, give, ...) at a plot."""
        required = self.config.plot_ranks.rank_for(action)
        return self.contains_user(self.effective_owner(polygon), user_id, required)
