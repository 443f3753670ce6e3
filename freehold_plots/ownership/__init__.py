"""
Ownership Layer
===============

Bounded Context: Who owns a plot and who may act on it.

Responsibilities:
- Owner tagged union (single user or group)
- Groups with ranked members
- Effective-owner lookup along the parent chain
- Rank checks, with the everyone-group bypass delegated to a capability checker
"""

from freehold_plots.ownership.owner import Group, Owner, OwnerKind
from freehold_plots.ownership.policy import CapabilityChecker, OwnershipPolicy, StaticCapabilities

__all__ = [
    "Group",
    "Owner",
    "OwnerKind",
    "CapabilityChecker",
    "OwnershipPolicy",
    "StaticCapabilities",
]
