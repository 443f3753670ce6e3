"""
Result Codes
============

Bounded Context: Shared Outcome Taxonomy

Every mutating operation in the plot engine and the claim workflow reports its
outcome as a ``Result`` value instead of raising. Callers branch on the value.

Design:
- str Enum (serializable, comparable with plain strings)
- One SUCCESS member, every other member is a specific failure kind
"""

from enum import Enum


class Result(str, Enum):
    """
    Outcome of a plot or group operation.

    Categories:
    - geometry: BAD_ALIGNMENT, INTERSECTS_BORDER
    - sessions / records: NOT_FOUND, WRONG_USAGE
    - groups: ALREADY_PRESENT, NOT_PRESENT, UNKNOWN_GROUP
    - ranks: NO_PERMISSION
    """

    SUCCESS = "SUCCESS"

    FAILURE_BAD_ALIGNMENT = "FAILURE_BAD_ALIGNMENT"
    """Edge not 0/45/90 degrees, duplicate point, or edge leaves the parent."""

    FAILURE_INTERSECTS_BORDER = "FAILURE_INTERSECTS_BORDER"
    """Edge properly crosses an own or ancestor border edge."""

    FAILURE_NOT_FOUND = "FAILURE_NOT_FOUND"
    """No active editing session, or no matching record."""

    FAILURE_ALREADY_PRESENT = "FAILURE_ALREADY_PRESENT"
    FAILURE_NOT_PRESENT = "FAILURE_NOT_PRESENT"
    FAILURE_UNKNOWN_GROUP = "FAILURE_UNKNOWN_GROUP"

    FAILURE_NO_PERMISSION = "FAILURE_NO_PERMISSION"
    """Principal's rank is insufficient for the action."""

    FAILURE_WRONG_USAGE = "FAILURE_WRONG_USAGE"
    """Operation not applicable here (e.g. claiming inside a vacant plot)."""

    FAILURE = "FAILURE"
    """Unexpected internal failure."""

    @property
    def ok(self) -> bool:
        """True only for SUCCESS."""
        return self is Result.SUCCESS
