"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for structured logging.

Event Naming Convention:
    <component>.<category>.<action>

    component: plot, claim, group, permission, config, error

Example Log Query:
    fields @timestamp, event, message, metadata.plot_id
    | filter event = "plot.parent_missing"
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - plot.*: Hierarchy resolution and plot changes
    - claim.*: Interactive claim sessions
    - group.*: Group membership changes
    - permission.*: Rank checks
    - error.*: Error conditions
    """

    # ========== Plot Events ==========
    PLOT_RESOLVED = "plot.resolved"
    """Query point resolved to its innermost plot."""

    PLOT_PARENT_MISSING = "plot.parent_missing"
    """Expected ancestor at depth-1 not among the candidates."""

    PLOT_DEPTH_CONFLICT = "plot.depth_conflict"
    """More than one containing candidate at the same depth."""

    PLOT_RECORD_SKIPPED = "plot.record_skipped"
    """Candidate record ignored (other world or invalid depth)."""

    PLOT_TRANSFERRED = "plot.transferred"
    """Plot owner replaced."""

    # ========== Claim Events ==========
    CLAIM_STARTED = "claim.started"
    CLAIM_VERTEX_ADDED = "claim.vertex_added"
    CLAIM_VERTEX_REJECTED = "claim.vertex_rejected"
    CLAIM_SAVED = "claim.saved"
    CLAIM_ABORTED = "claim.aborted"

    # ========== Group Events ==========
    GROUP_CREATED = "group.created"
    GROUP_MEMBER_ADDED = "group.member_added"
    GROUP_MEMBER_REMOVED = "group.member_removed"
    GROUP_MEMBER_RANKED = "group.member_ranked"

    # ========== Permission Events ==========
    PERMISSION_DENIED = "permission.denied"
    """Principal lacked the rank an action requires."""

    # ========== Error Events ==========
    RECORD_DECODE_ERROR = "error.record_decode"
    """Stored plot row could not be decoded."""


# Event categories for filtering
PLOT_EVENTS = {
    LogEvent.PLOT_RESOLVED,
    LogEvent.PLOT_PARENT_MISSING,
    LogEvent.PLOT_DEPTH_CONFLICT,
    LogEvent.PLOT_RECORD_SKIPPED,
    LogEvent.PLOT_TRANSFERRED,
}

CLAIM_EVENTS = {
    LogEvent.CLAIM_STARTED,
    LogEvent.CLAIM_VERTEX_ADDED,
    LogEvent.CLAIM_VERTEX_REJECTED,
    LogEvent.CLAIM_SAVED,
    LogEvent.CLAIM_ABORTED,
}

GROUP_EVENTS = {
    LogEvent.GROUP_CREATED,
    LogEvent.GROUP_MEMBER_ADDED,
    LogEvent.GROUP_MEMBER_REMOVED,
    LogEvent.GROUP_MEMBER_RANKED,
}
