"""
ClaimSessionRegistry - Per-actor in-progress claims

Bounded Context: Claim editing sessions
Responsibilities:
  - Track the plot each actor is currently drawing
  - Keep the query arena alive for as long as the session lives
  - Replace or close sessions explicitly

Threading: Thread-safe (uses lock for write operations)
Pattern: Registry keyed by actor id
"""

import threading
from dataclasses import dataclass
from typing import Dict, Optional, Set

from freehold_plots.geometry.polygon import Polygon
from freehold_plots.hierarchy.resolver import Resolution


@dataclass
class ClaimSession:
    """
    One actor's plot under construction.

    The session holds the Resolution that located the parent plot; its arena
    owns the parent chain the new polygon is linked into.
    """

    polygon: Polygon
    resolution: Resolution

    @property
    def parent(self) -> Polygon:
        return self.resolution.polygon


class ClaimSessionRegistry:
    """
    Registry of open claim sessions, at most one per actor.

    Thread Safety:
      - Uses lock for write operations (open, close)
      - Read operations are lock-free (single dict lookups)

    Example:
        registry = ClaimSessionRegistry()
        registry.open("alice", ClaimSession(polygon, resolution))
        session = registry.get("alice")
        registry.close("alice")
    """

    def __init__(self):
        self._sessions: Dict[str, ClaimSession] = {}
        self._lock = threading.Lock()

    def open(self, actor: str, session: ClaimSession) -> Optional[ClaimSession]:
        """
        Start a session for ``actor``.

        Returns:
            The session it replaced, if any
        """
        with self._lock:
            previous = self._sessions.get(actor)
            self._sessions[actor] = session
            return previous

    def get(self, actor: str) -> Optional[ClaimSession]:
        return self._sessions.get(actor)

    def close(self, actor: str) -> Optional[ClaimSession]:
        with self._lock:
            return self._sessions.pop(actor, None)

    def is_active(self, actor: str) -> bool:
        return actor in self._sessions

    @property
    def active_actors(self) -> Set[str]:
        """Snapshot of actors with an open session."""
        return set(self._sessions.keys())

    def count(self) -> int:
        return len(self._sessions)
