"""
freehold_claims - Claim workflow on top of the plot engine

Bounded Context: Interactive claiming, transfers and groups
Responsibilities:
  - Per-actor claim sessions (begin, add vertex, save, abort)
  - Plot transfers and group membership management
  - Permission checks at a point, plot entry detection

Architecture:
  - PlotStore: Storage interface (InMemoryPlotStore for tests and the CLI)
  - ClaimSessionRegistry: Actor -> plot under construction
  - ClaimService: Orchestration, answers every call with a Result

Design Philosophy:
  - Outcomes as values (no exceptions for refused actions)
  - Thread-safe registries (locks on writes)
  - Structured logging of every state change
"""

from .store import PlotStore, InMemoryPlotStore
from .registry import ClaimSession, ClaimSessionRegistry
from .service import ClaimService

__all__ = [
    "PlotStore",
    "InMemoryPlotStore",
    "ClaimSession",
    "ClaimSessionRegistry",
    "ClaimService",
]
