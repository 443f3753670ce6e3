"""
Plot Store
==========

Bounded Context: Persistence boundary of the claim workflow.

The engine never queries storage itself. The store hands out candidate
records whose bounding boxes cover a point, and persists plots and groups.

Design:
- PlotStore is an interface (Protocol); hosts plug in their database
- InMemoryPlotStore backs tests and the CLI
"""

import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from freehold_plots.geometry.shapes import GridPoint
from freehold_plots.hierarchy.records import PlotRecord
from freehold_plots.logging import LogEvent, StructuredLogger, create_logger
from freehold_plots.ownership.owner import Group


class PlotStore(Protocol):
    """Storage collaborator (interface)."""

    def candidates(self, world: str, point: GridPoint) -> List[PlotRecord]:
        """Records of ``world`` whose bounding box covers ``point``."""
        ...

    def get_plot(self, plot_id: int) -> Optional[PlotRecord]:
        ...

    def save_plot(self, record: PlotRecord) -> None:
        ...

    def delete_plot(self, plot_id: int) -> bool:
        ...

    def next_plot_id(self) -> int:
        ...

    def get_group(self, name: str) -> Optional[Group]:
        ...

    def save_group(self, group: Group) -> None:
        ...


class InMemoryPlotStore:
    """
    Dict-backed PlotStore.

    Thread Safety:
      - Uses lock for write operations and id allocation

    Example:
        store = InMemoryPlotStore()
        store.save_plot(record)
        store.candidates("overworld", GridPoint(5, 5))
    """

    def __init__(self, plots: Iterable[PlotRecord] = (), groups: Iterable[Group] = ()):
        self._plots: Dict[int, PlotRecord] = {record.id: record for record in plots}
        self._groups: Dict[str, Group] = {group.name: group for group in groups}
        self._next_id = max(self._plots, default=0) + 1
        self._lock = threading.Lock()

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Mapping[str, Any]],
        groups: Iterable[Group] = (),
        logger: Optional[StructuredLogger] = None,
    ) -> "InMemoryPlotStore":
        """
        Load stored plot rows, skipping rows that cannot be decoded.

        Args:
            rows: Rows in PlotRecord.to_dict() format
            groups: Groups referenced by group owners
            logger: Receives one RECORD_DECODE_ERROR per skipped row
        """
        logger = logger or create_logger("store")
        store = cls(groups=groups)
        for row in rows:
            try:
                store.save_plot(PlotRecord.from_dict(dict(row), store.get_group))
            except ValueError as e:
                logger.error(
                    event=LogEvent.RECORD_DECODE_ERROR,
                    message="Could not decode plot row",
                    metadata={'plot_id': row.get('id')},
                    exc_info=e,
                )
        return store

    def candidates(self, world: str, point: GridPoint) -> List[PlotRecord]:
        return [record for record in self._plots.values() if record.covers(world, point)]

    def get_plot(self, plot_id: int) -> Optional[PlotRecord]:
        return self._plots.get(plot_id)

    def save_plot(self, record: PlotRecord) -> None:
        with self._lock:
            self._plots[record.id] = record
            self._next_id = max(self._next_id, record.id + 1)

    def delete_plot(self, plot_id: int) -> bool:
        with self._lock:
            return self._plots.pop(plot_id, None) is not None

    def next_plot_id(self) -> int:
        """Allocate a fresh plot id (never reused)."""
        with self._lock:
            plot_id = self._next_id
            self._next_id += 1
            return plot_id

    def get_group(self, name: str) -> Optional[Group]:
        return self._groups.get(name)

    def save_group(self, group: Group) -> None:
        with self._lock:
            self._groups[group.name] = group

    @property
    def plots(self) -> List[PlotRecord]:
        """Snapshot of every stored record, ordered by id."""
        return sorted(self._plots.values(), key=lambda record: record.id)

    def __len__(self) -> int:
        return len(self._plots)
