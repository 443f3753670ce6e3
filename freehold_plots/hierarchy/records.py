"""
Plot Records
============

Bounded Context: Storage contract

Plain data the storage collaborator hands to the engine, and gets back to
persist. One record per stored plot row.

Design Principles:
- Immutability: frozen=True
- Serialization: to_dict() / from_dict() using the stored text formats
- Validation: Constructor validates invariants
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from freehold_plots.geometry.codec import parse_vertices, serialize_vertices
from freehold_plots.geometry.polygon import BoundingBox, Polygon
from freehold_plots.geometry.shapes import GridPoint
from freehold_plots.ownership.owner import Group, Owner


@dataclass(frozen=True)
class PlotRecord:
    """
    Immutable stored plot.

    Attributes:
        id: Plot id (positive)
        world: World identifier
        vertices: Ordered outline
        depth: Stored nesting depth (>= 1)
        owner: Owner, or None for a vacant plot
        parent_id: Stored parent id, if any

    Invariants:
        - id >= 0
        - depth >= 1

    Example:
        >>> record = PlotRecord(id=3, world="overworld", vertices=(GridPoint(0, 0),), depth=1)
        >>> record.to_dict()['vertices']
        '[0,0]'
    """
    id: int
    world: str
    vertices: Tuple[GridPoint, ...]
    depth: int
    owner: Optional[Owner] = None
    parent_id: Optional[int] = None

    def __post_init__(self):
        """Validate invariants."""
        if self.id < 0:
            raise ValueError(f"PlotRecord id must be >= 0, got {self.id}")
        if self.depth < 1:
            raise ValueError(f"PlotRecord depth must be >= 1, got {self.depth}")
        object.__setattr__(self, 'vertices', tuple(self.vertices))

    @property
    def bounding_box(self) -> Optional[BoundingBox]:
        return BoundingBox.around(self.vertices)

    def covers(self, world: str, point: GridPoint) -> bool:
        """Bounding-box pre-filter used by stores."""
        box = self.bounding_box
        return self.world == world and box is not None and box.contains(point)

    def to_polygon(self) -> Polygon:
        return Polygon(
            self.id,
            self.world,
            owner=self.owner,
            depth=self.depth,
            parent_id=self.parent_id,
            vertices=self.vertices,
        )

    @classmethod
    def from_polygon(cls, polygon: Polygon) -> "PlotRecord":
        return cls(
            id=polygon.id,
            world=polygon.world,
            vertices=polygon.vertices,
            depth=polygon.depth,
            owner=polygon.owner,
            parent_id=polygon.parent_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a storage row."""
        box = self.bounding_box
        centroid = self.to_polygon().centroid
        return {
            'id': self.id,
            'owner': self.owner.serialize() if self.owner is not None else None,
            'world': self.world,
            'vertices': serialize_vertices(self.vertices),
            'centroid_x': int(centroid.x) if centroid is not None else None,
            'centroid_z': int(centroid.z) if centroid is not None else None,
            'parent': self.parent_id,
            'depth': self.depth,
            'min_x': box.min_x if box else None,
            'min_z': box.min_z if box else None,
            'max_x': box.max_x if box else None,
            'max_z': box.max_z if box else None,
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        group_lookup: Callable[[str], Optional[Group]] = lambda name: None,
    ) -> 'PlotRecord':
        """Deserialize from a storage row.

        Args:
            data: Row with keys id, world, vertices, depth and optional owner, parent
            group_lookup: Resolves group owners by name

        Returns:
            PlotRecord instance

        Raises:
            ValueError: If required keys missing or invalid values
        """
        try:
            return cls(
                id=int(data['id']),
                world=str(data['world']),
                vertices=tuple(parse_vertices(data['vertices'])),
                depth=int(data['depth']),
                owner=Owner.parse(data.get('owner'), group_lookup),
                parent_id=int(data['parent']) if data.get('parent') is not None else None,
            )
        except KeyError as e:
            raise ValueError(f"Missing required PlotRecord field: {e}") from e
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid PlotRecord data: {e}") from e
