"""Domain models for connection pathing results."""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .geometry import Point


@dataclass(frozen=True)
class ConnectionPoint:
    """A point that a connection must reach."""
    x: float
    y: float
    layer: str = "top"
    
    @property
    def position(self) -> Point:
        return Point(self.x, self.y)


@dataclass
class Connection:
    """A net (or net fragment) that must be connected."""
    name: str
    points_to_connect: List[ConnectionPoint] = field(default_factory=list)
    root_connection_name: Optional[str] = None


@dataclass
class PathCandidate:
    """One step of a connection path through the capacity mesh."""
    current_node_id: str
    point: Point
    z: int = 0
    port_point_id: Optional[str] = None
    through_node_id: Optional[str] = None
    last_move_was_off_board: bool = False


@dataclass
class ConnectionPathResult:
    """A solved or attempted path for one connection."""
    connection: Connection
    node_ids: Tuple[str, str]
    path: Optional[List[PathCandidate]] = None
    straight_line_distance: float = 0.0
    
    @property
    def is_solved(self) -> bool:
        return bool(self.path)
    
    @property
    def connection_name(self) -> str:
        return self.connection.name
    
    def route_points(self) -> List[Point]:
        """Polyline of the solved path, empty when unsolved."""
        return [candidate.point for candidate in self.path or []]
