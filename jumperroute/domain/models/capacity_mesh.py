"""Domain models for the capacity mesh and port point assignment."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from ...shared.exceptions import ValidationError
from .geometry import Bounds, Point


@dataclass
class CapacityMeshNode:
    """A rectangular routing region of the board partition."""
    capacity_mesh_node_id: str
    center: Point
    width: float
    height: float
    available_z: List[int] = field(default_factory=lambda: [0])
    contains_target: bool = False
    contains_obstacle: bool = False
    off_board_connection_id: Optional[str] = None
    off_board_connected_node_ids: List[str] = field(default_factory=list)
    
    @property
    def bounds(self) -> Bounds:
        return Bounds.from_center(self.center, self.width, self.height)
    
    @property
    def is_jumper_pad(self) -> bool:
        """True when the node is one pad of a candidate jumper."""
        return self.off_board_connection_id is not None


@dataclass(frozen=True)
class CapacityMeshEdge:
    """Undirected edge between two capacity mesh nodes."""
    node_ids: Tuple[str, str]
    capacity_mesh_edge_id: Optional[str] = None
    
    def other(self, node_id: str) -> str:
        """Return the node on the opposite end of this edge."""
        first, second = self.node_ids
        if node_id == first:
            return second
        if node_id == second:
            return first
        raise ValueError(f"Node {node_id} is not on edge {self.node_ids}")


class PortPointKind(Enum):
    """Whether a port point comes from the mesh or was synthesised."""
    REAL = "real"
    SYNTHETIC = "synthetic"


@dataclass(frozen=True)
class PortPoint:
    """A connection endpoint on a node boundary.
    
    Real port points carry the stable id of the mesh port they were assigned
    to. Synthetic port points (e.g. the ones placed on jumper pads) have no id
    and may be repositioned by later stages.
    """
    connection_name: str
    x: float
    y: float
    z: int = 0
    root_connection_name: Optional[str] = None
    kind: PortPointKind = PortPointKind.SYNTHETIC
    port_point_id: Optional[str] = None
    
    def __post_init__(self):
        if self.kind is PortPointKind.REAL and self.port_point_id is None:
            raise ValidationError("Real port points require a port_point_id")
        if self.kind is PortPointKind.SYNTHETIC and self.port_point_id is not None:
            raise ValidationError("Synthetic port points cannot carry a port_point_id")
    
    @classmethod
    def real(cls, port_point_id: str, connection_name: str, x: float, y: float,
             z: int = 0, root_connection_name: Optional[str] = None) -> 'PortPoint':
        return cls(connection_name, x, y, z, root_connection_name,
                   PortPointKind.REAL, port_point_id)
    
    @classmethod
    def synthetic(cls, connection_name: str, x: float, y: float, z: int = 0,
                  root_connection_name: Optional[str] = None) -> 'PortPoint':
        return cls(connection_name, x, y, z, root_connection_name)
    
    @property
    def is_synthetic(self) -> bool:
        return self.kind is PortPointKind.SYNTHETIC
    
    @property
    def position(self) -> Point:
        return Point(self.x, self.y)


@dataclass
class NodeWithPortPoints:
    """A node together with the port points assigned to it."""
    capacity_mesh_node_id: str
    center: Point
    width: float
    height: float
    port_points: List[PortPoint] = field(default_factory=list)
    available_z: List[int] = field(default_factory=lambda: [0])
    
    @property
    def bounds(self) -> Bounds:
        return Bounds.from_center(self.center, self.width, self.height)
    
    @property
    def connection_names(self) -> List[str]:
        """Connection names in first-seen order."""
        names: List[str] = []
        for pp in self.port_points:
            if pp.connection_name not in names:
                names.append(pp.connection_name)
        return names


@dataclass(frozen=True)
class InputPortPoint:
    """A candidate port on the shared edge of two mesh nodes."""
    port_point_id: str
    x: float
    y: float
    z: int
    connection_node_ids: Tuple[str, str]
    connection_name: Optional[str] = None


@dataclass
class InputNodeWithPortPoints:
    """A mesh node and all candidate ports on its boundary."""
    capacity_mesh_node_id: str
    center: Point
    width: float
    height: float
    port_points: List[InputPortPoint] = field(default_factory=list)
    available_z: List[int] = field(default_factory=lambda: [0])
    contains_target: bool = False
    contains_obstacle: bool = False
    off_board_connection_id: Optional[str] = None
    
    @classmethod
    def from_mesh_node(cls, node: CapacityMeshNode,
                       port_points: Optional[List[InputPortPoint]] = None) -> 'InputNodeWithPortPoints':
        return cls(
            capacity_mesh_node_id=node.capacity_mesh_node_id,
            center=node.center,
            width=node.width,
            height=node.height,
            port_points=list(port_points or []),
            available_z=list(node.available_z),
            contains_target=node.contains_target,
            contains_obstacle=node.contains_obstacle,
            off_board_connection_id=node.off_board_connection_id
        )
