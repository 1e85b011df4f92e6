"""Domain models for bounded port point sections."""
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .capacity_mesh import CapacityMeshEdge, CapacityMeshNode, InputNodeWithPortPoints


@dataclass(frozen=True)
class SectionPathPoint:
    """A path point copied into a section."""
    x: float
    y: float
    z: int
    node_id: str
    port_point_id: Optional[str] = None


@dataclass
class SectionPath:
    """The part of a connection path that touches a section.
    
    A path may leave and re-enter the section several times; everything
    between the first and the last in-section step is kept as one piece.
    """
    connection_name: str
    points: List[SectionPathPoint]
    original_start_index: int
    original_end_index: int
    has_entry_from_outside: bool
    has_exit_to_outside: bool
    root_connection_name: Optional[str] = None


@dataclass
class PortPointSection:
    """A breadth-first neighbourhood of the capacity mesh around a node."""
    center_node_id: str
    expansion_degrees: int
    node_ids: Set[str]
    input_nodes: List[InputNodeWithPortPoints] = field(default_factory=list)
    capacity_mesh_nodes: List[CapacityMeshNode] = field(default_factory=list)
    internal_edges: List[CapacityMeshEdge] = field(default_factory=list)
    boundary_edges: List[CapacityMeshEdge] = field(default_factory=list)
    section_paths: List[SectionPath] = field(default_factory=list)
    
    def __contains__(self, node_id: str) -> bool:
        return node_id in self.node_ids
