"""Construction of bounded port point sections around a node."""
import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Set

from ...domain.models.capacity_mesh import (
    CapacityMeshEdge, CapacityMeshNode, InputNodeWithPortPoints
)
from ...domain.models.pathing import ConnectionPathResult
from ...domain.models.section import PortPointSection, SectionPath, SectionPathPoint
from ..base.adjacency import AdjacencyIndex

logger = logging.getLogger(__name__)


@dataclass
class SectionGraphInput:
    """The full graph that sections are carved from."""
    input_nodes: List[InputNodeWithPortPoints]
    capacity_mesh_nodes: List[CapacityMeshNode]
    capacity_mesh_edges: List[CapacityMeshEdge]
    connection_results: List[ConnectionPathResult] = field(default_factory=list)


class PortPointSectionBuilder:
    """Builds sections by breadth-first expansion over the capacity mesh."""
    
    def __init__(self, graph: SectionGraphInput, adjacency: Optional[AdjacencyIndex] = None):
        """Initialize section builder.
        
        Args:
            graph: Full graph data
            adjacency: Prebuilt adjacency over the graph's edges
        """
        self.graph = graph
        self.adjacency = adjacency or AdjacencyIndex(graph.capacity_mesh_edges)
    
    def create_section(self, center_node_id: str, expansion_degrees: int) -> PortPointSection:
        """Carve the section within ``expansion_degrees`` hops of a node.
        
        Args:
            center_node_id: Node the section is centred on
            expansion_degrees: Maximum hop distance from the centre
            
        Returns:
            PortPointSection with filtered nodes, classified edges and cut paths
        """
        node_ids = set(self.adjacency.bfs_depths(center_node_id, expansion_degrees))
        
        internal_edges: List[CapacityMeshEdge] = []
        boundary_edges: List[CapacityMeshEdge] = []
        for edge in self.graph.capacity_mesh_edges:
            first_in = edge.node_ids[0] in node_ids
            second_in = edge.node_ids[1] in node_ids
            if first_in and second_in:
                internal_edges.append(edge)
            elif first_in or second_in:
                boundary_edges.append(edge)
        
        input_nodes = [
            replace(node, port_points=[
                pp for pp in node.port_points
                if pp.connection_node_ids[0] in node_ids or pp.connection_node_ids[1] in node_ids
            ])
            for node in self.graph.input_nodes
            if node.capacity_mesh_node_id in node_ids
        ]
        
        section = PortPointSection(
            center_node_id=center_node_id,
            expansion_degrees=expansion_degrees,
            node_ids=node_ids,
            input_nodes=input_nodes,
            capacity_mesh_nodes=[
                node for node in self.graph.capacity_mesh_nodes
                if node.capacity_mesh_node_id in node_ids
            ],
            internal_edges=internal_edges,
            boundary_edges=boundary_edges,
            section_paths=cut_paths_to_section(self.graph.connection_results, node_ids)
        )
        
        logger.debug(f"Section around {center_node_id}: {len(node_ids)} nodes, "
                     f"{len(internal_edges)} internal / {len(boundary_edges)} boundary edges, "
                     f"{len(section.section_paths)} paths")
        return section


def cut_paths_to_section(connection_results: Iterable[ConnectionPathResult],
                         section_node_ids: Set[str]) -> List[SectionPath]:
    """Cut every path to the part that touches the section.
    
    Everything from the first to the last in-section step is kept as one
    path, including steps outside the section in between. When the path's
    first (or last) step is one of the connection's terminal nodes the cut
    is widened to reach it.
    """
    section_paths: List[SectionPath] = []
    
    for result in connection_results:
        path = result.path
        if not path:
            continue
        
        indices = [i for i, c in enumerate(path) if c.current_node_id in section_node_ids]
        if not indices:
            continue
        
        first_index, last_index = indices[0], indices[-1]
        final_index = len(path) - 1
        has_entry_from_outside = first_index > 0
        has_exit_to_outside = last_index < final_index
        
        start_index, end_index = first_index, last_index
        if first_index > 0 and path[0].current_node_id in result.node_ids:
            start_index = 0
        if last_index < final_index and path[final_index].current_node_id in result.node_ids:
            end_index = final_index
        
        section_paths.append(SectionPath(
            connection_name=result.connection.name,
            root_connection_name=result.connection.root_connection_name,
            points=[
                SectionPathPoint(c.point.x, c.point.y, c.z, c.current_node_id, c.port_point_id)
                for c in path[start_index:end_index + 1]
            ],
            original_start_index=start_index,
            original_end_index=end_index,
            has_entry_from_outside=has_entry_from_outside,
            has_exit_to_outside=has_exit_to_outside
        ))
    
    return section_paths
