"""Resolution of connection endpoints to target nodes."""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from ...domain.models.capacity_mesh import InputNodeWithPortPoints
from ...domain.models.pathing import Connection, ConnectionPathResult
from ...shared.exceptions import InsufficientEndpointsError
from ...shared.utils.validation_utils import validate_connection_name

logger = logging.getLogger(__name__)


@dataclass
class ConnectionsWithNodes:
    """Connections paired with their terminal nodes, in input order."""
    connection_results: List[ConnectionPathResult] = field(default_factory=list)
    connection_name_to_goal_node_ids: Dict[str, List[str]] = field(default_factory=dict)


def get_connections_with_nodes(connections: Iterable[Connection],
                               input_nodes: Sequence[InputNodeWithPortPoints]) -> ConnectionsWithNodes:
    """Map each connection point to the nearest node containing a target.
    
    Args:
        connections: Connections to resolve
        input_nodes: Mesh nodes; only those flagged ``contains_target`` are candidates
        
    Returns:
        ConnectionsWithNodes with one unsolved result per connection
        
    Raises:
        InsufficientEndpointsError: If a connection resolves to fewer than two nodes
    """
    target_nodes = [node for node in input_nodes if node.contains_target]
    result = ConnectionsWithNodes()
    
    for connection in connections:
        validate_connection_name(connection.name)
        resolved: List[InputNodeWithPortPoints] = []
        
        if target_nodes:
            for point in connection.points_to_connect:
                closest = min(
                    target_nodes,
                    key=lambda node: node.center.distance_to(point.position)
                )
                resolved.append(closest)
        
        if len(resolved) < 2:
            raise InsufficientEndpointsError(connection.name, len(resolved))
        
        first, last = resolved[0], resolved[-1]
        result.connection_name_to_goal_node_ids[connection.name] = [
            node.capacity_mesh_node_id for node in resolved
        ]
        result.connection_results.append(ConnectionPathResult(
            connection=connection,
            node_ids=(first.capacity_mesh_node_id, last.capacity_mesh_node_id),
            straight_line_distance=first.center.distance_to(last.center)
        ))
    
    logger.debug(f"Resolved terminals for {len(result.connection_results)} connections")
    return result
