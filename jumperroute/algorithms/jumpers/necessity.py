"""Classification of placed jumpers as used and necessary.

A jumper is *used* when some connection path threads one of its pads, either
by hopping between the pads through the off-board link or by visiting a pad
node as an ordinary waypoint. A used jumper is *necessary* when a different
connection's route crosses the line between its pads; otherwise the pads can
be stitched together as a plain trace.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Set

from ...domain.models.capacity_mesh import InputNodeWithPortPoints, PortPoint
from ...domain.models.geometry import Point
from ...domain.models.jumpers import Obstacle, PrepatternJumper
from ...domain.models.pathing import ConnectionPathResult
from ...domain.services.connectivity import ConnectivityMap, build_off_board_connectivity
from ..base.segments import segments_intersect

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JumperGeometry:
    """Physical pad-to-pad line of a jumper."""
    start: Point
    end: Point


@dataclass(frozen=True)
class JumperUsage:
    """Result of jumper classification, keyed by off-board net id."""
    used_jumper_ids: FrozenSet[str] = frozenset()
    necessary_jumper_ids: FrozenSet[str] = frozenset()
    jumper_users: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    off_board_connectivity: Optional[ConnectivityMap] = None
    
    @property
    def unnecessary_jumper_ids(self) -> FrozenSet[str]:
        return self.used_jumper_ids - self.necessary_jumper_ids
    
    def is_used(self, jumper_id: str) -> bool:
        return jumper_id in self.used_jumper_ids
    
    def is_necessary(self, jumper_id: str) -> bool:
        return jumper_id in self.necessary_jumper_ids


def route_intersects_line(route: Sequence[Point], start: Point, end: Point) -> bool:
    """Check whether any segment of a polyline touches or crosses a line."""
    for i in range(len(route) - 1):
        if segments_intersect(route[i], route[i + 1], start, end):
            return True
    return False


def build_jumper_geometry(prepattern_jumpers: Iterable[PrepatternJumper],
                          connectivity: Optional[ConnectivityMap]) -> Dict[str, JumperGeometry]:
    """Map off-board net ids to the physical line of their jumper."""
    geometry: Dict[str, JumperGeometry] = {}
    if connectivity is None:
        return geometry
    
    for jumper in prepattern_jumpers:
        net_id = connectivity.get_net_connected_to_id(jumper.off_board_connection_id)
        if net_id:
            geometry[net_id] = JumperGeometry(jumper.start, jumper.end)
    return geometry


def classify_jumper_usage(connection_results: Iterable[ConnectionPathResult],
                          input_nodes: Iterable[InputNodeWithPortPoints],
                          prepattern_jumpers: Iterable[PrepatternJumper],
                          obstacles: Iterable[Obstacle]) -> JumperUsage:
    """Find which jumpers the solved paths use and which of those are needed.
    
    Args:
        connection_results: Completed pathing results
        input_nodes: Mesh nodes; jumper pads carry ``off_board_connection_id``
        prepattern_jumpers: Candidate jumpers with their pad positions
        obstacles: Board obstacles, including the jumper pads
        
    Returns:
        JumperUsage with used and necessary off-board net ids
    """
    connectivity = build_off_board_connectivity(obstacles)
    jumper_geometry = build_jumper_geometry(prepattern_jumpers, connectivity)
    node_map = {node.capacity_mesh_node_id: node for node in input_nodes}
    
    jumper_users: Dict[str, Set[str]] = {}
    connection_routes: Dict[str, List[Point]] = {}
    
    def record_use(node_id: Optional[str], connection_name: str):
        node = node_map.get(node_id) if node_id else None
        if node is not None and node.off_board_connection_id:
            jumper_users.setdefault(node.off_board_connection_id, set()).add(connection_name)
    
    for result in connection_results:
        if not result.path:
            continue
        connection_name = result.connection_name
        
        for candidate in result.path:
            if candidate.last_move_was_off_board:
                record_use(candidate.through_node_id, connection_name)
            record_use(candidate.current_node_id, connection_name)
        
        connection_routes[connection_name] = result.route_points()
    
    necessary: Set[str] = set()
    for jumper_id, users in jumper_users.items():
        geometry = jumper_geometry.get(jumper_id)
        if geometry is None:
            continue
        
        for connection_name, route in connection_routes.items():
            if connection_name in users:
                continue
            if route_intersects_line(route, geometry.start, geometry.end):
                necessary.add(jumper_id)
                logger.debug(f"Jumper {jumper_id} is crossed by {connection_name}")
                break
    
    usage = JumperUsage(
        used_jumper_ids=frozenset(jumper_users),
        necessary_jumper_ids=frozenset(necessary),
        jumper_users={k: frozenset(v) for k, v in jumper_users.items()},
        off_board_connectivity=connectivity
    )
    logger.info(f"Jumper usage: {len(usage.used_jumper_ids)} used, "
                f"{len(usage.necessary_jumper_ids)} necessary")
    return usage


def reposition_jumper_port_points(node_assigned_port_points: Mapping[str, Sequence[PortPoint]],
                                  input_nodes: Iterable[InputNodeWithPortPoints],
                                  usage: JumperUsage) -> Dict[str, List[PortPoint]]:
    """Move synthetic port points on jumper pads according to usage.
    
    Necessary jumpers keep each pad's synthetic port points at that pad's
    center. Used but unnecessary jumpers get the synthetic port points of both
    pads moved to the midpoint of the two pad centers. Real port points are
    never moved.
    
    Returns:
        A new node id -> port points map; the input map is left untouched
    """
    pads_by_jumper: Dict[str, List[InputNodeWithPortPoints]] = {}
    jumper_nodes = [node for node in input_nodes if node.off_board_connection_id]
    for node in jumper_nodes:
        pads_by_jumper.setdefault(node.off_board_connection_id, []).append(node)
    
    result = {node_id: list(points) for node_id, points in node_assigned_port_points.items()}
    
    for node in jumper_nodes:
        jumper_id = node.off_board_connection_id
        port_points = result.get(node.capacity_mesh_node_id)
        if not port_points:
            continue
        
        if usage.is_necessary(jumper_id):
            target = node.center
        elif usage.is_used(jumper_id):
            pads = pads_by_jumper.get(jumper_id, [])
            if len(pads) != 2:
                continue
            target = pads[0].center.midpoint(pads[1].center)
        else:
            continue
        
        result[node.capacity_mesh_node_id] = [
            replace(pp, x=target.x, y=target.y) if pp.is_synthetic else pp
            for pp in port_points
        ]
    
    return result
