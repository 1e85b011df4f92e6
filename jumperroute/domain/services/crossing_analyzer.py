"""Intra-node crossing analysis using perimeter chords.

Every connection that enters and leaves a node becomes a chord between two
points on the node boundary. Unrolling the boundary clockwise from the
top-left corner turns each chord into an interval ``(t1, t2)``; two chords
must cross inside the node iff their intervals interleave. The test does not
depend on which sides of the rectangle the endpoints sit on.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from ..models.capacity_mesh import NodeWithPortPoints
from ..models.geometry import Bounds

logger = logging.getLogger(__name__)

BOUNDARY_EPSILON = 1e-6
COINCIDENT_EPSILON = 1e-6

Chord = Tuple[float, float]


@dataclass(frozen=True)
class IntraNodeCrossings:
    """Crossing counts for one node."""
    num_same_layer_crossings: int = 0
    num_entry_exit_layer_changes: int = 0
    num_transition_pair_crossings: int = 0


def perimeter_t(x: float, y: float, bounds: Bounds) -> float:
    """Map a boundary point to its clockwise perimeter coordinate.
    
    Points not on the boundary snap to the closest edge, clamped to that edge.
    
    Args:
        x, y: Point coordinates
        bounds: Node bounds
        
    Returns:
        Coordinate in ``[0, 2W + 2H)``
    """
    w = bounds.width
    h = bounds.height
    
    if abs(y - bounds.max_y) < BOUNDARY_EPSILON:
        return x - bounds.min_x
    if abs(x - bounds.max_x) < BOUNDARY_EPSILON:
        return w + (bounds.max_y - y)
    if abs(y - bounds.min_y) < BOUNDARY_EPSILON:
        return w + h + (bounds.max_x - x)
    if abs(x - bounds.min_x) < BOUNDARY_EPSILON:
        return 2 * w + h + (y - bounds.min_y)
    
    dist_top = abs(y - bounds.max_y)
    dist_right = abs(x - bounds.max_x)
    dist_bottom = abs(y - bounds.min_y)
    dist_left = abs(x - bounds.min_x)
    min_dist = min(dist_top, dist_right, dist_bottom, dist_left)
    
    if min_dist == dist_top:
        return _clamp(x - bounds.min_x, w)
    if min_dist == dist_right:
        return w + _clamp(bounds.max_y - y, h)
    if min_dist == dist_bottom:
        return w + h + _clamp(bounds.max_x - x, w)
    return 2 * w + h + _clamp(y - bounds.min_y, h)


def _clamp(value: float, upper: float) -> float:
    return max(0.0, min(upper, value))


def _coincident(t1: float, t2: float) -> bool:
    return abs(t1 - t2) < COINCIDENT_EPSILON


def chords_cross(first: Chord, second: Chord) -> bool:
    """Check whether two perimeter chords interleave.
    
    Chords sharing an endpoint never cross.
    """
    a, b = sorted(first)
    c, d = sorted(second)
    
    if _coincident(a, c) or _coincident(a, d) or _coincident(b, c) or _coincident(b, d):
        return False
    
    return (a < c < b < d) or (c < a < d < b)


def count_chord_crossings(chords: Sequence[Chord]) -> int:
    """Count pairwise crossings among chords."""
    crossings = 0
    for i in range(len(chords)):
        for j in range(i + 1, len(chords)):
            if chords_cross(chords[i], chords[j]):
                crossings += 1
    return crossings


def get_intra_node_crossings(node: NodeWithPortPoints) -> IntraNodeCrossings:
    """Count forced crossings among the connections passing through a node.
    
    Args:
        node: Node and its assigned port points
        
    Returns:
        IntraNodeCrossings with same-layer crossings (summed per layer), the
        number of connections changing layer, and crossings among those
        layer-changing connections.
    """
    bounds = node.bounds
    
    points_by_connection: Dict[str, List[Tuple[float, float, int]]] = {}
    for pp in node.port_points:
        points = points_by_connection.setdefault(pp.connection_name, [])
        key = (pp.x, pp.y, pp.z)
        if key not in points:
            points.append(key)
    
    same_layer_chords: Dict[int, List[Chord]] = {}
    transition_chords: List[Chord] = []
    
    for points in points_by_connection.values():
        if len(points) < 2:
            continue
        (x1, y1, z1), (x2, y2, z2) = points[0], points[1]
        chord = (perimeter_t(x1, y1, bounds), perimeter_t(x2, y2, bounds))
        
        if z1 == z2:
            same_layer_chords.setdefault(z1, []).append(chord)
        else:
            transition_chords.append(chord)
    
    result = IntraNodeCrossings(
        num_same_layer_crossings=sum(
            count_chord_crossings(chords) for chords in same_layer_chords.values()
        ),
        num_entry_exit_layer_changes=len(transition_chords),
        num_transition_pair_crossings=count_chord_crossings(transition_chords)
    )
    
    logger.debug(f"Node {node.capacity_mesh_node_id}: {result}")
    return result
