"""Alternating-orientation grid of candidate jumpers."""
import logging
import math
from dataclasses import dataclass, field
from typing import List

from ...domain.models.capacity_mesh import NodeWithPortPoints
from ...domain.models.geometry import Point
from ...domain.models.jumpers import Obstacle, PrepatternJumper, get_jumper_dimensions

logger = logging.getLogger(__name__)

GRID_PADDING = 0.8  # mm inset from the node edge
JUMPER_MARGIN = 0.6  # mm between neighbouring cells


@dataclass
class PatternResult:
    """Jumpers placed by a prepattern and their pad obstacles."""
    jumper_pad_obstacles: List[Obstacle] = field(default_factory=list)
    prepattern_jumpers: List[PrepatternJumper] = field(default_factory=list)


def alternating_grid(node: NodeWithPortPoints, footprint: str = "0603",
                     trace_width: float = 0.15,
                     first_orientation: str = "horizontal") -> PatternResult:
    """Fill a node with a checkerboard of horizontal and vertical jumpers.
    
    Args:
        node: Node to fill; its port points must stay clear of the pads
        footprint: Jumper footprint name
        trace_width: Trace width used for the port point clearance
        first_orientation: Orientation of the jumper in the first cell
        
    Returns:
        PatternResult with the accepted jumpers and two pad obstacles each
    """
    dims = get_jumper_dimensions(footprint)
    bounds = node.bounds.inset(GRID_PADDING)
    cell_size = dims.length + JUMPER_MARGIN
    
    num_cols = max(0, math.floor(bounds.width / cell_size))
    num_rows = max(0, math.floor(bounds.height / cell_size))
    offset_x = (bounds.width - num_cols * cell_size) / 2
    offset_y = (bounds.height - num_rows * cell_size) / 2
    
    clearance = dims.width / 2 + trace_width * 2
    first_vertical = first_orientation == "vertical"
    result = PatternResult()
    
    def overlaps_port_point(start: Point, end: Point) -> bool:
        for pp in node.port_points:
            if pp.position.distance_to(start) < clearance:
                return True
            if pp.position.distance_to(end) < clearance:
                return True
        return False
    
    def fits(start: Point, end: Point) -> bool:
        return (start.x >= bounds.min_x and start.y >= bounds.min_y and
                max(start.x, end.x) <= bounds.max_x and
                max(start.y, end.y) <= bounds.max_y)
    
    for row in range(num_rows):
        for col in range(num_cols):
            cx = bounds.min_x + cell_size / 2 + col * cell_size + offset_x
            cy = bounds.min_y + cell_size / 2 + row * cell_size + offset_y
            
            is_vertical = ((row + col) % 2 == 1) != first_vertical
            if is_vertical:
                start = Point(cx, cy - dims.length / 2)
                end = Point(cx, cy + dims.length / 2)
            else:
                start = Point(cx - dims.length / 2, cy)
                end = Point(cx + dims.length / 2, cy)
            
            if not fits(start, end) or overlaps_port_point(start, end):
                continue
            
            index = len(result.prepattern_jumpers)
            jumper = PrepatternJumper(
                jumper_id=f"jumper_{index}",
                start=start,
                end=end,
                footprint=footprint,
                off_board_connection_id=f"jumper_conn_{index}"
            )
            result.prepattern_jumpers.append(jumper)
            result.jumper_pad_obstacles.extend(_pad_obstacles(jumper))
    
    logger.debug(f"Alternating grid placed {len(result.prepattern_jumpers)} jumpers "
                 f"in {num_cols}x{num_rows} cells for node {node.capacity_mesh_node_id}")
    return result


def _pad_obstacles(jumper: PrepatternJumper) -> List[Obstacle]:
    dims = get_jumper_dimensions(jumper.footprint)
    if jumper.is_horizontal:
        width, height = dims.pad_length, dims.pad_width
    else:
        width, height = dims.pad_width, dims.pad_length
    
    return [
        Obstacle(
            center=center,
            width=width,
            height=height,
            layers=["top"],
            connected_to=[],
            obstacle_id=f"{jumper.jumper_id}_pad_{suffix}",
            off_board_connects_to=[jumper.off_board_connection_id]
        )
        for suffix, center in (("start", jumper.start), ("end", jumper.end))
    ]
