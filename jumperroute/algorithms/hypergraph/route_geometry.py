"""Geometry post-processing for routes produced on the jumper graph."""
import itertools
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Sequence

from ...domain.models.geometry import Point, RoutePoint
from ...domain.models.jumpers import HighDensityRouteWithJumpers
from ..base.segments import (
    are_segments_collinear, compute_offset_midpoint, get_collinear_overlap_info,
    segment_interior_intersection, segments_intersect
)

logger = logging.getLogger(__name__)


def create_region_offset_points(port_position: Point, last_region_center: Point,
                                next_region_center: Point, inside_jumper_pad: bool,
                                offset_distance: float) -> List[RoutePoint]:
    """Two points just inside the regions on either side of a port.
    
    The first point lies toward the region the route comes from, the second
    toward the region it enters. When a region center coincides with the port
    the port position itself is used instead.
    """
    points: List[RoutePoint] = []
    for center in (last_region_center, next_region_center):
        dx = center.x - port_position.x
        dy = center.y - port_position.y
        length = math.hypot(dx, dy)
        if length > 1e-9:
            x = port_position.x + dx / length * offset_distance
            y = port_position.y + dy / length * offset_distance
        else:
            x, y = port_position.x, port_position.y
        
        point = RoutePoint(x=x, y=y, z=0, inside_jumper_pad=inside_jumper_pad)
        if not points or (points[-1].x, points[-1].y) != (x, y):
            points.append(point)
    return points


@dataclass(frozen=True)
class RouteSegment:
    """One segment of a route, addressed by route and segment index."""
    route_index: int
    segment_index: int
    start: Point
    end: Point
    is_inside_jumper_pad: bool
    
    def is_adjacent_to(self, other: 'RouteSegment') -> bool:
        return (self.route_index == other.route_index and
                abs(self.segment_index - other.segment_index) <= 1)


def collect_route_segments(routes: Sequence[HighDensityRouteWithJumpers]) -> List[RouteSegment]:
    segments: List[RouteSegment] = []
    for route_index, route in enumerate(routes):
        for i in range(len(route.route) - 1):
            p1 = route.route[i]
            p2 = route.route[i + 1]
            segments.append(RouteSegment(
                route_index=route_index,
                segment_index=i,
                start=p1.to_point(),
                end=p2.to_point(),
                is_inside_jumper_pad=p1.inside_jumper_pad and p2.inside_jumper_pad
            ))
    return segments


def add_midpoints_for_collinear_overlaps(routes: Sequence[HighDensityRouteWithJumpers],
                                         offset_distance: float = 0.5) -> int:
    """Bend the outer segment of every collinear overlapping pair.
    
    For each pair of overlapping collinear segments (including non-adjacent
    segments of the same route) an offset midpoint is inserted into the
    segment that contains the other. A midpoint is skipped when the outer
    segment lies inside jumper pads, or when either new segment would touch
    any other segment, including new segments accepted earlier in the pass.
    Neighbouring segments of the same route, and their bends, may only meet
    the new segments at the vertex they share.
    
    Routes are modified in place.
    
    Returns:
        Number of midpoints inserted
    """
    segments = collect_route_segments(routes)
    insertions: Dict[int, Dict[int, Point]] = {}
    accepted: List[RouteSegment] = []
    
    for i, first in enumerate(segments):
        for second in segments[i + 1:]:
            if first.is_adjacent_to(second):
                continue
            if not are_segments_collinear(first.start, first.end, second.start, second.end):
                continue
            
            overlap = get_collinear_overlap_info(first.start, first.end, second.start, second.end)
            if overlap is None:
                continue
            
            outer = first if overlap.outer_segment == 1 else second
            if outer.is_inside_jumper_pad:
                continue
            if outer.segment_index in insertions.get(outer.route_index, {}):
                continue
            
            midpoint = compute_offset_midpoint(overlap.outer_start, overlap.outer_end, offset_distance)
            new_segments = ((overlap.outer_start, midpoint), (midpoint, overlap.outer_end))
            
            if _would_intersect(outer, new_segments, segments, accepted):
                continue
            
            insertions.setdefault(outer.route_index, {})[outer.segment_index] = midpoint
            for start, end in new_segments:
                accepted.append(RouteSegment(outer.route_index, outer.segment_index,
                                             start, end, False))
    
    inserted = 0
    for route_index, route_insertions in insertions.items():
        route = routes[route_index].route
        for segment_index in sorted(route_insertions, reverse=True):
            midpoint = route_insertions[segment_index]
            route.insert(segment_index + 1, RoutePoint(midpoint.x, midpoint.y, 0))
            inserted += 1
    
    if inserted:
        logger.debug(f"Inserted {inserted} offset midpoints for collinear overlaps")
    return inserted


def _crosses_neighbour(start: Point, end: Point, other: RouteSegment) -> bool:
    """Crossing or overlap with a segment sharing a route vertex, apart from that vertex."""
    if segment_interior_intersection(start, end, other.start, other.end) is not None:
        return True
    return (are_segments_collinear(start, end, other.start, other.end) and
            get_collinear_overlap_info(start, end, other.start, other.end) is not None)


def _would_intersect(outer: RouteSegment, new_segments, segments: Sequence[RouteSegment],
                     accepted: Sequence[RouteSegment]) -> bool:
    for other in itertools.chain(segments, accepted):
        if other.route_index == outer.route_index and other.segment_index == outer.segment_index:
            continue
        # Neighbours (including their accepted bends) meet the new bend at a shared vertex
        adjacent = other.is_adjacent_to(outer)
        for start, end in new_segments:
            if adjacent:
                if _crosses_neighbour(start, end, other):
                    return True
            elif segments_intersect(start, end, other.start, other.end):
                return True
    
    return False
