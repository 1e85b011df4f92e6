"""Conversion of obstacles and traces to outline segments."""
import math
from typing import List, Sequence

from ...domain.models.geometry import Point, Segment
from ..base.segments import point_to_segment_distance


def obstacle_to_segments(center: Point, width: float, height: float) -> List[Segment]:
    """The four edges of a rectangle, clockwise from the top-left corner."""
    half_w = width / 2
    half_h = height / 2
    top_left = Point(center.x - half_w, center.y + half_h)
    top_right = Point(center.x + half_w, center.y + half_h)
    bottom_right = Point(center.x + half_w, center.y - half_h)
    bottom_left = Point(center.x - half_w, center.y - half_h)
    
    return [
        Segment(top_left, top_right),
        Segment(top_right, bottom_right),
        Segment(bottom_right, bottom_left),
        Segment(bottom_left, top_left),
    ]


def trace_segment_to_outline_segments(start, end, trace_width: float = 0.1) -> List[Segment]:
    """Left and right edges of a trace segment; empty for zero length."""
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)
    if length == 0:
        return []
    
    px = -dy / length * trace_width / 2
    py = dx / length * trace_width / 2
    return [
        Segment(Point(start.x + px, start.y + py), Point(end.x + px, end.y + py)),
        Segment(Point(start.x - px, start.y - py), Point(end.x - px, end.y - py)),
    ]


def route_to_outline_segments(route: Sequence, trace_width: float = 0.1) -> List[Segment]:
    segments: List[Segment] = []
    for start, end in zip(route, route[1:]):
        segments.extend(trace_segment_to_outline_segments(start, end, trace_width))
    return segments


def segment_is_near_point(start, end, point, radius: float) -> bool:
    if math.hypot(start.x - point.x, start.y - point.y) <= radius:
        return True
    if math.hypot(end.x - point.x, end.y - point.y) <= radius:
        return True
    if start.x == end.x and start.y == end.y:
        return False
    return point_to_segment_distance(point, start, end) <= radius


def route_to_outline_segments_near_point(route: Sequence, trace_width: float, point,
                                         search_radius: float) -> List[Segment]:
    """Outline segments of the route parts within ``search_radius`` of a point."""
    segments: List[Segment] = []
    for start, end in zip(route, route[1:]):
        if segment_is_near_point(start, end, point, search_radius + trace_width):
            segments.extend(trace_segment_to_outline_segments(start, end, trace_width))
    return segments
