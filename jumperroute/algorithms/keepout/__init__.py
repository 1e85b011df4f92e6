"""Keepout-constrained drawing helpers."""
from .draw_position import (
    ClearanceSample, DrawPositionSolver, min_clearances, is_path_clear,
    compute_draw_position_from_collisions
)
from .outline import (
    obstacle_to_segments, trace_segment_to_outline_segments, route_to_outline_segments,
    segment_is_near_point, route_to_outline_segments_near_point
)
from .self_intersections import remove_self_intersections

__all__ = [
    'ClearanceSample', 'DrawPositionSolver', 'min_clearances', 'is_path_clear',
    'compute_draw_position_from_collisions',
    'obstacle_to_segments', 'trace_segment_to_outline_segments', 'route_to_outline_segments',
    'segment_is_near_point', 'route_to_outline_segments_near_point',
    'remove_self_intersections'
]
