"""Base algorithm infrastructure."""
from .solver import BaseSolver
from .adjacency import AdjacencyIndex
from .segments import (
    direction, on_segment, segments_intersect, segment_interior_intersection,
    closest_point_on_segment, point_to_segment_distance, are_segments_collinear,
    CollinearOverlap, get_collinear_overlap_info, compute_offset_midpoint
)

__all__ = [
    'BaseSolver', 'AdjacencyIndex',
    'direction', 'on_segment', 'segments_intersect', 'segment_interior_intersection',
    'closest_point_on_segment', 'point_to_segment_distance', 'are_segments_collinear',
    'CollinearOverlap', 'get_collinear_overlap_info', 'compute_offset_midpoint'
]
