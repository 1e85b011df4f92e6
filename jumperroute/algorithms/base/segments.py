"""Segment geometry primitives.

Functions accept any objects with ``x`` and ``y`` attributes.
"""
import math
from dataclasses import dataclass
from typing import Optional

from ...domain.models.geometry import Point

SEGMENT_EPSILON = 1e-4
COLLINEAR_EPSILON = 1e-6


def direction(a, b, c) -> float:
    """Signed area of the triangle (a, b, c), scaled by two."""
    return (c.x - a.x) * (b.y - a.y) - (b.x - a.x) * (c.y - a.y)


def on_segment(a, b, c, tolerance: float = SEGMENT_EPSILON) -> bool:
    """Check whether c lies in the bounding box of segment ab."""
    return (min(a.x, b.x) - tolerance <= c.x <= max(a.x, b.x) + tolerance and
            min(a.y, b.y) - tolerance <= c.y <= max(a.y, b.y) + tolerance)


def segments_intersect(a1, a2, b1, b2, tolerance: float = SEGMENT_EPSILON) -> bool:
    """Check whether two segments intersect, touching endpoints included."""
    d1 = direction(b1, b2, a1)
    d2 = direction(b1, b2, a2)
    d3 = direction(a1, a2, b1)
    d4 = direction(a1, a2, b2)
    
    if ((d1 > 0 > d2) or (d1 < 0 < d2)) and ((d3 > 0 > d4) or (d3 < 0 < d4)):
        return True
    
    if abs(d1) < tolerance and on_segment(b1, b2, a1, tolerance):
        return True
    if abs(d2) < tolerance and on_segment(b1, b2, a2, tolerance):
        return True
    if abs(d3) < tolerance and on_segment(a1, a2, b1, tolerance):
        return True
    if abs(d4) < tolerance and on_segment(a1, a2, b2, tolerance):
        return True
    
    return False


def segment_interior_intersection(p1, p2, p3, p4, epsilon: float = 1e-6) -> Optional[Point]:
    """Intersection point of two segments, excluding their endpoints.
    
    Returns:
        The intersection, or None for parallel or non-crossing segments
    """
    d1x = p2.x - p1.x
    d1y = p2.y - p1.y
    d2x = p4.x - p3.x
    d2y = p4.y - p3.y
    
    cross = d1x * d2y - d1y * d2x
    if abs(cross) < 1e-10:
        return None
    
    dx = p3.x - p1.x
    dy = p3.y - p1.y
    t = (dx * d2y - dy * d2x) / cross
    u = (dx * d1y - dy * d1x) / cross
    
    if epsilon < t < 1 - epsilon and epsilon < u < 1 - epsilon:
        return Point(p1.x + t * d1x, p1.y + t * d1y)
    return None


def closest_point_on_segment(p, a, b) -> Point:
    dx = b.x - a.x
    dy = b.y - a.y
    len_sq = dx * dx + dy * dy
    if len_sq == 0:
        return Point(a.x, a.y)
    t = max(0.0, min(1.0, ((p.x - a.x) * dx + (p.y - a.y) * dy) / len_sq))
    return Point(a.x + t * dx, a.y + t * dy)


def point_to_segment_distance(p, a, b) -> float:
    closest = closest_point_on_segment(p, a, b)
    return math.hypot(p.x - closest.x, p.y - closest.y)


def are_segments_collinear(a1, a2, b1, b2, epsilon: float = COLLINEAR_EPSILON) -> bool:
    """Check whether both endpoints of b lie on the line through a.
    
    Tolerance scales with the length of a.
    """
    length = math.hypot(a2.x - a1.x, a2.y - a1.y)
    if length == 0:
        return False
    scale = epsilon * max(length, 1.0)
    return abs(direction(a1, a2, b1)) <= scale and abs(direction(a1, a2, b2)) <= scale


@dataclass(frozen=True)
class CollinearOverlap:
    """Which of two overlapping collinear segments encloses the other."""
    outer_segment: int  # 1 or 2
    outer_start: Point
    outer_end: Point
    overlap_length: float


def get_collinear_overlap_info(a1, a2, b1, b2,
                               epsilon: float = COLLINEAR_EPSILON) -> Optional[CollinearOverlap]:
    """Describe the overlap of two collinear segments.
    
    The outer segment is the one containing the other; when neither contains
    the other it is the longer one (the first on ties).
    
    Returns:
        CollinearOverlap, or None when the segments only touch or are disjoint
    """
    len_a = math.hypot(a2.x - a1.x, a2.y - a1.y)
    len_b = math.hypot(b2.x - b1.x, b2.y - b1.y)
    if len_a == 0 or len_b == 0:
        return None
    
    if len_a >= len_b:
        ox, oy, ux, uy = a1.x, a1.y, (a2.x - a1.x) / len_a, (a2.y - a1.y) / len_a
    else:
        ox, oy, ux, uy = b1.x, b1.y, (b2.x - b1.x) / len_b, (b2.y - b1.y) / len_b
    
    def project(p) -> float:
        return (p.x - ox) * ux + (p.y - oy) * uy
    
    a_lo, a_hi = sorted((project(a1), project(a2)))
    b_lo, b_hi = sorted((project(b1), project(b2)))
    
    overlap = min(a_hi, b_hi) - max(a_lo, b_lo)
    if overlap <= epsilon:
        return None
    
    a_contains_b = a_lo <= b_lo + epsilon and b_hi <= a_hi + epsilon
    b_contains_a = b_lo <= a_lo + epsilon and a_hi <= b_hi + epsilon
    
    if a_contains_b:
        outer = 1
    elif b_contains_a:
        outer = 2
    else:
        outer = 1 if len_a >= len_b else 2
    
    if outer == 1:
        return CollinearOverlap(1, Point(a1.x, a1.y), Point(a2.x, a2.y), overlap)
    return CollinearOverlap(2, Point(b1.x, b1.y), Point(b2.x, b2.y), overlap)


def compute_offset_midpoint(start, end, offset_distance: float) -> Point:
    """Midpoint of a segment pushed sideways (to the left of start->end)."""
    mid_x = (start.x + end.x) / 2
    mid_y = (start.y + end.y) / 2
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)
    if length == 0:
        return Point(mid_x, mid_y)
    return Point(mid_x - dy / length * offset_distance,
                 mid_y + dx / length * offset_distance)
