"""Keepout-constrained correction of an interactively drawn trace point.

The corrected position lies on the barrier line: the line through the cursor
perpendicular to the drawing direction.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ...domain.models.geometry import Point, Segment
from ...shared.configuration.settings import KeepoutSettings
from ..base.segments import segments_intersect
from ...shared.utils.validation_utils import validate_non_negative_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClearanceSample:
    """Clearance at one position on the barrier line."""
    position: Point
    clearance: float
    offset_index: int
    path_clear: bool


def min_clearances(points: np.ndarray, segments: Sequence[Segment]) -> np.ndarray:
    """Distance from each point to the nearest segment.
    
    Args:
        points: Array of shape (n, 2)
        segments: Segments to measure against
        
    Returns:
        Array of shape (n,)
    """
    starts = np.array([[s.start.x, s.start.y] for s in segments], dtype=float)
    ends = np.array([[s.end.x, s.end.y] for s in segments], dtype=float)
    deltas = ends - starts
    len_sq = np.einsum('ij,ij->i', deltas, deltas)
    
    # (n points, m segments, 2)
    rel = points[:, None, :] - starts[None, :, :]
    safe_len_sq = np.where(len_sq == 0, 1.0, len_sq)
    t = np.einsum('nmk,mk->nm', rel, deltas) / safe_len_sq
    t = np.where(len_sq == 0, 0.0, np.clip(t, 0.0, 1.0))
    closest = starts[None, :, :] + t[:, :, None] * deltas[None, :, :]
    distances = np.linalg.norm(points[:, None, :] - closest, axis=2)
    return distances.min(axis=1)


def is_path_clear(start: Point, end: Point, segments: Sequence[Segment]) -> bool:
    """Check that the straight path between two points touches no segment."""
    return not any(segments_intersect(start, end, s.start, s.end) for s in segments)


class DrawPositionSolver:
    """Finds the nearest position on the barrier line that clears all segments."""
    
    def __init__(self, settings: Optional[KeepoutSettings] = None):
        self.settings = settings or KeepoutSettings()
    
    def compute(self, cursor: Point, last_cursor: Point,
                colliding_segments: Sequence[Segment],
                keepout_radius: float) -> Optional[Point]:
        """Compute the corrected draw position.
        
        Args:
            cursor: Current cursor position
            last_cursor: Previous cursor position, gives the drawing direction
            colliding_segments: Obstacle edges and trace outlines nearby
            keepout_radius: Required clearance, also the search distance
            
        Returns:
            Corrected position, or None when the cursor needs no correction
        """
        validate_non_negative_number(keepout_radius, "keepout_radius")
        if not colliding_segments:
            return None
        
        eps = self.settings.epsilon
        dx = cursor.x - last_cursor.x
        dy = cursor.y - last_cursor.y
        length = math.hypot(dx, dy)
        trace_dir = (dx / length, dy / length) if length > eps else (1.0, 0.0)
        barrier_dir = (-trace_dir[1], trace_dir[0])
        
        def along_barrier(distance: float) -> Point:
            return Point(cursor.x + barrier_dir[0] * distance,
                         cursor.y + barrier_dir[1] * distance)
        
        cursor_clearance = float(min_clearances(np.array([[cursor.x, cursor.y]]),
                                                colliding_segments)[0])
        if cursor_clearance >= keepout_radius:
            return None
        
        found = self._search_valid_position(cursor, along_barrier, colliding_segments,
                                            keepout_radius)
        if found is not None:
            return found
        
        samples = self._sample_barrier(cursor, along_barrier, colliding_segments,
                                       keepout_radius)
        best = self._choose_sample(samples, cursor_clearance, keepout_radius)
        
        if best.position.distance_to(cursor) > eps:
            return best.position
        return None
    
    def _search_valid_position(self, cursor: Point, along_barrier, segments: Sequence[Segment],
                               keepout_radius: float) -> Optional[Point]:
        """Closest position in either direction that clears the radius."""
        steps = self.settings.search_steps
        for i in range(1, steps + 1):
            distance = i / steps * keepout_radius
            plus = along_barrier(distance)
            minus = along_barrier(-distance)
            clearance_plus, clearance_minus = min_clearances(
                np.array([[plus.x, plus.y], [minus.x, minus.y]]), segments
            )
            
            valid_plus = clearance_plus >= keepout_radius and is_path_clear(cursor, plus, segments)
            valid_minus = clearance_minus >= keepout_radius and is_path_clear(cursor, minus, segments)
            
            if valid_plus and valid_minus:
                return plus if clearance_plus >= clearance_minus else minus
            if valid_plus:
                return plus
            if valid_minus:
                return minus
        return None
    
    def _sample_barrier(self, cursor: Point, along_barrier, segments: Sequence[Segment],
                        keepout_radius: float) -> List[ClearanceSample]:
        steps = self.settings.extended_search_steps
        search_range = keepout_radius * self.settings.extended_range_factor
        
        offsets = range(-steps, steps + 1)
        positions = [along_barrier(i / steps * search_range) for i in offsets]
        clearances = min_clearances(np.array([[p.x, p.y] for p in positions]), segments)
        
        return [
            ClearanceSample(
                position=position,
                clearance=float(clearance),
                offset_index=i,
                path_clear=is_path_clear(cursor, position, segments)
            )
            for i, position, clearance in zip(offsets, positions, clearances)
        ]
    
    def _choose_sample(self, samples: List[ClearanceSample], cursor_clearance: float,
                       keepout_radius: float) -> ClearanceSample:
        reachable = [s for s in samples if s.path_clear]
        center = next(s for s in samples if s.offset_index == 0)
        
        candidates: List[ClearanceSample] = []
        seen = set()
        for candidate in (*_first_local_maxima(samples), *_first_local_maxima(reachable), center):
            if candidate is None:
                continue
            key = (f"{candidate.position.x:.6f}", f"{candidate.position.y:.6f}")
            if key not in seen:
                seen.add(key)
                candidates.append(candidate)
        
        if not candidates:
            return _best_clearance(samples)
        
        trapped = cursor_clearance < keepout_radius * self.settings.trapped_clearance_ratio
        if trapped:
            return _best_clearance(candidates)
        
        reachable_candidates = [c for c in candidates if c.path_clear]
        return _best_clearance(reachable_candidates or candidates)


def _best_clearance(samples: Sequence[ClearanceSample]) -> ClearanceSample:
    """First sample with the highest clearance."""
    best = samples[0]
    for sample in samples:
        if sample.clearance > best.clearance:
            best = sample
    return best


def _first_local_maxima(samples: Sequence[ClearanceSample]):
    """Closest local clearance maximum on each side of the center sample.
    
    Returns:
        Tuple ``(positive_side, negative_side)``, either may be None
    """
    if not samples:
        return None, None
    
    center_index = next((i for i, s in enumerate(samples) if s.offset_index == 0),
                        len(samples) // 2)
    
    def is_local_max(i: int) -> bool:
        return (samples[i].clearance >= samples[i - 1].clearance and
                samples[i].clearance >= samples[i + 1].clearance)
    
    positive = next((samples[i] for i in range(center_index + 1, len(samples) - 1)
                     if is_local_max(i)), None)
    negative = next((samples[i] for i in range(center_index - 1, 0, -1)
                     if is_local_max(i)), None)
    return positive, negative


def compute_draw_position_from_collisions(cursor: Point, last_cursor: Point,
                                          colliding_segments: Sequence[Segment],
                                          keepout_radius: float,
                                          settings: Optional[KeepoutSettings] = None) -> Optional[Point]:
    """Convenience wrapper around :class:`DrawPositionSolver`."""
    return DrawPositionSolver(settings).compute(cursor, last_cursor, colliding_segments,
                                                keepout_radius)
