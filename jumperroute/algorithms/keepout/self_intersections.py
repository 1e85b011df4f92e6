"""Removal of loops where a route crosses itself."""
import logging
from typing import List, Sequence

from ...domain.models.geometry import RoutePoint
from ..base.segments import segment_interior_intersection

logger = logging.getLogger(__name__)


def remove_self_intersections(route: Sequence[RoutePoint]) -> List[RoutePoint]:
    """Shortcut every same-layer crossing of a route with itself.
    
    The loop between two crossing segments is replaced by the crossing point.
    Segments changing layer are ignored. Repeats until no crossing is left.
    """
    result = list(route)
    if len(result) < 4:
        return result
    
    removed = 0
    found = True
    while found:
        found = False
        for i in range(len(result) - 1):
            a1, a2 = result[i], result[i + 1]
            if a1.z != a2.z:
                continue
            
            for j in range(i + 2, len(result) - 1):
                b1, b2 = result[j], result[j + 1]
                if b1.z != b2.z or b1.z != a1.z:
                    continue
                
                crossing = segment_interior_intersection(a1, a2, b1, b2)
                if crossing is None:
                    continue
                
                result = (result[:i + 1] +
                          [RoutePoint(crossing.x, crossing.y, a1.z)] +
                          result[j + 1:])
                removed += 1
                found = True
                break
            if found:
                break
    
    if removed:
        logger.debug(f"Removed {removed} self-intersections")
    return result
