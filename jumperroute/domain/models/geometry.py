"""Geometric value objects shared across the routing core."""
import math
from dataclasses import dataclass
from typing import Iterable, Tuple


@dataclass(frozen=True)
class Point:
    """Value object representing a 2D coordinate in mm."""
    x: float
    y: float
    
    def distance_to(self, other: 'Point') -> float:
        """Calculate Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)
    
    def midpoint(self, other: 'Point') -> 'Point':
        return Point((self.x + other.x) / 2, (self.y + other.y) / 2)
    
    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class RoutePoint:
    """A point of a routed trace, on layer ``z``."""
    x: float
    y: float
    z: int = 0
    inside_jumper_pad: bool = False
    
    def to_point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class Bounds:
    """Value object representing rectangular bounds."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float
    
    @classmethod
    def from_center(cls, center: Point, width: float, height: float) -> 'Bounds':
        """Create bounds of the given size around a center point."""
        return cls(
            min_x=center.x - width / 2,
            min_y=center.y - height / 2,
            max_x=center.x + width / 2,
            max_y=center.y + height / 2
        )
    
    @classmethod
    def union(cls, bounds: Iterable['Bounds']) -> 'Bounds':
        """Smallest bounds containing every given bounds.
        
        Raises:
            ValueError: If no bounds are given
        """
        items = list(bounds)
        if not items:
            raise ValueError("Cannot compute union of empty bounds")
        return cls(
            min_x=min(b.min_x for b in items),
            min_y=min(b.min_y for b in items),
            max_x=max(b.max_x for b in items),
            max_y=max(b.max_y for b in items)
        )
    
    @property
    def width(self) -> float:
        return self.max_x - self.min_x
    
    @property
    def height(self) -> float:
        return self.max_y - self.min_y
    
    @property
    def center(self) -> Point:
        return Point(
            x=(self.min_x + self.max_x) / 2,
            y=(self.min_y + self.max_y) / 2
        )
    
    def contains(self, point: Point, tolerance: float = 0.0) -> bool:
        """Check if a point lies inside the bounds (edges included)."""
        return (self.min_x - tolerance <= point.x <= self.max_x + tolerance and
                self.min_y - tolerance <= point.y <= self.max_y + tolerance)
    
    def contains_bounds(self, other: 'Bounds', tolerance: float = 0.0) -> bool:
        """Check if other bounds fit inside these bounds within a tolerance."""
        return (other.min_x >= self.min_x - tolerance and
                other.max_x <= self.max_x + tolerance and
                other.min_y >= self.min_y - tolerance and
                other.max_y <= self.max_y + tolerance)
    
    def inset(self, padding: float) -> 'Bounds':
        return Bounds(self.min_x + padding, self.min_y + padding,
                      self.max_x - padding, self.max_y - padding)
    
    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)


@dataclass(frozen=True)
class Segment:
    """A straight line segment between two points."""
    start: Point
    end: Point
    
    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)
    
    @property
    def midpoint(self) -> Point:
        return self.start.midpoint(self.end)
