"""Domain models."""
from .geometry import Point, RoutePoint, Bounds, Segment
from .capacity_mesh import (
    CapacityMeshNode, CapacityMeshEdge, PortPointKind, PortPoint,
    NodeWithPortPoints, InputPortPoint, InputNodeWithPortPoints
)
from .pathing import ConnectionPoint, Connection, PathCandidate, ConnectionPathResult
from .section import SectionPathPoint, SectionPath, PortPointSection
from .jumpers import (
    JumperDimensions, JUMPER_DIMENSIONS, get_jumper_dimensions,
    PrepatternJumper, Jumper, Obstacle, SrjJumper, HighDensityRouteWithJumpers
)

__all__ = [
    'Point', 'RoutePoint', 'Bounds', 'Segment',
    'CapacityMeshNode', 'CapacityMeshEdge', 'PortPointKind', 'PortPoint',
    'NodeWithPortPoints', 'InputPortPoint', 'InputNodeWithPortPoints',
    'ConnectionPoint', 'Connection', 'PathCandidate', 'ConnectionPathResult',
    'SectionPathPoint', 'SectionPath', 'PortPointSection',
    'JumperDimensions', 'JUMPER_DIMENSIONS', 'get_jumper_dimensions',
    'PrepatternJumper', 'Jumper', 'Obstacle', 'SrjJumper', 'HighDensityRouteWithJumpers'
]
