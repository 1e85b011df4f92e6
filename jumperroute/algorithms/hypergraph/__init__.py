"""Hypergraph jumper routing."""
from .graph import (
    JRegion, JPort, JumperLocation, JumperGraph, XYConnection, GraphConnection,
    GraphWithConnections, find_channel_region, create_graph_with_connections
)
from .jumper_grid import (
    PATTERN_SIZES, get_pattern_size, array_size, minimum_grid_size, generate_jumper_x4_grid
)
from .graph_solver import PathStep, SolvedRoute, HyperGraphPathSolver
from .route_geometry import (
    create_region_offset_points, RouteSegment, collect_route_segments,
    add_midpoints_for_collinear_overlaps
)
from .jumper_router import HyperGraphJumperRouter

__all__ = [
    'JRegion', 'JPort', 'JumperLocation', 'JumperGraph', 'XYConnection', 'GraphConnection',
    'GraphWithConnections', 'find_channel_region', 'create_graph_with_connections',
    'PATTERN_SIZES', 'get_pattern_size', 'array_size', 'minimum_grid_size',
    'generate_jumper_x4_grid',
    'PathStep', 'SolvedRoute', 'HyperGraphPathSolver',
    'create_region_offset_points', 'RouteSegment', 'collect_route_segments',
    'add_midpoints_for_collinear_overlaps',
    'HyperGraphJumperRouter'
]
