"""Jumper placement and classification."""
from .necessity import (
    JumperGeometry, JumperUsage, route_intersects_line, build_jumper_geometry,
    classify_jumper_usage, reposition_jumper_port_points
)
from .alternating_grid import PatternResult, alternating_grid

__all__ = [
    'JumperGeometry', 'JumperUsage', 'route_intersects_line', 'build_jumper_geometry',
    'classify_jumper_usage', 'reposition_jumper_port_points',
    'PatternResult', 'alternating_grid'
]
