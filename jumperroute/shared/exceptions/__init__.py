"""Shared exceptions for jumperroute."""
from .base_exceptions import JumperRouteException, ValidationError, RoutingError
from .domain_exceptions import (
    GeometryBoundsError, InsufficientEndpointsError, NoChannelRegionError, SolverFailedError
)

__all__ = [
    'JumperRouteException', 'ValidationError', 'RoutingError',
    'GeometryBoundsError', 'InsufficientEndpointsError', 'NoChannelRegionError',
    'SolverFailedError'
]
