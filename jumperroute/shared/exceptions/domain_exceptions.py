"""Domain-specific exceptions."""
from typing import Tuple

from .base_exceptions import JumperRouteException, RoutingError


def _format_bounds(bounds: Tuple[float, float, float, float]) -> str:
    min_x, min_y, max_x, max_y = bounds
    return f"({min_x:.2f}, {min_y:.2f}, {max_x:.2f}, {max_y:.2f})"


class GeometryBoundsError(JumperRouteException):
    """Raised when a generated jumper grid does not fit inside its node."""
    
    def __init__(self, graph_bounds: Tuple[float, float, float, float],
                 node_bounds: Tuple[float, float, float, float], **kwargs):
        """Initialize bounds error.
        
        Args:
            graph_bounds: (min_x, min_y, max_x, max_y) of the generated graph
            node_bounds: (min_x, min_y, max_x, max_y) of the owning node
        """
        message = (
            f"baseGraph bounds {_format_bounds(graph_bounds)} "
            f"exceed node bounds {_format_bounds(node_bounds)}"
        )
        super().__init__(message, **kwargs)
        self.graph_bounds = graph_bounds
        self.node_bounds = node_bounds


class InsufficientEndpointsError(RoutingError):
    """Raised when a connection resolves to fewer than two terminal nodes."""
    
    def __init__(self, connection_name: str, found: int, **kwargs):
        """Initialize endpoint error.
        
        Args:
            connection_name: Name of the connection
            found: Number of terminal nodes that could be resolved
        """
        message = f'Not enough nodes for connection "{connection_name}", only {found} found'
        super().__init__(message, connection_name=connection_name, **kwargs)
        self.found = found


class SolverFailedError(JumperRouteException):
    """Raised when a caller requires a solved result from a failed solver."""
    
    def __init__(self, message: str, solver_name: str = None, **kwargs):
        """Initialize solver failure.
        
        Args:
            message: The solver's error string, unchanged
            solver_name: Name of the failed solver
        """
        super().__init__(message, **kwargs)
        self.solver_name = solver_name


class NoChannelRegionError(JumperRouteException):
    """Raised when a connection endpoint has no channel region to attach to."""
    
    def __init__(self, point, **kwargs):
        message = f"Graph has no channel regions for endpoint ({point.x:.2f}, {point.y:.2f})"
        super().__init__(message, **kwargs)
        self.point = point
