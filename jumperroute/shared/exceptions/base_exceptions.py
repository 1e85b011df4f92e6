"""Base exceptions for jumperroute."""
from typing import Dict, Optional


class JumperRouteException(Exception):
    """Base exception for errors raised while routing a node or connection.

    The message is what a failed solver reports as its ``error``, so it is
    kept free of decoration. Where the failure belongs to a specific
    capacity mesh node or connection, that is carried separately.
    """

    def __init__(self, message: str, node_id: Optional[str] = None,
                 connection_name: Optional[str] = None):
        """Initialize exception.

        Args:
            message: Human-readable error message
            node_id: Capacity mesh node the failure belongs to
            connection_name: Connection the failure belongs to
        """
        super().__init__(message)
        self.node_id = node_id
        self.connection_name = connection_name

    @property
    def context(self) -> Dict[str, str]:
        """Node and connection the error refers to, where known."""
        context = {}
        if self.node_id is not None:
            context["node"] = self.node_id
        if self.connection_name is not None:
            context["connection"] = self.connection_name
        return context


class ValidationError(JumperRouteException):
    """Raised when an input value is out of range or malformed."""

    def __init__(self, message: str, field: str = None, value=None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class RoutingError(JumperRouteException):
    """Raised when a connection cannot be routed."""

    def __init__(self, message: str, connection_name: str, **kwargs):
        super().__init__(message, connection_name=connection_name, **kwargs)
