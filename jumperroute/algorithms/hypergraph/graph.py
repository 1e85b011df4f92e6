"""Region/port hypergraph used by the jumper router.

Regions are rectangles a trace may cross; ports are points on the shared
boundary of exactly two regions. A route is a sequence of ports.
"""
import copy
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ...domain.models.geometry import Bounds, Point
from ...shared.exceptions import NoChannelRegionError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class JRegion:
    """A routable region of the jumper graph."""
    region_id: str
    bounds: Bounds
    is_pad: bool = False
    is_through_jumper: bool = False
    is_under_jumper: bool = False
    is_connection_region: bool = False
    ports: List['JPort'] = field(default_factory=list, repr=False)
    
    @property
    def center(self) -> Point:
        return self.bounds.center
    
    @property
    def is_channel(self) -> bool:
        return not (self.is_pad or self.is_through_jumper or
                    self.is_under_jumper or self.is_connection_region)


@dataclass(eq=False)
class JPort:
    """A crossing point between two regions."""
    port_id: str
    position: Point
    region1: JRegion = field(repr=False)
    region2: JRegion = field(repr=False)
    
    def other_region(self, region: JRegion) -> JRegion:
        return self.region2 if region is self.region1 else self.region1


@dataclass
class JumperLocation:
    """One jumper pair of a generated grid."""
    center: Point
    orientation: str
    pad_regions: List[JRegion] = field(default_factory=list)


@dataclass
class JumperGraph:
    """Regions, ports and physical jumper positions."""
    regions: List[JRegion] = field(default_factory=list)
    ports: List[JPort] = field(default_factory=list)
    jumper_locations: List[JumperLocation] = field(default_factory=list)
    
    def add_region(self, region: JRegion) -> JRegion:
        self.regions.append(region)
        return region
    
    def add_port(self, position: Point, region1: JRegion, region2: JRegion) -> JPort:
        port = JPort(f"port{len(self.ports)}", position, region1, region2)
        region1.ports.append(port)
        region2.ports.append(port)
        self.ports.append(port)
        return port
    
    def get_bounds(self) -> Optional[Bounds]:
        """Bounding box of all regions, None for an empty graph."""
        if not self.regions:
            return None
        return Bounds.union(region.bounds for region in self.regions)


@dataclass(frozen=True)
class XYConnection:
    """A two-point connection in node coordinates."""
    connection_id: str
    start: Point
    end: Point


@dataclass
class GraphConnection:
    """A connection attached to the graph through terminal regions."""
    connection_id: str
    start_region: JRegion
    end_region: JRegion


@dataclass
class GraphWithConnections:
    """A jumper graph extended with one terminal region per endpoint."""
    regions: List[JRegion]
    ports: List[JPort]
    connections: List[GraphConnection]
    jumper_locations: List[JumperLocation] = field(default_factory=list)


def _distance_to_bounds(point: Point, bounds: Bounds) -> float:
    dx = max(bounds.min_x - point.x, 0.0, point.x - bounds.max_x)
    dy = max(bounds.min_y - point.y, 0.0, point.y - bounds.max_y)
    return math.hypot(dx, dy)


def find_channel_region(regions: Sequence[JRegion], point: Point,
                        connection_name: Optional[str] = None) -> JRegion:
    """Channel region containing a point, or the nearest one.
    
    Raises:
        NoChannelRegionError: If the graph has no channel regions
    """
    channels = [region for region in regions if region.is_channel]
    if not channels:
        raise NoChannelRegionError(point, connection_name=connection_name)
    
    for region in channels:
        if region.bounds.contains(point, tolerance=1e-9):
            return region
    return min(channels, key=lambda region: _distance_to_bounds(point, region.bounds))


def create_graph_with_connections(base_graph: JumperGraph,
                                  xy_connections: Sequence[XYConnection]) -> GraphWithConnections:
    """Attach connection endpoints to a copy of the base graph.
    
    Each endpoint gets a zero-size terminal region joined by a single port to
    the channel region containing it. The base graph is not modified.
    """
    graph = copy.deepcopy(base_graph)
    connections: List[GraphConnection] = []
    
    for xy in xy_connections:
        terminals = []
        for suffix, point in (("start", xy.start), ("end", xy.end)):
            channel = find_channel_region(graph.regions, point, xy.connection_id)
            terminal = graph.add_region(JRegion(
                region_id=f"{xy.connection_id}_{suffix}",
                bounds=Bounds(point.x, point.y, point.x, point.y),
                is_connection_region=True
            ))
            graph.add_port(point, terminal, channel)
            terminals.append(terminal)
        connections.append(GraphConnection(xy.connection_id, terminals[0], terminals[1]))
    
    return GraphWithConnections(
        regions=graph.regions,
        ports=graph.ports,
        connections=connections,
        jumper_locations=graph.jumper_locations
    )
