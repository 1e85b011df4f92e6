"""Routing of a congested node through a tiled grid of jumper arrays."""
from typing import Dict, List, Optional

from ...domain.models.capacity_mesh import NodeWithPortPoints, PortPoint
from ...domain.models.geometry import Bounds, Point, RoutePoint
from ...domain.models.jumpers import (
    HighDensityRouteWithJumpers, Jumper, Obstacle, SrjJumper, get_jumper_dimensions
)
from ...shared.configuration.settings import HyperGraphSettings
from ...shared.exceptions import GeometryBoundsError
from ...shared.utils.validation_utils import validate_positive_number
from ..base.solver import BaseSolver
from .graph import JumperGraph, JumperLocation, XYConnection, create_graph_with_connections
from .graph_solver import HyperGraphPathSolver, SolvedRoute
from .jumper_grid import generate_jumper_x4_grid, get_pattern_size
from .route_geometry import add_midpoints_for_collinear_overlaps, create_region_offset_points

JUMPER_FOOTPRINT = "1206x4_pair"


class HyperGraphJumperRouter(BaseSolver):
    """Routes all connections of a node through a generated jumper grid.
    
    The first step generates the grid and checks that it fits the node; the
    following steps advance the inner path solver. Once it is solved the
    routes are converted to node coordinates and collinear overlaps are
    repaired.
    """
    
    def __init__(self, node_with_port_points: NodeWithPortPoints,
                 trace_width: Optional[float] = None,
                 settings: Optional[HyperGraphSettings] = None):
        """Initialize router.
        
        Args:
            node_with_port_points: Node to route and its port points
            trace_width: Trace thickness of the produced routes
            settings: Router settings, defaults when None
        """
        self.settings = settings or HyperGraphSettings()
        super().__init__(max_iterations=self.settings.max_iterations)
        
        self.node_with_port_points = node_with_port_points
        self.trace_width = trace_width if trace_width is not None else self.settings.trace_width
        validate_positive_number(self.trace_width, "trace_width")
        self.cols, self.rows = get_pattern_size(self.settings.pattern_type)
        self.orientation = self.settings.orientation
        
        self.node_bounds: Bounds = node_with_port_points.bounds
        self.base_graph: Optional[JumperGraph] = None
        self.jumper_locations: List[JumperLocation] = []
        self.xy_connections: List[XYConnection] = []
        self.path_solver: Optional[HyperGraphPathSolver] = None
        
        self.solved_routes: List[HighDensityRouteWithJumpers] = []
        self.jumpers: List[SrjJumper] = []
        self.log = self.log.bind(node=node_with_port_points.capacity_mesh_node_id)
    
    def _generate_base_graph(self) -> JumperGraph:
        margin_x = max(1.2, self.cols * 0.3)
        margin_y = max(1.2, self.rows * 0.3)
        point_count = self.settings.channel_point_count
        
        return generate_jumper_x4_grid(
            cols=self.cols,
            rows=self.rows,
            margin_x=margin_x,
            margin_y=margin_y,
            outer_padding_x=self.settings.outer_padding,
            outer_padding_y=self.settings.outer_padding,
            parallel_traces_under_jumper_count=self.settings.parallel_traces_under_jumper_count,
            inner_col_channel_point_count=point_count,
            inner_row_channel_point_count=point_count,
            outer_channel_x_point_count=point_count,
            outer_channel_y_point_count=point_count,
            regions_between_pads=self.settings.regions_between_pads,
            orientation=self.orientation,
            bounds=self.node_bounds
        )
    
    def _build_xy_connections(self) -> List[XYConnection]:
        grouped: Dict[str, List[PortPoint]] = {}
        for pp in self.node_with_port_points.port_points:
            grouped.setdefault(pp.connection_name, []).append(pp)
        
        return [
            XYConnection(name, points[0].position, points[1].position)
            for name, points in grouped.items()
            if len(points) >= 2
        ]
    
    def _initialize_graph(self):
        """Generate the grid, check its bounds and set up the path solver.
        
        Raises:
            GeometryBoundsError: If the generated grid does not fit the node
        """
        self.base_graph = self._generate_base_graph()
        
        graph_bounds = self.base_graph.get_bounds()
        if graph_bounds is not None and not self.node_bounds.contains_bounds(
                graph_bounds, tolerance=self.settings.bounds_tolerance):
            raise GeometryBoundsError(
                graph_bounds.as_tuple(), self.node_bounds.as_tuple(),
                node_id=self.node_with_port_points.capacity_mesh_node_id
            )
        
        self.jumper_locations = list(self.base_graph.jumper_locations)
        self.xy_connections = self._build_xy_connections()
        
        if not self.xy_connections:
            self.log.info("No connections with two port points, nothing to route")
            self.solved = True
            return
        
        graph = create_graph_with_connections(self.base_graph, self.xy_connections)
        self.path_solver = HyperGraphPathSolver(
            regions=graph.regions,
            ports=graph.ports,
            connections=graph.connections
        )
        self.path_solver.max_iterations *= self.settings.path_solver_iteration_multiplier
        self.log.debug(f"Routing {len(self.xy_connections)} connections through a "
                       f"{self.cols}x{self.rows} grid")
    
    def _step(self):
        if self.base_graph is None:
            self._initialize_graph()
            return
        
        self.path_solver.step()
        
        if self.path_solver.solved:
            self._process_results()
            add_midpoints_for_collinear_overlaps(
                self.solved_routes, self.settings.collinear_offset_distance
            )
            self.solved = True
        elif self.path_solver.failed:
            self.failure_context = {"node": self.node_with_port_points.capacity_mesh_node_id,
                                    **self.path_solver.failure_context}
            self.fail(self.path_solver.error)
    
    def _root_connection_name(self, connection_name: str) -> Optional[str]:
        for pp in self.node_with_port_points.port_points:
            if pp.connection_name == connection_name:
                return pp.root_connection_name
        return None
    
    def _process_results(self):
        offset = self.settings.offset_point_inside_region
        used_through_jumpers = set()
        
        for solved_route in self.path_solver.solved_routes:
            self.solved_routes.append(
                self._convert_route(solved_route, offset, used_through_jumpers)
            )
    
    def _convert_route(self, solved_route: SolvedRoute, offset: float,
                       used_through_jumpers: set) -> HighDensityRouteWithJumpers:
        route_points: List[RoutePoint] = []
        jumpers: List[Jumper] = []
        
        for step in solved_route.path:
            last_region = step.last_region
            next_region = step.next_region
            
            for point in create_region_offset_points(
                    step.port.position, last_region.center, next_region.center,
                    inside_jumper_pad=last_region.is_pad or next_region.is_pad,
                    offset_distance=offset):
                if route_points and (route_points[-1].x, route_points[-1].y) == (point.x, point.y):
                    continue
                route_points.append(point)
            
            if last_region.is_through_jumper and last_region.region_id not in used_through_jumpers:
                used_through_jumpers.add(last_region.region_id)
                jumpers.append(_jumper_from_region_bounds(last_region.bounds))
        
        connection_name = solved_route.connection.connection_id
        return HighDensityRouteWithJumpers(
            connection_name=connection_name,
            root_connection_name=self._root_connection_name(connection_name),
            trace_thickness=self.trace_width,
            route=route_points,
            jumpers=jumpers
        )
    
    def get_output(self) -> List[HighDensityRouteWithJumpers]:
        return self.solved_routes
    
    def get_output_jumpers(self) -> List[SrjJumper]:
        """Jumpers of the grid that some route uses.
        
        Each pad lists the connections (root name first) whose route jumper
        starts or ends at the pad center. Only meaningful once solved.
        """
        if self.jumpers:
            return self.jumpers
        
        pad_usage: Dict[str, List[str]] = {}
        for route in self.solved_routes:
            for jumper in route.jumpers:
                for position in (jumper.start, jumper.end):
                    connected_to = pad_usage.setdefault(_pad_key(position), [])
                    for name in (route.root_connection_name, route.connection_name):
                        if name and name not in connected_to:
                            connected_to.append(name)
        
        dims = get_jumper_dimensions(JUMPER_FOOTPRINT)
        jumpers = []
        for location in self.jumper_locations:
            is_horizontal = location.orientation == "horizontal"
            pads = [
                Obstacle(
                    center=pad.center,
                    width=pad.bounds.width,
                    height=pad.bounds.height,
                    layers=["top"],
                    connected_to=list(pad_usage.get(_pad_key(pad.center), []))
                )
                for pad in location.pad_regions
            ]
            jumpers.append(SrjJumper(
                center=location.center,
                orientation=location.orientation,
                width=dims.length if is_horizontal else dims.width,
                height=dims.width if is_horizontal else dims.length,
                pads=pads
            ))
        
        self.jumpers = [jumper for jumper in jumpers if jumper.is_used]
        return self.jumpers


def _pad_key(position: Point) -> str:
    return f"{position.x:.3f},{position.y:.3f}"


def _jumper_from_region_bounds(bounds: Bounds) -> Jumper:
    center = bounds.center
    if bounds.width > bounds.height:
        return Jumper(start=Point(bounds.min_x, center.y), end=Point(bounds.max_x, center.y),
                      footprint=JUMPER_FOOTPRINT)
    return Jumper(start=Point(center.x, bounds.min_y), end=Point(center.x, bounds.max_y),
                  footprint=JUMPER_FOOTPRINT)
