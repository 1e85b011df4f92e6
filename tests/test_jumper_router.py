"""Tests for routing a node through a jumper grid."""
import pytest

from conftest import make_node
from jumperroute.algorithms.hypergraph.jumper_router import HyperGraphJumperRouter
from jumperroute.domain.models import PortPoint
from jumperroute.shared.configuration import HyperGraphSettings
from jumperroute.shared.exceptions import SolverFailedError, ValidationError


def crossing_node(width=12.0, height=12.0):
    """Node whose two connections must cross."""
    return make_node("congested", width / 2, height / 2, width=width, height=height, port_points=[
        PortPoint.synthetic("A", 0.0, height * 0.25, root_connection_name="NET_A"),
        PortPoint.synthetic("A", width, height * 0.75, root_connection_name="NET_A"),
        PortPoint.synthetic("B", 0.0, height * 0.75),
        PortPoint.synthetic("B", width, height * 0.25),
    ])


class TestHyperGraphJumperRouter:
    """Test the tiled jumper router"""

    def test_crossing_connections_are_routed(self):
        router = HyperGraphJumperRouter(crossing_node())
        router.solve()

        assert router.solved, router.error
        routes = router.get_output()
        assert [r.connection_name for r in routes] == ["A", "B"]

        route_a = routes[0]
        assert (route_a.route[0].x, route_a.route[0].y) == pytest.approx((0.0, 3.0))
        assert (route_a.route[-1].x, route_a.route[-1].y) == pytest.approx((12.0, 9.0))
        assert route_a.root_connection_name == "NET_A"
        assert route_a.trace_thickness == pytest.approx(0.15)

    def test_routes_stay_inside_node(self):
        router = HyperGraphJumperRouter(crossing_node())
        router.solve()

        bounds = router.node_bounds
        for route in router.get_output():
            for point in route.route:
                assert bounds.contains(point.to_point(), tolerance=1e-6)

    def test_output_jumpers_are_used(self):
        router = HyperGraphJumperRouter(crossing_node())
        router.solve()

        jumpers = router.get_output_jumpers()
        route_jumpers = sum(len(route.jumpers) for route in router.get_output())
        assert len(jumpers) == route_jumpers
        for jumper in jumpers:
            assert jumper.is_used
            assert jumper.orientation == "vertical"
            assert jumper.width == pytest.approx(0.5)
            assert jumper.height == pytest.approx(2.7)

    def test_node_too_small_fails_with_bounds(self):
        router = HyperGraphJumperRouter(crossing_node(width=3.0, height=3.0))
        router.solve()

        assert router.failed
        assert router.error.startswith("baseGraph bounds (")
        assert router.error.endswith("exceed node bounds (0.00, 0.00, 3.00, 3.00)")
        assert router.failure_context == {"node": "congested"}
        with pytest.raises(SolverFailedError):
            router.require_solved()

    def test_small_overhang_is_tolerated(self):
        # 1x1 vertical grid needs 6.1 x 6.7, within the 0.4mm tolerance of 6.1 x 6.4
        router = HyperGraphJumperRouter(crossing_node(width=6.1, height=6.4))
        router.step()

        assert not router.failed
        assert router.path_solver is not None

    def test_nothing_to_route(self):
        node = make_node("quiet", 6.0, 6.0, width=12.0, height=12.0, port_points=[
            PortPoint.synthetic("A", 0.0, 3.0),
        ])
        router = HyperGraphJumperRouter(node)
        router.step()

        assert router.solved
        assert router.get_output() == []
        assert router.get_output_jumpers() == []

    def test_custom_trace_width(self):
        router = HyperGraphJumperRouter(crossing_node(), trace_width=0.2)
        router.solve()
        assert all(r.trace_thickness == pytest.approx(0.2) for r in router.get_output())

    def test_invalid_trace_width(self):
        with pytest.raises(ValidationError):
            HyperGraphJumperRouter(crossing_node(), trace_width=0.0)

    def test_unknown_pattern(self):
        with pytest.raises(ValidationError):
            HyperGraphJumperRouter(crossing_node(), settings=HyperGraphSettings(pattern_type="nope"))

    def test_path_solver_budget_is_scaled(self):
        settings = HyperGraphSettings(max_iterations=1000, path_solver_iteration_multiplier=3)
        router = HyperGraphJumperRouter(crossing_node(), settings=settings)
        router.step()
        assert router.path_solver.max_iterations == 100_000 * 3
