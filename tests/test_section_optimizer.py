"""Tests for section-based port point re-optimization."""
import math

import pytest

from jumperroute.algorithms.sections.section_optimizer import SectionOptimizer, SwapMove
from jumperroute.domain.models import InputNodeWithPortPoints
from jumperroute.domain.services.crossing_analyzer import get_intra_node_crossings
from jumperroute.shared.configuration import SectionOptimizerSettings

# One crossing in a 10x10 node
SINGLE_CROSSING_PF = 1 / (2.1 * 1.1)


def make_optimizer(crossed_pair, settings=None):
    nodes, edges, assignment, results = crossed_pair
    input_nodes = [InputNodeWithPortPoints.from_mesh_node(node) for node in nodes]
    return SectionOptimizer(
        capacity_mesh_nodes=nodes,
        capacity_mesh_edges=edges,
        input_nodes=input_nodes,
        node_assigned_port_points=assignment,
        connection_results=results,
        settings=settings
    )


class TestSectionOptimizer:
    """Test the stepped section optimizer"""

    def test_ranks_failure_prone_nodes(self, crossed_pair):
        optimizer = make_optimizer(crossed_pair)
        assert optimizer.center_node_ids == ["a", "b"]

    def test_min_pf_filters_centers(self, crossed_pair):
        settings = SectionOptimizerSettings(min_pf_to_optimize=0.9)
        optimizer = make_optimizer(crossed_pair, settings)

        assert optimizer.center_node_ids == []
        optimizer.solve()
        assert optimizer.solved
        assert optimizer.section_scores == []

    def test_swap_moves_on_shared_edge(self, crossed_pair):
        optimizer = make_optimizer(crossed_pair)
        section = optimizer.section_builder.create_section("a", 3)

        assert optimizer.get_swap_moves(section) == [SwapMove("p1", "p2")]

    def test_section_score(self, crossed_pair):
        optimizer = make_optimizer(crossed_pair)
        section = optimizer.section_builder.create_section("a", 3)

        expected = 2 * math.log(1 - SINGLE_CROSSING_PF)
        assert optimizer.compute_section_score(section) == pytest.approx(expected)

    def test_try_swap_accepts_only_improvements(self, crossed_pair):
        optimizer = make_optimizer(crossed_pair)

        assert optimizer.try_swap(SwapMove("p1", "p2"))
        # Swapping back would restore both crossings
        assert not optimizer.try_swap(SwapMove("p1", "p2"))
        assert not optimizer.try_swap(SwapMove("p1", "missing"))

    def test_solve_removes_crossings(self, crossed_pair):
        optimizer = make_optimizer(crossed_pair)
        optimizer.solve()

        assert optimizer.solved
        assert not optimizer.failed
        first = optimizer.section_scores[0]
        assert first.center_node_id == "a"
        assert first.node_count == 2
        assert first.accepted_swaps == 1
        assert first.improved
        assert first.score_after == pytest.approx(0.0)

        for node in optimizer.get_nodes_with_port_points():
            assert get_intra_node_crossings(node).num_same_layer_crossings == 0

    def test_swap_updates_paths_and_keeps_inputs(self, crossed_pair):
        _, _, assignment, results = crossed_pair
        optimizer = make_optimizer(crossed_pair)
        optimizer.solve()

        paths = {r.connection_name: r.path for r in optimizer.connection_results}
        assert paths["X"][1].port_point_id == "p2"
        assert (paths["X"][1].point.x, paths["X"][1].point.y) == (10.0, 7.0)
        assert paths["Y"][1].port_point_id == "p1"

        # Inputs untouched
        assert results[0].path[1].port_point_id == "p1"
        assert assignment["a"][2].connection_name == "X"

    def test_port_point_ids_are_stable(self, crossed_pair):
        optimizer = make_optimizer(crossed_pair)
        optimizer.solve()

        by_node = {n.capacity_mesh_node_id: n for n in optimizer.get_nodes_with_port_points()}
        real = {pp.port_point_id: pp for pp in by_node["a"].port_points if not pp.is_synthetic}
        assert real["p1"].connection_name == "Y"
        assert real["p2"].connection_name == "X"
        assert (real["p1"].x, real["p1"].y) == (10.0, 3.0)

    def test_deterministic(self, crossed_pair):
        first = make_optimizer(crossed_pair)
        second = make_optimizer(crossed_pair)
        first.solve()
        second.solve()

        assert first.section_scores == second.section_scores

    def test_iteration_budget(self, crossed_pair):
        settings = SectionOptimizerSettings(max_iterations=1)
        optimizer = make_optimizer(crossed_pair, settings)
        optimizer.solve()

        assert optimizer.failed
        assert optimizer.error == "SectionOptimizer ran out of iterations (1)"
