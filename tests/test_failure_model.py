"""Tests for the probability-of-failure model."""
import math
import random

import pytest

from conftest import make_node
from jumperroute.domain.models import CapacityMeshNode, Point, PortPoint
from jumperroute.domain.services.failure_model import (
    AreaDensityFailureEstimator, CapacityFailureEstimator, FailureModel, FailureStrategy
)
from jumperroute.shared.configuration import FailureModelSettings
from jumperroute.shared.exceptions import ValidationError

# floor(10 / 5) + 0.1 by floor(10 / 5.5) + 0.1 jumper cells
CELLS_10X10 = 2.1 * 1.1


def crossing_port_points():
    return [
        PortPoint.synthetic("A", 0.0, 5.0),
        PortPoint.synthetic("A", 10.0, 5.0),
        PortPoint.synthetic("B", 5.0, 10.0),
        PortPoint.synthetic("B", 5.0, 0.0),
    ]


@pytest.fixture
def mesh_node():
    return CapacityMeshNode("node", Point(5.0, 5.0), 10.0, 10.0)


class TestCapacityStrategy:
    """Test the jumper capacity formula"""

    def test_no_crossings_never_fail(self, mesh_node):
        assert FailureModel().probability_of_failure(mesh_node, 0) == 0.0

    @pytest.mark.parametrize("crossings, jumpers", [(1, 1), (7, 1), (8, 2), (14, 2)])
    def test_jumpers_required(self, mesh_node, crossings, jumpers):
        pf = FailureModel().probability_of_failure(mesh_node, crossings)
        assert pf == pytest.approx(jumpers / CELLS_10X10)

    def test_clamped_below_one(self, mesh_node):
        pf = FailureModel().probability_of_failure(mesh_node, 1000)
        assert pf == pytest.approx(0.99999)
        assert pf < 1.0

    def test_tiny_node_does_not_divide_by_zero(self):
        estimator = CapacityFailureEstimator(7, 5.0, 5.5)
        assert estimator.raw_probability(1.0, 1.0, 1) == pytest.approx(1.0)


class TestAreaDensityStrategy:
    """Test the squared-crossings-over-area formula"""

    def test_formula(self, mesh_node):
        model = FailureModel(FailureModelSettings(strategy="area_density", crossing_density=1.0))
        assert model.strategy is FailureStrategy.AREA_DENSITY
        assert model.probability_of_failure(mesh_node, 5) == pytest.approx(0.25)
        assert model.probability_of_failure(mesh_node, 50) == pytest.approx(0.99999)

    def test_zero_area(self):
        estimator = AreaDensityFailureEstimator(1.0)
        assert estimator.raw_probability(0.0, 5.0, 0) == 0.0
        assert estimator.raw_probability(0.0, 5.0, 2) == 1.0


@pytest.mark.parametrize("strategy", ["capacity", "area_density"])
class TestFailureCurve:
    """Test properties shared by both formulas"""

    def test_monotone_and_clamped(self, mesh_node, strategy):
        model = FailureModel(FailureModelSettings(strategy=strategy))
        values = [model.probability_of_failure(mesh_node, k) for k in range(60)]

        assert values[0] == 0.0
        assert all(b >= a for a, b in zip(values, values[1:]))
        assert all(v <= 0.99999 for v in values)
        assert values[-1] == pytest.approx(0.99999)

    def test_section_score_ignores_node_order(self, strategy):
        mesh_nodes = {
            f"n{i}": CapacityMeshNode(f"n{i}", Point(5.0, 5.0), 6.0 + i, 6.0 + i,
                                      contains_target=(i == 4))
            for i in range(12)
        }
        nodes = [make_node(f"n{i}", 5.0, 5.0, port_points=crossing_port_points() if i % 3 else [])
                 for i in range(12)]
        model = FailureModel(FailureModelSettings(strategy=strategy))
        score = model.compute_section_score(nodes, mesh_nodes)
        assert score < 0.0

        for seed in range(5):
            shuffled = list(nodes)
            random.Random(seed).shuffle(shuffled)
            assert model.compute_section_score(shuffled, mesh_nodes) == pytest.approx(score)


class TestFailureModelSettings:
    """Test model construction from settings"""

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            FailureModel(FailureModelSettings(strategy="magic"))

    def test_max_pf_out_of_range(self):
        with pytest.raises(ValidationError):
            FailureModel(FailureModelSettings(node_max_pf=1.5))


class TestSectionScore:
    """Test log-success section scoring"""

    def test_node_probability_uses_crossings(self, mesh_node):
        node = make_node("node", 5.0, 5.0, port_points=crossing_port_points())
        pf = FailureModel().node_probability_of_failure(node, mesh_node)
        assert pf == pytest.approx(1 / CELLS_10X10)

    def test_score_sums_log_success(self):
        mesh_nodes = {
            "a": CapacityMeshNode("a", Point(5.0, 5.0), 10.0, 10.0),
            "b": CapacityMeshNode("b", Point(5.0, 5.0), 10.0, 10.0),
            "empty": CapacityMeshNode("empty", Point(5.0, 5.0), 10.0, 10.0),
        }
        nodes = [
            make_node("a", 5.0, 5.0, port_points=crossing_port_points()),
            make_node("b", 5.0, 5.0, port_points=crossing_port_points()),
            make_node("empty", 5.0, 5.0),
        ]
        score = FailureModel().compute_section_score(nodes, mesh_nodes)
        assert score == pytest.approx(2 * math.log(1 - 1 / CELLS_10X10))

    def test_target_and_unknown_nodes_are_skipped(self):
        mesh_nodes = {
            "target": CapacityMeshNode("target", Point(5.0, 5.0), 10.0, 10.0,
                                       contains_target=True),
        }
        nodes = [
            make_node("target", 5.0, 5.0, port_points=crossing_port_points()),
            make_node("unknown", 5.0, 5.0, port_points=crossing_port_points()),
        ]
        assert FailureModel().compute_section_score(nodes, mesh_nodes) == 0.0

    def test_score_is_finite_at_max_congestion(self):
        mesh_nodes = {f"n{i}": CapacityMeshNode(f"n{i}", Point(0.5, 0.5), 1.0, 1.0)
                      for i in range(500)}
        nodes = [make_node(f"n{i}", 0.5, 0.5, width=1.0, height=1.0, port_points=[
            PortPoint.synthetic("A", 0.0, 0.5),
            PortPoint.synthetic("A", 1.0, 0.5),
            PortPoint.synthetic("B", 0.5, 1.0),
            PortPoint.synthetic("B", 0.5, 0.0),
        ]) for i in range(500)]

        score = FailureModel().compute_section_score(nodes, mesh_nodes)
        assert math.isfinite(score)
        assert score == pytest.approx(500 * math.log(1 - 0.99999))
