"""Tests for jumper array grid generation."""
import pytest

from jumperroute.algorithms.hypergraph.jumper_grid import (
    array_size, generate_jumper_x4_grid, get_pattern_size, minimum_grid_size
)
from jumperroute.domain.models import Bounds
from jumperroute.shared.exceptions import ValidationError


def make_grid(cols=1, rows=1, orientation="vertical", bounds=Bounds(0.0, 0.0, 12.0, 12.0),
              regions_between_pads=True):
    return generate_jumper_x4_grid(
        cols=cols,
        rows=rows,
        margin_x=1.2,
        margin_y=1.2,
        outer_padding_x=0.4,
        outer_padding_y=0.4,
        parallel_traces_under_jumper_count=3,
        inner_col_channel_point_count=3,
        inner_row_channel_point_count=3,
        outer_channel_x_point_count=3,
        outer_channel_y_point_count=3,
        regions_between_pads=regions_between_pads,
        orientation=orientation,
        bounds=bounds
    )


class TestPatternSizes:
    """Test pattern lookup and grid dimensions"""

    def test_known_patterns(self):
        assert get_pattern_size("single_1206x4") == (1, 1)
        assert get_pattern_size("3x2_1206x4") == (3, 2)
        assert get_pattern_size("8x4_1206x4") == (8, 4)

    def test_unknown_pattern(self):
        with pytest.raises(ValidationError) as exc_info:
            get_pattern_size("5x5_1206x4")
        assert exc_info.value.field == "pattern_type"

    def test_array_size(self):
        assert array_size("horizontal") == pytest.approx((3.5, 2.9))
        assert array_size("vertical") == pytest.approx((2.9, 3.5))

    def test_minimum_grid_size(self):
        size = minimum_grid_size(1, 1, 1.2, 1.2, 0.4, 0.4, "vertical")
        assert size == pytest.approx((6.1, 6.7))


class TestGenerateGrid:
    """Test region and port generation"""

    def test_region_counts(self):
        graph = make_grid()
        channels = [r for r in graph.regions if r.is_channel]
        pads = [r for r in graph.regions if r.is_pad]
        through = [r for r in graph.regions if r.is_through_jumper]
        under = [r for r in graph.regions if r.is_under_jumper]

        # 3x3 cells minus the array cell
        assert len(channels) == 8
        assert len(pads) == 8
        assert len(through) == 4
        assert len(under) == 1
        assert len(graph.jumper_locations) == 4

    def test_port_count(self):
        graph = make_grid()
        # 8 channel adjacencies x 3, 4 ports per pair, 3 ports each side of the under-body
        assert len(graph.ports) == 8 * 3 + 4 * 4 + 2 * 3

    def test_no_under_regions(self):
        graph = make_grid(regions_between_pads=False)
        assert not any(r.is_under_jumper for r in graph.regions)
        assert len(graph.ports) == 8 * 3 + 4 * 4

    def test_cell_count_scales_with_pattern(self):
        graph = make_grid(cols=2, rows=2, bounds=Bounds(0.0, 0.0, 20.0, 20.0))
        channels = [r for r in graph.regions if r.is_channel]

        assert len(channels) == 5 * 5 - 4
        assert len(graph.jumper_locations) == 16

    def test_grid_fills_bounds(self):
        graph = make_grid()
        assert graph.get_bounds().as_tuple() == pytest.approx((0.0, 0.0, 12.0, 12.0))

    def test_ports_lie_on_both_regions(self):
        graph = make_grid()
        for port in graph.ports:
            assert port.region1.bounds.contains(port.position, tolerance=1e-9)
            assert port.region2.bounds.contains(port.position, tolerance=1e-9)
            assert port in port.region1.ports
            assert port in port.region2.ports

    def test_unique_ids(self):
        graph = make_grid(cols=2, rows=2, bounds=Bounds(0.0, 0.0, 20.0, 20.0))
        region_ids = [r.region_id for r in graph.regions]
        port_ids = [p.port_id for p in graph.ports]

        assert len(set(region_ids)) == len(region_ids)
        assert len(set(port_ids)) == len(port_ids)
        assert "array_0_0_pair0_through" in region_ids
        assert "array_1_1_under" in region_ids

    @pytest.mark.parametrize("orientation", ["horizontal", "vertical"])
    def test_pad_orientation(self, orientation):
        graph = make_grid(orientation=orientation)
        pad = next(r for r in graph.regions if r.is_pad)
        through = next(r for r in graph.regions if r.is_through_jumper)

        if orientation == "horizontal":
            assert pad.bounds.width == pytest.approx(0.8)
            assert pad.bounds.height == pytest.approx(0.5)
            assert through.bounds.width == pytest.approx(2.7)
        else:
            assert pad.bounds.width == pytest.approx(0.5)
            assert pad.bounds.height == pytest.approx(0.8)
            assert through.bounds.height == pytest.approx(2.7)

    def test_jumper_locations_match_pads(self):
        graph = make_grid()
        for location in graph.jumper_locations:
            start, end = location.pad_regions
            assert location.orientation == "vertical"
            assert start.center.distance_to(end.center) == pytest.approx(2.7)
            assert location.center.x == pytest.approx(start.center.x)

    def test_undersized_bounds_center_the_minimum_grid(self):
        graph = make_grid(bounds=Bounds(0.0, 0.0, 3.0, 3.0))
        bounds = graph.get_bounds()

        assert bounds.width == pytest.approx(6.1)
        assert bounds.height == pytest.approx(6.7)
        assert bounds.center.x == pytest.approx(1.5)
        assert bounds.center.y == pytest.approx(1.5)

    def test_invalid_arguments(self):
        with pytest.raises(ValidationError):
            make_grid(cols=0)
        with pytest.raises(ValidationError):
            make_grid(orientation="diagonal")
