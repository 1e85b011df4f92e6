"""Tests for route geometry post-processing."""
import pytest

from jumperroute.algorithms.base.segments import (
    are_segments_collinear, compute_offset_midpoint, get_collinear_overlap_info,
    segment_interior_intersection, segments_intersect
)
from jumperroute.algorithms.hypergraph.route_geometry import (
    add_midpoints_for_collinear_overlaps, collect_route_segments, create_region_offset_points
)
from jumperroute.domain.models import HighDensityRouteWithJumpers, Point, RoutePoint


def make_route(name, points, inside_jumper_pad=False):
    return HighDensityRouteWithJumpers(
        connection_name=name,
        route=[RoutePoint(x, y, 0, inside_jumper_pad) for x, y in points],
        trace_thickness=0.15
    )


class TestSegmentPrimitives:
    """Test segment helpers used by the router"""

    def test_intersection_includes_touching(self):
        assert segments_intersect(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
        assert segments_intersect(Point(0, 0), Point(1, 0), Point(1, 0), Point(1, 1))
        assert not segments_intersect(Point(0, 0), Point(1, 0), Point(0, 1), Point(1, 1))

    def test_interior_intersection_excludes_endpoints(self):
        crossing = segment_interior_intersection(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
        assert (crossing.x, crossing.y) == pytest.approx((1.0, 1.0))
        assert segment_interior_intersection(Point(0, 0), Point(1, 0),
                                             Point(1, 0), Point(1, 1)) is None
        assert segment_interior_intersection(Point(0, 0), Point(1, 0),
                                             Point(0, 1), Point(1, 1)) is None

    def test_collinear_overlap(self):
        assert are_segments_collinear(Point(0, 0), Point(10, 0), Point(2, 0), Point(5, 0))
        overlap = get_collinear_overlap_info(Point(2, 0), Point(5, 0), Point(0, 0), Point(10, 0))
        assert overlap.outer_segment == 2
        assert overlap.overlap_length == pytest.approx(3.0)

        partial = get_collinear_overlap_info(Point(0, 0), Point(4, 0), Point(3, 0), Point(10, 0))
        assert partial.outer_segment == 2

        assert get_collinear_overlap_info(Point(0, 0), Point(1, 0), Point(1, 0), Point(2, 0)) is None

    def test_offset_midpoint_is_left_of_direction(self):
        midpoint = compute_offset_midpoint(Point(0, 0), Point(10, 0), 0.5)
        assert (midpoint.x, midpoint.y) == pytest.approx((5.0, 0.5))


class TestRegionOffsetPoints:
    """Test the points placed on either side of a port"""

    def test_points_move_toward_region_centers(self):
        points = create_region_offset_points(Point(5, 5), Point(3, 5), Point(8, 5),
                                             inside_jumper_pad=False, offset_distance=0.02)
        assert [(p.x, p.y) for p in points] == pytest.approx([(4.98, 5.0), (5.02, 5.0)])

    def test_degenerate_center_uses_port(self):
        points = create_region_offset_points(Point(5, 5), Point(5, 5), Point(5, 8),
                                             inside_jumper_pad=True, offset_distance=0.02)
        assert (points[0].x, points[0].y) == (5, 5)
        assert (points[1].x, points[1].y) == pytest.approx((5.0, 5.02))
        assert all(p.inside_jumper_pad for p in points)

    def test_duplicate_points_collapse(self):
        points = create_region_offset_points(Point(5, 5), Point(5, 5), Point(5, 5),
                                             inside_jumper_pad=False, offset_distance=0.02)
        assert len(points) == 1


class TestCollinearOverlapRepair:
    """Test offset midpoint insertion for overlapping segments"""

    def test_outer_segment_gets_midpoint(self):
        routes = [
            make_route("A", [(0.0, 0.0), (10.0, 0.0)]),
            make_route("B", [(2.0, 0.0), (5.0, 0.0)]),
        ]
        inserted = add_midpoints_for_collinear_overlaps(routes, offset_distance=0.5)

        assert inserted == 1
        assert [(p.x, p.y) for p in routes[0].route] == pytest.approx(
            [(0.0, 0.0), (5.0, 0.5), (10.0, 0.0)]
        )
        assert len(routes[1].route) == 2

    def test_repair_introduces_no_intersections(self):
        routes = [
            make_route("A", [(0.0, 0.0), (10.0, 0.0)]),
            make_route("B", [(2.0, 0.0), (5.0, 0.0)]),
            make_route("C", [(0.0, 5.0), (10.0, 5.0)]),
        ]
        add_midpoints_for_collinear_overlaps(routes)

        new_segments = [s for s in collect_route_segments(routes) if s.route_index == 0]
        others = [s for s in collect_route_segments(routes) if s.route_index != 0]
        for new in new_segments:
            for other in others:
                assert not segments_intersect(new.start, new.end, other.start, other.end)

    def test_midpoint_skipped_when_it_would_intersect(self):
        routes = [
            make_route("A", [(0.0, 0.0), (10.0, 0.0)]),
            make_route("B", [(2.0, 0.0), (5.0, 0.0)]),
            make_route("C", [(3.0, 0.4), (7.0, 0.4)]),
        ]
        assert add_midpoints_for_collinear_overlaps(routes, offset_distance=0.5) == 0
        assert len(routes[0].route) == 2

    def test_segments_inside_jumper_pads_are_left_alone(self):
        routes = [
            make_route("A", [(0.0, 0.0), (10.0, 0.0)], inside_jumper_pad=True),
            make_route("B", [(2.0, 0.0), (5.0, 0.0)]),
        ]
        assert add_midpoints_for_collinear_overlaps(routes) == 0

    def test_adjacent_segments_are_not_compared(self):
        routes = [make_route("A", [(0.0, 0.0), (10.0, 0.0), (5.0, 0.0)])]
        assert add_midpoints_for_collinear_overlaps(routes) == 0

    def test_bend_crossing_own_loop_is_skipped(self):
        routes = [make_route("A", [(0.0, 0.0), (10.0, 0.0), (10.0, 3.0),
                                   (7.0, 3.0), (7.0, 0.0), (3.0, 0.0)])]
        # (0,0)-(10,0) contains (7,0)-(3,0) but the bend would cut (7,3)-(7,0)
        assert add_midpoints_for_collinear_overlaps(routes, offset_distance=0.5) == 0
        assert len(routes[0].route) == 6

    def test_bends_on_consecutive_segments_do_not_cross(self):
        # Both legs of the sharp corner at (10, 0) contain another route
        routes = [
            make_route("A", [(0.0, 0.0), (10.0, 0.0), (0.0, 4.0)]),
            make_route("B", [(1.0, 0.0), (3.0, 0.0)]),
            make_route("C", [(4.0, 2.4), (2.0, 3.2)]),
        ]
        assert add_midpoints_for_collinear_overlaps(routes, offset_distance=1.5) == 1
        assert [(p.x, p.y) for p in routes[0].route] == pytest.approx(
            [(0.0, 0.0), (5.0, 1.5), (10.0, 0.0), (0.0, 4.0)]
        )

        own = [s for s in collect_route_segments(routes) if s.route_index == 0]
        for i, first in enumerate(own):
            for second in own[i + 1:]:
                assert segment_interior_intersection(first.start, first.end,
                                                     second.start, second.end) is None
