"""Tests for section construction and path cutting."""
import pytest

from conftest import make_result
from jumperroute.algorithms.base.adjacency import AdjacencyIndex
from jumperroute.algorithms.sections.section_builder import (
    PortPointSectionBuilder, SectionGraphInput, cut_paths_to_section
)
from jumperroute.domain.models import InputNodeWithPortPoints, InputPortPoint


def row_path_result(node_ids=None):
    """Connection running along row 2 of the grid mesh."""
    steps = [(f"n_{i}_2", i * 10.0 + 5.0, 25.0) for i in range(5)]
    return make_result("row", steps, node_ids=node_ids)


@pytest.fixture
def builder(grid_mesh):
    nodes, edges = grid_mesh
    input_nodes = [
        InputNodeWithPortPoints.from_mesh_node(node, [
            InputPortPoint(f"pp_{node.capacity_mesh_node_id}", node.center.x + 5.0,
                           node.center.y, 0,
                           (node.capacity_mesh_node_id, "elsewhere"))
        ])
        for node in nodes
    ]
    graph = SectionGraphInput(
        input_nodes=input_nodes,
        capacity_mesh_nodes=nodes,
        capacity_mesh_edges=edges,
        connection_results=[row_path_result()]
    )
    return PortPointSectionBuilder(graph)


class TestAdjacencyIndex:
    """Test the read-only adjacency index"""

    def test_neighbors(self, grid_mesh):
        _, edges = grid_mesh
        adjacency = AdjacencyIndex(edges)

        assert len(adjacency) == 25
        assert sorted(adjacency.neighbors("n_0_0")) == ["n_0_1", "n_1_0"]
        assert len(adjacency.neighbors("n_2_2")) == 4
        assert adjacency.neighbors("missing") == []

    def test_bfs_depths(self, grid_mesh):
        _, edges = grid_mesh
        depths = AdjacencyIndex(edges).bfs_depths("n_0_0", 2)

        assert depths == {"n_0_0": 0, "n_1_0": 1, "n_0_1": 1,
                          "n_2_0": 2, "n_1_1": 2, "n_0_2": 2}

    def test_bfs_unknown_start(self, grid_mesh):
        _, edges = grid_mesh
        assert AdjacencyIndex(edges).bfs_depths("lonely", 3) == {"lonely": 0}


class TestCreateSection:
    """Test breadth-first section expansion"""

    @pytest.mark.parametrize("degrees, expected_size", [(0, 1), (1, 5), (2, 13)])
    def test_section_size(self, builder, degrees, expected_size):
        section = builder.create_section("n_2_2", degrees)

        assert len(section.node_ids) == expected_size
        assert "n_2_2" in section
        assert section.center_node_id == "n_2_2"
        assert section.expansion_degrees == degrees

    def test_nodes_within_depth_and_connected(self, builder):
        section = builder.create_section("n_1_1", 2)
        depths = builder.adjacency.bfs_depths("n_1_1", 10)

        assert all(depths[node_id] <= 2 for node_id in section.node_ids)
        assert builder.adjacency.is_connected_subset(section.node_ids)

    def test_edge_classification(self, builder):
        section = builder.create_section("n_2_2", 1)

        assert len(section.internal_edges) == 4
        assert len(section.boundary_edges) == 12
        for edge in section.internal_edges:
            assert all(node_id in section for node_id in edge.node_ids)
        for edge in section.boundary_edges:
            assert sum(node_id in section for node_id in edge.node_ids) == 1

    def test_nodes_filtered_to_section(self, builder):
        section = builder.create_section("n_2_2", 1)

        assert {n.capacity_mesh_node_id for n in section.capacity_mesh_nodes} == section.node_ids
        assert {n.capacity_mesh_node_id for n in section.input_nodes} == section.node_ids
        assert all(len(n.port_points) == 1 for n in section.input_nodes)

    def test_isolated_center(self, builder):
        section = builder.create_section("lonely", 3)

        assert section.node_ids == {"lonely"}
        assert section.internal_edges == []
        assert section.section_paths == []

    def test_section_path_widens_to_terminals(self, builder):
        section = builder.create_section("n_2_2", 0)

        assert len(section.section_paths) == 1
        path = section.section_paths[0]
        assert path.original_start_index == 0
        assert path.original_end_index == 4
        assert path.has_entry_from_outside
        assert path.has_exit_to_outside


class TestCutPaths:
    """Test cutting connection paths down to a section"""

    def test_cut_between_first_and_last_visit(self):
        result = row_path_result(node_ids=("t_start", "t_end"))
        paths = cut_paths_to_section([result], {"n_1_2", "n_3_2"})

        assert len(paths) == 1
        path = paths[0]
        assert path.original_start_index == 1
        assert path.original_end_index == 3
        assert [p.node_id for p in path.points] == ["n_1_2", "n_2_2", "n_3_2"]
        assert path.has_entry_from_outside
        assert path.has_exit_to_outside

    def test_whole_graph_leaves_path_unchanged(self, grid_mesh):
        nodes, _ = grid_mesh
        result = row_path_result()
        paths = cut_paths_to_section([result], {n.capacity_mesh_node_id for n in nodes})

        path = paths[0]
        assert [(p.x, p.y) for p in path.points] == [(c.point.x, c.point.y) for c in result.path]
        assert path.original_start_index == 0
        assert path.original_end_index == len(result.path) - 1
        assert not path.has_entry_from_outside
        assert not path.has_exit_to_outside

    def test_paths_outside_section_are_dropped(self):
        assert cut_paths_to_section([row_path_result()], {"n_0_0"}) == []

    def test_unsolved_results_are_skipped(self):
        result = row_path_result()
        result.path = None
        assert cut_paths_to_section([result], {"n_2_2"}) == []
