"""Test configuration and fixtures for jumperroute."""
import pytest

from jumperroute.domain.models import (
    CapacityMeshEdge, CapacityMeshNode, Connection, ConnectionPathResult,
    NodeWithPortPoints, PathCandidate, Point, PortPoint
)


def make_node(node_id, cx, cy, width=10.0, height=10.0, port_points=None):
    """NodeWithPortPoints centered at (cx, cy)."""
    return NodeWithPortPoints(
        capacity_mesh_node_id=node_id,
        center=Point(cx, cy),
        width=width,
        height=height,
        port_points=list(port_points or [])
    )


def make_result(name, steps, node_ids=None):
    """ConnectionPathResult from (node_id, x, y) or (node_id, x, y, port_point_id) steps."""
    path = []
    for step in steps:
        node_id, x, y = step[:3]
        port_point_id = step[3] if len(step) > 3 else None
        path.append(PathCandidate(current_node_id=node_id, point=Point(x, y),
                                  port_point_id=port_point_id))
    if node_ids is None:
        node_ids = (path[0].current_node_id, path[-1].current_node_id)
    return ConnectionPathResult(connection=Connection(name=name), node_ids=node_ids, path=path)


@pytest.fixture
def square_node():
    """10x10 node spanning (0, 0) to (10, 10)."""
    return make_node("node", 5.0, 5.0)


@pytest.fixture
def grid_mesh():
    """5x5 grid of 10mm capacity mesh nodes with 4-neighbour edges."""
    nodes = []
    edges = []
    for i in range(5):
        for j in range(5):
            nodes.append(CapacityMeshNode(
                capacity_mesh_node_id=f"n_{i}_{j}",
                center=Point(i * 10 + 5, j * 10 + 5),
                width=10.0,
                height=10.0
            ))
            if i > 0:
                edges.append(CapacityMeshEdge((f"n_{i - 1}_{j}", f"n_{i}_{j}")))
            if j > 0:
                edges.append(CapacityMeshEdge((f"n_{i}_{j - 1}", f"n_{i}_{j}")))
    return nodes, edges


@pytest.fixture
def crossed_pair():
    """Two adjacent nodes where connections X and Y cross in both nodes.

    Swapping the connections on the shared real port points p1/p2 removes
    both crossings.
    """
    node_a = CapacityMeshNode("a", Point(5, 5), 10.0, 10.0)
    node_b = CapacityMeshNode("b", Point(15, 5), 10.0, 10.0)
    edge = CapacityMeshEdge(("a", "b"), "edge_ab")

    p1 = PortPoint.real("p1", "X", 10.0, 3.0)
    p2 = PortPoint.real("p2", "Y", 10.0, 7.0)
    assignment = {
        "a": [
            PortPoint.synthetic("X", 2.0, 10.0),
            PortPoint.synthetic("Y", 2.0, 0.0),
            p1, p2,
        ],
        "b": [
            p1, p2,
            PortPoint.synthetic("X", 20.0, 7.0),
            PortPoint.synthetic("Y", 20.0, 3.0),
        ],
    }
    results = [
        make_result("X", [("a", 2.0, 10.0), ("b", 10.0, 3.0, "p1"), ("b", 20.0, 7.0)]),
        make_result("Y", [("a", 2.0, 0.0), ("b", 10.0, 7.0, "p2"), ("b", 20.0, 3.0)]),
    ]
    return [node_a, node_b], [edge], assignment, results
