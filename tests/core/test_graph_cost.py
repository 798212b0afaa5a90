"""Graph Cost Model: sizing, pricing and non-mutating edge replacement.

Tests:
    - cost == round(0.2 * nodes + 0.01 * edges, 2), empty graph costs 0
    - Edge helpers read directed edges only
    - with_edge_weight leaves the input untouched
    - validate_graph rejects empty graphs and bad weights
"""

from decimal import Decimal

from graphledger.core.graph_cost import (
    compute_graph_cost, edge_weight, has_edge, has_node, validate_graph,
    with_edge_weight,
)

EXAMPLE = {
    "A": {"B": 2, "C": 4},
    "B": {"A": 2, "D": 1},
    "C": {"A": 4, "D": 3},
    "D": {"B": 1, "C": 3},
}


def test_example_graph_costs_088():
    cost = compute_graph_cost(EXAMPLE)
    assert cost.nodes == 4
    assert cost.edges == 8
    assert cost.cost == Decimal("0.88")


def test_empty_graph_costs_zero():
    cost = compute_graph_cost({})
    assert (cost.nodes, cost.edges, cost.cost) == (0, 0, Decimal("0.00"))


def test_nodes_without_edges_still_count():
    assert compute_graph_cost({"A": {}, "B": {}}).cost == Decimal("0.40")


def test_edge_helpers_are_directed():
    graph = {"A": {"B": 1.5}, "B": {}}
    assert has_node(graph, "B")
    assert has_node({"A": {"Z": 1}}, "Z")
    assert not has_node({"A": {"Z": 1}}, "Q")
    assert has_edge(graph, "A", "B")
    assert not has_edge(graph, "B", "A")
    assert edge_weight(graph, "A", "B") == 1.5
    assert edge_weight(graph, "B", "A") is None


def test_with_edge_weight_does_not_mutate():
    updated = with_edge_weight(EXAMPLE, "A", "B", 7.0)
    assert updated["A"]["B"] == 7.0
    assert EXAMPLE["A"]["B"] == 2
    assert updated["C"] is EXAMPLE["C"]


def test_validate_graph_accepts_example():
    assert validate_graph(EXAMPLE) is None


def test_validate_graph_rejects_bad_input():
    assert validate_graph({}) is not None
    assert validate_graph({"A": {"B": 0}}) is not None
    assert validate_graph({"A": {"B": -1}}) is not None
    assert validate_graph({"A": {"B": float("inf")}}) is not None
    assert validate_graph({"A": {"B": True}}) is not None
    assert validate_graph({"A": ["B"]}) is not None
