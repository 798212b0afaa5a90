"""Graph Cost Model: sizes a graph and prices operations against it.

Invariants:
    - nodes = number of source keys; edges = total neighbor entries across all sources
    - cost = round(0.2 * nodes + 0.01 * edges, 2), always a 2-decimal Decimal
    - The empty graph costs 0.00 and is not an error here (callers decide)
    - with_edge_weight never mutates its input

Design Decisions:
    - Decimal arithmetic: cost is compared against NUMERIC(12,2) balances
"""

import math
from dataclasses import dataclass
from decimal import Decimal

from graphledger.core.domain_types import Graph
from graphledger.core.token_amounts import quantize_tokens

NODE_PRICE = Decimal("0.20")
EDGE_PRICE = Decimal("0.01")


@dataclass(frozen=True)
class GraphCost:
    nodes: int
    edges: int
    cost: Decimal


def count_nodes(graph: Graph) -> int:
    return len(graph or {})


def count_edges(graph: Graph) -> int:
    return sum(len(neighbors or {}) for neighbors in (graph or {}).values())


def compute_graph_cost(graph: Graph) -> GraphCost:
    """Pure: size the graph and derive the token cost of operating on it."""
    nodes = count_nodes(graph)
    edges = count_edges(graph)
    cost = quantize_tokens(NODE_PRICE * nodes + EDGE_PRICE * edges)
    return GraphCost(nodes=nodes, edges=edges, cost=cost)


def has_node(graph: Graph, node: str) -> bool:
    """A node is present as a source key or as a neighbor of any source."""
    graph = graph or {}
    return node in graph or any(node in (neighbors or {}) for neighbors in graph.values())


def has_edge(graph: Graph, source: str, target: str) -> bool:
    return target in (graph or {}).get(source, {})


def edge_weight(graph: Graph, source: str, target: str) -> float | None:
    """Weight of source -> target, or None if the edge is absent."""
    if not has_edge(graph, source, target):
        return None
    return float(graph[source][target])


def with_edge_weight(graph: Graph, source: str, target: str, weight: float) -> Graph:
    """Shallow copy of graph with only source -> target replaced."""
    return {**graph, source: {**graph[source], target: weight}}


def validate_graph(graph: Graph) -> str | None:
    """Return an error message for a structurally invalid graph, None if valid.

    Empty graphs are reported so creation can refuse them; weights must be
    positive finite numbers.
    """
    if not graph:
        return "Graph must contain at least one node"
    for source, neighbors in graph.items():
        if not isinstance(neighbors, dict):
            return f"Neighbors of '{source}' must be a mapping"
        for target, weight in neighbors.items():
            if isinstance(weight, bool) or not isinstance(weight, (int, float)):
                return f"Weight of edge '{source}'->'{target}' must be a number"
            if not math.isfinite(weight) or weight <= 0:
                return f"Weight of edge '{source}'->'{target}' must be positive"
    return None
