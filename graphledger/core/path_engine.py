"""Path Engine Adapter: stable shortest-path contract over a pluggable algorithm.

Invariants:
    - find_path returns PathResult or None, never raises
    - A node exists if it is a source key or a neighbor (sink nodes are reachable)
    - None when source/target is absent, when no route exists, or when the graph holds
      weights Dijkstra cannot use (non-positive)
    - source == target yields ([source], 0.0)
    - The input graph is never mutated

Design Decisions:
    - PathEngine as Protocol: services depend on the contract, DijkstraPathEngine is the
      default wired in by the shell
    - networkx single_source_dijkstra on a DiGraph: edges are directed, weights read from
      the "weight" attribute
"""

from dataclasses import dataclass
from typing import Protocol

import networkx as nx

from graphledger.core.domain_types import Graph


@dataclass(frozen=True)
class PathResult:
    path: list[str]
    cost: float


class PathEngine(Protocol):
    """Contract for shortest-path algorithms used by execution and simulation."""
    def find_path(
        self, graph: Graph, source: str, target: str,
    ) -> PathResult | None: ...


def build_digraph(graph: Graph) -> nx.DiGraph:
    """Adjacency map -> weighted networkx DiGraph."""
    digraph = nx.DiGraph()
    digraph.add_nodes_from(graph)
    for source, neighbors in graph.items():
        for target, weight in neighbors.items():
            digraph.add_edge(source, target, weight=float(weight))
    return digraph


class DijkstraPathEngine:
    """Dijkstra via networkx. CPU-bound, synchronous, no retries."""

    def find_path(
        self, graph: Graph, source: str, target: str,
    ) -> PathResult | None:
        digraph = build_digraph(graph)
        if source not in digraph or target not in digraph:
            return None
        try:
            cost, path = nx.single_source_dijkstra(
                digraph, source, target, weight="weight",
            )
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return None
        except ValueError:
            # networkx: "Contradictory paths found: negative weights?"
            return None
        return PathResult(path=list(path), cost=float(cost))
