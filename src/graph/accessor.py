# src/graph/accessor.py — v1
"""Weighted graph accessors over NetworkX graphs.

The community code reads graphs only through one of two tagged variants:

- WeightedUndirected: degree(node) counts self-loops twice.
- WeightedDirected: out_degree(node) / in_degree(node), self-loops once each.

Both expose nodes(), neighbors(), weight(u, v), edges() and total_weight(),
and carry a ``directed`` tag so callers branch on the tag, not on the type.
Node order is the insertion order of the source graph and is the canonical
traversal order everywhere downstream.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Hashable, Iterator
from typing import Union

import networkx as nx

from louvainkit.config.settings import ConfigurationError

logger = logging.getLogger(__name__)

Node = Hashable

# Attribute name used on normalized graphs, whatever the caller's attribute was.
WEIGHT = "weight"


class WeightedUndirected:
    """Read-only weighted view of a normalized undirected graph."""

    directed = False

    def __init__(self, graph: nx.Graph) -> None:
        self._graph = graph
        self._nodes: list[Node] = list(graph.nodes)
        self._degree: dict[Node, float] = dict(graph.degree(weight=WEIGHT))
        self._total = float(graph.size(weight=WEIGHT))

    @property
    def graph(self) -> nx.Graph:
        return self._graph

    def nodes(self) -> list[Node]:
        return list(self._nodes)

    def number_of_nodes(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._graph

    def neighbors(self, node: Node) -> list[Node]:
        return list(self._graph.adj[node])

    def weight(self, u: Node, v: Node) -> float:
        data = self._graph.adj[u].get(v)
        return data[WEIGHT] if data is not None else 0.0

    def self_weight(self, node: Node) -> float:
        return self.weight(node, node)

    def degree(self, node: Node) -> float:
        return self._degree[node]

    def edges(self) -> Iterator[tuple[Node, Node, float]]:
        """Yield each edge once as (u, v, weight)."""
        yield from self._graph.edges(data=WEIGHT)

    def total_weight(self) -> float:
        return self._total

    def __repr__(self) -> str:
        return (
            f"WeightedUndirected(nodes={len(self._nodes)}, "
            f"edges={self._graph.number_of_edges()}, m={self._total})"
        )


class WeightedDirected:
    """Read-only weighted view of a normalized directed graph."""

    directed = True

    def __init__(self, graph: nx.DiGraph) -> None:
        self._graph = graph
        self._nodes: list[Node] = list(graph.nodes)
        self._out: dict[Node, float] = dict(graph.out_degree(weight=WEIGHT))
        self._in: dict[Node, float] = dict(graph.in_degree(weight=WEIGHT))
        self._total = float(graph.size(weight=WEIGHT))

    @property
    def graph(self) -> nx.DiGraph:
        return self._graph

    def nodes(self) -> list[Node]:
        return list(self._nodes)

    def number_of_nodes(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._graph

    def successors(self, node: Node) -> list[Node]:
        return list(self._graph.succ[node])

    def predecessors(self, node: Node) -> list[Node]:
        return list(self._graph.pred[node])

    def neighbors(self, node: Node) -> list[Node]:
        """Successors followed by predecessors not already listed."""
        seen = dict.fromkeys(self._graph.succ[node])
        for u in self._graph.pred[node]:
            seen.setdefault(u)
        return list(seen)

    def weight(self, u: Node, v: Node) -> float:
        """Weight of the arc u -> v (0.0 when absent)."""
        data = self._graph.succ[u].get(v)
        return data[WEIGHT] if data is not None else 0.0

    def self_weight(self, node: Node) -> float:
        return self.weight(node, node)

    def out_degree(self, node: Node) -> float:
        return self._out[node]

    def in_degree(self, node: Node) -> float:
        return self._in[node]

    def edges(self) -> Iterator[tuple[Node, Node, float]]:
        """Yield each arc once as (u, v, weight)."""
        yield from self._graph.edges(data=WEIGHT)

    def total_weight(self) -> float:
        return self._total

    def __repr__(self) -> str:
        return (
            f"WeightedDirected(nodes={len(self._nodes)}, "
            f"arcs={self._graph.number_of_edges()}, m={self._total})"
        )


WeightedGraph = Union[WeightedUndirected, WeightedDirected]


def as_weighted_graph(graph: nx.Graph | WeightedGraph, weight: str | None = "weight") -> WeightedGraph:
    """Wrap a NetworkX graph into the matching weighted accessor.

    The graph is copied into a simple Graph/DiGraph keeping node insertion
    order. Parallel edges of multigraphs are summed. Edges without the
    ``weight`` attribute (or all edges, when ``weight`` is None) weigh 1.

    Raises:
        TypeError: If ``graph`` is not a NetworkX graph.
        ConfigurationError: If an edge weight is negative, infinite or not a
            number.
    """
    if isinstance(graph, (WeightedUndirected, WeightedDirected)):
        return graph
    if not isinstance(graph, nx.Graph):
        raise TypeError(f"Expected a networkx graph, got {type(graph).__name__}")

    directed = graph.is_directed()
    normalized: nx.Graph = nx.DiGraph() if directed else nx.Graph()
    normalized.add_nodes_from(graph)

    edges = graph.edges(data=weight, default=1) if weight else (
        (u, v, 1) for u, v in graph.edges()
    )
    for u, v, w in edges:
        try:
            w = float(w)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Edge ({u!r}, {v!r}) has non-numeric weight {w!r}"
            ) from exc
        if not math.isfinite(w):
            raise ConfigurationError(
                f"Edge ({u!r}, {v!r}) has non-finite weight {w}"
            )
        if w < 0:
            raise ConfigurationError(
                f"Edge ({u!r}, {v!r}) has negative weight {w}"
            )
        if normalized.has_edge(u, v):
            normalized[u][v][WEIGHT] += w
        else:
            normalized.add_edge(u, v, weight=w)

    if graph.is_multigraph():
        logger.debug(
            "Collapsed multigraph: %d edges -> %d",
            graph.number_of_edges(), normalized.number_of_edges(),
        )

    if directed:
        return WeightedDirected(normalized)
    return WeightedUndirected(normalized)
