# src/community/modularity.py — v1
"""Modularity evaluator for directed and undirected weighted graphs.

Undirected (m = total edge weight, self-loops counted once):

    Q = sum_c [ W_c / m - resolution * (K_c / 2m)^2 ]

Directed (m = total arc weight):

    Q = (1/m) * sum_c [ W_c - resolution * Kout_c * Kin_c / m ]

W_c is the weight of edges with both ends in community c, K_c the summed
weighted degree of its members. Q is returned normalized by m. A graph with
zero total weight has no defined modularity and scores UNDEFINED (NaN).
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from networkx.algorithms.community.quality import NotAPartition

from louvainkit.config.settings import ConfigurationError
from louvainkit.graph.accessor import Node, WeightedGraph, as_weighted_graph

if TYPE_CHECKING:
    import networkx as nx

    from louvainkit.community.reducer import Level

UNDEFINED = math.nan


def is_undefined(q: float) -> bool:
    """True if ``q`` is the undefined modularity sentinel."""
    return math.isnan(q)


def check_resolution(resolution: float) -> None:
    if not resolution > 0:
        raise ConfigurationError(f"resolution must be > 0, got {resolution}")


def resolve_graph(graph: nx.Graph | WeightedGraph | Level, weight: str | None = "weight") -> WeightedGraph:
    """Return the weighted accessor behind a graph, accessor or hierarchy level."""
    from louvainkit.community.reducer import Level

    if isinstance(graph, Level):
        return graph.graph
    return as_weighted_graph(graph, weight=weight)


def partition_index(
    graph: WeightedGraph,
    communities: Iterable[Iterable[Node]],
) -> tuple[list[list[Node]], dict[Node, int]]:
    """Validate a partition of ``graph`` and index each node's community.

    Empty communities are dropped.

    Raises:
        NotAPartition: If a node is unknown, repeated, or left uncovered.
    """
    parts: list[list[Node]] = []
    node2com: dict[Node, int] = {}
    for community in communities:
        members = list(community)
        if not members:
            continue
        idx = len(parts)
        for u in members:
            if u not in graph or u in node2com:
                raise NotAPartition(graph.graph, communities)
            node2com[u] = idx
        parts.append(members)

    if len(node2com) != graph.number_of_nodes():
        raise NotAPartition(graph.graph, communities)
    return parts, node2com


def modularity(
    graph: nx.Graph | WeightedGraph | Level,
    communities: Sequence[Iterable[Node]] | None = None,
    resolution: float = 1.0,
    weight: str | None = "weight",
) -> float:
    """Compute the modularity of a partition of ``graph``.

    Args:
        graph: NetworkX graph, weighted accessor, or hierarchy Level.
        communities: Partition of the graph's nodes. None scores every node
            as its own community, which for a Level is the partition the
            level represents.
        resolution: Null-model scaling; 1.0 is classical modularity.
        weight: Edge attribute for raw NetworkX graphs.

    Returns:
        Q normalized by total weight, or UNDEFINED when total weight is 0.

    Raises:
        ConfigurationError: If resolution <= 0.
        NotAPartition: If ``communities`` is not a partition of the nodes.
    """
    check_resolution(resolution)
    g = resolve_graph(graph, weight=weight)

    if communities is None:
        parts = [[u] for u in g.nodes()]
        node2com = {u: i for i, u in enumerate(g.nodes())}
    else:
        parts, node2com = partition_index(g, communities)

    m = g.total_weight()
    if m == 0:
        return UNDEFINED

    internal = [0.0] * len(parts)
    for u, v, w in g.edges():
        c = node2com[u]
        if c == node2com[v]:
            internal[c] += w

    if g.directed:
        k_out = [0.0] * len(parts)
        k_in = [0.0] * len(parts)
        for u, c in node2com.items():
            k_out[c] += g.out_degree(u)
            k_in[c] += g.in_degree(u)
        q = sum(
            internal[c] - resolution * k_out[c] * k_in[c] / m
            for c in range(len(parts))
        )
        return q / m

    k = [0.0] * len(parts)
    for u, c in node2com.items():
        k[c] += g.degree(u)
    return sum(
        internal[c] / m - resolution * (k[c] / (2 * m)) ** 2
        for c in range(len(parts))
    )
