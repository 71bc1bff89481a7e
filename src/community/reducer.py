# src/community/reducer.py — v1
"""Graph aggregation: collapse a partition into a coarser weighted graph.

Each community becomes one node, numbered by first appearance of its
members in the finer graph's node order. Weights between communities are
summed (per direction for directed graphs); weights inside a community
become a self-loop, each undirected edge counted once, so the total weight
of the reduced graph equals the total weight of the finer graph.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import networkx as nx

from louvainkit.community.modularity import partition_index
from louvainkit.graph.accessor import (
    WEIGHT,
    Node,
    WeightedDirected,
    WeightedGraph,
    WeightedUndirected,
    as_weighted_graph,
)

logger = logging.getLogger(__name__)

WEIGHT_REL_TOL = 1e-9


@dataclass(frozen=True, eq=False)
class Level:
    """One level of a community hierarchy.

    Attributes:
        index: Position in the hierarchy arena (0 = original graph).
        graph: Weighted graph of this level. Above level 0 its nodes are
            0..k-1, one per community of the finer level.
        members: For each node of this level, the finer-level nodes it
            aggregates. None at level 0.
        finer: Index of the level this one was reduced from, None at level 0.
    """

    index: int
    graph: WeightedGraph
    members: tuple[tuple[Node, ...], ...] | None = None
    finer: int | None = None

    @property
    def is_base(self) -> bool:
        return self.finer is None

    def number_of_nodes(self) -> int:
        return self.graph.number_of_nodes()

    def partition(self) -> list[list[Node]]:
        """The finer-level partition that produced this level."""
        if self.members is None:
            return [[u] for u in self.graph.nodes()]
        return [list(c) for c in self.members]


def base_level(graph: nx.Graph | WeightedGraph, weight: str | None = "weight") -> Level:
    """Wrap an input graph as level 0 of a hierarchy."""
    return Level(index=0, graph=as_weighted_graph(graph, weight=weight))


def reduce_graph(
    graph: nx.Graph | WeightedGraph | Level,
    communities: Sequence[Iterable[Node]] | None = None,
    weight: str | None = "weight",
) -> Level:
    """Aggregate ``communities`` of ``graph`` into the next hierarchy level.

    Args:
        graph: A Level, weighted accessor or NetworkX graph. Non-Level input
            is treated as level 0.
        communities: Partition of the graph's nodes. None reduces by the
            singleton partition, reproducing the graph's weights.
        weight: Edge attribute for raw NetworkX graphs.

    Returns:
        Level whose ``finer`` points at the input level.

    Raises:
        NotAPartition: If ``communities`` is not a partition of the nodes.
        AssertionError: If the reduced graph lost or gained total weight.
    """
    finer = graph if isinstance(graph, Level) else base_level(graph, weight=weight)
    g = finer.graph
    nodes = g.nodes()

    if communities is None:
        node2com = {u: i for i, u in enumerate(nodes)}
    else:
        _, node2com = partition_index(g, communities)

    # Relabel communities by first appearance in canonical node order.
    relabel: dict[int, int] = {}
    for u in nodes:
        relabel.setdefault(node2com[u], len(relabel))
    members: list[list[Node]] = [[] for _ in relabel]
    agg: dict[Node, int] = {}
    for u in nodes:
        a = relabel[node2com[u]]
        agg[u] = a
        members[a].append(u)

    reduced: nx.Graph = nx.DiGraph() if g.directed else nx.Graph()
    reduced.add_nodes_from(range(len(members)))
    for u, v, w in g.edges():
        a, b = agg[u], agg[v]
        if reduced.has_edge(a, b):
            reduced[a][b][WEIGHT] += w
        else:
            reduced.add_edge(a, b, weight=w)

    accessor: WeightedGraph = (
        WeightedDirected(reduced) if g.directed else WeightedUndirected(reduced)
    )
    before, after = g.total_weight(), accessor.total_weight()
    if not math.isclose(before, after, rel_tol=WEIGHT_REL_TOL, abs_tol=1e-12):
        raise AssertionError(
            f"reduction changed total weight: {before!r} -> {after!r}"
        )

    logger.debug(
        "Reduced level %d: %d nodes -> %d communities",
        finer.index, len(nodes), len(members),
    )
    return Level(
        index=finer.index + 1,
        graph=accessor,
        members=tuple(tuple(c) for c in members),
        finer=finer.index,
    )
