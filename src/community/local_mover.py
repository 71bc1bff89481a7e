# src/community/local_mover.py — v1
"""Local moving phase of Louvain.

Starts from one community per node and sweeps the nodes in a random order,
moving each node into the neighbouring community with the largest strictly
positive modularity gain. Equal best gains are broken uniformly at random.
Sweeps repeat until a full sweep makes no move.

Gain of moving node i into community C, after removing i from its own
community (m = total weight):

    undirected:  w(i, C) / m - resolution * k_i * Stot_C / (2 m^2)
    directed:    (w(i->C) + w(C->i)) / m
                 - resolution * (kout_i * Sin_C + kin_i * Sout_C) / m^2
"""

from __future__ import annotations

import logging
from collections import defaultdict

import numpy as np

from louvainkit.community.modularity import check_resolution
from louvainkit.graph.accessor import Node, WeightedGraph

logger = logging.getLogger(__name__)

# Gains and ties are compared with this absolute slack so float noise
# cannot produce zero-gain moves.
GAIN_TOLERANCE = 1e-12


class LocalMover:
    """Mutable community assignment for one level of one restart."""

    def __init__(
        self,
        graph: WeightedGraph,
        resolution: float = 1.0,
        tolerance: float = GAIN_TOLERANCE,
    ) -> None:
        check_resolution(resolution)
        self.graph = graph
        self.resolution = resolution
        self.tolerance = tolerance
        self.nodes: list[Node] = graph.nodes()
        self.m = graph.total_weight()
        self.node2com: dict[Node, int] = {u: i for i, u in enumerate(self.nodes)}
        self.moves = 0
        self.sweeps = 0

        self._nbrs = {u: self._neighbor_weights(u) for u in self.nodes}
        if graph.directed:
            self._k_out = {u: graph.out_degree(u) for u in self.nodes}
            self._k_in = {u: graph.in_degree(u) for u in self.nodes}
            self._s_out = [self._k_out[u] for u in self.nodes]
            self._s_in = [self._k_in[u] for u in self.nodes]
        else:
            self._k = {u: graph.degree(u) for u in self.nodes}
            self._s_tot = [self._k[u] for u in self.nodes]

    def _neighbor_weights(self, u: Node) -> dict[Node, float]:
        """Weights to neighbours in both directions, self-loops excluded."""
        g = self.graph
        nbrs: dict[Node, float] = defaultdict(float)
        if g.directed:
            for v in g.successors(u):
                if v != u:
                    nbrs[v] += g.weight(u, v)
            for v in g.predecessors(u):
                if v != u:
                    nbrs[v] += g.weight(v, u)
        else:
            for v in g.neighbors(u):
                if v != u:
                    nbrs[v] += g.weight(u, v)
        return nbrs

    def _detach(self, u: Node, com: int) -> None:
        if self.graph.directed:
            self._s_out[com] -= self._k_out[u]
            self._s_in[com] -= self._k_in[u]
        else:
            self._s_tot[com] -= self._k[u]

    def _attach(self, u: Node, com: int) -> None:
        if self.graph.directed:
            self._s_out[com] += self._k_out[u]
            self._s_in[com] += self._k_in[u]
        else:
            self._s_tot[com] += self._k[u]

    def _expected(self, u: Node, com: int) -> float:
        """Null-model cost of placing detached node ``u`` in ``com``."""
        m = self.m
        if self.graph.directed:
            return self.resolution * (
                self._k_out[u] * self._s_in[com] + self._k_in[u] * self._s_out[com]
            ) / (m * m)
        return self.resolution * self._k[u] * self._s_tot[com] / (2 * m * m)

    def move(self, u: Node, rng: np.random.Generator) -> bool:
        """Relocate ``u`` to its best neighbouring community. True if it moved."""
        current = self.node2com[u]
        weights2com: dict[int, float] = defaultdict(float)
        for v, w in self._nbrs[u].items():
            weights2com[self.node2com[v]] += w

        self._detach(u, current)
        remove_cost = -weights2com.get(current, 0.0) / self.m + self._expected(u, current)

        best_gain = 0.0
        candidates: list[int] = []
        for com, wt in weights2com.items():
            if com == current:
                continue
            gain = remove_cost + wt / self.m - self._expected(u, com)
            if gain <= self.tolerance:
                continue
            if not candidates or gain > best_gain + self.tolerance:
                best_gain = gain
                candidates = [com]
            elif gain >= best_gain - self.tolerance:
                candidates.append(com)

        if not candidates:
            target = current
        elif len(candidates) == 1:
            target = candidates[0]
        else:
            target = candidates[int(rng.integers(len(candidates)))]

        self._attach(u, target)
        if target == current:
            return False
        self.node2com[u] = target
        return True

    def sweep(self, rng: np.random.Generator) -> int:
        """Visit every node once in a fresh random order; return moves made."""
        moved = 0
        for i in rng.permutation(len(self.nodes)):
            if self.move(self.nodes[int(i)], rng):
                moved += 1
        self.sweeps += 1
        self.moves += moved
        return moved

    def run(self, rng: np.random.Generator) -> list[list[Node]]:
        """Sweep until a local optimum is reached and return the communities."""
        if self.m == 0:
            logger.debug("Zero total weight: no moves possible")
            return self.communities()
        while self.sweep(rng) > 0:
            pass
        logger.debug(
            "Local optimum after %d sweeps, %d moves: %d communities from %d nodes",
            self.sweeps, self.moves, len(set(self.node2com.values())), len(self.nodes),
        )
        return self.communities()

    def communities(self) -> list[list[Node]]:
        """Current communities, ordered by first member in canonical node order."""
        groups: dict[int, list[Node]] = {}
        for u in self.nodes:
            groups.setdefault(self.node2com[u], []).append(u)
        return list(groups.values())


def local_move(
    graph: WeightedGraph,
    resolution: float = 1.0,
    rng: np.random.Generator | None = None,
    tolerance: float = GAIN_TOLERANCE,
) -> list[list[Node]]:
    """Run the local moving phase on ``graph`` from singleton communities.

    Args:
        graph: Weighted accessor (one hierarchy level).
        resolution: Null-model scaling factor, > 0.
        rng: Source of visit orders and tie-breaks. A fixed generator state
            gives a fixed sequence of moves.
        tolerance: Minimum gain for a move; also the tie slack.

    Returns:
        Partition of the graph's nodes at a local optimum.
    """
    if rng is None:
        rng = np.random.default_rng()
    return LocalMover(graph, resolution=resolution, tolerance=tolerance).run(rng)
