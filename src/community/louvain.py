# src/community/louvain.py — v1
"""Multilevel Louvain driver with randomized restarts.

One run alternates the local moving phase and graph reduction:

    level 0 = input graph
    repeat:
        partition = local_move(current level)
        if every node stayed alone: stop, current level is the root
        current = reduce_graph(current, partition)

A run that makes no move on level 0 returns a single-level hierarchy
(no community structure). run_louvain() repeats runs with independent random
streams spawned from one seed and keeps the hierarchy whose root has the
greatest modularity; the first run reaching that score wins. A graph whose
root modularity is undefined (zero total weight) stops the restarts at once.
"""

from __future__ import annotations

import logging
import math

import networkx as nx
import numpy as np

from louvainkit.community.hierarchy import Hierarchy
from louvainkit.community.local_mover import GAIN_TOLERANCE, LocalMover
from louvainkit.community.modularity import check_resolution, is_undefined
from louvainkit.community.reducer import reduce_graph
from louvainkit.config.settings import ConfigurationError
from louvainkit.graph.accessor import WeightedGraph, as_weighted_graph
from louvainkit.logging.context import set_restart_context

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 20

SeedLike = int | np.random.SeedSequence | None


def louvain_levels(
    graph: nx.Graph | WeightedGraph,
    resolution: float,
    rng: np.random.Generator,
    tolerance: float = GAIN_TOLERANCE,
    restart: int | None = None,
) -> Hierarchy:
    """Build one hierarchy, finest level first, using ``rng`` throughout."""
    hierarchy = Hierarchy.from_graph(graph, resolution=resolution)
    current = hierarchy.level(0)

    while True:
        set_restart_context(restart, current.index)
        mover = LocalMover(current.graph, resolution=resolution, tolerance=tolerance)
        communities = mover.run(rng)
        if len(communities) == current.number_of_nodes():
            if current.index == 0:
                logger.debug("No beneficial move on the original graph")
            break
        current = reduce_graph(current, communities)
        hierarchy.append(current)

    return hierarchy


def _seed_sequence(seed: SeedLike) -> np.random.SeedSequence:
    if isinstance(seed, np.random.SeedSequence):
        return seed
    return np.random.SeedSequence(seed)


def run_louvain(
    graph: nx.Graph | WeightedGraph,
    resolution: float = 1.0,
    seed: SeedLike = None,
    iterations: int = DEFAULT_ITERATIONS,
    weight: str | None = "weight",
    tolerance: float = GAIN_TOLERANCE,
) -> Hierarchy:
    """Compute the best Louvain community hierarchy over randomized restarts.

    Args:
        graph: Directed or undirected NetworkX graph, or a weighted accessor.
        resolution: Null-model scaling factor, > 0. Values above 1 favour
            more, smaller communities.
        seed: Master seed. Restart i draws from the i-th stream spawned from
            it, so a fixed (graph, resolution, seed, iterations) always
            gives the same hierarchy. None draws fresh OS entropy.
        iterations: Number of randomized restarts, >= 1.
        weight: Edge attribute holding weights (missing weights count as 1).
        tolerance: Minimum modularity gain for a node move.

    Returns:
        Hierarchy with the greatest root modularity.

    Raises:
        ConfigurationError: If resolution <= 0, iterations < 1, the graph has
            no nodes, or an edge weight is negative.
    """
    check_resolution(resolution)
    if iterations < 1:
        raise ConfigurationError(f"iterations must be >= 1, got {iterations}")
    g = as_weighted_graph(graph, weight=weight)
    if g.number_of_nodes() == 0:
        raise ConfigurationError("graph has no nodes")

    seed_seq = _seed_sequence(seed)
    best: Hierarchy | None = None
    best_q = -math.inf
    best_restart = 0

    try:
        for restart, child in enumerate(seed_seq.spawn(iterations)):
            rng = np.random.default_rng(child)
            hierarchy = louvain_levels(
                g, resolution, rng, tolerance=tolerance, restart=restart
            )
            q = hierarchy.score()

            if is_undefined(q):
                if best is None:
                    best, best_restart = hierarchy, restart
                logger.info(
                    "Root modularity undefined (total weight %s); no further restarts",
                    g.total_weight(),
                )
                break

            logger.debug(
                "Restart %d: %d levels, %d communities, Q=%.6f",
                restart, len(hierarchy), hierarchy.level(hierarchy.root).number_of_nodes(), q,
            )
            if q > best_q:
                best, best_q, best_restart = hierarchy, q, restart
    finally:
        set_restart_context(None)

    assert best is not None
    best.seed = seed if isinstance(seed, int) else None
    best.iterations = iterations
    logger.info(
        "Louvain selected restart %d/%d: %d levels, %d communities, Q=%s",
        best_restart + 1, iterations, len(best),
        best.level(best.root).number_of_nodes(), best.score(),
    )
    return best
