# src/community/profile.py — v1
"""Resolution profile: best Louvain partition across a range of resolutions."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import networkx as nx

from louvainkit.community.hierarchy import reportable_score
from louvainkit.community.louvain import DEFAULT_ITERATIONS, run_louvain
from louvainkit.community.models import ResolutionProfile
from louvainkit.community.modularity import check_resolution
from louvainkit.graph.accessor import WeightedGraph, as_weighted_graph

logger = logging.getLogger(__name__)


def profile_resolutions(
    graph: nx.Graph | WeightedGraph,
    resolutions: Iterable[float],
    seed: int | None = None,
    iterations: int = DEFAULT_ITERATIONS,
    weight: str | None = "weight",
) -> list[ResolutionProfile]:
    """Run Louvain at each resolution and summarise the selected root level.

    Every resolution is run with the same master seed, so entries are
    reproducible independently of each other.

    Raises:
        ConfigurationError: If any resolution is <= 0 (checked before any run).
    """
    resolutions = list(resolutions)
    for resolution in resolutions:
        check_resolution(resolution)

    g = as_weighted_graph(graph, weight=weight)
    profile: list[ResolutionProfile] = []
    for resolution in resolutions:
        hierarchy = run_louvain(g, resolution=resolution, seed=seed, iterations=iterations)
        entry = ResolutionProfile(
            resolution=resolution,
            modularity=reportable_score(hierarchy.score()),
            num_communities=hierarchy.level(hierarchy.root).number_of_nodes(),
            num_levels=len(hierarchy),
        )
        logger.debug(
            "resolution=%g: %d communities, Q=%s",
            resolution, entry.num_communities, entry.modularity,
        )
        profile.append(entry)
    return profile
