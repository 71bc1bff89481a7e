# tests/conftest.py — v1
"""Shared test fixtures: small directed/undirected graphs and Zachary's karate club.

All graphs are built in memory with NetworkX; nothing touches disk.
"""

from __future__ import annotations

import logging

import networkx as nx
import pytest

from louvainkit.logging.context import clear_context


# === Graph builders ===


def build_simple_directed() -> nx.DiGraph:
    """Five-node directed graph whose best split is {0, 1} / {2, 3, 4}."""
    g = nx.DiGraph()
    g.add_nodes_from(range(5))
    for u, v in [(0, 1), (1, 0), (1, 4), (2, 1), (3, 0), (3, 4), (4, 2)]:
        g.add_edge(u, v, weight=1.0)
    return g


def build_directed_zachary() -> nx.DiGraph:
    """Karate club with each edge pointing from lower to higher PageRank.

    Nodes 5 and 6 are structurally equivalent and share a rank, so their
    edge is kept in both directions: 79 arcs in total.
    """
    karate = nx.karate_club_graph()
    undirected = nx.Graph()
    undirected.add_nodes_from(sorted(karate))
    undirected.add_edges_from(karate.edges())
    rank = nx.pagerank(undirected, alpha=0.85, tol=1e-10, weight=None)

    g = nx.DiGraph()
    g.add_nodes_from(sorted(karate))
    for u, v in undirected.edges():
        if (rank[u], u) <= (rank[v], v):
            g.add_edge(u, v, weight=1.0)
        else:
            g.add_edge(v, u, weight=1.0)
    g.add_edge(5, 6, weight=1.0)
    g.add_edge(6, 5, weight=1.0)
    return g


def build_two_cliques() -> nx.Graph:
    """Two 4-cliques {0..3} and {4..7} joined by the bridge 3-4."""
    g = nx.Graph()
    g.add_nodes_from(range(8))
    for group in ([0, 1, 2, 3], [4, 5, 6, 7]):
        for i, u in enumerate(group):
            for v in group[i + 1:]:
                g.add_edge(u, v, weight=1.0)
    g.add_edge(3, 4, weight=1.0)
    return g


# === FIXTURES: Graphs ===


@pytest.fixture
def simple_directed() -> nx.DiGraph:
    return build_simple_directed()


@pytest.fixture
def zachary_directed() -> nx.DiGraph:
    return build_directed_zachary()


@pytest.fixture
def zachary_communities() -> list[list[int]]:
    """Four-way split of the karate club with maximal undirected modularity."""
    return [
        [0, 1, 2, 3, 7, 11, 12, 13, 17, 19, 21],
        [4, 5, 6, 10, 16],
        [8, 9, 14, 15, 18, 20, 22, 26, 29, 30, 32, 33],
        [23, 24, 25, 27, 28, 31],
    ]


@pytest.fixture
def two_cliques() -> nx.Graph:
    return build_two_cliques()


@pytest.fixture
def edgeless_graph() -> nx.Graph:
    g = nx.Graph()
    g.add_nodes_from(range(4))
    return g


@pytest.fixture
def weighted_undirected() -> nx.Graph:
    """Small weighted graph with a self-loop."""
    g = nx.Graph()
    g.add_weighted_edges_from([
        (0, 1, 2.0), (1, 2, 0.5), (2, 0, 1.5),
        (2, 3, 0.25), (3, 4, 3.0), (4, 5, 1.0), (5, 3, 2.0),
        (5, 5, 0.75),
    ])
    return g


# === FIXTURES: Logging context ===


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()


@pytest.fixture(autouse=True)
def _reset_louvainkit_logger():
    root = logging.getLogger("louvainkit")
    level = root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(level)
