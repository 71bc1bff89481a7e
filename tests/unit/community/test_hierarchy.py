# tests/unit/community/test_hierarchy.py — v1
"""Tests for community/hierarchy.py — level arena, navigation and expansion."""

from __future__ import annotations

import networkx as nx
import pytest

from louvainkit.community.hierarchy import Hierarchy, reportable_score
from louvainkit.community.models import CommunityHierarchy
from louvainkit.community.modularity import UNDEFINED, modularity
from louvainkit.community.reducer import base_level, reduce_graph


@pytest.fixture
def clique_hierarchy(two_cliques) -> Hierarchy:
    """Three levels: pairs, then the two cliques."""
    h = Hierarchy.from_graph(two_cliques)
    pairs = reduce_graph(h.level(0), [[0, 1], [2, 3], [4, 5], [6, 7]])
    h.append(pairs)
    h.append(reduce_graph(pairs, [[0, 1], [2, 3]]))
    return h


class TestConstruction:
    def test_from_graph_has_base_only(self, two_cliques):
        h = Hierarchy.from_graph(two_cliques)
        assert len(h) == 1
        assert h.root == 0
        assert h.level(0).is_base

    def test_rejects_non_base_start(self, two_cliques):
        level = reduce_graph(two_cliques, [[0, 1, 2, 3], [4, 5, 6, 7]])
        with pytest.raises(ValueError):
            Hierarchy(level)

    def test_append_checks_chain(self, two_cliques):
        h = Hierarchy.from_graph(two_cliques)
        # Level 2 cannot follow a root at level 0.
        first = reduce_graph(base_level(two_cliques), [[0, 1, 2, 3], [4, 5, 6, 7]])
        second = reduce_graph(first, [[0, 1]])
        with pytest.raises(ValueError):
            h.append(second)

    def test_directed_flag(self, simple_directed, two_cliques):
        assert Hierarchy.from_graph(simple_directed).directed
        assert not Hierarchy.from_graph(two_cliques).directed


class TestNavigation:
    def test_root_is_coarsest(self, clique_hierarchy):
        assert clique_hierarchy.root == 2
        assert clique_hierarchy.level(2).number_of_nodes() == 2

    def test_finer_level(self, clique_hierarchy):
        assert clique_hierarchy.finer_level(2) == 1
        assert clique_hierarchy.finer_level(1) == 0
        assert clique_hierarchy.finer_level(0) is None

    def test_coarser_level(self, clique_hierarchy):
        assert clique_hierarchy.coarser_level(0) == 1
        assert clique_hierarchy.coarser_level(1) == 2
        assert clique_hierarchy.coarser_level(2) is None

    def test_iterates_root_to_base(self, clique_hierarchy):
        assert [level.index for level in clique_hierarchy] == [2, 1, 0]

    def test_levels_tuple(self, clique_hierarchy):
        assert [level.index for level in clique_hierarchy.levels] == [0, 1, 2]

    @pytest.mark.parametrize("index", [-1, 3])
    def test_unknown_level(self, clique_hierarchy, index):
        with pytest.raises(IndexError):
            clique_hierarchy.level(index)
        with pytest.raises(IndexError):
            clique_hierarchy.finer_level(index)
        with pytest.raises(IndexError):
            clique_hierarchy.communities_at_level(index)


class TestExpansion:
    def test_root_communities(self, clique_hierarchy):
        assert clique_hierarchy.communities_at_level() == {
            0: [0, 1, 2, 3],
            1: [4, 5, 6, 7],
        }

    def test_middle_level(self, clique_hierarchy):
        assert clique_hierarchy.communities(1) == [[0, 1], [2, 3], [4, 5], [6, 7]]

    def test_base_level_singletons(self, clique_hierarchy):
        assert clique_hierarchy.communities(0) == [[u] for u in range(8)]

    def test_expand_node(self, clique_hierarchy):
        assert clique_hierarchy.expand(2, 1) == [4, 5, 6, 7]
        assert clique_hierarchy.expand(1, 2) == [4, 5]
        assert clique_hierarchy.expand(0, 6) == [6]

    def test_expand_unknown_node(self, clique_hierarchy):
        with pytest.raises(KeyError):
            clique_hierarchy.expand(2, 5)

    def test_members_in_original_order(self, two_cliques):
        h = Hierarchy.from_graph(two_cliques)
        first = reduce_graph(h.level(0), [[0, 7], [1, 6], [2, 5], [3, 4]])
        h.append(first)
        h.append(reduce_graph(first, [[3, 0], [1, 2]]))
        assert h.communities() == [[0, 3, 4, 7], [1, 2, 5, 6]]

    def test_string_labels(self, two_cliques):
        g = nx.relabel_nodes(two_cliques, {u: f"n{u}" for u in two_cliques})
        h = Hierarchy.from_graph(g)
        pairs = reduce_graph(h.level(0), [["n0", "n1"], ["n2", "n3"], ["n4", "n5"], ["n6", "n7"]])
        h.append(pairs)
        h.append(reduce_graph(pairs, [[0, 1], [2, 3]]))
        assert h.communities(1) == [["n0", "n1"], ["n2", "n3"], ["n4", "n5"], ["n6", "n7"]]
        assert h.communities() == [["n0", "n1", "n2", "n3"], ["n4", "n5", "n6", "n7"]]
        assert h.expand(1, 2) == ["n4", "n5"]

    def test_offset_labels(self, two_cliques):
        g = nx.relabel_nodes(two_cliques, {u: u + 100 for u in two_cliques})
        h = Hierarchy.from_graph(g)
        h.append(reduce_graph(h.level(0), [[100, 101, 102, 103], [104, 105, 106, 107]]))
        assert h.communities_at_level() == {
            0: [100, 101, 102, 103],
            1: [104, 105, 106, 107],
        }

    def test_shuffled_insertion_order(self):
        g = nx.Graph()
        g.add_nodes_from([0, 4, 1, 5, 2, 6, 3, 7])
        g.add_edges_from([(0, 1), (2, 3), (4, 5), (6, 7), (1, 2), (5, 6)])
        h = Hierarchy.from_graph(g)
        pairs = reduce_graph(h.level(0), [[0, 1], [2, 3], [4, 5], [6, 7]])
        h.append(pairs)
        h.append(reduce_graph(pairs, [[0, 2], [1, 3]]))
        # Members follow the graph's own node order, not sorted labels.
        assert h.communities(1) == [[0, 1], [4, 5], [2, 3], [6, 7]]
        assert h.communities() == [[0, 1, 2, 3], [4, 5, 6, 7]]


class TestScores:
    def test_score_matches_expanded_partition(self, clique_hierarchy, two_cliques):
        for level in clique_hierarchy:
            expected = modularity(two_cliques, clique_hierarchy.communities(level.index))
            assert clique_hierarchy.score(level.index) == pytest.approx(expected)

    def test_default_score_is_root(self, clique_hierarchy):
        assert clique_hierarchy.score() == clique_hierarchy.score(2)

    def test_scores_root_first(self, clique_hierarchy):
        scores = clique_hierarchy.scores()
        assert scores[0] == clique_hierarchy.score(2)
        assert scores[-1] == clique_hierarchy.score(0)

    def test_structure_pair(self, clique_hierarchy):
        communities, q = clique_hierarchy.structure(1)
        assert communities == clique_hierarchy.communities(1)
        assert q == clique_hierarchy.score(1)

    def test_resolution_used(self, two_cliques):
        low = Hierarchy.from_graph(two_cliques, resolution=0.5)
        high = Hierarchy.from_graph(two_cliques, resolution=2.0)
        assert low.score() == pytest.approx(modularity(two_cliques, resolution=0.5))
        assert high.score() == pytest.approx(modularity(two_cliques, resolution=2.0))

    def test_reportable_score(self):
        assert reportable_score(0.25) == 0.25
        assert reportable_score(UNDEFINED) is None
        assert reportable_score(float("inf")) is None


class TestReport:
    def test_to_report(self, clique_hierarchy):
        clique_hierarchy.seed = 5
        report = clique_hierarchy.to_report()
        assert isinstance(report, CommunityHierarchy)
        assert report.num_levels == 3
        assert [lv.level for lv in report.levels] == [2, 1, 0]
        assert report.total_communities == 2
        assert report.seed == 5
        assert report.directed is False
        assert report.modularity == pytest.approx(clique_hierarchy.score())

    def test_report_communities(self, clique_hierarchy):
        root = clique_hierarchy.to_report().root
        assert root is not None
        assert root.finer_level == 1
        assert [c.members for c in root.communities] == [[0, 1, 2, 3], [4, 5, 6, 7]]
        assert [c.size for c in root.communities] == [4, 4]

    def test_undefined_report(self, edgeless_graph):
        report = Hierarchy.from_graph(edgeless_graph).to_report()
        assert report.modularity is None
        assert report.levels[0].modularity is None
        assert report.total_communities == 4

    def test_report_is_json_serializable(self, clique_hierarchy):
        dumped = clique_hierarchy.to_report().model_dump_json()
        assert '"num_levels":3' in dumped
