# src/community/hierarchy.py — v1
"""Community hierarchy: an arena of levels from the original graph to the root.

Level 0 is the input graph (every node its own community). Level k+1 is the
reduction of level k by the partition found on it. Each level records the
index of its finer level; the hierarchy keeps the coarser indices, so both
directions are O(1). Community membership at any level is recovered by
expanding aggregate nodes down to level 0.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator

import networkx as nx

from louvainkit.community.models import Community, CommunityHierarchy, LevelReport
from louvainkit.community.modularity import check_resolution, is_undefined, modularity
from louvainkit.community.reducer import Level, base_level
from louvainkit.graph.accessor import Node, WeightedGraph

logger = logging.getLogger(__name__)


class Hierarchy:
    """Chain of levels produced by one Louvain run."""

    def __init__(self, base: Level, resolution: float = 1.0) -> None:
        if base.index != 0 or not base.is_base:
            raise ValueError("hierarchy must start from a base level")
        check_resolution(resolution)
        self.resolution = resolution
        self.seed: int | None = None
        self.iterations = 1
        self._levels: list[Level] = [base]
        self._coarser: list[int | None] = [None]
        self._scores: dict[int, float] = {}
        self._expanded: dict[int, list[list[Node]]] = {}

    @classmethod
    def from_graph(
        cls,
        graph: nx.Graph | WeightedGraph,
        resolution: float = 1.0,
        weight: str | None = "weight",
    ) -> Hierarchy:
        return cls(base_level(graph, weight=weight), resolution=resolution)

    def append(self, level: Level) -> None:
        """Add the next coarser level, reduced from the current root."""
        if level.index != len(self._levels) or level.finer != self.root:
            raise ValueError(
                f"level {level.index} (finer={level.finer}) does not extend root {self.root}"
            )
        self._coarser[self.root] = level.index
        self._levels.append(level)
        self._coarser.append(None)

    # --- Navigation ---

    @property
    def levels(self) -> tuple[Level, ...]:
        return tuple(self._levels)

    @property
    def root(self) -> int:
        """Index of the coarsest level."""
        return len(self._levels) - 1

    @property
    def directed(self) -> bool:
        return self._levels[0].graph.directed

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> Iterator[Level]:
        """Iterate levels from the root down to the original graph."""
        index: int | None = self.root
        while index is not None:
            level = self._levels[index]
            yield level
            index = level.finer

    def level(self, index: int) -> Level:
        if not 0 <= index < len(self._levels):
            raise IndexError(f"no level {index} in hierarchy of {len(self._levels)}")
        return self._levels[index]

    def finer_level(self, index: int) -> int | None:
        """Index of the next finer level, or None for the original graph."""
        return self.level(index).finer

    def coarser_level(self, index: int) -> int | None:
        """Index of the next coarser level, or None for the root."""
        self.level(index)
        return self._coarser[index]

    # --- Queries ---

    def score(self, index: int | None = None) -> float:
        """Modularity of the partition represented by a level (default root).

        May be UNDEFINED (NaN) for graphs with zero total weight.
        """
        index = self.root if index is None else index
        if index not in self._scores:
            self._scores[index] = modularity(
                self.level(index), resolution=self.resolution
            )
        return self._scores[index]

    def expand(self, index: int, node: Node) -> list[Node]:
        """Original-graph nodes aggregated into ``node`` of level ``index``."""
        level = self.level(index)
        if node not in level.graph:
            raise KeyError(f"node {node!r} not in level {index}")
        if level.members is None:
            return [node]
        return self._expansion(index)[node]

    def _expansion(self, index: int) -> list[list[Node]]:
        if index in self._expanded:
            return self._expanded[index]
        level = self._levels[index]
        if level.members is None:
            expanded = [[u] for u in level.graph.nodes()]
        elif self._levels[level.finer].is_base:
            # Members of a level reduced from the original graph are
            # original node labels already, in original order.
            expanded = [list(group) for group in level.members]
        else:
            # Above level 1, members are aggregate ids of the finer level.
            finer = self._expansion(level.finer)
            order = self._base_order()
            expanded = []
            for group in level.members:
                nodes = [u for child in group for u in finer[child]]
                nodes.sort(key=order.__getitem__)
                expanded.append(nodes)
        self._expanded[index] = expanded
        return expanded

    def _base_order(self) -> dict[Node, int]:
        return {u: i for i, u in enumerate(self._levels[0].graph.nodes())}

    def communities_at_level(self, index: int | None = None) -> dict[int, list[Node]]:
        """Map each community of a level to its original nodes (default root).

        Community ids are the level's aggregate node ids; at level 0 they are
        positions in the original node order. Members follow original order.
        """
        index = self.root if index is None else index
        self.level(index)
        return {i: list(nodes) for i, nodes in enumerate(self._expansion(index))}

    def communities(self, index: int | None = None) -> list[list[Node]]:
        """Communities of a level as a list of original-node lists."""
        return list(self.communities_at_level(index).values())

    def structure(self, index: int | None = None) -> tuple[list[list[Node]], float]:
        """(communities, score) pair for a level."""
        return self.communities(index), self.score(index)

    def scores(self) -> list[float]:
        """Scores from the root down to the original graph."""
        return [self.score(level.index) for level in self]

    # --- Reporting ---

    def to_report(self) -> CommunityHierarchy:
        """Serializable snapshot, coarsest level first."""
        reports: list[LevelReport] = []
        for level in self:
            q = self.score(level.index)
            communities = [
                Community(
                    community_id=cid,
                    level=level.index,
                    members=members,
                    size=len(members),
                )
                for cid, members in self.communities_at_level(level.index).items()
            ]
            reports.append(LevelReport(
                level=level.index,
                finer_level=level.finer,
                num_communities=len(communities),
                modularity=reportable_score(q),
                communities=communities,
            ))

        return CommunityHierarchy(
            levels=reports,
            num_levels=len(reports),
            resolution=self.resolution,
            seed=self.seed,
            iterations=self.iterations,
            directed=self.directed,
            total_communities=reports[0].num_communities,
            modularity=reportable_score(self.score()),
        )

    def __repr__(self) -> str:
        q = self.score()
        return (
            f"Hierarchy(levels={len(self)}, root_communities="
            f"{self._levels[-1].number_of_nodes()}, q={q:.6g})"
        )


def reportable_score(q: float) -> float | None:
    if is_undefined(q) or math.isinf(q):
        return None
    return q
