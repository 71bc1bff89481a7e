# src/community/models.py — v1
"""Report models: Community, LevelReport, CommunityHierarchy, ResolutionProfile.

Serializable snapshots of a Hierarchy. Undefined modularity is reported as
None since JSON has no NaN.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Community(BaseModel):
    """Single community at one hierarchy level, in original-graph nodes."""

    community_id: int
    level: int
    members: list[Any] = Field(default_factory=list)
    size: int = 0


class LevelReport(BaseModel):
    """One hierarchy level with its score."""

    level: int
    finer_level: int | None = None
    num_communities: int = 0
    modularity: float | None = None
    communities: list[Community] = Field(default_factory=list)


class CommunityHierarchy(BaseModel):
    """Full hierarchical community structure from Louvain, coarsest level first."""

    levels: list[LevelReport] = Field(default_factory=list)
    num_levels: int = 0
    resolution: float = 1.0
    seed: int | None = None
    iterations: int = 1
    directed: bool = False
    total_communities: int = 0
    modularity: float | None = None

    @property
    def root(self) -> LevelReport | None:
        return self.levels[0] if self.levels else None


class ResolutionProfile(BaseModel):
    """Best Louvain result for one resolution value."""

    resolution: float
    modularity: float | None = None
    num_communities: int = 0
    num_levels: int = 0
