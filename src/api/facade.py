# src/api/facade.py — v1
"""Public API facade — single entry point for community detection.

Usage:
    from louvainkit.api.facade import detect_communities
    report = detect_communities(graph)
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from louvainkit.community.louvain import run_louvain
from louvainkit.community.models import CommunityHierarchy
from louvainkit.config.settings import Settings
from louvainkit.logging.context import clear_context, set_run_context
from louvainkit.logging.logger import setup_logging_from_settings

if TYPE_CHECKING:
    import networkx as nx

logger = logging.getLogger(__name__)


def detect_communities(
    graph: nx.Graph,
    settings: Settings | None = None,
    **overrides: object,
) -> CommunityHierarchy:
    """Run Louvain on ``graph`` with configured defaults and return a report.

    Args:
        graph: Directed or undirected NetworkX graph.
        settings: Global settings. Loaded from .env if None. Its log_*
            fields configure logging on the first call, unless the caller
            has already attached handlers to the "louvainkit" logger.
        **overrides: Settings fields to override for this call
            (e.g. ``louvain_resolution=2.0``).

    Returns:
        CommunityHierarchy report, coarsest level first.

    Raises:
        ConfigurationError: If settings are invalid or the graph is empty.
    """
    settings = settings or Settings()
    settings = _apply_overrides(settings, overrides)
    _ensure_logging(settings)

    run_id = _generate_run_id()
    set_run_context(run_id)
    logger.info(
        "Starting Louvain: run_id=%s, nodes=%d, edges=%d, resolution=%s, iterations=%d",
        run_id, graph.number_of_nodes(), graph.number_of_edges(),
        settings.louvain_resolution, settings.louvain_iterations,
    )

    try:
        hierarchy = run_louvain(
            graph,
            resolution=settings.louvain_resolution,
            seed=settings.louvain_seed,
            iterations=settings.louvain_iterations,
            weight=settings.louvain_weight_attr,
            tolerance=settings.louvain_gain_tolerance,
        )
        report = hierarchy.to_report()
    finally:
        clear_context()

    logger.info(
        "Louvain complete: run_id=%s, levels=%d, communities=%d, modularity=%s",
        run_id, report.num_levels, report.total_communities, report.modularity,
    )
    return report


def _apply_overrides(settings: Settings, overrides: dict[str, object]) -> Settings:
    """Apply per-call overrides, re-running validation."""
    if not overrides:
        return settings
    current = settings.model_dump()
    current.update(overrides)
    return Settings(_env_file=None, **current)  # type: ignore[arg-type]


def _ensure_logging(settings: Settings) -> None:
    """Apply the log_* settings unless the louvainkit logger is already configured."""
    if not logging.getLogger("louvainkit").handlers:
        setup_logging_from_settings(settings)


def _generate_run_id() -> str:
    """Generate a run ID: yyyymmdd_hhmmss_{uuid4_short}."""
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return f"{ts}_{uuid.uuid4().hex[:8]}"
