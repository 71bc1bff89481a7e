# src/__init__.py — v1
"""louvainkit — hierarchical Louvain community detection and modularity scoring."""

from louvainkit.community.hierarchy import Hierarchy
from louvainkit.community.louvain import run_louvain
from louvainkit.community.modularity import UNDEFINED, is_undefined, modularity
from louvainkit.community.reducer import Level, reduce_graph
from louvainkit.config.settings import ConfigurationError
from louvainkit.version import __version__

__all__ = [
    "ConfigurationError",
    "Hierarchy",
    "Level",
    "UNDEFINED",
    "__version__",
    "is_undefined",
    "modularity",
    "reduce_graph",
    "run_louvain",
]
