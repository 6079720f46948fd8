"""DepGraph CLI: import/export dependency graphs and change-impact analysis."""

from __future__ import annotations

from .analyzer import ImpactAnalyzer
from .errors import InvalidProjectRootError
from .models import (
    BreakingChange,
    ChangeImpactResult,
    ChangeType,
    DependencyGraph,
    DependencyNode,
    ExportKind,
    ExportReference,
    GraphStats,
    ImpactAnalysisOptions,
    ImpactLevel,
    ImportReference,
    ImportType,
)

__version__ = "0.3.0"

__all__ = [
    "BreakingChange",
    "ChangeImpactResult",
    "ChangeType",
    "DependencyGraph",
    "DependencyNode",
    "ExportKind",
    "ExportReference",
    "GraphStats",
    "ImpactAnalysisOptions",
    "ImpactAnalyzer",
    "ImpactLevel",
    "ImportReference",
    "ImportType",
    "InvalidProjectRootError",
    "__version__",
]
