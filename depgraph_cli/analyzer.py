"""ImpactAnalyzer: the graph service handed to callers.

Each instance owns its own :class:`GraphBuilder` cache, so several project
roots can be analysed side by side and tests never share state.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from . import config
from .breaking_changes import ChangeImpactAnalyzer
from .filesystem import FileSystem
from .graph_builder import GraphBuilder
from .impact_calculator import ImpactCalculator
from .models import (
    BreakingChange,
    ChangeImpactResult,
    DependencyGraph,
    GraphStats,
    ImpactAnalysisOptions,
)


class ImpactAnalyzer:
    """Facade over graph building, impact calculation and breaking-change detection."""

    def __init__(
        self,
        project_root: Path,
        fs: Optional[FileSystem] = None,
        cache_ttl: Optional[float] = None,
        exclude_dirs: Optional[Iterable[str]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        builder_kwargs = {"fs": fs, "cache_ttl": cache_ttl, "exclude_dirs": exclude_dirs}
        if clock is not None:
            builder_kwargs["clock"] = clock
        self.graph_builder = GraphBuilder(project_root, **builder_kwargs)
        self.calculator = ImpactCalculator(self.graph_builder)
        self.breaking_change_detector = ChangeImpactAnalyzer(self.graph_builder)

    @property
    def project_root(self) -> Path:
        return self.graph_builder.project_root

    async def build_graph(self, force_rebuild: bool = False) -> DependencyGraph:
        return await self.graph_builder.build_graph(force_rebuild)

    def get_graph(self) -> Optional[DependencyGraph]:
        return self.graph_builder.get_graph()

    def get_graph_stats(self) -> GraphStats:
        return self.graph_builder.get_graph_stats()

    async def get_dependents(self, file: str) -> List[str]:
        """Files that directly import *file*, sorted."""
        graph = await self.build_graph()
        key = self.graph_builder.normalize_path(file)
        return sorted(graph.dependents.get(key, ()))

    async def analyze_impact(
        self,
        target_files: Sequence[str],
        options: Optional[ImpactAnalysisOptions] = None,
    ) -> ChangeImpactResult:
        return await self.calculator.analyze_impact(target_files, options)

    async def preview_impact(self, target_files: Sequence[str]) -> ChangeImpactResult:
        """Shallow look at what changing *target_files* would touch, tests included."""
        options = ImpactAnalysisOptions(include_tests=True, max_depth=config.PREVIEW_MAX_DEPTH)
        return await self.calculator.analyze_impact(target_files, options)

    async def validate_changes(self, target_files: Sequence[str]) -> ChangeImpactResult:
        """Rebuild the graph from disk, then report the files that may need updating."""
        await self.build_graph(force_rebuild=True)
        return await self.calculator.analyze_impact(target_files)

    async def detect_breaking_changes(
        self,
        file: str,
        old_content: str,
        new_content: str,
    ) -> List[BreakingChange]:
        return await self.breaking_change_detector.detect_breaking_changes(
            file, old_content, new_content,
        )
