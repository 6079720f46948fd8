"""Transitive change-impact analysis over the dependents index."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Set

from .graph_builder import GraphBuilder
from .models import (
    ChangeImpactResult,
    DependencyGraph,
    ImpactAnalysisOptions,
    ImpactDetail,
    ImpactLevel,
)

logger = logging.getLogger(__name__)

_TEST_MARKERS = (".test.", ".spec.")


def is_test_file(file: str) -> bool:
    return any(marker in file for marker in _TEST_MARKERS)


def _glob_to_regex(pattern: str) -> "re.Pattern[str]":
    """Compile an exclusion glob that may match anywhere in a graph key.

    Only ``*`` (any run, ``/`` included) and ``?`` (one character) are
    special. The result is used with ``search``, so ``spec`` excludes
    ``src/service.spec.ts`` without wildcards; ``fnmatch`` anchors both
    ends and would not.
    """
    escaped = re.escape(pattern).replace(r"\*", ".*").replace(r"\?", ".")
    return re.compile(escaped)


def _esm_variants(target: str) -> List[str]:
    """ESM sources import ``foo.ts`` as ``./foo.js``; match that spelling too."""
    variants = [target]
    for ext in (".ts", ".tsx"):
        if target.endswith(ext):
            variants.append(target[: -len(ext)] + ".js")
    return variants


def calculate_impact_level(affected_count: int) -> ImpactLevel:
    if affected_count <= 3:
        return ImpactLevel.LOW
    if affected_count <= 10:
        return ImpactLevel.MEDIUM
    if affected_count <= 25:
        return ImpactLevel.HIGH
    return ImpactLevel.CRITICAL


def generate_suggestions(affected_files: Sequence[str]) -> List[str]:
    if not affected_files:
        return ["No files depend on the target files. Safe to modify."]

    count = len(affected_files)
    suggestions = [f"Review {count} affected file{'s' if count > 1 else ''} after making changes."]

    tests = [f for f in affected_files if is_test_file(f)]
    if tests:
        suggestions.append(
            f"Update {len(tests)} test file{'s' if len(tests) > 1 else ''} to match changes."
        )

    if count > 10:
        suggestions.append(
            "Consider making changes backward-compatible to minimize breaking changes."
        )
        suggestions.append(
            "Consider adding deprecation warnings before removing functionality."
        )
    return suggestions


class ImpactCalculator:
    """Find every file reachable through the reverse import index."""

    def __init__(self, graph_builder: GraphBuilder) -> None:
        self.graph_builder = graph_builder

    async def analyze_impact(
        self,
        target_files: Sequence[str],
        options: Optional[ImpactAnalysisOptions] = None,
    ) -> ChangeImpactResult:
        options = options or ImpactAnalysisOptions()
        graph = await self.graph_builder.build_graph()

        targets = [self.graph_builder.normalize_path(f) for f in target_files]
        excludes = [_glob_to_regex(p) for p in options.exclude_patterns]

        affected: Set[str] = set()
        visited: Set[str] = set()
        details: List[ImpactDetail] = []

        def traverse(file: str, depth: int) -> None:
            if depth > options.max_depth or file in visited:
                return
            visited.add(file)

            for dependent in sorted(graph.dependents.get(file, ())):
                if any(rx.search(dependent) for rx in excludes):
                    continue
                if not options.include_tests and is_test_file(dependent):
                    continue

                if dependent not in affected:
                    affected.add(dependent)
                    detail = self._detail_for(graph, dependent, file, targets)
                    if detail is not None:
                        details.append(detail)
                traverse(dependent, depth + 1)

        for target in targets:
            for variant in _esm_variants(target):
                traverse(variant, 0)

        affected_files = sorted(affected)
        logger.debug("Impact of %s: %d affected file(s)", targets, len(affected_files))
        return ChangeImpactResult(
            target_files=targets,
            affected_files=affected_files,
            impact_level=calculate_impact_level(len(affected_files)),
            details=details,
            suggestions=generate_suggestions(affected_files),
        )

    def _detail_for(
        self,
        graph: DependencyGraph,
        dependent: str,
        imported_from: str,
        targets: Sequence[str],
    ) -> Optional[ImpactDetail]:
        node = graph.nodes.get(dependent)
        if node is None:
            return None
        relevant = [
            imp for imp in node.imports
            if self.graph_builder.resolve_import_path(dependent, imp.source, graph) in targets
        ]
        if not relevant:
            return None
        return ImpactDetail(
            file=dependent,
            reason=f"Imports from {imported_from}",
            imported_symbols=[name for imp in relevant for name in imp.specifiers],
            usage_count=len(relevant),
        )
