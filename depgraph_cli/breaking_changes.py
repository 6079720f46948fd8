"""Detect breaking changes to a file's exported surface."""

from __future__ import annotations

import logging
from typing import Dict, List, Set

from .graph_builder import GraphBuilder
from .models import BreakingChange, ChangeType, ExportKind, ExportReference, ImportType
from .parser import parse_exports

logger = logging.getLogger(__name__)


def _line_at(content: str, line_number: int) -> str:
    lines = content.split("\n")
    if 0 < line_number <= len(lines):
        return lines[line_number - 1]
    return ""


def _param_count(line: str) -> int:
    # Rough: counts every comma on the line, including ones in default values.
    return line.count(",") + 1


def _suggestion(change_type: ChangeType, symbol: str, affected: List[str]) -> str:
    if change_type is ChangeType.REMOVED:
        return (
            f"Export '{symbol}' was removed. "
            "Consider deprecating instead or updating all imports."
        )
    if change_type is ChangeType.SIGNATURE_CHANGED:
        return f"Function signature changed. Review all {len(affected)} call sites."
    raise ValueError(f"Unhandled change type: {change_type!r}")


class ChangeImpactAnalyzer:
    """Compare two versions of a file and report exports that break importers.

    Two kinds of change are detected:

    - an export present in the old content is missing from the new content;
    - an exported function's parameter count differs, judged by counting
      commas on the declaration line. The old and new declarations must sit
      on the same line number for this to work; moving the function or
      splitting its parameters across lines defeats the heuristic.

    Importers are looked up in the dependency graph, so only files that
    actually import the symbol (or import the whole module as a namespace)
    are reported.
    """

    def __init__(self, graph_builder: GraphBuilder) -> None:
        self.graph_builder = graph_builder

    async def detect_breaking_changes(
        self,
        file: str,
        old_content: str,
        new_content: str,
    ) -> List[BreakingChange]:
        file_key = self.graph_builder.normalize_path(file)
        old_exports = parse_exports(old_content)
        new_exports = parse_exports(new_content)

        changes: List[BreakingChange] = []
        changes.extend(await self._removed_exports(file_key, old_exports, new_exports))
        changes.extend(await self._changed_signatures(
            file_key, old_exports, new_exports, old_content, new_content,
        ))
        logger.debug("Found %d breaking change(s) in %s", len(changes), file_key)
        return changes

    async def _removed_exports(
        self,
        file: str,
        old_exports: List[ExportReference],
        new_exports: List[ExportReference],
    ) -> List[BreakingChange]:
        new_names = {export.name for export in new_exports}
        seen: Set[str] = set()
        changes: List[BreakingChange] = []

        for export in old_exports:
            if export.name in new_names or export.name in seen:
                continue
            seen.add(export.name)
            affected = await self.find_files_importing(file, export.name)
            if affected:
                changes.append(self._change(file, export.name, ChangeType.REMOVED, affected))
        return changes

    async def _changed_signatures(
        self,
        file: str,
        old_exports: List[ExportReference],
        new_exports: List[ExportReference],
        old_content: str,
        new_content: str,
    ) -> List[BreakingChange]:
        old_by_name: Dict[str, ExportReference] = {}
        for export in old_exports:
            old_by_name.setdefault(export.name, export)

        seen: Set[str] = set()
        changes: List[BreakingChange] = []
        for export in new_exports:
            old = old_by_name.get(export.name)
            if old is None or old.kind is not ExportKind.FUNCTION or export.name in seen:
                continue
            seen.add(export.name)

            old_params = _param_count(_line_at(old_content, old.line))
            new_params = _param_count(_line_at(new_content, export.line))
            if old_params == new_params:
                continue

            affected = await self.find_files_importing(file, export.name)
            if affected:
                changes.append(
                    self._change(file, export.name, ChangeType.SIGNATURE_CHANGED, affected)
                )
        return changes

    @staticmethod
    def _change(
        file: str,
        symbol: str,
        change_type: ChangeType,
        affected: List[str],
    ) -> BreakingChange:
        return BreakingChange(
            file=file,
            symbol=symbol,
            change_type=change_type,
            affected_files=affected,
            suggestion=_suggestion(change_type, symbol, affected),
        )

    async def find_files_importing(self, source_file: str, symbol: str) -> List[str]:
        """Return files that import *symbol* from *source_file*.

        Namespace imports (``import * as ns``) count as importing every
        symbol, whether or not ``ns.symbol`` is ever used.
        """
        graph = await self.graph_builder.build_graph()
        source = self.graph_builder.normalize_path(source_file)

        importers: List[str] = []
        for dependent in sorted(graph.dependents.get(source, ())):
            node = graph.nodes.get(dependent)
            if node is None:
                continue
            for imp in node.imports:
                resolved = self.graph_builder.resolve_import_path(dependent, imp.source, graph)
                if resolved != source:
                    continue
                if symbol in imp.specifiers or imp.import_type is ImportType.NAMESPACE:
                    importers.append(dependent)
                    break
        return importers
