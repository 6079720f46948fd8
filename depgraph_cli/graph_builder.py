"""Build and cache the project's import/export dependency graph.

The graph is an in-memory snapshot: a forward map from file to its parsed
:class:`~depgraph_cli.models.DependencyNode` and a reverse ``dependents``
index from each resolved import target to the files importing it. Both are
derived in one pass and published together by replacing a single
reference, so readers never see a half-built graph.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Optional, Set

from . import config
from .errors import InvalidProjectRootError
from .filesystem import FileSystem, LocalFileSystem
from .models import DependencyGraph, DependencyNode, GraphStats
from .parser import parse_exports, parse_imports
from .resolver import PathResolver
from .walker import SourceFileWalker

logger = logging.getLogger(__name__)


class GraphBuilder:
    """Owns the cached :class:`DependencyGraph` for one project root.

    Rebuilds are single-flight: while one is running, every other caller of
    :meth:`build_graph` awaits the same task instead of walking the tree
    again.
    """

    def __init__(
        self,
        project_root: Path,
        fs: Optional[FileSystem] = None,
        cache_ttl: Optional[float] = None,
        extensions: Optional[Iterable[str]] = None,
        exclude_dirs: Optional[Iterable[str]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if fs is None:
            project_root = Path(project_root).resolve()
            if not project_root.is_dir():
                raise InvalidProjectRootError(project_root)
        self.project_root = Path(project_root)
        self.fs = fs or LocalFileSystem()
        self.cache_ttl = config.CACHE_TTL_SECONDS if cache_ttl is None else cache_ttl
        self.walker = SourceFileWalker(self.project_root, self.fs, extensions, exclude_dirs)
        self.resolver = PathResolver(self.project_root)
        self._clock = clock

        self._graph: Optional[DependencyGraph] = None
        self._built_at: Optional[float] = None
        self._inflight: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Cache access
    # ------------------------------------------------------------------

    def get_graph(self) -> Optional[DependencyGraph]:
        """Return the last built graph, or ``None``. Never triggers a build."""
        return self._graph

    def is_fresh(self) -> bool:
        if self._graph is None or self._built_at is None:
            return False
        return self._clock() - self._built_at < self.cache_ttl

    async def build_graph(self, force_rebuild: bool = False) -> DependencyGraph:
        """Return the cached graph, rebuilding it when stale or forced.

        A fresh cache is returned without touching the filesystem. A caller
        arriving while a rebuild is already running joins that rebuild,
        forced or not.
        """
        graph = self._graph
        if not force_rebuild and graph is not None and self.is_fresh():
            return graph

        task = self._inflight
        if task is None:
            task = asyncio.create_task(self._rebuild())
            task.add_done_callback(self._clear_inflight)
            self._inflight = task
        else:
            logger.debug("Joining in-flight graph rebuild for %s", self.project_root)
        return await asyncio.shield(task)

    def _clear_inflight(self, task: asyncio.Future) -> None:
        if self._inflight is task:
            self._inflight = None

    async def _rebuild(self) -> DependencyGraph:
        logger.info("Building dependency graph for %s", self.project_root)
        files = await self.walker.walk()

        nodes: Dict[str, DependencyNode] = {}
        for file in files:
            node = await self.parse_file(file)
            if node is not None:
                nodes[file] = node

        dependents: Dict[str, Set[str]] = {}
        for file, node in nodes.items():
            for imp in node.imports:
                if not imp.source.startswith("."):
                    continue
                target = self.resolver.resolve_import_path(file, imp.source, nodes)
                dependents.setdefault(target, set()).add(file)

        graph = DependencyGraph(
            nodes=MappingProxyType(nodes),
            dependents=MappingProxyType(
                {target: frozenset(sources) for target, sources in dependents.items()}
            ),
            last_built=datetime.now(),
            file_count=len(files),
        )
        self._graph = graph
        self._built_at = self._clock()
        logger.info(
            "Dependency graph built: %d files, %d nodes, %d import targets",
            graph.file_count, len(nodes), len(graph.dependents),
        )
        return graph

    # ------------------------------------------------------------------
    # Per-file parsing and resolution
    # ------------------------------------------------------------------

    async def parse_file(self, file: str) -> Optional[DependencyNode]:
        """Parse one file into a :class:`DependencyNode`.

        Returns ``None`` if the file no longer exists or cannot be read.
        """
        key = self.normalize_path(file)
        full_path = self.project_root / key
        try:
            if await self.fs.stat(full_path) is None:
                return None
            content = await self.fs.read_file(full_path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable file %s: %s", full_path, exc)
            return None

        return DependencyNode(
            file=key,
            imports=parse_imports(content),
            exports=parse_exports(content),
        )

    def resolve_import_path(
        self,
        importer: str,
        specifier: str,
        graph: Optional[DependencyGraph] = None,
    ) -> str:
        """Resolve *specifier* against *graph* (default: the cached graph)."""
        if graph is None:
            graph = self._graph
        known = graph.nodes if graph is not None else None
        return self.resolver.resolve_import_path(importer, specifier, known)

    def normalize_path(self, file: str) -> str:
        return self.resolver.normalize_path(file)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_graph_stats(self) -> GraphStats:
        graph = self._graph
        if graph is None:
            return GraphStats()
        return GraphStats(
            file_count=graph.file_count,
            total_imports=sum(len(node.imports) for node in graph.nodes.values()),
            total_exports=sum(len(node.exports) for node in graph.nodes.values()),
            last_built=graph.last_built,
        )
