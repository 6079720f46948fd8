"""Enumerate candidate source files under a project root."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from . import config
from .filesystem import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)


class SourceFileWalker:
    """Recursively collect JS/TS source files, skipping build and vendor dirs.

    Returned paths are relative to *root* and always use ``/`` separators so
    they can be used directly as graph keys.
    """

    def __init__(
        self,
        root: Path,
        fs: Optional[FileSystem] = None,
        extensions: Optional[Iterable[str]] = None,
        exclude_dirs: Optional[Iterable[str]] = None,
    ) -> None:
        self.root = root
        self.fs = fs or LocalFileSystem()
        self.extensions = tuple(extensions or config.EXTENSIONS)
        self.exclude_dirs = set(config.EXCLUDE_DIRS) | set(config.EXTRA_EXCLUDE_DIRS)
        if exclude_dirs:
            self.exclude_dirs |= set(exclude_dirs)
        self.walk_count = 0

    async def walk(self) -> List[str]:
        self.walk_count += 1
        files: List[str] = []
        await self._walk_dir(self.root, "", files)
        files.sort()
        logger.debug("Found %d source files under %s", len(files), self.root)
        return files

    async def _walk_dir(self, directory: Path, prefix: str, files: List[str]) -> None:
        try:
            entries = await self.fs.list_directory(directory)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", directory, exc)
            return

        for entry in sorted(entries, key=lambda e: e.name):
            rel = f"{prefix}{entry.name}"
            if entry.is_dir:
                if entry.name not in self.exclude_dirs:
                    await self._walk_dir(directory / entry.name, f"{rel}/", files)
            elif entry.name.endswith(self.extensions):
                files.append(rel)
