"""Filesystem capability used by the walker and graph builder.

The graph code never touches :mod:`os` directly; it goes through a
:class:`FileSystem` so hosts (and tests) can supply their own view of the
project. :class:`LocalFileSystem` is the default and runs blocking calls in
a worker thread so the event loop only suspends at I/O.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol


@dataclass(frozen=True)
class DirEntry:
    name: str
    is_dir: bool


@dataclass(frozen=True)
class FileStat:
    mtime: float
    size: int


class FileSystem(Protocol):
    async def list_directory(self, path: Path) -> List[DirEntry]:
        """List entries of *path*; raises ``OSError`` if it cannot be read."""
        ...

    async def stat(self, path: Path) -> Optional[FileStat]:
        """Return file metadata, or ``None`` if *path* does not exist."""
        ...

    async def read_file(self, path: Path) -> str:
        """Read *path* as UTF-8 text; raises ``OSError`` on failure."""
        ...


class LocalFileSystem:
    """:class:`FileSystem` backed by the local disk."""

    async def list_directory(self, path: Path) -> List[DirEntry]:
        return await asyncio.to_thread(_list_directory, path)

    async def stat(self, path: Path) -> Optional[FileStat]:
        return await asyncio.to_thread(_stat, path)

    async def read_file(self, path: Path) -> str:
        return await asyncio.to_thread(path.read_text, encoding="utf-8", errors="ignore")


def _list_directory(path: Path) -> List[DirEntry]:
    # Symlinked directories are reported as plain entries and never descended.
    return [
        DirEntry(name=child.name, is_dir=child.is_dir() and not child.is_symlink())
        for child in path.iterdir()
    ]


def _stat(path: Path) -> Optional[FileStat]:
    try:
        st = path.stat()
    except FileNotFoundError:
        return None
    return FileStat(mtime=st.st_mtime, size=st.st_size)
