"""Approximate module resolution for relative import specifiers."""

from __future__ import annotations

import os
import posixpath
from pathlib import Path
from typing import Container, Optional

from . import config


class PathResolver:
    """Map import specifiers onto graph keys (root-relative POSIX paths).

    This is not a full module resolver: ``package.json`` fields, path
    aliases and ``node_modules`` lookups are out of reach. Bare specifiers
    such as ``react`` are returned untouched so they never collide with a
    project file.
    """

    def __init__(self, project_root: Path) -> None:
        self.project_root = project_root

    def resolve_import_path(
        self,
        importer: str,
        specifier: str,
        known: Optional[Container[str]] = None,
    ) -> str:
        """Resolve *specifier* as written in *importer*.

        Args:
            importer: Graph key of the importing file.
            specifier: Module specifier from the import statement.
            known: Graph keys that exist; used to pick an extension or an
                ``index`` file when the specifier has none.

        Returns:
            The matching graph key, or the normalised extensionless path
            when no candidate is known.
        """
        if not specifier.startswith("."):
            return specifier

        resolved = posixpath.normpath(posixpath.join(posixpath.dirname(importer), specifier))
        if posixpath.splitext(resolved)[1] or known is None:
            return resolved

        for ext in config.RESOLVE_EXTENSIONS:
            candidate = resolved + ext
            if candidate in known:
                return candidate
        for ext in config.RESOLVE_EXTENSIONS:
            candidate = posixpath.join(resolved, f"index{ext}")
            if candidate in known:
                return candidate
        return resolved

    def normalize_path(self, file: str) -> str:
        """Return the graph key for *file*: root-relative, ``/``-separated."""
        if os.path.isabs(file):
            # Symlinks in either prefix are resolved; the file name itself is kept.
            path = Path(file)
            absolute = path.parent.resolve() / path.name
            return Path(os.path.relpath(absolute, Path(self.project_root).resolve())).as_posix()
        return file.replace(os.sep, "/")
