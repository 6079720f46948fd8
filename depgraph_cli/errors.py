"""Exceptions raised for caller misuse of the graph service."""

from __future__ import annotations

from pathlib import Path


class InvalidProjectRootError(ValueError):
    """The project root passed to the graph service is missing or not a directory."""

    def __init__(self, root: Path) -> None:
        super().__init__(f"Project root does not exist or is not a directory: {root}")
        self.root = root
