"""Pytest configuration and fixtures for DepGraph tests."""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Generator, List, Optional

import pytest

# Keep the developer's ~/.depgraph/config.toml out of the test run.
os.environ["DEPGRAPH_HOME"] = tempfile.mkdtemp(prefix="depgraph-home-")

from depgraph_cli.filesystem import DirEntry, FileStat, LocalFileSystem  # noqa: E402


SAMPLE_FILES: Dict[str, str] = {
    "src/index.ts": (
        "import { createServer } from './server';\n"
        "import * as utils from './utils';\n"
        "import 'reflect-metadata';\n"
        "import React from 'react';\n"
        "\n"
        "export { createServer };\n"
    ),
    "src/server.ts": (
        "import { formatDate as fmt, parseDate } from './utils';\n"
        "import { Config } from './types';\n"
        "\n"
        "export async function createServer(port, host) {\n"
        "  return { port, host, started: fmt(parseDate('now', 'iso')) };\n"
        "}\n"
        "\n"
        "export default createServer;\n"
    ),
    "src/server.test.ts": (
        "import { createServer } from './server';\n"
        "\n"
        "test('starts', () => createServer(80, 'localhost'));\n"
    ),
    "src/types.ts": (
        "export interface Config {\n"
        "  port: number;\n"
        "}\n"
        "export type Port = number;\n"
    ),
    "src/utils/index.ts": (
        "export function formatDate(d) {\n"
        "  return String(d);\n"
        "}\n"
        "export function parseDate(s, fmt) {\n"
        "  return new Date(s);\n"
        "}\n"
        "export const VERSION = '1.0.0';\n"
    ),
    "lib/legacy.js": "export class Legacy {}\n",
    "node_modules/left-pad/index.js": "export default function leftPad() {}\n",
    "dist/bundle.js": "import { createServer } from '../src/server';\n",
    "README.md": "import { nothing } from './nowhere';\n",
}


def write_project(root: Path, files: Dict[str, str]) -> Path:
    """Write ``{relative_path: content}`` under *root* and return *root*."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


class CountingFileSystem(LocalFileSystem):
    """Local filesystem that records calls and can refuse named directories."""

    def __init__(self, unreadable_dirs: Optional[List[str]] = None) -> None:
        self.unreadable_dirs = set(unreadable_dirs or [])
        self.list_calls = 0
        self.read_calls = 0

    async def list_directory(self, path: Path) -> List[DirEntry]:
        self.list_calls += 1
        if path.name in self.unreadable_dirs:
            raise PermissionError(13, "Permission denied", str(path))
        return await super().list_directory(path)

    async def stat(self, path: Path) -> Optional[FileStat]:
        return await super().stat(path)

    async def read_file(self, path: Path) -> str:
        self.read_calls += 1
        return await super().read_file(path)


class FakeClock:
    """Monotonic clock the tests can move forward by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project(temp_dir: Path) -> Path:
    """A small TypeScript project with vendor and build directories."""
    return write_project(temp_dir / "sample_app", SAMPLE_FILES)


@pytest.fixture
def three_file_project(temp_dir: Path) -> Path:
    """``a.ts`` exports X, ``b.ts`` imports it, ``c.ts`` stands alone."""
    return write_project(temp_dir / "three", {
        "a.ts": "export const X = 1;\n",
        "b.ts": "import { X } from './a';\n",
        "c.ts": "export function unrelated() {}\n",
    })


@pytest.fixture
def counting_fs() -> CountingFileSystem:
    return CountingFileSystem()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def temp_config_file(temp_dir: Path, monkeypatch) -> Path:
    """Point the config manager at a throwaway config.toml."""
    config_file = temp_dir / "home" / "config.toml"
    monkeypatch.setattr("depgraph_cli.config_manager.CONFIG_FILE", config_file)
    return config_file
