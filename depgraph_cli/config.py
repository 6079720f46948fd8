"""Configuration paths and graph defaults for DepGraph."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("DEPGRAPH_HOME", str(Path.home() / ".depgraph"))).expanduser()

SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")
# Order matters: the first candidate that is a known node wins.
RESOLVE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")
EXCLUDE_DIRS = frozenset({"node_modules", "dist", "build", ".git", "coverage", ".next"})
DEFAULT_CACHE_TTL_SECONDS = 5 * 60
DEFAULT_MAX_DEPTH = 10
PREVIEW_MAX_DEPTH = 5

# Load overrides from ~/.depgraph/config.toml (set via `dg config set`)
from .config_manager import load_graph_config  # noqa: E402

_graph_config = load_graph_config()

CACHE_TTL_SECONDS = float(_graph_config.get("cache_ttl_seconds", DEFAULT_CACHE_TTL_SECONDS))
MAX_DEPTH = int(_graph_config.get("max_depth", DEFAULT_MAX_DEPTH))
INCLUDE_TESTS = bool(_graph_config.get("include_tests", True))
EXTENSIONS = tuple(_graph_config.get("extensions", SOURCE_EXTENSIONS))
EXTRA_EXCLUDE_DIRS = frozenset(_graph_config.get("exclude_dirs", []))
