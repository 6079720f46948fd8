"""Tests for breaking-change detection against the dependency graph."""

from pathlib import Path

import pytest

from depgraph_cli.analyzer import ImpactAnalyzer
from depgraph_cli.models import ChangeType

from conftest import write_project

OLD_A = "export function foo(a,b){}\nexport const keep = 1;\n"
NEW_A = "export const keep = 1;\n"


@pytest.fixture
def removal_project(temp_dir: Path) -> Path:
    return write_project(temp_dir / "removal", {
        "a.ts": OLD_A,
        "b.ts": "import { foo } from './a'\n",
        "d.ts": "import { keep } from './a';\n",
    })


@pytest.mark.asyncio
async def test_removed_export_reports_named_importer(removal_project: Path):
    analyzer = ImpactAnalyzer(removal_project)
    changes = await analyzer.detect_breaking_changes("a.ts", OLD_A, NEW_A)

    assert len(changes) == 1
    change = changes[0]
    assert change.change_type is ChangeType.REMOVED
    assert change.symbol == "foo"
    assert change.file == "a.ts"
    assert change.affected_files == ["b.ts"]
    assert "foo" in change.suggestion


@pytest.mark.asyncio
async def test_namespace_import_counts_as_using_every_export(removal_project: Path):
    """c.ts never touches ns.foo but is still reported."""
    write_project(removal_project, {"c.ts": "import * as ns from './a';\nconsole.log(ns.keep);\n"})
    analyzer = ImpactAnalyzer(removal_project)

    changes = await analyzer.detect_breaking_changes("a.ts", OLD_A, NEW_A)

    assert len(changes) == 1
    assert changes[0].affected_files == ["b.ts", "c.ts"]


@pytest.mark.asyncio
async def test_aliased_import_matches_source_side_name(temp_dir: Path):
    root = write_project(temp_dir / "alias", {
        "a.ts": OLD_A,
        "b.ts": "import { foo as renamed } from './a';\n",
    })
    changes = await ImpactAnalyzer(root).detect_breaking_changes("a.ts", OLD_A, NEW_A)

    assert [c.affected_files for c in changes] == [["b.ts"]]


@pytest.mark.asyncio
async def test_removed_export_without_importers_is_not_reported(temp_dir: Path):
    root = write_project(temp_dir / "lonely", {"a.ts": OLD_A, "other.ts": "export const x = 1;\n"})
    changes = await ImpactAnalyzer(root).detect_breaking_changes("a.ts", OLD_A, NEW_A)

    assert changes == []


@pytest.mark.asyncio
async def test_signature_change_on_same_line(temp_dir: Path):
    old = "export function bar(a){}\n"
    new = "export function bar(a,b){}\n"
    root = write_project(temp_dir / "sig", {
        "lib.ts": new,
        "use.ts": "import { bar } from './lib';\n",
    })

    changes = await ImpactAnalyzer(root).detect_breaking_changes("lib.ts", old, new)

    assert len(changes) == 1
    assert changes[0].change_type is ChangeType.SIGNATURE_CHANGED
    assert changes[0].symbol == "bar"
    assert changes[0].affected_files == ["use.ts"]
    assert "1 call sites" in changes[0].suggestion


@pytest.mark.asyncio
async def test_signature_heuristic_needs_same_line_number(temp_dir: Path):
    """Moving the declaration down a line compares it against an unrelated line."""
    old = "export function bar(a){}\n"
    new = "// moved\nexport function bar(a){}\n"
    root = write_project(temp_dir / "moved", {
        "lib.ts": new,
        "use.ts": "import { bar } from './lib';\n",
    })

    changes = await ImpactAnalyzer(root).detect_breaking_changes("lib.ts", old, new)

    # Both lines have zero commas, so the move goes unnoticed.
    assert changes == []


@pytest.mark.asyncio
async def test_unchanged_signature_is_not_reported(temp_dir: Path):
    content = "export function bar(a, b) {}\n"
    root = write_project(temp_dir / "same", {
        "lib.ts": content,
        "use.ts": "import { bar } from './lib';\n",
    })

    assert await ImpactAnalyzer(root).detect_breaking_changes("lib.ts", content, content) == []


@pytest.mark.asyncio
async def test_non_function_exports_skip_signature_check(temp_dir: Path):
    old = "export const LIMIT = 1;\n"
    new = "export const LIMIT = [1, 2, 3];\n"
    root = write_project(temp_dir / "const", {
        "lib.ts": new,
        "use.ts": "import { LIMIT } from './lib';\n",
    })

    assert await ImpactAnalyzer(root).detect_breaking_changes("lib.ts", old, new) == []


@pytest.mark.asyncio
async def test_index_file_importers_are_found(sample_project: Path):
    """Importers of ./utils resolve to utils/index.ts."""
    old = (sample_project / "src" / "utils" / "index.ts").read_text()
    new = old.replace("export const VERSION = '1.0.0';\n", "")

    changes = await ImpactAnalyzer(sample_project).detect_breaking_changes("src/utils/index.ts", old, new)

    # Only index.ts imports the whole module; server.ts names formatDate/parseDate.
    assert [(c.symbol, c.affected_files) for c in changes] == [("VERSION", ["src/index.ts"])]


@pytest.mark.asyncio
async def test_absolute_file_path_is_normalized(removal_project: Path):
    analyzer = ImpactAnalyzer(removal_project)
    absolute = str(analyzer.project_root / "a.ts")

    changes = await analyzer.detect_breaking_changes(absolute, OLD_A, NEW_A)

    assert changes[0].file == "a.ts"
    assert changes[0].affected_files == ["b.ts"]


@pytest.mark.asyncio
async def test_malformed_input_does_not_raise(removal_project: Path):
    analyzer = ImpactAnalyzer(removal_project)

    assert await analyzer.detect_breaking_changes("nope.ts", "export {", "}}}{{") == []
    assert await analyzer.detect_breaking_changes("a.ts", "", "") == []


@pytest.mark.asyncio
async def test_find_files_importing_builds_graph_once(removal_project: Path):
    analyzer = ImpactAnalyzer(removal_project)
    detector = analyzer.breaking_change_detector

    assert await detector.find_files_importing("a.ts", "foo") == ["b.ts"]
    assert await detector.find_files_importing("a.ts", "keep") == ["d.ts"]
    assert await detector.find_files_importing("a.ts", "missing") == []
    assert analyzer.graph_builder.walker.walk_count == 1
