"""Line-oriented import/export extraction for JavaScript and TypeScript.

This is deliberately not a real parser. Each line is stripped and matched on
its own against a small set of regular expressions, which is enough to build
an approximate file-level dependency graph quickly and without grammar
packages.

Known limitations:

- statements spanning several lines (``import {\\n a,\\n b\\n} from 'm'``)
  are not recognised;
- dynamic ``import()`` and ``require()`` calls are ignored;
- computed or conditional exports are ignored;
- ``import X, { a } from 'm'`` and ``import type { A } from 'm'`` match no
  pattern and are dropped.

Aliases are stripped in opposite directions for imports and re-exports:
``import { a as b }`` records ``a`` (what the source module exports), while
``export { a as b } from 'm'`` records ``b`` (what this module exports).
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .models import ExportKind, ExportReference, ImportReference, ImportType

# ---------------------------------------------------------------------------
# Import patterns, tried in order; the first match wins.
# ---------------------------------------------------------------------------
_NAMED_IMPORT = re.compile(r"""import\s+\{([^}]+)\}\s+from\s+['"]([^'"]*)['"]""")
_DEFAULT_IMPORT = re.compile(r"""import\s+(\w+)\s+from\s+['"]([^'"]*)['"]""")
_NAMESPACE_IMPORT = re.compile(r"""import\s+\*\s+as\s+(\w+)\s+from\s+['"]([^'"]*)['"]""")
_SIDE_EFFECT_IMPORT = re.compile(r"""import\s+['"]([^'"]*)['"]""")

# ---------------------------------------------------------------------------
# Export patterns, tried in order; the first match wins.
# ---------------------------------------------------------------------------
_FUNCTION_EXPORT = re.compile(r"export\s+(?:async\s+)?function\s+(\w+)")
_CLASS_EXPORT = re.compile(r"export\s+(?:abstract\s+)?class\s+(\w+)")
_TYPE_EXPORT = re.compile(r"export\s+(interface|type)\s+(\w+)")
_VARIABLE_EXPORT = re.compile(r"export\s+(?:const|let|var)\s+(\w+)")
_RE_EXPORT = re.compile(r"""export\s+\{([^}]+)\}\s+from\s+['"]([^'"]*)['"]""")
_NAMED_EXPORT = re.compile(r"export\s+\{([^}]+)\}")
_DEFAULT_EXPORT = re.compile(r"export\s+default\s+")

_AS = re.compile(r"\s+as\s+")


def _split_names(raw: str, keep_exported_side: bool) -> List[str]:
    names: List[str] = []
    for part in raw.split(","):
        sides = _AS.split(part.strip())
        name = (sides[-1] if keep_exported_side else sides[0]).strip()
        if name:
            names.append(name)
    return names


def _match_import(line: str) -> Optional[Tuple[str, List[str], ImportType]]:
    match = _NAMED_IMPORT.search(line)
    if match:
        return match.group(2), _split_names(match.group(1), keep_exported_side=False), ImportType.NAMED

    match = _DEFAULT_IMPORT.search(line)
    if match:
        return match.group(2), [match.group(1)], ImportType.DEFAULT

    match = _NAMESPACE_IMPORT.search(line)
    if match:
        return match.group(2), [match.group(1)], ImportType.NAMESPACE

    match = _SIDE_EFFECT_IMPORT.search(line)
    if match:
        return match.group(1), [], ImportType.SIDE_EFFECT

    return None


def parse_imports(content: str) -> List[ImportReference]:
    """Extract import statements from *content*, in line order."""
    imports: List[ImportReference] = []
    for index, raw_line in enumerate(content.split("\n")):
        found = _match_import(raw_line.strip())
        if found is None:
            continue
        source, specifiers, import_type = found
        imports.append(ImportReference(
            source=source,
            specifiers=specifiers,
            import_type=import_type,
            line=index + 1,
        ))
    return imports


def _match_exports(line: str, line_number: int) -> List[ExportReference]:
    match = _FUNCTION_EXPORT.search(line)
    if match:
        return [ExportReference(match.group(1), ExportKind.FUNCTION, line_number)]

    match = _CLASS_EXPORT.search(line)
    if match:
        return [ExportReference(match.group(1), ExportKind.CLASS, line_number)]

    match = _TYPE_EXPORT.search(line)
    if match:
        return [ExportReference(match.group(2), ExportKind(match.group(1)), line_number)]

    match = _VARIABLE_EXPORT.search(line)
    if match:
        return [ExportReference(match.group(1), ExportKind.CONST, line_number)]

    match = _RE_EXPORT.search(line)
    if match:
        return [
            ExportReference(
                name,
                ExportKind.CONST,
                line_number,
                is_re_export=True,
                original_source=match.group(2),
            )
            for name in _split_names(match.group(1), keep_exported_side=True)
        ]

    match = _NAMED_EXPORT.search(line)
    if match:
        return [
            ExportReference(name, ExportKind.CONST, line_number)
            for name in _split_names(match.group(1), keep_exported_side=True)
        ]

    if _DEFAULT_EXPORT.search(line):
        return [ExportReference("default", ExportKind.DEFAULT, line_number)]

    return []


def parse_exports(content: str) -> List[ExportReference]:
    """Extract exported symbols from *content*, in line order."""
    exports: List[ExportReference] = []
    for index, raw_line in enumerate(content.split("\n")):
        exports.extend(_match_exports(raw_line.strip(), index + 1))
    return exports
