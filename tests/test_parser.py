"""Tests for the line-oriented import/export parser."""

import pytest

from depgraph_cli.models import ExportKind, ImportType
from depgraph_cli.parser import parse_exports, parse_imports


class TestParseImports:
    """Tests for parse_imports()."""

    def test_named_import(self):
        """Named imports record every specifier and the module source."""
        imports = parse_imports("import { a, b } from './mod';")

        assert len(imports) == 1
        assert imports[0].source == "./mod"
        assert imports[0].specifiers == ["a", "b"]
        assert imports[0].import_type is ImportType.NAMED
        assert imports[0].line == 1

    def test_named_import_keeps_source_side_of_alias(self):
        """`a as b` is recorded as `a`, the name the module exports."""
        imports = parse_imports('import { formatDate as fmt, parseDate } from "./utils"')

        assert imports[0].specifiers == ["formatDate", "parseDate"]

    def test_default_import(self):
        imports = parse_imports("import React from 'react';")

        assert imports[0].source == "react"
        assert imports[0].specifiers == ["React"]
        assert imports[0].import_type is ImportType.DEFAULT

    def test_namespace_import(self):
        imports = parse_imports("import * as ns from '../lib/ns';")

        assert imports[0].source == "../lib/ns"
        assert imports[0].specifiers == ["ns"]
        assert imports[0].import_type is ImportType.NAMESPACE

    def test_side_effect_import(self):
        imports = parse_imports("import './polyfills';")

        assert imports[0].source == "./polyfills"
        assert imports[0].specifiers == []
        assert imports[0].import_type is ImportType.SIDE_EFFECT

    def test_line_numbers_are_one_based(self):
        content = "// header\n\nimport { a } from './a';\n  import b from './b';\n"
        imports = parse_imports(content)

        assert [i.line for i in imports] == [3, 4]

    def test_trailing_comment_does_not_leak_into_source(self):
        imports = parse_imports("import { a } from './a'; // see \"docs\"")

        assert imports[0].source == "./a"

    @pytest.mark.parametrize("line", [
        "import {",
        "  a,",
        "} from './multi';",
        "const x = await import('./lazy');",
        "const fs = require('fs');",
        "import type { Foo } from './types';",
    ])
    def test_unsupported_forms_are_ignored(self, line: str):
        """Multi-line, dynamic, require and type-only imports are not recognised."""
        assert parse_imports(line) == []

    def test_empty_content(self):
        assert parse_imports("") == []


class TestParseExports:
    """Tests for parse_exports()."""

    def test_function_exports(self):
        content = "export function foo(a, b) {}\nexport async function bar() {}\n"
        exports = parse_exports(content)

        assert [(e.name, e.kind, e.line) for e in exports] == [
            ("foo", ExportKind.FUNCTION, 1),
            ("bar", ExportKind.FUNCTION, 2),
        ]

    def test_class_exports(self):
        content = "export class Service {}\nexport abstract class Base {}\n"
        exports = parse_exports(content)

        assert [(e.name, e.kind) for e in exports] == [
            ("Service", ExportKind.CLASS),
            ("Base", ExportKind.CLASS),
        ]

    def test_interface_and_type_exports(self):
        content = "export interface Config {}\nexport type Port = number;\n"
        exports = parse_exports(content)

        assert [(e.name, e.kind) for e in exports] == [
            ("Config", ExportKind.INTERFACE),
            ("Port", ExportKind.TYPE),
        ]

    def test_variable_exports_are_const_kind(self):
        content = "export const A = 1;\nexport let B = 2;\nexport var C = 3;\n"
        exports = parse_exports(content)

        assert [e.name for e in exports] == ["A", "B", "C"]
        assert all(e.kind is ExportKind.CONST for e in exports)

    def test_named_export_list_keeps_exported_side_of_alias(self):
        exports = parse_exports("export { a, internal as external };")

        assert [e.name for e in exports] == ["a", "external"]
        assert all(not e.is_re_export for e in exports)

    def test_re_export_records_original_source(self):
        exports = parse_exports("export { a, b as c } from './inner';")

        assert [e.name for e in exports] == ["a", "c"]
        assert all(e.is_re_export for e in exports)
        assert all(e.original_source == "./inner" for e in exports)

    def test_default_export(self):
        exports = parse_exports("export default createServer;")

        assert len(exports) == 1
        assert exports[0].name == "default"
        assert exports[0].kind is ExportKind.DEFAULT

    def test_default_function_is_reported_as_default(self):
        """`export default function foo` exports `default`, not `foo`."""
        exports = parse_exports("export default function foo() {}")

        assert [(e.name, e.kind) for e in exports] == [("default", ExportKind.DEFAULT)]

    def test_non_export_lines_are_ignored(self):
        content = "function local() {}\nconst x = 1;\n// export function commented() {}\n"
        exports = parse_exports(content)

        # Line-oriented matching does not understand comments.
        assert [e.name for e in exports] == ["commented"]
