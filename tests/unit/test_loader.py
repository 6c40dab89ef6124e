"""Unit tests for the per-file loader and the tree-sitter front end."""

from __future__ import annotations

from pathlib import Path

import pytest

from modgraph.analysis import LoaderError, UnresolvedSpecifier, UnsupportedConstruct, load_graph
from modgraph.analysis.parser import language_for_path, parse_source, supported_extensions, supports_path


def test_language_for_path() -> None:
    assert language_for_path("a.ts") == "typescript"
    assert language_for_path("a.tsx") == "tsx"
    assert language_for_path("a.js") == "tsx"
    assert language_for_path("A.JSX") == "tsx"
    assert supports_path("x/y.ts") is True
    assert supports_path("x/y.py") is False
    assert set(supported_extensions()) == {".js", ".ts", ".jsx", ".tsx"}


def test_language_for_unsupported_path_raises() -> None:
    with pytest.raises(ValueError, match="No grammar available"):
        language_for_path("main.go")


def test_parse_source_unknown_grammar_raises() -> None:
    with pytest.raises(ValueError, match="Unknown grammar"):
        parse_source(b"", "cobol")


def test_typescript_grammar_handles_angle_bracket_casts() -> None:
    tree = parse_source(b"const n = <number>value;\n", "typescript")
    assert tree.root_node.has_error is False


def test_load_graph_reads_file(tmp_path: Path) -> None:
    (tmp_path / "dep.js").write_text("export const x = 1;\n")
    main = tmp_path / "main.tsx"
    main.write_text('import { x } from "./dep";\nexport const App = () => <div>{x}</div>;\n')
    graph = load_graph(main)
    assert graph.imports[0].module_specifier.specifier == (tmp_path / "dep.js").as_posix()
    assert graph.exports[0].declarations[0].name == "App"


def test_load_graph_with_source_bytes(tmp_path: Path) -> None:
    graph = load_graph(tmp_path / "virtual.ts", source=b'export * from "pkg";')
    assert graph.reexports[0].module_specifier.specifier == "pkg"


def test_load_graph_wraps_unresolved(tmp_path: Path) -> None:
    main = tmp_path / "main.js"
    main.write_text('import a from "./missing";\n')
    with pytest.raises(LoaderError, match="Failed to parse file") as exc_info:
        load_graph(main)
    assert exc_info.value.file_path == main.as_posix()
    assert isinstance(exc_info.value.__cause__, UnresolvedSpecifier)


def test_load_graph_wraps_unsupported(tmp_path: Path) -> None:
    main = tmp_path / "main.js"
    main.write_text("export const { a } = obj;\n")
    with pytest.raises(LoaderError) as exc_info:
        load_graph(main)
    assert isinstance(exc_info.value.__cause__, UnsupportedConstruct)


def test_load_graph_missing_file(tmp_path: Path) -> None:
    with pytest.raises(LoaderError) as exc_info:
        load_graph(tmp_path / "nope.ts")
    assert isinstance(exc_info.value.__cause__, FileNotFoundError)


def test_load_graph_unsupported_extension(tmp_path: Path) -> None:
    f = tmp_path / "main.py"
    f.write_text("import os\n")
    with pytest.raises(LoaderError) as exc_info:
        load_graph(f)
    assert isinstance(exc_info.value.__cause__, ValueError)
