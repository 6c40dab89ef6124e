"""Unit tests for module specifier resolution (prefixes, package ids, file probing)."""

from __future__ import annotations

from pathlib import Path

import pytest

from modgraph.analysis import LocalFileSystem, SpecifierResolver, UnresolvedSpecifier
from modgraph.analysis.resolver import DEFAULT_PREFIXES, VALID_EXTENSIONS, split_prefix


class CountingFileSystem:
    """Local filesystem that records every probed path."""

    def __init__(self) -> None:
        self.probes: list[str] = []
        self._fs = LocalFileSystem()

    def is_regular_file(self, path: str) -> bool:
        self.probes.append(path)
        return self._fs.is_regular_file(path)


class DeniedFileSystem:
    """Every probe fails with a permission error."""

    def is_regular_file(self, path: str) -> bool:
        raise PermissionError(13, "Permission denied", path)


@pytest.fixture
def fs() -> CountingFileSystem:
    return CountingFileSystem()


@pytest.fixture
def resolver(fs: CountingFileSystem) -> SpecifierResolver:
    return SpecifierResolver(fs=fs)


def test_constants_keep_their_order() -> None:
    assert DEFAULT_PREFIXES == ("copy:", "webworker:")
    assert VALID_EXTENSIONS == (".js", ".ts", ".jsx", ".tsx")


def test_package_id_is_verbatim_without_probes(
    resolver: SpecifierResolver, fs: CountingFileSystem, tmp_path: Path
) -> None:
    result = resolver.resolve("lodash", tmp_path)
    assert result.is_package_id is True
    assert result.specifier == "lodash"
    assert result.prefix is None
    assert fs.probes == []


def test_scoped_package_with_prefix(
    resolver: SpecifierResolver, fs: CountingFileSystem, tmp_path: Path
) -> None:
    result = resolver.resolve("webworker:@scope/pkg/worker", tmp_path)
    assert result.is_package_id is True
    assert result.specifier == "@scope/pkg/worker"
    assert result.prefix == "webworker:"
    assert fs.probes == []


def test_copy_prefix_relative(resolver: SpecifierResolver, tmp_path: Path) -> None:
    (tmp_path / "x.ts").write_text("")
    result = resolver.resolve("copy:./x", tmp_path)
    assert result.prefix == "copy:"
    assert result.is_package_id is False
    assert result.specifier == (tmp_path / "x.ts").as_posix()


def test_only_one_prefix_is_stripped() -> None:
    assert split_prefix("copy:webworker:./x") == ("copy:", "webworker:./x")
    assert split_prefix("./x") == (None, "./x")


def test_literal_file_wins(resolver: SpecifierResolver, fs: CountingFileSystem, tmp_path: Path) -> None:
    (tmp_path / "style.css").write_text("")
    result = resolver.resolve("./style.css", tmp_path)
    assert result.specifier == (tmp_path / "style.css").as_posix()
    assert len(fs.probes) == 1


def test_extension_tie_break_prefers_js(resolver: SpecifierResolver, tmp_path: Path) -> None:
    for ext in (".tsx", ".ts", ".js"):
        (tmp_path / f"a{ext}").write_text("")
    first = resolver.resolve("./a", tmp_path)
    second = resolver.resolve("./a", tmp_path)
    assert first.specifier == (tmp_path / "a.js").as_posix()
    assert first == second


def test_ts_before_jsx(resolver: SpecifierResolver, tmp_path: Path) -> None:
    (tmp_path / "a.jsx").write_text("")
    (tmp_path / "a.ts").write_text("")
    assert resolver.resolve("./a", tmp_path).specifier == (tmp_path / "a.ts").as_posix()


def test_directory_index(resolver: SpecifierResolver, fs: CountingFileSystem, tmp_path: Path) -> None:
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / "index.tsx").write_text("")
    (lib / "index.ts").write_text("")
    result = resolver.resolve("./lib", tmp_path)
    assert result.specifier == (lib / "index.ts").as_posix()
    # literal (a directory, not a file), four extensions, then index.js and index.ts
    assert len(fs.probes) == 7


def test_file_beats_directory_index(resolver: SpecifierResolver, tmp_path: Path) -> None:
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "index.js").write_text("")
    (tmp_path / "lib.tsx").write_text("")
    assert resolver.resolve("./lib", tmp_path).specifier == (tmp_path / "lib.tsx").as_posix()


def test_parent_relative(resolver: SpecifierResolver, tmp_path: Path) -> None:
    sub = tmp_path / "src" / "deep"
    sub.mkdir(parents=True)
    (tmp_path / "src" / "util.js").write_text("")
    assert resolver.resolve("../util", sub).specifier == (tmp_path / "src" / "util.js").as_posix()


def test_missing_raises_unresolved(resolver: SpecifierResolver, fs: CountingFileSystem, tmp_path: Path) -> None:
    importer = (tmp_path / "main.ts").as_posix()
    with pytest.raises(UnresolvedSpecifier, match="./missing") as exc_info:
        resolver.resolve("./missing", tmp_path, importer=importer)
    assert exc_info.value.specifier == "./missing"
    assert exc_info.value.importer == importer
    assert importer in str(exc_info.value)
    assert len(fs.probes) == 1 + 2 * len(VALID_EXTENSIONS)


def test_unresolved_keeps_raw_text_with_prefix(resolver: SpecifierResolver, tmp_path: Path) -> None:
    with pytest.raises(UnresolvedSpecifier) as exc_info:
        resolver.resolve("copy:./nope", tmp_path)
    assert exc_info.value.specifier == "copy:./nope"


def test_io_errors_propagate(tmp_path: Path) -> None:
    resolver = SpecifierResolver(fs=DeniedFileSystem())
    with pytest.raises(PermissionError):
        resolver.resolve("./a", tmp_path)
    # package ids never reach the filesystem
    assert resolver.resolve("react", tmp_path).is_package_id is True


def test_local_filesystem_not_found_is_false(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    f = tmp_path / "f.js"
    f.write_text("")
    assert fs.is_regular_file(f.as_posix()) is True
    assert fs.is_regular_file(tmp_path.as_posix()) is False
    assert fs.is_regular_file((tmp_path / "nope.js").as_posix()) is False
    # a path component that is a file raises NotADirectoryError internally
    assert fs.is_regular_file((f / "index.js").as_posix()) is False


def test_candidates_order(resolver: SpecifierResolver) -> None:
    assert resolver.candidates("./a", "/proj/src") == [
        "/proj/src/a",
        "/proj/src/a.js",
        "/proj/src/a.ts",
        "/proj/src/a.jsx",
        "/proj/src/a.tsx",
        "/proj/src/a/index.js",
        "/proj/src/a/index.ts",
        "/proj/src/a/index.jsx",
        "/proj/src/a/index.tsx",
    ]


def test_custom_prefixes_and_extensions(tmp_path: Path) -> None:
    (tmp_path / "m.mjs").write_text("")
    resolver = SpecifierResolver(prefixes=["raw:"], extensions=[".mjs"])
    assert resolver.prefixes == ("raw:",)
    assert resolver.extensions == (".mjs",)
    result = resolver.resolve("raw:./m", tmp_path)
    assert result.prefix == "raw:"
    assert result.specifier == (tmp_path / "m.mjs").as_posix()
    # copy: is not recognised by this resolver, so it is part of a package id
    assert resolver.resolve("copy:./m", tmp_path).is_package_id is True
