"""Unit tests for config (defaults, project root lookup, resolver construction)."""

from __future__ import annotations

import json
from pathlib import Path

from modgraph.config import (
    MODGRAPH_DIR,
    default_config,
    find_project_root,
    get_project_root,
    load_config,
    project_config_path,
    resolve_path,
    resolver_from_config,
)


def test_default_config() -> None:
    cfg = default_config()
    assert cfg["resolver"]["prefixes"] == ["copy:", "webworker:"]
    assert cfg["resolver"]["extensions"] == [".js", ".ts", ".jsx", ".tsx"]
    assert cfg["walker"]["jobs"] == 1
    assert any(".modgraph" in p for p in cfg["ignore"]["builtin_patterns"])


def test_resolve_path(tmp_path: Path) -> None:
    p = tmp_path / "sub" / ".." / "sub"
    assert resolve_path(p).resolve() == (tmp_path / "sub").resolve()


def test_get_project_root_file(tmp_path: Path) -> None:
    f = tmp_path / "file.ts"
    f.write_text("x")
    assert get_project_root(f) == tmp_path.resolve()


def test_find_project_root_not_found(tmp_path: Path) -> None:
    (tmp_path / "a" / "b").mkdir(parents=True)
    assert find_project_root(tmp_path / "a" / "b") is None


def test_find_project_root_found(tmp_path: Path) -> None:
    (tmp_path / MODGRAPH_DIR).mkdir(parents=True)
    (tmp_path / "src" / "deep").mkdir(parents=True)
    root = find_project_root(tmp_path / "src" / "deep")
    assert root == tmp_path.resolve()


def test_project_config_overrides(tmp_path: Path) -> None:
    path = project_config_path(tmp_path)
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps({"resolver": {"extensions": [".ts"]}, "walker": {"jobs": 4}}))
    cfg = load_config(tmp_path)
    assert cfg["resolver"]["extensions"] == [".ts"]
    # untouched keys survive the deep merge
    assert cfg["resolver"]["prefixes"] == ["copy:", "webworker:"]
    assert cfg["walker"]["jobs"] == 4


def test_invalid_project_config_is_ignored(tmp_path: Path) -> None:
    path = project_config_path(tmp_path)
    path.parent.mkdir(parents=True)
    path.write_text("{not json")
    assert load_config(tmp_path)["walker"] == load_config(None)["walker"]


def test_resolver_from_config_freezes_lists() -> None:
    cfg = default_config()
    cfg["resolver"]["prefixes"] = ["raw:"]
    resolver = resolver_from_config(cfg)
    assert resolver.prefixes == ("raw:",)
    assert resolver.extensions == (".js", ".ts", ".jsx", ".tsx")
    cfg["resolver"]["prefixes"].append("late:")
    assert resolver.prefixes == ("raw:",)
