"""Which JS/TS files the walker skips.

Patterns use gitignore syntax and come from four places, in order: the
``ignore.builtin_patterns`` config list (``node_modules/`` and friends), the
project's ``.modgraphignore``, its ``.gitignore`` when ``ignore.use_gitignore``
is on, and ``ignore.additional_patterns``. Later patterns win, so a ``!``
line in ``.modgraphignore`` can bring back a file a builtin pattern hides.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

from pathspec import PathSpec

MODGRAPHIGNORE = ".modgraphignore"
GITIGNORE = ".gitignore"


def read_pattern_file(path: Path) -> list[str]:
    """Patterns of one ignore file; a missing file has none."""
    if not path.is_file():
        return []
    lines = (line.strip() for line in path.read_text(encoding="utf-8").splitlines())
    return [line for line in lines if line and not line.startswith("#")]


def collect_patterns(project_root: Path, config: dict[str, Any]) -> list[str]:
    """All ignore patterns for a project, lowest precedence first."""
    root = Path(project_root).resolve()
    settings = config.get("ignore") or {}
    patterns = list(settings.get("builtin_patterns") or [])
    patterns += read_pattern_file(root / MODGRAPHIGNORE)
    if settings.get("use_gitignore", True):
        patterns += read_pattern_file(root / GITIGNORE)
    patterns += list(settings.get("additional_patterns") or [])
    return patterns


def compile_patterns(patterns: Iterable[str]) -> PathSpec:
    return PathSpec.from_lines("gitignore", patterns)


def ignore_spec_for(project_root: Path, config: dict[str, Any]) -> PathSpec:
    """Compiled ignore rules the walker applies under project_root."""
    return compile_patterns(collect_patterns(project_root, config))


def is_ignored(path: Path | str, project_root: Path | str, spec: PathSpec) -> bool:
    """
    True if the walker should skip path.

    Matching is done on the posix path relative to project_root. Files
    outside the project are never skipped, so a walk started on a single
    file elsewhere still loads it.
    """
    try:
        rel = Path(path).resolve().relative_to(Path(project_root).resolve()).as_posix()
    except ValueError:
        return False
    # "vendor/" only matches with a trailing slash when the path is the directory itself
    return spec.match_file(rel) or spec.match_file(rel + "/")
