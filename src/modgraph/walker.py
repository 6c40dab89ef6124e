"""Project walker: collect JS/TS files under a path and build one graph per file."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence

from pathspec import PathSpec

from modgraph.analysis import ImportExportGraph, LoaderError, SpecifierResolver, load_graph
from modgraph.analysis.resolver import VALID_EXTENSIONS
from modgraph.config import find_project_root, get_project_root, load_config, resolver_from_config
from modgraph.utils.ignore import ignore_spec_for, is_ignored

logger = logging.getLogger(__name__)


@dataclass
class WalkResult:
    """Graphs and per-file errors of one walk, keyed by posix path relative to root."""

    root: Path
    graphs: dict[str, ImportExportGraph] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    def graph_for(self, rel_path: str) -> Optional[ImportExportGraph]:
        """Return the graph for a path relative to root (e.g. 'src/one.ts')."""
        return self.graphs.get(Path(rel_path).as_posix())

    def to_dict(self) -> dict:
        return {
            "root": self.root.as_posix(),
            "files": {k: g.to_dict() for k, g in self.graphs.items()},
            "errors": dict(self.errors),
        }


def describe_error(error: BaseException) -> str:
    """Message of a loader error followed by its cause, if any."""
    cause = error.__cause__
    if cause is None:
        return str(error)
    return f"{error}: {cause}"


def collect_files(
    path: Path,
    project_root: Path,
    spec: PathSpec,
    extensions: Sequence[str] = VALID_EXTENSIONS,
) -> list[Path]:
    """Collect files under path with a handled extension (respecting ignore patterns)."""
    path = path.resolve()
    wanted = {e.lower() for e in extensions}

    if path.is_file():
        if is_ignored(path, project_root, spec) or path.suffix.lower() not in wanted:
            return []
        return [path]

    if not path.is_dir():
        return []

    files: list[Path] = []
    for entry in path.rglob("*"):
        if not entry.is_file():
            continue
        if entry.suffix.lower() not in wanted:
            continue
        if is_ignored(entry, project_root, spec):
            continue
        files.append(entry)
    return sorted(files, key=lambda p: p.as_posix())


def walk(
    path: Path,
    config: Optional[dict[str, Any]] = None,
    jobs: Optional[int] = None,
    resolver: Optional[SpecifierResolver] = None,
) -> WalkResult:
    """
    Build import/export graphs for every handled file under path.

    A file either contributes a complete graph or an entry in errors.
    With jobs > 1 files are processed on a thread pool; results are still
    reported in sorted path order.
    """
    path = Path(path).resolve()
    project_root = find_project_root(path) or get_project_root(path)
    if config is None:
        config = load_config(project_root)
    walker_cfg = config.get("walker") or {}
    if jobs is None:
        jobs = int(walker_cfg.get("jobs") or 1)
    if resolver is None:
        resolver = resolver_from_config(config)

    spec = ignore_spec_for(project_root, config)
    files = collect_files(
        path, project_root, spec, walker_cfg.get("extensions") or VALID_EXTENSIONS
    )
    root = path if path.is_dir() else path.parent
    result = WalkResult(root=root)
    logger.info("Building graphs for %d file(s) under %s", len(files), root.as_posix())

    def _load(file_path: Path) -> tuple[str, Optional[ImportExportGraph], Optional[str]]:
        rel = file_path.relative_to(root).as_posix()
        try:
            return rel, load_graph(file_path, resolver), None
        except LoaderError as e:
            logger.warning("%s", describe_error(e))
            return rel, None, describe_error(e)

    if jobs > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            outcomes = list(pool.map(_load, files))
    else:
        outcomes = [_load(f) for f in files]

    for rel, graph, error in outcomes:
        if graph is not None:
            result.graphs[rel] = graph
        else:
            result.errors[rel] = error or "unknown error"
    return result
