"""Configuration: defaults, constants, and config loading (global + project overrides)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from modgraph.analysis.resolver import DEFAULT_PREFIXES, VALID_EXTENSIONS, SpecifierResolver

# Directory name inside a project for modgraph settings
MODGRAPH_DIR = ".modgraph"
CONFIG_FILENAME = "config.json"


def _global_config_dir() -> Path:
    return Path.home() / ".config" / "modgraph"


def global_config_path() -> Path:
    """Path to global config file (~/.config/modgraph/config.json)."""
    return _global_config_dir() / CONFIG_FILENAME


def default_config() -> dict[str, Any]:
    """Default configuration."""
    return {
        "resolver": {
            "prefixes": list(DEFAULT_PREFIXES),
            "extensions": list(VALID_EXTENSIONS),
        },
        "walker": {
            "extensions": list(VALID_EXTENSIONS),
            "jobs": 1,
        },
        "logging": {
            "level": "INFO",
            "file": None,
        },
        "ignore": {
            "use_gitignore": True,
            "builtin_patterns": [".git/", ".modgraph/", "node_modules/"],
            "additional_patterns": [],
        },
    }


def _load_json(path: Path) -> dict[str, Any] | None:
    """Load JSON from path; return None if file missing or invalid."""
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
    except (json.JSONDecodeError, OSError):
        return None
    return data if isinstance(data, dict) else None


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base recursively. Mutates base; returns base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_global_config() -> dict[str, Any]:
    """Load global config from ~/.config/modgraph/config.json. Returns defaults if missing."""
    data = _load_json(global_config_path())
    if data is None:
        return default_config()
    return _deep_merge(default_config(), data)


def project_config_path(project_root: Path) -> Path:
    """Path to project-local config (<project>/.modgraph/config.json)."""
    return project_root / MODGRAPH_DIR / CONFIG_FILENAME


def load_config(project_root: Path | None = None) -> dict[str, Any]:
    """
    Load merged configuration: defaults + global (~/.config/modgraph/config.json) + project overrides.

    If project_root is None, only global config (and defaults) are used.
    """
    merged = load_global_config()
    if project_root is not None:
        project_data = _load_json(project_config_path(project_root.resolve()))
        if project_data is not None:
            _deep_merge(merged, project_data)
    return merged


def resolve_path(path: Path) -> Path:
    """Resolve path to absolute, normalized."""
    return path.resolve()


def get_project_root(path: Path) -> Path:
    """Resolve path to absolute. If it is a file, use its parent."""
    resolved = path.resolve()
    if resolved.is_file():
        return resolved.parent
    return resolved


def find_project_root(path: Path) -> Path | None:
    """
    Walk upward from path looking for a directory that contains .modgraph.
    Returns that directory if found, else None.
    """
    resolved = path.resolve()
    if resolved.is_file():
        resolved = resolved.parent
    current: Path | None = resolved
    while current is not None:
        if (current / MODGRAPH_DIR).is_dir():
            return current
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def resolver_from_config(config: dict[str, Any]) -> SpecifierResolver:
    """Build a SpecifierResolver from the 'resolver' section (lists frozen to tuples)."""
    cfg = config.get("resolver") or {}
    return SpecifierResolver(
        prefixes=tuple(cfg.get("prefixes") or DEFAULT_PREFIXES),
        extensions=tuple(cfg.get("extensions") or VALID_EXTENSIONS),
    )
