"""Shared utilities: ignore patterns."""

from modgraph.utils.ignore import (
    collect_patterns,
    compile_patterns,
    ignore_spec_for,
    is_ignored,
    read_pattern_file,
)

__all__ = [
    "collect_patterns",
    "compile_patterns",
    "ignore_spec_for",
    "is_ignored",
    "read_pattern_file",
]
