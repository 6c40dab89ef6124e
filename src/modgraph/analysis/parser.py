"""tree-sitter front end: pick a grammar for a file and parse its source."""

from __future__ import annotations

from pathlib import Path

import tree_sitter_typescript as tsts
from tree_sitter import Language, Parser, Tree

# The TSX grammar accepts plain JavaScript and JSX as well
_EXTENSION_TO_LANGUAGE: dict[str, str] = {
    ".js": "tsx",
    ".jsx": "tsx",
    ".ts": "typescript",
    ".tsx": "tsx",
}

_LANGUAGES: dict[str, Language] = {
    "typescript": Language(tsts.language_typescript()),
    "tsx": Language(tsts.language_tsx()),
}


def language_for_path(file_path: Path | str) -> str:
    """
    Return the grammar key for a file based on its extension.

    Raises:
        ValueError: If the extension is not supported.
    """
    suffix = Path(file_path).suffix.lower()
    language = _EXTENSION_TO_LANGUAGE.get(suffix)
    if language is None:
        raise ValueError(f"No grammar available for file: {Path(file_path).name!r}")
    return language


def supports_path(file_path: Path | str) -> bool:
    """Return True if the file's extension has a grammar."""
    return Path(file_path).suffix.lower() in _EXTENSION_TO_LANGUAGE


def supported_extensions() -> list[str]:
    return list(_EXTENSION_TO_LANGUAGE.keys())


def parse_source(source: bytes, language: str = "tsx") -> Tree:
    """Parse source bytes with the given grammar. A new Parser is built per call."""
    lang = _LANGUAGES.get(language)
    if lang is None:
        raise ValueError(f"Unknown grammar: {language!r}")
    return Parser(lang).parse(source)
