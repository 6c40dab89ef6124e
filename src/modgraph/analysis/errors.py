"""Errors raised while building a module's import/export graph."""

from __future__ import annotations

from typing import Optional

from .nodes import SourceSpan


class ImportExportError(Exception):
    """Base class for graph extraction failures."""


class UnsupportedConstruct(ImportExportError):
    """A statement shape that is deliberately not modelled (e.g. destructuring exports)."""

    def __init__(self, message: str, span: SourceSpan, file_path: Optional[str] = None) -> None:
        self.message = message
        self.span = span
        self.file_path = file_path
        location = f"{file_path}@{span.start}-{span.end}" if file_path else f"@{span.start}-{span.end}"
        super().__init__(f"{message} ({location})")


class UnresolvedSpecifier(ImportExportError):
    """A relative module specifier with no matching file on disk."""

    def __init__(self, specifier: str, importer: Optional[str] = None) -> None:
        self.specifier = specifier
        self.importer = importer
        msg = f"Failed to resolve module specifier to a file with a supported extension: {specifier!r}"
        if importer:
            msg += f" (imported from {importer})"
        super().__init__(msg)


class LoaderError(ImportExportError):
    """Wraps any failure while loading one file; the original error is the __cause__."""

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        super().__init__(f"Failed to parse file: {file_path}")
