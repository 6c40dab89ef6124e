"""Module specifier resolution: transport prefixes, package ids, relative files."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Optional, Protocol, Sequence, Tuple

from .errors import UnresolvedSpecifier
from .nodes import ModuleSpecifier

# Order matters: the first matching prefix is stripped
DEFAULT_PREFIXES: Tuple[str, ...] = ("copy:", "webworker:")

# Order matters: earlier extensions win when several candidate files exist
VALID_EXTENSIONS: Tuple[str, ...] = (".js", ".ts", ".jsx", ".tsx")


class FileSystem(Protocol):
    """Filesystem primitive used for probing candidate files."""

    def is_regular_file(self, path: str) -> bool: ...


class LocalFileSystem:
    """Probe the local disk with os.stat."""

    def is_regular_file(self, path: str) -> bool:
        try:
            st = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return False
        return stat.S_ISREG(st.st_mode)


def split_prefix(raw: str, prefixes: Sequence[str] = DEFAULT_PREFIXES) -> Tuple[Optional[str], str]:
    """Return (prefix, remainder) for the first prefix that raw starts with."""
    for prefix in prefixes:
        if raw.startswith(prefix):
            return prefix, raw[len(prefix) :]
    return None, raw


class SpecifierResolver:
    """Turn raw specifier text into a package id or a verified file path."""

    def __init__(
        self,
        prefixes: Sequence[str] = DEFAULT_PREFIXES,
        extensions: Sequence[str] = VALID_EXTENSIONS,
        fs: Optional[FileSystem] = None,
    ) -> None:
        self._prefixes = tuple(prefixes)
        self._extensions = tuple(extensions)
        self._fs = fs if fs is not None else LocalFileSystem()

    @property
    def prefixes(self) -> Tuple[str, ...]:
        return self._prefixes

    @property
    def extensions(self) -> Tuple[str, ...]:
        return self._extensions

    def resolve(
        self, raw: str, dirname: Path | str, importer: Optional[str] = None
    ) -> ModuleSpecifier:
        """
        Resolve a module specifier relative to the importing file's directory.

        Args:
            raw: Specifier text as written in the source (quotes removed).
            dirname: Directory of the importing file.
            importer: Path of the importing file, only used in error messages.

        Returns:
            ModuleSpecifier; package ids are returned verbatim without touching the disk.

        Raises:
            UnresolvedSpecifier: If no candidate file exists for a relative specifier.
            OSError: If a probe fails for a reason other than the file not existing.
        """
        prefix, specifier = split_prefix(raw, self._prefixes)
        if not specifier.startswith("."):
            return ModuleSpecifier(specifier=specifier, is_package_id=True, prefix=prefix)

        for candidate in self.candidates(specifier, dirname):
            if self._fs.is_regular_file(candidate):
                return ModuleSpecifier(specifier=candidate, is_package_id=False, prefix=prefix)

        raise UnresolvedSpecifier(raw, importer)

    def candidates(self, specifier: str, dirname: Path | str) -> list[str]:
        """Candidate file paths for a relative specifier, in probe order."""
        base = os.path.normpath(os.path.join(os.fspath(dirname), specifier))
        result = [base]
        result.extend(base + ext for ext in self._extensions)
        result.extend(os.path.join(base, "index" + ext) for ext in self._extensions)
        return [Path(p).as_posix() for p in result]
