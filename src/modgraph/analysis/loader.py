"""Per-file loader: read, parse and classify one module."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .classifier import StatementClassifier
from .errors import LoaderError
from .nodes import ImportExportGraph
from .parser import language_for_path, parse_source
from .resolver import SpecifierResolver

logger = logging.getLogger(__name__)


def load_graph(
    file_path: Path | str,
    resolver: Optional[SpecifierResolver] = None,
    source: Optional[bytes] = None,
) -> ImportExportGraph:
    """
    Build the import/export graph of a single file.

    Args:
        file_path: Path to the module. Relative specifiers resolve against its directory.
        resolver: Specifier resolver (default prefixes and extensions if None).
        source: Source bytes; read from file_path when None.

    Returns:
        The file's ImportExportGraph.

    Raises:
        LoaderError: Wrapping any parse, classification, resolution or I/O failure.
    """
    path = Path(file_path).absolute()
    file_path_str = path.as_posix()
    try:
        if source is None:
            source = path.read_bytes()
        tree = parse_source(source, language_for_path(path))
        graph = StatementClassifier(resolver).build(tree, source, file_path_str)
    except Exception as e:
        raise LoaderError(file_path_str) from e

    logger.debug(
        "%s: %d import(s), %d export(s), %d re-export(s)",
        file_path_str,
        len(graph.imports),
        len(graph.exports),
        len(graph.reexports),
    )
    return graph
