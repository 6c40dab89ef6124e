"""Import/export graph extraction for JavaScript and TypeScript modules."""

from .classifier import StatementClassifier, build_graph
from .errors import ImportExportError, LoaderError, UnresolvedSpecifier, UnsupportedConstruct
from .loader import load_graph
from .nodes import (
    Binding,
    Declaration,
    DeclarationKind,
    ExportDeclarationNode,
    ExportListNode,
    ImportClause,
    ImportExportGraph,
    ImportNode,
    ModuleSpecifier,
    ReexportNode,
    SourceSpan,
    VarKind,
)
from .resolver import LocalFileSystem, SpecifierResolver

__all__ = [
    "Binding",
    "Declaration",
    "DeclarationKind",
    "ExportDeclarationNode",
    "ExportListNode",
    "ImportClause",
    "ImportExportError",
    "ImportExportGraph",
    "ImportNode",
    "LoaderError",
    "LocalFileSystem",
    "ModuleSpecifier",
    "ReexportNode",
    "SourceSpan",
    "SpecifierResolver",
    "StatementClassifier",
    "UnresolvedSpecifier",
    "UnsupportedConstruct",
    "VarKind",
    "build_graph",
    "load_graph",
]
