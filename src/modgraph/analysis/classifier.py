"""Classify top-level statements of a JS/TS module into import/export graph nodes."""

from __future__ import annotations

import os
from typing import Iterable, List, Optional, Union

from tree_sitter import Node, Tree

from .errors import UnsupportedConstruct
from .nodes import (
    Binding,
    Declaration,
    DeclarationKind,
    ExportDeclarationNode,
    ExportListNode,
    ExportNode,
    ImportExportGraph,
    ImportNode,
    ModuleSpecifier,
    ReexportNode,
    SourceSpan,
    VarKind,
)
from .resolver import SpecifierResolver

GraphNode = Union[ImportNode, ReexportNode, ExportListNode, ExportDeclarationNode]

_VAR_KINDS: dict[str, VarKind] = {
    "const": VarKind.CONST,
    "let": VarKind.LET,
    "var": VarKind.VAR,
}

# tree-sitter declaration node type -> exported declaration kind.
# Expression forms appear for default exports (export default function f() {}).
_DECLARATION_KINDS: dict[str, DeclarationKind] = {
    "function_declaration": DeclarationKind.FUNCTION,
    "function_signature": DeclarationKind.FUNCTION,
    "function_expression": DeclarationKind.FUNCTION,
    "function": DeclarationKind.FUNCTION,
    "generator_function_declaration": DeclarationKind.GENERATOR_FUNCTION,
    "generator_function": DeclarationKind.GENERATOR_FUNCTION,
    "class_declaration": DeclarationKind.CLASS,
    "abstract_class_declaration": DeclarationKind.CLASS,
    "class": DeclarationKind.CLASS,
}

_VARIABLE_STATEMENTS = ("lexical_declaration", "variable_declaration")

# Tokens that mark a parse error as a broken import/export statement
_MODULE_SYNTAX = frozenset({"import", "export", "import_statement", "export_statement"})

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}


def _get_text(node: Node, source: bytes) -> str:
    """Get text content of a node."""
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _decode_escape(escape: str) -> str:
    """Decode one JS escape sequence, backslash included."""
    body = escape[1:]
    if body.startswith("u{") and body.endswith("}"):
        return chr(int(body[2:-1], 16))
    if body[:1] in ("u", "x") and len(body) > 1:
        return chr(int(body[1:], 16))
    if body and all(c in "01234567" for c in body):
        # legacy octal, \0 included
        return chr(int(body, 8))
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body in ("\n", "\r\n", "\r", "\u2028", "\u2029"):
        # line continuation
        return ""
    return body


def _string_value(node: Node, source: bytes) -> str:
    """Cooked value of a string literal node."""
    parts: List[str] = []
    for child in node.named_children:
        if child.type == "escape_sequence":
            parts.append(_decode_escape(_get_text(child, source)))
        elif child.type == "string_fragment":
            parts.append(_get_text(child, source))
    return "".join(parts)


def _mentions_module_syntax(node: Node) -> bool:
    """True if a parse error node holds import/export tokens at its own level."""
    pending = [node]
    while pending:
        current = pending.pop()
        for child in current.children:
            if child.type in _MODULE_SYNTAX:
                return True
            if child.type == "ERROR":
                pending.append(child)
    return False


def _span(node: Node) -> SourceSpan:
    return SourceSpan(start=node.start_byte, end=node.end_byte)


def _first_child(node: Node, node_type: str) -> Optional[Node]:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


class StatementClassifier:
    """
    Build an ImportExportGraph from the top-level statements of one module.

    Only direct children of the program node are inspected. Each module
    specifier is resolved as soon as its statement is classified, so nodes
    come out in source order. Instances hold no per-file state.
    """

    def __init__(self, resolver: Optional[SpecifierResolver] = None) -> None:
        self._resolver = resolver if resolver is not None else SpecifierResolver()

    def build(self, tree: Tree, source: bytes, file_path: str) -> ImportExportGraph:
        """Classify every top-level statement of a parsed tree."""
        return self.classify(tree.root_node.children, source, file_path)

    def classify(
        self,
        statements: Iterable[Node],
        source: bytes,
        file_path: str,
        dirname: Optional[str] = None,
    ) -> ImportExportGraph:
        """
        Classify an ordered sequence of top-level statements.

        Args:
            statements: Top-level statement nodes in source order.
            source: Source bytes the nodes were parsed from.
            file_path: Path of the module, used for error messages.
            dirname: Directory relative specifiers resolve against
                (defaults to the directory of file_path).

        Returns:
            The complete graph; nothing is returned if any statement fails.

        Raises:
            UnsupportedConstruct: For statement shapes that are not modelled.
            UnresolvedSpecifier: For relative specifiers with no file on disk.
        """
        if dirname is None:
            dirname = os.path.dirname(file_path)

        imports: List[ImportNode] = []
        exports: List[ExportNode] = []
        reexports: List[ReexportNode] = []

        for statement in statements:
            node = self.classify_statement(statement, source, dirname, file_path)
            if node is None:
                continue
            if isinstance(node, ImportNode):
                imports.append(node)
            elif isinstance(node, ReexportNode):
                reexports.append(node)
            elif isinstance(node, (ExportListNode, ExportDeclarationNode)):
                exports.append(node)
            else:
                raise TypeError(f"Unexpected graph node: {type(node).__name__}")

        return ImportExportGraph(
            imports=tuple(imports),
            exports=tuple(exports),
            reexports=tuple(reexports),
        )

    def classify_statement(
        self, statement: Node, source: bytes, dirname: str, file_path: str
    ) -> Optional[GraphNode]:
        """Return the graph node for one statement, or None if it is not an import/export."""
        if statement.type == "ERROR":
            if _mentions_module_syntax(statement):
                raise UnsupportedConstruct(
                    "Unparseable import/export statement", _span(statement), file_path
                )
            return None
        if statement.type == "import_statement":
            self._check_well_formed(statement, file_path)
            return self._import(statement, source, dirname, file_path)
        if statement.type == "export_statement":
            self._check_well_formed(statement, file_path)
            return self._export(statement, source, dirname, file_path)
        return None

    def _check_well_formed(self, statement: Node, file_path: str) -> None:
        if statement.has_error:
            raise UnsupportedConstruct(
                f"Malformed {statement.type.replace('_', ' ')}", _span(statement), file_path
            )

    def _resolve(
        self, source_node: Node, source: bytes, dirname: str, file_path: str
    ) -> ModuleSpecifier:
        raw = _string_value(source_node, source)
        return self._resolver.resolve(raw, dirname, importer=file_path)

    def _import(
        self, statement: Node, source: bytes, dirname: str, file_path: str
    ) -> Optional[ImportNode]:
        # import x = require("y") is a TypeScript import-equals, not an ES import
        if _first_child(statement, "import_require_clause") is not None:
            return None

        source_node = statement.child_by_field_name("source")
        if source_node is None:
            raise UnsupportedConstruct("Import without a module specifier", _span(statement), file_path)
        module_specifier = self._resolve(source_node, source, dirname, file_path)
        span = _span(statement)

        clause = _first_child(statement, "import_clause")
        if clause is None:
            return ImportNode(module_specifier=module_specifier, span=span)

        default: Optional[str] = None
        namespace: Optional[str] = None
        named: Optional[tuple[Binding, ...]] = None
        for child in clause.named_children:
            if child.type == "identifier":
                default = _get_text(child, source)
            elif child.type == "namespace_import":
                name_node = _first_child(child, "identifier")
                if name_node is None:
                    raise UnsupportedConstruct("Namespace import without a name", span, file_path)
                namespace = _get_text(name_node, source)
            elif child.type == "named_imports":
                named = self._bindings(child, "import_specifier", source, span, file_path)

        return ImportNode(
            module_specifier=module_specifier,
            span=span,
            default=default,
            namespace=namespace,
            named=named,
        )

    def _export(
        self, statement: Node, source: bytes, dirname: str, file_path: str
    ) -> Optional[GraphNode]:
        span = _span(statement)
        source_node = statement.child_by_field_name("source")
        clause = _first_child(statement, "export_clause")
        namespace_export = _first_child(statement, "namespace_export")
        star = _first_child(statement, "*")
        declaration = statement.child_by_field_name("declaration")
        value = statement.child_by_field_name("value")
        is_default = _first_child(statement, "default") is not None

        namespace_marker = namespace_export if namespace_export is not None else star
        shapes = [
            shape
            for shape in (clause, namespace_marker, declaration, value)
            if shape is not None
        ]
        has_body = declaration is not None or value is not None
        if len(shapes) > 1 or (source_node is not None and has_body):
            raise UnsupportedConstruct("Ambiguous export statement", span, file_path)

        if source_node is not None:
            module_specifier = self._resolve(source_node, source, dirname, file_path)
            if clause is not None:
                return ReexportNode(
                    module_specifier=module_specifier,
                    span=span,
                    named=self._bindings(clause, "export_specifier", source, span, file_path),
                )
            alias: Optional[str] = None
            if namespace_export is not None:
                alias_node = next(
                    (c for c in namespace_export.named_children if c.type != "comment"), None
                )
                if alias_node is not None:
                    if alias_node.type == "string":
                        raise UnsupportedConstruct(
                            "String-literal export names are not supported", span, file_path
                        )
                    alias = _get_text(alias_node, source)
            return ReexportNode(
                module_specifier=module_specifier,
                span=span,
                namespace=True,
                namespace_alias=alias,
            )

        if namespace_marker is not None:
            raise UnsupportedConstruct("Namespace export without a module specifier", span, file_path)

        if clause is not None:
            return ExportListNode(
                span=span,
                named=self._bindings(clause, "export_specifier", source, span, file_path),
            )

        if declaration is not None:
            return self._declaration(declaration, is_default, source, span, file_path)

        if value is not None and is_default and value.type in _DECLARATION_KINDS:
            # export default function () {} / class {} parse as expressions
            return self._declaration(value, is_default, source, span, file_path)

        # export default <expr>, export = x, export as namespace X
        return None

    def _declaration(
        self,
        declaration: Node,
        is_default: bool,
        source: bytes,
        span: SourceSpan,
        file_path: str,
    ) -> Optional[ExportDeclarationNode]:
        if declaration.type == "ambient_declaration":
            # export declare const/function/class: classify the wrapped declaration
            inner = next(
                (
                    c
                    for c in declaration.named_children
                    if c.type in _VARIABLE_STATEMENTS or c.type in _DECLARATION_KINDS
                ),
                None,
            )
            if inner is None:
                # declare global {}, declare module "x" {}, declare enum ...
                return None
            return self._declaration(inner, is_default, source, span, file_path)

        if declaration.type in _VARIABLE_STATEMENTS:
            return ExportDeclarationNode(
                span=span,
                kind=DeclarationKind.VARIABLE,
                is_default=is_default,
                declarations=self._variable_declarations(declaration, source, span, file_path),
            )

        kind = _DECLARATION_KINDS.get(declaration.type)
        if kind is None:
            # interface, type alias, enum, namespace
            return None

        name_node = declaration.child_by_field_name("name")
        if name_node is None:
            raise UnsupportedConstruct(
                f"Anonymous default export of a {kind.value.replace('_', ' ')}", span, file_path
            )
        return ExportDeclarationNode(
            span=span,
            kind=kind,
            is_default=is_default,
            declarations=(Declaration(name=_get_text(name_node, source)),),
        )

    def _variable_declarations(
        self, declaration: Node, source: bytes, span: SourceSpan, file_path: str
    ) -> tuple[Declaration, ...]:
        keyword = declaration.children[0].type if declaration.child_count else ""
        var_kind = _VAR_KINDS.get(keyword)
        if var_kind is None:
            raise UnsupportedConstruct(f"Unsupported variable keyword {keyword!r}", span, file_path)

        result: List[Declaration] = []
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            if name_node is None or name_node.type != "identifier":
                raise UnsupportedConstruct(
                    "Destructuring export declarations are not supported", span, file_path
                )
            result.append(Declaration(name=_get_text(name_node, source), var_kind=var_kind))
        return tuple(result)

    def _bindings(
        self,
        clause: Node,
        specifier_type: str,
        source: bytes,
        span: SourceSpan,
        file_path: str,
    ) -> tuple[Binding, ...]:
        """Collect `name [as alias]` entries of a named imports/exports clause."""
        result: List[Binding] = []
        for specifier in clause.named_children:
            if specifier.type != specifier_type:
                continue
            name_node = specifier.child_by_field_name("name")
            alias_node = specifier.child_by_field_name("alias")
            if name_node is None:
                raise UnsupportedConstruct(f"Malformed {specifier_type.replace('_', ' ')}", span, file_path)
            if name_node.type == "string" or (alias_node is not None and alias_node.type == "string"):
                raise UnsupportedConstruct(
                    "String-literal binding names are not supported", span, file_path
                )
            result.append(
                Binding(
                    name=_get_text(name_node, source),
                    alias=_get_text(alias_node, source) if alias_node is not None else None,
                )
            )
        return tuple(result)


def build_graph(
    tree: Tree,
    source: bytes,
    file_path: str,
    resolver: Optional[SpecifierResolver] = None,
) -> ImportExportGraph:
    """Convenience wrapper: classify a parsed tree with a fresh classifier."""
    return StatementClassifier(resolver).build(tree, source, file_path)
