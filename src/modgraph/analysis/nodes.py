"""Import/export graph data models for a single module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class DeclarationKind(Enum):
    """Kinds of inline exported declarations."""

    VARIABLE = "variable"
    FUNCTION = "function"
    GENERATOR_FUNCTION = "generator_function"
    CLASS = "class"


class VarKind(Enum):
    """Keyword of an exported variable statement."""

    CONST = "const"
    LET = "let"
    VAR = "var"


class ImportClause(Enum):
    """Shape of an import statement's binding clause."""

    SIDE_EFFECT = "side_effect"
    DEFAULT = "default"
    NAMESPACE = "namespace"
    NAMED = "named"
    DEFAULT_NAMESPACE = "default_namespace"
    DEFAULT_NAMED = "default_named"


@dataclass(frozen=True)
class SourceSpan:
    """UTF-8 byte offsets of a statement in its source file."""

    start: int
    end: int

    def text(self, source: bytes | str) -> str:
        """Return the source text covered by this span."""
        if isinstance(source, str):
            source = source.encode("utf-8")
        return source[self.start : self.end].decode("utf-8", errors="replace")

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class ModuleSpecifier:
    """Target of an import/export-from clause after resolution."""

    specifier: str  # Package id verbatim, or absolute posix path of the target file
    is_package_id: bool
    prefix: Optional[str] = None  # Transport tag such as "copy:", never used for resolution

    def to_dict(self) -> dict:
        return {
            "specifier": self.specifier,
            "is_package_id": self.is_package_id,
            "prefix": self.prefix,
        }


@dataclass(frozen=True)
class Binding:
    """
    One entry of a brace-delimited binding list: ``name [as alias]``.

    The same shape serves imports and exports. For imports the bound local
    name is ``alias or name`` and the original exported symbol is ``name``
    (only reported when renamed). For exports ``name`` is the original or
    local name and ``alias`` the name it is exported under.
    """

    name: str
    alias: Optional[str] = None

    @property
    def local_id(self) -> str:
        return self.alias if self.alias is not None else self.name

    @property
    def symbol_id(self) -> Optional[str]:
        return self.name if self.alias is not None else None

    @property
    def is_default_relabel(self) -> bool:
        """True when the entry is exported as the module's default export."""
        return self.alias == "default"

    def to_import_dict(self) -> dict:
        d = {"local_id": self.local_id}
        if self.symbol_id is not None:
            d["symbol_id"] = self.symbol_id
        return d

    def to_export_dict(self) -> dict:
        d = {"name": self.name}
        if self.alias is not None:
            d["alias"] = self.alias
        return d


@dataclass(frozen=True)
class Declaration:
    """A name introduced by an exported declaration."""

    name: str
    alias: Optional[str] = None
    var_kind: Optional[VarKind] = None  # Only for DeclarationKind.VARIABLE

    def to_dict(self) -> dict:
        d: dict = {"name": self.name}
        if self.alias is not None:
            d["alias"] = self.alias
        if self.var_kind is not None:
            d["var_kind"] = self.var_kind.value
        return d


@dataclass(frozen=True)
class ImportNode:
    """An ``import`` statement."""

    module_specifier: ModuleSpecifier
    span: SourceSpan
    default: Optional[str] = None
    namespace: Optional[str] = None
    named: Optional[Tuple[Binding, ...]] = None

    def __post_init__(self) -> None:
        if self.namespace is not None and self.named is not None:
            raise ValueError("An import cannot bind both a namespace and named bindings")

    @property
    def clause(self) -> ImportClause:
        if self.namespace is not None:
            return ImportClause.DEFAULT_NAMESPACE if self.default is not None else ImportClause.NAMESPACE
        if self.named is not None:
            return ImportClause.DEFAULT_NAMED if self.default is not None else ImportClause.NAMED
        if self.default is not None:
            return ImportClause.DEFAULT
        return ImportClause.SIDE_EFFECT

    def to_dict(self) -> dict:
        d: dict = {
            "type": "import",
            "module_specifier": self.module_specifier.to_dict(),
            "span": self.span.to_dict(),
        }
        if self.default is not None:
            d["default"] = self.default
        if self.namespace is not None:
            d["namespace"] = self.namespace
        if self.named is not None:
            d["named"] = [b.to_import_dict() for b in self.named]
        return d


@dataclass(frozen=True)
class ReexportNode:
    """An ``export ... from "module"`` statement."""

    module_specifier: ModuleSpecifier
    span: SourceSpan
    named: Optional[Tuple[Binding, ...]] = None
    namespace: bool = False
    namespace_alias: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.named is not None) == self.namespace:
            raise ValueError("A re-export forwards either named bindings or the whole namespace")
        if self.namespace_alias is not None and not self.namespace:
            raise ValueError("namespace_alias requires a namespace re-export")

    def to_dict(self) -> dict:
        d: dict = {
            "type": "reexport",
            "module_specifier": self.module_specifier.to_dict(),
            "span": self.span.to_dict(),
        }
        if self.named is not None:
            d["named"] = [b.to_export_dict() for b in self.named]
        if self.namespace:
            d["namespace"] = True
            if self.namespace_alias is not None:
                d["namespace_alias"] = self.namespace_alias
        return d


@dataclass(frozen=True)
class ExportListNode:
    """An ``export { a, b as c }`` statement exporting local symbols."""

    span: SourceSpan
    named: Tuple[Binding, ...]

    def to_dict(self) -> dict:
        return {
            "type": "export_list",
            "span": self.span.to_dict(),
            "named": [b.to_export_dict() for b in self.named],
        }


@dataclass(frozen=True)
class ExportDeclarationNode:
    """An ``export [default] <declaration>`` statement."""

    span: SourceSpan
    kind: DeclarationKind
    is_default: bool
    declarations: Tuple[Declaration, ...]

    def __post_init__(self) -> None:
        is_variable = self.kind == DeclarationKind.VARIABLE
        for decl in self.declarations:
            if (decl.var_kind is not None) != is_variable:
                raise ValueError("var_kind is set exactly for variable declarations")

    def to_dict(self) -> dict:
        return {
            "type": "export_declaration",
            "span": self.span.to_dict(),
            "kind": self.kind.value,
            "is_default": self.is_default,
            "declarations": [d.to_dict() for d in self.declarations],
        }


ExportNode = Union[ExportListNode, ExportDeclarationNode]


@dataclass(frozen=True)
class ImportExportGraph:
    """All module-level imports, exports and re-exports of one file, in source order."""

    imports: Tuple[ImportNode, ...] = field(default_factory=tuple)
    exports: Tuple[ExportNode, ...] = field(default_factory=tuple)
    reexports: Tuple[ReexportNode, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "imports": [n.to_dict() for n in self.imports],
            "exports": [n.to_dict() for n in self.exports],
            "reexports": [n.to_dict() for n in self.reexports],
        }
