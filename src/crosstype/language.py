"""Backend capability interface and the emission pipeline shared by all backends.

A backend subclasses :class:`Language` and supplies the special-type tokens,
naming convention, comment delimiters and per-declaration writers. Everything
else (type dispatch, the 64-bit and map-key guards, comment layout, generic
skeletons, banner, imports and declaration ordering) lives here once.
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TextIO, assert_never

from crosstype import __version__
from crosstype.errors import EmitError, GenericKeyForbidden, IOFailure, UnsupportedNumericWidth
from crosstype.ir import (
    AlgebraicEnum,
    ConstDecl,
    Declaration,
    EnumDecl,
    ParsedModule,
    SimpleType,
    SpecialKind,
    SpecialType,
    StructDecl,
    TypeAliasDecl,
    TypeNode,
    UnitEnum,
)
from crosstype.naming import needs_quoting, quote_literal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LanguageOptions:
    """Per-backend settings, built once per run and shared read-only."""

    type_mappings: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    no_version_header: bool = False

    @classmethod
    def build(
        cls,
        type_mappings: Mapping[str, str] | None = None,
        *,
        no_version_header: bool = False,
    ) -> LanguageOptions:
        return cls(MappingProxyType(dict(type_mappings or {})), no_version_header)


class Language(ABC):
    """One output language. Subclasses provide the hooks below."""

    name: str = ""
    file_extension: str = ""
    keywords: frozenset[str] = frozenset()

    indent_unit = "  "
    comment_single = ("/* ", " */")
    comment_open = "/*"
    comment_line = " * "
    comment_close = " */"

    generic_open = "<"
    generic_close = ">"

    def __init__(self, options: LanguageOptions | None = None) -> None:
        self.options = options or LanguageOptions()

    @property
    def type_mappings(self) -> Mapping[str, str]:
        return self.options.type_mappings

    # ── Type formatting ────────────────────────────────────────

    def format_type(self, ty: TypeNode, generics: Sequence[str] = ()) -> str:
        if isinstance(ty, SimpleType):
            return self.format_simple_type(ty.name, ty.args, generics)
        if isinstance(ty, SpecialType):
            return self._format_special(ty, generics)
        assert_never(ty)

    def format_simple_type(
        self,
        name: str,
        args: Sequence[TypeNode] = (),
        generics: Sequence[str] = (),
    ) -> str:
        """Declared generic parameters, then the override table, then the convention."""
        if name in generics and not args:
            return self.format_type_variable(name)
        mapped = self.type_mappings.get(name)
        base = mapped if mapped is not None else self.type_name(name)
        if not args:
            return base
        formatted = [self.format_type(a, generics) for a in args]
        return self.format_generic_application(base, formatted)

    def _format_special(self, ty: SpecialType, generics: Sequence[str]) -> str:
        if ty.kind.is_wide:
            raise UnsupportedNumericWidth(ty.kind.value)
        if ty.kind is SpecialKind.MAP:
            key = ty.args[0]
            if isinstance(key, SimpleType) and not key.args and key.name in generics:
                raise GenericKeyForbidden(key.name)
        mapped = self.type_mappings.get(ty.kind.value)
        if mapped is not None:
            # Element types are still checked even though the token hides them
            for arg in ty.args:
                self.format_type(arg, generics)
            return mapped
        return self.format_special_type(ty, generics)

    @abstractmethod
    def format_special_type(self, ty: SpecialType, generics: Sequence[str]) -> str:
        """Token for a special kind. Never called for 64-bit kinds."""

    @abstractmethod
    def type_name(self, name: str) -> str:
        """Apply the backend's type naming convention."""

    @abstractmethod
    def const_name(self, name: str) -> str:
        """Apply the backend's constant naming convention."""

    def format_type_variable(self, name: str) -> str:
        return name

    def format_generic_application(self, base: str, args: Sequence[str]) -> str:
        return f"{base}{self.generic_open}{', '.join(args)}{self.generic_close}"

    def generic_params(self, generics: Sequence[str]) -> str:
        if not generics:
            return ""
        params = ", ".join(self.format_type_variable(g) for g in generics)
        return f"{self.generic_open}{params}{self.generic_close}"

    # ── Naming ─────────────────────────────────────────────────

    def requires_quoting(self, name: str) -> bool:
        return needs_quoting(name, self.keywords)

    def property_name(self, name: str) -> str:
        """Field name as written; illegal or reserved names are quoted verbatim."""
        if self.requires_quoting(name):
            return self.quote_identifier(name)
        return name

    def quote_identifier(self, name: str) -> str:
        return quote_literal(name)

    # ── Output ─────────────────────────────────────────────────

    @staticmethod
    def _write(w: TextIO, text: str) -> None:
        try:
            w.write(text)
        except (OSError, ValueError) as e:  # ValueError: closed stream
            raise IOFailure(str(e)) from e

    def _writeln(self, w: TextIO, text: str = "") -> None:
        self._write(w, text + "\n")

    def write_comments(self, w: TextIO, indent: int, comments: Sequence[str]) -> None:
        if not comments:
            return
        pad = self.indent_unit * indent
        lines = [c.replace("*/", "*\\/") for c in comments]
        if len(lines) == 1:
            start, end = self.comment_single
            self._writeln(w, f"{pad}{start}{lines[0]}{end}")
            return
        self._writeln(w, f"{pad}{self.comment_open}")
        for line in lines:
            self._writeln(w, f"{pad}{self.comment_line}{line}".rstrip())
        self._writeln(w, f"{pad}{self.comment_close}")

    def begin_file(self, w: TextIO, module: ParsedModule) -> None:
        if self.options.no_version_header:
            return
        self._writeln(w, "/*")
        self._writeln(w, f" * Generated by crosstype {__version__}")
        self._writeln(w, " */")
        self._writeln(w)

    @abstractmethod
    def write_imports(self, w: TextIO, imports: Mapping[str, Sequence[str]]) -> None:
        """Write one import per (module path, used type names) pair."""

    def ignored_reference_types(self) -> list[str]:
        """Types supplied by the override table are never imported."""
        return list(self.type_mappings)

    def scoped_imports(self, module: ParsedModule) -> dict[str, tuple[str, ...]]:
        ignored = set(self.ignored_reference_types())
        scoped: dict[str, tuple[str, ...]] = {}
        for path in sorted(module.imports):
            names = tuple(sorted(n for n in module.imports[path] if n not in ignored))
            if names:
                scoped[path] = names
        return scoped

    # ── Declarations ───────────────────────────────────────────

    @abstractmethod
    def write_type_alias(self, w: TextIO, ty: TypeAliasDecl) -> None: ...

    @abstractmethod
    def write_struct(self, w: TextIO, rs: StructDecl) -> None: ...

    @abstractmethod
    def write_enum(self, w: TextIO, e: EnumDecl) -> None: ...

    @abstractmethod
    def write_const(self, w: TextIO, c: ConstDecl) -> None: ...

    def write_declaration(self, w: TextIO, decl: Declaration) -> None:
        if isinstance(decl, StructDecl):
            self.write_struct(w, decl)
        elif isinstance(decl, (UnitEnum, AlgebraicEnum)):
            self.write_enum(w, decl)
        elif isinstance(decl, TypeAliasDecl):
            self.write_type_alias(w, decl)
        elif isinstance(decl, ConstDecl):
            self.write_const(w, decl)
        else:
            assert_never(decl)

    # ── Pipeline ───────────────────────────────────────────────

    def generate(self, module: ParsedModule, w: TextIO) -> None:
        """Emit ``module`` to ``w``.

        The module is rendered into a private buffer first, so an error in any
        declaration leaves ``w`` untouched.
        """
        logger.debug("%s: generating module %s", self.name, module.name)
        buf = io.StringIO()
        self.begin_file(buf, module)
        imports = self.scoped_imports(module)
        if imports:
            self.write_imports(buf, imports)
        for decl in module.declarations:
            location = f"{module.name}::{decl.id.original}"
            logger.debug("%s: writing %s", self.name, location)
            try:
                self.write_declaration(buf, decl)
            except EmitError as e:
                if e.location is None:
                    e.location = location
                raise
            self._writeln(buf)
        self._write(w, buf.getvalue())

    def generate_text(self, module: ParsedModule) -> str:
        buf = io.StringIO()
        self.generate(module, buf)
        return buf.getvalue()
