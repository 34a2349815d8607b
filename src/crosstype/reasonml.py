"""ReasonML backend (BuckleScript JSON interop)."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import TextIO, assert_never

from crosstype.errors import InvalidIdentifier
from crosstype.ir import (
    AlgebraicEnum,
    ConstDecl,
    EnumDecl,
    Field,
    SpecialKind,
    SpecialType,
    StructDecl,
    StructVariant,
    TupleVariant,
    TypeAliasDecl,
    UnitEnum,
    is_double_optional,
    is_optional,
    optional_of,
    unwrap_optional,
)
from crosstype.language import Language
from crosstype.naming import to_camel_case, to_pascal_case, to_snake_case

REASONML_KEYWORDS = frozenset({
    "and", "as", "assert", "begin", "class", "constraint", "do", "done", "downto",
    "else", "end", "exception", "external", "false", "for", "fun", "function",
    "functor", "if", "in", "include", "inherit", "initializer", "lazy", "let",
    "match", "method", "module", "mutable", "new", "nonrec", "object", "of",
    "open", "or", "private", "rec", "sig", "struct", "switch", "then", "to",
    "true", "try", "type", "val", "virtual", "when", "while", "with",
})

# JSON numbers are doubles on the JS side, so every narrow numeric is a float.
_LEAF_TOKENS: dict[SpecialKind, str] = {
    SpecialKind.UNIT: "unit",
    SpecialKind.DATETIME: "Js.Date.t",
    SpecialKind.STRING: "string",
    SpecialKind.CHAR: "string",
    SpecialKind.I8: "float",
    SpecialKind.U8: "float",
    SpecialKind.I16: "float",
    SpecialKind.U16: "float",
    SpecialKind.I32: "float",
    SpecialKind.U32: "float",
    SpecialKind.I54: "float",
    SpecialKind.U53: "float",
    SpecialKind.F32: "float",
    SpecialKind.F64: "float",
    SpecialKind.BOOL: "bool",
}

_SEQUENCE_KINDS = (SpecialKind.LIST, SpecialKind.ARRAY, SpecialKind.SLICE)

_MODULE_PATH_SEP = re.compile(r"::|/|\.")

_CONSTRUCTOR = re.compile(r"^[A-Z][A-Za-z0-9_]*$")


class ReasonML(Language):
    """Records, variants and abstract types for ReasonML.

    Tagged unions have no JSON-compatible ReasonML shape and degrade to an
    abstract placeholder type. Double optionals collapse to one ``option``.
    """

    name = "reasonml"
    file_extension = "re"
    keywords = REASONML_KEYWORDS

    generic_open = "("
    generic_close = ")"

    def type_name(self, name: str) -> str:
        camel = to_camel_case(name)
        return f"{camel}_" if camel in self.keywords else camel

    def const_name(self, name: str) -> str:
        snake = to_snake_case(name)
        return f"{snake}_" if snake in self.keywords else snake

    def format_type_variable(self, name: str) -> str:
        return f"'{name}"

    def requires_quoting(self, name: str) -> bool:
        # Capitalized names parse as constructors
        return super().requires_quoting(name) or name[:1].isupper()

    def format_special_type(self, ty: SpecialType, generics: Sequence[str]) -> str:
        kind = ty.kind
        if kind in _SEQUENCE_KINDS:
            return f"array({self.format_type(ty.args[0], generics)})"
        if kind is SpecialKind.OPTIONAL:
            return f"option({self.format_type(ty.args[0], generics)})"
        if kind is SpecialKind.MAP:
            return f"Js.Dict.t({self.format_type(ty.args[1], generics)})"
        token = _LEAF_TOKENS.get(kind)
        if token is None:
            raise AssertionError(f"no ReasonML token for {kind.value}")
        return token

    # ── Declarations ───────────────────────────────────────────

    def write_type_alias(self, w: TextIO, ty: TypeAliasDecl) -> None:
        self.write_comments(w, 0, ty.comments)
        r_type = self.format_type(ty.ty, ty.generics)
        self._writeln(
            w,
            f"type {self.type_name(ty.id.renamed)}{self.generic_params(ty.generics)}"
            f" = {r_type};",
        )

    def write_struct(self, w: TextIO, rs: StructDecl) -> None:
        self.write_comments(w, 0, rs.comments)
        head = f"type {self.type_name(rs.id.renamed)}{self.generic_params(rs.generics)}"

        if not rs.fields:
            self._writeln(w, f"{head};")
            return

        self._writeln(w, f"{head} = {{")
        for f in rs.fields:
            self.write_field(w, f, rs.generics)
        self._writeln(w, "};")

    def write_field(self, w: TextIO, field: Field, generics: Sequence[str]) -> None:
        self.write_comments(w, 1, field.comments)
        override = field.type_override(self.name)
        if override is not None:
            r_type = override
        elif is_double_optional(field.ty):
            # option(option(T)) cannot tell null from absent after decoding
            r_type = self.format_type(unwrap_optional(field.ty), generics)
        elif field.has_default and not is_optional(field.ty):
            r_type = self.format_type(optional_of(field.ty), generics)
        else:
            r_type = self.format_type(field.ty, generics)
        self._writeln(w, f"{self.indent_unit}{self.property_name(field.id.renamed)}: {r_type},")

    def write_enum(self, w: TextIO, e: EnumDecl) -> None:
        self.write_comments(w, 0, e.comments)
        head = f"type {self.type_name(e.id.renamed)}{self.generic_params(e.generics)}"

        if isinstance(e, UnitEnum):
            if not e.variants:
                self._writeln(w, f"{head};")
                return
            constructors = self.constructor_names(e)
            self._writeln(w, f"{head} =")
            last = len(e.variants) - 1
            for i, (v, ctor) in enumerate(zip(e.variants, constructors)):
                self.write_comments(w, 1, v.comments)
                end = ";" if i == last else ""
                self._writeln(w, f"{self.indent_unit}| {ctor}{end}")
        elif isinstance(e, AlgebraicEnum):
            self.check_payloads(e)
            self._writeln(
                w,
                f'/* Unsupported tagged union: tag "{e.tag_key}", '
                f'content "{e.content_key}" */',
            )
            self._writeln(w, f"{head};")
        else:
            assert_never(e)

    def constructor_names(self, e: UnitEnum) -> list[str]:
        """PascalCase constructor per variant. Raises on invalid or clashing names."""
        seen: dict[str, str] = {}
        for v in e.variants:
            ctor = to_pascal_case(v.id.renamed)
            if not _CONSTRUCTOR.match(ctor):
                raise InvalidIdentifier(
                    f"variant `{v.id.renamed}` is not a valid constructor name"
                )
            if ctor in seen:
                raise InvalidIdentifier(
                    f"variants `{seen[ctor]}` and `{v.id.renamed}` both become `{ctor}`"
                )
            seen[ctor] = v.id.renamed
        return list(seen)

    def check_payloads(self, e: AlgebraicEnum) -> None:
        """Format every payload so width and map-key errors surface here too."""
        for v in e.variants:
            if isinstance(v, TupleVariant):
                self.format_type(v.ty, e.generics)
            elif isinstance(v, StructVariant):
                for f in v.fields:
                    if f.type_override(self.name) is None:
                        self.format_type(f.ty, e.generics)

    def write_const(self, w: TextIO, c: ConstDecl) -> None:
        self.write_comments(w, 0, c.comments)
        const_type = self.format_type(c.ty)
        literal = f"{c.value}." if const_type == "float" else str(c.value)
        self._writeln(w, f"let {self.const_name(c.id.renamed)}: {const_type} = {literal};")

    def write_imports(self, w: TextIO, imports: Mapping[str, Sequence[str]]) -> None:
        for path in imports:
            parts = [to_pascal_case(p) for p in _MODULE_PATH_SEP.split(path) if p]
            self._writeln(w, f"open {'.'.join(parts)};")
        self._writeln(w)
