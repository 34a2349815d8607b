"""TypeScript backend."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import TextIO, assert_never

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
    UnitVariant,
    Variant,
    is_optional,
    unwrap_optional,
)
from crosstype.language import Language
from crosstype.naming import quote_literal, to_screaming_snake_case

_LEAF_TOKENS: dict[SpecialKind, str] = {
    SpecialKind.UNIT: "undefined",
    SpecialKind.DATETIME: "Date",
    SpecialKind.STRING: "string",
    SpecialKind.CHAR: "string",
    SpecialKind.I8: "number",
    SpecialKind.U8: "number",
    SpecialKind.I16: "number",
    SpecialKind.U16: "number",
    SpecialKind.I32: "number",
    SpecialKind.U32: "number",
    SpecialKind.I54: "number",
    SpecialKind.U53: "number",
    SpecialKind.F32: "number",
    SpecialKind.F64: "number",
    SpecialKind.BOOL: "boolean",
}

_SEQUENCE_KINDS = (SpecialKind.LIST, SpecialKind.ARRAY, SpecialKind.SLICE)

_MODULE_PATH_SEP = re.compile(r"::|\.")

_EMPTY_RECORD = "Record<string, never>"


class TypeScript(Language):
    name = "typescript"
    file_extension = "ts"

    indent_unit = "\t"
    comment_single = ("/** ", " */")
    comment_open = "/**"

    def type_name(self, name: str) -> str:
        return name

    def const_name(self, name: str) -> str:
        return to_screaming_snake_case(name)

    def format_special_type(self, ty: SpecialType, generics: Sequence[str]) -> str:
        kind = ty.kind
        if kind in _SEQUENCE_KINDS:
            elem = self.format_type(ty.args[0], generics)
            return f"({elem})[]" if " " in elem else f"{elem}[]"
        if kind is SpecialKind.OPTIONAL:
            return f"{self.format_type(ty.args[0], generics)} | undefined"
        if kind is SpecialKind.MAP:
            key = self.format_type(ty.args[0], generics)
            value = self.format_type(ty.args[1], generics)
            return f"Record<{key}, {value}>"
        token = _LEAF_TOKENS.get(kind)
        if token is None:
            raise AssertionError(f"no TypeScript token for {kind.value}")
        return token

    # ── Declarations ───────────────────────────────────────────

    def write_type_alias(self, w: TextIO, ty: TypeAliasDecl) -> None:
        self.write_comments(w, 0, ty.comments)
        ts_type = self.format_type(ty.ty, ty.generics)
        self._writeln(
            w,
            f"export type {self.type_name(ty.id.renamed)}"
            f"{self.generic_params(ty.generics)} = {ts_type};",
        )

    def write_struct(self, w: TextIO, rs: StructDecl) -> None:
        self.write_comments(w, 0, rs.comments)
        name = f"{self.type_name(rs.id.renamed)}{self.generic_params(rs.generics)}"

        if not rs.fields:
            self._writeln(w, f"export type {name} = {_EMPTY_RECORD};")
            return

        self._writeln(w, f"export interface {name} {{")
        for f in rs.fields:
            self.write_field(w, f, rs.generics, 1)
        self._writeln(w, "}")

    def field_type(self, field: Field, generics: Sequence[str]) -> tuple[str, bool]:
        """Rendered type and whether the property carries the ``?`` marker.

        The marker expresses absence, so an optional field renders its inner
        type. An optional-of-optional additionally admits an explicit ``null``.
        """
        optional = is_optional(field.ty) or field.has_default
        override = field.type_override(self.name)
        if override is not None:
            return override, optional
        if not is_optional(field.ty):
            return self.format_type(field.ty, generics), optional
        inner = unwrap_optional(field.ty)
        if is_optional(inner):
            return f"{self.format_type(unwrap_optional(inner), generics)} | null", True
        return self.format_type(inner, generics), True

    def write_field(
        self, w: TextIO, field: Field, generics: Sequence[str], indent: int,
    ) -> None:
        self.write_comments(w, indent, field.comments)
        ts_type, optional = self.field_type(field, generics)
        readonly = "readonly " if field.has_decorator(self.name, "readonly") else ""
        marker = "?" if optional else ""
        self._writeln(
            w,
            f"{self.indent_unit * indent}{readonly}"
            f"{self.property_name(field.id.renamed)}{marker}: {ts_type};",
        )

    def write_enum(self, w: TextIO, e: EnumDecl) -> None:
        self.write_comments(w, 0, e.comments)
        if isinstance(e, UnitEnum):
            self._writeln(w, f"export enum {self.type_name(e.id.renamed)} {{")
            for v in e.variants:
                self.write_comments(w, 1, v.comments)
                self._writeln(
                    w,
                    f"{self.indent_unit}{self.property_name(v.id.original)} = "
                    f"{quote_literal(v.id.renamed)},",
                )
            self._writeln(w, "}")
        elif isinstance(e, AlgebraicEnum):
            name = f"{self.type_name(e.id.renamed)}{self.generic_params(e.generics)}"
            if not e.variants:
                self._writeln(w, f"export type {name} = never;")
                return
            self._writeln(w, f"export type {name} =")
            last = len(e.variants) - 1
            for i, v in enumerate(e.variants):
                self.write_comments(w, 1, v.comments)
                self.write_variant(w, e, v, terminator=";" if i == last else "")
        else:
            assert_never(e)

    def write_variant(
        self, w: TextIO, e: AlgebraicEnum, v: Variant, terminator: str = "",
    ) -> None:
        """One union branch: ``{ tag: "Lit" }`` plus the content for payload variants."""
        pad = self.indent_unit
        tag = f"{self.property_name(e.tag_key)}: {quote_literal(v.id.renamed)}"
        content = self.property_name(e.content_key)

        if isinstance(v, UnitVariant):
            self._writeln(w, f"{pad}| {{ {tag} }}{terminator}")
        elif isinstance(v, TupleVariant):
            ts_type = self.format_type(v.ty, e.generics)
            self._writeln(w, f"{pad}| {{ {tag}; {content}: {ts_type} }}{terminator}")
        elif isinstance(v, StructVariant):
            if not v.fields:
                self._writeln(
                    w, f"{pad}| {{ {tag}; {content}: {_EMPTY_RECORD} }}{terminator}",
                )
                return
            self._writeln(w, f"{pad}| {{ {tag}; {content}: {{")
            for f in v.fields:
                self.write_field(w, f, e.generics, 2)
            self._writeln(w, f"{pad}}} }}{terminator}")
        else:
            assert_never(v)

    def write_const(self, w: TextIO, c: ConstDecl) -> None:
        self.write_comments(w, 0, c.comments)
        const_type = self.format_type(c.ty)
        self._writeln(
            w, f"export const {self.const_name(c.id.renamed)}: {const_type} = {c.value};",
        )

    def write_imports(self, w: TextIO, imports: Mapping[str, Sequence[str]]) -> None:
        for path, names in imports.items():
            rel = "/".join(p for p in _MODULE_PATH_SEP.split(path) if p)
            self._writeln(w, f'import type {{ {", ".join(names)} }} from "./{rel}";')
        self._writeln(w)
