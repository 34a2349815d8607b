"""Load a module's IR from the JSON document written by the upstream scanner.

Document shape::

    {
      "module": "shapes",
      "imports": {"geometry": ["Point"]},
      "declarations": [
        {"kind": "struct", "id": "Circle", "generics": [], "comments": [],
         "fields": [{"id": "radius", "type": {"special": "f64"}}]},
        ...
      ]
    }

Identifiers are a plain string or ``{"original": ..., "renamed": ...}``.
Types are ``{"name": ..., "args": [...]}`` or ``{"special": ..., "args": [...]}``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from crosstype.errors import IRLoadError
from crosstype.ir import (
    AlgebraicEnum,
    ConstDecl,
    Declaration,
    Field,
    Identifier,
    ParsedModule,
    SimpleType,
    SpecialKind,
    SpecialType,
    StructDecl,
    StructVariant,
    TupleVariant,
    TypeAliasDecl,
    TypeNode,
    UnitEnum,
    UnitVariant,
    Variant,
)


def load_module(path: Path) -> ParsedModule:
    """Read and parse one IR document. Raises IRLoadError."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IRLoadError(f"cannot read IR file: {e}", str(path)) from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise IRLoadError(f"invalid JSON: {e}", str(path)) from e
    try:
        return parse_module(data)
    except IRLoadError as e:
        if e.location is None:
            e.location = str(path)
        raise


def parse_module(data: Any) -> ParsedModule:
    if not isinstance(data, dict):
        raise IRLoadError("IR document must be a JSON object")
    name = _require(data, "module", str)
    imports = {
        path: _string_list(names, f"imports.{path}")
        for path, names in _optional(data, "imports", dict, {}).items()
    }
    decls: list[Declaration] = []
    for raw in _optional(data, "declarations", list, []):
        try:
            decls.append(_declaration(raw))
        except IRLoadError as e:
            if e.location is None:
                e.location = f"{name}::{_label(raw)}"
            raise
    return ParsedModule(name, tuple(decls), imports)


def _label(raw: Any) -> str:
    """Best-effort declaration name for error locations."""
    ident = raw.get("id") if isinstance(raw, dict) else None
    if isinstance(ident, dict):
        ident = ident.get("original")
    return ident if isinstance(ident, str) else "<unnamed>"


def _require(obj: dict, key: str, kind: type | tuple[type, ...]) -> Any:
    if key not in obj:
        raise IRLoadError(f"missing required key `{key}`")
    value = obj[key]
    if not isinstance(value, kind):
        expected = (
            kind.__name__ if isinstance(kind, type)
            else " or ".join(k.__name__ for k in kind)
        )
        raise IRLoadError(f"`{key}` must be {expected}, got {type(value).__name__}")
    return value


def _optional(obj: dict, key: str, kind: type | tuple[type, ...], default: Any) -> Any:
    if key not in obj:
        return default
    return _require(obj, key, kind)


def _string_list(values: Any, key: str) -> tuple[str, ...]:
    if not isinstance(values, list):
        raise IRLoadError(f"`{key}` must be list, got {type(values).__name__}")
    for v in values:
        if not isinstance(v, str):
            raise IRLoadError(f"`{key}` entries must be str, got {type(v).__name__}")
    return tuple(values)


def _strings(obj: dict, key: str) -> tuple[str, ...]:
    return _string_list(_optional(obj, key, list, []), key)


def _string_map(obj: dict, key: str) -> dict[str, str]:
    mapping = _optional(obj, key, dict, {})
    for k, v in mapping.items():
        if not isinstance(v, str):
            raise IRLoadError(f"`{key}.{k}` must be str, got {type(v).__name__}")
    return dict(mapping)


def _identifier(raw: Any) -> Identifier:
    if isinstance(raw, str):
        return Identifier.same(raw)
    if isinstance(raw, dict):
        original = _require(raw, "original", str)
        return Identifier(original, _optional(raw, "renamed", str, original))
    raise IRLoadError(f"identifier must be a string or object, got {raw!r}")


def _comments(obj: dict) -> tuple[str, ...]:
    return _strings(obj, "comments")


def _generics(obj: dict) -> tuple[str, ...]:
    return _strings(obj, "generics")


def _type(raw: Any) -> TypeNode:
    if isinstance(raw, str):
        return SimpleType(raw)
    if not isinstance(raw, dict):
        raise IRLoadError(f"type must be a string or object, got {raw!r}")
    args = tuple(_type(a) for a in _optional(raw, "args", list, []))
    if "special" in raw:
        try:
            kind = SpecialKind(raw["special"])
        except ValueError:
            raise IRLoadError(f"unknown special type `{raw['special']}`") from None
        try:
            return SpecialType(kind, args, _length(raw))
        except ValueError as e:
            raise IRLoadError(str(e)) from e
    return SimpleType(_require(raw, "name", str), args)


def _length(raw: dict) -> int | None:
    length = _optional(raw, "length", int, None)
    if isinstance(length, bool):
        raise IRLoadError("`length` must be int, got bool")
    return length


def _field(raw: Any) -> Field:
    if not isinstance(raw, dict):
        raise IRLoadError(f"field must be an object, got {raw!r}")
    return Field(
        id=_identifier(_require(raw, "id", (str, dict))),
        ty=_type(_require(raw, "type", (str, dict))),
        comments=_comments(raw),
        has_default=_optional(raw, "has_default", bool, False),
        type_overrides=_string_map(raw, "type_overrides"),
        decorators={
            lang: _string_list(names, f"decorators.{lang}")
            for lang, names in _optional(raw, "decorators", dict, {}).items()
        },
    )


def _variant(raw: Any) -> Variant:
    if not isinstance(raw, dict):
        raise IRLoadError(f"variant must be an object, got {raw!r}")
    ident = _identifier(_require(raw, "id", (str, dict)))
    kind = _optional(raw, "kind", str, "unit")
    if kind == "unit":
        return UnitVariant(ident, _comments(raw))
    if kind == "tuple":
        return TupleVariant(ident, _type(_require(raw, "type", (str, dict))), _comments(raw))
    if kind == "struct":
        fields = tuple(_field(f) for f in _optional(raw, "fields", list, []))
        return StructVariant(ident, fields, _comments(raw))
    raise IRLoadError(f"unknown variant kind `{kind}`")


def _declaration(raw: Any) -> Declaration:
    if not isinstance(raw, dict):
        raise IRLoadError(f"declaration must be an object, got {raw!r}")
    kind = _require(raw, "kind", str)
    ident = _identifier(_require(raw, "id", (str, dict)))

    if kind == "struct":
        return StructDecl(
            ident,
            tuple(_field(f) for f in _optional(raw, "fields", list, [])),
            _generics(raw),
            _comments(raw),
        )
    if kind == "alias":
        return TypeAliasDecl(
            ident, _type(_require(raw, "type", (str, dict))), _generics(raw), _comments(raw),
        )
    if kind == "const":
        value = _require(raw, "value", int)
        if isinstance(value, bool):
            raise IRLoadError("`value` must be int, got bool")
        return ConstDecl(ident, _type(_require(raw, "type", (str, dict))), value, _comments(raw))
    if kind == "enum":
        variants = tuple(_variant(v) for v in _optional(raw, "variants", list, []))
        if "tag_key" in raw:
            return AlgebraicEnum(
                ident,
                _require(raw, "tag_key", str),
                _optional(raw, "content_key", str, "content"),
                variants,
                _generics(raw),
                _comments(raw),
            )
        payload = [v for v in variants if not isinstance(v, UnitVariant)]
        if payload:
            raise IRLoadError(
                f"enum `{ident.original}` has payload variants but no `tag_key`"
            )
        return UnitEnum(ident, variants, _generics(raw), _comments(raw))  # type: ignore[arg-type]
    raise IRLoadError(f"unknown declaration kind `{kind}`")
