"""Declaration and type nodes handed over by the upstream scanner.

Nodes are immutable. A module's declarations are built once, read during
emission, and dropped once the module's text is produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# ── Identifiers ─────────────────────────────────────────────────


@dataclass(frozen=True)
class Identifier:
    """A source name and the name it is serialized under."""

    original: str
    renamed: str

    @classmethod
    def same(cls, name: str) -> Identifier:
        return cls(name, name)


# ── Type nodes ──────────────────────────────────────────────────


class SpecialKind(Enum):
    LIST = "list"
    ARRAY = "array"
    SLICE = "slice"
    OPTIONAL = "optional"
    MAP = "map"
    UNIT = "unit"
    DATETIME = "datetime"
    STRING = "string"
    CHAR = "char"
    I8 = "i8"
    U8 = "u8"
    I16 = "i16"
    U16 = "u16"
    I32 = "i32"
    U32 = "u32"
    I54 = "i54"
    U53 = "u53"
    F32 = "f32"
    F64 = "f64"
    BOOL = "bool"
    I64 = "i64"
    U64 = "u64"
    ISIZE = "isize"
    USIZE = "usize"

    @property
    def is_wide(self) -> bool:
        """64-bit-class kinds lose precision in JSON and are never emitted."""
        return self in _WIDE_KINDS

    @property
    def arity(self) -> int:
        return _ARITY.get(self, 0)


_WIDE_KINDS = frozenset({
    SpecialKind.I64, SpecialKind.U64, SpecialKind.ISIZE, SpecialKind.USIZE,
})

_ARITY: dict[SpecialKind, int] = {
    SpecialKind.LIST: 1,
    SpecialKind.ARRAY: 1,
    SpecialKind.SLICE: 1,
    SpecialKind.OPTIONAL: 1,
    SpecialKind.MAP: 2,
}


@dataclass(frozen=True)
class SimpleType:
    """A nominal type reference, possibly applied to generic arguments."""

    name: str
    args: tuple[TypeNode, ...] = ()


@dataclass(frozen=True)
class SpecialType:
    """A built-in shape from the fixed vocabulary in SpecialKind."""

    kind: SpecialKind
    args: tuple[TypeNode, ...] = ()
    length: int | None = None  # fixed-length arrays only

    def __post_init__(self) -> None:
        if len(self.args) != self.kind.arity:
            raise ValueError(
                f"{self.kind.value} takes {self.kind.arity} type argument(s), "
                f"got {len(self.args)}"
            )


TypeNode = SimpleType | SpecialType


def special(kind: SpecialKind) -> SpecialType:
    return SpecialType(kind)


def list_of(elem: TypeNode) -> SpecialType:
    return SpecialType(SpecialKind.LIST, (elem,))


def array_of(elem: TypeNode, length: int) -> SpecialType:
    return SpecialType(SpecialKind.ARRAY, (elem,), length)


def optional_of(inner: TypeNode) -> SpecialType:
    return SpecialType(SpecialKind.OPTIONAL, (inner,))


def map_of(key: TypeNode, value: TypeNode) -> SpecialType:
    return SpecialType(SpecialKind.MAP, (key, value))


STRING = SpecialType(SpecialKind.STRING)
BOOL = SpecialType(SpecialKind.BOOL)
UNIT = SpecialType(SpecialKind.UNIT)


def is_optional(ty: TypeNode) -> bool:
    return isinstance(ty, SpecialType) and ty.kind is SpecialKind.OPTIONAL


def is_double_optional(ty: TypeNode) -> bool:
    return is_optional(ty) and is_optional(ty.args[0])  # type: ignore[union-attr]


def unwrap_optional(ty: TypeNode) -> TypeNode:
    """Strip one level of optional, if present."""
    if is_optional(ty):
        return ty.args[0]  # type: ignore[union-attr]
    return ty


# ── Declarations ────────────────────────────────────────────────


@dataclass(frozen=True)
class Field:
    id: Identifier
    ty: TypeNode
    comments: tuple[str, ...] = ()
    has_default: bool = False
    # Keyed by language name, e.g. {"typescript": "bigint"}
    type_overrides: dict[str, str] = field(default_factory=dict, hash=False)
    decorators: dict[str, tuple[str, ...]] = field(default_factory=dict, hash=False)

    def type_override(self, lang: str) -> str | None:
        return self.type_overrides.get(lang)

    def has_decorator(self, lang: str, name: str) -> bool:
        return name in self.decorators.get(lang, ())


@dataclass(frozen=True)
class StructDecl:
    id: Identifier
    fields: tuple[Field, ...] = ()
    generics: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()


@dataclass(frozen=True)
class TypeAliasDecl:
    id: Identifier
    ty: TypeNode
    generics: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConstDecl:
    id: Identifier
    ty: TypeNode
    value: int
    comments: tuple[str, ...] = ()


# ── Enums ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class UnitVariant:
    id: Identifier
    comments: tuple[str, ...] = ()


@dataclass(frozen=True)
class TupleVariant:
    id: Identifier
    ty: TypeNode
    comments: tuple[str, ...] = ()


@dataclass(frozen=True)
class StructVariant:
    id: Identifier
    fields: tuple[Field, ...] = ()
    comments: tuple[str, ...] = ()


Variant = UnitVariant | TupleVariant | StructVariant


@dataclass(frozen=True)
class UnitEnum:
    """A closed set of bare tags serialized as strings."""

    id: Identifier
    variants: tuple[UnitVariant, ...] = ()
    generics: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()


@dataclass(frozen=True)
class AlgebraicEnum:
    """A tagged union serialized as ``{tag_key: ..., content_key: ...}``."""

    id: Identifier
    tag_key: str
    content_key: str
    variants: tuple[Variant, ...] = ()
    generics: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()


EnumDecl = UnitEnum | AlgebraicEnum

Declaration = StructDecl | EnumDecl | TypeAliasDecl | ConstDecl


@dataclass(frozen=True)
class ParsedModule:
    """All declarations of one source module, in source order."""

    name: str
    declarations: tuple[Declaration, ...] = ()
    # module path -> type names used from it
    imports: dict[str, tuple[str, ...]] = field(default_factory=dict, hash=False)
