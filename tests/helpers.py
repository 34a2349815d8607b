"""Shared test helpers for the crosstype test suite."""

from __future__ import annotations

from crosstype.ir import Declaration, ParsedModule
from crosstype.language import Language, LanguageOptions
from crosstype.reasonml import ReasonML
from crosstype.typescript import TypeScript


def reasonml(**type_mappings: str) -> ReasonML:
    return ReasonML(LanguageOptions.build(type_mappings, no_version_header=True))


def typescript(**type_mappings: str) -> TypeScript:
    return TypeScript(LanguageOptions.build(type_mappings, no_version_header=True))


def emit(
    language: Language,
    *decls: Declaration,
    imports: dict[str, tuple[str, ...]] | None = None,
) -> str:
    """Run the full pipeline over one module named ``test``."""
    return language.generate_text(ParsedModule("test", decls, imports or {}))
