"""Case conventions and identifier quoting shared by every backend."""

from __future__ import annotations

import re

_BARE_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_WORD_BEFORE_CAPITALIZED = re.compile(r"(.)([A-Z][a-z]+)")
_LOWER_BEFORE_UPPER = re.compile(r"([a-z0-9])([A-Z])")


def split_words(name: str) -> list[str]:
    """``MaxHTTPRetries`` -> ``["Max", "HTTP", "Retries"]``. Acronyms stay whole."""
    s1 = _WORD_BEFORE_CAPITALIZED.sub(r"\1_\2", name.replace("-", "_"))
    s2 = _LOWER_BEFORE_UPPER.sub(r"\1_\2", s1)
    return [w for w in s2.split("_") if w]


def to_pascal_case(name: str) -> str:
    """``my_type`` -> ``MyType``. All-caps words like ``URL`` become ``Url``."""
    return "".join(w[0].upper() + w[1:].lower() for w in split_words(name))


def to_camel_case(name: str) -> str:
    """``my_type`` / ``MyType`` -> ``myType``; ``HTTPServer`` -> ``httpServer``."""
    pascal = to_pascal_case(name)
    if not pascal:
        return pascal
    return pascal[0].lower() + pascal[1:]


def to_snake_case(name: str) -> str:
    """``MyType`` -> ``my_type``; ``MaxHTTPRetries`` -> ``max_http_retries``."""
    return "_".join(w.lower() for w in split_words(name))


def to_screaming_snake_case(name: str) -> str:
    return to_snake_case(name).upper()


def is_bare_identifier(name: str) -> bool:
    return bool(_BARE_IDENTIFIER.match(name))


def needs_quoting(name: str, keywords: frozenset[str]) -> bool:
    """True when ``name`` cannot be written as a bare identifier."""
    return not is_bare_identifier(name) or name in keywords


def quote_literal(name: str) -> str:
    """Double-quoted literal form, escaping only what a string literal needs."""
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
