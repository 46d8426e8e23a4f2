"""Naming conventions shared by the compiler, validator and generators."""

from __future__ import annotations

import re

_PASCAL_RE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
_CAMEL_RE = re.compile(r"^[a-z][a-zA-Z0-9]*$")


def is_pascal_case(value: str) -> bool:
    return bool(_PASCAL_RE.match(value))


def is_camel_case(value: str) -> bool:
    return bool(_CAMEL_RE.match(value))


def to_snake_case(value: str) -> str:
    """Convert camelCase or PascalCase to snake_case.

    ``"firstName"`` -> ``"first_name"``, ``"BlogPost"`` -> ``"blog_post"``.
    """
    converted = re.sub(r"[A-Z]", lambda m: f"_{m.group(0).lower()}", value)
    return converted[1:] if converted.startswith("_") else converted


def to_camel_case(value: str) -> str:
    """Lower-case the first letter: ``"BlogPost"`` -> ``"blogPost"``."""
    return value[:1].lower() + value[1:]


def to_pascal_case(value: str) -> str:
    """Upper-case the first letter: ``"blogPost"`` -> ``"BlogPost"``."""
    return value[:1].upper() + value[1:]


def pluralize(name: str) -> str:
    """English pluralization good enough for table and resource names."""
    if name.endswith("y") and len(name) > 1 and name[-2].lower() not in "aeiou":
        return name[:-1] + "ies"
    if name.endswith(("s", "x", "ch", "sh")):
        return name + "es"
    return name + "s"


def table_name(entity_name: str) -> str:
    """Storage table name: ``"User"`` -> ``"users"``, ``"Category"`` -> ``"categories"``."""
    return to_snake_case(pluralize(entity_name))


def column_name(field_name: str) -> str:
    """Storage column name: ``"firstName"`` -> ``"first_name"``."""
    return to_snake_case(field_name)


def resource_name(entity_name: str) -> str:
    """REST resource segment: ``"Product"`` -> ``"products"``."""
    return pluralize(entity_name.lower())
