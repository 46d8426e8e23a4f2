"""Compiler stages: default merging and name resolution."""

from archetype.compiler.defaults import merge_defaults, normalize_mode
from archetype.compiler.naming import (
    column_name,
    is_camel_case,
    is_pascal_case,
    pluralize,
    resource_name,
    table_name,
    to_camel_case,
    to_pascal_case,
    to_snake_case,
)
from archetype.compiler.resolver import (
    compile_manifest,
    junction_table_name,
    resolve_endpoints,
    resolve_manifest,
)

__all__ = [
    "column_name",
    "compile_manifest",
    "is_camel_case",
    "is_pascal_case",
    "junction_table_name",
    "merge_defaults",
    "normalize_mode",
    "pluralize",
    "resolve_endpoints",
    "resolve_manifest",
    "resource_name",
    "table_name",
    "to_camel_case",
    "to_pascal_case",
    "to_snake_case",
]
