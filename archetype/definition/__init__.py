"""Fluent builder API for defining entities and manifests in Python."""

from archetype.compiler.defaults import normalize_mode
from archetype.definition.entity import (
    define_entity,
    normalize_behaviors,
    normalize_hooks,
    normalize_protected,
)
from archetype.definition.fields import (
    BooleanFieldBuilder,
    ComputedFieldBuilder,
    DateFieldBuilder,
    EnumFieldBuilder,
    FieldBuilder,
    NumberFieldBuilder,
    TextFieldBuilder,
    boolean,
    computed,
    date,
    enum_field,
    number,
    text,
)
from archetype.definition.manifest import define_config, define_manifest
from archetype.definition.relations import (
    BelongsToManyBuilder,
    RelationBuilder,
    belongs_to_many,
    has_many,
    has_one,
)
from archetype.definition.source import external, make_external_auth

__all__ = [
    "BelongsToManyBuilder",
    "BooleanFieldBuilder",
    "ComputedFieldBuilder",
    "DateFieldBuilder",
    "EnumFieldBuilder",
    "FieldBuilder",
    "NumberFieldBuilder",
    "RelationBuilder",
    "TextFieldBuilder",
    "belongs_to_many",
    "boolean",
    "computed",
    "date",
    "define_config",
    "define_entity",
    "define_manifest",
    "enum_field",
    "external",
    "has_many",
    "has_one",
    "make_external_auth",
    "normalize_behaviors",
    "normalize_hooks",
    "normalize_mode",
    "normalize_protected",
    "number",
    "text",
]
