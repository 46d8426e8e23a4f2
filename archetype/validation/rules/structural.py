"""Structural rules — entity and field naming, uniqueness, field types."""

from __future__ import annotations

from archetype.compiler.naming import (
    column_name,
    is_camel_case,
    is_pascal_case,
    to_camel_case,
    to_pascal_case,
)
from archetype.config import (
    COMPUTED_RETURN_TYPES,
    FIELD_TYPES,
    IMPLICIT_ID_COLUMN,
    SOFT_DELETE_COLUMN,
    TIMESTAMP_COLUMNS,
)
from archetype.models.entity import Entity
from archetype.models.manifest import Manifest
from archetype.validation.codes import ValidationCode
from archetype.validation.report import Diagnostic
from archetype.validation.rules.base import (
    EntityRule,
    ValidationRule,
    diagnostic,
    field_sites,
    one_of,
)


class DuplicateEntities(ValidationRule):
    """Entity names must be unique; every repeat after the first is reported."""

    @property
    def name(self) -> str:
        return "structural.duplicate_entities"

    @property
    def description(self) -> str:
        return "Entity names must be unique within a manifest."

    def check(self, manifest: Manifest) -> list[Diagnostic]:
        issues: list[Diagnostic] = []
        seen: set[str] = set()
        for entity in manifest.entities:
            if entity.name in seen:
                issues.append(diagnostic(
                    ValidationCode.DUPLICATE_ENTITY,
                    entity.name,
                    f"Duplicate entity name '{entity.name}'",
                    "Rename one of the entities",
                ))
            seen.add(entity.name)
        return issues


class EntityName(EntityRule):
    @property
    def name(self) -> str:
        return "structural.entity_name"

    @property
    def description(self) -> str:
        return "Entity names must be PascalCase."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        if is_pascal_case(entity.name):
            return []
        return [diagnostic(
            ValidationCode.INVALID_ENTITY_NAME,
            entity.name,
            f"Entity name '{entity.name}' must be PascalCase",
            f"Rename to '{to_pascal_case(entity.name)}'",
        )]


class EntityFields(EntityRule):
    @property
    def name(self) -> str:
        return "structural.entity_fields"

    @property
    def description(self) -> str:
        return "Every entity declares at least one field."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        if entity.fields:
            return []
        return [diagnostic(
            ValidationCode.MISSING_ENTITY_FIELDS,
            f"{entity.name}.fields",
            f"Entity '{entity.name}' must have at least one field",
            "Add fields to the entity",
        )]


class FieldNames(EntityRule):
    @property
    def name(self) -> str:
        return "structural.field_names"

    @property
    def description(self) -> str:
        return "Field names must be camelCase."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        return [
            diagnostic(
                ValidationCode.INVALID_FIELD_NAME,
                f"{entity.name}.fields.{field_name}",
                f"Field name '{field_name}' must be camelCase",
                f"Rename to '{to_camel_case(field_name)}'",
            )
            for field_name in entity.fields
            if not is_camel_case(field_name)
        ]


class FieldTypes(EntityRule):
    @property
    def name(self) -> str:
        return "structural.field_types"

    @property
    def description(self) -> str:
        return "Field types (and computed return types) come from the supported set."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        issues: list[Diagnostic] = []
        for path, _, field in field_sites(entity):
            if field.type not in FIELD_TYPES:
                issues.append(diagnostic(
                    ValidationCode.INVALID_FIELD_TYPE,
                    f"{path}.type",
                    f"Invalid field type '{field.type}'",
                    one_of(FIELD_TYPES),
                ))
            elif field.is_computed and field.return_type not in COMPUTED_RETURN_TYPES:
                issues.append(diagnostic(
                    ValidationCode.INVALID_FIELD_TYPE,
                    f"{path}.returnType",
                    f"Invalid computed return type '{field.return_type}'",
                    one_of(COMPUTED_RETURN_TYPES),
                ))
        return issues


class ColumnCollisions(EntityRule):
    """Stored fields, hasOne foreign keys and implicit columns share one namespace.

    Implicit columns are ``id``, the timestamp pair when timestamps are on,
    and ``deletedAt`` when soft delete is on.  The later declaration of a
    colliding pair is reported.
    """

    @property
    def name(self) -> str:
        return "structural.column_collisions"

    @property
    def description(self) -> str:
        return "No two fields, foreign keys or implicit columns map to the same column."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        implicit = [IMPLICIT_ID_COLUMN]
        if entity.behaviors.timestamps:
            implicit.extend(TIMESTAMP_COLUMNS)
        if entity.behaviors.soft_delete:
            implicit.append(SOFT_DELETE_COLUMN)
        owners: dict[str, str] = {column_name(c): f"implicit column '{c}'" for c in implicit}

        issues: list[Diagnostic] = []
        for field_name, field in entity.fields.items():
            if not field.is_stored:
                continue
            column = column_name(field_name)
            if column in owners:
                issues.append(diagnostic(
                    ValidationCode.DUPLICATE_FIELD,
                    f"{entity.name}.fields.{field_name}",
                    f"Field '{field_name}' collides with {owners[column]} on column '{column}'",
                    "Rename the field",
                ))
            else:
                owners[column] = f"field '{field_name}'"

        for rel_name, relation in entity.relations.items():
            if relation.type != "hasOne":
                continue
            fk = relation.field or f"{rel_name}Id"
            column = column_name(fk)
            if column in owners:
                issues.append(diagnostic(
                    ValidationCode.DUPLICATE_FIELD,
                    f"{entity.name}.relations.{rel_name}",
                    f"Foreign key '{fk}' of relation '{rel_name}' collides with "
                    f"{owners[column]} on column '{column}'",
                    "Remove the field or give the relation a different foreign key with field",
                ))
            else:
                owners[column] = f"foreign key of relation '{rel_name}'"
        return issues


class StructuralRules:
    """Factory for all structural rules."""

    @staticmethod
    def all_rules() -> list[ValidationRule]:
        return [
            DuplicateEntities(),
            EntityName(),
            EntityFields(),
            FieldNames(),
            FieldTypes(),
            ColumnCollisions(),
        ]
