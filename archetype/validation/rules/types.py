"""Type-specific rules — validations, enum values and defaults per field type."""

from __future__ import annotations

from archetype.config import NUMBER_VALIDATIONS, TEXT_VALIDATIONS
from archetype.models.entity import Entity
from archetype.models.field import Field
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


def _validation_problem(field: Field, kind: str) -> tuple[str, str] | None:
    """Return ``(message, suggestion)`` when *kind* is not legal on *field*."""
    if kind in TEXT_VALIDATIONS:
        if field.type != "text":
            return (
                f"Validation '{kind}' only applies to text fields, not {field.type}",
                f"Remove '{kind}' or change the field type to text",
            )
        return None
    if kind in NUMBER_VALIDATIONS:
        if field.type != "number":
            return (
                f"Validation '{kind}' only applies to number fields, not {field.type}",
                f"Remove '{kind}' or change the field type to number",
            )
        return None
    return f"Unknown validation '{kind}'", one_of(TEXT_VALIDATIONS + NUMBER_VALIDATIONS)


class ValidationKinds(EntityRule):
    @property
    def name(self) -> str:
        return "types.validation_kinds"

    @property
    def description(self) -> str:
        return "Text validations apply to text fields and number validations to number fields."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        issues: list[Diagnostic] = []
        for path, _, field in field_sites(entity):
            for index, validation in enumerate(field.validations):
                problem = _validation_problem(field, validation.type)
                if problem is None:
                    continue
                message, suggestion = problem
                issues.append(diagnostic(
                    ValidationCode.INVALID_VALIDATION,
                    f"{path}.validations.{index}",
                    message,
                    suggestion,
                ))
        return issues


class EnumValues(EntityRule):
    @property
    def name(self) -> str:
        return "types.enum_values"

    @property
    def description(self) -> str:
        return "Enum fields declare at least one value."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        return [
            diagnostic(
                ValidationCode.ENUM_VALUES_REQUIRED,
                f"{path}.values",
                f"Enum field '{field_name}' has no values",
                "Add values, e.g. ['draft', 'published']",
            )
            for path, field_name, field in field_sites(entity)
            if field.type == "enum" and not field.enum_values
        ]


class EnumDefaults(EntityRule):
    @property
    def name(self) -> str:
        return "types.enum_defaults"

    @property
    def description(self) -> str:
        return "An enum default is one of the enum values."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        return [
            diagnostic(
                ValidationCode.INVALID_DEFAULT,
                f"{path}.default",
                f"Default '{field.default}' of enum field '{field_name}' is not one of its values",
                one_of(field.enum_values),
            )
            for path, field_name, field in field_sites(entity)
            if field.type == "enum"
            and field.enum_values
            and field.default is not None
            and field.default not in field.enum_values
        ]


class TypeRules:
    """Factory for all type-specific rules."""

    @staticmethod
    def all_rules() -> list[ValidationRule]:
        return [
            ValidationKinds(),
            EnumValues(),
            EnumDefaults(),
        ]
