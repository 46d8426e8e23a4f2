"""Referential rules — relation targets, pivots and computed sources."""

from __future__ import annotations

from archetype.compiler.resolver import junction_table_name
from archetype.config import RELATION_TYPES
from archetype.models.entity import Entity
from archetype.models.manifest import Manifest
from archetype.validation.codes import ValidationCode
from archetype.validation.report import Diagnostic
from archetype.validation.rules.base import EntityRule, ValidationRule, diagnostic, one_of


class RelationTypes(EntityRule):
    @property
    def name(self) -> str:
        return "referential.relation_types"

    @property
    def description(self) -> str:
        return "Relation types come from the supported set."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        return [
            diagnostic(
                ValidationCode.INVALID_RELATION_TYPE,
                f"{entity.name}.relations.{rel_name}.type",
                f"Invalid relation type '{relation.type}'",
                one_of(RELATION_TYPES),
            )
            for rel_name, relation in entity.relations.items()
            if relation.type not in RELATION_TYPES
        ]


class RelationTargets(EntityRule):
    """Every relation target is declared, unless the relation is marked external."""

    @property
    def name(self) -> str:
        return "referential.relation_targets"

    @property
    def description(self) -> str:
        return "Relation targets must exist among the declared entities."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        declared = set(manifest.entity_names)
        return [
            diagnostic(
                ValidationCode.RELATION_TARGET_NOT_FOUND,
                f"{entity.name}.relations.{rel_name}.entity",
                f"Entity '{relation.entity}' not found in manifest",
                f"Add entity '{relation.entity}' to the entities, fix the entity name, "
                "or mark the relation external",
            )
            for rel_name, relation in entity.relations.items()
            if not relation.external and relation.entity not in declared
        ]


class Pivots(EntityRule):
    @property
    def name(self) -> str:
        return "referential.pivots"

    @property
    def description(self) -> str:
        return "Only belongsToMany relations may configure a pivot."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        return [
            diagnostic(
                ValidationCode.INVALID_PIVOT,
                f"{entity.name}.relations.{rel_name}.pivot",
                f"Relation '{rel_name}' is {relation.type}; only belongsToMany can have a pivot",
                "Remove the pivot or change the relation type to belongsToMany",
            )
            for rel_name, relation in entity.relations.items()
            if relation.pivot is not None and relation.type != "belongsToMany"
        ]


class PivotFieldConflicts(EntityRule):
    """Pivot fields declared twice for the same junction table.

    The first declaration (in entity, then relation order) owns the name;
    each later one is reported.
    """

    @property
    def name(self) -> str:
        return "referential.pivot_field_conflicts"

    @property
    def description(self) -> str:
        return "Relations sharing a junction table must not redeclare pivot fields."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        owners: dict[tuple[str, str], str] = {}
        issues: list[Diagnostic] = []
        for current in manifest.entities:
            for rel_name, relation in current.relations.items():
                if relation.type != "belongsToMany" or relation.pivot is None:
                    continue
                table = junction_table_name(current.name, rel_name, relation)
                for field_name in relation.pivot.fields:
                    key = (table, field_name)
                    owner = owners.setdefault(key, f"{current.name}.{rel_name}")
                    if current is entity and owner != f"{current.name}.{rel_name}":
                        issues.append(diagnostic(
                            ValidationCode.PIVOT_FIELD_CONFLICT,
                            f"{entity.name}.relations.{rel_name}.pivot.fields.{field_name}",
                            f"Pivot field '{field_name}' on junction table '{table}' "
                            f"is already declared by {owner}",
                            "Declare pivot fields on one side of the relation only",
                        ))
            if current is entity:
                break
        return issues


class ComputedSources(EntityRule):
    @property
    def name(self) -> str:
        return "referential.computed_sources"

    @property
    def description(self) -> str:
        return "Computed fields may only read fields of the same entity."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        issues: list[Diagnostic] = []
        for field_name, field in entity.fields.items():
            if not field.is_computed:
                continue
            for source in field.source_fields:
                if source not in entity.fields:
                    issues.append(diagnostic(
                        ValidationCode.COMPUTED_SOURCE_NOT_FOUND,
                        f"{entity.name}.fields.{field_name}.from",
                        f"Computed field '{field_name}' reads unknown field '{source}'",
                        f"Use fields of '{entity.name}': {', '.join(entity.fields)}",
                    ))
        return issues


class ReferentialRules:
    """Factory for all referential rules."""

    @staticmethod
    def all_rules() -> list[ValidationRule]:
        return [
            RelationTypes(),
            RelationTargets(),
            Pivots(),
            PivotFieldConflicts(),
            ComputedSources(),
        ]
