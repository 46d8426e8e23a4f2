"""Abstract rule interfaces."""

from __future__ import annotations

import abc

from archetype.models.entity import Entity
from archetype.models.field import Field
from archetype.models.manifest import Manifest
from archetype.validation.codes import ValidationCode
from archetype.validation.report import Diagnostic


def diagnostic(
    code: ValidationCode,
    path: str,
    message: str,
    suggestion: str | None = None,
) -> Diagnostic:
    return Diagnostic(code=code, path=path, message=message, suggestion=suggestion)


def one_of(values: tuple[str, ...] | list[str]) -> str:
    return f"Use one of: {', '.join(values)}"


def field_sites(entity: Entity) -> list[tuple[str, str, Field]]:
    """Return ``(path, name, field)`` for entity fields, then pivot fields.

    Pivot fields follow relation declaration order and live under
    ``<Entity>.relations.<r>.pivot.fields.<f>``.
    """
    sites = [(f"{entity.name}.fields.{name}", name, field) for name, field in entity.fields.items()]
    for relation_name, relation in entity.relations.items():
        if relation.pivot is None:
            continue
        for name, field in relation.pivot.fields.items():
            sites.append((f"{entity.name}.relations.{relation_name}.pivot.fields.{name}", name, field))
    return sites


class ValidationRule(abc.ABC):
    """Base class for rules that look at the manifest as a whole."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Short rule identifier."""

    @property
    @abc.abstractmethod
    def description(self) -> str:
        """Human-readable description."""

    @abc.abstractmethod
    def check(self, manifest: Manifest) -> list[Diagnostic]:
        """Run this rule against a default-merged manifest.

        Returns every breach found (empty if passing).
        """


class EntityRule(ValidationRule):
    """Base class for rules applied to each entity in declaration order.

    The validator calls :meth:`check_entity` once per entity, running all
    entity rules for one entity before moving on to the next.
    """

    def check(self, manifest: Manifest) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for entity in manifest.entities:
            diagnostics.extend(self.check_entity(entity, manifest))
        return diagnostics

    @abc.abstractmethod
    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        """Run this rule against one entity of *manifest*."""
