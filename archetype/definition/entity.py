"""Entity definition and normalization of shorthand options."""

from __future__ import annotations

from typing import Any, Mapping

from archetype.compiler.naming import to_snake_case
from archetype.definition.fields import FieldBuilder
from archetype.definition.relations import RelationBuilder
from archetype.models.entity import (
    CRUD_OPERATIONS,
    HOOK_NAMES,
    Behaviors,
    Entity,
    ExternalSource,
    Hooks,
    Protection,
)
from archetype.models.field import Field
from archetype.models.relation import Relation

ALL_PUBLIC = Protection()
ALL_PROTECTED = Protection(list=True, get=True, create=True, update=True, remove=True)
WRITE_PROTECTED = Protection(create=True, update=True, remove=True)

NO_HOOKS = Hooks()
ALL_HOOKS = Hooks(**{name: True for name in HOOK_NAMES})

ProtectedOption = bool | str | Mapping[str, bool] | Protection | None
HooksOption = bool | Mapping[str, bool] | Hooks | None


def normalize_protected(option: ProtectedOption) -> Protection:
    """Normalize a protection shorthand to the five per-operation flags.

    - ``None`` / ``False``: everything public (default)
    - ``True`` / ``"all"``: every operation requires auth
    - ``"write"``: list/get public, create/update/remove protected
    - mapping: granular flags merged over all-public
    """
    if isinstance(option, Protection):
        return option
    if option is None or option is False:
        return ALL_PUBLIC
    if option is True or option == "all":
        return ALL_PROTECTED
    if option == "write":
        return WRITE_PROTECTED
    if isinstance(option, Mapping):
        unknown = set(option) - set(CRUD_OPERATIONS)
        if unknown:
            raise ValueError(f"Unknown protected operations: {sorted(unknown)}")
        return ALL_PUBLIC.model_copy(update={k: bool(v) for k, v in option.items()})
    raise ValueError(
        f"Invalid protected value {option!r}; use True, False, 'write', 'all' "
        "or a mapping of list/get/create/update/remove"
    )


def normalize_hooks(option: HooksOption) -> Hooks:
    """Normalize a hooks shorthand; mapping keys may be camelCase or snake_case."""
    if isinstance(option, Hooks):
        return option
    if option is None or option is False:
        return NO_HOOKS
    if option is True:
        return ALL_HOOKS
    if isinstance(option, Mapping):
        flags = {to_snake_case(k): bool(v) for k, v in option.items()}
        unknown = set(flags) - set(HOOK_NAMES)
        if unknown:
            raise ValueError(f"Unknown hooks: {sorted(unknown)}")
        return NO_HOOKS.model_copy(update=flags)
    raise ValueError(f"Invalid hooks value {option!r}")


def normalize_behaviors(option: Behaviors | Mapping[str, bool | None] | None) -> Behaviors:
    """Keep unset behaviors as ``None`` so manifest defaults can apply later."""
    if isinstance(option, Behaviors):
        return option
    if not option:
        return Behaviors()
    return Behaviors(**{to_snake_case(k): v for k, v in option.items()})


def _field_config(item: FieldBuilder | Field) -> Field:
    return item.config if isinstance(item, FieldBuilder) else item


def _relation_config(item: RelationBuilder | Relation) -> Relation:
    return item.config if isinstance(item, RelationBuilder) else item


def define_entity(
    name: str,
    *,
    fields: Mapping[str, FieldBuilder | Field],
    relations: Mapping[str, RelationBuilder | Relation] | None = None,
    behaviors: Behaviors | Mapping[str, Any] | None = None,
    auth: bool = False,
    protected: ProtectedOption = None,
    source: ExternalSource | None = None,
    hooks: HooksOption = None,
) -> Entity:
    """Define an entity with fields, relations and behaviors.

    Example::

        User = define_entity(
            "User",
            fields={
                "email": text().required().unique().email(),
                "name": text().required().min(2).max(100),
                "age": number().optional().min(0).integer(),
            },
            relations={"posts": has_many("Post")},
            behaviors={"softDelete": True},
            protected="write",
        )
    """
    return Entity(
        name=name,
        fields={field_name: _field_config(item) for field_name, item in fields.items()},
        relations={
            rel_name: _relation_config(item) for rel_name, item in (relations or {}).items()
        },
        behaviors=normalize_behaviors(behaviors),
        auth=auth,
        protected=normalize_protected(protected),
        hooks=normalize_hooks(hooks),
        source=source,
    )
