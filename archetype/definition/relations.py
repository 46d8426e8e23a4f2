"""Relation builders for entity definitions.

``has_one`` puts a foreign key on the declaring entity, ``has_many`` on the
target, and ``belongs_to_many`` creates a junction table::

    relations={
        "author": has_one("User"),
        "comments": has_many("Comment"),
        "products": belongs_to_many("Product").through(
            table="order_items",
            fields={"quantity": number().required().min(1)},
        ),
    }
"""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from archetype.definition.fields import FieldBuilder
from archetype.models.field import Field
from archetype.models.relation import Pivot, Relation

R = TypeVar("R", bound="RelationBuilder")


class RelationBuilder:
    __slots__ = ("_config",)

    def __init__(self, config: Relation) -> None:
        self._config = config

    @property
    def config(self) -> Relation:
        return self._config

    def _with(self: R, **changes: Any) -> R:
        return type(self)(self._config.model_copy(update=changes))

    def field(self: R, name: str) -> R:
        """Override the default foreign key field name."""
        return self._with(field=name)

    def external(self: R) -> R:
        """Mark the target as living outside this manifest."""
        return self._with(external=True)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._config!r})"


class BelongsToManyBuilder(RelationBuilder):
    __slots__ = ()

    def through(
        self,
        table: str | None = None,
        fields: Mapping[str, FieldBuilder | Field] | None = None,
    ) -> BelongsToManyBuilder:
        """Configure the junction table name and extra pivot fields."""
        pivot_fields = {
            name: item.config if isinstance(item, FieldBuilder) else item
            for name, item in (fields or {}).items()
        }
        return self._with(pivot=Pivot(table=table, fields=pivot_fields))


def has_one(entity: str) -> RelationBuilder:
    return RelationBuilder(Relation(type="hasOne", entity=entity))


def has_many(entity: str) -> RelationBuilder:
    return RelationBuilder(Relation(type="hasMany", entity=entity))


def belongs_to_many(entity: str) -> BelongsToManyBuilder:
    return BelongsToManyBuilder(Relation(type="belongsToMany", entity=entity))
