"""Relation — a typed link from one entity to another."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field as PydanticField

from archetype.models.field import Field


class Pivot(BaseModel):
    """Junction table configuration for ``belongsToMany`` relations."""

    model_config = ConfigDict(frozen=True)

    table: str | None = None
    fields: dict[str, Field] = PydanticField(default_factory=dict)


class Relation(BaseModel):
    """Compiled relation configuration.

    The ``foreign_key``, ``foreign_key_column`` and ``junction_table`` slots
    stay ``None`` until the compiler resolves them.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    entity: str
    field: str | None = None
    """Explicit foreign key field name."""

    pivot: Pivot | None = None
    external: bool = False
    """Target lives outside this manifest; skip the existence check."""

    # Resolved by the compiler
    foreign_key: str | None = None
    foreign_key_column: str | None = None
    junction_table: str | None = None
