"""Entity — a named data type with fields, relations, and opt-in behaviors."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field as PydanticField

from archetype.models.field import Field
from archetype.models.relation import Relation

CRUD_OPERATIONS = ("list", "get", "create", "update", "remove")
HOOK_NAMES = (
    "before_create",
    "after_create",
    "before_update",
    "after_update",
    "before_remove",
    "after_remove",
)


class Behaviors(BaseModel):
    """Cross-cutting entity traits.

    Each flag is tri-state: ``None`` means unset and resolves to the
    manifest default during compilation; ``False`` is an explicit opt-out.
    """

    model_config = ConfigDict(frozen=True)

    timestamps: bool | None = None
    soft_delete: bool | None = None
    audit: bool | None = None


class Protection(BaseModel):
    """Per-CRUD-operation authentication requirement."""

    model_config = ConfigDict(frozen=True)

    list: bool = False
    get: bool = False
    create: bool = False
    update: bool = False
    remove: bool = False

    @property
    def any(self) -> bool:
        return self.list or self.get or self.create or self.update or self.remove


class Hooks(BaseModel):
    """Lifecycle hooks a user implements in scaffolded hook files."""

    model_config = ConfigDict(frozen=True)

    before_create: bool = False
    after_create: bool = False
    before_update: bool = False
    after_update: bool = False
    before_remove: bool = False
    after_remove: bool = False

    @property
    def enabled(self) -> tuple[str, ...]:
        return tuple(name for name in HOOK_NAMES if getattr(self, name))


class Endpoints(BaseModel):
    """REST endpoints of an external source, as ``'<METHOD> <path>'``."""

    model_config = ConfigDict(frozen=True)

    list: str | None = None
    get: str | None = None
    create: str | None = None
    update: str | None = None
    delete: str | None = None


class ExternalAuth(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    header: str


class ExternalSource(BaseModel):
    """An external REST API backing an entity instead of the database."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    """Base URL; ``env:VARIABLE`` reads it from the environment at runtime."""

    path_prefix: str = ""
    resource_name: str | None = None
    endpoints: Endpoints = PydanticField(default_factory=Endpoints)
    auth: ExternalAuth | None = None


class Entity(BaseModel):
    """Compiled entity — consumed by the validator, compiler and templates."""

    model_config = ConfigDict(frozen=True)

    name: str
    fields: dict[str, Field] = PydanticField(default_factory=dict)
    relations: dict[str, Relation] = PydanticField(default_factory=dict)
    behaviors: Behaviors = PydanticField(default_factory=Behaviors)
    auth: bool = False
    protected: Protection = PydanticField(default_factory=Protection)
    hooks: Hooks = PydanticField(default_factory=Hooks)
    source: ExternalSource | None = None

    # Resolved by the compiler
    table_name: str | None = None

    @property
    def stored_fields(self) -> dict[str, Field]:
        return {name: f for name, f in self.fields.items() if f.is_stored}

    @property
    def is_external(self) -> bool:
        return self.source is not None
