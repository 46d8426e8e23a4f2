"""Manifest — the top-level aggregate of entities plus global configuration.

Every optional attribute of the global configuration blocks is ``None``
until :func:`archetype.compiler.merge_defaults` fills it, so an explicit
``False`` or empty list stays distinguishable from "not given".
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field as PydanticField

from archetype.models.entity import Entity, ExternalSource


class ModeConfig(BaseModel):
    """Generation mode plus the output categories it includes."""

    model_config = ConfigDict(frozen=True)

    type: str = "full"
    include: list[str] | None = None


class DatabaseConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    file: str | None = None
    """SQLite file path."""

    url: str | None = None
    """Connection URL for PostgreSQL/MySQL."""


class AuthConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool | None = None
    adapter: str | None = None
    providers: list[str] | None = None
    session_strategy: str | None = None


class I18nConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    languages: list[str] | None = None
    default_language: str | None = None
    output_dir: str | None = None


class LoggingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool | None = None
    level: str | None = None
    format: str | None = None


class TelemetryConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool | None = None
    events: list[str] | None = None


class AuditConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool | None = None
    entity: str | None = None
    """Entity storing audit records."""


class ObservabilityConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    logging: LoggingConfig = PydanticField(default_factory=LoggingConfig)
    telemetry: TelemetryConfig = PydanticField(default_factory=TelemetryConfig)
    audit: AuditConfig = PydanticField(default_factory=AuditConfig)


class TenancyConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool | None = None
    field: str | None = None
    """Field every query filters on (e.g. ``organizationId``)."""


class DefaultBehaviors(BaseModel):
    """Behavior defaults applied to every entity that leaves one unset."""

    model_config = ConfigDict(frozen=True)

    timestamps: bool | None = None
    soft_delete: bool | None = None
    audit: bool | None = None


class Manifest(BaseModel):
    """The full declarative description of an application.

    The IR is treated as a value: compilation stages return new instances
    and never mutate the one they were given.
    """

    model_config = ConfigDict(frozen=True)

    entities: list[Entity] = PydanticField(default_factory=list)
    template: str | None = None
    mode: ModeConfig | None = None
    database: DatabaseConfig | None = None
    source: ExternalSource | None = None
    """Default external source for entities that do not declare one."""

    auth: AuthConfig = PydanticField(default_factory=AuthConfig)
    i18n: I18nConfig = PydanticField(default_factory=I18nConfig)
    observability: ObservabilityConfig = PydanticField(default_factory=ObservabilityConfig)
    tenancy: TenancyConfig = PydanticField(default_factory=TenancyConfig)
    defaults: DefaultBehaviors = PydanticField(default_factory=DefaultBehaviors)

    @property
    def entity_names(self) -> list[str]:
        return [entity.name for entity in self.entities]

    def get_entity(self, name: str) -> Entity | None:
        for entity in self.entities:
            if entity.name == name:
                return entity
        return None

    @property
    def mode_type(self) -> str:
        return self.mode.type if self.mode is not None else "full"
