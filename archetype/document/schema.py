"""JSON manifest document schema.

These models describe the *shape* of the JSON front-end: camelCase keys,
shorthand options and unknown keys rejected.  Closed-set values such as
field types or database types are plain strings here so that unknown
values reach the validator and get a specific diagnostic instead of a
generic shape error.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DOCUMENT_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="forbid",
)


class ValidationDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    type: str
    value: Any = None


class FieldDocument(BaseModel):
    """A field.  JSON fields are required unless ``optional`` or ``required: false``."""

    model_config = DOCUMENT_CONFIG

    type: str
    required: bool | None = None
    optional: bool | None = None
    unique: bool | None = None
    default: Any = None
    label: str | None = None

    validations: list[ValidationDocument] | None = None
    """Explicit ordered validations; applied before the shorthands below."""

    # Shorthands: min/max are lengths on text fields and bounds elsewhere
    min: int | float | None = None
    max: int | float | None = None
    email: bool | None = None
    url: bool | None = None
    regex: str | None = None
    one_of: list[str] | None = None
    trim: bool | None = None
    lowercase: bool | None = None
    uppercase: bool | None = None
    integer: bool | None = None
    positive: bool | None = None

    values: list[str] | None = None
    """Allowed values of an ``enum`` field."""

    # Computed fields
    return_type: str | None = None
    from_: list[str] | None = Field(default=None, alias="from")
    get: str | None = None


class PivotDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    table: str | None = None
    fields: dict[str, FieldDocument] = Field(default_factory=dict)


class RelationDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    type: str
    entity: str
    field: str | None = None
    pivot: PivotDocument | None = None
    external: bool | None = None


class BehaviorsDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    timestamps: bool | None = None
    soft_delete: bool | None = None
    audit: bool | None = None


class ProtectionDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    list: bool | None = None
    get: bool | None = None
    create: bool | None = None
    update: bool | None = None
    remove: bool | None = None


class HooksDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    before_create: bool | None = None
    after_create: bool | None = None
    before_update: bool | None = None
    after_update: bool | None = None
    before_remove: bool | None = None
    after_remove: bool | None = None


class EndpointsDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    list: str | None = None
    get: str | None = None
    create: str | None = None
    update: str | None = None
    delete: str | None = None


class ExternalAuthDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    type: str
    header: str | None = None


class SourceDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    base_url: str = ""
    path_prefix: str = ""
    resource_name: str | None = None
    override: EndpointsDocument | None = None
    auth: ExternalAuthDocument | None = None


class EntityDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    name: str
    fields: dict[str, FieldDocument] = Field(default_factory=dict)
    relations: dict[str, RelationDocument] | None = None
    behaviors: BehaviorsDocument | None = None
    auth: bool | None = None
    protected: bool | Literal["write", "all"] | ProtectionDocument | None = None
    source: SourceDocument | None = None
    hooks: bool | HooksDocument | None = None


class ModeDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    type: str
    include: list[str] | None = None


class DatabaseDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    type: str
    file: str | None = None
    url: str | None = None


class AuthDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    enabled: bool | None = None
    adapter: str | None = None
    providers: list[str] | None = None
    session_strategy: str | None = None


class I18nDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    languages: list[str] | None = None
    default_language: str | None = None
    output_dir: str | None = None


class LoggingDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    enabled: bool | None = None
    level: str | None = None
    format: str | None = None


class TelemetryDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    enabled: bool | None = None
    events: list[str] | None = None


class AuditDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    enabled: bool | None = None
    entity: str | None = None


class ObservabilityDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    logging: LoggingDocument | None = None
    telemetry: TelemetryDocument | None = None
    audit: AuditDocument | None = None


class TenancyDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    enabled: bool | None = None
    field: str | None = None


class DefaultsDocument(BaseModel):
    model_config = DOCUMENT_CONFIG

    timestamps: bool | None = None
    soft_delete: bool | None = None
    audit: bool | None = None


class ManifestDocument(BaseModel):
    """Top-level JSON manifest.  Only ``entities`` is mandatory.

    Example::

        {
          "entities": [
            {"name": "User", "fields": {"email": {"type": "text", "email": true, "unique": true}}}
          ],
          "database": {"type": "sqlite", "file": "./app.db"}
        }
    """

    model_config = DOCUMENT_CONFIG

    entities: list[EntityDocument]
    template: str | None = None
    mode: str | ModeDocument | None = None
    database: DatabaseDocument | None = None
    source: SourceDocument | None = None
    auth: AuthDocument | None = None
    i18n: I18nDocument | None = None
    observability: ObservabilityDocument | None = None
    tenancy: TenancyDocument | None = None
    defaults: DefaultsDocument | None = None
