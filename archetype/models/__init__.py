"""Canonical intermediate representation (IR) shared by both front-ends."""

from archetype.models.entity import (
    Behaviors,
    Endpoints,
    Entity,
    ExternalAuth,
    ExternalSource,
    Hooks,
    Protection,
)
from archetype.models.field import Field, Validation
from archetype.models.manifest import (
    AuditConfig,
    AuthConfig,
    DatabaseConfig,
    DefaultBehaviors,
    I18nConfig,
    LoggingConfig,
    Manifest,
    ModeConfig,
    ObservabilityConfig,
    TelemetryConfig,
    TenancyConfig,
)
from archetype.models.relation import Pivot, Relation

__all__ = [
    "AuditConfig",
    "AuthConfig",
    "Behaviors",
    "DatabaseConfig",
    "DefaultBehaviors",
    "Endpoints",
    "Entity",
    "ExternalAuth",
    "ExternalSource",
    "Field",
    "Hooks",
    "I18nConfig",
    "LoggingConfig",
    "Manifest",
    "ModeConfig",
    "ObservabilityConfig",
    "Pivot",
    "Protection",
    "Relation",
    "TelemetryConfig",
    "TenancyConfig",
    "Validation",
]
