"""Manifest definition — the builder API's top-level entry point."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence, TypeVar

from pydantic import BaseModel

from archetype.compiler.defaults import merge_defaults, normalize_mode
from archetype.compiler.naming import to_snake_case
from archetype.models.entity import Entity, ExternalSource
from archetype.models.manifest import (
    AuthConfig,
    DatabaseConfig,
    DefaultBehaviors,
    I18nConfig,
    Manifest,
    ModeConfig,
    ObservabilityConfig,
    TenancyConfig,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _snake_keys(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {to_snake_case(str(k)): _snake_keys(v) for k, v in value.items()}
    return value


def _as_model(model: type[M], value: M | Mapping[str, Any] | None) -> M | None:
    """Accept a model instance or a mapping with camelCase or snake_case keys."""
    if value is None or isinstance(value, model):
        return value
    return model.model_validate(_snake_keys(value))


def define_manifest(
    *,
    entities: Sequence[Entity],
    database: DatabaseConfig | Mapping[str, Any] | None = None,
    mode: str | Mapping[str, Any] | ModeConfig | None = None,
    source: ExternalSource | None = None,
    auth: AuthConfig | Mapping[str, Any] | None = None,
    i18n: I18nConfig | Mapping[str, Any] | None = None,
    observability: ObservabilityConfig | Mapping[str, Any] | None = None,
    tenancy: TenancyConfig | Mapping[str, Any] | None = None,
    defaults: DefaultBehaviors | Mapping[str, Any] | None = None,
    template: str | None = None,
) -> Manifest:
    """Assemble entities and global configuration into a default-merged manifest.

    Semantic problems (unknown relation targets, a missing database, ...)
    are left for :func:`archetype.validation.validate_manifest` to report.

    Example::

        manifest = define_manifest(
            entities=[User, Post],
            database={"type": "sqlite", "file": "./app.db"},
            auth={"enabled": True, "providers": ["credentials"]},
        )
    """
    manifest = Manifest(
        entities=list(entities),
        template=template,
        mode=normalize_mode(mode),
        database=_as_model(DatabaseConfig, database),
        source=source,
        auth=_as_model(AuthConfig, auth) or AuthConfig(),
        i18n=_as_model(I18nConfig, i18n) or I18nConfig(),
        observability=_as_model(ObservabilityConfig, observability) or ObservabilityConfig(),
        tenancy=_as_model(TenancyConfig, tenancy) or TenancyConfig(),
        defaults=_as_model(DefaultBehaviors, defaults) or DefaultBehaviors(),
    )
    logger.debug("Defined manifest with entities %s", manifest.entity_names)
    return merge_defaults(manifest)


define_config = define_manifest
