"""Default merging — fill every unset global option, keep explicit values."""

from __future__ import annotations

import copy
import logging
from typing import Any, Mapping

from archetype.config import MODE_DEFAULT_INCLUDES
from archetype.models.entity import Behaviors, Entity
from archetype.models.manifest import (
    AuditConfig,
    AuthConfig,
    DefaultBehaviors,
    I18nConfig,
    LoggingConfig,
    Manifest,
    ModeConfig,
    ObservabilityConfig,
    TelemetryConfig,
    TenancyConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_AUTH = AuthConfig(
    enabled=False,
    adapter="drizzle",
    providers=[],
    session_strategy="jwt",
)
DEFAULT_I18N = I18nConfig(languages=["en"], default_language="en", output_dir="./messages")
DEFAULT_LOGGING = LoggingConfig(enabled=False, level="info", format="json")
DEFAULT_TELEMETRY = TelemetryConfig(enabled=False, events=[])
DEFAULT_AUDIT = AuditConfig(enabled=False)
DEFAULT_TENANCY = TenancyConfig(enabled=False, field="organizationId")
DEFAULT_BEHAVIORS = DefaultBehaviors(timestamps=True, soft_delete=False, audit=False)


def normalize_mode(mode: str | Mapping[str, Any] | ModeConfig | None) -> ModeConfig:
    """Normalize a mode shorthand.

    ``None`` and ``"full"`` give full-stack mode.  ``"headless"`` and
    ``"api-only"`` get their default output categories.  A mapping or
    :class:`ModeConfig` keeps its own ``include`` when given.  Unknown
    mode names are kept as-is so the validator can report them.
    """
    if mode is None:
        return ModeConfig(type="full")
    if isinstance(mode, str):
        config = ModeConfig(type=mode)
    elif isinstance(mode, ModeConfig):
        config = mode
    else:
        config = ModeConfig(**dict(mode))

    if config.include is None and config.type in MODE_DEFAULT_INCLUDES:
        config = config.model_copy(
            update={"include": list(MODE_DEFAULT_INCLUDES[config.type])}
        )
    return config


def _fill(value: Any, defaults: Any) -> Any:
    """Return *value* with every ``None`` attribute taken from *defaults*."""
    missing = {
        name: copy.deepcopy(getattr(defaults, name))
        for name in type(value).model_fields
        if getattr(value, name) is None and getattr(defaults, name) is not None
    }
    return value.model_copy(update=missing) if missing else value


def _merge_entity(entity: Entity, defaults: DefaultBehaviors) -> Entity:
    behaviors = _fill(entity.behaviors, Behaviors(**defaults.model_dump()))
    if behaviors is entity.behaviors:
        return entity
    return entity.model_copy(update={"behaviors": behaviors})


def merge_defaults(manifest: Manifest) -> Manifest:
    """Fill unset global configuration and per-entity behaviors.

    Explicit values (including ``False`` and empty lists) always win.
    Applying the merge twice gives the same result as applying it once.
    """
    defaults = _fill(manifest.defaults, DEFAULT_BEHAVIORS)
    observability = ObservabilityConfig(
        logging=_fill(manifest.observability.logging, DEFAULT_LOGGING),
        telemetry=_fill(manifest.observability.telemetry, DEFAULT_TELEMETRY),
        audit=_fill(manifest.observability.audit, DEFAULT_AUDIT),
    )
    merged = manifest.model_copy(
        update={
            "mode": normalize_mode(manifest.mode),
            "auth": _fill(manifest.auth, DEFAULT_AUTH),
            "i18n": _fill(manifest.i18n, DEFAULT_I18N),
            "observability": observability,
            "tenancy": _fill(manifest.tenancy, DEFAULT_TENANCY),
            "defaults": defaults,
            "entities": [_merge_entity(e, defaults) for e in manifest.entities],
        }
    )
    logger.debug("Merged defaults into manifest with %d entities", len(merged.entities))
    return merged
