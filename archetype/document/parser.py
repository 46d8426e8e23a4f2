"""JSON front-end — convert manifest documents to the IR and back.

Both directions meet in the same normalized IR as the builder API, so
``parse_manifest_document(dump_manifest_document(m)) == m`` holds for any
manifest produced by either front-end.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from archetype.compiler.defaults import merge_defaults, normalize_mode
from archetype.config import EXTERNAL_AUTH_HEADERS
from archetype.definition.entity import normalize_behaviors, normalize_hooks, normalize_protected
from archetype.document.schema import (
    AuditDocument,
    AuthDocument,
    BehaviorsDocument,
    DatabaseDocument,
    DefaultsDocument,
    EndpointsDocument,
    EntityDocument,
    ExternalAuthDocument,
    FieldDocument,
    HooksDocument,
    I18nDocument,
    LoggingDocument,
    ManifestDocument,
    ModeDocument,
    ObservabilityDocument,
    PivotDocument,
    ProtectionDocument,
    RelationDocument,
    SourceDocument,
    TelemetryDocument,
    TenancyDocument,
    ValidationDocument,
)
from archetype.errors import ManifestParseError
from archetype.models.entity import Endpoints, Entity, ExternalAuth, ExternalSource
from archetype.models.field import Field, Validation
from archetype.models.manifest import (
    AuditConfig,
    AuthConfig,
    DatabaseConfig,
    DefaultBehaviors,
    I18nConfig,
    LoggingConfig,
    Manifest,
    ObservabilityConfig,
    TelemetryConfig,
    TenancyConfig,
)
from archetype.models.relation import Pivot, Relation
from archetype.validation.codes import ValidationCode
from archetype.validation.report import Diagnostic

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=BaseModel)

# Flag shorthands appended in this order after any explicit validations
_FLAG_SHORTHANDS = ("email", "url", "trim", "lowercase", "uppercase", "integer", "positive")


# ---------------------------------------------------------------------------
# Input handling
# ---------------------------------------------------------------------------


def _load_json(data: str | bytes | Mapping[str, Any]) -> Any:
    if not isinstance(data, (str, bytes)):
        return data
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        diagnostic = Diagnostic(
            code=ValidationCode.INVALID_JSON,
            path="",
            message=f"Invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}",
            suggestion="Send a single JSON object.",
        )
        raise ManifestParseError(diagnostic.message, [diagnostic]) from exc


def _error_path(loc: tuple[Any, ...], prefix: str) -> str:
    parts = [prefix] if prefix else []
    parts.extend(str(part) for part in loc)
    return ".".join(parts)


def _validate_document(model: type[D], data: Any, what: str, prefix: str = "") -> D:
    """Validate the document shape, converting pydantic errors to diagnostics."""
    if not isinstance(data, Mapping):
        diagnostic = Diagnostic(
            code=ValidationCode.MALFORMED_INPUT,
            path=prefix,
            message=f"{what} must be a JSON object, got {type(data).__name__}",
        )
        raise ManifestParseError(diagnostic.message, [diagnostic])
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        diagnostics = [
            Diagnostic(
                code=ValidationCode.MALFORMED_INPUT,
                path=_error_path(error["loc"], prefix),
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        summary = "; ".join(f"{d.path}: {d.message}" for d in diagnostics[:3])
        raise ManifestParseError(f"Malformed {what.lower()}: {summary}", diagnostics) from exc


# ---------------------------------------------------------------------------
# Document -> IR
# ---------------------------------------------------------------------------


def _field_from_document(doc: FieldDocument) -> Field:
    validations = [Validation(type=v.type, value=v.value) for v in doc.validations or []]

    if doc.min is not None:
        validations.append(Validation(type="minLength" if doc.type == "text" else "min", value=doc.min))
    if doc.max is not None:
        validations.append(Validation(type="maxLength" if doc.type == "text" else "max", value=doc.max))
    if doc.regex is not None:
        validations.append(Validation(type="regex", value=doc.regex))
    if doc.one_of is not None:
        validations.append(Validation(type="oneOf", value=list(doc.one_of)))
    for flag in _FLAG_SHORTHANDS:
        if getattr(doc, flag):
            validations.append(Validation(type=flag))

    required = False if doc.optional else doc.required is not False

    return Field(
        type=doc.type,
        required=required,
        unique=bool(doc.unique),
        default=doc.default,
        label=doc.label,
        validations=validations,
        enum_values=doc.values,
        return_type=doc.return_type,
        source_fields=list(doc.from_ or []),
        expression=doc.get,
    )


def _relation_from_document(doc: RelationDocument) -> Relation:
    pivot = None
    if doc.pivot is not None:
        pivot = Pivot(
            table=doc.pivot.table,
            fields={name: _field_from_document(f) for name, f in doc.pivot.fields.items()},
        )
    return Relation(
        type=doc.type,
        entity=doc.entity,
        field=doc.field,
        pivot=pivot,
        external=bool(doc.external),
    )


def _source_from_document(doc: SourceDocument) -> ExternalSource:
    auth = None
    if doc.auth is not None:
        auth = ExternalAuth(
            type=doc.auth.type,
            header=doc.auth.header or EXTERNAL_AUTH_HEADERS.get(doc.auth.type, "Authorization"),
        )
    override = doc.override.model_dump() if doc.override is not None else {}
    return ExternalSource(
        base_url=doc.base_url,
        path_prefix=doc.path_prefix,
        resource_name=doc.resource_name,
        endpoints=Endpoints(**override),
        auth=auth,
    )


def _entity_from_document(doc: EntityDocument) -> Entity:
    protected = doc.protected
    if isinstance(protected, ProtectionDocument):
        protected = protected.model_dump(exclude_none=True)
    hooks = doc.hooks
    if isinstance(hooks, HooksDocument):
        hooks = hooks.model_dump(exclude_none=True)
    behaviors = doc.behaviors.model_dump() if doc.behaviors is not None else None

    return Entity(
        name=doc.name,
        fields={name: _field_from_document(f) for name, f in doc.fields.items()},
        relations={
            name: _relation_from_document(r) for name, r in (doc.relations or {}).items()
        },
        behaviors=normalize_behaviors(behaviors),
        auth=bool(doc.auth),
        protected=normalize_protected(protected),
        hooks=normalize_hooks(hooks),
        source=_source_from_document(doc.source) if doc.source is not None else None,
    )


def _section(doc: BaseModel | None, model: type[D]) -> D:
    return model(**doc.model_dump()) if doc is not None else model()


def _manifest_from_document(doc: ManifestDocument) -> Manifest:
    mode = doc.mode.model_dump() if isinstance(doc.mode, ModeDocument) else doc.mode
    observability = doc.observability or ObservabilityDocument()
    return Manifest(
        entities=[_entity_from_document(e) for e in doc.entities],
        template=doc.template,
        mode=normalize_mode(mode),
        database=DatabaseConfig(**doc.database.model_dump()) if doc.database else None,
        source=_source_from_document(doc.source) if doc.source is not None else None,
        auth=_section(doc.auth, AuthConfig),
        i18n=_section(doc.i18n, I18nConfig),
        observability=ObservabilityConfig(
            logging=_section(observability.logging, LoggingConfig),
            telemetry=_section(observability.telemetry, TelemetryConfig),
            audit=_section(observability.audit, AuditConfig),
        ),
        tenancy=_section(doc.tenancy, TenancyConfig),
        defaults=_section(doc.defaults, DefaultBehaviors),
    )


def parse_field_document(data: str | bytes | Mapping[str, Any]) -> Field:
    """Parse a single JSON field definition."""
    return _field_from_document(_validate_document(FieldDocument, _load_json(data), "Field"))


def parse_entity_document(data: str | bytes | Mapping[str, Any]) -> Entity:
    """Parse a JSON entity definition.

    Unset behaviors stay ``None`` until the entity is part of a manifest
    and :func:`merge_defaults` applies the manifest defaults.
    """
    return _entity_from_document(_validate_document(EntityDocument, _load_json(data), "Entity"))


def parse_manifest_document(data: str | bytes | Mapping[str, Any]) -> Manifest:
    """Parse a JSON manifest (string, bytes or already-decoded mapping).

    Returns the default-merged IR.  Raises :class:`ManifestParseError` for
    unparsable JSON or values of the wrong shape; semantic problems are
    left to the validator.
    """
    doc = _validate_document(ManifestDocument, _load_json(data), "Manifest")
    manifest = merge_defaults(_manifest_from_document(doc))
    logger.debug("Parsed manifest document with entities %s", manifest.entity_names)
    return manifest


def load_manifest_file(path: str | Path) -> Manifest:
    """Read and parse a JSON manifest file."""
    path = Path(path)
    manifest = parse_manifest_document(path.read_text(encoding="utf-8"))
    logger.info("Loaded manifest from %s (%d entities)", path, len(manifest.entities))
    return manifest


# ---------------------------------------------------------------------------
# IR -> Document
# ---------------------------------------------------------------------------


def _dump(doc: BaseModel) -> dict[str, Any]:
    return doc.model_dump(mode="json", by_alias=True, exclude_none=True)


def _field_to_document(field: Field) -> FieldDocument:
    return FieldDocument(
        type=field.type,
        required=field.required,
        unique=field.unique,
        default=field.default,
        label=field.label,
        validations=[ValidationDocument(type=v.type, value=v.value) for v in field.validations],
        values=field.enum_values,
        return_type=field.return_type,
        from_=list(field.source_fields) or None,
        get=field.expression,
    )


def _relation_to_document(relation: Relation) -> RelationDocument:
    pivot = None
    if relation.pivot is not None:
        pivot = PivotDocument(
            table=relation.pivot.table,
            fields={n: _field_to_document(f) for n, f in relation.pivot.fields.items()},
        )
    return RelationDocument(
        type=relation.type,
        entity=relation.entity,
        field=relation.field,
        pivot=pivot,
        external=relation.external or None,
    )


def _source_to_document(source: ExternalSource) -> SourceDocument:
    override = EndpointsDocument(**source.endpoints.model_dump())
    return SourceDocument(
        base_url=source.base_url,
        path_prefix=source.path_prefix,
        resource_name=source.resource_name,
        override=override if _dump(override) else None,
        auth=ExternalAuthDocument(**source.auth.model_dump()) if source.auth else None,
    )


def _entity_to_document(entity: Entity) -> EntityDocument:
    return EntityDocument(
        name=entity.name,
        fields={name: _field_to_document(f) for name, f in entity.fields.items()},
        relations={n: _relation_to_document(r) for n, r in entity.relations.items()} or None,
        behaviors=BehaviorsDocument(**entity.behaviors.model_dump()),
        auth=entity.auth,
        protected=ProtectionDocument(**entity.protected.model_dump()),
        source=_source_to_document(entity.source) if entity.source else None,
        hooks=HooksDocument(**entity.hooks.model_dump()),
    )


def dump_field_document(field: Field) -> dict[str, Any]:
    return _dump(_field_to_document(field))


def dump_entity_document(entity: Entity) -> dict[str, Any]:
    """Serialize an entity to its JSON document form (camelCase keys)."""
    return _dump(_entity_to_document(entity))


def dump_manifest_document(manifest: Manifest) -> dict[str, Any]:
    """Serialize a manifest to its JSON document form.

    Every normalized value is written explicitly (``required``, ordered
    ``validations``, granular ``protected`` and ``hooks``), so no shorthand
    has to be re-interpreted when the document is parsed again.
    """
    observability = manifest.observability
    doc = ManifestDocument(
        entities=[_entity_to_document(e) for e in manifest.entities],
        template=manifest.template,
        mode=ModeDocument(**manifest.mode.model_dump()) if manifest.mode else None,
        database=DatabaseDocument(**manifest.database.model_dump()) if manifest.database else None,
        source=_source_to_document(manifest.source) if manifest.source else None,
        auth=AuthDocument(**manifest.auth.model_dump()),
        i18n=I18nDocument(**manifest.i18n.model_dump()),
        observability=ObservabilityDocument(
            logging=LoggingDocument(**observability.logging.model_dump()),
            telemetry=TelemetryDocument(**observability.telemetry.model_dump()),
            audit=AuditDocument(**observability.audit.model_dump()),
        ),
        tenancy=TenancyDocument(**manifest.tenancy.model_dump()),
        defaults=DefaultsDocument(**manifest.defaults.model_dump()),
    )
    return _dump(doc)
