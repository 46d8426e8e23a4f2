"""ManifestBuilder — incremental, tool-callable manifest assembly.

The builder keeps the manifest as JSON documents so an agent can add and
patch entities piece by piece.  Each mutation is shape-checked through the
document parser before it is applied; semantic checks are left to
:meth:`ManifestBuilder.validate`, exactly as for a hand-written manifest.

Usage::

    builder = ManifestBuilder()
    builder.set_database({"type": "sqlite", "file": "./app.db"})
    builder.add_entity({"name": "User", "fields": {"email": {"type": "text", "email": True}}})
    result = builder.generate(dry_run=True)
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Mapping

from archetype.builder.results import (
    DUPLICATE_ENTITY,
    ENTITY_NOT_FOUND,
    MALFORMED_INPUT,
    ToolError,
    ToolResult,
)
from archetype.document.parser import (
    dump_entity_document,
    parse_entity_document,
    parse_manifest_document,
)
from archetype.errors import ManifestParseError
from archetype.generation.files import GenerationOptions, GenerationResult
from archetype.generation.generator import CodeGenerator
from archetype.models.entity import Entity
from archetype.models.manifest import Manifest
from archetype.settings import Settings
from archetype.validation.report import ValidationResult
from archetype.validation.validator import validate_manifest

logger = logging.getLogger(__name__)

# Entity keys merged key-by-key on update; anything else is replaced
_MERGED_SECTIONS = ("fields", "relations")

# Field keys that express the same setting; a patch to one drops the other
_FIELD_SYNONYMS = {"required": "optional", "optional": "required"}


def _parse_failure(what: str, exc: ManifestParseError) -> ToolResult:
    errors = [ToolError.from_diagnostic(d) for d in exc.diagnostics]
    if not errors:
        errors = [ToolError(code=MALFORMED_INPUT, message=str(exc))]
    return ToolResult.fail(f"Invalid {what}: {exc}", errors)


def _merge_entity(existing: dict[str, Any], partial: Mapping[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(existing)
    for key, value in partial.items():
        if key == "name":
            continue
        if key in _MERGED_SECTIONS and isinstance(value, Mapping):
            section = dict(merged.get(key) or {})
            for item_name, patch in value.items():
                if patch is None:
                    section.pop(item_name, None)
                elif isinstance(patch, Mapping) and isinstance(section.get(item_name), Mapping):
                    current = dict(section[item_name])
                    if key == "fields":
                        for patched, synonym in _FIELD_SYNONYMS.items():
                            if patched in patch and synonym not in patch:
                                current.pop(synonym, None)
                    section[item_name] = {**current, **copy.deepcopy(patch)}
                else:
                    section[item_name] = copy.deepcopy(patch)
            merged[key] = section
        elif key == "behaviors" and isinstance(value, Mapping):
            merged[key] = {**(merged.get(key) or {}), **value}
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ManifestBuilder:
    """Stateful manifest assembly for one session.

    Parameters
    ----------
    settings:
        Template id, output directory and parallelism used by
        :meth:`generate`.  Defaults to :class:`Settings` defaults.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self._entities: list[dict[str, Any]] = []
        self._database: dict[str, Any] | None = None
        self._auth: dict[str, Any] | None = None
        self._mode: str | dict[str, Any] | None = None

    # -- State ----------------------------------------------------------------

    @property
    def entity_names(self) -> list[str]:
        return [doc["name"] for doc in self._entities]

    def get_entity(self, name: str) -> dict[str, Any] | None:
        """Return a copy of the stored entity document, or ``None``."""
        for doc in self._entities:
            if doc["name"] == name:
                return copy.deepcopy(doc)
        return None

    def _index(self, name: str) -> int | None:
        for i, doc in enumerate(self._entities):
            if doc["name"] == name:
                return i
        return None

    def _not_found(self, name: str) -> ToolResult:
        return ToolResult.error(
            ENTITY_NOT_FOUND,
            f"Entity '{name}' not found. Use add_entity to create it first.",
            suggestion=f"Known entities: {', '.join(self.entity_names) or 'none'}",
        )

    # -- Entity operations ----------------------------------------------------

    def add_entity(self, definition: Mapping[str, Any] | Entity) -> ToolResult:
        """Append a new entity given as a JSON-style mapping or an :class:`Entity`."""
        if isinstance(definition, Entity):
            doc = dump_entity_document(definition)
        elif isinstance(definition, Mapping):
            doc = copy.deepcopy(dict(definition))
        else:
            return ToolResult.error(
                MALFORMED_INPUT,
                f"Entity definition must be an object, got {type(definition).__name__}",
            )

        try:
            entity = parse_entity_document(doc)
        except ManifestParseError as exc:
            return _parse_failure("entity definition", exc)

        if self._index(entity.name) is not None:
            return ToolResult.error(
                DUPLICATE_ENTITY,
                f"Entity '{entity.name}' already exists. Use update_entity to modify it.",
            )

        self._entities.append(doc)
        logger.info("Added entity %s (%d fields)", entity.name, len(entity.fields))
        return ToolResult.ok(
            f"Entity '{entity.name}' added with {len(entity.fields)} fields.",
            data={"entities": self.entity_names},
        )

    def update_entity(self, name: str, partial: Mapping[str, Any]) -> ToolResult:
        """Patch an existing entity.

        Fields and relations are merged key by key; a ``None`` value removes
        the field or relation.  Behaviors merge per key.  ``protected``,
        ``hooks``, ``auth`` and ``source`` are replaced only when given.
        The stored entity is left unchanged if the merged result is malformed.
        """
        index = self._index(name)
        if index is None:
            return self._not_found(name)
        if not isinstance(partial, Mapping):
            return ToolResult.error(
                MALFORMED_INPUT,
                f"Entity update must be an object, got {type(partial).__name__}",
            )

        merged = _merge_entity(self._entities[index], partial)
        try:
            entity = parse_entity_document(merged)
        except ManifestParseError as exc:
            return _parse_failure(f"update for entity '{name}'", exc)

        self._entities[index] = merged
        logger.info("Updated entity %s", name)
        return ToolResult.ok(
            f"Entity '{name}' updated.",
            data={"entity": name, "fields": list(entity.fields)},
        )

    def remove_entity(self, name: str) -> ToolResult:
        index = self._index(name)
        if index is None:
            return self._not_found(name)
        del self._entities[index]
        logger.info("Removed entity %s", name)
        return ToolResult.ok(f"Entity '{name}' removed.", data={"entities": self.entity_names})

    # -- Manifest-level sections ----------------------------------------------

    def _check_section(self, key: str, value: Any) -> ToolResult | None:
        try:
            parse_manifest_document({"entities": [], key: value})
        except ManifestParseError as exc:
            return _parse_failure(f"{key} configuration", exc)
        return None

    def set_database(self, config: Mapping[str, Any]) -> ToolResult:
        """Replace the database configuration.

        Only the shape is checked here; unsupported types and missing
        ``file``/``url`` settings are reported by :meth:`validate`.
        """
        failure = self._check_section("database", config)
        if failure is not None:
            return failure
        self._database = copy.deepcopy(dict(config))
        logger.info("Database set to %s", self._database.get("type"))
        return ToolResult.ok(f"Database configured: {self._database.get('type')}", data=self._database)

    def set_auth(self, config: Mapping[str, Any]) -> ToolResult:
        failure = self._check_section("auth", config)
        if failure is not None:
            return failure
        self._auth = copy.deepcopy(dict(config))
        enabled = self._auth.get("enabled", False)
        providers = self._auth.get("providers") or []
        logger.info("Auth set (enabled=%s)", enabled)
        if enabled:
            message = f"Auth enabled with providers: {', '.join(providers) or 'none'}"
        else:
            message = "Auth disabled"
        return ToolResult.ok(message, data=self._auth)

    def set_mode(self, mode: str | Mapping[str, Any]) -> ToolResult:
        if not isinstance(mode, (str, Mapping)):
            return ToolResult.error(
                MALFORMED_INPUT,
                f"Mode must be a name or an object, got {type(mode).__name__}",
            )
        value = mode if isinstance(mode, str) else copy.deepcopy(dict(mode))
        failure = self._check_section("mode", value)
        if failure is not None:
            return failure
        self._mode = value
        mode_type = value if isinstance(value, str) else value.get("type")
        logger.info("Mode set to %s", mode_type)
        return ToolResult.ok(f"Mode set: {mode_type}", data={"mode": value})

    def reset(self) -> None:
        """Forget all entities and configuration."""
        self._entities = []
        self._database = None
        self._auth = None
        self._mode = None
        logger.info("Builder state reset")

    # -- Snapshots ------------------------------------------------------------

    def to_document(self) -> dict[str, Any]:
        """Current state as a JSON manifest document."""
        document: dict[str, Any] = {"entities": copy.deepcopy(self._entities)}
        if self._database is not None:
            document["database"] = copy.deepcopy(self._database)
        if self._auth is not None:
            document["auth"] = copy.deepcopy(self._auth)
        if self._mode is not None:
            document["mode"] = copy.deepcopy(self._mode)
        return document

    def to_manifest(self) -> Manifest:
        """Parse the current document into an immutable, default-merged IR."""
        return parse_manifest_document(self.to_document())

    # -- Pipeline -------------------------------------------------------------

    def validate(self) -> ValidationResult:
        """Validate the current snapshot.

        Returns the :class:`ValidationResult` itself rather than a
        :class:`ToolResult`; :func:`execute_tool` wraps it for tool callers.
        """
        return validate_manifest(self.to_manifest())

    def generate(self, dry_run: bool | None = None, output_dir: str | Path | None = None) -> GenerationResult:
        """Validate and generate with the configured template.

        The template is never run for an invalid manifest; the result then
        carries the validation diagnostics.
        Like :meth:`validate`, this returns the pipeline result and leaves
        the :class:`ToolResult` wrapping to :func:`execute_tool`.
        """
        options = GenerationOptions(
            dry_run=bool(dry_run),
            output_dir=Path(output_dir) if output_dir is not None else self.settings.resolved_output_dir,
            parallel=self.settings.parallel,
        )
        generator = CodeGenerator(template=self.settings.template, options=options)
        return generator.generate(self.to_manifest())
