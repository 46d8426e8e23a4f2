"""Framework-agnostic tool definitions and the tool dispatcher.

:data:`TOOL_DEFINITIONS` describes each builder operation with a small
JSON-schema-like parameter tree.  :mod:`archetype.builder.adapters` turns
them into OpenAI or Anthropic tool schemas; :func:`execute_tool` runs a
call coming back from either.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from archetype.builder.results import MALFORMED_INPUT, UNKNOWN_TOOL, ToolError, ToolResult
from archetype.builder.state import ManifestBuilder
from archetype.config import (
    AUTH_PROVIDERS,
    COMPUTED_RETURN_TYPES,
    DATABASE_TYPES,
    FIELD_TYPES,
    MODES,
    RELATION_TYPES,
    SESSION_STRATEGIES,
)
from archetype.generation.files import GenerationResult
from archetype.generation.generator import VALIDATION_FAILED
from archetype.validation.report import ValidationResult

logger = logging.getLogger(__name__)

# Parameter names in brackets stand for "any key"; adapters emit them as
# open objects rather than named properties.
PLACEHOLDER_PREFIX = "["


class ToolParameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    description: str = ""
    enum: list[Any] | None = None
    items: ToolParameter | None = None
    properties: dict[str, ToolParameter] | None = None
    required: list[str] | None = None


class ToolDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: dict[str, ToolParameter] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Parameter schemas
# ---------------------------------------------------------------------------

_FIELD = ToolParameter(
    type="object",
    description="Field definition",
    properties={
        "type": ToolParameter(type="string", enum=list(FIELD_TYPES), description="Field type"),
        "required": ToolParameter(type="boolean", description="Field must be set (default true)"),
        "optional": ToolParameter(type="boolean", description="Shorthand for required: false"),
        "unique": ToolParameter(type="boolean", description="Value must be unique"),
        "email": ToolParameter(type="boolean", description="Validate as an email address"),
        "url": ToolParameter(type="boolean", description="Validate as a URL"),
        "min": ToolParameter(type="number", description="Minimum length (text) or value (number)"),
        "max": ToolParameter(type="number", description="Maximum length (text) or value (number)"),
        "oneOf": ToolParameter(
            type="array", items=ToolParameter(type="string"), description="Allowed values"
        ),
        "integer": ToolParameter(type="boolean", description="Number must be whole"),
        "positive": ToolParameter(type="boolean", description="Number must be positive"),
        "values": ToolParameter(
            type="array", items=ToolParameter(type="string"), description="Enum values (enum fields)"
        ),
        "returnType": ToolParameter(
            type="string",
            enum=list(COMPUTED_RETURN_TYPES),
            description="Result type (computed fields)",
        ),
        "from": ToolParameter(
            type="array",
            items=ToolParameter(type="string"),
            description="Source fields (computed fields)",
        ),
        "default": ToolParameter(type="string", description="Default value"),
        "label": ToolParameter(type="string", description="Human-readable label"),
    },
    required=["type"],
)

_RELATION = ToolParameter(
    type="object",
    description="Relation definition",
    properties={
        "type": ToolParameter(type="string", enum=list(RELATION_TYPES), description="Relation kind"),
        "entity": ToolParameter(type="string", description="Target entity name"),
        "field": ToolParameter(type="string", description="Foreign key override"),
    },
    required=["type", "entity"],
)

_ENTITY_PARAMETERS: dict[str, ToolParameter] = {
    "name": ToolParameter(type="string", description="Entity name in PascalCase, e.g. 'Product'"),
    "fields": ToolParameter(
        type="object",
        description="Fields keyed by camelCase name",
        properties={"[fieldName]": _FIELD},
    ),
    "relations": ToolParameter(
        type="object",
        description="Relations keyed by camelCase name",
        properties={"[relationName]": _RELATION},
    ),
    "behaviors": ToolParameter(
        type="object",
        description="Entity behaviors",
        properties={
            "timestamps": ToolParameter(type="boolean", description="Add createdAt/updatedAt"),
            "softDelete": ToolParameter(type="boolean", description="Add deletedAt"),
            "audit": ToolParameter(type="boolean", description="Record changes"),
        },
    ),
    "protected": ToolParameter(
        type="string",
        enum=["false", "true", "write", "all"],
        description="Which operations require authentication",
    ),
}

TOOL_DEFINITIONS: dict[str, ToolDefinition] = {
    tool.name: tool
    for tool in (
        ToolDefinition(
            name="add_entity",
            description="Add a new entity to the manifest. Fails if the entity already exists.",
            parameters=_ENTITY_PARAMETERS,
            required=["name", "fields"],
        ),
        ToolDefinition(
            name="update_entity",
            description=(
                "Update an existing entity. Given fields, relations and behaviors are merged "
                "into the current definition; a null field or relation removes it."
            ),
            parameters=_ENTITY_PARAMETERS,
            required=["name"],
        ),
        ToolDefinition(
            name="remove_entity",
            description="Remove an entity from the manifest.",
            parameters={"name": ToolParameter(type="string", description="Entity name")},
            required=["name"],
        ),
        ToolDefinition(
            name="set_database",
            description="Configure the database.",
            parameters={
                "type": ToolParameter(type="string", enum=list(DATABASE_TYPES), description="Database type"),
                "file": ToolParameter(type="string", description="Database file (sqlite)"),
                "url": ToolParameter(type="string", description="Connection URL"),
            },
            required=["type"],
        ),
        ToolDefinition(
            name="set_auth",
            description="Configure authentication.",
            parameters={
                "enabled": ToolParameter(type="boolean", description="Enable authentication"),
                "providers": ToolParameter(
                    type="array",
                    items=ToolParameter(type="string", enum=list(AUTH_PROVIDERS)),
                    description="Login providers",
                ),
                "sessionStrategy": ToolParameter(
                    type="string", enum=list(SESSION_STRATEGIES), description="Session storage"
                ),
            },
            required=["enabled"],
        ),
        ToolDefinition(
            name="set_mode",
            description="Choose what gets generated: a full app, a headless client or an API only.",
            parameters={
                "type": ToolParameter(type="string", enum=list(MODES), description="Mode"),
                "include": ToolParameter(
                    type="array",
                    items=ToolParameter(type="string"),
                    description="Output categories to include",
                ),
            },
            required=["type"],
        ),
        ToolDefinition(
            name="validate",
            description="Validate the current manifest and report errors and warnings.",
        ),
        ToolDefinition(
            name="generate",
            description="Validate the manifest and generate output files.",
            parameters={
                "dryRun": ToolParameter(
                    type="boolean", description="Produce files without writing them"
                ),
            },
        ),
    )
}


# ---------------------------------------------------------------------------
# Result conversion
# ---------------------------------------------------------------------------


def validation_to_tool_result(result: ValidationResult) -> ToolResult:
    if result.valid:
        message = "Manifest is valid"
        if result.warnings:
            message += f" ({len(result.warnings)} warning(s))"
    else:
        message = f"Found {len(result.errors)} error(s)"
    return ToolResult(
        success=result.valid,
        message=message,
        data=result.to_dict(),
        errors=[ToolError.from_diagnostic(d) for d in result.errors] or None,
    )


def generation_to_tool_result(result: GenerationResult) -> ToolResult:
    if result.success:
        return ToolResult.ok(
            f"Generated {len(result.files)} files with {result.template}",
            data={
                "template": result.template,
                "files": [f.path for f in result.files],
                "written": result.written,
                "skipped": result.skipped,
            },
        )
    if result.code == VALIDATION_FAILED and result.diagnostics is not None:
        errors = [ToolError.from_diagnostic(d) for d in result.diagnostics.errors]
    else:
        errors = [ToolError(code=result.code or "GENERATION_FAILED", message=e) for e in result.errors]
    return ToolResult.fail(result.errors[0] if result.errors else "Generation failed", errors)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

_PROTECTED_STRINGS = {"true": True, "false": False}


def _entity_arguments(arguments: Mapping[str, Any]) -> dict[str, Any]:
    """Copy tool arguments, turning the string ``protected`` flags into booleans."""
    args = dict(arguments)
    protected = args.get("protected")
    if isinstance(protected, str) and protected.lower() in _PROTECTED_STRINGS:
        args["protected"] = _PROTECTED_STRINGS[protected.lower()]
    return args


def _name_argument(arguments: Mapping[str, Any]) -> str | None:
    name = arguments.get("name")
    return name if isinstance(name, str) and name else None


def _add_entity(builder: ManifestBuilder, arguments: Mapping[str, Any]) -> ToolResult:
    return builder.add_entity(_entity_arguments(arguments))


def _update_entity(builder: ManifestBuilder, arguments: Mapping[str, Any]) -> ToolResult:
    name = _name_argument(arguments)
    if name is None:
        return ToolResult.error(MALFORMED_INPUT, "update_entity requires a 'name' argument")
    partial = _entity_arguments(arguments)
    partial.pop("name")
    return builder.update_entity(name, partial)


def _remove_entity(builder: ManifestBuilder, arguments: Mapping[str, Any]) -> ToolResult:
    name = _name_argument(arguments)
    if name is None:
        return ToolResult.error(MALFORMED_INPUT, "remove_entity requires a 'name' argument")
    return builder.remove_entity(name)


def _set_mode(builder: ManifestBuilder, arguments: Mapping[str, Any]) -> ToolResult:
    return builder.set_mode(dict(arguments))


def _validate(builder: ManifestBuilder, arguments: Mapping[str, Any]) -> ToolResult:
    return validation_to_tool_result(builder.validate())


def _generate(builder: ManifestBuilder, arguments: Mapping[str, Any]) -> ToolResult:
    return generation_to_tool_result(builder.generate(dry_run=arguments.get("dryRun")))


_HANDLERS: dict[str, Callable[[ManifestBuilder, Mapping[str, Any]], ToolResult]] = {
    "add_entity": _add_entity,
    "update_entity": _update_entity,
    "remove_entity": _remove_entity,
    "set_database": lambda builder, arguments: builder.set_database(arguments),
    "set_auth": lambda builder, arguments: builder.set_auth(arguments),
    "set_mode": _set_mode,
    "validate": _validate,
    "generate": _generate,
}


def execute_tool(
    builder: ManifestBuilder, name: str, arguments: Mapping[str, Any] | None = None
) -> ToolResult:
    """Run tool *name* against *builder*.

    Parameters
    ----------
    builder:
        The session's builder; mutated by entity and configuration tools.
    name:
        Tool name as listed in :data:`TOOL_DEFINITIONS`.
    arguments:
        Decoded tool-call arguments.

    Returns
    -------
    ToolResult
        Unknown tools and malformed arguments are reported as failed
        results, never raised.
    """
    handler = _HANDLERS.get(name)
    if handler is None:
        return ToolResult.error(
            UNKNOWN_TOOL,
            f"Unknown tool: {name}",
            suggestion=f"Available tools: {', '.join(TOOL_DEFINITIONS)}",
        )
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        return ToolResult.error(MALFORMED_INPUT, f"Arguments for {name} must be an object")
    logger.debug("Executing tool %s", name)
    return handler(builder, arguments)
