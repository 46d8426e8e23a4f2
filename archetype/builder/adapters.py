"""Convert :data:`TOOL_DEFINITIONS` into provider-specific tool schemas."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from archetype.builder.results import ToolResult
from archetype.builder.state import ManifestBuilder
from archetype.builder.tools import (
    PLACEHOLDER_PREFIX,
    TOOL_DEFINITIONS,
    ToolDefinition,
    ToolParameter,
    execute_tool,
)


def parameter_schema(param: ToolParameter) -> dict[str, Any]:
    """JSON schema for one parameter.

    Objects whose properties are placeholders such as ``[fieldName]``
    become open objects with ``additionalProperties``.
    """
    schema: dict[str, Any] = {"type": param.type}
    if param.description:
        schema["description"] = param.description
    if param.enum is not None:
        schema["enum"] = list(param.enum)
    if param.items is not None:
        schema["items"] = parameter_schema(param.items)
    if param.properties:
        named = {k: v for k, v in param.properties.items() if not k.startswith(PLACEHOLDER_PREFIX)}
        if named:
            schema["properties"] = {k: parameter_schema(v) for k, v in named.items()}
            if param.required:
                schema["required"] = list(param.required)
        schema["additionalProperties"] = True
    return schema


def input_schema(tool: ToolDefinition) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            name: parameter_schema(param)
            for name, param in tool.parameters.items()
            if not name.startswith(PLACEHOLDER_PREFIX)
        },
        "required": list(tool.required),
    }


def to_openai_tools(definitions: Mapping[str, ToolDefinition] | None = None) -> list[dict[str, Any]]:
    """Tool list in the OpenAI function-calling format."""
    definitions = TOOL_DEFINITIONS if definitions is None else definitions
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": input_schema(tool),
            },
        }
        for tool in definitions.values()
    ]


def to_anthropic_tools(definitions: Mapping[str, ToolDefinition] | None = None) -> list[dict[str, Any]]:
    """Tool list in the Anthropic tool-use format."""
    definitions = TOOL_DEFINITIONS if definitions is None else definitions
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "input_schema": input_schema(tool),
        }
        for tool in definitions.values()
    ]


ADAPTERS: dict[str, Callable[..., list[dict[str, Any]]]] = {
    "openai": to_openai_tools,
    "anthropic": to_anthropic_tools,
}


def get_adapter(provider: str) -> Callable[..., list[dict[str, Any]]]:
    try:
        return ADAPTERS[provider]
    except KeyError:
        raise ValueError(
            f"Unknown tool provider '{provider}'. Expected one of: {', '.join(ADAPTERS)}"
        ) from None


class ToolHandler:
    """Tool schemas plus an execute function bound to one builder.

    ``provider`` selects the schema format: ``"openai"`` or ``"anthropic"``.
    """

    def __init__(self, builder: ManifestBuilder | None = None, provider: str = "openai") -> None:
        self.builder = builder or ManifestBuilder()
        self.provider = provider
        self.tools = get_adapter(provider)()

    def execute(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        return execute_tool(self.builder, name, arguments)
