"""ManifestBuilder — the pipeline as incremental, tool-callable operations."""

from archetype.builder.adapters import ToolHandler, to_anthropic_tools, to_openai_tools
from archetype.builder.results import (
    DUPLICATE_ENTITY,
    ENTITY_NOT_FOUND,
    MALFORMED_INPUT,
    UNKNOWN_TOOL,
    ToolError,
    ToolResult,
)
from archetype.builder.state import ManifestBuilder
from archetype.builder.tools import TOOL_DEFINITIONS, ToolDefinition, ToolParameter, execute_tool

__all__ = [
    "DUPLICATE_ENTITY",
    "ENTITY_NOT_FOUND",
    "MALFORMED_INPUT",
    "ManifestBuilder",
    "TOOL_DEFINITIONS",
    "ToolDefinition",
    "ToolError",
    "ToolHandler",
    "ToolParameter",
    "ToolResult",
    "UNKNOWN_TOOL",
    "execute_tool",
    "to_anthropic_tools",
    "to_openai_tools",
]
