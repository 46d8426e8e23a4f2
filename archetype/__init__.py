"""archetype — declarative manifest compiler.

Describe a data-driven application once, as fluent Python builders or a
JSON document, then validate, compile and hand it to a generation template.
"""

__version__ = "0.1.0"

from archetype.builder import ManifestBuilder, ToolHandler, ToolResult, execute_tool
from archetype.compiler import compile_manifest, merge_defaults, resolve_manifest
from archetype.definition import (
    belongs_to_many,
    boolean,
    computed,
    date,
    define_config,
    define_entity,
    define_manifest,
    enum_field,
    external,
    has_many,
    has_one,
    number,
    text,
)
from archetype.document import (
    dump_manifest_document,
    load_manifest_file,
    parse_entity_document,
    parse_manifest_document,
)
from archetype.errors import ArchetypeError, GenerationError, ManifestParseError
from archetype.generation import (
    CodeGenerator,
    GeneratedFile,
    GenerationOptions,
    GenerationResult,
    generate,
    get_template,
    register_template,
)
from archetype.models import Entity, Field, Manifest, Relation
from archetype.settings import Settings, load_settings
from archetype.validation import Diagnostic, ValidationCode, ValidationResult, Validator, validate_manifest

__all__ = [
    "__version__",
    # Definition
    "belongs_to_many",
    "boolean",
    "computed",
    "date",
    "define_config",
    "define_entity",
    "define_manifest",
    "enum_field",
    "external",
    "has_many",
    "has_one",
    "number",
    "text",
    # Documents
    "dump_manifest_document",
    "load_manifest_file",
    "parse_entity_document",
    "parse_manifest_document",
    # IR
    "Entity",
    "Field",
    "Manifest",
    "Relation",
    # Validation
    "Diagnostic",
    "ValidationCode",
    "ValidationResult",
    "Validator",
    "validate_manifest",
    # Compiler
    "compile_manifest",
    "merge_defaults",
    "resolve_manifest",
    # Generation
    "CodeGenerator",
    "GeneratedFile",
    "GenerationOptions",
    "GenerationResult",
    "generate",
    "get_template",
    "register_template",
    # Builder
    "ManifestBuilder",
    "ToolHandler",
    "ToolResult",
    "execute_tool",
    # Errors and settings
    "ArchetypeError",
    "GenerationError",
    "ManifestParseError",
    "Settings",
    "load_settings",
]
