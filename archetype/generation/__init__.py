"""Code generation — template contract, registry and the gated orchestrator."""

from archetype.generation.files import GeneratedFile, GenerationOptions, GenerationResult
from archetype.generation.generator import (
    GENERATION_FAILED,
    TEMPLATE_NOT_FOUND,
    VALIDATION_FAILED,
    CodeGenerator,
    generate,
)
from archetype.generation.generators import EntityGenerator, Generator
from archetype.generation.registry import (
    get_template,
    has_template,
    list_templates,
    register_template,
    unregister_template,
)
from archetype.generation.template import (
    GeneratorTemplate,
    Template,
    TemplateMetadata,
    should_run_generator,
)
from archetype.generation.writer import WriteReport, apply_files

__all__ = [
    "CodeGenerator",
    "EntityGenerator",
    "GENERATION_FAILED",
    "GeneratedFile",
    "GenerationOptions",
    "GenerationResult",
    "Generator",
    "GeneratorTemplate",
    "TEMPLATE_NOT_FOUND",
    "Template",
    "TemplateMetadata",
    "VALIDATION_FAILED",
    "WriteReport",
    "apply_files",
    "generate",
    "get_template",
    "has_template",
    "list_templates",
    "register_template",
    "should_run_generator",
    "unregister_template",
]
