"""Template registry — look up generation backends by id."""

from __future__ import annotations

import logging

from archetype.config import DEFAULT_TEMPLATE_ID
from archetype.generation.generators import IR_SNAPSHOT_GENERATORS
from archetype.generation.template import GeneratorTemplate, Template, TemplateMetadata

logger = logging.getLogger(__name__)


class TemplateExistsError(Exception):
    """Raised when registering a template id that is already taken."""


def ir_snapshot_template() -> GeneratorTemplate:
    """The built-in reference template: IR JSON, ERD and hook stubs."""
    return GeneratorTemplate(
        TemplateMetadata(
            id=DEFAULT_TEMPLATE_ID,
            name="IR snapshot",
            description="Compiled manifest as JSON, a Mermaid ERD and scaffold-once hook stubs",
            version="1.0.0",
        ),
        [generator_cls() for generator_cls in IR_SNAPSHOT_GENERATORS],
    )


TEMPLATE_REGISTRY: dict[str, Template] = {
    DEFAULT_TEMPLATE_ID: ir_snapshot_template(),
}


def register_template(template: Template, *, replace: bool = False) -> None:
    """Make *template* available under its metadata id."""
    template_id = template.metadata.id
    if template_id in TEMPLATE_REGISTRY and not replace:
        raise TemplateExistsError(f"Template '{template_id}' is already registered")
    TEMPLATE_REGISTRY[template_id] = template
    logger.info("Registered template %s", template_id)


def unregister_template(template_id: str) -> bool:
    return TEMPLATE_REGISTRY.pop(template_id, None) is not None


def get_template(template_id: str) -> Template | None:
    """Return the registered template, or ``None`` for an unknown id."""
    return TEMPLATE_REGISTRY.get(template_id)


def has_template(template_id: str) -> bool:
    return template_id in TEMPLATE_REGISTRY


def list_templates() -> list[TemplateMetadata]:
    return [TEMPLATE_REGISTRY[key].metadata for key in sorted(TEMPLATE_REGISTRY)]
