"""Scaffold-once lifecycle hook stubs, one module per entity with hooks."""

from __future__ import annotations

from archetype.compiler.naming import to_snake_case
from archetype.config import HOOKS_DIR
from archetype.generation.files import GeneratedFile
from archetype.generation.generators.base import EntityGenerator
from archetype.models.entity import Entity
from archetype.models.manifest import Manifest

# hook name -> (signature, docstring, body)
_STUBS: dict[str, tuple[str, str, str]] = {
    "before_create": ("data", "Runs before a {name} is created; return the data to insert.", "return data"),
    "after_create": ("record", "Runs after a {name} is created.", "pass"),
    "before_update": ("id, data", "Runs before a {name} is updated; return the data to apply.", "return data"),
    "after_update": ("record", "Runs after a {name} is updated.", "pass"),
    "before_remove": ("id", "Runs before a {name} is removed.", "pass"),
    "after_remove": ("id", "Runs after a {name} is removed.", "pass"),
}


def render_hooks(entity: Entity) -> str:
    lines = [
        f'"""Lifecycle hooks for {entity.name}.',
        "",
        "Scaffolded once; edit freely.  Regeneration never overwrites this file.",
        '"""',
    ]
    for hook in entity.hooks.enabled:
        signature, doc, body = _STUBS[hook]
        lines.extend([
            "",
            "",
            f"def {hook}({signature}):",
            f'    """{doc.format(name=entity.name)}"""',
            f"    {body}",
        ])
    return "\n".join(lines) + "\n"


class HookStubsGenerator(EntityGenerator):
    """Writes ``hooks/<entity>.py`` for every entity with at least one hook enabled."""

    category = "hooks"

    @property
    def name(self) -> str:
        return "hook-stubs"

    @property
    def description(self) -> str:
        return "Scaffold-once lifecycle hook modules"

    def applies_to(self, entity: Entity) -> bool:
        return bool(entity.hooks.enabled)

    def generate_entity(self, entity: Entity, manifest: Manifest) -> list[GeneratedFile]:
        return [
            GeneratedFile(
                path=f"{HOOKS_DIR}/{to_snake_case(entity.name)}.py",
                content=render_hooks(entity),
                scaffold=True,
            )
        ]
