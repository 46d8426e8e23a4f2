"""Generators of the built-in ``ir-snapshot`` template."""

from archetype.generation.generators.base import EntityGenerator, Generator
from archetype.generation.generators.erd import ErdGenerator, render_erd
from archetype.generation.generators.hook_stubs import HookStubsGenerator, render_hooks
from archetype.generation.generators.snapshot import EntityJsonGenerator, ManifestJsonGenerator

# Execution order of the ir-snapshot template
IR_SNAPSHOT_GENERATORS: list[type[Generator]] = [
    ManifestJsonGenerator,
    EntityJsonGenerator,
    ErdGenerator,
    HookStubsGenerator,
]

__all__ = [
    "EntityGenerator",
    "EntityJsonGenerator",
    "ErdGenerator",
    "Generator",
    "HookStubsGenerator",
    "IR_SNAPSHOT_GENERATORS",
    "ManifestJsonGenerator",
    "render_erd",
    "render_hooks",
]
