"""IR snapshot generators — the compiled manifest as JSON documents."""

from __future__ import annotations

import json
from typing import Any

from archetype.compiler.naming import to_snake_case
from archetype.config import IR_DIR
from archetype.generation.files import GeneratedFile, GenerationOptions
from archetype.generation.generators.base import EntityGenerator, Generator
from archetype.models.entity import Entity
from archetype.models.manifest import Manifest


def to_json(data: Any) -> str:
    """Stable JSON text: fixed indentation, declaration order kept, trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def entity_path(entity: Entity) -> str:
    return f"{IR_DIR}/entities/{to_snake_case(entity.name)}.json"


class ManifestJsonGenerator(Generator):
    """Writes the whole compiled manifest to ``ir/manifest.json``."""

    @property
    def name(self) -> str:
        return "ir-manifest"

    @property
    def description(self) -> str:
        return "Compiled manifest as one JSON document"

    def generate(self, manifest: Manifest, options: GenerationOptions) -> list[GeneratedFile]:
        content = to_json(manifest.model_dump(mode="json"))
        return [GeneratedFile(path=f"{IR_DIR}/manifest.json", content=content)]


class EntityJsonGenerator(EntityGenerator):
    """One JSON document per entity plus a shared ``ir/index.json``."""

    @property
    def name(self) -> str:
        return "ir-entities"

    @property
    def description(self) -> str:
        return "Per-entity JSON documents and an index"

    def generate_entity(self, entity: Entity, manifest: Manifest) -> list[GeneratedFile]:
        return [
            GeneratedFile(
                path=entity_path(entity),
                content=to_json(entity.model_dump(mode="json")),
            )
        ]

    def merge(
        self,
        manifest: Manifest,
        entities: list[Entity],
        per_entity: list[list[GeneratedFile]],
    ) -> list[GeneratedFile]:
        index = {
            "mode": manifest.mode_type,
            "entities": [
                {
                    "name": entity.name,
                    "table": entity.table_name,
                    "external": entity.is_external,
                    "file": entity_path(entity),
                }
                for entity in entities
            ],
        }
        files = super().merge(manifest, entities, per_entity)
        files.append(GeneratedFile(path=f"{IR_DIR}/index.json", content=to_json(index)))
        return files
