"""Mermaid entity-relationship diagram."""

from __future__ import annotations

from archetype.config import DOCS_DIR
from archetype.generation.files import GeneratedFile, GenerationOptions
from archetype.generation.generators.base import Generator
from archetype.models.manifest import Manifest

_MERMAID_TYPES = {
    "text": "string",
    "number": "int",
    "boolean": "boolean",
    "date": "datetime",
    "enum": "string",
}

_RELATION_SYMBOLS = {
    "hasOne": "||--||",
    "hasMany": "||--o{",
    "belongsToMany": "}o--o{",
}


def render_erd(manifest: Manifest) -> str:
    """Return the ``erDiagram`` block for *manifest* (without code fences)."""
    lines = ["erDiagram"]

    for entity in manifest.entities:
        lines.append(f"    {entity.name} {{")
        lines.append("        string id PK")
        for field_name, field in entity.stored_fields.items():
            constraints = []
            if field.required:
                constraints.append("required")
            if field.unique:
                constraints.append("unique")
            annotation = f'"{", ".join(constraints)}"' if constraints else ""
            mermaid_type = _MERMAID_TYPES.get(field.type, "string")
            lines.append(f"        {mermaid_type} {field_name} {annotation}".rstrip())
        if entity.behaviors.timestamps:
            lines.append("        string createdAt")
            lines.append("        string updatedAt")
        if entity.behaviors.soft_delete:
            lines.append("        string deletedAt")
        lines.append("    }")

    for entity in manifest.entities:
        for rel_name, relation in entity.relations.items():
            symbol = _RELATION_SYMBOLS.get(relation.type, "--")
            lines.append(f"    {entity.name} {symbol} {relation.entity} : {rel_name}")

    return "\n".join(lines)


class ErdGenerator(Generator):
    """Writes ``docs/erd.md`` with a Mermaid diagram of the stored schema."""

    category = "schema"

    @property
    def name(self) -> str:
        return "erd"

    @property
    def description(self) -> str:
        return "Mermaid entity-relationship diagram"

    def generate(self, manifest: Manifest, options: GenerationOptions) -> list[GeneratedFile]:
        content = f"# Entity Relationship Diagram\n\n```mermaid\n{render_erd(manifest)}\n```\n"
        return [GeneratedFile(path=f"{DOCS_DIR}/erd.md", content=content)]
