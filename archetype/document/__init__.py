"""JSON front-end: manifest document schema, parser and serializer."""

from archetype.document.parser import (
    dump_entity_document,
    dump_field_document,
    dump_manifest_document,
    load_manifest_file,
    parse_entity_document,
    parse_field_document,
    parse_manifest_document,
)
from archetype.document.schema import EntityDocument, FieldDocument, ManifestDocument

__all__ = [
    "EntityDocument",
    "FieldDocument",
    "ManifestDocument",
    "dump_entity_document",
    "dump_field_document",
    "dump_manifest_document",
    "load_manifest_file",
    "parse_entity_document",
    "parse_field_document",
    "parse_manifest_document",
]
