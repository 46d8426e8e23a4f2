"""Name resolution — table names, foreign keys, junction tables, endpoints."""

from __future__ import annotations

import logging

from archetype.compiler.defaults import merge_defaults
from archetype.compiler.naming import (
    column_name,
    pluralize,
    table_name,
    to_camel_case,
    to_snake_case,
)
from archetype.models.entity import Endpoints, Entity, ExternalSource
from archetype.models.manifest import Manifest
from archetype.models.relation import Relation

logger = logging.getLogger(__name__)


def junction_table_name(entity_name: str, relation_name: str, relation: Relation) -> str:
    """Junction table for a ``belongsToMany`` relation.

    An explicit ``pivot.table`` wins.  Otherwise both entity names are
    lower-cased and joined in sorted order, so ``Post.tags`` and
    ``Tag.posts`` share ``post_tag``.  Self-referential relations use the
    relation name instead (``user_followers``).
    """
    if relation.pivot is not None and relation.pivot.table:
        return relation.pivot.table
    if relation.entity == entity_name:
        return f"{entity_name.lower()}_{to_snake_case(relation_name)}"
    return "_".join(sorted([entity_name.lower(), relation.entity.lower()]))


def foreign_key_name(entity_name: str, relation_name: str, relation: Relation) -> str | None:
    """Foreign key field for ``hasOne`` (on this entity) or ``hasMany`` (on the target)."""
    if relation.field:
        return relation.field
    if relation.type == "hasOne":
        return f"{relation_name}Id"
    if relation.type == "hasMany":
        return f"{to_camel_case(entity_name)}Id"
    return None


def resolve_relation(entity_name: str, relation_name: str, relation: Relation) -> Relation:
    if relation.type == "belongsToMany":
        return relation.model_copy(
            update={"junction_table": junction_table_name(entity_name, relation_name, relation)}
        )
    fk = foreign_key_name(entity_name, relation_name, relation)
    if fk is None:
        return relation
    return relation.model_copy(
        update={"foreign_key": fk, "foreign_key_column": column_name(fk)}
    )


def resolve_endpoints(entity_name: str, source: ExternalSource) -> Endpoints:
    """Fill every unset endpoint from REST conventions."""
    resource = source.resource_name or pluralize(entity_name.lower())
    base = f"{source.path_prefix}/{resource}"
    given = source.endpoints
    return Endpoints(
        list=given.list or f"GET {base}",
        get=given.get or f"GET {base}/:id",
        create=given.create or f"POST {base}",
        update=given.update or f"PUT {base}/:id",
        delete=given.delete or f"DELETE {base}/:id",
    )


def resolve_entity(entity: Entity, default_source: ExternalSource | None = None) -> Entity:
    relations = {
        name: resolve_relation(entity.name, name, relation)
        for name, relation in entity.relations.items()
    }
    source = entity.source or default_source
    if source is not None:
        source = source.model_copy(
            update={"endpoints": resolve_endpoints(entity.name, source)}
        )
    return entity.model_copy(
        update={
            "table_name": table_name(entity.name),
            "relations": relations,
            "source": source,
        }
    )


def resolve_manifest(manifest: Manifest) -> Manifest:
    """Derive every generated name the templates rely on.

    Does not validate: unknown relation targets still get names.
    """
    entities = [resolve_entity(e, manifest.source) for e in manifest.entities]
    return manifest.model_copy(update={"entities": entities})


def compile_manifest(manifest: Manifest) -> Manifest:
    """Merge defaults, then resolve names.  Never rejects input."""
    compiled = resolve_manifest(merge_defaults(manifest))
    logger.info("Compiled manifest with %d entities", len(compiled.entities))
    return compiled
