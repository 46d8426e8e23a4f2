"""Tests for the compiler stages: naming, default merging and name resolution."""

from __future__ import annotations

import pytest

from archetype.compiler import (
    column_name,
    compile_manifest,
    is_camel_case,
    is_pascal_case,
    junction_table_name,
    merge_defaults,
    pluralize,
    resolve_endpoints,
    resolve_manifest,
    table_name,
    to_snake_case,
)
from archetype.definition import (
    belongs_to_many,
    define_entity,
    define_manifest,
    external,
    has_many,
    has_one,
    number,
    text,
)
from archetype.models import Manifest


def _blog(**manifest_options) -> Manifest:
    user = define_entity(
        "User",
        fields={"email": text().required()},
        relations={
            "posts": has_many("Post"),
            "followers": belongs_to_many("User"),
        },
    )
    post = define_entity(
        "Post",
        fields={"title": text().required()},
        relations={
            "author": has_one("User"),
            "editor": has_one("User").field("reviewerId"),
            "tags": belongs_to_many("Tag"),
        },
    )
    tag = define_entity(
        "Tag",
        fields={"label": text()},
        relations={"posts": belongs_to_many("Post")},
    )
    return define_manifest(entities=[user, post, tag], **manifest_options)


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------

class TestNaming:

    @pytest.mark.parametrize("name,expected", [
        ("User", "users"),
        ("Category", "categories"),
        ("BlogPost", "blog_posts"),
        ("Address", "addresses"),
        ("Box", "boxes"),
        ("Day", "days"),
    ])
    def test_table_name(self, name, expected):
        assert table_name(name) == expected

    @pytest.mark.parametrize("name,expected", [
        ("firstName", "first_name"),
        ("authorId", "author_id"),
        ("email", "email"),
    ])
    def test_column_name(self, name, expected):
        assert column_name(name) == expected

    def test_to_snake_case_pascal(self):
        assert to_snake_case("OrderItem") == "order_item"

    def test_pluralize(self):
        assert pluralize("product") == "products"
        assert pluralize("company") == "companies"

    def test_case_checks(self):
        assert is_pascal_case("BlogPost")
        assert not is_pascal_case("blogPost")
        assert is_camel_case("firstName")
        assert not is_camel_case("first_name")


# ---------------------------------------------------------------------------
# Default merging
# ---------------------------------------------------------------------------

class TestMergeDefaults:

    def test_idempotent(self):
        manifest = _blog(database={"type": "sqlite", "file": "a.db"})
        assert merge_defaults(merge_defaults(manifest)) == merge_defaults(manifest)

    def test_fills_unset_values(self):
        merged = merge_defaults(Manifest(entities=[define_entity("Tag", fields={"label": text()})]))
        assert merged.auth.enabled is False
        assert merged.observability.logging.level == "info"
        assert merged.observability.telemetry.events == []
        assert merged.entities[0].behaviors.timestamps is True

    def test_explicit_false_kept(self):
        entity = define_entity("Tag", fields={"label": text()}, behaviors={"timestamps": False})
        merged = merge_defaults(Manifest(entities=[entity]))
        assert merged.entities[0].behaviors.timestamps is False

    def test_does_not_share_default_lists(self):
        first = merge_defaults(Manifest())
        second = merge_defaults(Manifest())
        assert first.auth.providers is not second.auth.providers

    def test_input_not_mutated(self):
        raw = Manifest(entities=[define_entity("Tag", fields={"label": text()})])
        merge_defaults(raw)
        assert raw.auth.enabled is None
        assert raw.entities[0].behaviors.timestamps is None


# ---------------------------------------------------------------------------
# Name resolution
# ---------------------------------------------------------------------------

class TestResolveRelations:

    def test_table_names(self):
        compiled = compile_manifest(_blog())
        assert [e.table_name for e in compiled.entities] == ["users", "posts", "tags"]

    def test_has_one_foreign_key_on_declaring_entity(self):
        author = compile_manifest(_blog()).get_entity("Post").relations["author"]
        assert author.foreign_key == "authorId"
        assert author.foreign_key_column == "author_id"

    def test_has_many_foreign_key_on_target(self):
        posts = compile_manifest(_blog()).get_entity("User").relations["posts"]
        assert posts.foreign_key == "userId"
        assert posts.foreign_key_column == "user_id"

    def test_foreign_key_override(self):
        editor = compile_manifest(_blog()).get_entity("Post").relations["editor"]
        assert editor.foreign_key == "reviewerId"
        assert editor.foreign_key_column == "reviewer_id"

    def test_junction_table_shared_by_both_sides(self):
        compiled = compile_manifest(_blog())
        assert compiled.get_entity("Post").relations["tags"].junction_table == "post_tag"
        assert compiled.get_entity("Tag").relations["posts"].junction_table == "post_tag"

    def test_self_referential_junction(self):
        followers = compile_manifest(_blog()).get_entity("User").relations["followers"]
        assert followers.junction_table == "user_followers"

    def test_explicit_pivot_table(self):
        relation = belongs_to_many("Product").through(table="order_items").config
        assert junction_table_name("Order", "products", relation) == "order_items"

    def test_many_to_many_has_no_foreign_key(self):
        tags = compile_manifest(_blog()).get_entity("Post").relations["tags"]
        assert tags.foreign_key is None

    def test_missing_target_still_resolved(self):
        entity = define_entity("Post", fields={"title": text()}, relations={"owner": has_one("Ghost")})
        compiled = compile_manifest(define_manifest(entities=[entity]))
        assert compiled.entities[0].relations["owner"].foreign_key == "ownerId"

    def test_compile_does_not_mutate_input(self):
        manifest = _blog()
        compile_manifest(manifest)
        assert manifest.entities[0].table_name is None
        assert manifest.get_entity("Post").relations["author"].foreign_key is None


class TestResolveEndpoints:

    def test_rest_conventions(self):
        endpoints = resolve_endpoints("Product", external("env:API_URL"))
        assert endpoints.list == "GET /products"
        assert endpoints.get == "GET /products/:id"
        assert endpoints.create == "POST /products"
        assert endpoints.update == "PUT /products/:id"
        assert endpoints.delete == "DELETE /products/:id"

    def test_path_prefix_and_resource_name(self):
        endpoints = resolve_endpoints(
            "Product",
            external("env:API_URL", path_prefix="/v1", resource_name="items"),
        )
        assert endpoints.list == "GET /v1/items"
        assert endpoints.delete == "DELETE /v1/items/:id"

    def test_override_wins(self):
        endpoints = resolve_endpoints(
            "Product",
            external("env:API_URL", override={"list": "GET /catalog/search"}),
        )
        assert endpoints.list == "GET /catalog/search"
        assert endpoints.get == "GET /products/:id"

    def test_manifest_source_is_inherited(self):
        own = define_entity(
            "Order",
            fields={"total": number()},
            source=external("env:ORDERS_API"),
        )
        inherited = define_entity("Product", fields={"title": text()})
        manifest = define_manifest(entities=[own, inherited], source=external("env:SHOP_API"))
        compiled = resolve_manifest(manifest)
        assert compiled.get_entity("Order").source.base_url == "env:ORDERS_API"
        product = compiled.get_entity("Product")
        assert product.source.base_url == "env:SHOP_API"
        assert product.source.endpoints.list == "GET /products"
        assert product.is_external

    def test_database_entities_have_no_source(self):
        compiled = resolve_manifest(_blog())
        assert compiled.get_entity("Tag").source is None
