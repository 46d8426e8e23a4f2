"""Tests for the fluent definition API.

Covers: field and relation builders, external sources, shorthand
normalization, define_entity and define_manifest.
"""

from __future__ import annotations

import pytest

from archetype.config import MODE_DEFAULT_INCLUDES
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
    normalize_behaviors,
    normalize_hooks,
    normalize_mode,
    normalize_protected,
    number,
    text,
)
from archetype.definition.entity import ALL_HOOKS, ALL_PROTECTED, ALL_PUBLIC, WRITE_PROTECTED
from archetype.models import Behaviors, Field, Hooks, Protection


# ---------------------------------------------------------------------------
# Field builders
# ---------------------------------------------------------------------------

class TestFieldBuilders:
    """Builder methods return new builders over immutable configs."""

    def test_builder_defaults(self):
        config = text().config
        assert config.type == "text"
        assert config.required is False
        assert config.unique is False
        assert config.validations == []

    def test_chained_text_field(self):
        config = text().required().unique().email().max(255).config
        assert config.required is True
        assert config.unique is True
        assert [v.type for v in config.validations] == ["email", "maxLength"]
        assert config.get_validation("maxLength").value == 255

    def test_builders_are_immutable(self):
        base = text()
        required = base.required().min(2)
        assert base.config.required is False
        assert base.config.validations == []
        assert required.config.required is True

    def test_optional_after_required(self):
        assert text().required().optional().config.required is False

    def test_text_validations_keep_order(self):
        config = text().trim().lowercase().min(3).regex(r"^[a-z]+$").one_of(["ab", "abc"]).config
        assert [v.type for v in config.validations] == [
            "trim",
            "lowercase",
            "minLength",
            "regex",
            "oneOf",
        ]
        assert config.get_validation("oneOf").value == ["ab", "abc"]

    def test_regex_accepts_compiled_pattern(self):
        import re

        config = text().regex(re.compile(r"\d+")).config
        assert config.get_validation("regex").value == r"\d+"

    def test_number_validations(self):
        config = number().min(0).max(100).integer().positive().config
        assert [v.type for v in config.validations] == ["min", "max", "integer", "positive"]
        assert config.get_validation("min").value == 0

    def test_label_and_default(self):
        config = boolean().default(True).label("Active").config
        assert config.default is True
        assert config.label == "Active"

    def test_date_now_default(self):
        assert date().default("now").config.default == "now"

    def test_enum_field(self):
        config = enum_field("draft", "published").default("draft").config
        assert config.type == "enum"
        assert config.enum_values == ["draft", "published"]
        assert config.default == "draft"

    def test_computed_field(self):
        config = computed(
            type="text",
            source=["firstName", "lastName"],
            get="f'{firstName} {lastName}'",
        ).config
        assert config.is_computed
        assert not config.is_stored
        assert config.return_type == "text"
        assert config.source_fields == ["firstName", "lastName"]


# ---------------------------------------------------------------------------
# Relation builders
# ---------------------------------------------------------------------------

class TestRelationBuilders:

    def test_relation_kinds(self):
        assert has_one("User").config.type == "hasOne"
        assert has_many("Post").config.type == "hasMany"
        assert belongs_to_many("Tag").config.type == "belongsToMany"

    def test_foreign_key_override(self):
        rel = has_one("User").field("writerId")
        assert rel.config.field == "writerId"
        assert rel.config.entity == "User"

    def test_external_flag(self):
        assert has_one("Account").external().config.external is True
        assert has_one("Account").config.external is False

    def test_through_pivot(self):
        rel = belongs_to_many("Product").through(
            table="order_items",
            fields={"quantity": number().required().min(1)},
        )
        pivot = rel.config.pivot
        assert pivot.table == "order_items"
        assert isinstance(pivot.fields["quantity"], Field)
        assert pivot.fields["quantity"].required is True

    def test_resolved_slots_start_empty(self):
        config = has_many("Post").config
        assert config.foreign_key is None
        assert config.junction_table is None


# ---------------------------------------------------------------------------
# External sources
# ---------------------------------------------------------------------------

class TestExternalSource:

    def test_minimal_source(self):
        source = external("env:API_URL")
        assert source.base_url == "env:API_URL"
        assert source.path_prefix == ""
        assert source.endpoints.list is None
        assert source.auth is None

    def test_override_endpoints(self):
        source = external("https://api.example.com", override={"list": "GET /catalog/search"})
        assert source.endpoints.list == "GET /catalog/search"
        assert source.endpoints.get is None

    @pytest.mark.parametrize("auth_type,header", [
        ("bearer", "Authorization"),
        ("api-key", "X-API-Key"),
    ])
    def test_auth_header_defaults(self, auth_type, header):
        source = external("env:API_URL", auth={"type": auth_type})
        assert source.auth.type == auth_type
        assert source.auth.header == header

    def test_explicit_auth_header(self):
        source = external("env:API_URL", auth={"type": "api-key", "header": "X-Token"})
        assert source.auth.header == "X-Token"


# ---------------------------------------------------------------------------
# Shorthand normalization
# ---------------------------------------------------------------------------

class TestNormalizeProtected:

    @pytest.mark.parametrize("option,expected", [
        (None, ALL_PUBLIC),
        (False, ALL_PUBLIC),
        (True, ALL_PROTECTED),
        ("all", ALL_PROTECTED),
        ("write", WRITE_PROTECTED),
    ])
    def test_shorthands(self, option, expected):
        assert normalize_protected(option) == expected

    def test_write_keeps_reads_public(self):
        write = normalize_protected("write")
        assert (write.list, write.get) == (False, False)
        assert (write.create, write.update, write.remove) == (True, True, True)

    def test_mapping_merges_over_public(self):
        result = normalize_protected({"create": True, "remove": True})
        assert result == Protection(create=True, remove=True)

    def test_protection_passes_through(self):
        granular = Protection(update=True)
        assert normalize_protected(granular) is granular

    @pytest.mark.parametrize("option", ["sometimes", {"delete": True}, 3])
    def test_invalid_options(self, option):
        with pytest.raises(ValueError):
            normalize_protected(option)


class TestNormalizeHooks:

    def test_true_enables_all(self):
        assert normalize_hooks(True) == ALL_HOOKS
        assert len(ALL_HOOKS.enabled) == 6

    def test_false_and_none(self):
        assert normalize_hooks(None).enabled == ()
        assert normalize_hooks(False).enabled == ()

    def test_camel_and_snake_keys(self):
        hooks = normalize_hooks({"beforeCreate": True, "after_update": True})
        assert hooks == Hooks(before_create=True, after_update=True)
        assert hooks.enabled == ("before_create", "after_update")

    def test_unknown_hook(self):
        with pytest.raises(ValueError):
            normalize_hooks({"onSave": True})


class TestNormalizeBehaviors:

    def test_unset_stays_none(self):
        assert normalize_behaviors(None) == Behaviors()
        assert normalize_behaviors(None).timestamps is None

    def test_camel_keys(self):
        behaviors = normalize_behaviors({"softDelete": True, "timestamps": False})
        assert behaviors.soft_delete is True
        assert behaviors.timestamps is False
        assert behaviors.audit is None


class TestNormalizeMode:

    def test_none_is_full(self):
        mode = normalize_mode(None)
        assert mode.type == "full"
        assert mode.include is None

    @pytest.mark.parametrize("name", ["headless", "api-only"])
    def test_default_includes(self, name):
        assert normalize_mode(name).include == MODE_DEFAULT_INCLUDES[name]

    def test_explicit_include_kept(self):
        mode = normalize_mode({"type": "headless", "include": ["hooks"]})
        assert mode.include == ["hooks"]

    def test_unknown_mode_kept_for_validator(self):
        assert normalize_mode("serverless").type == "serverless"


# ---------------------------------------------------------------------------
# define_entity / define_manifest
# ---------------------------------------------------------------------------

def _user():
    return define_entity(
        "User",
        fields={
            "email": text().required().unique().email(),
            "name": text().required().min(2).max(100),
            "age": number().optional().min(0).integer(),
        },
        relations={"posts": has_many("Post")},
        behaviors={"softDelete": True},
        protected="write",
        hooks={"beforeCreate": True},
    )


class TestDefineEntity:

    def test_unwraps_builders(self):
        user = _user()
        assert list(user.fields) == ["email", "name", "age"]
        assert isinstance(user.fields["email"], Field)
        assert user.relations["posts"].type == "hasMany"

    def test_normalizes_options(self):
        user = _user()
        assert user.protected == WRITE_PROTECTED
        assert user.hooks.enabled == ("before_create",)
        assert user.behaviors.soft_delete is True
        assert user.behaviors.timestamps is None

    def test_accepts_plain_fields(self):
        entity = define_entity("Tag", fields={"label": Field(type="text", required=True)})
        assert entity.fields["label"].required is True

    def test_entity_is_frozen(self):
        user = _user()
        with pytest.raises(Exception):
            user.name = "Account"


class TestDefineManifest:

    def test_defaults_merged(self):
        manifest = define_manifest(
            entities=[_user()],
            database={"type": "sqlite", "file": "./app.db"},
        )
        assert manifest.mode.type == "full"
        assert manifest.auth.enabled is False
        assert manifest.auth.providers == []
        assert manifest.auth.session_strategy == "jwt"
        assert manifest.i18n.languages == ["en"]
        assert manifest.tenancy.field == "organizationId"
        user = manifest.get_entity("User")
        assert user.behaviors.timestamps is True
        assert user.behaviors.soft_delete is True
        assert user.behaviors.audit is False

    def test_explicit_values_win(self):
        manifest = define_manifest(
            entities=[define_entity("Tag", fields={"label": text()}, behaviors={"timestamps": False})],
            auth={"enabled": True, "providers": ["github"], "sessionStrategy": "database"},
            defaults={"softDelete": True},
        )
        tag = manifest.get_entity("Tag")
        assert tag.behaviors.timestamps is False
        assert tag.behaviors.soft_delete is True
        assert manifest.auth.providers == ["github"]
        assert manifest.auth.session_strategy == "database"

    def test_database_mapping(self):
        manifest = define_manifest(entities=[], database={"type": "postgres", "url": "env:DATABASE_URL"})
        assert manifest.database.type == "postgres"
        assert manifest.database.url == "env:DATABASE_URL"

    def test_mode_shorthand(self):
        manifest = define_manifest(entities=[], mode="api-only")
        assert manifest.mode_type == "api-only"
        assert manifest.mode.include == MODE_DEFAULT_INCLUDES["api-only"]

    def test_define_config_alias(self):
        assert define_config is define_manifest

    def test_entity_order_preserved(self):
        entities = [define_entity(n, fields={"x": text()}) for n in ("Zeta", "Alpha", "Mid")]
        assert define_manifest(entities=entities).entity_names == ["Zeta", "Alpha", "Mid"]
