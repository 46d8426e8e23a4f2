"""Tests for manifest validation.

Covers: Validator, structural, referential, configuration and
type-specific rules, warnings, and the diagnostic document.
"""

from __future__ import annotations

import json

import pytest

from archetype.definition import (
    belongs_to_many,
    computed,
    define_entity,
    define_manifest,
    enum_field,
    external,
    has_many,
    has_one,
    number,
    text,
)
from archetype.models import Field, Manifest, Pivot, Relation, Validation
from archetype.validation import ValidationCode, ValidationResult, Validator, validate_manifest
from archetype.validation.report import Diagnostic
from archetype.validation.rules.base import ValidationRule

SQLITE = {"type": "sqlite", "file": "./app.db"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _manifest(*entities, **options) -> Manifest:
    options.setdefault("database", SQLITE)
    return define_manifest(entities=list(entities), **options)


def _user(**overrides):
    options = {"fields": {"email": text().required().unique().email()}}
    options.update(overrides)
    return define_entity("User", **options)


def _codes(result: ValidationResult) -> list[str]:
    return result.codes()


def _errors(result: ValidationResult, code: ValidationCode) -> list[Diagnostic]:
    return [d for d in result.errors if d.code == code]


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

class TestValidator:

    def test_valid_manifest(self):
        post = define_entity(
            "Post",
            fields={"title": text().required().min(3)},
            relations={"author": has_one("User")},
        )
        result = validate_manifest(_manifest(_user(relations={"posts": has_many("Post")}), post))
        assert result.valid
        assert result.errors == []

    def test_user_email_example(self):
        result = validate_manifest(_manifest(_user()))
        assert result.valid

    def test_default_rules_loaded(self):
        names = [rule.name for rule in Validator().rules]
        assert "referential.relation_targets" in names
        assert "configuration.database" in names
        assert len(names) == len(set(names))

    def test_reports_every_problem(self):
        bad = define_entity(
            "post",
            fields={"Title": text(), "status": enum_field()},
            relations={"owner": has_one("Ghost")},
        )
        result = validate_manifest(define_manifest(entities=[bad]))
        codes = set(_codes(result))
        assert {
            "DATABASE_REQUIRED",
            "INVALID_ENTITY_NAME",
            "INVALID_FIELD_NAME",
            "ENUM_VALUES_REQUIRED",
            "RELATION_TARGET_NOT_FOUND",
        } <= codes

    def test_manifest_rules_run_before_entity_rules(self):
        bad = define_entity("post", fields={"title": text()})
        result = validate_manifest(define_manifest(entities=[bad]))
        assert _codes(result)[0] == "DATABASE_REQUIRED"

    def test_custom_rule(self):
        class NoDrafts(ValidationRule):
            @property
            def name(self) -> str:
                return "custom.no_drafts"

            @property
            def description(self) -> str:
                return "No entity named Draft."

            def check(self, manifest):
                if manifest.get_entity("Draft") is None:
                    return []
                return [Diagnostic(
                    code=ValidationCode.INVALID_ENTITY_NAME,
                    path="Draft",
                    message="Drafts are not allowed",
                )]

        validator = Validator()
        validator.add_rule(NoDrafts())
        result = validator.validate(_manifest(define_entity("Draft", fields={"body": text()})))
        assert _codes(result) == ["INVALID_ENTITY_NAME"]

    def test_validates_unmerged_manifest(self):
        raw = Manifest(entities=[_user()], database=None)
        assert "DATABASE_REQUIRED" in _codes(validate_manifest(raw))


# ---------------------------------------------------------------------------
# Structural rules
# ---------------------------------------------------------------------------

class TestStructuralRules:

    def test_invalid_entity_name(self):
        result = validate_manifest(_manifest(define_entity("user", fields={"email": text()})))
        (error,) = _errors(result, ValidationCode.INVALID_ENTITY_NAME)
        assert error.path == "user"
        assert "User" in error.suggestion

    def test_duplicate_entity(self):
        result = validate_manifest(_manifest(_user(), _user()))
        assert len(_errors(result, ValidationCode.DUPLICATE_ENTITY)) == 1

    def test_missing_fields(self):
        result = validate_manifest(_manifest(define_entity("Empty", fields={})))
        (error,) = _errors(result, ValidationCode.MISSING_ENTITY_FIELDS)
        assert error.path == "Empty.fields"

    def test_invalid_field_name(self):
        result = validate_manifest(_manifest(define_entity("User", fields={"first_name": text()})))
        (error,) = _errors(result, ValidationCode.INVALID_FIELD_NAME)
        assert error.path == "User.fields.first_name"

    def test_invalid_field_type(self):
        entity = define_entity("User", fields={"email": Field(type="string")})
        (error,) = _errors(validate_manifest(_manifest(entity)), ValidationCode.INVALID_FIELD_TYPE)
        assert error.path == "User.fields.email.type"

    def test_invalid_computed_return_type(self):
        entity = define_entity(
            "User",
            fields={"email": text(), "shout": computed(type="blob", source=["email"], get="email")},
        )
        (error,) = _errors(validate_manifest(_manifest(entity)), ValidationCode.INVALID_FIELD_TYPE)
        assert error.path == "User.fields.shout.returnType"

    @pytest.mark.parametrize("field_name", ["id", "createdAt", "updatedAt"])
    def test_field_collides_with_implicit_column(self, field_name):
        entity = define_entity("User", fields={"email": text(), field_name: text()})
        (error,) = _errors(validate_manifest(_manifest(entity)), ValidationCode.DUPLICATE_FIELD)
        assert error.path == f"User.fields.{field_name}"

    def test_timestamps_off_frees_columns(self):
        entity = define_entity(
            "User",
            fields={"createdAt": text()},
            behaviors={"timestamps": False},
        )
        assert validate_manifest(_manifest(entity)).valid

    def test_deleted_at_with_soft_delete(self):
        entity = define_entity("User", fields={"deletedAt": text()}, behaviors={"softDelete": True})
        assert _codes(validate_manifest(_manifest(entity))) == ["DUPLICATE_FIELD"]

    def test_has_one_foreign_key_collision(self):
        post = define_entity(
            "Post",
            fields={"authorId": text()},
            relations={"author": has_one("User")},
        )
        result = validate_manifest(_manifest(_user(), post))
        (error,) = _errors(result, ValidationCode.DUPLICATE_FIELD)
        assert error.path == "Post.relations.author"

    def test_computed_fields_have_no_column(self):
        entity = define_entity(
            "User",
            fields={"email": text(), "id": computed(type="text", source=["email"], get="email")},
        )
        assert validate_manifest(_manifest(entity)).valid


# ---------------------------------------------------------------------------
# Referential rules
# ---------------------------------------------------------------------------

class TestReferentialRules:

    def test_missing_relation_target(self):
        post = define_entity(
            "Post",
            fields={"title": text()},
            relations={"author": has_one("Author")},
        )
        result = validate_manifest(_manifest(_user(), post))
        errors = _errors(result, ValidationCode.RELATION_TARGET_NOT_FOUND)
        assert len(errors) == 1
        assert errors[0].path == "Post.relations.author.entity"

    def test_external_relation_skips_check(self):
        post = define_entity(
            "Post",
            fields={"title": text()},
            relations={"account": has_one("Account").external()},
        )
        assert validate_manifest(_manifest(post)).valid

    def test_invalid_relation_type(self):
        post = define_entity(
            "Post",
            fields={"title": text()},
            relations={"author": Relation(type="manyToOne", entity="User")},
        )
        (error,) = _errors(validate_manifest(_manifest(_user(), post)), ValidationCode.INVALID_RELATION_TYPE)
        assert error.path == "Post.relations.author.type"

    def test_pivot_only_on_belongs_to_many(self):
        post = define_entity(
            "Post",
            fields={"title": text()},
            relations={"tags": Relation(type="hasMany", entity="Tag", pivot=Pivot(table="x"))},
        )
        tag = define_entity("Tag", fields={"label": text()})
        (error,) = _errors(validate_manifest(_manifest(post, tag)), ValidationCode.INVALID_PIVOT)
        assert error.path == "Post.relations.tags.pivot"

    def test_pivot_field_conflict(self):
        post = define_entity(
            "Post",
            fields={"title": text()},
            relations={"tags": belongs_to_many("Tag").through(fields={"position": number()})},
        )
        tag = define_entity(
            "Tag",
            fields={"label": text()},
            relations={"posts": belongs_to_many("Post").through(fields={"position": number()})},
        )
        errors = _errors(validate_manifest(_manifest(post, tag)), ValidationCode.PIVOT_FIELD_CONFLICT)
        assert [e.path for e in errors] == ["Tag.relations.posts.pivot.fields.position"]

    def test_pivot_fields_on_one_side(self):
        post = define_entity(
            "Post",
            fields={"title": text()},
            relations={"tags": belongs_to_many("Tag").through(fields={"position": number()})},
        )
        tag = define_entity(
            "Tag",
            fields={"label": text()},
            relations={"posts": belongs_to_many("Post")},
        )
        assert validate_manifest(_manifest(post, tag)).valid

    def test_computed_source_not_found(self):
        entity = define_entity(
            "User",
            fields={
                "firstName": text(),
                "fullName": computed(type="text", source=["firstName", "lastName"], get="..."),
            },
        )
        errors = _errors(validate_manifest(_manifest(entity)), ValidationCode.COMPUTED_SOURCE_NOT_FOUND)
        assert len(errors) == 1
        assert errors[0].path == "User.fields.fullName.from"
        assert "lastName" in errors[0].message


# ---------------------------------------------------------------------------
# Configuration rules
# ---------------------------------------------------------------------------

class TestConfigurationRules:

    def test_database_required_in_full_mode(self):
        result = validate_manifest(define_manifest(entities=[_user()]))
        (error,) = _errors(result, ValidationCode.DATABASE_REQUIRED)
        assert error.path == "database"

    def test_headless_needs_no_database(self):
        assert validate_manifest(define_manifest(entities=[_user()], mode="headless")).valid

    def test_database_unused_warning(self):
        result = validate_manifest(_manifest(_user(), mode="headless"))
        assert result.valid
        assert [w.code for w in result.warnings] == [ValidationCode.DATABASE_UNUSED]

    @pytest.mark.parametrize("database,code,path", [
        ({"type": "oracle"}, "INVALID_DATABASE_TYPE", "database.type"),
        ({"type": "sqlite"}, "SQLITE_REQUIRES_FILE", "database.file"),
        ({"type": "postgres"}, "DATABASE_REQUIRES_URL", "database.url"),
        ({"type": "mysql", "file": "x.db"}, "DATABASE_REQUIRES_URL", "database.url"),
    ])
    def test_database_settings(self, database, code, path):
        result = validate_manifest(_manifest(_user(), database=database))
        assert [(d.code.value, d.path) for d in result.errors] == [(code, path)]

    def test_invalid_mode(self):
        result = validate_manifest(_manifest(_user(), mode="serverless"))
        (error,) = _errors(result, ValidationCode.INVALID_MODE)
        assert error.path == "mode"

    def test_unknown_output_category(self):
        result = validate_manifest(
            define_manifest(entities=[_user()], mode={"type": "headless", "include": ["hooks", "widgets"]})
        )
        (error,) = _errors(result, ValidationCode.INVALID_MODE)
        assert error.path == "mode.include.1"

    def test_protected_requires_auth(self):
        result = validate_manifest(_manifest(_user(protected="write")))
        (error,) = _errors(result, ValidationCode.AUTH_REQUIRED_FOR_PROTECTED)
        assert error.path == "User.protected"

    def test_protected_with_auth(self):
        manifest = _manifest(
            _user(protected=True),
            auth={"enabled": True, "providers": ["credentials"]},
        )
        assert validate_manifest(manifest).valid

    def test_invalid_provider(self):
        result = validate_manifest(_manifest(_user(), auth={"enabled": True, "providers": ["myspace"]}))
        (error,) = _errors(result, ValidationCode.INVALID_PROVIDER)
        assert error.path == "auth.providers.0"

    def test_invalid_session_strategy(self):
        result = validate_manifest(_manifest(_user(), auth={"sessionStrategy": "cookie"}))
        (error,) = _errors(result, ValidationCode.INVALID_SESSION_STRATEGY)
        assert error.path == "auth.sessionStrategy"

    def test_auth_without_providers_warns(self):
        result = validate_manifest(_manifest(_user(), auth={"enabled": True}))
        assert result.valid
        assert [w.code for w in result.warnings] == [ValidationCode.AUTH_WITHOUT_PROVIDERS]

    def test_external_source_requires_base_url(self):
        product = define_entity("Product", fields={"title": text()}, source=external(""))
        (error,) = _errors(validate_manifest(_manifest(product)), ValidationCode.EXTERNAL_SOURCE_INVALID)
        assert error.path == "Product.source.baseUrl"

    def test_external_source_auth_type(self):
        product = define_entity(
            "Product",
            fields={"title": text()},
            source=external("env:API_URL", auth={"type": "oauth"}),
        )
        (error,) = _errors(validate_manifest(_manifest(product)), ValidationCode.EXTERNAL_SOURCE_INVALID)
        assert error.path == "Product.source.auth.type"

    def test_manifest_source_checked(self):
        result = validate_manifest(_manifest(_user(), source=external("")))
        (error,) = _errors(result, ValidationCode.EXTERNAL_SOURCE_INVALID)
        assert error.path == "source.baseUrl"

    def test_i18n_default_language(self):
        result = validate_manifest(_manifest(_user(), i18n={"languages": ["en"], "defaultLanguage": "fr"}))
        (error,) = _errors(result, ValidationCode.INVALID_I18N)
        assert error.path == "i18n.defaultLanguage"

    def test_i18n_needs_languages(self):
        result = validate_manifest(_manifest(_user(), i18n={"languages": []}))
        (error,) = _errors(result, ValidationCode.INVALID_I18N)
        assert error.path == "i18n.languages"

    def test_tenancy_field_required(self):
        result = validate_manifest(_manifest(_user(), tenancy={"enabled": True, "field": ""}))
        (error,) = _errors(result, ValidationCode.TENANCY_FIELD_REQUIRED)
        assert error.path == "tenancy.field"


# ---------------------------------------------------------------------------
# Type-specific rules
# ---------------------------------------------------------------------------

class TestTypeRules:

    def test_text_validation_on_number(self):
        entity = define_entity(
            "User",
            fields={"age": Field(type="number", validations=[Validation(type="email")])},
        )
        (error,) = _errors(validate_manifest(_manifest(entity)), ValidationCode.INVALID_VALIDATION)
        assert error.path == "User.fields.age.validations.0"

    def test_number_validation_on_text(self):
        entity = define_entity(
            "User",
            fields={"name": Field(type="text", validations=[Validation(type="trim"), Validation(type="positive")])},
        )
        (error,) = _errors(validate_manifest(_manifest(entity)), ValidationCode.INVALID_VALIDATION)
        assert error.path == "User.fields.name.validations.1"

    def test_unknown_validation(self):
        entity = define_entity(
            "User",
            fields={"name": Field(type="text", validations=[Validation(type="shout")])},
        )
        assert _codes(validate_manifest(_manifest(entity))) == ["INVALID_VALIDATION"]

    def test_enum_values_required(self):
        entity = define_entity("Post", fields={"status": enum_field()})
        (error,) = _errors(validate_manifest(_manifest(entity)), ValidationCode.ENUM_VALUES_REQUIRED)
        assert error.path == "Post.fields.status.values"

    def test_enum_default_must_be_a_value(self):
        entity = define_entity("Post", fields={"status": enum_field("draft", "live").default("gone")})
        (error,) = _errors(validate_manifest(_manifest(entity)), ValidationCode.INVALID_DEFAULT)
        assert error.path == "Post.fields.status.default"

    def test_valid_enum_default(self):
        entity = define_entity("Post", fields={"status": enum_field("draft", "live").default("draft")})
        assert validate_manifest(_manifest(entity)).valid


class TestPivotFieldRules:

    @staticmethod
    def _tagged(**pivot_fields) -> Manifest:
        post = define_entity(
            "Post",
            fields={"title": text()},
            relations={"tags": belongs_to_many("Tag").through(fields=pivot_fields)},
        )
        tag = define_entity("Tag", fields={"label": text()})
        return _manifest(post, tag)

    def test_invalid_type(self):
        result = validate_manifest(self._tagged(weight=Field(type="bogus")))
        (error,) = _errors(result, ValidationCode.INVALID_FIELD_TYPE)
        assert error.path == "Post.relations.tags.pivot.fields.weight.type"

    def test_validation_kind_checked_against_type(self):
        weight = Field(type="number", validations=[Validation(type="email")])
        result = validate_manifest(self._tagged(weight=weight))
        (error,) = _errors(result, ValidationCode.INVALID_VALIDATION)
        assert error.path == "Post.relations.tags.pivot.fields.weight.validations.0"

    def test_enum_values_required(self):
        result = validate_manifest(self._tagged(role=enum_field()))
        (error,) = _errors(result, ValidationCode.ENUM_VALUES_REQUIRED)
        assert error.path == "Post.relations.tags.pivot.fields.role.values"

    def test_enum_default_must_be_a_value(self):
        result = validate_manifest(self._tagged(role=enum_field("main", "extra").default("other")))
        (error,) = _errors(result, ValidationCode.INVALID_DEFAULT)
        assert error.path == "Post.relations.tags.pivot.fields.role.default"

    def test_valid_pivot_fields(self):
        result = validate_manifest(self._tagged(position=number().integer(), note=text().max(20)))
        assert result.valid

    def test_entity_fields_reported_before_pivot_fields(self):
        post = define_entity(
            "Post",
            fields={"title": Field(type="bogus")},
            relations={"tags": belongs_to_many("Tag").through(fields={"weight": Field(type="bogus")})},
        )
        result = validate_manifest(_manifest(post, define_entity("Tag", fields={"label": text()})))
        assert [e.path for e in result.errors] == [
            "Post.fields.title.type",
            "Post.relations.tags.pivot.fields.weight.type",
        ]


# ---------------------------------------------------------------------------
# Diagnostic document
# ---------------------------------------------------------------------------

class TestValidationResult:

    def test_to_dict_shape(self):
        result = validate_manifest(define_manifest(entities=[_user()]))
        doc = result.to_dict()
        assert doc["valid"] is False
        assert doc["errors"][0] == {
            "code": "DATABASE_REQUIRED",
            "path": "database",
            "message": "Mode 'full' requires database configuration",
            "suggestion": "Add database config or use mode 'headless'",
        }
        assert doc["warnings"] == []

    def test_to_json(self):
        result = validate_manifest(_manifest(_user()))
        assert json.loads(result.to_json()) == {"valid": True, "errors": [], "warnings": []}

    def test_to_markdown(self):
        result = validate_manifest(define_manifest(entities=[_user()]))
        markdown = result.to_markdown()
        assert "**Status:** INVALID" in markdown
        assert "| DATABASE_REQUIRED | `database` |" in markdown

    def test_markdown_for_clean_manifest(self):
        markdown = validate_manifest(_manifest(_user())).to_markdown()
        assert "No issues found" in markdown
