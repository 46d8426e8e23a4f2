"""Cross-cutting configuration rules — mode, database, auth, sources, i18n, tenancy."""

from __future__ import annotations

from archetype.config import (
    AUTH_PROVIDERS,
    DATABASE_TYPES,
    EXTERNAL_AUTH_TYPES,
    MODES,
    OUTPUT_CATEGORIES,
    SESSION_STRATEGIES,
    URL_DATABASE_TYPES,
)
from archetype.models.entity import Entity, ExternalSource
from archetype.models.manifest import Manifest
from archetype.validation.codes import ValidationCode
from archetype.validation.report import Diagnostic
from archetype.validation.rules.base import EntityRule, ValidationRule, diagnostic, one_of


def check_source(source: ExternalSource, path: str) -> list[Diagnostic]:
    """Shared checks for manifest-level and entity-level external sources."""
    issues: list[Diagnostic] = []
    if not source.base_url:
        issues.append(diagnostic(
            ValidationCode.EXTERNAL_SOURCE_INVALID,
            f"{path}.baseUrl",
            "External source requires baseUrl",
            "Add baseUrl, e.g. 'env:API_URL' or 'https://api.example.com'",
        ))
    if source.auth is not None and source.auth.type not in EXTERNAL_AUTH_TYPES:
        issues.append(diagnostic(
            ValidationCode.EXTERNAL_SOURCE_INVALID,
            f"{path}.auth.type",
            f"Invalid external source auth type '{source.auth.type}'",
            one_of(EXTERNAL_AUTH_TYPES),
        ))
    return issues


class ModeCheck(ValidationRule):
    @property
    def name(self) -> str:
        return "configuration.mode"

    @property
    def description(self) -> str:
        return "The generation mode and its output categories are supported."

    def check(self, manifest: Manifest) -> list[Diagnostic]:
        issues: list[Diagnostic] = []
        mode = manifest.mode
        if mode is None:
            return issues
        if mode.type not in MODES:
            issues.append(diagnostic(
                ValidationCode.INVALID_MODE,
                "mode",
                f"Invalid mode '{mode.type}'",
                one_of(MODES),
            ))
        for index, category in enumerate(mode.include or []):
            if category not in OUTPUT_CATEGORIES:
                issues.append(diagnostic(
                    ValidationCode.INVALID_MODE,
                    f"mode.include.{index}",
                    f"Unknown output category '{category}'",
                    one_of(OUTPUT_CATEGORIES),
                ))
        return issues


class DatabaseCheck(ValidationRule):
    """Full mode needs a database; the type decides the connection setting."""

    @property
    def name(self) -> str:
        return "configuration.database"

    @property
    def description(self) -> str:
        return "Database configuration matches the mode and database type."

    def check(self, manifest: Manifest) -> list[Diagnostic]:
        issues: list[Diagnostic] = []
        db = manifest.database
        mode = manifest.mode_type

        if db is None:
            if mode == "full":
                issues.append(diagnostic(
                    ValidationCode.DATABASE_REQUIRED,
                    "database",
                    "Mode 'full' requires database configuration",
                    "Add database config or use mode 'headless'",
                ))
            return issues

        if db.type not in DATABASE_TYPES:
            issues.append(diagnostic(
                ValidationCode.INVALID_DATABASE_TYPE,
                "database.type",
                f"Invalid database type '{db.type}'",
                one_of(DATABASE_TYPES),
            ))
        if db.type == "sqlite" and not db.file:
            issues.append(diagnostic(
                ValidationCode.SQLITE_REQUIRES_FILE,
                "database.file",
                "SQLite database requires file path",
                "Add file: './sqlite.db' to database config",
            ))
        if db.type in URL_DATABASE_TYPES and not db.url:
            issues.append(diagnostic(
                ValidationCode.DATABASE_REQUIRES_URL,
                "database.url",
                f"{db.type} database requires connection URL",
                "Add url: 'env:DATABASE_URL' or a connection string",
            ))
        if mode == "headless":
            issues.append(diagnostic(
                ValidationCode.DATABASE_UNUSED,
                "database",
                "Database configuration is ignored in headless mode",
                "Remove the database config or use mode 'full'",
            ))
        return issues


class AuthCheck(ValidationRule):
    @property
    def name(self) -> str:
        return "configuration.auth"

    @property
    def description(self) -> str:
        return "Auth providers and session strategy are supported."

    def check(self, manifest: Manifest) -> list[Diagnostic]:
        issues: list[Diagnostic] = []
        auth = manifest.auth
        for index, provider in enumerate(auth.providers or []):
            if provider not in AUTH_PROVIDERS:
                issues.append(diagnostic(
                    ValidationCode.INVALID_PROVIDER,
                    f"auth.providers.{index}",
                    f"Invalid auth provider '{provider}'",
                    one_of(AUTH_PROVIDERS),
                ))
        if auth.session_strategy is not None and auth.session_strategy not in SESSION_STRATEGIES:
            issues.append(diagnostic(
                ValidationCode.INVALID_SESSION_STRATEGY,
                "auth.sessionStrategy",
                f"Invalid session strategy '{auth.session_strategy}'",
                one_of(SESSION_STRATEGIES),
            ))
        if auth.enabled and not auth.providers:
            issues.append(diagnostic(
                ValidationCode.AUTH_WITHOUT_PROVIDERS,
                "auth.providers",
                "Auth is enabled but no providers are configured",
                "Add at least one provider, e.g. 'credentials'",
            ))
        return issues


class ManifestSource(ValidationRule):
    @property
    def name(self) -> str:
        return "configuration.manifest_source"

    @property
    def description(self) -> str:
        return "The default external source is complete."

    def check(self, manifest: Manifest) -> list[Diagnostic]:
        if manifest.source is None:
            return []
        return check_source(manifest.source, "source")


class I18nCheck(ValidationRule):
    @property
    def name(self) -> str:
        return "configuration.i18n"

    @property
    def description(self) -> str:
        return "The default language is one of the configured languages."

    def check(self, manifest: Manifest) -> list[Diagnostic]:
        i18n = manifest.i18n
        if not i18n.languages:
            return [diagnostic(
                ValidationCode.INVALID_I18N,
                "i18n.languages",
                "At least one language is required",
                "Add languages, e.g. ['en']",
            )]
        if i18n.default_language not in i18n.languages:
            return [diagnostic(
                ValidationCode.INVALID_I18N,
                "i18n.defaultLanguage",
                f"Default language '{i18n.default_language}' is not among the languages",
                one_of(i18n.languages),
            )]
        return []


class TenancyCheck(ValidationRule):
    @property
    def name(self) -> str:
        return "configuration.tenancy"

    @property
    def description(self) -> str:
        return "Enabled tenancy names the field to filter on."

    def check(self, manifest: Manifest) -> list[Diagnostic]:
        tenancy = manifest.tenancy
        if tenancy.enabled and not tenancy.field:
            return [diagnostic(
                ValidationCode.TENANCY_FIELD_REQUIRED,
                "tenancy.field",
                "Tenancy is enabled but no tenant field is set",
                "Set tenancy field, e.g. 'organizationId'",
            )]
        return []


class ProtectedRequiresAuth(EntityRule):
    @property
    def name(self) -> str:
        return "configuration.protected_requires_auth"

    @property
    def description(self) -> str:
        return "Entities with protected operations require auth to be enabled."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        if not entity.protected.any or manifest.auth.enabled:
            return []
        return [diagnostic(
            ValidationCode.AUTH_REQUIRED_FOR_PROTECTED,
            f"{entity.name}.protected",
            f"Entity '{entity.name}' has protected operations but auth is not enabled",
            "Enable auth in the manifest, or remove protected from the entity",
        )]


class EntitySource(EntityRule):
    @property
    def name(self) -> str:
        return "configuration.entity_source"

    @property
    def description(self) -> str:
        return "An entity's own external source is complete."

    def check_entity(self, entity: Entity, manifest: Manifest) -> list[Diagnostic]:
        if entity.source is None:
            return []
        return check_source(entity.source, f"{entity.name}.source")


class ConfigurationRules:
    """Factory for all configuration rules."""

    @staticmethod
    def all_rules() -> list[ValidationRule]:
        return [
            ModeCheck(),
            DatabaseCheck(),
            AuthCheck(),
            ManifestSource(),
            I18nCheck(),
            TenancyCheck(),
            ProtectedRequiresAuth(),
            EntitySource(),
        ]
