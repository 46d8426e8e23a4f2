"""Closed set of diagnostic codes."""

from __future__ import annotations

from enum import Enum


class ValidationCode(str, Enum):
    """Every code a diagnostic can carry."""

    # Input shape (raised as ManifestParseError, before validation)
    INVALID_JSON = "INVALID_JSON"
    MALFORMED_INPUT = "MALFORMED_INPUT"

    # Structural
    INVALID_ENTITY_NAME = "INVALID_ENTITY_NAME"
    DUPLICATE_ENTITY = "DUPLICATE_ENTITY"
    MISSING_ENTITY_FIELDS = "MISSING_ENTITY_FIELDS"
    INVALID_FIELD_NAME = "INVALID_FIELD_NAME"
    DUPLICATE_FIELD = "DUPLICATE_FIELD"
    INVALID_FIELD_TYPE = "INVALID_FIELD_TYPE"

    # Referential
    INVALID_RELATION_TYPE = "INVALID_RELATION_TYPE"
    RELATION_TARGET_NOT_FOUND = "RELATION_TARGET_NOT_FOUND"
    INVALID_PIVOT = "INVALID_PIVOT"
    PIVOT_FIELD_CONFLICT = "PIVOT_FIELD_CONFLICT"
    COMPUTED_SOURCE_NOT_FOUND = "COMPUTED_SOURCE_NOT_FOUND"

    # Configuration
    INVALID_MODE = "INVALID_MODE"
    DATABASE_REQUIRED = "DATABASE_REQUIRED"
    INVALID_DATABASE_TYPE = "INVALID_DATABASE_TYPE"
    SQLITE_REQUIRES_FILE = "SQLITE_REQUIRES_FILE"
    DATABASE_REQUIRES_URL = "DATABASE_REQUIRES_URL"
    AUTH_REQUIRED_FOR_PROTECTED = "AUTH_REQUIRED_FOR_PROTECTED"
    INVALID_PROVIDER = "INVALID_PROVIDER"
    INVALID_SESSION_STRATEGY = "INVALID_SESSION_STRATEGY"
    EXTERNAL_SOURCE_INVALID = "EXTERNAL_SOURCE_INVALID"
    INVALID_I18N = "INVALID_I18N"
    TENANCY_FIELD_REQUIRED = "TENANCY_FIELD_REQUIRED"

    # Type-specific
    INVALID_VALIDATION = "INVALID_VALIDATION"
    ENUM_VALUES_REQUIRED = "ENUM_VALUES_REQUIRED"
    INVALID_DEFAULT = "INVALID_DEFAULT"

    # Warnings
    AUTH_WITHOUT_PROVIDERS = "AUTH_WITHOUT_PROVIDERS"
    DATABASE_UNUSED = "DATABASE_UNUSED"
