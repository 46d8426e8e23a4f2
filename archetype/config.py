"""Global configuration: supported kinds, defaults, constants."""

from pathlib import Path

# Default directory generated files are written to
DEFAULT_OUTPUT_DIR = Path("generated")

# Template used when neither the caller nor the manifest names one
DEFAULT_TEMPLATE_ID = "ir-snapshot"

# Closed sets of kinds understood by the compiler
FIELD_TYPES = ("text", "number", "boolean", "date", "enum", "computed")
COMPUTED_RETURN_TYPES = ("text", "number", "boolean", "date")
RELATION_TYPES = ("hasOne", "hasMany", "belongsToMany")
DATABASE_TYPES = ("sqlite", "postgres", "mysql")
URL_DATABASE_TYPES = ("postgres", "mysql")
AUTH_PROVIDERS = ("credentials", "google", "github", "discord")
SESSION_STRATEGIES = ("jwt", "database")
MODES = ("full", "headless", "api-only")
EXTERNAL_AUTH_TYPES = ("bearer", "api-key")

# Validation kinds, grouped by the field type they are legal on
TEXT_VALIDATIONS = (
    "minLength",
    "maxLength",
    "email",
    "url",
    "regex",
    "oneOf",
    "trim",
    "lowercase",
    "uppercase",
)
NUMBER_VALIDATIONS = ("min", "max", "integer", "positive")

# Output categories a mode may include
OUTPUT_CATEGORIES = ("schema", "validation", "api", "hooks", "services", "i18n")
MODE_DEFAULT_INCLUDES: dict[str, list[str]] = {
    "headless": ["validation", "hooks", "services", "i18n"],
    "api-only": ["validation", "services"],
}
HEADLESS_SKIPPED_CATEGORIES = ("schema",)
API_ONLY_CATEGORIES = ("schema", "validation", "api", "services")

# Columns every stored entity gets implicitly
IMPLICIT_ID_COLUMN = "id"
TIMESTAMP_COLUMNS = ("createdAt", "updatedAt")
SOFT_DELETE_COLUMN = "deletedAt"

# Default external-source auth headers
EXTERNAL_AUTH_HEADERS = {"bearer": "Authorization", "api-key": "X-API-Key"}

# Sub-folder names inside the output directory
IR_DIR = "ir"
DOCS_DIR = "docs"
HOOKS_DIR = "hooks"
