"""Manifest validation.

Structural, referential, configuration and type-specific rules, all run
in one pass so every problem is reported together.
"""

from archetype.validation.codes import ValidationCode
from archetype.validation.report import Diagnostic, ValidationResult
from archetype.validation.validator import WARNING_CODES, Validator, validate_manifest

__all__ = [
    "Diagnostic",
    "ValidationCode",
    "ValidationResult",
    "Validator",
    "WARNING_CODES",
    "validate_manifest",
]
