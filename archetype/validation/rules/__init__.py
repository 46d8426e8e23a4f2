"""Built-in validation rules."""

from archetype.validation.rules.base import EntityRule, ValidationRule
from archetype.validation.rules.configuration import ConfigurationRules
from archetype.validation.rules.referential import ReferentialRules
from archetype.validation.rules.structural import StructuralRules
from archetype.validation.rules.types import TypeRules

__all__ = [
    "ConfigurationRules",
    "EntityRule",
    "ReferentialRules",
    "StructuralRules",
    "TypeRules",
    "ValidationRule",
]
