"""Validator — main entry point for manifest validation.

Usage::

    from archetype.validation import Validator

    v = Validator()
    result = v.validate(manifest)
    if not result.valid:
        print(result.to_markdown())
"""

from __future__ import annotations

import logging

from archetype.compiler.defaults import merge_defaults
from archetype.models.manifest import Manifest
from archetype.validation.codes import ValidationCode
from archetype.validation.report import Diagnostic, ValidationResult
from archetype.validation.rules.base import EntityRule, ValidationRule
from archetype.validation.rules.configuration import ConfigurationRules
from archetype.validation.rules.referential import ReferentialRules
from archetype.validation.rules.structural import StructuralRules
from archetype.validation.rules.types import TypeRules

logger = logging.getLogger(__name__)

WARNING_CODES = frozenset({
    ValidationCode.AUTH_WITHOUT_PROVIDERS,
    ValidationCode.DATABASE_UNUSED,
})


class Validator:
    """Central validation engine with pluggable rule registry.

    Loads default rules on init.  Additional rules can be registered
    via :meth:`add_rule`.  Manifest-level rules run first, in registration
    order; then, for each entity in declaration order, every entity rule.
    """

    def __init__(self) -> None:
        self.rules: list[ValidationRule] = []
        self._load_default_rules()

    def _load_default_rules(self) -> None:
        """Register all built-in rules."""
        self.rules.extend(StructuralRules.all_rules())
        self.rules.extend(ConfigurationRules.all_rules())
        self.rules.extend(ReferentialRules.all_rules())
        self.rules.extend(TypeRules.all_rules())

    def add_rule(self, rule: ValidationRule) -> None:
        """Register an additional validation rule."""
        self.rules.append(rule)

    def validate(self, manifest: Manifest) -> ValidationResult:
        """Validate *manifest* against all registered rules.

        Never stops at the first breach: the result lists every problem
        found.  Exceptions raised by a rule propagate to the caller.

        Parameters
        ----------
        manifest:
            Manifest from either front-end; defaults are merged first.

        Returns
        -------
        ValidationResult
        """
        merged = merge_defaults(manifest)
        manifest_rules = [r for r in self.rules if not isinstance(r, EntityRule)]
        entity_rules = [r for r in self.rules if isinstance(r, EntityRule)]

        found: list[Diagnostic] = []
        for rule in manifest_rules:
            found.extend(rule.check(merged))
        for entity in merged.entities:
            for rule in entity_rules:
                found.extend(rule.check_entity(entity, merged))

        result = ValidationResult(
            errors=[d for d in found if d.code not in WARNING_CODES],
            warnings=[d for d in found if d.code in WARNING_CODES],
        )
        logger.info(
            "Validated manifest: %d errors, %d warnings",
            len(result.errors),
            len(result.warnings),
        )
        return result


def validate_manifest(manifest: Manifest) -> ValidationResult:
    """Validate *manifest* with the built-in rules."""
    return Validator().validate(manifest)
