"""Diagnostics and the ValidationResult document."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from archetype.validation.codes import ValidationCode


class Diagnostic(BaseModel):
    """One problem found in a manifest."""

    model_config = ConfigDict(frozen=True)

    code: ValidationCode
    path: str
    """Dotted location, e.g. ``Post.relations.author.entity``."""

    message: str
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ValidationResult(BaseModel):
    """Outcome of validating a manifest; ``valid`` is true when no errors were found."""

    errors: list[Diagnostic] = Field(default_factory=list)
    warnings: list[Diagnostic] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def codes(self) -> list[str]:
        """Error codes in report order."""
        return [d.code.value for d in self.errors]

    def to_dict(self) -> dict[str, Any]:
        """Return the diagnostic document ``{valid, errors, warnings}``."""
        return {
            "valid": self.valid,
            "errors": [d.to_dict() for d in self.errors],
            "warnings": [d.to_dict() for d in self.warnings],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def to_markdown(self) -> str:
        """Render a human-readable report."""
        lines: list[str] = []

        lines.append("# Manifest Validation Report")
        lines.append("")
        lines.append(f"**Status:** {'VALID' if self.valid else 'INVALID'}")
        lines.append(
            f"**Summary:** {len(self.errors)} errors, {len(self.warnings)} warnings"
        )
        lines.append("")

        for title, diagnostics in (("Errors", self.errors), ("Warnings", self.warnings)):
            if not diagnostics:
                continue
            lines.append(f"## {title}")
            lines.append("")
            lines.append("| Code | Path | Message | Suggestion |")
            lines.append("|------|------|---------|------------|")
            for d in diagnostics:
                msg = d.message.replace("|", "\\|")
                sug = (d.suggestion or "").replace("|", "\\|")
                lines.append(f"| {d.code.value} | `{d.path}` | {msg} | {sug} |")
            lines.append("")

        if not self.errors and not self.warnings:
            lines.append("No issues found. Manifest passes all validation checks.")
            lines.append("")

        return "\n".join(lines)
