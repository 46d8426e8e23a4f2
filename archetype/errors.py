"""Exception hierarchy shared across the compiler pipeline."""

from __future__ import annotations

from typing import Any


class ArchetypeError(Exception):
    """Base class for all archetype errors."""


class ManifestParseError(ArchetypeError):
    """A manifest document could not be turned into the IR.

    Raised before validation for unparsable JSON, non-object documents,
    missing top-level structure, or values of the wrong shape.  Carries
    structured diagnostics so tool callers can report each problem.
    """

    def __init__(self, message: str, diagnostics: list[Any] | None = None) -> None:
        super().__init__(message)
        self.diagnostics = diagnostics or []


class GenerationError(ArchetypeError):
    """A backend or the file writer failed during a generation run."""
