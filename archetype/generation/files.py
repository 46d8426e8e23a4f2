"""Generated files, generation options and the result of a run."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from archetype.config import DEFAULT_OUTPUT_DIR
from archetype.validation.report import ValidationResult


class GeneratedFile(BaseModel):
    """One output file, produced in memory before anything is written."""

    model_config = ConfigDict(frozen=True)

    path: str
    """Relative path inside the output directory, ``/``-separated."""

    content: str

    scaffold: bool = False
    """Scaffold-once file: written only when absent, never overwritten."""


class GenerationOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    dry_run: bool = False
    """Produce files in memory only; touch nothing on disk."""

    output_dir: Path = DEFAULT_OUTPUT_DIR
    parallel: bool = False
    """Run per-entity generation in a thread pool."""

    max_workers: int | None = None


class GenerationResult(BaseModel):
    """Outcome of one generation run.

    On failure ``files`` may hold what the template produced, but nothing
    from the run has been committed to disk.
    """

    success: bool
    files: list[GeneratedFile] = Field(default_factory=list)
    written: list[str] = Field(default_factory=list)
    """Paths written (or, on a dry run, that would be written)."""

    skipped: list[str] = Field(default_factory=list)
    """Scaffold paths left alone because they already exist."""

    errors: list[str] = Field(default_factory=list)
    code: str | None = None
    """Failure class: VALIDATION_FAILED, TEMPLATE_NOT_FOUND or GENERATION_FAILED."""

    diagnostics: ValidationResult | None = None
    template: str | None = None

    @classmethod
    def failure(
        cls,
        *errors: str,
        code: str,
        diagnostics: ValidationResult | None = None,
        template: str | None = None,
        files: list[GeneratedFile] | None = None,
    ) -> GenerationResult:
        return cls(
            success=False,
            errors=list(errors),
            code=code,
            diagnostics=diagnostics,
            template=template,
            files=files or [],
        )
