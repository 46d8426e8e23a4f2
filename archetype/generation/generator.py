"""CodeGenerator — main entry point for code generation.

Usage::

    from archetype.generation import CodeGenerator, GenerationOptions

    gen = CodeGenerator(options=GenerationOptions(output_dir=Path("generated")))
    result = gen.generate(manifest)
    if not result.success:
        print(result.errors)

The generator validates first and never calls a template for an invalid
manifest.  Files are produced in memory, checked, and only then written
as one all-or-nothing set.
"""

from __future__ import annotations

import logging
from collections import Counter

from archetype.compiler.defaults import merge_defaults
from archetype.compiler.resolver import resolve_manifest
from archetype.config import DEFAULT_TEMPLATE_ID
from archetype.errors import GenerationError
from archetype.generation.files import GeneratedFile, GenerationOptions, GenerationResult
from archetype.generation.registry import get_template
from archetype.generation.template import Template
from archetype.generation.writer import apply_files
from archetype.models.manifest import Manifest
from archetype.validation.validator import Validator

logger = logging.getLogger(__name__)

VALIDATION_FAILED = "VALIDATION_FAILED"
TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
GENERATION_FAILED = "GENERATION_FAILED"


def check_unique_paths(files: list[GeneratedFile]) -> None:
    """Raise :class:`GenerationError` when two files target the same path."""
    counts = Counter(f.path for f in files)
    duplicates = sorted(path for path, count in counts.items() if count > 1)
    if duplicates:
        raise GenerationError(f"Duplicate output paths: {', '.join(duplicates)}")


class CodeGenerator:
    """Validation-gated generation orchestrator.

    Parameters
    ----------
    template:
        Template instance or registered id.  When omitted, the manifest's
        own ``template`` is used, then the default ``ir-snapshot``.
    options:
        Output directory, dry-run and parallelism settings.
    validator:
        Validator used for the gate; a default one is created if omitted.
    """

    def __init__(
        self,
        template: str | Template | None = None,
        options: GenerationOptions | None = None,
        validator: Validator | None = None,
    ) -> None:
        self.template = template
        self.options = options or GenerationOptions()
        self.validator = validator or Validator()

    def _resolve_template(self, manifest: Manifest) -> tuple[str, Template | None]:
        if isinstance(self.template, Template):
            return self.template.metadata.id, self.template
        template_id = self.template or manifest.template or DEFAULT_TEMPLATE_ID
        return template_id, get_template(template_id)

    def generate(self, manifest: Manifest) -> GenerationResult:
        """Validate, compile, generate and write.

        Every failure is reported in the returned result; nothing from a
        failed run is written.
        """
        merged = merge_defaults(manifest)
        diagnostics = self.validator.validate(merged)
        if not diagnostics.valid:
            logger.info("Generation refused: %d validation errors", len(diagnostics.errors))
            return GenerationResult.failure(
                f"Manifest is invalid ({len(diagnostics.errors)} errors); fix them before generating",
                code=VALIDATION_FAILED,
                diagnostics=diagnostics,
            )

        template_id, template = self._resolve_template(merged)
        if template is None:
            return GenerationResult.failure(
                f"Template '{template_id}' not found",
                code=TEMPLATE_NOT_FOUND,
                diagnostics=diagnostics,
                template=template_id,
            )

        compiled = resolve_manifest(merged)
        files: list[GeneratedFile] = []
        try:
            files = template.generate(compiled, self.options)
            check_unique_paths(files)
            report = apply_files(files, self.options.output_dir, dry_run=self.options.dry_run)
        except GenerationError as exc:
            logger.warning("Generation with %s failed: %s", template_id, exc)
            return GenerationResult.failure(
                str(exc),
                code=GENERATION_FAILED,
                diagnostics=diagnostics,
                template=template_id,
                files=files,
            )
        except Exception as exc:
            # A template raised; report it as one failed run
            logger.warning("Template %s raised during generation", template_id, exc_info=True)
            return GenerationResult.failure(
                f"Template '{template_id}' failed: {exc}",
                code=GENERATION_FAILED,
                diagnostics=diagnostics,
                template=template_id,
            )

        logger.info(
            "Generated %d files with %s (%s)",
            len(files),
            template_id,
            "dry run" if self.options.dry_run else self.options.output_dir,
        )
        return GenerationResult(
            success=True,
            files=files,
            written=report.written,
            skipped=report.skipped,
            diagnostics=diagnostics,
            template=template_id,
        )


def generate(
    manifest: Manifest,
    template: str | Template | None = None,
    options: GenerationOptions | None = None,
) -> GenerationResult:
    """Validate *manifest* and run *template* on it."""
    return CodeGenerator(template=template, options=options).generate(manifest)
