"""Template (backend) interface and the generator-list implementation."""

from __future__ import annotations

import abc
import logging

from pydantic import BaseModel, ConfigDict

from archetype.config import API_ONLY_CATEGORIES, HEADLESS_SKIPPED_CATEGORIES
from archetype.generation.files import GeneratedFile, GenerationOptions
from archetype.generation.generators.base import Generator
from archetype.models.manifest import Manifest, ModeConfig

logger = logging.getLogger(__name__)


class TemplateMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    version: str = "0.1.0"


class Template(abc.ABC):
    """A code-generation backend.

    Implementations must be pure: the same compiled manifest and the same
    template version always give byte-identical files, in the same order.
    They never write to disk; the orchestrator does.
    """

    @property
    @abc.abstractmethod
    def metadata(self) -> TemplateMetadata:
        """Identity of this template."""

    @abc.abstractmethod
    def generate(self, manifest: Manifest, options: GenerationOptions) -> list[GeneratedFile]:
        """Produce every output file for a validated, compiled manifest."""


def should_run_generator(generator: Generator, mode: ModeConfig | None) -> bool:
    """Decide whether *generator* is active in *mode*.

    Full mode runs everything.  Headless mode skips schema output and, when
    an include list is given, keeps only the included categories.  API-only
    mode keeps schema, validation, api and services whatever ``include``
    says.  Generators without a category always run.
    """
    category = generator.category
    if mode is None or mode.type == "full" or category is None:
        return True
    if mode.type == "headless":
        if category in HEADLESS_SKIPPED_CATEGORIES:
            return False
        if mode.include is not None:
            return category in mode.include
        return True
    if mode.type == "api-only":
        return category in API_ONLY_CATEGORIES
    return True


class GeneratorTemplate(Template):
    """Template built from an ordered list of generators."""

    def __init__(self, metadata: TemplateMetadata, generators: list[Generator]) -> None:
        self._metadata = metadata
        self.generators = list(generators)

    @property
    def metadata(self) -> TemplateMetadata:
        return self._metadata

    def active_generators(self, manifest: Manifest) -> list[Generator]:
        return [g for g in self.generators if should_run_generator(g, manifest.mode)]

    def generate(self, manifest: Manifest, options: GenerationOptions) -> list[GeneratedFile]:
        files: list[GeneratedFile] = []
        for generator in self.active_generators(manifest):
            produced = generator.generate(manifest, options)
            logger.debug("Generator %s produced %d files", generator.name, len(produced))
            files.extend(produced)
        return files
