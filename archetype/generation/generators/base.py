"""Abstract Generator interfaces.

A generator produces the files for one aspect of the output (JSON
snapshot, diagram, hook stubs, ...) from a compiled manifest.  Generators
never touch the filesystem; they only return :class:`GeneratedFile` values.
"""

from __future__ import annotations

import abc
import logging
from concurrent.futures import ThreadPoolExecutor

from archetype.generation.files import GeneratedFile, GenerationOptions
from archetype.models.entity import Entity
from archetype.models.manifest import Manifest

logger = logging.getLogger(__name__)


class Generator(abc.ABC):
    """Base class for all generators."""

    category: str | None = None
    """Output category used for mode filtering; ``None`` always runs."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Unique generator identifier."""

    @property
    def description(self) -> str:
        return ""

    @abc.abstractmethod
    def generate(self, manifest: Manifest, options: GenerationOptions) -> list[GeneratedFile]:
        """Return the files for *manifest*.  Must be deterministic."""


class EntityGenerator(Generator):
    """Generator whose work splits per entity.

    :meth:`generate_entity` runs once per entity, optionally in a thread
    pool; :meth:`merge` then combines the per-entity outputs, always in
    entity declaration order and only after every entity has finished.
    """

    def generate(self, manifest: Manifest, options: GenerationOptions) -> list[GeneratedFile]:
        entities = [e for e in manifest.entities if self.applies_to(e)]
        if options.parallel and len(entities) > 1:
            with ThreadPoolExecutor(max_workers=options.max_workers) as pool:
                # map() yields results in submission order
                per_entity = list(pool.map(lambda e: self.generate_entity(e, manifest), entities))
            logger.debug("%s: generated %d entities in parallel", self.name, len(entities))
        else:
            per_entity = [self.generate_entity(e, manifest) for e in entities]
        return self.merge(manifest, entities, per_entity)

    def applies_to(self, entity: Entity) -> bool:
        return True

    @abc.abstractmethod
    def generate_entity(self, entity: Entity, manifest: Manifest) -> list[GeneratedFile]:
        """Return the files for one entity."""

    def merge(
        self,
        manifest: Manifest,
        entities: list[Entity],
        per_entity: list[list[GeneratedFile]],
    ) -> list[GeneratedFile]:
        """Combine per-entity output; *per_entity* is aligned with *entities*."""
        return [f for files in per_entity for f in files]
