"""Main scaffolding orchestrator.

Takes one :class:`SpecificationRecord` and fans it out to every artifact
generator, renders the resulting source units and hands them to the
:class:`Emitter`.  The record is validated before anything is generated, so
an invalid record produces no files at all.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from appgen.config import AppGenConfig
from appgen.parser.models import SpecificationRecord
from appgen.parser.spec import validate_specification
from appgen.scaffolder.base import ArtifactGenerator
from appgen.scaffolder.data_gen import DataGenerator
from appgen.scaffolder.emitter import Emitter, GeneratedFile
from appgen.scaffolder.entity_gen import EntityGenerator
from appgen.scaffolder.event_gen import EventGenerator
from appgen.scaffolder.exception_gen import NotFoundExceptionGenerator
from appgen.scaffolder.facade_gen import FacadeGenerator
from appgen.scaffolder.factory_gen import DataFactoryGenerator, FactoryGenerator
from appgen.scaffolder.repository_gen import RepositoryGenerator
from appgen.scaffolder.source import SourceUnit
from appgen.scaffolder.templates import TemplateRenderer


class ModelGenerator:
    """Scaffolds the full set of model classes for one entity.

    Artifacts, in emission order: entity, data, factory, repository, facade,
    not-found exception, one event per selected event, and the data factory
    when that feature is enabled.
    """

    def __init__(
        self,
        config: Optional[AppGenConfig] = None,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        self.config = config or AppGenConfig()
        self.renderer = renderer or TemplateRenderer()
        self.emitter = Emitter(self.config)
        self.entity_gen = EntityGenerator(self.config)
        self.data_gen = DataGenerator(self.config)
        self.factory_gen = FactoryGenerator(self.config)
        self.repository_gen = RepositoryGenerator(self.config)
        self.facade_gen = FacadeGenerator(self.config)
        self.exception_gen = NotFoundExceptionGenerator(self.config)
        self.event_gen = EventGenerator(self.config)
        self.data_factory_gen = DataFactoryGenerator(self.config)

    # -- Public API --------------------------------------------------------

    def build_units(self, spec: SpecificationRecord) -> dict[str, SourceUnit]:
        """Return ``{artifact key: source unit}`` in emission order.

        Event keys are ``event:<name>``.

        Raises:
            UnknownProperty / DuplicateProperty: the record is inconsistent.
        """
        validate_specification(spec)

        generators: list[ArtifactGenerator] = [
            self.entity_gen,
            self.data_gen,
            self.factory_gen,
            self.repository_gen,
            self.facade_gen,
            self.exception_gen,
        ]
        units: dict[str, SourceUnit] = {
            generator.artifact: generator.create(spec) for generator in generators
        }
        for event in spec.events:
            units[f"event:{event}"] = self.event_gen.create_event(spec, event)
        if spec.features.data_factory:
            units[self.data_factory_gen.artifact] = self.data_factory_gen.create(spec)
        return units

    def render(self, spec: SpecificationRecord) -> list[GeneratedFile]:
        """Render every artifact without touching the filesystem."""
        return [
            self.emitter.prepare(artifact, unit.fqcn, self.renderer.render_unit(unit))
            for artifact, unit in self.build_units(spec).items()
        ]

    def generate(self, spec: SpecificationRecord) -> list[Path]:
        """Render and write every artifact.

        Returns:
            The paths written, in emission order.
        """
        files = self.render(spec)
        return self.emitter.write(files)
