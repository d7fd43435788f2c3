"""Not-found exception generation."""

from __future__ import annotations

from appgen.parser.models import SpecificationRecord
from appgen.scaffolder.base import ArtifactGenerator
from appgen.scaffolder.source import ClassType, SourceUnit


class NotFoundExceptionGenerator(ArtifactGenerator):
    """Generates ``<Entity>NotFoundException`` in the ``Exception`` sub-namespace.

    The repository throws it from every ``get``/``getBy*`` lookup that finds
    nothing.
    """

    artifact = "not_found_exception"

    def class_name(self, spec: SpecificationRecord, qualified: bool = False) -> str:
        return spec.not_found_exception_class(qualified)

    def create(self, spec: SpecificationRecord) -> SourceUnit:
        base = self.config.model.not_found_base_class.strip("\\")
        return SourceUnit(
            namespace=spec.exception_namespace,
            uses=(base,),
            class_type=ClassType(name=spec.not_found_exception_class(), extends=base),
        )
