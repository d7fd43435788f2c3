"""Facade generation.

The facade is the write-side entry point for the entity: it creates, edits
and deletes through the factory, repository and entity manager, and
dispatches the ``created``/``updated``/``deleted`` events that were selected.
"""

from __future__ import annotations

from appgen.parser.models import SpecificationRecord
from appgen.scaffolder.base import (
    ENTITY_MANAGER,
    EVENT_DISPATCHER,
    ArtifactGenerator,
    foreign_class_types,
)
from appgen.scaffolder.source import (
    ClassType,
    Method,
    Parameter,
    SourceUnit,
    Visibility,
    unique,
)
from appgen.utils import first_lower

LIFECYCLE_EVENTS = ("created", "updated", "deleted")


class FacadeGenerator(ArtifactGenerator):
    """Generates ``<Entity>Facade``."""

    artifact = "facade"

    def class_name(self, spec: SpecificationRecord, qualified: bool = False) -> str:
        return spec.facade_class(qualified)

    def create(self, spec: SpecificationRecord) -> SourceUnit:
        dispatched = [event for event in LIFECYCLE_EVENTS if event in spec.events]
        needs_lookup = spec.features.edit or spec.features.delete
        repository = first_lower(spec.repository_class())
        factory = first_lower(spec.factory_class())

        uses = unique([
            ENTITY_MANAGER,
            EVENT_DISPATCHER if dispatched else None,
            *(foreign_class_types([self.id_type], spec.namespace) if needs_lookup else []),
            spec.not_found_exception_class(qualified=True) if needs_lookup else None,
            *(spec.event_class(event, qualified=True) for event in dispatched),
        ])

        parameters = [
            Parameter(name="entityManager", type=ENTITY_MANAGER, promoted=Visibility.PRIVATE),
            Parameter(
                name=repository,
                type=spec.repository_class(qualified=True),
                promoted=Visibility.PRIVATE,
            ),
            Parameter(
                name=factory,
                type=spec.factory_class(qualified=True),
                promoted=Visibility.PRIVATE,
            ),
        ]
        if dispatched:
            parameters.append(Parameter(
                name="eventDispatcher", type=EVENT_DISPATCHER, promoted=Visibility.PRIVATE
            ))

        methods = [
            Method(name="__construct", parameters=tuple(parameters)),
            self._create(spec, factory),
        ]
        if spec.features.edit:
            methods.append(self._edit(spec, repository))
        if spec.features.delete:
            methods.append(self._delete(spec, repository))

        return SourceUnit(
            namespace=spec.namespace,
            uses=uses,
            class_type=ClassType(name=spec.facade_class(), methods=tuple(methods)),
        )

    def _dispatch(self, spec: SpecificationRecord, event: str, variable: str) -> list[str]:
        if event not in spec.events:
            return []
        return [f"$this->eventDispatcher->dispatch(new {spec.event_class(event)}(${variable}));"]

    def _create(self, spec: SpecificationRecord, factory: str) -> Method:
        variable = self.entity_variable(spec)
        body = [
            f"${variable} = $this->{factory}->create($data);",
            "",
            f"$this->entityManager->persist(${variable});",
            "$this->entityManager->flush();",
            *self._dispatch(spec, "created", variable),
            "",
            f"return ${variable};",
        ]
        return Method(
            name="create",
            parameters=(Parameter(name="data", type=spec.data_class(qualified=True)),),
            return_type=spec.entity_class(qualified=True),
            body=tuple(body),
        )

    def _edit(self, spec: SpecificationRecord, repository: str) -> Method:
        variable = self.entity_variable(spec)
        body = [
            f"${variable} = $this->{repository}->get($id);",
            f"${variable}->edit($data);",
            "",
            "$this->entityManager->flush();",
            *self._dispatch(spec, "updated", variable),
            "",
            f"return ${variable};",
        ]
        return Method(
            name="edit",
            parameters=(
                self.id_parameter(),
                Parameter(name="data", type=spec.data_class(qualified=True)),
            ),
            return_type=spec.entity_class(qualified=True),
            comments=(f"@throws {spec.not_found_exception_class()}",),
            body=tuple(body),
        )

    def _delete(self, spec: SpecificationRecord, repository: str) -> Method:
        variable = self.entity_variable(spec)
        body = [
            f"${variable} = $this->{repository}->get($id);",
            "",
            f"$this->entityManager->remove(${variable});",
            "$this->entityManager->flush();",
            *self._dispatch(spec, "deleted", variable),
        ]
        return Method(
            name="delete",
            parameters=(self.id_parameter(),),
            return_type="void",
            comments=(f"@throws {spec.not_found_exception_class()}",),
            body=tuple(body),
        )
