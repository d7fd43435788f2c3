"""Lifecycle event generation.

One class per selected event name, e.g. ``created`` -> ``UserCreatedEvent``
in the ``Event`` sub-namespace.  Each event carries the entity it concerns.
"""

from __future__ import annotations

from appgen.parser.models import SpecificationRecord
from appgen.scaffolder.base import ArtifactGenerator
from appgen.scaffolder.source import (
    ClassType,
    Method,
    Parameter,
    SourceUnit,
    Visibility,
)
from appgen.utils import first_upper


class EventGenerator(ArtifactGenerator):
    """Generates ``<Entity><Event>Event`` classes.

    Unlike the other generators this one is parameterised by the event
    name, so it exposes :meth:`create_event`; :meth:`create` returns the
    unit for the first selected event.
    """

    artifact = "event"

    def class_name(self, spec: SpecificationRecord, qualified: bool = False) -> str:
        return spec.event_class(spec.events[0], qualified)

    def create(self, spec: SpecificationRecord) -> SourceUnit:
        if not spec.events:
            raise ValueError(f"{spec.entity_name} declares no events")
        return self.create_event(spec, spec.events[0])

    def create_event(self, spec: SpecificationRecord, event: str) -> SourceUnit:
        base = self.config.model.event_base_class.strip("\\")
        entity = spec.entity_class(qualified=True)
        variable = self.entity_variable(spec)

        return SourceUnit(
            namespace=spec.event_namespace,
            uses=(entity, base),
            class_type=ClassType(
                name=spec.event_class(event),
                final=True,
                extends=base,
                methods=(
                    Method(
                        name="__construct",
                        parameters=(
                            Parameter(name=variable, type=entity, promoted=Visibility.PRIVATE),
                        ),
                    ),
                    Method(
                        name="get" + first_upper(variable),
                        return_type=entity,
                        body=(f"return $this->{variable};",),
                    ),
                ),
            ),
        )
