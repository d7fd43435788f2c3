"""Data object generation.

``<Entity>Data`` is the mutable transfer object the entity is created from
and edited with: one public typed property per descriptor, scalar defaults
as property defaults, to-one relations typed as the target entity and
to-many relations as arrays.
"""

from __future__ import annotations

from typing import Optional

from appgen.parser.models import PropertyDescriptor, SpecificationRecord
from appgen.scaffolder.base import ArtifactGenerator, foreign_class_types
from appgen.scaffolder.source import (
    ClassType,
    Property,
    SourceUnit,
    Visibility,
    php_literal,
    unique,
)
from appgen.utils import short_name


class DataGenerator(ArtifactGenerator):
    """Generates ``<Entity>Data``."""

    artifact = "data"

    def class_name(self, spec: SpecificationRecord, qualified: bool = False) -> str:
        return spec.data_class(qualified)

    def create(self, spec: SpecificationRecord) -> SourceUnit:
        uses = unique(foreign_class_types(
            (p.type_hint for p in spec.properties), spec.namespace
        ))
        return SourceUnit(
            namespace=spec.namespace,
            uses=uses,
            class_type=ClassType(
                name=spec.data_class(),
                final=True,
                properties=tuple(_data_property(prop) for prop in spec.properties),
            ),
        )


def _data_property(prop: PropertyDescriptor) -> Property:
    if prop.is_collection:
        return Property(
            name=prop.name,
            type="array",
            visibility=Visibility.PUBLIC,
            default="[]",
            comments=(f"@var {short_name(prop.required_relation().target_entity)}[]",),
        )

    default: Optional[str] = None
    if prop.default_value is not None:
        default = php_literal(prop.default_value, prop.primitive_type)
    elif prop.nullable:
        default = "null"

    return Property(
        name=prop.name,
        type=prop.type_hint,
        nullable=prop.nullable,
        visibility=Visibility.PUBLIC,
        default=default,
    )
