"""Factory generation for the entity and its data object.

Generates:
- ``<Entity>Factory``: creates a new entity from a data object, assigning
  a fresh UUID when the UUID identifier strategy is configured
- ``<Entity>DataFactory``: builds a data object from submitted form values
"""

from __future__ import annotations

from appgen.parser.models import PropertyDescriptor, SpecificationRecord
from appgen.scaffolder.base import UUID, ArtifactGenerator
from appgen.scaffolder.source import (
    ClassType,
    Method,
    Parameter,
    SourceUnit,
    php_literal,
    unique,
)


class FactoryGenerator(ArtifactGenerator):
    """Generates ``<Entity>Factory``."""

    artifact = "factory"

    def class_name(self, spec: SpecificationRecord, qualified: bool = False) -> str:
        return spec.factory_class(qualified)

    def create(self, spec: SpecificationRecord) -> SourceUnit:
        entity = spec.entity_class()
        if self.config.uses_uuid:
            statement = f"return new {entity}(Uuid::uuid4(), $data);"
        else:
            statement = f"return new {entity}($data);"

        return SourceUnit(
            namespace=spec.namespace,
            uses=unique([UUID if self.config.uses_uuid else None]),
            class_type=ClassType(
                name=spec.factory_class(),
                methods=(
                    Method(
                        name="create",
                        parameters=(Parameter(name="data", type=spec.data_class(qualified=True)),),
                        return_type=spec.entity_class(qualified=True),
                        body=(statement,),
                    ),
                ),
            ),
        )


class DataFactoryGenerator(ArtifactGenerator):
    """Generates ``<Entity>DataFactory`` for form handling."""

    artifact = "data_factory"

    def class_name(self, spec: SpecificationRecord, qualified: bool = False) -> str:
        return spec.data_factory_class(qualified)

    def create(self, spec: SpecificationRecord) -> SourceUnit:
        body = [f"$data = new {spec.data_class()}();"]
        body.extend(
            f"$data->{prop.name} = {_form_value(prop)};" for prop in spec.properties
        )
        body.append("")
        body.append("return $data;")

        return SourceUnit(
            namespace=spec.namespace,
            class_type=ClassType(
                name=spec.data_factory_class(),
                methods=(
                    Method(
                        name="createFromFormArray",
                        parameters=(Parameter(name="formData", type="array"),),
                        return_type=spec.data_class(qualified=True),
                        body=tuple(body),
                    ),
                ),
            ),
        )


def _form_value(prop: PropertyDescriptor) -> str:
    """Expression reading *prop* from ``$formData``, with a fallback for optional keys."""
    expression = f"$formData['{prop.name}']"
    if prop.is_collection:
        return f"{expression} ?? []"
    if prop.default_value is not None:
        return f"{expression} ?? {php_literal(prop.default_value, prop.primitive_type)}"
    if prop.nullable:
        return f"{expression} ?? null"
    return expression
