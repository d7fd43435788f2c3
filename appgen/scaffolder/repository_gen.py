"""Repository generation.

The repository is the data-access class of the entity.  It exposes:

- ``get($id)`` plus one ``getBy<Field>()`` per single-lookup field, all of
  which raise the entity's not-found exception when nothing matches;
- one ``getAllBy<Field>()`` per multi-lookup field and, when enabled,
  ``getAll()``, which return an empty array instead of failing;
- ``getQueryBuilderForAll()`` and ``getQueryBuilderForDataGrid()``; the
  latter only delegates so it can be overridden by hand later.
"""

from __future__ import annotations

from appgen.parser.models import PropertyDescriptor, SpecificationRecord
from appgen.scaffolder.base import (
    ENTITY_MANAGER,
    OBJECT_REPOSITORY,
    QUERY_BUILDER,
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
from appgen.utils import first_lower, first_upper


class RepositoryGenerator(ArtifactGenerator):
    """Generates ``<Entity>Repository``."""

    artifact = "repository"

    def class_name(self, spec: SpecificationRecord, qualified: bool = False) -> str:
        return spec.repository_class(qualified)

    def create(self, spec: SpecificationRecord) -> SourceUnit:
        entity = spec.entity_class(qualified=True)
        entity_short = spec.entity_class()
        not_found = spec.not_found_exception_class()
        variable = self.entity_variable(spec)

        lookups = [
            self.lookup_parameter(prop)
            for prop in (*spec.single_lookups(), *spec.multi_lookups())
        ]

        uses = unique([
            *foreign_class_types((p.type for p in lookups), spec.namespace),
            ENTITY_MANAGER,
            QUERY_BUILDER,
            *foreign_class_types([self.id_type], spec.namespace),
            spec.not_found_exception_class(qualified=True),
            OBJECT_REPOSITORY,
        ])

        methods: list[Method] = [
            Method(
                name="__construct",
                parameters=(
                    Parameter(
                        name="entityManager",
                        type=ENTITY_MANAGER,
                        promoted=Visibility.PRIVATE,
                    ),
                ),
            ),
            Method(
                name="getRepository",
                visibility=Visibility.PRIVATE,
                return_type=OBJECT_REPOSITORY,
                body=(f"return $this->entityManager->getRepository({entity_short}::class);",),
            ),
            Method(
                name="get",
                parameters=(self.id_parameter(),),
                return_type=entity,
                comments=(f"@throws {not_found}",),
                body=get_by_body(variable, entity_short, not_found, "id", "id"),
            ),
        ]

        for prop in spec.single_lookups():
            methods.append(self._get_by(spec, prop, variable, not_found))

        for prop in spec.multi_lookups():
            methods.append(self._get_all_by(spec, prop))

        if spec.features.get_all:
            methods.append(Method(
                name="getAll",
                return_type="array",
                comments=(f"@return {entity_short}[]",),
                body=("return $this->getQueryBuilderForAll()->getQuery()->execute();",),
            ))

        methods.append(Method(
            name="getQueryBuilderForAll",
            visibility=Visibility.PRIVATE,
            return_type=QUERY_BUILDER,
            body=("return $this->getRepository()->createQueryBuilder('e');",),
        ))
        methods.append(Method(
            name="getQueryBuilderForDataGrid",
            return_type=QUERY_BUILDER,
            body=("return $this->getQueryBuilderForAll();",),
        ))

        return SourceUnit(
            namespace=spec.namespace,
            uses=uses,
            class_type=ClassType(
                name=spec.repository_class(),
                abstract=True,
                methods=tuple(methods),
            ),
        )

    def _get_by(
        self,
        spec: SpecificationRecord,
        prop: PropertyDescriptor,
        variable: str,
        not_found: str,
    ) -> Method:
        param = self.lookup_parameter(prop)
        return Method(
            name="getBy" + first_upper(prop.name),
            parameters=(param,),
            return_type=spec.entity_class(qualified=True),
            comments=(f"@throws {not_found}",),
            body=get_by_body(
                variable, spec.entity_class(), not_found, first_lower(prop.name), param.name
            ),
        )

    def _get_all_by(self, spec: SpecificationRecord, prop: PropertyDescriptor) -> Method:
        param = self.lookup_parameter(prop)
        return Method(
            name="getAllBy" + first_upper(prop.name),
            parameters=(param,),
            return_type="array",
            comments=(f"@return {spec.entity_class()}[]",),
            body=get_all_by_body(first_lower(prop.name), param.name),
        )


def get_by_body(
    variable: str, entity: str, not_found: str, column: str, parameter: str
) -> tuple[str, ...]:
    """Single-result lookup: find one row by *column* or throw *not_found*."""
    return (
        f"/** @var {entity} ${variable} */",
        f"${variable} = $this->getRepository()->findOneBy([",
        f"\t'{column}' => ${parameter},",
        "]);",
        "",
        f"if (${variable} === null) {{",
        f"\tthrow new {not_found}();",
        "}",
        "",
        f"return ${variable};",
    )


def get_all_by_body(column: str, parameter: str) -> tuple[str, ...]:
    """Multi-result lookup: every row matching *column*, possibly none."""
    return (
        "return $this->getRepository()->findBy([",
        f"\t'{column}' => ${parameter},",
        "]);",
    )
