"""Entity generation.

Produces the Doctrine-mapped entity class: identifier, one mapped property
per descriptor in declaration order, selected traits, a constructor that
takes the data object, ``edit()``/``getData()`` when editing is enabled, and
a getter per property.
"""

from __future__ import annotations

from appgen.parser.models import PropertyDescriptor, RelationKind, SpecificationRecord
from appgen.scaffolder.base import (
    ARRAY_COLLECTION,
    COLLECTION,
    ORM_MAPPING,
    ArtifactGenerator,
    foreign_class_types,
)
from appgen.scaffolder.source import (
    ClassType,
    Method,
    Parameter,
    Property,
    SourceUnit,
    unique,
)
from appgen.utils import first_lower, first_upper, pluralize, to_snake_case


class EntityGenerator(ArtifactGenerator):
    """Generates the ``<Entity>`` class."""

    artifact = "entity"

    def class_name(self, spec: SpecificationRecord, qualified: bool = False) -> str:
        return spec.entity_class(qualified)

    def create(self, spec: SpecificationRecord) -> SourceUnit:
        has_collections = any(prop.is_collection for prop in spec.properties)
        data_class = spec.data_class(qualified=True)

        uses = unique([
            ORM_MAPPING,
            *([COLLECTION, ARRAY_COLLECTION] if has_collections else []),
            *foreign_class_types([self.id_type], spec.namespace),
            *foreign_class_types(
                (p.type_hint for p in spec.properties), spec.namespace
            ),
            *spec.trait_classes(),
        ])

        properties = [self._id_property()]
        properties.extend(self._property(spec, prop) for prop in spec.properties)

        methods = [self._constructor(spec)]
        if spec.features.edit:
            methods.append(Method(
                name="edit",
                parameters=(Parameter(name="data", type=data_class),),
                return_type="void",
                body=tuple(self._assignments(spec)),
            ))
            methods.append(self._get_data(spec))

        methods.append(Method(
            name="getId",
            return_type=self.id_type,
            body=("return $this->id;",),
        ))
        for prop in spec.properties:
            methods.append(Method(
                name="get" + first_upper(prop.name),
                return_type=COLLECTION if prop.is_collection else prop.type_hint,
                return_nullable=prop.nullable and not prop.is_collection,
                body=(f"return $this->{prop.name};",),
            ))

        return SourceUnit(
            namespace=spec.namespace,
            uses=uses,
            class_type=ClassType(
                name=spec.entity_class(),
                comments=(
                    "@ORM\\Entity",
                    f'@ORM\\Table(name="{to_snake_case(spec.entity_name)}")',
                ),
                traits=tuple(spec.trait_classes()),
                properties=tuple(properties),
                methods=tuple(methods),
            ),
        )

    # -- Properties --------------------------------------------------------

    def _id_property(self) -> Property:
        if self.config.uses_uuid:
            comments = ("@ORM\\Id", '@ORM\\Column(type="uuid", unique=true)')
        else:
            comments = ("@ORM\\Id", "@ORM\\GeneratedValue", '@ORM\\Column(type="integer")')
        return Property(name="id", type=self.id_type, comments=comments)

    def _property(self, spec: SpecificationRecord, prop: PropertyDescriptor) -> Property:
        if prop.relation is None:
            return Property(
                name=prop.name,
                type=prop.primitive_type,
                nullable=prop.nullable,
                comments=(column_annotation(prop),),
            )
        if prop.is_collection:
            return Property(
                name=prop.name,
                type=COLLECTION,
                comments=(relation_annotation(spec, prop), f"@var Collection|{_short(prop)}[]"),
            )
        return Property(
            name=prop.name,
            type=prop.relation.target_entity,
            nullable=prop.nullable,
            comments=(relation_annotation(spec, prop), join_column_annotation(prop)),
        )

    # -- Methods -----------------------------------------------------------

    def _constructor(self, spec: SpecificationRecord) -> Method:
        parameters: list[Parameter] = []
        body: list[str] = []
        if self.config.uses_uuid:
            parameters.append(self.id_parameter())
            body.append("$this->id = $id;")
        parameters.append(Parameter(name="data", type=spec.data_class(qualified=True)))

        if spec.features.edit:
            body.extend(
                f"$this->{prop.name} = new ArrayCollection();"
                for prop in spec.properties
                if prop.is_collection
            )
            body.append("$this->edit($data);")
        else:
            body.extend(self._assignments(spec))
        return Method(name="__construct", parameters=tuple(parameters), body=tuple(body))

    def _assignments(self, spec: SpecificationRecord) -> list[str]:
        lines = []
        for prop in spec.properties:
            if prop.is_collection:
                lines.append(f"$this->{prop.name} = new ArrayCollection($data->{prop.name});")
            else:
                lines.append(f"$this->{prop.name} = $data->{prop.name};")
        return lines

    def _get_data(self, spec: SpecificationRecord) -> Method:
        data_short = spec.data_class()
        body = [f"$data = new {data_short}();"]
        for prop in spec.properties:
            if prop.is_collection:
                body.append(f"$data->{prop.name} = $this->{prop.name}->toArray();")
            else:
                body.append(f"$data->{prop.name} = $this->{prop.name};")
        body.append("")
        body.append("return $data;")
        return Method(
            name="getData",
            return_type=spec.data_class(qualified=True),
            body=tuple(body),
        )


# ---------------------------------------------------------------------------
# Mapping annotations
# ---------------------------------------------------------------------------

def _bool(value: bool) -> str:
    return "true" if value else "false"


def _short(prop: PropertyDescriptor) -> str:
    return prop.required_relation().target_entity.rsplit("\\", 1)[-1]


def column_annotation(prop: PropertyDescriptor) -> str:
    """``@ORM\\Column(...)`` for a scalar property."""
    args = [f'type="{prop.storage_type}"']
    if prop.modifiers.length is not None:
        args.append(f"length={prop.modifiers.length}")
    if prop.modifiers.precision is not None:
        args.append(f"precision={prop.modifiers.precision}")
    if prop.modifiers.scale is not None:
        args.append(f"scale={prop.modifiers.scale}")
    if prop.modifiers.unique:
        args.append("unique=true")
    if prop.nullable:
        args.append("nullable=true")
    return f"@ORM\\Column({', '.join(args)})"


def relation_annotation(spec: SpecificationRecord, prop: PropertyDescriptor) -> str:
    """``@ORM\\ManyToOne(...)`` and friends.

    One-to-many always names ``mappedBy`` because Doctrine can only map that
    kind from the inverse side.
    """
    relation = prop.required_relation()
    owner = first_lower(spec.entity_name)
    args = [f'targetEntity="{relation.target_entity}"']

    if relation.kind is RelationKind.ONE_TO_MANY:
        args.append(f'mappedBy="{owner}"')
    elif relation.bidirectional:
        inverse = owner if relation.kind is RelationKind.ONE_TO_ONE else pluralize(owner)
        args.append(f'inversedBy="{inverse}"')

    if relation.cascade is not None:
        args.append(f'cascade={{"{relation.cascade.value}"}}')
    return f"@ORM\\{relation.kind.annotation}({', '.join(args)})"


def join_column_annotation(prop: PropertyDescriptor) -> str:
    """``@ORM\\JoinColumn(...)`` for the owning side of a to-one relation."""
    args = [f"nullable={_bool(prop.nullable)}"]
    if prop.required_relation().on_delete_cascade:
        args.append('onDelete="CASCADE"')
    return f"@ORM\\JoinColumn({', '.join(args)})"
