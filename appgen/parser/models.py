"""Pydantic v2 models for the appgen specification parser.

Defines the normalised description of one entity to scaffold: the outcome
of classifying a type token, relation and property descriptors, and the
immutable Specification Record every artifact generator consumes.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from appgen.utils import qualify, to_pascal


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class RelationKind(str, Enum):
    """Cardinality of a relation, seen from the entity that declares it."""
    ONE_TO_ONE = "one-to-one"
    MANY_TO_ONE = "many-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"

    @property
    def is_owning(self) -> bool:
        """Whether this side holds the foreign key column."""
        return self in (RelationKind.ONE_TO_ONE, RelationKind.MANY_TO_ONE)

    @property
    def is_to_many(self) -> bool:
        return self in (RelationKind.ONE_TO_MANY, RelationKind.MANY_TO_MANY)

    @property
    def annotation(self) -> str:
        """Doctrine mapping annotation name, e.g. ``ManyToOne``."""
        return "".join(part.capitalize() for part in self.value.split("-"))


class Cascade(str, Enum):
    """ORM-level cascade operations offered for a relation."""
    PERSIST = "persist"
    REMOVE = "remove"
    ALL = "all"


# ---------------------------------------------------------------------------
# Type outcomes
# ---------------------------------------------------------------------------

class TypeModifiers(BaseModel):
    """Length, precision/scale and flags parsed from a type token."""

    model_config = ConfigDict(frozen=True)

    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    flags: tuple[str, ...] = ()

    @property
    def unique(self) -> bool:
        return "unique" in self.flags


class ScalarType(BaseModel):
    """A token resolved to a primitive type and its column mapping."""

    model_config = ConfigDict(frozen=True)

    primitive_type: str
    storage_type: str
    nullable: bool = False
    modifiers: TypeModifiers = Field(default_factory=TypeModifiers)


class RelationCandidate(BaseModel):
    """A token that names another entity; a relation kind is still needed."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Entity name as written in the token")
    target_entity: str = Field(..., description="Resolved fully-qualified class name")
    nullable: bool = False
    modifiers: TypeModifiers = Field(default_factory=TypeModifiers)


TypeOutcome = Union[ScalarType, RelationCandidate]


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

class RelationDescriptor(BaseModel):
    """How a property cross-references another entity.

    ``on_delete_cascade`` only exists for the owning kinds; it is forced to
    ``False`` for one-to-many and many-to-many whatever the caller passed.
    """

    model_config = ConfigDict(frozen=True)

    kind: RelationKind
    target_entity: str
    bidirectional: bool = False
    cascade: Optional[Cascade] = None
    on_delete_cascade: bool = False

    @model_validator(mode="before")
    @classmethod
    def _drop_cascade_delete_without_foreign_key(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        try:
            kind = RelationKind(data.get("kind"))
        except ValueError:
            return data
        if not kind.is_owning and data.get("on_delete_cascade"):
            return {**data, "on_delete_cascade": False}
        return data


class PropertyDescriptor(BaseModel):
    """One entity field: either scalar (``primitive_type``) or relational (``relation``)."""

    model_config = ConfigDict(frozen=True)

    name: str
    raw_expression: str
    primitive_type: Optional[str] = None
    storage_type: Optional[str] = None
    nullable: bool = False
    modifiers: TypeModifiers = Field(default_factory=TypeModifiers)
    default_value: Optional[str] = None
    relation: Optional[RelationDescriptor] = None

    @model_validator(mode="after")
    def _scalar_xor_relation(self) -> "PropertyDescriptor":
        if (self.primitive_type is None) == (self.relation is None):
            raise ValueError(
                f"property {self.name!r} must be either scalar or relational"
            )
        if self.relation is not None and self.default_value is not None:
            raise ValueError(f"relation {self.name!r} cannot carry a default value")
        return self

    @property
    def is_relation(self) -> bool:
        return self.relation is not None

    @property
    def is_collection(self) -> bool:
        return self.relation is not None and self.relation.kind.is_to_many

    @property
    def type_hint(self) -> str:
        """Primitive type, or the target entity class for a relation."""
        if self.relation is not None:
            return self.relation.target_entity
        if self.primitive_type is None:
            raise ValueError(f"property {self.name!r} has neither a type nor a relation")
        return self.primitive_type

    def required_relation(self) -> RelationDescriptor:
        """Return the relation, raising ``ValueError`` for a scalar property."""
        if self.relation is None:
            raise ValueError(f"property {self.name!r} is not a relation")
        return self.relation


class Features(BaseModel):
    """Optional parts of the generated model."""

    model_config = ConfigDict(frozen=True)

    data_factory: bool = True
    edit: bool = True
    get_all: bool = True
    delete: bool = True


# ---------------------------------------------------------------------------
# Specification Record
# ---------------------------------------------------------------------------

class SpecificationRecord(BaseModel):
    """Everything needed to scaffold one entity.

    Built once per run by :func:`appgen.parser.spec.assemble_specification`
    and never mutated; every artifact generator reads the same instance.
    Class-name helpers return the short name by default and the
    fully-qualified name with ``qualified=True``.
    """

    model_config = ConfigDict(frozen=True)

    namespace: str
    entity_name: str
    properties: tuple[PropertyDescriptor, ...] = ()
    features: Features = Field(default_factory=Features)
    single_lookup_fields: tuple[str, ...] = ()
    multi_lookup_fields: tuple[str, ...] = ()
    events: tuple[str, ...] = ()
    traits: tuple[tuple[str, str], ...] = Field(
        default=(), description="(trait name, trait class) pairs in selection order"
    )

    @field_validator("traits", mode="before")
    @classmethod
    def _traits_from_mapping(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return tuple(value.items())
        return value

    # -- Property access ---------------------------------------------------

    def get_property(self, name: str) -> PropertyDescriptor:
        """Return the property called *name*; ``KeyError`` if undeclared."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        raise KeyError(name)

    def property_names(self) -> list[str]:
        return [prop.name for prop in self.properties]

    def trait_names(self) -> list[str]:
        return [name for name, _ in self.traits]

    def trait_classes(self) -> list[str]:
        return [trait for _, trait in self.traits]

    def single_lookups(self) -> list[PropertyDescriptor]:
        return [self.get_property(name) for name in self.single_lookup_fields]

    def multi_lookups(self) -> list[PropertyDescriptor]:
        return [self.get_property(name) for name in self.multi_lookup_fields]

    # -- Derived class names -----------------------------------------------

    @property
    def exception_namespace(self) -> str:
        return qualify(self.namespace, "Exception")

    @property
    def event_namespace(self) -> str:
        return qualify(self.namespace, "Event")

    def _class(self, suffix: str, qualified: bool, namespace: Optional[str] = None) -> str:
        name = f"{self.entity_name}{suffix}"
        if not qualified:
            return name
        return qualify(namespace if namespace is not None else self.namespace, name)

    def entity_class(self, qualified: bool = False) -> str:
        return self._class("", qualified)

    def data_class(self, qualified: bool = False) -> str:
        return self._class("Data", qualified)

    def data_factory_class(self, qualified: bool = False) -> str:
        return self._class("DataFactory", qualified)

    def factory_class(self, qualified: bool = False) -> str:
        return self._class("Factory", qualified)

    def repository_class(self, qualified: bool = False) -> str:
        return self._class("Repository", qualified)

    def facade_class(self, qualified: bool = False) -> str:
        return self._class("Facade", qualified)

    def not_found_exception_class(self, qualified: bool = False) -> str:
        return self._class("NotFoundException", qualified, self.exception_namespace)

    def event_class(self, event: str, qualified: bool = False) -> str:
        return self._class(f"{to_pascal(event)}Event", qualified, self.event_namespace)
