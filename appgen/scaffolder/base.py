"""Common ground for the artifact generators.

Every generator turns the same :class:`SpecificationRecord` into one
:class:`SourceUnit`.  ``create`` must stay a pure function of the record and
the config: no I/O, no clock, no randomness, so two runs produce equal units.
"""

from __future__ import annotations

from typing import Iterable, Optional

from appgen.config import AppGenConfig
from appgen.parser.models import PropertyDescriptor, SpecificationRecord
from appgen.scaffolder.source import Parameter, SourceUnit
from appgen.utils import first_lower, namespace_of

ENTITY_MANAGER = "Doctrine\\ORM\\EntityManagerInterface"
QUERY_BUILDER = "Doctrine\\ORM\\QueryBuilder"
OBJECT_REPOSITORY = "Doctrine\\Persistence\\ObjectRepository"
ORM_MAPPING = "Doctrine\\ORM\\Mapping as ORM"
COLLECTION = "Doctrine\\Common\\Collections\\Collection"
ARRAY_COLLECTION = "Doctrine\\Common\\Collections\\ArrayCollection"
UUID = "Ramsey\\Uuid\\Uuid"
EVENT_DISPATCHER = "Symfony\\Contracts\\EventDispatcher\\EventDispatcherInterface"

SCALAR_TYPES = frozenset({"string", "int", "float", "bool", "array"})


def is_class_type(type_name: Optional[str]) -> bool:
    """Whether *type_name* names a class and therefore may need a ``use``."""
    return bool(type_name) and type_name not in SCALAR_TYPES


def class_types(types: Iterable[Optional[str]]) -> list[str]:
    return [t for t in types if t is not None and is_class_type(t)]


def foreign_class_types(types: Iterable[Optional[str]], namespace: str) -> list[str]:
    """Class types that live outside *namespace*."""
    return [t for t in class_types(types) if namespace_of(t) != namespace]


class ArtifactGenerator:
    """Base class for the eight artifact generators.

    Subclasses set ``artifact`` (a stable key used in reports and maps) and
    implement :meth:`class_name` and :meth:`create`.
    """

    artifact: str = ""

    def __init__(self, config: AppGenConfig) -> None:
        self.config = config

    def class_name(self, spec: SpecificationRecord, qualified: bool = False) -> str:
        raise NotImplementedError

    def create(self, spec: SpecificationRecord) -> SourceUnit:
        raise NotImplementedError

    # -- Shared derivations ------------------------------------------------

    @property
    def id_type(self) -> str:
        return self.config.id_type_hint

    def id_parameter(self, name: str = "id") -> Parameter:
        return Parameter(name=name, type=self.id_type)

    def entity_variable(self, spec: SpecificationRecord) -> str:
        return first_lower(spec.entity_name)

    def lookup_parameter(self, prop: PropertyDescriptor) -> Parameter:
        """Parameter for a ``getBy``/``getAllBy`` lookup on *prop*.

        Relations are looked up by foreign-key value, so they take an
        identifier named ``<field>Id`` instead of the related entity.
        """
        name = first_lower(prop.name)
        if prop.is_relation:
            return Parameter(name=name + "Id", type=self.id_type)
        return Parameter(name=name, type=prop.primitive_type)
