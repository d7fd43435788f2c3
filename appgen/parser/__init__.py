"""appgen specification parser.

Classifies property type tokens, builds relation and property descriptors
and assembles the immutable Specification Record that every artifact
generator consumes.

Usage::

    from appgen.config import AppGenConfig
    from appgen.parser import TypeExpressionParser, assemble_specification, build_property

    config = AppGenConfig()
    parser = TypeExpressionParser.from_config(config)
    email = build_property("email", "string|255 --unique", parser.parse("string|255 --unique"))
    spec = assemble_specification(
        "App\\\\Model\\\\User", "User", [email], single_lookup_fields="email", config=config,
    )
"""

from appgen.parser.models import (
    Cascade,
    Features,
    PropertyDescriptor,
    RelationCandidate,
    RelationDescriptor,
    RelationKind,
    ScalarType,
    SpecificationRecord,
    TypeModifiers,
)
from appgen.parser.relations import build_relation, parse_relation_kind
from appgen.parser.spec import assemble_specification, build_property
from appgen.parser.types import NamespaceResolver, TypeExpressionParser
from appgen.parser.definition import load_definition, specification_from_dict

__all__ = [
    "Cascade",
    "Features",
    "PropertyDescriptor",
    "RelationCandidate",
    "RelationDescriptor",
    "RelationKind",
    "ScalarType",
    "SpecificationRecord",
    "TypeModifiers",
    "NamespaceResolver",
    "TypeExpressionParser",
    "assemble_specification",
    "build_property",
    "build_relation",
    "parse_relation_kind",
    "load_definition",
    "specification_from_dict",
]
