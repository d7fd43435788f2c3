"""Specification Record assembly.

Combines already-parsed property descriptors with the feature flags,
lookup-field lists, events and trait selection into one immutable
:class:`SpecificationRecord`.  Every referential check runs here, before any
artifact is generated, so a bad lookup field never yields a partial file set.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence, Union

from appgen.config import AppGenConfig
from appgen.errors import (
    DuplicateProperty,
    InvalidEvent,
    InvalidPropertyName,
    UnknownProperty,
    UnknownTrait,
)
from appgen.parser.models import (
    Features,
    PropertyDescriptor,
    RelationCandidate,
    RelationDescriptor,
    ScalarType,
    SpecificationRecord,
    TypeOutcome,
)
from appgen.parser.types import IDENTIFIER
from appgen.utils import to_pascal

DEFAULT_EVENTS: tuple[str, ...] = ("created", "updated", "deleted")

# Lower-cased names whose getter the entity always generates itself.
RESERVED_PROPERTY_NAMES: dict[str, str] = {
    "id": "getId()",
    "data": "getData()",
}

_IDENTIFIER = re.compile(IDENTIFIER)


# ---------------------------------------------------------------------------
# Input helpers
# ---------------------------------------------------------------------------

def parse_field_list(value: Union[str, Iterable[str], None]) -> list[str]:
    """Split ``"email, slug"`` into ``["email", "slug"]``; lists pass through."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)
    return [item.replace(" ", "") for item in items if item and item.strip()]


def check_property_name(name: str) -> None:
    """Reject names that cannot be a PHP property or would clash with a generated getter.

    Raises:
        InvalidPropertyName: *name* is not an identifier or is reserved.
    """
    if not _IDENTIFIER.fullmatch(name):
        raise InvalidPropertyName(name, "not a valid identifier")
    getter = RESERVED_PROPERTY_NAMES.get(name.lower())
    if getter is not None:
        raise InvalidPropertyName(name, f"reserved, the entity already generates {getter}")


def event_key(event: str) -> str:
    """Case-folded class-name stem of *event*, the identity used for duplicates.

    Raises:
        InvalidEvent: the event does not form a class name.
    """
    stem = to_pascal(event)
    if not _IDENTIFIER.fullmatch(stem):
        raise InvalidEvent(event, "not usable in a class name")
    return stem.lower()


def parse_events(value: Union[str, Iterable[str], None]) -> list[str]:
    """Normalise an event list; ``"all"`` means created, updated and deleted.

    Events that map to the same class (``created``/``Created``,
    ``password_reset``/``password-reset``) are kept once, first spelling wins.

    Raises:
        InvalidEvent: an event does not form a class name.
    """
    if isinstance(value, str) and value.strip().lower() == "all":
        return list(DEFAULT_EVENTS)
    events: list[str] = []
    seen: set[str] = set()
    for event in parse_field_list(value):
        key = event_key(event)
        if key not in seen:
            seen.add(key)
            events.append(event)
    return events


def build_property(
    name: str,
    raw_expression: str,
    outcome: TypeOutcome,
    *,
    relation: Optional[RelationDescriptor] = None,
    default_value: Optional[str] = None,
) -> PropertyDescriptor:
    """Combine a classified type token into a :class:`PropertyDescriptor`.

    A :class:`RelationCandidate` needs its *relation*; a scalar must not have
    one.  Relations never carry a default value.

    Raises:
        InvalidPropertyName: *name* is not an identifier or is reserved.
    """
    check_property_name(name)
    if default_value == "":
        default_value = None

    if isinstance(outcome, ScalarType):
        if relation is not None:
            raise ValueError(f"scalar property {name!r} cannot have a relation")
        return PropertyDescriptor(
            name=name,
            raw_expression=raw_expression,
            primitive_type=outcome.primitive_type,
            storage_type=outcome.storage_type,
            nullable=outcome.nullable,
            modifiers=outcome.modifiers,
            default_value=default_value,
        )

    if isinstance(outcome, RelationCandidate):
        if relation is None:
            raise ValueError(f"relational property {name!r} needs a relation descriptor")
        return PropertyDescriptor(
            name=name,
            raw_expression=raw_expression,
            nullable=outcome.nullable,
            modifiers=outcome.modifiers,
            default_value=default_value,
            relation=relation,
        )

    raise TypeError(f"unsupported type outcome: {outcome!r}")


# ---------------------------------------------------------------------------
# Validation & assembly
# ---------------------------------------------------------------------------

def _check_properties(
    properties: Sequence[PropertyDescriptor],
    single_lookup_fields: Sequence[str],
    multi_lookup_fields: Sequence[str],
) -> None:
    # PHP method names are case-insensitive, so getEmail() and getemail() clash.
    folded: set[str] = set()
    for prop in properties:
        check_property_name(prop.name)
        if prop.name.lower() in folded:
            raise DuplicateProperty(prop.name)
        folded.add(prop.name.lower())

    declared = {prop.name for prop in properties}
    for name in single_lookup_fields:
        if name not in declared:
            raise UnknownProperty(name, "getBy")
    for name in multi_lookup_fields:
        if name not in declared:
            raise UnknownProperty(name, "getAllBy")


def _check_events(events: Sequence[str]) -> None:
    seen: set[str] = set()
    for event in events:
        key = event_key(event)
        if key in seen:
            raise InvalidEvent(event, "maps to the same class as another event")
        seen.add(key)


def validate_specification(spec: SpecificationRecord) -> None:
    """Re-check the referential invariants of an existing record.

    Raises:
        InvalidPropertyName: a property name is not an identifier or is reserved.
        DuplicateProperty: two properties share a name, ignoring case.
        UnknownProperty: a lookup field is not a declared property.
        InvalidEvent: an event is unusable or two events map to one class.
    """
    _check_properties(spec.properties, spec.single_lookup_fields, spec.multi_lookup_fields)
    _check_events(spec.events)


def select_traits(
    config: AppGenConfig, selected: Optional[Iterable[str]] = None
) -> dict[str, str]:
    """Resolve trait names against the configured, non-null default traits.

    ``None`` selects every offered trait.
    """
    offered = config.offered_traits()
    if selected is None:
        return dict(offered)
    traits: dict[str, str] = {}
    for name in selected:
        if name not in offered:
            raise UnknownTrait(name)
        traits[name] = offered[name]
    return traits


def assemble_specification(
    namespace: str,
    entity_name: str,
    properties: Sequence[PropertyDescriptor],
    *,
    features: Optional[Features] = None,
    single_lookup_fields: Union[str, Iterable[str], None] = None,
    multi_lookup_fields: Union[str, Iterable[str], None] = None,
    events: Union[str, Iterable[str], None] = None,
    traits: Optional[Iterable[str]] = None,
    config: Optional[AppGenConfig] = None,
) -> SpecificationRecord:
    """Build the immutable record for one scaffolding run.

    Raises:
        InvalidPropertyName: a property name is not an identifier or is reserved.
        DuplicateProperty: a property name occurs twice, ignoring case.
        UnknownProperty: a ``getBy``/``getAllBy`` field is not declared.
        InvalidEvent: an event does not form a class name.
        UnknownTrait: a selected trait is not configured.
    """
    config = config or AppGenConfig()
    single = parse_field_list(single_lookup_fields)
    multi = parse_field_list(multi_lookup_fields)

    _check_properties(properties, single, multi)

    return SpecificationRecord(
        namespace=namespace.strip().strip("\\"),
        entity_name=entity_name.strip(),
        properties=tuple(properties),
        features=features or Features(),
        single_lookup_fields=tuple(single),
        multi_lookup_fields=tuple(multi),
        events=tuple(parse_events(events)),
        traits=tuple(select_traits(config, traits).items()),
    )
