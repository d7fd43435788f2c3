"""Relation descriptor building.

Turns a resolved target entity plus the answers about the relation (kind
token, bidirectionality, cascade, database-level delete cascade) into a
:class:`RelationDescriptor`.
"""

from __future__ import annotations

from typing import Optional, Union

from appgen.errors import InvalidRelationKind
from appgen.parser.models import Cascade, RelationDescriptor, RelationKind

RELATION_TOKENS: dict[str, RelationKind] = {
    "1:1": RelationKind.ONE_TO_ONE,
    "m:1": RelationKind.MANY_TO_ONE,
    "1:m": RelationKind.ONE_TO_MANY,
    "n:m": RelationKind.MANY_TO_MANY,
}

DEFAULT_RELATION_TOKEN = "M:1"


def parse_relation_kind(token: str) -> RelationKind:
    """Map ``1:1``, ``M:1``, ``1:M`` or ``N:M`` (any case) to a :class:`RelationKind`."""
    kind = RELATION_TOKENS.get((token or "").strip().lower())
    if kind is None:
        raise InvalidRelationKind(token)
    return kind


def parse_cascade(value: Optional[str]) -> Optional[Cascade]:
    """Return the cascade for ``persist``/``remove``/``all``; anything else means none."""
    if value is None:
        return None
    try:
        return Cascade(value.strip().lower())
    except ValueError:
        return None


def build_relation(
    target_entity: str,
    kind: Union[RelationKind, str],
    *,
    bidirectional: bool = False,
    cascade: Union[Cascade, str, None] = None,
    on_delete_cascade: bool = False,
) -> RelationDescriptor:
    """Build the descriptor for a relation to *target_entity*.

    *kind* may be a :class:`RelationKind` or a relation token.  A delete
    cascade requested for a one-to-many or many-to-many relation is dropped:
    that side has no foreign key to cascade from.
    """
    if not isinstance(kind, RelationKind):
        kind = parse_relation_kind(kind)
    if not isinstance(cascade, Cascade):
        cascade = parse_cascade(cascade)

    return RelationDescriptor(
        kind=kind,
        target_entity=target_entity.strip("\\"),
        bidirectional=bidirectional,
        cascade=cascade,
        on_delete_cascade=on_delete_cascade and kind.is_owning,
    )
