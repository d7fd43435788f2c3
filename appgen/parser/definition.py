"""Non-interactive model definitions.

A definition file holds the same answers the interactive command asks for::

    entity: User
    namespace: App\\Model\\User
    properties:
      - name: email
        type: string|255 --unique
      - name: author
        type: ?Author
        relation: {kind: M:1, cascade: persist, on_delete_cascade: true}
    features: {data_factory: true, edit: true, get_all: true, delete: true}
    get_by: [email]
    get_all_by: author
    events: all
    traits: [Timestampable]

``properties`` may also be a mapping of name to type token (or to the
property's mapping).  A relation-typed property without a ``relation``
block gets a many-to-one relation.  ``traits`` omitted selects every
offered trait.  In YAML, quote the one-to-one token (``kind: "1:1"``);
unquoted, PyYAML reads it as a base-60 integer and the relation is rejected.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from appgen.config import AppGenConfig
from appgen.errors import InvalidDefinition
from appgen.parser.models import Features, PropertyDescriptor, RelationCandidate, SpecificationRecord
from appgen.parser.relations import DEFAULT_RELATION_TOKEN, build_relation
from appgen.parser.spec import assemble_specification, build_property
from appgen.parser.types import TypeExpressionParser
from appgen.utils import qualify


def load_definition(path: Path, config: Optional[AppGenConfig] = None) -> SpecificationRecord:
    """Read a YAML or JSON definition file and assemble its record."""
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    try:
        if file_path.suffix.lower() in (".yml", ".yaml"):
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise InvalidDefinition(f"Cannot read definition {file_path}: {exc}") from exc
    return specification_from_dict(data, config)


class RelationBlock(BaseModel):
    """The ``relation`` mapping of a relational property.

    Flags go through pydantic's bool parsing, so ``"false"`` and ``"no"``
    mean false and anything that is not a boolean is rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: str = DEFAULT_RELATION_TOKEN
    bidirectional: bool = False
    cascade: Optional[str] = None
    on_delete_cascade: bool = False

    @field_validator("kind", mode="before")
    @classmethod
    def _kind_is_text(cls, value: Any) -> Any:
        if isinstance(value, int):
            raise ValueError('relation kinds must be quoted in YAML, e.g. "1:1"')
        return value

    @field_validator("cascade", mode="before")
    @classmethod
    def _no_cascade(cls, value: Union[str, bool, None]) -> Optional[str]:
        # YAML reads an unquoted `no` as False.
        if value is False:
            return None
        return value


def _require(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidDefinition(f'Definition needs a non-empty "{key}"')
    return value.strip()


def _property_entries(raw: Any) -> list[dict[str, Any]]:
    if raw is None:
        return []
    if isinstance(raw, dict):
        entries = []
        for name, value in raw.items():
            if isinstance(value, dict):
                entries.append({"name": name, **value})
            else:
                entries.append({"name": name, "type": value})
        return entries
    if isinstance(raw, list) and all(isinstance(item, dict) for item in raw):
        return raw
    raise InvalidDefinition('"properties" must be a list of mappings or a mapping')


def _build_property(entry: dict[str, Any], parser: TypeExpressionParser) -> PropertyDescriptor:
    name = _require(entry, "name")
    token = entry.get("type", "string")
    if not isinstance(token, str):
        raise InvalidDefinition(f'Property "{name}" has a non-string type')

    outcome = parser.parse(token)
    relation_data = entry.get("relation")
    default = entry.get("default")
    if default is not None:
        default = str(default).lower() if isinstance(default, bool) else str(default)

    if not isinstance(outcome, RelationCandidate):
        if relation_data is not None:
            raise InvalidDefinition(f'Property "{name}" is scalar and cannot have a relation')
        return build_property(name, token, outcome, default_value=default)

    if default is not None:
        raise InvalidDefinition(f'Relation "{name}" cannot have a default value')
    if relation_data is None:
        relation_data = {}
    elif not isinstance(relation_data, dict):
        raise InvalidDefinition(f'Relation of "{name}" must be a mapping')
    try:
        block = RelationBlock.model_validate(relation_data)
    except ValidationError as exc:
        raise InvalidDefinition(f'Invalid relation of "{name}": {exc}') from exc

    relation = build_relation(
        outcome.target_entity,
        block.kind,
        bidirectional=block.bidirectional,
        cascade=block.cascade,
        on_delete_cascade=block.on_delete_cascade,
    )
    return build_property(name, token, outcome, relation=relation)


def specification_from_dict(
    data: Any,
    config: Optional[AppGenConfig] = None,
    parser: Optional[TypeExpressionParser] = None,
) -> SpecificationRecord:
    """Assemble a record from already-parsed definition data.

    The entity being defined always resolves as a type, so self-referencing
    relations work before its class file exists.

    Raises:
        InvalidDefinition: the data does not have the expected shape.
        InvalidTypeExpression / InvalidRelationKind: a property is malformed.
        UnknownProperty / DuplicateProperty / UnknownTrait: assembly failed.
    """
    if not isinstance(data, dict):
        raise InvalidDefinition("Definition must be a mapping")
    config = config or AppGenConfig()

    entity = _require(data, "entity")
    namespace = _require(data, "namespace").strip("\\")
    if parser is None:
        parser = TypeExpressionParser.from_config(config, [qualify(namespace, entity)])

    properties = [_build_property(entry, parser) for entry in _property_entries(data.get("properties"))]

    try:
        features = Features.model_validate(data.get("features") or {})
    except ValidationError as exc:
        raise InvalidDefinition(f"Invalid features: {exc}") from exc

    traits = data.get("traits")
    if isinstance(traits, str):
        traits = [traits]

    return assemble_specification(
        namespace,
        entity,
        properties,
        features=features,
        single_lookup_fields=data.get("get_by"),
        multi_lookup_fields=data.get("get_all_by"),
        events=data.get("events"),
        traits=traits,
        config=config,
    )
