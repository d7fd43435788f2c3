"""Structural description of one generated PHP file.

Generators never concatenate source text.  They return a :class:`SourceUnit`
(namespace, ``use`` imports and one class with its members) whose method
bodies are ordered statement lists; :mod:`appgen.scaffolder.templates` turns
it into text.  Types are always written fully qualified here; the renderer
shortens them against the unit's imports.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from appgen.utils import qualify


class Visibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class Parameter(BaseModel):
    """A method parameter; ``promoted`` makes it a constructor-promoted property."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: Optional[str] = None
    nullable: bool = False
    default: Optional[str] = None
    promoted: Optional[Visibility] = None


class Property(BaseModel):
    """A class property; ``default`` is a PHP literal."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: Optional[str] = None
    nullable: bool = False
    visibility: Visibility = Visibility.PRIVATE
    default: Optional[str] = None
    comments: tuple[str, ...] = ()


class Method(BaseModel):
    """A method whose body is an ordered list of statement lines."""

    model_config = ConfigDict(frozen=True)

    name: str
    visibility: Visibility = Visibility.PUBLIC
    static: bool = False
    parameters: tuple[Parameter, ...] = ()
    return_type: Optional[str] = None
    return_nullable: bool = False
    comments: tuple[str, ...] = ()
    body: tuple[str, ...] = ()


class ClassType(BaseModel):
    """The one class declared by a :class:`SourceUnit`."""

    model_config = ConfigDict(frozen=True)

    name: str
    abstract: bool = False
    final: bool = False
    extends: Optional[str] = None
    implements: tuple[str, ...] = ()
    traits: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()
    properties: tuple[Property, ...] = ()
    methods: tuple[Method, ...] = ()

    def method(self, name: str) -> Method:
        """Return the method called *name*; ``KeyError`` if absent."""
        for method in self.methods:
            if method.name == name:
                return method
        raise KeyError(name)

    def method_names(self) -> list[str]:
        return [method.name for method in self.methods]


class SourceUnit(BaseModel):
    """Namespace, imports and the class of one generated file.

    Each ``uses`` entry is a fully-qualified class, optionally aliased as
    ``Doctrine\\ORM\\Mapping as ORM``.
    """

    model_config = ConfigDict(frozen=True)

    namespace: str
    uses: tuple[str, ...] = ()
    class_type: ClassType

    @property
    def fqcn(self) -> str:
        return qualify(self.namespace, self.class_type.name)


# ---------------------------------------------------------------------------
# Helpers shared by generators
# ---------------------------------------------------------------------------

def unique(items: Iterable[Optional[str]]) -> tuple[str, ...]:
    """Drop empty and repeated entries, keeping first-seen order."""
    result: list[str] = []
    for item in items:
        if item and item not in result:
            result.append(item)
    return tuple(result)


_NUMBER = re.compile(r"^-?\d+(\.\d+)?$")


def php_literal(value: str, php_type: Optional[str] = None) -> str:
    """Turn a default value typed by a human into a PHP literal.

    Strings are single-quoted unless already quoted; booleans, numbers and
    ``null`` pass through for the matching types.
    """
    text = value.strip()
    lowered = text.lower()
    if lowered == "null":
        return "null"
    if php_type == "bool" and lowered in ("true", "false", "1", "0", "yes", "no"):
        return "true" if lowered in ("true", "1", "yes") else "false"
    if php_type in ("int", "float") and _NUMBER.match(text):
        return text
    if php_type == "array" and text.startswith("[") and text.endswith("]"):
        return text
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text
    escaped = text.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"
