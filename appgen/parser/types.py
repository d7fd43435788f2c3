"""Type expression parsing.

A property type is written as a short token::

    type-expr := ["?"] base-name [ "|" modifier ] { " " "--" flag }

for example ``?string|31 --unique`` or ``decimal|10,2`` or ``?Author``.
Classification is a total function from token to outcome: the token is a
known primitive (:class:`ScalarType`), the name of another entity
(:class:`RelationCandidate`, resolved through :class:`NamespaceResolver`), or
neither, in which case :class:`InvalidTypeExpression` is raised.  The
namespace search only runs once the primitive lookup has failed.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Optional

from appgen.config import UUID_INTERFACE, AppGenConfig
from appgen.errors import InvalidTypeExpression
from appgen.parser.models import RelationCandidate, ScalarType, TypeModifiers, TypeOutcome
from appgen.utils import class_to_path, short_name


# ---------------------------------------------------------------------------
# Primitive table: keyword -> (PHP type, Doctrine column type)
# ---------------------------------------------------------------------------

PRIMITIVE_TYPES: dict[str, tuple[str, str]] = {
    "string": ("string", "string"),
    "text": ("string", "text"),
    "int": ("int", "integer"),
    "integer": ("int", "integer"),
    "smallint": ("int", "smallint"),
    "bigint": ("int", "bigint"),
    "float": ("float", "float"),
    "decimal": ("string", "decimal"),
    "bool": ("bool", "boolean"),
    "boolean": ("bool", "boolean"),
    "date": ("DateTime", "date"),
    "datetime": ("DateTime", "datetime"),
    "time": ("DateTime", "time"),
    "datetime_immutable": ("DateTimeImmutable", "datetime_immutable"),
    "uuid": (UUID_INTERFACE, "uuid"),
    "array": ("array", "json"),
    "json": ("array", "json"),
}

IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"
_BASE_NAME = re.compile(rf"^\\?{IDENTIFIER}(?:\\{IDENTIFIER})*$")
_LENGTH = re.compile(r"^\d+$")
_PRECISION_SCALE = re.compile(r"^(\d+)\s*,\s*(\d+)$")


# ---------------------------------------------------------------------------
# Namespace resolution
# ---------------------------------------------------------------------------


class NamespaceResolver:
    """Finds the fully-qualified class behind an entity short name.

    A class exists when it is listed in ``known_classes`` or when its source
    file is present under ``app_dir``.  Short names are tried against every
    configured namespace in order, both as ``<ns>\\<Name>`` and as
    ``<ns>\\<Name>\\<Name>`` (one namespace per entity).  A fully-qualified name
    resolves when it exists or lives inside a configured namespace.
    """

    def __init__(
        self,
        namespaces: Iterable[str],
        app_dir: Optional[Path] = None,
        known_classes: Iterable[str] = (),
        extension: str = ".php",
    ) -> None:
        self.namespaces = [ns.strip("\\") for ns in namespaces if ns.strip("\\")]
        self.app_dir = Path(app_dir) if app_dir is not None else None
        self.known_classes = {cls.strip("\\") for cls in known_classes}
        self.extension = extension

    @classmethod
    def from_config(
        cls, config: AppGenConfig, extra_classes: Iterable[str] = ()
    ) -> "NamespaceResolver":
        return cls(
            namespaces=config.model.entity.namespaces,
            app_dir=config.app_dir,
            known_classes=[*config.model.entity.known_classes, *extra_classes],
            extension=config.file_extension,
        )

    def exists(self, fqcn: str) -> bool:
        fqcn = fqcn.strip("\\")
        if fqcn in self.known_classes:
            return True
        if self.app_dir is None:
            return False
        return class_to_path(fqcn, self.app_dir, self.extension).is_file()

    def resolve(self, name: str) -> Optional[str]:
        """Return the fully-qualified class for *name*, or ``None``."""
        name = name.strip("\\")
        if not name:
            return None

        if "\\" in name:
            if self.exists(name):
                return name
            if any(name.startswith(f"{ns}\\") for ns in self.namespaces):
                return name
            return None

        for ns in self.namespaces:
            for candidate in (f"{ns}\\{name}", f"{ns}\\{name}\\{name}"):
                if self.exists(candidate):
                    return candidate

        for known in sorted(self.known_classes):
            if short_name(known) == name:
                return known
        return None


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def split_type_expression(
    token: str, recognized_flags: Iterable[str] = ("unique",)
) -> tuple[bool, str, TypeModifiers]:
    """Split a token into ``(nullable, base_name, modifiers)``.

    Only the grammar is checked here; whether the base name means anything
    is decided by :class:`TypeExpressionParser`.  Flags outside
    *recognized_flags* are dropped silently.
    """
    text = (token or "").strip()
    if not text:
        raise InvalidTypeExpression(token, "empty type")

    head, *words = text.split()
    recognized = set(recognized_flags)
    flags: list[str] = []
    for word in words:
        if not word.startswith("--"):
            raise InvalidTypeExpression(token, f"unexpected {word!r}, flags start with '--'")
        flag = word[2:].lower()
        if flag in recognized and flag not in flags:
            flags.append(flag)

    nullable = head.startswith("?")
    if nullable:
        head = head[1:]

    length = precision = scale = None
    if "|" in head:
        head, modifier = head.split("|", 1)
        modifier = modifier.strip()
        match = _PRECISION_SCALE.match(modifier)
        if _LENGTH.match(modifier):
            length = int(modifier)
        elif match:
            precision, scale = int(match.group(1)), int(match.group(2))
        else:
            raise InvalidTypeExpression(token, f"invalid modifier {modifier!r}")

    if not head:
        raise InvalidTypeExpression(token, "missing base type")
    if not _BASE_NAME.match(head):
        raise InvalidTypeExpression(token, f"{head!r} is not a valid type name")

    return nullable, head, TypeModifiers(
        length=length, precision=precision, scale=scale, flags=tuple(flags)
    )


class TypeExpressionParser:
    """Classifies type tokens into scalar or relation-candidate outcomes."""

    def __init__(
        self,
        resolver: NamespaceResolver,
        recognized_flags: Iterable[str] = ("unique",),
    ) -> None:
        self.resolver = resolver
        self.recognized_flags = tuple(recognized_flags)

    @classmethod
    def from_config(
        cls, config: AppGenConfig, extra_classes: Iterable[str] = ()
    ) -> "TypeExpressionParser":
        return cls(
            NamespaceResolver.from_config(config, extra_classes),
            config.model.recognized_flags,
        )

    def parse(self, token: str) -> TypeOutcome:
        """Classify *token*.

        Returns:
            :class:`ScalarType` for a primitive keyword, otherwise a
            :class:`RelationCandidate` naming the resolved entity class.

        Raises:
            InvalidTypeExpression: malformed token, or a base name that is
                neither a primitive nor a resolvable entity.
        """
        nullable, base, modifiers = split_type_expression(token, self.recognized_flags)

        primitive = PRIMITIVE_TYPES.get(base.lower())
        if primitive is not None:
            primitive_type, storage_type = primitive
            return ScalarType(
                primitive_type=primitive_type,
                storage_type=storage_type,
                nullable=nullable,
                modifiers=modifiers,
            )

        target = self.resolver.resolve(base)
        if target is None:
            raise InvalidTypeExpression(
                token, f"{base!r} is neither a known type nor an entity"
            )
        return RelationCandidate(
            name=short_name(base),
            target_entity=target,
            nullable=nullable,
            modifiers=modifiers,
        )
