"""Error taxonomy for appgen.

Parsing and assembly errors are raised to the immediate caller as typed
failures.  The interactive wizard catches the recoverable ones and asks the
question again; the CLI turns any ``AppGenError`` into exit status 1.
"""

from __future__ import annotations


class AppGenError(Exception):
    """Base class for every error raised by appgen itself."""


class InvalidTypeExpression(AppGenError):
    """Raised when a type token is neither a primitive nor a resolvable entity."""

    def __init__(self, token: str, reason: str) -> None:
        self.token = token
        self.reason = reason
        super().__init__(f"Invalid type expression {token!r}: {reason}")


class InvalidRelationKind(AppGenError):
    """Raised for a relation token other than 1:1, M:1, 1:M or N:M."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(
            f"Invalid relation kind {token!r} (expected one of 1:1, M:1, 1:M, N:M)"
        )


class UnknownProperty(AppGenError):
    """Raised when a lookup-field list names a property that was never declared."""

    def __init__(self, name: str, lookup: str = "getBy") -> None:
        self.name = name
        self.lookup = lookup
        super().__init__(f'Property "{name}" does not exist ({lookup} lookup)')


class DuplicateProperty(AppGenError):
    """Raised when two properties share a name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Property "{name}" is declared more than once')


class UnknownTrait(AppGenError):
    """Raised when a selected trait is not offered by the configuration."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Trait "{name}" is not configured')


class InvalidDefinition(AppGenError):
    """Raised for a malformed non-interactive model definition."""


class InvalidPropertyName(AppGenError):
    """Raised when a property name is not a PHP identifier or is reserved."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f'Invalid property name "{name}": {reason}')


class InvalidEvent(AppGenError):
    """Raised when an event name cannot become a class name or repeats another."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f'Invalid event "{name}": {reason}')
