"""Property collection as an explicit state machine.

The interactive command asks for properties one question at a time; the
order of questions depends on how the type answer classifies.  This module
holds that logic without doing any I/O: feed answers to
:meth:`PropertyWizard.answer` and read :attr:`PropertyWizard.question` to know
what to ask next.

States and transitions::

    AWAITING_NAME --name--> AWAITING_TYPE --scalar--> AWAITING_DEFAULT --> AWAITING_NAME
                                          \\--entity--> AWAITING_RELATION_KIND
                                                --> AWAITING_RELATION_OPTIONS (2 or 3 answers)
                                                --> AWAITING_NAME
    AWAITING_NAME --empty--> DONE

A rejected answer raises the typed error and leaves the state unchanged, so
the caller simply asks the same question again.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional

from appgen.errors import DuplicateProperty
from appgen.parser.models import (
    PropertyDescriptor,
    RelationCandidate,
    RelationKind,
    ScalarType,
    TypeOutcome,
)
from appgen.parser.relations import (
    DEFAULT_RELATION_TOKEN,
    build_relation,
    parse_cascade,
    parse_relation_kind,
)
from appgen.parser.spec import build_property, check_property_name
from appgen.parser.types import TypeExpressionParser


class WizardState(str, Enum):
    AWAITING_NAME = "awaiting_name"
    AWAITING_TYPE = "awaiting_type"
    AWAITING_RELATION_KIND = "awaiting_relation_kind"
    AWAITING_RELATION_OPTIONS = "awaiting_relation_options"
    AWAITING_DEFAULT = "awaiting_default"
    DONE = "done"


_QUESTIONS: dict[str, str] = {
    WizardState.AWAITING_NAME.value: "Property Name (empty to finish)",
    WizardState.AWAITING_TYPE.value: 'Type (e.g. "?string|31 --unique")',
    WizardState.AWAITING_RELATION_KIND.value: "Relation Type (1:1/M:1/1:M/N:M)",
    WizardState.AWAITING_DEFAULT.value: "Default Value",
    "bidirectional": "Bidirectional (add mappedBy/inversedBy)?",
    "cascade": "Define Cascade Attributes (persist/remove/all)",
    "on_delete_cascade": "Add Cascade Delete on Database Level?",
}

_DEFAULTS: dict[str, str] = {
    WizardState.AWAITING_NAME.value: "",
    WizardState.AWAITING_TYPE.value: "string",
    WizardState.AWAITING_RELATION_KIND.value: DEFAULT_RELATION_TOKEN,
    WizardState.AWAITING_DEFAULT.value: "",
    "bidirectional": "no",
    "cascade": "no",
    "on_delete_cascade": "no",
}

_YES = frozenset({"y", "yes", "true", "1"})


def parse_yes_no(value: str) -> bool:
    return value.strip().lower() in _YES


class PropertyWizard:
    """Collects :class:`PropertyDescriptor` objects from a stream of answers."""

    def __init__(self, parser: TypeExpressionParser) -> None:
        self.parser = parser
        self.state = WizardState.AWAITING_NAME
        self.properties: list[PropertyDescriptor] = []
        self._reset()

    def _reset(self) -> None:
        self._name: Optional[str] = None
        self._token: Optional[str] = None
        self._outcome: Optional[TypeOutcome] = None
        self._kind: Optional[RelationKind] = None
        self._options: dict[str, str] = {}
        self._pending: list[str] = []

    # -- What to ask -------------------------------------------------------

    @property
    def _step(self) -> str:
        if self.state is WizardState.AWAITING_RELATION_OPTIONS:
            return self._pending[0]
        return self.state.value

    @property
    def done(self) -> bool:
        return self.state is WizardState.DONE

    @property
    def question(self) -> str:
        if self.done:
            return ""
        return _QUESTIONS[self._step]

    @property
    def default(self) -> str:
        if self.done:
            return ""
        return _DEFAULTS[self._step]

    @property
    def is_confirmation(self) -> bool:
        """Whether the current question is a yes/no question."""
        return self.state is WizardState.AWAITING_RELATION_OPTIONS and self._step in (
            "bidirectional",
            "on_delete_cascade",
        )

    # -- Transitions -------------------------------------------------------

    def answer(self, text: Optional[str]) -> WizardState:
        """Consume one answer and return the new state.

        An empty or ``None`` answer means the question's default.

        Raises:
            InvalidPropertyName: the name is not an identifier or is reserved.
            InvalidTypeExpression: the type answer does not classify.
            InvalidRelationKind: the relation answer is not a known token.
            DuplicateProperty: the name was already used.
            RuntimeError: the wizard is already done.
        """
        if self.done:
            raise RuntimeError("property wizard is already done")
        value = (text or "").strip() or self.default

        if self.state is WizardState.AWAITING_NAME:
            self._on_name(value)
        elif self.state is WizardState.AWAITING_TYPE:
            self._on_type(value)
        elif self.state is WizardState.AWAITING_RELATION_KIND:
            self._on_relation_kind(value)
        elif self.state is WizardState.AWAITING_RELATION_OPTIONS:
            self._on_relation_option(value)
        elif self.state is WizardState.AWAITING_DEFAULT:
            self._on_default(value)
        return self.state

    def _on_name(self, value: str) -> None:
        if not value:
            self.state = WizardState.DONE
            return
        check_property_name(value)
        if any(prop.name.lower() == value.lower() for prop in self.properties):
            raise DuplicateProperty(value)
        self._name = value
        self.state = WizardState.AWAITING_TYPE

    def _on_type(self, value: str) -> None:
        outcome = self.parser.parse(value)
        self._token = value
        self._outcome = outcome
        if isinstance(outcome, ScalarType):
            self.state = WizardState.AWAITING_DEFAULT
        else:
            self.state = WizardState.AWAITING_RELATION_KIND

    def _on_relation_kind(self, value: str) -> None:
        self._kind = parse_relation_kind(value)
        self._pending = ["bidirectional", "cascade"]
        if self._kind.is_owning:
            self._pending.append("on_delete_cascade")
        self.state = WizardState.AWAITING_RELATION_OPTIONS

    def _on_relation_option(self, value: str) -> None:
        self._options[self._pending.pop(0)] = value
        if self._pending:
            return

        if not isinstance(self._outcome, RelationCandidate) or self._kind is None:
            raise RuntimeError("relation options answered before type and kind")
        relation = build_relation(
            self._outcome.target_entity,
            self._kind,
            bidirectional=parse_yes_no(self._options["bidirectional"]),
            cascade=parse_cascade(self._options["cascade"]),
            on_delete_cascade=parse_yes_no(self._options.get("on_delete_cascade", "no")),
        )
        self._finish(relation=relation)

    def _on_default(self, value: str) -> None:
        self._finish(default_value=value or None)

    def _finish(self, **kwargs) -> None:
        if self._name is None or self._token is None or self._outcome is None:
            raise RuntimeError("property finished before name and type were given")
        self.properties.append(build_property(self._name, self._token, self._outcome, **kwargs))
        self._reset()
        self.state = WizardState.AWAITING_NAME


def collect_properties(
    parser: TypeExpressionParser, answers: Iterable[Optional[str]]
) -> list[PropertyDescriptor]:
    """Run a wizard over a fixed list of answers.

    Stops at ``DONE`` or when the answers run out; errors propagate.
    """
    wizard = PropertyWizard(parser)
    for answer in answers:
        wizard.answer(answer)
        if wizard.done:
            break
    return wizard.properties
