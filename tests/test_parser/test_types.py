"""Tests for type expression parsing (appgen.parser.types).

Covers:
- Primitive classification and storage types
- Nullable marker, length and precision/scale modifiers, flags
- Relation candidates resolved through the namespace resolver
- Every malformed-token failure
"""

from __future__ import annotations

from pathlib import Path

import pytest

from appgen.config import UUID_INTERFACE
from appgen.errors import InvalidTypeExpression
from appgen.parser.models import RelationCandidate, ScalarType, TypeModifiers
from appgen.parser.types import (
    PRIMITIVE_TYPES,
    NamespaceResolver,
    TypeExpressionParser,
    split_type_expression,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# split_type_expression
# ---------------------------------------------------------------------------


class TestSplitTypeExpression:
    def test_full_token(self):
        nullable, base, modifiers = split_type_expression("?string|31 --unique")
        assert nullable is True
        assert base == "string"
        assert modifiers == TypeModifiers(length=31, flags=("unique",))

    def test_precision_and_scale(self):
        _, base, modifiers = split_type_expression("decimal|10,2")
        assert base == "decimal"
        assert (modifiers.precision, modifiers.scale, modifiers.length) == (10, 2, None)

    def test_unrecognized_flag_is_ignored(self):
        _, _, modifiers = split_type_expression("string --indexed --unique --unique")
        assert modifiers.flags == ("unique",)

    def test_custom_recognized_flags(self):
        _, _, modifiers = split_type_expression("string --Indexed", recognized_flags=["indexed"])
        assert modifiers.flags == ("indexed",)
        assert modifiers.unique is False

    def test_fully_qualified_base(self):
        nullable, base, _ = split_type_expression("?\\App\\Model\\Author")
        assert nullable is True
        assert base == "\\App\\Model\\Author"

    @pytest.mark.parametrize(
        "token",
        ["", "   ", "?", "|12", "string|abc", "string|1,", "string unique", "str-ing", "9lives"],
    )
    def test_malformed_tokens(self, token):
        with pytest.raises(InvalidTypeExpression):
            split_type_expression(token)


# ---------------------------------------------------------------------------
# Scalar classification
# ---------------------------------------------------------------------------


class TestScalarTypes:
    @pytest.mark.parametrize("keyword", sorted(PRIMITIVE_TYPES))
    def test_nullable_marker_only_changes_nullability(self, type_parser, keyword):
        plain = type_parser.parse(keyword)
        nullable = type_parser.parse("?" + keyword)
        assert isinstance(plain, ScalarType)
        assert isinstance(nullable, ScalarType)
        assert (plain.primitive_type, plain.storage_type) == (
            nullable.primitive_type,
            nullable.storage_type,
        )
        assert plain.nullable is False
        assert nullable.nullable is True

    def test_unique_string(self, type_parser):
        outcome = type_parser.parse("?string|31 --unique")
        assert outcome == ScalarType(
            primitive_type="string",
            storage_type="string",
            nullable=True,
            modifiers=TypeModifiers(length=31, flags=("unique",)),
        )

    def test_storage_type_can_differ(self, type_parser):
        uuid = type_parser.parse("uuid")
        assert uuid.primitive_type == UUID_INTERFACE
        assert uuid.storage_type == "uuid"

        text = type_parser.parse("text")
        assert (text.primitive_type, text.storage_type) == ("string", "text")

        decimal = type_parser.parse("decimal|10,2")
        assert (decimal.primitive_type, decimal.storage_type) == ("string", "decimal")

    def test_keywords_are_case_insensitive(self, type_parser):
        assert type_parser.parse("DateTime").storage_type == "datetime"
        assert type_parser.parse("Bool").primitive_type == "bool"

    def test_primitive_wins_over_entity_with_same_name(self):
        resolver = NamespaceResolver(["App\\Model"], known_classes=["App\\Model\\Date"])
        outcome = TypeExpressionParser(resolver).parse("date")
        assert isinstance(outcome, ScalarType)


# ---------------------------------------------------------------------------
# Relation candidates
# ---------------------------------------------------------------------------


class TestRelationCandidates:
    def test_short_name_resolves_to_known_class(self, type_parser):
        outcome = type_parser.parse("Author")
        assert outcome == RelationCandidate(name="Author", target_entity="App\\Model\\Author")

    def test_nullable_relation(self, type_parser):
        outcome = type_parser.parse("?Tag")
        assert isinstance(outcome, RelationCandidate)
        assert outcome.nullable is True
        assert outcome.target_entity == "App\\Model\\Tag"

    def test_fully_qualified_name(self, type_parser):
        outcome = type_parser.parse("?App\\Model\\Author")
        assert isinstance(outcome, RelationCandidate)
        assert outcome.name == "Author"
        assert outcome.target_entity == "App\\Model\\Author"

    def test_qualified_name_inside_configured_namespace(self, type_parser):
        outcome = type_parser.parse("\\App\\Model\\Comment\\Comment")
        assert isinstance(outcome, RelationCandidate)
        assert outcome.target_entity == "App\\Model\\Comment\\Comment"

    def test_extra_classes_resolve(self, config):
        parser = TypeExpressionParser.from_config(config, ["App\\Model\\Post\\Post"])
        assert parser.parse("Post").target_entity == "App\\Model\\Post\\Post"

    def test_class_file_on_disk_resolves(self, config, app_dir: Path):
        source = app_dir / "Model" / "Comment" / "Comment.php"
        source.parent.mkdir(parents=True)
        source.write_text("<?php\n", encoding="utf-8")
        parser = TypeExpressionParser.from_config(config)
        assert parser.parse("Comment").target_entity == "App\\Model\\Comment\\Comment"

    @pytest.mark.parametrize("token", ["strng", "Comment", "Vendor\\Thing"])
    def test_unresolvable_name_fails(self, type_parser, token):
        with pytest.raises(InvalidTypeExpression) as exc_info:
            type_parser.parse(token)
        assert exc_info.value.token == token


class TestNamespaceResolver:
    def test_namespaces_tried_in_order(self):
        resolver = NamespaceResolver(
            ["App\\Blog", "App\\Model"],
            known_classes=["App\\Model\\Tag", "App\\Blog\\Tag\\Tag"],
        )
        assert resolver.resolve("Tag") == "App\\Blog\\Tag\\Tag"

    def test_known_class_outside_namespaces(self):
        resolver = NamespaceResolver(["App\\Model"], known_classes=["Acme\\Shared\\Country"])
        assert resolver.resolve("Country") == "Acme\\Shared\\Country"

    def test_empty_name(self):
        assert NamespaceResolver(["App\\Model"]).resolve("\\") is None
