"""Tests for relation descriptor building (appgen.parser.relations)."""

from __future__ import annotations

import pytest

from appgen.errors import InvalidRelationKind
from appgen.parser.models import Cascade, RelationDescriptor, RelationKind
from appgen.parser.relations import build_relation, parse_cascade, parse_relation_kind

pytestmark = pytest.mark.unit


class TestParseRelationKind:
    @pytest.mark.parametrize(
        "token, kind",
        [
            ("1:1", RelationKind.ONE_TO_ONE),
            ("M:1", RelationKind.MANY_TO_ONE),
            ("m:1", RelationKind.MANY_TO_ONE),
            ("1:M", RelationKind.ONE_TO_MANY),
            ("n:m", RelationKind.MANY_TO_MANY),
            (" N:M ", RelationKind.MANY_TO_MANY),
        ],
    )
    def test_tokens(self, token, kind):
        assert parse_relation_kind(token) is kind

    @pytest.mark.parametrize("token", ["", "1:N", "M:M", "many-to-one", "2:1"])
    def test_other_tokens_rejected(self, token):
        with pytest.raises(InvalidRelationKind) as exc_info:
            parse_relation_kind(token)
        assert exc_info.value.token == token


class TestParseCascade:
    @pytest.mark.parametrize("value", ["persist", "Remove", " all "])
    def test_known_values(self, value):
        assert parse_cascade(value) is Cascade(value.strip().lower())

    @pytest.mark.parametrize("value", [None, "", "no", "detach"])
    def test_anything_else_means_none(self, value):
        assert parse_cascade(value) is None


class TestRelationKind:
    def test_owning_sides(self):
        assert RelationKind.ONE_TO_ONE.is_owning
        assert RelationKind.MANY_TO_ONE.is_owning
        assert not RelationKind.ONE_TO_MANY.is_owning
        assert not RelationKind.MANY_TO_MANY.is_owning

    def test_annotation_names(self):
        assert RelationKind.MANY_TO_ONE.annotation == "ManyToOne"
        assert RelationKind.ONE_TO_ONE.annotation == "OneToOne"
        assert RelationKind.MANY_TO_MANY.annotation == "ManyToMany"


class TestBuildRelation:
    def test_many_to_one_keeps_delete_cascade(self):
        relation = build_relation(
            "App\\Model\\Author", "M:1", bidirectional=False, cascade=None, on_delete_cascade=True
        )
        assert relation == RelationDescriptor(
            kind=RelationKind.MANY_TO_ONE,
            target_entity="App\\Model\\Author",
            on_delete_cascade=True,
        )

    @pytest.mark.parametrize("token", ["1:M", "N:M"])
    def test_to_many_delete_cascade_coerced_to_false(self, token):
        relation = build_relation("App\\Model\\Tag", token, on_delete_cascade=True)
        assert relation.on_delete_cascade is False

    def test_descriptor_coerces_even_when_built_directly(self):
        relation = RelationDescriptor(
            kind=RelationKind.MANY_TO_MANY,
            target_entity="App\\Model\\Tag",
            on_delete_cascade=True,
        )
        assert relation.on_delete_cascade is False

    def test_cascade_and_direction(self):
        relation = build_relation(
            "\\App\\Model\\Tag", RelationKind.ONE_TO_ONE, bidirectional=True, cascade="all"
        )
        assert relation.target_entity == "App\\Model\\Tag"
        assert relation.bidirectional is True
        assert relation.cascade is Cascade.ALL

    def test_invalid_kind_token(self):
        with pytest.raises(InvalidRelationKind):
            build_relation("App\\Model\\Tag", "1:N")
