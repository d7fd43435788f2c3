"""Shared pytest fixtures for the appgen test suite.

Provides reusable fixtures for:
- A temporary application directory and configs pointing at it
- A type expression parser that knows the ``Author`` and ``Tag`` entities
- Pre-assembled Specification Records for the User and Post entities
"""

from __future__ import annotations

from pathlib import Path

import pytest

from appgen.config import AppGenConfig, EntityConfig, ModelConfig
from appgen.parser.models import Features, SpecificationRecord
from appgen.parser.relations import build_relation
from appgen.parser.spec import assemble_specification, build_property
from appgen.parser.types import TypeExpressionParser

KNOWN_CLASSES = ["App\\Model\\Author", "App\\Model\\Tag"]


# ---------------------------------------------------------------------------
# Paths & Config
# ---------------------------------------------------------------------------

@pytest.fixture
def app_dir(tmp_path: Path) -> Path:
    """Application root the generated files are written to (not created yet)."""
    return tmp_path / "app"


@pytest.fixture
def config(app_dir: Path) -> AppGenConfig:
    """UUID identifiers, default traits, Author and Tag resolvable."""
    return AppGenConfig(
        app_dir=app_dir,
        model=ModelConfig(entity=EntityConfig(known_classes=KNOWN_CLASSES)),
    )


@pytest.fixture
def int_config(app_dir: Path) -> AppGenConfig:
    """Integer identifiers instead of UUIDs."""
    return AppGenConfig(
        app_dir=app_dir,
        model=ModelConfig(entity=EntityConfig(id_type="int", known_classes=KNOWN_CLASSES)),
    )


@pytest.fixture
def type_parser(config: AppGenConfig) -> TypeExpressionParser:
    return TypeExpressionParser.from_config(config)


# ---------------------------------------------------------------------------
# Specification Records
# ---------------------------------------------------------------------------

@pytest.fixture
def user_spec(config: AppGenConfig, type_parser: TypeExpressionParser) -> SpecificationRecord:
    """``User`` with a unique ``email`` and a ``getByEmail`` lookup."""
    email = build_property("email", "string --unique", type_parser.parse("string --unique"))
    return assemble_specification(
        "App\\Model",
        "User",
        [email],
        features=Features(),
        single_lookup_fields=["email"],
        config=config,
    )


@pytest.fixture
def post_spec(config: AppGenConfig, type_parser: TypeExpressionParser) -> SpecificationRecord:
    """``Post`` with scalars, a many-to-one author and many-to-many tags.

    Both relations request a database-level delete cascade; only the
    many-to-one keeps it.
    """
    def prop(name: str, token: str, **kwargs):
        return build_property(name, token, type_parser.parse(token), **kwargs)

    properties = [
        prop("title", "string|255"),
        prop("views", "int", default_value="0"),
        prop("price", "?decimal|10,2"),
        prop("publishedAt", "?datetime"),
        prop(
            "author",
            "?App\\Model\\Author",
            relation=build_relation("App\\Model\\Author", "M:1", on_delete_cascade=True),
        ),
        prop(
            "tags",
            "Tag",
            relation=build_relation(
                "App\\Model\\Tag", "N:M", cascade="persist", on_delete_cascade=True
            ),
        ),
    ]
    return assemble_specification(
        "App\\Model\\Post",
        "Post",
        properties,
        single_lookup_fields="title",
        multi_lookup_fields="author, publishedAt",
        events="all",
        config=config,
    )
