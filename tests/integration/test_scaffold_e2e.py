"""End-to-end scaffolding through the command line entry point.

These tests load a YAML config and a YAML definition from disk, run
``appgen.command.main`` and read the generated PHP files back.  Nothing is
mocked.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from appgen.command import main
from appgen.config import AppGenConfig

pytestmark = pytest.mark.integration


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _write_yaml(path: Path, data: dict) -> Path:
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


def _read(app_dir: Path, *parts: str) -> str:
    return app_dir.joinpath(*parts).read_text(encoding="utf-8")


@pytest.fixture
def config_file(tmp_path: Path, config: AppGenConfig) -> Path:
    return _write_yaml(tmp_path / "appgen.yml", config.model_dump(mode="json"))


def _run(config_file: Path, definition: Path) -> None:
    main(["--config", str(config_file), "--definition", str(definition)])


# ---------------------------------------------------------------------------
# User: scalar property with a single lookup
# ---------------------------------------------------------------------------


class TestUserModel:
    @pytest.fixture(autouse=True)
    def scaffold(self, tmp_path: Path, config_file: Path) -> None:
        definition = _write_yaml(tmp_path / "user.yml", {
            "entity": "User",
            "namespace": "App\\Model",
            "properties": [{"name": "email", "type": "string --unique"}],
            "features": {"data_factory": True, "edit": True, "get_all": True, "delete": True},
            "get_by": ["email"],
        })
        _run(config_file, definition)

    def test_every_artifact_is_written(self, app_dir: Path):
        model = app_dir / "Model"
        assert sorted(p.relative_to(model).as_posix() for p in model.rglob("*.php")) == [
            "Exception/UserNotFoundException.php",
            "User.php",
            "UserData.php",
            "UserDataFactory.php",
            "UserFacade.php",
            "UserFactory.php",
            "UserRepository.php",
        ]

    def test_repository(self, app_dir: Path):
        text = _read(app_dir, "Model", "UserRepository.php")
        assert "abstract class UserRepository\n" in text
        assert "\tpublic function get(UuidInterface $id): User\n" in text
        assert "\tpublic function getByEmail(string $email): User\n" in text
        assert "\t\t\tthrow new UserNotFoundException();\n" in text
        assert "\tpublic function getAll(): array\n" in text
        assert "\tprivate function getQueryBuilderForAll(): QueryBuilder\n" in text
        assert "\tpublic function getQueryBuilderForDataGrid(): QueryBuilder\n" in text

    def test_entity_column(self, app_dir: Path):
        text = _read(app_dir, "Model", "User.php")
        assert "unique=true" in text
        assert "\tprivate string $email;\n" in text

    def test_not_found_exception(self, app_dir: Path):
        text = _read(app_dir, "Model", "Exception", "UserNotFoundException.php")
        assert "namespace App\\Model\\Exception;\n" in text
        assert "class UserNotFoundException extends Exception\n" in text

    def test_files_are_php_sources(self, app_dir: Path):
        for path in (app_dir / "Model").rglob("*.php"):
            text = path.read_text(encoding="utf-8")
            assert text.startswith("<?php\n\ndeclare(strict_types=1);\n"), path
            assert "\n\n\n" not in text, path


# ---------------------------------------------------------------------------
# Post: relations, multi lookups and events
# ---------------------------------------------------------------------------


class TestPostModel:
    @pytest.fixture(autouse=True)
    def scaffold(self, tmp_path: Path, config_file: Path) -> None:
        definition = _write_yaml(tmp_path / "post.yml", {
            "entity": "Post",
            "namespace": "App\\Model\\Post",
            "properties": [
                {"name": "title", "type": "string|255"},
                {
                    "name": "author",
                    "type": "?App\\Model\\Author",
                    "relation": {"kind": "M:1", "on_delete_cascade": True},
                },
                {
                    "name": "tags",
                    "type": "Tag",
                    "relation": {"kind": "N:M", "cascade": "persist", "on_delete_cascade": True},
                },
            ],
            "get_all_by": "author",
            "events": "all",
            "traits": [],
        })
        _run(config_file, definition)

    def test_relation_lookup_returns_a_list(self, app_dir: Path):
        text = _read(app_dir, "Model", "Post", "PostRepository.php")
        assert "\tpublic function getAllByAuthor(UuidInterface $authorId): array\n" in text
        assert "\t\treturn $this->getRepository()->findBy([\n" in text
        assert "\t\t\t'author' => $authorId,\n" in text

    def test_delete_cascade_only_on_the_many_to_one(self, app_dir: Path):
        text = _read(app_dir, "Model", "Post", "Post.php")
        assert '@ORM\\ManyToOne(targetEntity="App\\Model\\Author")' in text
        assert '@ORM\\JoinColumn(nullable=true, onDelete="CASCADE")' in text
        assert '@ORM\\ManyToMany(targetEntity="App\\Model\\Tag", cascade={"persist"})' in text
        assert text.count('onDelete="CASCADE"') == 1
        assert "use TimestampableEntity;" not in text

    def test_events(self, app_dir: Path):
        event_dir = app_dir / "Model" / "Post" / "Event"
        assert sorted(p.name for p in event_dir.iterdir()) == [
            "PostCreatedEvent.php",
            "PostDeletedEvent.php",
            "PostUpdatedEvent.php",
        ]
        facade = _read(app_dir, "Model", "Post", "PostFacade.php")
        assert "use App\\Model\\Post\\Event\\PostCreatedEvent;\n" in facade
        assert "EventDispatcherInterface $eventDispatcher" in facade


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_invalid_type_writes_nothing(self, tmp_path: Path, config_file: Path, app_dir: Path):
        definition = _write_yaml(tmp_path / "bad.yml", {
            "entity": "User",
            "namespace": "App\\Model",
            "properties": {"email": "strnig"},
        })
        with pytest.raises(SystemExit) as exc_info:
            _run(config_file, definition)
        assert exc_info.value.code == 1
        assert not app_dir.exists()
