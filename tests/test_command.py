"""Tests for the appgen command line entry point (appgen.command).

Covers:
- Definition-file runs, dry runs and error exits
- The interactive question sequence with rich prompts patched out
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from appgen.command import ask_specification, main
from appgen.config import AppGenConfig
from appgen.parser.models import RelationKind

pytestmark = pytest.mark.unit


@pytest.fixture
def config_file(tmp_path: Path, config: AppGenConfig) -> Path:
    return config.save(tmp_path / "appgen.json")


@pytest.fixture
def definition_file(tmp_path: Path) -> Path:
    path = tmp_path / "user.yml"
    path.write_text(
        yaml.safe_dump({
            "entity": "User",
            "namespace": "App\\Model",
            "properties": [{"name": "email", "type": "string --unique"}],
            "get_by": ["email"],
        }),
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


class TestMain:
    def test_definition_run_writes_files(self, config_file, definition_file, app_dir, capsys):
        main(["--config", str(config_file), "--definition", str(definition_file)])
        assert (app_dir / "Model" / "UserRepository.php").exists()
        assert (app_dir / "Model" / "Exception" / "UserNotFoundException.php").exists()
        out = capsys.readouterr().out
        assert "Files created:" in out
        assert "UserRepository.php" in out

    def test_dry_run_writes_nothing(self, config_file, definition_file, app_dir, capsys):
        main(["--config", str(config_file), "--definition", str(definition_file), "--dry-run"])
        assert not app_dir.exists()
        assert "UserFacade.php" in capsys.readouterr().out

    def test_warns_about_entity_without_properties(self, tmp_path: Path, config_file, capsys):
        path = tmp_path / "marker.yml"
        path.write_text(
            yaml.safe_dump({"entity": "Marker", "namespace": "App\\Model"}), encoding="utf-8"
        )
        main(["--config", str(config_file), "--definition", str(path), "--dry-run"])
        assert "Marker has no properties besides its id." in capsys.readouterr().out

    def test_missing_config(self, tmp_path: Path, definition_file):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(tmp_path / "nope.yml"), "--definition", str(definition_file)])
        assert exc_info.value.code == 1

    def test_invalid_config(self, tmp_path: Path, definition_file):
        path = tmp_path / "appgen.json"
        path.write_text('{"file_extension": []}', encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(path), "--definition", str(definition_file)])
        assert exc_info.value.code == 1

    def test_missing_definition(self, tmp_path: Path, config_file):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(config_file), "--definition", str(tmp_path / "nope.yml")])
        assert exc_info.value.code == 1

    def test_unknown_lookup_exits_without_files(self, tmp_path: Path, config_file, app_dir, capsys):
        path = tmp_path / "bad.yml"
        path.write_text(
            yaml.safe_dump({"entity": "User", "namespace": "App\\Model", "get_by": "slug"}),
            encoding="utf-8",
        )
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(config_file), "--definition", str(path)])
        assert exc_info.value.code == 1
        assert not app_dir.exists()
        assert 'Property "slug" does not exist' in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Interactive questions
# ---------------------------------------------------------------------------


class TestAskSpecification:
    def test_full_sequence(self, config):
        prompts = [
            "user",                 # entity name
            "App\\Model",           # namespace
            "email",                # property name
            "strnig",               # invalid type, asked again
            "string --unique",
            "",                     # default value
            "author",
            "?Author",
            "M:1",
            "",                     # cascade
            "",                     # finish properties
            "slug",                 # unknown getBy field, asked again
            "email",
            "author",               # getAllBy
            "all",                  # events
        ]
        confirms = [
            False,                  # bidirectional
            True,                   # delete cascade
            True, False, True, True,  # data factory, edit, getAll, delete
            False,                  # Timestampable trait
        ]
        with patch("appgen.command.Prompt.ask", side_effect=prompts), \
                patch("appgen.command.Confirm.ask", side_effect=confirms):
            spec = ask_specification(config)

        assert spec.entity_class(qualified=True) == "App\\Model\\User"
        assert spec.property_names() == ["email", "author"]
        assert spec.get_property("author").relation.kind is RelationKind.MANY_TO_ONE
        assert spec.get_property("author").relation.on_delete_cascade is True
        assert spec.features.edit is False
        assert spec.single_lookup_fields == ("email",)
        assert spec.multi_lookup_fields == ("author",)
        assert spec.events == ("created", "updated", "deleted")
        assert spec.traits == ()

    def test_interactive_main(self, config_file, app_dir):
        prompts = ["Tag", "App\\Model\\Tag", "label", "string|64", "", "", "", "", ""]
        confirms = [True, True, True, True, True]
        with patch("appgen.command.Prompt.ask", side_effect=prompts), \
                patch("appgen.command.Confirm.ask", side_effect=confirms):
            main(["--config", str(config_file)])
        assert (app_dir / "Model" / "Tag" / "Tag.php").exists()
        assert (app_dir / "Model" / "Tag" / "TagDataFactory.php").exists()

    def test_unusable_event_is_asked_again(self, config, capsys):
        prompts = ["Tag", "App\\Model", "", "", "", "1st", "created, Created"]
        confirms = [True, True, True, True, False]
        with patch("appgen.command.Prompt.ask", side_effect=prompts), \
                patch("appgen.command.Confirm.ask", side_effect=confirms):
            spec = ask_specification(config)
        assert spec.events == ("created",)
        assert 'Invalid event "1st"' in capsys.readouterr().out
