"""appgen configuration.

Centralised, typed configuration for a scaffolding run.  All settings use
Pydantic v2 models so they can be validated at construction time and loaded
from JSON, YAML or environment variables without boiler-plate.  A config is
loaded once per invocation and passed explicitly to whatever needs it.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field


UUID_INTERFACE = "Ramsey\\Uuid\\UuidInterface"


class EntityConfig(BaseModel):
    """Settings that shape every generated entity."""

    model_config = ConfigDict(frozen=True)

    id_type: str = Field(
        default="uuid", description="Identifier strategy: 'int' or anything containing 'uuid'"
    )
    default_traits: dict[str, Optional[str]] = Field(
        default_factory=lambda: {
            "Timestampable": "Gedmo\\Timestampable\\Traits\\TimestampableEntity",
            "SoftDeleteable": None,
        },
        description="Trait name -> fully-qualified trait class; null entries are never offered",
    )
    namespaces: list[str] = Field(
        default_factory=lambda: ["App\\Model"],
        description="Namespaces searched when an entity short name is used as a type",
    )
    known_classes: list[str] = Field(
        default_factory=list,
        description="Fully-qualified entity classes that resolve without a file on disk",
    )


class ModelConfig(BaseModel):
    """Settings for the model scaffolding command."""

    model_config = ConfigDict(frozen=True)

    entity: EntityConfig = Field(default_factory=EntityConfig)
    recognized_flags: list[str] = Field(default_factory=lambda: ["unique"])
    not_found_base_class: str = Field(default="Exception")
    event_base_class: str = Field(default="Symfony\\Contracts\\EventDispatcher\\Event")


class AppGenConfig(BaseModel):
    """Global appgen configuration.

    ``app_dir`` is the directory the first namespace segment maps to, so with
    the default settings ``App\\Model\\User`` is written to
    ``./app/Model/User.php``.
    """

    model_config = ConfigDict(frozen=True)

    app_dir: Path = Field(default=Path("./app"))
    file_extension: str = Field(default=".php")
    model: ModelConfig = Field(default_factory=ModelConfig)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def uses_uuid(self) -> bool:
        """Whether entities are identified by a UUID rather than an integer."""
        return "uuid" in self.model.entity.id_type.lower()

    @property
    def id_type_hint(self) -> str:
        """Type used for identifier parameters in generated signatures."""
        return UUID_INTERFACE if self.uses_uuid else "int"

    def offered_traits(self) -> dict[str, str]:
        """Return the configured traits that may be selected, in declaration order."""
        return {
            name: cls
            for name, cls in self.model.entity.default_traits.items()
            if cls is not None
        }

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "AppGenConfig":
        """Load a configuration from a JSON or YAML file.

        The format is picked from the suffix: ``.yml``/``.yaml`` are read with
        PyYAML, everything else as JSON.
        """
        file_path = Path(path)
        raw = file_path.read_text(encoding="utf-8")
        if file_path.suffix.lower() in (".yml", ".yaml"):
            data: Any = yaml.safe_load(raw) or {}
        else:
            data = json.loads(raw)
        return cls.model_validate(data)

    @classmethod
    def from_env(cls) -> "AppGenConfig":
        """Build a config from environment variables.

        Recognised variables (all optional):
            APPGEN_APP_DIR, APPGEN_FILE_EXTENSION, APPGEN_ID_TYPE,
            APPGEN_NAMESPACES (comma-separated).
        """
        entity_kwargs: dict[str, Any] = {}
        if os.environ.get("APPGEN_ID_TYPE"):
            entity_kwargs["id_type"] = os.environ["APPGEN_ID_TYPE"]
        if os.environ.get("APPGEN_NAMESPACES"):
            entity_kwargs["namespaces"] = [
                ns.strip().strip("\\")
                for ns in os.environ["APPGEN_NAMESPACES"].split(",")
                if ns.strip()
            ]

        kwargs: dict[str, Any] = {
            "model": ModelConfig(entity=EntityConfig(**entity_kwargs)),
        }
        if os.environ.get("APPGEN_APP_DIR"):
            kwargs["app_dir"] = Path(os.environ["APPGEN_APP_DIR"])
        if os.environ.get("APPGEN_FILE_EXTENSION"):
            kwargs["file_extension"] = os.environ["APPGEN_FILE_EXTENSION"]

        return cls(**kwargs)
