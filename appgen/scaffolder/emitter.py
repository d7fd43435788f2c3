"""Emission of rendered source files.

Maps every generated class to ``<app_dir>/<namespace minus its first
segment>/<Class><extension>``, normalises blank lines, and writes the files
one after another.  All content is rendered and normalised before the first
write.  There is no rollback: if a write fails, files already written stay
on disk and the ``OSError`` propagates.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, ConfigDict

from appgen.config import AppGenConfig
from appgen.utils import class_to_path, collapse_blank_lines


class GeneratedFile(BaseModel):
    """One rendered artifact and where it goes."""

    model_config = ConfigDict(frozen=True)

    artifact: str
    class_name: str
    path: Path
    content: str


class Emitter:
    """Resolves artifact paths and writes rendered content."""

    def __init__(self, config: AppGenConfig) -> None:
        self.config = config

    def path_for(self, fqcn: str) -> Path:
        return class_to_path(fqcn, self.config.app_dir, self.config.file_extension)

    def prepare(self, artifact: str, fqcn: str, content: str) -> GeneratedFile:
        """Attach the target path and normalise *content*."""
        return GeneratedFile(
            artifact=artifact,
            class_name=fqcn,
            path=self.path_for(fqcn),
            content=collapse_blank_lines(content),
        )

    def write(self, files: Iterable[GeneratedFile]) -> list[Path]:
        """Write every file, creating parent directories as needed.

        Returns:
            The written paths, in write order.
        """
        written: list[Path] = []
        for file in files:
            _write_file(file.path, file.content)
            written.append(file.path)
        return written


def _write_file(path: Path, content: str) -> None:
    """Create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
