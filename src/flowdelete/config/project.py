"""Salesforce project layout configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

DEFAULT_DEFINITIONS_DIR: Final[str] = "force-app/main/default/flowDefinitions"
DESCRIPTOR_SUFFIX: Final[str] = ".flowDefinition-meta.xml"


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    definitions_dir: Path = Path(DEFAULT_DEFINITIONS_DIR)

    def resolve_definitions_dir(self) -> Path:
        return self.definitions_dir.expanduser().resolve()

    def ensure_definitions_dir(self) -> Path:
        definitions_dir = self.resolve_definitions_dir()
        definitions_dir.mkdir(parents=True, exist_ok=True)
        return definitions_dir

    def descriptor_path(self, name: str) -> Path:
        return self.resolve_definitions_dir() / f"{name}{DESCRIPTOR_SUFFIX}"


def get_project_config(*, definitions_dir: Path | None = None) -> ProjectConfig:
    if definitions_dir is not None:
        return ProjectConfig(definitions_dir=definitions_dir)
    env_dir = optional_env_var("FLOWDELETE_DEFINITIONS_DIR")
    return ProjectConfig(definitions_dir=Path(env_dir or DEFAULT_DEFINITIONS_DIR))
