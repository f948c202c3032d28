from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from flowdelete.config.project import ProjectConfig
from tests.helpers.manifests import DESTRUCTIVE_XML, PACKAGE_XML

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def project_config(tmp_path: Path) -> ProjectConfig:
    return ProjectConfig(definitions_dir=tmp_path / "force-app" / "flowDefinitions")


@pytest.fixture
def manifest_paths(tmp_path: Path) -> tuple[Path, Path]:
    package_path = tmp_path / "package.xml"
    destructive_path = tmp_path / "destructiveChanges.xml"
    package_path.write_text(PACKAGE_XML, encoding="utf-8")
    destructive_path.write_text(DESTRUCTIVE_XML, encoding="utf-8")
    return package_path, destructive_path
