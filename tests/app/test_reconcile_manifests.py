from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from flowdelete import app as app_module
from flowdelete.adapters.filesystem import FileManifestStore
from flowdelete.domain.errors import ResolutionError
from flowdelete.domain.manifest import find_type
from tests.helpers.fakes import FailingVersionQuery, FakeVersionQuery, RecordingMaterializer
from tests.helpers.manifests import DESTRUCTIVE_WITHOUT_FLOWS_XML, METADATA_NAMESPACE

if TYPE_CHECKING:
    from pathlib import Path

    from flowdelete.config import ProjectConfig


def test_reconcile_manifests_updates_files(
    manifest_paths: tuple[Path, Path], project_config: ProjectConfig
) -> None:
    package_path, destructive_path = manifest_paths
    query = FakeVersionQuery({"FlowA": [2], "FlowB": [1, 2]})

    result = app_module.reconcile_manifests(
        package_path, destructive_path, project=project_config, query=query
    )

    assert result.deletable == ["FlowA-2", "FlowB-1", "FlowB-2"]
    store = FileManifestStore()
    destructive = store.read(destructive_path)
    package = store.read(package_path)
    assert find_type(destructive, "Flow").members == ["FlowA-2", "FlowB-1", "FlowB-2"]
    assert find_type(destructive, "ApexClass").members == ["LegacyHandler"]
    assert find_type(package, "FlowDefinition").members == ["FlowA", "FlowB"]
    assert find_type(package, "CustomField").members == ["Account.Region__c"]

    for name in ("FlowA", "FlowB"):
        text = project_config.descriptor_path(name).read_text(encoding="utf-8")
        assert f'<FlowDefinition xmlns="{METADATA_NAMESPACE}">' in text
        assert "<activeVersionNumber>0</activeVersionNumber>" in text


def test_reconcile_manifests_rerun_is_stable(
    manifest_paths: tuple[Path, Path], project_config: ProjectConfig
) -> None:
    package_path, destructive_path = manifest_paths
    query = FakeVersionQuery({"FlowA": [2], "FlowB": [1, 2]})

    app_module.reconcile_manifests(
        package_path, destructive_path, project=project_config, query=query
    )
    first = (package_path.read_bytes(), destructive_path.read_bytes())
    result = app_module.reconcile_manifests(
        package_path, destructive_path, project=project_config, query=query
    )

    assert query.calls[-1] == ["FlowA", "FlowB"]
    assert result.updated_descriptors == ["FlowA", "FlowB"]
    assert (package_path.read_bytes(), destructive_path.read_bytes()) == first


def test_reconcile_manifests_without_flows_leaves_files(
    manifest_paths: tuple[Path, Path], project_config: ProjectConfig
) -> None:
    package_path, destructive_path = manifest_paths
    destructive_path.write_text(DESTRUCTIVE_WITHOUT_FLOWS_XML, encoding="utf-8")
    before = (package_path.read_bytes(), destructive_path.read_bytes())
    query = FakeVersionQuery()

    result = app_module.reconcile_manifests(
        package_path, destructive_path, project=project_config, query=query
    )

    assert not result.changed
    assert query.calls == []
    assert (package_path.read_bytes(), destructive_path.read_bytes()) == before
    assert not project_config.definitions_dir.exists()


def test_reconcile_manifests_query_failure_leaves_files(
    manifest_paths: tuple[Path, Path], project_config: ProjectConfig
) -> None:
    package_path, destructive_path = manifest_paths
    before = (package_path.read_bytes(), destructive_path.read_bytes())
    materializer = RecordingMaterializer()

    with pytest.raises(ResolutionError):
        app_module.reconcile_manifests(
            package_path,
            destructive_path,
            project=project_config,
            query=FailingVersionQuery(),
            materializer=materializer,
        )

    assert (package_path.read_bytes(), destructive_path.read_bytes()) == before
    assert not project_config.definitions_dir.exists()
    assert materializer.calls == []


def test_reconcile_manifests_passes_materializer(
    manifest_paths: tuple[Path, Path], project_config: ProjectConfig
) -> None:
    package_path, destructive_path = manifest_paths
    materializer = RecordingMaterializer()

    app_module.reconcile_manifests(
        package_path,
        destructive_path,
        project=project_config,
        query=FakeVersionQuery({"FlowA": [1]}),
        materializer=materializer,
    )

    assert materializer.calls == [["FlowA", "FlowB"]]

