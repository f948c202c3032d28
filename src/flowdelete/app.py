"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from flowdelete.adapters.filesystem import FileDescriptorStore, FileManifestStore
from flowdelete.adapters.salesforce import (
    SalesforceFlowDefinitionRetriever,
    SalesforceFlowVersionQuery,
)
from flowdelete.config import get_project_config, get_salesforce_cli_config
from flowdelete.domain.reconciliation import ReconciliationResult, reconcile_flow_deletion

if TYPE_CHECKING:
    from pathlib import Path

    from flowdelete.config import ProjectConfig, SalesforceCliConfig
    from flowdelete.domain.ports import (
        ArtifactMaterializer,
        DescriptorStore,
        ManifestStore,
        VersionQueryService,
    )

log = getLogger(__name__)


def reconcile_manifests(
    package_path: Path,
    destructive_path: Path,
    *,
    project: ProjectConfig | None = None,
    salesforce: SalesforceCliConfig | None = None,
    retrieve_definitions: bool = False,
    manifests: ManifestStore | None = None,
    descriptors: DescriptorStore | None = None,
    query: VersionQueryService | None = None,
    materializer: ArtifactMaterializer | None = None,
) -> ReconciliationResult:
    """Reconcile flow deletions using the configured adapters."""

    project_config = project or get_project_config()
    sf_config = salesforce or get_salesforce_cli_config()
    effective_materializer = materializer
    if effective_materializer is None and retrieve_definitions:
        effective_materializer = SalesforceFlowDefinitionRetriever(
            config=sf_config, project=project_config
        )

    log.info(
        "Starting flow deletion reconciliation: manifest=%s, destructive=%s, definitions=%s",
        package_path,
        destructive_path,
        project_config.definitions_dir,
    )

    result = reconcile_flow_deletion(
        package_path=package_path,
        destructive_path=destructive_path,
        manifests=manifests or FileManifestStore(),
        descriptors=descriptors or FileDescriptorStore(project=project_config),
        query=query or SalesforceFlowVersionQuery(config=sf_config),
        materializer=effective_materializer,
    )

    log.info(
        "Finished flow deletion reconciliation: flows=%d, deletable=%d, created=%d, updated=%d",
        len(result.flows),
        len(result.deletable),
        len(result.created_descriptors),
        len(result.updated_descriptors),
    )
    return result
