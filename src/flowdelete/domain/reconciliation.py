"""Reconcile a package manifest and a destructive manifest that delete flows.

Stages, in order:
1) read both manifests and take the destructive ``Flow`` members
2) strip version suffixes left over from earlier runs
3) merge the flows into the package manifest's ``FlowDefinition`` type
4) resolve every remote version of the flows
5) replace the destructive ``Flow`` members with the version-qualified names
6) retrieve existing descriptors, if asked to, and plan their deactivation
7) write descriptors, then both manifests

Nothing is written or retrieved before step 6, so a failed read, parse or query
leaves every file as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from .deactivation import commit_deactivation, plan_deactivation
from .manifest import find_type
from .merge import merge_members, replace_members
from .versions import bare_artifact_names, resolve_deletable_versions

if TYPE_CHECKING:
    from pathlib import Path

    from .ports.materializing import ArtifactMaterializer
    from .ports.querying import VersionQueryService
    from .ports.storage import DescriptorStore, ManifestStore

log = logging.getLogger(__name__)

FLOW_TYPE: Final[str] = "Flow"
FLOW_DEFINITION_TYPE: Final[str] = "FlowDefinition"


@dataclass(slots=True)
class ReconciliationResult:
    """Outcome of one reconciliation run."""

    flows: list[str] = field(default_factory=list[str])
    deletable: list[str] = field(default_factory=list[str])
    created_descriptors: list[str] = field(default_factory=list[str])
    updated_descriptors: list[str] = field(default_factory=list[str])

    @property
    def changed(self) -> bool:
        return bool(self.flows)


def reconcile_flow_deletion(
    *,
    package_path: Path,
    destructive_path: Path,
    manifests: ManifestStore,
    descriptors: DescriptorStore,
    query: VersionQueryService,
    materializer: ArtifactMaterializer | None = None,
) -> ReconciliationResult:
    """Deactivate, redeploy and version-qualify every flow the destructive manifest deletes."""

    destructive = manifests.read(destructive_path)
    package = manifests.read(package_path)

    flows = bare_artifact_names(find_type(destructive, FLOW_TYPE).members)
    if not flows:
        log.info("Destructive manifest does not contain flows")
        return ReconciliationResult()

    log.info("Reconciling %d flow(s): %s", len(flows), ", ".join(flows))

    updated_package = merge_members(package, FLOW_DEFINITION_TYPE, flows)
    deletable = resolve_deletable_versions(flows, query=query)
    if not deletable:
        log.warning("No remote flow versions found; destructive %s list will be empty", FLOW_TYPE)
    updated_destructive = replace_members(destructive, FLOW_TYPE, deletable)

    changes = plan_deactivation(flows, store=descriptors, materializer=materializer)
    commit_deactivation(changes, store=descriptors)
    manifests.write(package_path, updated_package)
    manifests.write(destructive_path, updated_destructive)

    return ReconciliationResult(
        flows=flows,
        deletable=deletable,
        created_descriptors=[change.name for change in changes if change.created],
        updated_descriptors=[change.name for change in changes if not change.created],
    )


__all__ = [
    "FLOW_DEFINITION_TYPE",
    "FLOW_TYPE",
    "ReconciliationResult",
    "reconcile_flow_deletion",
]
