"""Retrieval of existing flow definitions into the local project."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from flowdelete.config.project import ProjectConfig, get_project_config
from flowdelete.config.salesforce import SalesforceCliConfig, get_salesforce_cli_config

from .runner import CommandRunner, run_command

if TYPE_CHECKING:
    from collections.abc import Sequence

    from flowdelete.domain.ports.materializing import ArtifactMaterializer

log = getLogger(__name__)


@dataclass(slots=True)
class SalesforceFlowDefinitionRetriever:
    """Run ``sf project retrieve start`` for the given flow definitions.

    A failed retrieval is logged and otherwise ignored: flows whose descriptor is
    still missing get a freshly created inactive one. The CLI writes into the
    package directory named in ``sfdx-project.json``, so descriptors that do not
    show up in the configured definitions directory are reported.
    """

    config: SalesforceCliConfig = field(default_factory=get_salesforce_cli_config)
    project: ProjectConfig = field(default_factory=get_project_config)
    runner: CommandRunner = field(default=run_command)

    def __call__(self, artifact_names: Sequence[str]) -> None:
        if not artifact_names:
            return
        args = [self.config.executable, "project", "retrieve", "start"]
        for name in artifact_names:
            args.extend(["--metadata", f"FlowDefinition:{name}"])
        args.extend(self.config.target_org_args())

        try:
            output = self.runner(args, self.config.retrieve_timeout_seconds)
        except subprocess.TimeoutExpired:
            log.warning(
                "Retrieving flow definitions timed out after %gs; continuing without them",
                self.config.retrieve_timeout_seconds,
            )
            return
        except OSError as exc:
            log.warning("Cannot run %s to retrieve flow definitions: %s", self.config.executable, exc)
            return

        if output.returncode != 0:
            log.warning(
                "Retrieving flow definitions failed with exit code %d; continuing without them",
                output.returncode,
            )
            return
        log.info("Retrieved flow definitions for %d flow(s)", len(artifact_names))

        missing = [
            name for name in artifact_names if not self.project.descriptor_path(name).exists()
        ]
        if missing:
            log.warning(
                "Retrieved flow definitions not found in %s: %s; check that the definitions "
                "directory matches the package directory in sfdx-project.json",
                self.project.resolve_definitions_dir(),
                ", ".join(missing),
            )


if TYPE_CHECKING:
    _materializer_check: ArtifactMaterializer = SalesforceFlowDefinitionRetriever()
