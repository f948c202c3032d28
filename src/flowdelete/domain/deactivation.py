"""Deactivation of flows through their ``FlowDefinition`` descriptors.

Each flow named for deletion moves from active-or-unknown to deactivated:

- no local descriptor: a minimal one is created with ``activeVersionNumber`` 0
- a local descriptor exists: its ``activeVersionNumber`` is set to 0 and every
  other field is kept as it was

Work is split into a planning step and a commit step so callers can finish
every other computation before anything is written. Planning writes nothing
itself; the optional materializer may refresh local descriptors from the org,
so callers run it only once every other check has passed. Failures are fatal
and name the flow they concern.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import DeactivationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .ports.materializing import ArtifactMaterializer
    from .ports.storage import DescriptorStore

log = logging.getLogger(__name__)

FLOW_DEFINITION_ROOT: Final[str] = "FlowDefinition"
METADATA_NAMESPACE: Final[str] = "http://soap.sforce.com/2006/04/metadata"
INACTIVE_VERSION: Final[int] = 0


class DescriptorBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class FlowDefinition(DescriptorBaseModel):
    active_version_number: int | None = Field(default=None, alias="activeVersionNumber")

    @field_validator("active_version_number", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_inactive(self) -> bool:
        return self.active_version_number == INACTIVE_VERSION


class FlowDefinitionDocument(DescriptorBaseModel):
    """Root of a ``*.flowDefinition-meta.xml`` payload."""

    flow_definition: FlowDefinition = Field(alias=FLOW_DEFINITION_ROOT)

    @field_validator("flow_definition", mode="before")
    @classmethod
    def _empty_definition(cls, value: object) -> object:
        if value is None or value == "":
            return {}
        return value

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


def parse_descriptor(name: str, payload: object) -> FlowDefinitionDocument:
    if not isinstance(payload, Mapping) or FLOW_DEFINITION_ROOT not in payload:
        raise DeactivationError(name, f"descriptor has no {FLOW_DEFINITION_ROOT} root")
    try:
        return FlowDefinitionDocument.model_validate(payload)
    except ValidationError as exc:
        raise DeactivationError(name, f"invalid descriptor: {exc}") from exc


def create_inactive_descriptor() -> FlowDefinitionDocument:
    return FlowDefinitionDocument.model_validate(
        {
            FLOW_DEFINITION_ROOT: {
                "activeVersionNumber": INACTIVE_VERSION,
                "@_xmlns": METADATA_NAMESPACE,
            }
        }
    )


def deactivate_descriptor(document: FlowDefinitionDocument) -> FlowDefinitionDocument:
    """Return a copy of ``document`` with the inactive version sentinel set."""

    updated = document.model_copy(deep=True)
    updated.flow_definition.active_version_number = INACTIVE_VERSION
    return updated


@dataclass(slots=True, frozen=True)
class DescriptorChange:
    """Deactivated descriptor waiting to be written for one flow."""

    name: str
    document: FlowDefinitionDocument
    created: bool
    previous_version: int | None = None


def plan_deactivation(
    artifact_names: Iterable[str],
    *,
    store: DescriptorStore,
    materializer: ArtifactMaterializer | None = None,
) -> list[DescriptorChange]:
    """Compute the deactivated descriptor of every flow without writing descriptors."""

    names = list(dict.fromkeys(artifact_names))
    if not names:
        return []

    if materializer is not None:
        materializer(names)

    changes: list[DescriptorChange] = []
    for name in names:
        try:
            existing = store.get(name)
        except OSError as exc:
            raise DeactivationError(name, f"cannot read descriptor: {exc}") from exc

        if existing is None:
            log.debug("%s has no local descriptor; creating an inactive one", name)
            changes.append(
                DescriptorChange(name=name, document=create_inactive_descriptor(), created=True)
            )
            continue

        previous = existing.flow_definition.active_version_number
        if existing.flow_definition.is_inactive:
            log.debug("%s is already inactive", name)
        changes.append(
            DescriptorChange(
                name=name,
                document=deactivate_descriptor(existing),
                created=False,
                previous_version=previous,
            )
        )
    return changes


def commit_deactivation(changes: Iterable[DescriptorChange], *, store: DescriptorStore) -> None:
    pending = list(changes)
    if not pending:
        return
    store.ensure_location()
    for change in pending:
        try:
            store.save(change.name, change.document)
        except OSError as exc:
            raise DeactivationError(change.name, f"cannot write descriptor: {exc}") from exc
        log.info("%s - deactivated", change.name)


def deactivate(
    artifact_names: Iterable[str],
    *,
    store: DescriptorStore,
    materializer: ArtifactMaterializer | None = None,
) -> list[DescriptorChange]:
    """Plan and immediately write the deactivation of every named flow."""

    changes = plan_deactivation(artifact_names, store=store, materializer=materializer)
    commit_deactivation(changes, store=store)
    return changes


__all__ = [
    "FLOW_DEFINITION_ROOT",
    "INACTIVE_VERSION",
    "METADATA_NAMESPACE",
    "DescriptorChange",
    "FlowDefinition",
    "FlowDefinitionDocument",
    "commit_deactivation",
    "create_inactive_descriptor",
    "deactivate",
    "deactivate_descriptor",
    "parse_descriptor",
    "plan_deactivation",
]
