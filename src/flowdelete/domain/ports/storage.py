"""Ports for reading and writing manifests and deactivation descriptors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from flowdelete.domain.deactivation import FlowDefinitionDocument
    from flowdelete.domain.manifest import ManifestDocument


@runtime_checkable
class ManifestStore(Protocol):
    """Persistence contract for manifest documents."""

    def read(self, path: Path) -> ManifestDocument: ...

    def write(self, path: Path, document: ManifestDocument) -> None: ...


@runtime_checkable
class DescriptorStore(Protocol):
    """Persistence contract for per-flow deactivation descriptors."""

    def ensure_location(self) -> None: ...

    def get(self, name: str) -> FlowDefinitionDocument | None: ...

    def save(self, name: str, document: FlowDefinitionDocument) -> None: ...
