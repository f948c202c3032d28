"""In-memory stand-ins for the reconciliation ports."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flowdelete.domain.errors import ResolutionError
from flowdelete.domain.manifest import ManifestDocument, parse_manifest
from flowdelete.domain.versions import RemoteVersionRecord

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from flowdelete.domain.deactivation import FlowDefinitionDocument


class FakeVersionQuery:
    def __init__(self, versions: Mapping[str, Sequence[int]] | None = None) -> None:
        self.versions = dict(versions or {})
        self.calls: list[list[str]] = []

    def __call__(self, artifact_names: Sequence[str]) -> list[RemoteVersionRecord]:
        self.calls.append(list(artifact_names))
        return [
            RemoteVersionRecord(artifact_name=name, version_number=number, status="Obsolete")
            for name in artifact_names
            for number in self.versions.get(name, ())
        ]


class FailingVersionQuery:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, artifact_names: Sequence[str]) -> list[RemoteVersionRecord]:
        del artifact_names
        self.calls += 1
        raise ResolutionError("org unreachable", request="SELECT ...")


class RecordingMaterializer:
    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def __call__(self, artifact_names: Sequence[str]) -> None:
        self.calls.append(list(artifact_names))


class InMemoryDescriptorStore:
    def __init__(self, documents: Mapping[str, FlowDefinitionDocument] | None = None) -> None:
        self.documents: dict[str, FlowDefinitionDocument] = dict(documents or {})
        self.ensured = 0
        self.saved: list[str] = []

    def ensure_location(self) -> None:
        self.ensured += 1

    def get(self, name: str) -> FlowDefinitionDocument | None:
        document = self.documents.get(name)
        return None if document is None else document.model_copy(deep=True)

    def save(self, name: str, document: FlowDefinitionDocument) -> None:
        self.documents[name] = document
        self.saved.append(name)


class InMemoryManifestStore:
    def __init__(self, payloads: Mapping[Path, Mapping[str, object]]) -> None:
        self.payloads: dict[Path, Mapping[str, object]] = dict(payloads)
        self.written: dict[Path, ManifestDocument] = {}

    def read(self, path: Path) -> ManifestDocument:
        return parse_manifest(self.payloads[path], path=path)

    def write(self, path: Path, document: ManifestDocument) -> None:
        self.written[path] = document
        self.payloads[path] = document.to_payload()
