"""File-backed stores for manifests and flow definition descriptors."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from flowdelete.config.project import ProjectConfig, get_project_config
from flowdelete.domain.deactivation import FlowDefinitionDocument, parse_descriptor
from flowdelete.domain.errors import DeactivationError, MalformedManifestError
from flowdelete.domain.manifest import ManifestDocument, parse_manifest

from .xml_codec import XmlDocumentError, decode, encode

if TYPE_CHECKING:
    from flowdelete.domain.ports.storage import DescriptorStore, ManifestStore

log = getLogger(__name__)


def atomic_write(path: Path, data: bytes) -> None:
    """Replace ``path`` with ``data`` so readers never observe a partial file."""

    path.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(  # noqa: SIM115
        "wb", delete=False, dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    temp_path = Path(handle.name)
    try:
        with handle:
            handle.write(data)
        os.replace(temp_path, path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
    log.debug("Wrote %s", path)


class FileManifestStore:
    """Read and write manifest XML files."""

    def read(self, path: Path) -> ManifestDocument:
        try:
            payload = decode(path.read_bytes())
        except XmlDocumentError as exc:
            raise MalformedManifestError(str(exc), path=path) from exc
        return parse_manifest(payload, path=path)

    def write(self, path: Path, document: ManifestDocument) -> None:
        try:
            data = encode(document.to_payload())
        except XmlDocumentError as exc:
            raise MalformedManifestError(str(exc), path=path) from exc
        atomic_write(path, data)


@dataclass(slots=True)
class FileDescriptorStore:
    """Store ``<name>.flowDefinition-meta.xml`` files in the project's definitions directory."""

    project: ProjectConfig = field(default_factory=get_project_config)

    def ensure_location(self) -> None:
        self.project.ensure_definitions_dir()

    def get(self, name: str) -> FlowDefinitionDocument | None:
        path = self._path(name)
        if not path.exists():
            return None
        try:
            payload = decode(path.read_bytes())
        except XmlDocumentError as exc:
            raise DeactivationError(name, f"{path}: {exc}") from exc
        return parse_descriptor(name, payload)

    def save(self, name: str, document: FlowDefinitionDocument) -> None:
        try:
            data = encode(document.to_payload())
        except XmlDocumentError as exc:
            raise DeactivationError(name, str(exc)) from exc
        atomic_write(self._path(name), data)

    def _path(self, name: str) -> Path:
        if not name or name in {".", ".."} or any(sep in name for sep in ("/", "\\")):
            raise DeactivationError(name, "flow name cannot be used as a file name")
        return self.project.descriptor_path(name)


if TYPE_CHECKING:
    _manifest_store_check: ManifestStore = FileManifestStore()
    _descriptor_store_check: DescriptorStore = FileDescriptorStore()
