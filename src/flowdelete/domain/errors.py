"""Domain error taxonomy for manifest reconciliation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class FlowDeleteError(RuntimeError):
    """Base class for reconciliation failures."""


class MalformedManifestError(FlowDeleteError):
    """Raised when a manifest document lacks its expected root or shape."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class ResolutionError(FlowDeleteError):
    """Raised when the remote version query fails or yields nothing usable."""

    def __init__(self, message: str, *, request: str | None = None) -> None:
        super().__init__(message)
        self.request = request


class DeactivationError(FlowDeleteError):
    """Raised when a flow's deactivation descriptor cannot be read or written."""

    def __init__(self, artifact_name: str, message: str) -> None:
        super().__init__(f"{artifact_name}: {message}")
        self.artifact_name = artifact_name
