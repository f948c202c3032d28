"""Ports for materializing deactivation descriptors locally."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence


@runtime_checkable
class ArtifactMaterializer(Protocol):
    """Callable port that tries to place existing descriptors on disk before editing.

    Failures are the implementation's concern; descriptors that are still
    missing afterwards are created from scratch.
    """

    def __call__(self, artifact_names: Sequence[str]) -> None: ...


__all__ = ["ArtifactMaterializer"]
