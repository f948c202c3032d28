"""Ports for querying remote flow versions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from flowdelete.domain.versions import RemoteVersionRecord


@runtime_checkable
class VersionQueryService(Protocol):
    """Callable port returning every remote version record for the given flow names.

    Implementations issue one batched request per call and raise
    ``ResolutionError`` when no usable response could be obtained.
    """

    def __call__(self, artifact_names: Sequence[str]) -> Iterable[RemoteVersionRecord]: ...


__all__ = ["VersionQueryService"]
