"""Domain port definitions for adapters."""

from __future__ import annotations

from .materializing import ArtifactMaterializer
from .querying import VersionQueryService
from .storage import DescriptorStore, ManifestStore

__all__ = [
    "ArtifactMaterializer",
    "DescriptorStore",
    "ManifestStore",
    "VersionQueryService",
]
