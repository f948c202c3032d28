"""Type-level member merging for manifest documents."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .manifest import TypeEntry, parse_manifest, unique_members

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .manifest import ManifestDocument, ManifestInput


def merge_members(
    manifest: ManifestInput,
    type_name: str,
    new_members: Iterable[str],
) -> ManifestDocument:
    """Return a copy of ``manifest`` whose ``type_name`` entry also lists ``new_members``.

    The entry is appended when the manifest does not list the type yet. Members
    are deduplicated by exact string equality, keeping first-seen order, so
    merging the same members again is a no-op.
    """

    return _update_type(manifest, type_name, list(new_members), replace=False)


def replace_members(
    manifest: ManifestInput,
    type_name: str,
    new_members: Iterable[str],
) -> ManifestDocument:
    """Return a copy of ``manifest`` whose ``type_name`` entry lists exactly ``new_members``."""

    return _update_type(manifest, type_name, list(new_members), replace=True)


def _update_type(
    manifest: ManifestInput,
    type_name: str,
    new_members: list[str],
    *,
    replace: bool,
) -> ManifestDocument:
    updated = parse_manifest(manifest).model_copy(deep=True)
    types = updated.package.types

    for entry in types:
        if entry.name != type_name:
            continue
        existing = [] if replace else entry.members
        entry.members = unique_members([*existing, *new_members])
        return updated

    types.append(TypeEntry(name=type_name, members=unique_members(new_members)))
    return updated


__all__ = ["merge_members", "replace_members"]
