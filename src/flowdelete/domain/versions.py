"""Map bare flow names to the version-qualified identifiers that can be deleted.

A destructive manifest cannot delete ``MyFlow``; it must name ``MyFlow-1``,
``MyFlow-2`` and so on. Every version that exists remotely is listed, not only
the active one, since any leftover version blocks removal of the definition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .ports.querying import VersionQueryService

log = logging.getLogger(__name__)

VERSION_SEPARATOR: Final[str] = "-"


@dataclass(frozen=True, slots=True)
class RemoteVersionRecord:
    """One version of a flow as reported by the remote org."""

    artifact_name: str
    version_number: int
    status: str = ""


def strip_version_suffix(member: str) -> str:
    """Return ``member`` without a trailing ``-<number>`` version suffix."""

    name, separator, version = member.rpartition(VERSION_SEPARATOR)
    if separator and name and version.isdigit():
        return name
    return member


def bare_artifact_names(members: Iterable[str]) -> list[str]:
    """Strip version suffixes, drop blanks and repeats, keeping first-seen order."""

    names: dict[str, None] = {}
    for member in members:
        name = strip_version_suffix(member.strip())
        if name:
            names.setdefault(name)
    return list(names)


def format_deletable(record: RemoteVersionRecord) -> str:
    return f"{record.artifact_name}{VERSION_SEPARATOR}{record.version_number}"


def resolve_deletable_versions(
    artifact_names: Iterable[str],
    *,
    query: VersionQueryService,
) -> list[str]:
    """Resolve flow names to ``{name}-{version}`` identifiers for every remote version.

    ``query`` is called once for the whole batch and never for an empty one.
    Output follows the order of ``artifact_names``, versions ascending; names
    without remote versions contribute nothing.

    Flow API names are case-insensitive in the org, so records are matched to
    the requested names ignoring case and reported with the org's spelling.
    """

    requested: dict[str, str] = {}
    for name in bare_artifact_names(artifact_names):
        requested.setdefault(name.casefold(), name)
    if not requested:
        return []

    names = list(requested.values())
    versions_by_key: dict[str, set[int]] = {key: set() for key in requested}
    remote_names: dict[str, str] = {}
    for record in query(names):
        key = record.artifact_name.casefold()
        versions = versions_by_key.get(key)
        if versions is None:
            log.debug("Ignoring version record for unrequested flow %s", record.artifact_name)
            continue
        if key not in remote_names and record.artifact_name != requested[key]:
            log.warning(
                "Flow %s is named %s in the org; using the org's name",
                requested[key],
                record.artifact_name,
            )
        remote_names.setdefault(key, record.artifact_name)
        versions.add(record.version_number)

    deletable: list[str] = []
    for key, versions in versions_by_key.items():
        if not versions:
            log.info("No remote versions found for %s", requested[key])
            continue
        name = remote_names[key]
        deletable.extend(
            format_deletable(RemoteVersionRecord(artifact_name=name, version_number=number))
            for number in sorted(versions)
        )
    return deletable


__all__ = [
    "RemoteVersionRecord",
    "bare_artifact_names",
    "format_deletable",
    "resolve_deletable_versions",
    "strip_version_suffix",
]
