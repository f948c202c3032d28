"""In-memory model of package and destructive manifests.

The XML payload collapses singleton children to scalars, so ``types`` may arrive
as one mapping or as a list, and a type's ``members`` as one string or a list.
Both shapes are folded into lists at this boundary; code working with a parsed
``ManifestDocument`` never checks shapes again.

Fields other than ``types`` (``version``, ``fullName``, the ``@_xmlns``
attribute, ...) are kept as pydantic extras so they are written back untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Final, cast

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)

from .errors import MalformedManifestError

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)

PACKAGE_ROOT: Final[str] = "Package"
TYPES_KEY: Final[str] = "types"
VERSION_KEY: Final[str] = "version"


def _as_list(value: object) -> list[object]:
    if value is None:
        return []
    if isinstance(value, list | tuple):
        return list(value)
    return [value]


def unique_members(members: Iterable[str]) -> list[str]:
    """Drop repeated members, keeping the first occurrence of each."""

    return list(dict.fromkeys(members))


class ManifestBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class TypeEntry(ManifestBaseModel):
    """One ``<types>`` element: a metadata type name and its member names."""

    members: list[str] = Field(default_factory=list)
    name: str

    @field_validator("members", mode="before")
    @classmethod
    def _normalize_members(cls, value: object) -> list[str]:
        return [str(member) for member in _as_list(value) if member is not None and member != ""]

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_name(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


class Package(ManifestBaseModel):
    types: list[TypeEntry] = Field(default_factory=list)
    _key_order: list[str] = PrivateAttr(default_factory=list[str])

    @model_validator(mode="wrap")
    @classmethod
    def _remember_key_order(cls, value: object, handler: ValidatorFunctionWrapHandler) -> Package:
        package = handler(value)
        if isinstance(value, Mapping):
            package._key_order = [str(key) for key in value]  # noqa: SLF001
        return package

    @field_validator("types", mode="before")
    @classmethod
    def _normalize_types(cls, value: object) -> list[object]:
        return _as_list(value)

    @model_validator(mode="after")
    def _fold_repeated_types(self) -> Package:
        folded: dict[str, TypeEntry] = {}
        for entry in self.types:
            existing = folded.get(entry.name)
            if existing is None:
                folded[entry.name] = entry
                continue
            log.warning("Manifest lists type %s more than once; folding its members", entry.name)
            existing.members = unique_members([*existing.members, *entry.members])
        self.types = list(folded.values())
        return self

    def ordered_payload(self, dumped: dict[str, object]) -> dict[str, object]:
        """Arrange ``dumped`` in the element order the package was read with.

        Keys the input did not have go last, except ``types``, which goes before
        ``version`` as the metadata schema expects.
        """

        order = list(self._key_order)
        if TYPES_KEY not in order:
            position = order.index(VERSION_KEY) if VERSION_KEY in order else len(order)
            order.insert(position, TYPES_KEY)
        ordered = {key: dumped[key] for key in order if key in dumped}
        ordered.update(dumped)
        return ordered


class ManifestDocument(ManifestBaseModel):
    """Root of a manifest payload, ``{"Package": {...}}``."""

    package: Package = Field(alias=PACKAGE_ROOT)

    @field_validator("package", mode="before")
    @classmethod
    def _empty_package(cls, value: object) -> object:
        # <Package/> without attributes or children decodes to a blank scalar
        if value is None or value == "":
            return {}
        return value

    def to_payload(self) -> dict[str, object]:
        payload = self.model_dump(by_alias=True)
        package = cast("dict[str, object]", payload[PACKAGE_ROOT])
        payload[PACKAGE_ROOT] = self.package.ordered_payload(package)
        return payload


ManifestInput = ManifestDocument | Mapping[str, object]


def parse_manifest(payload: object, *, path: Path | None = None) -> ManifestDocument:
    """Validate a decoded manifest payload.

    Raises ``MalformedManifestError`` when the payload is not a mapping, has no
    ``Package`` root, or carries type entries that cannot be read.
    """

    if isinstance(payload, ManifestDocument):
        return payload
    if not isinstance(payload, Mapping) or PACKAGE_ROOT not in payload:
        raise MalformedManifestError(f"manifest has no {PACKAGE_ROOT} root", path=path)
    try:
        return ManifestDocument.model_validate(payload)
    except ValidationError as exc:
        raise MalformedManifestError(f"invalid manifest: {exc}", path=path) from exc


def normalize_types(raw: object) -> list[TypeEntry]:
    """Return ``raw`` as a list of type entries, whatever its serialized shape."""

    entries: list[TypeEntry] = []
    for item in _as_list(raw):
        if isinstance(item, TypeEntry):
            entries.append(item)
            continue
        try:
            entries.append(TypeEntry.model_validate(item))
        except ValidationError as exc:
            raise MalformedManifestError(f"invalid type entry: {exc}") from exc
    return entries


def find_type(manifest: ManifestInput, name: str) -> TypeEntry:
    """Return a copy of the entry for ``name``, or an empty entry if absent."""

    document = parse_manifest(manifest)
    for entry in document.package.types:
        if entry.name == name:
            return entry.model_copy(deep=True)
    return TypeEntry(name=name)


__all__ = [
    "PACKAGE_ROOT",
    "ManifestDocument",
    "ManifestInput",
    "Package",
    "TypeEntry",
    "find_type",
    "normalize_types",
    "parse_manifest",
    "unique_members",
]
