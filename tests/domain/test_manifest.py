from __future__ import annotations

from pathlib import Path

import pytest

from flowdelete.domain.errors import MalformedManifestError
from flowdelete.domain.manifest import (
    ManifestDocument,
    TypeEntry,
    find_type,
    normalize_types,
    parse_manifest,
    unique_members,
)


def test_parse_manifest_wraps_singleton_type_and_member() -> None:
    manifest = parse_manifest({"Package": {"types": {"members": "FlowA", "name": "Flow"}}})

    assert manifest.package.types == [TypeEntry(name="Flow", members=["FlowA"])]


def test_parse_manifest_accepts_list_shapes() -> None:
    manifest = parse_manifest(
        {
            "Package": {
                "types": [
                    {"members": ["FlowA", "FlowB"], "name": "Flow"},
                    {"members": "Handler", "name": "ApexClass"},
                ]
            }
        }
    )

    assert [entry.name for entry in manifest.package.types] == ["Flow", "ApexClass"]
    assert manifest.package.types[0].members == ["FlowA", "FlowB"]
    assert manifest.package.types[1].members == ["Handler"]


def test_parse_manifest_handles_type_without_members() -> None:
    manifest = parse_manifest({"Package": {"types": {"name": "Flow"}}})

    assert find_type(manifest, "Flow").members == []


def test_parse_manifest_keeps_unknown_fields() -> None:
    payload = {
        "Package": {
            "@_xmlns": "http://soap.sforce.com/2006/04/metadata",
            "types": {"members": "FlowA", "name": "Flow"},
            "version": "59.0",
        }
    }

    dumped = parse_manifest(payload).to_payload()
    package = dumped["Package"]

    assert isinstance(package, dict)
    assert package["version"] == "59.0"
    assert package["@_xmlns"] == "http://soap.sforce.com/2006/04/metadata"


def test_parse_manifest_accepts_empty_package() -> None:
    manifest = parse_manifest({"Package": ""})

    assert manifest.package.types == []


def test_parse_manifest_folds_repeated_types(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("WARNING")

    manifest = parse_manifest(
        {
            "Package": {
                "types": [
                    {"members": ["FlowA", "FlowB"], "name": "Flow"},
                    {"members": ["FlowB", "FlowC"], "name": "Flow"},
                ]
            }
        }
    )

    assert manifest.package.types == [TypeEntry(name="Flow", members=["FlowA", "FlowB", "FlowC"])]
    assert "more than once" in caplog.text


def test_parse_manifest_rejects_missing_root() -> None:
    with pytest.raises(MalformedManifestError) as exc:
        parse_manifest({"CustomObject": {}}, path=Path("package.xml"))

    assert "package.xml" in str(exc.value)
    assert "Package" in str(exc.value)


def test_parse_manifest_rejects_non_mapping() -> None:
    with pytest.raises(MalformedManifestError):
        parse_manifest(["Package"])


def test_parse_manifest_rejects_type_without_name() -> None:
    with pytest.raises(MalformedManifestError):
        parse_manifest({"Package": {"types": {"members": "FlowA"}}})


def test_parse_manifest_returns_document_unchanged() -> None:
    document = ManifestDocument.model_validate({"Package": {}})

    assert parse_manifest(document) is document


def test_find_type_returns_empty_entry_when_absent() -> None:
    entry = find_type({"Package": {"types": {"members": "A", "name": "ApexClass"}}}, "Flow")

    assert entry.name == "Flow"
    assert entry.members == []


def test_find_type_returns_a_copy() -> None:
    manifest = parse_manifest({"Package": {"types": {"members": "FlowA", "name": "Flow"}}})

    entry = find_type(manifest, "Flow")
    entry.members.append("FlowB")

    assert manifest.package.types[0].members == ["FlowA"]


def test_normalize_types_handles_every_shape() -> None:
    assert normalize_types(None) == []
    assert normalize_types({"name": "Flow"}) == [TypeEntry(name="Flow")]
    assert normalize_types([{"name": "Flow", "members": "A"}]) == [
        TypeEntry(name="Flow", members=["A"])
    ]


def test_normalize_types_rejects_invalid_entries() -> None:
    with pytest.raises(MalformedManifestError):
        normalize_types([{"members": "A"}])


def test_unique_members_keeps_first_occurrence() -> None:
    assert unique_members(["B", "A", "B", "C", "A"]) == ["B", "A", "C"]


def test_to_payload_keeps_input_element_order() -> None:
    manifest = parse_manifest(
        {
            "Package": {
                "@_xmlns": "http://soap.sforce.com/2006/04/metadata",
                "fullName": "Release",
                "description": "Spring release",
                "types": {"members": "FlowA", "name": "Flow"},
                "version": "59.0",
            }
        }
    )

    package = manifest.model_copy(deep=True).to_payload()["Package"]

    assert isinstance(package, dict)
    assert list(package) == ["@_xmlns", "fullName", "description", "types", "version"]


def test_to_payload_places_new_types_before_version() -> None:
    manifest = parse_manifest({"Package": {"fullName": "Release", "version": "59.0"}})
    manifest.package.types.append(TypeEntry(name="FlowDefinition", members=["FlowA"]))

    package = manifest.to_payload()["Package"]

    assert isinstance(package, dict)
    assert list(package) == ["fullName", "types", "version"]
