from datetime import timezone

import pytest

from bom_merger.error_handling import ExitCode, ParameterValidationError
from bom_merger.models import (
    Bom, Component, ComponentType, Dependency, IdentityPolicy, MergeMode, MergeRequest, Metadata,
    SubjectDescriptor, ValidationMode, component_identity, component_namespace, is_same_component
)


def test_component_dict_round_trip_uses_cyclonedx_keys() -> None:
    data = {
        "type": "library",
        "bom-ref": "pkg:pypi/requests@2.31.0",
        "group": "psf",
        "name": "requests",
        "version": "2.31.0",
        "purl": "pkg:pypi/requests@2.31.0",
        "properties": [{"name": "origin", "value": "pypi"}],
    }

    component = Component.from_dict(data)

    assert component.bom_ref == "pkg:pypi/requests@2.31.0"
    assert component.type == ComponentType.LIBRARY
    assert component.to_dict() == data


def test_component_type_is_case_insensitive() -> None:
    assert Component(name="x", type="Operating-System").type == ComponentType.OPERATING_SYSTEM


def test_unknown_component_type_is_rejected() -> None:
    with pytest.raises(ValueError, match="gadget"):
        Component.from_dict({"type": "gadget", "name": "x"})


def test_component_namespace_includes_group_when_present() -> None:
    assert component_namespace(Component(name="app", version="1.0")) == "app@1.0"
    assert component_namespace(Component(name="app", version="1.0", group="acme")) == "acme.app@1.0"


def test_identity_policies() -> None:
    first = Component(name="a", version="1", bom_ref="ref-1")
    second = Component(name="a", version="1", bom_ref="ref-2")
    renamed = Component(name="b", version="1", bom_ref="ref-1")

    assert component_identity(first) == component_identity(second)
    assert component_identity(first, IdentityPolicy.FULL) != component_identity(second, IdentityPolicy.FULL)

    assert is_same_component(first, second)
    assert not is_same_component(first, second, IdentityPolicy.FULL)
    # a shared bom-ref is the stronger match under the descriptive policy
    assert is_same_component(first, renamed)
    assert not is_same_component(first, renamed, IdentityPolicy.FULL)


def test_bom_from_dict_accepts_legacy_shapes() -> None:
    bom = Bom.from_dict({
        "bomFormat": "CycloneDX",
        "specVersion": "1.5",
        "version": 3,
        "metadata": {
            "timestamp": "2024-01-02T03:04:05Z",
            "tools": {"components": [{"name": "syft", "version": "1.0"}]},
            "component": {"type": "application", "name": "app", "version": "1.0"},
        },
        "components": [{"type": "library", "name": "a", "bom-ref": "a"}],
        "dependencies": [{"ref": "a", "dependencies": [{"ref": "b"}]}],
    })

    assert bom.spec_version == "1.5"
    assert bom.version == 3
    assert bom.metadata.timestamp.year == 2024
    assert bom.metadata.tools[0].name == "syft"
    assert bom.subject.name == "app"
    assert bom.dependencies[0].depends_on == ["b"]


def test_dangling_refs_and_lookup() -> None:
    nested = Component(name="inner", bom_ref="inner")
    bom = Bom(
        components=[Component(name="outer", bom_ref="outer", components=[nested])],
        dependencies=[Dependency(ref="outer", depends_on=["inner", "ghost"])],
    )

    assert bom.find_component("inner") is nested
    assert bom.all_bom_refs() == {"outer", "inner"}
    assert bom.dangling_refs() == ["ghost"]
    assert bom.component_count == 1
    assert bom.get_statistics()["total_component_count"] == 2


def test_subject_descriptor_builds_subject_with_namespace_ref() -> None:
    subject = SubjectDescriptor(name="app", version="2.0", group="acme").to_component()

    assert subject.type == ComponentType.APPLICATION
    assert subject.bom_ref == "acme.app@2.0"
    assert SubjectDescriptor().is_empty


def test_merge_request_converts_strings_and_drops_empty_subject() -> None:
    request = MergeRequest(
        documents=[Bom()],
        mode="hierarchical",
        validation="relaxed",
        identity_policy="full",
        subject=SubjectDescriptor(name="app", version="1"),
    )
    assert request.mode == MergeMode.HIERARCHICAL
    assert request.validation == ValidationMode.RELAXED
    assert request.identity_policy == IdentityPolicy.FULL

    assert MergeRequest(documents=[Bom()], subject=SubjectDescriptor()).subject is None


def test_hierarchical_request_requires_name_and_version() -> None:
    request = MergeRequest(
        documents=[Bom()],
        mode=MergeMode.HIERARCHICAL,
        subject=SubjectDescriptor(name="app"),
    )

    with pytest.raises(ParameterValidationError) as excinfo:
        request.validate()
    assert excinfo.value.exit_code == ExitCode.PARAMETER_VALIDATION_ERROR


def test_request_without_documents_is_rejected() -> None:
    with pytest.raises(ParameterValidationError):
        MergeRequest(documents=[]).validate()


@pytest.mark.parametrize("name", [None, ""])
def test_hierarchical_request_rejects_missing_or_blank_name(name) -> None:
    request = MergeRequest(
        documents=[],
        mode=MergeMode.HIERARCHICAL,
        subject=SubjectDescriptor(name=name, version="1.0"),
    )

    with pytest.raises(ParameterValidationError):
        request.validate_subject()


@pytest.mark.parametrize("timestamp, microsecond", [
    ("2024-05-01T10:00:00Z", 0),
    ("2024-05-01T10:00:00.1Z", 100000),
    ("2024-05-01T10:00:00.123456789Z", 123456),
    ("2024-05-01T12:00:00.25+02:00", 250000),
])
def test_metadata_accepts_rfc3339_timestamps(timestamp, microsecond) -> None:
    metadata = Metadata.from_dict({"timestamp": timestamp})

    assert metadata.timestamp.microsecond == microsecond
    assert metadata.timestamp.utcoffset() is not None
    assert metadata.timestamp.astimezone(timezone.utc).hour == 10
