import pytest

from bom_merger.error_handling import ExitCode, ParameterValidationError
from bom_merger.mergers import HierarchicalMerger, MergeEngine, namespaced_ref
from bom_merger.models import (
    Dependency, MergeMode, MergeRequest, SubjectDescriptor, ValidationMode
)
from bom_merger.validation import JsonSchemaValidator


@pytest.fixture
def sources(make_bom, lib, app):
    first = make_bom(
        lib("a", bom_ref="a"),
        lib("b", bom_ref="b"),
        subject=app("svc", "1"),
        dependencies=[Dependency(ref="a", depends_on=["b"])],
    )
    second = make_bom(lib("a", bom_ref="a"), subject=app("svc", "1"))
    third = make_bom(lib("c", bom_ref="c"), version=4)
    return [first, second, third]


def test_namespaced_ref_keeps_absent_refs_absent() -> None:
    assert namespaced_ref("svc@1", "a") == "svc@1:a"
    assert namespaced_ref("svc@1", None) is None


def test_every_input_becomes_one_boundary_sub_tree(sources, app) -> None:
    merger = HierarchicalMerger()
    merged = merger.merge(sources, app("product", "2.0"))

    boundary_refs = [component.bom_ref for component in merged.components]
    assert boundary_refs == ["svc@1", "svc@1#2", "bom-3@4"]
    assert merged.subject.bom_ref == "product@2.0"
    assert merged.dependency_for("product@2.0").depends_on == boundary_refs
    assert merger.get_merge_statistics()["sub_trees"] == 3


def test_identical_components_of_different_sources_stay_distinct(sources, app) -> None:
    merged = HierarchicalMerger().merge(sources, app("product", "2.0"))

    first, second, third = merged.components
    assert [component.bom_ref for component in first.components] == ["svc@1:a", "svc@1:b"]
    assert [component.bom_ref for component in second.components] == ["svc@1#2:a"]
    assert third.name == "bom-3"
    assert third.version == "4"
    assert merged.dependency_for("svc@1:a").depends_on == ["svc@1:b"]
    assert merged.dangling_refs() == []


def test_null_documents_are_skipped(sources, app) -> None:
    merger = HierarchicalMerger()
    merged = merger.merge([None] + sources[:1], app("product", "2.0"))

    assert len(merged.components) == 1
    assert merger.get_merge_statistics()["documents_skipped"] == 1


def test_merger_rejects_subject_without_version(sources, app) -> None:
    with pytest.raises(ParameterValidationError):
        HierarchicalMerger().merge(sources, app("product", None))

    with pytest.raises(ParameterValidationError):
        HierarchicalMerger().merge(sources, None)


def test_missing_name_is_reported_without_output(sources) -> None:
    emitted = []
    engine = MergeEngine()
    request = MergeRequest(
        documents=sources,
        mode=MergeMode.HIERARCHICAL,
        subject=SubjectDescriptor(version="2.0"),
    )

    result = engine.execute(request, emit=emitted.append)

    assert result.exit_code == ExitCode.PARAMETER_VALIDATION_ERROR
    assert result.document is None
    assert not result.output_written
    assert emitted == []


def test_hierarchical_output_passes_strict_validation(sources) -> None:
    emitted = []
    engine = MergeEngine(validator=JsonSchemaValidator())
    request = MergeRequest(
        documents=sources,
        mode=MergeMode.HIERARCHICAL,
        subject=SubjectDescriptor(name="product", version="2.0", group="acme"),
        validation=ValidationMode.STRICT,
    )

    result = engine.execute(request, emit=emitted.append)

    assert result.exit_code == ExitCode.SUCCESS, result.validation_messages
    assert result.output_written
    assert emitted == [result.document]
    assert result.document.subject.bom_ref == "acme.product@2.0"
    assert result.document.dependency_for("acme.product@2.0").depends_on == ["svc@1", "svc@1#2", "bom-3@4"]
