import logging

from bom_merger.config import AppConfig, OutputConfig
from bom_merger.error_handling import ExitCode
from bom_merger.mergers import MergeEngine
from bom_merger.models import Dependency, IdentityPolicy, MergeRequest, SubjectDescriptor, ValidationMode
from bom_merger.validation import JsonSchemaValidator


def test_execute_merges_and_emits(make_bom, lib, app) -> None:
    emitted = []
    engine = MergeEngine(validator=JsonSchemaValidator())
    request = MergeRequest(
        documents=[make_bom(lib("a"), lib("b")), None, make_bom(lib("b"), lib("c"))],
        subject=SubjectDescriptor(name="product", version="1.0"),
        validation=ValidationMode.STRICT,
    )

    result = engine.execute(request, emit=emitted.append)

    assert result.exit_code == ExitCode.SUCCESS, result.validation_messages
    assert result.success
    assert result.output_written
    assert [component.name for component in result.document.components] == ["a", "b", "c"]
    assert result.document.subject.bom_ref == "product@1.0"
    assert result.statistics["documents_skipped"] == 1
    assert emitted == [result.document]
    assert engine.get_engine_statistics()["outputs_written"] == 1


def test_dangling_reference_fails_strict_validation_without_output(make_bom, lib) -> None:
    emitted = []
    document = make_bom(lib("a"), dependencies=[Dependency(ref="ghost", depends_on=["pkg:generic/a@1.0"])])
    request = MergeRequest(documents=[document], validation=ValidationMode.STRICT)

    result = MergeEngine(validator=JsonSchemaValidator()).execute(request, emit=emitted.append)

    assert result.exit_code == ExitCode.SCHEMA_VALIDATION_FAILED
    assert not result.output_written
    assert emitted == []
    assert result.document is not None
    assert any("ghost" in message for message in result.validation_messages)


def test_dangling_reference_is_written_in_relaxed_mode(make_bom, lib) -> None:
    emitted = []
    document = make_bom(lib("a"), dependencies=[Dependency(ref="ghost")])
    request = MergeRequest(documents=[document], validation=ValidationMode.RELAXED)

    result = MergeEngine(validator=JsonSchemaValidator()).execute(request, emit=emitted.append)

    assert result.exit_code == ExitCode.SCHEMA_VALIDATION_FAILED
    assert result.output_written
    assert len(emitted) == 1


def test_full_identity_policy_can_produce_duplicate_refs(make_bom, lib) -> None:
    first = make_bom(lib("a", bom_ref="shared"))
    second = make_bom(lib("b", bom_ref="shared"))
    request = MergeRequest(
        documents=[first, second],
        identity_policy=IdentityPolicy.FULL,
        validation=ValidationMode.STRICT,
    )

    result = MergeEngine(validator=JsonSchemaValidator()).execute(request)

    assert result.exit_code == ExitCode.SCHEMA_VALIDATION_FAILED
    assert "bom-ref is not unique: shared" in result.validation_messages


def test_empty_request_is_a_parameter_error() -> None:
    result = MergeEngine().execute(MergeRequest(documents=[]))

    assert result.exit_code == ExitCode.PARAMETER_VALIDATION_ERROR
    assert result.to_dict()["exit_code"] == 1


def test_loaded_component_count_includes_subjects(make_bom, lib, app, caplog) -> None:
    caplog.set_level(logging.INFO)
    documents = [make_bom(lib("a"), lib("b"), subject=app("svc", "1")), make_bom(lib("c"))]

    MergeEngine().merge(MergeRequest(documents=documents))

    assert "Loaded 2 input document(s) with 4 components originally" in caplog.text


def test_spec_version_of_request_is_declared(make_bom, lib) -> None:
    engine = MergeEngine(config=AppConfig(output=OutputConfig(indent=4)))

    merged = engine.merge(MergeRequest(documents=[make_bom(lib("a"))], spec_version="1.5"))

    assert merged.spec_version == "1.5"
    assert engine.gate.indent == 4


def test_full_identity_merge_adopts_input_subject_once(make_bom, lib, app) -> None:
    request = MergeRequest(
        documents=[make_bom(lib("a"), subject=app("svc", "1"))],
        identity_policy=IdentityPolicy.FULL,
        validation=ValidationMode.STRICT,
    )

    result = MergeEngine(validator=JsonSchemaValidator()).execute(request)

    assert result.exit_code == ExitCode.SUCCESS, result.validation_messages
    assert result.document.subject.bom_ref == "svc@1"
    assert [component.name for component in result.document.components] == ["a"]
