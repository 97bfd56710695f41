import json
from pathlib import Path

from click.testing import CliRunner

from bom_merger import __version__
from bom_merger.cli import cli
from bom_merger.models import Bom, Component, Dependency, Metadata


def sample_files(write_bom_file):
    first = write_bom_file("first.json", Bom(
        components=[Component(name="a", version="1", bom_ref="a"), Component(name="b", version="1", bom_ref="b")],
        dependencies=[Dependency(ref="a", depends_on=["b"])],
        metadata=Metadata(component=Component(name="svc", version="1", type="application")),
    ))
    second = write_bom_file("second.json", Bom(
        components=[Component(name="b", version="1", bom_ref="b"), Component(name="c", version="1", bom_ref="c")],
    ))
    return first, second


def test_version_option() -> None:
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_flat_merge_to_file(write_bom_file, tmp_path: Path) -> None:
    first, second = sample_files(write_bom_file)
    output = tmp_path / "out" / "merged.cdx.json"

    result = CliRunner().invoke(cli, [
        "merge", "--input-files", str(first), "--input-files", str(second),
        "--output-file", str(output), "--validate-output",
    ])

    assert result.exit_code == 0, result.output
    merged = json.loads(output.read_text(encoding="utf-8"))
    assert [component["name"] for component in merged["components"]] == ["a", "b", "c"]
    assert merged["metadata"]["component"]["bom-ref"] == "svc@1"
    assert merged["version"] == 1
    assert merged["serialNumber"].startswith("urn:uuid:")


def test_flat_merge_to_stdout(write_bom_file) -> None:
    first, second = sample_files(write_bom_file)

    result = CliRunner().invoke(cli, ["merge", "--input-files", str(first), "--input-files", str(second)])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["bomFormat"] == "CycloneDX"


def test_hierarchical_merge_from_list_file(write_bom_file, tmp_path: Path) -> None:
    first, second = sample_files(write_bom_file)
    list_file = tmp_path / "inputs.txt"
    list_file.write_text(f"{first}\n{second}\n", encoding="utf-8")
    output = tmp_path / "merged.json"

    result = CliRunner().invoke(cli, [
        "merge", "--input-files-list", str(list_file), "--output-file", str(output),
        "--hierarchical", "--group", "acme", "--name", "product", "--version", "2.0",
    ])

    assert result.exit_code == 0, result.output
    merged = json.loads(output.read_text(encoding="utf-8"))
    assert merged["metadata"]["component"]["bom-ref"] == "acme.product@2.0"
    assert [component["bom-ref"] for component in merged["components"]] == ["svc@1", "bom-2@1"]


def test_hierarchical_merge_without_version_writes_nothing(write_bom_file, tmp_path: Path) -> None:
    first, second = sample_files(write_bom_file)
    output = tmp_path / "merged.json"

    result = CliRunner().invoke(cli, [
        "merge", "--input-files", str(first), "--input-files", str(second),
        "--output-file", str(output), "--hierarchical", "--name", "product",
    ])

    assert result.exit_code == 1
    assert not output.exists()


def test_undetectable_output_format_is_a_parameter_error(write_bom_file, tmp_path: Path) -> None:
    first, _ = sample_files(write_bom_file)
    output = tmp_path / "merged.txt"

    result = CliRunner().invoke(cli, ["merge", "--input-files", str(first), "--output-file", str(output)])

    assert result.exit_code == 1
    assert not output.exists()


def test_explicit_output_format_allows_any_file_name(write_bom_file, tmp_path: Path) -> None:
    first, _ = sample_files(write_bom_file)
    output = tmp_path / "merged.txt"

    result = CliRunner().invoke(cli, [
        "merge", "--input-files", str(first), "--output-file", str(output), "--output-format", "json",
    ])

    assert result.exit_code == 0
    assert json.loads(output.read_text(encoding="utf-8"))["bomFormat"] == "CycloneDX"


def test_missing_input_is_an_io_error(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, [
        "merge", "--input-files", str(tmp_path / "missing.json"), "--output-file", str(tmp_path / "merged.json"),
    ])

    assert result.exit_code == 3
    assert not (tmp_path / "merged.json").exists()


def test_no_input_files_is_a_parameter_error() -> None:
    result = CliRunner().invoke(cli, ["merge"])

    assert result.exit_code == 1


def test_strict_and_relaxed_validation_exit_codes(write_bom_file, tmp_path: Path) -> None:
    dangling = write_bom_file("dangling.json", Bom(
        components=[Component(name="a", bom_ref="a")],
        dependencies=[Dependency(ref="ghost", depends_on=["a"])],
    ))
    strict_output = tmp_path / "strict.json"
    relaxed_output = tmp_path / "relaxed.json"
    runner = CliRunner()

    strict = runner.invoke(cli, [
        "merge", "--input-files", str(dangling), "--output-file", str(strict_output), "--validate-output",
    ])
    relaxed = runner.invoke(cli, [
        "merge", "--input-files", str(dangling), "--output-file", str(relaxed_output), "--validate-output-relaxed",
    ])

    assert strict.exit_code == 4
    assert not strict_output.exists()
    assert relaxed.exit_code == 4
    assert relaxed_output.exists()


def test_config_file_sets_merge_defaults(write_bom_file, tmp_path: Path) -> None:
    first, second = sample_files(write_bom_file)
    config_file = tmp_path / "bom-merger.yaml"
    config_file.write_text("merge:\n  spec_version: '1.5'\n", encoding="utf-8")
    output = tmp_path / "merged.json"

    result = CliRunner().invoke(cli, [
        "--config", str(config_file),
        "merge", "--input-files", str(first), "--input-files", str(second), "--output-file", str(output),
    ])

    assert result.exit_code == 0, result.output
    assert json.loads(output.read_text(encoding="utf-8"))["specVersion"] == "1.5"


def test_config_command_outputs_json() -> None:
    result = CliRunner().invoke(cli, ["config", "--format", "json"])

    assert result.exit_code == 0
    config = json.loads(result.stdout)
    assert config["merge"]["default_mode"] == "flat"
    assert config["loading"]["max_workers"] == 1


def test_config_command_table() -> None:
    result = CliRunner().invoke(cli, ["config"])

    assert result.exit_code == 0
    assert "[Merge]" in result.output
    assert "identity_policy: descriptive" in result.output
