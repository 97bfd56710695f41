"""
Command-line interface for the BOM merger.
"""

import json
import sys
from pathlib import Path
from typing import List, Optional

import click
import yaml

from . import __version__
from .config import get_config_manager, AppConfig
from .error_handling import BOMMergerError, ExitCode
from .io import InputSources
from .logging import setup_logging, verbosity_level, LoggerConfig
from .models import IdentityPolicy, MergeMode, SubjectDescriptor, ValidationMode
from .orchestrator import MergeJob, MergeOrchestrator


@click.group()
@click.version_option(version=__version__)
@click.option(
    '--config', '-c',
    type=click.Path(exists=True, path_type=Path),
    help='Path to configuration file'
)
@click.option(
    '--verbose', '-v',
    count=True,
    help='Increase verbosity (use -v or -vv)'
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: int) -> None:
    """
    BOM merger - merge multiple CycloneDX BOMs into one.

    Supports flat merges with component deduplication and hierarchical
    merges that keep every input BOM as its own sub-tree.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config
    ctx.obj['verbose'] = verbose

    try:
        get_config_manager(config)
        setup_logging(LoggerConfig.from_app_config(console_level=verbosity_level(verbose)))
    except BOMMergerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(int(e.exit_code))


@cli.command()
@click.option(
    '--input-files',
    multiple=True,
    help='Input BOM filename(s), can be given multiple times'
)
@click.option(
    '--input-files-list',
    multiple=True,
    type=click.Path(dir_okay=False),
    help='File(s) with a list of input BOM filenames, one per line'
)
@click.option(
    '--input-files-nul-list',
    multiple=True,
    type=click.Path(dir_okay=False),
    help='File(s) with a list of input BOM filenames, separated by NUL characters'
)
@click.option(
    '--output-file',
    type=click.Path(dir_okay=False, path_type=Path),
    help='Output BOM filename, will write to stdout if no value provided'
)
@click.option(
    '--input-format',
    type=click.Choice(['autodetect', 'json'], case_sensitive=False),
    help='Specify input file format'
)
@click.option(
    '--output-format',
    type=click.Choice(['autodetect', 'json'], case_sensitive=False),
    help='Specify output file format'
)
@click.option(
    '--hierarchical',
    is_flag=True,
    default=False,
    help='Perform a hierarchical merge'
)
@click.option('--group', help='Provide the group of software the merged BOM describes')
@click.option('--name', help='Provide the name of software the merged BOM describes')
@click.option('--version', 'subject_version', help='Provide the version of software the merged BOM describes')
@click.option(
    '--validate-output',
    is_flag=True,
    default=False,
    help='Validate the merged BOM and do not write it when invalid'
)
@click.option(
    '--validate-output-relaxed',
    is_flag=True,
    default=False,
    help='Validate the merged BOM but write it even when invalid'
)
@click.option(
    '--spec-version',
    help='Spec version the merged BOM declares'
)
@click.option(
    '--load-workers',
    type=click.IntRange(min=1),
    help='Number of input files loaded concurrently'
)
@click.pass_context
def merge(
    ctx: click.Context,
    input_files: List[str],
    input_files_list: List[str],
    input_files_nul_list: List[str],
    output_file: Optional[Path],
    input_format: Optional[str],
    output_format: Optional[str],
    hierarchical: bool,
    group: Optional[str],
    name: Optional[str],
    subject_version: Optional[str],
    validate_output: bool,
    validate_output_relaxed: bool,
    spec_version: Optional[str],
    load_workers: Optional[int]
) -> None:
    """
    Merge two or more BOMs.

    Examples:

        # Flat merge, write to stdout
        bom-merger merge --input-files a.json --input-files b.json

        # Hierarchical merge into a file
        bom-merger merge --input-files a.json --input-files b.json \\
            --hierarchical --name app --version 1.0 --output-file merged.json

        # Read the input filenames from a list file
        bom-merger merge --input-files-list inputs.txt --validate-output
    """
    config = get_config_manager(ctx.obj.get('config_file')).get_config()

    job = create_merge_job(
        config,
        sources=InputSources(
            input_files=list(input_files),
            input_files_lists=list(input_files_list),
            input_files_nul_lists=list(input_files_nul_list)
        ),
        output_file=output_file,
        input_format=input_format,
        output_format=output_format,
        hierarchical=hierarchical,
        subject=SubjectDescriptor(
            name=name,
            version=subject_version,
            group=group,
            type=config.merge.subject_type
        ),
        validate_output=validate_output,
        validate_output_relaxed=validate_output_relaxed,
        spec_version=spec_version,
        load_workers=load_workers
    )

    orchestrator = MergeOrchestrator(config)
    result = orchestrator.run(job)

    if result.exit_code != ExitCode.SUCCESS:
        click.echo(f"Error: {result.message}", err=True)
        for message in result.validation_messages:
            click.echo(f"  {message}", err=True)

    sys.exit(int(result.exit_code))


@cli.command()
@click.option(
    '--format', '-f',
    type=click.Choice(['table', 'json', 'yaml'], case_sensitive=False),
    default='table',
    help='Output format for configuration display'
)
@click.pass_context
def config(ctx: click.Context, format: str) -> None:
    """
    Display current configuration settings.

    Shows the current configuration including defaults, file settings,
    and environment variable overrides.
    """
    try:
        config = get_config_manager(ctx.obj.get('config_file')).get_config()
    except BOMMergerError as e:
        click.echo(f"Error displaying configuration: {e}", err=True)
        sys.exit(int(e.exit_code))

    if format == 'json':
        click.echo(json.dumps(config.to_dict(), indent=2, default=str))
    elif format == 'yaml':
        click.echo(yaml.dump(config.to_dict(), default_flow_style=False))
    else:
        display_config_table(config)


def create_merge_job(
    config: AppConfig,
    sources: InputSources,
    output_file: Optional[Path],
    input_format: Optional[str],
    output_format: Optional[str],
    hierarchical: bool,
    subject: SubjectDescriptor,
    validate_output: bool,
    validate_output_relaxed: bool,
    spec_version: Optional[str],
    load_workers: Optional[int]
) -> MergeJob:
    """Create a merge job from CLI options, falling back to configured defaults."""
    if hierarchical:
        mode = MergeMode.HIERARCHICAL
    else:
        mode = MergeMode(config.merge.default_mode)

    if validate_output_relaxed:
        validation = ValidationMode.RELAXED
    elif validate_output:
        validation = ValidationMode.STRICT
    else:
        validation = ValidationMode(config.validation.mode)

    return MergeJob(
        sources=sources,
        output_file=output_file,
        input_format=input_format or config.loading.input_format,
        output_format=output_format or config.output.format,
        mode=mode,
        subject=subject,
        validation=validation,
        identity_policy=IdentityPolicy(config.merge.identity_policy),
        spec_version=spec_version or config.merge.spec_version,
        max_workers=load_workers or config.loading.max_workers
    )


def display_config_table(config: AppConfig) -> None:
    """Display configuration in table format."""
    click.echo("\nCurrent Configuration:")
    click.echo("-" * 50)

    for section_name, section_config in config.to_dict().items():
        click.echo(f"\n[{section_name.capitalize()}]")
        for key, value in section_config.items():
            click.echo(f"  {key}: {value}")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
