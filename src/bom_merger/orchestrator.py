"""
Orchestration of a merge run: gather inputs, load, merge and write output.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .models import MergeMode, MergeRequest, SubjectDescriptor, ValidationMode, IdentityPolicy
from .config import AppConfig, get_config
from .codec import BomFormat, auto_detect_format
from .io import InputSources, OutputSink, collect_input_files, report_input_files, load_documents
from .mergers import MergeEngine, MergeResult
from .validation import SchemaValidator
from .error_handling import BOMMergerError, ParameterValidationError, UnsupportedFormatError

logger = logging.getLogger(__name__)


@dataclass
class MergeJob:
    """
    One merge run as requested on the command line.

    Attributes:
        sources: Where input file names come from
        output_file: Output file, stdout when None
        input_format: Format of the input files
        output_format: Format of the output
        mode: Merge mode
        subject: Explicit subject of the merged document
        validation: Validation mode for the output
        identity_policy: Component identity policy of a flat merge
        spec_version: Spec version the output declares
        max_workers: Concurrent input loads
    """
    sources: InputSources = field(default_factory=InputSources)
    output_file: Optional[Union[str, Path]] = None
    input_format: str = BomFormat.AUTODETECT.value
    output_format: str = BomFormat.AUTODETECT.value
    mode: MergeMode = MergeMode.FLAT
    subject: Optional[SubjectDescriptor] = None
    validation: ValidationMode = ValidationMode.NONE
    identity_policy: IdentityPolicy = IdentityPolicy.DESCRIPTIVE
    spec_version: Optional[str] = None
    max_workers: Optional[int] = None


class MergeOrchestrator:
    """
    Coordinates a complete merge run.

    Parameters are checked before any input is read: the output format must
    be known and a hierarchical merge needs a subject name and version.
    Inputs are then loaded, merged by the ``MergeEngine`` and written by an
    ``OutputSink``. Every failure ends up as a ``MergeResult``.
    """

    def __init__(self, config: Optional[AppConfig] = None, validator: Optional[SchemaValidator] = None):
        """
        Initialize the orchestrator.

        Args:
            config: Application configuration
            validator: Schema validator handed to the merge engine
        """
        self.config = config or get_config()
        self.engine = MergeEngine(validator=validator, config=self.config)

        self._orchestration_statistics = {
            "start_time": None,
            "end_time": None,
            "input_files": 0,
            "documents_loaded": 0,
            "exit_code": None
        }

    def run(self, job: MergeJob) -> MergeResult:
        """
        Run a merge job.

        Args:
            job: Merge job

        Returns:
            Merge result carrying the exit code
        """
        self._orchestration_statistics["start_time"] = datetime.now(timezone.utc)

        try:
            result = self._run(job)
        except BOMMergerError as e:
            logger.error(e.message)
            result = MergeResult(exit_code=e.exit_code, message=e.message)

        self._orchestration_statistics["end_time"] = datetime.now(timezone.utc)
        self._orchestration_statistics["exit_code"] = int(result.exit_code)
        return result

    def _run(self, job: MergeJob) -> MergeResult:
        output_format = self._resolve_output_format(job)

        request = MergeRequest(
            documents=[],
            mode=job.mode,
            subject=job.subject,
            validation=job.validation,
            identity_policy=job.identity_policy,
            spec_version=job.spec_version or self.config.merge.spec_version
        )
        request.validate_subject()

        files = collect_input_files(job.sources)
        report_input_files(job.sources, files)
        if files is None:
            raise ParameterValidationError("No input files were given", parameter="input_files")
        self._orchestration_statistics["input_files"] = len(files)

        max_workers = job.max_workers or self.config.loading.max_workers
        request.documents = load_documents(files, job.input_format, max_workers)
        self._orchestration_statistics["documents_loaded"] = len(request.documents)

        sink = OutputSink(job.output_file, output_format, self.config.output.indent)
        result = self.engine.execute(request, emit=sink.write)

        if result.output_written and not sink.to_console:
            logger.info(f"Merged BOM written to {job.output_file}")
        return result

    def _resolve_output_format(self, job: MergeJob) -> BomFormat:
        """
        Determine the output format.

        Raises:
            UnsupportedFormatError: If the format name is unknown
            ParameterValidationError: If the format cannot be detected from the output file name
        """
        try:
            output_format = BomFormat(job.output_format.lower())
        except ValueError:
            raise UnsupportedFormatError(f"Unsupported output format: {job.output_format}",
                                         bom_format=job.output_format)

        if output_format != BomFormat.AUTODETECT:
            return output_format

        if job.output_file is None:
            return BomFormat.JSON

        detected = auto_detect_format(job.output_file)
        if detected == BomFormat.AUTODETECT:
            raise ParameterValidationError(
                "Unable to auto-detect output format from output filename. Please specify a value for --output-format.",
                parameter="output_format"
            )
        return detected

    def get_orchestration_statistics(self) -> Dict[str, Any]:
        """
        Get orchestration statistics.

        Returns:
            Statistics of the last run together with engine statistics
        """
        stats = self._orchestration_statistics.copy()
        stats["engine"] = self.engine.get_engine_statistics()
        return stats
