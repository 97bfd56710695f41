"""
Merge engine running a complete merge: merge, reconcile, normalize and validate.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..models import Bom, MergeMode, MergeRequest
from ..config import AppConfig, get_config
from ..error_handling import BOMMergerError, ExitCode
from ..validation import SchemaValidator, JsonSchemaValidator, ValidationGate
from .flat_merger import FlatMerger
from .hierarchical_merger import HierarchicalMerger
from .metadata_reconciler import MetadataReconciler
from .normalizer import Normalizer

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """
    Structured outcome of a merge.

    Attributes:
        exit_code: Result code for the caller
        message: Human readable summary
        document: Normalized merged document, None if the merge failed
        validation_messages: Messages reported by the schema validator
        statistics: Merge counters
        output_written: Whether the document was emitted
    """
    exit_code: ExitCode
    message: str = ""
    document: Optional[Bom] = None
    validation_messages: List[str] = field(default_factory=list)
    statistics: Dict[str, Any] = field(default_factory=dict)
    output_written: bool = False

    @property
    def success(self) -> bool:
        return self.exit_code == ExitCode.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        return {
            "exit_code": int(self.exit_code),
            "message": self.message,
            "validation_messages": list(self.validation_messages),
            "statistics": dict(self.statistics),
            "output_written": self.output_written
        }


class MergeEngine:
    """
    Runs merge requests.

    A merge request is validated, merged flat or hierarchically, its
    subject reconciled and the result normalized. ``execute`` additionally
    passes the document through the validation gate and converts merge
    errors into a ``MergeResult``.
    """

    def __init__(self, validator: Optional[SchemaValidator] = None, config: Optional[AppConfig] = None):
        """
        Initialize the merge engine.

        Args:
            validator: Schema validator used by the validation gate
            config: Application configuration, the global one by default
        """
        self.config = config or get_config()
        if validator is None:
            validator = JsonSchemaValidator(self.config.validation.schema_dir)
        self.normalizer = Normalizer()
        self.gate = ValidationGate(validator, indent=self.config.output.indent)

        self._engine_statistics = {
            "merges_run": 0,
            "merges_failed": 0,
            "documents_merged": 0,
            "outputs_written": 0
        }
        self._last_merge_statistics: Dict[str, Any] = {}

    def merge(self, request: MergeRequest) -> Bom:
        """
        Merge the documents of a request into one normalized document.

        Args:
            request: Merge request

        Returns:
            Normalized merged document

        Raises:
            ParameterValidationError: If the request is invalid
        """
        request.validate()

        documents = list(request.documents)
        self._report_inputs(documents)

        subject = request.subject_component

        subject_refs = None
        if request.mode == MergeMode.HIERARCHICAL:
            merger = HierarchicalMerger()
            merged = merger.merge(documents, subject)
        else:
            merger = FlatMerger(request.identity_policy)
            merged = merger.merge(documents, subject)
            subject_refs = merger.subject_refs

        reconciler = MetadataReconciler(request.identity_policy)
        reconciler.reconcile(merged, documents, request.mode, subject, subject_refs)

        self.normalizer.normalize(merged, request.spec_version)

        self._last_merge_statistics = merger.get_merge_statistics()
        logger.info(f"Merged {len(documents)} document(s) into {merged.component_count} components")

        return merged

    def execute(
        self,
        request: MergeRequest,
        emit: Optional[Callable[[Bom], object]] = None
    ) -> MergeResult:
        """
        Run a merge end to end.

        Args:
            request: Merge request
            emit: Callback writing the merged document, e.g. ``OutputSink.write``

        Returns:
            Merge result, never raises for merge errors
        """
        self._engine_statistics["merges_run"] += 1
        self._last_merge_statistics = {}

        try:
            merged = self.merge(request)
            outcome = self.gate.run(merged, request.validation, emit)
        except BOMMergerError as e:
            self._engine_statistics["merges_failed"] += 1
            logger.error(e.message)
            return MergeResult(
                exit_code=e.exit_code,
                message=e.message,
                statistics=dict(self._last_merge_statistics)
            )

        self._engine_statistics["documents_merged"] += len(request.documents)
        if outcome.emitted:
            self._engine_statistics["outputs_written"] += 1

        if outcome.error is not None:
            self._engine_statistics["merges_failed"] += 1
            message = outcome.error.message
        else:
            message = f"Merged {len(request.documents)} document(s)"

        return MergeResult(
            exit_code=outcome.exit_code,
            message=message,
            document=merged,
            validation_messages=outcome.messages,
            statistics=dict(self._last_merge_statistics),
            output_written=outcome.emitted
        )

    def _report_inputs(self, documents: List[Optional[Bom]]) -> None:
        """Log the number of input documents and components, subjects included."""
        present = [document for document in documents if document is not None]
        component_count = sum(
            document.component_count + (1 if document.subject is not None else 0)
            for document in present
        )
        logger.info(f"Loaded {len(present)} input document(s) with {component_count} components "
                    f"originally (overlaps to merge are possible)")

    def get_engine_statistics(self) -> Dict[str, Any]:
        """
        Get engine statistics.

        Returns:
            Counters of the merges run by this engine
        """
        return self._engine_statistics.copy()
