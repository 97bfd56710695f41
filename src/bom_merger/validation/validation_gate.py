"""
Validation gate deciding whether a merged BOM is emitted.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..models import Bom, ValidationMode
from ..codec import serialize_bom
from ..error_handling import ExitCode, SchemaValidationFailed
from .schema_validator import SchemaValidator, JsonSchemaValidator, ValidationResult

logger = logging.getLogger(__name__)


@dataclass
class GateOutcome:
    """What the gate did with a document."""

    exit_code: ExitCode
    emitted: bool
    validation: Optional[ValidationResult] = None
    error: Optional[SchemaValidationFailed] = None

    @property
    def messages(self) -> List[str]:
        """Validator messages, empty when validation did not run."""
        return list(self.validation.messages) if self.validation else []


class ValidationGate:
    """
    Validates a normalized document and controls its emission.

    - ``none``: emit without validating.
    - ``strict``: emit only a valid document.
    - ``relaxed``: always emit, but report an invalid document as failed
      once emission has completed.
    """

    def __init__(self, validator: Optional[SchemaValidator] = None, indent: Optional[int] = 2):
        """
        Initialize the gate.

        Args:
            validator: Schema validator, a ``JsonSchemaValidator`` by default
            indent: Indentation used when serializing for validation
        """
        self.validator = validator or JsonSchemaValidator()
        self.indent = indent

    def check(self, bom: Bom) -> ValidationResult:
        """
        Serialize and validate a document against its declared spec version.

        Args:
            bom: Document to validate

        Returns:
            Validation result
        """
        logger.info("Validating merged BOM...")
        result = self.validator.validate(serialize_bom(bom, self.indent), bom.spec_version)

        for message in result.messages:
            logger.warning(message)

        if result.valid:
            logger.info("Merged BOM validated successfully.")
        else:
            logger.warning("Merged BOM is not valid.")
        return result

    def run(
        self,
        bom: Bom,
        mode: ValidationMode,
        emit: Optional[Callable[[Bom], object]] = None
    ) -> GateOutcome:
        """
        Validate a document according to the mode and emit it if allowed.

        Args:
            bom: Normalized document
            mode: Validation mode
            emit: Callback writing the document, skipped when None

        Returns:
            Gate outcome with exit code, emission flag and validator messages
        """
        validation = None
        if mode != ValidationMode.NONE:
            validation = self.check(bom)

        error = None
        if validation is not None and not validation.valid:
            error = SchemaValidationFailed(
                "Merged BOM is not valid",
                spec_version=bom.spec_version,
                validation_messages=validation.messages
            )
            if mode == ValidationMode.STRICT:
                logger.warning(f"Not writing output, total {bom.component_count} components")
                return GateOutcome(
                    exit_code=ExitCode.SCHEMA_VALIDATION_FAILED,
                    emitted=False,
                    validation=validation,
                    error=error
                )

        emitted = False
        if emit is not None:
            emit(bom)
            emitted = True

        exit_code = ExitCode.SCHEMA_VALIDATION_FAILED if error is not None else ExitCode.SUCCESS
        return GateOutcome(exit_code=exit_code, emitted=emitted, validation=validation, error=error)
