"""
Schema validation of merged BOMs.
"""

from .schema_validator import (
    SchemaValidator, JsonSchemaValidator, ValidationResult, SUPPORTED_SPEC_VERSIONS
)
from .validation_gate import ValidationGate, GateOutcome

__all__ = [
    "SchemaValidator",
    "JsonSchemaValidator",
    "ValidationResult",
    "SUPPORTED_SPEC_VERSIONS",
    "ValidationGate",
    "GateOutcome"
]
