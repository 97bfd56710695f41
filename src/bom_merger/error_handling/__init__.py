"""
Error types and result codes for the BOM merger.
"""

from .exceptions import (
    ExitCode, BOMMergerError, ParameterValidationError, SchemaValidationFailed,
    InputLoadError, OutputWriteError, UnsupportedFormatError, ConfigurationError
)

__all__ = [
    "ExitCode",
    "BOMMergerError",
    "ParameterValidationError",
    "SchemaValidationFailed",
    "InputLoadError",
    "OutputWriteError",
    "UnsupportedFormatError",
    "ConfigurationError"
]
