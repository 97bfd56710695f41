"""
Custom exceptions and result codes for the BOM merger.
"""

from enum import IntEnum
from typing import Optional, Dict, Any, List


class ExitCode(IntEnum):
    """Result codes surfaced to callers of a merge."""
    SUCCESS = 0
    PARAMETER_VALIDATION_ERROR = 1
    UNSUPPORTED_FORMAT = 2
    IO_ERROR = 3
    SCHEMA_VALIDATION_FAILED = 4


class BOMMergerError(Exception):
    """
    Base exception for all BOM merger errors.

    This is the root exception class that all other custom exceptions
    inherit from. Each subclass carries the exit code a caller should
    report for it.
    """

    exit_code: ExitCode = ExitCode.PARAMETER_VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize BOM merger error.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            context: Additional context information
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "exit_code": int(self.exit_code),
            "context": self.context,
            "cause": str(self.cause) if self.cause else None
        }

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [self.message]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"Context: {context_str}")

        if self.cause:
            parts.append(f"Caused by: {self.cause}")

        return " | ".join(parts)


class ParameterValidationError(BOMMergerError):
    """
    Exception for self-contradictory merge configuration.

    Raised before any merge work starts, e.g. when a hierarchical merge is
    requested without both a subject name and version.
    """

    exit_code = ExitCode.PARAMETER_VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize parameter validation error.

        Args:
            message: Error message
            parameter: Name of the offending parameter
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if parameter:
            context['parameter'] = parameter

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.parameter = parameter


class SchemaValidationFailed(BOMMergerError):
    """
    Exception for merged documents that fail schema validation.
    """

    exit_code = ExitCode.SCHEMA_VALIDATION_FAILED

    def __init__(
        self,
        message: str,
        spec_version: Optional[str] = None,
        validation_messages: Optional[List[str]] = None,
        **kwargs
    ):
        """
        Initialize schema validation failure.

        Args:
            message: Error message
            spec_version: Spec version the document was validated against
            validation_messages: Messages reported by the validator
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if spec_version:
            context['spec_version'] = spec_version
        if validation_messages:
            context['message_count'] = len(validation_messages)

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.spec_version = spec_version
        self.validation_messages = validation_messages or []


class InputLoadError(BOMMergerError):
    """
    Exception for input documents that cannot be read or parsed.

    A load failure aborts the merge before any merge algorithm runs.
    """

    exit_code = ExitCode.IO_ERROR

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize input load error.

        Args:
            message: Error message
            file_path: Path of the input that failed to load
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if file_path:
            context['file_path'] = file_path

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.file_path = file_path


class OutputWriteError(BOMMergerError):
    """
    Exception for a merged document that cannot be written.
    """

    exit_code = ExitCode.IO_ERROR

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.get('context', {})
        if file_path:
            context['file_path'] = file_path

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.file_path = file_path


class UnsupportedFormatError(BOMMergerError):
    """
    Exception for formats the codec cannot read or write.
    """

    exit_code = ExitCode.UNSUPPORTED_FORMAT

    def __init__(
        self,
        message: str,
        bom_format: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.get('context', {})
        if bom_format:
            context['bom_format'] = bom_format

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.bom_format = bom_format


class ConfigurationError(BOMMergerError):
    """
    Exception for configuration errors.

    This exception is raised when there are issues with
    configuration loading, validation, or usage.
    """

    exit_code = ExitCode.PARAMETER_VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        config_section: Optional[str] = None,
        config_key: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize configuration error.

        Args:
            message: Error message
            config_section: Configuration section with error
            config_key: Specific configuration key with error
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if config_section:
            context['config_section'] = config_section
        if config_key:
            context['config_key'] = config_key

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.config_section = config_section
        self.config_key = config_key
