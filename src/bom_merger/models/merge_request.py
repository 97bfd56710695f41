"""
Merge request model: caller supplied merge configuration.
"""

from dataclasses import dataclass
from typing import List, Optional
from enum import Enum

from .bom_document import Bom, DEFAULT_SPEC_VERSION
from .component import Component, ComponentType, IdentityPolicy, component_namespace
from ..error_handling import ParameterValidationError


class MergeMode(Enum):
    """Supported merge modes."""
    FLAT = "flat"
    HIERARCHICAL = "hierarchical"


class ValidationMode(Enum):
    """Schema validation modes for the merged output."""
    NONE = "none"
    STRICT = "strict"
    RELAXED = "relaxed"


@dataclass
class SubjectDescriptor:
    """
    Explicit description of the software the merged BOM is about.
    """

    name: Optional[str] = None
    version: Optional[str] = None
    group: Optional[str] = None
    type: ComponentType = ComponentType.APPLICATION

    @property
    def is_empty(self) -> bool:
        """Check if no identifying field was given."""
        return self.group is None and self.name is None and self.version is None

    def to_component(self) -> Component:
        """
        Build the subject component.

        The bom-ref is derived from group, name and version.

        Returns:
            New subject component
        """
        component = Component(
            name=self.name or "",
            type=self.type,
            group=self.group,
            version=self.version
        )
        component.bom_ref = component_namespace(component)
        return component


@dataclass
class MergeRequest:
    """
    Complete configuration of a single merge invocation.
    """

    documents: List[Optional[Bom]]
    mode: MergeMode = MergeMode.FLAT
    subject: Optional[SubjectDescriptor] = None
    validation: ValidationMode = ValidationMode.NONE
    identity_policy: IdentityPolicy = IdentityPolicy.DESCRIPTIVE
    spec_version: str = DEFAULT_SPEC_VERSION

    def __post_init__(self):
        """Post-initialization processing."""
        # Handle enum conversion
        if isinstance(self.mode, str):
            self.mode = MergeMode(self.mode.lower())
        if isinstance(self.validation, str):
            self.validation = ValidationMode(self.validation.lower())
        if isinstance(self.identity_policy, str):
            self.identity_policy = IdentityPolicy(self.identity_policy.lower())
        if self.subject is not None and self.subject.is_empty:
            self.subject = None

    @property
    def subject_component(self) -> Optional[Component]:
        """Get a freshly built subject component, if a subject was supplied."""
        return self.subject.to_component() if self.subject else None

    def validate_subject(self) -> None:
        """
        Check that a hierarchical merge has a named and versioned subject.

        Raises:
            ParameterValidationError: If name or version is missing
        """
        if self.mode == MergeMode.HIERARCHICAL:
            if self.subject is None or not self.subject.name or self.subject.version is None:
                raise ParameterValidationError(
                    "Name and version must be specified when performing a hierarchical merge.",
                    parameter="subject"
                )

    def validate(self) -> None:
        """
        Validate the request before any merge work starts.

        Raises:
            ParameterValidationError: If the configuration is self-contradictory
        """
        self.validate_subject()

        if not self.documents:
            raise ParameterValidationError("At least one input document is required", parameter="documents")
