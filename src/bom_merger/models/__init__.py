"""
Data models for the BOM merger.
"""

from .component import (
    Component, ComponentType, IdentityPolicy,
    component_identity, component_namespace, is_same_component
)
from .bom_document import Bom, Dependency, Metadata, Tool, DEFAULT_SPEC_VERSION
from .merge_request import MergeRequest, MergeMode, ValidationMode, SubjectDescriptor

__all__ = [
    "Component",
    "ComponentType",
    "IdentityPolicy",
    "component_identity",
    "component_namespace",
    "is_same_component",
    "Bom",
    "Dependency",
    "Metadata",
    "Tool",
    "DEFAULT_SPEC_VERSION",
    "MergeRequest",
    "MergeMode",
    "ValidationMode",
    "SubjectDescriptor"
]
