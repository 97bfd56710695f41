"""
BOM Merger

Merges multiple CycloneDX bills of materials into a single document, either
flat with component deduplication or hierarchically with one sub-tree per
input BOM.
"""

__version__ = "0.1.0"
__author__ = "BOM Merger Team"

from .models import Bom, Component, Dependency, MergeRequest, MergeMode, ValidationMode, SubjectDescriptor
from .mergers import MergeEngine, MergeResult
from .error_handling import ExitCode, BOMMergerError

__all__ = [
    "Bom",
    "Component",
    "Dependency",
    "MergeRequest",
    "MergeMode",
    "ValidationMode",
    "SubjectDescriptor",
    "MergeEngine",
    "MergeResult",
    "ExitCode",
    "BOMMergerError"
]
