"""
Merge algorithms and the merge engine.
"""

from .deduplicator import Deduplicator, merge_tools
from .flat_merger import FlatMerger
from .hierarchical_merger import HierarchicalMerger, namespaced_ref
from .metadata_reconciler import MetadataReconciler
from .normalizer import Normalizer
from .merge_engine import MergeEngine, MergeResult

__all__ = [
    "Deduplicator",
    "merge_tools",
    "FlatMerger",
    "HierarchicalMerger",
    "namespaced_ref",
    "MetadataReconciler",
    "Normalizer",
    "MergeEngine",
    "MergeResult"
]
