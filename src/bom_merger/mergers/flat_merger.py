"""
Flat merger that unions the components and dependency graphs of several BOMs.
"""

import logging
from typing import List, Dict, Any, Optional

from ..models import Bom, Component, Dependency, Metadata, IdentityPolicy, component_namespace
from .deduplicator import Deduplicator, merge_tools

logger = logging.getLogger(__name__)


class FlatMerger:
    """
    Merges BOMs into one non-hierarchical document.

    Components are concatenated in input order and deduplicated by
    identity; input metadata subjects join the component list as ordinary
    components. Dependency entries are unioned by ref.
    """

    def __init__(self, identity_policy: IdentityPolicy = IdentityPolicy.DESCRIPTIVE):
        """
        Initialize the flat merger.

        Args:
            identity_policy: Field set that constitutes component identity
        """
        self.identity_policy = identity_policy
        self.subject_refs: List[str] = []
        self._merge_statistics: Dict[str, Any] = {}

    def merge(self, documents: List[Optional[Bom]], subject: Optional[Component] = None) -> Bom:
        """
        Merge documents into a single flat document.

        Input documents are never modified.

        Args:
            documents: Ordered input documents, ``None`` entries are skipped
            subject: Optional explicit subject of the merged document

        Returns:
            Merged document
        """
        deduplicator = Deduplicator(self.identity_policy)

        all_components: List[Component] = []
        all_dependencies: List[Dependency] = []
        tool_lists = []
        input_subject_refs: List[str] = []
        documents_skipped = 0

        for document in documents:
            if document is None:
                documents_skipped += 1
                continue

            document = document.copy()

            input_subject = document.subject
            if input_subject is not None:
                if input_subject.bom_ref is None:
                    input_subject.bom_ref = component_namespace(input_subject)
                all_components.append(input_subject)
                input_subject_refs.append(input_subject.bom_ref)

            all_components.extend(document.components or [])
            all_dependencies.extend(document.dependencies or [])
            if document.metadata is not None:
                tool_lists.append(document.metadata.tools)

        logger.info(f"Flat merging {len(all_components)} components from "
                    f"{len(documents) - documents_skipped} document(s)")

        components = deduplicator.deduplicate(all_components)
        dependencies = deduplicator.merge_dependencies(all_dependencies)

        # Input subject refs as they appear in the merged document, first-seen order
        self.subject_refs = []
        for ref in input_subject_refs:
            ref = deduplicator.resolve(ref)
            if ref not in self.subject_refs:
                self.subject_refs.append(ref)

        merged = Bom(
            components=components,
            dependencies=dependencies,
            metadata=Metadata(tools=merge_tools(tool_lists))
        )

        if subject is not None:
            subject = subject.copy()
            if subject.bom_ref is None:
                subject.bom_ref = component_namespace(subject)
            merged.metadata.component = subject

            subject_depends_on = [ref for ref in self.subject_refs if ref != subject.bom_ref]
            merged.dependencies = deduplicator.merge_dependencies(
                merged.dependencies + [Dependency(ref=subject.bom_ref, depends_on=subject_depends_on)]
            )

        self._merge_statistics = {
            "documents_seen": len(documents),
            "documents_skipped": documents_skipped,
            "components_in": len(all_components),
            "components_out": len(components),
            "dependencies_out": len(merged.dependencies),
            **deduplicator.get_deduplication_statistics()
        }

        logger.info(f"Flat merge produced {len(components)} components "
                    f"(reduced from {len(all_components)})")

        return merged

    def get_merge_statistics(self) -> Dict[str, Any]:
        """Get statistics of the last merge."""
        return self._merge_statistics.copy()
