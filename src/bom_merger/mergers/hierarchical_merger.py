"""
Hierarchical merger that keeps every input BOM as its own sub-tree.
"""

import logging
from typing import List, Dict, Any, Optional, Set

from ..models import Bom, Component, ComponentType, Dependency, Metadata, component_namespace
from ..error_handling import ParameterValidationError
from .deduplicator import merge_tools

logger = logging.getLogger(__name__)


def namespaced_ref(namespace: str, bom_ref: Optional[str]) -> Optional[str]:
    """Prefix a bom-ref with a namespace, keeping absent refs absent."""
    if not bom_ref:
        return None
    return f"{namespace}:{bom_ref}"


class HierarchicalMerger:
    """
    Merges BOMs into a forest of per-source sub-trees under one subject.

    Each input document is wrapped in a boundary component: its own
    metadata subject when it has one, otherwise a synthesized application
    component. The document's components become the boundary's nested
    components and every bom-ref of the sub-tree is namespaced by the
    boundary, so descriptively identical components of different sources
    stay distinct.
    """

    def __init__(self):
        """Initialize the hierarchical merger."""
        self._merge_statistics: Dict[str, Any] = {}

    def merge(self, documents: List[Optional[Bom]], subject: Optional[Component]) -> Bom:
        """
        Merge documents hierarchically under a subject.

        Args:
            documents: Ordered input documents, ``None`` entries are skipped
            subject: Subject of the merged document, needs name and version

        Returns:
            Merged document

        Raises:
            ParameterValidationError: If the subject lacks a name or version
        """
        if subject is None or not subject.name or subject.version is None:
            raise ParameterValidationError(
                "Name and version must be specified when performing a hierarchical merge.",
                parameter="subject"
            )

        subject = subject.copy()
        if subject.bom_ref is None:
            subject.bom_ref = component_namespace(subject)

        merged = Bom(
            components=[],
            dependencies=[],
            metadata=Metadata(component=subject)
        )

        used_namespaces: Set[str] = {subject.bom_ref}
        boundary_refs: List[str] = []
        tool_lists = []
        documents_skipped = 0

        for index, document in enumerate(documents):
            if document is None:
                documents_skipped += 1
                continue

            document = document.copy()
            boundary = document.subject or self._synthesize_boundary(document, index)
            namespace = self._unique_namespace(component_namespace(boundary), used_namespaces)

            boundary.components = list(boundary.components or []) + list(document.components or [])
            self._namespace_component_refs(boundary, namespace)
            if boundary.bom_ref is None:
                boundary.bom_ref = namespace

            merged.components.append(boundary)
            boundary_refs.append(boundary.bom_ref)

            for dependency in document.dependencies or []:
                merged.dependencies.append(self._namespace_dependency(dependency, namespace))

            if document.metadata is not None:
                tool_lists.append(document.metadata.tools)

            logger.debug(f"Added sub-tree {boundary.bom_ref} with "
                         f"{len(boundary.components)} components")

        merged.dependencies.append(Dependency(ref=subject.bom_ref, depends_on=boundary_refs))
        merged.metadata.tools = merge_tools(tool_lists)

        self._merge_statistics = {
            "documents_seen": len(documents),
            "documents_skipped": documents_skipped,
            "sub_trees": len(boundary_refs),
            "components_out": sum(1 for _ in merged.all_components()),
            "dependencies_out": len(merged.dependencies)
        }

        logger.info(f"Hierarchical merge produced {len(boundary_refs)} sub-trees under {subject.bom_ref}")

        return merged

    def _synthesize_boundary(self, document: Bom, index: int) -> Component:
        """Create a boundary component for a document without a subject."""
        if document.serial_number:
            name = document.serial_number
        else:
            name = f"bom-{index + 1}"
        return Component(name=name, type=ComponentType.APPLICATION, version=str(document.version))

    def _unique_namespace(self, namespace: str, used_namespaces: Set[str]) -> str:
        """Return a namespace not used by an earlier sub-tree."""
        candidate = namespace
        counter = 2
        while candidate in used_namespaces:
            candidate = f"{namespace}#{counter}"
            counter += 1
        used_namespaces.add(candidate)
        return candidate

    def _namespace_component_refs(self, top_component: Component, namespace: str) -> None:
        """Namespace the bom-refs of a component and all nested components."""
        for component in top_component.iter_tree():
            component.bom_ref = namespaced_ref(namespace, component.bom_ref)

    def _namespace_dependency(self, dependency: Dependency, namespace: str) -> Dependency:
        """Return a copy of a dependency entry with namespaced refs."""
        depends_on = None
        if dependency.depends_on is not None:
            depends_on = [namespaced_ref(namespace, ref) for ref in dependency.depends_on]
        return Dependency(ref=namespaced_ref(namespace, dependency.ref), depends_on=depends_on)

    def get_merge_statistics(self) -> Dict[str, Any]:
        """Get statistics of the last merge."""
        return self._merge_statistics.copy()
