"""
Metadata reconciler that settles the single subject of a merged BOM.
"""

import logging
from typing import List, Dict, Optional

from ..models import (
    Bom, Component, Dependency, Metadata, MergeMode, IdentityPolicy, component_namespace, is_same_component
)

logger = logging.getLogger(__name__)


class MetadataReconciler:
    """
    Ensures a merged document has exactly one subject component.

    An explicit subject always wins. In flat mode without one, the first
    input subject is adopted by the bom-ref it carries in the merged
    document. Components that share the subject's bom-ref, or in flat mode
    are identity-equal to the subject, are collapsed into the subject so
    the document never claims the same identity twice.
    """

    def __init__(self, identity_policy: IdentityPolicy = IdentityPolicy.DESCRIPTIVE):
        self.identity_policy = identity_policy

    def reconcile(
        self,
        merged: Bom,
        documents: List[Optional[Bom]],
        mode: MergeMode,
        explicit_subject: Optional[Component] = None,
        subject_refs: Optional[List[str]] = None
    ) -> Bom:
        """
        Settle the subject of a merged document.

        Args:
            merged: Document produced by a merger, modified in place
            documents: Input documents of the merge, in order
            mode: Merge mode that produced the document
            explicit_subject: Caller supplied subject, if any
            subject_refs: Merged bom-refs of the input subjects, as recorded by
                ``FlatMerger``; derived from the inputs when not given

        Returns:
            The reconciled document
        """
        if merged.metadata is None:
            merged.metadata = Metadata()

        if explicit_subject is not None:
            if merged.metadata.component is None:
                merged.metadata.component = explicit_subject.copy()
        elif mode == MergeMode.FLAT:
            adopted = self._adopt_first_subject(merged, documents, subject_refs)
            if adopted is not None:
                merged.metadata.component = adopted
                logger.info(f"Adopted input subject {adopted.full_name} as merged subject")

        return self.collapse_subject(merged, match_identity=(mode == MergeMode.FLAT))

    def _adopt_first_subject(
        self,
        merged: Bom,
        documents: List[Optional[Bom]],
        subject_refs: Optional[List[str]]
    ) -> Optional[Component]:
        """
        Find the first input subject in the merged document.

        The merged component carrying the subject's bom-ref is preferred over
        the input object. The adopted subject always has a bom-ref.
        """
        input_subject = next(
            (document.subject for document in documents if document is not None and document.subject is not None),
            None
        )
        if input_subject is None:
            return None

        if subject_refs:
            ref = subject_refs[0]
        else:
            ref = input_subject.bom_ref or component_namespace(input_subject)

        for component in merged.components or []:
            if component.bom_ref == ref:
                return component

        adopted = input_subject.copy()
        adopted.bom_ref = ref
        return adopted

    def collapse_subject(self, merged: Bom, match_identity: bool = True) -> Bom:
        """
        Remove components duplicating the subject.

        A component duplicates the subject when it carries the subject's
        bom-ref or, with ``match_identity``, is identity-equal to it. Refs of
        removed components become aliases of the subject's ref, dependency
        edges are rewritten through them and all dependency entries of the
        subject are unioned into one. Nested components of a removed
        duplicate move under the subject.

        Args:
            merged: Document to clean up, modified in place
            match_identity: Also remove identity-equal components

        Returns:
            The cleaned document
        """
        subject = merged.subject
        if subject is None or not subject.bom_ref:
            return merged

        aliases: Dict[str, str] = {}
        orphans: List[Component] = []
        removed = self._remove_duplicates(merged.components, subject, match_identity, aliases, orphans)
        if removed:
            logger.debug(f"Collapsed {removed} duplicate(s) of subject {subject.bom_ref}")

        if orphans:
            if subject.components is None:
                subject.components = []
            subject.components.extend(orphans)

        if merged.dependencies:
            merged.dependencies = self._union_subject_dependencies(merged.dependencies, subject.bom_ref, aliases)

        return merged

    def _is_duplicate(self, component: Component, subject: Component, match_identity: bool) -> bool:
        if component.bom_ref == subject.bom_ref:
            return True
        return match_identity and is_same_component(component, subject, self.identity_policy)

    def _remove_duplicates(
        self,
        components: Optional[List[Component]],
        subject: Component,
        match_identity: bool,
        aliases: Dict[str, str],
        orphans: List[Component]
    ) -> int:
        """Recursively remove duplicates of the subject, recording their refs as aliases."""
        if not components:
            return 0

        removed = 0
        kept: List[Component] = []
        for component in components:
            if component is not subject and self._is_duplicate(component, subject, match_identity):
                removed += 1
                if component.bom_ref and component.bom_ref != subject.bom_ref:
                    aliases[component.bom_ref] = subject.bom_ref
                removed += self._remove_duplicates(component.components, subject, match_identity, aliases, orphans)
                orphans.extend(component.components or [])
                continue
            if component is subject:
                removed += 1
                continue
            removed += self._remove_duplicates(component.components, subject, match_identity, aliases, orphans)
            kept.append(component)

        components[:] = kept
        return removed

    def _union_subject_dependencies(
        self,
        dependencies: List[Dependency],
        subject_ref: str,
        aliases: Dict[str, str]
    ) -> List[Dependency]:
        """Rewrite refs through the alias table and merge every entry of the subject ref into the first one."""
        result: List[Dependency] = []
        subject_entry: Optional[Dependency] = None

        for dependency in dependencies:
            dependency.ref = aliases.get(dependency.ref, dependency.ref)
            if dependency.depends_on is not None:
                targets: List[str] = []
                for target in dependency.depends_on:
                    target = aliases.get(target, target)
                    if target not in targets:
                        targets.append(target)
                dependency.depends_on = targets

            if dependency.ref != subject_ref:
                result.append(dependency)
                continue
            if subject_entry is None:
                subject_entry = dependency
                result.append(dependency)
                continue
            if dependency.depends_on:
                if subject_entry.depends_on is None:
                    subject_entry.depends_on = []
                for target in dependency.depends_on:
                    if target not in subject_entry.depends_on:
                        subject_entry.depends_on.append(target)

        if subject_entry is not None and subject_entry.depends_on and aliases:
            # An edge onto a collapsed duplicate would point the subject at itself
            subject_entry.depends_on = [target for target in subject_entry.depends_on if target != subject_ref]

        return result
