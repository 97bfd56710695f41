"""
Component deduplicator for removing duplicate components while keeping the dependency graph resolvable.
"""

import logging
from typing import List, Dict, Any, Iterable, Optional

from ..models import (
    Component, Dependency, Tool, IdentityPolicy, component_identity
)

logger = logging.getLogger(__name__)


class Deduplicator:
    """
    Component deduplicator that keeps the first occurrence of each component.

    Identity is decided by an ``IdentityPolicy``. When a dropped duplicate
    carried a different bom-ref than the kept component, the dropped ref is
    recorded as an alias so dependency edges can be rewritten to the kept
    component instead of dangling.
    """

    def __init__(self, identity_policy: IdentityPolicy = IdentityPolicy.DESCRIPTIVE):
        """
        Initialize the deduplicator.

        Args:
            identity_policy: Field set that constitutes component identity
        """
        self.identity_policy = identity_policy
        self.aliases: Dict[str, str] = {}
        self._deduplication_statistics = {
            "components_processed": 0,
            "duplicates_found": 0,
            "aliases_created": 0
        }

    def deduplicate(self, components: Iterable[Component]) -> List[Component]:
        """
        Remove duplicate components, preserving first-seen order.

        Args:
            components: Components that may contain duplicates

        Returns:
            List of unique components
        """
        by_ref: Dict[str, Component] = {}
        by_key: Dict[tuple, Component] = {}
        unique_components: List[Component] = []
        processed = 0
        duplicates_found = 0

        for component in components:
            processed += 1
            existing = self._find_existing(component, by_ref, by_key)

            if existing is None:
                unique_components.append(component)
                by_key[component_identity(component, self.identity_policy)] = component
                if component.bom_ref:
                    by_ref[component.bom_ref] = component
                continue

            duplicates_found += 1
            self._merge_two_components(existing, component)

            if component.bom_ref and component.bom_ref != existing.bom_ref:
                if existing.bom_ref is None:
                    existing.bom_ref = component.bom_ref
                    by_ref[component.bom_ref] = existing
                else:
                    self.aliases[component.bom_ref] = existing.bom_ref
                    by_ref[component.bom_ref] = existing
                    self._deduplication_statistics["aliases_created"] += 1
                    logger.debug(f"Aliased bom-ref {component.bom_ref} to {existing.bom_ref}")

        self._deduplication_statistics["components_processed"] += processed
        self._deduplication_statistics["duplicates_found"] += duplicates_found

        logger.info(f"Deduplication complete: {processed} -> {len(unique_components)} "
                    f"({duplicates_found} duplicates removed)")

        return unique_components

    def _find_existing(
        self,
        component: Component,
        by_ref: Dict[str, Component],
        by_key: Dict[tuple, Component]
    ) -> Optional[Component]:
        """Look up an already kept component with the same identity."""
        if self.identity_policy == IdentityPolicy.DESCRIPTIVE and component.bom_ref:
            existing = by_ref.get(component.bom_ref)
            if existing is not None:
                return existing
        return by_key.get(component_identity(component, self.identity_policy))

    def _merge_two_components(self, base: Component, other: Component) -> None:
        """
        Fill optional fields of the kept component from a dropped duplicate.

        Args:
            base: Kept component
            other: Dropped duplicate
        """
        if not base.purl and other.purl:
            base.purl = other.purl
        if not base.description and other.description:
            base.description = other.description
        if not base.scope and other.scope:
            base.scope = other.scope

        if other.properties:
            if base.properties is None:
                base.properties = []
            for prop in other.properties:
                if prop not in base.properties:
                    base.properties.append(prop)

    def resolve(self, ref: str) -> str:
        """Map a bom-ref through the alias table."""
        return self.aliases.get(ref, ref)

    def merge_dependencies(self, dependencies: Iterable[Dependency]) -> List[Dependency]:
        """
        Union dependency entries by ref.

        Conflicting edge sets for the same ref are unioned in first-seen
        order. All refs are rewritten through the alias table.

        Args:
            dependencies: Dependency entries from all inputs

        Returns:
            List of unique dependency entries
        """
        merged: Dict[str, Dependency] = {}

        for dependency in dependencies:
            ref = self.resolve(dependency.ref)
            entry = merged.get(ref)
            if entry is None:
                entry = Dependency(ref=ref, depends_on=None)
                merged[ref] = entry

            if dependency.depends_on is None:
                continue
            if entry.depends_on is None:
                entry.depends_on = []
            for target in dependency.depends_on:
                target = self.resolve(target)
                if target not in entry.depends_on:
                    entry.depends_on.append(target)

        return list(merged.values())

    def get_deduplication_statistics(self) -> Dict[str, Any]:
        """Get deduplication statistics."""
        return self._deduplication_statistics.copy()


def merge_tools(tool_lists: Iterable[Optional[List[Tool]]]) -> List[Tool]:
    """
    Union the tool lists of several documents.

    Args:
        tool_lists: Tool lists, ``None`` entries are ignored

    Returns:
        Tools in first-seen order without duplicates
    """
    seen = set()
    tools: List[Tool] = []
    for tool_list in tool_lists:
        for tool in tool_list or []:
            key = (tool.vendor, tool.name, tool.version)
            if key not in seen:
                seen.add(key)
                tools.append(tool)
    return tools
