"""
BOM document data model for CycloneDX-style Bills of Materials.
"""

from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Set, Iterator
from datetime import datetime
import copy
import re

from .component import Component


DEFAULT_SPEC_VERSION = "1.6"

_FRACTION_PATTERN = re.compile(r"\.(\d+)")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp.

    Fractional seconds of any precision are accepted and kept to
    microseconds; a trailing ``Z`` means UTC.
    """
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION_PATTERN.sub(lambda match: "." + match.group(1).ljust(6, "0")[:6], text, count=1)
    return datetime.fromisoformat(text)


@dataclass
class Dependency:
    """
    Dependency graph node: a bom-ref and the refs it depends on.
    """

    ref: str
    depends_on: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert dependency to dictionary."""
        data: Dict[str, Any] = {"ref": self.ref}
        if self.depends_on is not None:
            data["dependsOn"] = list(self.depends_on)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Dependency':
        """Create dependency from dictionary."""
        depends_on = data.get("dependsOn")
        if depends_on is None and data.get("dependencies") is not None:
            # CycloneDX 1.2/1.3 nests dependency objects instead of plain refs
            depends_on = [item["ref"] if isinstance(item, dict) else item for item in data["dependencies"]]
        return cls(
            ref=data["ref"],
            depends_on=list(depends_on) if depends_on is not None else None
        )


@dataclass
class Tool:
    """Tool that produced a BOM."""

    name: str
    vendor: Optional[str] = None
    version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert tool to dictionary."""
        data: Dict[str, Any] = {}
        if self.vendor is not None:
            data["vendor"] = self.vendor
        data["name"] = self.name
        if self.version is not None:
            data["version"] = self.version
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Tool':
        """Create tool from dictionary."""
        return cls(name=data.get("name", ""), vendor=data.get("vendor"), version=data.get("version"))


@dataclass
class Metadata:
    """
    BOM metadata: timestamp, the subject component and producing tools.
    """

    timestamp: Optional[datetime] = None
    component: Optional[Component] = None
    tools: Optional[List[Tool]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        data: Dict[str, Any] = {}
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp.isoformat()
        if self.tools is not None:
            data["tools"] = [tool.to_dict() for tool in self.tools]
        if self.component is not None:
            data["component"] = self.component.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Metadata':
        """Create metadata from dictionary."""
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = parse_timestamp(timestamp)

        tools = data.get("tools")
        if isinstance(tools, dict):
            # CycloneDX 1.5+ object form
            tools = tools.get("components", [])

        component = data.get("component")
        return cls(
            timestamp=timestamp,
            component=Component.from_dict(component) if component else None,
            tools=[Tool.from_dict(tool) for tool in tools] if tools is not None else None
        )


@dataclass
class Bom:
    """
    Represents a complete BOM document.

    This class holds the components, dependency graph, metadata and
    document identity (serial number, version, spec version) of a BOM.
    """

    components: Optional[List[Component]] = None
    dependencies: Optional[List[Dependency]] = None
    metadata: Optional[Metadata] = None
    serial_number: Optional[str] = None
    version: int = 1
    spec_version: str = DEFAULT_SPEC_VERSION

    @property
    def component_count(self) -> int:
        """Get the number of top-level components."""
        return len(self.components or [])

    @property
    def dependency_count(self) -> int:
        """Get the number of dependency graph entries."""
        return len(self.dependencies or [])

    @property
    def subject(self) -> Optional[Component]:
        """Get the component the document is about, if any."""
        return self.metadata.component if self.metadata else None

    def all_components(self) -> Iterator[Component]:
        """Iterate over all components including nested ones, excluding the subject."""
        for component in self.components or []:
            yield from component.iter_tree()

    def all_bom_refs(self) -> Set[str]:
        """
        Get every bom-ref defined in the document.

        Returns:
            Set of bom-refs of all components and the subject tree
        """
        refs = {comp.bom_ref for comp in self.all_components() if comp.bom_ref}
        if self.subject is not None:
            refs.update(comp.bom_ref for comp in self.subject.iter_tree() if comp.bom_ref)
        return refs

    def find_component(self, bom_ref: str) -> Optional[Component]:
        """
        Get a component by bom-ref.

        Args:
            bom_ref: bom-ref to look up

        Returns:
            Matching component or None
        """
        if self.subject is not None and self.subject.bom_ref == bom_ref:
            return self.subject
        for comp in self.all_components():
            if comp.bom_ref == bom_ref:
                return comp
        return None

    def dependency_for(self, ref: str) -> Optional[Dependency]:
        """Get the dependency entry for a ref."""
        for dependency in self.dependencies or []:
            if dependency.ref == ref:
                return dependency
        return None

    def dangling_refs(self) -> List[str]:
        """
        Get refs used by the dependency graph that resolve to no component.

        Returns:
            Ordered list of unresolved refs
        """
        known = self.all_bom_refs()
        dangling: List[str] = []
        for dependency in self.dependencies or []:
            for ref in [dependency.ref] + list(dependency.depends_on or []):
                if ref not in known and ref not in dangling:
                    dangling.append(ref)
        return dangling

    def copy(self) -> 'Bom':
        """Return a deep copy of the document."""
        return copy.deepcopy(self)

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about the document.

        Returns:
            Dictionary of statistics
        """
        return {
            "serial_number": self.serial_number,
            "spec_version": self.spec_version,
            "component_count": self.component_count,
            "total_component_count": sum(1 for _ in self.all_components()),
            "dependency_count": self.dependency_count,
            "has_subject": self.subject is not None
        }

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the document to a CycloneDX JSON dictionary.

        Returns:
            Dictionary representation of the BOM
        """
        data: Dict[str, Any] = {
            "bomFormat": "CycloneDX",
            "specVersion": self.spec_version,
        }
        if self.serial_number is not None:
            data["serialNumber"] = self.serial_number
        data["version"] = self.version
        if self.metadata is not None:
            data["metadata"] = self.metadata.to_dict()
        if self.components is not None:
            data["components"] = [comp.to_dict() for comp in self.components]
        if self.dependencies is not None:
            data["dependencies"] = [dep.to_dict() for dep in self.dependencies]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Bom':
        """
        Create a document from a CycloneDX JSON dictionary.

        Args:
            data: Dictionary containing BOM data

        Returns:
            Bom instance
        """
        components = data.get("components")
        dependencies = data.get("dependencies")
        metadata = data.get("metadata")
        return cls(
            components=[Component.from_dict(comp) for comp in components] if components is not None else None,
            dependencies=[Dependency.from_dict(dep) for dep in dependencies] if dependencies is not None else None,
            metadata=Metadata.from_dict(metadata) if metadata is not None else None,
            serial_number=data.get("serialNumber"),
            version=data.get("version", 1),
            spec_version=data.get("specVersion", DEFAULT_SPEC_VERSION)
        )
