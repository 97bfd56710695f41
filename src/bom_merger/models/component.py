"""
Component data model for inventoried software units.
"""

from dataclasses import dataclass
from typing import List, Optional, Dict, Any, Tuple
from enum import Enum
import copy


class ComponentType(Enum):
    """CycloneDX component classifications."""
    APPLICATION = "application"
    FRAMEWORK = "framework"
    LIBRARY = "library"
    CONTAINER = "container"
    PLATFORM = "platform"
    OPERATING_SYSTEM = "operating-system"
    DEVICE = "device"
    DEVICE_DRIVER = "device-driver"
    FIRMWARE = "firmware"
    FILE = "file"
    MACHINE_LEARNING_MODEL = "machine-learning-model"
    DATA = "data"
    CRYPTOGRAPHIC_ASSET = "cryptographic-asset"


class IdentityPolicy(Enum):
    """Field sets that decide when two components are the same component."""
    DESCRIPTIVE = "descriptive"  # (type, group, name, version), bom-ref match overrides
    FULL = "full"  # (type, group, name, version, bom-ref)


@dataclass
class Component:
    """
    Represents a single software component of a BOM.

    Nested components are only populated by the hierarchical merge, where
    they hold the component list of one source document.
    """

    name: str
    type: ComponentType = ComponentType.LIBRARY
    group: Optional[str] = None
    version: Optional[str] = None
    bom_ref: Optional[str] = None
    purl: Optional[str] = None
    description: Optional[str] = None
    scope: Optional[str] = None
    components: Optional[List['Component']] = None
    properties: Optional[List[Dict[str, str]]] = None

    def __post_init__(self):
        """Post-initialization processing."""
        if isinstance(self.type, str):
            try:
                self.type = ComponentType(self.type.lower())
            except ValueError:
                raise ValueError(f"Unknown component type {self.type!r} for component {self.name!r}")

    @property
    def full_name(self) -> str:
        """Get the component name qualified with group and version."""
        return component_namespace(self)

    def iter_tree(self):
        """Yield this component followed by all nested components, depth first."""
        yield self
        for child in self.components or []:
            yield from child.iter_tree()

    def copy(self) -> 'Component':
        """Return a deep copy of the component."""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert component to a CycloneDX JSON dictionary.

        Absent values are omitted.

        Returns:
            Dictionary representation of the component
        """
        data: Dict[str, Any] = {"type": self.type.value}
        if self.bom_ref is not None:
            data["bom-ref"] = self.bom_ref
        if self.group is not None:
            data["group"] = self.group
        data["name"] = self.name
        if self.version is not None:
            data["version"] = self.version
        if self.description is not None:
            data["description"] = self.description
        if self.scope is not None:
            data["scope"] = self.scope
        if self.purl is not None:
            data["purl"] = self.purl
        if self.properties is not None:
            data["properties"] = [dict(prop) for prop in self.properties]
        if self.components is not None:
            data["components"] = [child.to_dict() for child in self.components]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Component':
        """
        Create component from a CycloneDX JSON dictionary.

        Args:
            data: Dictionary containing component data

        Returns:
            Component instance
        """
        children = data.get("components")
        return cls(
            name=data["name"],
            type=data.get("type", "library"),
            group=data.get("group"),
            version=data.get("version"),
            bom_ref=data.get("bom-ref"),
            purl=data.get("purl"),
            description=data.get("description"),
            scope=data.get("scope"),
            components=[cls.from_dict(child) for child in children] if children is not None else None,
            properties=[dict(prop) for prop in data["properties"]] if data.get("properties") is not None else None
        )


def component_namespace(component: Component) -> str:
    """
    Build the ``group.name@version`` namespace of a component.

    Used as generated bom-ref for subjects and as prefix for namespaced
    bom-refs in hierarchical merges.
    """
    if component.group:
        return f"{component.group}.{component.name}@{component.version}"
    return f"{component.name}@{component.version}"


def component_identity(component: Component, policy: IdentityPolicy = IdentityPolicy.DESCRIPTIVE) -> Tuple:
    """
    Generate the identity key of a component.

    Args:
        component: Component to generate key for
        policy: Which field set constitutes identity

    Returns:
        Hashable identity tuple
    """
    key = (component.type.value, component.group or "", component.name, component.version or "")
    if policy == IdentityPolicy.FULL:
        return key + (component.bom_ref or "",)
    return key


def is_same_component(
    first: Component,
    second: Component,
    policy: IdentityPolicy = IdentityPolicy.DESCRIPTIVE
) -> bool:
    """
    Check if two components represent the same component.

    Under the descriptive policy matching bom-refs are a stronger match and
    win even if the descriptive fields differ.

    Args:
        first: A component
        second: Another component to compare
        policy: Which field set constitutes identity

    Returns:
        True if they represent the same component
    """
    if policy == IdentityPolicy.DESCRIPTIVE and first.bom_ref and first.bom_ref == second.bom_ref:
        return True
    return component_identity(first, policy) == component_identity(second, policy)
