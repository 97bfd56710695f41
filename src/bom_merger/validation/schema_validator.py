"""
Schema validators for serialized BOM documents.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from jsonschema import Draft7Validator, FormatChecker

logger = logging.getLogger(__name__)

SUPPORTED_SPEC_VERSIONS = ("1.2", "1.3", "1.4", "1.5", "1.6")

_BUNDLED_SCHEMA = Path(__file__).parent / "schemas" / "bom.schema.json"


@dataclass
class ValidationResult:
    """Outcome of validating one document."""

    valid: bool
    messages: List[str] = field(default_factory=list)


class SchemaValidator(ABC):
    """
    Validates a serialized document against the schema of a spec version.
    """

    @abstractmethod
    def validate(self, text: str, spec_version: str) -> ValidationResult:
        """
        Validate serialized BOM text.

        Args:
            text: Serialized document
            spec_version: Spec version whose schema applies

        Returns:
            Validation result with all validator messages
        """
        pass


class JsonSchemaValidator(SchemaValidator):
    """
    JSON schema validator for CycloneDX JSON documents.

    Uses the bundled structural schema unless ``schema_dir`` holds a
    ``bom-<version>.schema.json`` for the requested version. Besides the
    schema, bom-ref uniqueness and dependency ref resolution are checked.
    """

    def __init__(self, schema_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the validator.

        Args:
            schema_dir: Optional directory with per-version schema files
        """
        self.schema_dir = Path(schema_dir) if schema_dir else None
        self._validators: Dict[str, Draft7Validator] = {}

    def validate(self, text: str, spec_version: str) -> ValidationResult:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            return ValidationResult(valid=False, messages=[f"Document is not valid JSON: {e}"])

        if not isinstance(data, dict):
            return ValidationResult(valid=False, messages=["root: document must be a JSON object"])

        validator = self._get_validator(spec_version)
        if validator is None:
            return ValidationResult(
                valid=False,
                messages=[f"No schema available for spec version {spec_version}"]
            )

        messages = []
        for error in sorted(validator.iter_errors(data), key=lambda err: [str(p) for p in err.path]):
            path = ".".join(str(p) for p in error.path) if error.path else "root"
            messages.append(f"{path}: {error.message}")

        if data.get("specVersion") != spec_version:
            messages.append(f"specVersion: expected {spec_version}, found {data.get('specVersion')}")

        messages.extend(self._check_references(data))

        if messages:
            logger.debug(f"Validation against {spec_version} reported {len(messages)} message(s)")
        return ValidationResult(valid=not messages, messages=messages)

    def _get_validator(self, spec_version: str) -> Optional[Draft7Validator]:
        """Load and cache the schema validator of a spec version."""
        if spec_version in self._validators:
            return self._validators[spec_version]

        schema_path = None
        if self.schema_dir is not None:
            candidate = self.schema_dir / f"bom-{spec_version}.schema.json"
            if candidate.exists():
                schema_path = candidate

        if schema_path is None:
            if spec_version not in SUPPORTED_SPEC_VERSIONS:
                return None
            schema_path = _BUNDLED_SCHEMA

        with open(schema_path, encoding="utf-8") as f:
            schema = json.load(f)

        validator = Draft7Validator(schema, format_checker=FormatChecker())
        self._validators[spec_version] = validator
        return validator

    def _check_references(self, data: Dict[str, Any]) -> List[str]:
        """Check bom-ref uniqueness and that dependency refs resolve."""
        messages = []
        seen = set()
        duplicates = []

        for component in self._iter_components(data):
            bom_ref = component.get("bom-ref") if isinstance(component, dict) else None
            if not bom_ref:
                continue
            if bom_ref in seen and bom_ref not in duplicates:
                duplicates.append(bom_ref)
            seen.add(bom_ref)

        for bom_ref in duplicates:
            messages.append(f"bom-ref is not unique: {bom_ref}")

        for dependency in data.get("dependencies") or []:
            if not isinstance(dependency, dict):
                continue
            for ref in [dependency.get("ref")] + list(dependency.get("dependsOn") or []):
                if ref and ref not in seen:
                    messages.append(f"dependencies: ref {ref} does not resolve to a component")

        return messages

    def _iter_components(self, data: Dict[str, Any]) -> Iterator[Any]:
        stack = []
        metadata = data.get("metadata")
        if isinstance(metadata, dict) and isinstance(metadata.get("component"), dict):
            stack.append(metadata["component"])
        stack.extend(reversed(data.get("components") or []))

        while stack:
            component = stack.pop()
            yield component
            if isinstance(component, dict):
                stack.extend(reversed(component.get("components") or []))
