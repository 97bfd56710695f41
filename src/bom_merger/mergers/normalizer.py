"""
Post-merge normalizer that turns a merged BOM into a fresh, clean document.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from ..models import Bom, Component, Metadata

logger = logging.getLogger(__name__)


class Normalizer:
    """
    Cleans up a merged document.

    Steps run in order and are each idempotent: ensure metadata, drop empty
    collections, reset the version, assign a new serial number and stamp a
    missing timestamp.
    """

    def normalize(self, bom: Bom, spec_version: Optional[str] = None) -> Bom:
        """
        Run all normalization steps on a document.

        Args:
            bom: Document to normalize, modified in place
            spec_version: Spec version to declare, keeps the current one if None

        Returns:
            The normalized document
        """
        self.ensure_metadata(bom)
        self.cleanup_empty_lists(bom)
        bom.version = 1
        self.assign_serial_number(bom)
        self.stamp_timestamp(bom)

        if spec_version:
            bom.spec_version = spec_version

        logger.debug(f"Normalized merged BOM {bom.serial_number}")
        return bom

    def ensure_metadata(self, bom: Bom) -> None:
        """Create empty metadata when absent."""
        if bom.metadata is None:
            bom.metadata = Metadata()

    def cleanup_empty_lists(self, bom: Bom) -> None:
        """Replace zero-length collections with absent values."""
        if not bom.components:
            bom.components = None
        else:
            self._cleanup_components(bom.components)

        if not bom.dependencies:
            bom.dependencies = None
        else:
            for dependency in bom.dependencies:
                if not dependency.depends_on:
                    dependency.depends_on = None

        if bom.metadata is not None:
            if not bom.metadata.tools:
                bom.metadata.tools = None
            if bom.metadata.component is not None:
                self._cleanup_components([bom.metadata.component])

    def _cleanup_components(self, components: List[Component]) -> None:
        for component in components:
            if not component.properties:
                component.properties = None
            if not component.components:
                component.components = None
            else:
                self._cleanup_components(component.components)

    def assign_serial_number(self, bom: Bom) -> None:
        """Assign a new random serial number."""
        bom.serial_number = f"urn:uuid:{uuid.uuid4()}"

    def stamp_timestamp(self, bom: Bom) -> None:
        """Stamp the current time when the metadata has no timestamp."""
        if bom.metadata.timestamp is None:
            bom.metadata.timestamp = datetime.now(timezone.utc)
