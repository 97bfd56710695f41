"""
Codec for reading and writing BOM documents.
"""

from .cyclonedx_json import (
    BomFormat, auto_detect_format, resolve_format, parse_bom, serialize_bom, load_bom, write_bom
)

__all__ = [
    "BomFormat",
    "auto_detect_format",
    "resolve_format",
    "parse_bom",
    "serialize_bom",
    "load_bom",
    "write_bom"
]
