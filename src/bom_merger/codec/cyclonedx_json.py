"""
CycloneDX JSON codec: format detection, parsing and serialization of BOMs.
"""

import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from ..models import Bom
from ..error_handling import InputLoadError, OutputWriteError, UnsupportedFormatError

logger = logging.getLogger(__name__)


class BomFormat(Enum):
    """BOM file formats."""
    AUTODETECT = "autodetect"
    JSON = "json"


def auto_detect_format(path: Optional[Union[str, Path]]) -> BomFormat:
    """
    Detect the BOM format from a file name.

    Args:
        path: File name, may be None

    Returns:
        Detected format, ``BomFormat.AUTODETECT`` when unknown
    """
    if not path:
        return BomFormat.AUTODETECT

    suffix = Path(path).suffix.lower()
    if suffix == ".json":
        return BomFormat.JSON
    return BomFormat.AUTODETECT


def resolve_format(bom_format: Union[str, BomFormat], path: Optional[Union[str, Path]]) -> BomFormat:
    """
    Resolve ``autodetect`` to a concrete format.

    Raises:
        UnsupportedFormatError: If the format is unknown or cannot be detected
    """
    if isinstance(bom_format, str):
        try:
            bom_format = BomFormat(bom_format.lower())
        except ValueError:
            raise UnsupportedFormatError(f"Unsupported BOM format: {bom_format}", bom_format=bom_format)

    if bom_format == BomFormat.AUTODETECT:
        bom_format = auto_detect_format(path)
        if bom_format == BomFormat.AUTODETECT:
            raise UnsupportedFormatError(f"Unable to auto-detect format of {path}", context={"path": str(path)})

    return bom_format


def parse_bom(text: str) -> Bom:
    """
    Parse a CycloneDX JSON document.

    Args:
        text: JSON text

    Returns:
        Parsed document

    Raises:
        ValueError: If the text is not a CycloneDX JSON document
    """
    data = json.loads(text)
    if not isinstance(data, dict) or data.get("bomFormat") != "CycloneDX":
        raise ValueError("Not a CycloneDX JSON document")
    return Bom.from_dict(data)


def serialize_bom(bom: Bom, indent: Optional[int] = 2) -> str:
    """
    Serialize a document to CycloneDX JSON.

    The output depends only on the document content.
    """
    return json.dumps(bom.to_dict(), indent=indent, ensure_ascii=False)


def load_bom(path: Union[str, Path], bom_format: Union[str, BomFormat] = BomFormat.AUTODETECT) -> Bom:
    """
    Load a document from a file.

    Args:
        path: Input file
        bom_format: Input format, auto-detected from the file name by default

    Returns:
        Parsed document

    Raises:
        InputLoadError: If the file cannot be read or parsed
        UnsupportedFormatError: If the format is not supported
    """
    resolve_format(bom_format, path)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except OSError as e:
        raise InputLoadError(f"Unable to read input file {path}", file_path=str(path), cause=e)

    try:
        return parse_bom(text)
    except (ValueError, KeyError, TypeError) as e:
        raise InputLoadError(f"Unable to parse input file {path}", file_path=str(path), cause=e)


def write_bom(
    bom: Bom,
    path: Optional[Union[str, Path]] = None,
    bom_format: Union[str, BomFormat] = BomFormat.AUTODETECT,
    indent: Optional[int] = 2
) -> str:
    """
    Write a document to a file, or to stdout when no path is given.

    Returns:
        The text that was written

    Raises:
        OutputWriteError: If the output file cannot be written
    """
    if path is not None:
        resolve_format(bom_format, path)
    text = serialize_bom(bom, indent)

    if path is None:
        sys.stdout.write(text)
        sys.stdout.write("\n")
    else:
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(text)
        except OSError as e:
            raise OutputWriteError(f"Unable to write output file {path}", file_path=str(path), cause=e)
        logger.info(f"Wrote BOM to {path}")

    return text
