"""
Input gathering and loading of BOM documents, and the output sink.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from ..models import Bom
from ..codec import BomFormat, load_bom, write_bom, serialize_bom
from ..error_handling import InputLoadError

logger = logging.getLogger(__name__)


@dataclass
class InputSources:
    """
    Where input file names come from.

    Attributes:
        input_files: File names given directly
        input_files_lists: Text files listing one file name per line
        input_files_nul_lists: Files listing file names separated by NUL characters
    """
    input_files: List[str] = field(default_factory=list)
    input_files_lists: List[str] = field(default_factory=list)
    input_files_nul_lists: List[str] = field(default_factory=list)


def _read_list_file(list_file: str, separator: Optional[str]) -> List[str]:
    try:
        with open(list_file, 'r', encoding='utf-8') as f:
            content = f.read()
    except OSError as e:
        raise InputLoadError(f"Unable to read input file list {list_file}", file_path=list_file, cause=e)

    if separator is None:
        return content.splitlines()
    return content.split(separator)


def collect_input_files(sources: InputSources) -> Optional[Tuple[str, ...]]:
    """
    Collect the input file names of a merge.

    Direct file names come first, then the entries of the list files and
    then those of the NUL-separated list files. Empty entries and repeats
    are dropped, first-seen order is kept.

    Args:
        sources: Input file sources

    Returns:
        Ordered file names, or None when no file name was collected

    Raises:
        InputLoadError: If a list file cannot be read
    """
    collected: List[str] = []

    def add(names):
        for name in names:
            if name and name not in collected:
                collected.append(name)

    add(sources.input_files)
    for list_file in sources.input_files_lists:
        add(_read_list_file(list_file, None))
    for list_file in sources.input_files_nul_lists:
        add(_read_list_file(list_file, "\0"))

    if not collected:
        return None
    return tuple(collected)


def report_input_files(sources: InputSources, files: Optional[Sequence[str]]) -> None:
    """Log where the input file names came from and how many were found."""
    logger.info(f"Got {len(sources.input_files)} individual input file name(s): {list(sources.input_files)}")
    if sources.input_files_lists:
        logger.info(f"Processed {len(sources.input_files_lists)} file(s) with list of input file names: "
                    f"{list(sources.input_files_lists)}")
    if sources.input_files_nul_lists:
        logger.info(f"Processed {len(sources.input_files_nul_lists)} file(s) with NUL-separated list of "
                    f"input file names: {list(sources.input_files_nul_lists)}")
    if files:
        logger.info(f"Determined {len(files)} input files to merge")
    else:
        logger.warning("No input files were given")


def load_documents(
    paths: Sequence[Union[str, Path]],
    bom_format: Union[str, BomFormat] = BomFormat.AUTODETECT,
    max_workers: int = 1
) -> List[Bom]:
    """
    Load all input documents.

    With ``max_workers > 1`` files are read concurrently. Every load
    finishes before this returns, results keep input order and the first
    failure is raised.

    Args:
        paths: Input files
        bom_format: Input format
        max_workers: Number of concurrent loads

    Returns:
        Parsed documents in input order

    Raises:
        InputLoadError: If any input cannot be loaded
    """
    def load(path):
        logger.info(f"Processing input file {path}")
        bom = load_bom(path, bom_format)
        logger.debug(f"    Contains {bom.component_count} components")
        return bom

    if max_workers <= 1 or len(paths) <= 1:
        return [load(path) for path in paths]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(load, path) for path in paths]
        # Leaving the executor waits for all loads before the first error is raised
    return [future.result() for future in futures]


class OutputSink:
    """
    Writes the merged document to a file, or to stdout when no file is set.
    """

    def __init__(
        self,
        output_file: Optional[Union[str, Path]] = None,
        bom_format: Union[str, BomFormat] = BomFormat.AUTODETECT,
        indent: Optional[int] = 2
    ):
        self.output_file = output_file
        self.bom_format = bom_format
        self.indent = indent
        self.written: Optional[str] = None

    @property
    def to_console(self) -> bool:
        return self.output_file is None

    def render(self, bom: Bom) -> str:
        """Serialize a document the way ``write`` would."""
        return serialize_bom(bom, self.indent)

    def write(self, bom: Bom) -> str:
        """
        Write a document.

        Returns:
            The written text
        """
        if not self.to_console:
            logger.info("Writing output file...")
            logger.info(f"    Total {bom.component_count} components")
        self.written = write_bom(bom, self.output_file, self.bom_format, self.indent)
        return self.written
