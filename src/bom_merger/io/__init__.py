"""
Input loading and output writing for the BOM merger.
"""

from .loader import InputSources, collect_input_files, report_input_files, load_documents, OutputSink

__all__ = [
    "InputSources",
    "collect_input_files",
    "report_input_files",
    "load_documents",
    "OutputSink"
]
