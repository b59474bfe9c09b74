"""
dir_digest - Turn a directory into a single LLM-friendly text digest

Walks a local directory (or reads a single file), filters entries with
include/exclude patterns, and produces three strings: a summary, an ASCII
directory tree, and the concatenated file contents.

Architecture: query -> traversal (ingestion) -> formatting. Budgets are
passed per call through TraversalLimits, so ingestions never share state.
"""

__version__ = "0.1.0"

from .entrypoint import ingest
from .exceptions import (
    DigestError,
    EmptyResourceError,
    InvalidNotebookError,
    InvalidPatternError,
    NotAFileError,
    NotebookFormatError,
    ResourceNotFoundError,
    UnsupportedEntryKindError,
)
from .ingestion import ingest_query
from .query import build_query
from .schema import FileSystemNode, FileSystemNodeType, IngestionQuery, TraversalLimits

__all__ = [
    "ingest",
    "ingest_query",
    "build_query",
    "IngestionQuery",
    "FileSystemNode",
    "FileSystemNodeType",
    "TraversalLimits",
    "DigestError",
    "InvalidPatternError",
    "ResourceNotFoundError",
    "NotAFileError",
    "EmptyResourceError",
    "UnsupportedEntryKindError",
    "InvalidNotebookError",
    "NotebookFormatError",
]
