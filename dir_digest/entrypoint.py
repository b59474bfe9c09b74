"""High-level entry point: path in, digest out."""

from pathlib import Path
from typing import Optional, Tuple, Union

from .config import MAX_FILE_SIZE
from .ingestion import ingest_query
from .patterns import PatternInput
from .query import build_query
from .schema import TraversalLimits


def ingest(
    source: Union[str, Path],
    max_file_size: int = MAX_FILE_SIZE,
    include_patterns: Optional[PatternInput] = None,
    exclude_patterns: Optional[PatternInput] = None,
    output: Optional[Union[str, Path]] = None,
    limits: Optional[TraversalLimits] = None,
) -> Tuple[str, str, str]:
    """
    Ingest a local directory or file and return its digest.

    Args:
        source: Directory or file to ingest
        max_file_size: Files larger than this many bytes are skipped
        include_patterns: Pattern(s) of files to keep; everything else is dropped
        exclude_patterns: Pattern(s) to exclude on top of the defaults
        output: If given, "tree\\ncontent" is written to this file
        limits: Traversal budgets (defaults from config)

    Returns:
        (summary, tree, content)
    """
    query = build_query(
        source,
        max_file_size=max_file_size,
        include_patterns=include_patterns,
        ignore_patterns=exclude_patterns,
    )
    summary, tree, content = ingest_query(query, limits)

    if output is not None:
        Path(output).write_text(tree + "\n" + content, encoding="utf-8")

    return summary, tree, content
