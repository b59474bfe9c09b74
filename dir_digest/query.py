"""Build an IngestionQuery for a local directory or file."""

import os
from pathlib import Path
from typing import Optional, Union

from .config import MAX_FILE_SIZE
from .patterns import PatternInput, merge_patterns
from .schema import IngestionQuery


def build_query(
    source: Union[str, Path],
    max_file_size: int = MAX_FILE_SIZE,
    include_patterns: Optional[PatternInput] = None,
    ignore_patterns: Optional[PatternInput] = None,
) -> IngestionQuery:
    """
    Resolve a local path into a query.

    The exclude set is the defaults plus ignore_patterns, minus any pattern
    also given verbatim in include_patterns.

    Raises:
        InvalidPatternError: If a pattern contains a disallowed character
    """
    local_path = Path(os.path.abspath(os.path.expanduser(str(source))))
    exclude, include = merge_patterns(ignore_patterns, include_patterns)

    return IngestionQuery(
        local_path=local_path,
        slug=local_path.name,
        max_file_size=max_file_size,
        ignore_patterns=exclude,
        include_patterns=include,
    )
