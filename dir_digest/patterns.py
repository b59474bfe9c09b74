"""
Include/exclude pattern handling.

Patterns are validated and normalized once, when the query is built.
During traversal a path is matched against the whole root-relative path
with fnmatch semantics: "*" matches any run of characters including "/",
"?" matches exactly one character, and the match is anchored.
"""

import re
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, Optional, Set, Tuple, Union

from .config import DEFAULT_IGNORE_PATTERNS
from .exceptions import InvalidPatternError

_ALLOWED_PUNCTUATION = set("-_./+*@")
_SPLIT_RE = re.compile(r"[,\s]+")

PatternInput = Union[str, Iterable[str]]


def is_valid_pattern(pattern: str) -> bool:
    """Return True if every character is ASCII alphanumeric or one of - _ . / + * @."""
    return all(
        (ch.isascii() and ch.isalnum()) or ch in _ALLOWED_PUNCTUATION
        for ch in pattern
    )


def validate_pattern(pattern: str) -> None:
    """
    Reject patterns with characters outside the allowed set.

    Raises:
        InvalidPatternError: If the pattern contains a disallowed character
    """
    if not is_valid_pattern(pattern):
        raise InvalidPatternError(pattern)


def normalize_pattern(pattern: str) -> str:
    """Strip surrounding whitespace and leading/trailing path separators."""
    return pattern.strip().strip("/")


def parse_patterns(patterns: PatternInput) -> Set[str]:
    """
    Validate and normalize user-supplied patterns.

    Args:
        patterns: A single string (split on commas and whitespace) or an
                  iterable of pattern strings

    Returns:
        Set of normalized patterns; empty entries are dropped

    Raises:
        InvalidPatternError: If any pattern contains a disallowed character

    Examples:
        >>> sorted(parse_patterns("*.py, /docs/"))
        ['*.py', 'docs']
    """
    if isinstance(patterns, str):
        items = _SPLIT_RE.split(patterns)
    else:
        items = list(patterns)

    parsed = set()
    for pattern in items:
        if not pattern:
            continue
        validate_pattern(pattern)
        normalized = normalize_pattern(pattern)
        if normalized:
            parsed.add(normalized)
    return parsed


def merge_patterns(
    ignore_patterns: Optional[PatternInput] = None,
    include_patterns: Optional[PatternInput] = None,
) -> Tuple[Set[str], Optional[Set[str]]]:
    """
    Build the effective exclude and include sets for a query.

    The exclude set is the built-in defaults plus the caller's excludes,
    minus every pattern that is textually identical to one of the caller's
    includes. Patterns that are glob-equivalent but spelled differently are
    not reconciled.

    Returns:
        (exclude_set, include_set) where include_set is None when no include
        pattern was given
    """
    exclude = set(DEFAULT_IGNORE_PATTERNS)
    if ignore_patterns:
        exclude |= parse_patterns(ignore_patterns)

    include = None
    if include_patterns:
        include = parse_patterns(include_patterns) or None
        if include:
            exclude -= include

    return exclude, include


def relative_pattern_path(path: Path, root: Path) -> Optional[str]:
    """Return path relative to root in posix form, or None if it escapes root."""
    try:
        rel = path.relative_to(root)
    except ValueError:
        return None
    if ".." in rel.parts or rel.is_absolute():
        return None
    return rel.as_posix()


def _matches_any(rel: str, is_dir: bool, patterns: Iterable[str]) -> bool:
    candidates = (rel, rel + "/") if is_dir else (rel,)
    return any(
        fnmatch(candidate, pattern)
        for pattern in patterns if pattern
        for candidate in candidates
    )


def is_excluded(path: Path, root: Path, exclude_patterns: Iterable[str]) -> bool:
    """
    Check whether path matches one of the exclude patterns.

    A path that is not inside root counts as excluded. Directories are
    tested both as-is and with a trailing "/".
    """
    rel = relative_pattern_path(path, root)
    if rel is None:
        return True
    return _matches_any(rel, path.is_dir(), exclude_patterns)


def is_included(path: Path, root: Path, include_patterns: Iterable[str]) -> bool:
    """
    Check whether path matches at least one include pattern.

    A path that is not inside root is never included. Directories are
    tested both as-is and with a trailing "/".
    """
    rel = relative_pattern_path(path, root)
    if rel is None:
        return False
    return _matches_any(rel, path.is_dir(), include_patterns)
