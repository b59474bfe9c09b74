"""
Traversal engine: turns an IngestionQuery into a tree of FileSystemNode values.

One call owns one FileSystemStats instance. Directory entries are visited
one at a time in the order the filesystem lists them; each directory's
children are sorted once, after the whole subtree has been processed.

Cycle safety rests on a single rule: every entry is identified by its
canonical (symlink-resolved) path, and a canonical path is admitted at
most once per ingestion.
"""

import os
import stat
import sys
import tomllib
from dataclasses import replace
from pathlib import Path
from typing import Optional, Set, Tuple

from .config import CONFIG_FILE_NAME
from .decoding import read_file_content
from .exceptions import (
    EmptyResourceError,
    NotAFileError,
    ResourceNotFoundError,
    UnsupportedEntryKindError,
)
from .formatting import format_node
from .patterns import is_excluded, is_included, normalize_pattern
from .schema import (
    FileSystemNode,
    FileSystemNodeType,
    FileSystemStats,
    IngestionQuery,
    TraversalLimits,
)


def ingest_query(
    query: IngestionQuery,
    limits: Optional[TraversalLimits] = None,
) -> Tuple[str, str, str]:
    """
    Ingest the directory or file described by query.

    Args:
        query: The resolved query
        limits: Depth/file-count/size budgets (defaults from config)

    Returns:
        (summary, tree, content)

    Raises:
        ResourceNotFoundError: If the target path does not exist
        NotAFileError: If a single-file query points at a directory
        EmptyResourceError: If a single-file query yields no content
        UnsupportedEntryKindError: If an entry is neither file nor directory
    """
    node, query = build_tree(query, limits)
    return format_node(node, query)


def build_tree(
    query: IngestionQuery,
    limits: Optional[TraversalLimits] = None,
) -> Tuple[FileSystemNode, IngestionQuery]:
    """
    Run the traversal and return the root node.

    The returned query is the effective one, i.e. with the patterns of the
    root-local config file merged into its exclude set.
    """
    if limits is None:
        limits = TraversalLimits()

    local_path = Path(os.path.abspath(query.local_path))
    subpath = "/".join(part for part in query.subpath.split("/") if part)
    target_path = local_path / subpath if subpath else local_path

    query = apply_config_file(target_path, query)

    if not target_path.exists():
        raise ResourceNotFoundError(f"{query.slug} cannot be found at {target_path}")

    if query.type == "file" or target_path.is_file():
        return _build_file_node(target_path, local_path), query

    root_node = FileSystemNode(
        name=target_path.name,
        type=FileSystemNodeType.DIRECTORY,
        path_str=_display_path(target_path, local_path),
        path=target_path,
    )

    stats = FileSystemStats()
    stats.visited.add(Path(os.path.realpath(target_path)))
    base_path = Path(os.path.realpath(local_path))

    root_node = _process_node(root_node, query, base_path, stats, limits)
    return root_node, query


def load_config_patterns(directory: Path) -> Set[str]:
    """
    Read extra ignore patterns from the config file in directory.

    The file is TOML:

        [config]
        ignore_patterns = ["*.lock", "fixtures"]   # or a single string

    A missing file yields no patterns. A malformed file is ignored with a
    warning, and non-string entries are dropped with a warning.
    """
    config_path = directory / CONFIG_FILE_NAME
    if not config_path.is_file():
        return set()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        print(f"Warning: Could not read or parse {config_path}: {e}", file=sys.stderr)
        return set()

    config = data.get("config")
    if not isinstance(config, dict):
        return set()

    patterns = config.get("ignore_patterns")
    if not patterns:
        return set()
    if isinstance(patterns, str):
        patterns = [patterns]
    elif not isinstance(patterns, list):
        print(f"Warning: ignore_patterns in {config_path} must be a string or a list of strings. Skipping.",
              file=sys.stderr)
        return set()

    invalid = [p for p in patterns if not isinstance(p, str)]
    if invalid:
        print(f"Warning: Ignore patterns {invalid} in {config_path} are not strings. Skipping.",
              file=sys.stderr)

    valid = {normalize_pattern(p) for p in patterns if isinstance(p, str)}
    valid.discard("")
    return valid


def apply_config_file(directory: Path, query: IngestionQuery) -> IngestionQuery:
    """Return a copy of query whose exclude set also holds the config file patterns."""
    patterns = load_config_patterns(directory)
    if not patterns:
        return query
    return replace(query, ignore_patterns=set(query.ignore_patterns) | patterns)


def is_safe_symlink(symlink_path: Path, base_path: Path) -> bool:
    """
    Check that a symlink resolves to an existing location inside base_path.

    Broken links, link loops and links escaping base_path are unsafe.
    """
    try:
        target = symlink_path.resolve(strict=True)
        base = base_path.resolve(strict=True)
    except (OSError, RuntimeError):
        return False
    return target == base or base in target.parents


def _build_file_node(target_path: Path, local_path: Path) -> FileSystemNode:
    if not target_path.is_file():
        raise NotAFileError(f"Path {target_path} is not a file")

    node = FileSystemNode(
        name=target_path.name,
        type=FileSystemNodeType.FILE,
        path_str=_display_path(target_path, local_path) or target_path.name,
        path=target_path,
        size=target_path.stat().st_size,
        file_count=1,
    )
    node.content = read_file_content(target_path)

    if not node.content:
        raise EmptyResourceError(f"File {target_path} has no content")

    return node


def _process_node(
    node: FileSystemNode,
    query: IngestionQuery,
    base_path: Path,
    stats: FileSystemStats,
    limits: TraversalLimits,
) -> FileSystemNode:
    """
    Populate a directory node and return it with its aggregates folded in.

    With an include set active, every file must match it. Directories are
    descended whether or not they match, and a directory is kept only if
    it matches the include set itself or retains at least one file.
    """
    if _limit_exceeded(stats, node.depth, limits):
        return node

    try:
        entries = list(node.path.iterdir())
    except OSError as e:
        print(f"Warning: Could not read directory {node.path}: {e}", file=sys.stderr)
        return node

    for entry in entries:
        path_str = f"{node.path_str}/{entry.name}" if node.path_str else entry.name

        if entry.is_symlink() and not is_safe_symlink(entry, base_path):
            print(f"[SKIP] {path_str} (unsafe symlink)", file=sys.stderr)
            continue

        real_path = Path(os.path.realpath(entry))
        if real_path in stats.visited:
            print(f"[SKIP] {path_str} (already visited)", file=sys.stderr)
            continue
        stats.visited.add(real_path)

        if query.ignore_patterns and is_excluded(real_path, base_path, query.ignore_patterns):
            continue

        included = not query.include_patterns or is_included(real_path, base_path, query.include_patterns)

        st = real_path.stat()
        if stat.S_ISREG(st.st_mode):
            if not included:
                continue
            child = _process_file(real_path, entry.name, path_str, st.st_size, node.depth + 1, query, stats, limits)
            if child is None:
                continue
            node.children.append(child)
            node.size += child.size
            node.file_count += 1

        elif stat.S_ISDIR(st.st_mode):
            child = FileSystemNode(
                name=entry.name,
                type=FileSystemNodeType.DIRECTORY,
                path_str=path_str,
                path=real_path,
                depth=node.depth + 1,
            )
            child = _process_node(child, query, base_path, stats, limits)
            # Non-matching directories are only descended to reach matching files
            if not included and child.file_count == 0:
                continue
            node.children.append(child)
            node.size += child.size
            node.file_count += child.file_count
            node.dir_count += 1 + child.dir_count

        else:
            raise UnsupportedEntryKindError(f"{real_path} is neither a file nor a directory")

    node.sort_children()
    return node


def _process_file(
    path: Path,
    name: str,
    path_str: str,
    size: int,
    depth: int,
    query: IngestionQuery,
    stats: FileSystemStats,
    limits: TraversalLimits,
) -> Optional[FileSystemNode]:
    """
    Admit a file into the traversal if it fits every budget.

    All checks happen before the file is counted, so a rejected file never
    touches the running totals.
    """
    if size > query.max_file_size:
        print(f"[SKIP] {path_str} (file too large)", file=sys.stderr)
        return None

    if stats.total_files >= limits.max_files:
        print(f"[LIMIT] Maximum file limit ({limits.max_files}) reached, skipping {path_str}", file=sys.stderr)
        return None

    if stats.total_size + size > limits.max_total_size:
        print(f"[SKIP] {path_str} (would exceed total size limit)", file=sys.stderr)
        return None

    stats.total_files += 1
    stats.total_size += size

    child = FileSystemNode(
        name=name,
        type=FileSystemNodeType.FILE,
        path_str=path_str,
        path=path,
        size=size,
        file_count=1,
        depth=depth,
    )
    child.content = read_file_content(path)
    return child


def _limit_exceeded(stats: FileSystemStats, depth: int, limits: TraversalLimits) -> bool:
    if depth > limits.max_depth:
        print(f"[LIMIT] Maximum depth limit ({limits.max_depth}) reached", file=sys.stderr)
        return True

    if stats.total_files >= limits.max_files:
        print(f"[LIMIT] Maximum file limit ({limits.max_files}) reached", file=sys.stderr)
        return True

    if stats.total_size >= limits.max_total_size:
        print(f"[LIMIT] Maximum total size limit ({limits.max_total_size / 1024 / 1024:.1f}MB) reached",
              file=sys.stderr)
        return True

    return False


def _display_path(path: Path, local_path: Path) -> str:
    try:
        rel = path.relative_to(local_path).as_posix()
    except ValueError:
        return path.as_posix()
    return "" if rel == "." else rel
