"""
Data model shared by the traversal engine and the digest formatter.

IngestionQuery is the read-only description of what to ingest. The
traversal engine turns it into a tree of FileSystemNode values, using a
FileSystemStats instance that belongs to exactly one ingestion call and
the ceilings carried by a TraversalLimits value.

Usage:
    query = IngestionQuery(local_path=Path("/abs/project"), slug="project")
    root = FileSystemNode("project", FileSystemNodeType.DIRECTORY, "", query.local_path)
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Set, Tuple

from .config import MAX_DIRECTORY_DEPTH, MAX_FILE_SIZE, MAX_FILES, MAX_TOTAL_SIZE_BYTES


class FileSystemNodeType(Enum):
    """Kind of a node in the traversal result tree."""
    DIRECTORY = "DIRECTORY"
    FILE = "FILE"


@dataclass(frozen=True)
class TraversalLimits:
    """Budgets for one ingestion.

    Reaching a budget prunes further admission; it never fails the ingestion.
    """
    max_depth: int = MAX_DIRECTORY_DEPTH
    max_files: int = MAX_FILES
    max_total_size: int = MAX_TOTAL_SIZE_BYTES


@dataclass
class FileSystemStats:
    """Running state of a single traversal.

    Never share an instance between two ingestions: the visited set and
    the counters are what the budgets are checked against.
    """
    visited: Set[Path] = field(default_factory=set)   # Canonical (symlink-resolved) paths
    total_files: int = 0
    total_size: int = 0


@dataclass
class FileSystemNode:
    """One file or directory retained by the traversal.

    For a directory, size/file_count/dir_count aggregate the retained
    descendants only; dir_count does not include the node itself.
    """
    name: str                    # Display name
    type: FileSystemNodeType
    path_str: str                # Path relative to the ingestion root (posix form)
    path: Path                   # Absolute path the content is read from
    size: int = 0
    file_count: int = 0
    dir_count: int = 0
    depth: int = 0
    children: List["FileSystemNode"] = field(default_factory=list)
    content: Optional[str] = None  # Resolved once during traversal, files only

    @property
    def is_dir(self) -> bool:
        return self.type is FileSystemNodeType.DIRECTORY

    @property
    def extension(self) -> str:
        """File extension without the leading dot ("" when there is none)."""
        return Path(self.name).suffix.lstrip(".")

    def sort_children(self) -> None:
        """Sort the children once, in display order.

        Order of groups:
          0. a file named README.md (case-insensitive)
          1. regular files
          2. hidden files (name starts with ".")
          3. regular directories
          4. hidden directories

        Within a group, names compare case-insensitively, then by exact name.

        Raises:
            ValueError: If the node is not a directory
        """
        if not self.is_dir:
            raise ValueError(f"Cannot sort children of non-directory node {self.path_str!r}")
        self.children.sort(key=_sort_key)

    def __repr__(self) -> str:
        return f"FileSystemNode({self.path_str!r}, {self.type.value}, {self.size}B)"


def _sort_key(node: FileSystemNode) -> Tuple[int, str, str]:
    name = node.name.lower()
    hidden = name.startswith(".")
    if node.type is FileSystemNodeType.FILE:
        if name == "readme.md":
            return 0, name, node.name
        return (2 if hidden else 1), name, node.name
    return (4 if hidden else 3), name, node.name


@dataclass(frozen=True)
class IngestionQuery:
    """Resolved, read-only description of what to ingest.

    Produced by query.build_query() (or by any other resolver, e.g. one
    that clones a remote repository first). The identity fields are only
    used by the formatter.
    """
    local_path: Path                              # Absolute root of the repository/directory
    slug: str                                     # Display name for local roots
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    subpath: str = "/"                            # Subpath below local_path to ingest
    type: str = "tree"                            # "tree" (directory) or "file"
    max_file_size: int = MAX_FILE_SIZE
    ignore_patterns: Set[str] = field(default_factory=set)
    include_patterns: Optional[Set[str]] = None

    # Repository identity (remote sources only)
    user_name: Optional[str] = None
    repo_name: Optional[str] = None
    url: Optional[str] = None
    branch: Optional[str] = None
    commit: Optional[str] = None
