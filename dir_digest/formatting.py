"""
Digest formatting: summary, directory tree and concatenated file contents.

The formatter never reorders nodes; it relies on the children having
been sorted by the traversal.
"""

from typing import List, Optional, Tuple

from .schema import FileSystemNode, IngestionQuery

DEFAULT_BRANCHES = ("main", "master")


def format_node(node: FileSystemNode, query: IngestionQuery) -> Tuple[str, str, str]:
    """
    Generate the summary, directory structure and file contents for node.

    Returns:
        (summary, tree, content)
    """
    is_single_file = not node.is_dir
    summary = create_summary_prefix(query, single_file=is_single_file)

    if node.is_dir:
        summary += f"Files analyzed: {node.file_count}\n"
    else:
        file_content = node.content or ""
        summary += f"File: {node.name}\n"
        summary += f"Lines: {len(file_content.split(chr(10))):,}\n"

    tree = "Directory structure:\n" + create_tree_structure(query, node)
    content = gather_file_contents(node)

    token_estimate = format_token_count(tree + content)
    if token_estimate:
        summary += f"\nEstimated tokens: {token_estimate}"

    return summary, tree, content


def create_summary_prefix(query: IngestionQuery, single_file: bool = False) -> str:
    """Repository (or directory) line, commit/branch line and subpath line."""
    parts = []

    if query.user_name:
        parts.append(f"Repository: {query.user_name}/{query.repo_name}")
    else:
        parts.append(f"Directory: {query.slug}")

    if query.commit:
        parts.append(f"Commit: {query.commit}")
    elif query.branch and query.branch.lower() not in DEFAULT_BRANCHES:
        parts.append(f"Branch: {query.branch}")

    if query.subpath != "/" and not single_file:
        parts.append(f"Subpath: {query.subpath}")

    return "\n".join(parts) + "\n"


def create_tree_structure(
    query: IngestionQuery,
    node: FileSystemNode,
    prefix: str = "",
    is_last: bool = True,
) -> str:
    """
    Render node and its descendants as an ASCII tree.

    Args:
        query: Supplies the slug used when the root has no name
        node: Node to render
        prefix: Indentation inherited from the ancestors
        is_last: Whether node is the last child of its parent

    Returns:
        The tree, one entry per line
    """
    return "".join(line + "\n" for line in _tree_lines(query, node, prefix, is_last))


def _tree_lines(query: IngestionQuery, node: FileSystemNode, prefix: str, is_last: bool) -> List[str]:
    name = node.name or query.slug
    if node.is_dir:
        name += "/"

    current_prefix = "└── " if is_last else "├── "
    lines = [f"{prefix}{current_prefix}{name}"]

    if node.is_dir and node.children:
        extension = "    " if is_last else "│   "
        last_index = len(node.children) - 1
        for i, child in enumerate(node.children):
            lines.extend(_tree_lines(query, child, prefix + extension, i == last_index))

    return lines


def gather_file_contents(node: FileSystemNode) -> str:
    """
    Concatenate the contents of every file under node, depth first.

    Each file is a "### path" heading followed by a fenced block labeled
    with the file extension. Directories add nothing of their own.
    """
    if not node.is_dir:
        return f"### {node.path_str}\n```{node.extension}\n{node.content or ''}\n```\n"

    return "\n".join(gather_file_contents(child) for child in node.children)


def estimate_tokens(text: str) -> int:
    """Length-based estimate: one token per 4 characters, rounded up."""
    return (len(text) + 3) // 4


def format_token_count(text: str) -> Optional[str]:
    """
    Return a human-readable token estimate for text.

    Examples:
        120 tokens -> "120", 1200 -> "1.2k", 1200000 -> "1.2M".
        Empty text -> None.
    """
    if not text:
        return None

    total_tokens = estimate_tokens(text)

    if total_tokens >= 1_000_000:
        return f"{total_tokens / 1_000_000:.1f}M"

    if total_tokens >= 1_000:
        return f"{total_tokens / 1_000:.1f}k"

    return str(total_tokens)
