#!/usr/bin/env python3
"""
Tests for digest formatting and child ordering.
"""

import unittest
import sys
from pathlib import Path

# Import from parent directory
sys.path.insert(0, str(Path(__file__).parent.parent))
from dir_digest.formatting import (
    create_summary_prefix,
    create_tree_structure,
    estimate_tokens,
    format_node,
    format_token_count,
    gather_file_contents,
)
from dir_digest.schema import FileSystemNode, FileSystemNodeType, IngestionQuery

DIR = FileSystemNodeType.DIRECTORY
FILE = FileSystemNodeType.FILE


def _file(name, path_str=None, content=""):
    return FileSystemNode(name, FILE, path_str or name, Path("/tmp") / name,
                          size=len(content), file_count=1, content=content)


def _dir(name, children, path_str=None):
    node = FileSystemNode(name, DIR, path_str if path_str is not None else name, Path("/tmp") / name,
                          children=list(children))
    node.file_count = sum(c.file_count for c in children)
    return node


class TestSortChildren(unittest.TestCase):
    """Test the display order of directory children."""

    def test_group_order(self):
        root = _dir("", [_dir(".git", []), _dir("src", []), _file(".env"),
                         _file("b.txt"), _file("README.md")], path_str="")
        root.sort_children()
        self.assertEqual([c.name for c in root.children], ["README.md", "b.txt", ".env", "src", ".git"])

    def test_readme_case_insensitive(self):
        root = _dir("", [_file("a.txt"), _file("readme.MD")], path_str="")
        root.sort_children()
        self.assertEqual(root.children[0].name, "readme.MD")

    def test_readme_directory_not_promoted(self):
        root = _dir("", [_dir("README.md", []), _file("z.txt")], path_str="")
        root.sort_children()
        self.assertEqual([c.name for c in root.children], ["z.txt", "README.md"])

    def test_case_insensitive_with_exact_tiebreak(self):
        root = _dir("", [_file("b.txt"), _file("B.txt"), _file("a.txt")], path_str="")
        root.sort_children()
        self.assertEqual([c.name for c in root.children], ["a.txt", "B.txt", "b.txt"])

    def test_file_cannot_sort(self):
        with self.assertRaises(ValueError):
            _file("a.txt").sort_children()


class TestTreeStructure(unittest.TestCase):
    """Test ASCII tree rendering."""

    def setUp(self):
        self.query = IngestionQuery(local_path=Path("/tmp/proj"), slug="proj")

    def test_nested_prefixes(self):
        root = _dir("proj", [
            _dir("src", [_file("a.py", "src/a.py"), _file("b.py", "src/b.py")], path_str="src"),
            _file("z.txt"),
        ], path_str="")
        self.assertEqual(
            create_tree_structure(self.query, root),
            "└── proj/\n"
            "    ├── src/\n"
            "    │   ├── a.py\n"
            "    │   └── b.py\n"
            "    └── z.txt\n",
        )

    def test_unnamed_root_uses_slug(self):
        root = _dir("", [], path_str="")
        self.assertEqual(create_tree_structure(self.query, root), "└── proj/\n")


class TestFileContents(unittest.TestCase):
    """Test concatenation of file blocks."""

    def test_no_extension(self):
        self.assertEqual(gather_file_contents(_file("Makefile", content="all:")),
                         "### Makefile\n```\nall:\n```\n")

    def test_depth_first_order(self):
        root = _dir("", [
            _file("a.md", content="A"),
            _dir("sub", [_file("b.py", "sub/b.py", "B")]),
        ], path_str="")
        self.assertEqual(gather_file_contents(root),
                         "### a.md\n```md\nA\n```\n\n### sub/b.py\n```py\nB\n```\n")

    def test_empty_directory(self):
        self.assertEqual(gather_file_contents(_dir("", [], path_str="")), "")


class TestSummary(unittest.TestCase):
    """Test the summary block."""

    def test_local_directory(self):
        query = IngestionQuery(local_path=Path("/tmp/proj"), slug="proj")
        self.assertEqual(create_summary_prefix(query), "Directory: proj\n")

    def test_repository_with_commit(self):
        query = IngestionQuery(local_path=Path("/tmp/x"), slug="x", user_name="octo",
                               repo_name="hello", branch="dev", commit="abc123")
        self.assertEqual(create_summary_prefix(query), "Repository: octo/hello\nCommit: abc123\n")

    def test_non_default_branch(self):
        query = IngestionQuery(local_path=Path("/tmp/x"), slug="x", user_name="octo",
                               repo_name="hello", branch="dev")
        self.assertIn("Branch: dev\n", create_summary_prefix(query))

    def test_default_branch_hidden(self):
        query = IngestionQuery(local_path=Path("/tmp/x"), slug="x", branch="Main")
        self.assertNotIn("Branch", create_summary_prefix(query))

    def test_subpath_hidden_for_single_file(self):
        query = IngestionQuery(local_path=Path("/tmp/x"), slug="x", subpath="/docs/a.md")
        self.assertIn("Subpath: /docs/a.md\n", create_summary_prefix(query))
        self.assertNotIn("Subpath", create_summary_prefix(query, single_file=True))

    def test_format_node_directory(self):
        query = IngestionQuery(local_path=Path("/tmp/proj"), slug="proj")
        root = _dir("proj", [_file("a.md", content="A")], path_str="")
        summary, tree, content = format_node(root, query)
        self.assertTrue(summary.startswith("Directory: proj\nFiles analyzed: 1\n\nEstimated tokens: "))
        self.assertTrue(tree.startswith("Directory structure:\n└── proj/\n"))
        self.assertEqual(content, "### a.md\n```md\nA\n```\n")


class TestTokenEstimate(unittest.TestCase):
    """Test the length-based token estimate."""

    def test_estimate(self):
        self.assertEqual(estimate_tokens(""), 0)
        self.assertEqual(estimate_tokens("abcd"), 1)
        self.assertEqual(estimate_tokens("abcde"), 2)

    def test_empty_text(self):
        self.assertIsNone(format_token_count(""))

    def test_plain_count(self):
        self.assertEqual(format_token_count("x" * 480), "120")

    def test_thousands(self):
        self.assertEqual(format_token_count("x" * 4800), "1.2k")

    def test_millions(self):
        self.assertEqual(format_token_count("x" * 4_800_000), "1.2M")


if __name__ == '__main__':
    unittest.main()
