#!/usr/bin/env python3
"""
Tests for the command line interface.
"""

import unittest
import tempfile
import shutil
import sys
from io import StringIO
from pathlib import Path
from unittest import mock

# Import from parent directory
sys.path.insert(0, str(Path(__file__).parent.parent))
import digest_cli


class TestCLI(unittest.TestCase):
    """Test argument handling and output of digest_cli.main()."""

    def setUp(self):
        """Create temporary test directory."""
        self.test_dir = tempfile.mkdtemp()
        self.root = Path(self.test_dir) / "proj"
        (self.root / "sub").mkdir(parents=True)
        (self.root / "a.md").write_text("A")
        (self.root / "sub" / "b.py").write_text("B")
        (self.root / "c.ts").write_text("C")

    def tearDown(self):
        """Clean up temporary directory."""
        shutil.rmtree(self.test_dir)

    def run_cli(self, *argv):
        stdout, stderr = StringIO(), StringIO()
        with mock.patch("sys.stdout", stdout), mock.patch("sys.stderr", stderr):
            digest_cli.main([str(a) for a in argv])
        return stdout.getvalue(), stderr.getvalue()

    def test_writes_output_file(self):
        out = Path(self.test_dir) / "out.txt"

        stdout, _ = self.run_cli(self.root, "-o", out)

        text = out.read_text(encoding="utf-8")
        self.assertTrue(text.startswith("Directory structure:\n└── proj/\n"))
        self.assertIn("### sub/b.py\n```py\nB\n```\n", text)
        self.assertIn("Output written to: ", stdout)
        self.assertIn("Directory: proj\nFiles analyzed: 3\n", stdout)

    def test_stdout_output(self):
        stdout, stderr = self.run_cli(self.root, "-o", "-")
        self.assertTrue(stdout.startswith("Directory structure:\n"))
        self.assertIn("Files analyzed: 3", stderr)
        self.assertFalse((Path.cwd() / "-").exists())

    def test_include_and_exclude(self):
        stdout, _ = self.run_cli(self.root, "-o", "-", "-i", "*.py", "-i", "*.ts", "-e", "*.ts")
        self.assertIn("### sub/b.py", stdout)
        self.assertIn("### c.ts", stdout)
        self.assertNotIn("### a.md", stdout)

    def test_max_files(self):
        _, stderr = self.run_cli(self.root, "-o", "-", "--max-files", "1")
        self.assertIn("Files analyzed: 1", stderr)

    def test_max_size(self):
        (self.root / "big.txt").write_text("x" * 100)
        stdout, _ = self.run_cli(self.root, "-o", "-", "-s", "10")
        self.assertNotIn("### big.txt", stdout)

    def test_missing_source_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_cli(self.root / "missing", "-o", "-")
        self.assertEqual(ctx.exception.code, 1)

    def test_invalid_pattern_exits(self):
        stderr = StringIO()
        with mock.patch("sys.stderr", stderr), mock.patch("sys.stdout", StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                digest_cli.main([str(self.root), "-o", "-", "-e", "bad|pattern"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("Error: Pattern 'bad|pattern' contains invalid characters", stderr.getvalue())

    def test_version(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_cli("--version")
        self.assertEqual(ctx.exception.code, 0)


if __name__ == '__main__':
    unittest.main()
