#!/usr/bin/env python3
"""
Produces a text digest of a local directory or file: a short summary,
the directory tree, and every retained file's contents in one document.
"""

import argparse
import sys
from pathlib import Path

# Handle SIGPIPE gracefully for Unix pipe compatibility (e.g., ./digest_cli.py . -o - | head)
import signal
try:
    signal.signal(signal.SIGPIPE, signal.SIG_DFL)
except AttributeError:
    pass  # Windows compatibility (SIGPIPE doesn't exist on Windows)

from dir_digest import __version__
from dir_digest.config import (
    MAX_DIRECTORY_DEPTH,
    MAX_FILE_SIZE,
    MAX_FILES,
    MAX_TOTAL_SIZE_BYTES,
    OUTPUT_FILE_NAME,
)
from dir_digest.entrypoint import ingest
from dir_digest.exceptions import DigestError
from dir_digest.schema import TraversalLimits


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Turn a directory into a single text digest (summary, tree and file contents).",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog=f"""
Examples:
  # Digest the current directory into {OUTPUT_FILE_NAME}
  ./digest_cli.py

  # Only Python and Markdown files, printed to stdout
  ./digest_cli.py ./project -i "*.py" -i "*.md" -o -

  # Extra excludes and a 50 KB per-file ceiling
  ./digest_cli.py ./project -e "tests/*" -e "*.lock" -s 51200
        """
    )

    parser.add_argument("--version", action="version", version=f"dir-digest {__version__}")
    parser.add_argument("source", type=Path, nargs='?', default=Path("."),
                        help="Directory or file to digest. Defaults to the current directory.")
    parser.add_argument("-o", "--output", type=str, default=OUTPUT_FILE_NAME,
                        help=f"Output file path, or '-' for standard output.\nDefaults to {OUTPUT_FILE_NAME}")
    parser.add_argument("-s", "--max-size", type=int, default=MAX_FILE_SIZE, metavar="BYTES",
                        help=f"Skip files larger than BYTES (default: {MAX_FILE_SIZE})")
    parser.add_argument("-e", "--exclude-pattern", action="append", default=[], metavar="PATTERN",
                        help="Glob pattern to exclude, on top of the built-in defaults. Repeatable.")
    parser.add_argument("-i", "--include-pattern", action="append", default=[], metavar="PATTERN",
                        help="Glob pattern of files to keep; everything else is dropped. Repeatable.\n"
                             "An include pattern also cancels an identical exclude pattern.")

    # Traversal budgets
    parser.add_argument("--max-files", type=int, default=MAX_FILES, metavar="N",
                        help=f"Stop admitting files after N files (default: {MAX_FILES})")
    parser.add_argument("--max-total-size", type=int, default=MAX_TOTAL_SIZE_BYTES, metavar="BYTES",
                        help=f"Stop admitting files after BYTES in total (default: {MAX_TOTAL_SIZE_BYTES})")
    parser.add_argument("--max-depth", type=int, default=MAX_DIRECTORY_DEPTH, metavar="N",
                        help=f"Do not descend below depth N (default: {MAX_DIRECTORY_DEPTH})")

    return parser


def main(argv=None):
    """Main entry point for the script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    limits = TraversalLimits(
        max_depth=args.max_depth,
        max_files=args.max_files,
        max_total_size=args.max_total_size,
    )
    to_stdout = args.output == "-"

    print(f"\nDigesting '{args.source}'...", file=sys.stderr)

    try:
        summary, tree, content = ingest(
            args.source,
            max_file_size=args.max_size,
            include_patterns=args.include_pattern or None,
            exclude_patterns=args.exclude_pattern or None,
            output=None if to_stdout else args.output,
            limits=limits,
        )
    except (DigestError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if to_stdout:
        sys.stdout.write(tree + "\n" + content)
        print(f"\n{summary}", file=sys.stderr)
    else:
        print(f"Analysis complete! Output written to: {args.output}")
        print("\nSummary:")
        print(summary)


if __name__ == "__main__":  # pragma: no cover
    main()
