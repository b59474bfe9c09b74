"""
Jupyter notebook to Python script conversion.

Markdown and raw cells become triple-quoted blocks, code cells are kept
verbatim and may be followed by their outputs as "#" comments. Cells
whose source is empty are dropped.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import InvalidNotebookError, NotebookFormatError

NOTEBOOK_EXTENSION = ".ipynb"
SCRIPT_HEADER = "# Jupyter notebook converted to Python script."

CELL_TYPES = ("markdown", "code", "raw")


def is_notebook(path: Path) -> bool:
    return path.suffix == NOTEBOOK_EXTENSION


def process_notebook(file_path: Path, include_output: bool = True) -> str:
    """
    Read a notebook file and return it as a Python script.

    Args:
        file_path: Path to the .ipynb file
        include_output: Append code cell outputs as comments

    Returns:
        The script text

    Raises:
        InvalidNotebookError: If the file is not a JSON object
        NotebookFormatError: If a cell or output type is unknown, or the
                             document has an unexpected shape
    """
    try:
        with file_path.open("r", encoding="utf-8") as f:
            notebook = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidNotebookError(f"Invalid JSON in notebook: {file_path}") from e

    if not isinstance(notebook, dict):
        raise InvalidNotebookError(f"Notebook {file_path} is not a JSON object")

    try:
        return transcode_notebook(notebook, include_output)
    except NotebookFormatError as e:
        raise NotebookFormatError(f"{file_path}: {e}") from e


def transcode_notebook(notebook: Dict[str, Any], include_output: bool = True) -> str:
    """
    Convert an already parsed notebook document into script text.

    Raises:
        NotebookFormatError: If a cell or output type is unknown, or if a
                             cell, output or source has an unexpected shape
    """
    worksheets = notebook.get("worksheets")
    if worksheets:
        print("Warning: Worksheets are deprecated as of IPEP-17. Consider updating the notebook.",
              file=sys.stderr)
        worksheets = _as_list(worksheets, "worksheets")
        if len(worksheets) > 1:
            print("Warning: Multiple worksheets detected. Combining all worksheets into a single script.",
                  file=sys.stderr)
        cells = [
            cell
            for ws in worksheets
            for cell in _as_list(_as_dict(ws, "worksheet").get("cells"), "cells")
        ]
    else:
        cells = _as_list(notebook.get("cells"), "cells")

    result = [SCRIPT_HEADER]
    for cell in cells:
        cell_str = _process_cell(_as_dict(cell, "cell"), include_output)
        if cell_str:
            result.append(cell_str)

    return "\n\n".join(result) + "\n"


def _process_cell(cell: Dict[str, Any], include_output: bool) -> Optional[str]:
    cell_type = cell.get("cell_type")
    if cell_type not in CELL_TYPES:
        raise NotebookFormatError(f"Unknown cell type: {cell_type!r}")

    cell_str = "".join(_as_lines(cell.get("source"), "source"))
    if not cell_str:
        return None

    if cell_type in ("markdown", "raw"):
        return f'"""\n{cell_str}\n"""'

    outputs = _as_list(cell.get("outputs"), "outputs")
    if include_output and outputs:
        lines = [line for output in outputs for line in _extract_output(_as_dict(output, "output"))]
        lines = [line if line.endswith("\n") else line + "\n" for line in lines]
        cell_str += "\n# Output:\n#   " + "\n#   ".join(lines)

    return cell_str


def _extract_output(output: Dict[str, Any]) -> List[str]:
    output_type = output.get("output_type")

    if output_type == "stream":
        return _as_lines(output.get("text"), "stream text")

    if output_type in ("execute_result", "display_data"):
        data = _as_dict(output.get("data") or {}, "output data")
        return _as_lines(data.get("text/plain"), "text/plain output")

    if output_type == "error":
        return [f"Error: {output.get('ename')}: {output.get('evalue')}"]

    raise NotebookFormatError(f"Unknown output type: {output_type!r}")


def _as_dict(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise NotebookFormatError(f"Expected {what} to be an object, got {type(value).__name__}")
    return value


def _as_list(value: Any, what: str) -> List[Any]:
    """None counts as an empty list."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise NotebookFormatError(f"Expected {what} to be a list, got {type(value).__name__}")
    return value


def _as_lines(value: Any, what: str) -> List[str]:
    """Accept a string or a list of strings; None counts as no lines."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(line, str) for line in value):
        return list(value)
    raise NotebookFormatError(f"Expected {what} to be a string or a list of strings")
