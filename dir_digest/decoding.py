"""
Text/binary classification and decoding of file contents.

A file is binary when its leading sample contains a NUL (0x00) or 0xFF
byte. Text files are decoded with the first encoding of
get_encoding_list() that succeeds. Failures here never abort an
ingestion: the node gets a placeholder string instead.
"""

import codecs
import sys
from pathlib import Path
from typing import List, Optional

from .config import BINARY_SAMPLE_SIZE
from .exceptions import InvalidNotebookError, NotebookFormatError
from .notebook import is_notebook, process_notebook

NON_TEXT_PLACEHOLDER = "[Non-text file]"
UNDECODABLE_PLACEHOLDER = "Error: Unable to decode file with available encodings"

_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


def get_encoding_list() -> List[str]:
    """
    Encodings to try, in order.

    UTF-8 (BOM-aware) first, then UTF-16, then latin-1 which accepts any
    byte sequence. Windows adds its legacy code pages.
    """
    encodings = ["utf-8-sig", "utf-16", "utf-16-le", "latin-1"]
    if sys.platform == "win32":
        encodings += ["cp1252", "iso-8859-1"]
    return encodings


def is_text_file(file_path: Path) -> bool:
    """
    Checks if a file is likely text by reading a leading chunk and looking
    for NUL or 0xFF bytes. Empty files are text; unreadable files are not.
    """
    try:
        with file_path.open("rb") as f:
            chunk = f.read(BINARY_SAMPLE_SIZE)
    except OSError:
        return False

    if not chunk:
        return True
    return b"\x00" not in chunk and b"\xff" not in chunk


def decode_bytes(data: bytes) -> Optional[str]:
    """
    Decode data with the first encoding that accepts it.

    UTF-16 variants are only tried when the data starts with a UTF-16
    byte-order mark, since almost any even-length input decodes as UTF-16.

    Returns:
        The decoded text, or None if no encoding succeeded
    """
    for encoding in get_encoding_list():
        if encoding.startswith("utf-16") and not data.startswith(_UTF16_BOMS):
            continue
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return None


def read_file_content(file_path: Path, include_notebook_output: bool = True) -> str:
    """
    Return the content to show for a file.

    Binary files, unreadable files, undecodable files and broken notebooks
    all yield a descriptive placeholder rather than an exception.
    """
    if not is_text_file(file_path):
        return NON_TEXT_PLACEHOLDER

    if is_notebook(file_path):
        try:
            return process_notebook(file_path, include_output=include_notebook_output)
        except (InvalidNotebookError, NotebookFormatError) as e:
            return f"Error processing notebook: {e}"
        except OSError as e:
            return f"Error reading file: {e}"

    try:
        data = file_path.read_bytes()
    except OSError as e:
        return f"Error reading file: {e}"

    text = decode_bytes(data)
    if text is None:
        return UNDECODABLE_PLACEHOLDER
    return text
