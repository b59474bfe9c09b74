"""Exceptions raised by dir_digest."""


class DigestError(Exception):
    """Base class for every failure that aborts an ingestion."""


class InvalidPatternError(DigestError, ValueError):
    """Raised when an include/exclude pattern contains characters outside the allowed set.

    Allowed: alphanumerics, dash (-), underscore (_), dot (.), forward slash (/),
    plus (+), asterisk (*) and at sign (@).
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(
            f"Pattern '{pattern}' contains invalid characters. Only alphanumeric characters, dash (-), "
            "underscore (_), dot (.), forward slash (/), plus (+), asterisk (*), and at sign (@) are allowed."
        )


class ResourceNotFoundError(DigestError, FileNotFoundError):
    """Raised when the resolved ingestion target does not exist."""


class NotAFileError(DigestError):
    """Raised when a single-file query resolves to something that is not a regular file."""


class EmptyResourceError(DigestError):
    """Raised when a single-file query yields no content."""


class UnsupportedEntryKindError(DigestError):
    """Raised when a directory entry is neither a regular file nor a directory."""


class InvalidNotebookError(DigestError):
    """Raised when a notebook file is not valid JSON."""


class NotebookFormatError(DigestError):
    """Raised when a notebook contains an unknown cell type or output type."""
