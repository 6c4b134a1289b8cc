"""Package-specific exception and warning types."""

from __future__ import annotations


class ReadFileError(OSError):
    """Raised when a document cannot be read as text.

    Covers missing or unreadable paths, unknown encoding names, content that
    does not decode with the requested encoding, and oversized files.
    """


class UnknownEncodingError(ReadFileError):
    """Raised when an encoding name does not resolve to a codec.

    Args:
        encoding: The encoding name supplied by the caller.
    """

    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(f"Unknown encoding: {self.encoding}")


class EngineFallbackWarning(UserWarning):
    """Emitted when a vignette engine degrades to a simpler renderer."""
