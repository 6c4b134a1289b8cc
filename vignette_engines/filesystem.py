"""Filesystem helpers for vignette-engines."""

from __future__ import annotations

import codecs
import os
import stat
from pathlib import Path
from typing import TextIO

from .constants import (
    DEFAULT_ENCODING,
    DEFAULT_MAX_FILE_SIZE,
    MAX_FILE_SIZE_ENV_VAR,
    NATIVE_ENCODINGS,
)
from .exceptions import ReadFileError, UnknownEncodingError


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["VIGNETTE_ENGINES_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def resolve_encoding(encoding: str | None, default: str = DEFAULT_ENCODING) -> str:
    """Turn a caller-supplied encoding name into a canonical codec name.

    ``None``, ``""``, ``"unknown"`` and ``"native.enc"`` select `default`.

    Raises:
        UnknownEncodingError: If the name does not resolve to a codec.

    Examples:
        resolve_encoding("unknown")  # "utf-8"
        resolve_encoding("Latin1")  # "iso8859-1"
    """
    name = default if encoding is None or encoding.lower() in NATIVE_ENCODINGS else encoding
    try:
        return codecs.lookup(name).name
    except LookupError as error:
        raise UnknownEncodingError(name) from error


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a regular file.

    Raises:
        ReadFileError: If the path is inaccessible or not a regular file.
    """
    try:
        stat_result = os.stat(filepath)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise ReadFileError(error_message) from error

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise ReadFileError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Raises:
        ReadFileError: If `stat_result.st_size` exceeds `max_size`.
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise ReadFileError(error_message)


def safe_read(filepath: Path, encoding: str) -> TextIO:
    """Open a file for reading with consistent error handling.

    Args:
        filepath: Path to the file.
        encoding: Codec name, already resolved.

    Returns:
        TextIO: File handle opened for reading.

    Raises:
        ReadFileError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("intro.Rmd"), "utf-8") as handle:
            first_line = handle.readline()
    """
    try:
        return open(filepath, "r", encoding=encoding)
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise ReadFileError(error_message) from error


def read_lines(
    filepath: Path,
    encoding: str | None = None,
    default_encoding: str = DEFAULT_ENCODING,
    max_file_size: int | None = None,
) -> list[str]:
    """Read a document as a list of lines without line terminators.

    Args:
        filepath: Path to the document.
        encoding: Encoding name; ``"unknown"`` or empty selects `default_encoding`.
        default_encoding: Encoding used for unknown/native encoding names.
        max_file_size: Size limit in bytes; resolved from the environment when
            omitted.

    Returns:
        list[str]: The document's lines, split on "\\n", "\\r" and "\\r\\n"
            only. An empty file yields an empty list.

    Raises:
        ReadFileError: If the encoding is unknown, the content cannot be
            decoded, the file is too large, or the path cannot be read.

    Examples:
        lines = read_lines(Path("intro.Rmd"), "UTF-8")
    """
    codec = resolve_encoding(encoding, default_encoding)
    if max_file_size is None:
        try:
            max_file_size = get_max_file_size()
        except ValueError as error:
            raise ReadFileError(str(error)) from error

    filepath = Path(filepath)
    enforce_file_size(collect_file_stat(filepath), max_file_size, filepath)

    try:
        with safe_read(filepath, codec) as file:
            # Universal newlines leave "\n" as the only separator; form feeds and
            # Unicode line separators stay inside their line.
            lines = [line.rstrip("\n") for line in file]
    except UnicodeDecodeError as error:
        error_message = f"Invalid {codec} sequence in {filepath}: {error}"
        raise ReadFileError(error_message) from error

    return lines
