"""Spell-check filter for literate source documents."""

from __future__ import annotations

import logging
from pathlib import Path

from .classifier import classify_and_strip
from .config import FilterConfig, normalize_config, validate_config
from .constants import EXTENSION_ALIASES
from .filesystem import read_lines
from .formats import DEFAULT_FORMATS, FormatTable, detect_format
from .models import DocumentFormat

logger = logging.getLogger(__name__)


def knit_filter(
    filepath: str | Path,
    encoding: str = "unknown",
    config: FilterConfig | None = None,
    formats: FormatTable = DEFAULT_FORMATS,
    format_name: DocumentFormat | str | None = None,
) -> list[str]:
    """Return a document's lines with code chunks and inline code removed.

    Intended as the filter step of a spell checker: R code and inline
    expressions would otherwise be reported as typos. Line count is preserved.

    Args:
        filepath: The source document.
        encoding: Encoding of the file; ``"unknown"`` selects the configured
            default.
        config: Filter configuration. Defaults to a new `FilterConfig`.
        formats: Descriptor table.
        format_name: Force a format instead of deriving it from the extension.

    Returns:
        list[str]: Filtered lines. Documents of an unrecognised format are
            returned unchanged.

    Raises:
        ReadFileError: If the file cannot be read with the given encoding.
        ConfigError: If the configuration fails validation.

    Examples:
        knit_filter("vignettes/intro.Rmd", encoding="UTF-8")
    """
    config = normalize_config(config or FilterConfig())
    validate_config(config)

    filepath = Path(filepath)
    lines = read_lines(
        filepath,
        encoding,
        default_encoding=config.encoding,
        max_file_size=config.max_file_size,
    )
    if not lines:
        return lines

    if format_name is None:
        aliases = {**EXTENSION_ALIASES, **config.extensions}
        format_name = detect_format(
            lines,
            filepath.suffix.lower(),
            formats=formats,
            aliases=aliases,
            sniff=config.detect_from_content,
        )
    logger.debug("Filtering %s as %s", filepath, format_name)

    return classify_and_strip(lines, format_name, formats)
