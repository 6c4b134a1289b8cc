"""Document format descriptors and format resolution."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from . import constants
from .models import DocumentFormat, FormatDescriptor

logger = logging.getLogger(__name__)

FormatTable = Mapping[DocumentFormat, FormatDescriptor]


def build_format_table() -> FormatTable:
    """Build the read-only table of built-in format descriptors.

    Returns:
        FormatTable: Mapping from every supported `DocumentFormat` (except
            ``NONE``) to its code patterns. Calling this again returns an
            equal table.

    Examples:
        table = build_format_table()
        table[DocumentFormat.MD].chunk_begin.search("```{r}")
    """
    return MappingProxyType(
        {
            DocumentFormat.RNW: FormatDescriptor(
                constants.RNW_CHUNK_BEGIN, constants.RNW_CHUNK_END, constants.RNW_INLINE_CODE
            ),
            DocumentFormat.TEX: FormatDescriptor(
                constants.TEX_CHUNK_BEGIN, constants.TEX_CHUNK_END, constants.TEX_INLINE_CODE
            ),
            DocumentFormat.HTML: FormatDescriptor(
                constants.HTML_CHUNK_BEGIN, constants.HTML_CHUNK_END, constants.HTML_INLINE_CODE
            ),
            DocumentFormat.MD: FormatDescriptor(
                constants.MD_CHUNK_BEGIN, constants.MD_CHUNK_END, constants.MD_INLINE_CODE
            ),
            DocumentFormat.RST: FormatDescriptor(
                constants.RST_CHUNK_BEGIN, constants.RST_CHUNK_END, constants.RST_INLINE_CODE
            ),
            DocumentFormat.ASCIIDOC: FormatDescriptor(
                constants.ASCIIDOC_CHUNK_BEGIN,
                constants.ASCIIDOC_CHUNK_END,
                constants.ASCIIDOC_INLINE_CODE,
            ),
            DocumentFormat.TEXTILE: FormatDescriptor(
                constants.TEXTILE_CHUNK_BEGIN,
                constants.TEXTILE_CHUNK_END,
                constants.TEXTILE_INLINE_CODE,
            ),
        }
    )


DEFAULT_FORMATS = build_format_table()


def to_format(format_name: DocumentFormat | str) -> DocumentFormat:
    """Coerce a format name into a `DocumentFormat`, case-insensitively.

    Document extensions such as ``"Rmd"`` or ``".Rnw"`` resolve through the
    built-in extension aliases. Anything else maps to ``DocumentFormat.NONE``.

    Examples:
        to_format("RST")  # DocumentFormat.RST
        to_format("Rmd")  # DocumentFormat.MD
    """
    if isinstance(format_name, DocumentFormat):
        return format_name
    name = str(format_name).lower()
    try:
        return DocumentFormat(name)
    except ValueError:
        alias = constants.EXTENSION_ALIASES.get(name.lstrip("."))
        return DocumentFormat.NONE if alias is None else DocumentFormat(alias)


def get_descriptor(
    format_name: DocumentFormat | str, formats: FormatTable = DEFAULT_FORMATS
) -> FormatDescriptor | None:
    """Return the descriptor registered for `format_name`, or None."""
    return formats.get(to_format(format_name))


def format_for_extension(
    extension: str, aliases: Mapping[str, str] = constants.EXTENSION_ALIASES
) -> DocumentFormat:
    """Resolve a file extension to a document format.

    Args:
        extension: File extension, with or without the leading dot.
        aliases: Mapping of lower-cased extensions to format names.

    Returns:
        DocumentFormat: The matching format, or ``DocumentFormat.NONE``.

    Examples:
        format_for_extension(".Rmd")  # DocumentFormat.MD
        format_for_extension("txt")  # DocumentFormat.NONE
    """
    format_name = aliases.get(extension.lower().lstrip("."))
    if format_name is None:
        return DocumentFormat.NONE
    return to_format(format_name)


def detect_format(
    lines: Sequence[str],
    extension: str,
    formats: FormatTable = DEFAULT_FORMATS,
    aliases: Mapping[str, str] = constants.EXTENSION_ALIASES,
    sniff: bool = True,
) -> DocumentFormat:
    """Pick the format of a document from its extension, then its content.

    The extension wins when it is recognised. Otherwise, when `sniff` is true,
    the first format (in `DocumentFormat` order) whose chunk or inline code
    pattern matches any line is chosen.

    Args:
        lines: Document content split into lines.
        extension: The document's file extension.
        formats: Descriptor table consulted while sniffing.
        aliases: Extension aliases.
        sniff: Whether to inspect the content when the extension is unknown.

    Returns:
        DocumentFormat: The detected format, or ``DocumentFormat.NONE``.
    """
    document_format = format_for_extension(extension, aliases)
    if document_format is not DocumentFormat.NONE:
        logger.debug("Format %s selected by extension %r", document_format.value, extension)
        return document_format

    if not sniff:
        return DocumentFormat.NONE

    for candidate in DocumentFormat:
        descriptor = formats.get(candidate)
        if descriptor is None:
            continue
        for line in lines:
            if descriptor.chunk_begin.search(line) or descriptor.inline_code.search(line):
                logger.debug("Format %s detected from content", candidate.value)
                return candidate

    return DocumentFormat.NONE
