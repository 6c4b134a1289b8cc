"""Code/text region classification for literate documents."""

from __future__ import annotations

from collections.abc import Sequence

from .formats import DEFAULT_FORMATS, FormatTable, get_descriptor
from .models import DocumentFormat, FormatDescriptor, LineKind


def filter_chunk_end(is_begin: Sequence[bool], is_end: Sequence[bool]) -> list[bool]:
    """Keep only the end-pattern matches that close an open chunk.

    Walks the lines once. While a chunk is open, the first end match closes
    it; while none is open, a begin match opens one. A line matching both
    patterns closes an open chunk, or opens a new one when none is open.

    Args:
        is_begin: Per-line chunk begin matches.
        is_end: Per-line raw chunk end matches.

    Returns:
        list[bool]: True for each line that terminates an open chunk.

    Examples:
        filter_chunk_end([False, True, False], [True, False, True])  # [False, False, True]
    """
    in_chunk = False
    terminators = []
    for begin, end in zip(is_begin, is_end):
        if in_chunk and end:
            in_chunk = False
            terminators.append(True)
            continue
        if not in_chunk and begin:
            in_chunk = True
        terminators.append(False)
    return terminators


def classify_lines(
    lines: Sequence[str], descriptor: FormatDescriptor
) -> tuple[list[LineKind], list[bool]]:
    """Classify every line as code or text.

    Args:
        lines: Document lines without line terminators.
        descriptor: Patterns of the document's format.

    Returns:
        tuple[list[LineKind], list[bool]]: Per-line kinds (never ``UNSET``)
            and the per-line terminator flags.
    """
    is_begin = [descriptor.chunk_begin.search(line) is not None for line in lines]
    is_end = filter_chunk_end(
        is_begin, [descriptor.chunk_end.search(line) is not None for line in lines]
    )

    kinds = [LineKind.UNSET] * len(lines)
    for index, begin in enumerate(is_begin):
        if begin:
            kinds[index] = LineKind.CODE
    for index, end in enumerate(is_end):
        if end:
            kinds[index] = LineKind.TEXT

    # Documents start in prose
    if kinds and kinds[0] is LineKind.UNSET:
        kinds[0] = LineKind.TEXT
    for index in range(1, len(kinds)):
        if kinds[index] is LineKind.UNSET:
            kinds[index] = kinds[index - 1]

    return kinds, is_end


def strip_inline_code(line: str, descriptor: FormatDescriptor) -> str:
    """Remove every inline code span from a prose line."""
    return descriptor.inline_code.sub("", line)


def classify_and_strip(
    lines: Sequence[str],
    format_name: DocumentFormat | str,
    formats: FormatTable = DEFAULT_FORMATS,
) -> list[str]:
    """Blank out code chunks and inline code so only prose remains.

    Chunk lines, including the lines that open and close each chunk, become
    empty strings; inline code spans are removed from prose lines. The result
    has the same number of lines as the input, so line numbers reported by a
    spell checker still point into the original document.

    Args:
        lines: Document lines without line terminators.
        format_name: A `DocumentFormat`, its name, or a document extension
            such as ``"Rmd"``.
        formats: Descriptor table to resolve `format_name` against.

    Returns:
        list[str]: Filtered lines. When `format_name` has no descriptor the
            lines are returned unchanged.

    Examples:
        classify_and_strip(["Text `r 1+1`.", "```{r}", "x <- 1", "```"], "md")
        # ["Text .", "", "", ""]
    """
    if not lines:
        return list(lines)

    descriptor = get_descriptor(format_name, formats)
    if descriptor is None:
        return list(lines)

    kinds, terminators = classify_lines(lines, descriptor)

    filtered = []
    for line, kind, terminator in zip(lines, kinds, terminators):
        if kind is LineKind.CODE or terminator:
            filtered.append("")
        else:
            filtered.append(strip_inline_code(line, descriptor))
    return filtered
