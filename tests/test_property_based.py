from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from vignette_engines.classifier import classify_and_strip, classify_lines, filter_chunk_end
from vignette_engines.formats import DEFAULT_FORMATS
from vignette_engines.models import DocumentFormat, LineKind

MD_LINES = [
    "Some prose.",
    "Inline `r 1 + 1` value.",
    "```{r}",
    "```{r, echo=FALSE}",
    "x <- rnorm(10)",
    "```",
    "",
    "> quoted text",
]

RNW_LINES = [
    "Some prose.",
    "Inline \\Sexpr{1 + 1} value.",
    "<<setup>>=",
    "x <- 1",
    "@",
    "",
]

md_documents = st.lists(st.sampled_from(MD_LINES), max_size=40)
rnw_documents = st.lists(st.sampled_from(RNW_LINES), max_size=40)


@given(st.lists(st.text()), st.sampled_from(["txt", "docx", "none", ""]))
def test_unknown_format_is_identity(lines: list[str], format_name: str):
    assert classify_and_strip(lines, format_name) == lines


@given(md_documents)
def test_output_length_matches_input(lines: list[str]):
    assert len(classify_and_strip(lines, DocumentFormat.MD)) == len(lines)


@given(md_documents)
def test_no_line_is_left_unset(lines: list[str]):
    kinds, terminators = classify_lines(lines, DEFAULT_FORMATS[DocumentFormat.MD])

    assert len(kinds) == len(terminators) == len(lines)
    assert LineKind.UNSET not in kinds


@given(md_documents)
def test_markdown_filter_is_idempotent(lines: list[str]):
    once = classify_and_strip(lines, DocumentFormat.MD)
    assert classify_and_strip(once, DocumentFormat.MD) == once


@given(rnw_documents)
def test_rnw_filter_is_idempotent(lines: list[str]):
    once = classify_and_strip(lines, DocumentFormat.RNW)
    assert classify_and_strip(once, DocumentFormat.RNW) == once


@given(md_documents)
def test_no_chunk_begin_or_inline_code_survives(lines: list[str]):
    descriptor = DEFAULT_FORMATS[DocumentFormat.MD]
    for line in classify_and_strip(lines, DocumentFormat.MD):
        assert descriptor.chunk_begin.search(line) is None
        assert descriptor.inline_code.search(line) is None


@given(st.lists(st.tuples(st.booleans(), st.booleans())))
def test_terminators_alternate_with_openings(pairs: list[tuple[bool, bool]]):
    is_begin = [begin for begin, _ in pairs]
    is_end = [end for _, end in pairs]

    terminators = filter_chunk_end(is_begin, is_end)

    assert len(terminators) == len(pairs)
    # Every terminator is a raw end match preceded by an unclosed begin.
    open_chunks = 0
    for begin, end, terminator in zip(is_begin, is_end, terminators):
        if terminator:
            assert end
            assert open_chunks == 1
            open_chunks = 0
        elif begin and open_chunks == 0:
            open_chunks = 1
