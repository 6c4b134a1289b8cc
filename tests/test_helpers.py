from __future__ import annotations

import os
from pathlib import Path

import pytest

from vignette_engines.exceptions import ReadFileError, UnknownEncodingError
from vignette_engines.filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    read_lines,
    resolve_encoding,
    safe_read,
)


def test_get_max_file_size_uses_default(monkeypatch):
    monkeypatch.delenv("VIGNETTE_ENGINES_MAX_FILE_SIZE", raising=False)
    assert get_max_file_size(default=123) == 123


def test_get_max_file_size_reads_environment(monkeypatch):
    monkeypatch.setenv("VIGNETTE_ENGINES_MAX_FILE_SIZE", "2048")
    assert get_max_file_size() == 2048


def test_get_max_file_size_rejects_non_integer(monkeypatch):
    monkeypatch.setenv("VIGNETTE_ENGINES_MAX_FILE_SIZE", "invalid")
    with pytest.raises(ValueError):
        get_max_file_size()


def test_get_max_file_size_rejects_non_positive(monkeypatch):
    monkeypatch.setenv("VIGNETTE_ENGINES_MAX_FILE_SIZE", "0")
    with pytest.raises(ValueError):
        get_max_file_size()


@pytest.mark.parametrize("name", [None, "", "unknown", "UNKNOWN", "native.enc"])
def test_resolve_encoding_defers_to_default(name):
    assert resolve_encoding(name, default="latin-1") == "iso8859-1"


def test_resolve_encoding_canonicalises_names():
    assert resolve_encoding("UTF8") == "utf-8"


def test_resolve_encoding_rejects_unknown_codec():
    with pytest.raises(UnknownEncodingError) as exc_info:
        resolve_encoding("klingon")
    assert exc_info.value.encoding == "klingon"
    assert isinstance(exc_info.value, ReadFileError)


def test_collect_file_stat_handles_missing_file(tmp_path: Path):
    with pytest.raises(ReadFileError):
        collect_file_stat(tmp_path / "missing.Rmd")


def test_collect_file_stat_rejects_directory(tmp_path: Path):
    directory = tmp_path / "folder"
    directory.mkdir()
    with pytest.raises(ReadFileError):
        collect_file_stat(directory)


def test_enforce_file_size(tmp_path: Path):
    target = tmp_path / "big.Rmd"
    target.write_text("x" * 10, encoding="utf-8")
    stat_result = os.stat(target)

    enforce_file_size(stat_result, 10, target)
    with pytest.raises(ReadFileError):
        enforce_file_size(stat_result, 9, target)


def test_safe_read_raises_for_directory(tmp_path: Path):
    directory = tmp_path / "folder"
    directory.mkdir()

    with pytest.raises(ReadFileError):
        safe_read(directory, "utf-8")


def test_read_lines_strips_line_endings(tmp_path: Path):
    target = tmp_path / "doc.Rmd"
    target.write_bytes(b"first\r\nsecond\nthird")

    assert read_lines(target, "UTF-8", max_file_size=100) == ["first", "second", "third"]


def test_read_lines_empty_file(tmp_path: Path):
    target = tmp_path / "empty.Rmd"
    target.write_text("", encoding="utf-8")

    assert read_lines(target, max_file_size=100) == []


def test_read_lines_rejects_undecodable_content(tmp_path: Path):
    target = tmp_path / "bad.Rmd"
    target.write_bytes(b"caf\xe9\n")

    with pytest.raises(ReadFileError):
        read_lines(target, "UTF-8", max_file_size=100)
    assert read_lines(target, "latin-1", max_file_size=100) == ["café"]


def test_read_lines_uses_environment_limit(tmp_path: Path, monkeypatch):
    target = tmp_path / "doc.Rmd"
    target.write_text("some text\n", encoding="utf-8")

    monkeypatch.setenv("VIGNETTE_ENGINES_MAX_FILE_SIZE", "3")
    with pytest.raises(ReadFileError):
        read_lines(target)

    monkeypatch.setenv("VIGNETTE_ENGINES_MAX_FILE_SIZE", "nope")
    with pytest.raises(ReadFileError):
        read_lines(target)


def test_read_lines_keeps_form_feeds_and_unicode_separators(tmp_path: Path):
    target = tmp_path / "doc.Rnw"
    target.write_bytes("Intro\fstill one\nsecond\u2028same\r\nthird\x85\x1c\nend\n".encode("utf-8"))

    assert read_lines(target, "UTF-8", max_file_size=100) == [
        "Intro\fstill one",
        "second\u2028same",
        "third\x85\x1c",
        "end",
    ]
