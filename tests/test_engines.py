from __future__ import annotations

from pathlib import Path

import pytest

from vignette_engines.engines import (
    BASE_ENGINE_SPECS,
    ENGINE_SPECS,
    build_engines,
    default_target,
    make_rmarkdown_weave,
    make_tangle,
    make_weave,
    match_engines,
    notangle,
    register_vignette_engines,
    tangle_empty,
)
from vignette_engines.exceptions import EngineFallbackWarning
from vignette_engines.models import RenderRequest, RenderTarget, TangleMode, WeaveMode


class RecordingBackend:
    def __init__(self, supported=tuple(RenderTarget)):
        self.supported = set(supported)
        self.rendered: list[RenderRequest] = []
        self.extracted: list[tuple[str, str, bool]] = []

    def render(self, request: RenderRequest) -> None:
        self.rendered.append(request)

    def extract_code(self, path: str, encoding: str = "", quiet: bool = False) -> None:
        self.extracted.append((path, encoding, quiet))

    def supports(self, target: RenderTarget) -> bool:
        return target in self.supported


class StaticProbe:
    def __init__(self, available: bool):
        self.available = available

    def is_feature_available(self) -> bool:
        return self.available


class RecordingRegistry:
    def __init__(self):
        self.registered = []

    def register(self, name, weave, tangle, pattern):
        self.registered.append((name, weave, tangle, pattern))


@pytest.fixture(autouse=True)
def _outside_package_check(monkeypatch):
    monkeypatch.delenv("_R_CHECK_PACKAGE_NAME_", raising=False)


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("intro.Rmd", RenderTarget.HTML),
        ("intro.rmd", RenderTarget.HTML),
        ("slides.Rrst", RenderTarget.PDF),
        ("paper.Rnw", RenderTarget.DOCUMENT),
        ("page.Rhtml", RenderTarget.DOCUMENT),
    ],
)
def test_default_target(filename: str, expected: RenderTarget):
    assert default_target(filename) is expected


def test_engine_table_keys():
    engines = build_engines(RecordingBackend(), StaticProbe(True))

    assert set(engines) == {
        "knitr::knitr",
        "knitr::docco_linear",
        "knitr::docco_classic",
        "knitr::rmarkdown",
        "knitr::knitr_notangle",
        "knitr::docco_linear_notangle",
        "knitr::docco_classic_notangle",
        "knitr::rmarkdown_notangle",
    }


def test_engine_table_is_read_only_and_rebuildable():
    backend = RecordingBackend()
    first = build_engines(backend, StaticProbe(True))
    second = build_engines(backend, StaticProbe(True))

    with pytest.raises(TypeError):
        first["knitr::extra"] = first["knitr::knitr"]  # type: ignore[index]
    assert list(first) == list(second)
    assert [engine.pattern for engine in first.values()] == [
        engine.pattern for engine in second.values()
    ]
    assert backend.rendered == []


def test_custom_package_prefix():
    engines = build_engines(RecordingBackend(), package="mypkg")
    assert "mypkg::knitr" in engines
    assert engines["mypkg::knitr"].package == "mypkg"


def test_knitr_weave_selects_target_by_extension():
    backend = RecordingBackend()
    weave = build_engines(backend)["knitr::knitr"].weave

    weave("intro.Rmd", encoding="UTF-8", quiet=True)
    weave("paper.Rnw")
    weave("slides.Rrst", driver="ignored")

    assert [request.target for request in backend.rendered] == [
        RenderTarget.HTML,
        RenderTarget.DOCUMENT,
        RenderTarget.PDF,
    ]
    first = backend.rendered[0]
    assert first.path == "intro.Rmd"
    assert first.encoding == "UTF-8"
    assert first.quiet is True
    assert first.extract_code is True
    assert first.error is False


def test_knitr_tangle_extracts_code():
    backend = RecordingBackend()
    tangle = build_engines(backend)["knitr::knitr"].tangle

    tangle("paper.Rnw", encoding="latin1", quiet=True)

    assert backend.extracted == [("paper.Rnw", "latin1", True)]


def test_docco_engines():
    backend = RecordingBackend()
    engines = build_engines(backend)

    engines["knitr::docco_linear"].weave("intro.Rmd")
    engines["knitr::docco_classic"].weave("intro.Rmd")

    linear, classic = backend.rendered
    assert linear.target is RenderTarget.DOCCO_LINEAR
    assert linear.template is not None
    assert Path(linear.template).name == "docco-template.html"
    assert classic.target is RenderTarget.DOCCO_CLASSIC
    assert classic.template is None


def test_notangle_weave_does_not_extract(tmp_path: Path):
    backend = RecordingBackend()
    engine = build_engines(backend)["knitr::knitr_notangle"]
    source = tmp_path / "paper.Rnw"
    stale = tmp_path / "paper.R"
    stale.write_text("x <- 1\n", encoding="utf-8")

    engine.weave(str(source))
    engine.tangle(str(source), encoding="UTF-8")

    assert backend.rendered[0].extract_code is False
    assert backend.extracted == []
    assert not stale.exists()


def test_tangle_empty_without_stale_file(tmp_path: Path):
    tangle_empty(str(tmp_path / "paper.Rnw"))


def test_rmarkdown_notangle_keeps_weaving_with_extraction():
    backend = RecordingBackend()
    engine = build_engines(backend, StaticProbe(True))["knitr::rmarkdown_notangle"]

    engine.weave("intro.Rmd")

    assert backend.rendered[0].target is RenderTarget.RMARKDOWN
    assert backend.rendered[0].extract_code is True
    assert engine.tangle is tangle_empty


def test_rmarkdown_weave_uses_rmarkdown_when_available():
    backend = RecordingBackend()
    messages: list[str] = []
    weave = make_rmarkdown_weave(backend, StaticProbe(True), warn=messages.append)

    weave("intro.Rmd", quiet=True)

    assert backend.rendered[0].target is RenderTarget.RMARKDOWN
    assert messages == []


def test_rmarkdown_weave_falls_back_without_pandoc():
    backend = RecordingBackend()
    messages: list[str] = []
    weave = make_rmarkdown_weave(backend, StaticProbe(False), warn=messages.append)

    weave("intro.Rmd")

    assert backend.rendered[0].target is RenderTarget.HTML
    assert len(messages) == 1
    assert "Pandoc" in messages[0]


def test_rmarkdown_weave_quiet_fallback_during_package_check(monkeypatch):
    monkeypatch.setenv("_R_CHECK_PACKAGE_NAME_", "mypkg")
    backend = RecordingBackend()
    messages: list[str] = []
    weave = make_rmarkdown_weave(backend, StaticProbe(False), warn=messages.append)

    weave("intro.Rmd")

    assert backend.rendered[0].target is RenderTarget.HTML
    assert messages == []


def test_rmarkdown_weave_falls_back_without_rmarkdown_support(monkeypatch):
    monkeypatch.setenv("_R_CHECK_PACKAGE_NAME_", "mypkg")
    backend = RecordingBackend(supported=[RenderTarget.DOCUMENT, RenderTarget.HTML])
    messages: list[str] = []
    weave = make_rmarkdown_weave(backend, StaticProbe(True), warn=messages.append)

    weave("intro.Rmd")

    assert backend.rendered[0].target is RenderTarget.HTML
    assert len(messages) == 1
    assert "rmarkdown package is not installed" in messages[0]


def test_rmarkdown_fallback_emits_warning_by_default():
    backend = RecordingBackend()
    weave = build_engines(backend, StaticProbe(False))["knitr::rmarkdown"].weave

    with pytest.warns(EngineFallbackWarning):
        weave("intro.Rmd")


def test_make_weave_and_tangle_modes():
    backend = RecordingBackend()

    make_weave(backend, RenderTarget.PDF, WeaveMode.RENDER_ONLY)("slides.Rrst")
    make_tangle(backend, TangleMode.EXTRACT)("slides.Rrst")

    assert backend.rendered[0].target is RenderTarget.PDF
    assert backend.rendered[0].extract_code is False
    assert backend.extracted == [("slides.Rrst", "", False)]
    assert make_tangle(backend, TangleMode.EMPTY) is tangle_empty


def test_notangle_spec():
    knitr, _, _, rmarkdown = BASE_ENGINE_SPECS

    derived = notangle(knitr)
    assert derived.name == "knitr_notangle"
    assert derived.pattern == knitr.pattern
    assert derived.weave_mode is WeaveMode.RENDER_ONLY
    assert derived.tangle_mode is TangleMode.EMPTY
    assert notangle(rmarkdown).weave_mode is WeaveMode.RENDER_AND_EXTRACT


def test_register_vignette_engines():
    registry = RecordingRegistry()
    engines = build_engines(RecordingBackend())

    register_vignette_engines(registry, engines)

    assert [name for name, *_ in registry.registered] == [spec.name for spec in ENGINE_SPECS]
    name, weave, tangle, pattern = registry.registered[0]
    assert name == "knitr"
    assert weave is engines["knitr::knitr"].weave
    assert tangle is engines["knitr::knitr"].tangle
    assert pattern == engines["knitr::knitr"].pattern


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("paper.Rnw", ["knitr", "knitr_notangle"]),
        ("paper.Stex", ["knitr", "knitr_notangle"]),
        ("notes.Rmarkdown", ["docco_linear", "rmarkdown", "docco_linear_notangle", "rmarkdown_notangle"]),
        ("notes.Rmkd", ["docco_classic", "docco_classic_notangle"]),
        ("notes.txt", []),
    ],
)
def test_match_engines_by_spec(filename: str, expected: list[str]):
    assert [spec.name for spec in match_engines(ENGINE_SPECS, filename)] == expected


def test_match_engines_by_table():
    engines = build_engines(RecordingBackend())
    matched = match_engines(engines, "intro.Rmd")

    assert {engine.key for engine in matched} == set(engines)
