"""Vignette engines: weave/tangle strategies and their registration."""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from pathlib import Path
from types import MappingProxyType
from typing import Protocol

from .constants import (
    DEFAULT_ENGINE_PACKAGE,
    DOCCO_CLASSIC_ENGINE_PATTERN,
    DOCCO_LINEAR_ENGINE_PATTERN,
    KNITR_ENGINE_PATTERN,
    NOTANGLE_SUFFIX,
    RMARKDOWN_ENGINE_PATTERN,
    TANGLED_SUFFIX,
)
from .exceptions import EngineFallbackWarning
from .models import (
    EngineSpec,
    RenderRequest,
    RenderTarget,
    TangleFunction,
    TangleMode,
    VignetteEngine,
    WeaveFunction,
    WeaveMode,
)
from .probe import AvailabilityProbe, PandocProbe, is_package_check
from .templates import DOCCO_TEMPLATE, resource_path

logger = logging.getLogger(__name__)

Warn = Callable[[str], None]


class RenderingBackend(Protocol):
    """Renders literate documents; supplied by the caller."""

    def render(self, request: RenderRequest) -> None: ...

    def extract_code(self, path: str, encoding: str = "", quiet: bool = False) -> None: ...

    def supports(self, target: RenderTarget) -> bool: ...


class EngineRegistry(Protocol):
    """Receives engines so consumers can look them up by name."""

    def register(
        self, name: str, weave: WeaveFunction, tangle: TangleFunction, pattern: str
    ) -> None: ...


def _warn_with_category(message: str) -> None:
    warnings.warn(message, EngineFallbackWarning, stacklevel=3)


def default_target(path: str | Path) -> RenderTarget:
    """Choose the render target of the default engine from the file extension.

    Examples:
        default_target("intro.Rmd")  # RenderTarget.HTML
        default_target("slides.Rrst")  # RenderTarget.PDF
        default_target("paper.Rnw")  # RenderTarget.DOCUMENT
    """
    suffix = Path(path).suffix
    if suffix in (".Rmd", ".rmd"):
        return RenderTarget.HTML
    if suffix in (".Rrst", ".rrst"):
        return RenderTarget.PDF
    return RenderTarget.DOCUMENT


def make_weave(
    backend: RenderingBackend,
    target: RenderTarget = RenderTarget.DOCUMENT,
    mode: WeaveMode = WeaveMode.RENDER_AND_EXTRACT,
) -> WeaveFunction:
    """Build a weave function that renders through `backend`.

    ``RenderTarget.DOCUMENT`` is resolved per file with `default_target`.
    ``RenderTarget.DOCCO_LINEAR`` renders HTML with the bundled docco template.

    Args:
        backend: Rendering collaborator.
        target: Output kind to request.
        mode: Whether code is also written out while weaving.

    Returns:
        WeaveFunction: ``weave(file, encoding="", quiet=False, **_)``.
    """
    extract_code = mode is WeaveMode.RENDER_AND_EXTRACT

    def weave(file: str, encoding: str = "", quiet: bool = False, **_: object) -> None:
        resolved = default_target(file) if target is RenderTarget.DOCUMENT else target
        template = None
        if resolved is RenderTarget.DOCCO_LINEAR:
            template = str(resource_path(DOCCO_TEMPLATE))
        backend.render(
            RenderRequest(
                path=str(file),
                encoding=encoding,
                quiet=quiet,
                target=resolved,
                extract_code=extract_code,
                template=template,
            )
        )

    return weave


def make_rmarkdown_weave(
    backend: RenderingBackend,
    probe: AvailabilityProbe | None = None,
    mode: WeaveMode = WeaveMode.RENDER_AND_EXTRACT,
    warn: Warn | None = None,
) -> WeaveFunction:
    """Build a weave function for R Markdown with a degraded fallback.

    Renders with ``RenderTarget.RMARKDOWN`` when the backend supports it and
    `probe` reports pandoc. Otherwise warns and weaves with the default
    engine. The missing-pandoc warning is not emitted during package checks.

    Args:
        backend: Rendering collaborator.
        probe: Pandoc availability probe; a `PandocProbe` when omitted.
        mode: Whether code is also written out while weaving.
        warn: Callback for non-fatal warnings; defaults to `warnings.warn`
            with `EngineFallbackWarning`.
    """
    probe = probe or PandocProbe()
    warn = warn or _warn_with_category
    rmarkdown = make_weave(backend, RenderTarget.RMARKDOWN, mode)
    fallback = make_weave(backend, RenderTarget.DOCUMENT, mode)

    def weave(file: str, encoding: str = "", quiet: bool = False, **options: object) -> None:
        if not backend.supports(RenderTarget.RMARKDOWN):
            logger.warning("R Markdown rendering unavailable; falling back for %s", file)
            warn(
                "The vignette engine knitr::rmarkdown is not available, because the "
                "rmarkdown package is not installed. Please install it."
            )
            fallback(file, encoding=encoding, quiet=quiet, **options)
            return

        if probe.is_feature_available():
            rmarkdown(file, encoding=encoding, quiet=quiet, **options)
            return

        logger.warning("Pandoc unavailable; falling back for %s", file)
        if not is_package_check():
            warn(
                "Pandoc (>= 1.12.3) and/or pandoc-citeproc is not available. "
                "Please install both."
            )
        fallback(file, encoding=encoding, quiet=quiet, **options)

    return weave


def tangle_empty(file: str, **_: object) -> None:
    """Remove a previously tangled script instead of writing one."""
    Path(file).with_suffix(TANGLED_SUFFIX).unlink(missing_ok=True)


def make_tangle(backend: RenderingBackend, mode: TangleMode = TangleMode.EXTRACT) -> TangleFunction:
    """Build a tangle function that extracts code through `backend`, or removes it."""
    if mode is TangleMode.EMPTY:
        return tangle_empty

    def tangle(file: str, encoding: str = "", quiet: bool = False, **_: object) -> None:
        backend.extract_code(str(file), encoding=encoding, quiet=quiet)

    return tangle


def notangle(spec: EngineSpec) -> EngineSpec:
    """Derive the variant of an engine that never writes tangled code.

    Weaving stops extracting code, except for the R Markdown engine whose
    fallback handling is kept intact.
    """
    weave_mode = WeaveMode.RENDER_ONLY
    if spec.target is RenderTarget.RMARKDOWN:
        weave_mode = spec.weave_mode
    return replace(
        spec,
        name=f"{spec.name}{NOTANGLE_SUFFIX}",
        weave_mode=weave_mode,
        tangle_mode=TangleMode.EMPTY,
    )


BASE_ENGINE_SPECS = (
    EngineSpec("knitr", RenderTarget.DOCUMENT, KNITR_ENGINE_PATTERN),
    EngineSpec("docco_linear", RenderTarget.DOCCO_LINEAR, DOCCO_LINEAR_ENGINE_PATTERN),
    EngineSpec("docco_classic", RenderTarget.DOCCO_CLASSIC, DOCCO_CLASSIC_ENGINE_PATTERN),
    EngineSpec("rmarkdown", RenderTarget.RMARKDOWN, RMARKDOWN_ENGINE_PATTERN),
)

ENGINE_SPECS = BASE_ENGINE_SPECS + tuple(notangle(spec) for spec in BASE_ENGINE_SPECS)


def bind_engine(
    spec: EngineSpec,
    backend: RenderingBackend,
    probe: AvailabilityProbe | None = None,
    package: str = DEFAULT_ENGINE_PACKAGE,
    warn: Warn | None = None,
) -> VignetteEngine:
    """Turn an `EngineSpec` into callable weave/tangle functions."""
    if spec.target is RenderTarget.RMARKDOWN:
        weave = make_rmarkdown_weave(backend, probe, spec.weave_mode, warn)
    else:
        weave = make_weave(backend, spec.target, spec.weave_mode)
    tangle = make_tangle(backend, spec.tangle_mode)
    return VignetteEngine(
        name=spec.name, package=package, weave=weave, tangle=tangle, pattern=spec.pattern
    )


def build_engines(
    backend: RenderingBackend,
    probe: AvailabilityProbe | None = None,
    package: str = DEFAULT_ENGINE_PACKAGE,
    warn: Warn | None = None,
    specs: Iterable[EngineSpec] = ENGINE_SPECS,
) -> Mapping[str, VignetteEngine]:
    """Build the read-only engine table.

    Nothing is registered or rendered; building twice yields equivalent
    tables.

    Args:
        backend: Rendering collaborator used by every weave/tangle function.
        probe: Pandoc probe for the R Markdown engines.
        package: Package prefix of engine keys.
        warn: Callback for fallback warnings.
        specs: Engines to build.

    Returns:
        Mapping[str, VignetteEngine]: Engines keyed by ``"<package>::<name>"``.

    Examples:
        engines = build_engines(backend)
        engines["knitr::knitr"].weave("intro.Rnw")
    """
    table = {}
    for spec in specs:
        engine = bind_engine(spec, backend, probe, package, warn)
        table[engine.key] = engine
    return MappingProxyType(table)


def register_vignette_engines(
    registry: EngineRegistry, engines: Mapping[str, VignetteEngine]
) -> None:
    """Register every engine of `engines` with `registry`."""
    for key, engine in engines.items():
        logger.debug("Registering vignette engine %s", key)
        registry.register(engine.name, engine.weave, engine.tangle, engine.pattern)


def match_engines(
    engines: Mapping[str, VignetteEngine] | Iterable[EngineSpec], filename: str
) -> list[VignetteEngine] | list[EngineSpec]:
    """Return the engines (or specs) whose filename pattern matches `filename`.

    Examples:
        [spec.name for spec in match_engines(ENGINE_SPECS, "intro.Rmd")]
    """
    candidates = engines.values() if isinstance(engines, Mapping) else engines
    return [candidate for candidate in candidates if candidate.matches(filename)]
