"""
vignette-engines: vignette engines and a spell-check filter for literate R documents.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    vignette-engines filter vignettes/intro.Rmd
    vignette-engines engines intro.Rmd

Library Usage:
    from vignette_engines import build_engines, knit_filter, register_vignette_engines

    words = knit_filter("vignettes/intro.Rmd", encoding="UTF-8")
    engines = build_engines(backend)
    register_vignette_engines(registry, engines)
"""

from .classifier import classify_and_strip, classify_lines, filter_chunk_end
from .config import ConfigError, FilterConfig
from .engines import (
    ENGINE_SPECS,
    build_engines,
    default_target,
    match_engines,
    register_vignette_engines,
)
from .exceptions import EngineFallbackWarning, ReadFileError, UnknownEncodingError
from .formats import DEFAULT_FORMATS, detect_format, format_for_extension
from .models import (
    DocumentFormat,
    EngineSpec,
    FormatDescriptor,
    LineKind,
    RenderRequest,
    RenderTarget,
    VignetteEngine,
)
from .probe import PandocProbe
from .spellcheck import knit_filter
from .templates import html_vignette

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "classify_and_strip",
    "classify_lines",
    "filter_chunk_end",
    "knit_filter",
    "detect_format",
    "format_for_extension",
    "build_engines",
    "register_vignette_engines",
    "match_engines",
    "default_target",
    "html_vignette",
    "PandocProbe",
    # Data models
    "DEFAULT_FORMATS",
    "ENGINE_SPECS",
    "DocumentFormat",
    "EngineSpec",
    "FormatDescriptor",
    "LineKind",
    "RenderRequest",
    "RenderTarget",
    "VignetteEngine",
    "FilterConfig",
    # Exceptions
    "ConfigError",
    "EngineFallbackWarning",
    "ReadFileError",
    "UnknownEncodingError",
    # Version
    "__version__",
]
