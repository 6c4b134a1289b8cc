"""Data models for vignette-engines."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto


class LineKind(Enum):
    """Classification of a single document line.

    Attributes:
        UNSET: Not yet classified; never present once classification finishes.
        CODE: Inside a code chunk.
        TEXT: Prose.
    """

    UNSET = auto()
    CODE = auto()
    TEXT = auto()


class DocumentFormat(Enum):
    """Closed set of literate document formats the filter understands.

    ``NONE`` stands for "no matching format" so lookups never return None.
    """

    RNW = "rnw"
    TEX = "tex"
    HTML = "html"
    MD = "md"
    RST = "rst"
    ASCIIDOC = "asciidoc"
    TEXTILE = "textile"
    NONE = "none"


@dataclass(frozen=True)
class FormatDescriptor:
    """Patterns that delimit code inside a document format.

    Attributes:
        chunk_begin: Matches the line that opens a code chunk.
        chunk_end: Matches the line that closes an open code chunk.
        inline_code: Matches inline code spans within a prose line.
    """

    chunk_begin: re.Pattern[str]
    chunk_end: re.Pattern[str]
    inline_code: re.Pattern[str]


class RenderTarget(Enum):
    """Kind of output a weave function asks the rendering backend for."""

    DOCUMENT = auto()
    HTML = auto()
    PDF = auto()
    DOCCO_LINEAR = auto()
    DOCCO_CLASSIC = auto()
    RMARKDOWN = auto()


class WeaveMode(Enum):
    RENDER_AND_EXTRACT = auto()
    RENDER_ONLY = auto()


class TangleMode(Enum):
    EXTRACT = auto()
    EMPTY = auto()


@dataclass(frozen=True)
class RenderRequest:
    """Everything a rendering backend needs to weave one document.

    Attributes:
        path: Source document.
        encoding: Encoding name passed through from the caller.
        quiet: Suppress progress output.
        target: Requested output kind.
        extract_code: Also write the document's code out while weaving.
        template: Optional template file for the renderer.
        error: Whether chunk errors may be swallowed; vignettes never hide errors.
    """

    path: str
    encoding: str = ""
    quiet: bool = False
    target: RenderTarget = RenderTarget.DOCUMENT
    extract_code: bool = True
    template: str | None = None
    error: bool = False


@dataclass(frozen=True)
class EngineSpec:
    """Declarative description of a vignette engine before it is bound to a backend.

    Attributes:
        name: Engine name without the package prefix.
        target: Render target used by the weave function.
        pattern: Regular expression matched against vignette filenames.
        weave_mode: Whether weaving also extracts code.
        tangle_mode: Whether tangling extracts code or removes stale output.
    """

    name: str
    target: RenderTarget
    pattern: str
    weave_mode: WeaveMode = WeaveMode.RENDER_AND_EXTRACT
    tangle_mode: TangleMode = TangleMode.EXTRACT

    def matches(self, filename: str) -> bool:
        return re.search(self.pattern, filename) is not None


WeaveFunction = Callable[..., None]
TangleFunction = Callable[..., None]


@dataclass(frozen=True)
class VignetteEngine:
    """A registered engine: weave and tangle callables plus a filename pattern."""

    name: str
    package: str
    weave: WeaveFunction
    tangle: TangleFunction
    pattern: str

    @property
    def key(self) -> str:
        return f"{self.package}::{self.name}"

    def matches(self, filename: str) -> bool:
        return re.search(self.pattern, filename) is not None
