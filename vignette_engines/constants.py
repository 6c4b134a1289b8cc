"""Constants used across the vignette-engines package."""

from __future__ import annotations

import re

from .config import FilterConfig

DEFAULT_CONFIG = FilterConfig()

# Code chunk and inline code patterns, one triple per document format.
RNW_CHUNK_BEGIN = re.compile(r"^\s*<<(.*)>>=.*$")
RNW_CHUNK_END = re.compile(r"^\s*@\s*(%+.*|)$")
RNW_INLINE_CODE = re.compile(r"\\Sexpr\{([^}]+)\}")

TEX_CHUNK_BEGIN = re.compile(r"^\s*%+\s*begin.rcode\s*(.*)")
TEX_CHUNK_END = re.compile(r"^\s*%+\s*end.rcode")
TEX_INLINE_CODE = re.compile(r"\\rinline\{([^}]+)\}")

HTML_CHUNK_BEGIN = re.compile(r"^\s*<!--\s*begin.rcode\s*(.*)")
HTML_CHUNK_END = re.compile(r"^\s*end.rcode\s*-->")
HTML_INLINE_CODE = re.compile(r"<!--\s*rinline(.+?)-->")

MD_CHUNK_BEGIN = re.compile(r"^[\t >]*```+\s*\{((([a-zA-Z0-9_]+)(.*))|)\}\s*$")
MD_CHUNK_END = re.compile(r"^[\t >]*```+\s*$")
MD_INLINE_CODE = re.compile(r"`r[ #]([^`]+)\s*`")

RST_CHUNK_BEGIN = re.compile(r"^\s*[.][.]\s+\{r(.*)\}\s*$")
RST_CHUNK_END = re.compile(r"^\s*[.][.]\s+[.][.]\s*$")
RST_INLINE_CODE = re.compile(r":r:`([^`]+)`")

ASCIIDOC_CHUNK_BEGIN = re.compile(r"^//\s*begin[.]rcode(.*)$")
ASCIIDOC_CHUNK_END = re.compile(r"^//\s*end[.]rcode\s*$")
ASCIIDOC_INLINE_CODE = re.compile(r"`r +([^`]+)\s*`|[+]r +([^+]+)\s*[+]")

TEXTILE_CHUNK_BEGIN = re.compile(r"^###[.]\s+begin[.]rcode(.*)$")
TEXTILE_CHUNK_END = re.compile(r"^###[.]\s+end[.]rcode\s*$")
TEXTILE_INLINE_CODE = re.compile(r"@r +([^@]+)\s*@")

# Lower-cased file extensions (without the dot) and the format name they select.
EXTENSION_ALIASES = {
    "rnw": "rnw",
    "snw": "rnw",
    "stex": "rnw",
    "tex": "tex",
    "rtex": "tex",
    "html": "html",
    "htm": "html",
    "rhtml": "html",
    "rhtm": "html",
    "md": "md",
    "rmd": "md",
    "markdown": "md",
    "rmarkdown": "md",
    "rst": "rst",
    "rrst": "rst",
    "asciidoc": "asciidoc",
    "rasciidoc": "asciidoc",
    "adoc": "asciidoc",
    "textile": "textile",
    "rtextile": "textile",
}

# Vignette filename patterns
KNITR_ENGINE_PATTERN = r"[.]([rRsS](nw|tex)|[Rr](md|html|rst))$"
DOCCO_LINEAR_ENGINE_PATTERN = r"[.][Rr](md|markdown)$"
DOCCO_CLASSIC_ENGINE_PATTERN = r"[.][Rr]mk?d$"
RMARKDOWN_ENGINE_PATTERN = r"[.][Rr](md|markdown)$"
NOTANGLE_SUFFIX = "_notangle"
DEFAULT_ENGINE_PACKAGE = "knitr"
TANGLED_SUFFIX = ".R"

# Environment
RSTUDIO_PANDOC_ENV_VAR = "RSTUDIO_PANDOC"
PACKAGE_CHECK_ENV_VAR = "_R_CHECK_PACKAGE_NAME_"
MAX_FILE_SIZE_ENV_VAR = "VIGNETTE_ENGINES_MAX_FILE_SIZE"
MINIMUM_PANDOC_VERSION = (1, 12, 3)

# Encoding names that defer to the configured default
NATIVE_ENCODINGS = ("", "unknown", "native.enc")
DEFAULT_ENCODING = DEFAULT_CONFIG.encoding
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
