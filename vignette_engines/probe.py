"""Availability probes for optional rendering tools."""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from collections.abc import Callable, Mapping
from typing import Protocol

from .constants import MINIMUM_PANDOC_VERSION, PACKAGE_CHECK_ENV_VAR, RSTUDIO_PANDOC_ENV_VAR

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"(\d+(?:\.\d+)+)")


class AvailabilityProbe(Protocol):
    def is_feature_available(self) -> bool: ...


def parse_version(text: str) -> tuple[int, ...] | None:
    """Extract the first dotted version number from `text`.

    Examples:
        parse_version("pandoc 2.19.2\\nCompiled with ...")  # (2, 19, 2)
    """
    match = VERSION_PATTERN.search(text)
    if match is None:
        return None
    return tuple(int(part) for part in match.group(1).split("."))


def read_pandoc_version(executable: str) -> str | None:
    """Return the output of ``pandoc --version``, or None when it cannot run."""
    try:
        completed = subprocess.run(
            [executable, "--version"],
            capture_output=True,
            text=True,
            check=False,
            timeout=10,
        )
    except (OSError, subprocess.SubprocessError) as error:
        logger.debug("Could not run %s --version: %s", executable, error)
        return None
    if completed.returncode != 0:
        return None
    return completed.stdout


class PandocProbe:
    """Check whether pandoc (with pandoc-citeproc) is usable for rendering.

    An RStudio-provided pandoc (``RSTUDIO_PANDOC`` set) is trusted as-is.
    Otherwise both ``pandoc-citeproc`` and ``pandoc`` must be on ``PATH`` and
    pandoc must be at least `minimum_version`.

    Args:
        environ: Environment mapping to consult.
        which: Executable lookup, ``shutil.which`` by default.
        version_reader: Callable returning ``pandoc --version`` output for an
            executable path.
        minimum_version: Oldest acceptable pandoc version.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        which: Callable[[str], str | None] = shutil.which,
        version_reader: Callable[[str], str | None] = read_pandoc_version,
        minimum_version: tuple[int, ...] = MINIMUM_PANDOC_VERSION,
    ):
        self.environ = os.environ if environ is None else environ
        self.which = which
        self.version_reader = version_reader
        self.minimum_version = minimum_version

    def is_feature_available(self) -> bool:
        if self.environ.get(RSTUDIO_PANDOC_ENV_VAR, "") != "":
            return True
        if self.which("pandoc-citeproc") is None:
            return False

        pandoc = self.which("pandoc")
        if pandoc is None:
            return False

        output = self.version_reader(pandoc)
        version = parse_version(output) if output else None
        if version is None:
            return False
        return version >= self.minimum_version


def is_package_check(environ: Mapping[str, str] | None = None) -> bool:
    """Whether the process runs inside a package check."""
    environ = os.environ if environ is None else environ
    return environ.get(PACKAGE_CHECK_ENV_VAR, "") != ""
