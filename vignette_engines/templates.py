"""Bundled vignette templates and the HTML vignette output format."""

from __future__ import annotations

from importlib.resources import files
from pathlib import Path

RESOURCE_PACKAGE = "vignette_engines"
RESOURCE_DIR = "misc"

VIGNETTE_CSS = "vignette.css"
VIGNETTE_AFTER_BODY = "vignette.html"
DOCCO_TEMPLATE = "docco-template.html"


def resource_path(name: str) -> Path:
    """Return the path of a file bundled in the package's ``misc`` directory.

    Raises:
        FileNotFoundError: If no such resource is bundled.

    Examples:
        resource_path("vignette.css")
    """
    resource = files(RESOURCE_PACKAGE).joinpath(RESOURCE_DIR, name)
    if not resource.is_file():
        raise FileNotFoundError(f"No bundled resource named {name}")
    return Path(str(resource))


def html_vignette(
    fig_caption: bool = True,
    theme: str | None = None,
    highlight: str = "pygments",
    css: str | Path | None = None,
    includes: dict[str, str | Path] | None = None,
    **options: object,
) -> dict[str, object]:
    """Build options for a lightweight HTML vignette output format.

    The result is handed to a rendering backend unchanged. Unlike a full HTML
    document it uses no theme, a small stylesheet, and a short footer.

    Args:
        fig_caption: Render figure captions.
        theme: Theme name; None disables theming.
        highlight: Syntax highlighting style.
        css: Stylesheet; the bundled ``vignette.css`` when omitted.
        includes: Extra content to include; defaults to the bundled
            ``vignette.html`` after the body.
        options: Further options passed through to the backend.

    Returns:
        dict[str, object]: Output-format options.

    Examples:
        html_vignette(toc=True)
    """
    if css is None:
        css = resource_path(VIGNETTE_CSS)
    if includes is None:
        includes = {"after_body": resource_path(VIGNETTE_AFTER_BODY)}
    return {
        **options,
        "fig_caption": fig_caption,
        "theme": theme,
        "highlight": highlight,
        "css": css,
        "includes": includes,
    }
