"""Configuration loading and management."""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import tomllib

from .models import DocumentFormat

TOOL_NAME = "vignette-engines"
FORMAT_NAMES = tuple(fmt.value for fmt in DocumentFormat if fmt is not DocumentFormat.NONE)


def to_format_name(name: str) -> str | None:
    """Return the lower-cased format name, or None when it is not supported."""
    name = name.lower()
    return name if name in FORMAT_NAMES else None


@dataclass
class FilterConfig:
    """Configuration for filtering literate documents.

    Attributes:
        encoding: Encoding used when the caller passes ``"unknown"`` or an
            empty encoding name.
        extensions: Extra file extensions mapped to a format name, e.g.
            ``{"qmd": "md"}``. Merged over the built-in aliases.
        detect_from_content: Sniff the format from the document content when
            the extension is not recognised.
        max_file_size: Maximum file size in bytes that will be read.

    Examples:
        FilterConfig(encoding="latin-1", extensions={"qmd": "md"})
    """

    encoding: str = "UTF-8"
    extensions: dict[str, str] = field(default_factory=dict)
    detect_from_content: bool = True

    # Limits
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_file_size` must be a positive integer")
    """


def load_config(search_path: Path) -> FilterConfig:
    """Load configuration from the nearest config file.

    Each directory from `search_path` up to the filesystem root is checked
    for a ``[tool.vignette-engines]`` table in `pyproject.toml`, then for a
    ``[vignette-engines]`` or ``[tool.vignette-engines]`` table in
    `.vignette-engines.toml`. The first table found wins; TOML files that
    cannot be read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        FilterConfig: Loaded configuration, or defaults when nothing is found.

    Raises:
        ConfigError: If the table is not a mapping, has unknown keys, or maps
            an extension to something other than a format name.

    Examples:
        load_config(Path("vignettes"))
    """
    start = search_path.resolve()

    for directory in (start, *start.parents):
        for filename, table_paths in CONFIG_SOURCES:
            config_file = directory / filename
            found = _read_table(config_file, table_paths)
            if found is not None:
                table_path, raw_config = found
                return _build_config_from_raw(raw_config, config_file, table_path)

    return FilterConfig()


CONFIG_SOURCES = (
    ("pyproject.toml", (("tool", TOOL_NAME),)),
    (f".{TOOL_NAME}.toml", ((TOOL_NAME,), ("tool", TOOL_NAME))),
)


def _read_table(
    config_file: Path, table_paths: tuple[tuple[str, ...], ...]
) -> tuple[tuple[str, ...], object] | None:
    if not config_file.is_file():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        table: object = data
        for key in table_path:
            if not isinstance(table, dict) or key not in table:
                break
            table = table[key]
        else:
            return table_path, table

    return None


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> FilterConfig:
    where = f"`[{'.'.join(table_path)}]` in {config_file}"

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid {where}: expected a table")

    known = {item.name for item in fields(FilterConfig)}
    unknown = sorted(set(raw_config) - known)
    if unknown:
        raise ConfigError(f"Unknown setting(s) {', '.join(unknown)} in {where}")

    extensions = raw_config.get("extensions", {})
    if not isinstance(extensions, dict):
        raise ConfigError(f"`extensions` in {where} must be a table of extension = format pairs")
    for extension, format_name in extensions.items():
        if not isinstance(format_name, str) or to_format_name(format_name) is None:
            raise ConfigError(
                f"`extensions.{extension}` in {where} must be one of: {', '.join(FORMAT_NAMES)}"
            )

    return normalize_config(FilterConfig(**raw_config))


def normalize_config(config: FilterConfig) -> FilterConfig:
    """Lower-case extension keys and format names and drop leading dots."""
    if not isinstance(config.extensions, dict):
        raise ConfigError("`extensions` must be a table of extension = format pairs")

    extensions = {}
    for extension, format_name in config.extensions.items():
        if not isinstance(format_name, str):
            raise ConfigError(f"`extensions.{extension}` must be a string")
        extensions[extension.lower().lstrip(".")] = format_name.lower()

    return replace(config, extensions=extensions)


def validate_config(config: FilterConfig) -> None:
    """Validate a `FilterConfig` instance.

    Raises:
        ConfigError: If the encoding is unknown, an extension maps to an
            unsupported format, or the size limit is not a positive integer.

    Examples:
        validate_config(FilterConfig(encoding="latin-1"))
    """
    config = normalize_config(config)

    if not isinstance(config.encoding, str) or not config.encoding:
        raise ConfigError("`encoding` must be a non-empty string")
    try:
        codecs.lookup(config.encoding)
    except LookupError as error:
        raise ConfigError(f"`encoding` names an unknown codec: {config.encoding}") from error

    for extension, format_name in config.extensions.items():
        if not extension:
            raise ConfigError("`extensions` keys must not be empty")
        if to_format_name(format_name) is None:
            raise ConfigError(
                f"`extensions.{extension}` must be one of: {', '.join(FORMAT_NAMES)}"
            )

    if not isinstance(config.detect_from_content, bool):
        raise ConfigError("`detect_from_content` must be a boolean")

    if isinstance(config.max_file_size, bool) or not isinstance(config.max_file_size, int):
        raise ConfigError("`max_file_size` must be an integer")
    if config.max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")


def apply_overrides(config: FilterConfig, **overrides: object) -> FilterConfig:
    """Apply override values to a `FilterConfig`; None values are ignored.

    Raises:
        TypeError: If an override name is not defined on `FilterConfig`.

    Examples:
        updated = apply_overrides(config, encoding="latin-1")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> FilterConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        FilterConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), encoding="latin-1")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config
