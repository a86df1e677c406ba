"""TOML reader/writer for the site config.toml."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import tomli_w

from blogmeta.exceptions import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_THEME_COLOR = "orange"
DEFAULT_FEED_FILENAME = "atom.xml"

_EXTRA_STRING_KEYS = ("author", "theme_color", "favicon", "custom_css", "og_preview_img")


@dataclass(frozen=True)
class SiteExtra:
    """Theme options from the ``[extra]`` table."""

    author: str | None = None
    theme_color: str | None = None
    favicon: str | None = None
    custom_css: str | None = None
    og_preview_img: str | None = None
    enable_katex: bool = False
    # Keys this tool does not interpret, kept for write-back
    other: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SiteConfig:
    """Parsed site configuration from config.toml."""

    title: str = ""
    description: str = ""
    base_url: str = "/"
    generate_feeds: bool = False
    feed_filename: str = DEFAULT_FEED_FILENAME
    extra: SiteExtra = field(default_factory=SiteExtra)


def _optional_str(value: object) -> str | None:
    """Coerce a scalar TOML value to a non-empty string or None."""
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    text = text.strip()
    return text or None


def _require_bool(data: dict[str, Any], key: str, where: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        msg = f"{where}{key} must be a boolean, got {type(value).__name__}"
        raise ConfigError(msg)
    return value


def parse_extra(data: object) -> SiteExtra:
    """Build a SiteExtra from the raw ``[extra]`` table."""
    if data is None:
        return SiteExtra()
    if not isinstance(data, dict):
        msg = f"[extra] must be a table, got {type(data).__name__}"
        raise ConfigError(msg)

    values = {key: _optional_str(data.get(key)) for key in _EXTRA_STRING_KEYS}
    other = {
        key: value
        for key, value in data.items()
        if key not in _EXTRA_STRING_KEYS and key != "enable_katex"
    }
    return SiteExtra(
        **values,
        enable_katex=_require_bool(data, "enable_katex", "extra."),
        other=other,
    )


def parse_site_config_text(text: str) -> SiteConfig:
    """Parse the text of a config.toml file."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in site config: {exc}") from exc

    return SiteConfig(
        title=_optional_str(data.get("title")) or "",
        description=_optional_str(data.get("description")) or "",
        base_url=_optional_str(data.get("base_url")) or "/",
        generate_feeds=_require_bool(data, "generate_feeds", ""),
        feed_filename=_optional_str(data.get("feed_filename")) or DEFAULT_FEED_FILENAME,
        extra=parse_extra(data.get("extra")),
    )


def parse_site_config(config_path: Path) -> SiteConfig:
    """Parse the site config file. A missing file yields the defaults."""
    if not config_path.exists():
        logger.warning("Site config %s not found, using defaults", config_path)
        return SiteConfig()
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read site config {config_path}: {exc}") from exc
    return parse_site_config_text(text)


def write_site_config(config_path: Path, config: SiteConfig) -> None:
    """Write site configuration back to config.toml."""
    data: dict[str, Any] = {
        "title": config.title,
        "description": config.description,
        "base_url": config.base_url,
        "generate_feeds": config.generate_feeds,
    }
    if config.feed_filename != DEFAULT_FEED_FILENAME:
        data["feed_filename"] = config.feed_filename

    extra: dict[str, Any] = {}
    for key in _EXTRA_STRING_KEYS:
        value = getattr(config.extra, key)
        if value is not None:
            extra[key] = value
    if config.extra.enable_katex:
        extra["enable_katex"] = True
    extra.update(config.extra.other)
    data["extra"] = extra

    config_path.write_bytes(tomli_w.dumps(data).encode("utf-8"))
