"""Compose the meta, link and script tags for a rendered page's <head>."""

from __future__ import annotations

import html
import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from blogmeta.filesystem.toml_manager import DEFAULT_THEME_COLOR
from blogmeta.services.text_service import TruncationPolicy, strip_tags, truncate

if TYPE_CHECKING:
    from blogmeta.filesystem.frontmatter import Page, Section
    from blogmeta.filesystem.toml_manager import SiteConfig
    from blogmeta.services.asset_service import AssetResolver

logger = logging.getLogger(__name__)

TITLE_SEPARATOR = " -&nbsp;"
SUMMARY_MAX_LENGTH = 200
AUTHOR_MAX_LENGTH = 100

KATEX_VERSION = "0.16.11"
KATEX_CDN = f"https://cdn.jsdelivr.net/npm/katex@{KATEX_VERSION}/dist"
KATEX_DELIMITERS: tuple[dict[str, object], ...] = (
    {"left": "$$", "right": "$$", "display": True},
    {"left": "\\[", "right": "\\]", "display": True},
    {"left": "$", "right": "$", "display": False},
    {"left": "\\(", "right": "\\)", "display": False},
)


@dataclass(frozen=True)
class RenderContext:
    """Everything available while composing one page's head.

    At most one of *page* and *section* is bound. With neither bound the
    context describes the site root.
    """

    config: SiteConfig
    page: Page | None = None
    section: Section | None = None
    current_url: str | None = None

    def __post_init__(self) -> None:
        if self.page is not None and self.section is not None:
            raise ValueError("A render context binds a page or a section, not both")


@dataclass(frozen=True)
class HeadMetadata:
    """Resolved plain-text values, before escaping."""

    title: str
    description: str
    author: str
    url: str | None
    keywords: str | None


def first_present(*values: str | None) -> str:
    """Return the first non-empty value, or an empty string."""
    for value in values:
        if value:
            return value
    return ""


def resolve_title(context: RenderContext) -> str:
    """The part of the title following the site title and separator."""
    config = context.config
    if context.section is not None:
        return first_present(strip_tags(context.section.title), config.description)
    if context.page is not None:
        return first_present(strip_tags(context.page.title), config.description)
    return config.description


def resolve_description(context: RenderContext, policy: TruncationPolicy | None = None) -> str:
    config = context.config
    if context.section is not None:
        return first_present(context.section.description, config.description)
    if context.page is not None:
        summary = strip_tags(context.page.summary)
        if summary:
            return truncate(summary, SUMMARY_MAX_LENGTH, policy)
        return first_present(context.page.description, config.description)
    return config.description


def resolve_author(context: RenderContext, policy: TruncationPolicy | None = None) -> str:
    default_author = context.config.extra.author
    if context.section is not None:
        return first_present(context.section.author, default_author)
    if context.page is not None:
        author = strip_tags(context.page.author)
        if author:
            return truncate(author, AUTHOR_MAX_LENGTH, policy)
    return first_present(default_author)


def build_keywords(page: Page | None) -> str | None:
    """Join categories and tags into a keywords string.

    Every category is followed by a comma, including the last one; tags are
    comma-separated. Returns None when the page has neither.
    """
    if page is None:
        return None
    categories = page.terms("categories")
    tags = page.terms("tags")
    if not categories and not tags:
        return None
    return "".join(f"{category}," for category in categories) + ",".join(tags)


def resolve_metadata(
    context: RenderContext, policy: TruncationPolicy | None = None
) -> HeadMetadata:
    """Resolve every text field of the head for *context*."""
    return HeadMetadata(
        title=resolve_title(context),
        description=resolve_description(context, policy),
        author=resolve_author(context, policy),
        url=context.current_url or None,
        keywords=build_keywords(context.page),
    )


def theme_stylesheet(theme_color: str | None) -> str:
    """Path of the colour stylesheet for *theme_color*."""
    color = theme_color or DEFAULT_THEME_COLOR
    if color != "orange":
        return "color/" + color + ".css"
    return "color/orange.css"


def _feed_type(feed_filename: str) -> str:
    if feed_filename.endswith("rss.xml"):
        return "application/rss+xml"
    return "application/atom+xml"


def _meta(attr: str, key: str, content: str) -> str:
    return f'<meta {attr}="{key}" content="{html.escape(content)}" />'


def _stylesheet(href: str) -> str:
    return f'<link rel="stylesheet" href="{html.escape(href)}" />'


def katex_tags() -> list[str]:
    """Stylesheet, scripts and auto-render setup for KaTeX."""
    options = json.dumps({"delimiters": list(KATEX_DELIMITERS)})
    return [
        _stylesheet(f"{KATEX_CDN}/katex.min.css"),
        f'<script defer src="{KATEX_CDN}/katex.min.js"></script>',
        f'<script defer src="{KATEX_CDN}/contrib/auto-render.min.js"></script>',
        "<script>"
        'document.addEventListener("DOMContentLoaded", function () { '
        f"renderMathInElement(document.body, {options}); "
        "});"
        "</script>",
    ]


def compose_head_tags(
    context: RenderContext,
    resolver: AssetResolver,
    policy: TruncationPolicy | None = None,
) -> list[str]:
    """Build the ordered list of head tags for one render pass."""
    config = context.config
    extra = config.extra
    meta = resolve_metadata(context, policy)

    # The separator is markup and is emitted unescaped
    full_title = html.escape(config.title) + TITLE_SEPARATOR + html.escape(meta.title)
    description = html.escape(meta.description)

    preview_url = resolver.get_url(extra.og_preview_img) if extra.og_preview_img else None
    og_type = "article" if context.page is not None else "website"

    tags = [
        f"<title>{full_title}</title>",
        _meta("name", "description", meta.description),
        _meta("name", "author", meta.author),
        _meta("property", "og:type", og_type),
        f'<meta property="og:title" content="{full_title}" />',
        f'<meta property="og:description" content="{description}" />',
    ]
    if meta.url:
        tags.append(_meta("property", "og:url", meta.url))
    if preview_url:
        tags.append(_meta("property", "og:image", preview_url))

    tags.append(
        _meta("name", "twitter:card", "summary_large_image" if preview_url else "summary")
    )
    tags.append(f'<meta name="twitter:title" content="{full_title}" />')
    tags.append(f'<meta name="twitter:description" content="{description}" />')

    if meta.keywords is not None:
        tags.append(_meta("name", "keywords", meta.keywords))

    tags.append(_stylesheet(resolver.get_url("style.css", cachebust=True)))
    tags.append(_stylesheet(resolver.get_url(theme_stylesheet(extra.theme_color), cachebust=True)))
    if extra.custom_css:
        tags.append(_stylesheet(resolver.get_url(extra.custom_css, cachebust=True)))

    if extra.favicon:
        favicon_url = resolver.get_url(extra.favicon, cachebust=True)
        tags.append(f'<link rel="icon" href="{html.escape(favicon_url)}" />')

    if config.generate_feeds:
        feed_url = resolver.get_url(config.feed_filename, trailing_slash=False)
        tags.append(
            f'<link rel="alternate" type="{_feed_type(config.feed_filename)}" '
            f'title="{html.escape(config.title)}" href="{html.escape(feed_url)}" />'
        )

    if extra.enable_katex:
        tags.extend(katex_tags())

    logger.debug("Composed %d head tags for %s", len(tags), meta.url or "site root")
    return tags


def render_head(
    context: RenderContext,
    resolver: AssetResolver,
    policy: TruncationPolicy | None = None,
) -> str:
    """Composed head tags joined by newlines."""
    return "\n".join(compose_head_tags(context, resolver, policy))
