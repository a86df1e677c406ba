"""Content directory scanner: maps content files to render contexts."""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from typing import TYPE_CHECKING

from blogmeta.filesystem.frontmatter import (
    SECTION_FILENAME,
    Page,
    Section,
    is_section_file,
    parse_page,
    parse_section,
)
from blogmeta.services.head_service import RenderContext

if TYPE_CHECKING:
    from pathlib import Path

    from blogmeta.filesystem.toml_manager import SiteConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentEntry:
    """One content file with its build output location."""

    file_path: str
    output_path: str
    permalink: str
    context: RenderContext


def url_path_for(file_path: str) -> str:
    """Site-relative URL path for a content file, always ending in ``/``.

    ``posts/hello.md`` and ``posts/hello/index.md`` map to ``posts/hello/``;
    ``posts/_index.md`` maps to ``posts/``; the root ``_index.md`` maps to ``""``.
    """
    directory, filename = posixpath.split(file_path)
    if filename in (SECTION_FILENAME, "index.md"):
        stem_path = directory
    else:
        stem_path = posixpath.join(directory, filename.removesuffix(".md"))
    return f"{stem_path}/" if stem_path else ""


def output_path_for(file_path: str) -> str:
    """Path of the built HTML file, relative to the output directory."""
    return f"{url_path_for(file_path)}index.html"


def discover_content(content_dir: Path) -> list[Path]:
    """Recursively discover markdown files, skipping hidden files and directories."""
    if not content_dir.exists():
        return []
    found: list[Path] = []
    for path in sorted(content_dir.rglob("*.md")):
        rel_parts = path.relative_to(content_dir).parts
        if any(part.startswith(".") for part in rel_parts):
            continue
        found.append(path)
    return found


@dataclass
class ContentManager:
    """Reads content files and builds render contexts for them."""

    content_dir: Path
    config: SiteConfig

    def permalink(self, file_path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{url_path_for(file_path)}"

    def _validate_path(self, rel_path: str) -> Path:
        """Validate that a relative path stays within the content directory.

        Raises ValueError if the resolved path escapes content_dir.
        """
        full_path = (self.content_dir / rel_path).resolve()
        if not full_path.is_relative_to(self.content_dir.resolve()):
            raise ValueError(f"Path traversal detected: {rel_path}")
        return full_path

    def read_item(self, rel_path: str) -> Page | Section:
        """Read one content file as a Page or Section."""
        full_path = self._validate_path(rel_path)
        raw_content = full_path.read_text(encoding="utf-8")
        if is_section_file(rel_path):
            return parse_section(raw_content, file_path=rel_path)
        return parse_page(raw_content, file_path=rel_path)

    def context_for(self, rel_path: str, current_url: str | None = None) -> RenderContext:
        """Render context for one content file.

        *current_url* defaults to the file's permalink.
        """
        item = self.read_item(rel_path)
        url = current_url or self.permalink(rel_path)
        if isinstance(item, Section):
            return RenderContext(config=self.config, section=item, current_url=url)
        return RenderContext(config=self.config, page=item, current_url=url)

    def root_context(self, current_url: str | None = None) -> RenderContext:
        """Render context for the site root with neither page nor section bound."""
        return RenderContext(config=self.config, current_url=current_url or self.permalink(""))

    def scan(self) -> list[ContentEntry]:
        """Build an entry for every readable content file."""
        entries: list[ContentEntry] = []
        for path in discover_content(self.content_dir):
            rel_path = path.relative_to(self.content_dir).as_posix()
            try:
                context = self.context_for(rel_path)
            except Exception:
                logger.exception("Skipping content file %s due to parse error", rel_path)
                continue
            entries.append(
                ContentEntry(
                    file_path=rel_path,
                    output_path=output_path_for(rel_path),
                    permalink=context.current_url or "",
                    context=context,
                )
            )
        return entries
