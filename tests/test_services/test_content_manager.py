"""Tests for content discovery and render context construction."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from blogmeta.filesystem.content_manager import (
    ContentManager,
    discover_content,
    output_path_for,
    url_path_for,
)
from blogmeta.filesystem.frontmatter import Page, Section
from blogmeta.filesystem.toml_manager import SiteConfig, parse_site_config

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def manager(site_dir: Path) -> ContentManager:
    config = parse_site_config(site_dir / "config.toml")
    return ContentManager(content_dir=site_dir / "content", config=config)


class TestPaths:
    @pytest.mark.parametrize(
        ("file_path", "url_path"),
        [
            ("posts/hello.md", "posts/hello/"),
            ("posts/hello/index.md", "posts/hello/"),
            ("posts/_index.md", "posts/"),
            ("_index.md", ""),
            ("about.md", "about/"),
        ],
    )
    def test_url_path_for(self, file_path: str, url_path: str) -> None:
        assert url_path_for(file_path) == url_path

    def test_output_path_for(self) -> None:
        assert output_path_for("posts/hello.md") == "posts/hello/index.html"
        assert output_path_for("_index.md") == "index.html"

    def test_permalink(self, manager: ContentManager) -> None:
        assert manager.permalink("posts/hello.md") == "https://blog.example.com/posts/hello/"
        assert manager.permalink("") == "https://blog.example.com/"


class TestDiscovery:
    def test_sorted_and_hidden_skipped(self, tmp_path: Path) -> None:
        (tmp_path / ".drafts").mkdir()
        (tmp_path / ".drafts" / "secret.md").write_text("x")
        (tmp_path / "b.md").write_text("x")
        (tmp_path / "a.md").write_text("x")
        (tmp_path / ".hidden.md").write_text("x")
        (tmp_path / "notes.txt").write_text("x")
        found = [p.name for p in discover_content(tmp_path)]
        assert found == ["a.md", "b.md"]

    def test_missing_dir(self, tmp_path: Path) -> None:
        assert discover_content(tmp_path / "nope") == []


class TestContexts:
    def test_page_context(self, manager: ContentManager) -> None:
        context = manager.context_for("posts/hello.md")
        assert isinstance(context.page, Page)
        assert context.section is None
        assert context.page.summary == "First paragraph of the post."
        assert context.current_url == "https://blog.example.com/posts/hello/"

    def test_section_context(self, manager: ContentManager) -> None:
        context = manager.context_for("posts/_index.md")
        assert isinstance(context.section, Section)
        assert context.page is None
        assert context.section.title == "Posts"

    def test_url_override(self, manager: ContentManager) -> None:
        context = manager.context_for("posts/hello.md", current_url="https://other/")
        assert context.current_url == "https://other/"

    def test_root_context(self, manager: ContentManager) -> None:
        context = manager.root_context()
        assert context.page is None
        assert context.section is None
        assert context.current_url == "https://blog.example.com/"

    def test_path_traversal_rejected(self, manager: ContentManager) -> None:
        with pytest.raises(ValueError, match="Path traversal"):
            manager.context_for("../config.toml")


class TestScan:
    def test_scan_entries(self, manager: ContentManager) -> None:
        entries = manager.scan()
        assert [e.file_path for e in entries] == ["posts/_index.md", "posts/hello.md"]
        assert entries[1].output_path == "posts/hello/index.html"
        assert entries[1].permalink == "https://blog.example.com/posts/hello/"

    def test_broken_file_skipped(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / "good.md").write_text("---\ntitle: Good\n---\nBody\n")
        (tmp_path / "bad.md").write_text("---\ntitle: [unclosed\n---\nBody\n")
        manager = ContentManager(content_dir=tmp_path, config=SiteConfig())
        with caplog.at_level(logging.ERROR):
            entries = manager.scan()
        assert [e.file_path for e in entries] == ["good.md"]
        assert "Skipping content file bad.md" in caplog.text

    def test_root_index_page_builds_to_site_index(
        self, manager: ContentManager, site_dir: Path
    ) -> None:
        (site_dir / "content" / "index.md").write_text("---\ntitle: Home\n---\nWelcome\n")
        entries = {e.file_path: e for e in manager.scan()}
        assert entries["index.md"].output_path == "index.html"
        assert entries["index.md"].context.page is not None
