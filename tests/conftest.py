"""Shared test fixtures for blogmeta."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from blogmeta.config import Settings
from blogmeta.filesystem.toml_manager import SiteConfig, SiteExtra
from blogmeta.services.asset_service import StaticAssetResolver

if TYPE_CHECKING:
    from pathlib import Path

BASE_URL = "https://blog.example.com"

CONFIG_TOML = f"""\
title = "Blog"
description = "A blog"
base_url = "{BASE_URL}"
generate_feeds = true

[extra]
author = "Site Author"
theme_color = "blue"
favicon = "favicon.ico"
"""

PAGE_MD = """\
---
title: "Hello <em>World</em>"
author: "Jane"
taxonomies:
  categories: ["notes"]
  tags: ["python", "web"]
---
First paragraph of the post.

<!-- more -->

The rest of the post.
"""

SECTION_MD = """\
---
title: "Posts"
description: "All posts"
---
"""


class RecordingResolver:
    """Asset resolver that records calls and returns predictable URLs."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, bool, bool]] = []

    def get_url(self, path: str, *, cachebust: bool = False, trailing_slash: bool = False) -> str:
        self.calls.append((path, cachebust, trailing_slash))
        url = f"{BASE_URL}/{path}"
        if trailing_slash:
            url += "/"
        return url


@pytest.fixture
def resolver() -> RecordingResolver:
    return RecordingResolver()


@pytest.fixture
def site_config() -> SiteConfig:
    return SiteConfig(
        title="Blog",
        description="A blog",
        base_url=BASE_URL,
        extra=SiteExtra(author="Site Author"),
    )


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """A small site: config.toml, content, static assets and a built output dir."""
    (tmp_path / "config.toml").write_text(CONFIG_TOML, encoding="utf-8")

    content = tmp_path / "content"
    (content / "posts").mkdir(parents=True)
    (content / "posts" / "_index.md").write_text(SECTION_MD, encoding="utf-8")
    (content / "posts" / "hello.md").write_text(PAGE_MD, encoding="utf-8")

    static = tmp_path / "static"
    static.mkdir()
    (static / "style.css").write_text("body { margin: 0; }\n", encoding="utf-8")

    public = tmp_path / "public"
    for rel in ("index.html", "posts/index.html", "posts/hello/index.html"):
        target = public / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n</head>\n"
            "<body></body>\n</html>\n",
            encoding="utf-8",
        )
    return tmp_path


@pytest.fixture
def test_settings(site_dir: Path) -> Settings:
    return Settings(
        _env_file=None,
        content_dir=site_dir / "content",
        config_file=site_dir / "config.toml",
        static_dir=site_dir / "static",
        output_dir=site_dir / "public",
    )


@pytest.fixture
def static_resolver(site_dir: Path) -> StaticAssetResolver:
    return StaticAssetResolver(base_url=BASE_URL, static_dirs=[site_dir / "static"])
