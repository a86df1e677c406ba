"""Inject composed head tags into built HTML files."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from blogmeta.services.head_service import compose_head_tags

if TYPE_CHECKING:
    from pathlib import Path

    from blogmeta.filesystem.content_manager import ContentManager
    from blogmeta.services.asset_service import AssetResolver
    from blogmeta.services.text_service import TruncationPolicy

logger = logging.getLogger(__name__)

BLOCK_START = "<!-- blogmeta:start -->"
BLOCK_END = "<!-- blogmeta:end -->"
ROOT_OUTPUT_PATH = "index.html"

_BLOCK_RE = re.compile(re.escape(BLOCK_START) + r".*?" + re.escape(BLOCK_END), re.DOTALL)
_HEAD_END_RE = re.compile(r"</head\s*>", re.IGNORECASE)


@dataclass
class InjectionReport:
    """Outcome of injecting tags into a built site."""

    updated: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    unreadable: list[str] = field(default_factory=list)


def build_block(tags: list[str]) -> str:
    return "\n".join([BLOCK_START, *tags, BLOCK_END])


def inject_head_tags(html: str, tags: list[str]) -> str:
    """Place *tags* in the document head.

    An existing marker block is replaced in place; otherwise the block goes
    right before the first ``</head>``. Documents without a head are returned
    unchanged.
    """
    block = build_block(tags)
    if _BLOCK_RE.search(html):
        return _BLOCK_RE.sub(lambda _match: block, html, count=1)

    match = _HEAD_END_RE.search(html)
    if match is None:
        logger.debug("No </head> found, leaving document unchanged")
        return html
    return f"{html[: match.start()]}{block}\n{html[match.start() :]}"


def _inject_file(html_path: Path, tags: list[str]) -> bool:
    """Rewrite one file. Returns True when its content changed."""
    original = html_path.read_text(encoding="utf-8")
    updated = inject_head_tags(original, tags)
    if updated == original:
        return False
    html_path.write_text(updated, encoding="utf-8")
    return True


def inject_site(
    content_manager: ContentManager,
    output_dir: Path,
    resolver: AssetResolver,
    policy: TruncationPolicy | None = None,
) -> InjectionReport:
    """Compose and inject head tags for every content file of the site.

    Output files that do not exist or are not UTF-8 are reported, not raised.
    The site-root context fills ``index.html`` only when no content file
    already builds to it.
    """
    report = InjectionReport()
    targets = [(entry.output_path, entry.context) for entry in content_manager.scan()]
    if all(output_path != ROOT_OUTPUT_PATH for output_path, _context in targets):
        targets.append((ROOT_OUTPUT_PATH, content_manager.root_context()))

    for output_path, context in targets:
        html_path = output_dir / output_path
        if not html_path.is_file():
            logger.warning("Built file %s not found, skipping", html_path)
            report.missing.append(output_path)
            continue
        tags = compose_head_tags(context, resolver, policy)
        try:
            changed = _inject_file(html_path, tags)
        except UnicodeDecodeError as exc:
            logger.error("Built file %s is not valid UTF-8, skipping: %s", html_path, exc)
            report.unreadable.append(output_path)
            continue
        if changed:
            logger.info("Injected %d head tags into %s", len(tags), output_path)
            report.updated.append(output_path)
        else:
            report.unchanged.append(output_path)

    return report
