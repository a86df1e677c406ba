"""Plain-text helpers for head metadata: markup stripping and truncation."""

from __future__ import annotations

from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Literal

DEFAULT_MARKER = "…"

# Content of these elements is never text
_SKIPPED_TAGS: frozenset[str] = frozenset({"script", "style", "template"})


@dataclass(frozen=True)
class TruncationPolicy:
    """How over-long text is shortened.

    ``chars`` keeps exactly the first *length* characters. ``words`` keeps at
    most *length* characters but backs off to the last whitespace so that no
    word is cut in half. The marker is appended only when text was removed.
    """

    mode: Literal["chars", "words"] = "chars"
    marker: str = DEFAULT_MARKER

    def __post_init__(self) -> None:
        if self.mode not in ("chars", "words"):
            raise ValueError(f"Unknown truncation mode: {self.mode!r}")


class _TextExtractor(HTMLParser):
    """Collect character data, dropping every tag."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag.lower() in _SKIPPED_TAGS:
            self._skip_depth += 1

    def handle_endtag(self, tag: str) -> None:
        if tag.lower() in _SKIPPED_TAGS and self._skip_depth:
            self._skip_depth -= 1

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self._parts.append(data)

    def get_text(self) -> str:
        return "".join(self._parts)


def strip_tags(value: str | None) -> str:
    """Remove markup from *value* and collapse whitespace.

    Character references are decoded, so ``&amp;`` becomes ``&``. The result is
    plain text and must still be escaped before it goes into HTML.
    """
    if not value:
        return ""
    extractor = _TextExtractor()
    extractor.feed(value)
    extractor.close()
    return " ".join(extractor.get_text().split())


def truncate(value: str, length: int, policy: TruncationPolicy | None = None) -> str:
    """Shorten *value* to *length* characters according to *policy*."""
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    policy = policy or TruncationPolicy()
    if len(value) <= length:
        return value

    cut = value[:length]
    if policy.mode == "words":
        last_space = max(cut.rfind(" "), cut.rfind("\n"), cut.rfind("\t"))
        # A single over-long word is cut at the character budget
        if last_space > 0:
            cut = cut[:last_space]
        cut = cut.rstrip()
    return cut + policy.marker
