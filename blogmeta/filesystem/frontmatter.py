"""YAML front matter parser for pages and sections."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

import frontmatter

SECTION_FILENAME = "_index.md"

RECOGNIZED_FIELDS: frozenset[str] = frozenset(
    {
        "title",
        "description",
        "summary",
        "author",
        "taxonomies",
    }
)

_MORE_RE = re.compile(r"<!--\s*more\s*-->", re.IGNORECASE)


@dataclass(frozen=True)
class Page:
    """A single content item."""

    title: str | None = None
    summary: str | None = None
    description: str | None = None
    author: str | None = None
    taxonomies: dict[str, tuple[str, ...]] = field(default_factory=dict)
    content: str = ""
    file_path: str = ""

    def terms(self, taxonomy: str) -> tuple[str, ...]:
        """Return the ordered terms for *taxonomy*, empty when absent."""
        return self.taxonomies.get(taxonomy, ())


@dataclass(frozen=True)
class Section:
    """A listing page backed by an ``_index.md`` file."""

    title: str | None = None
    description: str | None = None
    author: str | None = None
    file_path: str = ""


def is_section_file(file_path: str) -> bool:
    """Whether *file_path* names a section file."""
    return file_path.rsplit("/", maxsplit=1)[-1] == SECTION_FILENAME


def _text_field(value: object) -> str | None:
    """Coerce a front matter value to a non-empty string or None.

    Non-string scalars (e.g. ``title: 42``) are coerced to string.
    """
    if value is None or isinstance(value, (list, dict)):
        return None
    text = value if isinstance(value, str) else str(value)
    text = text.strip()
    return text or None


def parse_taxonomies(raw: object) -> dict[str, tuple[str, ...]]:
    """Parse the ``taxonomies`` mapping into name -> ordered terms.

    A bare string term is treated as a one-element list. Empty terms are dropped.
    """
    if not isinstance(raw, dict):
        return {}
    result: dict[str, tuple[str, ...]] = {}
    for name, raw_terms in raw.items():
        if raw_terms is None:
            terms: list[object] = []
        elif isinstance(raw_terms, list):
            terms = raw_terms
        else:
            terms = [raw_terms]
        result[str(name)] = tuple(
            term for term in (_text_field(t) for t in terms) if term is not None
        )
    return result


def markdown_summary_text(markdown: str) -> str:
    """Flatten summary markdown to one line of inline text.

    Drops fenced code blocks, headings and image lines and joins the remaining
    lines with single spaces.
    """
    lines: list[str] = []
    in_code_block = False
    for line in markdown.split("\n"):
        stripped = line.strip()
        if stripped.startswith(("```", "~~~")):
            in_code_block = not in_code_block
            continue
        if in_code_block:
            continue
        if stripped.startswith("#"):
            continue
        if stripped.startswith("!["):
            continue
        if stripped:
            lines.append(stripped)
    return " ".join(lines)


def extract_summary(content: str) -> str | None:
    """Return the body text before the ``<!-- more -->`` marker, if present."""
    match = _MORE_RE.search(content)
    if match is None:
        return None
    return markdown_summary_text(content[: match.start()]) or None


def parse_page(raw_content: str, file_path: str = "") -> Page:
    """Parse a markdown file with YAML front matter into a Page."""
    post = frontmatter.loads(raw_content)
    summary = _text_field(post.get("summary")) or extract_summary(post.content)
    return Page(
        title=_text_field(post.get("title")),
        summary=summary,
        description=_text_field(post.get("description")),
        author=_text_field(post.get("author")),
        taxonomies=parse_taxonomies(post.get("taxonomies")),
        content=post.content,
        file_path=file_path,
    )


def parse_section(raw_content: str, file_path: str = "") -> Section:
    """Parse an ``_index.md`` file into a Section."""
    post = frontmatter.loads(raw_content)
    return Section(
        title=_text_field(post.get("title")),
        description=_text_field(post.get("description")),
        author=_text_field(post.get("author")),
        file_path=file_path,
    )
