"""Asset URL resolution for links emitted into the page head."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

CACHEBUST_HASH_LENGTH = 20
_ABSOLUTE_PREFIXES = ("http://", "https://")


class AssetResolver(Protocol):
    """Maps a logical asset path to its public URL."""

    def get_url(self, path: str, *, cachebust: bool = False, trailing_slash: bool = False) -> str:
        ...


def hash_file(path: Path) -> str:
    """Compute SHA-256 hash of a file."""
    sha = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha.update(chunk)
    return sha.hexdigest()


@dataclass
class StaticAssetResolver:
    """Resolve assets against the site base URL and local static directories.

    With ``cachebust`` the URL gets a ``?h=<hash>`` query built from the file
    content, looked up in *static_dirs* in order.
    """

    base_url: str
    static_dirs: list[Path] = field(default_factory=list)
    _hashes: dict[str, str | None] = field(default_factory=dict, repr=False)

    def get_url(self, path: str, *, cachebust: bool = False, trailing_slash: bool = False) -> str:
        if path.startswith(_ABSOLUTE_PREFIXES):
            return path

        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        if trailing_slash and not url.endswith("/"):
            url += "/"
        if cachebust:
            digest = self._content_hash(path)
            if digest is not None:
                url += f"?h={digest}"
        return url

    def _content_hash(self, path: str) -> str | None:
        rel_path = path.lstrip("/")
        if rel_path in self._hashes:
            return self._hashes[rel_path]

        digest: str | None = None
        for static_dir in self.static_dirs:
            candidate = static_dir / rel_path
            if candidate.is_file():
                digest = hash_file(candidate)[:CACHEBUST_HASH_LENGTH]
                break
        else:
            logger.warning("Cannot cachebust %s: file not found in static directories", path)

        self._hashes[rel_path] = digest
        return digest
