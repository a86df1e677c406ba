"""Tool configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from blogmeta.services.text_service import TruncationPolicy


class Settings(BaseSettings):
    """blogmeta settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False

    # Paths
    content_dir: Path = Path("./content")
    config_file: Path = Path("./config.toml")
    static_dir: Path = Path("./static")
    output_dir: Path = Path("./public")

    # Overrides base_url from config.toml when non-empty
    base_url: str = ""

    # Truncation of summaries and author names
    truncate_mode: Literal["chars", "words"] = "chars"
    truncate_marker: str = Field(default="…", max_length=8)

    def truncation_policy(self) -> TruncationPolicy:
        """Build the truncation policy used by the composer."""
        return TruncationPolicy(mode=self.truncate_mode, marker=self.truncate_marker)
