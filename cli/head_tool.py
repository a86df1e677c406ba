"""CLI for composing and injecting blog head metadata."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

import yaml

from blogmeta.config import Settings
from blogmeta.exceptions import ConfigError
from blogmeta.filesystem.content_manager import ContentManager
from blogmeta.filesystem.toml_manager import SiteConfig, parse_site_config
from blogmeta.services.asset_service import StaticAssetResolver
from blogmeta.services.head_service import compose_head_tags
from blogmeta.services.injection_service import inject_site

logger = logging.getLogger(__name__)

EXIT_SKIPPED_OUTPUT = 1
EXIT_CONFIG_ERROR = 2
EXIT_INPUT_ERROR = 3


def _configure_logging(debug: bool) -> None:
    """Configure CLI logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        stream=sys.stderr,
        force=True,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blogmeta-head",
        description="Compose <head> meta tags for blog pages",
    )
    parser.add_argument("--content-dir", "-d", help="Content directory")
    parser.add_argument("--config", "-c", help="Site config.toml")
    parser.add_argument("--static-dir", help="Static asset directory (for cachebusting)")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command")
    render = subparsers.add_parser("render", help="Print head tags for one content file")
    render.add_argument("file", nargs="?", help="Content file relative to the content dir")
    render.add_argument("--url", help="Current URL (defaults to the file's permalink)")

    inject = subparsers.add_parser("inject", help="Inject head tags into a built site")
    inject.add_argument("--output-dir", "-o", help="Built site directory")
    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    updates: dict[str, object] = {}
    if args.content_dir:
        updates["content_dir"] = Path(args.content_dir)
    if args.config:
        updates["config_file"] = Path(args.config)
    if args.static_dir:
        updates["static_dir"] = Path(args.static_dir)
    if args.debug:
        updates["debug"] = True
    if getattr(args, "output_dir", None):
        updates["output_dir"] = Path(args.output_dir)
    return settings.model_copy(update=updates)


def load_site_config(settings: Settings) -> SiteConfig:
    """Read config.toml, applying the base URL override from settings."""
    config = parse_site_config(settings.config_file)
    if settings.base_url:
        config = dataclasses.replace(config, base_url=settings.base_url)
    return config


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """Entry point for ``blogmeta-head``."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    settings = _apply_overrides(settings or Settings(), args)
    _configure_logging(settings.debug)

    try:
        config = load_site_config(settings)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    manager = ContentManager(content_dir=settings.content_dir, config=config)
    resolver = StaticAssetResolver(base_url=config.base_url, static_dirs=[settings.static_dir])
    policy = settings.truncation_policy()

    if args.command == "render":
        try:
            if args.file:
                context = manager.context_for(args.file, current_url=args.url)
            else:
                context = manager.root_context(current_url=args.url)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return EXIT_INPUT_ERROR
        for tag in compose_head_tags(context, resolver, policy):
            print(tag)
        return 0

    report = inject_site(manager, settings.output_dir, resolver, policy)
    print("Injection summary:")
    print(f"  Updated:   {len(report.updated)}")
    print(f"  Unchanged: {len(report.unchanged)}")
    print(f"  Missing:   {len(report.missing)}")
    print(f"  Unreadable: {len(report.unreadable)}")
    for path in report.missing:
        print(f"    ! {path} (not built)")
    for path in report.unreadable:
        print(f"    ! {path} (not UTF-8)")
    return EXIT_SKIPPED_OUTPUT if report.missing or report.unreadable else 0


def cli_entry() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()
