#!/usr/bin/env python3
"""
unfurl - expand URLs into Markdown previews.

A small command-line interface around the unfurl pipeline. Formatted lines
go to stdout (or into a file); status and errors go to stderr.
"""
import sys
import argparse
import asyncio
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional
from rich.console import Console

from unfurl.config import UnfurlConfig, init_config
from unfurl.formatter import format_metadata
from unfurl.models import metadata_from_dict
from unfurl.output import insert_lines, write_lines
from unfurl.pipeline import unfurl_many

logger = logging.getLogger(__name__)


console = Console(stderr=True)


def setup_logging(config: UnfurlConfig, verbose: bool = False, quiet: bool = False):
    """Configure root logging from the config and CLI flags."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = getattr(logging, str(config.log_level).upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s', force=True)


def cmd_fetch(args, config: UnfurlConfig) -> int:
    """Unfurl one or more URLs."""
    results = asyncio.run(unfurl_many(args.urls, config))

    failures = 0
    collected: List[str] = []
    for result in results:
        if not result.success:
            failures += 1
            console.print(f"[red]Error processing {result.url}: {result.error}[/red]")
            continue
        if not result.lines and not args.quiet:
            console.print(f"[yellow]No metadata found to insert for {result.url}[/yellow]")
        collected.extend(result.lines)

    if config.output_format == "json":
        print(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
    elif args.insert:
        if insert_lines(Path(args.insert), collected, after=args.after) and not args.quiet:
            console.print(f"[green]Inserted {len(collected)} lines into {args.insert}[/green]")
    else:
        write_lines(collected)

    return 1 if failures else 0


def cmd_format(args, config: UnfurlConfig) -> int:
    """Render saved metadata JSON without fetching anything."""
    if args.file == "-":
        raw = sys.stdin.read()
    else:
        raw = Path(args.file).read_text(encoding="utf-8")

    data = json.loads(raw)
    records = data if isinstance(data, list) else [data]

    for record in records:
        # Accept both bare metadata and `fetch --output json` results
        if "metadata" in record and "type" not in record:
            record = record["metadata"]
            if record is None:
                continue
        write_lines(format_metadata(metadata_from_dict(record), config))
    return 0


def cmd_config(args, config: UnfurlConfig) -> int:
    """Manage configuration."""
    if args.action == "show":
        if args.key:
            if not hasattr(config, args.key):
                console.print(f"[red]Unknown config key: {args.key}[/red]")
                return 1
            print(getattr(config, args.key))
        else:
            print(json.dumps(asdict(config), indent=2))

    elif args.action == "set":
        if not args.key or args.value is None:
            console.print("[red]Usage: unfurl config set KEY VALUE[/red]")
            return 1
        try:
            config.set_value(args.key, args.value)
        except KeyError:
            console.print(f"[red]Unknown config key: {args.key}[/red]")
            return 1
        config.save()
        if not args.quiet:
            console.print(f"[green]Set {args.key} = {args.value}[/green]")

    elif args.action == "init":
        config_path = Path.home() / ".config" / "unfurl" / "config.toml"
        config.save(config_path)
        console.print(f"[green]Created config at {config_path}[/green]")

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="unfurl",
        description="unfurl - expand URLs into Markdown previews",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  unfurl fetch https://example.com
  unfurl fetch https://x.com/user/status/123 --no-render
  unfurl fetch https://example.com --insert notes.md --after 10
  unfurl --output json fetch https://example.com > meta.json
  unfurl format meta.json

Configuration:
  Config file: ~/.config/unfurl/config.toml or ./unfurl.toml
  Environment: UNFURL_TIMEOUT, UNFURL_RENDER_SOCIAL, UNFURL_FALLBACK_LINK
        """
    )

    # Global options
    parser.add_argument("--config", help="Config file path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal output")
    parser.add_argument("-o", "--output", choices=["lines", "json"], help="Output format")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Commands")

    # fetch
    fetch_parser = subparsers.add_parser("fetch", help="Unfurl URLs")
    fetch_parser.add_argument("urls", nargs="+", help="URLs to unfurl")
    fetch_parser.add_argument("--insert", metavar="FILE", help="Insert lines into FILE instead of printing")
    fetch_parser.add_argument("--after", type=int, default=None,
                              help="Line number to insert after (default: append)")
    fetch_parser.add_argument("--no-render", dest="render_social", action="store_false", default=None,
                              help="Do not render social embeds in a headless browser")
    fetch_parser.add_argument("--render-pages", action="store_true", default=None,
                              help="Render pages in a headless browser before reading their tags")
    fetch_parser.add_argument("--fallback-link", action="store_true", default=None,
                              help="Emit a bare link when no metadata is found")
    fetch_parser.add_argument("--download-images", action="store_true", default=None,
                              help="Download preview images and reference them locally")
    fetch_parser.add_argument("--timeout", type=int, help="Request timeout in seconds")
    fetch_parser.set_defaults(func=cmd_fetch)

    # format
    format_parser = subparsers.add_parser("format", help="Render saved metadata JSON")
    format_parser.add_argument("file", help="JSON file, or - for stdin")
    format_parser.add_argument("--fallback-link", action="store_true", default=None,
                               help="Emit a bare link when no metadata is found")
    format_parser.set_defaults(func=cmd_format)

    # config
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument("action", choices=["show", "set", "init"],
                               help="Config action")
    config_parser.add_argument("key", nargs="?", help="Config key")
    config_parser.add_argument("value", nargs="?", help="Config value (for set)")
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = {
        "output_format": args.output,
        "render_social": getattr(args, "render_social", None),
        "render_pages": getattr(args, "render_pages", None),
        "fallback_link": getattr(args, "fallback_link", None),
        "download_images": getattr(args, "download_images", None),
        "timeout": getattr(args, "timeout", None),
    }
    config_file = Path(args.config) if args.config else None
    config = init_config(config_file, **overrides)
    setup_logging(config, verbose=args.verbose, quiet=args.quiet)

    try:
        code = args.func(args, config)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
