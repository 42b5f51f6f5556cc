from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path

from .classifier import CATEGORIES, IdeaClassifier
from .config import AppConfig, load_config
from .feed import PLATFORMS, SORT_OPTIONS, build_feed
from .logging_setup import setup_logging
from .pipeline import run_scan
from .reporting import format_feed_text, load_ideas_json


def _load_config(args: argparse.Namespace) -> AppConfig | None:
    try:
        return load_config(args.config)
    except ValueError as exc:
        # tomllib.TOMLDecodeError is a ValueError too.
        print(f"Invalid configuration: {exc}")
        return None


def cmd_scan(args: argparse.Namespace) -> int:
    config = _load_config(args)
    if config is None:
        return 2
    if config.reddit is None and config.twitter is None:
        print("No platform is configured. Set Reddit client credentials or a Twitter bearer token.")
        return 2
    setup_logging(config.log_level, config.log_format, verbose=args.verbose)

    result = run_scan(config)
    print(f"Status: {result.status}")
    print(f"Reddit ideas: {result.reddit_ideas}")
    print(f"Twitter ideas: {result.twitter_ideas}")
    print(f"Unique ideas: {result.total_ideas}")
    for error in result.errors:
        print(f"Error: {error}")
    if result.json_path is not None:
        print(f"JSON: {result.json_path}")
        print(f"CSV: {result.csv_path}")
        print(f"Report: {result.report_path}")
    return 1 if result.status == "failed" else 0


def cmd_classify(args: argparse.Namespace) -> int:
    config = _load_config(args)
    if config is None:
        return 2
    result = IdeaClassifier(config.rules).classify(args.title, args.body)
    payload = asdict(result)
    payload["tags"] = list(result.tags)
    print(json.dumps(payload, indent=2))
    return 0


def cmd_feed(args: argparse.Namespace) -> int:
    source = Path(args.path)
    if not source.exists():
        print(f"Feed file not found: {source}")
        return 2
    try:
        ideas = load_ideas_json(source)
    except (json.JSONDecodeError, TypeError, AttributeError) as exc:
        print(f"Invalid feed file {source}: {exc}")
        return 2

    feed = build_feed(
        ideas,
        platform=args.platform,
        category=args.category,
        search=args.search,
        sort_by=args.sort,
    )
    if args.limit:
        feed = feed[: args.limit]

    if args.format == "json":
        print(json.dumps({"ideas": [asdict(idea) for idea in feed], "count": len(feed)}, indent=2))
    elif feed:
        print(format_feed_text(feed))
    else:
        print("No ideas found. Try adjusting your search terms or filters.")
    return 0


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="idea-feed", description="Reddit and Twitter idea feed")
    parser.add_argument("--config", type=Path, help="Path to config.toml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    scan_cmd = sub.add_parser("scan", help="Fetch, classify and export ideas")
    scan_cmd.set_defaults(func=cmd_scan)

    classify_cmd = sub.add_parser("classify", help="Classify a single post")
    classify_cmd.add_argument("title", help="Post title or tweet text")
    classify_cmd.add_argument("--body", default="", help="Post body")
    classify_cmd.set_defaults(func=cmd_classify)

    feed_cmd = sub.add_parser("feed", help="Search and sort an exported JSON feed")
    feed_cmd.add_argument("path", help="JSON file written by the scan command")
    feed_cmd.add_argument("--platform", choices=PLATFORMS, default="all")
    feed_cmd.add_argument("--category", choices=("all", *CATEGORIES), default="all")
    feed_cmd.add_argument("--search", default="", help="Match title, description or tags")
    feed_cmd.add_argument("--sort", choices=SORT_OPTIONS, default="trending")
    feed_cmd.add_argument(
        "--limit", type=_non_negative_int, default=0, help="Show at most N ideas (0 for all)"
    )
    feed_cmd.add_argument("--format", choices=("text", "json"), default="text")
    feed_cmd.set_defaults(func=cmd_feed)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
