from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from .classifier import OVERRIDABLE_FIELDS, ClassifierRules

DEFAULT_SUBREDDITS = [
    "SomebodyMakeThis",
    "AppIdeas",
    "Entrepreneur",
    "startups",
    "IndieDev",
    "webdev",
    "programming",
    "SaaS",
    "nocode",
]
DEFAULT_HASHTAGS = [
    "buildinpublic",
    "indiehacker",
    "startup",
    "appidea",
    "saas",
    "nocode",
    "webdev",
    "devtools",
]
DEFAULT_ACCOUNTS = ["IndieHackers", "ProductHunt", "StartupGrind", "ycombinator", "buildinpublic"]
DEFAULT_USER_AGENT = "idea-feed-scanner/0.1"


@dataclass(slots=True)
class RedditConfig:
    client_id: str
    client_secret: str
    subreddits: list[str]
    limit: int


@dataclass(slots=True)
class TwitterConfig:
    bearer_token: str
    hashtags: list[str]
    accounts: list[str]
    search_limit: int
    timeline_limit: int


@dataclass(slots=True)
class AppConfig:
    output_dir: Path
    user_agent: str
    report_top_n: int
    reddit: RedditConfig | None
    twitter: TwitterConfig | None
    rules: ClassifierRules
    log_level: str = "INFO"
    log_format: str = "text"


def _csv_to_list(value: str | list[str] | None, default: list[str]) -> list[str]:
    if value is None:
        return default.copy()
    if isinstance(value, list):
        return [item.strip() for item in value if item and item.strip()]
    return [item.strip() for item in value.split(",") if item and item.strip()]


def _int_env(name: str, fallback: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return fallback
    try:
        return int(raw)
    except ValueError:
        return fallback


def _bool_env(name: str, fallback: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return fallback
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _bool_value(value: object, fallback: bool) -> bool:
    if value is None:
        return fallback
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    if isinstance(value, int):
        return value != 0
    return fallback


def _read_toml(path: Path) -> dict:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _load_rules(section: dict) -> ClassifierRules:
    overrides: dict[str, list[str]] = {}
    for key in sorted(OVERRIDABLE_FIELDS):
        env_name = f"IDEA_FEED_CLASSIFIER_{key.upper()}"
        value = os.getenv(env_name, section.get(key))
        if value is not None:
            overrides[key] = _csv_to_list(value, [])
    unknown = set(section) - OVERRIDABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown [classifier] keys: {', '.join(sorted(unknown))}")
    return ClassifierRules().with_overrides(overrides)


def load_config(config_path: Path | None = None) -> AppConfig:
    file_path = config_path or Path("config.toml")
    raw = _read_toml(file_path)

    output_dir = Path(os.getenv("IDEA_FEED_OUTPUT_DIR", raw.get("output_dir", "output")))
    user_agent = os.getenv("IDEA_FEED_USER_AGENT", raw.get("user_agent", DEFAULT_USER_AGENT))
    report_top_n = _int_env("IDEA_FEED_REPORT_TOP_N", int(raw.get("report_top_n", 15)))
    log_level = os.getenv("IDEA_FEED_LOG_LEVEL", raw.get("log_level", "INFO")).upper()
    log_format = os.getenv("IDEA_FEED_LOG_FORMAT", raw.get("log_format", "text")).lower()

    reddit: RedditConfig | None = None
    reddit_section = raw.get("reddit", {})
    reddit_enabled = _bool_env(
        "IDEA_FEED_REDDIT_ENABLED", _bool_value(reddit_section.get("enabled"), True)
    )
    client_id = os.getenv("IDEA_FEED_REDDIT_CLIENT_ID", reddit_section.get("client_id", ""))
    client_secret = os.getenv(
        "IDEA_FEED_REDDIT_CLIENT_SECRET", reddit_section.get("client_secret", "")
    )
    subreddits = _csv_to_list(
        os.getenv("IDEA_FEED_SUBREDDITS", reddit_section.get("subreddits")), DEFAULT_SUBREDDITS
    )
    reddit_limit = _int_env("IDEA_FEED_REDDIT_LIMIT", int(reddit_section.get("limit", 15)))
    if reddit_enabled and client_id and client_secret:
        reddit = RedditConfig(
            client_id=client_id,
            client_secret=client_secret,
            subreddits=subreddits,
            limit=reddit_limit,
        )

    twitter: TwitterConfig | None = None
    twitter_section = raw.get("twitter", {})
    twitter_enabled = _bool_env(
        "IDEA_FEED_TWITTER_ENABLED", _bool_value(twitter_section.get("enabled"), True)
    )
    bearer_token = os.getenv(
        "IDEA_FEED_TWITTER_BEARER_TOKEN",
        twitter_section.get("bearer_token") or os.getenv("TWITTER_BEARER_TOKEN", ""),
    )
    hashtags = _csv_to_list(
        os.getenv("IDEA_FEED_HASHTAGS", twitter_section.get("hashtags")), DEFAULT_HASHTAGS
    )
    accounts = _csv_to_list(
        os.getenv("IDEA_FEED_ACCOUNTS", twitter_section.get("accounts")), DEFAULT_ACCOUNTS
    )
    search_limit = _int_env(
        "IDEA_FEED_TWITTER_SEARCH_LIMIT", int(twitter_section.get("search_limit", 50))
    )
    timeline_limit = _int_env(
        "IDEA_FEED_TWITTER_TIMELINE_LIMIT", int(twitter_section.get("timeline_limit", 25))
    )
    if twitter_enabled and bearer_token:
        twitter = TwitterConfig(
            bearer_token=bearer_token,
            hashtags=hashtags,
            accounts=accounts,
            search_limit=search_limit,
            timeline_limit=timeline_limit,
        )

    rules = _load_rules(raw.get("classifier", {}))

    return AppConfig(
        output_dir=output_dir,
        user_agent=user_agent,
        report_top_n=report_top_n,
        reddit=reddit,
        twitter=twitter,
        rules=rules,
        log_level=log_level,
        log_format=log_format,
    )
