from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from .classifier import IdeaClassifier
from .config import AppConfig
from .feed import dedupe_by_title, sort_records
from .ingest import RedditSource, TwitterSource, collect_reddit_ideas, collect_twitter_ideas
from .models import IdeaRecord
from .reddit_client import RedditClient
from .reporting import build_markdown_feed, export_ideas_csv, export_ideas_json, write_text_report
from .twitter_client import TwitterClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScanResult:
    status: str
    reddit_ideas: int
    twitter_ideas: int
    total_ideas: int
    started_utc: int
    finished_utc: int
    json_path: Path | None
    csv_path: Path | None
    report_path: Path | None
    errors: list[str] = field(default_factory=list)
    ideas: list[IdeaRecord] = field(default_factory=list)


def run_scan(
    config: AppConfig,
    reddit_client: RedditSource | None = None,
    twitter_client: TwitterSource | None = None,
    now: datetime | None = None,
) -> ScanResult:
    if config.reddit is None and config.twitter is None:
        raise ValueError("No platform is configured; set Reddit or Twitter credentials.")

    runtime = now or datetime.now(tz=UTC)
    started_utc = int(runtime.timestamp())
    classifier = IdeaClassifier(config.rules)
    errors: list[str] = []
    attempted = 0

    reddit_ideas: list[IdeaRecord] = []
    if config.reddit is not None:
        attempted += 1
        reddit_source = reddit_client or RedditClient(
            client_id=config.reddit.client_id,
            client_secret=config.reddit.client_secret,
            user_agent=config.user_agent,
        )
        try:
            reddit_ideas = collect_reddit_ideas(
                reddit_source,
                subreddits=config.reddit.subreddits,
                limit=config.reddit.limit,
                classifier=classifier,
            )
        except Exception as exc:
            logger.error("Reddit scraping failed: %s", exc)
            errors.append(f"Reddit: {exc}")

    twitter_ideas: list[IdeaRecord] = []
    if config.twitter is not None:
        attempted += 1
        twitter_source = twitter_client or TwitterClient(bearer_token=config.twitter.bearer_token)
        try:
            twitter_ideas = collect_twitter_ideas(
                twitter_source,
                hashtags=config.twitter.hashtags,
                accounts=config.twitter.accounts,
                search_limit=config.twitter.search_limit,
                timeline_limit=config.twitter.timeline_limit,
                classifier=classifier,
            )
        except Exception as exc:
            logger.error("Twitter scraping failed: %s", exc)
            errors.append(f"Twitter: {exc}")

    ideas = sort_records(dedupe_by_title(reddit_ideas + twitter_ideas), sort_by="trending")

    if len(errors) == attempted:
        status = "failed"
    elif errors:
        status = "partial"
    elif not ideas:
        status = "empty"
    else:
        status = "success"

    json_path: Path | None = None
    csv_path: Path | None = None
    report_path: Path | None = None
    if status != "failed":
        date_stamp = runtime.strftime("%Y%m%d_%H%M%S")
        json_path = config.output_dir / f"ideas_{date_stamp}.json"
        csv_path = config.output_dir / f"ideas_{date_stamp}.csv"
        report_path = config.output_dir / f"feed_{date_stamp}.md"
        export_ideas_json(ideas, json_path)
        export_ideas_csv(ideas, csv_path)
        write_text_report(
            build_markdown_feed(ideas, generated_at=runtime, top_n=config.report_top_n),
            report_path,
        )

    finished_utc = int((now or datetime.now(tz=UTC)).timestamp())
    logger.info(
        "Scan %s: %d ideas (%d reddit, %d twitter)",
        status,
        len(ideas),
        len(reddit_ideas),
        len(twitter_ideas),
    )
    return ScanResult(
        status=status,
        reddit_ideas=len(reddit_ideas),
        twitter_ideas=len(twitter_ideas),
        total_ideas=len(ideas),
        started_utc=started_utc,
        finished_utc=finished_utc,
        json_path=json_path,
        csv_path=csv_path,
        report_path=report_path,
        errors=errors,
        ideas=ideas,
    )
