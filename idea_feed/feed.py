from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime

from .models import IdeaRecord

PLATFORMS = ("all", "reddit", "twitter")
SORT_OPTIONS = ("trending", "newest", "popular")


def dedupe_by_title(records: list[IdeaRecord]) -> list[IdeaRecord]:
    """Keep the first record seen for each exact title."""
    seen: set[str] = set()
    unique: list[IdeaRecord] = []
    for record in records:
        if record.title in seen:
            continue
        seen.add(record.title)
        unique.append(record)
    return unique


def filter_records(
    records: list[IdeaRecord],
    platform: str = "all",
    category: str = "all",
    search: str = "",
) -> list[IdeaRecord]:
    filtered = records
    if platform != "all":
        filtered = [record for record in filtered if record.platform == platform]
    if category != "all":
        filtered = [record for record in filtered if record.category == category]
    term = search.strip().lower()
    if term:
        filtered = [record for record in filtered if _matches_search(record, term)]
    return list(filtered)


def sort_records(records: list[IdeaRecord], sort_by: str = "trending") -> list[IdeaRecord]:
    if sort_by == "trending":
        return sorted(records, key=lambda record: record.engagement, reverse=True)
    if sort_by == "newest":
        return sorted(records, key=lambda record: _parse_timestamp(record.timestamp), reverse=True)
    if sort_by == "popular":
        return sorted(records, key=lambda record: record.upvotes + record.likes, reverse=True)
    return list(records)


def build_feed(
    records: list[IdeaRecord],
    platform: str = "all",
    category: str = "all",
    search: str = "",
    sort_by: str = "trending",
) -> list[IdeaRecord]:
    filtered = filter_records(records, platform=platform, category=category, search=search)
    return sort_records(filtered, sort_by=sort_by)


def count_by(records: list[IdeaRecord], attribute: str) -> list[tuple[str, int]]:
    counts = Counter(getattr(record, attribute) for record in records)
    return counts.most_common()


def count_tags(records: list[IdeaRecord]) -> list[tuple[str, int]]:
    counts = Counter(tag for record in records for tag in record.tags)
    return counts.most_common()


def _matches_search(record: IdeaRecord, term: str) -> bool:
    if term in record.title.lower() or term in record.description.lower():
        return True
    return any(term in tag.lower() for tag in record.tags)


def _parse_timestamp(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return datetime.min.replace(tzinfo=UTC)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
