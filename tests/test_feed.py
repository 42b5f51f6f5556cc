from __future__ import annotations

import unittest

from idea_feed.feed import build_feed, dedupe_by_title, filter_records, sort_records
from idea_feed.models import IdeaRecord


def make_record(
    record_id: str,
    title: str,
    platform: str = "reddit",
    category: str = "app-ideas",
    timestamp: str = "2026-02-10T12:00:00+00:00",
    engagement: int = 0,
    upvotes: int = 0,
    likes: int = 0,
    tags: list[str] | None = None,
    description: str = "",
) -> IdeaRecord:
    return IdeaRecord(
        id=record_id,
        platform=platform,
        source="r/AppIdeas" if platform == "reddit" else "#saas",
        title=title,
        description=description or title,
        author="u/someone",
        timestamp=timestamp,
        url=f"https://example.com/{record_id}",
        category=category,
        complexity="Low",
        market_potential="Low",
        tags=tags or [],
        upvotes=upvotes,
        likes=likes,
        engagement=engagement,
    )


class DedupeTests(unittest.TestCase):
    def test_first_record_per_exact_title_wins(self) -> None:
        records = [
            make_record("reddit_1", "Habit tracker"),
            make_record("twitter_1", "Habit tracker", platform="twitter"),
            make_record("reddit_2", "habit tracker"),
        ]

        unique = dedupe_by_title(records)

        self.assertEqual([record.id for record in unique], ["reddit_1", "reddit_2"])


class FilterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.records = [
            make_record("r1", "Invoice reminders", category="saas-ideas", tags=["SaaS"]),
            make_record("t1", "Offline maps", platform="twitter", category="mobile-apps", tags=["Mobile"]),
            make_record("r2", "Standup bot", category="developer-tools", description="Posts GitHub summaries"),
        ]

    def test_platform_filter(self) -> None:
        result = filter_records(self.records, platform="twitter")

        self.assertEqual([record.id for record in result], ["t1"])

    def test_category_filter(self) -> None:
        result = filter_records(self.records, category="saas-ideas")

        self.assertEqual([record.id for record in result], ["r1"])

    def test_search_matches_title_description_and_tags(self) -> None:
        self.assertEqual([r.id for r in filter_records(self.records, search="MAPS")], ["t1"])
        self.assertEqual([r.id for r in filter_records(self.records, search="github")], ["r2"])
        self.assertEqual([r.id for r in filter_records(self.records, search="saa")], ["r1"])

    def test_all_filters_keep_everything(self) -> None:
        self.assertEqual(len(filter_records(self.records)), 3)


class SortTests(unittest.TestCase):
    def setUp(self) -> None:
        self.records = [
            make_record("a", "A", timestamp="2026-02-09T08:00:00+00:00", engagement=5, upvotes=5),
            make_record(
                "b", "B", platform="twitter", timestamp="2026-02-11T08:00:00.000Z", engagement=50, likes=3
            ),
            make_record("c", "C", timestamp="2026-02-10T08:00:00+00:00", engagement=20, upvotes=40),
        ]

    def test_trending_sorts_by_engagement(self) -> None:
        self.assertEqual([r.id for r in sort_records(self.records, "trending")], ["b", "c", "a"])

    def test_newest_sorts_by_timestamp(self) -> None:
        self.assertEqual([r.id for r in sort_records(self.records, "newest")], ["b", "c", "a"])

    def test_popular_sorts_by_upvotes_and_likes(self) -> None:
        self.assertEqual([r.id for r in sort_records(self.records, "popular")], ["c", "a", "b"])

    def test_unknown_sort_keeps_order(self) -> None:
        self.assertEqual([r.id for r in sort_records(self.records, "random")], ["a", "b", "c"])

    def test_build_feed_filters_then_sorts(self) -> None:
        feed = build_feed(self.records, platform="reddit", sort_by="popular")

        self.assertEqual([r.id for r in feed], ["c", "a"])


if __name__ == "__main__":
    unittest.main()
