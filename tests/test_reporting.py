from __future__ import annotations

import csv
import tempfile
import unittest
from datetime import UTC, datetime
from pathlib import Path

from idea_feed.models import IdeaRecord
from idea_feed.reporting import (
    build_markdown_feed,
    export_ideas_csv,
    export_ideas_json,
    format_time_ago,
    load_ideas_json,
)


def sample_ideas() -> list[IdeaRecord]:
    return [
        IdeaRecord(
            id="reddit_1",
            platform="reddit",
            source="r/AppIdeas",
            title="Invoice reminder app for freelancers",
            description="Freelancers forget to follow up on unpaid invoices.",
            author="u/u1",
            timestamp="2026-02-12T08:00:00+00:00",
            url="https://reddit.com/r/AppIdeas/1",
            category="app-ideas",
            complexity="Medium",
            market_potential="Medium",
            tags=["API"],
            upvotes=50,
            comments=10,
            engagement=60,
        ),
        IdeaRecord(
            id="twitter_2",
            platform="twitter",
            source="#saas",
            title="Subscription analytics for creators",
            description="Subscription analytics for creators. #saas",
            author="@u2",
            author_name="User Two",
            timestamp="2026-02-10T08:00:00.000Z",
            url="https://twitter.com/u2/status/2",
            category="saas-ideas",
            complexity="Low",
            market_potential="High",
            tags=["saas", "Social"],
            likes=20,
            retweets=2,
            replies=1,
            engagement=23,
        ),
    ]


class ReportingTests(unittest.TestCase):
    def test_markdown_feed_contains_expected_sections(self) -> None:
        report = build_markdown_feed(
            ideas=sample_ideas(),
            generated_at=datetime(2026, 2, 12, 10, 30, tzinfo=UTC),
            top_n=10,
        )

        self.assertIn("# Idea Feed", report)
        self.assertIn("## Top Ideas", report)
        self.assertIn("## Category Distribution", report)
        self.assertIn("- reddit: 1", report)
        self.assertIn("- saas-ideas: 1", report)
        self.assertIn("Tags: saas, Social", report)

    def test_markdown_feed_handles_empty_scan(self) -> None:
        report = build_markdown_feed([], datetime(2026, 2, 12, tzinfo=UTC), top_n=5)

        self.assertIn("No ideas found in this scan.", report)
        self.assertIn("- None", report)

    def test_json_export_loads_back(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "feed" / "ideas.json"
            export_ideas_json(sample_ideas(), path)

            loaded = load_ideas_json(path)

        self.assertEqual(loaded, sample_ideas())

    def test_csv_export_joins_tags(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "ideas.csv"
            export_ideas_csv(sample_ideas(), path)

            with path.open(newline="", encoding="utf-8") as handle:
                rows = list(csv.DictReader(handle))

        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[1]["tags"], "saas,Social")
        self.assertEqual(rows[0]["engagement"], "60")

    def test_time_ago(self) -> None:
        now = datetime(2026, 2, 12, 10, 0, tzinfo=UTC)

        self.assertEqual(format_time_ago("2026-02-12T08:00:00+00:00", now), "2h ago")
        self.assertEqual(format_time_ago("2026-02-09T08:00:00.000Z", now), "3d ago")
        self.assertEqual(format_time_ago("not a date", now), "unknown")


if __name__ == "__main__":
    unittest.main()
