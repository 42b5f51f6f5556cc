from __future__ import annotations

import csv
import json
from dataclasses import asdict, fields
from datetime import UTC, datetime
from pathlib import Path

from .feed import count_by, count_tags
from .models import IdeaRecord

CSV_COLUMNS = [item.name for item in fields(IdeaRecord)]


def export_ideas_json(ideas: list[IdeaRecord], destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    payload = {"ideas": [asdict(idea) for idea in ideas], "count": len(ideas)}
    destination.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def load_ideas_json(source: Path) -> list[IdeaRecord]:
    payload = json.loads(source.read_text(encoding="utf-8"))
    items = payload.get("ideas", []) if isinstance(payload, dict) else payload
    known = set(CSV_COLUMNS)
    ideas: list[IdeaRecord] = []
    for item in items:
        values = {key: value for key, value in item.items() if key in known}
        values["tags"] = list(values.get("tags") or [])
        ideas.append(IdeaRecord(**values))
    return ideas


def export_ideas_csv(ideas: list[IdeaRecord], destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(CSV_COLUMNS)
        for idea in ideas:
            row = asdict(idea)
            row["tags"] = ",".join(idea.tags)
            writer.writerow([row[column] for column in CSV_COLUMNS])


def build_markdown_feed(ideas: list[IdeaRecord], generated_at: datetime, top_n: int) -> str:
    top_ideas = ideas[: max(top_n, 1)]

    lines: list[str] = []
    lines.append("# Idea Feed")
    lines.append("")
    lines.append(f"Generated at: {generated_at.astimezone(UTC).isoformat()}")
    lines.append(f"Total ideas: {len(ideas)}")
    lines.append("")
    lines.append("## Top Ideas")
    lines.append("")

    if not top_ideas:
        lines.append("No ideas found in this scan.")
    else:
        for index, idea in enumerate(top_ideas, start=1):
            lines.append(
                f"{index}. [{idea.title}]({idea.url}) "
                f"({idea.source}, {idea.author}, engagement={idea.engagement})"
            )
            lines.append(
                f"Category: {idea.category} | Complexity: {idea.complexity} | "
                f"Market: {idea.market_potential}"
            )
            if idea.tags:
                lines.append(f"Tags: {', '.join(idea.tags)}")
            lines.append("")

    _append_distribution(lines, "Platform Distribution", count_by(ideas, "platform"))
    _append_distribution(lines, "Category Distribution", count_by(ideas, "category"))
    _append_distribution(lines, "Complexity Distribution", count_by(ideas, "complexity"))
    _append_distribution(lines, "Tag Distribution", count_tags(ideas))

    return "\n".join(lines)


def format_feed_text(ideas: list[IdeaRecord], now: datetime | None = None) -> str:
    current = now or datetime.now(tz=UTC)
    lines: list[str] = []
    for idea in ideas:
        lines.append(f"[{idea.platform}] {idea.title}")
        lines.append(
            f"  {idea.source} · {idea.author} · {format_time_ago(idea.timestamp, current)} · "
            f"{idea.category} · complexity={idea.complexity} · market={idea.market_potential}"
        )
        if idea.tags:
            lines.append(f"  tags: {', '.join(idea.tags)}")
        lines.append(f"  {idea.url}")
    return "\n".join(lines)


def format_time_ago(timestamp: str, now: datetime) -> str:
    try:
        then = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return "unknown"
    if then.tzinfo is None:
        then = then.replace(tzinfo=UTC)
    seconds = (now - then).total_seconds()
    hours = int(seconds // 3600)
    if hours < 24:
        return f"{hours}h ago"
    return f"{int(seconds // 86400)}d ago"


def write_text_report(report_content: str, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(report_content, encoding="utf-8")


def _append_distribution(lines: list[str], heading: str, counts: list[tuple[str, int]]) -> None:
    lines.append(f"## {heading}")
    lines.append("")
    if counts:
        for label, count in counts:
            lines.append(f"- {label}: {count}")
    else:
        lines.append("- None")
    lines.append("")
