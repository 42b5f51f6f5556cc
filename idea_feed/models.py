from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class RawPost:
    title: str
    body: str = ""


@dataclass(frozen=True, slots=True)
class Classification:
    is_idea: bool
    category: str
    tags: tuple[str, ...]
    complexity: str
    market_potential: str


@dataclass(slots=True)
class RedditPost:
    post_id: str
    subreddit: str
    title: str
    selftext: str
    permalink: str
    author: str
    created_utc: int
    upvotes: int
    num_comments: int
    awards: int = 0


@dataclass(slots=True)
class Tweet:
    tweet_id: str
    text: str
    created_at: str
    author_username: str
    author_name: str
    likes: int
    retweets: int
    replies: int
    source: str
    impressions: int = 0


@dataclass(slots=True)
class IdeaRecord:
    id: str
    platform: str
    source: str
    title: str
    description: str
    author: str
    timestamp: str
    url: str
    category: str
    complexity: str
    market_potential: str
    tags: list[str] = field(default_factory=list)
    author_name: str = ""
    upvotes: int = 0
    comments: int = 0
    likes: int = 0
    retweets: int = 0
    replies: int = 0
    impressions: int = 0
    awards: int = 0
    engagement: int = 0
