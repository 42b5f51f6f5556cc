from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import Protocol

from .classifier import DEFAULT_CLASSIFIER, IdeaClassifier
from .errors import IngestError
from .models import IdeaRecord, RedditPost, Tweet

logger = logging.getLogger(__name__)

URL_RE = re.compile(r"https?://\S+")
SENTENCE_END_RE = re.compile(r"[.!?]")
TITLE_MAX_CHARS = 80


class RedditSource(Protocol):
    def fetch_hot_posts(self, subreddit: str, limit: int = 15) -> list[RedditPost]: ...


class TwitterSource(Protocol):
    def search_hashtag(self, hashtag: str, max_results: int = 50) -> list[Tweet]: ...

    def fetch_user_tweets(self, username: str, max_results: int = 25) -> list[Tweet]: ...


def extract_tweet_title(text: str) -> str:
    clean = URL_RE.sub("", text).strip()
    first_sentence = SENTENCE_END_RE.split(clean, maxsplit=1)[0].strip()
    if len(first_sentence) > TITLE_MAX_CHARS:
        return first_sentence[:TITLE_MAX_CHARS] + "..."
    return first_sentence or clean[:TITLE_MAX_CHARS] + "..."


def build_reddit_record(
    post: RedditPost, classifier: IdeaClassifier = DEFAULT_CLASSIFIER
) -> IdeaRecord | None:
    result = classifier.classify(post.title, post.selftext)
    if not result.is_idea:
        return None
    return IdeaRecord(
        id=f"reddit_{post.post_id}",
        platform="reddit",
        source=f"r/{post.subreddit}",
        title=post.title,
        description=post.selftext or post.title,
        author=f"u/{post.author}",
        timestamp=datetime.fromtimestamp(post.created_utc, tz=UTC).isoformat(),
        url=post.permalink,
        category=result.category,
        complexity=result.complexity,
        market_potential=result.market_potential,
        tags=list(result.tags),
        upvotes=post.upvotes,
        comments=post.num_comments,
        awards=post.awards,
        engagement=post.upvotes + post.num_comments,
    )


def build_tweet_record(
    tweet: Tweet, classifier: IdeaClassifier = DEFAULT_CLASSIFIER
) -> IdeaRecord | None:
    result = classifier.classify(tweet.text)
    if not result.is_idea:
        return None
    return IdeaRecord(
        id=f"twitter_{tweet.tweet_id}",
        platform="twitter",
        source=tweet.source,
        title=extract_tweet_title(tweet.text),
        description=tweet.text,
        author=f"@{tweet.author_username}",
        author_name=tweet.author_name,
        timestamp=tweet.created_at,
        url=f"https://twitter.com/{tweet.author_username}/status/{tweet.tweet_id}",
        category=result.category,
        complexity=result.complexity,
        market_potential=result.market_potential,
        tags=list(result.tags),
        likes=tweet.likes,
        retweets=tweet.retweets,
        replies=tweet.replies,
        impressions=tweet.impressions,
        engagement=tweet.likes + tweet.retweets + tweet.replies,
    )


def collect_reddit_ideas(
    client: RedditSource,
    subreddits: list[str],
    limit: int = 15,
    classifier: IdeaClassifier = DEFAULT_CLASSIFIER,
) -> list[IdeaRecord]:
    ideas: list[IdeaRecord] = []
    succeeded = 0
    for subreddit in subreddits:
        logger.info("Scraping r/%s", subreddit)
        try:
            posts = client.fetch_hot_posts(subreddit, limit=limit)
        except IngestError:
            raise
        except Exception as exc:
            logger.error("Error scraping r/%s: %s", subreddit, exc)
            continue
        succeeded += 1
        for post in posts:
            record = build_reddit_record(post, classifier)
            if record is not None:
                ideas.append(record)
    if subreddits and not succeeded:
        raise IngestError(f"All {len(subreddits)} subreddits failed")
    logger.info("Reddit scraping complete. Found %d ideas.", len(ideas))
    return ideas


def collect_twitter_ideas(
    client: TwitterSource,
    hashtags: list[str],
    accounts: list[str],
    search_limit: int = 50,
    timeline_limit: int = 25,
    classifier: IdeaClassifier = DEFAULT_CLASSIFIER,
) -> list[IdeaRecord]:
    ideas: list[IdeaRecord] = []
    succeeded = 0
    for hashtag in hashtags:
        logger.info("Scraping #%s", hashtag)
        try:
            tweets = client.search_hashtag(hashtag, max_results=search_limit)
        except IngestError:
            raise
        except Exception as exc:
            logger.error("Error scraping #%s: %s", hashtag, exc)
            continue
        succeeded += 1
        ideas.extend(_tweet_records(tweets, classifier))

    for username in accounts:
        logger.info("Scraping @%s", username)
        try:
            tweets = client.fetch_user_tweets(username, max_results=timeline_limit)
        except IngestError:
            raise
        except Exception as exc:
            logger.error("Error scraping @%s: %s", username, exc)
            continue
        succeeded += 1
        ideas.extend(_tweet_records(tweets, classifier))

    attempted = len(hashtags) + len(accounts)
    if attempted and not succeeded:
        raise IngestError(f"All {attempted} Twitter sources failed")
    logger.info("Twitter scraping complete. Found %d ideas.", len(ideas))
    return ideas


def _tweet_records(tweets: list[Tweet], classifier: IdeaClassifier) -> list[IdeaRecord]:
    records: list[IdeaRecord] = []
    for tweet in tweets:
        record = build_tweet_record(tweet, classifier)
        if record is not None:
            records.append(record)
    return records
