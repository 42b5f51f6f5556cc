from __future__ import annotations

import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request

from .errors import TwitterAuthError
from .models import Tweet

logger = logging.getLogger(__name__)

API_BASE = "https://api.twitter.com/2"


class TwitterClient:
    def __init__(self, bearer_token: str, timeout_seconds: int = 20, max_retries: int = 3) -> None:
        self.bearer_token = bearer_token
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries

    def search_hashtag(self, hashtag: str, max_results: int = 50) -> list[Tweet]:
        query = urllib.parse.urlencode(
            {
                "query": f"#{hashtag} -is:retweet",
                "tweet.fields": "created_at,public_metrics,context_annotations,author_id",
                "expansions": "author_id",
                "user.fields": "username,name",
                "max_results": _clamp_results(max_results),
            }
        )
        payload = self._get_json(f"{API_BASE}/tweets/search/recent?{query}")
        users = {
            user.get("id"): user for user in payload.get("includes", {}).get("users", []) or []
        }

        tweets: list[Tweet] = []
        for item in payload.get("data", []) or []:
            author = users.get(item.get("author_id"), {})
            tweet = _parse_tweet(
                item,
                source=f"#{hashtag}",
                username=author.get("username", "unknown"),
                name=author.get("name", "Unknown User"),
            )
            if tweet is not None:
                tweets.append(tweet)
        return tweets

    def fetch_user_tweets(self, username: str, max_results: int = 25) -> list[Tweet]:
        user_payload = self._get_json(
            f"{API_BASE}/users/by/username/{urllib.parse.quote(username)}"
        )
        user = user_payload.get("data") or {}
        user_id = user.get("id")
        if not user_id:
            raise RuntimeError(f"Failed to get user ID for @{username}")

        query = urllib.parse.urlencode(
            {
                "tweet.fields": "created_at,public_metrics",
                "max_results": _clamp_results(max_results),
                "exclude": "retweets,replies",
            }
        )
        payload = self._get_json(f"{API_BASE}/users/{user_id}/tweets?{query}")

        tweets: list[Tweet] = []
        for item in payload.get("data", []) or []:
            tweet = _parse_tweet(
                item,
                source=f"@{username}",
                username=username,
                name=user.get("name", "Unknown User"),
            )
            if tweet is not None:
                tweets.append(tweet)
        return tweets

    def _get_json(self, url: str) -> dict:
        last_error: Exception | None = None
        for attempt in range(1, self.max_retries + 1):
            request = urllib.request.Request(
                url=url, headers={"Authorization": f"Bearer {self.bearer_token}"}
            )
            try:
                with urllib.request.urlopen(request, timeout=self.timeout_seconds) as response:
                    return json.loads(response.read().decode("utf-8"))
            except urllib.error.HTTPError as exc:
                if exc.code in (401, 403):
                    raise TwitterAuthError(f"Twitter API rejected the bearer token ({exc.code})") from exc
                last_error = exc
            except (urllib.error.URLError, TimeoutError, json.JSONDecodeError) as exc:
                last_error = exc
            logger.warning(
                "Twitter request failed (attempt %d/%d): %s", attempt, self.max_retries, last_error
            )
            if attempt < self.max_retries:
                time.sleep(1.5 * attempt)
        if last_error is None:
            raise RuntimeError("Failed to fetch URL: unknown error")
        raise RuntimeError(f"Failed to fetch URL: {url}") from last_error


def _parse_tweet(item: dict, source: str, username: str, name: str) -> Tweet | None:
    tweet_id = item.get("id")
    if not tweet_id:
        return None
    metrics = item.get("public_metrics") or {}
    return Tweet(
        tweet_id=tweet_id,
        text=item.get("text", ""),
        created_at=item.get("created_at", ""),
        author_username=username,
        author_name=name,
        likes=int(metrics.get("like_count") or 0),
        retweets=int(metrics.get("retweet_count") or 0),
        replies=int(metrics.get("reply_count") or 0),
        impressions=int(metrics.get("impression_count") or 0),
        source=source,
    )


def _clamp_results(value: int) -> int:
    # Recent search accepts 10..100.
    return max(min(value, 100), 10)
