from __future__ import annotations

import base64
import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request

from .errors import RedditAuthError
from .models import RedditPost

logger = logging.getLogger(__name__)

TOKEN_URL = "https://www.reddit.com/api/v1/access_token"
API_BASE = "https://oauth.reddit.com"


class RedditClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        user_agent: str,
        timeout_seconds: int = 20,
        max_retries: int = 3,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.user_agent = user_agent
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self._access_token: str | None = None

    def authenticate(self) -> str:
        credentials = f"{self.client_id}:{self.client_secret}".encode("utf-8")
        request = urllib.request.Request(
            url=TOKEN_URL,
            data=b"grant_type=client_credentials",
            method="POST",
            headers={
                "Authorization": "Basic " + base64.b64encode(credentials).decode("ascii"),
                "Content-Type": "application/x-www-form-urlencoded",
                "User-Agent": self.user_agent,
            },
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout_seconds) as response:
                payload = json.loads(response.read().decode("utf-8"))
        except (urllib.error.HTTPError, urllib.error.URLError, TimeoutError, json.JSONDecodeError) as exc:
            raise RedditAuthError("Failed to authenticate with Reddit API") from exc

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise RedditAuthError("Reddit token response did not include an access token")
        self._access_token = token
        logger.info("Reddit token obtained")
        return token

    def fetch_hot_posts(self, subreddit: str, limit: int = 15) -> list[RedditPost]:
        if self._access_token is None:
            self.authenticate()
        query = urllib.parse.urlencode({"limit": max(limit, 1)})
        url = f"{API_BASE}/r/{urllib.parse.quote(subreddit)}/hot?{query}"
        payload = self._get_json(url)

        posts: list[RedditPost] = []
        for child in payload.get("data", {}).get("children", []):
            post = self._parse_post(child=child, fallback_subreddit=subreddit)
            if post is not None:
                posts.append(post)
        return posts

    def _parse_post(self, child: dict, fallback_subreddit: str) -> RedditPost | None:
        data = child.get("data", {})
        post_id = data.get("id")
        if not post_id:
            return None
        return RedditPost(
            post_id=post_id,
            subreddit=data.get("subreddit", fallback_subreddit),
            title=(data.get("title") or "").strip(),
            selftext=(data.get("selftext") or "").strip(),
            permalink="https://reddit.com" + data.get("permalink", ""),
            author=data.get("author") or "[deleted]",
            created_utc=int(data.get("created_utc") or 0),
            upvotes=int(data.get("ups") or 0),
            num_comments=int(data.get("num_comments") or 0),
            awards=len(data.get("all_awardings") or []),
        )

    def _get_json(self, url: str) -> dict:
        last_error: Exception | None = None
        refreshed = False
        attempt = 0
        while attempt < self.max_retries:
            attempt += 1
            request = urllib.request.Request(
                url=url,
                headers={
                    "Authorization": f"Bearer {self._access_token}",
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                },
            )
            try:
                with urllib.request.urlopen(request, timeout=self.timeout_seconds) as response:
                    raw = response.read().decode("utf-8")
                    return json.loads(raw)
            except urllib.error.HTTPError as exc:
                if exc.code == 401 and not refreshed:
                    # Tokens expire after an hour; fetch a new one once and repeat the attempt.
                    logger.info("Reddit token rejected, re-authenticating")
                    self.authenticate()
                    refreshed = True
                    attempt -= 1
                    continue
                last_error = exc
                logger.warning("Reddit request failed (attempt %d/%d): %s", attempt, self.max_retries, exc)
                if attempt < self.max_retries:
                    time.sleep(1.5 * attempt)
            except (urllib.error.URLError, TimeoutError, json.JSONDecodeError) as exc:
                last_error = exc
                logger.warning("Reddit request failed (attempt %d/%d): %s", attempt, self.max_retries, exc)
                if attempt < self.max_retries:
                    time.sleep(1.5 * attempt)
        if last_error is None:
            raise RuntimeError("Failed to fetch URL: unknown error")
        raise RuntimeError(f"Failed to fetch URL: {url}") from last_error
