from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from idea_feed.config import DEFAULT_HASHTAGS, DEFAULT_SUBREDDITS, load_config

CONFIG_TOML = """
output_dir = "feeds"
report_top_n = 5

[reddit]
client_id = "file-id"
client_secret = "file-secret"
subreddits = ["AppIdeas", "SaaS"]

[twitter]
enabled = false
bearer_token = "file-token"

[classifier]
idea_markers = ["idea", "wish"]
"""


class ConfigTests(unittest.TestCase):
    def test_defaults_without_file_or_credentials(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch.dict(os.environ, {}, clear=True):
                config = load_config(Path(tmpdir) / "missing.toml")

        self.assertIsNone(config.reddit)
        self.assertIsNone(config.twitter)
        self.assertEqual(config.output_dir, Path("output"))
        self.assertEqual(config.report_top_n, 15)
        self.assertIn("need", config.rules.idea_markers)

    def test_file_values_and_classifier_overrides(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.toml"
            path.write_text(CONFIG_TOML, encoding="utf-8")
            with patch.dict(os.environ, {}, clear=True):
                config = load_config(path)

        self.assertEqual(config.output_dir, Path("feeds"))
        self.assertEqual(config.report_top_n, 5)
        self.assertIsNotNone(config.reddit)
        self.assertEqual(config.reddit.subreddits, ["AppIdeas", "SaaS"])
        self.assertEqual(config.reddit.limit, 15)
        self.assertIsNone(config.twitter)
        self.assertEqual(config.rules.idea_markers, ("idea", "wish"))

    def test_environment_overrides_file(self) -> None:
        env = {
            "IDEA_FEED_SUBREDDITS": "startups, nocode",
            "IDEA_FEED_TWITTER_ENABLED": "yes",
            "IDEA_FEED_REPORT_TOP_N": "not-a-number",
            "IDEA_FEED_CLASSIFIER_HIGH_MARKET_TERMS": "billion,unicorn",
        }
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.toml"
            path.write_text(CONFIG_TOML, encoding="utf-8")
            with patch.dict(os.environ, env, clear=True):
                config = load_config(path)

        self.assertEqual(config.reddit.subreddits, ["startups", "nocode"])
        self.assertIsNotNone(config.twitter)
        self.assertEqual(config.twitter.bearer_token, "file-token")
        self.assertEqual(config.twitter.hashtags, DEFAULT_HASHTAGS)
        self.assertEqual(config.report_top_n, 5)
        self.assertEqual(config.rules.high_market_terms, ("billion", "unicorn"))

    def test_twitter_token_falls_back_to_standard_variable(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch.dict(os.environ, {"TWITTER_BEARER_TOKEN": "env-token"}, clear=True):
                config = load_config(Path(tmpdir) / "missing.toml")

        self.assertIsNotNone(config.twitter)
        self.assertEqual(config.twitter.bearer_token, "env-token")
        self.assertIsNone(config.reddit)

    def test_unknown_classifier_key_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.toml"
            path.write_text("[classifier]\nidea_words = ['x']\n", encoding="utf-8")
            with patch.dict(os.environ, {}, clear=True):
                with self.assertRaises(ValueError):
                    load_config(path)

    def test_default_subreddits_are_copied(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch.dict(os.environ, {"IDEA_FEED_REDDIT_CLIENT_ID": "a", "IDEA_FEED_REDDIT_CLIENT_SECRET": "b"}, clear=True):
                config = load_config(Path(tmpdir) / "missing.toml")

        config.reddit.subreddits.append("extra")
        self.assertNotIn("extra", DEFAULT_SUBREDDITS)


if __name__ == "__main__":
    unittest.main()
