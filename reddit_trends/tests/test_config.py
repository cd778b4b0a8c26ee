"""Tests for the configuration module."""

import os
import tempfile
import unittest
from unittest.mock import patch

import yaml

from reddit_trends.config import Config, RateLimitConfig


class TestConfig(unittest.TestCase):
    """Test cases for the Config class."""

    def setUp(self):
        """Set up test environment."""
        # load_dotenv writes into os.environ, keep it isolated per test
        self.env_patcher = patch.dict(os.environ, {}, clear=True)
        self.env_patcher.start()

        self.temp_dir = tempfile.TemporaryDirectory()
        self.config_path = os.path.join(self.temp_dir.name, "config.yaml")
        self.env_path = os.path.join(self.temp_dir.name, ".env")

        self.sample_config = {
            "subreddits": ["python", "rust"],
            "rate_limit": {
                "request_delay_sec": 3.0,
                "max_retries": 5,
            },
            "analysis": {
                "post_limit": 25,
                "min_keyword_frequency": 2,
            },
            "monitoring": {
                "enable_prometheus": True,
            },
        }

        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(self.sample_config, f)

        with open(self.env_path, "w", encoding="utf-8") as f:
            f.write("REDDIT_CLIENT_ID=test_client_id\n")
            f.write("REDDIT_CLIENT_SECRET=test_client_secret\n")
            f.write("REDDIT_USER_AGENT=test_user_agent\n")

    def tearDown(self):
        """Clean up test environment."""
        self.temp_dir.cleanup()
        self.env_patcher.stop()

    def test_load_from_files(self):
        config = Config.from_files(self.config_path, self.env_path)

        self.assertEqual(config.client_id, "test_client_id")
        self.assertEqual(config.client_secret, "test_client_secret")
        self.assertEqual(config.username, "")
        self.assertEqual(config.user_agent, "test_user_agent")

        self.assertEqual(config.subreddits, ["python", "rust"])
        self.assertEqual(config.rate_limit.request_delay_sec, 3.0)
        self.assertEqual(config.rate_limit.max_retries, 5)
        self.assertEqual(config.rate_limit.initial_backoff_sec, 2.0)
        self.assertEqual(config.analysis.post_limit, 25)
        self.assertEqual(config.analysis.min_keyword_frequency, 2)
        self.assertEqual(config.analysis.comment_limit, 20)
        self.assertTrue(config.monitoring.enable_prometheus)

    def test_defaults_without_files(self):
        config = Config.from_files(None, os.path.join(self.temp_dir.name, "missing.env"))

        self.assertEqual(config.subreddits, ["technology", "gaming", "movies"])
        self.assertEqual(config.rate_limit, RateLimitConfig())
        self.assertEqual(config.analysis.post_limit, 50)
        self.assertEqual(config.analysis.max_posts_for_comments, 20)
        self.assertEqual(config.analysis.emerging_window_hours, 24)
        self.assertFalse(config.monitoring.enable_prometheus)

    def test_environment_overrides_yaml(self):
        os.environ.update({
            "SUBREDDITS": "news, worldnews ,",
            "POST_LIMIT": "10",
            "COMMENT_LIMIT": "5",
            "MAX_POSTS_FOR_COMMENTS": "3",
            "MIN_KEYWORD_FREQUENCY": "4",
            "EMERGING_WINDOW_HOURS": "12",
            "RATE_LIMIT_DELAY": "1500",
            "MAX_RETRIES": "2",
        })

        config = Config.from_files(self.config_path, self.env_path)

        self.assertEqual(config.subreddits, ["news", "worldnews"])
        self.assertEqual(config.analysis.post_limit, 10)
        self.assertEqual(config.analysis.comment_limit, 5)
        self.assertEqual(config.analysis.max_posts_for_comments, 3)
        self.assertEqual(config.analysis.min_keyword_frequency, 4)
        self.assertEqual(config.analysis.emerging_window_hours, 12.0)
        self.assertEqual(config.rate_limit.request_delay_sec, 1.5)
        self.assertEqual(config.rate_limit.max_retries, 2)

    def test_validate_valid_config(self):
        config = Config.from_files(self.config_path, self.env_path)

        self.assertEqual(config.validate(), [])

    def test_validate_missing_credentials(self):
        config = Config(subreddits=["python"])

        errors = config.validate()

        self.assertIn("Missing REDDIT_CLIENT_ID in environment", errors)
        self.assertIn("Missing REDDIT_CLIENT_SECRET in environment", errors)

    def test_validate_no_subreddits(self):
        config = Config(client_id="id", client_secret="secret", subreddits=[])

        self.assertEqual(config.validate(), ["No subreddits specified in configuration"])

    def test_validate_negative_values(self):
        config = Config(client_id="id", client_secret="secret")
        config.rate_limit.max_retries = -1
        config.analysis.post_limit = -5

        errors = config.validate()

        self.assertEqual(len(errors), 2)
        self.assertIn("rate_limit.max_retries must be non-negative (got -1)", errors)
        self.assertIn("analysis.post_limit must be non-negative (got -5)", errors)

    def test_zero_values_are_valid(self):
        config = Config(client_id="id", client_secret="secret")
        config.rate_limit.max_retries = 0
        config.rate_limit.request_delay_sec = 0.0
        config.analysis.min_keyword_frequency = 0

        self.assertEqual(config.validate(), [])


if __name__ == "__main__":
    unittest.main()
