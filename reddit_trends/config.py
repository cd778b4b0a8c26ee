"""Configuration handling for the Reddit Trend Analyzer."""

import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

DEFAULT_SUBREDDITS = ["technology", "gaming", "movies"]


@dataclass
class RateLimitConfig:
    """Request pacing and retry configuration. All durations are in seconds."""

    # Reddit allows 60 requests per minute; 2s keeps us at 30.
    request_delay_sec: float = 2.0
    max_retries: int = 3
    initial_backoff_sec: float = 2.0
    request_timeout_sec: float = 30.0
    inter_source_delay_sec: float = 1.0
    inter_detail_delay_sec: float = 0.5
    low_remaining_threshold: int = 10
    cooldown_sec: float = 5.0


@dataclass
class AnalysisConfig:
    """Fetch volume and trend analysis knobs."""

    post_limit: int = 50
    comment_limit: int = 20
    max_posts_for_comments: int = 20
    min_keyword_frequency: int = 3
    emerging_window_hours: float = 24
    trending_posts_limit: int = 10


@dataclass
class MonitoringConfig:
    """Monitoring configuration."""

    enable_prometheus: bool = False
    prometheus_port: int = 8000


def _merge_section(section: Any, values: Dict[str, Any]) -> None:
    for key, value in values.items():
        if hasattr(section, key):
            setattr(section, key, value)


@dataclass
class Config:
    """Application configuration combining environment variables and YAML config."""

    # Reddit API credentials from environment
    client_id: str = ""
    client_secret: str = ""
    username: str = ""
    password: str = ""
    user_agent: str = "RedditTrendAnalyzer/1.0.0"

    subreddits: List[str] = field(default_factory=lambda: list(DEFAULT_SUBREDDITS))
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    @classmethod
    def from_files(cls, config_path: Optional[str] = None, env_path: Optional[str] = None) -> "Config":
        """
        Load configuration from a YAML file and environment variables.

        Environment variables take precedence over YAML values.

        Args:
            config_path: Optional path to a YAML configuration file
            env_path: Optional path to .env file (defaults to .env in current directory)

        Returns:
            Config instance with merged configuration
        """
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        config = cls()

        if config_path and os.path.exists(config_path):
            with open(config_path, "r", encoding="utf-8") as file:
                yaml_config = yaml.safe_load(file) or {}

            for key, value in yaml_config.items():
                if key in ("rate_limit", "analysis", "monitoring"):
                    if isinstance(value, dict):
                        _merge_section(getattr(config, key), value)
                elif hasattr(config, key):
                    setattr(config, key, value)

        config.client_id = os.getenv("REDDIT_CLIENT_ID", config.client_id)
        config.client_secret = os.getenv("REDDIT_CLIENT_SECRET", config.client_secret)
        config.username = os.getenv("REDDIT_USERNAME", config.username)
        config.password = os.getenv("REDDIT_PASSWORD", config.password)
        config.user_agent = os.getenv("REDDIT_USER_AGENT", config.user_agent)

        subreddits = os.getenv("SUBREDDITS")
        if subreddits:
            config.subreddits = [s.strip() for s in subreddits.split(",") if s.strip()]

        analysis = config.analysis
        analysis.post_limit = int(os.getenv("POST_LIMIT", analysis.post_limit))
        analysis.comment_limit = int(os.getenv("COMMENT_LIMIT", analysis.comment_limit))
        analysis.max_posts_for_comments = int(
            os.getenv("MAX_POSTS_FOR_COMMENTS", analysis.max_posts_for_comments)
        )
        analysis.min_keyword_frequency = int(
            os.getenv("MIN_KEYWORD_FREQUENCY", analysis.min_keyword_frequency)
        )
        analysis.emerging_window_hours = float(
            os.getenv("EMERGING_WINDOW_HOURS", analysis.emerging_window_hours)
        )

        # RATE_LIMIT_DELAY is expressed in milliseconds
        delay_ms = os.getenv("RATE_LIMIT_DELAY")
        if delay_ms is not None:
            config.rate_limit.request_delay_sec = int(delay_ms) / 1000.0
        config.rate_limit.max_retries = int(os.getenv("MAX_RETRIES", config.rate_limit.max_retries))

        return config

    def validate(self) -> List[str]:
        """
        Validate configuration and return a list of validation errors.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.client_id:
            errors.append("Missing REDDIT_CLIENT_ID in environment")
        if not self.client_secret:
            errors.append("Missing REDDIT_CLIENT_SECRET in environment")

        if not self.subreddits:
            errors.append("No subreddits specified in configuration")

        for section_name in ("rate_limit", "analysis", "monitoring"):
            section = getattr(self, section_name)
            for f in fields(section):
                value = getattr(section, f.name)
                if isinstance(value, bool):
                    continue
                if isinstance(value, (int, float)) and value < 0:
                    errors.append(f"{section_name}.{f.name} must be non-negative (got {value})")

        return errors
