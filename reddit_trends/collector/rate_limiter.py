"""Request pacing and budget accounting for Reddit API requests."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from reddit_trends.config import RateLimitConfig

logger = logging.getLogger(__name__)


@dataclass
class RequestBudget:
    """Running request count and the last rate-limit hints seen from Reddit."""

    request_count: int = 0
    remaining: Optional[float] = None
    reset_seconds: Optional[float] = None


class RateLimiter:
    """
    Rate limiter for Reddit API requests.

    Enforces a fixed minimum delay between consecutive requests and adds an
    extra cooldown once Reddit reports that the remaining quota is low.
    One instance belongs to one fetcher and is only used from a single task.
    """

    def __init__(self, config: RateLimitConfig, exporter=None):
        """
        Initialize the rate limiter with configuration.

        Args:
            config: Rate limiting configuration
            exporter: Optional Prometheus exporter for metrics
        """
        self.config = config
        self.budget = RequestBudget()
        self.last_request_time: Optional[float] = None
        self.exporter = exporter

    async def pre_request(self) -> None:
        """
        Wait as long as needed before issuing the next request.

        This must be awaited before each Reddit API request.
        """
        wait = self.config.request_delay_sec
        if self.last_request_time is not None:
            wait -= time.monotonic() - self.last_request_time
        if wait > 0:
            await asyncio.sleep(wait)

        remaining = self.budget.remaining
        if remaining is not None and remaining < self.config.low_remaining_threshold:
            logger.warning(
                f"Approaching rate limit ({remaining:.0f} calls remaining). "
                f"Adding extra delay of {self.config.cooldown_sec:.1f}s"
            )
            await asyncio.sleep(self.config.cooldown_sec)

    def record_request(self, limits: Optional[Mapping[str, Any]] = None) -> None:
        """
        Account for a completed request, successful or not.

        Args:
            limits: Rate-limit hints as reported by asyncpraw (``remaining``,
                ``reset_timestamp``), if any
        """
        self.last_request_time = time.monotonic()
        self.budget.request_count += 1

        if limits:
            remaining = limits.get("remaining")
            if remaining is not None:
                self.budget.remaining = float(remaining)
            reset_timestamp = limits.get("reset_timestamp")
            if reset_timestamp is not None:
                self.budget.reset_seconds = max(0.0, float(reset_timestamp) - time.time())

        if self.exporter:
            self.exporter.record_request()
            if self.budget.remaining is not None:
                self.exporter.set_rate_limit_remaining(self.budget.remaining)

        if self.budget.request_count % 10 == 0:
            logger.info(f"Processed {self.budget.request_count} API requests (rate limited)")

    def update_from_headers(self, headers: Mapping[str, Any]) -> None:
        """
        Update rate limit tracking based on Reddit API response headers.

        Args:
            headers: Response headers from a Reddit API request
        """
        lowered: Dict[str, Any] = {str(k).lower(): v for k, v in headers.items()}

        if "x-ratelimit-remaining" in lowered:
            try:
                self.budget.remaining = float(lowered["x-ratelimit-remaining"])
            except (ValueError, TypeError):
                logger.warning("Failed to parse x-ratelimit-remaining header")

        if "x-ratelimit-reset" in lowered:
            try:
                self.budget.reset_seconds = float(lowered["x-ratelimit-reset"])
            except (ValueError, TypeError):
                logger.warning("Failed to parse x-ratelimit-reset header")

        if self.budget.remaining is not None and self.budget.reset_seconds is not None:
            logger.debug(
                f"Rate limit status: {self.budget.remaining:.0f} calls remaining, "
                f"reset in {self.budget.reset_seconds:.2f}s"
            )

    @property
    def request_count(self) -> int:
        return self.budget.request_count
