"""Prometheus metrics for monitoring the Reddit Trend Analyzer."""

import logging

from prometheus_client import Counter, Gauge, Histogram, start_http_server

logger = logging.getLogger(__name__)

API_REQUESTS = Counter(
    "reddit_trends_api_requests_total",
    "Total number of Reddit API requests issued",
)

API_RETRIES = Counter(
    "reddit_trends_api_retries_total",
    "Number of retried Reddit API requests",
    ["reason"],
)

API_ERRORS = Counter(
    "reddit_trends_api_errors_total",
    "Number of API errors encountered",
    ["error_type"],
)

POSTS_FETCHED = Counter(
    "reddit_trends_posts_fetched_total",
    "Total number of posts fetched",
    ["subreddit"],
)

COMMENTS_FETCHED = Counter(
    "reddit_trends_comments_fetched_total",
    "Total number of comments fetched",
)

RATE_LIMIT_REMAINING = Gauge(
    "reddit_trends_rate_limit_remaining",
    "Remaining requests in the current Reddit rate-limit window",
)

REQUEST_DURATION = Histogram(
    "reddit_trends_request_duration_seconds",
    "Duration of API requests in seconds",
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)


class PrometheusExporter:
    """Prometheus metrics exporter for the Reddit Trend Analyzer."""

    def __init__(self, port: int = 8000):
        """
        Initialize the Prometheus exporter.

        Args:
            port: Port to expose metrics on
        """
        self.port = port
        self.server_started = False

    def start_server(self) -> None:
        """Start the Prometheus metrics server."""
        if not self.server_started:
            try:
                start_http_server(self.port)
                self.server_started = True
                logger.info(f"Started Prometheus metrics server on port {self.port}")
            except OSError as e:
                logger.error(f"Failed to start Prometheus metrics server: {str(e)}")

    def record_request(self) -> None:
        API_REQUESTS.inc()

    def record_retry(self, reason: str) -> None:
        """
        Record a retried request.

        Args:
            reason: Why the request was retried ('rate_limit' or 'server_error')
        """
        API_RETRIES.labels(reason=reason).inc()

    def record_api_error(self, error_type: str) -> None:
        """
        Record an API error.

        Args:
            error_type: Type of API error (e.g., '5xx', '429', 'TimeoutError')
        """
        API_ERRORS.labels(error_type=error_type).inc()

    def record_posts_fetched(self, subreddit: str, count: int) -> None:
        POSTS_FETCHED.labels(subreddit=subreddit).inc(count)

    def record_comments_fetched(self, count: int) -> None:
        COMMENTS_FETCHED.inc(count)

    def set_rate_limit_remaining(self, remaining: float) -> None:
        RATE_LIMIT_REMAINING.set(remaining)

    def time_request(self):
        """
        Create a context manager for timing API requests.

        Returns:
            Context manager that records request duration
        """
        return REQUEST_DURATION.time()
