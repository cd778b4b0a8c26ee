from reddit_trends.collector.error_handler import retry_with_backoff
from reddit_trends.collector.fetcher import FetchBatch, RateLimitedFetcher
from reddit_trends.collector.rate_limiter import RateLimiter, RequestBudget

__all__ = ["FetchBatch", "RateLimitedFetcher", "RateLimiter", "RequestBudget", "retry_with_backoff"]
