"""Error classification and retry logic for Reddit API requests."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar

from reddit_trends.collector.rate_limiter import RateLimiter
from reddit_trends.exceptions import RateLimitExceeded, TransientServerError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT_BACKOFF_FACTOR = 2.0
SERVER_ERROR_BACKOFF_FACTOR = 1.5
RESET_BUFFER_SEC = 1.0


def status_of(error: BaseException) -> Optional[int]:
    """
    Extract the HTTP status code carried by an exception.

    Understands ``aiohttp.ClientResponseError`` (``status``) and asyncprawcore
    response exceptions (``response.status``).
    """
    status = getattr(error, "status", None)
    if not isinstance(status, int):
        status = getattr(getattr(error, "response", None), "status", None)
    return status if isinstance(status, int) else None


def headers_of(error: BaseException) -> Mapping[str, Any]:
    """Return the response headers attached to an exception, if any."""
    headers = getattr(error, "headers", None)
    if not headers:
        headers = getattr(getattr(error, "response", None), "headers", None)
    return headers or {}


def is_rate_limit_error(error: BaseException) -> bool:
    return status_of(error) == 429 or "rate limit" in str(error).lower()


def is_server_error(error: BaseException) -> bool:
    status = status_of(error)
    return status is not None and 500 <= status < 600


def reset_hint(error: BaseException, rate_limiter: Optional[RateLimiter] = None) -> Optional[float]:
    """
    Seconds until the rate-limit window resets, as signaled by the error.

    Falls back to the last reset hint the rate limiter observed.
    """
    headers = {str(k).lower(): v for k, v in headers_of(error).items()}
    for name in ("x-ratelimit-reset", "retry-after"):
        if name in headers:
            try:
                return float(headers[name])
            except (ValueError, TypeError):
                logger.warning(f"Failed to parse {name} header: {headers[name]!r}")

    if rate_limiter is not None:
        return rate_limiter.budget.reset_seconds
    return None


async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_backoff: float = 2.0,
    rate_limiter: Optional[RateLimiter] = None,
    exporter=None,
) -> T:
    """
    Call ``func`` until it succeeds, backing off on rate-limit and server errors.

    Rate-limit errors wait ``max(reset + 1s, backoff)`` and double their
    backoff; server errors wait their backoff and grow it by 1.5x. Each kind
    keeps its own backoff value while sharing one retry budget. Any other
    error propagates immediately.

    Args:
        func: Zero-argument coroutine function performing one attempt
        max_retries: Number of retries after the first attempt
        initial_backoff: Initial backoff time in seconds
        rate_limiter: Optional rate limiter supplying the last known reset hint
        exporter: Optional Prometheus exporter for metrics

    Returns:
        The result of the first successful attempt

    Raises:
        RateLimitExceeded: If rate-limit retries are exhausted
        TransientServerError: If server-error retries are exhausted
    """
    retries = max_retries
    rate_backoff = initial_backoff
    server_backoff = initial_backoff

    while True:
        try:
            return await func()

        except Exception as e:
            if is_rate_limit_error(e):
                if exporter:
                    exporter.record_api_error("429")
                if retries <= 0:
                    logger.error(f"Rate limit exceeded. Max retries ({max_retries}) reached: {e}")
                    raise RateLimitExceeded(
                        "Rate limit exceeded. Max retries reached. Please try again later."
                    ) from e

                reset = reset_hint(e, rate_limiter)
                wait = rate_backoff if reset is None else max(reset + RESET_BUFFER_SEC, rate_backoff)
                logger.warning(
                    f"Rate limit hit. Waiting {wait:.1f}s before retry ({retries} retries left)"
                )
                if exporter:
                    exporter.record_retry("rate_limit")
                await asyncio.sleep(wait)
                rate_backoff *= RATE_LIMIT_BACKOFF_FACTOR
                retries -= 1
                continue

            if is_server_error(e):
                status = status_of(e)
                if exporter:
                    exporter.record_api_error("5xx")
                if retries <= 0:
                    logger.error(f"Server error {status} persisted after {max_retries} retries: {e}")
                    raise TransientServerError(f"Server error {status}: {e}", status=status) from e

                logger.warning(
                    f"Server error {status}. Retrying in {server_backoff:.1f}s ({retries} retries left)"
                )
                if exporter:
                    exporter.record_retry("server_error")
                await asyncio.sleep(server_backoff)
                server_backoff *= SERVER_ERROR_BACKOFF_FACTOR
                retries -= 1
                continue

            if exporter:
                status = status_of(e)
                exporter.record_api_error(str(status) if status else type(e).__name__)
            raise
