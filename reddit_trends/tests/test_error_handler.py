"""Tests for the error handler module."""

import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from reddit_trends.collector.error_handler import (
    is_rate_limit_error,
    is_server_error,
    reset_hint,
    retry_with_backoff,
    status_of,
)
from reddit_trends.collector.rate_limiter import RateLimiter
from reddit_trends.config import RateLimitConfig
from reddit_trends.exceptions import RateLimitExceeded, TransientServerError
from reddit_trends.tests.stubs import http_error


def sleep_durations(mock_sleep):
    return [call.args[0] for call in mock_sleep.await_args_list]


class TestErrorClassification(unittest.TestCase):
    """Test cases for error classification helpers."""

    def test_status_of_client_response_error(self):
        self.assertEqual(status_of(http_error(503)), 503)

    def test_status_of_response_attribute(self):
        error = Exception("wrapped")
        error.response = MagicMock(status=429)
        self.assertEqual(status_of(error), 429)
        self.assertTrue(is_rate_limit_error(error))

    def test_rate_limit_detected_from_message(self):
        self.assertTrue(is_rate_limit_error(Exception("RATE LIMIT reached")))
        self.assertFalse(is_rate_limit_error(http_error(404)))

    def test_server_error_range(self):
        self.assertTrue(is_server_error(http_error(500)))
        self.assertTrue(is_server_error(http_error(599)))
        self.assertFalse(is_server_error(http_error(404)))
        self.assertFalse(is_server_error(ValueError("boom")))

    def test_reset_hint_from_headers(self):
        error = http_error(429, headers={"X-Ratelimit-Reset": "7"})
        self.assertEqual(reset_hint(error), 7.0)

        error = http_error(429, headers={"Retry-After": "3"})
        self.assertEqual(reset_hint(error), 3.0)

    def test_reset_hint_falls_back_to_rate_limiter(self):
        limiter = RateLimiter(RateLimitConfig())
        limiter.budget.reset_seconds = 12.0
        self.assertEqual(reset_hint(http_error(429), limiter), 12.0)
        self.assertIsNone(reset_hint(http_error(429)))


class TestRetryWithBackoff(unittest.TestCase):
    """Test cases for retry_with_backoff."""

    @patch("asyncio.sleep", new_callable=AsyncMock)
    def test_success_on_first_attempt(self, mock_sleep):
        func = AsyncMock(return_value="ok")

        result = asyncio.run(retry_with_backoff(func))

        self.assertEqual(result, "ok")
        self.assertEqual(func.await_count, 1)
        mock_sleep.assert_not_awaited()

    @patch("asyncio.sleep", new_callable=AsyncMock)
    def test_server_error_retries_then_succeeds(self, mock_sleep):
        func = AsyncMock(side_effect=[http_error(503), http_error(503), "ok"])

        result = asyncio.run(retry_with_backoff(func, max_retries=3, initial_backoff=2.0))

        self.assertEqual(result, "ok")
        self.assertEqual(func.await_count, 3)
        self.assertEqual(sleep_durations(mock_sleep), [2.0, 3.0])

    @patch("asyncio.sleep", new_callable=AsyncMock)
    def test_rate_limit_exhausts_retries(self, mock_sleep):
        func = AsyncMock(side_effect=http_error(429))

        with self.assertRaises(RateLimitExceeded) as ctx:
            asyncio.run(retry_with_backoff(func, max_retries=3, initial_backoff=2.0))

        self.assertIn("Max retries reached", str(ctx.exception))
        self.assertEqual(func.await_count, 4)
        self.assertEqual(sleep_durations(mock_sleep), [2.0, 4.0, 8.0])

    @patch("asyncio.sleep", new_callable=AsyncMock)
    def test_rate_limit_waits_for_reset(self, mock_sleep):
        error = http_error(429, headers={"x-ratelimit-reset": "5"})
        func = AsyncMock(side_effect=[error, "ok"])

        result = asyncio.run(retry_with_backoff(func, initial_backoff=2.0))

        self.assertEqual(result, "ok")
        self.assertEqual(sleep_durations(mock_sleep), [6.0])

    @patch("asyncio.sleep", new_callable=AsyncMock)
    def test_non_retryable_error_propagates(self, mock_sleep):
        func = AsyncMock(side_effect=http_error(404))

        with self.assertRaises(Exception) as ctx:
            asyncio.run(retry_with_backoff(func))

        self.assertEqual(status_of(ctx.exception), 404)
        self.assertEqual(func.await_count, 1)
        mock_sleep.assert_not_awaited()

    @patch("asyncio.sleep", new_callable=AsyncMock)
    def test_mixed_errors_keep_separate_backoffs(self, mock_sleep):
        func = AsyncMock(side_effect=[http_error(429), http_error(503), "ok"])

        result = asyncio.run(retry_with_backoff(func, max_retries=3, initial_backoff=2.0))

        self.assertEqual(result, "ok")
        self.assertEqual(sleep_durations(mock_sleep), [2.0, 2.0])

    @patch("asyncio.sleep", new_callable=AsyncMock)
    def test_mixed_errors_share_retry_budget(self, mock_sleep):
        func = AsyncMock(side_effect=[http_error(429), http_error(503), http_error(503)])

        with self.assertRaises(TransientServerError) as ctx:
            asyncio.run(retry_with_backoff(func, max_retries=2, initial_backoff=1.0))

        self.assertEqual(ctx.exception.status, 503)
        self.assertEqual(func.await_count, 3)

    @patch("asyncio.sleep", new_callable=AsyncMock)
    def test_server_error_exhausts_retries(self, mock_sleep):
        func = AsyncMock(side_effect=http_error(502))

        with self.assertRaises(TransientServerError) as ctx:
            asyncio.run(retry_with_backoff(func, max_retries=2, initial_backoff=2.0))

        self.assertEqual(ctx.exception.status, 502)
        self.assertEqual(sleep_durations(mock_sleep), [2.0, 3.0])

    @patch("asyncio.sleep", new_callable=AsyncMock)
    def test_zero_retries_raises_immediately(self, mock_sleep):
        func = AsyncMock(side_effect=http_error(429))

        with self.assertRaises(RateLimitExceeded):
            asyncio.run(retry_with_backoff(func, max_retries=0))

        self.assertEqual(func.await_count, 1)
        mock_sleep.assert_not_awaited()

    @patch("asyncio.sleep", new_callable=AsyncMock)
    def test_prometheus_integration(self, mock_sleep):
        exporter = MagicMock()
        func = AsyncMock(side_effect=[http_error(429), http_error(503), "ok"])

        asyncio.run(retry_with_backoff(func, exporter=exporter))

        exporter.record_api_error.assert_any_call("429")
        exporter.record_api_error.assert_any_call("5xx")
        exporter.record_retry.assert_any_call("rate_limit")
        exporter.record_retry.assert_any_call("server_error")


if __name__ == "__main__":
    unittest.main()
