"""Error taxonomy for acquisition and analysis."""

from typing import Any, List, Optional


class TrendAnalyzerError(Exception):
    """Base class for all errors raised by reddit_trends."""


class FetchError(TrendAnalyzerError):
    """Base class for failures talking to the upstream API."""


class RateLimitExceeded(FetchError):
    """
    Raised when rate-limit retries are exhausted for a single call.

    This is the one acquisition failure that is escalated to the caller.
    Whatever was fetched before the failure is attached as ``partial`` so
    the caller can still use it.
    """

    def __init__(self, message: str, partial: Any = None):
        super().__init__(message)
        self.partial = partial


class TransientServerError(FetchError):
    """Raised when a 5xx response persists after all retries."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class SourceFetchFailed(FetchError):
    """A single subreddit listing could not be fetched; the batch continues."""

    def __init__(self, source: str, cause: BaseException):
        super().__init__(f"Error fetching from r/{source}: {cause}")
        self.source = source
        self.cause = cause


class DetailFetchFailed(FetchError):
    """Comments for a single post could not be fetched; the batch continues."""

    def __init__(self, post_id: str, cause: BaseException):
        super().__init__(f"Error fetching comments for post {post_id}: {cause}")
        self.post_id = post_id
        self.cause = cause


class RecordValidationError(TrendAnalyzerError):
    """An upstream post or comment is missing required fields or is malformed."""

    def __init__(self, message: str, record_id: Optional[str] = None):
        super().__init__(message)
        self.record_id = record_id


class ConfigError(TrendAnalyzerError):
    """Configuration failed validation."""

    def __init__(self, errors: List[str]):
        super().__init__("Invalid configuration: " + "; ".join(errors))
        self.errors = errors
