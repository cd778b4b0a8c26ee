"""Rate-limited acquisition of subreddit listings and comment trees."""

import asyncio
import logging
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar, Union

from reddit_trends.collector.error_handler import headers_of, retry_with_backoff
from reddit_trends.collector.rate_limiter import RateLimiter
from reddit_trends.config import RateLimitConfig
from reddit_trends.exceptions import DetailFetchFailed, RateLimitExceeded, SourceFetchFailed
from reddit_trends.models.mapping import comments_to_records, submissions_to_posts
from reddit_trends.models.records import Comment, Post
from reddit_trends.reddit_client import RedditClient

logger = logging.getLogger(__name__)

T = TypeVar("T")
FetchFailure = Union[SourceFetchFailed, DetailFetchFailed]


@dataclass
class FetchBatch:
    """Posts and comments gathered by one ``fetch_batch`` run."""

    posts: List[Post] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)
    failures: List[FetchFailure] = field(default_factory=list)
    request_count: int = 0


class RateLimitedFetcher:
    """
    Fetches posts and comments one request at a time under Reddit's rate limit.

    Every upstream call is paced by the rate limiter, bounded by a timeout and
    retried with backoff. Failures of a single subreddit or post are logged
    and skipped; only exhausted rate-limit retries reach the caller.
    """

    def __init__(
        self,
        reddit_client: RedditClient,
        rate_limiter: RateLimiter,
        config: RateLimitConfig,
        prometheus_exporter=None,
    ):
        """
        Initialize the fetcher.

        Args:
            reddit_client: Initialized Reddit client
            rate_limiter: Rate limiter owned by this fetcher
            config: Pacing, retry and timeout configuration
            prometheus_exporter: Optional Prometheus exporter for metrics
        """
        self.reddit_client = reddit_client
        self.rate_limiter = rate_limiter
        self.config = config
        self.prometheus_exporter = prometheus_exporter
        self.failures: List[FetchFailure] = []

    async def _attempt(self, call: Callable[[], Awaitable[T]]) -> T:
        await self.rate_limiter.pre_request()

        timer = self.prometheus_exporter.time_request() if self.prometheus_exporter else None
        try:
            with timer if timer else nullcontext():
                result = await asyncio.wait_for(call(), timeout=self.config.request_timeout_sec)
        except Exception as e:
            self.rate_limiter.record_request()
            self.rate_limiter.update_from_headers(headers_of(e))
            raise

        self.rate_limiter.record_request(self.reddit_client.rate_limits())
        return result

    async def _call(self, call: Callable[[], Awaitable[T]]) -> T:
        return await retry_with_backoff(
            lambda: self._attempt(call),
            max_retries=self.config.max_retries,
            initial_backoff=self.config.initial_backoff_sec,
            rate_limiter=self.rate_limiter,
            exporter=self.prometheus_exporter,
        )

    async def fetch_item_collections(
        self,
        source_ids: Sequence[str],
        limit_per_source: int = 50,
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> List[Post]:
        """
        Fetch hot posts from multiple subreddits.

        ``failures`` is reset at the start and holds this run's skipped subreddits.

        Args:
            source_ids: Subreddit names, fetched in order
            limit_per_source: Number of posts to fetch per subreddit
            should_continue: Optional flag checked before each subreddit;
                returning False stops the loop early

        Returns:
            Posts in subreddit order, then in the order Reddit returned them

        Raises:
            RateLimitExceeded: With the posts fetched so far as ``partial``
        """
        self.failures = []
        all_posts: List[Post] = []

        for index, source in enumerate(source_ids):
            if should_continue is not None and not should_continue():
                logger.info(f"Post fetch cancelled before r/{source}")
                break

            try:
                logger.info(f"Fetching {limit_per_source} hot posts from r/{source}...")
                submissions = await self._call(
                    lambda source=source: self.reddit_client.hot(source, limit_per_source)
                )
                posts = submissions_to_posts(submissions)
                all_posts.extend(posts)

                if self.prometheus_exporter:
                    self.prometheus_exporter.record_posts_fetched(source, len(posts))
                logger.info(f"Collected {len(posts)} posts from r/{source}")

            except RateLimitExceeded as e:
                logger.error(
                    f"Rate limit exhausted while fetching r/{source}. "
                    f"Consider reducing post limit or subreddit count"
                )
                e.partial = all_posts
                raise

            except Exception as e:
                failure = SourceFetchFailed(source, e)
                self.failures.append(failure)
                logger.error(str(failure))

            if index < len(source_ids) - 1:
                await asyncio.sleep(self.config.inter_source_delay_sec)

        return all_posts

    async def fetch_detail_collections(self, parent: Post, limit: int = 20) -> List[Comment]:
        """
        Fetch top-level comments of a post.

        Deleted and removed comments are dropped. Any failure other than
        exhausted rate-limit retries is logged and yields an empty list. Failures
        are appended to ``failures`` so a batch collects them across posts.

        Args:
            parent: The post whose comments to fetch
            limit: Number of top-level comments to fetch

        Returns:
            Comment records attached to ``parent``

        Raises:
            RateLimitExceeded: If rate-limit retries are exhausted
        """
        try:
            raw_comments = await self._call(
                lambda: self.reddit_client.top_level_comments(parent.id, limit)
            )
        except RateLimitExceeded as e:
            logger.error(f"Rate limit hit while fetching comments for post {parent.id}")
            e.partial = []
            raise
        except Exception as e:
            failure = DetailFetchFailed(parent.id, e)
            self.failures.append(failure)
            logger.error(str(failure))
            return []

        comments = comments_to_records(raw_comments, parent)
        if self.prometheus_exporter:
            self.prometheus_exporter.record_comments_fetched(len(comments))
        return comments

    async def fetch_batch(
        self,
        source_ids: Sequence[str],
        limit_per_source: int = 50,
        limit_per_detail: int = 20,
        max_parents_for_details: int = 20,
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> FetchBatch:
        """
        Fetch posts from all subreddits, then comments for a bounded number of them.

        Args:
            source_ids: Subreddit names
            limit_per_source: Number of posts per subreddit
            limit_per_detail: Number of comments per post
            max_parents_for_details: Maximum number of posts whose comments are fetched
            should_continue: Optional cooperative cancellation flag

        Returns:
            FetchBatch with posts, comments and isolated failures

        Raises:
            RateLimitExceeded: With the partial FetchBatch as ``partial``
        """
        self.failures = []
        batch = FetchBatch()

        try:
            batch.posts = await self.fetch_item_collections(
                source_ids, limit_per_source, should_continue=should_continue
            )
        except RateLimitExceeded as e:
            batch.posts = e.partial or []
            e.partial = self._finish(batch)
            raise

        if not batch.posts:
            logger.warning("No posts fetched. Cannot fetch comments.")
            return self._finish(batch)

        parents = batch.posts[:max_parents_for_details]
        logger.info(f"Fetching comments from {len(parents)} posts (rate limited)...")
        logger.info(
            f"Estimated time: ~{round(len(parents) * self.config.request_delay_sec)}s"
        )

        for index, post in enumerate(parents):
            if should_continue is not None and not should_continue():
                logger.info(f"Comment fetch cancelled after {index} posts")
                break

            try:
                batch.comments.extend(await self.fetch_detail_collections(post, limit_per_detail))
            except RateLimitExceeded as e:
                e.partial = self._finish(batch)
                raise

            if (index + 1) % 5 == 0:
                logger.info(f"Processed {index + 1}/{len(parents)} posts...")

            if index < len(parents) - 1:
                await asyncio.sleep(self.config.inter_detail_delay_sec)

        logger.info(f"Successfully fetched {len(batch.comments)} comments")
        return self._finish(batch)

    def _finish(self, batch: FetchBatch) -> FetchBatch:
        batch.failures = list(self.failures)
        batch.request_count = self.rate_limiter.request_count
        logger.info(f"Total API requests made: {batch.request_count}")
        return batch
