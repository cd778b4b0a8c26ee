"""Reddit API client wrapper for authenticated access."""

import logging
from typing import Any, Dict, List, Optional

import asyncpraw
from asyncpraw.models import Submission, Subreddit

from reddit_trends.config import Config

logger = logging.getLogger(__name__)


class RedditClient:
    """Wrapper for the Reddit API client with authentication handling."""

    def __init__(self, config: Config):
        """
        Initialize the Reddit client with configuration.

        Args:
            config: Application configuration with Reddit credentials
        """
        self.config = config
        self._reddit: Optional[asyncpraw.Reddit] = None
        self._subreddit_cache: Dict[str, Subreddit] = {}

    async def initialize(self) -> asyncpraw.Reddit:
        """
        Initialize and authenticate the Reddit client.

        Username and password are optional; without them the client runs
        with read-only application credentials.

        Returns:
            Authenticated asyncpraw.Reddit instance

        Raises:
            ValueError: If credentials are missing or authentication fails
        """
        if not self._reddit:
            logger.info("Initializing Reddit client")

            if not self.config.client_id or not self.config.client_secret:
                raise ValueError("Missing Reddit API credentials")

            kwargs = dict(
                client_id=self.config.client_id,
                client_secret=self.config.client_secret,
                user_agent=self.config.user_agent,
                timeout=int(self.config.rate_limit.request_timeout_sec),
            )
            if self.config.username and self.config.password:
                kwargs.update(username=self.config.username, password=self.config.password)

            self._reddit = asyncpraw.Reddit(**kwargs)

            if self.config.username and self.config.password:
                try:
                    me = await self._reddit.user.me()
                    logger.info(f"Authenticated as {me.name}")
                except Exception as e:
                    await self._reddit.close()
                    self._reddit = None
                    logger.error(f"Authentication failed: {str(e)}")
                    raise ValueError(f"Reddit authentication failed: {str(e)}") from e
            else:
                logger.info("No Reddit username configured, using read-only access")

        return self._reddit

    def _require_client(self) -> asyncpraw.Reddit:
        if not self._reddit:
            raise ValueError("Reddit client not initialized")
        return self._reddit

    async def get_subreddit(self, subreddit_name: str) -> Subreddit:
        """
        Get a subreddit instance by name, with caching.

        Raises:
            ValueError: If the client is not initialized
        """
        reddit = self._require_client()

        if subreddit_name not in self._subreddit_cache:
            logger.debug(f"Fetching subreddit: {subreddit_name}")
            self._subreddit_cache[subreddit_name] = await reddit.subreddit(subreddit_name)

        return self._subreddit_cache[subreddit_name]

    async def hot(self, subreddit_name: str, limit: int) -> List[Submission]:
        """
        Fetch the hot listing of a subreddit.

        Args:
            subreddit_name: Name of the subreddit
            limit: Maximum number of submissions to fetch

        Returns:
            Submissions in the order Reddit returned them
        """
        subreddit = await self.get_subreddit(subreddit_name)
        return [submission async for submission in subreddit.hot(limit=limit)]

    async def top_level_comments(self, post_id: str, limit: int) -> List[Any]:
        """
        Load a submission and return up to ``limit`` of its top-level comments.

        "Load more comments" placeholders are dropped without being fetched,
        so only comments already present in the first response are returned.
        """
        reddit = self._require_client()
        submission = await reddit.submission(post_id)
        await submission.comments.replace_more(limit=0)
        return list(submission.comments[:limit])

    def rate_limits(self) -> Dict[str, Any]:
        """
        Return the most recent rate-limit hints reported by Reddit.

        Keys are ``remaining``, ``reset_timestamp`` and ``used``; values are
        None until the first response has been received.
        """
        if not self._reddit:
            return {}
        return dict(self._reddit.auth.limits)

    async def close(self) -> None:
        """Close the Reddit client and release resources."""
        if self._reddit:
            logger.info("Closing Reddit client")
            await self._reddit.close()
            self._reddit = None
            self._subreddit_cache = {}
