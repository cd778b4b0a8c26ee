"""Stand-ins for asyncpraw objects and aiohttp errors used across the test-suite."""

from unittest.mock import MagicMock

from aiohttp.client_exceptions import ClientResponseError

from reddit_trends.models.records import Post

NOW = 1_700_000_000.0


class MockRequestInfo:
    def __init__(self, url="https://oauth.reddit.com/r/test/hot"):
        self.real_url = url


def http_error(status, headers=None, message="HTTP error"):
    """Build an aiohttp ClientResponseError with the given status and headers."""
    return ClientResponseError(
        request_info=MockRequestInfo(),
        history=(),
        status=status,
        message=message,
        headers=headers,
    )


class MockSubmission:
    """Mock asyncpraw Submission."""

    def __init__(self, id, subreddit_name="technology", title="Test title", selftext="",
                 score=100, num_comments=20, created_utc=NOW):
        self.id = id
        self.subreddit = MagicMock()
        self.subreddit.display_name = subreddit_name
        self.title = title
        self.selftext = selftext
        self.author = MagicMock()
        self.author.name = "test_user"
        self.score = score
        self.upvote_ratio = 0.8
        self.num_comments = num_comments
        self.created_utc = created_utc
        self.url = f"https://example.com/{id}"
        self.permalink = f"/r/{subreddit_name}/comments/{id}/test_title/"


class MockComment:
    """Mock asyncpraw Comment."""

    def __init__(self, id, body, score=5, created_utc=NOW, author_name="commenter"):
        self.id = id
        self.body = body
        self.score = score
        self.created_utc = created_utc
        self.author = MagicMock()
        self.author.name = author_name


def make_post(id="p1", source="technology", title="Title", body="", score=0,
              comment_count=0, created_at=NOW):
    return Post(
        id=id,
        source=source,
        title=title,
        body=body,
        author="someone",
        score=score,
        upvote_ratio=0.9,
        comment_count=comment_count,
        created_at=created_at,
        url=f"https://example.com/{id}",
        permalink=f"https://reddit.com/r/{source}/comments/{id}/",
    )
