"""Mapping functions to convert Reddit API objects to our records."""

import logging
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from reddit_trends.exceptions import RecordValidationError
from reddit_trends.models.records import Comment, Post

logger = logging.getLogger(__name__)

REDDIT_BASE_URL = "https://reddit.com"
TOMBSTONE_BODIES = frozenset({"[deleted]", "[removed]"})


def _author_name(author: Any) -> str:
    # Deleted accounts come back as None
    if author is None:
        return "[deleted]"
    return getattr(author, "name", None) or str(author)


def submission_to_post(submission: Any) -> Post:
    """
    Convert an asyncpraw Submission object to a Post.

    Args:
        submission: The Reddit submission object from asyncpraw

    Returns:
        A validated Post record

    Raises:
        RecordValidationError: If required fields are missing or malformed
    """
    submission_id = getattr(submission, "id", None)
    try:
        permalink = submission.permalink or ""
        if permalink.startswith("/"):
            permalink = f"{REDDIT_BASE_URL}{permalink}"

        return Post(
            id=submission_id,
            source=submission.subreddit.display_name,
            title=submission.title,
            body=submission.selftext or "",
            author=_author_name(submission.author),
            score=submission.score,
            upvote_ratio=submission.upvote_ratio or 0.0,
            comment_count=submission.num_comments or 0,
            created_at=submission.created_utc,
            url=submission.url or "",
            permalink=permalink,
        )
    except (AttributeError, TypeError, ValidationError) as e:
        raise RecordValidationError(
            f"Malformed submission {submission_id}: {e}", record_id=submission_id
        ) from e


def is_tombstone(body: Optional[str]) -> bool:
    """Return True for empty, deleted or removed comment bodies."""
    return not body or body in TOMBSTONE_BODIES


def comment_to_record(comment: Any, post: Post) -> Comment:
    """
    Convert an asyncpraw Comment object to a Comment record attached to ``post``.

    Raises:
        RecordValidationError: If required fields are missing or malformed
    """
    comment_id = getattr(comment, "id", None)
    try:
        return Comment(
            author=_author_name(comment.author),
            body=comment.body,
            score=comment.score,
            created_at=comment.created_utc,
            post_id=post.id,
            post_title=post.title,
            source=post.source,
        )
    except (AttributeError, TypeError, ValidationError) as e:
        raise RecordValidationError(
            f"Malformed comment {comment_id} on post {post.id}: {e}", record_id=comment_id
        ) from e


def submissions_to_posts(submissions: Iterable[Any]) -> List[Post]:
    """
    Convert asyncpraw submissions to Posts, dropping malformed ones.

    Args:
        submissions: Reddit submission objects from asyncpraw

    Returns:
        List of Post records in upstream order
    """
    posts = []

    for submission in submissions:
        try:
            posts.append(submission_to_post(submission))
        except RecordValidationError as e:
            logger.warning(f"Dropping submission: {e}")

    return posts


def comments_to_records(comments: Iterable[Any], post: Post) -> List[Comment]:
    """Convert asyncpraw comments to Comment records, skipping tombstones and malformed ones."""
    records = []

    for comment in comments:
        if is_tombstone(getattr(comment, "body", None)):
            continue
        try:
            records.append(comment_to_record(comment, post))
        except RecordValidationError as e:
            logger.warning(f"Dropping comment: {e}")

    return records
