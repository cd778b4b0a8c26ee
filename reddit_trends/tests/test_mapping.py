"""Tests for the mapping functions."""

import unittest

from reddit_trends.exceptions import RecordValidationError
from reddit_trends.models.mapping import (
    comment_to_record,
    comments_to_records,
    is_tombstone,
    submission_to_post,
    submissions_to_posts,
)
from reddit_trends.tests.stubs import NOW, MockComment, MockSubmission, make_post


class TestSubmissionToPost(unittest.TestCase):
    """Test cases for submission_to_post."""

    def test_maps_all_fields(self):
        submission = MockSubmission(
            "abc123",
            subreddit_name="technology",
            title="New chip",
            selftext="Details inside",
            score=321,
            num_comments=45,
        )

        post = submission_to_post(submission)

        self.assertEqual(post.id, "abc123")
        self.assertEqual(post.source, "technology")
        self.assertEqual(post.title, "New chip")
        self.assertEqual(post.body, "Details inside")
        self.assertEqual(post.author, "test_user")
        self.assertEqual(post.score, 321)
        self.assertEqual(post.upvote_ratio, 0.8)
        self.assertEqual(post.comment_count, 45)
        self.assertEqual(post.created_at, NOW)
        self.assertEqual(post.url, "https://example.com/abc123")
        self.assertEqual(post.permalink, "https://reddit.com/r/technology/comments/abc123/test_title/")
        self.assertIsNone(post.sentiment)

    def test_deleted_author(self):
        submission = MockSubmission("abc123")
        submission.author = None

        self.assertEqual(submission_to_post(submission).author, "[deleted]")

    def test_missing_body_becomes_empty(self):
        submission = MockSubmission("abc123")
        submission.selftext = None

        self.assertEqual(submission_to_post(submission).body, "")

    def test_missing_id_is_rejected(self):
        submission = MockSubmission("")

        with self.assertRaises(RecordValidationError):
            submission_to_post(submission)

    def test_missing_attribute_is_rejected(self):
        submission = MockSubmission("abc123")
        del submission.title

        with self.assertRaises(RecordValidationError) as ctx:
            submission_to_post(submission)

        self.assertEqual(ctx.exception.record_id, "abc123")

    def test_submissions_to_posts_drops_malformed(self):
        bad = MockSubmission("bad")
        bad.num_comments = -3

        posts = submissions_to_posts([MockSubmission("one"), bad, MockSubmission("two")])

        self.assertEqual([p.id for p in posts], ["one", "two"])


class TestCommentMapping(unittest.TestCase):
    """Test cases for comment mapping."""

    def setUp(self):
        self.post = make_post(id="p1", source="gaming", title="Parent post")

    def test_comment_to_record(self):
        comment = comment_to_record(MockComment("c1", "Nice find", score=12), self.post)

        self.assertEqual(comment.body, "Nice find")
        self.assertEqual(comment.author, "commenter")
        self.assertEqual(comment.score, 12)
        self.assertEqual(comment.post_id, "p1")
        self.assertEqual(comment.post_title, "Parent post")
        self.assertEqual(comment.source, "gaming")

    def test_is_tombstone(self):
        self.assertTrue(is_tombstone(None))
        self.assertTrue(is_tombstone(""))
        self.assertTrue(is_tombstone("[deleted]"))
        self.assertTrue(is_tombstone("[removed]"))
        self.assertFalse(is_tombstone("deleted my old account"))

    def test_comments_to_records_skips_tombstones(self):
        raw = [
            MockComment("c1", "first"),
            MockComment("c2", "[removed]"),
            MockComment("c3", "second"),
        ]

        comments = comments_to_records(raw, self.post)

        self.assertEqual([c.body for c in comments], ["first", "second"])

    def test_comments_to_records_skips_malformed(self):
        bad = MockComment("c2", "no score")
        bad.score = "lots"

        comments = comments_to_records([bad, MockComment("c3", "fine")], self.post)

        self.assertEqual([c.body for c in comments], ["fine"])


if __name__ == "__main__":
    unittest.main()
