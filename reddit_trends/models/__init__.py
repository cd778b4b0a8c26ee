from reddit_trends.models.records import (
    CombinedSentiment,
    Comment,
    Post,
    PostSentiment,
    ScoredPost,
    SentimentResult,
    SentimentStatistics,
    SourceTrendSummary,
    TrendEntry,
)

__all__ = [
    "CombinedSentiment",
    "Comment",
    "Post",
    "PostSentiment",
    "ScoredPost",
    "SentimentResult",
    "SentimentStatistics",
    "SourceTrendSummary",
    "TrendEntry",
]
