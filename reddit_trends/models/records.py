"""
Pydantic records shared by the fetcher, the sentiment collaborator and the trend engine.

Records are frozen. Downstream stages annotate them by producing new copies
(``model_copy(update=...)``) so a fetched Post is never mutated in place.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SentimentResult(BaseModel):
    """Sentiment of a single piece of text."""

    model_config = ConfigDict(frozen=True)

    score: float
    label: str
    comparative: float = 0.0
    tokens: int = 0


class CombinedSentiment(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float
    label: str


class PostSentiment(BaseModel):
    """Title, body and title-weighted combined sentiment of a post."""

    model_config = ConfigDict(frozen=True)

    title: SentimentResult
    text: Optional[SentimentResult] = None
    combined: CombinedSentiment


class Post(BaseModel):
    """A subreddit submission as returned by the fetcher."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    source: str = Field(min_length=1)
    title: str
    body: str = ""
    author: str = "[deleted]"
    score: int = 0
    upvote_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    comment_count: int = Field(default=0, ge=0)
    created_at: float
    url: str = ""
    permalink: str = ""
    sentiment: Optional[PostSentiment] = None


class ScoredPost(Post):
    """A Post annotated with its time-decayed trending score."""

    trending_score: float


class Comment(BaseModel):
    """A top-level comment on a fetched post."""

    model_config = ConfigDict(frozen=True)

    author: str = "[deleted]"
    body: str = Field(min_length=1)
    score: int = 0
    created_at: float
    post_id: str = Field(min_length=1)
    post_title: str = ""
    source: str = ""
    sentiment: Optional[SentimentResult] = None


class TrendEntry(BaseModel):
    """A keyword and how many times it occurred."""

    model_config = ConfigDict(frozen=True)

    keyword: str
    count: int


class SourceTrendSummary(BaseModel):
    """Keyword trends and average score for a single subreddit."""

    model_config = ConfigDict(frozen=True)

    source: str
    post_count: int
    top_keywords: List[TrendEntry] = Field(default_factory=list, max_length=10)
    average_score: float


class SentimentStatistics(BaseModel):
    """Category counts and mean score over a set of annotated items."""

    total: int = 0
    very_positive: int = 0
    positive: int = 0
    neutral: int = 0
    negative: int = 0
    very_negative: int = 0
    average_score: float = 0.0
