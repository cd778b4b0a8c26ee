"""
Sentiment collaborator for posts and comments.

Scoring itself is delegated to a ``SentimentScorer``. The default scorer uses a
Hugging Face Transformers text-classification model; the rest of this module
only maps scores to categories and aggregates them for display. Sentiment
never influences trend ranking.
"""

import importlib
import logging
from typing import Any, Dict, List, Protocol, Sequence, Union

from reddit_trends.models.records import (
    CombinedSentiment,
    Comment,
    Post,
    PostSentiment,
    SentimentResult,
    SentimentStatistics,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "distilbert-base-uncased-finetuned-sst-2-english"

VERY_POSITIVE = "Very Positive"
POSITIVE = "Positive"
NEUTRAL = "Neutral"
NEGATIVE = "Negative"
VERY_NEGATIVE = "Very Negative"

TITLE_WEIGHT = 0.6
TEXT_WEIGHT = 0.4


class SentimentScorer(Protocol):
    def score(self, text: str) -> float:
        ...


def categorize_sentiment(score: float) -> str:
    """Map a sentiment score to a human-readable category."""
    if score > 5:
        return VERY_POSITIVE
    if score > 2:
        return POSITIVE
    if score > -2:
        return NEUTRAL
    if score > -5:
        return NEGATIVE
    return VERY_NEGATIVE


class TransformerSentimentScorer:
    """
    Scores text with a Hugging Face text-classification model.

    The score is ``(p_positive - p_negative) * score_scale``, which puts model
    output on the same scale the category thresholds use.
    """

    def __init__(self, model_name: str = DEFAULT_MODEL_NAME, score_scale: float = 10.0):
        # transformers is heavy, import it only when a scorer is actually built
        try:
            transformers = importlib.import_module("transformers")
        except ModuleNotFoundError:
            logger.critical(
                "The 'transformers' package is not installed. Install the 'sentiment' extra "
                "or pass a custom SentimentScorer.",
                exc_info=True,
            )
            raise

        self.model_name = model_name
        self.score_scale = score_scale
        logger.info(f"Loading sentiment model: {model_name}")
        self._pipeline = transformers.pipeline(
            "text-classification", model=model_name, top_k=None, truncation=True
        )

    def score(self, text: str) -> float:
        if not text or not text.strip():
            return 0.0

        outputs = self._pipeline(text)
        # A single string may come back wrapped in an extra list
        if outputs and isinstance(outputs[0], list):
            outputs = outputs[0]
        probabilities: Dict[str, float] = {o["label"].lower(): o["score"] for o in outputs}
        return (probabilities.get("positive", 0.0) - probabilities.get("negative", 0.0)) * self.score_scale


class SentimentAnalyzer:
    """Attaches sentiment to posts and comments and summarizes it."""

    def __init__(self, scorer: SentimentScorer):
        self.scorer = scorer

    def analyze(self, text: str) -> SentimentResult:
        score = float(self.scorer.score(text))
        tokens = len(text.split())
        return SentimentResult(
            score=score,
            label=categorize_sentiment(score),
            comparative=score / tokens if tokens else 0.0,
            tokens=tokens,
        )

    def analyze_posts(self, posts: Sequence[Post]) -> List[Post]:
        """
        Return copies of ``posts`` with title, body and combined sentiment.

        The combined score weights the title at 60% and the body at 40%; posts
        without a body use the title score alone.
        """
        annotated = []
        for post in posts:
            title = self.analyze(post.title)
            text = self.analyze(post.body) if post.body else None
            combined_score = (
                title.score * TITLE_WEIGHT + text.score * TEXT_WEIGHT if text else title.score
            )
            sentiment = PostSentiment(
                title=title,
                text=text,
                combined=CombinedSentiment(
                    score=combined_score, label=categorize_sentiment(combined_score)
                ),
            )
            annotated.append(post.model_copy(update={"sentiment": sentiment}))
        return annotated

    def analyze_comments(self, comments: Sequence[Comment]) -> List[Comment]:
        return [c.model_copy(update={"sentiment": self.analyze(c.body)}) for c in comments]

    def get_statistics(self, items: Sequence[Union[Post, Comment]]) -> SentimentStatistics:
        """Count items per category and average their scores; unannotated items count as neutral zero."""
        if not items:
            return SentimentStatistics()

        counts = {VERY_POSITIVE: 0, POSITIVE: 0, NEUTRAL: 0, NEGATIVE: 0, VERY_NEGATIVE: 0}
        total_score = 0.0

        for item in items:
            sentiment: Any = item.sentiment
            if isinstance(sentiment, PostSentiment):
                sentiment = sentiment.combined
            if sentiment is None:
                label, score = NEUTRAL, 0.0
            else:
                label, score = sentiment.label, sentiment.score
            counts[label] += 1
            total_score += score

        return SentimentStatistics(
            total=len(items),
            very_positive=counts[VERY_POSITIVE],
            positive=counts[POSITIVE],
            neutral=counts[NEUTRAL],
            negative=counts[NEGATIVE],
            very_negative=counts[VERY_NEGATIVE],
            average_score=total_score / len(items),
        )

    def get_distribution(self, stats: SentimentStatistics) -> Dict[str, float]:
        """Percentage of items per category, rounded to one decimal."""
        keys = ("very_positive", "positive", "neutral", "negative", "very_negative")
        if stats.total == 0:
            return {key: 0.0 for key in keys}
        return {key: round(getattr(stats, key) / stats.total * 100, 1) for key in keys}
