"""
Keyword trends and time-decayed engagement ranking.

Everything here is a pure function of its inputs and the injected clock, so a
single TrendAnalyzer can be shared between threads or tasks.
"""

import logging
import re
import time
from typing import Callable, Dict, Iterable, List, Sequence

from reddit_trends.models.records import Comment, Post, ScoredPost, SourceTrendSummary, TrendEntry

logger = logging.getLogger(__name__)

KeywordFrequency = Dict[str, int]

# Entries shorter than MIN_KEYWORD_LENGTH are already dropped by the length filter.
STOP_WORDS = frozenset({
    "the", "be", "to", "of", "and", "a", "in", "that", "have", "i",
    "it", "for", "not", "on", "with", "he", "as", "you", "do", "at",
    "this", "but", "his", "by", "from", "they", "we", "say", "her", "she",
    "or", "an", "will", "my", "one", "all", "would", "there", "their",
    "what", "so", "up", "out", "if", "about", "who", "get", "which", "go",
    "me", "when", "make", "can", "like", "time", "no", "just", "him", "know",
    "take", "people", "into", "year", "your", "some", "could", "them",
    "see", "other", "than", "then", "now", "look", "only", "come", "its", "over",
    "think", "also", "back", "after", "use", "two", "how", "our", "work",
    "first", "well", "way", "even", "new", "want", "because", "any", "these",
    "give", "day", "most", "us", "is", "was", "are", "been", "has", "had",
    "were", "said", "did", "having", "may", "should", "am", "im", "dont",
    "doesnt", "didnt", "isnt", "arent", "wasnt", "werent", "wont", "wouldnt",
    "cant", "couldnt", "shouldnt", "ive", "youve", "theyve", "weve", "youre",
    "theyre", "hes", "shes", "thats", "whats", "heres", "theres",
})

MIN_KEYWORD_LENGTH = 4
TRENDING_KEYWORDS_LIMIT = 30
LOCAL_MIN_FREQUENCY = 2
SOURCE_KEYWORDS_LIMIT = 10
EMERGING_TOPICS_LIMIT = 15
COMMENT_WEIGHT = 2
DECAY_EXPONENT = 1.5

_NON_WORD = re.compile(r"[^\w\s]")
_NUMERIC = re.compile(r"^\d+$")


class TrendAnalyzer:
    """Identifies trending keywords, topics and posts."""

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Args:
            clock: Returns the current unix time in seconds
        """
        self.clock = clock

    def extract_keywords(self, text: str) -> KeywordFrequency:
        """
        Extract and count keywords from text.

        Text is lower-cased and punctuation replaced by whitespace. Tokens of
        three characters or fewer, stop words and pure numbers are dropped.
        """
        frequency: KeywordFrequency = {}
        for word in _NON_WORD.sub(" ", text.lower()).split():
            if len(word) < MIN_KEYWORD_LENGTH or word in STOP_WORDS or _NUMERIC.match(word):
                continue
            frequency[word] = frequency.get(word, 0) + 1
        return frequency

    def merge_frequencies(self, frequency_maps: Iterable[KeywordFrequency]) -> KeywordFrequency:
        """Add keyword counts across maps; missing keys count as zero."""
        merged: KeywordFrequency = {}
        for frequencies in frequency_maps:
            for word, count in frequencies.items():
                merged[word] = merged.get(word, 0) + count
        return merged

    def rank_keywords(self, frequencies: KeywordFrequency, limit: int = 20) -> List[TrendEntry]:
        """
        Rank keywords by count, highest first.

        Equal counts keep the order in which keywords were first seen.
        """
        ranked = sorted(frequencies.items(), key=lambda item: item[1], reverse=True)
        return [TrendEntry(keyword=word, count=count) for word, count in ranked[:limit]]

    def _rank_above_threshold(self, frequencies: KeywordFrequency, min_frequency: int) -> List[TrendEntry]:
        filtered = {word: count for word, count in frequencies.items() if count >= min_frequency}
        return self.rank_keywords(filtered, TRENDING_KEYWORDS_LIMIT)

    def analyze_trending_keywords(self, posts: Sequence[Post], min_frequency: int = 3) -> List[TrendEntry]:
        """
        Rank keywords across post titles and bodies.

        Args:
            posts: Posts to analyze
            min_frequency: Keywords with a lower total count are dropped

        Returns:
            Up to 30 keywords, most frequent first
        """
        per_post = [
            self.merge_frequencies([
                self.extract_keywords(post.title),
                self.extract_keywords(post.body) if post.body else {},
            ])
            for post in posts
        ]
        return self._rank_above_threshold(self.merge_frequencies(per_post), min_frequency)

    def analyze_comment_trends(self, comments: Sequence[Comment], min_frequency: int = 3) -> List[TrendEntry]:
        """Rank keywords across comment bodies, same rules as for posts."""
        merged = self.merge_frequencies(self.extract_keywords(c.body) for c in comments)
        return self._rank_above_threshold(merged, min_frequency)

    def get_trends_by_subreddit(self, posts: Sequence[Post]) -> Dict[str, SourceTrendSummary]:
        """
        Summarize keyword trends per subreddit.

        A fixed threshold of 2 is used so local trends surface more readily
        than the global ones.
        """
        by_source: Dict[str, List[Post]] = {}
        for post in posts:
            by_source.setdefault(post.source, []).append(post)

        trends = {}
        for source, source_posts in by_source.items():
            keywords = self.analyze_trending_keywords(source_posts, LOCAL_MIN_FREQUENCY)
            trends[source] = SourceTrendSummary(
                source=source,
                post_count=len(source_posts),
                top_keywords=keywords[:SOURCE_KEYWORDS_LIMIT],
                average_score=sum(p.score for p in source_posts) / len(source_posts),
            )
        return trends

    def calculate_trending_score(self, post: Post) -> float:
        """
        Engagement divided by age in hours to the power 1.5.

        Age is floored at one hour, so a brand new post is never divided by zero.
        """
        age_hours = max(1.0, (self.clock() - post.created_at) / 3600)
        engagement = post.score + post.comment_count * COMMENT_WEIGHT
        return engagement / age_hours ** DECAY_EXPONENT

    def get_top_trending_posts(self, posts: Sequence[Post], limit: int = 10) -> List[ScoredPost]:
        """Return new ScoredPost records for the ``limit`` hottest posts."""
        scored = [
            ScoredPost(
                **post.model_dump(exclude={"trending_score"}),
                trending_score=self.calculate_trending_score(post),
            )
            for post in posts
        ]
        scored.sort(key=lambda p: p.trending_score, reverse=True)
        return scored[:limit]

    def get_emerging_topics(self, posts: Sequence[Post], hours_threshold: float = 24) -> List[TrendEntry]:
        """
        Keywords that appear repeatedly in posts from the last ``hours_threshold`` hours.

        Returns an empty list when no post falls inside the window.
        """
        cutoff = self.clock() - hours_threshold * 3600
        recent = [post for post in posts if post.created_at > cutoff]

        if not recent:
            logger.debug(f"No posts newer than {hours_threshold}h, no emerging topics")
            return []

        return self.analyze_trending_keywords(recent, LOCAL_MIN_FREQUENCY)[:EMERGING_TOPICS_LIMIT]
