from reddit_trends.analysis.sentiment import SentimentAnalyzer, SentimentScorer, categorize_sentiment
from reddit_trends.analysis.trends import STOP_WORDS, TrendAnalyzer

__all__ = ["STOP_WORDS", "SentimentAnalyzer", "SentimentScorer", "TrendAnalyzer", "categorize_sentiment"]
