"""Reddit Trend Analyzer: rate-limited Reddit acquisition and trend scoring."""

__version__ = "1.0.0"
