"""Command-line interface for the Reddit Trend Analyzer."""

import asyncio
import logging
import logging.config
import signal
from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from reddit_trends import report
from reddit_trends.analysis.sentiment import SentimentAnalyzer, TransformerSentimentScorer
from reddit_trends.analysis.trends import TrendAnalyzer
from reddit_trends.collector.fetcher import FetchBatch, RateLimitedFetcher
from reddit_trends.collector.rate_limiter import RateLimiter
from reddit_trends.config import Config
from reddit_trends.exceptions import ConfigError, RateLimitExceeded
from reddit_trends.monitoring.metrics import PrometheusExporter
from reddit_trends.reddit_client import RedditClient

app = typer.Typer(help="Reddit Trend Analyzer - trending keywords, topics and posts for content creators")

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> None:
    """
    Set up logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": log_level,
                "formatter": "standard",
                "filename": "logs/reddit_trends.log",
                "maxBytes": 10485760,  # 10 MB
                "backupCount": 5,
                "encoding": "utf8",
            },
        },
        "loggers": {
            "": {
                "handlers": ["console", "file"],
                "level": log_level,
                "propagate": True
            },
            "asyncio": {
                "level": "WARNING",
            },
            "asyncpraw": {
                "level": "WARNING",
            },
            "asyncprawcore": {
                "level": "WARNING",
            },
        }
    }

    logging.config.dictConfig(log_config)


def load_config(config_path: Optional[str], env_file: Optional[str]) -> Config:
    """Load and validate configuration, raising ConfigError when invalid."""
    config = Config.from_files(config_path, env_file)
    errors = config.validate()
    if errors:
        raise ConfigError(errors)
    return config


async def fetch_data(config: Config, stop_event: asyncio.Event) -> FetchBatch:
    """
    Fetch posts and comments for the configured subreddits.

    SIGINT/SIGTERM set ``stop_event``; the fetcher checks it between
    subreddits and posts and returns what it has so far.
    """
    prometheus_exporter = None
    if config.monitoring.enable_prometheus:
        prometheus_exporter = PrometheusExporter(port=config.monitoring.prometheus_port)
        prometheus_exporter.start_server()

    reddit_client = RedditClient(config)
    rate_limiter = RateLimiter(config.rate_limit, exporter=prometheus_exporter)
    fetcher = RateLimitedFetcher(reddit_client, rate_limiter, config.rate_limit, prometheus_exporter)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows event loops do not support signal handlers
            pass

    await reddit_client.initialize()
    try:
        return await fetcher.fetch_batch(
            config.subreddits,
            limit_per_source=config.analysis.post_limit,
            limit_per_detail=config.analysis.comment_limit,
            max_parents_for_details=config.analysis.max_posts_for_comments,
            should_continue=lambda: not stop_event.is_set(),
        )
    finally:
        await reddit_client.close()


def build_sentiment_analyzer(model_name: Optional[str]) -> Optional[SentimentAnalyzer]:
    try:
        scorer = TransformerSentimentScorer(model_name) if model_name else TransformerSentimentScorer()
    except (ModuleNotFoundError, OSError) as e:
        logger.warning(f"Sentiment analysis disabled: {e}")
        return None
    return SentimentAnalyzer(scorer)


def analyze_batch(config: Config, batch: FetchBatch, sentiment: Optional[SentimentAnalyzer]) -> None:
    """Run sentiment and trend analysis over a fetched batch and print the report."""
    posts, comments = batch.posts, batch.comments
    settings = config.analysis

    stats, distribution = None, None
    if sentiment is not None:
        logger.info("Analyzing sentiment...")
        posts = sentiment.analyze_posts(posts)
        comments = sentiment.analyze_comments(comments)
        stats = sentiment.get_statistics(posts)
        distribution = sentiment.get_distribution(stats)

    logger.info("Analyzing trends...")
    trends = TrendAnalyzer()
    keywords = trends.analyze_trending_keywords(posts, settings.min_keyword_frequency)
    comment_keywords = trends.analyze_comment_trends(comments, settings.min_keyword_frequency)
    by_subreddit = trends.get_trends_by_subreddit(posts)
    top_posts = trends.get_top_trending_posts(posts, settings.trending_posts_limit)
    emerging = trends.get_emerging_topics(posts, settings.emerging_window_hours)

    report.summary(len(posts), len(comments), config.subreddits, batch.request_count)
    report.trending_keywords(keywords[:15])
    if comment_keywords:
        report.trending_keywords(comment_keywords[:15], title="TRENDING IN COMMENTS")
    report.trending_posts(top_posts)
    if stats is not None:
        report.sentiment_stats(stats, distribution)
    report.subreddit_trends(by_subreddit)
    if emerging:
        report.emerging_topics(emerging[:10], settings.emerging_window_hours)
    if stats is not None:
        report.recommendations(keywords, stats, emerging)


@app.command()
def analyze(
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Path to YAML configuration file")] = None,
    env_file: Annotated[Optional[str], typer.Option("--env-file", "-e", help="Path to .env file")] = None,
    subreddit: Annotated[Optional[List[str]], typer.Option("--subreddit", "-s", help="Subreddit to analyze (repeatable)")] = None,
    model: Annotated[Optional[str], typer.Option("--model", "-m", help="Hugging Face sentiment model")] = None,
    no_sentiment: Annotated[bool, typer.Option("--no-sentiment", help="Skip sentiment analysis")] = False,
    loglevel: Annotated[str, typer.Option("--loglevel", "-l", help="Logging level")] = "INFO",
) -> None:
    """
    Fetch hot posts and comments, then report trending keywords, posts and topics.
    """
    setup_logging(loglevel)

    try:
        app_config = load_config(config, env_file)
    except ConfigError as e:
        for error in e.errors:
            logger.error(f"Configuration error: {error}")
        raise typer.Exit(code=1)

    if subreddit:
        app_config.subreddits = subreddit

    logger.info(f"Analyzing subreddits: {', '.join(app_config.subreddits)}")
    logger.info(f"Post limit per subreddit: {app_config.analysis.post_limit}")
    logger.info(f"Comment limit per post: {app_config.analysis.comment_limit}")

    try:
        batch = asyncio.run(fetch_data(app_config, asyncio.Event()))
    except RateLimitExceeded as e:
        partial = e.partial if isinstance(e.partial, FetchBatch) else FetchBatch()
        logger.critical(
            f"{e} Fetched {len(partial.posts)} posts and {len(partial.comments)} comments before stopping."
        )
        raise typer.Exit(code=1)
    except ValueError as e:
        logger.critical(f"Failed to initialize Reddit client: {str(e)}")
        raise typer.Exit(code=1)

    if not batch.posts:
        typer.secho("No posts found. Please check your configuration.", fg=typer.colors.RED)
        return

    for failure in batch.failures:
        logger.warning(f"Skipped: {failure}")
    logger.info(f"Fetched {len(batch.posts)} posts and {len(batch.comments)} comments")

    sentiment = None if no_sentiment else build_sentiment_analyzer(model)
    analyze_batch(app_config, batch, sentiment)


@app.command("check-config")
def check_config(
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Path to YAML configuration file")] = None,
    env_file: Annotated[Optional[str], typer.Option("--env-file", "-e", help="Path to .env file")] = None,
) -> None:
    """Validate configuration and print the effective settings."""
    app_config = Config.from_files(config, env_file)
    errors = app_config.validate()

    typer.echo(f"Subreddits: {', '.join(app_config.subreddits)}")
    typer.echo(f"Request delay: {app_config.rate_limit.request_delay_sec:.1f}s")
    typer.echo(f"Max retries: {app_config.rate_limit.max_retries}")
    typer.echo(f"Posts per subreddit: {app_config.analysis.post_limit}")
    typer.echo(f"Comments per post: {app_config.analysis.comment_limit}")
    typer.echo(f"Max posts for comments: {app_config.analysis.max_posts_for_comments}")
    typer.echo(f"Min keyword frequency: {app_config.analysis.min_keyword_frequency}")

    if errors:
        for error in errors:
            typer.secho(f"Configuration error: {error}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.secho("Configuration is valid", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
