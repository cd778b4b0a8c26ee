"""Plain-text rendering of analysis results for the terminal."""

from datetime import datetime
from typing import Dict, List, Sequence

import typer

from reddit_trends.models.records import ScoredPost, SentimentStatistics, SourceTrendSummary, TrendEntry

RULE = "=" * 80


def header(title: str) -> None:
    typer.echo("\n" + RULE)
    typer.secho(title, fg=typer.colors.CYAN, bold=True)
    typer.echo(RULE + "\n")


def summary(post_count: int, comment_count: int, subreddits: Sequence[str], request_count: int) -> None:
    header("ANALYSIS SUMMARY")
    typer.echo(f"  Posts analyzed:    {post_count}")
    typer.echo(f"  Comments analyzed: {comment_count}")
    typer.echo(f"  Subreddits:        {', '.join(subreddits)}")
    typer.echo(f"  API requests made: {request_count}")
    typer.echo(f"  Completed at:      {datetime.now():%Y-%m-%d %H:%M:%S}")


def trending_keywords(keywords: List[TrendEntry], title: str = "TRENDING KEYWORDS") -> None:
    header(title)
    typer.echo(f"{'Rank':<6}{'Keyword':<30}{'Count':>7}  Trend")
    for rank, entry in enumerate(keywords, start=1):
        bars = "#" * min(entry.count, 20)
        typer.echo(f"{'#' + str(rank):<6}{entry.keyword:<30}{entry.count:>7}  {bars}")


def trending_posts(posts: List[ScoredPost]) -> None:
    header("TOP TRENDING POSTS")
    for rank, post in enumerate(posts, start=1):
        sentiment = post.sentiment.combined.label if post.sentiment else "N/A"
        typer.secho(f"{rank}. {post.title}", fg=typer.colors.YELLOW, bold=True)
        typer.echo(
            f"   r/{post.source} | Score: {post.score} | Comments: {post.comment_count} "
            f"| Trending: {post.trending_score:.1f}"
        )
        typer.echo(f"   Sentiment: {sentiment}")
        typer.secho(f"   {post.permalink}", fg=typer.colors.BLUE)


def sentiment_stats(stats: SentimentStatistics, distribution: Dict[str, float]) -> None:
    header("SENTIMENT ANALYSIS")
    rows = [
        ("Very Positive", stats.very_positive, distribution["very_positive"]),
        ("Positive", stats.positive, distribution["positive"]),
        ("Neutral", stats.neutral, distribution["neutral"]),
        ("Negative", stats.negative, distribution["negative"]),
        ("Very Negative", stats.very_negative, distribution["very_negative"]),
    ]
    for label, count, percent in rows:
        typer.echo(f"{label:<16}{count:>8}{percent:>9.1f}%")
    typer.secho(f"\nAverage Sentiment Score: {stats.average_score:.2f}", bold=True)


def subreddit_trends(trends: Dict[str, SourceTrendSummary]) -> None:
    header("TRENDS BY SUBREDDIT")
    for source, summary_ in trends.items():
        typer.secho(f"\nr/{source}", fg=typer.colors.CYAN, bold=True)
        typer.echo(f"Posts analyzed: {summary_.post_count} | Avg Score: {summary_.average_score:.0f}")
        keywords = ", ".join(entry.keyword for entry in summary_.top_keywords[:5])
        typer.echo(f"Top keywords: {keywords}")


def emerging_topics(topics: List[TrendEntry], hours: float) -> None:
    header(f"EMERGING TOPICS (Last {hours:g} Hours)")
    for entry in topics:
        typer.echo(f"{entry.keyword:<40}{entry.count:>8}")


def recommendations(
    keywords: List[TrendEntry], stats: SentimentStatistics, emerging: List[TrendEntry]
) -> None:
    header("CONTENT CREATOR RECOMMENDATIONS")

    typer.secho("Top 5 Topics to Create Content About:", fg=typer.colors.GREEN, bold=True)
    for rank, entry in enumerate(keywords[:5], start=1):
        typer.echo(f"  {rank}. {entry.keyword} ({entry.count} mentions)")

    if emerging:
        typer.secho("\nEmerging Topics to Watch:", fg=typer.colors.GREEN, bold=True)
        for rank, entry in enumerate(emerging[:3], start=1):
            typer.echo(f"  {rank}. {entry.keyword} (gaining traction)")

    typer.secho("\nContent Strategy Insights:", fg=typer.colors.GREEN, bold=True)
    if stats.average_score > 2:
        typer.echo("  - Overall sentiment is POSITIVE: good time for engagement")
    elif stats.average_score < -2:
        typer.echo("  - Overall sentiment is NEGATIVE: consider addressing concerns")
    else:
        typer.echo("  - Overall sentiment is NEUTRAL: opportunity to stand out")

    if stats.total and (stats.very_positive + stats.positive) / stats.total * 100 > 60:
        typer.echo("  - High positive engagement: leverage community enthusiasm")

    typer.echo("  - Focus on topics with high frequency and positive sentiment")
    typer.echo("  - Monitor emerging topics for early content opportunities\n")
