"""Rich renderers for CLI outputs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from rich.panel import Panel
from rich.table import Table

from feedbacksense.cli.io import console
from feedbacksense.core.schemas import BatchAnalysisResult, FeedbackItem
from feedbacksense.services.stats_service import FeedbackStats

SENTIMENT_STYLES = {
    "Positive": "green",
    "Neutral": "grey62",
    "Negative": "red",
}

PRIORITY_STYLES = {
    "Low": "blue",
    "Medium": "yellow",
    "High": "red",
}


def format_timestamp(timestamp_ms: int) -> str:
    moment = datetime.fromtimestamp(timestamp_ms / 1000, timezone.utc).astimezone()
    return moment.strftime("%Y-%m-%d %H:%M")


def render_item_panel(item: FeedbackItem) -> None:
    """Display one analyzed feedback item in full."""

    sentiment_style = SENTIMENT_STYLES.get(item.sentiment.value, "white")
    priority_style = PRIORITY_STYLES.get(item.priority.value, "white")
    lines = [
        f"[bold]{item.summary}[/]",
        f"{item.source} • {format_timestamp(item.timestamp)}",
        "",
        f"[bold]Sentiment:[/] [{sentiment_style}]{item.sentiment.value}[/]"
        f"   [bold]Priority:[/] [{priority_style}]{item.priority.value}[/]",
        f"[bold]Pain point:[/] {item.pain_point}",
        f"[bold]Feature request:[/] {item.feature_request}",
    ]
    if item.tags:
        lines.append(f"[bold]Tags:[/] {', '.join(item.tags)}")
    lines.extend(["", f"[dim]\"{item.original_text}\"[/]"])
    console.print(Panel("\n".join(lines), title=f"Feedback {item.id}"))


def render_item_table(items: Sequence[FeedbackItem], *, total: int | None = None) -> None:
    """Render the feedback stream as a table, newest first."""

    if not items:
        console.print(
            Panel(
                "No feedback analyzed yet. Use `submit` to analyze customer feedback.",
                title="Feedback Stream",
            )
        )
        return

    title = f"Feedback Stream ({total if total is not None else len(items)})"
    table = Table(title=title, show_lines=False)
    table.add_column("ID", overflow="fold")
    table.add_column("When")
    table.add_column("Source")
    table.add_column("Sentiment")
    table.add_column("Priority")
    table.add_column("Summary", overflow="fold")
    table.add_column("Tags", overflow="fold")
    for item in items:
        sentiment_style = SENTIMENT_STYLES.get(item.sentiment.value, "white")
        priority_style = PRIORITY_STYLES.get(item.priority.value, "white")
        table.add_row(
            item.id,
            format_timestamp(item.timestamp),
            item.source,
            f"[{sentiment_style}]{item.sentiment.value}[/]",
            f"[{priority_style}]{item.priority.value}[/]",
            item.summary,
            ", ".join(item.tags),
        )
    console.print(table)


def render_stats(stats: FeedbackStats) -> None:
    """Render the dashboard overview metrics."""

    if stats.total == 0:
        console.print(Panel("No feedback analyzed yet.", title="Dashboard Overview"))
        return

    metrics = Table(title="Dashboard Overview")
    metrics.add_column("Metric")
    metrics.add_column("Value", justify="right")
    metrics.add_row("Total Feedback", str(stats.total))
    metrics.add_row("High Priority", f"[red]{stats.high_priority}[/]")
    metrics.add_row("Negative Sentiment", str(stats.negative_sentiment))
    metrics.add_row("Actionable Items (est.)", str(stats.actionable_estimate))
    console.print(metrics)

    breakdown = Table(title="Sentiment & Priority")
    breakdown.add_column("Sentiment")
    breakdown.add_column("Count", justify="right")
    breakdown.add_column("Priority")
    breakdown.add_column("Count", justify="right")
    sentiments = list(stats.sentiment_counts.items())
    priorities = list(stats.priority_counts.items())
    for index in range(max(len(sentiments), len(priorities))):
        sentiment, sentiment_count = sentiments[index] if index < len(sentiments) else ("", "")
        priority, priority_count = priorities[index] if index < len(priorities) else ("", "")
        breakdown.add_row(
            f"[{SENTIMENT_STYLES.get(sentiment, 'white')}]{sentiment}[/]" if sentiment else "",
            str(sentiment_count),
            f"[{PRIORITY_STYLES.get(priority, 'white')}]{priority}[/]" if priority else "",
            str(priority_count),
        )
    console.print(breakdown)

    if stats.top_tags:
        tags = ", ".join(f"{tag} ({count})" for tag, count in stats.top_tags)
        console.print(Panel(tags, title="Top Tags"))


def render_report(report: BatchAnalysisResult | None, *, item_count: int) -> None:
    """Display the synthesized insights report."""

    if report is None:
        console.print(
            Panel(
                "No current report. Run `report generate` to analyze trends and themes.",
                title="AI Deep Insights",
            )
        )
        return

    console.print(
        Panel(report.sentiment_trend_analysis, title=f"Sentiment Trend ({item_count} items)")
    )
    if not report.top_themes:
        console.print(Panel("No recurring themes identified.", title="Top Themes"))
        return

    table = Table(title="Top Themes")
    table.add_column("#", justify="right")
    table.add_column("Theme")
    table.add_column("Count", justify="right")
    table.add_column("Description", overflow="fold")
    for index, theme in enumerate(report.top_themes, start=1):
        table.add_row(str(index), theme.theme_name, str(theme.count), theme.description)
    console.print(table)


__all__ = [
    "format_timestamp",
    "render_item_panel",
    "render_item_table",
    "render_report",
    "render_stats",
]
