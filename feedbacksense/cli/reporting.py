"""Utilities for assembling exportable insight reports."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from feedbacksense.core.feedback_store import StoreSnapshot
from feedbacksense.services.stats_service import FeedbackStats


def build_report_payload(
    snapshot: StoreSnapshot, stats: FeedbackStats, *, app_name: str = "FeedbackSense"
) -> Dict[str, Any]:
    """Construct a report payload from the current store snapshot."""

    return {
        "app": app_name,
        "item_count": len(snapshot.items),
        "stats": stats.as_dict(),
        "insights": snapshot.report.as_dict() if snapshot.report else None,
    }


def render_report_markdown(payload: Dict[str, Any]) -> str:
    """Render a markdown report from a report payload."""

    sections: list[str] = [f"# {payload.get('app') or 'FeedbackSense'} Insights Report"]
    sections.append(_render_stats(payload.get("stats") or {}))

    insights_body = _render_insights(payload.get("insights"))
    sections.append(
        insights_body
        or "## AI Deep Insights\n\nNo current report. Generate one to include trends and themes."
    )

    sections.append("## Appendix\n\n```json\n" + json.dumps(payload, indent=2) + "\n```")
    return "\n\n".join(sections)


def _render_stats(stats: Dict[str, Any]) -> str:
    md = ["## Dashboard Overview"]
    md.append(f"- **Total Feedback:** {stats.get('total', 0)}")
    md.append(f"- **High Priority:** {stats.get('high_priority', 0)}")
    md.append(f"- **Negative Sentiment:** {stats.get('negative_sentiment', 0)}")
    md.append(f"- **Actionable Items (est.):** {stats.get('actionable_estimate', 0)}")

    sentiments = stats.get("sentiment_counts") or {}
    if sentiments:
        md.append("\n**Sentiment Distribution:**")
        md.extend(f"- {name}: {count}" for name, count in sentiments.items())
    priorities = stats.get("priority_counts") or {}
    if priorities:
        md.append("\n**Priority Breakdown:**")
        md.extend(f"- {name}: {count}" for name, count in priorities.items())
    return "\n".join(md)


def _render_insights(insights: Optional[Dict[str, Any]]) -> Optional[str]:
    if not insights:
        return None
    md = ["## AI Deep Insights", "### Sentiment Trend", insights.get("sentiment_trend_analysis") or ""]
    themes = insights.get("top_themes") or []
    if themes:
        md.append("### Top Themes")
        for idx, theme in enumerate(themes, start=1):
            name = theme.get("theme_name") or "Theme"
            count = theme.get("count", 0)
            description = theme.get("description") or ""
            md.append(f"{idx}. **{name}** ({count}): {description}")
    return "\n\n".join(md)


__all__ = ["build_report_payload", "render_report_markdown"]
