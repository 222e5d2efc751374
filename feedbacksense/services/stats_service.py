"""Dashboard statistics over analyzed feedback."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from ..core.schemas import FeedbackItem, Priority, Sentiment

ACTIONABLE_RATIO = 0.8


@dataclass(slots=True, frozen=True)
class FeedbackStats:
    """Aggregated counts shown in the dashboard overview."""

    total: int
    sentiment_counts: Dict[str, int] = field(default_factory=dict)
    priority_counts: Dict[str, int] = field(default_factory=dict)
    high_priority: int = 0
    negative_sentiment: int = 0
    actionable_estimate: int = 0
    top_tags: List[Tuple[str, int]] = field(default_factory=list)
    source_counts: Dict[str, int] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "sentiment_counts": dict(self.sentiment_counts),
            "priority_counts": dict(self.priority_counts),
            "high_priority": self.high_priority,
            "negative_sentiment": self.negative_sentiment,
            "actionable_estimate": self.actionable_estimate,
            "top_tags": [{"tag": tag, "count": count} for tag, count in self.top_tags],
            "source_counts": dict(self.source_counts),
        }


class StatsService:
    """Computes overview statistics from a feedback item list."""

    def __init__(self, *, tag_limit: int = 10) -> None:
        self._tag_limit = tag_limit

    def compute(self, items: Sequence[FeedbackItem]) -> FeedbackStats:
        """Aggregate sentiment, priority, tag and source counts.

        Sentiment counts only include sentiments that occur, in first-seen
        order; priority counts always list Low, Medium and High.
        """

        sentiment_counts: Dict[str, int] = {}
        for item in items:
            key = item.sentiment.value
            sentiment_counts[key] = sentiment_counts.get(key, 0) + 1

        priorities = Counter(item.priority for item in items)
        priority_counts = {priority.value: priorities.get(priority, 0) for priority in Priority}

        tags = Counter(tag.strip() for item in items for tag in item.tags if tag.strip())
        sources = Counter(item.source for item in items)

        total = len(items)
        return FeedbackStats(
            total=total,
            sentiment_counts=sentiment_counts,
            priority_counts=priority_counts,
            high_priority=priorities.get(Priority.HIGH, 0),
            negative_sentiment=sentiment_counts.get(Sentiment.NEGATIVE.value, 0),
            actionable_estimate=math.floor(total * ACTIONABLE_RATIO + 0.5),
            top_tags=tags.most_common(self._tag_limit),
            source_counts=dict(sources.most_common()),
        )


__all__ = ["FeedbackStats", "StatsService"]
