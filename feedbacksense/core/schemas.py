"""Shared data shapes for analyzed feedback and batch reports.

Field names on the wire follow the stored dashboard format: identity fields
are camelCase (``originalText``) while model-derived fields are snake_case
(``pain_point``).

Updates:
    v0.1.0 - 2026-10-18 - Added feedback item, theme and report schemas.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from .errors import SchemaValidationError

# 9999-12-31T23:59:59.999Z, the last instant `datetime` can represent.
MAX_TIMESTAMP_MS = 253_402_300_799_999


class Sentiment(str, Enum):
    """Polarity assigned to a feedback item."""

    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"


class Priority(str, Enum):
    """Urgency assigned to a feedback item."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def _require_mapping(payload: Any, shape: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise SchemaValidationError(
            f"{shape} must be a JSON object, got {type(payload).__name__}"
        )
    return payload


def _require_str(payload: Mapping[str, Any], key: str) -> str:
    if key not in payload:
        raise SchemaValidationError(f"Missing required field '{key}'")
    value = payload[key]
    if not isinstance(value, str):
        raise SchemaValidationError(
            f"Field '{key}' must be a string, got {type(value).__name__}"
        )
    return value


def _require_number(payload: Mapping[str, Any], key: str) -> float:
    if key not in payload:
        raise SchemaValidationError(f"Missing required field '{key}'")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaValidationError(f"Field '{key}' must be a number")
    if not math.isfinite(value):
        raise SchemaValidationError(f"Field '{key}' must be finite, got {value}")
    return value


def _require_enum(payload: Mapping[str, Any], key: str, enum_cls: type[Enum]) -> Any:
    raw = _require_str(payload, key)
    try:
        return enum_cls(raw)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise SchemaValidationError(
            f"Field '{key}' must be one of [{allowed}], got '{raw}'"
        ) from exc


def _require_tags(payload: Mapping[str, Any], key: str = "tags") -> list[str]:
    if key not in payload:
        raise SchemaValidationError(f"Missing required field '{key}'")
    value = payload[key]
    if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
        raise SchemaValidationError(f"Field '{key}' must be a list of strings")
    return list(value)


@dataclass(slots=True, frozen=True)
class AnalysisResult:
    """Classification returned by the model for a single feedback text."""

    sentiment: Sentiment
    pain_point: str
    feature_request: str
    priority: Priority
    summary: str
    tags: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, payload: Any) -> "AnalysisResult":
        """Validate and build a result from a decoded JSON object.

        Raises:
            SchemaValidationError: If a required field is missing or off-contract.
        """

        data = _require_mapping(payload, "AnalysisResult")
        return cls(
            sentiment=_require_enum(data, "sentiment", Sentiment),
            pain_point=_require_str(data, "pain_point"),
            feature_request=_require_str(data, "feature_request"),
            priority=_require_enum(data, "priority", Priority),
            summary=_require_str(data, "summary"),
            tags=tuple(_require_tags(data)),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "sentiment": self.sentiment.value,
            "pain_point": self.pain_point,
            "feature_request": self.feature_request,
            "priority": self.priority.value,
            "summary": self.summary,
            "tags": list(self.tags),
        }


@dataclass(slots=True, frozen=True)
class FeedbackItem:
    """An analyzed feedback entry.

    ``id``, ``original_text``, ``timestamp`` and ``source`` are supplied at
    submission; every other field is copied verbatim from the classifier.
    """

    id: str
    original_text: str
    timestamp: int
    source: str
    sentiment: Sentiment
    pain_point: str
    feature_request: str
    priority: Priority
    summary: str
    tags: tuple[str, ...] = ()

    @classmethod
    def from_analysis(
        cls,
        analysis: AnalysisResult,
        *,
        item_id: str,
        original_text: str,
        timestamp: int,
        source: str,
    ) -> "FeedbackItem":
        return cls(
            id=item_id,
            original_text=original_text,
            timestamp=timestamp,
            source=source,
            sentiment=analysis.sentiment,
            pain_point=analysis.pain_point,
            feature_request=analysis.feature_request,
            priority=analysis.priority,
            summary=analysis.summary,
            tags=analysis.tags,
        )

    @classmethod
    def from_dict(cls, payload: Any) -> "FeedbackItem":
        """Rebuild an item from its stored JSON form."""

        data = _require_mapping(payload, "FeedbackItem")
        analysis = AnalysisResult.from_dict(data)
        timestamp = _require_number(data, "timestamp")
        if not 0 <= timestamp <= MAX_TIMESTAMP_MS:
            raise SchemaValidationError(
                f"Field 'timestamp' must be epoch milliseconds in range, got {timestamp}"
            )
        return cls.from_analysis(
            analysis,
            item_id=_require_str(data, "id"),
            original_text=_require_str(data, "originalText"),
            timestamp=int(timestamp),
            source=_require_str(data, "source"),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "originalText": self.original_text,
            "timestamp": self.timestamp,
            "source": self.source,
            "sentiment": self.sentiment.value,
            "pain_point": self.pain_point,
            "feature_request": self.feature_request,
            "priority": self.priority.value,
            "summary": self.summary,
            "tags": list(self.tags),
        }

    @property
    def created_date(self) -> str:
        """Calendar day (UTC) of creation as ``YYYY-MM-DD``."""

        moment = datetime.fromtimestamp(self.timestamp / 1000, timezone.utc)
        return moment.date().isoformat()

    def report_projection(self) -> dict[str, Any]:
        """Reduced view sent to the model when synthesizing a report."""

        return {
            "date": self.created_date,
            "sentiment": self.sentiment.value,
            "pain_point": self.pain_point,
            "feature_request": self.feature_request,
            "tags": list(self.tags),
        }


@dataclass(slots=True, frozen=True)
class ThemeGroup:
    """A recurring theme identified across a batch of feedback."""

    theme_name: str
    count: int
    description: str

    @classmethod
    def from_dict(cls, payload: Any) -> "ThemeGroup":
        data = _require_mapping(payload, "ThemeGroup")
        count = _require_number(data, "count")
        if count < 0 or int(count) != count:
            raise SchemaValidationError(
                f"Field 'count' must be a non-negative integer, got {count}"
            )
        return cls(
            theme_name=_require_str(data, "theme_name"),
            count=int(count),
            description=_require_str(data, "description"),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "theme_name": self.theme_name,
            "count": self.count,
            "description": self.description,
        }


@dataclass(slots=True, frozen=True)
class BatchAnalysisResult:
    """Report synthesized over a snapshot of the feedback list."""

    sentiment_trend_analysis: str
    top_themes: tuple[ThemeGroup, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, payload: Any) -> "BatchAnalysisResult":
        data = _require_mapping(payload, "BatchAnalysisResult")
        if "top_themes" not in data:
            raise SchemaValidationError("Missing required field 'top_themes'")
        themes = data["top_themes"]
        if not isinstance(themes, list):
            raise SchemaValidationError("Field 'top_themes' must be a list")
        return cls(
            sentiment_trend_analysis=_require_str(data, "sentiment_trend_analysis"),
            top_themes=tuple(ThemeGroup.from_dict(theme) for theme in themes),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "sentiment_trend_analysis": self.sentiment_trend_analysis,
            "top_themes": [theme.as_dict() for theme in self.top_themes],
        }

    @property
    def themed_item_count(self) -> int:
        return sum(theme.count for theme in self.top_themes)


__all__ = [
    "AnalysisResult",
    "BatchAnalysisResult",
    "FeedbackItem",
    "Priority",
    "Sentiment",
    "ThemeGroup",
]
