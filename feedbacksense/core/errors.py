"""Domain error hierarchy.

Updates:
    v0.1.0 - 2026-10-18 - Introduced analysis, report and persistence errors.
"""

from __future__ import annotations


class FeedbackSenseError(Exception):
    """Base class for all FeedbackSense domain errors."""


class SchemaValidationError(FeedbackSenseError, ValueError):
    """Raised when a payload does not match the declared data shape."""


class AnalysisError(FeedbackSenseError, RuntimeError):
    """Raised when a remote analysis call cannot produce a usable result."""


class ClassificationError(AnalysisError):
    """Single-item classification failed or returned an unusable structure."""


class ReportSynthesisError(AnalysisError):
    """Batch report synthesis failed or returned an unusable structure."""


ReportError = ReportSynthesisError


class InsufficientDataError(FeedbackSenseError):
    """Raised when a report is requested over too few feedback items."""

    def __init__(self, min_items: int, actual: int) -> None:
        self.min_items = min_items
        self.actual = actual
        super().__init__(
            f"Please analyze at least {min_items} feedback items to generate a report."
        )


class PersistenceParseError(FeedbackSenseError):
    """Raised when persisted bytes for a key cannot be decoded."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Persisted entry '{key}' is unreadable: {reason}")


__all__ = [
    "AnalysisError",
    "ClassificationError",
    "FeedbackSenseError",
    "InsufficientDataError",
    "PersistenceParseError",
    "ReportError",
    "ReportSynthesisError",
    "SchemaValidationError",
]
