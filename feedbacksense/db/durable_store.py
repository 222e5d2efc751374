"""Durable persistence for the feedback list and the current report.

Two independent entries are kept: ``feedback_items`` (JSON array of items)
and ``batch_insights`` (JSON report object, removed when no report is
current). A broken entry never prevents the other from loading.

Updates:
    v0.1.0 - 2026-10-18 - Key/value persistence with per-key corruption tolerance.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, TypeVar

from ..core.errors import PersistenceParseError, SchemaValidationError
from ..core.schemas import BatchAnalysisResult, FeedbackItem
from .sqlite_client import SQLiteClient

ITEMS_KEY = "feedback_items"
REPORT_KEY = "batch_insights"

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class PersistedState:
    """Snapshot restored from durable storage."""

    items: tuple[FeedbackItem, ...] = ()
    report: Optional[BatchAnalysisResult] = None


def _parse_items(payload: Any) -> tuple[FeedbackItem, ...]:
    if not isinstance(payload, list):
        raise SchemaValidationError("Stored feedback items must be a JSON array")
    return tuple(FeedbackItem.from_dict(entry) for entry in payload)


class DurableStore:
    """Reads and writes feedback state through a :class:`SQLiteClient`."""

    def __init__(self, sqlite_client: SQLiteClient) -> None:
        self._sqlite = sqlite_client

    def load(self) -> PersistedState:
        """Restore items and report; unreadable entries are treated as absent."""

        items = self._load_key(ITEMS_KEY, _parse_items)
        report = self._load_key(REPORT_KEY, BatchAnalysisResult.from_dict)
        return PersistedState(items=items or (), report=report)

    def save_items(self, items: Sequence[FeedbackItem]) -> None:
        """Replace the stored item list with ``items``."""

        payload = json.dumps([item.as_dict() for item in items], ensure_ascii=False)
        self._sqlite.set_value(ITEMS_KEY, payload)

    def save_report(self, report: Optional[BatchAnalysisResult]) -> None:
        """Store ``report``, or remove the stored report when ``None``."""

        if report is None:
            self._sqlite.delete_value(REPORT_KEY)
            return
        self._sqlite.set_value(REPORT_KEY, json.dumps(report.as_dict(), ensure_ascii=False))

    def _load_key(self, key: str, parse: Callable[[Any], T]) -> Optional[T]:
        try:
            raw = self._sqlite.get_value(key)
            if raw is None:
                return None
            return self._decode(key, raw, parse)
        except PersistenceParseError as exc:
            logger.warning(
                "Discarding unreadable persisted entry",
                extra={"key": exc.key, "reason": exc.reason},
            )
            return None

    @staticmethod
    def _decode(key: str, raw: str, parse: Callable[[Any], T]) -> T:
        try:
            return parse(json.loads(raw))
        except (json.JSONDecodeError, SchemaValidationError) as exc:
            raise PersistenceParseError(key, str(exc)) from exc


__all__ = ["DurableStore", "ITEMS_KEY", "PersistedState", "REPORT_KEY"]
