"""In-memory feedback state with report invalidation.

The store owns the ordered item list (newest first) and the optional batch
report. A report is only ever present when it was synthesized from exactly
the current item list: every item mutation discards it.

Updates:
    v0.1.0 - 2026-10-18 - Feedback store with persistence port and observers.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Optional, Protocol, Sequence

from .errors import AnalysisError, InsufficientDataError
from .schemas import AnalysisResult, BatchAnalysisResult, FeedbackItem

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "Manual Entry"
DEFAULT_MIN_REPORT_ITEMS = 2

CLASSIFICATION_FAILED_MESSAGE = (
    "Failed to analyze feedback. Please check your API key or try again later."
)
REPORT_FAILED_MESSAGE = "Failed to generate insights report. The model might be busy."


class Analyzer(Protocol):
    """Remote analysis contract used by the store."""

    def classify_feedback(self, text: str) -> AnalysisResult:
        ...

    def synthesize_report(self, items: Sequence[FeedbackItem]) -> BatchAnalysisResult:
        ...


class PersistencePort(Protocol):
    """Durable storage contract used by the store."""

    def load(self) -> "PersistedStateLike":
        ...

    def save_items(self, items: Sequence[FeedbackItem]) -> None:
        ...

    def save_report(self, report: Optional[BatchAnalysisResult]) -> None:
        ...


class PersistedStateLike(Protocol):
    items: Sequence[FeedbackItem]
    report: Optional[BatchAnalysisResult]


@dataclass(slots=True, frozen=True)
class StoreSnapshot:
    """Immutable view of the store handed to observers."""

    items: tuple[FeedbackItem, ...]
    report: Optional[BatchAnalysisResult]
    is_analyzing: bool = False
    is_generating_report: bool = False
    last_error: Optional[str] = None


Listener = Callable[[StoreSnapshot], None]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _new_id() -> str:
    return str(uuid.uuid4())


class FeedbackStore:
    """Canonical holder of feedback items and the derived report."""

    def __init__(
        self,
        analyzer: Analyzer,
        persistence: PersistencePort | None = None,
        *,
        items: Sequence[FeedbackItem] = (),
        report: Optional[BatchAnalysisResult] = None,
        min_report_items: int = DEFAULT_MIN_REPORT_ITEMS,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        """Create a store around an analyzer and an optional persistence port.

        Args:
            analyzer (Analyzer): Client performing classification and synthesis.
            persistence (PersistencePort | None): Receives every committed change.
            items (Sequence[FeedbackItem]): Initial items, newest first.
            report (BatchAnalysisResult | None): Report computed from ``items``.
            min_report_items (int): Minimum item count for ``request_report``.
            clock (Callable[[], int]): Returns the current time in epoch milliseconds.
            id_factory (Callable[[], str]): Produces fresh item identifiers.
        """

        self._analyzer = analyzer
        self._persistence = persistence
        self._min_report_items = min_report_items
        self._clock = clock
        self._id_factory = id_factory
        self._listeners: list[Listener] = []
        self._state = StoreSnapshot(items=tuple(items), report=report)

    @classmethod
    def from_persistence(
        cls,
        analyzer: Analyzer,
        persistence: PersistencePort,
        *,
        min_report_items: int = DEFAULT_MIN_REPORT_ITEMS,
        **kwargs: object,
    ) -> "FeedbackStore":
        """Hydrate a store from durable storage.

        A stored report is dropped when fewer than ``min_report_items`` items
        were restored, since it cannot have been computed from that list.
        """

        restored = persistence.load()
        items = tuple(restored.items)
        report = restored.report
        if report is not None and len(items) < min_report_items:
            logger.warning(
                "Dropping persisted report inconsistent with restored items",
                extra={"items": len(items)},
            )
            report = None
            persistence.save_report(None)
        logger.debug(
            "Feedback store hydrated",
            extra={"items": len(items), "has_report": report is not None},
        )
        return cls(
            analyzer,
            persistence,
            items=items,
            report=report,
            min_report_items=min_report_items,
            **kwargs,  # type: ignore[arg-type]
        )

    @property
    def items(self) -> tuple[FeedbackItem, ...]:
        return self._state.items

    @property
    def report(self) -> Optional[BatchAnalysisResult]:
        return self._state.report

    @property
    def is_analyzing(self) -> bool:
        return self._state.is_analyzing

    @property
    def is_generating_report(self) -> bool:
        return self._state.is_generating_report

    @property
    def last_error(self) -> Optional[str]:
        return self._state.last_error

    @property
    def min_report_items(self) -> int:
        return self._min_report_items

    def snapshot(self) -> StoreSnapshot:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for state changes; returns an unsubscribe callable."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def find(self, item_id: str) -> Optional[FeedbackItem]:
        return next((item for item in self._state.items if item.id == item_id), None)

    def submit(self, text: str, source: str = DEFAULT_SOURCE) -> FeedbackItem:
        """Classify ``text`` and prepend the resulting item.

        A successful classification always discards the current report. On
        failure nothing but ``last_error`` changes.

        Raises:
            AnalysisError: If classification fails.
        """

        self._update(is_analyzing=True, last_error=None)
        try:
            analysis = self._analyzer.classify_feedback(text)
        except AnalysisError:
            self._update(is_analyzing=False, last_error=CLASSIFICATION_FAILED_MESSAGE)
            raise
        except Exception:
            self._update(is_analyzing=False)
            raise

        item = FeedbackItem.from_analysis(
            analysis,
            item_id=self._id_factory(),
            original_text=text,
            timestamp=self._clock(),
            source=source,
        )
        self._commit_items((item, *self._state.items), is_analyzing=False)
        logger.info(
            "Feedback item added",
            extra={
                "item_id": item.id,
                "source": source,
                "sentiment": item.sentiment.value,
                "priority": item.priority.value,
            },
        )
        return item

    def request_report(self) -> Optional[BatchAnalysisResult]:
        """Synthesize a report over the full current item list.

        Returns:
            BatchAnalysisResult | None: The stored report, or ``None`` when the
            items changed during synthesis and the result was discarded.

        Raises:
            InsufficientDataError: If fewer than ``min_report_items`` items
                exist; no remote call is made.
            AnalysisError: If synthesis fails; any existing report is kept.
        """

        items = self._state.items
        if len(items) < self._min_report_items:
            error = InsufficientDataError(self._min_report_items, len(items))
            self._update(last_error=str(error))
            raise error

        self._update(is_generating_report=True, last_error=None)
        try:
            report = self._analyzer.synthesize_report(items)
        except AnalysisError:
            self._update(is_generating_report=False, last_error=REPORT_FAILED_MESSAGE)
            raise
        except Exception:
            self._update(is_generating_report=False)
            raise

        if self._state.items != items:
            # Items changed while the report was being generated.
            logger.info(
                "Discarding report synthesized from a stale item list",
                extra={"items": len(items), "current_items": len(self._state.items)},
            )
            self._update(is_generating_report=False)
            return None

        self._update(is_generating_report=False, report=report)
        if self._persistence is not None:
            self._persistence.save_report(report)
        logger.info(
            "Insights report generated",
            extra={"items": len(items), "themes": len(report.top_themes)},
        )
        return report

    def delete(self, item_id: str) -> bool:
        """Remove the item with ``item_id``; the report is discarded regardless.

        Returns:
            bool: ``True`` when an item was removed.
        """

        remaining = tuple(item for item in self._state.items if item.id != item_id)
        removed = len(remaining) != len(self._state.items)
        self._commit_items(remaining)
        logger.info("Feedback item deleted", extra={"item_id": item_id, "removed": removed})
        return removed

    def clear_all(self) -> None:
        """Remove every item and the report."""

        count = len(self._state.items)
        self._commit_items(())
        logger.info("Feedback history cleared", extra={"items": count})

    def dismiss_report(self) -> None:
        """Discard the current report without touching items."""

        if self._state.report is None:
            return
        self._update(report=None)
        if self._persistence is not None:
            self._persistence.save_report(None)

    def _commit_items(self, items: tuple[FeedbackItem, ...], **changes: object) -> None:
        self._update(items=items, report=None, **changes)
        if self._persistence is not None:
            self._persistence.save_report(None)
            self._persistence.save_items(items)

    def _update(self, **changes: object) -> None:
        self._state = replace(self._state, **changes)  # type: ignore[arg-type]
        for listener in list(self._listeners):
            listener(self._state)


__all__ = [
    "Analyzer",
    "CLASSIFICATION_FAILED_MESSAGE",
    "DEFAULT_SOURCE",
    "FeedbackStore",
    "PersistencePort",
    "REPORT_FAILED_MESSAGE",
    "StoreSnapshot",
]
