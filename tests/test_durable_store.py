from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Iterator

import pytest

from feedbacksense.core.schemas import BatchAnalysisResult, FeedbackItem, ThemeGroup
from feedbacksense.db.durable_store import ITEMS_KEY, REPORT_KEY, DurableStore
from feedbacksense.db.sqlite_client import SQLiteClient


@pytest.fixture()
def sqlite_client(tmp_path: Path) -> Iterator[SQLiteClient]:
    client = SQLiteClient(tmp_path / "store.db")
    client.initialize_schema()
    yield client
    client.close()


def _report() -> BatchAnalysisResult:
    return BatchAnalysisResult(
        sentiment_trend_analysis="Improving.",
        top_themes=(ThemeGroup(theme_name="Billing", count=1, description="Fees."),),
    )


def test_load_empty_database(sqlite_client: SQLiteClient) -> None:
    state = DurableStore(sqlite_client).load()

    assert state.items == ()
    assert state.report is None


def test_items_and_report_survive_reload(
    sqlite_client: SQLiteClient, make_item: Callable[..., FeedbackItem]
) -> None:
    items = [make_item(source="App Store"), make_item(original_text="Café crashes")]
    store = DurableStore(sqlite_client)
    store.save_items(items)
    store.save_report(_report())

    state = DurableStore(sqlite_client).load()

    assert state.items == tuple(items)
    assert state.report == _report()


def test_items_wire_format_uses_dashboard_field_names(
    sqlite_client: SQLiteClient, make_item: Callable[..., FeedbackItem]
) -> None:
    DurableStore(sqlite_client).save_items([make_item()])

    stored = json.loads(sqlite_client.get_value(ITEMS_KEY) or "[]")

    assert {"id", "originalText", "timestamp", "source", "pain_point", "feature_request"} <= set(
        stored[0]
    )


def test_saving_no_report_removes_entry(sqlite_client: SQLiteClient) -> None:
    store = DurableStore(sqlite_client)
    store.save_report(_report())

    store.save_report(None)

    assert sqlite_client.get_value(REPORT_KEY) is None
    assert store.load().report is None


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        '{"sentiment_trend_analysis": "x", "top_themes": [{"theme_name": "a", "count": NaN, "description": "d"}]}',
        '{"sentiment_trend_analysis": "x", "top_themes": [{"theme_name": "a", "count": Infinity, "description": "d"}]}',
    ],
)
def test_corrupt_report_does_not_block_items(
    sqlite_client: SQLiteClient, make_item: Callable[..., FeedbackItem], payload: str
) -> None:
    store = DurableStore(sqlite_client)
    store.save_items([make_item()])
    sqlite_client.set_value(REPORT_KEY, payload)

    state = store.load()

    assert len(state.items) == 1
    assert state.report is None


@pytest.mark.parametrize(
    "payload",
    ["nonsense", json.dumps({"id": "x"}), json.dumps([{"id": "x"}])],
)
def test_corrupt_items_are_treated_as_empty(
    sqlite_client: SQLiteClient, payload: str
) -> None:
    store = DurableStore(sqlite_client)
    sqlite_client.set_value(ITEMS_KEY, payload)
    store.save_report(_report())

    state = store.load()

    assert state.items == ()
    assert state.report == _report()


@pytest.mark.parametrize("timestamp", [float("inf"), float("nan"), -1, 10**20])
def test_items_with_unusable_timestamps_are_treated_as_empty(
    sqlite_client: SQLiteClient, make_item: Callable[..., FeedbackItem], timestamp: float
) -> None:
    entry = make_item().as_dict()
    entry["timestamp"] = timestamp
    # Non-finite floats are written as the bare tokens Infinity / NaN.
    sqlite_client.set_value(ITEMS_KEY, json.dumps([entry]))

    state = DurableStore(sqlite_client).load()

    assert state.items == ()
