from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable, Dict

import pytest

import feedbacksense.cli as cli
import feedbacksense.cli.runtime as runtime_module
from feedbacksense.core.feedback_store import FeedbackStore
from feedbacksense.core.schemas import BatchAnalysisResult, FeedbackItem
from feedbacksense.db.durable_store import DurableStore
from feedbacksense.db.sqlite_client import SQLiteClient


class StubConfigService:
    sqlite_path = ":memory:"

    def __init__(self) -> None:
        self.logging_config = {"level": "INFO", "format": "json"}
        self.database_config = {"sqlite_path": self.sqlite_path}
        self.app_metadata: Dict[str, Any] = {"name": "FeedbackSense Test"}
        self.min_report_items = 2

    def get_workflow_model_config(self, workflow: str) -> Any:
        if workflow != "classify_feedback":
            raise KeyError(workflow)
        return SimpleNamespace(model="gemini/gemini-2.5-flash")


@pytest.fixture()
def stubbed_dependencies(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    db_path = tmp_path / "data" / "feedback.db"
    monkeypatch.setattr(StubConfigService, "sqlite_path", str(db_path))
    monkeypatch.setattr(cli, "ConfigService", StubConfigService)
    monkeypatch.setattr(cli, "LLMGateway", lambda config_service: object())
    monkeypatch.setattr(runtime_module, "configure_logging", lambda config: None)
    return db_path


def test_initialize_runtime_bootstraps_dependencies(stubbed_dependencies: Path) -> None:
    runtime = cli.initialize_runtime()

    assert isinstance(runtime.store, FeedbackStore)
    assert runtime.store.items == ()
    assert runtime.store.report is None
    assert runtime.app_name == "FeedbackSense Test"
    assert runtime.model_label == "gemini/gemini-2.5-flash"
    assert stubbed_dependencies.exists()


def test_initialize_runtime_hydrates_persisted_state(
    stubbed_dependencies: Path, make_item: Callable[..., FeedbackItem]
) -> None:
    client = SQLiteClient(stubbed_dependencies)
    client.initialize_schema()
    items = [make_item(), make_item()]
    durable = DurableStore(client)
    durable.save_items(items)
    durable.save_report(BatchAnalysisResult(sentiment_trend_analysis="Flat", top_themes=()))
    client.close()

    runtime = cli.initialize_runtime()

    assert runtime.store.items == tuple(items)
    assert runtime.store.report is not None
    assert runtime.store.min_report_items == 2


def test_get_runtime_caches_instance(
    monkeypatch: pytest.MonkeyPatch, stubbed_dependencies: Path
) -> None:
    calls: list[int] = []
    sentinel = object()
    monkeypatch.setattr(
        runtime_module, "initialize_runtime", lambda: calls.append(1) or sentinel
    )
    cli.set_runtime(None)
    try:
        assert runtime_module.get_runtime() is sentinel
        assert runtime_module.get_runtime() is sentinel
        assert calls == [1]
    finally:
        cli.set_runtime(None)
