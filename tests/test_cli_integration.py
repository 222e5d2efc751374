from __future__ import annotations

import json
from typing import Callable

import pytest
from typer.testing import CliRunner

import feedbacksense.cli as cli
from feedbacksense.core.schemas import FeedbackItem
from tests.helpers.cli import make_cli_runtime, mute_console, patch_runtime


@pytest.fixture()
def cli_session(monkeypatch: pytest.MonkeyPatch) -> tuple[CliRunner, cli.Runtime]:
    runtime = make_cli_runtime()
    patch_runtime(monkeypatch, runtime)
    mute_console(monkeypatch)
    return CliRunner(), runtime


def test_end_to_end_cli_flow(cli_session: tuple[CliRunner, cli.Runtime]) -> None:
    runner, runtime = cli_session
    store = runtime.store

    result = runner.invoke(cli.app, ["submit", "The app crashes on upload", "-s", "App Store"])
    assert result.exit_code == 0, result.output
    assert store.items[0].source == "App Store"

    result = runner.invoke(cli.app, ["report", "generate"])
    assert result.exit_code == 1
    assert store.report is None

    result = runner.invoke(cli.app, ["submit", "--sample"])
    assert result.exit_code == 0
    assert len(store.items) == 2

    result = runner.invoke(cli.app, ["report", "generate"])
    assert result.exit_code == 0
    assert store.report is not None

    result = runner.invoke(cli.app, ["delete", store.items[0].id])
    assert result.exit_code == 0
    assert len(store.items) == 1
    assert store.report is None

    result = runner.invoke(cli.app, ["clear", "--force"])
    assert result.exit_code == 0
    assert store.items == ()


def test_list_command_reads_store(
    monkeypatch: pytest.MonkeyPatch, make_item: Callable[..., FeedbackItem]
) -> None:
    runtime = make_cli_runtime(items=[make_item(), make_item()])
    patch_runtime(monkeypatch, runtime)
    printed = mute_console(monkeypatch)

    result = CliRunner().invoke(cli.app, ["list", "--raw", "--limit", "1"])

    assert result.exit_code == 0
    assert len(printed[-1]) == 1
    assert json.loads(json.dumps(printed[-1]))[0]["originalText"] == "Feedback number 1"


def test_invalid_log_level_is_rejected(cli_session: tuple[CliRunner, cli.Runtime]) -> None:
    runner, _runtime = cli_session

    result = runner.invoke(cli.app, ["stats", "--log-level", "chatty"])

    assert result.exit_code != 0
