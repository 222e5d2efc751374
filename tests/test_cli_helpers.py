from __future__ import annotations

import random
from datetime import datetime

import pytest
import typer

import feedbacksense.cli as cli
from feedbacksense.cli.renderers import format_timestamp
from feedbacksense.cli.utils import (
    SAMPLE_FEEDBACKS,
    apply_log_override,
    normalize_source,
    pick_sample,
)


def test_apply_log_override_handles_invalid_level(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[str] = []
    monkeypatch.setattr(cli, "set_runtime_level", lambda level: captured.append(level))

    apply_log_override("debug")
    apply_log_override(None)
    assert captured == ["debug"]

    def _reject(level: str) -> None:
        raise ValueError(f"Invalid log level: {level}")

    monkeypatch.setattr(cli, "set_runtime_level", _reject)
    with pytest.raises(typer.BadParameter):
        apply_log_override("trace")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("zendesk", "Zendesk"),
        ("  app store ", "App Store"),
        ("Intercom", "Intercom"),
        ("   ", "Manual Entry"),
    ],
)
def test_normalize_source(raw: str, expected: str) -> None:
    assert normalize_source(raw) == expected


def test_pick_sample_is_deterministic_with_seeded_rng() -> None:
    first = pick_sample(random.Random(7))

    assert first in SAMPLE_FEEDBACKS
    assert pick_sample(random.Random(7)) == first


def test_format_timestamp_uses_local_time() -> None:
    timestamp = 1_700_000_000_000
    expected = datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d %H:%M")

    assert format_timestamp(timestamp) == expected
