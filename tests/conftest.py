from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from feedbacksense.core.schemas import FeedbackItem, Priority, Sentiment  # noqa: E402
from tests.helpers.config import write_config  # noqa: E402


@pytest.fixture()
def config_dir(tmp_path: Path) -> Path:
    return write_config(tmp_path / "config")


@pytest.fixture()
def prompts_dir() -> Path:
    return PROJECT_ROOT / "prompts"


@pytest.fixture()
def make_item() -> Callable[..., FeedbackItem]:
    counter = {"n": 0}

    def _make(**overrides: Any) -> FeedbackItem:
        counter["n"] += 1
        values: dict[str, Any] = {
            "id": f"item-{counter['n']}",
            "original_text": f"Feedback number {counter['n']}",
            "timestamp": 1_700_000_000_000 + counter["n"] * 86_400_000,
            "source": "Manual Entry",
            "sentiment": Sentiment.NEUTRAL,
            "pain_point": "Slow loading",
            "feature_request": "Faster startup",
            "priority": Priority.MEDIUM,
            "summary": "User finds the app slow.",
            "tags": ("performance", "mobile", "speed"),
        }
        values.update(overrides)
        return FeedbackItem(**values)

    return _make
