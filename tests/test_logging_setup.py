from __future__ import annotations

import json
import logging
from io import StringIO
from typing import Iterator

import pytest
from rich.logging import RichHandler

from feedbacksense.core import logging_setup


@pytest.fixture()
def fresh_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    monkeypatch.setattr(logging_setup, "_configured", False)
    monkeypatch.setattr(logging_setup, "_handler", None)
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_json_formatter_includes_extra_fields() -> None:
    formatter = logging_setup.JsonFormatter()
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="hello %s",
        args=("world",),
        exc_info=None,
    )
    record.item_id = "abc"
    payload = json.loads(formatter.format(record))

    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["item_id"] == "abc"
    assert payload["timestamp"].endswith("Z")


def test_configure_logging_sets_json_handler(
    monkeypatch: pytest.MonkeyPatch, fresh_logging: None
) -> None:
    stream = StringIO()

    class StubStreamHandler(logging.StreamHandler):
        def __init__(self) -> None:
            super().__init__(stream=stream)

    monkeypatch.setattr(logging, "StreamHandler", StubStreamHandler)

    logging_setup.configure_logging({"level": "DEBUG", "format": "json"})
    logging.getLogger("sample").debug("test", extra={"source": "Zendesk"})

    payload = json.loads(stream.getvalue().strip())
    assert payload["source"] == "Zendesk"
    assert logging_setup._handler is not None


def test_configure_logging_runs_once(fresh_logging: None) -> None:
    logging_setup.configure_logging({"format": "rich"})
    first = logging_setup._handler
    logging_setup.configure_logging({"format": "json"})

    assert isinstance(first, RichHandler)
    assert logging_setup._handler is first


def test_configure_logging_rejects_unknown_format(fresh_logging: None) -> None:
    with pytest.raises(ValueError):
        logging_setup.configure_logging({"format": "xml"})


def test_set_runtime_level_updates_handler(
    monkeypatch: pytest.MonkeyPatch, fresh_logging: None
) -> None:
    handler = logging.StreamHandler(stream=StringIO())
    monkeypatch.setattr(logging_setup, "_handler", handler)
    logging.getLogger().handlers = [handler]

    logging_setup.set_runtime_level("warning")
    assert handler.level == logging.WARNING
    assert logging.getLogger().level == logging.WARNING

    with pytest.raises(ValueError):
        logging_setup.set_runtime_level("not-a-level")
