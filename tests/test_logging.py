"""Tests for logging output."""

import json
import logging

import pytest

from settle import all_
from settle.logging import JsonFormatter, configure_logging
from fakes import ManualTask


def test_ignored_notifications_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="settle")
    task = ManualTask()
    all_([task])
    task.succeed(1)
    task.succeed(2)

    messages = [r.getMessage() for r in caplog.records]
    assert "all: watching 1 tasks" in messages
    assert "all: settled as fulfilled" in messages
    assert "all: ignored repeated fulfilled notification from task 0" in messages

    duplicate = next(r for r in caplog.records if "ignored repeated" in r.getMessage())
    assert duplicate.combinator == "all"
    assert duplicate.task_index == 0
    assert duplicate.status == "fulfilled"


def test_json_formatter_promotes_combinator_fields() -> None:
    record = logging.LogRecord("settle.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.combinator = "race"
    record.task_index = 2
    record.tasks = 4

    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "settle.test"
    assert payload["combinator"] == "race"
    assert payload["task_index"] == 2
    assert payload["extra"] == {"tasks": 4}


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    library = logging.getLogger("settle")
    saved_handlers, saved_level, saved_library_level = list(root.handlers), root.level, library.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)
    library.setLevel(saved_library_level)


def test_configure_logging_replaces_handlers(restore_logging) -> None:
    root = logging.getLogger()
    configure_logging("debug")
    configure_logging("warning")
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)
    assert root.level == logging.WARNING
    assert logging.getLogger("settle").level == logging.WARNING


def test_configure_logging_quiets_library_debug(restore_logging) -> None:
    configure_logging("debug")
    assert logging.getLogger("settle").level == logging.INFO

    configure_logging("debug", settle_level="debug")
    assert logging.getLogger("settle").level == logging.DEBUG
