"""Tests for the JSONL log sink."""

import json
import logging

import pytest

from importmap_resolver.logging_setup import JsonlHandler
from importmap_resolver.logging_setup import init_json_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _make_record(message, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="importmap_resolver.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonlHandler:
    def test_payload_fields(self, tmp_path):
        handler = JsonlHandler(tmp_path / "log.jsonl")

        payload = handler.format_record(_make_record("resolved react", event="resolve"))

        assert payload["lvl"] == "INFO"
        assert payload["logger"] == "importmap_resolver.test"
        assert payload["event"] == "resolve"
        assert payload["message"] == "resolved react"
        assert payload["schema"] == {"name": "importmap.log", "ver": "1.0.0"}

    def test_dict_message_merged(self, tmp_path):
        handler = JsonlHandler(tmp_path / "log.jsonl")

        payload = handler.format_record(_make_record({"specifier": "react"}))

        assert payload["specifier"] == "react"

    def test_emit_appends_lines(self, tmp_path):
        path = tmp_path / "nested" / "log.jsonl"
        handler = JsonlHandler(path)

        handler.emit(_make_record("one"))
        handler.emit(_make_record("two"))

        lines = path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["message"] for line in lines] == ["one", "two"]


def test_init_replaces_existing_sink(tmp_path, restore_root_logger):
    init_json_logging(str(tmp_path / "first.jsonl"), "debug")
    init_json_logging(str(tmp_path / "second.jsonl"), "info")

    sinks = [h for h in restore_root_logger.handlers if isinstance(h, JsonlHandler)]
    assert len(sinks) == 1
    assert sinks[0].path == tmp_path / "second.jsonl"
    assert restore_root_logger.level == logging.INFO
