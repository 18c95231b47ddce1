"""Tests for the JSON line log formatter"""
import json
import logging

from core.logging import JsonFormatter


def make_record(msg="hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("service.feed_service", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:

    def test_base_fields(self):
        line = json.loads(JsonFormatter().format(make_record()))

        assert line["level"] == "INFO"
        assert line["logger"] == "service.feed_service"
        assert line["msg"] == "hello"
        assert line["ts"].endswith("Z")

    def test_known_extras_are_lifted(self):
        line = json.loads(JsonFormatter().format(
            make_record(trace_id="api_1", video_id=7, mode="random", unrelated="x")
        ))

        assert line["trace_id"] == "api_1"
        assert line["video_id"] == 7
        assert line["mode"] == "random"
        assert "unrelated" not in line

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            import sys
            record = make_record()
            record.exc_info = sys.exc_info()

        line = json.loads(JsonFormatter().format(record))

        assert "RuntimeError: boom" in line["exception"]
