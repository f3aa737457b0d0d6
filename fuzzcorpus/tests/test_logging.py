"""Tests for structured logging and the error envelope."""

from __future__ import annotations

import json
import logging

from fuzzcorpus.core.errors import CorpusError, ErrorCode, InvalidInputError
from fuzzcorpus.core.logging import DevFormatter, JSONFormatter, setup_logging


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("fuzzcorpus.test", logging.INFO, __file__, 10, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    def test_json_includes_corpus_fields(self):
        payload = json.loads(
            JSONFormatter().format(_record(corpus_id="abc123", fingerprint="ff", score=1.5))
        )
        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["corpus_id"] == "abc123"
        assert payload["fingerprint"] == "ff"
        assert payload["score"] == 1.5

    def test_dev_prefixes_corpus_id(self):
        line = DevFormatter().format(_record(corpus_id="0123456789ab"))
        assert "[01234567] hello" in line

    def test_setup_logging_picks_formatter(self):
        root = logging.getLogger()
        saved = root.handlers[:], root.level
        try:
            setup_logging(env="production", log_level="debug")
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
            assert root.level == logging.DEBUG

            setup_logging(env="development")
            assert isinstance(root.handlers[0].formatter, DevFormatter)
        finally:
            root.handlers[:], root.level = saved[0], saved[1]


class TestErrorEnvelope:
    def test_envelope_shape(self):
        err = InvalidInputError("bad runtime", details=[{"field": "runtime", "value": -1}])
        body = err.to_envelope(corpus_id="c1").model_dump()
        assert body == {
            "error": {
                "code": "INVALID_INPUT",
                "message": "bad runtime",
                "details": [{"field": "runtime", "value": -1}],
                "corpus_id": "c1",
            }
        }

    def test_explicit_code(self):
        err = CorpusError("x", code=ErrorCode.VALIDATION_ERROR)
        assert err.code is ErrorCode.VALIDATION_ERROR
        assert str(err) == "x"
