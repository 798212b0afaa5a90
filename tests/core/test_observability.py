"""JSON log formatter: structured extras surface as top-level keys."""

import json
import logging
from uuid import uuid4

from graphledger.infrastructure.observability import JSONFormatter, TextFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("graphledger.test", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "graphledger.test"
    assert payload["message"] == "hello"


def test_extras_are_serialized():
    model_id = uuid4()
    payload = json.loads(JSONFormatter().format(_record(model_id=model_id, version_number=3)))
    assert payload["model_id"] == str(model_id)
    assert payload["version_number"] == 3
    assert "request_id" not in payload


def test_text_formatter_appends_context():
    line = TextFormatter().format(_record(reason="seed_grant"))
    assert line.endswith("[reason=seed_grant]")


def test_setup_logging_is_idempotent():
    setup_logging("DEBUG", "text")
    setup_logging("INFO", "json")
    ours = [h for h in logging.getLogger().handlers if h.get_name() == "graphledger"]
    assert len(ours) == 1
    assert isinstance(ours[0].formatter, JSONFormatter)
