"""Structured Logging: JSON lines in production, key=value text for local runs.

Invariants:
    - Every line carries timestamp, level, logger name and message
    - Ledger, model and moderation extras (user_id, model_id, request_id, ...) are
      emitted when set on the record; UUIDs and Decimals are rendered as strings
    - setup_logging is idempotent: calling it twice does not duplicate output
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    "user_id", "performer_id", "model_id", "version_number", "request_id",
    "simulation_id", "reason", "diff", "error_code", "path",
)

_HANDLER_NAME = "graphledger"


def _context(record: logging.LogRecord) -> dict:
    found = {}
    for key in CONTEXT_FIELDS:
        value = getattr(record, key, None)
        if value is None:
            continue
        found[key] = value if isinstance(value, (bool, int, float)) else str(value)
    return found


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable line with the context fields appended as key=value."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = " ".join(f"{k}={v}" for k, v in _context(record).items())
        return f"{line} [{pairs}]" if pairs else line


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
