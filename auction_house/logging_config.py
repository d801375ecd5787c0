"""
Logging setup - one root handler, text locally and JSON in production.
Called once from the application lifespan (and the Celery worker).
"""

import json
import logging
from datetime import datetime, timezone

# Extra fields surfaced by the JSON formatter when a record carries them
CONTEXT_FIELDS = (
    "auction_id",
    "buyer",
    "seller",
    "price",
    "error_code",
    "expired",
    "failures",
    "backoff_seconds",
)


class JSONFormatter(logging.Formatter):
    """Format records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = str(val) if not isinstance(val, (int, float, bool)) else val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure the root logger. Safe to call more than once."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_auction_house", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._auction_house = True  # type: ignore[attr-defined]
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
