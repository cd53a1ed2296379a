"""
Structured JSON logging for page comparisons.
Logs go to stderr so stdout stays reserved for the rendered report.
"""

import json
import logging
import sys
from datetime import datetime, timezone


# Record attributes copied into the JSON payload when present
LOG_FIELDS = (
    "run_id", "mode", "step", "url", "error_code",
    "types", "runs", "identical", "path",
)


class JsonFormatter(logging.Formatter):
    """Format logs as structured JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        for field in LOG_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


class ContextAdapter(logging.LoggerAdapter):
    """LoggerAdapter whose defaults are merged with per-call ``extra``."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def setup(level=logging.INFO, stream=None, **defaults) -> ContextAdapter:
    """
    Set up structured logging with default metadata.
    Example:
        log = setup_logs(mode="schema", run_id="1a2b")
        log.info("fetched", extra={"url": url, "step": "fetch"})
    """

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    return ContextAdapter(root, defaults or {})
