from __future__ import annotations

import io
import json
import logging

from pagediff.logs import ContextAdapter, JsonFormatter, setup


def _capture(name: str):
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setFormatter(JsonFormatter())
    logger = logging.getLogger(name)
    logger.handlers = [handler]
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    return logger, buf


def test_json_formatter_includes_known_fields_only() -> None:
    logger, buf = _capture("pagediff.tests.formatter")

    logger.warning("skipped", extra={"url": "https://a/", "error_code": "X", "other": 1})

    payload = json.loads(buf.getvalue())
    assert payload["level"] == "WARNING"
    assert payload["message"] == "skipped"
    assert payload["url"] == "https://a/"
    assert payload["error_code"] == "X"
    assert "other" not in payload
    assert "ts" in payload


def test_adapter_merges_defaults_with_call_extra() -> None:
    logger, buf = _capture("pagediff.tests.adapter")
    log = ContextAdapter(logger, {"run_id": "r1", "mode": "html"})

    log.info("fetching", extra={"url": "https://b/", "step": "fetch"})

    payload = json.loads(buf.getvalue())
    assert payload["run_id"] == "r1"
    assert payload["mode"] == "html"
    assert payload["url"] == "https://b/"
    assert payload["step"] == "fetch"


def test_exceptions_are_captured() -> None:
    logger, buf = _capture("pagediff.tests.exc")

    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logger.exception("failed")

    assert "RuntimeError: boom" in json.loads(buf.getvalue())["exception"]


def test_setup_installs_json_handler_on_root() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    stream = io.StringIO()
    try:
        log = setup(level=logging.INFO, stream=stream, mode="schema")
        log.info("ready")
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    payload = json.loads(stream.getvalue().splitlines()[-1])
    assert payload["message"] == "ready"
    assert payload["mode"] == "schema"
