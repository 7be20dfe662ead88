import json
import logging

import pytest
import structlog

from markup_toolkit.utils.logging import logging_context, setup_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
    logging.getLogger("markup_toolkit").setLevel(logging.NOTSET)


def test_logging_context_binds_and_restores():
    with logging_context(batch_id="abc") as context:
        assert context == {"batch_id": "abc"}
        assert structlog.contextvars.get_contextvars()["batch_id"] == "abc"
        with logging_context(batch_id="nested", index=1) as nested:
            assert nested == {"batch_id": "abc", "index": 1}
            assert structlog.contextvars.get_contextvars()["batch_id"] == "abc"
        assert "index" not in structlog.contextvars.get_contextvars()
    assert "batch_id" not in structlog.contextvars.get_contextvars()


def test_setup_logging_sets_package_level():
    setup_logging(level=logging.DEBUG)

    assert logging.getLogger("markup_toolkit").level == logging.DEBUG

    setup_logging(level=logging.WARNING)
    assert logging.getLogger("markup_toolkit").level == logging.WARNING


def test_json_logs_carry_bound_context(caplog):
    setup_logging(level=logging.DEBUG, json_logs=True)

    with caplog.at_level(logging.DEBUG, logger="markup_toolkit"):
        with logging_context(batch_id="abc"):
            structlog.get_logger("markup_toolkit.batching").info("Batch started", total=3)

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["event"] == "Batch started"
    assert payload["batch_id"] == "abc"
    assert payload["total"] == 3
    assert payload["level"] == "info"


def test_log_format_is_read_from_environment(monkeypatch):
    monkeypatch.setenv("MARKUP_LOG_FORMAT", "JSON")

    setup_logging()

    assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)
