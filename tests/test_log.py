"""Tests for logging setup."""

import json
import logging
import sys

import pytest

from devflow.log import JsonFormatter, setup_logging


@pytest.fixture(autouse=True)
def reset_devflow_logger():
    yield
    logger = logging.getLogger("devflow")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_console_only():
    logger = setup_logging("INFO")
    assert logger.name == "devflow"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1


def test_repeated_setup_does_not_stack_handlers():
    setup_logging("INFO")
    logger = setup_logging("DEBUG")
    assert len(logger.handlers) == 1


def test_file_handler_writes_json(tmp_path):
    log_file = tmp_path / "run.log"
    logger = setup_logging("WARNING", log_file)
    assert logger.level == logging.DEBUG

    logging.getLogger("devflow.execution.service").debug("Saved %s", "wf-1")
    for handler in logger.handlers:
        handler.flush()

    entry = json.loads(log_file.read_text().splitlines()[-1])
    assert entry["level"] == "DEBUG"
    assert entry["logger"] == "devflow.execution.service"
    assert entry["message"] == "Saved wf-1"


def test_formatter_includes_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.getLogger("devflow").makeRecord(
            "devflow", logging.ERROR, __file__, 1, "failed", (), exc_info=sys.exc_info()
        )
    entry = json.loads(JsonFormatter().format(record))
    assert entry["message"] == "failed"
    assert "RuntimeError: boom" in entry["exception"]
