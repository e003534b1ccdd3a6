import json
import logging
import sys

import pytest

from common.logging_config import JSONFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(saved_level)


def test_json_formatter_fields():
    formatter = JSONFormatter("test-service")
    record = logging.LogRecord(
        name="OllamaConfigurator",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Pulling %s",
        args=("mistral",),
        exc_info=None,
    )
    record.component = "ollama"

    entry = json.loads(formatter.format(record))

    assert entry["level"] == "INFO"
    assert entry["service"] == "test-service"
    assert entry["logger"] == "OllamaConfigurator"
    assert entry["message"] == "Pulling mistral"
    assert entry["extra"] == {"component": "ollama"}
    assert entry["timestamp"].endswith("+00:00")


def test_json_formatter_includes_exception():
    formatter = JSONFormatter()
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            "x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )

    entry = json.loads(formatter.format(record))

    assert "RuntimeError: boom" in entry["exception"]


def test_setup_logging_writes_json_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "setup.jsonl"

    logger = setup_logging(
        "pod_setup_test",
        log_level="DEBUG",
        enable_console=False,
        log_file_path=str(log_file),
    )
    logger.info("hello")
    for handler in restore_root_logger.handlers:
        handler.flush()

    lines = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert any(line["message"] == "hello" for line in lines)
    assert restore_root_logger.level == logging.DEBUG


def test_setup_logging_level_from_environment(monkeypatch, restore_root_logger):
    monkeypatch.setenv("LOG_LEVEL", "warning")

    setup_logging("pod_setup_test", enable_console=False)

    assert restore_root_logger.level == logging.WARNING


def test_setup_logging_invalid_level_falls_back_to_info(restore_root_logger):
    setup_logging("pod_setup_test", log_level="chatty", enable_console=False)

    assert restore_root_logger.level == logging.INFO
