import pytest
from loguru import logger

from tryto import tryto_sync
from tryto.utils import logging as tryto_logging


def fail():
    raise RuntimeError("boom")


@pytest.fixture
def host_messages(monkeypatch):
    """Handler owned by the application embedding tryto."""
    for name in ("TRYTO_LOG_LEVEL", "TRYTO_LOG_OUTPUT", "TRYTO_LOG_FILE", "TRYTO_DISABLE_LOGGING"):
        monkeypatch.delenv(name, raising=False)
    messages = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="INFO")
    try:
        yield messages
    finally:
        logger.remove(handler_id)
        monkeypatch.delenv("TRYTO_LOG_LEVEL", raising=False)
        monkeypatch.delenv("TRYTO_DISABLE_LOGGING", raising=False)
        tryto_logging.setup_logger()


def test_setup_keeps_application_handlers(host_messages):
    tryto_logging.setup_logger()

    logger.info("host message")
    assert tryto_sync(fail) is None

    assert "host message" in host_messages
    assert "Error occurred: boom" in host_messages
    assert tryto_logging._handler_ids == []


def test_setup_replaces_only_its_own_sinks(host_messages, monkeypatch, tmp_path):
    log_file = tmp_path / "tryto.log"
    monkeypatch.setenv("TRYTO_LOG_LEVEL", "INFO")
    monkeypatch.setenv("TRYTO_LOG_OUTPUT", "file")
    monkeypatch.setenv("TRYTO_LOG_FILE", str(log_file))

    tryto_logging.setup_logger()
    tryto_logging.setup_logger()
    assert len(tryto_logging._handler_ids) == 1

    logger.info("host message")
    assert tryto_sync(fail) is None

    assert "host message" in host_messages
    written = log_file.read_text()
    assert written.count("Error occurred: boom") == 1
    assert "host message" not in written


def test_disable_silences_tryto_only(host_messages, monkeypatch):
    monkeypatch.setenv("TRYTO_DISABLE_LOGGING", "1")
    tryto_logging.setup_logger()

    logger.info("host message")
    assert tryto_sync(fail) is None

    assert host_messages == ["host message"]
