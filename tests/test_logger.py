"""
Tests for logging set-up and helpers.
"""

import logging
from unittest.mock import Mock

import pytest  # type: ignore

from src.bathing_temperature.core.logger import LoggerContext, setup_logger, site_logger


class TestSetupLogger:
    """Test cases for setup_logger."""

    @pytest.fixture(autouse=True)
    def env(self, monkeypatch):
        monkeypatch.delenv("LOG_FILE", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

    def test_console_only_by_default(self):
        logger = setup_logger("bathing_temperature.test_console")

        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0], logging.FileHandler)
        assert logger.level == logging.INFO
        assert logger.propagate is False

    def test_file_handler_keeps_debug(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = setup_logger("bathing_temperature.test_file", log_file=str(log_file), log_level="WARNING")

        logger.debug("skipped forecast")
        for handler in logger.handlers:
            handler.flush()

        assert logger.handlers[0].level == logging.WARNING
        assert "skipped forecast" in log_file.read_text(encoding="utf-8")

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")

        logger = setup_logger("bathing_temperature.test_env")

        assert logger.level == logging.DEBUG

    def test_reconfiguring_replaces_handlers(self, tmp_path):
        name = "bathing_temperature.test_reconfigure"
        setup_logger(name, log_file=str(tmp_path / "a.log"))
        logger = setup_logger(name)

        assert len(logger.handlers) == 1


def test_site_logger_tags_messages():
    logger = Mock()

    site_logger(logger, "SE0001", "lwm2m").info("Sending pack")

    level, message = logger.log.call_args.args
    assert level == logging.INFO
    assert message == "[site=SE0001 sink=lwm2m] Sending pack"


def test_site_logger_without_sink():
    logger = Mock()

    site_logger(logger, "SE0001").warning("No profile")

    assert logger.log.call_args.args[1] == "[site=SE0001] No profile"


def test_logger_context_reports_counts():
    logger = Mock()

    with LoggerContext(logger, "temperature collection") as ctx:
        ctx.record(locations=2, observations=5)

    message = logger.info.call_args.args[0]
    assert message.startswith("Finished temperature collection in ")
    assert message.endswith("(locations=2, observations=5)")


def test_logger_context_propagates_errors():
    logger = Mock()

    with pytest.raises(RuntimeError):
        with LoggerContext(logger, "publishing to fiware"):
            raise RuntimeError("broker down")

    assert "broker down" in logger.error.call_args.args[0]
