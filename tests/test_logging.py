"""Tests for keg logging configuration."""

import logging

import pytest

from keg._logging import configure_logging, set_quiet_mode


@pytest.fixture
def keg_logger():
    """Give each test a keg logger without handlers and restore it afterwards."""
    logger = logging.getLogger("keg")
    saved = (logger.handlers[:], logger.level, logger.propagate)
    logger.handlers = []
    yield logger
    logger.handlers, level, logger.propagate = saved
    logger.setLevel(level)


def test_configure_uses_env_level(keg_logger, monkeypatch):
    monkeypatch.setenv("KEG_LOG_LEVEL", "debug")
    configure_logging()
    assert keg_logger.level == logging.DEBUG
    assert len(keg_logger.handlers) == 1
    assert keg_logger.propagate is False


def test_configure_twice_is_noop(keg_logger, monkeypatch):
    monkeypatch.delenv("KEG_LOG_LEVEL", raising=False)
    configure_logging()
    configure_logging()
    assert len(keg_logger.handlers) == 1
    assert keg_logger.level == logging.INFO


def test_quiet_mode_only_lets_errors_through(keg_logger, monkeypatch):
    monkeypatch.delenv("KEG_LOG_LEVEL", raising=False)
    configure_logging()
    set_quiet_mode(True)
    assert keg_logger.level == logging.ERROR
    assert keg_logger.handlers[0].level == logging.ERROR
    set_quiet_mode(False)
    assert keg_logger.level == logging.INFO
