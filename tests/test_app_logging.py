"""Tests for logging configuration."""

import logging

from reeldine.app_logging import configure_logging


def test_configure_logging_installs_single_handler() -> None:
    logger = logging.getLogger("reeldine")
    logger.handlers.clear()

    configure_logging()
    configure_logging()

    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logger.propagate is False


def test_service_loggers_inherit_app_handler() -> None:
    configure_logging()

    child = logging.getLogger("reeldine.services.search")

    assert child.getEffectiveLevel() == logging.INFO
    assert not child.handlers
