import logging

import pytest

from vingd.common.logging_utils import resolve_level, setup_logger


def test_resolve_level() -> None:
    assert resolve_level(logging.WARNING) == logging.WARNING
    assert resolve_level("debug") == logging.DEBUG
    with pytest.raises(ValueError, match="Unknown log level"):
        resolve_level("chatty")


def test_setup_logger_adds_one_handler() -> None:
    logger = logging.getLogger("vingd.test.setup")
    logger.handlers.clear()

    setup_logger(logger, "INFO")
    setup_logger(logger, logging.DEBUG, "%(message)s")

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.handlers[0].level == logging.DEBUG
    logger.handlers.clear()
