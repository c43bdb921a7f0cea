"""Shared pytest fixtures for message intel tests."""
import logging
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402


@pytest.fixture(autouse=True)
def _propagate_msgintel_logs():
    """Let caplog see msgintel records.

    get_logger() attaches a stdout JSON handler and disables propagation, so
    records never reach the root logger where caplog listens. Re-enable
    propagation for the duration of each test and restore afterwards.
    """
    loggers = [
        logger
        for name, logger in logging.Logger.manager.loggerDict.items()
        if name.startswith("msgintel") and isinstance(logger, logging.Logger)
    ]
    previous = [logger.propagate for logger in loggers]
    for logger in loggers:
        logger.propagate = True
    yield
    for logger, propagate in zip(loggers, previous):
        logger.propagate = propagate
