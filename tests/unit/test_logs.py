"""Tests for logging setup."""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from capella_cli.logs import setup_logging
from capella_cli.resources.base import OperationResult


@pytest.fixture(autouse=True)
def restore_logger():
    logger = logging.getLogger("capella_cli")
    saved = (logger.level, logger.handlers[:], logger.propagate)
    yield logger
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]


class TestSetupLogging:
    def test_default_level(self, restore_logger):
        setup_logging()
        assert restore_logger.level == logging.WARNING
        assert isinstance(restore_logger.handlers[0], RichHandler)

    def test_verbose(self, restore_logger):
        setup_logging(verbose=True)
        assert restore_logger.level == logging.DEBUG

    def test_repeated_calls_keep_one_handler(self, restore_logger):
        setup_logging()
        setup_logging(verbose=True)
        assert len(restore_logger.handlers) == 1


class TestRemoveLogs:
    def test_remove_logs_info(self, caplog):
        caplog.set_level(logging.INFO, logger="capella_cli")
        logging.getLogger("capella_cli").propagate = True
        result = OperationResult(state={"id": "x"}).remove()
        assert result.removed is True
        assert result.state is None
        assert "removing it from state" in caplog.text
