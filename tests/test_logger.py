"""Tests for the ``setup_logger`` helper."""

import logging
import os

import pytest

from lotledger.utils.logger import setup_logger


@pytest.fixture
def fresh_name(request):
    """Unique logger name, with handlers removed again after the test."""
    name = f"lotledger.test.{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestSetupLogger:
    def test_console_only_by_default(self, fresh_name):
        logger = setup_logger(fresh_name)
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.INFO

    def test_file_handler_with_log_dir(self, fresh_name, tmp_path):
        log_dir = tmp_path / "logs"
        logger = setup_logger(fresh_name, log_dir=str(log_dir))
        assert len(logger.handlers) == 2

        logger.debug("lot search detail")
        for handler in logger.handlers:
            handler.flush()

        files = os.listdir(log_dir)
        assert len(files) == 1
        assert files[0].startswith(fresh_name)
        content = (log_dir / files[0]).read_text()
        assert f"{fresh_name} - DEBUG - lot search detail" in content

    def test_no_duplicate_handlers(self, fresh_name):
        first = setup_logger(fresh_name)
        second = setup_logger(fresh_name)
        assert first is second
        assert len(second.handlers) == 1
