"""
Тесты настройки логгера пакета.
"""

import io
import logging

import pytest

from dkmeans.utils.logging import format_run_prefix, setup_logger


@pytest.fixture
def clean_logger():
    """Снимает обработчики логгера dkmeans после теста."""
    yield
    logger = logging.getLogger("dkmeans")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


class TestSetupLogger:
    """Тесты setup_logger."""

    def test_child_loggers_share_handler(self, clean_logger):
        stream = io.StringIO()
        logger = setup_logger(stream=stream)

        logging.getLogger("dkmeans.dataflow.dataset").info("materialized")

        assert logger.name == "dkmeans"
        assert logger.propagate is False
        assert "INFO dkmeans.dataflow.dataset: materialized" in stream.getvalue()

    def test_repeated_call_redirects_stream(self, clean_logger):
        first, second = io.StringIO(), io.StringIO()
        setup_logger(stream=first)
        logger = setup_logger(logging.DEBUG, stream=second)

        logger.debug("after redirect")

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert first.getvalue() == ""
        assert "after redirect" in second.getvalue()

    def test_level_filters_messages(self, clean_logger):
        stream = io.StringIO()
        logger = setup_logger(logging.WARNING, stream=stream)

        logger.info("hidden")
        logger.warning("shown")

        assert "hidden" not in stream.getvalue()
        assert "shown" in stream.getvalue()


def test_format_run_prefix():
    assert format_run_prefix(100, 3, 5) == "[N=100 D=3 K=5]"
