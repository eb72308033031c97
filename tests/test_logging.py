"""Tests for CLI logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from gust.logging import HANDLER_NAME, setup_logging


@pytest.fixture
def gust_logger():
    logger = logging.getLogger("gust")
    saved_handlers, saved_level = list(logger.handlers), logger.level
    yield logger
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


def console_handlers(logger):
    return [h for h in logger.handlers if h.get_name() == HANDLER_NAME]


@pytest.mark.parametrize("verbosity,level", [
    ("quiet", logging.ERROR),
    ("normal", logging.INFO),
    ("verbose", logging.DEBUG),
])
def test_level_follows_verbosity(gust_logger, verbosity, level):
    setup_logging(verbosity)

    assert gust_logger.level == level
    assert isinstance(console_handlers(gust_logger)[0], RichHandler)


def test_repeated_setup_keeps_one_console_handler(gust_logger):
    other = logging.NullHandler()
    gust_logger.addHandler(other)

    setup_logging("normal")
    setup_logging("verbose")

    assert len(console_handlers(gust_logger)) == 1
    assert other in gust_logger.handlers
    assert gust_logger.level == logging.DEBUG
