#!/usr/bin/env python3
"""
Tests for the console logger level threshold.
"""

import pytest

from PSO_ENGINE.Logs import logger


@pytest.fixture
def restore_level():
    previous = logger.get_log_level()
    yield
    logger.set_log_level(previous)


def test_threshold_filters_messages(capsys, restore_level):
    logger.set_log_level("warning")
    logger.log_info("hidden message", "test_logger")
    logger.log_warning("visible message", "test_logger")
    output = capsys.readouterr().out
    assert "hidden message" not in output
    assert "visible message" in output
    assert "[test_logger" in output


def test_debug_level_shows_everything(capsys, restore_level):
    logger.set_log_level("DEBUG")
    assert logger.get_log_level() == "debug"
    logger.log_debug("debug message", "test_logger")
    assert "debug message" in capsys.readouterr().out


def test_unknown_level_rejected():
    with pytest.raises(ValueError):
        logger.set_log_level("verbose")
