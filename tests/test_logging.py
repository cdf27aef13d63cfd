"""Tests for logging utilities."""

import logging
from io import StringIO

from shiftedprox.logging import (
    configure_logging,
    get_logger,
    set_log_level,
)


def test_get_logger_returns_logger():
    """Test that get_logger returns a namespaced logger instance."""
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "shiftedprox.test_module"


def test_get_logger_keeps_package_names():
    assert get_logger("shiftedprox.shifted.secular").name == "shiftedprox.shifted.secular"
    assert get_logger().name == "shiftedprox"


def test_get_logger_caching():
    """Test that get_logger caches loggers."""
    assert get_logger("test_module") is get_logger("test_module")


def test_get_logger_different_modules():
    """Test that different modules get different loggers."""
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")
    assert logger1 is not logger2
    assert logger1.name != logger2.name


def test_set_log_level_string():
    """Test that set_log_level accepts string levels."""
    logger = get_logger("test_module")

    set_log_level("DEBUG")
    assert logger.level == logging.DEBUG

    set_log_level("ERROR")
    assert logger.level == logging.ERROR

    set_log_level(logging.WARNING)
    assert logger.level == logging.WARNING


def test_configure_logging():
    """Test configure_logging redirects output."""
    stream = StringIO()
    configure_logging(level=logging.DEBUG, stream=stream)
    try:
        logger = get_logger("test_module")
        logger.debug("Debug message")
        assert "[DEBUG] shiftedprox.test_module: Debug message" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING)


def test_solver_debug_trace_is_emitted():
    import numpy as np

    from shiftedprox import ShiftedCompositeNormL2, prox

    def c(out, x):
        out[:] = 0.0

    def J(out, x):
        out[:] = np.eye(2)

    stream = StringIO()
    configure_logging(level="DEBUG", stream=stream)
    try:
        psi = ShiftedCompositeNormL2(1.0, c, J, np.eye(2), np.zeros(2))
        prox(np.empty(2), psi, np.array([2.0, 0.0]), 1.0)
        assert "iteration 1: alpha" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING)


def test_logger_does_not_propagate():
    """Test that loggers don't propagate to root logger."""
    assert get_logger("test_module").propagate is False
