"""Pytest configuration and shared fixtures for shiftedprox tests.

This module provides:
- Deterministic RNG fixtures for numpy
- A fixture capturing shiftedprox log output
"""

import logging
import os
from io import StringIO
from typing import Generator

import numpy as np
import pytest

from shiftedprox.logging import configure_logging


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Set the legacy numpy global seed for every test."""
    np.random.seed(int(os.environ.get("TEST_RNG_SEED", "0")))


@pytest.fixture(scope="function")
def log_stream() -> Generator[StringIO, None, None]:
    """Route shiftedprox warnings into a StringIO for the duration of a test."""
    stream = StringIO()
    configure_logging(level=logging.WARNING, stream=stream)
    try:
        yield stream
    finally:
        configure_logging(level=logging.WARNING)


@pytest.fixture(scope="function")
def quadratic_constraint():
    """Constraint ``c(x) = [x0^2 + x1 - 1, x0 x2, sin(x1)]`` and its Jacobian."""

    def c(out: np.ndarray, x: np.ndarray) -> None:
        out[0] = x[0] ** 2 + x[1] - 1.0
        out[1] = x[0] * x[2]
        out[2] = np.sin(x[1])

    def J(out: np.ndarray, x: np.ndarray) -> None:
        out[...] = 0.0
        out[0, 0] = 2.0 * x[0]
        out[0, 1] = 1.0
        out[1, 0] = x[2]
        out[1, 2] = x[0]
        out[2, 1] = np.cos(x[1])

    return c, J
