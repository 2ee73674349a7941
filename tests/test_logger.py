"""Tests for the measuretheory logger module."""

import logging

import jax.numpy as jnp

from measuretheory import For, Normal
from measuretheory.logger import MEASURETHEORY_LOGGER


def test_measuretheory_logger() -> None:
    """Test that the logger is created with the correct name."""
    assert MEASURETHEORY_LOGGER.name == "measuretheory"
    assert isinstance(MEASURETHEORY_LOGGER, logging.Logger)


def test_for_logs_index_source(caplog) -> None:
    """Building a product measure logs the index source at debug level."""
    with caplog.at_level(logging.DEBUG, logger="measuretheory"):
        For(Normal, jnp.zeros(2))
    assert "building product measure over ZippedArrays" in caplog.text
