"""Shared fixtures for the tradelog test suite."""

from __future__ import annotations

import logging
from datetime import date

import pytest

from tradelog.core.clock import FixedClock


@pytest.fixture
def fixed_clock():
    """Clock pinned to 2024-03-15."""
    return FixedClock(date(2024, 3, 15))


@pytest.fixture(autouse=True)
def _drop_log_handler():
    """Remove the root handler setup_logging installs; its stream dies with the test."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if handler.get_name() == "tradelog":
            root.removeHandler(handler)
