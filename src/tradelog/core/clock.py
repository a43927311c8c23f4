"""Clock abstraction for date-dependent code.

WallClock: real local date (CLI and interactive use)
FixedClock: pinned date (tests, reproducible reports)

Preset resolution never calls date.today() directly; it takes a clock
or an explicit date.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol


class IClock(Protocol):
    """Clock interface used by all date-dependent code."""

    def today(self) -> date:
        """Current calendar date."""
        ...


class WallClock:
    """Real wall-clock date, evaluated at call time."""

    def today(self) -> date:
        return datetime.now().date()


class FixedClock:
    """Clock pinned to a given date.

    The date only changes when explicitly set.
    """

    def __init__(self, current: date | None = None) -> None:
        self._date = current or date(2024, 1, 1)

    def today(self) -> date:
        return self._date

    def set_date(self, d: date) -> None:
        self._date = d
