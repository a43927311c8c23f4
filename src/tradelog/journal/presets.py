"""Date-range presets: year, last 15 days, last 30 days, current month.

Presets are relative to "today", which is always injected (explicit
``today`` or an :class:`~tradelog.core.clock.IClock`).  Without either,
the wall clock is read at call time, so results change across midnight.

Usage::

    rng = resolve_date_preset("30days", today=date(2024, 3, 15))
    rng.start_date, rng.end_date       # 2024-02-15, 2024-03-15
    matches_preset(rng, today=date(2024, 3, 15))   # DatePreset.DAYS_30
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta

from pydantic import BaseModel, ConfigDict

from tradelog.core.clock import IClock, WallClock
from tradelog.core.enums import DatePreset
from tradelog.core.errors import UnknownPresetError

_WALL_CLOCK = WallClock()


class DateRange(BaseModel):
    """Inclusive calendar date range."""

    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date

    def iso(self) -> tuple[str, str]:
        """``(start, end)`` as ``yyyy-MM-dd`` strings."""
        return self.start_date.isoformat(), self.end_date.isoformat()

    def contains(self, d: date) -> bool:
        return self.start_date <= d <= self.end_date


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def end_of_month(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def _today(today: date | None, clock: IClock | None) -> date:
    if today is not None:
        return today
    return (clock or _WALL_CLOCK).today()


def _parse_preset(name: DatePreset | str) -> DatePreset:
    try:
        return DatePreset(name)
    except ValueError:
        raise UnknownPresetError(str(name)) from None


def resolve_date_preset(
    name: DatePreset | str,
    today: date | None = None,
    *,
    clock: IClock | None = None,
) -> DateRange:
    """Concrete range for preset ``name`` anchored on today.

    Raises
    ------
    UnknownPresetError
        ``name`` is not year/15days/30days/month.
    """
    preset = _parse_preset(name)
    now = _today(today, clock)
    if preset == DatePreset.YEAR:
        return DateRange(start_date=date(now.year, 1, 1), end_date=date(now.year, 12, 31))
    if preset == DatePreset.DAYS_15:
        return DateRange(start_date=now - timedelta(days=14), end_date=now)
    if preset == DatePreset.DAYS_30:
        return DateRange(start_date=now - timedelta(days=29), end_date=now)
    return DateRange(start_date=start_of_month(now), end_date=end_of_month(now))


def matches_preset(
    date_range: DateRange,
    today: date | None = None,
    *,
    clock: IClock | None = None,
) -> DatePreset | None:
    """The preset ``date_range`` equals today, or None for a custom range.

    Comparison is on ISO date strings.  When two presets resolve to the
    same range the first in year, 15days, 30days, month order wins.
    """
    now = _today(today, clock)
    target = date_range.iso()
    for preset in DatePreset:
        if resolve_date_preset(preset, now).iso() == target:
            return preset
    return None


def is_custom_date_range(
    date_range: DateRange,
    today: date | None = None,
    *,
    clock: IClock | None = None,
) -> bool:
    return matches_preset(date_range, today, clock=clock) is None


def initial_date_range(today: date | None = None, *, clock: IClock | None = None) -> DateRange:
    """Default dashboard range: the last 30 days."""
    return resolve_date_preset(DatePreset.DAYS_30, today, clock=clock)


def calendar_range_from_end(end: date) -> DateRange:
    """Whole calendar month containing ``end``."""
    return DateRange(start_date=start_of_month(end), end_date=end_of_month(end))
