"""Calendar bucketing for the monthly trade calendar.

For a month and a trade list produces one :class:`DayBucket` per
calendar day and four :class:`WeekBucket` slices.  The slices are not
calendar weeks: the month is cut into exactly four contiguous ranges of
``floor(days / 4)`` days, the first ``days % 4`` ranges getting one
extra day (31 days -> 8, 8, 8, 7).

Also answers month-navigation questions ("is there an earlier month
with trades inside the selected range?").

Usage::

    month = bucketize_calendar_month(trades, date(2024, 3, 1), account_balance=10_000)
    for week in month.weeks:
        print(week.week_label, week.wins, week.losses, week.pnl_percent)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Literal, Sequence

from tradelog.core.clock import WallClock
from tradelog.core.enums import BEResolution, DayColor, TradeOutcome
from tradelog.core.models import Trade

from .aggregation import resolve_be_outcome
from .presets import DateRange, end_of_month, start_of_month

logger = logging.getLogger(__name__)

NavDirection = Literal["prev", "next"]


# ================================================================== #
# Month geometry                                                      #
# ================================================================== #

def days_in_month(d: date) -> list[date]:
    """Every date of the month containing ``d``."""
    first = start_of_month(d)
    n = end_of_month(d).day
    return [first + timedelta(days=i) for i in range(n)]


def split_month_into_four_ranges(d: date) -> list[list[date]]:
    """Four contiguous day ranges covering the month of ``d``."""
    days = days_in_month(d)
    base, remainder = divmod(len(days), 4)
    ranges: list[list[date]] = []
    idx = 0
    for i in range(4):
        size = base + (1 if i < remainder else 0)
        ranges.append(days[idx:idx + size])
        idx += size
    return ranges


def _short_label(d: date) -> str:
    return f"{d.day} {d.strftime('%b')}"


# ================================================================== #
# Buckets                                                             #
# ================================================================== #

@dataclass
class WeekBucket:
    total_profit: float
    wins: int
    losses: int
    be_count: int
    week_label: str
    pnl_percent: float
    index: int


@dataclass
class DayBucket:
    day: date
    trades: list[Trade] = field(default_factory=list)
    real_trade_count: int = 0  # non-BE plus BE with partials
    be_count: int = 0
    profit: float = 0.0        # pure BE excluded
    pnl_percent: float = 0.0   # sum of pnl_percentage, pure BE excluded
    color: DayColor = DayColor.NEUTRAL

    @property
    def trade_count(self) -> int:
        return len(self.trades)

    @property
    def has_be(self) -> bool:
        return self.be_count > 0


@dataclass
class CalendarMonth:
    month: date
    days: list[DayBucket]
    weeks: list[WeekBucket]


def _trades_by_day(
    trades: Sequence[Trade],
    market: str | None,
    include_non_executed: bool,
) -> dict[date, list[Trade]]:
    by_day: dict[date, list[Trade]] = defaultdict(list)
    for t in trades:
        if market not in (None, "all") and t.market != market:
            continue
        if not include_non_executed and not t.is_executed:
            continue
        by_day[t.trade_date].append(t)
    return by_day


def build_weekly_stats(
    month: date,
    trades: Sequence[Trade],
    account_balance: float | None = None,
    *,
    market: str | None = None,
    include_non_executed: bool = False,
) -> list[WeekBucket]:
    """Four week slices with wins/losses/profit from non-BE trades.

    ``pnl_percent`` is profit over ``account_balance`` in percent, 0 when
    the balance is missing or not positive.
    """
    by_day = _trades_by_day(trades, market, include_non_executed)
    has_balance = account_balance is not None and account_balance > 0
    weeks: list[WeekBucket] = []
    for idx, days in enumerate(split_month_into_four_ranges(month)):
        week_trades = [t for d in days for t in by_day.get(d, ())]
        non_be = [t for t in week_trades if not t.break_even]
        total_profit = sum(t.profit for t in non_be)
        weeks.append(WeekBucket(
            total_profit=total_profit,
            wins=sum(1 for t in non_be if t.is_win),
            losses=sum(1 for t in non_be if t.is_loss),
            be_count=len(week_trades) - len(non_be),
            week_label=f"{_short_label(days[0])} - {_short_label(days[-1])}",
            pnl_percent=(total_profit / account_balance) * 100.0 if has_balance else 0.0,
            index=idx,
        ))
    return weeks


def _day_color(profit: float, be_trades: list[Trade], be_resolution: BEResolution) -> DayColor:
    if profit > 0:
        return DayColor.GREEN
    if profit < 0:
        return DayColor.RED
    if be_trades:
        outcome = resolve_be_outcome(be_trades[0], be_resolution)
        if outcome == TradeOutcome.WIN:
            return DayColor.GREEN
        if outcome == TradeOutcome.LOSE:
            return DayColor.RED
    return DayColor.NEUTRAL


def build_day_buckets(
    month: date,
    trades: Sequence[Trade],
    *,
    market: str | None = None,
    include_non_executed: bool = False,
    be_resolution: BEResolution = BEResolution.OUTCOME_FIELD,
) -> list[DayBucket]:
    """One bucket per calendar day of ``month``, empty days included."""
    by_day = _trades_by_day(trades, market, include_non_executed)
    buckets: list[DayBucket] = []
    for d in days_in_month(month):
        day_trades = by_day.get(d, [])
        non_be = [t for t in day_trades if not t.break_even]
        be = [t for t in day_trades if t.break_even]
        profit = sum(t.profit for t in non_be)
        buckets.append(DayBucket(
            day=d,
            trades=list(day_trades),
            real_trade_count=len(non_be) + sum(1 for t in be if t.partials_taken),
            be_count=len(be),
            profit=profit,
            pnl_percent=sum(t.pnl_pct for t in non_be),
            color=_day_color(profit, be, be_resolution),
        ))
    return buckets


def bucketize_calendar_month(
    trades: Sequence[Trade],
    month: date,
    account_balance: float | None = None,
    *,
    market: str | None = None,
    include_non_executed: bool = False,
    be_resolution: BEResolution = BEResolution.OUTCOME_FIELD,
) -> CalendarMonth:
    """Day buckets and the four week slices for the month of ``month``."""
    logger.debug("Bucketizing %s: %d trades", start_of_month(month).isoformat(), len(trades))
    return CalendarMonth(
        month=start_of_month(month),
        days=build_day_buckets(
            month, trades,
            market=market,
            include_non_executed=include_non_executed,
            be_resolution=be_resolution,
        ),
        weeks=build_weekly_stats(
            month, trades, account_balance,
            market=market,
            include_non_executed=include_non_executed,
        ),
    )


# ================================================================== #
# Navigation                                                          #
# ================================================================== #

def months_with_trades(
    trades: Sequence[Trade],
    *,
    year: int | None = None,
    date_range: DateRange | None = None,
) -> list[date]:
    """First-of-month dates that hold at least one trade, ascending.

    Restricted to ``year`` and/or ``date_range`` when given.
    """
    months: set[date] = set()
    for t in trades:
        if year is not None and t.trade_date.year != year:
            continue
        if date_range is not None and not date_range.contains(t.trade_date):
            continue
        months.add(start_of_month(t.trade_date))
    return sorted(months)


def navigate_month(
    current: date,
    direction: NavDirection,
    trades: Sequence[Trade],
    *,
    year: int | None = None,
    date_range: DateRange | None = None,
) -> date | None:
    """Nearest earlier/later month with trades, or None if there is none.

    In yearly mode (``year`` given) navigation is only possible while the
    calendar shows that year.
    """
    if year is not None and current.year != year:
        return None
    here = start_of_month(current)
    candidates = months_with_trades(trades, year=year, date_range=date_range)
    if direction == "prev":
        earlier = [m for m in candidates if m < here]
        return earlier[-1] if earlier else None
    later = [m for m in candidates if m > here]
    return later[0] if later else None


def can_navigate_month(
    current: date,
    direction: NavDirection,
    trades: Sequence[Trade],
    *,
    year: int | None = None,
    date_range: DateRange | None = None,
) -> bool:
    return navigate_month(current, direction, trades, year=year, date_range=date_range) is not None


def initial_calendar_month(
    trades: Sequence[Trade],
    *,
    year: int | None = None,
    date_range: DateRange | None = None,
    today: date | None = None,
) -> date:
    """Earliest month with trades; otherwise January of ``year``, the range
    start, or the current month."""
    months = months_with_trades(trades, year=year, date_range=date_range)
    if months:
        return months[0]
    if date_range is not None:
        return start_of_month(date_range.start_date)
    if year is not None:
        return date(year, 1, 1)
    return start_of_month(today or WallClock().today())
