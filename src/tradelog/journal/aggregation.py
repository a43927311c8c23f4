"""Category aggregation: win/loss/break-even breakdowns per dimension.

Groups a trade list by any dimension (direction, weekday, market, news
event, setup, liquidity, ...) and produces one statistics row per
distinct group value.  All dashboard breakdown cards are views over
:func:`aggregate_by_category`.

Usage::

    rows = aggregate_by_category(trades, by_direction)
    for row in rows:
        print(row.group_label, row.win_rate, row.win_rate_with_be)

Counting model
--------------
* Non-executed trades are skipped unless ``include_non_executed``.
* Non-BE trades count as ``wins`` / ``losses`` by ``trade_outcome``.
* BE trades count as ``be_wins`` / ``be_losses`` according to the
  :class:`BEResolution` strategy; a BE trade whose result cannot be
  attributed is tallied in ``unresolved_be`` and left out of ``total``.
* ``total = wins + losses + be_wins + be_losses``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from tradelog.core.enums import BEResolution, GroupSort, TradeOutcome
from tradelog.core.models import Trade, hhmm_to_minutes, is_local_high_low_liquidated

logger = logging.getLogger(__name__)

GroupKeyFn = Callable[[Trade], str | None]

NEWS_NO_EVENT_LABEL = "News (no event)"
DEFAULT_UNNAMED_LABEL = "Unnamed"
DEFAULT_GRADE_ORDER = ("A+", "A", "B", "C")


@dataclass(frozen=True)
class TimeInterval:
    label: str
    start: str  # "HH:MM", inclusive
    end: str    # "HH:MM", inclusive


# Full-day 4-hour buckets (includes night sessions)
TIME_INTERVALS: tuple[TimeInterval, ...] = (
    TimeInterval("00:00 – 03:59", "00:00", "03:59"),
    TimeInterval("04:00 – 07:59", "04:00", "07:59"),
    TimeInterval("08:00 – 11:59", "08:00", "11:59"),
    TimeInterval("12:00 – 15:59", "12:00", "15:59"),
    TimeInterval("16:00 – 19:59", "16:00", "19:59"),
    TimeInterval("20:00 – 23:59", "20:00", "23:59"),
)


# ================================================================== #
# Rows                                                                #
# ================================================================== #

@dataclass
class StatRow:
    """Statistics for one group value."""

    group_label: str
    wins: int = 0
    losses: int = 0
    be_wins: int = 0
    be_losses: int = 0
    total: int = 0
    win_rate: float = 0.0
    win_rate_with_be: float = 0.0
    unresolved_be: int = 0
    non_executed: int = 0

    @property
    def break_even(self) -> int:
        """All break-even trades in the group, attributed or not."""
        return self.be_wins + self.be_losses + self.unresolved_be

    def to_dict(self) -> dict:
        return {
            "group_label": self.group_label,
            "wins": self.wins,
            "losses": self.losses,
            "be_wins": self.be_wins,
            "be_losses": self.be_losses,
            "total": self.total,
            "win_rate": round(self.win_rate, 2),
            "win_rate_with_be": round(self.win_rate_with_be, 2),
            "unresolved_be": self.unresolved_be,
            "non_executed": self.non_executed,
        }


@dataclass
class NewsEventRow(StatRow):
    average_intensity: float | None = None

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["average_intensity"] = self.average_intensity
        return d


@dataclass
class MarketRow(StatRow):
    profit: float = 0.0
    pnl_percentage: float = 0.0

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["profit"] = round(self.profit, 2)
        d["pnl_percentage"] = round(self.pnl_percentage, 2)
        return d


# ================================================================== #
# Accumulator                                                         #
# ================================================================== #

def resolve_be_outcome(
    trade: Trade,
    be_resolution: BEResolution = BEResolution.FINAL_RESULT_FIELD,
) -> TradeOutcome | None:
    """Win/Lose attribution of a break-even trade, or None if unknown."""
    candidates = [trade.trade_outcome]
    if be_resolution == BEResolution.FINAL_RESULT_FIELD:
        candidates.insert(0, trade.be_final_result)
    for value in candidates:
        if value in (TradeOutcome.WIN, TradeOutcome.LOSE):
            return value
    return None


def _pct(numerator: int, denominator: int) -> float:
    return (numerator / denominator) * 100.0 if denominator > 0 else 0.0


@dataclass
class _GroupAccumulator:
    """Running tallies for one group."""

    label: str
    be_resolution: BEResolution
    include_non_executed: bool
    wins: int = 0
    losses: int = 0
    be_wins: int = 0
    be_losses: int = 0
    unresolved_be: int = 0
    non_executed: int = 0
    trades: list[Trade] = field(default_factory=list)

    def record(self, trade: Trade) -> None:
        if not trade.is_executed:
            self.non_executed += 1
            if not self.include_non_executed:
                return
        self.trades.append(trade)

        if trade.break_even:
            outcome = resolve_be_outcome(trade, self.be_resolution)
            if outcome == TradeOutcome.WIN:
                self.be_wins += 1
            elif outcome == TradeOutcome.LOSE:
                self.be_losses += 1
            else:
                self.unresolved_be += 1
        elif trade.trade_outcome == TradeOutcome.WIN:
            self.wins += 1
        elif trade.trade_outcome == TradeOutcome.LOSE:
            self.losses += 1

    def fill(self, row: StatRow) -> StatRow:
        row.wins = self.wins
        row.losses = self.losses
        row.be_wins = self.be_wins
        row.be_losses = self.be_losses
        row.total = self.wins + self.losses + self.be_wins + self.be_losses
        row.win_rate = _pct(self.wins, self.wins + self.losses)
        row.win_rate_with_be = _pct(self.wins + self.be_wins, row.total)
        row.unresolved_be = self.unresolved_be
        row.non_executed = self.non_executed
        return row

    def to_row(self) -> StatRow:
        return self.fill(StatRow(group_label=self.label))


def _sort_rows(rows: list, sort: GroupSort) -> list:
    if sort == GroupSort.ALPHABETICAL:
        return sorted(rows, key=lambda r: r.group_label.lower())
    if sort == GroupSort.TOTAL_DESC:
        return sorted(rows, key=lambda r: r.total, reverse=True)
    return rows


def _group(
    trades: Iterable[Trade],
    group_by: GroupKeyFn,
    *,
    include_unnamed: bool,
    intensity_filter: int | None,
    be_resolution: BEResolution,
    include_non_executed: bool,
    unnamed_label: str,
) -> dict[str, _GroupAccumulator]:
    groups: dict[str, _GroupAccumulator] = {}
    dropped = 0
    for trade in trades:
        if intensity_filter is not None and trade.news_intensity != intensity_filter:
            continue
        key = group_by(trade)
        key = key.strip() if isinstance(key, str) else key
        if not key:
            if not include_unnamed:
                dropped += 1
                continue
            key = unnamed_label
        acc = groups.get(key)
        if acc is None:
            acc = groups[key] = _GroupAccumulator(
                label=key,
                be_resolution=be_resolution,
                include_non_executed=include_non_executed,
            )
        acc.record(trade)
    if dropped:
        logger.debug("Dropped %d trades with no group key", dropped)
    return groups


# ================================================================== #
# Public API                                                          #
# ================================================================== #

def aggregate_by_category(
    trades: Iterable[Trade],
    group_by: GroupKeyFn,
    *,
    include_unnamed: bool = False,
    intensity_filter: int | None = None,
    be_resolution: BEResolution = BEResolution.FINAL_RESULT_FIELD,
    include_non_executed: bool = False,
    sort: GroupSort = GroupSort.INSERTION,
    unnamed_label: str = DEFAULT_UNNAMED_LABEL,
) -> list[StatRow]:
    """Group ``trades`` by ``group_by`` and compute one row per group.

    Parameters
    ----------
    trades : iterable of Trade
        Already filtered trade list.
    group_by : callable
        Key function returning the group label (``None``/``""`` for
        "no value").
    include_unnamed : bool
        Bucket keyless trades under ``unnamed_label`` instead of dropping.
    intensity_filter : int | None
        Keep only trades whose ``news_intensity`` equals this (1-3).
    be_resolution : BEResolution
        How break-even trades are attributed to win/loss.
    include_non_executed : bool
        Count trades with ``executed=False``.  Default False.
    sort : GroupSort
        Row order; default is first-occurrence order.

    Returns
    -------
    list[StatRow]
        Empty list for empty input.
    """
    groups = _group(
        trades,
        group_by,
        include_unnamed=include_unnamed,
        intensity_filter=intensity_filter,
        be_resolution=be_resolution,
        include_non_executed=include_non_executed,
        unnamed_label=unnamed_label,
    )
    rows = [acc.to_row() for acc in groups.values()]
    return _sort_rows(rows, sort)


def aggregate_news_events(
    trades: Iterable[Trade],
    *,
    include_unnamed: bool = False,
    intensity_filter: int | None = None,
    be_resolution: BEResolution = BEResolution.FINAL_RESULT_FIELD,
    include_non_executed: bool = False,
) -> list[NewsEventRow]:
    """Per-event statistics for news-related trades, busiest first.

    Trades marked as news without an event name land in the
    ``"News (no event)"`` bucket when ``include_unnamed`` is set.
    """
    news_trades = [t for t in trades if t.news_related]
    groups = _group(
        news_trades,
        by_news_event,
        include_unnamed=include_unnamed,
        intensity_filter=intensity_filter,
        be_resolution=be_resolution,
        include_non_executed=include_non_executed,
        unnamed_label=NEWS_NO_EVENT_LABEL,
    )
    rows: list[NewsEventRow] = []
    for label, acc in groups.items():
        row = acc.fill(NewsEventRow(group_label=label))
        if label != NEWS_NO_EVENT_LABEL:
            levels = [t.news_intensity for t in acc.trades if t.news_intensity in (1, 2, 3)]
            if levels:
                row.average_intensity = round(sum(levels) / len(levels), 1)
        rows.append(row)
    return _sort_rows(rows, GroupSort.TOTAL_DESC)


def aggregate_time_intervals(
    trades: Iterable[Trade],
    *,
    intervals: Sequence[TimeInterval] = TIME_INTERVALS,
    be_resolution: BEResolution = BEResolution.FINAL_RESULT_FIELD,
    include_non_executed: bool = False,
) -> list[StatRow]:
    """One row per interval in ``intervals`` order, empty intervals included."""
    rows = {
        r.group_label: r
        for r in aggregate_by_category(
            trades,
            lambda t: _interval_label(t.trade_time, intervals),
            be_resolution=be_resolution,
            include_non_executed=include_non_executed,
        )
    }
    return [rows.get(iv.label, StatRow(group_label=iv.label)) for iv in intervals]


def aggregate_evaluations(
    trades: Iterable[Trade],
    *,
    grade_order: Sequence[str] = DEFAULT_GRADE_ORDER,
    be_resolution: BEResolution = BEResolution.FINAL_RESULT_FIELD,
    include_non_executed: bool = False,
) -> list[StatRow]:
    """Rows for graded trades only, in ``grade_order``."""
    rows = {
        r.group_label: r
        for r in aggregate_by_category(
            trades,
            by_evaluation,
            be_resolution=be_resolution,
            include_non_executed=include_non_executed,
        )
    }
    return [rows[g] for g in grade_order if g in rows]


def aggregate_markets(
    trades: Iterable[Trade],
    account_balance: float = 0.0,
    *,
    be_resolution: BEResolution = BEResolution.FINAL_RESULT_FIELD,
    include_non_executed: bool = False,
) -> list[MarketRow]:
    """Per-market statistics with summed profit, busiest market first."""
    groups = _group(
        trades,
        by_market,
        include_unnamed=True,
        intensity_filter=None,
        be_resolution=be_resolution,
        include_non_executed=include_non_executed,
        unnamed_label="Unknown",
    )
    rows: list[MarketRow] = []
    for label, acc in groups.items():
        row = acc.fill(MarketRow(group_label=label))
        row.profit = sum(t.profit for t in acc.trades)
        row.pnl_percentage = (row.profit / account_balance) * 100.0 if account_balance > 0 else 0.0
        rows.append(row)
    return _sort_rows(rows, GroupSort.TOTAL_DESC)


def average_sl_size_by_market(trades: Iterable[Trade]) -> dict[str, float]:
    """Average stop-loss size per market, largest first; zero averages omitted."""
    sizes: dict[str, list[float]] = {}
    for t in trades:
        bucket = sizes.setdefault(t.market or "Unknown", [])
        if t.sl_size is not None:
            bucket.append(float(t.sl_size))
    averages = {m: sum(v) / len(v) for m, v in sizes.items() if v}
    averages = {m: avg for m, avg in averages.items() if avg > 0}
    return dict(sorted(averages.items(), key=lambda kv: kv[1], reverse=True))


# ================================================================== #
# Potential RR and 1.4R hits                                          #
# ================================================================== #

POTENTIAL_RR_RATIOS = (2.0, 2.5, 3.0)


@dataclass
class PotentialRRRow:
    """How one market fared at one potential RR level."""

    ratio: float
    market: str
    percentage: float = 0.0
    trades_with_ratio: int = 0
    total_trades: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0

    def to_dict(self) -> dict:
        return {
            "ratio": self.ratio,
            "market": self.market,
            "percentage": self.percentage,
            "trades_with_ratio": self.trades_with_ratio,
            "total_trades": self.total_trades,
            "wins": self.wins,
            "losses": self.losses,
            "win_rate": self.win_rate,
        }


def aggregate_potential_rr(
    trades: Iterable[Trade],
    ratios: Sequence[float] = POTENTIAL_RR_RATIOS,
) -> list[PotentialRRRow]:
    """Share of each market's trades whose potential RR landed on each ratio.

    Only markets with at least one trade at one of ``ratios`` appear.
    ``percentage`` is measured against the market's trades at any of
    ``ratios``; ``total_trades`` counts every trade in the market.  Rows
    come ratio by ratio, markets in first-seen order.  Percentages are
    rounded to one decimal.
    """
    trades = list(trades)
    qualifying = [t for t in trades if t.risk_reward_ratio_long in ratios]
    markets = list(dict.fromkeys(t.market for t in qualifying))

    rows: list[PotentialRRRow] = []
    for ratio in ratios:
        for market in markets:
            in_market = [t for t in qualifying if t.market == market]
            hit = [t for t in in_market if t.risk_reward_ratio_long == ratio]
            wins = sum(1 for t in hit if t.is_win)
            losses = sum(1 for t in hit if t.is_loss)
            rows.append(PotentialRRRow(
                ratio=ratio,
                market=market,
                percentage=round(_pct(len(hit), len(in_market)), 1),
                trades_with_ratio=len(hit),
                total_trades=sum(1 for t in trades if t.market == market),
                wins=wins,
                losses=losses,
                win_rate=round(_pct(wins, wins + losses), 1),
            ))
    return rows


def rr_hit_losses_by_market(trades: Iterable[Trade]) -> dict[str, int]:
    """Losing trades that had reached 1.4R, counted per market, most first."""
    counts: dict[str, int] = {}
    for t in trades:
        if t.is_loss and t.rr_hit_1_4:
            counts[t.market] = counts.get(t.market, 0) + 1
    return dict(sorted(counts.items(), key=lambda kv: kv[1], reverse=True))


# ================================================================== #
# Grouping keys                                                       #
# ================================================================== #

def by_direction(t: Trade) -> str:
    return t.direction.value


def by_weekday(t: Trade) -> str:
    return t.day_of_week


def by_market(t: Trade) -> str:
    return t.market


def by_news_event(t: Trade) -> str | None:
    return t.news_name if t.news_related else None


def by_news_flag(t: Trade) -> str:
    return "News" if t.news_related else "No News"


def by_setup(t: Trade) -> str | None:
    return t.setup_type


def by_liquidity(t: Trade) -> str | None:
    return t.liquidity


def by_mss(t: Trade) -> str:
    return t.mss or "Normal"


def by_trend(t: Trade) -> str | None:
    trend = (t.trend or "").strip()
    return trend if trend in ("Trend-following", "Counter-trend") else None


def by_local_high_low(t: Trade) -> str:
    return "liquidated" if is_local_high_low_liquidated(t.local_high_low) else "notLiquidated"


def by_reentry(t: Trade) -> str | None:
    return "ReEntry" if t.reentry else None


def by_launch_hour(t: Trade) -> str | None:
    return "Launch hour" if t.launch_hour else None


def by_evaluation(t: Trade) -> str | None:
    return t.evaluation.value if t.evaluation else None


def by_risk_per_trade(t: Trade) -> str | None:
    if t.risk_per_trade is None:
        return None
    return f"{float(t.risk_per_trade):g}%"


def by_time_interval(t: Trade) -> str | None:
    return _interval_label(t.trade_time, TIME_INTERVALS)


def _interval_label(trade_time: str, intervals: Sequence[TimeInterval]) -> str | None:
    t = hhmm_to_minutes(trade_time)
    for iv in intervals:
        if hhmm_to_minutes(iv.start) <= t <= hhmm_to_minutes(iv.end):
            return iv.label
    return None


GROUP_KEYS: dict[str, GroupKeyFn] = {
    "direction": by_direction,
    "weekday": by_weekday,
    "market": by_market,
    "news_event": by_news_event,
    "news": by_news_flag,
    "setup": by_setup,
    "liquidity": by_liquidity,
    "mss": by_mss,
    "trend": by_trend,
    "local_high_low": by_local_high_low,
    "evaluation": by_evaluation,
    "risk": by_risk_per_trade,
    "interval": by_time_interval,
    "reentry": by_reentry,
    "launch_hour": by_launch_hour,
}
