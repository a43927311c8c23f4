"""Scalar performance metrics over a trade list.

Profit factor, Trade Quality Index (TQI), average days between trades,
win rates, streaks, total R and Sharpe.  Every function is total: empty
input and zero denominators return a sentinel (0.0 or NaN) instead of
raising.

Usage::

    pf = compute_profit_factor(trades)
    tqi = compute_trade_quality_index(trades)
    print(tqi_band(tqi))                      # TQIBand.STRONG
    print(format_average_days(compute_average_days_between_trades(trades)))
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np

from tradelog.core.enums import TQIBand, TradeOutcome
from tradelog.core.models import Trade, hhmm_to_minutes

logger = logging.getLogger(__name__)

PROFIT_FACTOR_DISPLAY_CAP = 5.0
EM_DASH = "—"

# Lower bound of each band, highest first
_TQI_BANDS: list[tuple[float, TQIBand]] = [
    (0.55, TQIBand.EXCEPTIONAL),
    (0.40, TQIBand.STRONG),
    (0.30, TQIBand.MODERATE),
    (0.20, TQIBand.DEVELOPING),
]


# ================================================================== #
# Profit factor                                                       #
# ================================================================== #

def profit_factor_from_rollup(gross_profit: float, gross_loss: float) -> float:
    """Profit factor from pre-aggregated sums; 0 when there is no loss."""
    gross_loss = abs(gross_loss)
    if gross_loss <= 0:
        return 0.0
    return gross_profit / gross_loss


def compute_profit_factor(trades: Sequence[Trade]) -> float:
    """Gross profit / gross loss over the non-BE trades in ``trades``.

    Break-even trades carry zero profit and are excluded from both sums.
    Execution status is not checked here; narrow the list with
    :func:`~tradelog.journal.filters.apply_filters` first.
    Returns 0.0 when there is no negative profit to divide by.
    """
    gross_profit = 0.0
    gross_loss = 0.0
    for t in trades:
        if t.break_even:
            continue
        p = t.profit
        if p > 0:
            gross_profit += p
        elif p < 0:
            gross_loss += -p
    return profit_factor_from_rollup(gross_profit, gross_loss)


def profit_factor_display(value: float, cap: float = PROFIT_FACTOR_DISPLAY_CAP) -> float:
    """Profit factor clamped to ``[0, cap]`` for gauges and charts."""
    if math.isnan(value):
        return 0.0
    return max(0.0, min(value, cap))


# ================================================================== #
# Trade Quality Index                                                 #
# ================================================================== #

class TradeQualityScorer(Protocol):
    """Pluggable TQI scoring function."""

    def score(self, trades: Sequence[Trade]) -> float:
        """Return a bounded quality score for ``trades``."""
        ...


class WinRateStabilityScorer:
    """TQI = win rate x R stability.

    * win rate = wins / trades, BE trades counted in the denominator only
    * R stability = 1 / (1 + population stdev of per-trade R)
    * per-trade R: win = +risk_reward_ratio, loss = -1, BE = 0

    Result is in ``[0, 1]``.  Every trade passed in is scored; execution
    filtering happens upstream.
    """

    version = "1"

    def score(self, trades: Sequence[Trade]) -> float:
        r_values: list[float] = []
        wins = 0
        for t in trades:
            if t.break_even:
                r_values.append(0.0)
            elif t.trade_outcome == TradeOutcome.WIN:
                r_values.append(t.rr)
                wins += 1
            elif t.trade_outcome == TradeOutcome.LOSE:
                r_values.append(-1.0)
        if not r_values:
            return 0.0
        win_rate = wins / len(r_values)
        stability = 1.0 / (1.0 + float(np.std(r_values)))
        return win_rate * stability


DEFAULT_TQI_SCORER: TradeQualityScorer = WinRateStabilityScorer()


def compute_trade_quality_index(
    trades: Sequence[Trade],
    scorer: TradeQualityScorer | None = None,
) -> float:
    """Score ``trades`` with ``scorer`` (default :class:`WinRateStabilityScorer`)."""
    return (scorer or DEFAULT_TQI_SCORER).score(trades)


def tqi_band(value: float) -> TQIBand:
    """Map a TQI value to its display band."""
    for threshold, band in _TQI_BANDS:
        if value >= threshold:
            return band
    return TQIBand.NEEDS_DEVELOPMENT


# ================================================================== #
# Trade spacing                                                       #
# ================================================================== #

def compute_average_days_between_trades(trades: Sequence[Trade]) -> float:
    """Mean gap in days between consecutive distinct trade dates.

    NaN when fewer than two distinct dates exist.
    """
    dates = sorted({t.trade_date for t in trades})
    if len(dates) < 2:
        return float("nan")
    gaps = [(b - a).days for a, b in zip(dates, dates[1:])]
    return sum(gaps) / len(gaps)


def format_average_days(value: float) -> str:
    """One decimal, or an em-dash when undefined."""
    if value is None or math.isnan(value):
        return EM_DASH
    return f"{value:.1f}"


# ================================================================== #
# Win rates / streaks / R                                             #
# ================================================================== #

@dataclass
class WinRates:
    win_rate: float = 0.0          # non-BE trades only
    win_rate_with_be: float = 0.0  # every trade in the denominator


def compute_win_rates(trades: Sequence[Trade]) -> WinRates:
    """Both win-rate flavours, as percentages."""
    non_be_wins = sum(1 for t in trades if not t.break_even and t.is_win)
    non_be_losses = sum(1 for t in trades if not t.break_even and t.is_loss)
    all_wins = sum(1 for t in trades if t.is_win)
    denom = non_be_wins + non_be_losses
    return WinRates(
        win_rate=(non_be_wins / denom) * 100.0 if denom else 0.0,
        win_rate_with_be=(all_wins / len(trades)) * 100.0 if trades else 0.0,
    )


@dataclass
class StreakStats:
    current_streak: int = 0  # positive = wins, negative = losses
    max_winning_streak: int = 0
    max_losing_streak: int = 0


def compute_streaks(trades: Sequence[Trade]) -> StreakStats:
    """Win/loss streaks in chronological order; BE trades are skipped."""
    stats = StreakStats()
    win_run = loss_run = 0
    for t in sorted(trades, key=lambda t: (t.trade_date, hhmm_to_minutes(t.trade_time))):
        if t.break_even:
            continue
        if t.is_win:
            stats.current_streak = stats.current_streak + 1 if stats.current_streak >= 0 else 1
            win_run += 1
            loss_run = 0
            stats.max_winning_streak = max(stats.max_winning_streak, win_run)
        elif t.is_loss:
            stats.current_streak = stats.current_streak - 1 if stats.current_streak <= 0 else -1
            loss_run += 1
            win_run = 0
            stats.max_losing_streak = max(stats.max_losing_streak, loss_run)
    return stats


def compute_total_r_multiple(trades: Sequence[Trade]) -> float:
    """Sum of R: +RR per win, -1 per loss, 0 per BE."""
    total = 0.0
    for t in trades:
        if t.break_even:
            continue
        if t.is_win:
            total += t.rr
        elif t.is_loss:
            total -= 1.0
    return total


def compute_sharpe(returns: Sequence[float]) -> float:
    """Sample Sharpe (mean / stdev with n-1); 0 with fewer than two points."""
    if len(returns) < 2:
        return 0.0
    std = float(np.std(returns, ddof=1))
    if std <= 0:
        return 0.0
    return float(np.mean(returns)) / std


def compute_consistency_score(monthly_profit: dict[str, float]) -> float:
    """Percentage of months that closed in profit."""
    if not monthly_profit:
        return 0.0
    profitable = sum(1 for p in monthly_profit.values() if (p or 0) > 0)
    return (profitable / len(monthly_profit)) * 100.0
