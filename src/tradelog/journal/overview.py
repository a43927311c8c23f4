"""Dashboard-level rollups built from the primitives in ``metrics``.

* :func:`compute_trading_overview`: headline counters and streaks
* :func:`compute_macro_stats`: profit factor, consistency, Sharpe, TQI
* :func:`compute_monthly_stats`: per-month P&L with best/worst month
* :func:`compute_partial_trades_stats`: trades where partials were taken
* :func:`compute_profit_stats`: risk-model profit and max drawdown
* :func:`compute_trade_counts`: win/loss counts with the BE share
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from typing import Sequence

from tradelog.core.enums import BEResolution, TradeOutcome
from tradelog.core.models import Trade

from .aggregation import resolve_be_outcome
from .metrics import (
    TradeQualityScorer,
    compute_average_days_between_trades,
    compute_sharpe,
    compute_streaks,
    compute_total_r_multiple,
    compute_trade_quality_index,
    profit_factor_from_rollup,
)

logger = logging.getLogger(__name__)

# Fallbacks when a trade has no risk recorded
DEFAULT_RISK_PCT = 0.5
DEFAULT_RR = 2.0


def _pct(numerator: int, denominator: int) -> float:
    return (numerator / denominator) * 100.0 if denominator > 0 else 0.0


def _risk_reward_amounts(trade: Trade, account_balance: float) -> tuple[float, float]:
    """``(risk_amount, reward_amount)`` in account currency."""
    risk_pct = trade.risk_per_trade if trade.risk_per_trade is not None else DEFAULT_RISK_PCT
    rr = trade.risk_reward_ratio if trade.risk_reward_ratio is not None else DEFAULT_RR
    risk_amount = account_balance * (risk_pct / 100.0)
    return risk_amount, risk_amount * rr


def _risk_pnl(trade: Trade, account_balance: float) -> float:
    """Currency P&L implied by the trade's risk and RR."""
    risk_amount, reward_amount = _risk_reward_amounts(trade, account_balance)
    return reward_amount if trade.is_win else -risk_amount


def _is_real_trade(trade: Trade) -> bool:
    """Non-BE, or BE where partials were banked."""
    return not trade.break_even or trade.partials_taken


# ================================================================== #
# Overview                                                            #
# ================================================================== #

@dataclass
class TradingOverview:
    total_trades: int = 0
    total_wins: int = 0
    total_losses: int = 0
    wins: int = 0
    losses: int = 0
    be_wins: int = 0
    be_losses: int = 0
    total_profit: float = 0.0
    average_profit: float = 0.0
    win_rate: float = 0.0
    win_rate_with_be: float = 0.0
    current_streak: int = 0
    max_winning_streak: int = 0
    max_losing_streak: int = 0
    average_days_between_trades: float = float("nan")


def compute_trading_overview(
    trades: Sequence[Trade],
    *,
    be_resolution: BEResolution = BEResolution.FINAL_RESULT_FIELD,
) -> TradingOverview:
    """Headline numbers for the overview card."""
    non_be = [t for t in trades if not t.break_even]
    be = [t for t in trades if t.break_even]

    wins = sum(1 for t in non_be if t.is_win)
    losses = sum(1 for t in non_be if t.is_loss)
    be_outcomes = [resolve_be_outcome(t, be_resolution) for t in be]
    be_wins = be_outcomes.count(TradeOutcome.WIN)
    be_losses = be_outcomes.count(TradeOutcome.LOSE)

    total_profit = sum(t.profit for t in trades)
    streaks = compute_streaks(non_be)

    return TradingOverview(
        total_trades=len(trades),
        total_wins=wins + be_wins,
        total_losses=losses + be_losses,
        wins=wins,
        losses=losses,
        be_wins=be_wins,
        be_losses=be_losses,
        total_profit=total_profit,
        average_profit=total_profit / len(trades) if trades else 0.0,
        win_rate=_pct(wins, wins + losses),
        win_rate_with_be=_pct(wins + be_wins, wins + losses + be_wins + be_losses),
        current_streak=streaks.current_streak,
        max_winning_streak=streaks.max_winning_streak,
        max_losing_streak=streaks.max_losing_streak,
        average_days_between_trades=compute_average_days_between_trades(trades),
    )


# ================================================================== #
# Macro stats                                                         #
# ================================================================== #

@dataclass
class MacroStats:
    profit_factor: float = 0.0
    consistency_score: float = 0.0          # per trade, excluding pure BE
    consistency_score_with_be: float = 0.0  # share of green days
    sharpe_with_be: float = 0.0
    trade_quality_index: float = 0.0
    multiple_r: float = 0.0


def compute_macro_stats(
    trades: Sequence[Trade],
    account_balance: float,
    *,
    scorer: TradeQualityScorer | None = None,
) -> MacroStats:
    """Risk-model based macro statistics.

    P&L here is derived from ``risk_per_trade`` and ``risk_reward_ratio``
    (falling back to 0.5% and 2R), not from ``calculated_profit``.  A BE
    trade with partials taken adds its reward to gross profit and counts
    as profitable for consistency; a pure BE trade is 0.
    """
    gross_profit = 0.0
    gross_loss = 0.0
    daily_pnl: dict[str, float] = {}
    returns: list[float] = []

    for t in trades:
        day = t.trade_date.isoformat()
        pnl = _risk_pnl(t, account_balance) if _is_real_trade(t) else 0.0
        if not t.break_even:
            if t.is_win:
                gross_profit += pnl
            else:
                gross_loss += -pnl
        elif t.partials_taken:
            # banked partials always count toward gross profit
            gross_profit += _risk_reward_amounts(t, account_balance)[1]
        daily_pnl[day] = daily_pnl.get(day, 0.0) + pnl
        returns.append(pnl)

    real = [t for t in trades if _is_real_trade(t)]
    profitable = [t for t in real if t.break_even or t.is_win]
    green_days = sum(1 for v in daily_pnl.values() if v > 0)

    return MacroStats(
        profit_factor=profit_factor_from_rollup(gross_profit, gross_loss),
        consistency_score=_pct(len(profitable), len(real)),
        consistency_score_with_be=_pct(green_days, len(daily_pnl)),
        sharpe_with_be=compute_sharpe(returns),
        trade_quality_index=compute_trade_quality_index(trades, scorer),
        multiple_r=compute_total_r_multiple(trades),
    )


# ================================================================== #
# Monthly                                                             #
# ================================================================== #

@dataclass
class MonthlyStats:
    wins: int = 0
    losses: int = 0
    be_wins: int = 0
    be_losses: int = 0
    profit: float = 0.0
    win_rate: float = 0.0
    win_rate_with_be: float = 0.0


@dataclass
class MonthlyStatsResult:
    monthly_data: dict[str, MonthlyStats] = field(default_factory=dict)
    best_month: str | None = None
    worst_month: str | None = None


def compute_monthly_stats(
    trades: Sequence[Trade],
    year: int,
    account_balance: float,
) -> MonthlyStatsResult:
    """Per-month statistics for ``year``, keyed by English month name.

    ``wins``/``losses`` include BE trades by outcome; ``be_wins`` and
    ``be_losses`` break those out.  Profit uses the risk model and skips
    BE trades.  Best/worst month consider months with at least one trade.
    """
    raw: dict[int, dict] = {}
    for t in trades:
        if t.trade_date.year != year:
            continue
        b = raw.setdefault(
            t.trade_date.month,
            {"stats": MonthlyStats(), "total": 0, "all_wins": 0, "non_be": 0, "non_be_wins": 0},
        )
        stats: MonthlyStats = b["stats"]
        b["total"] += 1
        if t.is_win:
            stats.wins += 1
            b["all_wins"] += 1
            if t.break_even:
                stats.be_wins += 1
        elif t.is_loss:
            stats.losses += 1
            if t.break_even:
                stats.be_losses += 1
        if not t.break_even:
            b["non_be"] += 1
            if t.is_win:
                b["non_be_wins"] += 1
            stats.profit += _risk_pnl(t, account_balance)

    result = MonthlyStatsResult()
    best: tuple[str, float] | None = None
    worst: tuple[str, float] | None = None
    for month in sorted(raw):
        b = raw[month]
        stats = b["stats"]
        stats.win_rate = _pct(b["non_be_wins"], b["non_be"])
        stats.win_rate_with_be = _pct(b["all_wins"], b["total"])
        name = calendar.month_name[month]
        result.monthly_data[name] = stats
        if stats.wins + stats.losses > 0:
            if best is None or stats.profit > best[1]:
                best = (name, stats.profit)
            if worst is None or stats.profit < worst[1]:
                worst = (name, stats.profit)

    result.best_month = best[0] if best else None
    result.worst_month = worst[0] if worst else None
    return result


# ================================================================== #
# Partials                                                            #
# ================================================================== #

@dataclass
class PartialTradesStats:
    partial_wins: int = 0
    partial_losses: int = 0
    be_win_partials: int = 0
    be_loss_partials: int = 0
    neutral_be_partials: int = 0
    partial_win_rate: float = 0.0
    partial_win_rate_with_be: float = 0.0

    @property
    def total(self) -> int:
        return (
            self.partial_wins + self.partial_losses
            + self.be_win_partials + self.be_loss_partials + self.neutral_be_partials
        )

    @property
    def total_be(self) -> int:
        return self.be_win_partials + self.be_loss_partials + self.neutral_be_partials


def compute_partial_trades_stats(
    trades: Sequence[Trade],
    *,
    be_resolution: BEResolution = BEResolution.FINAL_RESULT_FIELD,
) -> PartialTradesStats:
    """Statistics over trades where partial profits were taken."""
    s = PartialTradesStats()
    for t in trades:
        if not t.partials_taken:
            continue
        if t.break_even:
            outcome = resolve_be_outcome(t, be_resolution)
            if outcome == TradeOutcome.WIN:
                s.be_win_partials += 1
            elif outcome == TradeOutcome.LOSE:
                s.be_loss_partials += 1
            else:
                s.neutral_be_partials += 1
        elif t.is_win:
            s.partial_wins += 1
        elif t.is_loss:
            s.partial_losses += 1

    s.partial_win_rate = _pct(s.partial_wins, s.partial_wins + s.partial_losses)
    s.partial_win_rate_with_be = _pct(
        s.partial_wins + s.be_win_partials,
        s.partial_wins + s.partial_losses + s.be_win_partials + s.be_loss_partials,
    )
    return s


# ================================================================== #
# Profit and drawdown                                                 #
# ================================================================== #

@dataclass
class ProfitStats:
    total_profit: float = 0.0
    average_profit: float = 0.0
    average_pnl_percentage: float = 0.0
    max_drawdown: float = 0.0  # percent


def compute_profit_stats(trades: Sequence[Trade], account_balance: float) -> ProfitStats:
    """Risk-model profit over non-BE trades, plus the worst drawdown.

    Totals size every trade against the starting balance.  The drawdown
    walk compounds instead: each trade risks its percentage of the
    running balance.  The peak starts at zero, so the first trade sets
    it and a loss on that first trade is not a drawdown.
    """
    ordered = sorted((t for t in trades if not t.break_even), key=lambda t: t.trade_date)

    total = 0.0
    running = account_balance
    peak = 0.0
    max_drawdown = 0.0
    for t in ordered:
        total += _risk_pnl(t, account_balance)
        running += _risk_pnl(t, running)
        peak = max(peak, running)
        if peak > 0:
            max_drawdown = max(max_drawdown, (peak - running) / peak * 100.0)

    return ProfitStats(
        total_profit=total,
        average_profit=total / len(ordered) if ordered else 0.0,
        average_pnl_percentage=(total / account_balance) * 100.0 if account_balance > 0 else 0.0,
        max_drawdown=max_drawdown,
    )


# ================================================================== #
# Trade counts                                                        #
# ================================================================== #

@dataclass
class TradeCounts:
    total_trades: int = 0
    total_wins: int = 0   # BE wins included
    be_wins: int = 0
    total_losses: int = 0  # BE losses included
    be_losses: int = 0


def compute_trade_counts(trades: Sequence[Trade]) -> TradeCounts:
    """Count wins and losses by ``trade_outcome``, noting how many were BE."""
    c = TradeCounts(total_trades=len(trades))
    for t in trades:
        if t.is_win:
            c.total_wins += 1
            if t.break_even:
                c.be_wins += 1
        elif t.is_loss:
            c.total_losses += 1
            if t.break_even:
                c.be_losses += 1
    return c
