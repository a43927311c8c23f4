"""Trade Journal statistics: aggregation over logged discretionary trades.

Consumes lists of already-fetched trade records and produces the
numbers behind every dashboard card.

Key components
--------------
**Filtering**

FilterState           Immutable description of the active filters
apply_filters         Narrow a trade list before aggregation

**Aggregation & Metrics**

aggregate_by_category       Win/loss/BE breakdown per dimension
compute_profit_factor       Gross profit / gross loss
compute_trade_quality_index Pluggable TQI scorer
compute_average_days_between_trades
compute_profit_stats        Risk-model profit and max drawdown
aggregate_potential_rr      Potential RR reach per market

**Calendar & Presets**

bucketize_calendar_month    Day buckets + four week slices
resolve_date_preset / matches_preset
"""

from .filters import FilterState, apply_filters, filter_executed_trades
from .aggregation import (
    GROUP_KEYS,
    NEWS_NO_EVENT_LABEL,
    TIME_INTERVALS,
    MarketRow,
    NewsEventRow,
    POTENTIAL_RR_RATIOS,
    PotentialRRRow,
    StatRow,
    aggregate_by_category,
    aggregate_evaluations,
    aggregate_markets,
    aggregate_news_events,
    aggregate_potential_rr,
    aggregate_time_intervals,
    average_sl_size_by_market,
    by_direction,
    by_launch_hour,
    by_liquidity,
    by_market,
    by_news_event,
    by_reentry,
    by_setup,
    by_weekday,
    resolve_be_outcome,
    rr_hit_losses_by_market,
)
from .metrics import (
    TradeQualityScorer,
    WinRateStabilityScorer,
    compute_average_days_between_trades,
    compute_profit_factor,
    compute_streaks,
    compute_trade_quality_index,
    compute_win_rates,
    format_average_days,
    profit_factor_display,
    profit_factor_from_rollup,
    tqi_band,
)
from .overview import (
    ProfitStats,
    TradeCounts,
    compute_macro_stats,
    compute_monthly_stats,
    compute_partial_trades_stats,
    compute_profit_stats,
    compute_trade_counts,
    compute_trading_overview,
)
from .month_calendar import (
    CalendarMonth,
    DayBucket,
    WeekBucket,
    build_day_buckets,
    build_weekly_stats,
    bucketize_calendar_month,
    navigate_month,
    split_month_into_four_ranges,
)
from .presets import DateRange, is_custom_date_range, matches_preset, resolve_date_preset
from .loader import load_trades, parse_trades, validate_trades

__all__ = [
    "FilterState",
    "apply_filters",
    "filter_executed_trades",
    "GROUP_KEYS",
    "NEWS_NO_EVENT_LABEL",
    "TIME_INTERVALS",
    "MarketRow",
    "NewsEventRow",
    "POTENTIAL_RR_RATIOS",
    "PotentialRRRow",
    "StatRow",
    "aggregate_by_category",
    "aggregate_evaluations",
    "aggregate_markets",
    "aggregate_news_events",
    "aggregate_potential_rr",
    "aggregate_time_intervals",
    "average_sl_size_by_market",
    "by_direction",
    "by_launch_hour",
    "by_liquidity",
    "by_market",
    "by_news_event",
    "by_reentry",
    "by_setup",
    "by_weekday",
    "resolve_be_outcome",
    "rr_hit_losses_by_market",
    "TradeQualityScorer",
    "WinRateStabilityScorer",
    "compute_average_days_between_trades",
    "compute_profit_factor",
    "compute_streaks",
    "compute_trade_quality_index",
    "compute_win_rates",
    "format_average_days",
    "profit_factor_display",
    "profit_factor_from_rollup",
    "tqi_band",
    "ProfitStats",
    "TradeCounts",
    "compute_macro_stats",
    "compute_monthly_stats",
    "compute_partial_trades_stats",
    "compute_profit_stats",
    "compute_trade_counts",
    "compute_trading_overview",
    "CalendarMonth",
    "DayBucket",
    "WeekBucket",
    "build_day_buckets",
    "build_weekly_stats",
    "bucketize_calendar_month",
    "navigate_month",
    "split_month_into_four_ranges",
    "DateRange",
    "is_custom_date_range",
    "matches_preset",
    "resolve_date_preset",
    "load_trades",
    "parse_trades",
    "validate_trades",
]
