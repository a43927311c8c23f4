"""CLI entry point for the trade journal statistics."""

from __future__ import annotations

import json
import math
from datetime import date, datetime
from typing import Any

import click

from .core.config import Settings, load_settings
from .core.enums import BEResolution, DatePreset, ExecutionFilter, GroupSort
from .core.errors import TradelogError
from .observability.logger import get_logger, new_run_id, setup_logging


def _parse_date(value: str | None, fmt: str = "%Y-%m-%d") -> date | None:
    if value is None:
        return None
    try:
        return datetime.strptime(value, fmt).date()
    except ValueError as exc:
        raise click.BadParameter(f"{value!r} does not match {fmt}") from exc


def _emit(data: Any) -> None:
    def _default(o: Any) -> Any:
        if isinstance(o, date):
            return o.isoformat()
        if hasattr(o, "value"):
            return o.value
        raise TypeError(f"Not JSON serializable: {type(o).__name__}")

    click.echo(json.dumps(data, indent=2, default=_default))


def _finite(value: float) -> float | None:
    return None if math.isnan(value) else value


@click.group()
@click.option("--config", "config_path", default=None, help="TOML config file path")
@click.option("--log-level", default=None, help="Override log level")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, log_level: str | None) -> None:
    """Trade journal statistics."""
    overrides: dict = {}
    if log_level:
        overrides["observability"] = {"log_level": log_level}
    try:
        settings = load_settings(config_path, overrides)
    except TradelogError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(settings.observability.log_level, settings.observability.log_format)
    new_run_id()
    ctx.obj = settings


def _execution(settings: Settings, execution: str | None) -> ExecutionFilter:
    if execution is not None:
        return ExecutionFilter(execution)
    if settings.analytics.include_non_executed:
        return ExecutionFilter.ALL
    return ExecutionFilter.EXECUTED


def _load(path: str, start: str | None, end: str | None,
          market: str | None, execution: ExecutionFilter) -> list:
    from .journal import FilterState, apply_filters, load_trades

    try:
        trades = load_trades(path)
    except TradelogError as exc:
        raise click.ClickException(str(exc)) from exc

    state = FilterState(
        market=market,
        start_date=_parse_date(start),
        end_date=_parse_date(end),
        execution=execution,
    )
    return apply_filters(trades, state)


_filter_options = [
    click.option("--start", default=None, help="Start date (YYYY-MM-DD)"),
    click.option("--end", default=None, help="End date (YYYY-MM-DD)"),
    click.option("--market", default=None, help="Restrict to one market"),
    click.option(
        "--execution",
        type=click.Choice([e.value for e in ExecutionFilter]),
        default=None,
        help="Which trades to count (default: executed)",
    ),
]


def filter_options(fn):
    for option in reversed(_filter_options):
        fn = option(fn)
    return fn


@main.command()
@click.argument("trades_file", type=click.Path(dir_okay=False))
@click.option("--by", "dimension", required=True, help="Grouping dimension")
@click.option("--sort", type=click.Choice([s.value for s in GroupSort]), default=GroupSort.INSERTION.value)
@click.option("--include-unnamed", is_flag=True, help="Keep trades with no group value")
@click.option("--intensity", type=click.IntRange(1, 3), default=None, help="News intensity filter")
@click.option(
    "--be-resolution",
    type=click.Choice([b.value for b in BEResolution]),
    default=None,
    help="How break-even trades are attributed",
)
@filter_options
@click.pass_obj
def stats(
    settings: Settings,
    trades_file: str,
    dimension: str,
    sort: str,
    include_unnamed: bool,
    intensity: int | None,
    be_resolution: str | None,
    start: str | None,
    end: str | None,
    market: str | None,
    execution: str | None,
) -> None:
    """Win/loss/BE breakdown by one dimension."""
    from .journal import GROUP_KEYS, aggregate_by_category

    if dimension not in GROUP_KEYS:
        raise click.BadParameter(
            f"choose from {', '.join(sorted(GROUP_KEYS))}", param_hint="--by"
        )
    mode = _execution(settings, execution)
    trades = _load(trades_file, start, end, market, mode)
    rows = aggregate_by_category(
        trades,
        GROUP_KEYS[dimension],
        include_unnamed=include_unnamed,
        intensity_filter=intensity,
        be_resolution=BEResolution(be_resolution or settings.analytics.be_resolution),
        include_non_executed=mode != ExecutionFilter.EXECUTED,
        sort=GroupSort(sort),
        unnamed_label=settings.analytics.unnamed_label,
    )
    get_logger(__name__).info("stats_computed", dimension=dimension, groups=len(rows))
    _emit([r.to_dict() for r in rows])


@main.command()
@click.argument("trades_file", type=click.Path(dir_okay=False))
@click.option("--balance", type=float, default=None, help="Account balance")
@filter_options
@click.pass_obj
def metrics(
    settings: Settings,
    trades_file: str,
    balance: float | None,
    start: str | None,
    end: str | None,
    market: str | None,
    execution: str | None,
) -> None:
    """Headline metrics: profit factor, TQI, win rates, streaks."""
    from .journal import (
        compute_average_days_between_trades,
        compute_macro_stats,
        compute_profit_factor,
        compute_profit_stats,
        compute_trade_quality_index,
        compute_trading_overview,
        format_average_days,
        profit_factor_display,
        tqi_band,
    )

    trades = _load(trades_file, start, end, market, _execution(settings, execution))
    balance = settings.account.account_balance if balance is None else balance
    overview = compute_trading_overview(trades, be_resolution=settings.analytics.be_resolution)
    pf = compute_profit_factor(trades)
    tqi = compute_trade_quality_index(trades)
    avg_days = compute_average_days_between_trades(trades)
    macro = compute_macro_stats(trades, balance)
    profit = compute_profit_stats(trades, balance)
    _emit({
        "total_trades": overview.total_trades,
        "wins": overview.wins,
        "losses": overview.losses,
        "be_wins": overview.be_wins,
        "be_losses": overview.be_losses,
        "win_rate": round(overview.win_rate, 2),
        "win_rate_with_be": round(overview.win_rate_with_be, 2),
        "total_profit": round(overview.total_profit, 2),
        "profit_factor": round(pf, 4),
        "profit_factor_display": profit_factor_display(pf, settings.analytics.profit_factor_display_cap),
        "trade_quality_index": round(tqi, 4),
        "tqi_band": tqi_band(tqi),
        "average_days_between_trades": _finite(avg_days),
        "average_days_between_trades_display": format_average_days(avg_days),
        "current_streak": overview.current_streak,
        "max_winning_streak": overview.max_winning_streak,
        "max_losing_streak": overview.max_losing_streak,
        "sharpe_with_be": round(macro.sharpe_with_be, 4),
        "multiple_r": round(macro.multiple_r, 2),
        "risk_model_profit": round(profit.total_profit, 2),
        "average_pnl_percentage": round(profit.average_pnl_percentage, 2),
        "max_drawdown": round(profit.max_drawdown, 2),
    })


@main.command("rr")
@click.argument("trades_file", type=click.Path(dir_okay=False))
@filter_options
@click.pass_obj
def rr_cmd(
    settings: Settings,
    trades_file: str,
    start: str | None,
    end: str | None,
    market: str | None,
    execution: str | None,
) -> None:
    """Potential RR reach and 1.4R-hit losses per market."""
    from .journal import aggregate_potential_rr, rr_hit_losses_by_market

    trades = _load(trades_file, start, end, market, _execution(settings, execution))
    _emit({
        "potential_rr": [r.to_dict() for r in aggregate_potential_rr(trades)],
        "rr_hit_losses": rr_hit_losses_by_market(trades),
    })


@main.command("calendar")
@click.argument("trades_file", type=click.Path(dir_okay=False))
@click.option("--month", "month_str", required=True, help="Month (YYYY-MM)")
@click.option("--balance", type=float, default=None, help="Account balance")
@click.option("--market", default=None, help="Restrict to one market")
@click.pass_obj
def calendar_cmd(
    settings: Settings,
    trades_file: str,
    month_str: str,
    balance: float | None,
    market: str | None,
) -> None:
    """Day and week buckets for one month."""
    from .journal import bucketize_calendar_month

    month = _parse_date(month_str, "%Y-%m")
    trades = _load(trades_file, None, None, market, ExecutionFilter.ALL)
    balance = settings.account.account_balance if balance is None else balance
    cal = bucketize_calendar_month(
        trades,
        month,
        balance,
        include_non_executed=settings.analytics.include_non_executed,
    )
    _emit({
        "month": cal.month,
        "weeks": [
            {
                "index": w.index,
                "week_label": w.week_label,
                "wins": w.wins,
                "losses": w.losses,
                "be_count": w.be_count,
                "total_profit": round(w.total_profit, 2),
                "pnl_percent": round(w.pnl_percent, 2),
            }
            for w in cal.weeks
        ],
        "days": [
            {
                "day": d.day,
                "trade_count": d.trade_count,
                "real_trade_count": d.real_trade_count,
                "be_count": d.be_count,
                "profit": round(d.profit, 2),
                "pnl_percent": round(d.pnl_percent, 2),
                "color": d.color,
            }
            for d in cal.days
        ],
    })


@main.command()
@click.argument("name", type=click.Choice([p.value for p in DatePreset]))
@click.option("--today", "today_str", default=None, help="Anchor date (YYYY-MM-DD)")
def preset(name: str, today_str: str | None) -> None:
    """Resolve a date-range preset."""
    from .journal import resolve_date_preset

    rng = resolve_date_preset(name, _parse_date(today_str))
    start, end = rng.iso()
    _emit({"preset": name, "start_date": start, "end_date": end})
