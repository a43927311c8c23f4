"""Shared helpers for journal tests."""

from __future__ import annotations

from datetime import date

import pytest

from tradelog.core.models import Trade

_counter = 0


def make_trade(
    outcome: str = "Win",
    *,
    trade_date: date = date(2024, 3, 4),
    trade_time: str = "10:00",
    direction: str = "Long",
    market: str = "EURUSD",
    profit: float | None = None,
    pnl_pct: float | None = None,
    break_even: bool = False,
    be_final_result: str | None = None,
    executed: bool | None = True,
    partials_taken: bool = False,
    risk: float | None = 1.0,
    rr: float | None = 2.0,
    **kwargs,
) -> Trade:
    """Build a Trade with sensible defaults.

    Profit defaults to +rr*100 for a win and -100 for a loss.
    """
    global _counter
    _counter += 1
    if profit is None:
        if outcome == "Win":
            profit = (rr or 0.0) * 100.0
        elif outcome == "Lose":
            profit = -100.0
        else:
            profit = 0.0
    return Trade(
        id=kwargs.pop("id", f"t{_counter}"),
        trade_date=trade_date,
        trade_time=trade_time,
        direction=direction,
        market=market,
        trade_outcome=outcome,
        break_even=break_even,
        be_final_result=be_final_result,
        executed=executed,
        partials_taken=partials_taken,
        risk_per_trade=risk,
        risk_reward_ratio=rr,
        calculated_profit=profit,
        pnl_percentage=pnl_pct if pnl_pct is not None else profit / 100.0,
        **kwargs,
    )


@pytest.fixture
def direction_trades():
    return [
        make_trade("Win", direction="Long"),
        make_trade("Lose", direction="Long"),
        make_trade("Win", direction="Short", break_even=True),
    ]


@pytest.fixture
def mixed_trades():
    """Two weeks of trades across two markets."""
    return [
        make_trade("Win", trade_date=date(2024, 3, 1), market="EURUSD", rr=2.0),
        make_trade("Lose", trade_date=date(2024, 3, 1), market="EURUSD"),
        make_trade("Win", trade_date=date(2024, 3, 5), market="GBPUSD", rr=3.0),
        make_trade("BE", trade_date=date(2024, 3, 8), market="GBPUSD", be_final_result="Win"),
        make_trade("Lose", trade_date=date(2024, 3, 12), market="EURUSD"),
        make_trade("Win", trade_date=date(2024, 3, 20), market="EURUSD", executed=False),
    ]
