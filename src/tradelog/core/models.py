"""Core domain models: Trade, Strategy, Account.

These mirror the rows kept by the persistence layer.  The statistics
code only ever consumes lists of ``Trade``; strategies and accounts
supply scoping and the balance used for currency conversions.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import AccountMode, Direction, EvaluationGrade, TradeOutcome

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def is_local_high_low_liquidated(value: Any) -> bool:
    """Single source of truth for "liquidated" (local H/L taken).

    Accepts booleans, ``"true"``/``"1"`` strings and 1/0 numbers.
    """
    if value is True:
        return True
    if value is False or value is None:
        return False
    return str(value).strip().lower() in ("true", "1")


def hhmm_to_minutes(hhmm: str) -> int:
    """Minutes since midnight for an "H:MM" or "HH:MM" string; 0 if unparsable."""
    parts = (hhmm or "").split(":")
    try:
        hours = int(parts[0]) if parts[0] else 0
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError:
        return 0
    return hours * 60 + minutes


# ---------------------------------------------------------------------------
# Trade
# ---------------------------------------------------------------------------

class Trade(BaseModel):
    """One logged trade."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    user_id: str | None = None
    account_id: str | None = None
    strategy_id: str | None = None
    mode: AccountMode | None = None

    # When
    trade_date: date
    trade_time: str = "00:00"  # "HH:MM"
    day_of_week: str = ""

    # What
    market: str = ""
    direction: Direction = Direction.LONG
    setup_type: str | None = None
    liquidity: str | None = None
    mss: str | None = None
    trend: str | None = None

    # Result
    trade_outcome: TradeOutcome
    break_even: bool = False
    be_final_result: TradeOutcome | None = None
    executed: bool | None = True  # None counts as executed
    partials_taken: bool = False
    reentry: bool = False
    launch_hour: bool = False
    rr_hit_1_4: bool = False  # a losing trade that first ran to 1.4R

    # Risk
    risk_per_trade: float | None = None  # percent of balance
    risk_reward_ratio: float | None = None  # actual
    risk_reward_ratio_long: float | None = None  # potential
    sl_size: float | None = None
    calculated_profit: float | None = None  # signed, account currency
    pnl_percentage: float | None = None

    # Context
    news_related: bool = False
    news_name: str | None = None
    news_intensity: int | None = Field(default=None, ge=1, le=3)
    local_high_low: bool = False
    evaluation: EvaluationGrade | None = None
    notes: str | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("local_high_low", mode="before")
    @classmethod
    def _coerce_local_high_low(cls, v: Any) -> bool:
        return is_local_high_low_liquidated(v)

    @field_validator(
        "break_even", "partials_taken", "reentry", "launch_hour", "rr_hit_1_4", "news_related",
        mode="before",
    )
    @classmethod
    def _none_is_false(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("be_final_result", "evaluation", mode="before")
    @classmethod
    def _blank_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("news_intensity", mode="before")
    @classmethod
    def _intensity_level(cls, v: Any) -> int | None:
        # anything outside 1-3 reads as "no intensity recorded"
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        try:
            level = int(v)
        except (TypeError, ValueError):
            return None
        return level if 1 <= level <= 3 else None

    @model_validator(mode="after")
    def _normalise(self) -> Trade:
        if self.trade_outcome == TradeOutcome.BE:
            self.break_even = True
        if self.break_even:
            self.calculated_profit = 0.0
            self.pnl_percentage = 0.0
        if not self.day_of_week:
            self.day_of_week = DAY_NAMES[self.trade_date.weekday()]
        return self

    # ------------------------------------------------------------------ #
    # Convenience accessors (missing numerics read as 0)                   #
    # ------------------------------------------------------------------ #

    @property
    def is_executed(self) -> bool:
        return self.executed is not False

    @property
    def profit(self) -> float:
        return float(self.calculated_profit or 0.0)

    @property
    def pnl_pct(self) -> float:
        return float(self.pnl_percentage or 0.0)

    @property
    def rr(self) -> float:
        return float(self.risk_reward_ratio or 0.0)

    @property
    def is_win(self) -> bool:
        return self.trade_outcome == TradeOutcome.WIN

    @property
    def is_loss(self) -> bool:
        return self.trade_outcome == TradeOutcome.LOSE


# ---------------------------------------------------------------------------
# Strategy
# ---------------------------------------------------------------------------

class Strategy(BaseModel):
    """A named grouping of trades owned by a user."""

    id: str
    user_id: str = ""
    account_id: str | None = None
    name: str
    is_active: bool = True
    created_at: datetime | None = None

    def archive(self) -> None:
        self.is_active = False

    def reactivate(self) -> None:
        self.is_active = True


def active_strategies(strategies: list[Strategy]) -> list[Strategy]:
    """Default view: archived strategies are hidden."""
    return [s for s in strategies if s.is_active]


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------

class Account(BaseModel):
    """Trading account context that scopes which trades are visible."""

    id: str
    user_id: str = ""
    name: str = ""
    mode: AccountMode = AccountMode.LIVE
    account_balance: float = 0.0
    currency: str = "USD"

    def scopes(self, trade: Trade) -> bool:
        """True when ``trade`` belongs to this account and mode."""
        if trade.account_id is not None and trade.account_id != self.id:
            return False
        if trade.mode is not None and trade.mode != self.mode:
            return False
        return True

    def visible_trades(self, trades: list[Trade]) -> list[Trade]:
        return [t for t in trades if self.scopes(t)]


def compute_trade_pnl(trade: Trade, account_balance: float) -> tuple[float, float]:
    """Convert a trade's risk into ``(pnl_percentage, calculated_profit)``.

    A loss costs the full risk, a win pays risk x RR.  Break-even trades
    and a zero balance yield ``(0.0, 0.0)``.
    """
    if not account_balance or trade.break_even:
        return 0.0, 0.0
    risk = float(trade.risk_per_trade or 0.0)
    pnl_pct = -risk if trade.trade_outcome == TradeOutcome.LOSE else risk * trade.rr
    return pnl_pct, (pnl_pct / 100.0) * account_balance
