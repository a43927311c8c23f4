"""Immutable filter state and the pure filtering step before aggregation.

Every dashboard view is described by one ``FilterState``; the trade list
is narrowed by :func:`apply_filters` and only then handed to the
aggregators.  Nothing here mutates the input list.
"""

from __future__ import annotations

import logging
from datetime import date

from pydantic import BaseModel, ConfigDict

from tradelog.core.enums import AccountMode, Direction, ExecutionFilter
from tradelog.core.models import Trade

logger = logging.getLogger(__name__)


class FilterState(BaseModel):
    """Filters applied to a trade list.

    ``None`` means "no restriction" for every field.  ``market="all"`` is
    accepted as an alias for no market restriction.
    """

    model_config = ConfigDict(frozen=True)

    market: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    execution: ExecutionFilter = ExecutionFilter.EXECUTED
    strategy_id: str | None = None
    account_id: str | None = None
    mode: AccountMode | None = None
    direction: Direction | None = None

    def with_market(self, market: str | None) -> FilterState:
        return self.model_copy(update={"market": market})

    def with_dates(self, start_date: date | None, end_date: date | None) -> FilterState:
        return self.model_copy(update={"start_date": start_date, "end_date": end_date})

    def _matches(self, trade: Trade) -> bool:
        if self.market not in (None, "all") and trade.market != self.market:
            return False
        if self.start_date is not None and trade.trade_date < self.start_date:
            return False
        if self.end_date is not None and trade.trade_date > self.end_date:
            return False
        if self.execution == ExecutionFilter.EXECUTED and not trade.is_executed:
            return False
        if self.execution == ExecutionFilter.NON_EXECUTED and trade.is_executed:
            return False
        if self.strategy_id is not None and trade.strategy_id != self.strategy_id:
            return False
        if self.account_id is not None and trade.account_id != self.account_id:
            return False
        if self.mode is not None and trade.mode is not None and trade.mode != self.mode:
            return False
        if self.direction is not None and trade.direction != self.direction:
            return False
        return True


def apply_filters(trades: list[Trade], state: FilterState) -> list[Trade]:
    """Return the trades that pass ``state``, preserving input order."""
    result = [t for t in trades if state._matches(t)]
    logger.debug("Filtered %d of %d trades", len(result), len(trades))
    return result


def filter_executed_trades(trades: list[Trade]) -> list[Trade]:
    """Drop trades explicitly marked as not executed."""
    return [t for t in trades if t.is_executed]
