"""Load trade records from JSON files.

Accepts either a top-level array of trade objects or an object with a
``"trades"`` array (the shape the persistence layer exports).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from pydantic import TypeAdapter, ValidationError

from tradelog.core.errors import TradeLoadError, TradeValidationError
from tradelog.core.models import Trade

logger = logging.getLogger(__name__)

_TRADE_LIST = TypeAdapter(list[Trade])


def parse_trades(payload: Any) -> list[Trade]:
    """Validate an already-decoded JSON payload into trades."""
    if isinstance(payload, dict):
        payload = payload.get("trades", [])
    if not isinstance(payload, list):
        raise TradeLoadError("Expected a list of trades or an object with a 'trades' list")
    try:
        return _TRADE_LIST.validate_python(payload)
    except ValidationError as exc:
        raise TradeLoadError(f"Invalid trade record: {exc}") from exc


def load_trades(path: str | Path) -> list[Trade]:
    """Read and validate trades from a JSON file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except OSError as exc:
        raise TradeLoadError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise TradeLoadError(f"Invalid JSON in {path}: {exc}") from exc
    trades = parse_trades(payload)
    logger.info("Loaded %d trades from %s", len(trades), path)
    return trades


def validate_trades(trades: Iterable[Trade]) -> list[Trade]:
    """Strict boundary check for callers that prefer raising to coercion.

    Rejects executed non-BE trades without a risk figure, and wins
    without a risk:reward ratio.
    """
    checked: list[Trade] = []
    for t in trades:
        if t.is_executed and not t.break_even and t.risk_per_trade is None:
            raise TradeValidationError(t.id, "missing risk_per_trade")
        if t.is_executed and not t.break_even and t.is_win and t.risk_reward_ratio is None:
            raise TradeValidationError(t.id, "winning trade without risk_reward_ratio")
        checked.append(t)
    return checked
