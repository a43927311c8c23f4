"""Custom exception hierarchy for the journal."""


class TradelogError(Exception):
    """Base exception for all journal errors."""


# --- Configuration ---
class ConfigError(TradelogError):
    """Invalid or missing configuration."""


# --- Input ---
class UnknownPresetError(TradelogError, ValueError):
    """Date-range preset name is not one of year/15days/30days/month."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown date preset: {name!r}")


class TradeLoadError(TradelogError):
    """Trade file could not be read or parsed."""


class TradeValidationError(TradelogError):
    """A trade record failed strict boundary validation."""

    def __init__(self, trade_id: str, reason: str):
        self.trade_id = trade_id
        self.reason = reason
        super().__init__(f"Trade [{trade_id}]: {reason}")
