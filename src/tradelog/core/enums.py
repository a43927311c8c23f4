"""Enumerations used across the journal."""

from enum import Enum


class Direction(str, Enum):
    LONG = "Long"
    SHORT = "Short"


class TradeOutcome(str, Enum):
    WIN = "Win"
    LOSE = "Lose"
    BE = "BE"


class EvaluationGrade(str, Enum):
    A_PLUS = "A+"
    A = "A"
    B = "B"
    C = "C"


class AccountMode(str, Enum):
    LIVE = "live"
    DEMO = "demo"
    BACKTESTING = "backtesting"


class BEResolution(str, Enum):
    """Which field decides whether a break-even trade counts as a win or a loss."""

    OUTCOME_FIELD = "outcome_field"  # trade_outcome only
    FINAL_RESULT_FIELD = "be_final_result_field"  # be_final_result, then trade_outcome


class DatePreset(str, Enum):
    YEAR = "year"
    DAYS_15 = "15days"
    DAYS_30 = "30days"
    MONTH = "month"


class ExecutionFilter(str, Enum):
    ALL = "all"
    EXECUTED = "executed"
    NON_EXECUTED = "non_executed"


class GroupSort(str, Enum):
    INSERTION = "insertion"
    ALPHABETICAL = "alphabetical"
    TOTAL_DESC = "total_desc"


class DayColor(str, Enum):
    GREEN = "green"
    RED = "red"
    NEUTRAL = "neutral"


class TQIBand(str, Enum):
    """Trade Quality Index bands, lowest first."""

    NEEDS_DEVELOPMENT = "needs_development"  # < 0.20
    DEVELOPING = "developing"                # 0.20 - 0.29
    MODERATE = "moderate"                    # 0.30 - 0.39
    STRONG = "strong"                        # 0.40 - 0.54
    EXCEPTIONAL = "exceptional"              # 0.55+
