"""Tests for calendar bucketing and month navigation."""

from datetime import date

import pytest

from tradelog.core.enums import BEResolution, DayColor
from tradelog.journal.month_calendar import (
    bucketize_calendar_month,
    build_day_buckets,
    build_weekly_stats,
    can_navigate_month,
    days_in_month,
    initial_calendar_month,
    months_with_trades,
    navigate_month,
    split_month_into_four_ranges,
)
from tradelog.journal.presets import DateRange

from .conftest import make_trade


class TestSplitMonth:
    @pytest.mark.parametrize(
        "month,sizes",
        [
            (date(2024, 3, 1), [8, 8, 8, 7]),
            (date(2024, 4, 1), [8, 8, 7, 7]),
            (date(2024, 2, 1), [8, 7, 7, 7]),
            (date(2023, 2, 1), [7, 7, 7, 7]),
        ],
    )
    def test_range_sizes(self, month, sizes):
        assert [len(r) for r in split_month_into_four_ranges(month)] == sizes

    def test_ranges_cover_month_in_order(self):
        ranges = split_month_into_four_ranges(date(2024, 3, 17))
        assert [d for r in ranges for d in r] == days_in_month(date(2024, 3, 1))


class TestWeeklyStats:
    def test_week_labels(self):
        weeks = build_weekly_stats(date(2024, 3, 1), [])
        assert [w.week_label for w in weeks] == [
            "1 Mar - 8 Mar",
            "9 Mar - 16 Mar",
            "17 Mar - 24 Mar",
            "25 Mar - 31 Mar",
        ]
        assert [w.index for w in weeks] == [0, 1, 2, 3]

    def test_rollups(self, mixed_trades):
        weeks = build_weekly_stats(date(2024, 3, 1), mixed_trades, 10_000)
        first = weeks[0]
        assert (first.wins, first.losses, first.be_count) == (2, 1, 1)
        assert first.total_profit == pytest.approx(400.0)
        assert first.pnl_percent == pytest.approx(4.0)
        assert weeks[1].losses == 1
        assert weeks[2].wins == 0

    def test_non_executed_included_on_request(self, mixed_trades):
        weeks = build_weekly_stats(date(2024, 3, 1), mixed_trades, include_non_executed=True)
        assert weeks[2].wins == 1

    def test_no_balance_means_zero_percent(self, mixed_trades):
        weeks = build_weekly_stats(date(2024, 3, 1), mixed_trades, None)
        assert all(w.pnl_percent == 0.0 for w in weeks)

    def test_negative_balance_means_zero_percent(self, mixed_trades):
        weeks = build_weekly_stats(date(2024, 3, 1), mixed_trades, -5_000)
        assert weeks[0].total_profit == pytest.approx(400.0)
        assert all(w.pnl_percent == 0.0 for w in weeks)

    def test_market_filter(self, mixed_trades):
        weeks = build_weekly_stats(date(2024, 3, 1), mixed_trades, market="GBPUSD")
        assert (weeks[0].wins, weeks[0].losses, weeks[0].be_count) == (1, 0, 1)


class TestDayBuckets:
    def test_one_bucket_per_day(self, mixed_trades):
        days = build_day_buckets(date(2024, 3, 1), mixed_trades)
        assert len(days) == 31
        assert days[0].trade_count == 2
        assert days[1].trade_count == 0
        assert days[1].color == DayColor.NEUTRAL

    def test_profit_colors(self, mixed_trades):
        days = build_day_buckets(date(2024, 3, 1), mixed_trades)
        assert days[0].profit == pytest.approx(100.0)
        assert days[0].color == DayColor.GREEN
        assert days[11].color == DayColor.RED

    def test_be_day_color_follows_resolution(self, mixed_trades):
        plain = build_day_buckets(date(2024, 3, 1), mixed_trades)[7]
        assert plain.has_be
        assert plain.color == DayColor.NEUTRAL
        resolved = build_day_buckets(
            date(2024, 3, 1), mixed_trades, be_resolution=BEResolution.FINAL_RESULT_FIELD,
        )[7]
        assert resolved.color == DayColor.GREEN

    def test_flagged_be_loss_is_red(self):
        trades = [make_trade("Lose", break_even=True, trade_date=date(2024, 3, 2))]
        day = build_day_buckets(date(2024, 3, 1), trades)[1]
        assert day.profit == 0.0
        assert day.color == DayColor.RED

    def test_real_trade_count(self):
        d = date(2024, 3, 2)
        trades = [
            make_trade("Win", trade_date=d),
            make_trade("BE", trade_date=d, partials_taken=True),
            make_trade("BE", trade_date=d),
        ]
        day = build_day_buckets(date(2024, 3, 1), trades)[1]
        assert day.trade_count == 3
        assert day.real_trade_count == 2
        assert day.be_count == 2

    def test_trades_outside_month_ignored(self):
        trades = [make_trade(trade_date=date(2024, 4, 1))]
        days = build_day_buckets(date(2024, 3, 1), trades)
        assert sum(d.trade_count for d in days) == 0


class TestBucketize:
    def test_month_normalised(self, mixed_trades):
        cal = bucketize_calendar_month(mixed_trades, date(2024, 3, 17), 10_000)
        assert cal.month == date(2024, 3, 1)
        assert len(cal.days) == 31
        assert len(cal.weeks) == 4


class TestNavigation:
    @pytest.fixture
    def spread(self):
        return [
            make_trade(trade_date=date(2023, 12, 5)),
            make_trade(trade_date=date(2024, 1, 10)),
            make_trade(trade_date=date(2024, 3, 4)),
            make_trade(trade_date=date(2024, 6, 20)),
        ]

    def test_months_with_trades(self, spread):
        assert months_with_trades(spread, year=2024) == [date(2024, 1, 1), date(2024, 3, 1), date(2024, 6, 1)]

    def test_prev_and_next_skip_empty_months(self, spread):
        here = date(2024, 3, 1)
        assert navigate_month(here, "prev", spread, year=2024) == date(2024, 1, 1)
        assert navigate_month(here, "next", spread, year=2024) == date(2024, 6, 1)

    def test_yearly_mode_stays_in_year(self, spread):
        assert navigate_month(date(2024, 1, 1), "prev", spread, year=2024) is None
        assert navigate_month(date(2024, 1, 1), "prev", spread) == date(2023, 12, 1)
        assert navigate_month(date(2023, 12, 1), "next", spread, year=2024) is None

    def test_date_range_mode(self, spread):
        rng = DateRange(start_date=date(2024, 1, 1), end_date=date(2024, 4, 30))
        assert navigate_month(date(2024, 3, 1), "next", spread, date_range=rng) is None
        assert can_navigate_month(date(2024, 3, 1), "prev", spread, date_range=rng)

    def test_initial_month(self, spread):
        assert initial_calendar_month(spread, year=2024) == date(2024, 1, 1)
        assert initial_calendar_month([], year=2025) == date(2025, 1, 1)
        assert initial_calendar_month([], today=date(2024, 7, 19)) == date(2024, 7, 1)
        rng = DateRange(start_date=date(2024, 5, 10), end_date=date(2024, 5, 20))
        assert initial_calendar_month(spread, date_range=rng) == date(2024, 5, 1)
