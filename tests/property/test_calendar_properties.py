"""Property tests: four week slices partition any month."""

from datetime import date

from hypothesis import given, settings, strategies as st

from tradelog.journal.month_calendar import (
    build_day_buckets,
    build_weekly_stats,
    days_in_month,
    split_month_into_four_ranges,
)

from .strategies import trades

months = st.dates(min_value=date(1900, 1, 1), max_value=date(2100, 12, 31))


@given(d=months)
@settings(max_examples=50)
def test_ranges_partition_month(d):
    ranges = split_month_into_four_ranges(d)
    sizes = [len(r) for r in ranges]
    assert len(ranges) == 4
    assert [day for r in ranges for day in r] == days_in_month(d)
    assert max(sizes) - min(sizes) <= 1
    assert sizes == sorted(sizes, reverse=True)


@given(trade_list=st.lists(trades(min_date=date(2024, 3, 1), max_date=date(2024, 3, 31)), max_size=30))
@settings(max_examples=50)
def test_weeks_and_days_agree(trade_list):
    month = date(2024, 3, 1)
    weeks = build_weekly_stats(month, trade_list)
    days = build_day_buckets(month, trade_list)
    executed = [t for t in trade_list if t.is_executed]

    assert sum(d.trade_count for d in days) == len(executed)
    assert sum(w.wins + w.losses + w.be_count for w in weeks) == sum(
        1 for t in executed if t.break_even or t.is_win or t.is_loss
    )
    assert abs(sum(w.total_profit for w in weeks) - sum(d.profit for d in days)) < 1e-6
