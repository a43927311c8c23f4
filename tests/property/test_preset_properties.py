"""Property tests: every preset resolves to a range ending on or around today."""

from datetime import date, timedelta

from hypothesis import given, settings, strategies as st

from tradelog.core.enums import DatePreset
from tradelog.journal.presets import matches_preset, resolve_date_preset

todays = st.dates(min_value=date(2000, 1, 1), max_value=date(2099, 12, 31))


@given(today=todays, preset=st.sampled_from(list(DatePreset)))
@settings(max_examples=50)
def test_resolved_range_contains_today(today, preset):
    rng = resolve_date_preset(preset, today)
    assert rng.start_date <= rng.end_date
    assert rng.contains(today)


@given(today=todays, preset=st.sampled_from(list(DatePreset)))
@settings(max_examples=50)
def test_match_inverts_resolve(today, preset):
    rng = resolve_date_preset(preset, today)
    matched = matches_preset(rng, today)
    assert matched is not None
    assert resolve_date_preset(matched, today) == rng


@given(today=todays)
@settings(max_examples=50)
def test_month_preset_stays_in_month(today):
    rng = resolve_date_preset(DatePreset.MONTH, today)
    assert rng.start_date == date(today.year, today.month, 1)
    assert (rng.end_date.year, rng.end_date.month) == (today.year, today.month)
    assert (rng.end_date + timedelta(days=1)).day == 1
