from datetime import UTC, datetime, timedelta, timezone

import pytest

from trip_sim.sim.clock import SimClock, hours, minutes


def test_timestamp_is_epoch_plus_offset():
    clock = SimClock.utc_epoch(2025, 11, 3, 10, 0, 0)
    assert clock.timestamp(0) == datetime(2025, 11, 3, 10, 0, 0, tzinfo=UTC)
    assert clock.timestamp(minutes(-5)) == datetime(2025, 11, 3, 9, 55, 0, tzinfo=UTC)
    assert clock.timestamp(hours(2.5)) == datetime(2025, 11, 3, 12, 30, 0, tzinfo=UTC)
    assert clock.to_sim(clock.timestamp(123.0)) == 123.0


def test_sample_index_mapping():
    clock = SimClock.utc_epoch(2025, 1, 1, interval_s=30.0)
    assert clock.offset_of(4) == 120.0
    assert clock.index_at(119.9) == 3
    assert clock.index_at(120.0) == 4
    assert clock.elapsed_minutes(10) == 5.0


def test_naive_epoch_is_treated_as_utc():
    clock = SimClock(datetime(2025, 1, 1))
    assert clock.epoch.tzinfo is UTC


def test_aware_epoch_is_normalised_to_utc():
    clock = SimClock(datetime(2025, 11, 3, 12, 0, tzinfo=timezone(timedelta(hours=2))))
    assert clock.epoch == datetime(2025, 11, 3, 10, 0, tzinfo=UTC)
    assert clock.epoch.tzinfo is UTC


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        SimClock.utc_epoch(2025, 1, 1, interval_s=0)
