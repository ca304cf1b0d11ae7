import pytest
from context_helpers import make_ctx
from route_helpers import KM_PER_DEG_LAT, meridian_route

from trip_sim.app.generators.milestones import (
    DistanceMilestoneGenerator,
    TimeMilestoneGenerator,
    stop_time_before,
)
from trip_sim.domain.records import StopInterval


def test_distance_milestones_respect_tolerance():
    ctx = make_ctx(meridian_route(121, 2.5))  # 300 km
    events = DistanceMilestoneGenerator().generate(ctx)
    assert [e.payload["milestone_km"] for e in events] == [50, 100, 150, 200, 250, 300]
    for e in events:
        assert e.payload["total_distance_km"] >= e.payload["milestone_km"] - 5
    fifty = events[0]
    assert fifty.t == 20 * 30.0
    assert fifty.payload["elapsed_time_minutes"] == 10
    assert fifty.payload["stops_count"] == 0


def test_thresholds_beyond_route_are_skipped():
    ctx = make_ctx([(0.0, 0.0), (0.0, 100.0 / KM_PER_DEG_LAT)])
    events = DistanceMilestoneGenerator().generate(ctx)
    kms = [e.payload["milestone_km"] for e in events]
    assert kms[-1] == 100
    assert all(km <= 100 for km in kms)


def test_distance_milestone_just_short_is_kept():
    ctx = make_ctx(meridian_route(2, 96.0))
    events = DistanceMilestoneGenerator(thresholds_km=(100,)).generate(ctx)
    assert len(events) == 1
    assert events[0].payload["total_distance_km"] == pytest.approx(96.0)


def test_stop_time_caps_at_threshold_and_double_counts_overlap():
    stops = [StopInterval(3000.0, 4200.0, 20)]
    assert stop_time_before(stops, 3600.0) == 600.0
    assert stop_time_before(stops, 7200.0) == 1200.0
    assert stop_time_before(stops, 2999.0) == 0.0
    assert stop_time_before(stops * 2, 7200.0) == 2400.0


def test_time_milestones_shift_by_stop_time():
    ctx = make_ctx(meridian_route(300, 0.5))  # 2.5 h of samples
    stops = [StopInterval(600.0, 1200.0, 10)]
    events = TimeMilestoneGenerator().generate(ctx, stops)
    assert [e.payload["milestone_hours"] for e in events] == [1, 2]
    one, two = events
    assert one.t == 4200.0
    assert one.location["lat"] == pytest.approx(ctx.route.coords[140][1])
    assert one.payload["moving_time_minutes"] == 50
    assert one.payload["stops_count"] == 1
    assert two.t == 7800.0
    assert two.payload["moving_time_minutes"] == 110
    assert two.payload["average_speed_kmh"] == pytest.approx(ctx.route.distances[260] / 2, abs=0.05)


def test_time_milestones_skip_past_route_end():
    ctx = make_ctx(meridian_route(100, 0.5))  # 50 min
    assert TimeMilestoneGenerator().generate(ctx) == []
