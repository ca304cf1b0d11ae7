from context_helpers import make_ctx, types_of
from route_helpers import meridian_route

from trip_sim.app.generators.stops import ScheduledStopGenerator, UnscheduledStopGenerator


def test_exactly_three_scheduled_pairs():
    ctx = make_ctx(meridian_route(101, 1.0))
    events = ScheduledStopGenerator().generate(ctx)
    assert types_of(events) == ["stop_arrival", "stop_departure"] * 3
    arrivals = events[0::2]
    assert [round(e.payload["distance_from_start_km"]) for e in arrivals] == [25, 50, 75]
    for arr, dep in zip(events[0::2], events[1::2]):
        assert dep.t - arr.t == 900.0
        assert arr.payload["stop_number"] == dep.payload["stop_number"]
        assert arr.payload["is_scheduled"] is True


def test_scheduled_stops_on_degenerate_route():
    ctx = make_ctx([(0.0, 0.0), (0.0, 0.0)])
    events = ScheduledStopGenerator().generate(ctx)
    assert len(events) == 6
    assert {e.t for e in events[0::2]} == {0.0}


def test_unscheduled_stops_and_intervals_agree():
    ctx = make_ctx(meridian_route(200, 1.0), seed=11)
    result = UnscheduledStopGenerator().generate(ctx)
    assert 3 <= len(result.intervals) <= 6
    assert types_of(result.events) == [
        "vehicle_stopped",
        "unscheduled_stop",
        "vehicle_moving",
    ] * len(result.intervals)
    for k, iv in enumerate(result.intervals):
        stopped, flagged, moving = result.events[3 * k : 3 * k + 3]
        assert stopped.t == iv.start_s
        assert flagged.t == iv.start_s + 60
        assert moving.t == iv.end_s
        assert 5 <= iv.duration_min <= 30
        assert iv.end_s - iv.start_s == iv.duration_min * 60
        assert flagged.payload["stop_duration_minutes"] == iv.duration_min
