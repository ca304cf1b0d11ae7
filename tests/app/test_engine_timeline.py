from collections import Counter

import pytest
from route_helpers import meridian_route

from trip_sim.app.engine import TripTimelineEngine
from trip_sim.app.generators.cancellation import CancellationDecider
from trip_sim.domain.route import RouteNotFoundError
from trip_sim.sim.clock import SimClock
from trip_sim.sim.hooks import NoopHooks
from trip_sim.sim.rng import RNGRegistry

ROUTE = meridian_route(240, 0.8)  # ~190 km, 2 h of samples


class Trace(NoopHooks):
    def __init__(self):
        self.families = []
        self.outcome = None
        self.dropped = None

    def cancellation(self, outcome, *, coordinates):
        self.outcome = outcome

    def generator_done(self, family, *, events, ms):
        self.families.append((family, events))

    def truncated(self, *, cutoff_t, dropped):
        self.dropped = dropped


def _engine(seed=1, probability=0.0, hooks=None):
    return TripTimelineEngine(
        clock=SimClock.utc_epoch(2025, 11, 3, 10, 0, 0),
        rng=RNGRegistry(seed),
        hooks=hooks,
        cancellation=CancellationDecider(probability=probability),
    )


def test_timeline_is_sorted_and_complete():
    timeline = _engine().generate(ROUTE)
    stamps = [e.timestamp for e in timeline]
    assert stamps == sorted(stamps)
    c = Counter(e.event_type.value for e in timeline)
    assert c["location_ping"] == len(ROUTE)
    assert c["stop_arrival"] == c["stop_departure"] == 3
    assert c["trip_completed"] == c["tracking_stopped"] == 1
    assert c["trip_cancelled"] == 0
    assert timeline[0].event_type.value == "tracking_started"
    assert len({e.event_id for e in timeline}) == len(timeline)


def test_pings_follow_coordinate_order():
    pings = [e for e in _engine().generate(ROUTE) if e.event_type.value == "location_ping"]
    assert [(p.location["lng"], p.location["lat"]) for p in pings] == ROUTE


def test_fixed_seed_reproduces_timeline():
    a = [e.to_dict() for e in _engine(seed=42).generate(ROUTE)]
    b = [e.to_dict() for e in _engine(seed=42).generate(ROUTE)]
    c = [e.to_dict() for e in _engine(seed=43).generate(ROUTE)]
    assert a == b
    assert a != c


def test_cancellation_truncates_timeline():
    trace = Trace()
    timeline = _engine(seed=5, probability=1.0, hooks=trace).generate(ROUTE)
    outcome = trace.outcome
    assert outcome.triggered
    assert 0 <= outcome.index < int(len(ROUTE) * 0.2)

    cancels = [e for e in timeline if e.event_type.value == "trip_cancelled"]
    assert len(cancels) == 1
    cutoff = cancels[0].timestamp
    assert all(e.timestamp <= cutoff for e in timeline)
    kinds = {e.event_type.value for e in timeline}
    assert "trip_completed" not in kinds and "tracking_stopped" not in kinds
    assert {"tracking_started", "trip_started"} <= kinds
    pings = [e for e in timeline if e.event_type.value == "location_ping"]
    assert len(pings) == outcome.index + 1
    assert trace.dropped >= 0


def test_refuel_never_completes_before_it_starts():
    long_route = meridian_route(200, 5.0)
    for seed in range(5):
        timeline = _engine(seed=seed).generate(long_route)
        started = 0
        for e in timeline:
            if e.event_type.value == "refueling_started":
                started += 1
            elif e.event_type.value == "refueling_completed":
                assert started > 0
                started -= 1


def test_every_family_reports():
    trace = Trace()
    _engine(hooks=trace).generate(ROUTE)
    families = [f for f, _ in trace.families]
    assert families[0] == "unscheduled_stops"
    assert set(families) == {
        "unscheduled_stops",
        "lifecycle",
        "location",
        "distance_milestones",
        "time_milestones",
        "scheduled_stops",
        "movement",
        "technical",
        "conditional",
    }


@pytest.mark.parametrize("coords", [[], [(0.0, 0.0)]])
def test_short_route_is_fatal(coords):
    with pytest.raises(RouteNotFoundError):
        _engine().generate(coords)


def test_cancellation_decider_probability_bounds():
    from context_helpers import make_ctx

    ctx = make_ctx(ROUTE, seed=3)
    assert not CancellationDecider(probability=0.0).decide(ctx).triggered
    out = CancellationDecider(probability=1.0).decide(ctx)
    assert out.triggered
    assert out.event.payload["cancellation_reason"] in {
        "vehicle_malfunction",
        "driver_emergency",
        "weather_conditions",
        "road_closure",
        "customer_cancellation",
    }
    assert out.event.t == out.index * 30.0
    assert out.cutoff_t == out.event.t


def test_default_cancellation_rate_is_rare():
    from context_helpers import make_ctx

    hits = sum(
        CancellationDecider().decide(make_ctx(ROUTE, seed=s)).triggered for s in range(400)
    )
    assert 5 <= hits <= 40
