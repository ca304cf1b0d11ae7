import pytest
from route_helpers import meridian_route

from trip_sim.domain.records import NOT_CANCELLED, StopInterval
from trip_sim.domain.route import Route, RouteNotFoundError


def test_route_table_and_prefix():
    r = Route.from_coords(meridian_route(11, 10.0))
    assert len(r) == 11
    assert r.total_km == pytest.approx(100.0)
    p = r.prefix(4)
    assert len(p) == 5
    assert p.total_km == pytest.approx(40.0)
    assert p.distances == r.distances[:5]


def test_point_is_lat_lng_mapping():
    r = Route.from_coords([(-122.0, 37.0), (-121.0, 36.0)])
    assert r.point(0) == {"lat": 37.0, "lng": -122.0}
    assert r.point(-1, name="B") == {"lat": 36.0, "lng": -121.0, "name": "B"}
    assert r.clamp(99) == 1


def test_empty_route_is_rejected():
    with pytest.raises(RouteNotFoundError):
        Route.from_coords([])


def test_stop_interval_bounds():
    s = StopInterval(start_s=600.0, end_s=1200.0, duration_min=10)
    assert s.duration_s == 600.0
    assert s.contains(600.0) and s.contains(1199.0)
    assert not s.contains(1200.0)
    assert NOT_CANCELLED.cutoff_t is None
