import io
import json
import logging

from route_helpers import meridian_route

from trip_sim.app.engine import TripTimelineEngine
from trip_sim.app.generators.cancellation import CancellationDecider
from trip_sim.io.engine_logging import EngineLogging
from trip_sim.io.recorder import JsonlSink, JsonSink, Recorder
from trip_sim.io.routes import coordinates_from_geojson
from trip_sim.sim.clock import SimClock
from trip_sim.sim.rng import RNGRegistry


def _timeline(hooks=None, probability=0.0):
    engine = TripTimelineEngine(
        clock=SimClock.utc_epoch(2025, 11, 3, 10, 0, 0),
        rng=RNGRegistry(2),
        hooks=hooks,
        cancellation=CancellationDecider(probability=probability),
    )
    return engine.generate(meridian_route(40, 1.0))


def test_jsonl_sink_writes_wire_format():
    buf = io.StringIO()
    timeline = _timeline()
    assert Recorder(JsonlSink(buf)).record(timeline) == len(timeline)
    rows = [json.loads(line) for line in buf.getvalue().splitlines()]
    assert len(rows) == len(timeline)
    ping = next(r for r in rows if r["event_type"] == "location_ping")
    assert set(ping) >= {"event_id", "timestamp", "vehicle_id", "trip_id", "location", "movement"}
    assert ping["timestamp"].endswith("Z")


def test_json_sink_writes_one_document():
    buf = io.StringIO()
    timeline = _timeline()
    Recorder(JsonSink(buf)).record(timeline)
    doc = json.loads(buf.getvalue())
    assert [d["event_id"] for d in doc] == [e.event_id for e in timeline]


def test_engine_logging_emits_structured_records(caplog):
    logger = logging.getLogger("trip_sim.test")
    hooks = EngineLogging(run_id="r-1", logger=logger, debug=True)
    with caplog.at_level(logging.DEBUG, logger="trip_sim.test"):
        _timeline(hooks=hooks, probability=1.0)
    msgs = [r.getMessage() for r in caplog.records]
    assert msgs[0] == "run_start"
    assert "cancellation" in msgs and "truncated" in msgs
    assert msgs[-1] == "run_end"
    done = [r.extra for r in caplog.records if r.getMessage() == "generator_done"]
    assert {d["family"] for d in done} >= {"location", "conditional"}
    assert all(d["run_id"] == "r-1" for d in done)


def test_geojson_shapes():
    line = {"type": "LineString", "coordinates": [[1, 2], [3, 4]]}
    assert coordinates_from_geojson(line) == [(1.0, 2.0), (3.0, 4.0)]
    feat = {"type": "Feature", "geometry": line}
    point = {"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0]}}
    coll = {"type": "FeatureCollection", "features": [point, feat]}
    assert coordinates_from_geojson(coll) == [(1.0, 2.0), (3.0, 4.0)]
