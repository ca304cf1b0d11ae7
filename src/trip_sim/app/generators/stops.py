# app/generators/stops.py
from dataclasses import dataclass

from trip_sim.app.generators.base import TripContext, r1
from trip_sim.domain.records import StopInterval
from trip_sim.sim.clock import minutes
from trip_sim.sim.event import EventType, TripEvent
from trip_sim.sim.rng import pick, randint

SCHEDULED_SITES = (
    ("Customer Site #1", "456 Market St"),
    ("Customer Site #2", "789 Business Ave"),
    ("Customer Site #3", "321 Industrial Blvd"),
)

STOP_REASONS = ("driver_break", "traffic", "fuel", "maintenance", "unknown")
PLACE_TYPES = ("parking_lot", "rest_area", "gas_station", "roadside", "service_area")


@dataclass(frozen=True)
class StopResult:
    events: list[TripEvent]
    intervals: tuple[StopInterval, ...]


class ScheduledStopGenerator:
    """Fixed waypoints at fractions of the route distance; always emitted."""

    family = "scheduled_stops"

    def __init__(self, fractions=(0.25, 0.5, 0.75), dwell_min: float = 15.0, sites=SCHEDULED_SITES):
        self.fractions = tuple(fractions)
        self.dwell_min = dwell_min
        self.sites = tuple(sites)

    def _site(self, k: int) -> tuple[str, str]:
        if k < len(self.sites):
            return self.sites[k]
        return f"Customer Site #{k + 1}", "Unknown address"

    def generate(self, ctx: TripContext) -> list[TripEvent]:
        f = ctx.factory(self.family)
        route = ctx.route
        out: list[TripEvent] = []
        for k, frac in enumerate(self.fractions):
            i = route.nearest_index(route.total_km * frac)
            name, address = self._site(k)
            arrival = ctx.clock.offset_of(i)
            out.append(
                f.make(
                    EventType.STOP_ARRIVAL,
                    arrival,
                    stop_location=route.point(i, name=name, address=address),
                    is_scheduled=True,
                    stop_number=k + 1,
                    distance_from_start_km=r1(route.distances[i]),
                    time_from_start_minutes=round(arrival / 60),
                )
            )
            out.append(
                f.make(
                    EventType.STOP_DEPARTURE,
                    arrival + minutes(self.dwell_min),
                    stop_location=route.point(i, name=name),
                    stop_duration_minutes=self.dwell_min,
                    stop_number=k + 1,
                )
            )
        return out


class UnscheduledStopGenerator:
    """
    Random roadside stops. Placements are independent draws, so two stops (or a
    stop and a scheduled waypoint) may overlap.
    """

    family = "unscheduled_stops"

    def __init__(self, count=(3, 6), duration_min=(5, 30)):
        self.count = count
        self.duration_min = duration_min

    def generate(self, ctx: TripContext) -> StopResult:
        rng = ctx.stream(self.family)
        f = ctx.factory(self.family)
        route = ctx.route
        events: list[TripEvent] = []
        intervals: list[StopInterval] = []
        for _ in range(randint(rng, *self.count)):
            i = int(rng.integers(ctx.n))
            duration = randint(rng, *self.duration_min)
            arrival = ctx.clock.offset_of(i)
            departure = arrival + minutes(duration)
            reason = pick(rng, STOP_REASONS)
            place_type = pick(rng, PLACE_TYPES)

            events.append(
                f.make(
                    EventType.VEHICLE_STOPPED,
                    arrival,
                    location=route.point(i, place_type=place_type),
                    speed_before_stop_kmh=r1(35 + rng.random() * 30),
                    engine_running=bool(rng.random() > 0.3),
                )
            )
            events.append(
                f.make(
                    EventType.UNSCHEDULED_STOP,
                    arrival + 60,
                    location=route.point(i, place_type=place_type),
                    stop_duration_minutes=duration,
                    reason_detected=reason,
                    distance_to_next_scheduled_stop_km=r1(5 + rng.random() * 20),
                )
            )
            events.append(
                f.make(
                    EventType.VEHICLE_MOVING,
                    departure,
                    location=route.point(i),
                    stop_duration_minutes=duration,
                    current_speed_kmh=r1(15 + rng.random() * 10),
                )
            )
            intervals.append(StopInterval(start_s=arrival, end_s=departure, duration_min=duration))
        return StopResult(events=events, intervals=tuple(intervals))
