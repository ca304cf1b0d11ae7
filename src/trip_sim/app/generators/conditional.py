# app/generators/conditional.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from trip_sim.app.generators.base import TripContext, r1
from trip_sim.config.models import FuelModel
from trip_sim.domain.records import StopInterval
from trip_sim.sim.clock import HOUR, minutes
from trip_sim.sim.event import EventType, TripEvent
from trip_sim.sim.rng import randint


@dataclass
class FuelSimulation:
    """
    Running fuel level over the route.

    Distance at sample i is projected linearly (i / n of the route total). Each
    refuel adds an anchor (sample, level); the level at any later sample burns
    down from the most recent anchor, so refills persist for the rest of the run.
    """

    cfg: FuelModel
    total_km: float
    n: int
    anchors: list[tuple[int, float]] = field(default_factory=list)

    def __post_init__(self):
        if not self.anchors:
            self.anchors.append((0, self.cfg.start_percent))

    def distance_at(self, i: int) -> float:
        return i / self.n * self.total_km

    def level_at(self, i: int) -> float:
        a_idx, a_lvl = self.anchors[0]
        for idx, lvl in self.anchors:
            if idx > i:
                break
            a_idx, a_lvl = idx, lvl
        burnt_km = max(0.0, self.distance_at(i) - self.distance_at(a_idx))
        burnt_l = burnt_km * self.cfg.consumption_l_per_km
        return max(self.cfg.floor_percent, a_lvl - burnt_l / self.cfg.tank_l * 100)

    def range_km(self, level: float) -> float:
        return level / 100 * self.cfg.tank_l / self.cfg.consumption_l_per_km

    def refuel(self, i: int) -> tuple[float, float]:
        """Refill at sample i; returns (level before, litres added)."""
        before = self.level_at(i)
        self.anchors.append((i, self.cfg.refill_percent))
        return before, (self.cfg.refill_percent - before) / 100 * self.cfg.tank_l

    @property
    def last_refuel_index(self) -> int | None:
        return self.anchors[-1][0] if len(self.anchors) > 1 else None


class ConditionalGenerator:
    """Fuel low/refuel cascade, driver breaks and periodic vehicle telemetry."""

    family = "conditional"

    def __init__(
        self,
        fuel: FuelModel | None = None,
        breaks=(2, 4),
        break_min=(15.0, 45.0),
        refuel_lookahead: int = 100,
        refuel_min=(10.0, 18.0),
    ):
        self.fuel = fuel or FuelModel()
        self.breaks = breaks
        self.break_min = break_min
        self.refuel_lookahead = refuel_lookahead
        self.refuel_min = refuel_min

    def generate(self, ctx: TripContext, stops: Sequence[StopInterval] = ()) -> list[TripEvent]:
        rng = ctx.stream(self.family)
        f = ctx.factory(self.family)
        sim = FuelSimulation(self.fuel, ctx.route.total_km, ctx.n)
        out = self._fuel_events(ctx, f, rng, sim)
        out += self._breaks(ctx, f, rng)
        out += self._telemetry(ctx, f, rng, sim, stops)
        return out

    # ---------------- fuel -----------------

    def _fuel_events(self, ctx, f, rng, sim: FuelSimulation) -> list[TripEvent]:
        cfg, route, clock = self.fuel, ctx.route, ctx.clock
        out: list[TripEvent] = []
        step = max(1, ctx.n // cfg.checkpoints)
        for i in range(step, ctx.n, step):
            level = sim.level_at(i)
            if level >= cfg.low_percent:
                continue
            out.append(
                f.make(
                    EventType.FUEL_LEVEL_LOW,
                    clock.offset_of(i),
                    location=route.point(i),
                    fuel_level_percent=r1(level),
                    estimated_range_km=round(sim.range_km(level)),
                    threshold_percent=cfg.low_percent,
                )
            )
            pending = sim.last_refuel_index
            if level >= cfg.refuel_percent or (pending is not None and pending > i):
                continue

            j = min(ctx.n - 1, i + int(rng.integers(self.refuel_lookahead)))
            start_t = clock.offset_of(j)
            duration = rng.uniform(*self.refuel_min)
            before, added = sim.refuel(j)
            out.append(
                f.make(
                    EventType.REFUELING_STARTED,
                    start_t,
                    location=route.point(
                        j,
                        place_name="Shell Station",
                        place_type="fuel_station",
                        address="Highway Service Area",
                    ),
                    fuel_level_percent=r1(before),
                )
            )
            out.append(
                f.make(
                    EventType.REFUELING_COMPLETED,
                    start_t + minutes(duration),
                    location=route.point(j, place_name="Shell Station"),
                    stop_duration_minutes=round(duration),
                    fuel_level_before_percent=r1(before),
                    fuel_level_after_percent=r1(cfg.refill_percent),
                    fuel_added_liters=r1(added),
                )
            )
        return out

    # ---------------- breaks -----------------

    def _breaks(self, ctx, f, rng) -> list[TripEvent]:
        route, clock = ctx.route, ctx.clock
        out: list[TripEvent] = []
        for _ in range(randint(rng, *self.breaks)):
            i = int(rng.integers(ctx.n))
            pause_t = clock.offset_of(i)
            duration = rng.uniform(*self.break_min)
            out.append(
                f.make(
                    EventType.TRIP_PAUSED,
                    pause_t,
                    location=route.point(i),
                    pause_reason="driver_break",
                    distance_traveled_km=r1(route.distances[i]),
                    elapsed_time_minutes=round(clock.elapsed_minutes(i)),
                )
            )
            out.append(
                f.make(
                    EventType.TRIP_RESUMED,
                    pause_t + minutes(duration),
                    location=route.point(i),
                    pause_duration_minutes=round(duration),
                )
            )
        return out

    # ---------------- telemetry -----------------

    def _telemetry(self, ctx, f, rng, sim: FuelSimulation, stops) -> list[TripEvent]:
        route, clock, trip = ctx.route, ctx.clock, ctx.trip
        out: list[TripEvent] = []
        step = max(1, ctx.n // self.fuel.telemetry_snapshots)
        for i in range(step, ctx.n, step):
            t = clock.offset_of(i)
            stopped = any(s.contains(t) for s in stops)
            speed = 0.0 if stopped else 40 + rng.random() * 40
            out.append(
                f.make(
                    EventType.VEHICLE_TELEMETRY,
                    t,
                    location=route.point(i, accuracy_meters=r1(5 + rng.random() * 10)),
                    telemetry={
                        "speed_kmh": r1(speed),
                        "engine_state": "idle" if stopped else "running",
                        "odometer_km": r1(trip.odometer_start_km + route.distances[i]),
                        "fuel_level_percent": r1(sim.level_at(i)),
                        "engine_hours": r1(trip.engine_hours_start + t / HOUR),
                        "coolant_temp_celsius": r1(85 + rng.random() * 10),
                        "oil_pressure_kpa": r1(280 + rng.random() * 20),
                        "battery_voltage": round(13.5 + rng.random() * 0.6, 2),
                    },
                )
            )
        return out
