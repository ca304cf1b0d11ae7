# app/generators/movement.py
from trip_sim.app.generators.base import TripContext, r1
from trip_sim.sim.event import EventType, TripEvent
from trip_sim.sim.rng import randint


def road_type(speed_kmh: float) -> str:
    if speed_kmh > 80:
        return "highway"
    if speed_kmh > 50:
        return "arterial"
    return "city_street"


class MovementGenerator:
    """Driving-behaviour noise: speed changes and speeding episodes."""

    family = "movement"

    def __init__(self, speed_changes=(10, 15), violations=(2, 4)):
        self.speed_changes = speed_changes
        self.violations = violations

    def generate(self, ctx: TripContext) -> list[TripEvent]:
        rng = ctx.stream(self.family)
        f = ctx.factory(self.family)
        route, clock = ctx.route, ctx.clock
        out: list[TripEvent] = []

        for _ in range(randint(rng, *self.speed_changes)):
            i = int(rng.integers(ctx.n))
            previous = 45 + rng.random() * 30
            current = max(15.0, min(120.0, previous + (rng.random() - 0.5) * 40))
            out.append(
                f.make(
                    EventType.SPEED_CHANGED,
                    clock.offset_of(i),
                    location=route.point(i),
                    speed_previous_kmh=r1(previous),
                    speed_current_kmh=r1(current),
                    speed_change_kmh=r1(current - previous),
                    road_type=road_type(current),
                )
            )

        for _ in range(randint(rng, *self.violations)):
            i = int(rng.integers(ctx.n))
            limit = 80 + rng.random() * 25
            speed = limit + 10 + rng.random() * 20
            out.append(
                f.make(
                    EventType.SPEED_VIOLATION,
                    clock.offset_of(i),
                    location=route.point(i),
                    current_speed_kmh=r1(speed),
                    speed_limit_kmh=r1(limit),
                    overspeed_kmh=r1(speed - limit),
                    violation_duration_seconds=round(15 + rng.random() * 45),
                )
            )
        return out
