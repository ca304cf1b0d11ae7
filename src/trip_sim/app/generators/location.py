# app/generators/location.py
from trip_sim.app.generators.base import TripContext, r1
from trip_sim.domain.geometry import bearing_deg, haversine_km
from trip_sim.sim.clock import HOUR
from trip_sim.sim.event import EventType, TripEvent

MAX_SPEED_KMH = 120.0
MOVING_KMH = 1.0

# ascending; the last threshold exceeded wins
_QUALITY_STEPS = ((12.0, "good"), (20.0, "fair"), (50.0, "poor"))


def signal_quality(accuracy_m: float) -> str:
    quality = "excellent"
    for limit, label in _QUALITY_STEPS:
        if accuracy_m > limit:
            quality = label
    return quality


def instant_speed_kmh(a, b, interval_s: float) -> float:
    v = haversine_km(a, b) / interval_s * HOUR
    return max(0.0, min(v, MAX_SPEED_KMH))


class LocationGenerator:
    """One location_ping per sample of the effective route, in coordinate order."""

    family = "location"

    def generate(self, ctx: TripContext) -> list[TripEvent]:
        rng = ctx.stream(self.family)
        f = ctx.factory(self.family)
        coords = ctx.route.coords
        out: list[TripEvent] = []
        for i, c in enumerate(coords):
            speed, heading, moving = 0.0, 0.0, False
            if i > 0:
                speed = instant_speed_kmh(coords[i - 1], c, ctx.interval_s)
                heading = bearing_deg(coords[i - 1], c)
                moving = speed > MOVING_KMH
            accuracy = 5 + rng.random() * 10
            altitude = 10 + rng.random() * 100
            out.append(
                f.make(
                    EventType.LOCATION_PING,
                    ctx.clock.offset_of(i),
                    location=ctx.route.point(
                        i, accuracy_meters=r1(accuracy), altitude_meters=r1(altitude)
                    ),
                    movement={
                        "speed_kmh": r1(speed),
                        "heading_degrees": r1(heading),
                        "moving": moving,
                    },
                    signal_quality=signal_quality(accuracy),
                )
            )
        return out
