# app/generators/cancellation.py
import numpy as np

from trip_sim.app.generators.base import TripContext, r1
from trip_sim.domain.records import NOT_CANCELLED, CancellationOutcome
from trip_sim.sim.event import EventType
from trip_sim.sim.rng import pick

CANCELLATION_REASONS = (
    "vehicle_malfunction",
    "driver_emergency",
    "weather_conditions",
    "road_closure",
    "customer_cancellation",
)


class CancellationDecider:
    """Decides once per run whether the trip is abandoned early, and where."""

    family = "cancellation"

    def __init__(
        self,
        probability: float = 0.05,
        window_fraction: float = 0.2,
        reasons=CANCELLATION_REASONS,
    ):
        self.probability = probability
        self.window_fraction = window_fraction
        self.reasons = tuple(reasons)

    def decide(self, ctx: TripContext) -> CancellationOutcome:
        rng = ctx.stream(self.family)
        if rng.random() >= self.probability:
            return NOT_CANCELLED

        idx = ctx.route.clamp(int(np.floor(rng.random() * ctx.n * self.window_fraction)))
        reason = pick(rng, self.reasons)
        t = ctx.clock.offset_of(idx)
        ev = ctx.factory(self.family).make(
            EventType.TRIP_CANCELLED,
            t,
            location=ctx.route.point(idx),
            cancellation_reason=reason,
            distance_completed_km=r1(ctx.route.distances[idx]),
            elapsed_time_minutes=round(ctx.clock.elapsed_minutes(idx)),
        )
        return CancellationOutcome(triggered=True, index=idx, event=ev)
