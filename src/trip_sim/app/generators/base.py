# app/generators/base.py
from __future__ import annotations

from dataclasses import dataclass, replace

import numpy as np

from trip_sim.config.models import TripModel
from trip_sim.domain.route import Route
from trip_sim.sim.clock import SimClock
from trip_sim.sim.event import Envelope, EventFactory
from trip_sim.sim.rng import RNGRegistry


def r1(x: float) -> float:
    return round(float(x), 1)


@dataclass(frozen=True)
class TripContext:
    """Everything a generator family reads: geometry, clock, ids and randomness."""

    route: Route
    clock: SimClock
    trip: TripModel
    rng: RNGRegistry

    @property
    def n(self) -> int:
        return len(self.route)

    @property
    def interval_s(self) -> float:
        return self.clock.interval_s

    @property
    def envelope(self) -> Envelope:
        return Envelope(
            vehicle_id=self.trip.vehicle_id,
            trip_id=self.trip.trip_id,
            device_id=self.trip.device_id,
        )

    def stream(self, family: str) -> np.random.Generator:
        return self.rng.stream(family)

    def factory(self, family: str) -> EventFactory:
        return EventFactory(self.clock, self.envelope, self.rng.substream("event_ids", family))

    def restricted_to(self, route: Route) -> TripContext:
        return replace(self, route=route)
