# app/engine.py
from __future__ import annotations

import time
from collections.abc import Sequence

from trip_sim.app.compose import TimelineComposer
from trip_sim.app.generators.base import TripContext
from trip_sim.app.generators.cancellation import CancellationDecider
from trip_sim.app.generators.conditional import ConditionalGenerator
from trip_sim.app.generators.lifecycle import LifecycleGenerator
from trip_sim.app.generators.location import LocationGenerator
from trip_sim.app.generators.milestones import DistanceMilestoneGenerator, TimeMilestoneGenerator
from trip_sim.app.generators.movement import MovementGenerator
from trip_sim.app.generators.stops import ScheduledStopGenerator, UnscheduledStopGenerator
from trip_sim.app.generators.technical import TechnicalGenerator
from trip_sim.config.models import TripModel
from trip_sim.domain.route import Route, RouteNotFoundError
from trip_sim.sim.clock import SimClock
from trip_sim.sim.event import TripEvent
from trip_sim.sim.hooks import EngineHooks, NoopHooks
from trip_sim.sim.rng import RNGRegistry


class TripTimelineEngine:
    """
    One synthesis pass over a route.

    Order: cancellation fixes the effective route; independent families run on it;
    unscheduled stops run before the two families that read their intervals;
    the composer merges, truncates and sorts.
    """

    def __init__(
        self,
        *,
        clock: SimClock,
        rng: RNGRegistry,
        trip: TripModel | None = None,
        hooks: EngineHooks | None = None,
        cancellation: CancellationDecider | None = None,
        lifecycle: LifecycleGenerator | None = None,
        location: LocationGenerator | None = None,
        distance_milestones: DistanceMilestoneGenerator | None = None,
        time_milestones: TimeMilestoneGenerator | None = None,
        scheduled_stops: ScheduledStopGenerator | None = None,
        unscheduled_stops: UnscheduledStopGenerator | None = None,
        movement: MovementGenerator | None = None,
        technical: TechnicalGenerator | None = None,
        conditional: ConditionalGenerator | None = None,
    ):
        self.clock = clock
        self.rng = rng
        self.trip = trip or TripModel()
        self._hooks = hooks or NoopHooks()
        self.cancellation = cancellation or CancellationDecider()
        self.lifecycle = lifecycle or LifecycleGenerator()
        self.location = location or LocationGenerator()
        self.distance_milestones = distance_milestones or DistanceMilestoneGenerator()
        self.time_milestones = time_milestones or TimeMilestoneGenerator()
        self.scheduled_stops = scheduled_stops or ScheduledStopGenerator()
        self.unscheduled_stops = unscheduled_stops or UnscheduledStopGenerator()
        self.movement = movement or MovementGenerator()
        self.technical = technical or TechnicalGenerator()
        self.conditional = conditional or ConditionalGenerator()
        self.composer = TimelineComposer(hooks=self._hooks)

    def _timed(self, family: str, fn, *args, **kw):
        t0 = time.perf_counter()
        out = fn(*args, **kw)
        events = out.events if hasattr(out, "events") else out
        self._hooks.generator_done(
            family, events=len(events), ms=(time.perf_counter() - t0) * 1000
        )
        return out

    def generate(self, coords: Sequence[Sequence[float]]) -> list[TripEvent]:
        if len(coords) < 2:
            self._hooks.error(reason="route_not_found", coordinates=len(coords))
            raise RouteNotFoundError(f"route needs at least 2 coordinates, got {len(coords)}")

        t0 = time.perf_counter()
        self._hooks.run_start(coordinates=len(coords), seed=self.rng.master_seed)
        full = TripContext(
            route=Route.from_coords(coords), clock=self.clock, trip=self.trip, rng=self.rng
        )

        outcome = self.cancellation.decide(full)
        self._hooks.cancellation(outcome, coordinates=full.n)
        ctx = full.restricted_to(full.route.prefix(outcome.index)) if outcome.triggered else full

        unscheduled = self._timed(
            self.unscheduled_stops.family, self.unscheduled_stops.generate, ctx
        )
        families = [
            self._timed(
                self.lifecycle.family, self.lifecycle.generate, ctx, cancelled=outcome.triggered
            ),
            self._timed(self.location.family, self.location.generate, ctx),
            self._timed(self.distance_milestones.family, self.distance_milestones.generate, ctx),
            self._timed(
                self.time_milestones.family,
                self.time_milestones.generate,
                ctx,
                unscheduled.intervals,
            ),
            self._timed(self.scheduled_stops.family, self.scheduled_stops.generate, ctx),
            self._timed(self.movement.family, self.movement.generate, ctx),
            unscheduled.events,
            self._timed(self.technical.family, self.technical.generate, ctx),
            self._timed(
                self.conditional.family, self.conditional.generate, ctx, unscheduled.intervals
            ),
            [outcome.event] if outcome.triggered else [],
        ]

        timeline = self.composer.compose(families, outcome)
        self._hooks.run_end(
            events=len(timeline),
            last_t=timeline[-1].t if timeline else None,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return timeline
