# runtime/generator_factory.py
from trip_sim.app.engine import TripTimelineEngine
from trip_sim.app.generators.cancellation import CancellationDecider
from trip_sim.app.generators.conditional import ConditionalGenerator
from trip_sim.app.generators.lifecycle import LifecycleGenerator
from trip_sim.app.generators.milestones import DistanceMilestoneGenerator, TimeMilestoneGenerator
from trip_sim.app.generators.stops import ScheduledStopGenerator, UnscheduledStopGenerator
from trip_sim.config.models import CancellationModel, MilestoneModel, ScenarioModel, StopsModel
from trip_sim.sim.clock import SimClock
from trip_sim.sim.hooks import EngineHooks
from trip_sim.sim.rng import RNGRegistry


def make_cancellation(cfg: CancellationModel) -> CancellationDecider:
    if isinstance(cfg, CancellationModel):
        return CancellationDecider(
            probability=cfg.probability, window_fraction=cfg.window_fraction, reasons=cfg.reasons
        )
    else:
        raise TypeError(cfg)


def make_milestones(
    cfg: MilestoneModel,
) -> tuple[DistanceMilestoneGenerator, TimeMilestoneGenerator]:
    if isinstance(cfg, MilestoneModel):
        return (
            DistanceMilestoneGenerator(
                thresholds_km=cfg.distance_km, tolerance_km=cfg.tolerance_km
            ),
            TimeMilestoneGenerator(thresholds_h=cfg.time_hours),
        )
    else:
        raise TypeError(cfg)


def make_stops(cfg: StopsModel) -> tuple[ScheduledStopGenerator, UnscheduledStopGenerator]:
    if isinstance(cfg, StopsModel):
        return (
            ScheduledStopGenerator(
                fractions=cfg.scheduled_fractions, dwell_min=cfg.scheduled_dwell_min
            ),
            UnscheduledStopGenerator(
                count=cfg.unscheduled_count, duration_min=cfg.unscheduled_duration_min
            ),
        )
    else:
        raise TypeError(cfg)


def make_engine(
    model: ScenarioModel, *, clock: SimClock, rng: RNGRegistry, hooks: EngineHooks
) -> TripTimelineEngine:
    distance_ms, time_ms = make_milestones(model.milestones)
    scheduled, unscheduled = make_stops(model.stops)
    return TripTimelineEngine(
        clock=clock,
        rng=rng,
        trip=model.trip,
        hooks=hooks,
        cancellation=make_cancellation(model.cancellation),
        lifecycle=LifecycleGenerator(
            fuel_l_per_km=model.fuel.consumption_l_per_km,
            scheduled_stops=len(model.stops.scheduled_fractions),
        ),
        distance_milestones=distance_ms,
        time_milestones=time_ms,
        scheduled_stops=scheduled,
        unscheduled_stops=unscheduled,
        conditional=ConditionalGenerator(fuel=model.fuel),
    )
