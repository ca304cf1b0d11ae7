# app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from trip_sim.app.engine import TripTimelineEngine
from trip_sim.app.protocols import RouteProvider
from trip_sim.config.models import ScenarioModel
from trip_sim.io.engine_logging import EngineLogging
from trip_sim.io.recorder import Recorder
from trip_sim.runtime.generator_factory import make_engine
from trip_sim.runtime.registries import make_route_provider
from trip_sim.sim.clock import SimClock
from trip_sim.sim.event import TripEvent
from trip_sim.sim.hooks import NoopHooks
from trip_sim.sim.rng import RNGRegistry


@dataclass
class App:
    model: ScenarioModel
    clock: SimClock
    rng: RNGRegistry
    routes: RouteProvider
    engine: TripTimelineEngine

    def run(self, recorder: Recorder | None = None) -> list[TripEvent]:
        # route failures propagate; nothing is generated or recorded
        coords = self.routes.coordinates()
        timeline = self.engine.generate(coords)
        if recorder is not None:
            recorder.record(timeline)
        return timeline


def build(cfg: ScenarioModel | Mapping, *, use_logging: bool = True) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) Clock & RNG
    clock = SimClock.utc_epoch(*model.sim.epoch, interval_s=model.sim.sample_interval_s)
    rng_registry = RNGRegistry(model.sim.seed, scenario=model.name)

    # 2) Hooks
    hooks = (
        EngineLogging(
            run_id=model.run_id,
            clock=clock,
            level=model.log.level,
            debug=model.log.debug,
        )
        if use_logging
        else NoopHooks()
    )

    # 3) Route source & engine
    routes = make_route_provider(model.route)
    engine = make_engine(model, clock=clock, rng=rng_registry, hooks=hooks)

    return App(model, clock, rng_registry, routes, engine)
