# sim/hooks.py
from typing import Protocol

from trip_sim.domain.records import CancellationOutcome


class EngineHooks(Protocol):
    def run_start(self, *, coordinates, seed): ...
    def cancellation(self, outcome: CancellationOutcome, *, coordinates): ...
    def generator_done(self, family: str, *, events, ms): ...
    def truncated(self, *, cutoff_t, dropped): ...
    def run_end(self, *, events, last_t, wall_ms): ...
    def error(self, *, reason: str, **kw): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def cancellation(self, *_, **__):
        pass

    def generator_done(self, *_, **__):
        pass

    def truncated(self, **_):
        pass

    def run_end(self, **_):
        pass

    def error(self, **_):
        pass
