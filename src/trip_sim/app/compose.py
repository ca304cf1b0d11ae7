# app/compose.py
from collections.abc import Iterable

from trip_sim.domain.records import NOT_CANCELLED, CancellationOutcome
from trip_sim.sim.event import TripEvent
from trip_sim.sim.hooks import EngineHooks, NoopHooks


class TimelineComposer:
    """Merges family outputs into one timeline: truncate at cancellation, then sort."""

    def __init__(self, hooks: EngineHooks | None = None):
        self._hooks = hooks or NoopHooks()

    def compose(
        self,
        families: Iterable[Iterable[TripEvent]],
        cancellation: CancellationOutcome = NOT_CANCELLED,
    ) -> list[TripEvent]:
        merged = [ev for events in families for ev in events]
        if cancellation.triggered:
            if cancellation.event is None:
                raise ValueError("triggered cancellation carries no event")
            cutoff = cancellation.event.timestamp
            kept = [ev for ev in merged if ev.timestamp <= cutoff]
            self._hooks.truncated(cutoff_t=cancellation.event.t, dropped=len(merged) - len(kept))
            merged = kept
        # stable: same-instant events keep insertion order
        return sorted(merged, key=lambda ev: ev.timestamp)
