# domain/records.py
"""Bookkeeping records passed between generators (never emitted)."""

from dataclasses import dataclass

from trip_sim.sim.event import TripEvent


@dataclass(frozen=True)
class StopInterval:
    start_s: float
    end_s: float
    duration_min: int

    @property
    def duration_s(self) -> float:
        return self.duration_min * 60.0

    def contains(self, t: float) -> bool:
        return self.start_s <= t < self.end_s


@dataclass(frozen=True)
class CancellationOutcome:
    triggered: bool
    index: int | None = None
    event: TripEvent | None = None

    @property
    def cutoff_t(self) -> float | None:
        return self.event.t if (self.triggered and self.event) else None


NOT_CANCELLED = CancellationOutcome(triggered=False)
