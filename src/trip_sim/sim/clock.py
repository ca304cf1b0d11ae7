# sim/clock.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

MIN = 60.0
HOUR = 3600.0


def minutes(x: float) -> float:
    return x * MIN


def hours(x: float) -> float:
    return x * HOUR


@dataclass(frozen=True)
class SimClock:
    """Virtual clock of one trip.

    ``epoch`` is the wall time of t=0 (trip start); ``interval_s`` is the nominal
    spacing between consecutive route samples.
    """

    epoch: datetime  # naive is treated as UTC; aware is normalised to UTC
    interval_s: float = 30.0

    @classmethod
    def utc_epoch(
        cls, y: int, m: int, d: int, hh=0, mm=0, ss=0, *, interval_s: float = 30.0
    ) -> SimClock:
        return cls(datetime(y, m, d, hh, mm, ss, tzinfo=UTC), interval_s=interval_s)

    def __post_init__(self):
        if self.epoch.tzinfo is None:
            object.__setattr__(self, "epoch", self.epoch.replace(tzinfo=UTC))
        else:
            object.__setattr__(self, "epoch", self.epoch.astimezone(UTC))
        if self.interval_s <= 0:
            raise ValueError(f"interval_s must be > 0, got {self.interval_s}")

    # wall -> sim seconds
    def to_sim(self, dt: datetime) -> float:
        delta = dt - self.epoch if dt.tzinfo else (dt.replace(tzinfo=UTC) - self.epoch)
        return delta.total_seconds()

    # sim seconds -> wall
    def to_wall(self, t: float) -> datetime:
        return self.epoch + timedelta(seconds=t)

    def timestamp(self, offset_s: float) -> datetime:
        return self.to_wall(offset_s)

    # sample helpers
    def offset_of(self, index: int) -> float:
        return index * self.interval_s

    def index_at(self, offset_s: float) -> int:
        """Sample index reached at ``offset_s`` (floor)."""
        return int(offset_s // self.interval_s)

    def elapsed_minutes(self, index: int) -> float:
        return self.offset_of(index) / MIN
