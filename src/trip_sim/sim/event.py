# sim/event.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

import numpy as np

from trip_sim.sim.clock import SimClock


class EventType(str, Enum):
    TRACKING_STARTED = "tracking_started"
    TRIP_STARTED = "trip_started"
    TRIP_COMPLETED = "trip_completed"
    TRACKING_STOPPED = "tracking_stopped"
    LOCATION_PING = "location_ping"
    DISTANCE_MILESTONE = "distance_milestone"
    TIME_MILESTONE = "time_milestone"
    STOP_ARRIVAL = "stop_arrival"
    STOP_DEPARTURE = "stop_departure"
    VEHICLE_STOPPED = "vehicle_stopped"
    UNSCHEDULED_STOP = "unscheduled_stop"
    VEHICLE_MOVING = "vehicle_moving"
    SPEED_CHANGED = "speed_changed"
    SPEED_VIOLATION = "speed_violation"
    SIGNAL_DEGRADED = "signal_degraded"
    SIGNAL_LOST = "signal_lost"
    SIGNAL_RECOVERED = "signal_recovered"
    DEVICE_BATTERY_LOW = "device_battery_low"
    DEVICE_OVERHEATING = "device_overheating"
    DEVICE_ERROR = "device_error"
    FUEL_LEVEL_LOW = "fuel_level_low"
    REFUELING_STARTED = "refueling_started"
    REFUELING_COMPLETED = "refueling_completed"
    TRIP_PAUSED = "trip_paused"
    TRIP_RESUMED = "trip_resumed"
    VEHICLE_TELEMETRY = "vehicle_telemetry"
    TRIP_CANCELLED = "trip_cancelled"


def _frozen(v):
    if isinstance(v, Mapping):
        return MappingProxyType({k: _frozen(x) for k, x in v.items()})
    if isinstance(v, (list, tuple)):
        return tuple(_frozen(x) for x in v)
    return v


@dataclass(frozen=True)
class TripEvent:
    event_id: str
    event_type: EventType
    t: float  # seconds since trip start
    timestamp: datetime
    vehicle_id: str
    trip_id: str | None = None
    device_id: str | None = None
    location: Mapping[str, Any] | None = None
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "payload", _frozen(self.payload or {}))
        if self.location is not None:
            object.__setattr__(self, "location", _frozen(self.location))

    @property
    def iso_timestamp(self) -> str:
        ts = self.timestamp
        ts = ts.replace(tzinfo=UTC) if ts.tzinfo is None else ts.astimezone(UTC)
        return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "event_id": self.event_id,
            "event_type": self.event_type.value,
            "timestamp": self.iso_timestamp,
            "vehicle_id": self.vehicle_id,
        }
        if self.trip_id is not None:
            out["trip_id"] = self.trip_id
        if self.device_id is not None:
            out["device_id"] = self.device_id
        if self.location is not None:
            out["location"] = _plain(self.location)
        for k, v in self.payload.items():
            out[k] = _plain(v)
        return out


def _plain(v):
    if isinstance(v, Mapping):
        return {k: _plain(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_plain(x) for x in v]
    return v


_B36 = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass(frozen=True)
class Envelope:
    """Identifiers shared by every event of one trip."""

    vehicle_id: str
    trip_id: str | None = None
    device_id: str | None = None


class EventFactory:
    """
    Builds envelope-complete events for one generator family.

    Ids combine the event's virtual instant (epoch ms) with 9 base36 characters
    drawn from the family's own stream, so they are unique within a run and
    reproducible under a fixed seed.
    """

    def __init__(self, clock: SimClock, envelope: Envelope, rng: np.random.Generator):
        self.clock = clock
        self.envelope = envelope
        self.rng = rng

    def _event_id(self, ts: datetime) -> str:
        digits = self.rng.integers(0, 36, size=9)
        return f"evt_{int(ts.timestamp() * 1000)}_" + "".join(_B36[int(d)] for d in digits)

    def make(
        self,
        event_type: EventType,
        t: float,
        *,
        location: Mapping[str, Any] | None = None,
        trip: bool = True,
        device: bool = False,
        **payload: Any,
    ) -> TripEvent:
        ts = self.clock.timestamp(t)
        return TripEvent(
            event_id=self._event_id(ts),
            event_type=event_type,
            t=float(t),
            timestamp=ts,
            vehicle_id=self.envelope.vehicle_id,
            trip_id=self.envelope.trip_id if trip else None,
            device_id=self.envelope.device_id if device else None,
            location=location,
            payload=payload,
        )
