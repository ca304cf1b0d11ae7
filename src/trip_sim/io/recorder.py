# io/recorder.py
import json
import sys
from collections.abc import Iterable
from typing import Protocol

from trip_sim.sim.event import TripEvent


class Sink(Protocol):
    def write(self, ev: TripEvent) -> None: ...
    def close(self) -> None: ...


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, ev: TripEvent) -> None:
        self.fp.write(json.dumps(ev.to_dict()) + "\n")

    def close(self) -> None:
        self.fp.flush()


class JsonSink:
    """Whole timeline as one JSON array, written on close."""

    def __init__(self, fp=sys.stdout, indent: int | None = 2):
        self.fp, self.indent = fp, indent
        self._rows: list[dict] = []

    def write(self, ev: TripEvent) -> None:
        self._rows.append(ev.to_dict())

    def close(self) -> None:
        json.dump(self._rows, self.fp, indent=self.indent)
        self.fp.write("\n")
        self.fp.flush()


class MemorySink:
    def __init__(self):
        self.events: list[TripEvent] = []

    def write(self, ev: TripEvent) -> None:
        self.events.append(ev)

    def close(self) -> None:
        pass


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)

    def record(self, timeline: Iterable[TripEvent]) -> int:
        n = 0
        for ev in timeline:
            for s in self.sinks:
                s.write(ev)
            n += 1
        for s in self.sinks:
            s.close()
        return n
