# app/generators/milestones.py
from collections.abc import Sequence

from trip_sim.app.generators.base import TripContext, r1
from trip_sim.domain.records import StopInterval
from trip_sim.sim.clock import HOUR, MIN, hours
from trip_sim.sim.event import EventType, TripEvent

DISTANCE_MILESTONES_KM = (50, 100, 150, 200, 250, 300, 400, 500)
TIME_MILESTONES_H = (1, 2, 4, 6, 8, 12, 16, 20, 24)


def stop_time_before(stops: Sequence[StopInterval], threshold_s: float) -> float:
    """Stopped seconds accrued by ``threshold_s``; overlapping intervals are each counted."""
    total = 0.0
    for s in stops:
        if s.start_s <= threshold_s:
            total += min(s.duration_s, threshold_s - s.start_s)
    return total


class DistanceMilestoneGenerator:
    family = "distance_milestones"

    def __init__(self, thresholds_km=DISTANCE_MILESTONES_KM, tolerance_km: float = 5.0):
        self.thresholds_km = tuple(thresholds_km)
        self.tolerance_km = tolerance_km

    def generate(self, ctx: TripContext) -> list[TripEvent]:
        f = ctx.factory(self.family)
        route = ctx.route
        out: list[TripEvent] = []
        for km in self.thresholds_km:
            i = route.nearest_index(km)
            reached = route.distances[i]
            if reached < km - self.tolerance_km:
                continue
            elapsed_min = ctx.clock.elapsed_minutes(i)
            avg = reached / (elapsed_min / 60) if elapsed_min > 0 else 0.0
            out.append(
                f.make(
                    EventType.DISTANCE_MILESTONE,
                    ctx.clock.offset_of(i),
                    location=route.point(i),
                    milestone_km=km,
                    total_distance_km=r1(reached),
                    elapsed_time_minutes=round(elapsed_min),
                    average_speed_kmh=r1(avg),
                    stops_count=int(elapsed_min // 120),  # ~1 stop per 2 h
                )
            )
        return out


class TimeMilestoneGenerator:
    """
    Hourly progress markers shifted later by the stop time accrued before each
    nominal threshold, so distance/time never implies driving through a stop.
    """

    family = "time_milestones"

    def __init__(self, thresholds_h=TIME_MILESTONES_H):
        self.thresholds_h = tuple(thresholds_h)

    def generate(self, ctx: TripContext, stops: Sequence[StopInterval] = ()) -> list[TripEvent]:
        f = ctx.factory(self.family)
        route = ctx.route
        out: list[TripEvent] = []
        for h in self.thresholds_h:
            nominal_s = hours(h)
            stopped_s = stop_time_before(stops, nominal_s)
            adjusted_s = nominal_s + stopped_s
            i = ctx.clock.index_at(adjusted_s)
            if i >= ctx.n:
                continue
            travelled = route.distances[i]
            elapsed_min = nominal_s / MIN
            out.append(
                f.make(
                    EventType.TIME_MILESTONE,
                    adjusted_s,
                    location=route.point(i),
                    milestone_hours=h,
                    elapsed_time_minutes=elapsed_min,
                    distance_traveled_km=r1(travelled),
                    average_speed_kmh=r1(travelled / (nominal_s / HOUR)),
                    stops_count=sum(1 for s in stops if s.start_s <= nominal_s),
                    moving_time_minutes=round(elapsed_min - stopped_s / MIN),
                )
            )
        return out
