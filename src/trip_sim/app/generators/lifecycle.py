# app/generators/lifecycle.py
from trip_sim.app.generators.base import TripContext, r1
from trip_sim.sim.clock import HOUR, MIN, minutes
from trip_sim.sim.event import EventType, TripEvent


class LifecycleGenerator:
    """
    Bracketing events of the trip.

    Normal path: tracking_started -> trip_started -> trip_completed -> tracking_stopped.
    Cancelled path stops after trip_started; the cancellation event is the terminal marker.
    """

    family = "lifecycle"

    def __init__(
        self,
        lead_s: float = minutes(5),
        trail_s: float = minutes(5),
        fuel_l_per_km: float = 0.12,
        scheduled_stops: int = 3,
    ):
        self.lead_s = lead_s
        self.trail_s = trail_s
        self.fuel_l_per_km = fuel_l_per_km
        self.scheduled_stops = scheduled_stops

    def generate(self, ctx: TripContext, *, cancelled: bool = False) -> list[TripEvent]:
        f = ctx.factory(self.family)
        trip = ctx.trip
        route = ctx.route
        start = route.point(0, name=trip.origin_name)
        end = route.point(-1, name=trip.destination_name)

        events = [
            f.make(
                EventType.TRACKING_STARTED,
                -self.lead_s,
                location=start,
                trip=False,
                device=True,
                device_info={
                    "firmware_version": trip.firmware_version,
                    "battery_percent": 100,
                    "signal_quality": "excellent",
                },
            ),
            f.make(
                EventType.TRIP_STARTED,
                0.0,
                location=start,
                driver_id=trip.driver_id,
                vehicle_type=trip.vehicle_type,
                odometer_start_km=trip.odometer_start_km,
            ),
        ]
        if cancelled:
            return events

        end_t = ctx.clock.offset_of(ctx.n)
        total_min = end_t / MIN
        total_km = route.total_km
        avg = total_km / (end_t / HOUR) if end_t > 0 else 0.0
        events.append(
            f.make(
                EventType.TRIP_COMPLETED,
                end_t,
                location=end,
                trip_summary={
                    "duration_minutes": round(total_min),
                    "total_distance_km": r1(total_km),
                    "odometer_end_km": trip.odometer_start_km + total_km,
                    "stops_count": self.scheduled_stops,
                    "fuel_consumed_liters": r1(total_km * self.fuel_l_per_km),
                    "avg_speed_kmh": r1(avg),
                },
            )
        )
        events.append(
            f.make(
                EventType.TRACKING_STOPPED,
                end_t + self.trail_s,
                location=end,
                trip=False,
                device=True,
                session_duration_hours=r1(end_t / HOUR),
                total_distance_tracked_km=r1(total_km),
            )
        )
        return events
