# app/generators/technical.py
"""Device and signal faults: ambient noise, uncorrelated with trip progress."""

from trip_sim.app.generators.base import TripContext, r1
from trip_sim.sim.event import EventType, TripEvent
from trip_sim.sim.rng import pick, randint, scaled_index

DEVICE_ERRORS = (
    ("sensor_malfunction", "ERR_FUEL_SENSOR_003", "Fuel level sensor reading invalid"),
    ("gps_error", "ERR_GPS_TIMEOUT_001", "GPS signal timeout detected"),
    ("communication_error", "ERR_COMM_LOST_002", "Communication with server lost"),
    ("memory_error", "ERR_MEM_FULL_004", "Device memory nearly full"),
)
SEVERITIES = ("warning", "error", "critical")


class TechnicalGenerator:
    family = "technical"

    def __init__(
        self,
        degraded=(8, 12),
        signal_losses=(2, 3),
        battery_low=(1, 2),
        errors=(2, 3),
    ):
        self.degraded = degraded
        self.signal_losses = signal_losses
        self.battery_low = battery_low
        self.errors = errors

    def generate(self, ctx: TripContext) -> list[TripEvent]:
        rng = ctx.stream(self.family)
        f = ctx.factory(self.family)
        route, clock, n = ctx.route, ctx.clock, ctx.n
        out: list[TripEvent] = []

        for _ in range(randint(rng, *self.degraded)):
            i = int(rng.integers(n))
            previous = 5 + rng.random() * 15
            current = 50 + rng.random() * 200
            out.append(
                f.make(
                    EventType.SIGNAL_DEGRADED,
                    clock.offset_of(i),
                    location=route.point(i),
                    accuracy_current_meters=r1(current),
                    accuracy_previous_meters=r1(previous),
                    signal_quality=pick(rng, ("poor", "fair")),
                )
            )

        for _ in range(randint(rng, *self.signal_losses)):
            i = int(rng.integers(n))
            lost_t = clock.offset_of(i)
            lost_for = 30 + rng.random() * 120
            recovered_t = lost_t + lost_for
            j = route.clamp(clock.index_at(recovered_t))
            out.append(
                f.make(
                    EventType.SIGNAL_LOST,
                    lost_t,
                    last_known_location=route.point(i, accuracy_meters=r1(50 + rng.random() * 100)),
                    signal_quality_before_loss="poor",
                    location_description="Highway tunnel area",
                )
            )
            out.append(
                f.make(
                    EventType.SIGNAL_RECOVERED,
                    recovered_t,
                    recovered_location=route.point(
                        j, accuracy_meters=r1(200 + rng.random() * 300)
                    ),
                    signal_lost_duration_seconds=round(lost_for),
                    signal_quality_after_recovery="fair",
                )
            )

        # battery runs down late in the trip
        for _ in range(randint(rng, *self.battery_low)):
            i = scaled_index(rng, n, 0.6, 0.4)
            out.append(
                f.make(
                    EventType.DEVICE_BATTERY_LOW,
                    clock.offset_of(i),
                    location=route.point(i),
                    device=True,
                    battery_percent=randint(rng, 10, 19),
                    estimated_remaining_hours=r1(1 + rng.random() * 3),
                    charging_required=True,
                )
            )

        i = scaled_index(rng, n, 0.4, 0.3)
        out.append(
            f.make(
                EventType.DEVICE_OVERHEATING,
                clock.offset_of(i),
                location=route.point(i),
                device=True,
                device_temperature_celsius=r1(65 + rng.random() * 10),
                threshold_celsius=65,
                ambient_temperature_celsius=r1(35 + rng.random() * 10),
                performance_throttled=bool(rng.random() > 0.3),
            )
        )

        for _ in range(randint(rng, *self.errors)):
            i = int(rng.integers(n))
            error_type, code, message = pick(rng, DEVICE_ERRORS)
            out.append(
                f.make(
                    EventType.DEVICE_ERROR,
                    clock.offset_of(i),
                    location=route.point(i),
                    device=True,
                    error_type=error_type,
                    error_code=code,
                    error_message=message,
                    severity=pick(rng, SEVERITIES),
                )
            )
        return out
