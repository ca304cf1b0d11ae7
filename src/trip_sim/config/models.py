import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


def _ascending(v: list, info: ValidationInfo) -> list:
    if any(b <= a for a, b in zip(v, v[1:])):
        raise ValueError(f"{info.field_name} must be strictly ascending")
    return v


def _range(v: tuple, info: ValidationInfo) -> tuple:
    lo, hi = v
    if lo < 0 or hi < lo:
        raise ValueError(f"{info.field_name} must satisfy 0 <= lo <= hi, got {v}")
    return v


class SimModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    epoch: tuple[int, int, int, int, int, int] = (2025, 11, 3, 10, 0, 0)
    seed: int = 0
    sample_interval_s: float = Field(default=30.0, gt=0)


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


class TripModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    vehicle_id: str = "VH_123"
    trip_id: str = "trip_20251103_100000"
    device_id: str = "GPS_DEVICE_789"
    driver_id: str = "DRV_456"
    vehicle_type: str = "delivery_van"
    odometer_start_km: float = 125650.0
    engine_hours_start: float = 8456.0
    firmware_version: str = "2.4.1"
    origin_name: str = "Fleet Depot A"
    destination_name: str = "Fleet Depot B"


# ----------------- ROUTES ---------------------


class RouteStaticModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["static"] = "static"
    coordinates: list[tuple[float, float]]  # (lon, lat)

    @field_validator("coordinates")
    @classmethod
    def _two_or_more(cls, v):
        if len(v) < 2:
            raise ValueError(f"route needs at least 2 coordinates, got {len(v)}")
        return v


class RouteGeoJSONModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["geojson"] = "geojson"
    file: str

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


RouteUnion = Annotated[RouteStaticModel | RouteGeoJSONModel, Field(discriminator="kind")]


# ----------------- GENERATORS ---------------------


class CancellationModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    probability: float = Field(default=0.05, ge=0.0, le=1.0)
    window_fraction: float = Field(default=0.2, gt=0.0, le=1.0)
    reasons: list[str] = Field(
        default_factory=lambda: [
            "vehicle_malfunction",
            "driver_emergency",
            "weather_conditions",
            "road_closure",
            "customer_cancellation",
        ],
        min_length=1,
    )


class MilestoneModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    distance_km: list[float] = Field(
        default_factory=lambda: [50, 100, 150, 200, 250, 300, 400, 500]
    )
    tolerance_km: float = Field(default=5.0, ge=0)
    time_hours: list[float] = Field(default_factory=lambda: [1, 2, 4, 6, 8, 12, 16, 20, 24])

    @field_validator("distance_km", "time_hours")
    @classmethod
    def _asc(cls, v, info: ValidationInfo):
        if any(x <= 0 for x in v):
            raise ValueError(f"{info.field_name} thresholds must be > 0")
        return _ascending(v, info)


class StopsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    scheduled_fractions: list[float] = Field(default_factory=lambda: [0.25, 0.5, 0.75])
    scheduled_dwell_min: float = Field(default=15.0, ge=0)
    unscheduled_count: tuple[int, int] = (3, 6)
    unscheduled_duration_min: tuple[int, int] = (5, 30)

    @field_validator("unscheduled_count", "unscheduled_duration_min")
    @classmethod
    def _ranges(cls, v, info: ValidationInfo):
        return _range(v, info)

    @field_validator("scheduled_fractions")
    @classmethod
    def _unit(cls, v, info: ValidationInfo):
        _ascending(v, info)
        if any(not 0.0 <= f <= 1.0 for f in v):
            raise ValueError("scheduled_fractions must lie in [0, 1]")
        return v


class FuelModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    start_percent: float = 95.0
    consumption_l_per_km: float = Field(default=0.12, gt=0)
    tank_l: float = Field(default=80.0, gt=0)
    low_percent: float = 25.0
    refuel_percent: float = 15.0
    refill_percent: float = 90.0
    floor_percent: float = 5.0
    checkpoints: int = Field(default=8, ge=1)
    telemetry_snapshots: int = Field(default=12, ge=1)

    @model_validator(mode="after")
    def _thresholds(self):
        if not (self.floor_percent <= self.refuel_percent <= self.low_percent):
            raise ValueError("expected floor_percent <= refuel_percent <= low_percent")
        if not (self.low_percent < self.refill_percent <= 100.0):
            raise ValueError("refill_percent must lie in (low_percent, 100]")
        return self


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "trip"
    run_id: str = "local"
    sim: SimModel = SimModel()
    log: LogModel = LogModel()
    trip: TripModel = TripModel()
    route: RouteUnion
    cancellation: CancellationModel = CancellationModel()
    milestones: MilestoneModel = MilestoneModel()
    stops: StopsModel = StopsModel()
    fuel: FuelModel = FuelModel()
