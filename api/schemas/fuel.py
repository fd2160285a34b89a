"""Fuel model API schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import Position, coerce_optional_number


class ConsumptionRateRequest(BaseModel):
    rpm: Optional[float] = None
    weather_factor: Optional[float] = 1.0

    coerce_numbers = field_validator("rpm", "weather_factor", mode="before")(coerce_optional_number)


class ConsumptionRateResponse(BaseModel):
    rpm: float
    weather_factor: float
    consumption_rate: float = Field(..., description="mt/h")


class TimeRequest(BaseModel):
    distance_nm: Optional[float] = None
    speed_kn: Optional[float] = None

    coerce_numbers = field_validator("distance_nm", "speed_kn", mode="before")(coerce_optional_number)


class TimeResponse(BaseModel):
    time_h: float


class SpeedRequest(BaseModel):
    distance_nm: Optional[float] = None
    time_h: Optional[float] = None

    coerce_numbers = field_validator("distance_nm", "time_h", mode="before")(coerce_optional_number)


class SpeedResponse(BaseModel):
    speed_kn: float


class DistanceRequest(BaseModel):
    """Polyline of map waypoints."""
    waypoints: List[Position]


class DistanceResponse(BaseModel):
    distance_nm: float
    legs_nm: List[float]


class SegmentInput(BaseModel):
    """Form values of one segment. Blank, invalid and negative numbers read as 0."""
    distance_nm: Optional[float] = None
    rpm: Optional[float] = None
    weather_factor: Optional[float] = 1.0
    time_h: Optional[float] = None
    speed_kn: Optional[float] = None

    coerce_numbers = field_validator(
        "distance_nm", "rpm", "weather_factor", "time_h", "speed_kn", mode="before"
    )(coerce_optional_number)


class RouteRequest(BaseModel):
    segments: List[SegmentInput] = Field(..., min_length=1)
    fuel_start_mt: Optional[float] = None

    coerce_numbers = field_validator("fuel_start_mt", mode="before")(coerce_optional_number)


class SegmentResultModel(BaseModel):
    """Row of the results table."""
    segment: int
    time_h: float
    time_derived: bool
    consumption_rate: float
    consumption_mt: float
    rob_mt: float
    highlight: bool = False


class RouteResponse(BaseModel):
    fuel_start_mt: float
    results: List[SegmentResultModel]
    total_consumption_mt: float
    final_rob_mt: float
    warning: bool
    warning_message: Optional[str] = None
    fuel_exhausted: bool
