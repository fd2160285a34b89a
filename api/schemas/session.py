"""Route session API schemas."""

from typing import List, Literal, Optional

from pydantic import BaseModel, field_validator

from .common import Position, coerce_optional_number
from .fuel import RouteResponse


class SegmentViewModel(BaseModel):
    """One segment panel."""
    index: int
    label: str
    activity: Literal["active", "inactive"]
    collapse: Literal["expanded", "collapsed"]
    waypoints: List[Position]
    distance_nm: Optional[float] = None
    rpm: Optional[float] = None
    weather_factor: Optional[float] = None
    time_h: Optional[float] = None
    speed_kn: Optional[float] = None


class SessionResponse(BaseModel):
    """Session state together with the recomputed fuel balance."""
    session_id: str
    active_index: Optional[int] = None
    fuel_start_mt: Optional[float] = None
    can_remove_segments: bool
    segments: List[SegmentViewModel]
    fuel: RouteResponse


class SegmentInputUpdate(BaseModel):
    """Change of a single form field."""
    field: Literal["distance_nm", "rpm", "weather_factor", "time_h", "speed_kn"]
    value: Optional[float] = None

    coerce_numbers = field_validator("value", mode="before")(coerce_optional_number)


class FuelStartUpdate(BaseModel):
    fuel_start_mt: Optional[float] = None

    coerce_numbers = field_validator("fuel_start_mt", mode="before")(coerce_optional_number)
