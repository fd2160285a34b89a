"""
Fuel model API router.

Stateless access to the consumption model: hourly rate, time/speed
derivation, waypoint distances and the full route ROB balance.
"""

import logging

from fastapi import APIRouter, HTTPException

from api.config import settings
from api.schemas import (
    ConsumptionRateRequest,
    ConsumptionRateResponse,
    DistanceRequest,
    DistanceResponse,
    RouteRequest,
    RouteResponse,
    SegmentResultModel,
    SpeedRequest,
    SpeedResponse,
    TimeRequest,
    TimeResponse,
)
from src.fuel.consumption_model import calculate_consumption_rate
from src.fuel.route_fuel import (
    RESULT_DECIMALS,
    RouteFuelResult,
    RouteSegment,
    calculate_speed,
    calculate_time,
    compute_route,
    parse_or_zero,
    parse_weather_factor,
)
from src.routes.geodesy import GeoPoint, calculate_distance

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Fuel"])


def build_route_response(result: RouteFuelResult) -> RouteResponse:
    """Results table with consumption and ROB at presentation precision."""
    rows = []
    for row, segment in zip(result.to_table(), result.segments):
        rows.append(SegmentResultModel(
            segment=row["segment"],
            time_h=round(segment.time_h, 2),
            time_derived=segment.time_derived,
            consumption_rate=round(segment.consumption_rate, 4),
            consumption_mt=row["consumption_mt"],
            rob_mt=row["rob_mt"],
            highlight=row["highlight"],
        ))

    return RouteResponse(
        fuel_start_mt=result.start_mt,
        results=rows,
        total_consumption_mt=round(result.total_consumption_mt, RESULT_DECIMALS),
        final_rob_mt=round(result.final_rob_mt, RESULT_DECIMALS),
        warning=result.warning,
        warning_message=result.warning_message,
        fuel_exhausted=result.fuel_exhausted,
    )


@router.post("/api/fuel/consumption-rate", response_model=ConsumptionRateResponse)
async def consumption_rate(request: ConsumptionRateRequest):
    """Hourly consumption (mt/h) at an RPM, corrected by the weather factor."""
    rpm = parse_or_zero(request.rpm)
    weather_factor = parse_weather_factor(request.weather_factor)
    return ConsumptionRateResponse(
        rpm=rpm,
        weather_factor=weather_factor,
        consumption_rate=calculate_consumption_rate(rpm, weather_factor),
    )


@router.post("/api/fuel/time", response_model=TimeResponse)
async def passage_time(request: TimeRequest):
    """Time in hours from distance and speed (0 when speed is not positive)."""
    return TimeResponse(
        time_h=calculate_time(parse_or_zero(request.distance_nm), parse_or_zero(request.speed_kn))
    )


@router.post("/api/fuel/speed", response_model=SpeedResponse)
async def average_speed(request: SpeedRequest):
    """Speed in knots from distance and time (0 when time is not positive)."""
    return SpeedResponse(
        speed_kn=calculate_speed(parse_or_zero(request.distance_nm), parse_or_zero(request.time_h))
    )


@router.post("/api/fuel/distance", response_model=DistanceResponse)
async def waypoint_distance(request: DistanceRequest):
    """Great-circle length of a waypoint polyline in nautical miles."""
    if len(request.waypoints) < 2:
        raise HTTPException(status_code=400, detail="At least 2 waypoints required")

    points = [GeoPoint(lat=p.lat, lon=p.lon) for p in request.waypoints]
    legs = [calculate_distance(points[i], points[i + 1]) for i in range(len(points) - 1)]
    return DistanceResponse(distance_nm=sum(legs), legs_nm=legs)


@router.post("/api/fuel/route", response_model=RouteResponse)
async def route_fuel(request: RouteRequest):
    """
    Per-segment consumption and cumulative ROB.

    Missing time is derived from distance and speed. ROB is reported
    floored at zero; the warning flag is raised when ROB ever exceeds the
    starting quantity.
    """
    if len(request.segments) > settings.max_segments:
        raise HTTPException(
            status_code=400,
            detail=f"Too many segments (maximum {settings.max_segments})",
        )

    segments = [
        RouteSegment.from_raw(
            distance_nm=s.distance_nm,
            rpm=s.rpm,
            weather_factor=s.weather_factor,
            time_h=s.time_h,
            speed_kn=s.speed_kn,
        )
        for s in request.segments
    ]
    result = compute_route(segments, parse_or_zero(request.fuel_start_mt))
    logger.info(
        f"Route fuel computed: {len(segments)} segments, "
        f"{result.total_consumption_mt:.3f}mt consumed, warning={result.warning}"
    )
    return build_route_response(result)
