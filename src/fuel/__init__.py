"""Fuel consumption model and route ROB balance."""

from .consumption_model import WorkingPoint, calculate_consumption_rate, model_curve
from .route_fuel import (
    RouteFuelResult,
    RouteSegment,
    SegmentResult,
    calculate_speed,
    calculate_time,
    compute_route,
    parse_or_zero,
)
from .historical import HistoricalPoint, ModelComparison, compare_with_model

__all__ = [
    "WorkingPoint",
    "calculate_consumption_rate",
    "model_curve",
    "RouteFuelResult",
    "RouteSegment",
    "SegmentResult",
    "calculate_speed",
    "calculate_time",
    "compute_route",
    "parse_or_zero",
    "HistoricalPoint",
    "ModelComparison",
    "compare_with_model",
]
