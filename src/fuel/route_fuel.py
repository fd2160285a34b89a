"""
Route fuel balance calculation.

Runs the consumption model over an ordered list of route segments and
keeps a running remaining-onboard (ROB) balance starting from the HFO
quantity on departure. Every call is a full recomputation; nothing is
cached between calls.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, List, Optional, Sequence

from src.fuel.consumption_model import MODEL_WEATHER_FACTOR, calculate_consumption_rate

logger = logging.getLogger(__name__)

ROB_WARNING_MESSAGE = "Check HFO Start - ROB value exceeds starting fuel."

# Presentation precision for consumption and ROB
RESULT_DECIMALS = 3


def parse_or_zero(value: Any) -> float:
    """
    Coerce a raw numeric input to a non-negative float.

    None, blank or non-numeric strings, NaN, infinities and negative
    values all become 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        val = float(value)
    except (ValueError, TypeError):
        return 0.0

    if math.isnan(val) or math.isinf(val) or val < 0:
        return 0.0
    return val


def parse_weather_factor(value: Any, default: float = MODEL_WEATHER_FACTOR) -> float:
    """Weather factor with the model's neutral value when missing or invalid."""
    val = parse_or_zero(value)
    return val if val > 0 else default


def calculate_time(distance_nm: float, speed_kn: float) -> float:
    """Passage time in hours, 0 when speed is not positive or the result overflows."""
    if not speed_kn or speed_kn <= 0:
        return 0.0
    time_h = distance_nm / speed_kn
    return time_h if math.isfinite(time_h) else 0.0


def calculate_speed(distance_nm: float, time_h: float) -> float:
    """Average speed in knots, 0 when time is not positive or the result overflows."""
    if not time_h or time_h <= 0:
        return 0.0
    speed_kn = distance_nm / time_h
    return speed_kn if math.isfinite(speed_kn) else 0.0


@dataclass(frozen=True)
class RouteSegment:
    """One voyage leg with constant RPM, weather and time assumptions."""
    distance_nm: float = 0.0
    rpm: float = 0.0
    weather_factor: float = MODEL_WEATHER_FACTOR
    time_h: float = 0.0
    speed_kn: float = 0.0

    @classmethod
    def from_raw(
        cls,
        distance_nm: Any = None,
        rpm: Any = None,
        weather_factor: Any = None,
        time_h: Any = None,
        speed_kn: Any = None,
    ) -> 'RouteSegment':
        """Build a segment from form values using the parse-or-zero policy."""
        return cls(
            distance_nm=parse_or_zero(distance_nm),
            rpm=parse_or_zero(rpm),
            weather_factor=parse_weather_factor(weather_factor),
            time_h=parse_or_zero(time_h),
            speed_kn=parse_or_zero(speed_kn),
        )

    def with_derived_time(self) -> 'RouteSegment':
        """Fill in time from distance and speed when time is unset."""
        if not self.time_h and self.speed_kn > 0 and self.distance_nm > 0:
            return replace(self, time_h=calculate_time(self.distance_nm, self.speed_kn))
        return self


@dataclass
class SegmentResult:
    """Fuel result for a single segment."""
    segment_index: int  # 1-based, as shown in the results table
    time_h: float
    time_derived: bool
    consumption_rate: float  # mt/h
    consumption_mt: float
    rob_mt: float  # floored at 0 for display
    raw_rob_mt: float  # unclamped running balance


@dataclass
class RouteFuelResult:
    """Complete route fuel balance."""
    start_mt: float
    segments: List[SegmentResult]

    # ROB rose above the starting quantity after some segment
    warning: bool = False

    # Running balance went below zero at some point
    fuel_exhausted: bool = False

    @property
    def warning_message(self) -> Optional[str]:
        return ROB_WARNING_MESSAGE if self.warning else None

    @property
    def total_consumption_mt(self) -> float:
        return sum(s.consumption_mt for s in self.segments)

    @property
    def final_rob_mt(self) -> float:
        return self.segments[-1].rob_mt if self.segments else max(0.0, self.start_mt)

    def to_table(self) -> List[dict]:
        """Rows for the results table, rounded to presentation precision."""
        return [
            {
                "segment": s.segment_index,
                "consumption_mt": round(s.consumption_mt, RESULT_DECIMALS),
                "rob_mt": round(s.rob_mt, RESULT_DECIMALS),
                "highlight": self.warning,
            }
            for s in self.segments
        ]


def compute_route(segments: Sequence[RouteSegment], start_mt: float) -> RouteFuelResult:
    """
    Compute per-segment consumption and cumulative ROB.

    The running balance is never clamped; only the reported ROB is
    floored at zero, so a segment after fuel exhaustion still reflects
    the full deficit of the earlier segments.

    Args:
        segments: Ordered route segments
        start_mt: HFO on board at departure (mt)

    Returns:
        RouteFuelResult with one SegmentResult per segment
    """
    current_rob = start_mt
    has_warning = False
    exhausted = False
    results = []

    for i, segment in enumerate(segments):
        derived = segment.with_derived_time()

        rate = calculate_consumption_rate(derived.rpm, derived.weather_factor)
        consumption = rate * derived.time_h
        if not (math.isfinite(consumption) and math.isfinite(current_rob - consumption)):
            logger.warning(
                f"Segment {i + 1}: consumption overflows (rpm={derived.rpm}, "
                f"time={derived.time_h}h), counted as 0"
            )
            rate = 0.0
            consumption = 0.0
        current_rob -= consumption

        if current_rob > start_mt:
            has_warning = True
        if current_rob < 0:
            exhausted = True

        results.append(SegmentResult(
            segment_index=i + 1,
            time_h=derived.time_h,
            time_derived=derived is not segment,
            consumption_rate=rate,
            consumption_mt=consumption,
            rob_mt=max(0.0, current_rob),
            raw_rob_mt=current_rob,
        ))

    if has_warning:
        logger.warning(f"{ROB_WARNING_MESSAGE} start={start_mt} final_raw_rob={current_rob:.3f}")

    logger.debug(
        f"Route computed: {len(results)} segments, start={start_mt}mt, "
        f"raw ROB={current_rob:.3f}mt"
    )

    return RouteFuelResult(
        start_mt=start_mt,
        segments=results,
        warning=has_warning,
        fuel_exhausted=exhausted,
    )
