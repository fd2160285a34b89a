"""
Main engine fuel consumption model.

Empirical quadratic fit of hourly HFO consumption against engine RPM:

    y = 0.000124176621498486 * x² - 0.00391529744030522 * x + 0.104802913006673

where y is consumption in mt/h and x is RPM. A dimensionless weather
factor (0.5 good, 1.0 model, 1.5 bad) scales the calm-sea value.

The coefficients are reproduced exactly and evaluated in the same
operation order as the historical tool, so results compare bit-for-bit
against previously recorded figures.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

COEFF_A = 0.000124176621498486
COEFF_B = 0.00391529744030522
COEFF_C = 0.104802913006673

# Neutral weather factor used for the reference curve
MODEL_WEATHER_FACTOR = 1.0

# Typical engine operating range covered by the fit
MODEL_RPM_MIN = 45
MODEL_RPM_MAX = 124


@dataclass(frozen=True)
class WorkingPoint:
    """Current operating point of a segment, used for chart display."""
    rpm: float
    consumption_rate: float


def calculate_consumption_rate(rpm: Optional[float], weather_factor: float) -> float:
    """
    Hourly fuel consumption corrected for weather.

    Args:
        rpm: Engine RPM. Zero, negative, NaN or missing yields 0, as does an
            RPM so large that the rate overflows.
        weather_factor: Multiplier applied to the calm-sea consumption.

    Returns:
        Consumption rate in mt/h
    """
    if rpm is None or not rpm > 0:
        return 0.0

    x = rpm
    y = COEFF_A * (x * x) - COEFF_B * x + COEFF_C
    rate = y * weather_factor
    if not math.isfinite(rate):
        logger.warning(f"Consumption rate overflows at rpm={rpm}, using 0")
        return 0.0
    return rate


def model_curve(
    min_rpm: int = MODEL_RPM_MIN,
    max_rpm: int = MODEL_RPM_MAX,
) -> List[WorkingPoint]:
    """Reference curve sampled at every integer RPM in [min_rpm, max_rpm]."""
    return [
        WorkingPoint(rpm=float(rpm), consumption_rate=calculate_consumption_rate(rpm, MODEL_WEATHER_FACTOR))
        for rpm in range(min_rpm, max_rpm + 1)
    ]
