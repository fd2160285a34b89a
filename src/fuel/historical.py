"""
Historical consumption reference data and comparison with the model.

Recorded (RPM, mt/h) pairs from past voyages are plotted against the
current working points and used to judge how far the vessel sits from
the fitted curve.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from src.fuel.consumption_model import MODEL_WEATHER_FACTOR, calculate_consumption_rate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoricalPoint:
    """One recorded operating point."""
    rpm: float
    consumption_rate: float


@dataclass
class ModelComparison:
    """Residual statistics of historical points against the model curve."""
    points_used: int
    mean_residual: float
    mean_abs_residual: float
    max_abs_residual: float
    implied_weather_factor: float
    residuals: List[dict]


def compare_with_model(points: Sequence[HistoricalPoint]) -> ModelComparison:
    """
    Compare recorded consumption with the calm-sea model.

    Points with non-positive RPM are ignored since the model is zero there.
    The implied weather factor is the least-squares scale k minimizing
    sum((h - k*m)^2), i.e. k = sum(h*m) / sum(m^2).

    Raises:
        ValueError: If no point has positive RPM
    """
    usable = [p for p in points if p.rpm > 0]
    if not usable:
        raise ValueError("No historical points with positive RPM to compare")

    rpm = np.array([p.rpm for p in usable], dtype=float)
    actual = np.array([p.consumption_rate for p in usable], dtype=float)
    predicted = np.array([calculate_consumption_rate(r, MODEL_WEATHER_FACTOR) for r in rpm])

    residual = actual - predicted
    implied = float(np.dot(actual, predicted) / np.dot(predicted, predicted))

    logger.info(
        f"Historical comparison: {len(usable)} points, "
        f"mean |residual| {np.mean(np.abs(residual)):.4f} mt/h, implied factor {implied:.3f}"
    )

    return ModelComparison(
        points_used=len(usable),
        mean_residual=float(np.mean(residual)),
        mean_abs_residual=float(np.mean(np.abs(residual))),
        max_abs_residual=float(np.max(np.abs(residual))),
        implied_weather_factor=implied,
        residuals=[
            {
                'rpm': float(r),
                'actual': float(a),
                'predicted': float(m),
                'residual': float(d),
            }
            for r, a, m, d in zip(rpm, actual, predicted, residual)
        ],
    )
