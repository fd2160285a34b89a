"""
Chart series for the consumption charts.

Produces plain data for two scatter charts:
- Model chart: reference curve (weather factor 1.0) with current working points
- Historical chart: recorded points with the same working points

Rendering is left to the client; axis bounds are included so every client
draws the same frame.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from src.fuel.consumption_model import MODEL_RPM_MAX, MODEL_RPM_MIN, WorkingPoint, model_curve
from src.fuel.historical import HistoricalPoint


@dataclass(frozen=True)
class ChartAxis:
    min: float
    max: float
    step: float
    title: str


@dataclass
class ChartSeries:
    label: str
    points: List[Dict[str, float]]
    show_line: bool = False


@dataclass
class ChartData:
    x_axis: ChartAxis
    y_axis: ChartAxis
    series: List[ChartSeries] = field(default_factory=list)


MODEL_X_AXIS = ChartAxis(min=30, max=130, step=10, title="RPM")
MODEL_Y_AXIS = ChartAxis(min=0, max=2, step=0.1, title="Consumption (mt/h)")
HISTORICAL_X_AXIS = ChartAxis(min=30, max=140, step=10, title="RPM")
HISTORICAL_Y_AXIS = ChartAxis(min=0, max=2.5, step=0.1, title="Consumption (mt/h)")


def _xy(points) -> List[Dict[str, float]]:
    return [{"x": p.rpm, "y": p.consumption_rate} for p in points]


def build_model_chart(
    working_points: Sequence[WorkingPoint],
    min_rpm: int = MODEL_RPM_MIN,
    max_rpm: int = MODEL_RPM_MAX,
) -> ChartData:
    return ChartData(
        x_axis=MODEL_X_AXIS,
        y_axis=MODEL_Y_AXIS,
        series=[
            ChartSeries(label="Model Consumption", points=_xy(model_curve(min_rpm, max_rpm)), show_line=True),
            ChartSeries(label="Current Working Points", points=_xy(working_points)),
        ],
    )


def build_historical_chart(
    historical_points: Sequence[HistoricalPoint],
    working_points: Sequence[WorkingPoint],
) -> ChartData:
    return ChartData(
        x_axis=HISTORICAL_X_AXIS,
        y_axis=HISTORICAL_Y_AXIS,
        series=[
            ChartSeries(label="Historical Data", points=_xy(historical_points)),
            ChartSeries(label="Current Working Points", points=_xy(working_points)),
        ],
    )
