"""Chart and historical data API schemas."""

from typing import Dict, List, Optional

from pydantic import BaseModel


class ChartAxisModel(BaseModel):
    min: float
    max: float
    step: float
    title: str


class ChartSeriesModel(BaseModel):
    label: str
    points: List[Dict[str, float]]
    show_line: bool = False


class ChartModel(BaseModel):
    x_axis: ChartAxisModel
    y_axis: ChartAxisModel
    series: List[ChartSeriesModel]


class SessionChartsResponse(BaseModel):
    consumption_chart: ChartModel
    historical_chart: ChartModel


class HistoricalPointModel(BaseModel):
    rpm: float
    consumption_rate: float


class HistoricalDataResponse(BaseModel):
    source: Optional[str] = None
    count: int
    points: List[HistoricalPointModel]


class HistoricalUploadResponse(BaseModel):
    status: str
    source: Optional[str] = None
    imported: int
    skipped: int


class HistoricalComparisonResponse(BaseModel):
    points_used: int
    mean_residual: float
    mean_abs_residual: float
    max_abs_residual: float
    implied_weather_factor: float
    residuals: List[Dict[str, float]]
