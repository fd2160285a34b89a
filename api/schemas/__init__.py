"""
ROB Planner API Pydantic schemas.

Re-exports all schema classes:
    from api.schemas import RouteRequest, SessionResponse, ...
"""

# Common
from .common import Position, coerce_optional_number  # noqa: F401

# Fuel model
from .fuel import (  # noqa: F401
    ConsumptionRateRequest,
    ConsumptionRateResponse,
    TimeRequest,
    TimeResponse,
    SpeedRequest,
    SpeedResponse,
    DistanceRequest,
    DistanceResponse,
    SegmentInput,
    RouteRequest,
    SegmentResultModel,
    RouteResponse,
)

# Sessions
from .session import (  # noqa: F401
    SegmentViewModel,
    SessionResponse,
    SegmentInputUpdate,
    FuelStartUpdate,
)

# Charts and historical data
from .charts import (  # noqa: F401
    ChartAxisModel,
    ChartSeriesModel,
    ChartModel,
    SessionChartsResponse,
    HistoricalPointModel,
    HistoricalDataResponse,
    HistoricalUploadResponse,
    HistoricalComparisonResponse,
)
