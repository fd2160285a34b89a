"""
Chart and historical reference data API router.

Serves the series behind the two consumption charts and handles the
historical workbook upload.
"""

import logging
import tempfile
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from api.config import settings
from api.schemas import (
    ChartModel,
    HistoricalComparisonResponse,
    HistoricalDataResponse,
    HistoricalPointModel,
    HistoricalUploadResponse,
    SessionChartsResponse,
)
from api.state import SessionNotFoundError, get_app_state, get_session_store
from src.config import settings as core_settings
from src.database.historical_parser import HistoricalDataError, HistoricalDataParser
from src.fuel.chart_series import ChartData, build_historical_chart, build_model_chart
from src.fuel.historical import compare_with_model
from src.session.route_session import working_points

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Charts"])


def _chart_model(chart: ChartData) -> ChartModel:
    return ChartModel(**asdict(chart))


@router.get("/api/charts/model-curve", response_model=ChartModel)
async def model_curve_chart():
    """Reference consumption curve at weather factor 1.0, without working points."""
    return _chart_model(build_model_chart(
        [],
        min_rpm=core_settings.model_curve_min_rpm,
        max_rpm=core_settings.model_curve_max_rpm,
    ))


@router.get("/api/sessions/{session_id}/charts", response_model=SessionChartsResponse)
async def session_charts(session_id: str):
    """Model and historical charts with the session's working points."""
    try:
        session = get_session_store().get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")

    points = working_points(session)
    return SessionChartsResponse(
        consumption_chart=_chart_model(build_model_chart(
            points,
            min_rpm=core_settings.model_curve_min_rpm,
            max_rpm=core_settings.model_curve_max_rpm,
        )),
        historical_chart=_chart_model(
            build_historical_chart(get_app_state().historical_points, points)
        ),
    )


@router.get("/api/historical", response_model=HistoricalDataResponse)
async def get_historical():
    state = get_app_state()
    points = state.historical_points
    return HistoricalDataResponse(
        source=state.historical_source,
        count=len(points),
        points=[HistoricalPointModel(rpm=p.rpm, consumption_rate=p.consumption_rate) for p in points],
    )


@router.post("/api/historical/upload", response_model=HistoricalUploadResponse)
async def upload_historical(
    file: UploadFile = File(...),
    sheet_name: Optional[str] = Query(None, description="Sheet name (default: data)"),
):
    """Replace the historical dataset with points parsed from an Excel workbook."""
    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum: {settings.max_upload_bytes // (1024 * 1024)} MB",
        )
    if len(content) == 0:
        raise HTTPException(status_code=400, detail="Empty file")

    suffix = ".xlsx"
    if file.filename:
        suffix = Path(file.filename).suffix or ".xlsx"

    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        tmp.write(content)
        tmp_path = Path(tmp.name)

    try:
        parser = HistoricalDataParser(
            tmp_path,
            rpm_column=core_settings.historical_rpm_column,
            consumption_column=core_settings.historical_consumption_column,
        )
        points = parser.parse(sheet_name=sheet_name or core_settings.historical_sheet)
    except (HistoricalDataError, FileNotFoundError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    finally:
        tmp_path.unlink(missing_ok=True)

    get_app_state().set_historical(points, file.filename)

    return HistoricalUploadResponse(
        status="success",
        source=file.filename,
        imported=len(points),
        skipped=parser.skipped,
    )


@router.get("/api/historical/comparison", response_model=HistoricalComparisonResponse)
async def historical_comparison():
    """Residuals of the historical points against the calm-sea model."""
    try:
        comparison = compare_with_model(get_app_state().historical_points)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return HistoricalComparisonResponse(**asdict(comparison))
