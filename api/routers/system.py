"""
System API router.

Root endpoint and health check.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from api.state import get_app_state

router = APIRouter(tags=["System"])

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@router.get("/")
async def root():
    """
    API root endpoint.

    Returns basic API information and available endpoint categories.
    """
    return {
        "name": "ROB Planner API",
        "version": API_VERSION,
        "status": "operational",
        "docs": "/api/docs",
        "endpoints": {
            "health": "/api/health",
            "fuel": "/api/fuel/...",
            "sessions": "/api/sessions/...",
            "charts": "/api/charts/...",
            "historical": "/api/historical/...",
        },
    }


@router.get("/api/health")
async def health_check():
    """Liveness check with basic state counters."""
    return {
        "status": "healthy",
        "version": API_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": get_app_state().health_check(),
    }
