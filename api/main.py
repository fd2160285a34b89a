"""
FastAPI Backend for the ROB Planner.

Provides REST API endpoints for:
- Fuel consumption model (rate, time/speed, distance)
- Route fuel balance (per-segment consumption and ROB)
- Planner sessions (segments, waypoints, form inputs)
- Chart series and historical reference data
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from api.config import settings
from api.middleware import setup_middleware
from api.routers import charts, fuel, sessions, system
from api.routers.system import API_VERSION
from api.state import get_app_state
from src.config import settings as core_settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(message)s',  # JSON request logs are self-contained
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    state = get_app_state()
    if core_settings.load_historical_on_startup:
        state.load_default_historical()
    yield


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Application factory for the ROB Planner API.

    Returns:
        FastAPI: Configured application instance
    """
    application = FastAPI(
        title="ROB Planner API",
        description="""
## Voyage Fuel and ROB Planning API

Computes main engine HFO consumption and remaining onboard fuel for a
multi-segment voyage.

### Features
- Quadratic RPM consumption model with weather correction
- Time/speed derivation per segment
- Great-circle distances from map waypoints
- Historical consumption comparison
        """,
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    setup_middleware(application, debug=settings.is_development)

    # CORS middleware - use configured origins only (NO WILDCARDS)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.error(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})

    application.include_router(system.router)
    application.include_router(fuel.router)
    application.include_router(sessions.router)
    application.include_router(charts.router)

    return application


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without non-serializable context objects."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


# Create the application
app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level,
    )
