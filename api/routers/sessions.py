"""
Route session API router.

Each endpoint applies one session transition, recomputes the fuel
balance and returns the new session state. Sessions live in the
process-wide SessionStore.
"""

import logging
from typing import Callable, Optional

from fastapi import APIRouter, HTTPException

from api.routers.fuel import build_route_response
from api.schemas import (
    FuelStartUpdate,
    Position,
    SegmentInputUpdate,
    SegmentViewModel,
    SessionResponse,
)
from api.state import SessionLimitError, SessionNotFoundError, get_session_store
from src.routes.geodesy import GeoPoint
from src.session import route_session as rs
from src.session.route_session import RouteSession, WaypointLockedError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Sessions"])


def _session_response(session_id: str, session: RouteSession, result) -> SessionResponse:
    return SessionResponse(
        session_id=session_id,
        active_index=session.active_index,
        fuel_start_mt=session.fuel_start_mt,
        can_remove_segments=session.can_remove_segments,
        segments=[
            SegmentViewModel(
                index=i,
                label=f"Segment {i + 1}",
                activity=session.activity(i).value,
                collapse=segment.collapse.value,
                waypoints=[Position(lat=p.lat, lon=p.lon) for p in segment.waypoints],
                distance_nm=segment.distance_nm,
                rpm=segment.rpm,
                weather_factor=segment.weather_factor,
                time_h=segment.time_h,
                speed_kn=segment.speed_kn,
            )
            for i, segment in enumerate(session.segments)
        ],
        fuel=build_route_response(result),
    )


def _apply(
    session_id: str,
    transition: Optional[Callable[[RouteSession], RouteSession]] = None,
) -> SessionResponse:
    """Run a transition followed by a fuel recalculation, atomically."""
    outcome = {}

    def step(session: RouteSession) -> RouteSession:
        if transition is not None:
            session = transition(session)
        session, outcome["result"] = rs.calculate(session)
        return session

    try:
        session = get_session_store().apply(session_id, step)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except WaypointLockedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _session_response(session_id, session, outcome["result"])


@router.post("/api/sessions", response_model=SessionResponse, status_code=201)
async def create_session():
    """Start a planner session with one empty segment."""
    try:
        session_id, _ = get_session_store().create()
    except SessionLimitError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return _apply(session_id)


@router.get("/api/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str):
    """Current session state and fuel balance. The stored session is not changed."""
    try:
        session = get_session_store().get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    session, result = rs.calculate(session)
    return _session_response(session_id, session, result)


@router.delete("/api/sessions/{session_id}")
async def delete_session(session_id: str):
    try:
        get_session_store().delete(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return {"status": "deleted", "session_id": session_id}


@router.post("/api/sessions/{session_id}/calculate", response_model=SessionResponse)
async def calculate_session(session_id: str):
    """Recompute the fuel balance over all segments."""
    return _apply(session_id)


@router.post("/api/sessions/{session_id}/segments", response_model=SessionResponse)
async def add_segment(session_id: str):
    return _apply(session_id, rs.add_segment)


@router.delete("/api/sessions/{session_id}/segments/{index}", response_model=SessionResponse)
async def remove_segment(session_id: str, index: int):
    """Remove a segment. The last remaining segment is kept."""
    return _apply(session_id, lambda s: rs.remove_segment(s, index))


@router.patch("/api/sessions/{session_id}/segments/{index}", response_model=SessionResponse)
async def update_segment(session_id: str, index: int, update: SegmentInputUpdate):
    """Set one form field; time and speed derive each other through the distance."""
    return _apply(session_id, lambda s: rs.update_segment_input(s, index, update.field, update.value))


@router.post("/api/sessions/{session_id}/segments/{index}/activate", response_model=SessionResponse)
async def activate_segment(session_id: str, index: int):
    return _apply(session_id, lambda s: rs.activate_segment(s, index))


@router.post("/api/sessions/{session_id}/segments/{index}/toggle-activation", response_model=SessionResponse)
async def toggle_activation(session_id: str, index: int):
    return _apply(session_id, lambda s: rs.toggle_activation(s, index))


@router.post("/api/sessions/{session_id}/deactivate", response_model=SessionResponse)
async def deactivate_segment(session_id: str):
    return _apply(session_id, rs.deactivate_segment)


@router.post("/api/sessions/{session_id}/segments/{index}/toggle-collapse", response_model=SessionResponse)
async def toggle_collapse(session_id: str, index: int):
    return _apply(session_id, lambda s: rs.toggle_collapse(s, index))


@router.post("/api/sessions/{session_id}/waypoints", response_model=SessionResponse)
async def add_waypoint(session_id: str, position: Position):
    """Map click: append a waypoint to the active segment."""
    point = GeoPoint(lat=position.lat, lon=position.lon)
    return _apply(session_id, lambda s: rs.add_waypoint(s, point))


@router.delete(
    "/api/sessions/{session_id}/segments/{index}/waypoints/{point_index}",
    response_model=SessionResponse,
)
async def remove_waypoint(session_id: str, index: int, point_index: int):
    """Marker click: remove a waypoint from the active segment."""
    return _apply(session_id, lambda s: rs.remove_waypoint(s, index, point_index))


@router.put("/api/sessions/{session_id}/fuel-start", response_model=SessionResponse)
async def set_fuel_start(session_id: str, update: FuelStartUpdate):
    return _apply(session_id, lambda s: rs.set_fuel_start(s, update.fuel_start_mt))
