"""Route planning session state and transitions."""

from .route_session import (
    CollapseState,
    RouteSession,
    SegmentActivity,
    SegmentView,
    WaypointLockedError,
    new_session,
)

__all__ = [
    "CollapseState",
    "RouteSession",
    "SegmentActivity",
    "SegmentView",
    "WaypointLockedError",
    "new_session",
]
