"""
Route planning session.

Holds everything the planner screen edits: the ordered segments with
their map waypoints and form inputs, which segment currently receives
map clicks, and the HFO quantity at departure.

A session is an immutable value. Every transition takes a session and
returns a new one, so the owner (HTTP store, CLI, a reactive front end)
decides where the current value lives.

Segment lifecycle:
    INACTIVE --activate--> ACTIVE --deactivate/activate other--> INACTIVE
    EXPANDED <--toggle_collapse--> COLLAPSED
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

from src.fuel.consumption_model import MODEL_WEATHER_FACTOR, WorkingPoint, calculate_consumption_rate
from src.fuel.route_fuel import (
    RouteFuelResult,
    RouteSegment,
    calculate_speed,
    calculate_time,
    compute_route,
    parse_or_zero,
    parse_weather_factor,
)
from src.routes.geodesy import GeoPoint, path_distance_nm

logger = logging.getLogger(__name__)

SEGMENT_INPUT_FIELDS = ("distance_nm", "rpm", "weather_factor", "time_h", "speed_kn")

# Form fields hold two decimals for distance, time and speed
FORM_DECIMALS = 2


class SegmentActivity(Enum):
    """Whether map clicks are routed to the segment."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class CollapseState(Enum):
    """Display state of the segment panel."""
    EXPANDED = "expanded"
    COLLAPSED = "collapsed"


class WaypointLockedError(ValueError):
    """Waypoint is shared with a neighbouring segment and cannot be removed."""


@dataclass(frozen=True)
class SegmentView:
    """One segment as edited on screen."""
    waypoints: Tuple[GeoPoint, ...] = ()
    distance_nm: Optional[float] = None
    rpm: Optional[float] = None
    weather_factor: Optional[float] = MODEL_WEATHER_FACTOR
    time_h: Optional[float] = None
    speed_kn: Optional[float] = None
    collapse: CollapseState = CollapseState.EXPANDED

    def to_route_segment(self) -> RouteSegment:
        return RouteSegment.from_raw(
            distance_nm=self.distance_nm,
            rpm=self.rpm,
            weather_factor=self.weather_factor,
            time_h=self.time_h,
            speed_kn=self.speed_kn,
        )


@dataclass(frozen=True)
class RouteSession:
    """Caller-owned planner state."""
    segments: Tuple[SegmentView, ...] = (SegmentView(),)
    active_index: Optional[int] = None
    fuel_start_mt: Optional[float] = None

    def activity(self, index: int) -> SegmentActivity:
        _check_segment(self, index)
        return SegmentActivity.ACTIVE if self.active_index == index else SegmentActivity.INACTIVE

    @property
    def can_remove_segments(self) -> bool:
        return len(self.segments) > 1


def _check_segment(session: RouteSession, index: int) -> None:
    if not 0 <= index < len(session.segments):
        raise IndexError(
            f"Segment index {index} out of range ({len(session.segments)} segments)"
        )


def _replace_segment(session: RouteSession, index: int, segment: SegmentView) -> RouteSession:
    segments = list(session.segments)
    segments[index] = segment
    return replace(session, segments=tuple(segments))


def _with_route_distance(segment: SegmentView) -> SegmentView:
    """Distance field follows the waypoints; blank when the path is empty."""
    total = path_distance_nm(segment.waypoints)
    return replace(segment, distance_nm=round(total, FORM_DECIMALS) if total > 0 else None)


def new_session() -> RouteSession:
    """Fresh planner with a single empty, inactive segment."""
    return RouteSession()


def add_segment(session: RouteSession) -> RouteSession:
    return replace(session, segments=session.segments + (SegmentView(),))


def remove_segment(session: RouteSession, index: int) -> RouteSession:
    """
    Remove a segment, keeping at least one.

    Removing the active segment activates the first one; removing a
    segment before the active one shifts the active index down.
    """
    if not session.can_remove_segments:
        logger.debug("Refusing to remove the only segment")
        return session
    _check_segment(session, index)

    segments = session.segments[:index] + session.segments[index + 1:]
    active = session.active_index

    if active == index:
        return activate_segment(replace(session, segments=segments, active_index=None), 0)
    if active is not None and active > index:
        active -= 1
    return replace(session, segments=segments, active_index=active)


def activate_segment(session: RouteSession, index: int) -> RouteSession:
    """
    Route map clicks to segment ``index``.

    An empty segment following a segment with waypoints starts from that
    segment's last waypoint so the legs stay connected.
    """
    _check_segment(session, index)
    session = replace(session, active_index=index)

    segment = session.segments[index]
    if index > 0 and not segment.waypoints:
        previous = session.segments[index - 1]
        if previous.waypoints:
            seeded = replace(segment, waypoints=(previous.waypoints[-1],))
            session = _replace_segment(session, index, _with_route_distance(seeded))

    return session


def deactivate_segment(session: RouteSession) -> RouteSession:
    return replace(session, active_index=None)


def toggle_activation(session: RouteSession, index: int) -> RouteSession:
    if session.active_index == index:
        return deactivate_segment(session)
    return activate_segment(session, index)


def toggle_collapse(session: RouteSession, index: int) -> RouteSession:
    _check_segment(session, index)
    segment = session.segments[index]
    collapse = (
        CollapseState.EXPANDED
        if segment.collapse == CollapseState.COLLAPSED
        else CollapseState.COLLAPSED
    )
    return _replace_segment(session, index, replace(segment, collapse=collapse))


def add_waypoint(session: RouteSession, point: GeoPoint) -> RouteSession:
    """Append a waypoint to the active segment. Ignored when none is active."""
    if session.active_index is None:
        return session

    index = session.active_index
    segment = session.segments[index]
    updated = replace(segment, waypoints=segment.waypoints + (point,))
    return _replace_segment(session, index, _with_route_distance(updated))


def remove_waypoint(session: RouteSession, segment_index: int, point_index: int) -> RouteSession:
    """
    Remove a waypoint from the active segment.

    Only the active segment is editable; other segments are left as they
    are. Waypoints joining this segment to a neighbour that has its own
    waypoints are locked.

    Raises:
        WaypointLockedError: If the waypoint connects to a neighbouring segment
        IndexError: If either index is out of range
    """
    _check_segment(session, segment_index)
    if session.active_index != segment_index:
        return session

    segment = session.segments[segment_index]
    if not 0 <= point_index < len(segment.waypoints):
        raise IndexError(
            f"Waypoint index {point_index} out of range "
            f"({len(segment.waypoints)} waypoints in segment {segment_index + 1})"
        )

    if point_index == 0 and segment_index > 0:
        if session.segments[segment_index - 1].waypoints:
            raise WaypointLockedError(
                f"Cannot remove first waypoint - it connects to Segment {segment_index}"
            )

    last_segment = len(session.segments) - 1
    if point_index == len(segment.waypoints) - 1 and segment_index < last_segment:
        if session.segments[segment_index + 1].waypoints:
            raise WaypointLockedError(
                f"Cannot remove last waypoint - it connects to Segment {segment_index + 2}"
            )

    waypoints = segment.waypoints[:point_index] + segment.waypoints[point_index + 1:]
    updated = replace(segment, waypoints=waypoints)
    return _replace_segment(session, segment_index, _with_route_distance(updated))


def update_segment_input(
    session: RouteSession,
    index: int,
    field_name: str,
    value: Optional[float],
) -> RouteSession:
    """
    Set one form input on a segment.

    Time and speed are linked through the distance: entering a time
    derives the speed and entering a speed derives the time, both only
    when the distance and the entered value are positive.
    """
    if field_name not in SEGMENT_INPUT_FIELDS:
        raise ValueError(
            f"Unknown segment field '{field_name}'. Expected one of {SEGMENT_INPUT_FIELDS}"
        )
    _check_segment(session, index)

    segment = replace(session.segments[index], **{field_name: value})
    distance = parse_or_zero(segment.distance_nm)

    if field_name == "time_h":
        time_h = parse_or_zero(value)
        if distance > 0 and time_h > 0:
            segment = replace(
                segment, speed_kn=round(calculate_speed(distance, time_h), FORM_DECIMALS)
            )
    elif field_name == "speed_kn":
        speed_kn = parse_or_zero(value)
        if distance > 0 and speed_kn > 0:
            segment = replace(
                segment, time_h=round(calculate_time(distance, speed_kn), FORM_DECIMALS)
            )

    return _replace_segment(session, index, segment)


def set_fuel_start(session: RouteSession, value: Optional[float]) -> RouteSession:
    return replace(session, fuel_start_mt=value)


def route_segments(session: RouteSession) -> List[RouteSegment]:
    return [segment.to_route_segment() for segment in session.segments]


def calculate(session: RouteSession) -> Tuple[RouteSession, RouteFuelResult]:
    """
    Run the fuel balance over the session.

    Times derived from speed are first written to their segments the way
    the form field shows them, and the balance is computed from those
    stored values. Calculating the returned session again gives the same
    result.
    """
    segments = list(session.segments)
    derived = set()
    for i, segment in enumerate(segments):
        route_segment = segment.to_route_segment()
        filled = route_segment.with_derived_time()
        if filled is not route_segment:
            segments[i] = replace(segment, time_h=round(filled.time_h, FORM_DECIMALS))
            derived.add(i)
    session = replace(session, segments=tuple(segments))

    result = compute_route(route_segments(session), parse_or_zero(session.fuel_start_mt))
    for i in derived:
        result.segments[i].time_derived = True

    return session, result


def working_points(session: RouteSession) -> List[WorkingPoint]:
    """Operating point of every segment with a positive RPM."""
    points = []
    for segment in session.segments:
        rpm = parse_or_zero(segment.rpm)
        if rpm > 0:
            weather_factor = parse_weather_factor(segment.weather_factor)
            points.append(WorkingPoint(
                rpm=rpm,
                consumption_rate=calculate_consumption_rate(rpm, weather_factor),
            ))
    return points
