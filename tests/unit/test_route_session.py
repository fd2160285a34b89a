"""Unit tests for the route planning session transitions."""

import math

import pytest

from src.fuel.consumption_model import calculate_consumption_rate
from src.routes.geodesy import EARTH_RADIUS_KM, KM_PER_NM, GeoPoint, path_distance_nm
from src.session import (
    CollapseState,
    SegmentActivity,
    WaypointLockedError,
    new_session,
)
from src.session import route_session as rs


A = GeoPoint(lat=0.0, lon=0.0)
B = GeoPoint(lat=1.0, lon=0.0)
C = GeoPoint(lat=1.0, lon=1.0)
D = GeoPoint(lat=2.0, lon=1.0)


@pytest.fixture
def two_leg_session():
    """Segment 1: A-B, segment 2: B-C-D, segment 2 active."""
    s = rs.activate_segment(new_session(), 0)
    s = rs.add_waypoint(s, A)
    s = rs.add_waypoint(s, B)
    s = rs.add_segment(s)
    s = rs.activate_segment(s, 1)
    s = rs.add_waypoint(s, C)
    s = rs.add_waypoint(s, D)
    return s


class TestNewSession:
    def test_single_empty_segment(self):
        s = new_session()
        assert len(s.segments) == 1
        assert s.active_index is None
        assert s.fuel_start_mt is None
        assert s.segments[0].waypoints == ()
        assert s.segments[0].weather_factor == 1.0
        assert s.segments[0].collapse == CollapseState.EXPANDED

    def test_only_segment_cannot_be_removed(self):
        s = new_session()
        assert s.can_remove_segments is False
        assert rs.remove_segment(s, 0) is s


class TestActivation:
    def test_activate_and_deactivate(self):
        s = rs.activate_segment(new_session(), 0)
        assert s.activity(0) == SegmentActivity.ACTIVE
        s = rs.deactivate_segment(s)
        assert s.activity(0) == SegmentActivity.INACTIVE

    def test_at_most_one_active(self):
        s = rs.add_segment(rs.add_segment(new_session()))
        s = rs.activate_segment(s, 0)
        s = rs.activate_segment(s, 2)
        active = [i for i in range(3) if s.activity(i) == SegmentActivity.ACTIVE]
        assert active == [2]

    def test_toggle_activation(self):
        s = rs.toggle_activation(new_session(), 0)
        assert s.active_index == 0
        s = rs.toggle_activation(s, 0)
        assert s.active_index is None

    def test_activate_out_of_range(self):
        with pytest.raises(IndexError):
            rs.activate_segment(new_session(), 3)

    def test_new_segment_starts_from_previous_end(self):
        s = rs.activate_segment(new_session(), 0)
        s = rs.add_waypoint(s, A)
        s = rs.add_waypoint(s, B)
        s = rs.activate_segment(rs.add_segment(s), 1)

        assert s.segments[1].waypoints == (B,)
        assert s.segments[1].distance_nm is None

    def test_no_seed_when_previous_is_empty(self):
        s = rs.activate_segment(rs.add_segment(new_session()), 1)
        assert s.segments[1].waypoints == ()


class TestWaypoints:
    def test_click_without_active_segment_is_ignored(self):
        s = new_session()
        assert rs.add_waypoint(s, A) is s

    def test_distance_follows_waypoints(self):
        s = rs.activate_segment(new_session(), 0)
        s = rs.add_waypoint(s, A)
        assert s.segments[0].distance_nm is None
        s = rs.add_waypoint(s, B)
        assert s.segments[0].distance_nm == round(path_distance_nm([A, B]), 2)

    def test_connected_segments(self, two_leg_session):
        s = two_leg_session
        assert s.segments[1].waypoints == (B, C, D)
        assert s.segments[1].distance_nm == round(path_distance_nm([B, C, D]), 2)

    def test_first_waypoint_locked(self, two_leg_session):
        with pytest.raises(WaypointLockedError, match="connects to Segment 1"):
            rs.remove_waypoint(two_leg_session, 1, 0)

    def test_last_waypoint_locked(self, two_leg_session):
        s = rs.activate_segment(two_leg_session, 0)
        with pytest.raises(WaypointLockedError, match="connects to Segment 2"):
            rs.remove_waypoint(s, 0, 1)

    def test_remove_inner_waypoint(self, two_leg_session):
        s = rs.remove_waypoint(two_leg_session, 1, 1)
        assert s.segments[1].waypoints == (B, D)
        assert s.segments[1].distance_nm == round(path_distance_nm([B, D]), 2)

    def test_remove_tail_of_last_segment(self, two_leg_session):
        s = rs.remove_waypoint(two_leg_session, 1, 2)
        assert s.segments[1].waypoints == (B, C)

    def test_inactive_segment_not_editable(self, two_leg_session):
        assert rs.remove_waypoint(two_leg_session, 0, 0) is two_leg_session

    def test_bad_waypoint_index(self, two_leg_session):
        with pytest.raises(IndexError):
            rs.remove_waypoint(two_leg_session, 1, 9)

    def test_removing_all_waypoints_blanks_distance(self):
        s = rs.activate_segment(new_session(), 0)
        s = rs.add_waypoint(rs.add_waypoint(s, A), B)
        s = rs.remove_waypoint(s, 0, 1)
        s = rs.remove_waypoint(s, 0, 0)
        assert s.segments[0].waypoints == ()
        assert s.segments[0].distance_nm is None

    def test_antipodal_waypoints(self):
        s = rs.activate_segment(new_session(), 0)
        s = rs.add_waypoint(s, GeoPoint(lat=-43.5577, lon=-28.3277))
        s = rs.add_waypoint(s, GeoPoint(lat=43.5577, lon=151.6723))
        assert s.segments[0].distance_nm == round(EARTH_RADIUS_KM * math.pi / KM_PER_NM, 2)


class TestSegmentRemoval:
    def test_removing_active_activates_first(self, two_leg_session):
        s = rs.remove_segment(two_leg_session, 1)
        assert len(s.segments) == 1
        assert s.active_index == 0

    def test_removing_before_active_shifts_index(self):
        s = rs.add_segment(rs.add_segment(new_session()))
        s = rs.activate_segment(s, 2)
        s = rs.remove_segment(s, 0)
        assert s.active_index == 1

    def test_removing_after_active_keeps_index(self):
        s = rs.add_segment(rs.add_segment(new_session()))
        s = rs.activate_segment(s, 0)
        s = rs.remove_segment(s, 2)
        assert s.active_index == 0
        assert len(s.segments) == 2


class TestInputs:
    def test_time_derives_speed(self):
        s = rs.update_segment_input(new_session(), 0, "distance_nm", 100)
        s = rs.update_segment_input(s, 0, "time_h", 8)
        assert s.segments[0].speed_kn == 12.5

    def test_speed_derives_time(self):
        s = rs.update_segment_input(new_session(), 0, "distance_nm", 100)
        s = rs.update_segment_input(s, 0, "speed_kn", 3)
        assert s.segments[0].time_h == 33.33

    def test_no_derivation_without_distance(self):
        s = rs.update_segment_input(new_session(), 0, "speed_kn", 10)
        assert s.segments[0].time_h is None

    def test_unknown_field(self):
        with pytest.raises(ValueError, match="Unknown segment field"):
            rs.update_segment_input(new_session(), 0, "waypoints", 1)

    def test_toggle_collapse(self):
        s = rs.toggle_collapse(new_session(), 0)
        assert s.segments[0].collapse == CollapseState.COLLAPSED
        s = rs.toggle_collapse(s, 0)
        assert s.segments[0].collapse == CollapseState.EXPANDED

    def test_transitions_do_not_mutate(self):
        s = new_session()
        rs.update_segment_input(s, 0, "rpm", 80)
        rs.set_fuel_start(s, 50)
        assert s.segments[0].rpm is None
        assert s.fuel_start_mt is None


class TestCalculate:
    def test_calculate_writes_back_derived_time(self):
        s = rs.update_segment_input(new_session(), 0, "distance_nm", 100)
        s = rs.update_segment_input(s, 0, "rpm", 80)
        s = rs.set_fuel_start(s, 50)
        s = rs.update_segment_input(s, 0, "speed_kn", 10)
        s = rs.update_segment_input(s, 0, "time_h", None)
        assert s.segments[0].time_h is None

        s, result = rs.calculate(s)
        assert s.segments[0].time_h == 10.0
        assert result.segments[0].rob_mt == pytest.approx(50 - calculate_consumption_rate(80, 1.0) * 10)

    def test_calculate_uses_stored_form_time(self):
        s = rs.update_segment_input(new_session(), 0, "distance_nm", 100)
        s = rs.update_segment_input(s, 0, "rpm", 80)
        s = rs.update_segment_input(s, 0, "speed_kn", 3)
        s = rs.update_segment_input(s, 0, "time_h", None)

        s, result = rs.calculate(s)
        assert s.segments[0].time_h == 33.33
        assert result.segments[0].time_derived is True
        assert result.segments[0].consumption_mt == pytest.approx(calculate_consumption_rate(80, 1.0) * 33.33)

        again, repeat = rs.calculate(s)
        assert again == s
        assert repeat.segments[0].consumption_mt == result.segments[0].consumption_mt

    def test_blank_inputs_compute_zero(self):
        s, result = rs.calculate(new_session())
        assert result.start_mt == 0.0
        assert result.segments[0].consumption_mt == 0.0

    def test_working_points(self):
        s = rs.add_segment(new_session())
        s = rs.update_segment_input(s, 0, "rpm", 80)
        s = rs.update_segment_input(s, 0, "weather_factor", 1.5)
        points = rs.working_points(s)
        assert len(points) == 1
        assert points[0].rpm == 80
        assert points[0].consumption_rate == calculate_consumption_rate(80, 1.5)
