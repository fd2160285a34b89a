"""Unit tests for the RPM consumption model."""

import math

import pytest

from src.fuel.consumption_model import (
    COEFF_A,
    COEFF_B,
    COEFF_C,
    MODEL_RPM_MAX,
    MODEL_RPM_MIN,
    WorkingPoint,
    calculate_consumption_rate,
    model_curve,
)


def _direct(x, w):
    return (0.000124176621498486 * (x * x) - 0.00391529744030522 * x + 0.104802913006673) * w


class TestCoefficients:
    def test_exact_values(self):
        assert COEFF_A == 0.000124176621498486
        assert COEFF_B == 0.00391529744030522
        assert COEFF_C == 0.104802913006673


class TestConsumptionRate:
    def test_zero_rpm_is_zero(self):
        for w in (0.5, 1.0, 1.5):
            assert calculate_consumption_rate(0, w) == 0.0

    def test_negative_rpm_is_zero(self):
        assert calculate_consumption_rate(-10, 1.0) == 0.0

    def test_none_and_nan_rpm_are_zero(self):
        assert calculate_consumption_rate(None, 1.0) == 0.0
        assert calculate_consumption_rate(float("nan"), 1.0) == 0.0

    def test_matches_formula_bit_for_bit(self):
        for rpm in (45, 60, 80, 95.5, 124):
            assert calculate_consumption_rate(rpm, 1.0) == _direct(rpm, 1.0)

    def test_reference_value_at_80_rpm(self):
        assert calculate_consumption_rate(80, 1.0) == pytest.approx(0.58631, abs=1e-5)

    def test_linear_in_weather_factor(self):
        base = calculate_consumption_rate(90, 1.0)
        assert calculate_consumption_rate(90, 0.5) == pytest.approx(base * 0.5)
        assert calculate_consumption_rate(90, 1.5) == pytest.approx(base * 1.5)
        assert calculate_consumption_rate(90, 2.0) == pytest.approx(2 * base)

    def test_rate_grows_over_operating_range(self):
        rates = [calculate_consumption_rate(rpm, 1.0) for rpm in range(45, 125, 10)]
        assert rates == sorted(rates)

    def test_small_positive_rpm_uses_formula(self):
        # Below the fitted range the quadratic is still evaluated as is
        assert calculate_consumption_rate(1, 1.0) == pytest.approx(_direct(1, 1.0))

    def test_overflowing_rpm_is_zero(self):
        assert calculate_consumption_rate(1e200, 1.0) == 0.0
        assert calculate_consumption_rate(float("inf"), 1.0) == 0.0


class TestModelCurve:
    def test_default_range(self):
        curve = model_curve()
        assert len(curve) == MODEL_RPM_MAX - MODEL_RPM_MIN + 1
        assert curve[0].rpm == 45
        assert curve[-1].rpm == 124

    def test_points_on_model_at_neutral_weather(self):
        for point in model_curve(60, 65):
            assert isinstance(point, WorkingPoint)
            assert point.consumption_rate == calculate_consumption_rate(point.rpm, 1.0)

    def test_custom_range(self):
        curve = model_curve(50, 52)
        assert [p.rpm for p in curve] == [50.0, 51.0, 52.0]

    def test_all_values_finite(self):
        assert all(math.isfinite(p.consumption_rate) for p in model_curve())
