"""Unit tests for comparing historical points against the model."""

import pytest

from src.fuel.consumption_model import calculate_consumption_rate
from src.fuel.historical import HistoricalPoint, compare_with_model


def _on_model(rpm, factor=1.0):
    return HistoricalPoint(rpm=rpm, consumption_rate=calculate_consumption_rate(rpm, factor))


class TestCompareWithModel:
    def test_points_on_curve(self):
        result = compare_with_model([_on_model(r) for r in (60, 80, 100)])

        assert result.points_used == 3
        assert result.mean_residual == pytest.approx(0.0, abs=1e-12)
        assert result.max_abs_residual == pytest.approx(0.0, abs=1e-12)
        assert result.implied_weather_factor == pytest.approx(1.0)

    def test_scaled_points_imply_factor(self):
        result = compare_with_model([_on_model(r, 1.3) for r in (55, 75, 95, 115)])
        assert result.implied_weather_factor == pytest.approx(1.3)
        assert result.mean_residual > 0

    def test_residual_rows(self):
        point = HistoricalPoint(rpm=80, consumption_rate=0.7)
        result = compare_with_model([point])

        row = result.residuals[0]
        predicted = calculate_consumption_rate(80, 1.0)
        assert row["rpm"] == 80.0
        assert row["actual"] == 0.7
        assert row["predicted"] == pytest.approx(predicted)
        assert row["residual"] == pytest.approx(0.7 - predicted)
        assert result.mean_abs_residual == pytest.approx(abs(0.7 - predicted))

    def test_zero_rpm_points_ignored(self):
        result = compare_with_model([HistoricalPoint(rpm=0, consumption_rate=0.1), _on_model(70)])
        assert result.points_used == 1

    def test_no_usable_points(self):
        with pytest.raises(ValueError, match="No historical points"):
            compare_with_model([])
        with pytest.raises(ValueError):
            compare_with_model([HistoricalPoint(rpm=0, consumption_rate=0.2)])
