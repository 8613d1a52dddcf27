"""Tests for the linear trend estimator."""

import math

import pytest

from rentmarket.estimation import TrendEstimationError, linear_regression, project_trend


class TestLinearRegression:
    def test_exact_line(self):
        slope, intercept = linear_regression([0, 1, 2, 3], [1, 3, 5, 7])
        assert slope == pytest.approx(2.0)
        assert intercept == pytest.approx(1.0)

    def test_least_squares_fit(self):
        # two flat steps: the best line passes between them
        slope, intercept = linear_regression([0, 1, 2, 3], [0.5, 0.5, 2.5, 2.5])
        assert slope == pytest.approx(0.8)
        assert intercept == pytest.approx(0.3)

    def test_noisy_series(self):
        slope, intercept = linear_regression(range(5), [1.0, 2.0, 2.0, 3.0, 5.0])
        assert slope == pytest.approx(0.9)
        assert intercept == pytest.approx(0.8)
        assert isinstance(slope, float) and isinstance(intercept, float)

    def test_flat_series(self):
        slope, intercept = linear_regression(range(5), [4.0] * 5)
        assert slope == pytest.approx(0.0, abs=1e-12)
        assert intercept == pytest.approx(4.0)

    @pytest.mark.parametrize("xs,ys", [
        ([1, 1, 1], [1, 2, 3]),
        ([0], [5.0]),
        ([], []),
        ([0, 1, 2], [1.0, 2.0]),
        ([0, 1, 2], [1.0, math.nan, 3.0]),
        ([0, 1, 2], [1.0, math.inf, 3.0]),
    ])
    def test_degenerate_input_raises(self, xs, ys):
        with pytest.raises(TrendEstimationError):
            linear_regression(xs, ys)

    def test_error_is_a_value_error(self):
        assert issubclass(TrendEstimationError, ValueError)


class TestProjectTrend:
    def test_linear_sequence_projects_next_value(self):
        trend, invest = project_trend([float(v) for v in range(10, 22)])
        assert trend == pytest.approx(22.0)
        assert invest == pytest.approx(1.0)

    def test_uses_only_last_twelve(self):
        history = [500.0, -3.0, 42.0] + [float(v) for v in range(10, 22)]
        trend, invest = project_trend(history)
        assert trend == pytest.approx(22.0)
        assert invest == pytest.approx(1.0)

    def test_flat_history(self):
        trend, invest = project_trend([3.5] * 12)
        assert trend == pytest.approx(3.5)
        assert invest == pytest.approx(0.0)

    def test_declining_history(self):
        trend, invest = project_trend([float(v) for v in range(24, 12, -1)])
        assert trend == pytest.approx(12.0)
        assert invest == pytest.approx(-1.0)

    def test_missing_months_keep_their_position(self):
        history = [float(v) for v in range(10, 22)]
        history[3] = None
        history[7] = None
        trend, invest = project_trend(history)
        assert trend == pytest.approx(22.0)
        assert invest == pytest.approx(1.0)

    def test_invest_uses_latest_actual_observation(self):
        history = [float(v) for v in range(10, 22)]
        history[-1] = None
        trend, invest = project_trend(history)
        assert trend == pytest.approx(22.0)
        assert invest == pytest.approx(2.0)

    def test_too_short_raises(self):
        with pytest.raises(TrendEstimationError, match="Need 12"):
            project_trend([1.0] * 11)

    def test_no_observations_raises(self):
        with pytest.raises(TrendEstimationError):
            project_trend([None] * 12)

    def test_single_observation_raises(self):
        with pytest.raises(TrendEstimationError):
            project_trend([None] * 11 + [4.0])

    def test_custom_window(self):
        trend, _ = project_trend([1.0, 2.0, 3.0], months=3)
        assert trend == pytest.approx(4.0)
