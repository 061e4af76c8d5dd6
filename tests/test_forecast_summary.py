from datetime import date

import pytest

from cost_intelligence.forecasting import (
    CostForecaster,
    ForecastSummarizer,
    TrendDirection
)
from cost_intelligence.patterns import RiskLevel

from conftest import daily_series


def summarize(history, forecast_days=30, **kwargs):
    forecast = CostForecaster().forecast(history, forecast_days)
    return ForecastSummarizer(**kwargs).summarize(history, forecast)


@pytest.mark.parametrize("costs", [[], [480.0]])
def test_short_history_gives_neutral_summary(costs):
    summary = summarize(daily_series(costs))

    assert summary.projected_total_cost == 0
    assert summary.current_burn_rate == 0
    assert summary.average_daily_cost == 0
    assert summary.forecast_accuracy == 0
    assert summary.trend == TrendDirection.STABLE
    assert summary.risk_level == RiskLevel.LOW
    assert summary.projected_end_date == date.today()


def test_flat_history_is_stable_and_low_risk(flat_history):
    summary = summarize(flat_history)

    assert summary.trend == TrendDirection.STABLE
    assert summary.risk_level == RiskLevel.LOW
    assert summary.forecast_accuracy == pytest.approx(1.0)
    assert summary.current_burn_rate == pytest.approx(100.0)
    assert summary.projected_total_cost == pytest.approx(500.0 + 30 * 100.0)


def test_rising_history_is_increasing(rising_history):
    summary = summarize(rising_history, forecast_days=2)

    # halves: [100] vs [110, 120] -> +15%
    assert summary.trend == TrendDirection.INCREASING
    assert summary.risk_level == RiskLevel.MEDIUM
    assert summary.projected_total_cost == pytest.approx(330.0 + 130.0 + 140.0)


def test_burn_rate_uses_last_seven_observations():
    summary = summarize(daily_series(range(1, 11)))

    assert summary.current_burn_rate == pytest.approx(7.0)
    assert summary.average_daily_cost == pytest.approx(5.5)


def test_sharp_increase_is_high_risk():
    summary = summarize(daily_series([100] * 5 + [200] * 5))

    assert summary.trend == TrendDirection.INCREASING
    assert summary.risk_level == RiskLevel.HIGH


def test_moderate_increase_is_medium_risk():
    summary = summarize(daily_series([100, 100, 100, 100, 120, 120, 120, 120]))

    assert summary.trend == TrendDirection.INCREASING
    assert summary.risk_level == RiskLevel.MEDIUM


def test_well_fit_decrease_is_low_risk():
    summary = summarize(daily_series(range(200, 100, -10)))

    assert summary.trend == TrendDirection.DECREASING
    assert summary.forecast_accuracy > 0.9
    assert summary.risk_level == RiskLevel.LOW


def test_poor_fit_is_medium_risk():
    summary = summarize(daily_series([100, 300, 100, 300, 300, 100, 300, 100]))

    assert summary.trend == TrendDirection.STABLE
    assert summary.forecast_accuracy == pytest.approx(0.0)
    assert summary.risk_level == RiskLevel.MEDIUM


def test_accuracy_needs_two_fitted_points():
    # Two observations are summarized but not forecast
    summary = summarize(daily_series([100, 100]))

    assert summary.forecast_accuracy == 0
    assert summary.trend == TrendDirection.STABLE
    assert summary.risk_level == RiskLevel.MEDIUM


def test_zero_first_half_reports_stable_trend():
    summary = summarize(daily_series([0, 0, 50, 50]))
    assert summary.trend == TrendDirection.STABLE


def test_accuracy_always_bounded(noisy_history):
    summary = summarize(noisy_history)
    assert 0.0 <= summary.forecast_accuracy <= 1.0


def test_end_date_ignores_forecast_length(rising_history):
    short = summarize(rising_history, forecast_days=2)
    long = summarize(rising_history, forecast_days=90)

    assert short.projected_end_date == date(2024, 4, 2)
    assert long.projected_end_date == date(2024, 4, 2)


def test_end_date_horizon_is_configurable(rising_history):
    summary = summarize(rising_history, horizon_days=7)
    assert summary.projected_end_date == date(2024, 3, 10)


def test_summary_sorts_history(rising_history):
    shuffled = [rising_history[1], rising_history[2], rising_history[0]]
    assert summarize(shuffled).trend == TrendDirection.INCREASING


def test_summary_wire_format(flat_history):
    data = summarize(flat_history, forecast_days=0).to_dict()

    assert data["trend"] == "stable"
    assert data["riskLevel"] == "low"
    assert data["projectedEndDate"] == "2024-04-04"
    assert set(data) == {
        "projectedTotalCost", "projectedEndDate", "currentBurnRate",
        "averageDailyCost", "forecastAccuracy", "trend", "riskLevel", "riskColor"
    }
    assert data["riskColor"] == RiskLevel.LOW.color
