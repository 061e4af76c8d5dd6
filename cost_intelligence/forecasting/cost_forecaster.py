"""
Cost Forecaster

Projects a project's daily spend forward with a smoothed linear trend and
widening confidence bands, and summarizes burn rate, trend and risk.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from ..patterns.risk_classification import ForecastRiskClassifier, RiskLevel
from .series import coerce_history, sort_history
from .trend_analyzer import (
    TrendDirection,
    TrendFitter,
    coefficient_of_determination,
    moving_average
)

logger = logging.getLogger(__name__)

Z_SCORES = {
    0.95: 1.96,
    0.99: 2.576,
}
DEFAULT_Z_SCORE = 1.645  # 90%


def z_score_for(confidence_level: float) -> float:
    """Two-sided z-score for a supported confidence level"""
    return Z_SCORES.get(confidence_level, DEFAULT_Z_SCORE)


@dataclass
class ForecastPoint:
    """One day on the forecast chart, actual or projected"""
    date: date
    actual_cost: float
    predicted_cost: Optional[float] = None
    confidence_upper: Optional[float] = None
    confidence_lower: Optional[float] = None
    is_forecast: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "date": self.date.isoformat(),
            "actualCost": self.actual_cost,
            "isForecast": self.is_forecast
        }
        if self.predicted_cost is not None:
            data["predictedCost"] = self.predicted_cost
        if self.confidence_upper is not None:
            data["confidenceUpper"] = self.confidence_upper
        if self.confidence_lower is not None:
            data["confidenceLower"] = self.confidence_lower
        return data


@dataclass
class ForecastSummary:
    """Headline figures derived from history and forecast"""
    projected_total_cost: float
    projected_end_date: date
    current_burn_rate: float
    average_daily_cost: float
    forecast_accuracy: float
    trend: TrendDirection
    risk_level: RiskLevel

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectedTotalCost": self.projected_total_cost,
            "projectedEndDate": self.projected_end_date.isoformat(),
            "currentBurnRate": self.current_burn_rate,
            "averageDailyCost": self.average_daily_cost,
            "forecastAccuracy": self.forecast_accuracy,
            "trend": self.trend.value,
            "riskLevel": self.risk_level.value,
            "riskColor": self.risk_level.color
        }


class CostForecaster:
    """
    Daily cost forecasting engine.

    The trend line is fit on a moving-average smoothed copy of the series,
    while residuals (and so the confidence bands) are measured against the
    raw costs.

    Example:
    ```python
    forecaster = CostForecaster()

    points = forecaster.forecast(
        [{"date": "2024-03-01", "cost": 100},
         {"date": "2024-03-02", "cost": 110},
         {"date": "2024-03-03", "cost": 120}],
        forecast_days=14
    )
    projected = [p for p in points if p.is_forecast]
    ```
    """

    MIN_HISTORY = 3
    MAX_SMOOTHING_WINDOW = 7

    def __init__(self, confidence_level: float = 0.95):
        """
        Initialize forecaster.

        Args:
            confidence_level: Default band confidence (0.90, 0.95 or 0.99)
        """
        self.confidence_level = confidence_level
        self.trend_fitter = TrendFitter()

    def forecast(
        self,
        history: Iterable[Any],
        forecast_days: int = 30,
        confidence_level: Optional[float] = None
    ) -> List[ForecastPoint]:
        """
        Generate a cost forecast.

        Args:
            history: {date, cost} observations in any order
            forecast_days: Number of days to project past the last observation
            confidence_level: Overrides the forecaster's default

        Returns:
            Historical points followed by projected points
        """
        if forecast_days < 0:
            raise ValueError(f"forecast_days must be non-negative, got {forecast_days}")

        points = coerce_history(history)
        if confidence_level is None:
            confidence_level = self.confidence_level

        if len(points) < self.MIN_HISTORY:
            logger.warning(f"Only {len(points)} observations; skipping forecast")
            return [
                ForecastPoint(date=p.date, actual_cost=p.cost, is_forecast=False)
                for p in points
            ]

        ordered = sort_history(points)
        n = len(ordered)
        costs = np.array([p.cost for p in ordered], dtype=float)
        index = np.arange(n)

        window = min(self.MAX_SMOOTHING_WINDOW, n // 3)
        smoothed = moving_average(costs, window)
        fit = self.trend_fitter.fit_series(smoothed)

        # Residuals against raw costs so the bands reflect real volatility
        fitted = fit.slope * index + fit.intercept
        residuals = costs - fitted
        standard_error = float(np.sqrt(np.sum(residuals ** 2) / (n - 2)))

        z_score = z_score_for(confidence_level)

        logger.debug(
            f"Trend fit over {n} points (window={window}): slope={fit.slope:.4f}, "
            f"intercept={fit.intercept:.2f}, r2={fit.r_squared:.3f}, "
            f"std_err={standard_error:.2f}"
        )

        result = [
            ForecastPoint(
                date=point.date,
                actual_cost=point.cost,
                predicted_cost=max(0.0, float(fitted[i])),
                is_forecast=False
            )
            for i, point in enumerate(ordered)
        ]

        last_date = ordered[-1].date
        for i in range(1, forecast_days + 1):
            x = n - 1 + i
            predicted = max(0.0, fit.predict(x))

            # Uncertainty grows with distance into the future
            margin = z_score * standard_error * math.sqrt(i)

            result.append(ForecastPoint(
                date=last_date + timedelta(days=i),
                actual_cost=0.0,
                predicted_cost=predicted,
                confidence_upper=max(0.0, predicted + margin),
                confidence_lower=max(0.0, predicted - margin),
                is_forecast=True
            ))

        return result

    def forecast_projects(
        self,
        histories: Dict[str, Iterable[Any]],
        forecast_days: int = 30,
        confidence_level: Optional[float] = None
    ) -> Dict[str, List[ForecastPoint]]:
        """
        Forecast several projects independently.

        Args:
            histories: Dict mapping project names to cost series

        Returns:
            Dict mapping project names to forecasts; a project whose series
            is rejected maps to an empty list
        """
        results = {}

        for project_name, history in histories.items():
            try:
                results[project_name] = self.forecast(history, forecast_days, confidence_level)
            except ValueError as e:
                logger.error(f"Error forecasting {project_name}: {e}")
                results[project_name] = []

        return results


class ForecastSummarizer:
    """
    Derives burn rate, trend, accuracy and risk from history and forecast.

    The projected end date is the last observation plus `horizon_days`,
    regardless of how many days were forecast.
    """

    def __init__(
        self,
        horizon_days: int = 30,
        burn_rate_window: int = 7,
        risk_classifier: Optional[ForecastRiskClassifier] = None
    ):
        """
        Initialize summarizer.

        Args:
            horizon_days: Days past the last observation for the end date
            burn_rate_window: Trailing observations averaged for burn rate
            risk_classifier: Classifier used for the risk level
        """
        self.horizon_days = horizon_days
        self.burn_rate_window = burn_rate_window
        self.risk_classifier = risk_classifier or ForecastRiskClassifier()

    def summarize(
        self,
        history: Iterable[Any],
        forecast: Iterable[ForecastPoint]
    ) -> ForecastSummary:
        """
        Summarize a forecast.

        Args:
            history: The observations the forecast was built from
            forecast: Output of CostForecaster.forecast

        Returns:
            ForecastSummary
        """
        points = sort_history(coerce_history(history))
        forecast = list(forecast)

        if len(points) < 2:
            return self._neutral_summary()

        costs = np.array([p.cost for p in points], dtype=float)

        current_burn_rate = float(np.mean(costs[-self.burn_rate_window:]))
        total_cost = float(np.sum(costs))
        average_daily_cost = total_cost / len(costs)

        projected_total_cost = total_cost + sum(
            p.predicted_cost or 0.0 for p in forecast if p.is_forecast
        )

        trend, percent_change = self._classify_trend(costs)
        forecast_accuracy = self._forecast_accuracy(forecast)

        risk_level = self.risk_classifier.classify(
            increasing=trend == TrendDirection.INCREASING,
            percent_change=percent_change,
            accuracy=forecast_accuracy
        )

        return ForecastSummary(
            projected_total_cost=projected_total_cost,
            projected_end_date=points[-1].date + timedelta(days=self.horizon_days),
            current_burn_rate=current_burn_rate,
            average_daily_cost=average_daily_cost,
            forecast_accuracy=forecast_accuracy,
            trend=trend,
            risk_level=risk_level
        )

    def _classify_trend(self, costs: np.ndarray):
        """Compare the mean of the later half of history with the earlier half"""
        half = len(costs) // 2
        first_avg = float(np.mean(costs[:half]))
        second_avg = float(np.mean(costs[half:]))

        if first_avg == 0:
            percent_change = 0.0
        else:
            percent_change = (second_avg - first_avg) / first_avg

        threshold = self.risk_classifier.thresholds.trend_change
        if percent_change > threshold:
            trend = TrendDirection.INCREASING
        elif percent_change < -threshold:
            trend = TrendDirection.DECREASING
        else:
            trend = TrendDirection.STABLE

        return trend, percent_change

    def _forecast_accuracy(self, forecast: List[ForecastPoint]) -> float:
        """R-squared of the trend line against the actuals it covers"""
        fitted = [
            p for p in forecast
            if not p.is_forecast and p.predicted_cost is not None
        ]
        if len(fitted) < 2:
            return 0.0

        return coefficient_of_determination(
            [p.actual_cost for p in fitted],
            [p.predicted_cost for p in fitted]
        )

    def _neutral_summary(self) -> ForecastSummary:
        """Summary for histories too short to characterise"""
        return ForecastSummary(
            projected_total_cost=0.0,
            projected_end_date=date.today(),
            current_burn_rate=0.0,
            average_daily_cost=0.0,
            forecast_accuracy=0.0,
            trend=TrendDirection.STABLE,
            risk_level=RiskLevel.LOW
        )
