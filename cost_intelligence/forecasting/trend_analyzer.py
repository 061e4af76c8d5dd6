"""
Trend Analyzer for Cost Forecast Intelligence

Linear trend fitting, moving-average smoothing and month-of-year
seasonality for project cost series.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Sequence, Tuple

import numpy as np

from .series import coerce_history

logger = logging.getLogger(__name__)


class TrendDirection(Enum):
    """Direction of trend"""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass
class TrendFit:
    """Result of a least-squares trend fit"""
    slope: float
    intercept: float
    r_squared: float

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slope": self.slope,
            "intercept": self.intercept,
            "r2": self.r_squared
        }


def coefficient_of_determination(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """
    R-squared of `predicted` against `actual`, clamped to [0, 1].

    A constant `actual` series has no variance to explain: an exact fit
    scores 1.0 and anything else 0.0.
    """
    y = np.asarray(actual, dtype=float)
    y_hat = np.asarray(predicted, dtype=float)
    if len(y) == 0:
        return 0.0

    ss_res = float(np.sum((y - y_hat) ** 2))
    ss_tot = float(np.sum((y - np.mean(y)) ** 2))

    if ss_tot == 0:
        return 1.0 if math.isclose(ss_res, 0.0, abs_tol=1e-9) else 0.0

    return float(min(1.0, max(0.0, 1 - ss_res / ss_tot)))


def moving_average(data: Sequence[float], window_size: int) -> List[float]:
    """
    Centered moving average.

    The window shrinks at the series boundaries instead of padding, so the
    output always has the same length as the input.

    Args:
        data: Values to smooth
        window_size: Number of points per window (1 = identity)

    Returns:
        Smoothed values
    """
    if window_size < 1:
        raise ValueError(f"window_size must be at least 1, got {window_size}")

    values = np.asarray(data, dtype=float)
    n = len(values)
    before = window_size // 2
    after = math.ceil(window_size / 2)

    smoothed = []
    for i in range(n):
        start = max(0, i - before)
        end = min(n, i + after)
        smoothed.append(float(np.mean(values[start:end])))

    return smoothed


class TrendFitter:
    """
    Ordinary least-squares line over an indexed series.

    Example:
    ```python
    fit = TrendFitter().fit_series([100, 110, 120])
    print(fit.slope, fit.intercept, fit.r_squared)  # 10.0 100.0 1.0
    ```
    """

    def fit(self, points: Sequence[Tuple[float, float]]) -> TrendFit:
        """
        Fit y = slope * x + intercept.

        Args:
            points: (x, y) pairs

        Returns:
            TrendFit; all zeros when fewer than two points are given
        """
        n = len(points)
        if n < 2:
            return TrendFit(slope=0.0, intercept=0.0, r_squared=0.0)

        x = np.array([p[0] for p in points], dtype=float)
        y = np.array([p[1] for p in points], dtype=float)

        sum_x = np.sum(x)
        sum_y = np.sum(y)
        sum_xy = np.sum(x * y)
        sum_x2 = np.sum(x * x)

        denominator = n * sum_x2 - sum_x * sum_x
        if denominator == 0:
            logger.debug("Degenerate x values; reporting a flat trend")
            slope = 0.0
        else:
            slope = float((n * sum_xy - sum_x * sum_y) / denominator)
        intercept = float((sum_y - slope * sum_x) / n)

        r_squared = coefficient_of_determination(y, slope * x + intercept)

        return TrendFit(slope=slope, intercept=intercept, r_squared=r_squared)

    def fit_series(self, values: Sequence[float]) -> TrendFit:
        """Fit a series indexed 0..n-1"""
        return self.fit(list(enumerate(values)))


class SeasonalDecomposer:
    """
    Month-of-year multiplicative factors for a cost series.

    Factors are bucket means divided by the mean of the bucket means, so a
    month with average spend scores 1.0.

    Example:
    ```python
    decomposer = SeasonalDecomposer(periods=12)
    factors = decomposer.factors(history)
    print(f"December factor: {factors[11]:.2f}")
    ```
    """

    MONTHS_PER_YEAR = 12

    def __init__(self, periods: int = 12):
        """
        Initialize decomposer.

        Args:
            periods: Buckets per year (12 = months, 4 = quarters)
        """
        if not 1 <= periods <= self.MONTHS_PER_YEAR:
            raise ValueError(f"periods must be between 1 and 12, got {periods}")
        self.periods = periods

    def factors(self, history: Iterable[Any]) -> List[float]:
        """
        Compute seasonal factors.

        Args:
            history: {date, cost} observations spanning at least two cycles

        Returns:
            One factor per period; all 1.0 when history is too short
        """
        points = coerce_history(history)

        if len(points) < self.periods * 2:
            logger.warning(
                f"Only {len(points)} observations for {self.periods} periods; "
                "returning uniform factors"
            )
            return [1.0] * self.periods

        totals = np.zeros(self.periods)
        counts = np.zeros(self.periods)
        for point in points:
            bucket = (point.date.month - 1) * self.periods // self.MONTHS_PER_YEAR
            totals[bucket] += point.cost
            counts[bucket] += 1

        averages = [
            totals[i] / counts[i] if counts[i] > 0 else 0.0
            for i in range(self.periods)
        ]
        overall = sum(averages) / self.periods

        if overall <= 0:
            return [1.0] * self.periods

        return [float(avg / overall) for avg in averages]
