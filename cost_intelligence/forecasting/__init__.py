"""
Forecasting Module for Cost Forecast Intelligence

Trend fitting, smoothing, cost projection and seasonality.
"""

from .cost_forecaster import (
    CostForecaster,
    ForecastPoint,
    ForecastSummarizer,
    ForecastSummary
)
from .series import (
    HistoricalPoint,
    InvalidSeriesError,
    SpendingSnapshot,
    summarize_spending
)
from .trend_analyzer import (
    SeasonalDecomposer,
    TrendDirection,
    TrendFit,
    TrendFitter,
    moving_average
)

__all__ = [
    'CostForecaster',
    'ForecastPoint',
    'ForecastSummarizer',
    'ForecastSummary',
    'HistoricalPoint',
    'InvalidSeriesError',
    'SpendingSnapshot',
    'summarize_spending',
    'SeasonalDecomposer',
    'TrendDirection',
    'TrendFit',
    'TrendFitter',
    'moving_average',
]
