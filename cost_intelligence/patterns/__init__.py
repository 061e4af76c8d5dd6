"""
Patterns Module for Cost Forecast Intelligence

Classification patterns applied to forecasts and project budgets.
"""

from .risk_classification import (
    ForecastRiskClassifier,
    ForecastRiskThresholds,
    RiskLevel
)

from .budget_analysis import (
    BudgetAnalyzer,
    BudgetStatus,
    ProjectBudget,
    status_breakdown
)

__all__ = [
    # Risk Classification
    'ForecastRiskClassifier',
    'ForecastRiskThresholds',
    'RiskLevel',
    # Budget Analysis
    'BudgetAnalyzer',
    'BudgetStatus',
    'ProjectBudget',
    'status_breakdown',
]
